"""
Thermodynamics Module
Closed-form state points and performance of the Rankine, Otto and Diesel cycles.

Mathematical Basis
------------------
Air-standard cycles (Otto, Diesel): ideal gas with constant specific heats
    R = 0.287 kJ/(kg·K),  k = 1.4,  cv = 0.718 kJ/(kg·K),  cp = 1.005 kJ/(kg·K)

    isentropic:   T·v^(k−1) = const,   p·v^k = const
    Otto:         η = 1 − r^−(k−1)
    Diesel:       η = 1 − r^−(k−1) · (rc^k − 1) / (k·(rc − 1))

Rankine: a four-state vapour cycle built on representative (not tabulated)
water/steam enthalpies and entropies.  Good enough to show the trends an
instructor cares about; not a property solver.

Units: pressure MPa, specific volume m³/kg, temperature K, entropy
kJ/(kg·K), energies kJ/kg.  The factor 1000 converts MPa to kPa so that
p·v comes out in kJ/kg.

Failure policy
--------------
The public ``calculate_*`` functions are total: any arithmetic fault or
non-finite intermediate returns :func:`zeroed_result` (all metrics 0, empty
diagram data) instead of raising.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from .cycle_config import (
    CycleParameters,
    CycleType,
    DieselParameters,
    OttoParameters,
    RankineParameters,
)

logger = logging.getLogger(__name__)

# ── Physical constants ───────────────────────────────────────────────────────
GAS_CONSTANT: float = 0.287  # kJ/(kg·K)  air
GAMMA: float = 1.4  # cp/cv  air
CV: float = 0.718  # kJ/(kg·K)
CP: float = 1.005  # kJ/(kg·K)
KELVIN_OFFSET: float = 273.15
MPA_TO_KPA: float = 1000.0

# Entropy datum for T-s plots: s = cv·ln(v / v_ref).  Arbitrary, chosen for
# a readable diagram.
REFERENCE_VOLUME: float = 0.7  # m³/kg

# ── Representative Rankine properties ────────────────────────────────────────
RANKINE_H1: float = 200.0  # kJ/kg     saturated liquid, condenser
RANKINE_S1: float = 0.6  # kJ/(kg·K)
RANKINE_V1: float = 0.001  # m³/kg
RANKINE_H3: float = 3400.0  # kJ/kg     superheated steam, boiler exit
RANKINE_S3: float = 6.8  # kJ/(kg·K)
RANKINE_ISENTROPIC_QUALITY: float = 0.8  # fraction of (h3 − h1) dropped
# Reported turbine-exit quality.  Not derived from h4: no saturation model.
RANKINE_STEAM_QUALITY: float = 0.85
RANKINE_TURBINE_INLET_VOLUME: float = 0.2  # m³/kg  (P-v sketch only)
RANKINE_TURBINE_EXIT_VOLUME: float = 2.0  # m³/kg
RANKINE_T1: float = 300.0  # K  (T-s sketch only)
RANKINE_T2: float = 310.0  # K
RANKINE_T4: float = 350.0  # K


class CycleComputationError(ArithmeticError):
    """A cycle intermediate came out non-finite or non-real."""


# ── Data classes ─────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class StatePoint:
    """One vertex of a cycle diagram.

    ``x`` is specific volume (P-v) or entropy (T-s); ``y`` is pressure
    (P-v) or temperature (T-s).
    """

    x: float
    y: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: Mapping[str, float]) -> "StatePoint":
        return cls(x=float(data["x"]), y=float(data["y"]))


@dataclass
class CycleResult:
    """Performance metrics and diagram data of one cycle evaluation.

    Attributes
    ----------
    cycle_type      : CycleType
    efficiency      : dimensionless (not clamped)
    work_output     : kJ/kg  net work
    heat_input      : kJ/kg
    heat_rejected   : kJ/kg
    pv_data         : closed loop of 5 StatePoints  (v [m³/kg], p [MPa])
    ts_data         : closed loop of 5 StatePoints  (s [kJ/(kg·K)], T [K])
    steam_quality   : turbine-exit quality, Rankine only
    max_temperature : K
    max_pressure    : MPa
    """

    cycle_type: CycleType
    efficiency: float = 0.0
    work_output: float = 0.0
    heat_input: float = 0.0
    heat_rejected: float = 0.0
    pv_data: List[StatePoint] = field(default_factory=list)
    ts_data: List[StatePoint] = field(default_factory=list)
    steam_quality: Optional[float] = None
    max_temperature: float = 0.0
    max_pressure: float = 0.0

    @property
    def is_valid(self) -> bool:
        """False for the zeroed result returned after a computation fault."""
        return bool(self.pv_data) and bool(self.ts_data)

    def to_dict(self) -> Dict[str, Any]:
        """Serialise with the camelCase keys of the JSON export document."""
        data: Dict[str, Any] = {
            "efficiency": self.efficiency,
            "workOutput": self.work_output,
            "heatInput": self.heat_input,
            "heatRejected": self.heat_rejected,
            "maxTemperature": self.max_temperature,
            "maxPressure": self.max_pressure,
            "pvData": [p.to_dict() for p in self.pv_data],
            "tsData": [p.to_dict() for p in self.ts_data],
        }
        if self.steam_quality is not None:
            data["steamQuality"] = self.steam_quality
        return data

    @classmethod
    def from_dict(
        cls, cycle_type: Union[CycleType, str], data: Mapping[str, Any]
    ) -> "CycleResult":
        """Rebuild a result from :meth:`to_dict` output."""
        steam_quality = data.get("steamQuality")
        return cls(
            cycle_type=CycleType.parse(cycle_type),
            efficiency=float(data["efficiency"]),
            work_output=float(data["workOutput"]),
            heat_input=float(data["heatInput"]),
            heat_rejected=float(data["heatRejected"]),
            pv_data=[StatePoint.from_dict(p) for p in data.get("pvData", [])],
            ts_data=[StatePoint.from_dict(p) for p in data.get("tsData", [])],
            steam_quality=None if steam_quality is None else float(steam_quality),
            max_temperature=float(data.get("maxTemperature", 0.0)),
            max_pressure=float(data.get("maxPressure", 0.0)),
        )


def zeroed_result(cycle_type: Union[CycleType, str]) -> CycleResult:
    """Sentinel for "no valid cycle computed": zero metrics, no diagram data."""
    cycle_type = CycleType.parse(cycle_type)
    return CycleResult(
        cycle_type=cycle_type,
        steam_quality=0.0 if cycle_type is CycleType.RANKINE else None,
    )


# ── Helpers ──────────────────────────────────────────────────────────────────


def _coerce(params: Any, record_cls):
    """Accept either the parameter dataclass or a camelCase mapping."""
    if isinstance(params, record_cls):
        return params
    if isinstance(params, Mapping):
        return record_cls.from_dict(params)
    raise TypeError(
        f"Expected {record_cls.__name__} or mapping, got {type(params).__name__}"
    )


def _check_finite(result: CycleResult) -> CycleResult:
    """Raise CycleComputationError if any reported quantity is not finite."""
    scalars = [
        result.efficiency,
        result.work_output,
        result.heat_input,
        result.heat_rejected,
        result.max_temperature,
        result.max_pressure,
    ]
    if result.steam_quality is not None:
        scalars.append(result.steam_quality)
    for point in result.pv_data + result.ts_data:
        scalars.extend((point.x, point.y))

    for value in scalars:
        # math.isfinite raises TypeError for complex input
        if not math.isfinite(value):
            raise CycleComputationError(f"Non-finite cycle quantity: {value!r}")
    return result


def _closed_loop(points: List[StatePoint]) -> List[StatePoint]:
    """Append the first vertex so the diagram closes on itself."""
    return points + [points[0]]


def _entropy(volume: float) -> float:
    """Diagram entropy coordinate  s = cv·ln(v / v_ref)."""
    return CV * math.log(volume / REFERENCE_VOLUME)


def otto_efficiency(compression_ratio: float) -> float:
    """Ideal Otto efficiency  η = 1 − r^−(k−1).

    Raises
    ------
    ValueError
        If compression_ratio ≤ 0.
    """
    if compression_ratio <= 0.0:
        raise ValueError(f"compression_ratio must be > 0, got {compression_ratio}")
    return 1.0 - 1.0 / math.pow(compression_ratio, GAMMA - 1.0)


def diesel_efficiency(compression_ratio: float, cutoff_ratio: float) -> float:
    """Ideal Diesel efficiency.

        η = 1 − r^−(k−1) · (rc^k − 1) / (k·(rc − 1))

    As rc → 1 the bracket tends to 1 and η tends to the Otto value; at
    rc = 1 exactly the bracket is 0/0.

    Raises
    ------
    ValueError
        If compression_ratio ≤ 0 or cutoff_ratio ≤ 0.
    ZeroDivisionError
        If cutoff_ratio == 1.
    """
    if compression_ratio <= 0.0:
        raise ValueError(f"compression_ratio must be > 0, got {compression_ratio}")
    if cutoff_ratio <= 0.0:
        raise ValueError(f"cutoff_ratio must be > 0, got {cutoff_ratio}")
    cutoff_term = (math.pow(cutoff_ratio, GAMMA) - 1.0) / (
        GAMMA * (cutoff_ratio - 1.0)
    )
    return 1.0 - (1.0 / math.pow(compression_ratio, GAMMA - 1.0)) * cutoff_term


# ── Rankine ──────────────────────────────────────────────────────────────────


def _rankine(params: RankineParameters) -> CycleResult:
    T3 = params.boiler_temperature + KELVIN_OFFSET

    # State 1: saturated liquid leaving the condenser
    h1, s1, v1 = RANKINE_H1, RANKINE_S1, RANKINE_V1

    # State 2: compressed liquid.  w_p = v·Δp / η_p  (incompressible)
    pump_work = (
        v1
        * (params.boiler_pressure - params.condenser_pressure)
        * MPA_TO_KPA
        / params.pump_efficiency
    )
    h2 = h1 + pump_work
    s2 = s1

    # State 3: superheated steam leaving the boiler
    h3, s3 = RANKINE_H3, RANKINE_S3

    # State 4: turbine exhaust
    h4s = h1 + (h3 - h1) * (1.0 - RANKINE_ISENTROPIC_QUALITY)
    h4 = h3 - params.turbine_efficiency * (h3 - h4s)
    s4 = s3

    heat_input = h3 - h2
    turbine_work = h3 - h4
    work_output = turbine_work - pump_work
    heat_rejected = h4 - h1
    efficiency = work_output / heat_input

    pv_data = _closed_loop(
        [
            StatePoint(v1, params.condenser_pressure),
            StatePoint(v1, params.boiler_pressure),
            StatePoint(RANKINE_TURBINE_INLET_VOLUME, params.boiler_pressure),
            StatePoint(RANKINE_TURBINE_EXIT_VOLUME, params.condenser_pressure),
        ]
    )
    ts_data = _closed_loop(
        [
            StatePoint(s1, RANKINE_T1),
            StatePoint(s2, RANKINE_T2),
            StatePoint(s3, T3),
            StatePoint(s4, RANKINE_T4),
        ]
    )

    return CycleResult(
        cycle_type=CycleType.RANKINE,
        efficiency=efficiency,
        work_output=work_output,
        heat_input=heat_input,
        heat_rejected=heat_rejected,
        pv_data=pv_data,
        ts_data=ts_data,
        steam_quality=RANKINE_STEAM_QUALITY,
        max_temperature=T3,
        max_pressure=params.boiler_pressure,
    )


# ── Air-standard cycles ──────────────────────────────────────────────────────


def _compression(
    initial_pressure: float, initial_temperature: float, compression_ratio: float
):
    """States 1 and 2, shared by Otto and Diesel.

    Returns ``(p1, v1, T1, p2, v2, T2)``.
    """
    T1 = initial_temperature + KELVIN_OFFSET
    p1 = initial_pressure
    v1 = GAS_CONSTANT * T1 / (p1 * MPA_TO_KPA)

    v2 = v1 / compression_ratio
    T2 = T1 * math.pow(compression_ratio, GAMMA - 1.0)
    p2 = p1 * math.pow(compression_ratio, GAMMA)
    return p1, v1, T1, p2, v2, T2


def _otto(params: OttoParameters) -> CycleResult:
    r = params.compression_ratio
    p1, v1, T1, p2, v2, T2 = _compression(
        params.initial_pressure, params.initial_temperature, r
    )

    # 2→3: constant-volume heat addition
    T3 = T2 + params.heat_input / CV
    p3 = p2 * (T3 / T2)
    v3 = v2

    # 3→4: isentropic expansion back to v1
    T4 = T3 / math.pow(r, GAMMA - 1.0)
    p4 = p3 / math.pow(r, GAMMA)
    v4 = v1

    heat_input = CV * (T3 - T2)
    heat_rejected = CV * (T4 - T1)
    work_output = heat_input - heat_rejected

    pv_data = _closed_loop(
        [
            StatePoint(v1, p1),
            StatePoint(v2, p2),
            StatePoint(v3, p3),
            StatePoint(v4, p4),
        ]
    )
    ts_data = _closed_loop(
        [
            StatePoint(_entropy(v1), T1),
            StatePoint(_entropy(v2), T2),
            StatePoint(_entropy(v3), T3),
            StatePoint(_entropy(v4), T4),
        ]
    )

    return CycleResult(
        cycle_type=CycleType.OTTO,
        efficiency=otto_efficiency(r),
        work_output=work_output,
        heat_input=heat_input,
        heat_rejected=heat_rejected,
        pv_data=pv_data,
        ts_data=ts_data,
        max_temperature=T3,
        max_pressure=p3,
    )


def _diesel(params: DieselParameters) -> CycleResult:
    r = params.compression_ratio
    rc = params.cutoff_ratio
    p1, v1, T1, p2, v2, T2 = _compression(
        params.initial_pressure, params.initial_temperature, r
    )

    # 2→3: constant-pressure heat addition up to cutoff
    v3 = v2 * rc
    T3 = T2 * rc
    p3 = p2

    # 3→4: expansion back to v1.  Exponents act on v3/v1 (< 1), so the
    # reported T4 and p4 exceed state 3.
    T4 = T3 * math.pow(v3 / v1, 1.0 - GAMMA)
    p4 = p3 * math.pow(v3 / v1, -GAMMA)
    v4 = v1

    heat_input = CP * (T3 - T2)
    heat_rejected = CV * (T4 - T1)
    work_output = heat_input - heat_rejected

    pv_data = _closed_loop(
        [
            StatePoint(v1, p1),
            StatePoint(v2, p2),
            StatePoint(v3, p3),
            StatePoint(v4, p4),
        ]
    )
    # State 3 adds the constant-pressure entropy rise cp·ln(v3/v2) to state 2
    ts_data = _closed_loop(
        [
            StatePoint(_entropy(v1), T1),
            StatePoint(_entropy(v2), T2),
            StatePoint(CP * math.log(v3 / v2) + _entropy(v2), T3),
            StatePoint(_entropy(v4), T4),
        ]
    )

    return CycleResult(
        cycle_type=CycleType.DIESEL,
        efficiency=diesel_efficiency(r, rc),
        work_output=work_output,
        heat_input=heat_input,
        heat_rejected=heat_rejected,
        pv_data=pv_data,
        ts_data=ts_data,
        max_temperature=T3,
        max_pressure=p3,
    )


# ── Public calculators ───────────────────────────────────────────────────────

_COMPUTATION_FAULTS = (ArithmeticError, ValueError, TypeError, KeyError)


def _evaluate(cycle_type: CycleType, record_cls, model, params: Any) -> CycleResult:
    try:
        return _check_finite(model(_coerce(params, record_cls)))
    except _COMPUTATION_FAULTS as exc:
        logger.warning(
            "%s cycle calculation failed (%s: %s); returning zeroed result",
            cycle_type.title,
            type(exc).__name__,
            exc,
        )
        return zeroed_result(cycle_type)


def calculate_rankine_cycle(
    params: Union[RankineParameters, Mapping[str, float]]
) -> CycleResult:
    """Rankine cycle with representative steam properties.

    Pump work  w_p = v1·(p_boiler − p_condenser)·1000 / η_p, turbine work
    from an isentropic drop of 80 % of (h3 − h1) scaled by η_t.  Steam
    quality is reported as a fixed 0.85.

    Never raises; returns :func:`zeroed_result` on a computation fault.
    """
    return _evaluate(CycleType.RANKINE, RankineParameters, _rankine, params)


def calculate_otto_cycle(
    params: Union[OttoParameters, Mapping[str, float]]
) -> CycleResult:
    """Ideal air-standard Otto cycle.

    Processes
    ---------
    1→2  isentropic compression
    2→3  constant-volume heat addition  (T3 = T2 + q_in/cv)
    3→4  isentropic expansion
    4→1  constant-volume heat rejection

    Efficiency is the closed form 1 − r^−0.4, independent of heat input.
    Never raises; returns :func:`zeroed_result` on a computation fault.
    """
    return _evaluate(CycleType.OTTO, OttoParameters, _otto, params)


def calculate_diesel_cycle(
    params: Union[DieselParameters, Mapping[str, float]]
) -> CycleResult:
    """Ideal air-standard Diesel cycle.

    Same compression as Otto; heat is added at constant pressure until the
    volume has grown by the cutoff ratio (T3 = rc·T2).  Note that the heat
    input is set by the cutoff ratio, not by ``heat_input``.

    A cutoff ratio of exactly 1 makes the efficiency formula 0/0 and yields
    the zeroed result.
    """
    return _evaluate(CycleType.DIESEL, DieselParameters, _diesel, params)


_CALCULATORS = {
    CycleType.RANKINE: calculate_rankine_cycle,
    CycleType.OTTO: calculate_otto_cycle,
    CycleType.DIESEL: calculate_diesel_cycle,
}


def calculate_cycle(
    cycle_type: Union[CycleType, str],
    params: Union[CycleParameters, Mapping[str, float]],
) -> CycleResult:
    """Dispatch to the calculator of ``cycle_type``.

    Raises
    ------
    ValueError
        If cycle_type is not recognised.
    """
    return _CALCULATORS[CycleType.parse(cycle_type)](params)
