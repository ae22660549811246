"""
Cycle Configuration Module
Defines cycle types, parameter records and their operating ranges.

Units follow the conventions of an undergraduate thermodynamics course:
pressures in MPa, temperatures in °C, specific heat input in kJ/kg.
"""

import json
import warnings
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, ClassVar, Dict, List, Mapping, Union

# ── Enumerations ──────────────────────────────────────────────────────────────


class CycleType(Enum):
    """Supported power cycles."""

    RANKINE = "rankine"
    OTTO = "otto"
    DIESEL = "diesel"

    @classmethod
    def parse(cls, value: Union["CycleType", str]) -> "CycleType":
        """Accept a ``CycleType`` or its (case-insensitive) string value."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            valid = ", ".join(member.value for member in cls)
            raise ValueError(
                f"Unknown cycle type '{value}'; expected one of: {valid}"
            ) from exc

    @property
    def title(self) -> str:
        """Display name, e.g. ``'Otto'``."""
        return self.value.capitalize()


# ── Operating ranges ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ParameterRange:
    """Slider range of one input parameter.

    ``advanced`` parameters are hidden from beginners by default.
    """

    name: str
    label: str
    min: float
    max: float
    step: float
    advanced: bool = False

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max


PARAMETER_RANGES: Dict[CycleType, List[ParameterRange]] = {
    CycleType.RANKINE: [
        ParameterRange("boilerPressure", "Boiler Pressure (MPa)", 1.0, 20.0, 0.1),
        ParameterRange(
            "boilerTemperature", "Boiler Temperature (°C)", 300.0, 700.0, 5.0
        ),
        ParameterRange(
            "condenserPressure", "Condenser Pressure (MPa)", 0.001, 0.1, 0.001
        ),
        ParameterRange("pumpEfficiency", "Pump Efficiency", 0.5, 1.0, 0.01, True),
        ParameterRange(
            "turbineEfficiency", "Turbine Efficiency", 0.5, 1.0, 0.01, True
        ),
    ],
    CycleType.OTTO: [
        ParameterRange("initialPressure", "Initial Pressure (MPa)", 0.05, 0.2, 0.01),
        ParameterRange(
            "initialTemperature", "Initial Temperature (°C)", 0.0, 50.0, 1.0
        ),
        ParameterRange("compressionRatio", "Compression Ratio", 4.0, 12.0, 0.1),
        ParameterRange(
            "heatInput", "Heat Input (kJ/kg)", 500.0, 3000.0, 50.0, True
        ),
    ],
    CycleType.DIESEL: [
        ParameterRange("initialPressure", "Initial Pressure (MPa)", 0.05, 0.2, 0.01),
        ParameterRange(
            "initialTemperature", "Initial Temperature (°C)", 0.0, 50.0, 1.0
        ),
        ParameterRange("compressionRatio", "Compression Ratio", 12.0, 24.0, 0.5),
        ParameterRange("cutoffRatio", "Cutoff Ratio", 1.2, 4.0, 0.1),
        ParameterRange(
            "heatInput", "Heat Input (kJ/kg)", 500.0, 3000.0, 50.0, True
        ),
    ],
}


# ── Parameter records ─────────────────────────────────────────────────────────


def _to_camel(name: str) -> str:
    head, *tail = name.split("_")
    return head + "".join(part.capitalize() for part in tail)


class _CycleParametersMixin:
    """Shared (de)serialisation and range checks for the parameter records.

    Construction deliberately performs no validation: out-of-range or even
    nonsensical values are passed on to the calculators, which report them
    as a zeroed ``CycleResult``.
    """

    cycle_type: ClassVar[CycleType]

    def to_dict(self) -> Dict[str, float]:
        """Serialise to a plain dictionary with camelCase keys."""
        return {_to_camel(f.name): getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]):
        """Build a record from camelCase (or snake_case) keys.

        Raises
        ------
        KeyError
            If a required field is missing.
        """
        kwargs = {}
        for f in fields(cls):
            camel = _to_camel(f.name)
            if camel in data:
                kwargs[f.name] = float(data[camel])
            elif f.name in data:
                kwargs[f.name] = float(data[f.name])
            else:
                raise KeyError(
                    f"Missing parameter '{camel}' for {cls.cycle_type.value} cycle"
                )
        return cls(**kwargs)

    def validate(self) -> List[str]:
        """Return notices for values outside the typical slider range."""
        notices: List[str] = []
        values = self.to_dict()
        for rng in PARAMETER_RANGES[self.cycle_type]:
            value = values[rng.name]
            if not rng.contains(value):
                notices.append(
                    f"{rng.label} {value:g} outside typical range "
                    f"[{rng.min:g}, {rng.max:g}]"
                )
        return notices

    def warn_out_of_range(self) -> List[str]:
        """Issue a ``UserWarning`` per range notice and return the notices."""
        notices = self.validate()
        for msg in notices:
            warnings.warn(msg, stacklevel=2)
        return notices


@dataclass
class RankineParameters(_CycleParametersMixin):
    """Rankine (vapour power) cycle inputs.

    Attributes
    ----------
    boiler_pressure    : MPa
    boiler_temperature : °C
    condenser_pressure : MPa
    pump_efficiency    : (0, 1]
    turbine_efficiency : (0, 1]
    """

    cycle_type: ClassVar[CycleType] = CycleType.RANKINE

    boiler_pressure: float = 8.0
    boiler_temperature: float = 500.0
    condenser_pressure: float = 0.008
    pump_efficiency: float = 0.85
    turbine_efficiency: float = 0.87


@dataclass
class OttoParameters(_CycleParametersMixin):
    """Air-standard Otto cycle inputs.

    Attributes
    ----------
    initial_pressure    : MPa
    initial_temperature : °C
    compression_ratio   : dimensionless (> 1)
    heat_input          : kJ/kg
    """

    cycle_type: ClassVar[CycleType] = CycleType.OTTO

    initial_pressure: float = 0.1
    initial_temperature: float = 25.0
    compression_ratio: float = 8.0
    heat_input: float = 1800.0


@dataclass
class DieselParameters(_CycleParametersMixin):
    """Air-standard Diesel cycle inputs (Otto inputs plus the cutoff ratio)."""

    cycle_type: ClassVar[CycleType] = CycleType.DIESEL

    initial_pressure: float = 0.1
    initial_temperature: float = 25.0
    compression_ratio: float = 16.0
    cutoff_ratio: float = 2.0
    heat_input: float = 1800.0


CycleParameters = Union[RankineParameters, OttoParameters, DieselParameters]

_PARAMETER_CLASSES = {
    CycleType.RANKINE: RankineParameters,
    CycleType.OTTO: OttoParameters,
    CycleType.DIESEL: DieselParameters,
}


def parameters_class(cycle_type: Union[CycleType, str]):
    """Parameter record class for the given cycle type."""
    return _PARAMETER_CLASSES[CycleType.parse(cycle_type)]


def parameters_from_dict(
    cycle_type: Union[CycleType, str], data: Mapping[str, Any]
) -> CycleParameters:
    """Build the parameter record of ``cycle_type`` from a mapping."""
    return parameters_class(cycle_type).from_dict(data)


# ── Persistence ───────────────────────────────────────────────────────────────


def save_parameters(params: CycleParameters, filepath: str) -> None:
    """Persist a parameter record to a JSON file."""
    payload = {"cycleType": params.cycle_type.value, "parameters": params.to_dict()}
    with open(filepath, "w", encoding="utf-8") as fh:
        json.dump(payload, fh, indent=2)


def load_parameters(filepath: str) -> CycleParameters:
    """Load a parameter record written by :func:`save_parameters`.

    Also accepts a full export document, whose ``parameters`` section has
    the same shape.

    Raises
    ------
    FileNotFoundError
        If filepath does not exist.
    KeyError
        If ``cycleType`` or a parameter is missing.
    ValueError
        If ``cycleType`` is not recognised.
    """
    with open(filepath, "r", encoding="utf-8") as fh:
        data = json.load(fh)

    try:
        cycle_type = data["cycleType"]
        section = data["parameters"]
    except KeyError as exc:
        raise KeyError(f"Missing section in parameter file: {exc}") from exc

    return parameters_from_dict(cycle_type, section)


# ── Factory functions ─────────────────────────────────────────────────────────


def create_default_rankine() -> RankineParameters:
    """Representative utility steam plant: 8 MPa, 500 °C, 8 kPa condenser."""
    return RankineParameters()


def create_default_otto() -> OttoParameters:
    """Spark-ignition engine at ambient intake: CR 8, 1800 kJ/kg."""
    return OttoParameters()


def create_default_diesel() -> DieselParameters:
    """Compression-ignition engine at ambient intake: CR 16, cutoff 2."""
    return DieselParameters()


def create_default_parameters(cycle_type: Union[CycleType, str]) -> CycleParameters:
    """Default preset for any cycle type."""
    return parameters_class(cycle_type)()
