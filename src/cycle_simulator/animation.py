"""
Animation Module
Maps a cycle progress fraction onto piston stroke, gauge readings and stage
labels for the schematic piston-cylinder animation.

The cycle is divided into four segments, one per process.  Gauge values are
linearly interpolated between consecutive diagram vertices, so an animation
frontend only needs a ``CycleResult`` and a progress value in [0, 1).
"""

import math
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple, Union

import numpy as np
import numpy.typing as npt

from .cycle_config import CycleType
from .thermodynamics import CycleResult, StatePoint

# Progress at which each process ends.  The Diesel power stroke runs longer
# to show the constant-pressure burn stretching into the expansion.
_STAGE_BOUNDS: Dict[CycleType, Tuple[float, float, float]] = {
    CycleType.RANKINE: (0.25, 0.5, 0.75),
    CycleType.OTTO: (0.25, 0.5, 0.75),
    CycleType.DIESEL: (0.25, 0.5, 0.85),
}

_STAGE_NAMES: Dict[CycleType, Tuple[str, str, str, str]] = {
    CycleType.RANKINE: (
        "Pump (Compression)",
        "Boiler (Heat Addition)",
        "Turbine (Expansion)",
        "Condenser (Heat Rejection)",
    ),
    CycleType.OTTO: (
        "Compression Stroke",
        "Combustion (Constant Volume)",
        "Power Stroke",
        "Exhaust/Intake Stroke",
    ),
    CycleType.DIESEL: (
        "Compression Stroke",
        "Combustion (Constant Pressure)",
        "Power Stroke",
        "Exhaust/Intake Stroke",
    ),
}

COLD_GAS_COLOUR = "#ccccff"
WARM_GAS_COLOUR = "#ff6666"
HOT_GAS_COLOUR = "#ff3333"


@dataclass(frozen=True)
class GaugeReading:
    """Instantaneous gauge values.

    ``*_level`` is the reading normalised to the cycle's own min-max range,
    0.5 when the result carries no diagram data.
    """

    pressure: float  # MPa
    temperature: float  # K
    pressure_level: float
    temperature_level: float


# ── Helpers ──────────────────────────────────────────────────────────────────


def wrap_progress(progress: float) -> float:
    """Fold any progress value into [0, 1)."""
    if not math.isfinite(progress):
        raise ValueError(f"progress must be finite, got {progress}")
    return progress % 1.0


def interpolate(a: float, b: float, t: float) -> float:
    """Linear interpolation  a + (b − a)·t."""
    return a + (b - a) * t


def interpolate_colour(colour_1: str, colour_2: str, factor: float) -> str:
    """Blend two ``#rrggbb`` colours.

    Raises
    ------
    ValueError
        If a colour is not a 6-digit hex string.
    """

    def _rgb(colour: str) -> Tuple[int, int, int]:
        text = colour.lstrip("#")
        if len(text) != 6:
            raise ValueError(f"Expected #rrggbb colour, got '{colour}'")
        return int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16)

    blended = [
        int(round(interpolate(c1, c2, factor)))
        for c1, c2 in zip(_rgb(colour_1), _rgb(colour_2))
    ]
    return "#" + "".join(f"{c:02x}" for c in blended)


def _segment(progress: float) -> Tuple[int, float]:
    """Quarter-cycle segment index and the fraction travelled within it."""
    index = min(int(progress * 4.0), 3)
    return index, progress * 4.0 - index


def _interpolate_vertices(values: Sequence[float], progress: float) -> float:
    index, t = _segment(progress)
    return interpolate(values[index], values[(index + 1) % 4], t)


def _normalise(value: float, values: Sequence[float]) -> float:
    lo, hi = min(values), max(values)
    if hi - lo <= 0.0:
        return 0.5
    return (value - lo) / (hi - lo)


# ── Public API ───────────────────────────────────────────────────────────────


def cycle_stage(cycle_type: Union[CycleType, str], progress: float) -> str:
    """Label of the process running at ``progress``."""
    cycle_type = CycleType.parse(cycle_type)
    p = wrap_progress(progress)
    names = _STAGE_NAMES[cycle_type]
    for bound, name in zip(_STAGE_BOUNDS[cycle_type], names):
        if p < bound:
            return name
    return names[-1]


def gauge_values(result: CycleResult, progress: float) -> GaugeReading:
    """Pressure and temperature at ``progress``, interpolated from the diagrams."""
    p = wrap_progress(progress)

    if len(result.pv_data) < 4 or len(result.ts_data) < 4:
        return GaugeReading(0.0, 0.0, 0.5, 0.5)

    pressures = [point.y for point in result.pv_data[:4]]
    temperatures = [point.y for point in result.ts_data[:4]]

    pressure = _interpolate_vertices(pressures, p)
    temperature = _interpolate_vertices(temperatures, p)
    return GaugeReading(
        pressure=pressure,
        temperature=temperature,
        pressure_level=_normalise(pressure, pressures),
        temperature_level=_normalise(temperature, temperatures),
    )


def geometric_compression_ratio(pv_data: List[StatePoint]) -> float:
    """Largest-to-smallest volume ratio v1/v2 of an air-standard loop."""
    if len(pv_data) < 2 or pv_data[1].x <= 0.0:
        return 1.0
    return pv_data[0].x / pv_data[1].x


def piston_position(
    cycle_type: Union[CycleType, str], result: CycleResult, progress: float
) -> float:
    """Gas column height as a fraction of cylinder height.

    1.0 is bottom dead centre.  For Otto and Diesel, top dead centre sits
    at 1/r so the stroke reflects the compression ratio; the Rankine
    schematic follows a fixed path.
    """
    cycle_type = CycleType.parse(cycle_type)
    p = wrap_progress(progress)

    if cycle_type is CycleType.RANKINE:
        if p < 0.25:
            return 0.8 - p * 0.6
        if p < 0.5:
            return 0.65
        if p < 0.75:
            return 0.65 + (p - 0.5) / 0.25 * 0.25
        return 0.9 - (p - 0.75) / 0.25 * 0.1

    ratio = max(geometric_compression_ratio(result.pv_data), 1.0)
    tdc = 1.0 / ratio
    compression_end, combustion_end, expansion_end = _STAGE_BOUNDS[cycle_type]

    if p < compression_end:
        return 1.0 - p / compression_end * (1.0 - tdc)
    if p < combustion_end:
        return tdc
    if p < expansion_end:
        t = (p - combustion_end) / (expansion_end - combustion_end)
        return tdc + t * (1.0 - tdc)
    t = (p - expansion_end) / (1.0 - expansion_end)
    return 1.0 - t * (1.0 - tdc)


def crank_angle(progress: float) -> float:
    """Crank angle [rad] from top dead centre, one revolution per cycle."""
    return wrap_progress(progress) * 2.0 * math.pi


def crank_pin(progress: float, radius: float = 1.0) -> Tuple[float, float]:
    """Crank-pin offset (x, y) from the crank centre, y pointing up."""
    theta = crank_angle(progress)
    return radius * math.sin(theta), radius * math.cos(theta)


def gas_colour(progress: float) -> str:
    """Gas fill colour: warms during compression, hottest at heat addition."""
    p = wrap_progress(progress)
    if p < 0.25:
        return interpolate_colour(COLD_GAS_COLOUR, WARM_GAS_COLOUR, p / 0.25)
    if p < 0.5:
        return HOT_GAS_COLOUR
    if p < 0.75:
        return interpolate_colour(HOT_GAS_COLOUR, COLD_GAS_COLOUR, (p - 0.5) / 0.25)
    return COLD_GAS_COLOUR


def animation_frames(
    result: CycleResult, num_frames: int = 120
) -> Dict[str, npt.NDArray[np.float64]]:
    """Sample one full cycle at ``num_frames`` evenly spaced progress values.

    Returns
    -------
    dict of arrays keyed ``progress``, ``piston_position``, ``pressure``,
    ``temperature``, ``crank_angle``.

    Raises
    ------
    ValueError
        If num_frames < 1.
    """
    if num_frames < 1:
        raise ValueError(f"num_frames must be ≥ 1, got {num_frames}")

    progress = np.linspace(0.0, 1.0, num_frames, endpoint=False)
    readings = [gauge_values(result, p) for p in progress]

    return {
        "progress": progress,
        "piston_position": np.array(
            [piston_position(result.cycle_type, result, p) for p in progress]
        ),
        "pressure": np.array([r.pressure for r in readings]),
        "temperature": np.array([r.temperature for r in readings]),
        "crank_angle": progress * 2.0 * math.pi,
    }
