"""
Utilities Module
Helper functions for unit conversion, data export and report generation.
"""

import csv
import json
import logging
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import numpy as np
from scipy.integrate import trapezoid

from .cycle_config import CycleParameters, CycleType, parameters_from_dict
from .thermodynamics import MPA_TO_KPA, CycleResult

logger = logging.getLogger(__name__)


class UnitConverter:
    """
    Unit conversion utilities.

    Converts between the course units (MPa, °C) and SI / engineering units.
    """

    CONVERSIONS = {
        "mpa_to_kpa": 1.0e3,
        "kpa_to_mpa": 1.0e-3,
        "mpa_to_bar": 10.0,
        "bar_to_mpa": 0.1,
        "mpa_to_pa": 1.0e6,
        "pa_to_mpa": 1.0e-6,
    }

    KELVIN_OFFSET = 273.15

    @staticmethod
    def celsius_to_kelvin(temp_c: float) -> float:
        """Convert Celsius to Kelvin"""
        return temp_c + UnitConverter.KELVIN_OFFSET

    @staticmethod
    def kelvin_to_celsius(temp_k: float) -> float:
        """Convert Kelvin to Celsius"""
        return temp_k - UnitConverter.KELVIN_OFFSET

    @staticmethod
    def pressure_from_mpa(value: float, to_unit: str) -> float:
        """Convert pressure from MPa"""
        unit = to_unit.lower()
        if unit == "mpa":
            return value
        key = f"mpa_to_{unit}"
        if key not in UnitConverter.CONVERSIONS:
            raise ValueError(f"Unknown pressure unit: {to_unit}")
        return value * UnitConverter.CONVERSIONS[key]

    @staticmethod
    def pressure_to_mpa(value: float, from_unit: str) -> float:
        """Convert pressure to MPa"""
        unit = from_unit.lower()
        if unit == "mpa":
            return value
        key = f"{unit}_to_mpa"
        if key not in UnitConverter.CONVERSIONS:
            raise ValueError(f"Unknown pressure unit: {from_unit}")
        return value * UnitConverter.CONVERSIONS[key]


def loop_work(result: CycleResult) -> float:
    """Area enclosed by the P-v polygon  ∮ p dv  [kJ/kg].

    Straight segments between the vertices, so for the air-standard cycles
    this overestimates the true loop bounded by isentropes.  Positive for a power cycle
    traversed clockwise.  Returns 0.0 for an empty result.
    """
    if len(result.pv_data) < 2:
        return 0.0
    volumes = np.array([p.x for p in result.pv_data])
    pressures = np.array([p.y for p in result.pv_data])
    return float(trapezoid(pressures, volumes)) * MPA_TO_KPA


def format_parameter_name(key: str) -> str:
    """``'boilerPressure'`` → ``'Boiler Pressure'``."""
    words: List[str] = []
    current = ""
    for char in key:
        if char.isupper() and current:
            words.append(current)
            current = char
        else:
            current += char
    if current:
        words.append(current)
    return " ".join(word[:1].upper() + word[1:] for word in words)


def format_parameter_value(value: Any) -> str:
    """Small numbers get 4 decimals, everything else 2."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return str(value)
    return f"{value:.4f}" if value < 0.01 else f"{value:.2f}"


def result_metrics(result: CycleResult) -> List[Tuple[str, str]]:
    """Formatted (label, value) pairs shown in reports and figures."""
    metrics = [
        ("Thermal Efficiency", f"{result.efficiency * 100:.2f}%"),
        ("Work Output", f"{result.work_output:.2f} kJ/kg"),
        ("Heat Input", f"{result.heat_input:.2f} kJ/kg"),
        ("Heat Rejected", f"{result.heat_rejected:.2f} kJ/kg"),
    ]
    if result.cycle_type is CycleType.RANKINE:
        metrics.append(
            ("Steam Quality", f"{(result.steam_quality or 0.0) * 100:.2f}%")
        )
    else:
        metrics.append(("Max Temperature", f"{result.max_temperature:.1f} K"))
        metrics.append(("Max Pressure", f"{result.max_pressure:.2f} MPa"))
    return metrics


class DataExporter:
    """
    Export cycle results to various formats.

    Supports: JSON document, CSV state table, plain-text report
    """

    @staticmethod
    def build_document(
        cycle_type: Union[CycleType, str],
        parameters: Union[CycleParameters, Mapping[str, Any]],
        result: CycleResult,
    ) -> Dict[str, Any]:
        """
        Assemble the exchange document ``{cycleType, parameters, results}``.

        Args:
            cycle_type: Cycle the result belongs to
            parameters: Parameter record or camelCase mapping
            result: Calculator output

        Returns:
            JSON-serialisable dictionary
        """
        if hasattr(parameters, "to_dict"):
            params_dict = parameters.to_dict()
        else:
            params_dict = dict(parameters)
        return {
            "cycleType": CycleType.parse(cycle_type).value,
            "parameters": params_dict,
            "results": result.to_dict(),
        }

    @staticmethod
    def export_to_json(document: Dict[str, Any], filepath: str):
        """
        Export an exchange document to a JSON file.

        Args:
            document: Output of ``build_document``
            filepath: Output file path
        """
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(document, f, indent=2)

        logger.info("Cycle data exported to %s", filepath)

    @staticmethod
    def load_from_json(
        filepath: str,
    ) -> Tuple[CycleType, CycleParameters, CycleResult]:
        """
        Load an exchange document written by ``export_to_json``.

        Returns:
            Tuple of (cycle_type, parameters, result)

        Raises:
            KeyError: If a section of the document is missing
        """
        with open(filepath, "r", encoding="utf-8") as f:
            data = json.load(f)

        try:
            cycle_type = CycleType.parse(data["cycleType"])
            params = parameters_from_dict(cycle_type, data["parameters"])
            result = CycleResult.from_dict(cycle_type, data["results"])
        except KeyError as exc:
            raise KeyError(f"Missing section in cycle document: {exc}") from exc

        return cycle_type, params, result

    @staticmethod
    def export_to_csv(result: CycleResult, filepath: str):
        """
        Export the state points of a result to a CSV file.

        Args:
            result: Calculator output
            filepath: Output file path

        Raises:
            ValueError: If the result carries no diagram data
        """
        if not result.is_valid:
            raise ValueError("No data to export")

        with open(filepath, "w", newline="") as csvfile:
            writer = csv.writer(csvfile)
            writer.writerow(
                [
                    "state",
                    "volume_m3_per_kg",
                    "pressure_mpa",
                    "entropy_kj_per_kg_k",
                    "temperature_k",
                ]
            )
            # Skip the repeated closing vertex
            for i, (pv, ts) in enumerate(zip(result.pv_data[:-1], result.ts_data[:-1])):
                writer.writerow([i + 1, pv.x, pv.y, ts.x, ts.y])

        logger.info("State points exported to %s", filepath)

    @staticmethod
    def create_performance_report(
        cycle_type: Union[CycleType, str],
        parameters: Union[CycleParameters, Mapping[str, Any]],
        result: CycleResult,
        generated_on: Optional[date] = None,
    ) -> str:
        """
        Create formatted performance report string.

        Args:
            cycle_type: Cycle the result belongs to
            parameters: Parameter record or camelCase mapping
            result: Calculator output
            generated_on: Report date (defaults to today)

        Returns:
            Formatted report string
        """
        cycle_type = CycleType.parse(cycle_type)
        if hasattr(parameters, "to_dict"):
            params_dict = parameters.to_dict()
        else:
            params_dict = dict(parameters)
        generated_on = generated_on or date.today()

        report = []
        report.append("=" * 60)
        report.append(f"{cycle_type.title.upper()} CYCLE ANALYSIS")
        report.append(f"Generated on {generated_on.isoformat()}")
        report.append("=" * 60)
        report.append("")

        report.append("INPUT PARAMETERS:")
        report.append("-" * 60)
        for key, value in params_dict.items():
            report.append(
                f"  {format_parameter_name(key) + ':':<24}{format_parameter_value(value)}"
            )
        report.append("")

        report.append("RESULTS:")
        report.append("-" * 60)
        if not result.is_valid:
            report.append("  No valid cycle computed for these parameters.")
        for label, value in result_metrics(result):
            report.append(f"  {label + ':':<24}{value}")
        report.append("")

        report.append("=" * 60)

        return "\n".join(report)
