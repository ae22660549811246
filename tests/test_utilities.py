"""
Unit Tests for Utilities Module
Tests unit conversion, loop integration, export documents and reports.
"""

import csv
import json
from datetime import date

import pytest

from cycle_simulator.cycle_config import CycleType, DieselParameters, OttoParameters, RankineParameters
from cycle_simulator.thermodynamics import (
    calculate_diesel_cycle,
    calculate_otto_cycle,
    calculate_rankine_cycle,
    zeroed_result,
)
from cycle_simulator.utilities import (
    DataExporter,
    UnitConverter,
    format_parameter_name,
    format_parameter_value,
    loop_work,
)


class TestUnitConverter:

    def test_temperature(self):
        assert UnitConverter.celsius_to_kelvin(25.0) == pytest.approx(298.15)
        assert UnitConverter.kelvin_to_celsius(773.15) == pytest.approx(500.0)

    def test_pressure(self):
        assert UnitConverter.pressure_from_mpa(0.1, "kPa") == pytest.approx(100.0)
        assert UnitConverter.pressure_from_mpa(8.0, "bar") == pytest.approx(80.0)
        assert UnitConverter.pressure_to_mpa(101325.0, "pa") == pytest.approx(0.101325)
        assert UnitConverter.pressure_to_mpa(2.0, "MPa") == 2.0

    def test_unknown_unit(self):
        with pytest.raises(ValueError):
            UnitConverter.pressure_from_mpa(1.0, "psi")


class TestLoopWork:

    def test_power_cycles_positive(self):
        assert loop_work(calculate_otto_cycle(OttoParameters())) > 0.0
        assert loop_work(calculate_rankine_cycle(RankineParameters())) > 0.0

    def test_otto_polygon_area(self):
        """Trapezoid area of the straight-sided Otto quadrilateral."""
        result = calculate_otto_cycle(OttoParameters())
        (v1, p1), (v2, p2), (_, p3), (_, p4) = [(p.x, p.y) for p in result.pv_data[:4]]
        expected = 0.5 * (v1 - v2) * (p3 + p4 - p1 - p2) * 1000.0
        assert loop_work(result) == pytest.approx(expected, rel=1e-12)

    def test_polygon_overestimates_curved_loop(self):
        """Straight chords lie outside the convex isentropes."""
        result = calculate_otto_cycle(OttoParameters())
        assert loop_work(result) > result.work_output

    def test_empty_result(self):
        assert loop_work(zeroed_result("otto")) == 0.0


class TestFormatting:

    def test_parameter_name(self):
        assert format_parameter_name("boilerPressure") == "Boiler Pressure"
        assert format_parameter_name("heatInput") == "Heat Input"

    def test_parameter_value(self):
        assert format_parameter_value(0.008) == "0.0080"
        assert format_parameter_value(8.0) == "8.00"
        assert format_parameter_value("n/a") == "n/a"


class TestDataExporter:

    def setup_method(self):
        self.params = DieselParameters()
        self.result = calculate_diesel_cycle(self.params)
        self.exporter = DataExporter()

    def test_document_shape(self):
        doc = self.exporter.build_document("diesel", self.params, self.result)
        assert set(doc) == {"cycleType", "parameters", "results"}
        assert doc["cycleType"] == "diesel"
        assert doc["parameters"]["cutoffRatio"] == 2.0
        assert len(doc["results"]["pvData"]) == 5

    def test_document_accepts_mapping(self):
        doc = self.exporter.build_document(
            CycleType.DIESEL, self.params.to_dict(), self.result
        )
        assert doc["parameters"] == self.params.to_dict()

    def test_json_roundtrip(self, tmp_path):
        path = tmp_path / "diesel-cycle-data.json"
        doc = self.exporter.build_document("diesel", self.params, self.result)
        self.exporter.export_to_json(doc, str(path))

        cycle_type, params, result = self.exporter.load_from_json(str(path))
        assert cycle_type is CycleType.DIESEL
        assert params == self.params
        assert result == self.result
        assert json.loads(path.read_text(encoding="utf-8")) == doc

    def test_load_missing_section(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"cycleType": "otto"}), encoding="utf-8")
        with pytest.raises(KeyError):
            self.exporter.load_from_json(str(path))

    def test_csv(self, tmp_path):
        path = tmp_path / "states.csv"
        self.exporter.export_to_csv(self.result, str(path))
        with open(path, newline="") as fh:
            rows = list(csv.reader(fh))
        assert rows[0][0] == "state"
        assert len(rows) == 5
        assert float(rows[1][1]) == pytest.approx(self.result.pv_data[0].x)

    def test_csv_empty_result_raises(self, tmp_path):
        with pytest.raises(ValueError):
            self.exporter.export_to_csv(zeroed_result("otto"), str(tmp_path / "x.csv"))


class TestPerformanceReport:

    def test_rankine_report(self):
        params = RankineParameters()
        report = DataExporter.create_performance_report(
            "rankine", params, calculate_rankine_cycle(params), date(2024, 1, 2)
        )
        assert "RANKINE CYCLE ANALYSIS" in report
        assert "Generated on 2024-01-02" in report
        assert "Condenser Pressure:" in report
        assert "0.0080" in report
        assert "Steam Quality:" in report
        assert "85.00%" in report
        assert "Max Temperature" not in report

    def test_otto_report(self):
        params = OttoParameters()
        report = DataExporter.create_performance_report(
            CycleType.OTTO, params, calculate_otto_cycle(params)
        )
        assert "Thermal Efficiency:" in report
        assert "56.47%" in report
        assert "Max Pressure:" in report
        assert "Steam Quality" not in report

    def test_invalid_result_report(self):
        report = DataExporter.create_performance_report(
            "otto", {"compressionRatio": 0.0}, zeroed_result("otto")
        )
        assert "No valid cycle computed" in report
