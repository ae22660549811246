"""
Unit Tests for Cycle Configuration Module
Tests parameter records, presets, range notices and persistence.
"""

import json

import pytest

from cycle_simulator.cycle_config import (
    PARAMETER_RANGES,
    CycleType,
    DieselParameters,
    OttoParameters,
    RankineParameters,
    create_default_diesel,
    create_default_otto,
    create_default_parameters,
    create_default_rankine,
    load_parameters,
    parameters_class,
    parameters_from_dict,
    save_parameters,
)


class TestCycleType:

    def test_parse_string(self):
        assert CycleType.parse("otto") is CycleType.OTTO
        assert CycleType.parse(" Rankine ") is CycleType.RANKINE

    def test_parse_passthrough(self):
        assert CycleType.parse(CycleType.DIESEL) is CycleType.DIESEL

    def test_parse_unknown_raises(self):
        with pytest.raises(ValueError, match="brayton"):
            CycleType.parse("brayton")

    def test_title(self):
        assert CycleType.DIESEL.title == "Diesel"


class TestParameterRecords:

    def test_rankine_defaults(self):
        params = create_default_rankine()
        assert params.to_dict() == {
            "boilerPressure": 8.0,
            "boilerTemperature": 500.0,
            "condenserPressure": 0.008,
            "pumpEfficiency": 0.85,
            "turbineEfficiency": 0.87,
        }

    def test_otto_defaults(self):
        params = create_default_otto()
        assert params.compression_ratio == 8.0
        assert params.heat_input == 1800.0

    def test_diesel_defaults(self):
        params = create_default_diesel()
        assert params.compression_ratio == 16.0
        assert params.cutoff_ratio == 2.0

    def test_default_by_type(self):
        assert isinstance(create_default_parameters("diesel"), DieselParameters)
        assert parameters_class(CycleType.OTTO) is OttoParameters

    def test_from_dict_camel_case(self):
        params = OttoParameters.from_dict(
            {
                "initialPressure": 0.12,
                "initialTemperature": 30,
                "compressionRatio": 9,
                "heatInput": 2000,
            }
        )
        assert params == OttoParameters(0.12, 30.0, 9.0, 2000.0)

    def test_from_dict_snake_case(self):
        data = {
            "boiler_pressure": 10.0,
            "boiler_temperature": 550.0,
            "condenser_pressure": 0.01,
            "pump_efficiency": 0.9,
            "turbine_efficiency": 0.9,
        }
        assert RankineParameters.from_dict(data).boiler_pressure == 10.0

    def test_from_dict_missing_key(self):
        with pytest.raises(KeyError, match="cutoffRatio"):
            DieselParameters.from_dict(
                {
                    "initialPressure": 0.1,
                    "initialTemperature": 25.0,
                    "compressionRatio": 16.0,
                    "heatInput": 1800.0,
                }
            )

    def test_dict_roundtrip(self):
        params = DieselParameters(cutoff_ratio=2.5)
        assert parameters_from_dict("diesel", params.to_dict()) == params

    def test_invalid_values_do_not_raise(self):
        """Nonsense is left for the calculator to turn into a zeroed result."""
        params = OttoParameters(compression_ratio=-1.0)
        assert params.compression_ratio == -1.0


class TestRangeNotices:

    def test_defaults_in_range(self):
        for cycle_type in CycleType:
            assert create_default_parameters(cycle_type).validate() == []

    def test_out_of_range_notice(self):
        notices = OttoParameters(compression_ratio=20.0).validate()
        assert len(notices) == 1
        assert "Compression Ratio" in notices[0]

    def test_warn_out_of_range(self):
        with pytest.warns(UserWarning, match="Cutoff Ratio"):
            DieselParameters(cutoff_ratio=5.0).warn_out_of_range()

    def test_ranges_cover_every_field(self):
        for cycle_type, ranges in PARAMETER_RANGES.items():
            names = {rng.name for rng in ranges}
            assert names == set(create_default_parameters(cycle_type).to_dict())

    def test_advanced_flags(self):
        advanced = {r.name for r in PARAMETER_RANGES[CycleType.RANKINE] if r.advanced}
        assert advanced == {"pumpEfficiency", "turbineEfficiency"}


class TestPersistence:

    def test_save_load_roundtrip(self, tmp_path):
        path = tmp_path / "params.json"
        params = RankineParameters(boiler_pressure=12.0)
        save_parameters(params, str(path))
        assert load_parameters(str(path)) == params

    def test_saved_shape(self, tmp_path):
        path = tmp_path / "params.json"
        save_parameters(OttoParameters(), str(path))
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["cycleType"] == "otto"
        assert data["parameters"]["compressionRatio"] == 8.0

    def test_load_missing_section(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"parameters": {}}), encoding="utf-8")
        with pytest.raises(KeyError):
            load_parameters(str(path))

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_parameters(str(tmp_path / "nope.json"))
