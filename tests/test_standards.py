"""
Unit Tests for limit tables and configuration
"""
import json

import pytest

from hmpi.classifier import RiskThresholds
from hmpi.config import Settings
from hmpi.errors import InvalidLimit, InvalidThresholds
from hmpi.models import MetalLimit
from hmpi.standards import LimitTable, available_standards, get_standard, load_standard_file


@pytest.fixture
def standards_file(tmp_path):
    """Write a valid standards file and return its path."""
    path = tmp_path / "local.json"
    path.write_text(json.dumps({
        "name": "Local 2023",
        "limits": {
            "Lead": {"permissible_limit": 10, "unit": "ppb"},
            "Cu": {"permissible_limit": 1.5, "ideal_value": 0.05},
            "As": 0.01,
        },
        "risk_bands": [[0, "Clean"], [75, "Watch"], [150, "Polluted"]],
    }), encoding="utf-8")
    return path


class TestLimitTable:
    """Tests for LimitTable."""

    def test_from_dict_numbers_and_entries(self):
        table = LimitTable.from_dict("t", {"Pb": 0.01, "Zn": {"permissible_limit": 15, "ideal_value": 5}})
        assert table["Pb"] == MetalLimit("Pb", 0.01, 0.0)
        assert table["Zn"].ideal_value == 5.0
        assert len(table) == 2

    def test_lookup_canonicalizes(self):
        table = LimitTable.from_dict("t", {"Lead": 0.01})
        assert "Pb" in table
        assert "lead" in table
        assert table.lookup("LEAD").permissible_limit == 0.01

    def test_lookup_missing_raises_invalid_limit(self):
        table = LimitTable.from_dict("t", {"Pb": 0.01})
        with pytest.raises(InvalidLimit):
            table.lookup("Hg")
        with pytest.raises(KeyError):
            table["Hg"]

    def test_duplicate_entries_rejected(self):
        with pytest.raises(InvalidLimit):
            LimitTable.from_dict("t", {"Pb": 0.01, "Lead": 0.02})

    def test_entry_without_limit_rejected(self):
        with pytest.raises(InvalidLimit):
            LimitTable.from_dict("t", {"Pb": {"ideal_value": 0}})

    @pytest.mark.parametrize("limit", [0, -0.01, "none", float("nan")])
    def test_bad_limits_rejected(self, limit):
        with pytest.raises(InvalidLimit):
            LimitTable.from_dict("t", {"Pb": limit})


class TestBuiltinStandards:
    """Tests for the bundled tables."""

    def test_available(self):
        assert available_standards() == ["BIS 10500:2012", "DEMO", "WHO"]

    @pytest.mark.parametrize("name,expected", [
        ("WHO", "WHO"),
        ("who", "WHO"),
        ("BIS", "BIS 10500:2012"),
        ("IS 10500", "BIS 10500:2012"),
        ("demo", "DEMO"),
    ])
    def test_aliases(self, name, expected):
        assert get_standard(name).name == expected

    def test_unknown_standard(self):
        with pytest.raises(InvalidLimit):
            get_standard("EPA 1850")

    def test_who_values(self):
        who = get_standard("WHO")
        assert who.lookup("Arsenic").permissible_limit == 0.01
        assert who.lookup("Cd").permissible_limit == 0.003

    def test_bis_carries_ideal_values(self):
        bis = get_standard("BIS")
        assert bis.lookup("Cu").ideal_value == 0.05
        assert bis.lookup("Zn").ideal_value == 5.0
        assert bis.lookup("Pb").ideal_value == 0.0

    def test_demo_matches_sample_metals(self):
        assert set(get_standard("DEMO")) == {"Pb", "Cd", "Cr", "Ni", "Zn", "Cu"}


class TestStandardsFile:
    """Tests for load_standard_file()."""

    def test_load(self, standards_file):
        table = load_standard_file(standards_file)
        assert table.name == "Local 2023"
        assert table.lookup("Pb").permissible_limit == 0.01
        assert table.lookup("Cu").ideal_value == 0.05
        assert table.thresholds == RiskThresholds([(0, "Clean"), (75, "Watch"), (150, "Polluted")])

    def test_bands_optional(self, tmp_path):
        path = tmp_path / "plain.json"
        path.write_text(json.dumps({"name": "Plain", "limits": {"Pb": 0.01}}), encoding="utf-8")
        assert load_standard_file(path).thresholds is None

    def test_structure_errors_are_invalid_limit(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text(json.dumps({"limits": {"Pb": 0.01}}), encoding="utf-8")
        with pytest.raises(InvalidLimit):
            load_standard_file(path)

    def test_limit_below_ideal_is_invalid_limit(self, tmp_path):
        path = tmp_path / "inverted.json"
        path.write_text(json.dumps({
            "name": "Inverted",
            "limits": {"Zn": {"permissible_limit": 5, "ideal_value": 15}},
        }), encoding="utf-8")
        with pytest.raises(InvalidLimit):
            load_standard_file(path)

    def test_invalid_json_is_invalid_limit(self, tmp_path):
        path = tmp_path / "garbled.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(InvalidLimit):
            load_standard_file(path)

    def test_bad_bands_are_invalid_thresholds(self, tmp_path):
        path = tmp_path / "bands.json"
        path.write_text(json.dumps({
            "name": "Bands",
            "limits": {"Pb": 0.01},
            "risk_bands": [[0, "Low"], [0, "High"]],
        }), encoding="utf-8")
        with pytest.raises(InvalidThresholds):
            load_standard_file(path)


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, monkeypatch):
        for var in ("HMPI_DEFAULT_STANDARD", "HMPI_STANDARDS_FILE", "HMPI_RISK_BANDS", "HMPI_WEIGHT_CONSTANT"):
            monkeypatch.delenv(var, raising=False)
        settings = Settings(_env_file=None)
        assert settings.default_standard == "WHO"
        assert settings.weight_constant == 1.0
        assert settings.thresholds() == RiskThresholds.default()
        assert settings.limit_table().name == "WHO"

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("HMPI_DEFAULT_STANDARD", "BIS")
        monkeypatch.setenv("HMPI_RISK_BANDS", '[[0, "Low"], [100, "High"]]')
        settings = Settings(_env_file=None)
        assert settings.limit_table().name == "BIS 10500:2012"
        assert settings.thresholds().classify(99) == "Low"

    def test_standards_file_wins(self, monkeypatch, standards_file):
        monkeypatch.setenv("HMPI_STANDARDS_FILE", str(standards_file))
        settings = Settings(_env_file=None)
        assert settings.limit_table().name == "Local 2023"
