"""Tests for species data and the registry loader."""

import pytest

from gas_thermo.core.exceptions import ThermoDataError, UnknownSpecies
from gas_thermo.core.species import (
    DEFAULT_THERMO_FILE,
    Species,
    SpeciesRegistry,
)


class TestDefaultRegistry:
    """Tests for the bundled thermo data."""

    def test_species_order(self, registry):
        assert registry.names == ("Air", "N2", "O2", "Ar", "CO2", "H2O")
        assert len(registry) == 6

    def test_species_data(self, registry):
        n2 = registry["N2"]
        assert n2.MW == pytest.approx(28.0134)
        assert n2.Hf == 0.0
        assert len(n2.alow) == 9
        assert len(n2.ahigh) == 9
        assert registry["CO2"].Hf == pytest.approx(-393510.0)

    def test_arrays_follow_registry_order(self, registry):
        assert registry.MW[registry.index("H2O")] == pytest.approx(18.01528)
        assert registry.alow.shape == (6, 9)
        assert tuple(registry.ahigh[1]) == registry["N2"].ahigh

    def test_arrays_read_only(self, registry):
        with pytest.raises(ValueError):
            registry.MW[0] = 1.0

    def test_contains(self, registry):
        assert "O2" in registry
        assert "Xe" not in registry


class TestUnknownSpecies:
    """Tests for lookup of missing species."""

    def test_index_raises(self, registry):
        with pytest.raises(UnknownSpecies, match="Available: Air, N2"):
            registry.index("Xe")

    def test_is_key_error(self, registry):
        """UnknownSpecies can be caught as a KeyError."""
        with pytest.raises(KeyError):
            registry["Xe"]

    def test_carries_name(self, registry):
        with pytest.raises(UnknownSpecies) as exc_info:
            registry.index("CH4")
        assert exc_info.value.name == "CH4"
        assert "N2" in exc_info.value.available


class TestSpecies:
    """Tests for Species validation."""

    def test_wrong_coefficient_count(self):
        with pytest.raises(ValueError, match="9 low and 9 high"):
            Species("X", 10.0, alow=[1.0] * 7, ahigh=[1.0] * 9)

    def test_non_positive_mw(self):
        with pytest.raises(ValueError, match="non-positive MW"):
            Species("X", 0.0, alow=[0.0] * 9, ahigh=[0.0] * 9)

    def test_frozen(self, registry):
        with pytest.raises(AttributeError):
            registry["N2"].MW = 1.0


class TestRegistryConstruction:
    """Tests for building registries directly."""

    def test_subset(self, registry):
        sub = SpeciesRegistry([registry["N2"], registry["O2"]])
        assert sub.index("O2") == 1
        assert not sub.is_compatible(registry)
        assert registry.is_compatible(registry)

    def test_duplicate_names(self, registry):
        with pytest.raises(ValueError, match="Duplicate"):
            SpeciesRegistry([registry["N2"], registry["N2"]])

    def test_empty(self):
        with pytest.raises(ValueError):
            SpeciesRegistry([])


class TestThermoFile:
    """Tests for loading thermo.inp files."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            SpeciesRegistry.from_thermo_inp(tmp_path / "missing.inp")

    def test_reload_matches_default(self, registry):
        reloaded = SpeciesRegistry.from_thermo_inp(DEFAULT_THERMO_FILE)
        assert reloaded.is_compatible(registry)
        assert reloaded["Air"] == registry["Air"]

    def test_switch_temperature_checked(self, tmp_path):
        """Coefficient sets that do not meet at 1000 K are rejected."""
        text = DEFAULT_THERMO_FILE.read_text(encoding="utf-8")
        bad = text.replace("    200.000   1000.000", "    200.000   1500.000", 1)
        path = tmp_path / "bad.inp"
        path.write_text(bad, encoding="utf-8")
        with pytest.raises(ThermoDataError, match="1000"):
            SpeciesRegistry.from_thermo_inp(path)

    def test_condensed_species_skipped(self, tmp_path):
        text = DEFAULT_THERMO_FILE.read_text(encoding="utf-8")
        # mark Air as condensed phase (column 52)
        lines = text.splitlines()
        i = next(k for k, line in enumerate(lines) if line.startswith("Air"))
        header = lines[i + 1]
        lines[i + 1] = header[:51] + "1" + header[52:]
        path = tmp_path / "condensed.inp"
        path.write_text("\n".join(lines), encoding="utf-8")
        loaded = SpeciesRegistry.from_thermo_inp(path)
        assert "Air" not in loaded
        assert len(loaded) == 5

    def test_no_species(self, tmp_path):
        path = tmp_path / "empty.inp"
        path.write_text("! nothing here\nthermo\n    200.00   1000.00   6000.00\nEND PRODUCTS\n")
        with pytest.raises(ThermoDataError, match="No gas-phase species"):
            SpeciesRegistry.from_thermo_inp(path)
