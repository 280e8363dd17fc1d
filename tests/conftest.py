"""Shared fixtures."""

import pytest

from gas_thermo.core.gas import Gas
from gas_thermo.core.species import Species, SpeciesRegistry, load_default_registry


@pytest.fixture(scope="session")
def registry():
    """Bundled species registry (Air, N2, O2, Ar, CO2, H2O)."""
    return load_default_registry()


@pytest.fixture
def gas(registry):
    """Fresh air at 298.15 K and 101325 Pa."""
    return Gas(registry)


@pytest.fixture(scope="session")
def quadratic_registry():
    """Single species "Q" with cp linear in T, so h ~ T^2 and phi ~ T."""
    a = [0.0, 0.0, 0.0, 0.01, 0.0, 0.0, 0.0, 0.0, 0.0]
    return SpeciesRegistry([Species("Q", 10.0, alow=a, ahigh=a)])
