"""
gas-thermo

Thermodynamic properties of ideal-gas mixtures from NASA polynomial
coefficients, with a mutable gas state, an enthalpy-to-temperature solver
and compression, expansion and mixing processes.

Example usage:
    >>> from gas_thermo import Gas, load_default_registry, compress
    >>>
    >>> registry = load_default_registry()
    >>> gas = Gas(registry)                      # air at 298.15 K, 101325 Pa
    >>> gas.cp_molar                             # J/K/mol
    29.10...
    >>>
    >>> gas.set_mole_fractions_from_mapping({"N2": 0.79, "O2": 0.21})
    >>> compress(gas, 10.0, eta_p=0.9)
    >>> gas.T, gas.P
"""

from gas_thermo.core.constants import P_STD, R_UNIVERSAL, T_STD
from gas_thermo.core.exceptions import (
    ConvergenceError,
    GasThermoError,
    InvalidProcessParameter,
    InvalidPropertyAssignment,
    ThermoDataError,
    UnknownSpecies,
)
from gas_thermo.core.species import Species, SpeciesRegistry, load_default_registry
from gas_thermo.core.composition import X2Y, Y2X
from gas_thermo.core.gas import Gas, thermo_table
from gas_thermo.core.solver import set_dh, set_h, set_hP, set_TP
from gas_thermo.processes.turbo import compress, expand, gas_mach, mix

__version__ = "0.1.0"

__all__ = [
    # Constants
    "R_UNIVERSAL",
    "T_STD",
    "P_STD",
    # Species data
    "Species",
    "SpeciesRegistry",
    "load_default_registry",
    # Gas state
    "Gas",
    "thermo_table",
    "Y2X",
    "X2Y",
    # Solver
    "set_h",
    "set_dh",
    "set_hP",
    "set_TP",
    # Processes
    "compress",
    "expand",
    "mix",
    "gas_mach",
    # Errors
    "GasThermoError",
    "ConvergenceError",
    "InvalidProcessParameter",
    "InvalidPropertyAssignment",
    "UnknownSpecies",
    "ThermoDataError",
]
