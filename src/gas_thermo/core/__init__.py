"""Species data, gas state and the enthalpy solver."""

from gas_thermo.core.gas import Gas, thermo_table
from gas_thermo.core.solver import set_dh, set_h, set_hP, set_TP
from gas_thermo.core.species import Species, SpeciesRegistry, load_default_registry

__all__ = [
    "Gas",
    "thermo_table",
    "Species",
    "SpeciesRegistry",
    "load_default_registry",
    "set_h",
    "set_dh",
    "set_hP",
    "set_TP",
]
