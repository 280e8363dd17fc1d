"""Compression, expansion, mixing and Mach-number processes."""

from gas_thermo.processes.turbo import compress, expand, gas_mach, mix

__all__ = ["compress", "expand", "mix", "gas_mach"]
