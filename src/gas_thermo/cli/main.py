#!/usr/bin/env python3
"""
Command-line interface for gas-thermo.

Prints the state of an ideal-gas mixture, optionally after a compression or
expansion, or a property table over a temperature range.

Usage:
    gas-thermo                                  # air at 298.15 K, 101325 Pa
    gas-thermo -X N2=0.79 -X O2=0.21 -T 500     # mole fractions, 500 K
    gas-thermo --compress 10 --eta 0.9          # polytropic compression
    gas-thermo --table --t-end 1500             # cp/h/phi/s table
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from gas_thermo.core.constants import P_STD, T_STD
from gas_thermo.core.exceptions import GasThermoError
from gas_thermo.core.gas import Gas, thermo_table
from gas_thermo.core.species import SpeciesRegistry, load_default_registry
from gas_thermo.processes.turbo import compress, expand

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def parse_fractions(items: Sequence[str]) -> dict[str, float]:
    """
    Parse ``NAME=VALUE`` strings into a mapping.

    Raises:
        ValueError: If an item is not of the form NAME=VALUE
    """
    fractions: dict[str, float] = {}
    for item in items:
        name, sep, value = item.partition("=")
        if not sep or not name.strip():
            raise ValueError(f"Expected NAME=VALUE, got '{item}'")
        try:
            fractions[name.strip()] = float(value)
        except ValueError:
            raise ValueError(f"Invalid fraction in '{item}'") from None
    return fractions


def build_gas(registry: SpeciesRegistry, args: argparse.Namespace) -> Gas:
    """Create the gas described by the command-line arguments."""
    if args.mass_fractions:
        return Gas.from_mass_fractions(
            registry, parse_fractions(args.mass_fractions), T=args.T, P=args.P
        )
    if args.mole_fractions:
        return Gas.from_mole_fractions(
            registry, parse_fractions(args.mole_fractions), T=args.T, P=args.P
        )
    return Gas(registry, T=args.T, P=args.P)


def print_table(gas: Gas, T_start: float, T_end: float, T_step: float) -> None:
    """Print cp, h, phi and s of the gas over a temperature range."""
    T, cp, h, phi, s = thermo_table(gas, T_start, T_end, T_step)
    MW = gas.MW / 1000.0

    print(f"{'T [K]':>9} {'cp [J/K/mol]':>13} {'h [kJ/mol]':>11} "
          f"{'phi [J/K/mol]':>14} {'s [J/K/mol]':>12}")
    print("─" * 63)
    for row in zip(T, cp, h, phi, s):
        t, c, hh, p, ss = row
        print(f"{t:9.2f} {c * MW:13.3f} {hh * MW / 1000.0:11.3f} "
              f"{p * MW:14.3f} {ss * MW:12.3f}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Ideal-gas thermodynamic properties from NASA polynomials",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  gas-thermo -T 596.3 -P 202650             Air at twice standard T and P
  gas-thermo -Y CO2=0.2 -Y N2=0.8           Mass-fraction composition
  gas-thermo --expand 0.5 --debug           Expansion with solver logging
        """,
    )
    parser.add_argument(
        "--thermo",
        type=str,
        default=None,
        help="Path to a thermo.inp file (default: bundled data)",
    )
    composition = parser.add_mutually_exclusive_group()
    composition.add_argument(
        "-Y",
        dest="mass_fractions",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Mass fraction of a species (repeatable, normalized)",
    )
    composition.add_argument(
        "-X",
        dest="mole_fractions",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Mole fraction of a species (repeatable, normalized)",
    )
    parser.add_argument("-T", type=float, default=T_STD, help=f"Temperature in K (default: {T_STD})")
    parser.add_argument("-P", type=float, default=P_STD, help=f"Pressure in Pa (default: {P_STD})")

    process = parser.add_mutually_exclusive_group()
    process.add_argument("--compress", type=float, metavar="PR", help="Compress by pressure ratio PR")
    process.add_argument("--expand", type=float, metavar="PR", help="Expand by pressure ratio PR")
    parser.add_argument(
        "--eta",
        type=float,
        default=1.0,
        help="Polytropic efficiency for --compress/--expand (default: 1.0)",
    )

    parser.add_argument("--table", action="store_true", help="Print a property table")
    parser.add_argument("--t-start", type=float, default=T_STD, help="Table start temperature (K)")
    parser.add_argument("--t-end", type=float, default=2000.0, help="Table end temperature (K)")
    parser.add_argument("--t-step", type=float, default=100.0, help="Table temperature step (K)")
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args(argv)

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        if args.thermo:
            registry = SpeciesRegistry.from_thermo_inp(args.thermo)
        else:
            registry = load_default_registry()

        gas = build_gas(registry, args)

        if args.table:
            print_table(gas, args.t_start, args.t_end, args.t_step)
            return 0

        if args.compress is not None:
            compress(gas, args.compress, args.eta)
        elif args.expand is not None:
            expand(gas, args.expand, args.eta)
    except (GasThermoError, FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(gas.summary())
    return 0


if __name__ == "__main__":
    sys.exit(main())
