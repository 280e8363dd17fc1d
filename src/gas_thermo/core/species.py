"""
Species data and the species registry.

A registry is an ordered, immutable table of ideal-gas species built once
(usually from a NASA Glenn / CEA ``thermo.inp`` file) and then shared by any
number of Gas instances. Composition vectors are always ordered like the
registry.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, Sequence

import numpy as np

from gas_thermo.core.constants import T_SWITCH
from gas_thermo.core.exceptions import ThermoDataError, UnknownSpecies

logger = logging.getLogger(__name__)

DEFAULT_THERMO_FILE = Path(__file__).resolve().parent.parent / "data" / "thermo.inp"

N_COEFFS = 9


@dataclass(frozen=True)
class Species:
    """
    Thermodynamic data for a single ideal-gas species.

    Attributes:
        name: Unique species identifier (e.g. "N2", "Air")
        MW: Molecular weight (g/mol)
        alow: 9 polynomial coefficients valid below 1000 K
        ahigh: 9 polynomial coefficients valid above 1000 K
        Hf: Formation enthalpy at 298.15 K (J/mol)
    """

    name: str
    MW: float
    alow: tuple[float, ...] = field(repr=False)
    ahigh: tuple[float, ...] = field(repr=False)
    Hf: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "alow", tuple(float(a) for a in self.alow))
        object.__setattr__(self, "ahigh", tuple(float(a) for a in self.ahigh))
        if len(self.alow) != N_COEFFS or len(self.ahigh) != N_COEFFS:
            raise ValueError(
                f"Species '{self.name}' needs {N_COEFFS} low and {N_COEFFS} high "
                f"coefficients, got {len(self.alow)} and {len(self.ahigh)}"
            )
        if self.MW <= 0:
            raise ValueError(f"Species '{self.name}' has non-positive MW: {self.MW}")


def _frozen(values: Sequence | np.ndarray) -> np.ndarray:
    arr = np.array(values, dtype=float)
    arr.flags.writeable = False
    return arr


class SpeciesRegistry:
    """
    Ordered, read-only table of species.

    Array views (``MW``, ``alow``, ``ahigh``, ``Hf``) are laid out in
    registry order and are not writeable.

    Example:
        >>> registry = load_default_registry()
        >>> registry.index("N2")
        1
        >>> registry["N2"].MW
        28.0134
    """

    def __init__(self, species: Iterable[Species]):
        self._species: tuple[Species, ...] = tuple(species)
        if not self._species:
            raise ValueError("A species registry needs at least one species")

        self._index: dict[str, int] = {}
        for i, sp in enumerate(self._species):
            if sp.name in self._index:
                raise ValueError(f"Duplicate species '{sp.name}' in registry")
            self._index[sp.name] = i

        self.names: tuple[str, ...] = tuple(sp.name for sp in self._species)
        self.MW = _frozen([sp.MW for sp in self._species])
        self.alow = _frozen([sp.alow for sp in self._species])
        self.ahigh = _frozen([sp.ahigh for sp in self._species])
        self.Hf = _frozen([sp.Hf for sp in self._species])

    def index(self, name: str) -> int:
        """
        Position of a species in registry order.

        Raises:
            UnknownSpecies: If the name is not in the registry
        """
        try:
            return self._index[name]
        except KeyError:
            raise UnknownSpecies(name, self.names) from None

    def __getitem__(self, name: str) -> Species:
        return self._species[self.index(name)]

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __len__(self) -> int:
        return len(self._species)

    def __iter__(self) -> Iterator[Species]:
        return iter(self._species)

    def is_compatible(self, other: SpeciesRegistry) -> bool:
        """True if both registries hold the same species in the same order."""
        return self is other or self.names == other.names

    def __repr__(self) -> str:
        return f"SpeciesRegistry(n={len(self)}, species={list(self.names)!r})"

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    @classmethod
    def from_thermo_inp(cls, filepath: str | Path) -> SpeciesRegistry:
        """
        Load gas-phase species from a NASA Glenn / CEA ``thermo.inp`` file.

        Only species with at least two temperature intervals are kept; the
        first two intervals supply the low and high coefficient sets and must
        meet at 1000 K.

        Args:
            filepath: Path to the thermo file

        Returns:
            SpeciesRegistry in file order

        Raises:
            FileNotFoundError: If the file does not exist
            ThermoDataError: If the file is malformed or a species does not
                switch coefficient sets at 1000 K
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Thermodynamic data file not found: {path}")

        lines = path.read_text(encoding="utf-8", errors="replace").splitlines()
        species = list(_parse_thermo_lines(lines, str(path)))
        if not species:
            raise ThermoDataError(f"No gas-phase species found in {path}")

        logger.info(f"Loaded {len(species)} species from {path}")
        return cls(species)


def load_default_registry() -> SpeciesRegistry:
    """Load the registry bundled with the package (Air, N2, O2, Ar, CO2, H2O)."""
    return SpeciesRegistry.from_thermo_inp(DEFAULT_THERMO_FILE)


# =============================================================================
# thermo.inp parsing
# =============================================================================

def _parse_float(text: str, where: str) -> float:
    text = text.strip()
    if not text:
        return 0.0
    try:
        return float(text.replace("D", "E").replace("d", "e"))
    except ValueError:
        raise ThermoDataError(f"{where}: cannot read number '{text}'") from None


def _parse_thermo_lines(lines: list[str], source: str) -> Iterator[Species]:
    """
    Yield species records from the lines of a CEA thermo file.

    Record layout per species:
    - name line (name in the first columns, comments after)
    - header: interval count (cols 1-2), phase (51-52), MW (53-65), Hf (66-80)
    - per interval, 3 lines: Tmin/Tmax (cols 1-22), coefficients a1-a5,
      then a6, a7, b1 (cols 49-64), b2 (cols 65-80); 16 columns per number
    """
    i = 0
    n = len(lines)
    while i < n:
        line = lines[i]
        stripped = line.strip()
        if not stripped or stripped.startswith(("!", "#")):
            i += 1
            continue
        if stripped.lower() == "thermo":
            # global temperature-range line follows the keyword
            i += 2
            continue
        if stripped.upper().startswith("END"):
            i += 1
            continue

        if i + 1 >= n:
            raise ThermoDataError(f"{source}:{i + 1}: truncated species record")
        name = stripped.split()[0]
        header = lines[i + 1].ljust(80)
        where = f"{source}:{i + 2} ({name})"
        try:
            n_intervals = int(header[0:2])
        except ValueError:
            raise ThermoDataError(f"{where}: bad interval count '{header[0:2]}'") from None
        phase = int(_parse_float(header[50:52], where))
        mw = _parse_float(header[52:65], where)
        hf = _parse_float(header[65:80], where)

        start = i + 2
        if n_intervals == 0:
            # condensed/reactant entry: a single assigned-enthalpy line
            i = start + 1
            continue

        end = start + 3 * n_intervals
        if end > n:
            raise ThermoDataError(f"{where}: expected {n_intervals} temperature intervals")

        intervals = [
            _parse_interval(lines[j:j + 3], f"{source}:{j + 1} ({name})")
            for j in range(start, end, 3)
        ]
        i = end

        if phase != 0:
            logger.debug(f"Skipping condensed species {name}")
            continue
        if len(intervals) < 2:
            logger.debug(f"Skipping {name}: single temperature interval")
            continue

        (t_low, t_mid, alow), (t_mid2, _, ahigh) = intervals[0], intervals[1]
        if t_mid != T_SWITCH or t_mid2 != T_SWITCH:
            raise ThermoDataError(
                f"{where}: coefficient sets must switch at {T_SWITCH} K, "
                f"got {t_mid} K / {t_mid2} K"
            )
        yield Species(name=name, MW=mw, alow=alow, ahigh=ahigh, Hf=hf)


def _parse_interval(block: list[str], where: str) -> tuple[float, float, list[float]]:
    """Parse one 3-line temperature interval into (Tmin, Tmax, coefficients)."""
    range_line, coeff_line1, coeff_line2 = (line.ljust(80) for line in block)
    t_min = _parse_float(range_line[0:11], where)
    t_max = _parse_float(range_line[11:22], where)

    a = [_parse_float(coeff_line1[k:k + 16], where) for k in range(0, 80, 16)]
    a += [_parse_float(coeff_line2[k:k + 16], where) for k in (0, 16)]
    a += [_parse_float(coeff_line2[k:k + 16], where) for k in (48, 64)]
    return t_min, t_max, a
