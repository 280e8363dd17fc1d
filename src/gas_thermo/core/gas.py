"""
Mutable ideal-gas state.

A Gas holds the independent variables temperature, pressure and composition
(mass fractions) and keeps the derived quantities cp, dcp/dT, h and phi
consistent with them. Every setter recomputes what depends on it:

- setting T refreshes the temperature basis vector and cp, cp_T, h, phi
- setting P only stores P (entropy combines phi and P when read)
- setting Y or X refreshes MW and then cp, cp_T, h, phi at the current T

All derived properties (cp, h, s, MW, gamma, rho, ...) are read-only;
assigning to them raises InvalidPropertyAssignment. To reach a target
enthalpy use ``set_h`` and friends, which run the Newton solver.

Specific quantities are on a mass basis: cp in J/kg/K, h in J/kg, phi and s
in J/kg/K. The ``*_molar`` properties give J/mol values.
"""

from __future__ import annotations

import logging
import math
from typing import Mapping, Sequence

import numpy as np

from gas_thermo.core import polynomials
from gas_thermo.core.composition import (
    X2Y,
    Y2X,
    array_to_mapping,
    mapping_to_array,
    mixture_MW,
    normalize,
)
from gas_thermo.core.constants import (
    DEFAULT_SPECIES,
    P_STD,
    R_UNIVERSAL,
    T_STD,
    T_SWITCH,
)
from gas_thermo.core.exceptions import InvalidPropertyAssignment
from gas_thermo.core.solver import set_dh, set_h, set_hP, set_TP
from gas_thermo.core.species import SpeciesRegistry

logger = logging.getLogger(__name__)


def _positive(name: str, value: float) -> float:
    """Validate a strictly positive, finite scalar."""
    try:
        val = float(value)
    except (TypeError, ValueError):
        raise InvalidPropertyAssignment(
            f"gas.{name} must be a number, got {type(value).__name__}"
        ) from None
    if not math.isfinite(val) or val <= 0.0:
        raise InvalidPropertyAssignment(f"gas.{name} must be positive and finite, got {val}")
    return val


class Gas:
    """
    Ideal gas mixture with temperature-dependent NASA polynomial properties.

    Args:
        registry: Species registry the composition refers to
        Y: Mass fractions in registry order (normalized); pure Air if omitted
        T: Temperature (K)
        P: Pressure (Pa)

    Example:
        >>> registry = load_default_registry()
        >>> gas = Gas(registry)              # air at 298.15 K, 101325 Pa
        >>> gas.set_TP(596.3, 202650.0)
        >>> round(gas.cp_molar, 1)
        30.4
        >>> gas.cp = 1000.0
        Traceback (most recent call last):
        ...
        InvalidPropertyAssignment: Cannot set gas.cp: ...
    """

    __slots__ = (
        "_registry",
        "_T",
        "_P",
        "_Tarray",
        "_Y",
        "_MW",
        "_active",
        "_weights",
        "_alow_active",
        "_ahigh_active",
        "_cp",
        "_cp_T",
        "_h",
        "_phi",
    )

    def __init__(
        self,
        registry: SpeciesRegistry,
        Y: Sequence[float] | np.ndarray | None = None,
        *,
        T: float = T_STD,
        P: float = P_STD,
    ):
        self._registry = registry
        self._T = _positive("T", T)
        self._P = _positive("P", P)
        self._Tarray = np.empty(8, dtype=float)

        if Y is None:
            Y = np.zeros(len(registry))
            Y[registry.index(DEFAULT_SPECIES)] = 1.0
        self._apply_composition(normalize(Y, len(registry)))

    @classmethod
    def from_mass_fractions(
        cls,
        registry: SpeciesRegistry,
        fractions: Mapping[str, float],
        *,
        T: float = T_STD,
        P: float = P_STD,
    ) -> Gas:
        """Create a gas from a sparse name -> mass fraction mapping."""
        return cls(registry, mapping_to_array(fractions, registry), T=T, P=P)

    @classmethod
    def from_mole_fractions(
        cls,
        registry: SpeciesRegistry,
        fractions: Mapping[str, float],
        *,
        T: float = T_STD,
        P: float = P_STD,
    ) -> Gas:
        """Create a gas from a sparse name -> mole fraction mapping."""
        X = mapping_to_array(fractions, registry)
        return cls(registry, X2Y(X, registry.MW), T=T, P=P)

    # -------------------------------------------------------------------------
    # Attribute protection
    # -------------------------------------------------------------------------

    def __setattr__(self, name: str, value) -> None:
        attr = getattr(type(self), name, None)
        if isinstance(attr, property) and attr.fset is None:
            raise InvalidPropertyAssignment(
                f"Cannot set gas.{name}: it is a derived, read-only property. "
                f"Set T, P, Y or X, or use set_h/set_hP/set_TP/set_dh."
            )
        object.__setattr__(self, name, value)

    # -------------------------------------------------------------------------
    # Update rules
    # -------------------------------------------------------------------------

    def _update_temperature(self, T: float) -> None:
        """Store T and recompute every temperature-dependent cached scalar."""
        self._T = T
        TT = polynomials.tarray_inplace(T, self._Tarray)

        a = self._alow_active if T < T_SWITCH else self._ahigh_active
        w = self._weights

        # molar -> specific (g basis) via w, then g -> kg
        self._cp = 1000.0 * float(w @ polynomials.cp(TT, a))
        self._cp_T = 1000.0 * float(w @ polynomials.dcp_dT(TT, a))
        self._h = 1000.0 * float(w @ polynomials.enthalpy(TT, a))
        self._phi = 1000.0 * float(w @ polynomials.phi(TT, a))

    def _apply_composition(self, Y: np.ndarray) -> None:
        """Store normalized mass fractions and refresh MW and T-dependent scalars."""
        MW = self._registry.MW
        self._Y = Y
        self._MW = mixture_MW(Y, MW)
        # species with zero mass fraction are skipped entirely
        self._active = np.flatnonzero(Y)
        self._weights = Y[self._active] / MW[self._active]
        self._alow_active = self._registry.alow[self._active]
        self._ahigh_active = self._registry.ahigh[self._active]
        self._update_temperature(self._T)

    # -------------------------------------------------------------------------
    # Independent variables
    # -------------------------------------------------------------------------

    @property
    def registry(self) -> SpeciesRegistry:
        """The species registry this gas refers to."""
        return self._registry

    @property
    def T(self) -> float:
        """Temperature (K)."""
        return self._T

    @T.setter
    def T(self, value: float) -> None:
        self._update_temperature(_positive("T", value))

    @property
    def P(self) -> float:
        """Pressure (Pa)."""
        return self._P

    @P.setter
    def P(self, value: float) -> None:
        # cp, h and phi do not depend on P; s is combined at read time
        self._P = _positive("P", value)

    @property
    def Y(self) -> np.ndarray:
        """Mass fractions in registry order (read-only view)."""
        view = self._Y.view()
        view.flags.writeable = False
        return view

    @Y.setter
    def Y(self, values: Sequence[float] | np.ndarray) -> None:
        self.set_mass_fractions(values)

    @property
    def X(self) -> np.ndarray:
        """Mole fractions in registry order."""
        return Y2X(self._Y, self._registry.MW)

    @X.setter
    def X(self, values: Sequence[float] | np.ndarray) -> None:
        self.set_mole_fractions(values)

    # -------------------------------------------------------------------------
    # Composition entry points
    # -------------------------------------------------------------------------

    def set_mass_fractions(self, values: Sequence[float] | np.ndarray) -> None:
        """
        Set mass fractions from a dense vector in registry order.

        The vector is normalized to sum to 1.

        Raises:
            InvalidPropertyAssignment: If the vector is not a numeric
                sequence of the right length, has negative entries or sums
                to zero. The gas is left unchanged.
        """
        if isinstance(values, Mapping):
            raise InvalidPropertyAssignment(
                "Mass fractions given as a mapping; use set_mass_fractions_from_mapping()"
            )
        self._apply_composition(normalize(values, len(self._registry)))

    def set_mass_fractions_from_mapping(self, fractions: Mapping[str, float]) -> None:
        """
        Set mass fractions from a sparse name -> fraction mapping.

        Species not named get zero; the result is normalized to sum to 1.

        Raises:
            UnknownSpecies: If a name is not in the registry
            InvalidPropertyAssignment: If the values are invalid
        """
        self._apply_composition(mapping_to_array(fractions, self._registry))

    def set_mole_fractions(self, values: Sequence[float] | np.ndarray) -> None:
        """Set composition from a dense mole-fraction vector (normalized)."""
        if isinstance(values, Mapping):
            raise InvalidPropertyAssignment(
                "Mole fractions given as a mapping; use set_mole_fractions_from_mapping()"
            )
        X = normalize(values, len(self._registry))
        self._apply_composition(X2Y(X, self._registry.MW))

    def set_mole_fractions_from_mapping(self, fractions: Mapping[str, float]) -> None:
        """Set composition from a sparse name -> mole fraction mapping (normalized)."""
        X = mapping_to_array(fractions, self._registry)
        self._apply_composition(X2Y(X, self._registry.MW))

    # -------------------------------------------------------------------------
    # Composite setters
    # -------------------------------------------------------------------------

    def set_h(self, h: float) -> Gas:
        """Set the specific enthalpy (J/kg) by solving for T. See solver.set_h."""
        return set_h(self, h)

    def set_dh(self, dh: float, eta_p: float = 1.0) -> Gas:
        """Add ``dh`` (J/kg) of work with polytropic efficiency ``eta_p``."""
        return set_dh(self, dh, eta_p)

    def set_hP(self, h: float, P: float) -> Gas:
        """Set enthalpy (J/kg) and then pressure (Pa)."""
        return set_hP(self, h, P)

    def set_TP(self, T: float, P: float) -> Gas:
        """Set temperature (K) and then pressure (Pa)."""
        return set_TP(self, T, P)

    # -------------------------------------------------------------------------
    # Cached, temperature-dependent properties
    # -------------------------------------------------------------------------

    @property
    def Tarray(self) -> np.ndarray:
        """Temperature basis vector [T^-2, T^-1, 1, T, T^2, T^3, T^4, ln T]."""
        view = self._Tarray.view()
        view.flags.writeable = False
        return view

    @property
    def cp(self) -> float:
        """Specific heat at constant pressure (J/kg/K)."""
        return self._cp

    @property
    def cp_T(self) -> float:
        """Temperature derivative of cp (J/kg/K^2)."""
        return self._cp_T

    @property
    def h(self) -> float:
        """Specific enthalpy including formation enthalpy (J/kg)."""
        return self._h

    @property
    def phi(self) -> float:
        """Entropy complement function phi(T) (J/kg/K)."""
        return self._phi

    @property
    def h_T(self) -> float:
        """dh/dT = cp (J/kg/K)."""
        return self._cp

    @property
    def phi_T(self) -> float:
        """dphi/dT = cp/T (J/kg/K^2)."""
        return self._cp / self._T

    @property
    def s_T(self) -> float:
        """Partial derivative of s with respect to T at constant P."""
        return self._cp / self._T

    # -------------------------------------------------------------------------
    # Derived, uncached properties
    # -------------------------------------------------------------------------

    @property
    def MW(self) -> float:
        """Mixture molecular weight (g/mol)."""
        return self._MW

    @property
    def R(self) -> float:
        """Specific gas constant (J/kg/K)."""
        return R_UNIVERSAL / self._MW * 1000.0

    @property
    def s(self) -> float:
        """
        Specific entropy (J/kg/K).

        s = phi(T) - R [ln(P/Pstd) + sum X_i ln X_i]
        """
        X = self.X
        X = X[X != 0.0]
        ds_mix = float(np.dot(X, np.log(X)))
        return self._phi - self.R * (math.log(self._P / P_STD) + ds_mix)

    @property
    def gamma(self) -> float:
        """Ratio of specific heats cp/cv."""
        R = self.R
        return self._cp / (self._cp - R)

    @property
    def rho(self) -> float:
        """Density (kg/m^3)."""
        return self._P / (self.R * self._T)

    @property
    def nu(self) -> float:
        """Specific volume (m^3/kg)."""
        return 1.0 / self.rho

    @property
    def Hf(self) -> float:
        """Formation enthalpy of the mixture (J/mol)."""
        return float(np.dot(self.X, self._registry.Hf))

    @property
    def cp_molar(self) -> float:
        """Molar heat capacity (J/mol/K)."""
        return self._cp * self._MW / 1000.0

    @property
    def h_molar(self) -> float:
        """Molar enthalpy (J/mol)."""
        return self._h * self._MW / 1000.0

    @property
    def s_molar(self) -> float:
        """Molar entropy (J/mol/K)."""
        return self.s * self._MW / 1000.0

    @property
    def TP(self) -> tuple[float, float]:
        return self._T, self._P

    @property
    def hs(self) -> tuple[float, float]:
        return self._h, self.s

    @property
    def Y_dict(self) -> dict[str, float]:
        """Mass fractions of every species, keyed by name."""
        return array_to_mapping(self._Y, self._registry)

    @property
    def X_dict(self) -> dict[str, float]:
        """Mole fractions of the species present, keyed by name."""
        return array_to_mapping(self.X, self._registry, skip_zeros=True)

    # -------------------------------------------------------------------------
    # Copying and display
    # -------------------------------------------------------------------------

    def copy(self) -> Gas:
        """Independent copy sharing the (immutable) registry."""
        new = object.__new__(type(self))
        for slot in Gas.__slots__:
            value = getattr(self, slot)
            if isinstance(value, np.ndarray):
                value = value.copy()
            object.__setattr__(new, slot, value)
        return new

    def summary(self) -> str:
        """Multi-line description of the state and composition."""
        lines = [
            "Ideal Gas at",
            f"  T = {self._T:8.3f} K",
            f"  P = {self._P / 1000.0:8.3f} kPa",
            f" cp = {self.cp_molar:8.3f} J/K/mol",
            f"  h = {self.h_molar / 1000.0:8.3f} kJ/mol",
            f"  s = {self.s_molar / 1000.0:8.3f} kJ/K/mol",
            "",
            "with composition:",
            "-" * 29,
            f" {'Species':>7} {'Yᵢ':>9} {'MW[g/mol]':>10}",
            "-" * 29,
        ]
        for name, y, mw in zip(self._registry.names, self._Y, self._registry.MW):
            if y != 0.0:
                lines.append(f" {name:>7} {y:9.3f} {mw:10.3f}")
        lines.append("-" * 29)
        lines.append(f" {'ΣYᵢ':>7} {self._Y.sum():9.3f} {self._MW:10.3f}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.summary()

    def __repr__(self) -> str:
        composition = ", ".join(f"{k}: {v:.4g}" for k, v in self.X_dict.items())
        return f"Gas(T={self._T:.3f} K, P={self._P:.1f} Pa, X={{{composition}}})"


# =============================================================================
# Property tables
# =============================================================================

def thermo_table(
    gas: Gas,
    T_start: float = T_STD,
    T_end: float = 2000.0,
    T_interval: float = 100.0,
    temperatures: Sequence[float] | np.ndarray | None = None,
) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """
    Tabulate cp, h, phi and s over a temperature range.

    The gas temperature is swept in place and left at the last value.

    Args:
        gas: Gas to evaluate (pressure and composition are kept)
        T_start: First temperature (K)
        T_end: Last temperature (K), included when on the step grid
        T_interval: Temperature step (K)
        temperatures: Explicit temperatures; overrides the range arguments

    Returns:
        Tuple of arrays (T, cp, h, phi, s)

    Raises:
        ValueError: If T_interval is not positive or the range holds no
            temperatures (for example T_end < T_start)
    """
    if temperatures is None:
        if T_interval <= 0:
            raise ValueError(f"T_interval must be positive, got {T_interval}")
        T_range = np.arange(T_start, T_end + 0.5 * T_interval, T_interval)
    else:
        T_range = np.asarray(temperatures, dtype=float)
    if T_range.size == 0:
        raise ValueError(
            f"Empty temperature range: T_start={T_start} K, T_end={T_end} K, "
            f"T_interval={T_interval} K"
        )

    cp_array = np.zeros_like(T_range)
    h_array = np.zeros_like(T_range)
    phi_array = np.zeros_like(T_range)
    s_array = np.zeros_like(T_range)
    for i, T in enumerate(T_range):
        gas.T = T
        cp_array[i] = gas.cp
        h_array[i] = gas.h
        phi_array[i] = gas.phi
        s_array[i] = gas.s

    logger.debug(f"Tabulated {len(T_range)} points from {T_range[0]} to {T_range[-1]} K")
    return T_range, cp_array, h_array, phi_array, s_array
