"""
NASA polynomial evaluation for ideal-gas species.

Every evaluator takes the temperature basis vector

    TT = [T^-2, T^-1, 1, T, T^2, T^3, T^4, ln T]

and a coefficient vector ``a`` of 9 values (7 polynomial coefficients plus
the two integration constants b1, b2):

    Cp/R  = a1 T^-2 + a2 T^-1 + a3 + a4 T + a5 T^2 + a6 T^3 + a7 T^4
    H/RT  = -a1 T^-2 + a2 T^-1 ln T + a3 + a4 T/2 + a5 T^2/3 + a6 T^3/4
            + a7 T^4/5 + b1/T
    phi/R = -a1 T^-2/2 - a2 T^-1 + a3 ln T + a4 T + a5 T^2/2 + a6 T^3/3
            + a7 T^4/4 + b2

``a`` may also be a 2-D array of shape (n_species, 9); the evaluators then
return one value per row. No branching happens here: the caller picks the
low- or high-temperature coefficient set.

References:
    McBride, B.J., Zehe, M.J., & Gordon, S. (2002). "NASA Glenn Coefficients
    for Calculating Thermodynamic Properties of Individual Species"
    NASA/TP-2002-211556.
"""

from __future__ import annotations

import math

import numpy as np

from gas_thermo.core.constants import R_UNIVERSAL


# =============================================================================
# Temperature basis vector
# =============================================================================

def tarray(T: float) -> np.ndarray:
    """Return a new basis vector ``[T^-2, T^-1, 1, T, T^2, T^3, T^4, ln T]``."""
    return tarray_inplace(T, np.empty(8, dtype=float))


def tarray_inplace(T: float, out: np.ndarray) -> np.ndarray:
    """
    Fill ``out`` with the temperature basis vector without allocating.

    Args:
        T: Temperature (K), must be positive
        out: Array of length 8 to overwrite

    Returns:
        The same ``out`` array
    """
    out[0] = T ** -2
    out[1] = out[0] * T
    out[2] = 1.0
    out[3] = T
    out[4] = T * T
    out[5] = T * out[4]
    out[6] = T * out[5]
    out[7] = math.log(T)
    return out


# =============================================================================
# Per-species evaluators (molar basis)
# =============================================================================

def cp(TT: np.ndarray, a: np.ndarray) -> np.ndarray | float:
    """Molar heat capacity Cp (J/mol/K)."""
    return (a[..., :7] @ TT[:7]) * R_UNIVERSAL


def dcp_dT(TT: np.ndarray, a: np.ndarray) -> np.ndarray | float:
    """
    Temperature derivative of the molar heat capacity (J/mol/K^2).

    dCp/dT = R (-2 a1 T^-3 - a2 T^-2 + a4 + 2 a5 T + 3 a6 T^2 + 4 a7 T^3)
    """
    dcp_R = (
        -2.0 * a[..., 0] * TT[0] * TT[1]
        - a[..., 1] * TT[0]
        + a[..., 3]
        + 2.0 * a[..., 4] * TT[3]
        + 3.0 * a[..., 5] * TT[4]
        + 4.0 * a[..., 6] * TT[5]
    )
    return dcp_R * R_UNIVERSAL


def enthalpy(TT: np.ndarray, a: np.ndarray) -> np.ndarray | float:
    """Molar enthalpy including formation enthalpy (J/mol)."""
    h_RT = (
        -a[..., 0] * TT[0]
        + a[..., 1] * TT[7] * TT[1]
        + a[..., 2]
        + 0.5 * a[..., 3] * TT[3]
        + a[..., 4] * TT[4] / 3.0
        + 0.25 * a[..., 5] * TT[5]
        + 0.2 * a[..., 6] * TT[6]
        + a[..., 7] * TT[1]
    )
    return h_RT * TT[3] * R_UNIVERSAL


def phi(TT: np.ndarray, a: np.ndarray) -> np.ndarray | float:
    """
    Entropy complement function phi = integral of Cp/T dT (J/mol/K).

    Standard state: Tref = 298.15 K, Pref = 101325 Pa.
    """
    s_R = (
        -0.5 * a[..., 0] * TT[0]
        - a[..., 1] * TT[1]
        + a[..., 2] * TT[7]
        + a[..., 3] * TT[3]
        + 0.5 * a[..., 4] * TT[4]
        + a[..., 5] * TT[5] / 3.0
        + 0.25 * a[..., 6] * TT[6]
        + a[..., 8]
    )
    return s_R * R_UNIVERSAL
