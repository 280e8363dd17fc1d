"""
Turbomachinery and flow processes on ideal-gas states.

All operations work through Gas mutations and the enthalpy solver:

- compress / expand: polytropic pressure change at fixed composition
- mix: adiabatic mixing of two streams by mass
- gas_mach: isentropic (or polytropic) change of Mach number at constant
  total enthalpy

compress, expand and gas_mach modify the gas in place and return it; mix
returns a new gas.
"""

from __future__ import annotations

import logging
import math

from gas_thermo.core.constants import COMPRESS_ITERMAX, EPSILON
from gas_thermo.core.exceptions import ConvergenceError, InvalidProcessParameter
from gas_thermo.core.gas import Gas
from gas_thermo.core.solver import advance_temperature, step_converged

logger = logging.getLogger(__name__)


# =============================================================================
# Validation
# =============================================================================

def _check_eta(eta_p: float) -> float:
    eta = float(eta_p)
    if not math.isfinite(eta) or eta <= 0.0:
        raise InvalidProcessParameter(
            f"Polytropic efficiency must be positive, got eta_p = {eta_p}"
        )
    return eta


def _check_pressure_ratio(PR: float) -> float:
    ratio = float(PR)
    if not math.isfinite(ratio) or ratio <= 0.0:
        raise InvalidProcessParameter(
            f"The pressure ratio (PR) must be positive and finite. Provided PR = {PR}."
        )
    return ratio


# =============================================================================
# Compression and expansion
# =============================================================================

def _polytropic_pressure_change(
    gas: Gas,
    PR: float,
    factor: float,
    itermax: int,
    tol: float,
    operation: str,
) -> Gas:
    """
    Solve phi(T2) - phi(T1) = R ln(PR) * factor for T2 and set P = P1 * PR.

    Newton iteration with dphi/dT = cp/T, started from the constant-cp guess
    T2 = T1 PR^(R factor / cp).
    """
    T0 = gas.T
    phi0 = gas.phi
    R = gas.R
    dphi = R * math.log(PR) * factor

    T_guess = T0 * PR ** (R * factor / gas.cp)
    gas.P = gas.P * PR
    gas.T = T_guess

    dT = math.inf
    for i in range(1, itermax + 1):
        res = (gas.phi - phi0) - dphi
        dT = res / gas.phi_T
        advance_temperature(gas, gas.T - dT, operation, res, i)
        logger.debug(f"{operation} iter {i}: T={gas.T:.9g} K, dT={dT:.3e} K")
        if step_converged(dT, gas.T, tol):
            break
    else:
        residual = abs((gas.phi - phi0) - dphi)
        raise ConvergenceError(
            f"{operation} did not converge in {itermax} iterations: "
            f"PR={PR}, T1={T0:.6g} K, last T={gas.T:.6g} K, "
            f"|phi - phi_target|={residual:.3e} J/kg/K, |dT|={abs(dT):.3e} K",
            gas=gas,
            residual=residual,
            step=abs(dT),
            iterations=itermax,
        )

    logger.debug(f"{operation}: PR={PR}, T {T0:.3f} -> {gas.T:.3f} K, P -> {gas.P:.1f} Pa")
    return gas


def compress(
    gas: Gas,
    PR: float,
    eta_p: float = 1.0,
    *,
    itermax: int = COMPRESS_ITERMAX,
    tol: float = EPSILON,
) -> Gas:
    """
    Compress a gas by pressure ratio PR with polytropic efficiency eta_p.

    The entropy complement rises by R ln(PR) / eta_p, so eta_p < 1 gives a
    hotter outlet than isentropic compression.

    Args:
        gas: Gas to compress in place
        PR: Pressure ratio P2/P1, must be >= 1
        eta_p: Polytropic efficiency (0 < eta_p)
        itermax: Maximum Newton iterations
        tol: Convergence tolerance on the temperature step (K)

    Returns:
        The same gas at the outlet state

    Raises:
        InvalidProcessParameter: If PR < 1 or eta_p <= 0
        ConvergenceError: If the temperature iteration does not converge

    Example:
        >>> gas = Gas(registry)
        >>> compress(gas, 2.0).T
        363.3...
    """
    ratio = _check_pressure_ratio(PR)
    if ratio < 1.0:
        raise InvalidProcessParameter(
            f"The specified pressure ratio (PR) to compress by needs to be ≥ 1.0. "
            f"Provided PR = {PR}. Did you mean to use `expand`?"
        )
    eta = _check_eta(eta_p)
    return _polytropic_pressure_change(gas, ratio, 1.0 / eta, itermax, tol, "compress")


def expand(
    gas: Gas,
    PR: float,
    eta_p: float = 1.0,
    *,
    itermax: int = COMPRESS_ITERMAX,
    tol: float = EPSILON,
) -> Gas:
    """
    Expand a gas by pressure ratio PR with polytropic efficiency eta_p.

    The entropy complement changes by R ln(PR) * eta_p, so eta_p < 1 gives a
    hotter outlet than isentropic expansion.

    Args:
        gas: Gas to expand in place
        PR: Pressure ratio P2/P1, must be <= 1
        eta_p: Polytropic efficiency (0 < eta_p)

    Returns:
        The same gas at the outlet state

    Raises:
        InvalidProcessParameter: If PR > 1 or eta_p <= 0
        ConvergenceError: If the temperature iteration does not converge
    """
    ratio = _check_pressure_ratio(PR)
    if ratio > 1.0:
        raise InvalidProcessParameter(
            f"The specified pressure ratio (PR) to expand by needs to be ≤ 1.0. "
            f"Provided PR = {PR}. Did you mean to use `compress`?"
        )
    eta = _check_eta(eta_p)
    return _polytropic_pressure_change(gas, ratio, eta, itermax, tol, "expand")


# =============================================================================
# Mixing
# =============================================================================

def mix(gas_a: Gas, gas_b: Gas, ratio: float, P: float | None = None) -> Gas:
    """
    Adiabatically mix two gas streams.

    ``ratio`` is the mass flow of B per unit mass flow of A. The mixed
    composition and specific enthalpy are the mass-weighted averages

        Y = (Y_a + ratio Y_b) / (1 + ratio)
        h = (h_a + ratio h_b) / (1 + ratio)

    and the temperature follows from h via the enthalpy solver.

    Args:
        gas_a: First stream (not modified)
        gas_b: Second stream (not modified)
        ratio: Mass flow ratio m_b / m_a, must be >= 0
        P: Pressure of the mixed stream (Pa); the lower inlet pressure if None

    Returns:
        New Gas at the mixed state

    Raises:
        InvalidProcessParameter: If ratio is negative or the two gases use
            different species registries
        ConvergenceError: If the temperature solve does not converge
    """
    r = float(ratio)
    if not math.isfinite(r) or r < 0.0:
        raise InvalidProcessParameter(f"Mixing ratio must be >= 0, got {ratio}")
    if not gas_a.registry.is_compatible(gas_b.registry):
        raise InvalidProcessParameter(
            "Cannot mix gases defined on different species registries: "
            f"{list(gas_a.registry.names)} vs {list(gas_b.registry.names)}"
        )

    w = 1.0 + r
    Y = (gas_a.Y + r * gas_b.Y) / w
    h = (gas_a.h + r * gas_b.h) / w
    T_guess = (gas_a.T + r * gas_b.T) / w
    P_mix = min(gas_a.P, gas_b.P) if P is None else P

    mixed = Gas(gas_a.registry, Y, T=T_guess, P=P_mix)
    mixed.set_h(h)
    logger.debug(
        f"mix: T_a={gas_a.T:.3f} K, T_b={gas_b.T:.3f} K, ratio={r} -> T={mixed.T:.3f} K"
    )
    return mixed


# =============================================================================
# Mach number change
# =============================================================================

def gas_mach(
    gas: Gas,
    M0: float,
    M: float,
    eta_p: float = 1.0,
    *,
    itermax: int = COMPRESS_ITERMAX,
    tol: float = EPSILON,
) -> Gas:
    """
    Change the Mach number of a flow at constant total enthalpy.

    Solves h(T) + M^2 gamma(T) R T / 2 = h0 + M0^2 gamma0 R T0 / 2 for the
    static temperature T, then updates the pressure polytropically:
    ln(P/P0) = e (phi - phi0) / R with e = eta_p when the gas heats up and
    1/eta_p when it cools.

    Args:
        gas: Gas at the initial static state, modified in place
        M0: Initial Mach number
        M: Final Mach number
        eta_p: Polytropic efficiency

    Returns:
        The same gas at the final static state

    Raises:
        InvalidProcessParameter: If a Mach number is negative or eta_p <= 0
        ConvergenceError: If the temperature iteration does not converge
    """
    if M0 < 0.0 or M < 0.0:
        raise InvalidProcessParameter(f"Mach numbers must be >= 0, got M0={M0}, M={M}")
    eta = _check_eta(eta_p)

    T0 = gas.T
    P0 = gas.P
    phi0 = gas.phi
    R = gas.R
    h_total = gas.h + 0.5 * M0 ** 2 * gas.gamma * R * T0

    # constant-gamma estimate
    g = gas.gamma
    gas.T = T0 * (1.0 + 0.5 * (g - 1.0) * M0 ** 2) / (1.0 + 0.5 * (g - 1.0) * M ** 2)

    dT = math.inf
    for i in range(1, itermax + 1):
        gamma = gas.gamma
        res = gas.h + 0.5 * M ** 2 * gamma * R * gas.T - h_total
        # d(gamma)/dT = -R cp_T / (cp - R)^2
        dgamma_dT = -R * gas.cp_T / (gas.cp - R) ** 2
        res_T = gas.cp + 0.5 * M ** 2 * R * (gamma + gas.T * dgamma_dT)
        dT = res / res_T
        advance_temperature(gas, gas.T - dT, "gas_mach", res, i)
        logger.debug(f"gas_mach iter {i}: T={gas.T:.9g} K, dT={dT:.3e} K")
        if step_converged(dT, gas.T, tol):
            break
    else:
        residual = abs(gas.h + 0.5 * M ** 2 * gas.gamma * R * gas.T - h_total)
        raise ConvergenceError(
            f"gas_mach did not converge in {itermax} iterations: "
            f"M0={M0}, M={M}, last T={gas.T:.6g} K, "
            f"|h_t - h_t0|={residual:.3e} J/kg, |dT|={abs(dT):.3e} K",
            gas=gas,
            residual=residual,
            step=abs(dT),
            iterations=itermax,
        )

    e = eta if gas.T >= T0 else 1.0 / eta
    gas.P = P0 * math.exp(e * (gas.phi - phi0) / R)
    return gas
