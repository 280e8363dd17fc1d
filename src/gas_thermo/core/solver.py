"""
Enthalpy inversion and composite state setters.

``set_h`` finds the temperature at which the gas enthalpy equals a target
with a damped Newton-Raphson iteration. The derivative is cp, since dh/dT = cp
for the polynomial model. In the second half of the iteration budget the step
is scaled by i/itermax so that iterates straddling the 1000 K coefficient
switch do not fall into a 2-cycle.

A step counts as converged when |dT| <= tol, or when it is within a few ulps
of T, below which rounding noise in h or phi sets the step size.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

import numpy as np

from gas_thermo.core.constants import EPSILON, SET_H_ITERMAX
from gas_thermo.core.exceptions import ConvergenceError

if TYPE_CHECKING:
    from gas_thermo.core.gas import Gas

logger = logging.getLogger(__name__)

# steps within this many ulps of T are at the floating-point resolution of T
ULPS_AT_CONVERGENCE = 16


def step_converged(dT: float, T: float, tol: float = EPSILON) -> bool:
    """True if a Newton temperature step is within tolerance."""
    return abs(dT) <= max(tol, ULPS_AT_CONVERGENCE * float(np.spacing(T)))


def advance_temperature(
    gas: Gas,
    T_new: float,
    operation: str,
    residual: float,
    iterations: int,
) -> None:
    """
    Move a Newton iterate to ``T_new`` through the temperature setter.

    Raises:
        ConvergenceError: If ``T_new`` is not a positive, finite temperature.
            The gas stays at its current iterate.
    """
    if not math.isfinite(T_new) or T_new <= 0.0:
        raise ConvergenceError(
            f"{operation} stepped out of the valid temperature range after "
            f"{iterations} iterations: T={gas.T:.6g} K, next iterate {T_new:.6g} K",
            gas=gas,
            residual=abs(residual),
            step=abs(T_new - gas.T),
            iterations=iterations,
        )
    gas.T = T_new


def set_h(
    gas: Gas,
    h: float,
    *,
    itermax: int = SET_H_ITERMAX,
    tol: float = EPSILON,
) -> Gas:
    """
    Set the specific enthalpy of a gas by solving for its temperature.

    Starts from the current temperature. Every iterate goes through the
    normal temperature setter, so cached properties stay consistent.

    Args:
        gas: Gas to modify in place
        h: Target specific enthalpy (J/kg)
        itermax: Maximum Newton iterations
        tol: Convergence tolerance on the temperature step (K)

    Returns:
        The same gas

    Raises:
        ConvergenceError: If |dT| > tol after ``itermax`` iterations, or if
            a step would leave T <= 0. The gas is left at the last iterate
            and the error carries |h - h_target| as ``residual``.

    Example:
        >>> gas = Gas(registry)
        >>> set_h(gas, 0.0).T
        302.4...
    """
    h_target = float(h)
    dT = math.inf
    damping_logged = False

    for i in range(1, itermax + 1):
        res = gas.h - h_target
        dT = -res / gas.cp
        logger.debug(f"set_h iter {i}: T={gas.T:.9g} K, dT={dT:.3e} K")
        if step_converged(dT, gas.T, tol):
            break
        if i > itermax / 2:
            if not damping_logged:
                logger.warning(
                    f"set_h: no convergence after {i - 1} iterations "
                    f"(T={gas.T:.3f} K), damping Newton steps"
                )
                damping_logged = True
            dT *= i / itermax
        advance_temperature(gas, gas.T + dT, "set_h", res, i)

    if not step_converged(dT, gas.T, tol):
        residual = abs(gas.h - h_target)
        raise ConvergenceError(
            f"set_h did not converge in {itermax} iterations: "
            f"target h={h_target:.6g} J/kg, last T={gas.T:.6g} K, "
            f"|h - h_target|={residual:.3e} J/kg, |dT|={abs(dT):.3e} K",
            gas=gas,
            residual=residual,
            step=abs(dT),
            iterations=itermax,
        )
    return gas


def set_dh(gas: Gas, dh: float, eta_p: float = 1.0) -> Gas:
    """
    Add work ``dh`` (J/kg) to a gas and update the pressure polytropically.

    The temperature follows from the new enthalpy h + dh; the pressure from
    ln(P/P0) = eta_p (phi - phi0) / R, so eta_p = 1 keeps entropy constant.

    Args:
        gas: Gas to modify in place
        dh: Enthalpy change (J/kg); positive for compression work
        eta_p: Polytropic efficiency

    Returns:
        The same gas
    """
    P0 = gas.P
    phi0 = gas.phi
    set_h(gas, gas.h + dh)
    gas.P = P0 * math.exp(eta_p / gas.R * (gas.phi - phi0))
    return gas


def set_hP(gas: Gas, h: float, P: float) -> Gas:
    """Set enthalpy (J/kg) first, then pressure (Pa)."""
    set_h(gas, h)
    gas.P = P
    return gas


def set_TP(gas: Gas, T: float, P: float) -> Gas:
    """Set temperature (K) first, then pressure (Pa)."""
    gas.T = T
    gas.P = P
    return gas
