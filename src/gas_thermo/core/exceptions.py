"""Exception types raised by the gas thermodynamics core."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from gas_thermo.core.gas import Gas


class GasThermoError(Exception):
    """Base class for all errors raised by gas_thermo."""


class ConvergenceError(GasThermoError, RuntimeError):
    """
    A Newton iteration did not reach tolerance within its iteration cap, or
    stepped to a non-positive or non-finite temperature.

    The gas is left at its last (non-converged) iterate and must be treated
    as unusable by the caller.

    Attributes:
        gas: The gas state at the final iterate
        residual: Magnitude of the equation residual at the final iterate,
            in the units of the solved relation (J/kg for enthalpy,
            J/kg/K for phi)
        step: Magnitude of the last temperature step (K)
        iterations: Number of iterations performed
    """

    def __init__(
        self,
        message: str,
        gas: "Gas | None" = None,
        residual: float = float("nan"),
        step: float = float("nan"),
        iterations: int = 0,
    ):
        super().__init__(message)
        self.gas = gas
        self.residual = residual
        self.step = step
        self.iterations = iterations


class InvalidProcessParameter(GasThermoError, ValueError):
    """A process operation was given a parameter outside its valid range."""


class InvalidPropertyAssignment(GasThermoError, AttributeError):
    """Assignment to a read-only property, or with an unsupported value."""


class UnknownSpecies(GasThermoError, KeyError):
    """A species name is not present in the registry."""

    def __init__(self, name: str, available: Iterable[str] = ()):
        self.name = name
        self.available = tuple(available)
        listing = ", ".join(self.available) or "(none)"
        super().__init__(f"Unknown species '{name}'. Available: {listing}")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0])


class ThermoDataError(GasThermoError, ValueError):
    """The thermodynamic data file is malformed or violates an invariant."""
