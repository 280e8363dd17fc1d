"""
Conversions between composition representations.

Mass fractions (Y) and mole fractions (X) are dense vectors in registry
order. Sparse name -> value mappings are expanded against a registry and
normalized to sum to 1.
"""

from __future__ import annotations

from typing import Mapping, Sequence

import numpy as np

from gas_thermo.core.exceptions import InvalidPropertyAssignment
from gas_thermo.core.species import SpeciesRegistry


def Y2X(Y: Sequence[float] | np.ndarray, MW: np.ndarray) -> np.ndarray:
    """
    Convert mass fractions to mole fractions.

    X_i = (Y_i / MW_i) / sum_j (Y_j / MW_j)
    """
    num = np.asarray(Y, dtype=float) / MW
    return num / num.sum()


def X2Y(X: Sequence[float] | np.ndarray, MW: np.ndarray) -> np.ndarray:
    """
    Convert mole fractions to mass fractions.

    Y_i = (X_i MW_i) / sum_j (X_j MW_j)
    """
    num = np.asarray(X, dtype=float) * MW
    return num / num.sum()


def mixture_MW(Y: np.ndarray, MW: np.ndarray) -> float:
    """Mean molecular weight (g/mol) of a mixture with mass fractions Y."""
    return 1.0 / float(np.dot(Y, 1.0 / MW))


def normalize(values: Sequence[float] | np.ndarray, n_species: int) -> np.ndarray:
    """
    Validate a dense fraction vector and scale it to sum to 1.

    Args:
        values: Fractions in registry order
        n_species: Expected vector length

    Returns:
        New normalized float array

    Raises:
        InvalidPropertyAssignment: If the vector has the wrong length or
            type, contains negative or non-finite entries, or sums to zero
    """
    try:
        arr = np.array(values, dtype=float)
    except (TypeError, ValueError):
        raise InvalidPropertyAssignment(
            f"Composition must be a numeric sequence, got {type(values).__name__}"
        ) from None

    if arr.ndim != 1 or arr.shape[0] != n_species:
        raise InvalidPropertyAssignment(
            f"Composition vector must have {n_species} entries (one per species), "
            f"got shape {arr.shape}"
        )
    if not np.all(np.isfinite(arr)):
        raise InvalidPropertyAssignment("Composition contains non-finite values")
    if np.any(arr < 0.0):
        raise InvalidPropertyAssignment("Composition fractions cannot be negative")

    total = arr.sum()
    if total <= 0.0:
        raise InvalidPropertyAssignment("Composition fractions sum to zero")
    return arr / total


def mapping_to_array(
    fractions: Mapping[str, float],
    registry: SpeciesRegistry,
) -> np.ndarray:
    """
    Expand a sparse name -> fraction mapping into a normalized dense vector.

    Unnamed species get zero. The result sums to 1.

    Raises:
        UnknownSpecies: If a name is not in the registry
        InvalidPropertyAssignment: If ``fractions`` is not a mapping or the
            values are invalid (see ``normalize``)
    """
    if not isinstance(fractions, Mapping):
        raise InvalidPropertyAssignment(
            f"Expected a name -> fraction mapping, got {type(fractions).__name__}"
        )
    arr = np.zeros(len(registry), dtype=float)
    for name, value in fractions.items():
        try:
            arr[registry.index(name)] = value
        except (TypeError, ValueError):
            raise InvalidPropertyAssignment(
                f"Fraction for '{name}' must be a number, got {value!r}"
            ) from None
    return normalize(arr, len(registry))


def array_to_mapping(
    values: np.ndarray,
    registry: SpeciesRegistry,
    skip_zeros: bool = False,
) -> dict[str, float]:
    """Map a dense vector back to species names."""
    return {
        name: float(v)
        for name, v in zip(registry.names, values)
        if not (skip_zeros and v == 0.0)
    }
