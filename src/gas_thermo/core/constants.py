"""
Physical constants and solver defaults.

Units used throughout the package are fixed: Kelvin, Pascal, Joules and
grams per mole.
"""

from __future__ import annotations

# =============================================================================
# Physical constants
# =============================================================================

R_UNIVERSAL = 8.3145  # J/mol/K
T_STD = 298.15  # K
P_STD = 101325.0  # Pa

# Low/high coefficient sets of every species switch here
T_SWITCH = 1000.0  # K

# =============================================================================
# Solver defaults
# =============================================================================

EPSILON = 1e-12  # K, Newton step tolerance
SET_H_ITERMAX = 20
COMPRESS_ITERMAX = 25

# Default composition used by Gas() when none is given
DEFAULT_SPECIES = "Air"
