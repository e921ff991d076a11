"""
Engineering constants for flugelhorn geometry.

This module centralizes the numerical constants used by the calculator,
validation and geometry modules. Always include units in constant names
(_MM, _DEG, _IN, _PERCENT).

Constants are grouped by category:
- Units
- Instrument dimensions: receiver and valve defaults
- Manufacturing: FDM printing constraints
- Sampling: slice density guidance for lofted tubes
"""

# =============================================================================
# Units
# =============================================================================

# Brass bores are quoted in inches by every maker
MM_PER_INCH: float = 25.4


def inches(value_in: float) -> float:
    """Convert inches to millimetres."""
    return value_in * MM_PER_INCH


# =============================================================================
# Instrument dimensions (typical flugelhorn)
# =============================================================================

# Mouthpiece shank taper on diameter (flugelhorn shanks run close to 1:20)
RECEIVER_TAPER_PER_LENGTH: float = 0.05

# Piston valves
DEFAULT_PISTON_CLEARANCE_MM: float = 0.15
MAX_PISTON_CLEARANCE_MM: float = 0.3

# =============================================================================
# Manufacturing
# =============================================================================

# Two 0.4mm nozzle perimeters
MIN_WALL_MM: float = 0.8
DEFAULT_WALL_MM: float = 1.2

# Inner loft extension beyond tube ends so the bore opens cleanly in
# boolean subtraction
BORE_OVERCUT_MM: float = 0.05

# Above this wall compensation factor (sqrt(slope^2 + 1)) the flare is
# steep enough to mention
STEEP_FLARE_FACTOR: float = 2.0

# =============================================================================
# Sampling
# =============================================================================

# Production parts need on the order of 100-600 slices
MIN_PRODUCTION_SLICES: int = 100
MAX_REASONABLE_SLICES: int = 600
DEFAULT_SLICES: int = 120
DEFAULT_BELL_SLICES: int = 400

# Ruled lofts visibly facet above these per-slice changes
MAX_TURN_PER_SLICE_DEG: float = 10.0
MAX_RADIUS_STEP_PERCENT: float = 5.0

# Warning threshold for post-build wall measurement
WALL_WARNING_THRESHOLD_MM: float = MIN_WALL_MM
