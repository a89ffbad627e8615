"""
Lattice Configuration

Default tolerances and factors, the validated parameter model for Voronoi
lattice generation, and logging setup for applications embedding the library.
"""

import logging
import sys
from typing import Optional

from pydantic import BaseModel, Field

# Absolute model tolerance of the host document (mm-scale models)
DEFAULT_MODEL_TOLERANCE = 0.001

# Struts shorter than MIN_LENGTH_FACTOR * model tolerance are always rejected,
# even when the user tolerance is smaller
MIN_LENGTH_FACTOR = 100

# Smallest allowed strut length for generated lattices
DEFAULT_STRUT_TOLERANCE = 0.2

# Boundary band used when culling sample points
DEFAULT_CONTAINMENT_TOLERANCE = 1e-4

# Outward scale of the sample cloud about its centroid before partitioning
DEFAULT_SCALE_FACTOR = 1.2

# Dihedral angle above which a cell edge counts as a strut
DEFAULT_FEATURE_ANGLE_DEGREES = 1.0

# Upper bound on sampling rounds when filling to the requested count
DEFAULT_MAX_SAMPLING_ROUNDS = 10

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class VoronoiLatticeParams(BaseModel):
    """Parameters for Voronoi lattice generation"""
    num_points: int = Field(gt=0)  # Number of source points to generate
    tolerance: float = Field(default=DEFAULT_STRUT_TOLERANCE, gt=0)  # Smallest allowed strut length
    containment_tolerance: float = Field(default=DEFAULT_CONTAINMENT_TOLERANCE, ge=0)
    strict: bool = False  # Points on the design space boundary count as outside
    scale_factor: float = Field(default=DEFAULT_SCALE_FACTOR, gt=1.0)
    seed: Optional[int] = None  # None draws a fresh random sequence each run
    fill_to_count: bool = False  # Keep sampling until num_points interior points exist
    max_sampling_rounds: int = Field(default=DEFAULT_MAX_SAMPLING_ROUNDS, ge=1)
    extract_struts: bool = True  # Build the strut network from the trimmed cells
    feature_angle_degrees: float = Field(default=DEFAULT_FEATURE_ANGLE_DEGREES, ge=0.0, lt=180.0)
    keep_raw_cells: bool = True  # Return the untrimmed cells alongside the fragments
    model_tolerance: float = Field(default=DEFAULT_MODEL_TOLERANCE, gt=0)


def configure_logging(level: int = logging.INFO) -> None:
    """
    Configure root logging for scripts and applications using lattice_frame.

    Args:
        level: Root logging level
    """
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )

    # Silence noisy third-party loggers
    logging.getLogger('trimesh').setLevel(logging.WARNING)
