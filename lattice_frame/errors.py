"""
Lattice Errors

Exception types raised when a lattice operation cannot continue.

Recoverable, per-item problems (a degenerate strut, an exterior sample point)
are reported through result objects instead. These exceptions cover the
empty intermediate states and the geometry kernel failures that halt a
pipeline stage.
"""

from typing import Optional


class LatticeError(Exception):
    """Base class for all lattice_frame errors."""


class InvalidDesignSpaceError(LatticeError, ValueError):
    """Design space is not a closed Brep, closed mesh or solid surface."""


class EmptySampleError(LatticeError):
    """No sample points ended up inside the design space."""


class EmptyNetworkError(LatticeError):
    """No valid struts remain after consolidation."""


class PipelineStageError(LatticeError):
    """
    A geometry kernel stage rejected its input.

    Attributes:
        stage: Name of the stage that failed (e.g. 'voronoi', 'boolean')
        index: Index of the offending input item, if a single item caused it
    """

    stage = "pipeline"

    def __init__(self, message: str, index: Optional[int] = None):
        self.index = index
        if index is not None:
            message = f"{message} (item {index})"
        super().__init__(f"[{self.stage}] {message}")


class VoronoiError(PipelineStageError):
    """Voronoi partition could not be computed (degenerate or coincident points)."""

    stage = "voronoi"


class BooleanIntersectionError(PipelineStageError):
    """Boolean intersection of a cell with the trimming solid failed."""

    stage = "boolean"
