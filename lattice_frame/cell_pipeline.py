"""
Cell Pipeline

Turns interior sample points into Voronoi cells trimmed to the design space.

Pipeline:
1. Compute the centroid of the sample points
2. Scale a copy of the points outward from the centroid (1.2x by default)
3. Partition the bounding box of the scaled cloud into the Voronoi cells of
   the original points - the enlarged box keeps the true boundary of the
   design space away from the box faces. Flat axes of that box (a single
   point, or points in a plane) take the design space extent instead
4. Intersect every cell with the design space and collect the fragments

Each stage either completes or raises; there are no partial outputs.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

import numpy as np
import trimesh

from lattice_frame.booleans import intersect_cells
from lattice_frame.bounds import BoundingBox
from lattice_frame.config import DEFAULT_SCALE_FACTOR
from lattice_frame.design_space import DesignSpace
from lattice_frame.errors import EmptySampleError
from lattice_frame.voronoi import voronoi_partition

logger = logging.getLogger(__name__)


@dataclass
class CellPipelineResult:
    """Result of the cell pipeline."""
    # Trimmed solid fragments (flattened over all cells)
    fragments: List[trimesh.Trimesh]
    # Source cell (= source point) index for each fragment
    fragment_cells: List[int]
    # Untrimmed cells, one per point; None unless kept
    raw_cells: Optional[List[trimesh.Trimesh]]
    # Centroid of the input points
    centroid: np.ndarray
    # Box the Voronoi partition was closed with
    enclosing_box: BoundingBox
    # Cells with nothing left after trimming
    empty_cells: List[int]

    @property
    def fragment_count(self) -> int:
        return len(self.fragments)

    @property
    def trimmed_cell_count(self) -> int:
        """Number of cells contributing at least one fragment."""
        return len(set(self.fragment_cells))

    def fragments_for_cell(self, index: int) -> List[trimesh.Trimesh]:
        return [f for f, c in zip(self.fragments, self.fragment_cells) if c == index]


def compute_centroid(points: np.ndarray) -> np.ndarray:
    """
    Arithmetic mean of points per axis.

    Raises:
        EmptySampleError: If there are no points
    """
    points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    if len(points) == 0:
        raise EmptySampleError("No interior points to compute a centroid from")
    return points.mean(axis=0)


def scale_points(points: np.ndarray, centre: np.ndarray, factor: float = DEFAULT_SCALE_FACTOR) -> np.ndarray:
    """Scale points about centre: p' = centre + factor * (p - centre)."""
    points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    return centre + factor * (points - centre)


def enclosing_box(
    scaled: np.ndarray,
    design_space: DesignSpace,
    scale_factor: float = DEFAULT_SCALE_FACTOR
) -> BoundingBox:
    """
    Bounding box of the scaled cloud, widened on flat axes.

    A single point, or points sharing a coordinate, give a box with zero
    extent along some axis. Those axes take the extent of the design space
    bounding box scaled about its centre by scale_factor instead.
    """
    box = BoundingBox.from_points(scaled)
    flat = box.size <= 0.0
    if not np.any(flat):
        return box

    design_box = design_space.bounding_box().axis_aligned()
    centre = design_box.center
    lo = centre - scale_factor * (centre - design_box.min_point)
    hi = centre + scale_factor * (design_box.max_point - centre)

    min_point = np.where(flat, np.minimum(lo, box.min_point), box.min_point)
    max_point = np.where(flat, np.maximum(hi, box.max_point), box.max_point)
    logger.debug(f"Enclosing box widened on {int(flat.sum())} flat axis(es)")
    return BoundingBox(min_point=min_point, max_point=max_point)


def run_cell_pipeline(
    points: np.ndarray,
    design_space,
    scale_factor: float = DEFAULT_SCALE_FACTOR,
    keep_raw_cells: bool = True
) -> CellPipelineResult:
    """
    Compute Voronoi cells of points trimmed to the design space.

    Args:
        points: (N, 3) interior sample points
        design_space: DesignSpace or classifiable geometry used as the
            trimming solid
        scale_factor: Outward scale of the cloud for the enclosing box
        keep_raw_cells: Whether to return the untrimmed cells

    Returns:
        CellPipelineResult with fragments and their source cells

    Raises:
        EmptySampleError: If points is empty
        InvalidDesignSpaceError: If design_space cannot be classified
        VoronoiError: If the partition fails
        BooleanIntersectionError: If trimming a cell fails
    """
    points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    design_space = DesignSpace.from_geometry(design_space)

    # Steps 1 & 2: centroid and outward-scaled cloud
    centroid = compute_centroid(points)
    scaled = scale_points(points, centroid, scale_factor)

    # Step 3: partition the enlarged box with the original points
    box = enclosing_box(scaled, design_space, scale_factor)
    logger.info(f"Cell pipeline: {len(points)} points, enclosing box {box}")
    cells = voronoi_partition(points, box)

    # Step 4: trim to the true design space
    trimmed = intersect_cells(cells, design_space.to_manifold())

    if len(trimmed.fragments) > len(points):
        logger.info(f"{len(trimmed.fragments)} fragments from {len(points)} cells: "
                    f"some cells cross the boundary in disjoint pieces")

    return CellPipelineResult(
        fragments=trimmed.fragments,
        fragment_cells=trimmed.fragment_cells,
        raw_cells=cells if keep_raw_cells else None,
        centroid=centroid,
        enclosing_box=box,
        empty_cells=trimmed.empty_cells
    )
