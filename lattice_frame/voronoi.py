"""
Voronoi Partition

Bounded 3D Voronoi cells for a set of seed points.

Each cell is built from its definition: the intersection of the half-spaces
closer to its seed than to every other seed, closed by the six faces of an
enclosing box. Cells come back as closed convex meshes, one per seed and in
seed order, and together they fill the enclosing box.
"""

import logging
from typing import List, Sequence

import numpy as np
import trimesh
from scipy.spatial import HalfspaceIntersection, QhullError, cKDTree

from lattice_frame.bounds import BoundingBox
from lattice_frame.errors import VoronoiError

logger = logging.getLogger(__name__)

# Seeds closer than this are treated as coincident
DEFAULT_MIN_SEPARATION = 1e-9


def box_halfspaces(box: BoundingBox) -> np.ndarray:
    """
    Half-spaces of an axis-aligned box.

    Half-spaces are in the form: a_x x + a_y y + a_z z + d <= 0
    """
    (xmin, ymin, zmin), (xmax, ymax, zmax) = box.min_point, box.max_point
    return np.array([
        [1.0, 0.0, 0.0, -xmax],   # x <= xmax
        [-1.0, 0.0, 0.0, xmin],   # x >= xmin
        [0.0, 1.0, 0.0, -ymax],   # y <= ymax
        [0.0, -1.0, 0.0, ymin],   # y >= ymin
        [0.0, 0.0, 1.0, -zmax],   # z <= zmax
        [0.0, 0.0, -1.0, zmin],   # z >= zmin
    ], dtype=np.float64)


def bisector_halfspaces(points: np.ndarray, i: int) -> np.ndarray:
    """
    Half-spaces closer to points[i] than to every other point.

    ||x - pi||^2 <= ||x - pj||^2  for all j != i
    => 2(pj - pi).x - (||pj||^2 - ||pi||^2) <= 0
    """
    pi = points[i]
    others = np.delete(points, i, axis=0)
    normals = 2.0 * (others - pi)
    offsets = -(np.einsum('ij,ij->i', others, others) - np.dot(pi, pi))

    # Unit normals keep the constraints on a common scale for qhull
    norms = np.linalg.norm(normals, axis=1)
    return np.column_stack([normals / norms[:, None], offsets / norms])


def find_coincident_points(points: np.ndarray, min_separation: float = DEFAULT_MIN_SEPARATION) -> List[tuple]:
    """Sorted index pairs (i, j), i < j, of points closer than min_separation."""
    if len(points) < 2:
        return []
    return sorted(cKDTree(points).query_pairs(min_separation))


def voronoi_cell(points: np.ndarray, i: int, box: BoundingBox) -> trimesh.Trimesh:
    """
    Build the bounded Voronoi cell of points[i].

    Raises:
        VoronoiError: If the cell cannot be constructed
    """
    halfspaces = np.vstack([bisector_halfspaces(points, i), box_halfspaces(box)])

    # The seed itself is strictly inside its own cell
    try:
        intersection = HalfspaceIntersection(halfspaces, points[i])
    except (QhullError, ValueError) as e:
        raise VoronoiError(f"Half-space intersection failed: {e}", index=i) from e

    vertices = np.clip(intersection.intersections, box.min_point, box.max_point)
    if len(vertices) < 4:
        raise VoronoiError("Degenerate cell (too few vertices)", index=i)

    try:
        cell = trimesh.convex.convex_hull(vertices)
    except Exception as e:
        raise VoronoiError(f"Convex hull construction failed: {e}", index=i) from e

    if not cell.is_watertight or cell.volume <= 0:
        raise VoronoiError("Cell is not a closed solid", index=i)

    return cell


def voronoi_partition(
    points: Sequence,
    box: BoundingBox,
    min_separation: float = DEFAULT_MIN_SEPARATION
) -> List[trimesh.Trimesh]:
    """
    Partition an enclosing box into the Voronoi cells of points.

    Args:
        points: (N, 3) seed points, strictly inside box
        box: Enclosing box closing the outer cells
        min_separation: Seeds closer than this are rejected as coincident

    Returns:
        One closed convex cell mesh per seed, in seed order

    Raises:
        VoronoiError: For empty input, a degenerate box, seeds outside the
            box, coincident seeds, or a cell that cannot be built
    """
    points = np.asarray(points, dtype=np.float64).reshape(-1, 3)

    if len(points) == 0:
        raise VoronoiError("No seed points to partition")
    if box.is_degenerate:
        raise VoronoiError(f"Enclosing box is degenerate ({box})")

    strictly_inside = np.all((points > box.min_point) & (points < box.max_point), axis=1)
    if not np.all(strictly_inside):
        raise VoronoiError("Seed point is not strictly inside the enclosing box",
                           index=int(np.flatnonzero(~strictly_inside)[0]))

    coincident = find_coincident_points(points, min_separation)
    if coincident:
        i, j = coincident[0]
        raise VoronoiError(f"Seed points {i} and {j} are coincident", index=j)

    logger.info(f"Computing Voronoi partition of {len(points)} points")

    if len(points) == 1:
        return [trimesh.creation.box(bounds=np.vstack([box.min_point, box.max_point]))]

    cells = [voronoi_cell(points, i, box) for i in range(len(points))]

    logger.info(f"Voronoi partition complete: {len(cells)} cells")
    return cells
