"""
Boolean Trimming

Trims Voronoi cells to the design space by CSG intersection.

Uses manifold3d as the CSG engine - it's fast and robust, built on the
Manifold library which is used in 3D printing slicers. Each cell is
intersected with the trimming solid and the result is decomposed into its
disjoint pieces: a cell crossing a concave boundary can yield several
fragments, and a cell can also vanish entirely. Both are valid outcomes.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np
import trimesh
from manifold3d import Manifold, Mesh

from lattice_frame.errors import BooleanIntersectionError

logger = logging.getLogger(__name__)


@dataclass
class CellValidation:
    """Results of trimmed cell validation."""
    is_closed: bool
    volume: Optional[float]
    vertex_count: int
    face_count: int


@dataclass
class TrimResult:
    """Fragments produced by trimming a list of cells."""
    # Disjoint solid pieces, in cell order
    fragments: List[trimesh.Trimesh]
    # Index of the source cell for every fragment, 1:1 with fragments
    fragment_cells: List[int]
    # Cells that had no material left inside the trimming solid
    empty_cells: List[int]


def validate_cell_mesh(mesh: trimesh.Trimesh) -> CellValidation:
    """Validate the properties of a trimmed cell mesh."""
    is_closed = mesh.is_watertight

    volume = None
    if is_closed:
        volume = float(mesh.volume)

    return CellValidation(
        is_closed=is_closed,
        volume=volume,
        vertex_count=len(mesh.vertices),
        face_count=len(mesh.faces)
    )


def trimesh_to_manifold(mesh: trimesh.Trimesh) -> Manifold:
    """
    Convert a trimesh mesh to a Manifold object.

    Args:
        mesh: The trimesh mesh to convert

    Returns:
        Manifold object for CSG operations (empty if the mesh is not a
        closed 2-manifold)
    """
    # Get vertices and faces as numpy arrays with correct dtypes
    vertices = np.asarray(mesh.vertices, dtype=np.float32)
    faces = np.asarray(mesh.faces, dtype=np.uint32)

    manifold_mesh = Mesh(vert_properties=vertices, tri_verts=faces)
    return Manifold(mesh=manifold_mesh)


def manifold_to_trimesh(manifold: Manifold) -> trimesh.Trimesh:
    """
    Convert a Manifold object back to trimesh.

    Args:
        manifold: The Manifold object to convert

    Returns:
        trimesh.Trimesh mesh
    """
    manifold_mesh = manifold.to_mesh()

    # Only the position columns; extra vertex properties are dropped
    vertices = np.asarray(manifold_mesh.vert_properties, dtype=np.float64)[:, :3]
    faces = np.asarray(manifold_mesh.tri_verts, dtype=np.int64)

    return trimesh.Trimesh(
        vertices=vertices,
        faces=faces,
        process=True
    )


def intersect_cell(cell: trimesh.Trimesh, trimming_solid: Manifold, index: int) -> List[trimesh.Trimesh]:
    """
    Intersect a single cell with the trimming solid.

    Args:
        cell: Closed convex cell mesh
        trimming_solid: Design space as a Manifold
        index: Cell index, used for error reporting

    Returns:
        Disjoint fragments of the intersection (possibly none)

    Raises:
        BooleanIntersectionError: If the cell is not a valid solid or the
            intersection cannot be resolved
    """
    if len(cell.faces) == 0:
        raise BooleanIntersectionError("Cell mesh is empty", index=index)

    try:
        cell_manifold = trimesh_to_manifold(cell)
    except Exception as e:
        raise BooleanIntersectionError(f"Cell could not be converted to a solid: {e}", index=index) from e

    if cell_manifold.is_empty():
        raise BooleanIntersectionError("Cell is not a closed manifold solid", index=index)

    try:
        result = cell_manifold ^ trimming_solid
        pieces = [] if result.is_empty() else result.decompose()
        fragments = [manifold_to_trimesh(piece) for piece in pieces]
    except Exception as e:
        raise BooleanIntersectionError(f"Intersection failed: {e}", index=index) from e

    fragments = [f for f in fragments if len(f.faces) > 0]
    for fragment in fragments:
        validation = validate_cell_mesh(fragment)
        if not validation.is_closed or validation.volume <= 0:
            raise BooleanIntersectionError(
                f"Intersection produced an open or empty fragment "
                f"({validation.face_count} faces, volume={validation.volume})", index=index)

    return fragments


def intersect_cells(cells: Sequence[trimesh.Trimesh], trimming_solid: Manifold) -> TrimResult:
    """
    Intersect every cell with the trimming solid and collect the fragments.

    The stage either completes for every cell or raises for the first
    failing cell; partial fragment lists are never returned.

    Args:
        cells: Closed cell meshes
        trimming_solid: Design space as a Manifold

    Returns:
        TrimResult with fragments and their source cell indices
    """
    if trimming_solid.is_empty():
        raise BooleanIntersectionError("Trimming solid is empty")

    logger.info(f"Trimming {len(cells)} cells to design space...")

    fragments: List[trimesh.Trimesh] = []
    fragment_cells: List[int] = []
    empty_cells: List[int] = []

    for i, cell in enumerate(cells):
        pieces = intersect_cell(cell, trimming_solid, i)
        if not pieces:
            empty_cells.append(i)
        elif len(pieces) > 1:
            logger.debug(f"Cell {i} split into {len(pieces)} fragments by the boundary")
        fragments.extend(pieces)
        fragment_cells.extend([i] * len(pieces))

    logger.info(f"Trimming complete: {len(fragments)} fragments from {len(cells)} cells "
                f"({len(empty_cells)} empty)")

    return TrimResult(
        fragments=fragments,
        fragment_cells=fragment_cells,
        empty_cells=empty_cells
    )
