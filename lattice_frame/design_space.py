"""
Design Space

Uniform containment and distance queries over the solid representations a
design space may be given in:

- BREP: a manifold3d.Manifold (closed boundary representation)
- MESH: a watertight trimesh.Trimesh (open meshes have no inside)
- SOLID_SURFACE: a trimesh primitive (box, sphere, cylinder, ...) enclosing
  a volume; it is converted to its Brep equivalent before any query

A design space is classified once; the DesignSpace subclass registered for
that kind then answers every query. Supporting a new representation means
adding one subclass and one table entry.
"""

import logging
from enum import Enum
from typing import Optional, Tuple, Union

import numpy as np
import trimesh
from manifold3d import Manifold
from scipy.spatial import cKDTree

from lattice_frame.booleans import manifold_to_trimesh, trimesh_to_manifold
from lattice_frame.bounds import OrientedBox, Plane
from lattice_frame.config import DEFAULT_CONTAINMENT_TOLERANCE
from lattice_frame.errors import InvalidDesignSpaceError

logger = logging.getLogger(__name__)


class DesignSpaceKind(Enum):
    """Classification of design space geometry."""
    INVALID = 0
    BREP = 1
    MESH = 2
    SOLID_SURFACE = 3


def classify_design_space(geometry) -> DesignSpaceKind:
    """
    Classify geometry as a design space.

    Args:
        geometry: Candidate design space geometry

    Returns:
        The DesignSpaceKind; INVALID for open meshes, open or empty
        surfaces, empty solids and unsupported types
    """
    if isinstance(geometry, Manifold):
        return DesignSpaceKind.INVALID if geometry.is_empty() else DesignSpaceKind.BREP

    # Primitives are Trimesh subclasses, so they must be checked first
    if isinstance(geometry, trimesh.primitives.Primitive):
        if geometry.is_watertight and geometry.volume > 0:
            return DesignSpaceKind.SOLID_SURFACE
        return DesignSpaceKind.INVALID

    if isinstance(geometry, trimesh.Trimesh):
        if len(geometry.faces) > 0 and geometry.is_watertight:
            return DesignSpaceKind.MESH
        return DesignSpaceKind.INVALID

    return DesignSpaceKind.INVALID


def _as_points(points) -> Tuple[np.ndarray, bool]:
    """(N, 3) float array and whether the input was a single point."""
    arr = np.asarray(points, dtype=np.float64)
    single = arr.ndim == 1
    return arr.reshape(-1, 3), single


def points_inside_mesh(
    mesh: trimesh.Trimesh,
    points: np.ndarray,
    tol: float,
    strict: bool
) -> np.ndarray:
    """
    Containment test against a closed mesh with a boundary band.

    Points within tol of the surface are inside when strict is False and
    outside when strict is True; all other points follow the ray-cast
    inside/outside test.

    Args:
        mesh: Closed query mesh
        points: (N, 3) query points
        tol: Width of the boundary band
        strict: Whether the boundary band counts as outside

    Returns:
        (N,) boolean array
    """
    if len(points) == 0:
        return np.zeros(0, dtype=bool)

    inside = np.asarray(mesh.contains(points), dtype=bool)

    # Only points whose nearest vertex is within tol + longest edge can be
    # within tol of the surface
    vertex_dist, _ = cKDTree(mesh.vertices).query(points)
    max_edge = float(mesh.edges_unique_length.max())
    candidates = np.flatnonzero(vertex_dist - max_edge <= tol)

    if len(candidates) > 0:
        _, surface_dist, _ = trimesh.proximity.closest_point(mesh, points[candidates])
        on_boundary = candidates[surface_dist <= tol]
        inside[on_boundary] = not strict

    return inside


class DesignSpace:
    """
    A classified design space.

    Use DesignSpace.from_geometry() to classify and wrap geometry. Every
    subclass provides a closed query mesh and a Manifold for trimming.
    """

    kind = DesignSpaceKind.INVALID

    def __init__(self, geometry):
        self.geometry = geometry
        self._query_mesh: Optional[trimesh.Trimesh] = None

    @classmethod
    def from_geometry(cls, geometry) -> 'DesignSpace':
        """
        Classify geometry and wrap it in the matching DesignSpace.

        Raises:
            InvalidDesignSpaceError: If the geometry is not a closed Brep,
                mesh or solid surface
        """
        if isinstance(geometry, DesignSpace):
            return geometry
        kind = classify_design_space(geometry)
        if kind is DesignSpaceKind.INVALID:
            raise InvalidDesignSpaceError(
                f"Design space must be a closed Brep, Mesh or Surface (got {type(geometry).__name__})")
        logger.debug(f"Design space classified as {kind.name}")
        return _DESIGN_SPACE_TYPES[kind](geometry)

    @property
    def query_mesh(self) -> trimesh.Trimesh:
        """Closed triangle mesh used for containment and distance queries."""
        if self._query_mesh is None:
            self._query_mesh = self._build_query_mesh()
        return self._query_mesh

    def _build_query_mesh(self) -> trimesh.Trimesh:
        raise NotImplementedError

    def to_manifold(self) -> Manifold:
        """The design space as a Manifold trimming solid."""
        raise NotImplementedError

    def contains(
        self,
        points,
        tol: float = DEFAULT_CONTAINMENT_TOLERANCE,
        strict: bool = False
    ) -> Union[bool, np.ndarray]:
        """
        Test whether points are inside the design space.

        Args:
            points: A single point (3,) or an (N, 3) array
            tol: Boundary tolerance
            strict: If True, points within tol of the boundary are outside

        Returns:
            bool for a single point, otherwise an (N,) boolean array
        """
        pts, single = _as_points(points)
        inside = points_inside_mesh(self.query_mesh, pts, tol, strict)
        return bool(inside[0]) if single else inside

    def distance_to(self, points) -> Union[float, np.ndarray]:
        """
        Unsigned distance from points to the design space boundary.

        Args:
            points: A single point (3,) or an (N, 3) array

        Returns:
            float for a single point, otherwise an (N,) array
        """
        pts, single = _as_points(points)
        if len(pts) == 0:
            return np.zeros(0)
        _, distances, _ = trimesh.proximity.closest_point(self.query_mesh, pts)
        distances = np.asarray(distances, dtype=np.float64)
        return float(distances[0]) if single else distances

    def bounding_box(self, plane: Optional[Plane] = None) -> OrientedBox:
        """Bounding box of the design space in the frame of plane."""
        return OrientedBox.from_points(self.query_mesh.vertices, plane)

    @property
    def volume(self) -> float:
        return float(abs(self.query_mesh.volume))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self.query_mesh.faces)} faces)"


class BrepDesignSpace(DesignSpace):
    """Design space given as a Manifold solid."""

    kind = DesignSpaceKind.BREP

    def _build_query_mesh(self) -> trimesh.Trimesh:
        return manifold_to_trimesh(self.geometry)

    def to_manifold(self) -> Manifold:
        return self.geometry


class MeshDesignSpace(DesignSpace):
    """Design space given as a watertight mesh."""

    kind = DesignSpaceKind.MESH

    def __init__(self, geometry: trimesh.Trimesh):
        super().__init__(geometry)
        self._manifold: Optional[Manifold] = None

    def _build_query_mesh(self) -> trimesh.Trimesh:
        return self.geometry

    def to_manifold(self) -> Manifold:
        if self._manifold is None:
            manifold = trimesh_to_manifold(self.geometry)
            if manifold.is_empty():
                raise InvalidDesignSpaceError("Mesh design space is not a valid manifold solid")
            self._manifold = manifold
        return self._manifold


class SolidSurfaceDesignSpace(DesignSpace):
    """Design space given as a closed surface primitive, queried as a Brep."""

    kind = DesignSpaceKind.SOLID_SURFACE

    def __init__(self, geometry: trimesh.primitives.Primitive):
        super().__init__(geometry)
        self._brep: Optional[BrepDesignSpace] = None

    @property
    def brep(self) -> BrepDesignSpace:
        """The Brep equivalent of the surface, converted on first use."""
        if self._brep is None:
            manifold = trimesh_to_manifold(self.geometry.to_mesh())
            if manifold.is_empty():
                raise InvalidDesignSpaceError("Surface could not be converted to a solid")
            self._brep = BrepDesignSpace(manifold)
        return self._brep

    def _build_query_mesh(self) -> trimesh.Trimesh:
        return self.brep.query_mesh

    def to_manifold(self) -> Manifold:
        return self.brep.to_manifold()


# One implementation per valid kind
_DESIGN_SPACE_TYPES = {
    DesignSpaceKind.BREP: BrepDesignSpace,
    DesignSpaceKind.MESH: MeshDesignSpace,
    DesignSpaceKind.SOLID_SURFACE: SolidSurfaceDesignSpace,
}


def _wrap(geometry, kind: DesignSpaceKind) -> DesignSpace:
    if kind not in _DESIGN_SPACE_TYPES:
        raise ValueError(f"Design space must be classified before use (kind={kind.name})")
    return _DESIGN_SPACE_TYPES[kind](geometry)


def is_point_inside(
    geometry,
    kind: DesignSpaceKind,
    point,
    tol: float = DEFAULT_CONTAINMENT_TOLERANCE,
    strict: bool = False
) -> Union[bool, np.ndarray]:
    """
    Determine if a point is inside a classified design space geometry.

    Prefer DesignSpace.from_geometry() for repeated queries; this form
    rebuilds the query mesh on every call.

    Raises:
        ValueError: If kind is INVALID
    """
    return _wrap(geometry, kind).contains(point, tol, strict)


def distance_to(geometry, kind: DesignSpaceKind, point) -> Union[float, np.ndarray]:
    """
    Compute the distance of a point to a classified design space geometry.

    Raises:
        ValueError: If kind is INVALID
    """
    return _wrap(geometry, kind).distance_to(point)
