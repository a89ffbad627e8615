"""
Bounding Boxes

Axis-aligned and plane-oriented bounding boxes.

The oriented box is what the point sampler draws candidates from: a design
space is bounded in the frame of an orientation plane, so a lattice can be
laid out in any orientation, not only the world axes.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np


@dataclass
class BoundingBox:
    """Axis-aligned 3D bounding box."""
    min_point: np.ndarray  # [x, y, z]
    max_point: np.ndarray  # [x, y, z]

    @classmethod
    def from_points(cls, points: np.ndarray) -> 'BoundingBox':
        """Tightest box around an (N, 3) point array (N >= 1)."""
        points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
        if len(points) == 0:
            raise ValueError("Cannot bound an empty point set")
        return cls(min_point=points.min(axis=0), max_point=points.max(axis=0))

    @property
    def size(self) -> np.ndarray:
        """Get the size (dimensions) of the bounding box."""
        return self.max_point - self.min_point

    @property
    def center(self) -> np.ndarray:
        """Get the center point of the bounding box."""
        return (self.min_point + self.max_point) / 2

    @property
    def diagonal(self) -> float:
        """Get the diagonal length of the bounding box."""
        return float(np.linalg.norm(self.size))

    @property
    def volume(self) -> float:
        return float(np.prod(self.size))

    @property
    def is_degenerate(self) -> bool:
        """True if the box has zero extent along any axis."""
        return bool(np.any(self.size <= 0.0))

    def corners(self) -> np.ndarray:
        """The 8 corners (8x3), x varying fastest."""
        lo, hi = self.min_point, self.max_point
        return np.array([
            [x, y, z]
            for z in (lo[2], hi[2])
            for y in (lo[1], hi[1])
            for x in (lo[0], hi[0])
        ])

    def contains(self, points: np.ndarray) -> np.ndarray:
        """Boolean mask of points inside or on the box."""
        points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
        return np.all((points >= self.min_point) & (points <= self.max_point), axis=1)

    def __str__(self) -> str:
        size = self.size
        return f"Size: {size[0]:.2f} x {size[1]:.2f} x {size[2]:.2f}"


@dataclass
class Plane:
    """
    Orientation plane: an origin and an orthonormal frame.

    The z axis is the right-handed normal of x and y.
    """
    origin: np.ndarray
    x_axis: np.ndarray
    y_axis: np.ndarray

    def __post_init__(self):
        self.origin = np.asarray(self.origin, dtype=np.float64).reshape(3)
        x_axis = np.asarray(self.x_axis, dtype=np.float64).reshape(3)
        y_axis = np.asarray(self.y_axis, dtype=np.float64).reshape(3)

        x_len = np.linalg.norm(x_axis)
        if x_len == 0.0:
            raise ValueError("Plane x axis must be non-zero")
        x_axis = x_axis / x_len

        # Gram-Schmidt so slightly skewed input axes still give a valid frame
        y_axis = y_axis - np.dot(y_axis, x_axis) * x_axis
        y_len = np.linalg.norm(y_axis)
        if y_len == 0.0:
            raise ValueError("Plane axes must not be parallel")

        self.x_axis = x_axis
        self.y_axis = y_axis / y_len

    @classmethod
    def world_xy(cls) -> 'Plane':
        return cls(origin=np.zeros(3), x_axis=[1.0, 0.0, 0.0], y_axis=[0.0, 1.0, 0.0])

    @property
    def z_axis(self) -> np.ndarray:
        return np.cross(self.x_axis, self.y_axis)

    @property
    def axes(self) -> np.ndarray:
        """Rows are the x, y and z axes."""
        return np.vstack([self.x_axis, self.y_axis, self.z_axis])

    def to_local(self, points: np.ndarray) -> np.ndarray:
        """World coordinates -> plane coordinates."""
        points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
        return (points - self.origin) @ self.axes.T

    def to_world(self, local: np.ndarray) -> np.ndarray:
        """Plane coordinates -> world coordinates."""
        local = np.asarray(local, dtype=np.float64).reshape(-1, 3)
        return self.origin + local @ self.axes


@dataclass
class OrientedBox:
    """Box aligned with an orientation plane, stored as local extents."""
    plane: Plane
    local: BoundingBox  # Extents in plane coordinates

    @classmethod
    def from_points(cls, points: np.ndarray, plane: Optional[Plane] = None) -> 'OrientedBox':
        """Tightest box around points in the frame of plane (world XY by default)."""
        if plane is None:
            plane = Plane.world_xy()
        return cls(plane=plane, local=BoundingBox.from_points(plane.to_local(points)))

    @property
    def size(self) -> np.ndarray:
        return self.local.size

    @property
    def volume(self) -> float:
        return self.local.volume

    def corners(self) -> np.ndarray:
        """The 8 corners in world coordinates."""
        return self.plane.to_world(self.local.corners())

    def point_at(self, u, v, w) -> np.ndarray:
        """World point at normalized box coordinates (0..1 along each local axis)."""
        uvw = np.column_stack([np.atleast_1d(u), np.atleast_1d(v), np.atleast_1d(w)])
        local = self.local.min_point + uvw * self.local.size
        return self.plane.to_world(local)

    def axis_aligned(self) -> BoundingBox:
        """World axis-aligned box enclosing this box."""
        return BoundingBox.from_points(self.corners())
