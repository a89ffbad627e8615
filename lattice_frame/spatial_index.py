"""
Spatial Index

Nearest-point lookup over a growing set of unique 3D locations.

Node identity in a lattice is positional: two nodes are the same node when
their positions match within a tolerance. The index answers "which existing
node is this?" by finding the closest stored point and testing it with a
matching policy. The default policy is per-coordinate epsilon equality;
a Euclidean radius policy is provided as an alternative.
"""

import logging
from typing import Callable, Optional

import numpy as np

logger = logging.getLogger(__name__)

# (candidate, stored, eps) -> same location?
MatchPolicy = Callable[[np.ndarray, np.ndarray, float], bool]


def epsilon_equals(a: np.ndarray, b: np.ndarray, eps: float) -> bool:
    """True if every coordinate of a and b differs by at most eps."""
    return bool(np.all(np.abs(a - b) <= eps))


def within_radius(a: np.ndarray, b: np.ndarray, eps: float) -> bool:
    """True if a and b are at most eps apart (Euclidean)."""
    return float(np.linalg.norm(a - b)) <= eps


def as_point(point) -> np.ndarray:
    """Coerce a point-like value to a float64 array of shape (3,)."""
    return np.asarray(point, dtype=np.float64).reshape(3)


class SpatialIndex:
    """
    Growing set of unique points with tolerance-based lookup.

    Points are only ever appended; indices are stable and assigned in
    insertion order. Callers are expected to lookup() before insert()
    to avoid duplicates (or use lookup_or_insert()).
    """

    _INITIAL_CAPACITY = 64

    def __init__(self, match: MatchPolicy = epsilon_equals):
        """
        Initialize an empty index.

        Args:
            match: Policy deciding whether a candidate matches its closest
                stored point within a tolerance
        """
        self._points = np.empty((self._INITIAL_CAPACITY, 3), dtype=np.float64)
        self._count = 0
        self._match = match

    def __len__(self) -> int:
        return self._count

    @property
    def points(self) -> np.ndarray:
        """Copy of the stored points as an (N, 3) array."""
        return self._points[:self._count].copy()

    def closest_index(self, point) -> Optional[int]:
        """
        Index of the stored point closest to point, or None if empty.

        Ties resolve to the lowest index.
        """
        if self._count == 0:
            return None
        diff = self._points[:self._count] - as_point(point)
        return int(np.argmin(np.einsum('ij,ij->i', diff, diff)))

    def lookup(self, point, eps: float) -> Optional[int]:
        """
        Find an existing point matching point within eps.

        Args:
            point: Query location
            eps: Matching tolerance

        Returns:
            Index of the closest stored point if it matches, otherwise None
        """
        query = as_point(point)
        closest = self.closest_index(query)
        if closest is not None and self._match(query, self._points[closest], eps):
            return closest
        return None

    def insert(self, point) -> int:
        """Append point unconditionally and return its new index."""
        if self._count == len(self._points):
            grown = np.empty((2 * len(self._points), 3), dtype=np.float64)
            grown[:self._count] = self._points[:self._count]
            self._points = grown
            logger.debug(f"SpatialIndex grown to capacity {len(grown)}")
        self._points[self._count] = as_point(point)
        self._count += 1
        return self._count - 1

    def lookup_or_insert(self, point, eps: float) -> int:
        """Return the index of a matching point, inserting point if none exists."""
        index = self.lookup(point, eps)
        if index is None:
            index = self.insert(point)
        return index
