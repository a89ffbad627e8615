"""
Preset Gradients

Spatial gradients over a unitized domain (0 <= x, y, z <= 1), returning
values from 0 (minimum) to 1 (maximum). Used to grade lattice properties
such as strut radius across a bounding box.
"""

from enum import Enum
from typing import Callable, Dict, Optional

import numpy as np

from lattice_frame.bounds import BoundingBox

GradientFunction = Callable[[np.ndarray, np.ndarray, np.ndarray], np.ndarray]


class GradientType(Enum):
    LINEAR_X = "linear_x"
    LINEAR_Y = "linear_y"
    LINEAR_Z = "linear_z"
    CENTERED_X = "centered_x"
    CENTERED_Y = "centered_y"
    CENTERED_Z = "centered_z"
    CYLINDRICAL_X = "cylindrical_x"
    CYLINDRICAL_Y = "cylindrical_y"
    CYLINDRICAL_Z = "cylindrical_z"
    SPHERICAL = "spherical"


def _centered(c: np.ndarray) -> np.ndarray:
    return np.abs(2.0 * c - 1.0)


GRADIENTS: Dict[GradientType, GradientFunction] = {
    GradientType.LINEAR_X: lambda x, y, z: np.abs(x),
    GradientType.LINEAR_Y: lambda x, y, z: np.abs(y),
    GradientType.LINEAR_Z: lambda x, y, z: np.abs(z),
    GradientType.CENTERED_X: lambda x, y, z: _centered(x),
    GradientType.CENTERED_Y: lambda x, y, z: _centered(y),
    GradientType.CENTERED_Z: lambda x, y, z: _centered(z),
    GradientType.CYLINDRICAL_X: lambda x, y, z: np.sqrt(_centered(y) ** 2 + _centered(z) ** 2) / np.sqrt(2),
    GradientType.CYLINDRICAL_Y: lambda x, y, z: np.sqrt(_centered(x) ** 2 + _centered(z) ** 2) / np.sqrt(2),
    GradientType.CYLINDRICAL_Z: lambda x, y, z: np.sqrt(_centered(x) ** 2 + _centered(y) ** 2) / np.sqrt(2),
    GradientType.SPHERICAL: lambda x, y, z: np.sqrt(
        _centered(x) ** 2 + _centered(y) ** 2 + _centered(z) ** 2) / np.sqrt(3),
}

_missing = set(GradientType) - set(GRADIENTS)
if _missing:
    raise RuntimeError(f"Gradients without an implementation: {sorted(g.name for g in _missing)}")


def unitize(points: np.ndarray, box: BoundingBox) -> np.ndarray:
    """Map world points into the unit cube of box (flat axes map to 0)."""
    points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    size = np.where(box.size > 0, box.size, 1.0)
    return (points - box.min_point) / size


def evaluate_gradient(
    gradient: GradientType,
    points: np.ndarray,
    box: Optional[BoundingBox] = None
) -> np.ndarray:
    """
    Evaluate a preset gradient at points.

    Args:
        gradient: Gradient type
        points: (N, 3) points; already unitized unless box is given
        box: Box to unitize the points against

    Returns:
        (N,) gradient values
    """
    points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    if box is not None:
        points = unitize(points, box)
    return GRADIENTS[gradient](points[:, 0], points[:, 1], points[:, 2])
