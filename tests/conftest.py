import numpy as np
import pytest
import trimesh
from manifold3d import Manifold


def unit_cube_transform():
    return trimesh.transformations.translation_matrix([0.5, 0.5, 0.5])


@pytest.fixture
def cube_mesh():
    """Closed mesh of the unit cube [0, 1]^3."""
    return trimesh.creation.box(extents=(1.0, 1.0, 1.0), transform=unit_cube_transform())


@pytest.fixture
def cube_brep():
    """Manifold solid of the unit cube [0, 1]^3."""
    return Manifold.cube((1.0, 1.0, 1.0))


@pytest.fixture
def cube_surface():
    """Box primitive of the unit cube [0, 1]^3."""
    return trimesh.primitives.Box(extents=(1.0, 1.0, 1.0), transform=unit_cube_transform())


@pytest.fixture
def open_mesh():
    """Unit cube with one triangle missing."""
    box = trimesh.creation.box(extents=(1.0, 1.0, 1.0))
    return trimesh.Trimesh(vertices=box.vertices, faces=box.faces[:-1], process=False)


@pytest.fixture
def u_shape():
    """
    Concave U-shaped solid: a 3 x 3 x 1 slab with a 1 x 2 slot cut from the
    middle of its top edge, leaving two prongs joined by a bar along y < 1.
    """
    slab = Manifold.cube((3.0, 3.0, 1.0))
    slot = Manifold.cube((1.0, 2.5, 2.0)).translate((1.0, 1.0, -0.5))
    return slab - slot


@pytest.fixture
def rng():
    return np.random.default_rng(0)
