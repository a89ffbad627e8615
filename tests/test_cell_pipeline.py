import itertools

import numpy as np
import pytest

from lattice_frame.cell_pipeline import compute_centroid, enclosing_box, run_cell_pipeline, scale_points
from lattice_frame.design_space import DesignSpace
from lattice_frame.errors import EmptySampleError, InvalidDesignSpaceError


def corner_points(seed=0):
    """Eight points near the unit cube corners plus its centre."""
    jitter = np.random.default_rng(seed).uniform(-0.02, 0.02, size=(8, 3))
    corners = np.array(list(itertools.product([0.05, 0.95], repeat=3))) + jitter
    return np.vstack([corners, [0.5, 0.5, 0.5]])


def test_compute_centroid():
    points = np.array([[0, 0, 0], [2, 0, 0], [1, 3, 0]], dtype=float)
    np.testing.assert_allclose(compute_centroid(points), [1, 1, 0])


def test_compute_centroid_of_nothing_raises():
    with pytest.raises(EmptySampleError):
        compute_centroid(np.zeros((0, 3)))


def test_scale_points():
    centre = np.array([1.0, 1.0, 1.0])
    scaled = scale_points(np.array([[2.0, 1.0, 0.0]]), centre, 1.5)
    np.testing.assert_allclose(scaled, [[2.5, 1.0, -0.5]])


def test_empty_points_raise(cube_mesh):
    with pytest.raises(EmptySampleError):
        run_cell_pipeline(np.zeros((0, 3)), cube_mesh)


def test_invalid_design_space_raises(open_mesh):
    with pytest.raises(InvalidDesignSpaceError):
        run_cell_pipeline(corner_points(), open_mesh)


@pytest.mark.parametrize("fixture", ["cube_brep", "cube_mesh", "cube_surface"])
def test_convex_design_space(request, fixture):
    points = corner_points()
    result = run_cell_pipeline(points, request.getfixturevalue(fixture))

    # Convex cell inside convex solid: exactly one fragment per cell
    assert result.fragment_count == len(points)
    assert result.fragment_cells == list(range(len(points)))
    assert result.empty_cells == []
    assert all(f.is_watertight for f in result.fragments)
    assert sum(f.volume for f in result.fragments) == pytest.approx(1.0, abs=1e-4)

    assert len(result.raw_cells) == len(points)
    assert np.all(result.enclosing_box.min_point < 0.0)
    assert np.all(result.enclosing_box.max_point > 1.0)


def test_raw_cells_can_be_dropped(cube_brep):
    result = run_cell_pipeline(corner_points(), cube_brep, keep_raw_cells=False)
    assert result.raw_cells is None


def test_fragments_contain_their_seed(cube_mesh):
    points = corner_points(seed=1)
    result = run_cell_pipeline(points, cube_mesh)
    for fragment, cell in zip(result.fragments, result.fragment_cells):
        assert fragment.contains([points[cell]])[0]


def test_concave_design_space_splits_cells(u_shape):
    points = np.array([
        [1.5, 0.5, 0.5],    # on the bar, below the slot
        [0.5, 2.9, 0.5],    # top of the left prong
        [0.05, 0.05, 0.05],
        [2.95, 0.05, 0.95],
    ])
    result = run_cell_pipeline(points, u_shape)

    # The left prong seed's cell also reaches across the slot into the right prong
    assert len(result.fragments_for_cell(1)) == 2
    assert result.fragment_count > len(points)
    assert result.trimmed_cell_count <= len(points)
    assert sum(f.volume for f in result.fragments) == pytest.approx(7.0, abs=1e-3)


@pytest.mark.parametrize("fixture", ["cube_brep", "cube_mesh", "cube_surface"])
def test_single_point_fills_design_space(request, fixture):
    result = run_cell_pipeline(np.array([[0.5, 0.5, 0.5]]), request.getfixturevalue(fixture))

    assert result.fragment_count == 1
    assert result.fragment_cells == [0]
    assert result.fragments[0].volume == pytest.approx(1.0, abs=1e-5)
    assert np.all(result.enclosing_box.min_point < 0.0)
    assert np.all(result.enclosing_box.max_point > 1.0)


def test_coplanar_points_widen_flat_axis(cube_mesh):
    points = np.array([[0.05, 0.05, 0.5], [0.95, 0.1, 0.5], [0.1, 0.9, 0.5], [0.9, 0.95, 0.5]])
    result = run_cell_pipeline(points, cube_mesh)

    assert result.enclosing_box.min_point[2] < 0.0
    assert result.enclosing_box.max_point[2] > 1.0
    assert result.fragment_count == 4
    assert sum(f.volume for f in result.fragments) == pytest.approx(1.0, abs=1e-4)


def test_enclosing_box_keeps_full_cloud(cube_mesh):
    scaled = np.array([[-0.1, -0.2, -0.3], [1.1, 1.2, 1.3]])
    box = enclosing_box(scaled, DesignSpace.from_geometry(cube_mesh))
    np.testing.assert_array_equal(box.min_point, scaled[0])
    np.testing.assert_array_equal(box.max_point, scaled[1])
