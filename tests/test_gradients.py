import numpy as np
import pytest

from lattice_frame.bounds import BoundingBox
from lattice_frame.gradients import GRADIENTS, GradientType, evaluate_gradient, unitize


def test_every_gradient_has_an_implementation():
    assert set(GRADIENTS) == set(GradientType)


@pytest.mark.parametrize("gradient", list(GradientType))
def test_values_in_unit_range(gradient):
    points = np.random.default_rng(0).random((200, 3))
    values = evaluate_gradient(gradient, points)
    assert values.shape == (200,)
    assert np.all(values >= 0.0)
    assert np.all(values <= 1.0 + 1e-12)


def test_linear_gradient():
    values = evaluate_gradient(GradientType.LINEAR_Y, [[0.3, 0.0, 0.9], [0.3, 0.25, 0.9]])
    np.testing.assert_allclose(values, [0.0, 0.25])


def test_centered_and_radial_gradients():
    centre = [[0.5, 0.5, 0.5]]
    corner = [[1.0, 1.0, 1.0]]
    for gradient in (GradientType.CENTERED_X, GradientType.CYLINDRICAL_Z, GradientType.SPHERICAL):
        assert evaluate_gradient(gradient, centre)[0] == pytest.approx(0.0)
        assert evaluate_gradient(gradient, corner)[0] == pytest.approx(1.0)


def test_cylindrical_ignores_its_axis():
    a = evaluate_gradient(GradientType.CYLINDRICAL_X, [[0.0, 0.2, 0.7]])
    b = evaluate_gradient(GradientType.CYLINDRICAL_X, [[1.0, 0.2, 0.7]])
    np.testing.assert_allclose(a, b)


def test_box_unitizes_world_points():
    box = BoundingBox(np.array([10.0, 0.0, -5.0]), np.array([20.0, 4.0, 5.0]))
    np.testing.assert_allclose(unitize([[15.0, 1.0, 5.0]], box), [[0.5, 0.25, 1.0]])
    values = evaluate_gradient(GradientType.LINEAR_X, [[15.0, 1.0, 5.0]], box=box)
    np.testing.assert_allclose(values, [0.5])


def test_flat_box_axis_maps_to_zero():
    box = BoundingBox(np.zeros(3), np.array([1.0, 1.0, 0.0]))
    np.testing.assert_allclose(unitize([[0.5, 0.5, 0.0]], box), [[0.5, 0.5, 0.0]])
