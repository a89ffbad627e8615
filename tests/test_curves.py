import numpy as np
import pytest

from lattice_frame.curves import ArcCurve, LineCurve, PolylineCurve


def test_line_evaluation_and_length():
    line = LineCurve((0, 0, 0), (2, 0, 0))
    assert line.length == pytest.approx(2.0)
    np.testing.assert_allclose(line.point_at(0.5), [1, 0, 0])
    np.testing.assert_array_equal(line.end, [2, 0, 0])
    assert line.is_valid


def test_line_end_is_exact():
    line = LineCurve((0.1, 0.1, 0.1), (0.3, 0.3, 0.3))
    np.testing.assert_array_equal(line.end, [0.3, 0.3, 0.3])


def test_unitized_copies_and_remaps_domain():
    line = LineCurve((0, 0, 0), (10, 0, 0), domain=(0.0, 10.0))
    np.testing.assert_allclose(line.point_at(5.0), [5, 0, 0])

    unit = line.unitized()
    assert unit.domain == (0.0, 1.0)
    np.testing.assert_allclose(unit.point_at(0.5), [5, 0, 0])
    # The original keeps its domain
    assert line.domain == (0.0, 10.0)


def test_reversed_domain_is_invalid():
    line = LineCurve((0, 0, 0), (1, 0, 0), domain=(1.0, 0.0))
    assert not line.is_valid


def test_non_finite_line_is_invalid():
    assert not LineCurve((0, 0, 0), (np.nan, 0, 0)).is_valid


def test_is_short():
    line = LineCurve((0, 0, 0), (0.05, 0, 0))
    assert line.is_short(0.1)
    assert not line.is_short(0.05)


def test_half_circle_arc():
    arc = ArcCurve((1, 0, 0), (0, 1, 0), (-1, 0, 0))
    assert arc.is_valid
    assert arc.radius == pytest.approx(1.0)
    assert arc.length == pytest.approx(np.pi)
    np.testing.assert_allclose(arc.center, [0, 0, 0], atol=1e-12)
    np.testing.assert_allclose(arc.midpoint, [0, 1, 0], atol=1e-12)
    np.testing.assert_array_equal(arc.start, [1, 0, 0])
    np.testing.assert_array_equal(arc.end, [-1, 0, 0])


def test_major_arc_passes_through_interior_point():
    # Three quarters of a circle: through point is on the far side
    arc = ArcCurve((1, 0, 0), (-1, 0, 0), (0, -1, 0))
    assert arc.length == pytest.approx(1.5 * np.pi)
    np.testing.assert_allclose(arc.point_at(2.0 / 3.0), [-1, 0, 0], atol=1e-12)


def test_reversed_arc_has_same_midpoint():
    arc = ArcCurve((0, 0, 0), (1, 1, 0), (2, 0, 0))
    np.testing.assert_allclose(arc.reversed().midpoint, arc.midpoint, atol=1e-12)


def test_collinear_arc_is_invalid():
    arc = ArcCurve((0, 0, 0), (1, 0, 0), (2, 0, 0))
    assert not arc.is_valid


def test_polyline_arc_length_parametrization():
    poly = PolylineCurve([(0, 0, 0), (1, 0, 0), (1, 3, 0)])
    assert poly.length == pytest.approx(4.0)
    np.testing.assert_allclose(poly.point_at(0.5), [1, 1, 0])
    np.testing.assert_allclose(poly.reversed().point_at(0.5), [1, 1, 0])
    np.testing.assert_array_equal(poly.end, [1, 3, 0])


def test_single_point_polyline_is_invalid():
    assert not PolylineCurve([(0, 0, 0)]).is_valid
    assert not PolylineCurve([(0, 0, 0), (0, 0, 0)]).is_valid
