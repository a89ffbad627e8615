import numpy as np
import pytest

from lattice_frame.curves import ArcCurve, LineCurve
from lattice_frame.network import (
    SkippedStrut,
    StrutRejection,
    clean_network,
    minimum_strut_length,
)
from lattice_frame.spatial_index import within_radius


def square_struts():
    corners = [(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0)]
    return [LineCurve(corners[i], corners[(i + 1) % 4]) for i in range(4)]


def test_minimum_strut_length():
    assert minimum_strut_length(0.2, 0.001) == pytest.approx(0.2)
    assert minimum_strut_length(0.01, 0.001) == pytest.approx(0.1)


def test_square_with_reversed_duplicate():
    struts = square_struts()
    struts.append(LineCurve((1, 0, 0), (0, 0, 0)))

    result = clean_network(struts, 0.001)

    assert result.node_count == 4
    assert result.strut_count == 4
    assert result.skipped_count(StrutRejection.DUPLICATE) == 1
    assert result.skipped[0].index == 4
    assert sorted(tuple(sorted(p)) for p in result.node_pairs) == [(0, 1), (0, 3), (1, 2), (2, 3)]


def test_node_pairs_follow_strut_direction():
    result = clean_network(square_struts(), 0.001)
    assert result.node_pairs == [(0, 1), (1, 2), (2, 3), (3, 0)]


def test_cleaning_is_idempotent():
    struts = square_struts() + [LineCurve((0, 1, 0), (1, 1, 0)), None]
    first = clean_network(struts, 0.001)
    second = clean_network(first.struts, 0.001)

    assert second.strut_count == first.strut_count
    assert second.node_count == first.node_count
    assert second.skipped == []
    np.testing.assert_array_equal(second.nodes, first.nodes)


def test_reversal_does_not_change_topology():
    forward = clean_network(square_struts(), 0.001)
    backward = clean_network([s.reversed() for s in square_struts()], 0.001)
    assert forward.node_count == backward.node_count
    assert forward.strut_count == backward.strut_count


def test_arcs_sharing_endpoints_are_kept():
    upper = ArcCurve((0, 0, 0), (1, 1, 0), (2, 0, 0))
    lower = ArcCurve((0, 0, 0), (1, -1, 0), (2, 0, 0))
    chord = LineCurve((0, 0, 0), (2, 0, 0))
    repeat = ArcCurve((2, 0, 0), (1, 1, 0), (0, 0, 0))

    result = clean_network([upper, lower, chord, repeat], 0.001)

    assert result.node_count == 2
    assert result.strut_count == 3
    assert result.skipped_count(StrutRejection.DUPLICATE) == 1
    assert result.skipped[0].index == 3


def test_duplicate_compared_against_every_strut_of_a_pair():
    upper = ArcCurve((0, 0, 0), (1, 1, 0), (2, 0, 0))
    lower = ArcCurve((0, 0, 0), (1, -1, 0), (2, 0, 0))
    lower_again = ArcCurve((0, 0, 0), (1, -1, 0), (2, 0, 0))

    result = clean_network([upper, lower, lower_again], 0.001)

    assert result.strut_count == 2
    assert result.skipped[0].index == 2


def test_rejection_reasons():
    struts = [
        None,
        ArcCurve((0, 0, 0), (1, 0, 0), (2, 0, 0)),
        LineCurve((0, 0, 0), (0.05, 0, 0)),
        LineCurve((0, 0, 0), (1, 0, 0)),
    ]
    result = clean_network(struts, 0.001)

    assert result.strut_count == 1
    reasons = {s.index: s.reason for s in result.skipped}
    assert reasons == {
        0: StrutRejection.NULL,
        1: StrutRejection.INVALID,
        2: StrutRejection.SHORT,
    }


def test_tolerance_sets_minimum_length():
    strut = LineCurve((0, 0, 0), (0.15, 0, 0))
    assert clean_network([strut], 0.001).strut_count == 1
    assert clean_network([strut], 0.2).skipped_count(StrutRejection.SHORT) == 1


def test_input_curves_are_not_mutated():
    strut = LineCurve((0, 0, 0), (5, 0, 0), domain=(0.0, 5.0))
    result = clean_network([strut], 0.001)
    assert strut.domain == (0.0, 5.0)
    assert result.struts[0].domain == (0.0, 1.0)


@pytest.mark.parametrize("offset,expected_nodes", [
    (np.nextafter(1e-3, np.inf), 4),
    (np.nextafter(1e-3, 0.0), 3),
])
def test_node_merge_tolerance_boundary(offset, expected_nodes):
    a = LineCurve((0, 0, 0), (0, 0, 1))
    b = LineCurve((offset, 0, 0), (offset, 1, 0))
    result = clean_network([a, b], 1e-3)
    assert result.node_count == expected_nodes


def test_euclidean_match_policy():
    a = LineCurve((0, 0, 0), (0, 0, 1))
    b = LineCurve((0.009, 0.009, 0), (1, 1, 0))
    assert clean_network([a, b], 0.01).node_count == 3
    assert clean_network([a, b], 0.01, match=within_radius).node_count == 4


def test_empty_input():
    result = clean_network([], 0.001)
    assert result.is_empty
    assert result.node_count == 0
    assert result.nodes.shape == (0, 3)


@pytest.mark.parametrize("order", [(0, 1), (1, 0)])
def test_reversed_duplicate_collapses_in_either_order(order):
    forward = ArcCurve((0, 0, 0), (1, 1, 0), (2, 0, 0))
    backward = ArcCurve((2, 0, 0), (1, 1, 0), (0, 0, 0))
    struts = [(forward, backward)[i] for i in order]

    result = clean_network(struts, 0.001)

    assert result.strut_count == 1
    assert result.node_count == 2
    assert result.skipped == [SkippedStrut(1, StrutRejection.DUPLICATE)]
    np.testing.assert_allclose(result.struts[0].start, struts[0].start)
