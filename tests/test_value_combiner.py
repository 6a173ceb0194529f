from __future__ import annotations

import math

import pytest

from pregel_sssp.combiner import ShortestPathCombiner, combine, combine_all
from pregel_sssp.exceptions import AlgorithmError
from pregel_sssp.ids import VertexId
from pregel_sssp.value import PathValue, RelaxationMessage

S, A, B, T = (VertexId.of(x) for x in "SABT")


def test_path_value_starts_unreachable() -> None:
    value = PathValue()
    assert value.reachable is False
    assert value.total_weight == math.inf
    assert value.path == []


def test_zero_distance_and_adoption_append_self() -> None:
    value = PathValue()
    value.zero_distance(S)
    assert (value.reachable, value.total_weight, value.path) == (True, 0.0, [S])

    other = PathValue()
    other.shorter_path(B, (S, A), 2.0)
    assert other.path == [S, A, B]
    assert other.total_weight == 2.0
    assert other.reachable


def test_non_improving_adoption_is_an_invariant_violation() -> None:
    value = PathValue()
    value.shorter_path(B, (S,), 2.0)
    with pytest.raises(AlgorithmError):
        value.shorter_path(B, (S, A), 2.0)
    with pytest.raises(AlgorithmError):
        value.shorter_path(B, (S, A), 5.0)
    assert value.path == [S, B]


def test_combiner_keeps_the_lighter_message() -> None:
    light = RelaxationMessage((S, A), 3.0)
    heavy = RelaxationMessage((S, B), 5.0)
    assert combine(light, heavy) == light
    assert combine(heavy, light) == light
    assert combine(heavy, light).path == (S, A)


def test_combiner_breaks_ties_independently_of_order() -> None:
    via_a = RelaxationMessage((S, A), 2.0)
    via_b = RelaxationMessage((S, B), 2.0)
    direct = RelaxationMessage((S,), 2.0)
    assert combine(via_a, via_b) == combine(via_b, via_a) == via_a
    # shorter paths win ties
    assert combine_all([via_b, via_a, direct]) == direct


def test_combine_all_is_order_independent() -> None:
    messages = [
        RelaxationMessage((S, A), 4.0),
        RelaxationMessage((S, B), 1.5),
        RelaxationMessage((S, A, B), 1.5),
        RelaxationMessage((S, T), 9.0),
    ]
    expected = RelaxationMessage((S, B), 1.5)
    assert combine_all(messages) == expected
    assert combine_all(reversed(messages)) == expected
    assert combine_all([]) is None


def test_combiner_object_is_callable() -> None:
    combiner = ShortestPathCombiner()
    assert combiner(RelaxationMessage((S,), 1.0), RelaxationMessage((A,), 0.5)).sender == A
