from __future__ import annotations

import pytest

from pregel_sssp.exceptions import ConfigError
from pregel_sssp.ids import VertexId
from pregel_sssp.targets import QuantityType, TargetSpec, parse_source_id


def test_star_selects_all_vertices() -> None:
    spec = TargetSpec.parse("*")
    assert spec.quantity is QuantityType.ALL
    assert spec.target_ids == frozenset()
    assert spec.single_target is None


def test_single_target() -> None:
    spec = TargetSpec.parse(" 7 ")
    assert spec.quantity is QuantityType.SINGLE
    assert spec.single_target == VertexId.of(7)
    assert spec.is_target(VertexId.of(7))
    assert not spec.is_target(VertexId.of("7"))


def test_multiple_targets_are_trimmed_and_deduplicated() -> None:
    spec = TargetSpec.parse("7, 9 ,7")
    assert spec.quantity is QuantityType.MULTIPLE
    assert spec.target_ids == {VertexId.of(7), VertexId.of(9)}
    assert spec.to_text() == "7,9"


def test_duplicates_of_one_id_classify_as_single() -> None:
    spec = TargetSpec.parse("a,a")
    assert spec.quantity is QuantityType.SINGLE
    assert spec.single_target == VertexId.of("a")


@pytest.mark.parametrize("raw", [None, "", "   "])
def test_blank_target_is_a_config_error(raw: object) -> None:
    with pytest.raises(ConfigError, match="must not be blank"):
        TargetSpec.parse(raw)  # type: ignore[arg-type]


@pytest.mark.parametrize("raw", ["a,,b", "a,", ",a", "*,a", "a, *"])
def test_malformed_target_lists_are_rejected(raw: str) -> None:
    with pytest.raises(ConfigError, match="malformed"):
        TargetSpec.parse(raw)


def test_inconsistent_spec_cannot_be_built() -> None:
    with pytest.raises(ConfigError):
        TargetSpec(QuantityType.ALL, frozenset({VertexId.of(1)}))
    with pytest.raises(ConfigError):
        TargetSpec(QuantityType.MULTIPLE, frozenset({VertexId.of(1)}))


def test_source_id_parsing() -> None:
    assert parse_source_id(" 3 ") == VertexId.of(3)
    assert parse_source_id("S") == VertexId.of("S")
    for raw in ["", "  ", None, "a,b", "*"]:
        with pytest.raises(ConfigError):
            parse_source_id(raw)  # type: ignore[arg-type]
