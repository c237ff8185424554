from collections import OrderedDict
from collections.abc import Iterator

import numpy as np
import pytest

from shapex import (
    BindingSource,
    MappingBindings,
    PairBindings,
    ShapePattern,
    as_binding_source,
    collect_binding_map,
    collect_sorted_binding_list,
    lookup_binding,
)
from shapex.bindings import BindingPair


class NameStr(str):
    """String subclass standing in for caller-defined name types."""


class GeneratedBindings(BindingSource):
    """Minimal source implementing only iteration."""

    __slots__ = ()

    def iter_bindings(self) -> Iterator[BindingPair]:
        yield ("a", 1)
        yield ("b", 2)


def test_collect_binding_map_from_pair_tuple() -> None:
    source = (("a", 1), ("b", 2))

    collected = collect_binding_map(source)

    assert collected == {"a": 1, "b": 2}
    assert collected.get("x") is None


@pytest.mark.parametrize(
    "source",
    [
        (("b", 2), ("a", 1)),
        [("b", 2), ("a", 1)],
        [["b", 2], ["a", 1]],
        [(NameStr("b"), 2), (NameStr("a"), 1)],
        {"b": 2, "a": 1},
        OrderedDict([("b", 2), ("a", 1)]),
        PairBindings([("b", 2), ("a", 1)]),
        MappingBindings({"b": 2, "a": 1}),
        GeneratedBindings(),
    ],
)
def test_binding_source_shapes_agree(source: object) -> None:
    assert collect_sorted_binding_list(source) == [("a", 1), ("b", 2)]
    assert lookup_binding(source, "a") == 1
    assert lookup_binding(source, "b") == 2
    assert lookup_binding(source, "x") is None


def test_none_means_no_bindings() -> None:
    assert collect_binding_map(None) == {}
    assert lookup_binding(None, "a") is None


def test_pair_bindings_duplicate_names_first_occurrence_wins() -> None:
    source = PairBindings([("a", 1), ("b", 2), ("a", 3)])

    assert source.lookup("a") == 1
    assert collect_binding_map(source) == {"a": 1, "b": 2}
    assert collect_sorted_binding_list(source) == [("a", 1), ("a", 3), ("b", 2)]
    assert len(source) == 3


def test_duplicate_names_first_occurrence_wins_during_match() -> None:
    match = ShapePattern.parse("(h p)").match((12,), [("p", 4), ("p", 6)])

    assert match.select("h", "p") == (3, 4)


def test_mapping_bindings_use_native_lookup() -> None:
    class ExplodingIterBindings(MappingBindings):
        __slots__ = ()

        def iter_bindings(self) -> Iterator[BindingPair]:
            raise AssertionError("mapping lookup must not scan")

    source = ExplodingIterBindings({"a": 1})

    assert source.lookup("a") == 1
    assert source.lookup("b") is None


def test_binding_source_iterates_pairs() -> None:
    assert list(MappingBindings({"a": 1})) == [("a", 1)]
    assert list(PairBindings([("a", 1)])) == [("a", 1)]


def test_as_binding_source_passes_sources_through() -> None:
    source = PairBindings([("a", 1)])

    assert as_binding_source(source) is source
    assert isinstance(as_binding_source({"a": 1}), MappingBindings)
    assert isinstance(as_binding_source([("a", 1)]), PairBindings)


def test_binding_values_are_normalized() -> None:
    source = MappingBindings({"a": np.int64(3)})

    assert source.lookup("a") == 3
    assert type(source.lookup("a")) is int


@pytest.mark.parametrize(
    "bindings, expected",
    [
        ("a=1", TypeError),
        (42, TypeError),
        ([("a", 1, 2)], TypeError),
        ([("a",)], TypeError),
        ([(1, 2)], TypeError),
        ({"a": 1.5}, TypeError),
        ({"a": False}, TypeError),
        ({"a": -2}, ValueError),
    ],
)
def test_as_binding_source_rejects_malformed_input(
    bindings: object,
    expected: type[Exception],
) -> None:
    with pytest.raises(expected):
        as_binding_source(bindings)  # type: ignore[arg-type]


def test_binding_source_repr() -> None:
    assert repr(PairBindings([("a", 1)])) == "PairBindings([('a', 1)])"
    assert repr(MappingBindings({"a": 1})) == "MappingBindings({'a': 1})"
