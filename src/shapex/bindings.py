from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Mapping
from typing import TypeAlias

from .normalize import normalize_binding_value

BindingPair: TypeAlias = tuple[str, int]
BindingsLike: TypeAlias = "BindingSource | Mapping[str, int] | Iterable[BindingPair] | None"


class BindingSource(ABC):
    """Read-only source of externally known dimension sizes.

    Subclasses provide `iter_bindings`; `lookup` defaults to a linear scan
    in which the first occurrence of a name wins. Sources with native keyed
    access should override `lookup`.
    """

    __slots__ = ()

    @abstractmethod
    def iter_bindings(self) -> Iterator[BindingPair]:
        """Iterate `(name, size)` pairs."""

    def lookup(self, name: str) -> int | None:
        """Return the size bound to `name`, or None."""
        for key, value in self.iter_bindings():
            if key == name:
                return value
        return None

    def __iter__(self) -> Iterator[BindingPair]:
        return self.iter_bindings()


class PairBindings(BindingSource):
    """Bindings over an ordered sequence of `(name, size)` pairs."""

    __slots__ = ("_pairs",)

    def __init__(self, pairs: Iterable[BindingPair]) -> None:
        normalized: list[BindingPair] = []
        for pair in pairs:
            if not isinstance(pair, tuple | list) or len(pair) != 2:
                raise TypeError("binding pairs must be (name, size) tuples")
            name, value = pair
            normalized.append((str(name), normalize_binding_value(name, value)))
        self._pairs: tuple[BindingPair, ...] = tuple(normalized)

    def iter_bindings(self) -> Iterator[BindingPair]:
        return iter(self._pairs)

    def __len__(self) -> int:
        return len(self._pairs)

    def __repr__(self) -> str:
        return f"PairBindings({list(self._pairs)!r})"


class MappingBindings(BindingSource):
    """Bindings over a string-keyed mapping, with native key lookup."""

    __slots__ = ("_mapping",)

    def __init__(self, mapping: Mapping[str, int]) -> None:
        self._mapping: dict[str, int] = {
            key: normalize_binding_value(key, value) for key, value in mapping.items()
        }

    def iter_bindings(self) -> Iterator[BindingPair]:
        return iter(self._mapping.items())

    def lookup(self, name: str) -> int | None:
        return self._mapping.get(name)

    def __len__(self) -> int:
        return len(self._mapping)

    def __repr__(self) -> str:
        return f"MappingBindings({self._mapping!r})"


_EMPTY_BINDINGS = PairBindings(())


def as_binding_source(bindings: BindingsLike) -> BindingSource:
    """Coerce caller-supplied bindings into a `BindingSource`.

    Accepts None (no bindings), an existing source, a string-keyed mapping,
    or an iterable of `(name, size)` pairs.
    """
    if bindings is None:
        return _EMPTY_BINDINGS
    if isinstance(bindings, BindingSource):
        return bindings
    if isinstance(bindings, Mapping):
        return MappingBindings(bindings)
    if isinstance(bindings, str | bytes):
        raise TypeError("bindings must be a mapping or (name, size) pairs, not text")
    if isinstance(bindings, Iterable):
        return PairBindings(bindings)
    raise TypeError("bindings must be a mapping or an iterable of (name, size) pairs")


def collect_binding_map(bindings: BindingsLike) -> dict[str, int]:
    """Collect bindings into a dict; the first occurrence of a name wins."""
    collected: dict[str, int] = {}
    for name, value in as_binding_source(bindings).iter_bindings():
        collected.setdefault(name, value)
    return collected


def collect_sorted_binding_list(bindings: BindingsLike) -> list[BindingPair]:
    """Collect bindings as `(name, size)` pairs sorted by name, then size."""
    return sorted(as_binding_source(bindings).iter_bindings())


def lookup_binding(bindings: BindingsLike, name: str) -> int | None:
    """Look up one binding by name."""
    return as_binding_source(bindings).lookup(name)


__all__ = [
    "as_binding_source",
    "BindingPair",
    "BindingsLike",
    "BindingSource",
    "collect_binding_map",
    "collect_sorted_binding_list",
    "lookup_binding",
    "MappingBindings",
    "PairBindings",
]
