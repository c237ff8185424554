from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from math import prod
from types import MappingProxyType

from .bindings import BindingsLike, BindingSource, as_binding_source
from .diagnostics import (
    BindingSnapshot,
    CompositeMismatchError,
    ConstraintMismatchError,
    MultipleUnboundFactorsError,
    TooFewDimensionsError,
    UnboundDimensionError,
)
from .normalize import normalize_shape
from .pattern import Composite, Dim, EllipsisDims, ShapePattern


@dataclass(frozen=True, slots=True)
class ShapeMatch:
    """Result of unifying one pattern with one concrete shape.

    `bindings` holds every name referenced or inferred during the match,
    including external bindings the pattern actually used. `ellipsis_range`
    is the half-open index range consumed by the ellipsis, or None when the
    pattern has no ellipsis.
    """

    shape: tuple[int, ...]
    bindings: Mapping[str, int]
    ellipsis_range: range | None

    @property
    def ellipsis_dims(self) -> tuple[int, ...]:
        """Return the sub-shape consumed by the ellipsis."""
        if self.ellipsis_range is None:
            return ()
        return self.shape[self.ellipsis_range.start : self.ellipsis_range.stop]

    def select(self, *keys: str | Iterable[str]) -> tuple[int, ...]:
        """Return bound sizes for `keys` in the requested order.

        Keys may be passed as separate arguments or as one iterable.

        Raises
        ------
        UnboundDimensionError
            If any key was never bound during matching.
        """
        names: tuple[str, ...]
        if len(keys) == 1 and not isinstance(keys[0], str):
            names = tuple(keys[0])
        else:
            names = keys  # type: ignore[assignment]

        selected: list[int] = []
        for name in names:
            value = self.bindings.get(name)
            if value is None:
                raise UnboundDimensionError(
                    dim=name,
                    available=tuple(sorted(self.bindings)),
                )
            selected.append(value)
        return tuple(selected)

    def __getitem__(self, name: str) -> int:
        return self.select(name)[0]

    def __hash__(self) -> int:
        return hash(
            (self.shape, tuple(sorted(self.bindings.items())), self.ellipsis_range)
        )


class BindingScope:
    """Two-tier name lookup used during one match.

    The outer tier is the caller's read-only binding source; the inner tier
    collects every name this match references or infers. Lookups check the
    inner tier first and promote outer hits into it.
    """

    __slots__ = ("_outer", "_inner")

    def __init__(self, outer: BindingSource) -> None:
        self._outer = outer
        self._inner: dict[str, int] = {}

    def resolve(self, name: str) -> int | None:
        """Return the known size for `name`, promoting outer hits."""
        value = self._inner.get(name)
        if value is not None:
            return value
        value = self._outer.lookup(name)
        if value is not None:
            self._inner[name] = value
        return value

    def bind(self, name: str, value: int) -> None:
        """Record an inferred size."""
        self._inner[name] = value

    def exported(self) -> Mapping[str, int]:
        """Return a read-only snapshot of the inner tier."""
        return MappingProxyType(dict(self._inner))


class _Matcher:
    """Single-use matcher state for one pattern/shape/bindings triple."""

    __slots__ = ("pattern", "shape", "source", "scope")

    def __init__(
        self,
        pattern: ShapePattern,
        shape: tuple[int, ...],
        source: BindingSource,
    ) -> None:
        self.pattern = pattern
        self.shape = shape
        self.source = source
        self.scope = BindingScope(source)

    def snapshot(self) -> BindingSnapshot:
        return tuple(sorted(self.source.iter_bindings()))

    def run(self) -> ShapeMatch:
        pattern = self.pattern
        shape = self.shape
        required = pattern.min_rank
        if required > len(shape):
            raise TooFewDimensionsError(
                shape=shape,
                pattern=pattern.to_dsl(),
                bindings=self.snapshot(),
                required=required,
            )

        ellipsis_range: range | None = None
        if pattern.ellipsis_pos is not None:
            start = pattern.ellipsis_pos
            ellipsis_range = range(start, start + len(shape) - required)
        elif len(shape) != required:
            raise TooFewDimensionsError(
                shape=shape,
                pattern=pattern.to_dsl(),
                bindings=self.snapshot(),
                required=required,
                exact=True,
            )

        index = 0
        for component in pattern.components:
            if isinstance(component, EllipsisDims):
                assert ellipsis_range is not None
                index = ellipsis_range.stop
                continue
            if isinstance(component, Dim):
                self._match_dim(component, shape[index])
            elif isinstance(component, Composite):
                self._match_composite(component, shape[index])
            else:
                raise TypeError("unsupported pattern component while matching shape")
            index += 1

        return ShapeMatch(
            shape=shape,
            bindings=self.scope.exported(),
            ellipsis_range=ellipsis_range,
        )

    def _match_dim(self, component: Dim, actual: int) -> None:
        bound = self.scope.resolve(component.name)
        if bound is None:
            self.scope.bind(component.name, actual)
            return
        if bound != actual:
            raise ConstraintMismatchError(
                shape=self.shape,
                pattern=self.pattern.to_dsl(),
                bindings=self.snapshot(),
                dim=component.name,
                bound=bound,
                actual=actual,
            )

    def _match_composite(self, component: Composite, actual: int) -> None:
        resolved: list[int] = []
        unbound: list[str] = []
        for name in component.names:
            value = self.scope.resolve(name)
            if value is None:
                unbound.append(name)
                continue
            resolved.append(value)

        if len(unbound) > 1:
            raise MultipleUnboundFactorsError(
                shape=self.shape,
                pattern=self.pattern.to_dsl(),
                bindings=self.snapshot(),
                composite=component.to_dsl(),
                unbound=tuple(unbound),
            )

        product = prod(resolved)
        if not unbound:
            if product != actual:
                raise CompositeMismatchError(
                    shape=self.shape,
                    pattern=self.pattern.to_dsl(),
                    bindings=self.snapshot(),
                    composite=component.to_dsl(),
                    factor=None,
                    product=product,
                    actual=actual,
                )
            return

        factor = unbound[0]
        if product == 0 or actual % product != 0:
            raise CompositeMismatchError(
                shape=self.shape,
                pattern=self.pattern.to_dsl(),
                bindings=self.snapshot(),
                composite=component.to_dsl(),
                factor=factor,
                product=product,
                actual=actual,
            )
        self.scope.bind(factor, actual // product)


def match_shape(
    pattern: ShapePattern,
    shape: Iterable[int],
    bindings: BindingsLike = None,
) -> ShapeMatch:
    """Unify a concrete shape with a pattern.

    Parameters
    ----------
    pattern
        Parsed shape pattern.
    shape
        Concrete non-negative dimension sizes.
    bindings
        Externally known sizes: a mapping, `(name, size)` pairs, or a
        `BindingSource`. Only names the pattern references appear in the
        result.

    Returns
    -------
    ShapeMatch
        Resolved names, a copy of the shape, and the ellipsis range.

    Raises
    ------
    TooFewDimensionsError
        If the shape rank cannot cover the pattern.
    ConstraintMismatchError
        If a bound name disagrees with the shape.
    MultipleUnboundFactorsError
        If a composite has more than one unknown factor.
    CompositeMismatchError
        If a composite's known factors do not divide or equal its size.
    """
    if not isinstance(pattern, ShapePattern):
        raise TypeError("pattern must be a ShapePattern")
    matcher = _Matcher(
        pattern,
        normalize_shape(tuple(shape)),
        as_binding_source(bindings),
    )
    return matcher.run()


__all__ = [
    "BindingScope",
    "match_shape",
    "ShapeMatch",
]
