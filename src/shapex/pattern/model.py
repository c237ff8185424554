from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

try:
    from typing import Self
except ImportError:  # pragma: no cover
    from typing_extensions import Self

from ..diagnostics import InvalidPatternError
from .components import EllipsisDims, PatternComponent

if TYPE_CHECKING:
    from ..bindings import BindingsLike
    from ..matching import ShapeMatch
    from ..tensor_types import TensorLike


def _render(components: tuple[PatternComponent, ...]) -> str:
    return " ".join(component.to_dsl() for component in components)


def _find_ellipsis(components: tuple[PatternComponent, ...]) -> int | None:
    """Return the ellipsis position, rejecting more than one ellipsis."""
    ellipsis_pos: int | None = None
    for index, component in enumerate(components):
        if not isinstance(component, EllipsisDims):
            continue
        if ellipsis_pos is not None:
            raise InvalidPatternError(
                pattern=_render(components),
                reason="only one ellipsis is allowed",
            )
        ellipsis_pos = index
    return ellipsis_pos


@dataclass(frozen=True, slots=True, init=False)
class ShapePattern:
    """Parsed shape pattern: an ordered tuple of pattern components.

    Patterns are immutable value objects with structural equality and
    hashing. At most one component may be an ellipsis; this holds for every
    construction path, including `extend` and `+`.

    Examples
    --------
    >>> pattern = ShapePattern.parse("b ... (h p) c")
    >>> pattern.match((2, 7, 12, 3), {"p": 4}).select("b", "h", "c")
    (2, 3, 3)
    """

    components: tuple[PatternComponent, ...]
    ellipsis_pos: int | None

    def __init__(self, components: Iterable[PatternComponent]) -> None:
        normalized = tuple(components)
        for component in normalized:
            if not isinstance(component, PatternComponent):
                raise TypeError("pattern components must be PatternComponent values")
        object.__setattr__(self, "components", normalized)
        object.__setattr__(self, "ellipsis_pos", _find_ellipsis(normalized))

    @classmethod
    def parse(cls, text: str) -> Self:
        """Parse pattern text.

        Raises
        ------
        PatternParseError
            If `text` does not conform to the pattern grammar.
        InvalidPatternError
            If `text` contains more than one ellipsis.
        """
        from .parser import parse_components

        return cls(parse_components(text))

    @classmethod
    def cached_parse(cls, text: str) -> "ShapePattern":
        """Parse pattern text through the process-wide pattern cache."""
        from .cache import cached_parse

        return cached_parse(text)

    @property
    def has_ellipsis(self) -> bool:
        """Return whether this pattern contains an ellipsis."""
        return self.ellipsis_pos is not None

    @property
    def min_rank(self) -> int:
        """Return the number of shape positions consumed by non-ellipsis components."""
        return sum(1 for component in self.components if component.consumes_fixed_dim())

    def dim_names(self) -> tuple[str, ...]:
        """Return referenced dimension names in first-appearance order."""
        seen: dict[str, None] = {}
        for component in self.components:
            for name in component.dim_names():
                seen.setdefault(name, None)
        return tuple(seen)

    def to_dsl(self) -> str:
        """Render this pattern in canonical text form."""
        return _render(self.components)

    def extend(self, *parts: "PatternComponent | ShapePattern") -> Self:
        """Return a new pattern with components appended."""
        appended: list[PatternComponent] = list(self.components)
        for part in parts:
            if isinstance(part, ShapePattern):
                appended.extend(part.components)
                continue
            appended.append(part)
        return type(self)(appended)

    def match(
        self,
        shape: Iterable[int],
        bindings: "BindingsLike" = None,
    ) -> "ShapeMatch":
        """Match a concrete shape against this pattern.

        Parameters
        ----------
        shape
            Concrete dimension sizes.
        bindings
            Externally known dimension sizes: a mapping, `(name, size)`
            pairs, or a `BindingSource`.

        Returns
        -------
        ShapeMatch
            All names referenced or inferred, and the ellipsis range.

        Raises
        ------
        ShapeMatchError
            If the shape does not unify with the pattern.
        """
        from ..matching import match_shape

        return match_shape(self, shape, bindings)

    def match_tensor(
        self,
        tensor: "TensorLike",
        bindings: "BindingsLike" = None,
    ) -> "ShapeMatch":
        """Match the `.shape` of a tensor-like object against this pattern."""
        from ..tensor_types import shape_of

        return self.match(shape_of(tensor), bindings)

    def __add__(self, other: object) -> "ShapePattern":
        if not isinstance(other, ShapePattern | PatternComponent):
            return NotImplemented
        return self.extend(other)

    def __iter__(self) -> Iterator[PatternComponent]:
        return iter(self.components)

    def __len__(self) -> int:
        return len(self.components)

    def __getitem__(self, index: int) -> PatternComponent:
        return self.components[index]

    def __str__(self) -> str:
        return self.to_dsl()

    def __repr__(self) -> str:
        return f"ShapePattern({self.to_dsl()!r})"


__all__ = ["ShapePattern"]
