import re
from abc import ABC, abstractmethod
from dataclasses import dataclass

IDENTIFIER_PATTERN = r"[A-Za-z_][A-Za-z0-9_]*"
_IDENTIFIER_RE = re.compile(IDENTIFIER_PATTERN, re.ASCII)


def validate_dim_name(name: str) -> None:
    """Validate one dimension name."""
    if not isinstance(name, str):
        raise TypeError("dimension names must be strings")
    if not name:
        raise ValueError("dimension name cannot be empty")
    if _IDENTIFIER_RE.fullmatch(name) is None:
        raise ValueError(f"dimension name must be an ASCII identifier: {name!r}")


class PatternComponent(ABC):
    """Abstract base for one element of a shape pattern."""

    __slots__ = ()

    @abstractmethod
    def to_dsl(self) -> str:
        """Render this component as pattern text."""

    @abstractmethod
    def dim_names(self) -> tuple[str, ...]:
        """Return dimension names referenced by this component, in order."""

    def consumes_fixed_dim(self) -> bool:
        """Return whether this component consumes exactly one shape position."""
        return True

    def __str__(self) -> str:
        return self.to_dsl()


@dataclass(frozen=True, slots=True)
class Dim(PatternComponent):
    """One shape position bound to a name."""

    name: str

    def __post_init__(self) -> None:
        validate_dim_name(self.name)

    def to_dsl(self) -> str:
        return self.name

    def dim_names(self) -> tuple[str, ...]:
        return (self.name,)


@dataclass(frozen=True, slots=True)
class EllipsisDims(PatternComponent):
    """Zero or more contiguous shape positions."""

    def to_dsl(self) -> str:
        return "..."

    def dim_names(self) -> tuple[str, ...]:
        return ()

    def consumes_fixed_dim(self) -> bool:
        return False


ELLIPSIS = EllipsisDims()


@dataclass(frozen=True, slots=True)
class Composite(PatternComponent):
    """One shape position equal to the product of named factors.

    `(h p)` matches a dimension of size `h * p`.
    """

    names: tuple[str, ...]

    def __post_init__(self) -> None:
        if isinstance(self.names, str):
            raise TypeError("composite names must be a sequence of names, not a string")
        names = tuple(self.names)
        if not names:
            raise ValueError("composite requires at least one factor name")
        for name in names:
            validate_dim_name(name)
        object.__setattr__(self, "names", names)

    def to_dsl(self) -> str:
        return "(" + " ".join(self.names) + ")"

    def dim_names(self) -> tuple[str, ...]:
        return self.names


__all__ = [
    "Composite",
    "Dim",
    "ELLIPSIS",
    "EllipsisDims",
    "IDENTIFIER_PATTERN",
    "PatternComponent",
    "validate_dim_name",
]
