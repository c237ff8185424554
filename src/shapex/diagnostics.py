from enum import Enum
from typing import Literal, TypeAlias

DiagnosticSeverity: TypeAlias = Literal["error"]
DiagnosticValue: TypeAlias = str | int | bool
BindingSnapshot: TypeAlias = tuple[tuple[str, int], ...]


class ErrorCode(str, Enum):
    """Canonical internal diagnostic codes."""

    PARSE_ERROR = "parse_error"
    INVALID_PATTERN = "invalid_pattern"
    TOO_FEW_DIMS = "too_few_dims"
    CONSTRAINT_MISMATCH = "constraint_mismatch"
    MULTIPLE_UNBOUND_FACTORS = "multiple_unbound_factors"
    COMPOSITE_MISMATCH = "composite_mismatch"
    UNBOUND_DIM = "unbound_dim"


class ShapePatternError(ValueError):
    """Structured base error for shape-pattern diagnostics."""

    severity: DiagnosticSeverity
    code: str
    external_code: str
    help: str | None
    related: tuple[str, ...]
    data: dict[str, DiagnosticValue]
    message: str

    @staticmethod
    def _normalize_code(code: ErrorCode) -> str:
        """Return the canonical internal `snake_case` form of `code`."""
        if not isinstance(code, ErrorCode):
            raise TypeError("diagnostic code must be an ErrorCode")
        return code.value

    @staticmethod
    def _normalize_related(related: tuple[str, ...]) -> tuple[str, ...]:
        """Validate related notes."""
        normalized_related: list[str] = []
        for note in related:
            if not isinstance(note, str):
                raise TypeError("related diagnostics must be tuple[str, ...]")
            if not note.strip():
                raise ValueError("related diagnostic note cannot be empty")
            normalized_related.append(note)
        return tuple(normalized_related)

    @staticmethod
    def _normalize_data(data: dict[str, DiagnosticValue]) -> dict[str, DiagnosticValue]:
        """Validate and copy diagnostic payload data."""
        normalized_data: dict[str, DiagnosticValue] = {}
        for key, value in data.items():
            if not isinstance(key, str):
                raise TypeError("diagnostic data keys must be strings")
            if not isinstance(value, str | int | bool):
                raise TypeError(
                    "diagnostic data values must be str, int, or bool entries"
                )
            normalized_data[key] = value
        return normalized_data

    def __init__(
        self,
        *,
        code: ErrorCode,
        message: str,
        help: str | None = None,
        related: tuple[str, ...] = (),
        data: dict[str, DiagnosticValue] | None = None,
    ) -> None:
        """Build one structured shape-pattern error."""
        normalized_code = self._normalize_code(code)
        if not isinstance(message, str):
            raise TypeError("diagnostic message must be a string")
        if not message.strip():
            raise ValueError("diagnostic message cannot be empty")
        if help is not None and not isinstance(help, str):
            raise TypeError("diagnostic help must be a string or None")

        payload_data = {} if data is None else data
        self.code = normalized_code
        self.external_code = normalized_code.upper()
        self.severity = "error"
        self.help = help
        self.related = self._normalize_related(related)
        self.data = self._normalize_data(payload_data)
        self.message = message
        super().__init__(message)

    def __copy__(self) -> "ShapePatternError":
        """Return a fresh error with the same fields and no raise history."""
        duplicate = type(self).__new__(type(self), *self.args)
        duplicate.__dict__.update(self.__dict__)
        duplicate.data = dict(self.data)
        return duplicate


class PatternError(ShapePatternError):
    """Pattern text could not be turned into a valid pattern."""


class PatternParseError(PatternError):
    """Pattern text does not conform to the pattern grammar."""

    pattern: str

    def __init__(self, *, pattern: str) -> None:
        self.pattern = pattern
        super().__init__(
            code=ErrorCode.PARSE_ERROR,
            message=f'parse error for "{pattern}"',
            help="patterns are space-separated names, '...', or '(name name ...)' groups",
            related=("pattern parser",),
            data={"pattern": pattern},
        )


class InvalidPatternError(PatternError):
    """Pattern is well-formed text but structurally illegal."""

    pattern: str
    reason: str

    def __init__(self, *, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(
            code=ErrorCode.INVALID_PATTERN,
            message=f'invalid pattern "{pattern}": {reason}',
            related=("pattern validation",),
            data={"pattern": pattern, "reason": reason},
        )


def format_bindings(bindings: BindingSnapshot) -> str:
    """Render a binding snapshot for diagnostic messages."""
    return "[" + ", ".join(f"{name}={value}" for name, value in bindings) + "]"


class ShapeMatchError(ShapePatternError):
    """A concrete shape does not unify with a pattern."""

    shape: tuple[int, ...]
    pattern: str
    bindings: BindingSnapshot
    reason: str

    def __init__(
        self,
        *,
        code: ErrorCode,
        shape: tuple[int, ...],
        pattern: str,
        bindings: BindingSnapshot,
        reason: str,
        help: str | None = None,
        data: dict[str, DiagnosticValue] | None = None,
    ) -> None:
        self.shape = shape
        self.pattern = pattern
        self.bindings = bindings
        self.reason = reason
        payload: dict[str, DiagnosticValue] = {
            "shape": str(list(shape)),
            "pattern": pattern,
            "bindings": format_bindings(bindings),
        }
        if data is not None:
            payload.update(data)
        super().__init__(
            code=code,
            message=(
                f'shape {list(shape)} !~ "{pattern}" with '
                f"{format_bindings(bindings)}: {reason}"
            ),
            help=help,
            related=("shape matcher",),
            data=payload,
        )


class TooFewDimensionsError(ShapeMatchError):
    """Shape rank does not fit the pattern.

    Raised for shapes shorter than the non-ellipsis components and, with
    `exact=True`, for shapes longer than an ellipsis-free pattern.
    """

    def __init__(
        self,
        *,
        shape: tuple[int, ...],
        pattern: str,
        bindings: BindingSnapshot,
        required: int,
        exact: bool = False,
    ) -> None:
        self.required = required
        self.exact = exact
        if exact:
            reason = f"rank mismatch: need exactly {required} dimensions, got {len(shape)}"
        else:
            reason = f"too few dimensions: need {required}, got {len(shape)}"
        super().__init__(
            code=ErrorCode.TOO_FEW_DIMS,
            shape=shape,
            pattern=pattern,
            bindings=bindings,
            reason=reason,
            help="add '...' to the pattern to allow extra dimensions" if exact else None,
            data={"required": required, "rank": len(shape), "exact": exact},
        )


class ConstraintMismatchError(ShapeMatchError):
    """A bound dimension disagrees with the observed shape value."""

    def __init__(
        self,
        *,
        shape: tuple[int, ...],
        pattern: str,
        bindings: BindingSnapshot,
        dim: str,
        bound: int,
        actual: int,
    ) -> None:
        self.dim = dim
        self.bound = bound
        self.actual = actual
        super().__init__(
            code=ErrorCode.CONSTRAINT_MISMATCH,
            shape=shape,
            pattern=pattern,
            bindings=bindings,
            reason=f"constraint mismatch @{dim}: {bound} != {actual}",
            data={"dim": dim, "bound": bound, "actual": actual},
        )


class MultipleUnboundFactorsError(ShapeMatchError):
    """A composite group has more than one factor with no known value."""

    def __init__(
        self,
        *,
        shape: tuple[int, ...],
        pattern: str,
        bindings: BindingSnapshot,
        composite: str,
        unbound: tuple[str, ...],
    ) -> None:
        self.composite = composite
        self.unbound = unbound
        super().__init__(
            code=ErrorCode.MULTIPLE_UNBOUND_FACTORS,
            shape=shape,
            pattern=pattern,
            bindings=bindings,
            reason=f"multiple unbound factors in composite {composite}",
            help="bind all but one factor of each composite group",
            data={"composite": composite, "unbound": " ".join(unbound)},
        )


class CompositeMismatchError(ShapeMatchError):
    """Resolved factors of a composite do not produce the observed value."""

    def __init__(
        self,
        *,
        shape: tuple[int, ...],
        pattern: str,
        bindings: BindingSnapshot,
        composite: str,
        factor: str | None,
        product: int,
        actual: int,
    ) -> None:
        self.composite = composite
        self.factor = factor
        self.product = product
        self.actual = actual
        if factor is None:
            reason = f"composite {composite} product {product} != shape {actual}"
        else:
            reason = f'composite factor "{factor}" * {product} != shape {actual}'
        data: dict[str, DiagnosticValue] = {
            "composite": composite,
            "product": product,
            "actual": actual,
        }
        if factor is not None:
            data["factor"] = factor
        super().__init__(
            code=ErrorCode.COMPOSITE_MISMATCH,
            shape=shape,
            pattern=pattern,
            bindings=bindings,
            reason=reason,
            data=data,
        )


class UnboundDimensionError(ShapePatternError):
    """A dimension name requested from a match was never bound."""

    dim: str
    available: tuple[str, ...]

    def __init__(self, *, dim: str, available: tuple[str, ...]) -> None:
        self.dim = dim
        self.available = available
        super().__init__(
            code=ErrorCode.UNBOUND_DIM,
            message=f'dimension "{dim}" was not bound by the match',
            help="select only names referenced by the pattern or its bindings",
            related=("match selection",),
            data={"dim": dim, "available": " ".join(available)},
        )


__all__ = [
    "BindingSnapshot",
    "CompositeMismatchError",
    "ConstraintMismatchError",
    "ErrorCode",
    "format_bindings",
    "InvalidPatternError",
    "MultipleUnboundFactorsError",
    "PatternError",
    "PatternParseError",
    "ShapeMatchError",
    "ShapePatternError",
    "TooFewDimensionsError",
    "UnboundDimensionError",
]
