from .bindings import (
    BindingSource,
    MappingBindings,
    PairBindings,
    as_binding_source,
    collect_binding_map,
    collect_sorted_binding_list,
    lookup_binding,
)
from .diagnostics import (
    CompositeMismatchError,
    ConstraintMismatchError,
    ErrorCode,
    InvalidPatternError,
    MultipleUnboundFactorsError,
    PatternError,
    PatternParseError,
    ShapeMatchError,
    ShapePatternError,
    TooFewDimensionsError,
    UnboundDimensionError,
)
from .matching import ShapeMatch, match_shape
from .pattern import (
    ELLIPSIS,
    Composite,
    Dim,
    EllipsisDims,
    PatternCache,
    PatternComponent,
    ShapePattern,
    cached_parse,
    default_pattern_cache,
    parse_shape_pattern,
)
from .tensor_types import TensorLike, shape_of

__all__ = [
    "as_binding_source",
    "BindingSource",
    "cached_parse",
    "collect_binding_map",
    "collect_sorted_binding_list",
    "Composite",
    "CompositeMismatchError",
    "ConstraintMismatchError",
    "default_pattern_cache",
    "Dim",
    "ELLIPSIS",
    "EllipsisDims",
    "ErrorCode",
    "InvalidPatternError",
    "lookup_binding",
    "MappingBindings",
    "match_shape",
    "MultipleUnboundFactorsError",
    "PairBindings",
    "parse_shape_pattern",
    "PatternCache",
    "PatternComponent",
    "PatternError",
    "PatternParseError",
    "shape_of",
    "ShapeMatch",
    "ShapeMatchError",
    "ShapePattern",
    "ShapePatternError",
    "TensorLike",
    "TooFewDimensionsError",
    "UnboundDimensionError",
]
