from .cache import PatternCache, cached_parse, default_pattern_cache
from .components import (
    ELLIPSIS,
    Composite,
    Dim,
    EllipsisDims,
    PatternComponent,
    validate_dim_name,
)
from .model import ShapePattern
from .parser import parse_components, parse_shape_pattern

__all__ = [
    "cached_parse",
    "Composite",
    "default_pattern_cache",
    "Dim",
    "ELLIPSIS",
    "EllipsisDims",
    "parse_components",
    "parse_shape_pattern",
    "PatternCache",
    "PatternComponent",
    "ShapePattern",
    "validate_dim_name",
]
