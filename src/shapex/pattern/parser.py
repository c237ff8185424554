"""Parser for shape-pattern text.

Grammar (whitespace between components is optional)::

    pattern    := component+
    component  := "..." | identifier | composite
    composite  := "(" ws* identifier (ws+ identifier)* ws* ")"
    identifier := [A-Za-z_][A-Za-z0-9_]*
    ws         := space | tab | CR | LF (ASCII only)
"""

import re

from ..diagnostics import PatternParseError
from .components import (
    ELLIPSIS,
    IDENTIFIER_PATTERN,
    Composite,
    Dim,
    PatternComponent,
)
from .model import ShapePattern

_WHITESPACE = " \t\r\n"
_WS = r"[ \t\r\n]"
_WHITESPACE_RE = re.compile(rf"{_WS}*", re.ASCII)
_ELLIPSIS_TOKEN = "..."
_IDENTIFIER_RE = re.compile(IDENTIFIER_PATTERN, re.ASCII)
_COMPOSITE_RE = re.compile(
    rf"\({_WS}*({IDENTIFIER_PATTERN}(?:{_WS}+{IDENTIFIER_PATTERN})*){_WS}*\)",
    re.ASCII,
)


def _scan_component(text: str, pos: int) -> tuple[PatternComponent, int] | None:
    """Scan one component at `pos`; return it with the next position."""
    if text.startswith(_ELLIPSIS_TOKEN, pos):
        return ELLIPSIS, pos + len(_ELLIPSIS_TOKEN)

    identifier = _IDENTIFIER_RE.match(text, pos)
    if identifier is not None:
        return Dim(identifier.group()), identifier.end()

    composite = _COMPOSITE_RE.match(text, pos)
    if composite is not None:
        return Composite(tuple(composite.group(1).split())), composite.end()

    return None


def parse_components(text: str) -> tuple[PatternComponent, ...]:
    """Parse pattern text into components without pattern-level validation.

    Raises
    ------
    PatternParseError
        If the trimmed text is empty, contains an unparseable token, or
        has unconsumed trailing input.
    """
    if not isinstance(text, str):
        raise TypeError("pattern text must be a string")

    trimmed = text.strip(_WHITESPACE)
    components: list[PatternComponent] = []
    pos = 0
    while pos < len(trimmed):
        scanned = _scan_component(trimmed, pos)
        if scanned is None:
            raise PatternParseError(pattern=text)
        component, pos = scanned
        components.append(component)
        pos = _WHITESPACE_RE.match(trimmed, pos).end()

    if not components:
        raise PatternParseError(pattern=text)
    return tuple(components)


def parse_shape_pattern(text: str) -> ShapePattern:
    """Parse pattern text into a validated `ShapePattern`.

    Parameters
    ----------
    text
        Pattern text such as ``"b ... (h p) (w p) c"``. Leading and trailing
        whitespace is ignored.

    Returns
    -------
    ShapePattern
        Components in textual order.

    Raises
    ------
    PatternParseError
        If `text` does not conform to the pattern grammar.
    InvalidPatternError
        If `text` contains more than one ellipsis.
    TypeError
        If `text` is not a string.
    """
    return ShapePattern(parse_components(text))


__all__ = ["parse_components", "parse_shape_pattern"]
