from collections import OrderedDict
from copy import copy
from dataclasses import dataclass, field
from threading import RLock
from typing import TypeAlias

from ..diagnostics import PatternError
from .model import ShapePattern
from .parser import parse_shape_pattern

_PATTERN_CACHE_MAX_ENTRIES = 1_024

ParseOutcome: TypeAlias = ShapePattern | PatternError


@dataclass(slots=True)
class PatternCache:
    """Thread-safe bounded LRU cache of parse outcomes keyed by pattern text.

    Both parsed patterns and parse failures are memoized. Entries are only
    dropped by LRU eviction once `max_entries` is exceeded.
    """

    max_entries: int = _PATTERN_CACHE_MAX_ENTRIES
    _entries: OrderedDict[str, ParseOutcome] = field(default_factory=OrderedDict)
    _lock: RLock = field(default_factory=RLock)

    def __post_init__(self) -> None:
        if isinstance(self.max_entries, bool) or not isinstance(self.max_entries, int):
            raise TypeError("max_entries must be an int")
        if self.max_entries < 1:
            raise ValueError("max_entries must be positive")

    def get(self, text: str, /) -> ParseOutcome | None:
        """Return the cached outcome for one pattern text, if present."""
        with self._lock:
            cached = self._entries.get(text)
            if cached is None:
                return None
            self._entries.move_to_end(text)
            return cached

    def put(self, text: str, outcome: ParseOutcome, /) -> None:
        """Store one parse outcome with LRU eviction."""
        with self._lock:
            self._entries[text] = outcome
            self._entries.move_to_end(text)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        """Drop every cached entry."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, text: object) -> bool:
        with self._lock:
            return text in self._entries


_DEFAULT_PATTERN_CACHE = PatternCache()


def default_pattern_cache() -> PatternCache:
    """Return the process-wide pattern cache."""
    return _DEFAULT_PATTERN_CACHE


def cached_parse(text: str, *, cache: PatternCache | None = None) -> ShapePattern:
    """Parse pattern text, memoizing the outcome.

    Behaves exactly like `parse_shape_pattern`. A memoized failure is raised
    as a fresh copy on every call, so callers never share exception state.
    Parsing happens outside the cache lock, so concurrent misses on the same
    text may parse twice; the last writer's outcome is kept.

    Parameters
    ----------
    text
        Pattern text.
    cache
        Cache to use; defaults to the process-wide cache.

    Raises
    ------
    PatternParseError
        If `text` does not conform to the pattern grammar.
    InvalidPatternError
        If `text` contains more than one ellipsis.
    """
    if not isinstance(text, str):
        raise TypeError("pattern text must be a string")
    active_cache = _DEFAULT_PATTERN_CACHE if cache is None else cache

    cached = active_cache.get(text)
    if cached is None:
        try:
            cached = parse_shape_pattern(text)
        except PatternError as error:
            cached = error.with_traceback(None)
        active_cache.put(text, cached)

    if isinstance(cached, PatternError):
        raise copy(cached) from None
    return cached


__all__ = [
    "cached_parse",
    "default_pattern_cache",
    "ParseOutcome",
    "PatternCache",
]
