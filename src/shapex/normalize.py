from collections.abc import Sequence

import numpy as np


def normalize_dim(value: object, *, what: str) -> int:
    """Validate one non-negative integer extent and return it as `int`."""
    if isinstance(value, bool | np.bool_):
        raise TypeError(f"{what} must be an integer, not bool")
    if isinstance(value, np.integer):
        value = int(value)
    if not isinstance(value, int):
        raise TypeError(f"{what} must be an integer")
    if value < 0:
        raise ValueError(f"{what} must be non-negative")
    return value


def normalize_shape(shape: Sequence[int]) -> tuple[int, ...]:
    """Validate one concrete tensor shape."""
    if isinstance(shape, str | bytes) or not isinstance(shape, Sequence):
        raise TypeError("shape must be a sequence of integers")
    return tuple(normalize_dim(value, what="shape entries") for value in shape)


def normalize_binding_value(name: str, value: object) -> int:
    """Validate one external dimension binding."""
    if not isinstance(name, str):
        raise TypeError("binding names must be strings")
    return normalize_dim(value, what=f"binding for {name!r}")


__all__ = [
    "normalize_binding_value",
    "normalize_dim",
    "normalize_shape",
]
