from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from .normalize import normalize_shape


@runtime_checkable
class TensorLike(Protocol):
    """Anything that exposes its dimension sizes as `.shape`."""

    @property
    def shape(self) -> Sequence[int]:
        """Tensor shape."""
        ...


def shape_of(tensor: TensorLike) -> tuple[int, ...]:
    """Return the normalized shape of one tensor-like object."""
    if not isinstance(tensor, TensorLike):
        raise TypeError("tensor must expose a `shape` attribute")
    return normalize_shape(tuple(tensor.shape))


__all__ = ["TensorLike", "shape_of"]
