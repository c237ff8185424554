import numpy as np
import pytest

import shapex
from shapex import (
    ELLIPSIS,
    Composite,
    Dim,
    ShapePattern,
    TensorLike,
    cached_parse,
    shape_of,
)


def test_public_api_exports_are_importable() -> None:
    for name in shapex.__all__:
        assert hasattr(shapex, name), name


def test_readme_style_destructuring() -> None:
    tensor = np.zeros((2, 9, 9, 80, 40, 3))

    b, h, w, c = (
        cached_parse("b ... (h p) (w p) c")
        .match_tensor(tensor, {"b": 2, "p": 4})
        .select("b", "h", "w", "c")
    )

    assert (b, h, w, c) == (2, 20, 10, 3)


def test_components_can_build_patterns_directly() -> None:
    pattern = ShapePattern([Dim("n"), ELLIPSIS, Composite(("h", "w"))])

    assert pattern == ShapePattern.parse("n ... (h w)")


def test_numpy_arrays_are_tensor_like() -> None:
    tensor = np.ones((3, 4), dtype=np.float32)

    assert isinstance(tensor, TensorLike)
    assert shape_of(tensor) == (3, 4)


def test_shape_of_rejects_objects_without_shape() -> None:
    with pytest.raises(TypeError):
        shape_of([1, 2, 3])  # type: ignore[arg-type]
