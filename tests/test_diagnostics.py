from copy import copy

import pytest

from shapex import (
    CompositeMismatchError,
    ConstraintMismatchError,
    ErrorCode,
    InvalidPatternError,
    MultipleUnboundFactorsError,
    PatternError,
    PatternParseError,
    ShapeMatchError,
    ShapePattern,
    ShapePatternError,
    TooFewDimensionsError,
    UnboundDimensionError,
)


def test_shape_pattern_error_exposes_structured_fields() -> None:
    error = ShapePatternError(
        code=ErrorCode.TOO_FEW_DIMS,
        message="too few dims: pattern needs 3",
        help="add '...' to the pattern",
        related=("shape matcher",),
        data={"required": 3},
    )

    assert error.code == "too_few_dims"
    assert error.external_code == "TOO_FEW_DIMS"
    assert error.severity == "error"
    assert error.help == "add '...' to the pattern"
    assert error.related[0] == "shape matcher"
    assert error.data == {"required": 3}
    assert str(error) == "too few dims: pattern needs 3"


def test_shape_pattern_error_rejects_blank_related_note() -> None:
    with pytest.raises(ValueError):
        ShapePatternError(
            code=ErrorCode.INVALID_PATTERN,
            message="pattern dropped",
            related=(" ",),
        )


def test_shape_pattern_error_rejects_blank_message() -> None:
    with pytest.raises(ValueError):
        ShapePatternError(code=ErrorCode.PARSE_ERROR, message="  ")


def test_shape_pattern_error_rejects_non_scalar_data() -> None:
    with pytest.raises(TypeError):
        ShapePatternError(
            code=ErrorCode.PARSE_ERROR,
            message="bad payload",
            data={"shape": (1, 2)},  # type: ignore[dict-item]
        )


@pytest.mark.parametrize("code", ["parse_error", "PARSE_ERROR", None, 3])
def test_shape_pattern_error_requires_error_code_member(code: object) -> None:
    with pytest.raises(TypeError):
        ShapePatternError(code=code, message="bad code")  # type: ignore[arg-type]


def test_shape_pattern_error_copy_is_detached() -> None:
    original = TooFewDimensionsError(
        shape=(1,),
        pattern="a b",
        bindings=(),
        required=2,
    )

    duplicate = copy(original)

    assert duplicate is not original
    assert type(duplicate) is TooFewDimensionsError
    assert str(duplicate) == str(original)
    assert duplicate.required == 2
    assert duplicate.data == original.data
    assert duplicate.data is not original.data
    assert duplicate.__traceback__ is None


def test_error_hierarchy() -> None:
    assert issubclass(ShapePatternError, ValueError)
    for error_type in (PatternParseError, InvalidPatternError):
        assert issubclass(error_type, PatternError)
    for error_type in (
        TooFewDimensionsError,
        ConstraintMismatchError,
        MultipleUnboundFactorsError,
        CompositeMismatchError,
    ):
        assert issubclass(error_type, ShapeMatchError)
    assert issubclass(UnboundDimensionError, ShapePatternError)


def test_match_error_message_carries_full_context() -> None:
    with pytest.raises(ShapeMatchError) as error:
        ShapePattern.parse("b ... (h p) c").match((2, 5, 12, 3), {"p": 5, "b": 2})

    captured = error.value
    assert str(captured) == (
        'shape [2, 5, 12, 3] !~ "b ... (h p) c" with [b=2, p=5]: '
        'composite factor "h" * 5 != shape 12'
    )
    assert captured.related == ("shape matcher",)
    assert captured.data == {
        "shape": "[2, 5, 12, 3]",
        "pattern": "b ... (h p) c",
        "bindings": "[b=2, p=5]",
        "composite": "(h p)",
        "factor": "h",
        "product": 5,
        "actual": 12,
    }


def test_too_many_dims_without_ellipsis_suggests_ellipsis() -> None:
    with pytest.raises(TooFewDimensionsError) as error:
        ShapePattern.parse("b c").match((1, 2, 3))

    assert error.value.exact is True
    assert error.value.help is not None
    assert "..." in error.value.help
    assert "need exactly 2 dimensions, got 3" in error.value.message


def test_parse_error_diagnostic_contract() -> None:
    with pytest.raises(PatternError) as error:
        ShapePattern.parse("b (c")

    assert error.value.code == ErrorCode.PARSE_ERROR.value
    assert error.value.external_code == ErrorCode.PARSE_ERROR.value.upper()
    assert "pattern parser" in error.value.related
    assert error.value.help is not None
