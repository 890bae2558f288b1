"""
Strata Cache - Lookup Helper Tests
"""

from typing import Any, Literal, Optional, Protocol

import pytest

from strata.cache.lookup import check_type, validate_expected_type, zero_value
from strata.cache.retention import is_meaningful
from strata.errors import InvalidArgumentError


class TestZeroValue:
    @pytest.mark.parametrize(
        ("expected_type", "zero"),
        [
            (int, 0),
            (float, 0.0),
            (bool, False),
            (str, ""),
            (bytes, b""),
            (list, []),
            (dict, {}),
            (tuple, ()),
            (set, set()),
            (list[str], []),
        ],
    )
    def test_builtin_types(self, expected_type: Any, zero: Any) -> None:
        assert zero_value(expected_type) == zero
        assert type(zero_value(expected_type)) is type(zero)

    @pytest.mark.parametrize("expected_type", [object, Any, Optional[int], int | str, Exception])
    def test_other_types_default_to_none(self, expected_type: Any) -> None:
        assert zero_value(expected_type) is None


class TestCheckType:
    def test_object_and_any_accept_everything(self) -> None:
        assert check_type(42, object) is True
        assert check_type("x", Any) is True

    def test_plain_types(self) -> None:
        assert check_type(42, int) is True
        assert check_type("42", int) is False

    def test_unions(self) -> None:
        assert check_type("x", int | str) is True
        assert check_type(1.5, int | str) is False
        assert check_type(None, Optional[int]) is True

    def test_generic_alias_uses_origin(self) -> None:
        assert check_type(["a"], list[int]) is True
        assert check_type(("a",), list[int]) is False

    def test_union_with_any_accepts_everything(self) -> None:
        assert check_type(1.5, int | Any) is True
        assert check_type(None, Optional[Any]) is True


class _Named(Protocol):
    name: str


class TestValidateExpectedType:
    @pytest.mark.parametrize("expected_type", [int, object, Any, list[int], int | str, Optional[int], int | Any])
    def test_checkable_types(self, expected_type: Any) -> None:
        validate_expected_type(expected_type)

    @pytest.mark.parametrize("expected_type", [Literal["b"], "int", int | Literal[1], _Named, 42])
    def test_uncheckable_types(self, expected_type: Any) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            validate_expected_type(expected_type)

        assert exc_info.value.argument == "expected_type"
        assert isinstance(exc_info.value, ValueError)


class TestIsMeaningful:
    @pytest.mark.parametrize("value", [None, [], {}, "", b"", (), set(), frozenset()])
    def test_empty_values(self, value: Any) -> None:
        assert is_meaningful(value) is False

    @pytest.mark.parametrize("value", [0, False, 0.0, [0], {"a": None}, " ", object()])
    def test_meaningful_values(self, value: Any) -> None:
        assert is_meaningful(value) is True
