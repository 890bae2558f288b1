"""
Strata Cache - Typed Lookup Results

``lookup()`` reports one of three outcomes instead of casting blindly:
- Found(value): a live entry whose value matches the requested type
- NotFound(): no live entry under the key
- TypeMismatch(expected, actual): a live entry of the wrong type

``get()`` is built on top of it and turns NotFound into the zero value of the
requested type.
"""

import types
import typing
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from ..errors import InvalidArgumentError

T = TypeVar("T")

# Types whose no-argument constructor gives the "zero value"
_ZERO_CONSTRUCTIBLE: frozenset[type] = frozenset(
    {int, float, complex, bool, str, bytes, bytearray, list, dict, tuple, set, frozenset}
)


@dataclass(frozen=True, slots=True)
class Found(Generic[T]):
    value: T


@dataclass(frozen=True, slots=True)
class NotFound:
    pass


@dataclass(frozen=True, slots=True)
class TypeMismatch:
    expected: Any
    actual: type


LookupResult = Found[Any] | NotFound | TypeMismatch


def _runtime_type(expected_type: Any) -> Any:
    """Strip generic parameters: ``list[int]`` is checked as ``list``."""
    if expected_type is Any:
        return object
    origin = typing.get_origin(expected_type)
    if origin is None:
        return expected_type
    if origin is typing.Union or origin is types.UnionType:
        targets = tuple(_runtime_type(arg) for arg in typing.get_args(expected_type))
        # ``int | Any`` accepts everything
        return object if object in targets else targets
    return origin


def validate_expected_type(expected_type: Any) -> None:
    """
    Reject types that cannot be checked at runtime.

    ``Literal[...]``, string forward references, non-runtime-checkable
    protocols and similar constructs have no ``isinstance`` form.

    Raises:
        InvalidArgumentError: If ``expected_type`` cannot be checked
    """
    target = _runtime_type(expected_type)
    for candidate in target if isinstance(target, tuple) else (target,):
        try:
            isinstance(None, candidate)
        except TypeError as e:
            raise InvalidArgumentError(
                "expected_type",
                "must be a class, a generic alias or a union of classes",
                {"received": repr(expected_type)},
            ) from e


def check_type(value: Any, expected_type: Any) -> bool:
    """Whether ``value`` satisfies ``expected_type``. ``Any`` and ``object`` accept everything."""
    if expected_type is Any or expected_type is object:
        return True
    return isinstance(value, _runtime_type(expected_type))


def zero_value(expected_type: Any) -> Any:
    """
    Default returned by ``get()`` for a missing key.

    ``int -> 0``, ``str -> ""``, ``list -> []`` and so on for builtin value
    types; ``None`` for everything else.
    """
    runtime_type = _runtime_type(expected_type)
    if isinstance(runtime_type, type) and runtime_type in _ZERO_CONSTRUCTIBLE:
        return runtime_type()
    return None
