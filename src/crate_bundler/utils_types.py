# src/crate_bundler/utils_types.py

import types
from typing import (
    Any,
    Literal,
    TypeVar,
    Union,
    cast,
    get_args,
    get_origin,
    get_type_hints,
)

from typing_extensions import NotRequired, Required

T = TypeVar("T")


def cast_hint(typ: type[T] | Any, value: Any) -> T:
    """Explicit cast for values whose shape was already checked at runtime.

    Unlike `typing.cast`, accepts parametrized generics like `list[str]`.
    """
    del typ
    return cast("T", value)


def schema_from_typeddict(td: type[Any]) -> dict[str, Any]:
    """Return {field: type} for a TypedDict, unwrapping NotRequired/Required."""
    hints = get_type_hints(td, include_extras=True)
    schema: dict[str, Any] = {}
    for key, hint in hints.items():
        if get_origin(hint) in (NotRequired, Required):
            hint = get_args(hint)[0]
        schema[key] = hint
    return schema


def safe_isinstance(value: Any, expected_type: Any) -> bool:
    """isinstance() that understands Any, Literal, unions and list[T].

    bool is never accepted where an int or float is expected, and ints are
    accepted where a float is expected.
    """
    if expected_type is Any:
        return True

    origin = get_origin(expected_type)
    args = get_args(expected_type)

    if origin is None:
        if not isinstance(expected_type, type):
            return False
        if isinstance(value, bool) and expected_type in (int, float):
            return False
        if expected_type is float and isinstance(value, int):
            return True
        return isinstance(value, expected_type)

    if origin is Literal:
        return value in args

    if origin in (Union, types.UnionType):
        return any(safe_isinstance(value, a) for a in args)

    if origin is list:
        if not isinstance(value, list):
            return False
        subtype = args[0] if args else Any
        items = cast("list[Any]", value)
        return all(safe_isinstance(item, subtype) for item in items)

    return isinstance(value, origin)
