"""
JSON conversion between AppSync payloads and generated declarations.

Decoding is driven by a ResolvedType (the Python shape of a GraphQL type
reference); encoding walks the value itself. Both use the schema (wire)
names, never the Python-side names.
"""

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

# Attribute set on generated dataclasses: ((python_name, wire_name, ResolvedType), ...)
FIELDS_ATTR = "__appsync_fields__"


class DecodeError(ValueError):
    """Raised when a JSON value does not match the expected declaration."""

    def __init__(self, message: str, path: str = "") -> None:
        self.path = path
        super().__init__(f"{message} at `{path}`" if path else message)


@dataclass(frozen=True)
class ResolvedType:
    """A type reference whose named type has been bound to a Python object."""

    py_type: Any = Any
    of: Optional["ResolvedType"] = None
    non_null: bool = False

    @property
    def is_list(self) -> bool:
        return self.of is not None

    def annotation(self) -> Any:
        """Typing annotation for this reference (List/Optional nesting)."""
        inner = List[self.of.annotation()] if self.of is not None else self.py_type  # type: ignore[index]
        return inner if self.non_null else Optional[inner]


def generated_fields(cls: Any) -> Optional[Tuple[Tuple[str, str, ResolvedType], ...]]:
    return getattr(cls, FIELDS_ATTR, None) if isinstance(cls, type) else None


def _decode_named(value: Any, py_type: Any, path: str) -> Any:
    if py_type is Any:
        return value

    fields = generated_fields(py_type)
    if fields is not None:
        if not isinstance(value, dict):
            raise DecodeError(f"expected an object for {py_type.__name__}", path)
        kwargs = {
            name: decode(value.get(wire_name), resolved, f"{path}.{wire_name}" if path else wire_name)
            for name, wire_name, resolved in fields
        }
        return py_type(**kwargs)

    if isinstance(py_type, type) and issubclass(py_type, Enum):
        try:
            return py_type(value)
        except ValueError as exc:
            raise DecodeError(f"invalid {py_type.__name__} value {value!r}", path) from exc

    if py_type is bool:
        if not isinstance(value, bool):
            raise DecodeError(f"expected a boolean, got {value!r}", path)
        return value

    if isinstance(py_type, type) and issubclass(py_type, int):
        if isinstance(value, bool) or not isinstance(value, int):
            raise DecodeError(f"expected an integer, got {value!r}", path)
        return py_type(value)

    if isinstance(py_type, type) and issubclass(py_type, float):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise DecodeError(f"expected a number, got {value!r}", path)
        return py_type(value)

    if isinstance(py_type, type) and issubclass(py_type, str):
        if not isinstance(value, str):
            raise DecodeError(f"expected a string, got {value!r}", path)
        return py_type(value)

    from_dict = getattr(py_type, "from_dict", None)
    if callable(from_dict):
        return from_dict(value)
    if isinstance(py_type, type) and isinstance(value, py_type):
        return value
    try:
        return py_type(value)
    except (TypeError, ValueError) as exc:
        raise DecodeError(f"cannot build {getattr(py_type, '__name__', py_type)} ({exc})", path) from exc


def decode(value: Any, resolved: ResolvedType, path: str = "") -> Any:
    """
    Decode a JSON value into the Python shape described by ``resolved``.

    Raises:
        DecodeError: If the value does not fit
    """
    if value is None:
        if resolved.non_null:
            raise DecodeError("missing value for non-null type", path)
        return None
    if resolved.of is not None:
        if not isinstance(value, list):
            raise DecodeError(f"expected a list, got {value!r}", path)
        return [decode(item, resolved.of, f"{path}[{i}]") for i, item in enumerate(value)]
    return _decode_named(value, resolved.py_type, path)


def encode(value: Any) -> Any:
    """
    Encode a handler result into a JSON-compatible value.

    Raises:
        TypeError: If the value has no JSON representation
    """
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, Enum):
        return value.value

    fields = generated_fields(type(value))
    if fields is not None:
        return {wire_name: encode(getattr(value, name)) for name, wire_name, _ in fields}

    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if isinstance(value, dict):
        return {str(k): encode(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [encode(item) for item in value]
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: encode(getattr(value, f.name)) for f in dataclasses.fields(value)}
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def arg_from_json(args: Dict[str, Any], arg_name: str, resolved: ResolvedType) -> Any:
    """
    Extract and decode one named argument.

    Args:
        args: ``arguments`` object of the event
        arg_name: Wire name of the argument
        resolved: Expected shape

    Returns:
        Decoded value (None for a missing nullable argument)

    Raises:
        DecodeError: If the argument is missing or has the wrong shape
    """
    return decode(args.get(arg_name), resolved)
