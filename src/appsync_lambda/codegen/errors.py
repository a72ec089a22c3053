"""
Generation-time errors.

Every error points back to the directive that caused it, so the caller can
report exactly which argument of ``appsync_lambda_main`` is wrong.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SourceLocation:
    """Position of a directive in the ``appsync_lambda_main`` argument list.

    Index 0 is the schema path; directives start at 1.
    """

    index: int
    text: str

    def __str__(self) -> str:
        return f"argument {self.index} `{self.text}`"


class GenerationError(Exception):
    """Base exception for errors that abort declaration generation."""

    def __init__(self, message: str, location: Optional[SourceLocation] = None) -> None:
        self.message = message
        self.location = location
        super().__init__(f"{message} (at {location})" if location else message)


class SchemaIOError(GenerationError):
    """The schema file could not be read."""

    def __init__(self, path: str, cause: OSError, location: Optional[SourceLocation] = None) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Could not open GraphQL schema file at '{path}' ({cause})", location)


class SchemaParseError(GenerationError):
    """The GraphQL parser rejected the schema content."""

    def __init__(self, parser_message: str, location: Optional[SourceLocation] = None) -> None:
        self.parser_message = parser_message
        super().__init__(f"Could not parse GraphQL schema file ({parser_message})", location)


class UnknownOptionError(GenerationError):
    """An ``identifier = value`` directive used an unrecognized key."""

    def __init__(self, option: str, location: Optional[SourceLocation] = None) -> None:
        self.option = option
        super().__init__(f"Unknown parameter `{option}`", location)


class UnknownArgumentError(GenerationError):
    """An argument is neither an option directive nor a client declaration."""

    def __init__(self, location: Optional[SourceLocation] = None) -> None:
        super().__init__("Unknown argument", location)


class InvalidOptionValueError(GenerationError):
    """An option received a value of the wrong kind (e.g. ``batch = maybe``)."""


class MalformedOverrideSyntaxError(GenerationError):
    """A ``type_override`` or ``name_override`` value does not follow its grammar."""


class MalformedClientSpecError(GenerationError):
    """A client declaration is malformed or reuses an accessor name."""


class UnknownOverrideTargetError(GenerationError):
    """An override names a type, field, argument or variant absent from the schema."""


class UnresolvedReferenceError(GenerationError):
    """A hook or override type name cannot be resolved to a Python object."""


class InvalidHookError(GenerationError):
    """The hook is not an ``async def`` function."""
