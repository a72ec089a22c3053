"""
Parser for the ``appsync_lambda_main`` directive list.

Each argument after the schema path is one of:

- ``identifier = value``: an option or override, e.g. ``batch = false``,
  ``type_override = Player.id: String``, ``name_override = Team.PYTHON: Snake``
- ``identifier() -> TypeRef``: an AWS client accessor, e.g.
  ``dynamodb() -> mypy_boto3_dynamodb.DynamoDBClient``
"""

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Union

from graphql import GraphQLSyntaxError, TypeNode, parse_type

from ..utils.logging import get_logger
from ..utils.naming import is_identifier
from .errors import (
    InvalidOptionValueError,
    MalformedClientSpecError,
    MalformedOverrideSyntaxError,
    SourceLocation,
    UnknownArgumentError,
    UnknownOptionError,
)

logger = get_logger(__name__)

_OPTION = re.compile(r"^\s*([A-Za-z_]\w*)\s*=(.*)$", re.DOTALL)
_CLIENT = re.compile(r"^\s*([A-Za-z_]\w*)\s*\(\s*\)\s*->(.*)$", re.DOTALL)
_TYPE_OVERRIDE = re.compile(
    r"^\s*([A-Za-z_]\w*)\.([A-Za-z_]\w*)(?:\.([A-Za-z_]\w*))?\s*:\s*(.+?)\s*$", re.DOTALL
)
_NAME_OVERRIDE = re.compile(r"^\s*([A-Za-z_]\w*)(?:\.([A-Za-z_]\w*))?\s*:\s*(\S+?)\s*$")
_DOTTED_REF = re.compile(r"^[A-Za-z_]\w*(?:\.[A-Za-z_]\w*)*$")
_SERVICE_NAME = re.compile(r"^[a-z0-9][a-z0-9-]*$")

BOOLEAN_OPTIONS = (
    "batch",
    "exclude_lambda_handler",
    "only_lambda_handler",
    "exclude_appsync_types",
    "only_appsync_types",
    "exclude_appsync_operations",
    "only_appsync_operations",
)
DEPRECATED_OPTIONS = {"field_type_override": "type_override"}
STUBS_PREFIX = "mypy_boto3_"


@dataclass(frozen=True)
class FlagDirective:
    """``batch = bool`` or one of the six visibility flags."""

    key: str
    value: bool
    location: Optional[SourceLocation] = None


@dataclass(frozen=True)
class HookDirective:
    """``hook = fn_name``; ``hook = None`` clears a previous hook."""

    name: Optional[str]
    location: Optional[SourceLocation] = None


@dataclass(frozen=True)
class TypeOverride:
    """``type_override = Type.field[.arg]: NewType``."""

    type_name: str
    field_name: str
    arg_name: Optional[str]
    new_type: TypeNode
    location: Optional[SourceLocation] = None


@dataclass(frozen=True)
class NameOverride:
    """``name_override = Type[.fieldOrVariant]: NewName``."""

    type_name: str
    field_name: Optional[str]
    new_name: str
    location: Optional[SourceLocation] = None


@dataclass(frozen=True)
class ClientSpec:
    """``accessor() -> TypeRef``: a lazily created boto3 client."""

    accessor: str
    client_type: str
    service_name: str
    location: Optional[SourceLocation] = None


Directive = Union[FlagDirective, HookDirective, TypeOverride, NameOverride]


def parse_bool(value: str, key: str, location: Optional[SourceLocation]) -> bool:
    """Parse a ``true``/``false`` literal."""
    lowered = value.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise InvalidOptionValueError(f"`{key}` expects `true` or `false`, got `{value.strip()}`", location)


def parse_type_override(value: str, location: Optional[SourceLocation] = None) -> TypeOverride:
    """
    Parse the value of a ``type_override`` directive.

    Accepted forms: ``Type.field: NewType`` and ``Type.field.arg: NewType``,
    where NewType is a GraphQL type expression such as ``String`` or
    ``[Player!]!``. ``Query``, ``Mutation`` and ``Subscription`` are plain
    type names here.

    Raises:
        MalformedOverrideSyntaxError: If the value does not match either form
    """
    match = _TYPE_OVERRIDE.match(value)
    if not match:
        raise MalformedOverrideSyntaxError(
            f"Invalid type override `{value.strip()}`: expected `Type.field: NewType` "
            "or `Type.field.arg: NewType`",
            location,
        )
    type_name, field_name, arg_name, new_type = match.groups()
    try:
        type_node = parse_type(new_type, no_location=True)
    except GraphQLSyntaxError as exc:
        raise MalformedOverrideSyntaxError(
            f"Invalid override type `{new_type}` ({exc.message})", location
        ) from exc
    return TypeOverride(type_name, field_name, arg_name, type_node, location)


def parse_name_override(value: str, location: Optional[SourceLocation] = None) -> NameOverride:
    """
    Parse the value of a ``name_override`` directive.

    Accepted forms: ``Type: NewName`` and ``Type.fieldOrVariant: NewName``.

    Raises:
        MalformedOverrideSyntaxError: If the value does not match either form
            or NewName is not a valid Python identifier
    """
    match = _NAME_OVERRIDE.match(value)
    if not match:
        raise MalformedOverrideSyntaxError(
            f"Invalid name override `{value.strip()}`: expected `Type: NewName` "
            "or `Type.field: new_name`",
            location,
        )
    type_name, field_name, new_name = match.groups()
    if not is_identifier(new_name):
        raise MalformedOverrideSyntaxError(
            f"`{new_name}` is not a valid Python identifier", location
        )
    return NameOverride(type_name, field_name, new_name, location)


def service_name_for(client_type: str) -> str:
    """
    Derive the boto3 service name from a client type reference.

    Examples:
        mypy_boto3_dynamodb.DynamoDBClient -> dynamodb
        mypy_boto3_cognito_idp.CognitoIdentityProviderClient -> cognito-idp
        s3 -> s3
    """
    head = client_type.split(".", 1)[0]
    if head.startswith(STUBS_PREFIX):
        return head[len(STUBS_PREFIX):].replace("_", "-")
    return head.replace("_", "-")


def parse_client_spec(text: str, location: Optional[SourceLocation] = None) -> ClientSpec:
    """
    Parse an ``accessor() -> TypeRef`` client declaration.

    Raises:
        MalformedClientSpecError: If the declaration does not match the grammar
    """
    match = _CLIENT.match(text)
    if not match:
        raise MalformedClientSpecError(
            f"Invalid client declaration `{text.strip()}`: expected `name() -> ClientType`",
            location,
        )
    accessor, client_type = match.group(1), match.group(2).strip()
    if not (_DOTTED_REF.match(client_type) or _SERVICE_NAME.match(client_type)):
        raise MalformedClientSpecError(f"Invalid client type `{client_type}`", location)
    return ClientSpec(accessor, client_type, service_name_for(client_type), location)


def parse_option(key: str, value: str, location: Optional[SourceLocation] = None) -> Directive:
    """
    Parse one ``identifier = value`` directive.

    Raises:
        UnknownOptionError: If ``key`` is not a recognized option
    """
    if key in DEPRECATED_OPTIONS:
        logger.warning(
            "Deprecated option", option=key, replacement=DEPRECATED_OPTIONS[key], location=str(location)
        )
        key = DEPRECATED_OPTIONS[key]

    if key in BOOLEAN_OPTIONS:
        return FlagDirective(key, parse_bool(value, key, location), location)
    if key == "hook":
        hook = value.strip()
        if hook == "None":
            return HookDirective(None, location)
        if not is_identifier(hook):
            raise InvalidOptionValueError(f"`hook` expects a function name, got `{hook}`", location)
        return HookDirective(hook, location)
    if key == "type_override":
        return parse_type_override(value, location)
    if key == "name_override":
        return parse_name_override(value, location)
    raise UnknownOptionError(key, location)


def parse_directives(
    arguments: Iterable[str], first_index: int = 1
) -> List[Union[Directive, ClientSpec]]:
    """
    Classify and parse the arguments following the schema path, in order.

    Args:
        arguments: Directive strings
        first_index: Position of the first directive in the full argument list

    Returns:
        Parsed directives and client declarations, in argument order

    Raises:
        UnknownArgumentError: If an argument is neither an option nor a client
        UnknownOptionError: If an option key is not recognized
        MalformedClientSpecError: If two clients share an accessor name
    """
    parsed: List[Union[Directive, ClientSpec]] = []
    accessors = set()
    for index, argument in enumerate(arguments, start=first_index):
        if not isinstance(argument, str):
            raise UnknownArgumentError(SourceLocation(index, repr(argument)))
        if not argument.strip():
            continue
        location = SourceLocation(index, argument.strip())

        option = _OPTION.match(argument)
        if option:
            parsed.append(parse_option(option.group(1), option.group(2), location))
        elif _CLIENT.match(argument):
            client = parse_client_spec(argument, location)
            if client.accessor in accessors:
                raise MalformedClientSpecError(
                    f"Client accessor `{client.accessor}` is declared more than once", location
                )
            accessors.add(client.accessor)
            parsed.append(client)
        else:
            raise UnknownArgumentError(location)
    return parsed
