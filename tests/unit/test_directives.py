"""Tests for the directive parser."""

import pytest
from graphql import ListTypeNode, NamedTypeNode, NonNullTypeNode

from appsync_lambda.codegen.directives import (
    ClientSpec,
    FlagDirective,
    HookDirective,
    NameOverride,
    TypeOverride,
    parse_client_spec,
    parse_directives,
    parse_name_override,
    parse_type_override,
    service_name_for,
)
from appsync_lambda.codegen.errors import (
    InvalidOptionValueError,
    MalformedClientSpecError,
    MalformedOverrideSyntaxError,
    SourceLocation,
    UnknownArgumentError,
    UnknownOptionError,
)


class TestParseDirectives:
    """Tests for classifying directive arguments."""

    def test_flags_are_parsed(self) -> None:
        """Test boolean options become FlagDirectives."""
        parsed = parse_directives(["batch = false", "exclude_lambda_handler = true"])

        assert parsed[0] == FlagDirective("batch", False, SourceLocation(1, "batch = false"))
        assert isinstance(parsed[1], FlagDirective)
        assert parsed[1].key == "exclude_lambda_handler"
        assert parsed[1].value is True

    def test_locations_follow_argument_positions(self) -> None:
        """Test each directive records its position after the schema path."""
        parsed = parse_directives(["batch = true", "hook = verify"])

        assert parsed[0].location.index == 1
        assert parsed[1].location.index == 2
        assert str(parsed[1].location) == "argument 2 `hook = verify`"

    def test_hook(self) -> None:
        """Test hook option records the function name."""
        parsed = parse_directives(["hook = verify_request"])

        assert isinstance(parsed[0], HookDirective)
        assert parsed[0].name == "verify_request"

    def test_hook_none_clears(self) -> None:
        """Test `hook = None` produces an empty hook directive."""
        parsed = parse_directives(["hook = None"])

        assert parsed[0].name is None

    def test_hook_requires_identifier(self) -> None:
        """Test hook value must be a function name."""
        with pytest.raises(InvalidOptionValueError):
            parse_directives(["hook = not a name"])

    def test_unknown_option_names_key(self) -> None:
        """Test an unrecognized key fails and names exactly that key."""
        with pytest.raises(UnknownOptionError) as exc_info:
            parse_directives(["batch = true", "bacth = false"])

        assert exc_info.value.option == "bacth"
        assert "`bacth`" in str(exc_info.value)
        assert exc_info.value.location.index == 2

    def test_unknown_argument(self) -> None:
        """Test an argument that is neither option nor client fails."""
        with pytest.raises(UnknownArgumentError) as exc_info:
            parse_directives(["just some text"])

        assert exc_info.value.location.text == "just some text"

    def test_non_string_argument(self) -> None:
        """Test non-string arguments are rejected."""
        with pytest.raises(UnknownArgumentError):
            parse_directives([42])  # type: ignore[list-item]

    def test_blank_arguments_are_skipped(self) -> None:
        """Test empty arguments (trailing commas) are ignored."""
        assert parse_directives(["", "   "]) == []

    def test_invalid_bool(self) -> None:
        """Test boolean options only accept true/false."""
        with pytest.raises(InvalidOptionValueError):
            parse_directives(["batch = maybe"])

    def test_deprecated_alias_behaves_like_type_override(self, capsys: pytest.CaptureFixture) -> None:
        """Test field_type_override is accepted as type_override."""
        parsed = parse_directives(["field_type_override = Player.id: String"])

        assert isinstance(parsed[0], TypeOverride)
        assert parsed[0].type_name == "Player"
        assert "Deprecated option" in capsys.readouterr().out

    def test_clients_and_options_keep_order(self) -> None:
        """Test client declarations are returned in argument order."""
        parsed = parse_directives(
            [
                "dynamodb() -> mypy_boto3_dynamodb.DynamoDBClient",
                "batch = false",
                "s3() -> s3",
            ]
        )

        assert isinstance(parsed[0], ClientSpec)
        assert isinstance(parsed[1], FlagDirective)
        assert isinstance(parsed[2], ClientSpec)
        assert parsed[2].service_name == "s3"

    def test_duplicate_client_accessor(self) -> None:
        """Test two clients cannot share an accessor name."""
        with pytest.raises(MalformedClientSpecError):
            parse_directives(["db() -> dynamodb", "db() -> s3"])


class TestParseTypeOverride:
    """Tests for type_override values."""

    def test_field_override(self) -> None:
        """Test `Type.field: NewType`."""
        override = parse_type_override("Player.id: String")

        assert (override.type_name, override.field_name, override.arg_name) == ("Player", "id", None)
        assert isinstance(override.new_type, NamedTypeNode)
        assert override.new_type.name.value == "String"

    def test_argument_override(self) -> None:
        """Test `OpKind.operation.arg: NewType`."""
        override = parse_type_override("Query.player.id: String!")

        assert (override.type_name, override.field_name, override.arg_name) == ("Query", "player", "id")
        assert isinstance(override.new_type, NonNullTypeNode)

    def test_list_type(self) -> None:
        """Test list type expressions are accepted."""
        override = parse_type_override("Query.players: [Player]")

        assert isinstance(override.new_type, ListTypeNode)

    @pytest.mark.parametrize("value", ["Player: String", "Player.id", "Player.id: [String", "a.b.c.d: Int"])
    def test_malformed(self, value: str) -> None:
        """Test malformed overrides fail."""
        with pytest.raises(MalformedOverrideSyntaxError):
            parse_type_override(value)


class TestParseNameOverride:
    """Tests for name_override values."""

    def test_type_rename(self) -> None:
        """Test `Type: NewName`."""
        override = parse_name_override("Player: Gamer")

        assert override == NameOverride("Player", None, "Gamer")

    def test_variant_rename(self) -> None:
        """Test `Type.variant: NewName`."""
        override = parse_name_override("Team.PYTHON: Snake")

        assert override == NameOverride("Team", "PYTHON", "Snake")

    def test_keyword_is_rejected(self) -> None:
        """Test the new name must be a usable identifier."""
        with pytest.raises(MalformedOverrideSyntaxError):
            parse_name_override("Player.name: class")

    def test_malformed(self) -> None:
        """Test values without a colon fail."""
        with pytest.raises(MalformedOverrideSyntaxError):
            parse_name_override("Player Gamer")


class TestClientSpec:
    """Tests for client declarations."""

    def test_stub_type_reference(self) -> None:
        """Test service name derives from the mypy_boto3 stubs package."""
        spec = parse_client_spec("idp() -> mypy_boto3_cognito_idp.CognitoIdentityProviderClient")

        assert spec.accessor == "idp"
        assert spec.client_type == "mypy_boto3_cognito_idp.CognitoIdentityProviderClient"
        assert spec.service_name == "cognito-idp"

    def test_service_name_for(self) -> None:
        """Test service name derivation."""
        assert service_name_for("mypy_boto3_dynamodb.DynamoDBClient") == "dynamodb"
        assert service_name_for("s3") == "s3"

    def test_malformed(self) -> None:
        """Test declarations without a type fail."""
        with pytest.raises(MalformedClientSpecError):
            parse_client_spec("dynamodb() ->")
