"""Tests for runtime error handling."""

from botocore.exceptions import ClientError, EndpointConnectionError

from appsync_lambda.runtime.errors import AppsyncError, ErrorType, handle_error, invalid_args


class TestAppsyncError:
    """Tests for AppsyncError class."""

    def test_to_dict(self) -> None:
        """Test converting AppsyncError to the wire shape."""
        error = AppsyncError("ValidationError", "Email is invalid")

        assert error.to_dict() == {"errorType": "ValidationError", "errorMessage": "Email is invalid"}

    def test_combine(self) -> None:
        """Test `|` joins types with `|` and messages with a newline."""
        error = AppsyncError("ValidationError", "Email is invalid") | AppsyncError(
            "DatabaseError", "User not found"
        )

        assert error.error_type == "ValidationError|DatabaseError"
        assert error.error_message == "Email is invalid\nUser not found"

    def test_combine_three(self) -> None:
        """Test several errors aggregate left to right."""
        error = AppsyncError("A", "a") | AppsyncError("B", "b") | AppsyncError("C", "c")

        assert error == AppsyncError("A|B|C", "a\nb\nc")

    def test_from_client_error(self) -> None:
        """Test AWS SDK errors copy the provider code and message."""
        client_error = ClientError(
            {"Error": {"Code": "ConditionalCheckFailedException", "Message": "The conditional request failed"}},
            "PutItem",
        )

        error = AppsyncError.from_client_error(client_error)

        assert error == AppsyncError("ConditionalCheckFailedException", "The conditional request failed")

    def test_from_client_error_defaults(self) -> None:
        """Test missing code/message default to Unknown/empty."""
        error = AppsyncError.from_client_error(ClientError({}, "GetItem"))

        assert error.error_type == ErrorType.UNKNOWN
        assert error.error_message == ""

    def test_invalid_args(self) -> None:
        """Test the InvalidArgs message names the argument."""
        error = invalid_args("id", "missing value")

        assert error.error_type == "InvalidArgs"
        assert 'Argument "id"' in error.error_message


class TestHandleError:
    """Tests for handle_error function."""

    def test_appsync_error_passes_through(self) -> None:
        """Test AppsyncError is returned as-is."""
        error = AppsyncError("NotFound", "Player not found")

        assert handle_error(error) is error

    def test_client_error_is_converted(self) -> None:
        """Test ClientError is converted."""
        client_error = ClientError({"Error": {"Code": "AccessDenied", "Message": "no"}}, "GetItem")

        assert handle_error(client_error) == AppsyncError("AccessDenied", "no")

    def test_botocore_error_is_converted(self) -> None:
        """Test BotoCoreError uses the exception class name."""
        error = handle_error(EndpointConnectionError(endpoint_url="http://localhost"))

        assert error is not None
        assert error.error_type == "EndpointConnectionError"

    def test_unexpected_error(self) -> None:
        """Test unexpected exceptions are not converted."""
        assert handle_error(ValueError("boom")) is None
