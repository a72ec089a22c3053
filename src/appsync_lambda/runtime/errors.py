"""
Runtime error handling for AppSync Direct Lambda resolvers.

Errors raised by operation handlers are converted into AppSync error
responses (``errorType`` / ``errorMessage``) instead of failing the Lambda
invocation.
"""

from typing import Any, Dict, Optional

from botocore.exceptions import BotoCoreError, ClientError


class ErrorType:
    """Error types produced by the runtime itself."""

    INVALID_ARGS = "InvalidArgs"
    UNAUTHORIZED = "Unauthorized"
    UNIMPLEMENTED = "Unimplemented"
    VALIDATION_ERROR = "ValidationError"
    UNKNOWN = "Unknown"


class AppsyncError(Exception):
    """
    Error returned to AppSync as ``{errorType, errorMessage}``.

    Two errors can be combined with ``|``: types are joined with ``|`` and
    messages with a newline, so several validation failures can be reported
    in a single response.

    Example:
        error = AppsyncError("ValidationError", "Email is invalid") | AppsyncError(
            "DatabaseError", "User not found"
        )
        # error.error_type == "ValidationError|DatabaseError"
    """

    def __init__(self, error_type: str, error_message: str = "") -> None:
        self.error_type = error_type
        self.error_message = error_message
        super().__init__(f"{error_type}: {error_message}")

    def __or__(self, other: "AppsyncError") -> "AppsyncError":
        if not isinstance(other, AppsyncError):
            return NotImplemented
        return AppsyncError(
            f"{self.error_type}|{other.error_type}",
            f"{self.error_message}\n{other.error_message}",
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AppsyncError):
            return NotImplemented
        return (self.error_type, self.error_message) == (other.error_type, other.error_message)

    def __hash__(self) -> int:
        return hash((self.error_type, self.error_message))

    def __repr__(self) -> str:
        return f"AppsyncError({self.error_type!r}, {self.error_message!r})"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the AppSync error payload."""
        return {"errorType": self.error_type, "errorMessage": self.error_message}

    @classmethod
    def from_client_error(cls, error: Exception) -> "AppsyncError":
        """
        Build an AppsyncError from an AWS SDK error.

        The provider code and message are copied from a botocore ClientError;
        missing values default to ``Unknown`` and an empty message.

        Args:
            error: botocore ClientError or BotoCoreError

        Returns:
            Equivalent AppsyncError
        """
        if isinstance(error, ClientError):
            details: Dict[str, Any] = error.response.get("Error", {})
            return cls(
                details.get("Code") or ErrorType.UNKNOWN,
                details.get("Message") or "",
            )
        if isinstance(error, BotoCoreError):
            return cls(type(error).__name__, str(error))
        return cls(ErrorType.UNKNOWN, "")


def invalid_args(arg_name: str, reason: str) -> AppsyncError:
    """Error for an argument that cannot be decoded into its declared type."""
    return AppsyncError(
        ErrorType.INVALID_ARGS,
        f'Argument "{arg_name}" is not the expected format ({reason})',
    )


def handle_error(error: Exception) -> Optional[AppsyncError]:
    """
    Convert an exception raised by a handler into an AppsyncError.

    Args:
        error: Exception to handle

    Returns:
        AppsyncError for expected errors, None for unexpected faults
        (which must propagate and fail the invocation)
    """
    if isinstance(error, AppsyncError):
        return error
    if isinstance(error, (ClientError, BotoCoreError)):
        return AppsyncError.from_client_error(error)
    return None
