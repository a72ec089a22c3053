"""
Response payloads returned to AppSync by the Lambda resolver.

A response carries either data or an error, never both.
"""

from typing import Any, Dict, Optional

from .errors import AppsyncError, ErrorType


class AppsyncResponse:
    """
    Response structure returned to AWS AppSync.

    Build it with ``AppsyncResponse.from_data(value)`` for success or
    ``AppsyncResponse.from_error(error)`` for failure.
    """

    __slots__ = ("data", "error")

    def __init__(self, data: Any = None, error: Optional[AppsyncError] = None) -> None:
        if data is not None and error is not None:
            raise ValueError("AppsyncResponse cannot carry both data and error")
        self.data = data
        self.error = error

    @classmethod
    def from_data(cls, data: Any) -> "AppsyncResponse":
        """Successful response wrapping an already JSON-compatible value."""
        return cls(data=data)

    @classmethod
    def from_error(cls, error: AppsyncError) -> "AppsyncResponse":
        """Error response."""
        return cls(error=error)

    @classmethod
    def unauthorized(cls) -> "AppsyncResponse":
        """Standard response for requests the hook refuses to authorize."""
        return cls.from_error(
            AppsyncError(ErrorType.UNAUTHORIZED, "This operation cannot be authorized")
        )

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the AppSync wire shape."""
        if self.error is not None:
            return self.error.to_dict()
        return {"data": self.data}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AppsyncResponse):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"AppsyncResponse({self.to_dict()!r})"
