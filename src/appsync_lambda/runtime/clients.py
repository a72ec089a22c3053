"""
Centralized AWS client access.

The shared configuration is a ``boto3.session.Session`` created once per
process. Every declared client accessor returns a process-wide singleton
client built from that session on first use, with test override support.
"""

import threading
from typing import TYPE_CHECKING, Any, Callable, Dict, Generic, Optional, TypeVar

import boto3

from ..utils.logging import get_logger

if TYPE_CHECKING:
    from botocore.client import BaseClient

logger = get_logger(__name__)

T = TypeVar("T")

# Module-level cache for test overrides, keyed by accessor name
_client_overrides: Dict[str, Any] = {}


class OnceCell(Generic[T]):
    """A value initialized at most once, even under concurrent first access."""

    def __init__(self) -> None:
        self._value: Optional[T] = None
        self._initialized = False
        self._lock = threading.Lock()

    def get(self) -> Optional[T]:
        return self._value if self._initialized else None

    def get_or_init(self, init: Callable[[], T]) -> T:
        if not self._initialized:
            with self._lock:
                if not self._initialized:
                    self._value = init()
                    self._initialized = True
        return self._value  # type: ignore[return-value]

    @property
    def initialized(self) -> bool:
        return self._initialized

    def reset(self) -> None:
        with self._lock:
            self._value = None
            self._initialized = False


_shared_config: OnceCell[boto3.session.Session] = OnceCell()


def _load_config() -> boto3.session.Session:
    """Build the shared session from the environment (region, credentials, profile)."""
    session = boto3.session.Session()
    logger.debug("Loaded AWS SDK configuration", region=session.region_name)
    return session


def aws_sdk_config() -> boto3.session.Session:
    """Shared AWS SDK configuration, loaded on first use."""
    return _shared_config.get_or_init(_load_config)


def init_aws_sdk_config() -> boto3.session.Session:
    """Load the shared configuration now; no-op if it is already loaded."""
    return aws_sdk_config()


class ClientAccessor:
    """
    Callable returning the singleton client of one AWS service.

    Example:
        dynamodb = ClientAccessor("dynamodb", "dynamodb")
        dynamodb().get_item(TableName="players", Key={"id": {"S": "1"}})
    """

    def __init__(self, name: str, service_name: str, client_type: Optional[str] = None) -> None:
        self.name = name
        self.service_name = service_name
        self.client_type = client_type or service_name
        self._cell: OnceCell["BaseClient"] = OnceCell()
        self.__name__ = name
        self.__doc__ = f"Singleton `{self.client_type}` client ({service_name})."

    def _create(self) -> "BaseClient":
        logger.debug("Creating AWS client", accessor=self.name, service=self.service_name)
        return aws_sdk_config().client(self.service_name)

    def __call__(self) -> "BaseClient":
        if (override := _client_overrides.get(self.name)) is not None:
            return override
        return self._cell.get_or_init(self._create)

    def reset(self) -> None:
        """Drop the cached client (for testing isolation)."""
        self._cell.reset()

    def __repr__(self) -> str:
        return f"ClientAccessor({self.name!r}, {self.service_name!r})"


# Test utilities
def override_client(accessor_name: str, client: Any) -> None:
    """Override a client for testing. Set to None to clear override."""
    if client is None:
        _client_overrides.pop(accessor_name, None)
    else:
        _client_overrides[accessor_name] = client


def clear_all_overrides() -> None:
    """Clear all client overrides (call in test teardown)."""
    _client_overrides.clear()


def reset_shared_config() -> None:
    """Forget the shared configuration (for testing isolation)."""
    _shared_config.reset()
