"""
Operation dispatch.

The generated ``Operation`` enum derives from OperationEnum. Each member is
bound to an OperationBinding in the enum's DispatchTable; handlers register
on a binding through the ``appsync_operation`` decorator. Members with no
registered handler answer with an ``Unimplemented`` error.
"""

import asyncio
import inspect
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from ..subscription_filters import as_filter_group
from ..utils.logging import StructuredLogger, get_logger
from .codec import DecodeError, ResolvedType, arg_from_json, encode
from .errors import AppsyncError, ErrorType, handle_error, invalid_args
from .events import AppsyncEvent, OperationKind
from .responses import AppsyncResponse

logger = get_logger(__name__)

Handler = Callable[..., Awaitable[Any]]
Hook = Callable[[AppsyncEvent], Awaitable[Optional[AppsyncResponse]]]

EVENT_PARAMETER = "event"


class HandlerRegistrationError(TypeError):
    """Raised when a handler does not fit the operation it is registered for."""


@dataclass(frozen=True)
class ArgumentBinding:
    name: str
    wire_name: str
    type: ResolvedType


@dataclass
class OperationBinding:
    """Everything needed to execute one operation."""

    kind: OperationKind
    wire_name: str
    arguments: Tuple[ArgumentBinding, ...]
    return_type: ResolvedType
    handler: Optional[Handler] = None
    with_appsync_event: bool = False

    @property
    def label(self) -> str:
        return f"{self.kind.value}.{self.wire_name}"

    def bind(self, handler: Handler, with_appsync_event: bool = False) -> None:
        """
        Attach a handler after checking its signature.

        Raises:
            HandlerRegistrationError: If the handler is not a coroutine function,
                is already set, or cannot accept the operation's arguments
        """
        if self.handler is not None:
            raise HandlerRegistrationError(f"{self.label} already has a handler")
        if not inspect.iscoroutinefunction(handler):
            raise HandlerRegistrationError(
                f"Handler for {self.label} must be an async function"
            )
        if with_appsync_event and any(arg.name == EVENT_PARAMETER for arg in self.arguments):
            raise HandlerRegistrationError(
                f"{self.label} has an argument named `{EVENT_PARAMETER}`; it cannot also receive the AppsyncEvent"
            )

        probe: Dict[str, Any] = {arg.name: None for arg in self.arguments}
        if with_appsync_event:
            probe[EVENT_PARAMETER] = None
        try:
            inspect.signature(handler).bind(**probe)
        except TypeError as exc:
            expected = [arg.name for arg in self.arguments]
            if with_appsync_event:
                expected.append(EVENT_PARAMETER)
            raise HandlerRegistrationError(
                f"Handler {handler.__name__} for {self.label} must accept {expected} ({exc})"
            ) from exc

        self.handler = handler
        self.with_appsync_event = with_appsync_event

    def decode_arguments(self, event: AppsyncEvent) -> Dict[str, Any]:
        """
        Decode the event arguments into handler keyword arguments.

        Raises:
            AppsyncError: ``InvalidArgs`` naming the first argument that fails
        """
        kwargs: Dict[str, Any] = {}
        for arg in self.arguments:
            try:
                kwargs[arg.name] = arg_from_json(event.args, arg.wire_name, arg.type)
            except DecodeError as exc:
                raise invalid_args(arg.wire_name, str(exc)) from exc
        return kwargs

    async def execute(self, event: AppsyncEvent) -> AppsyncResponse:
        """
        Run the handler for one event.

        AppsyncError and AWS SDK errors become error responses; any other
        exception propagates.
        """
        if self.handler is None:
            return AppsyncResponse.from_error(
                AppsyncError(ErrorType.UNIMPLEMENTED, f"{self.label} is unimplemented")
            )

        try:
            kwargs = self.decode_arguments(event)
        except AppsyncError as error:
            return AppsyncResponse.from_error(error)
        if self.with_appsync_event:
            kwargs[EVENT_PARAMETER] = event

        try:
            result = await self.handler(**kwargs)
        except Exception as exc:
            error = handle_error(exc)
            if error is None:
                raise
            return AppsyncResponse.from_error(error)

        if isinstance(result, AppsyncError):
            return AppsyncResponse.from_error(result)
        if self.kind is OperationKind.SUBSCRIPTION:
            result = as_filter_group(result)
        return AppsyncResponse.from_data(encode(result))


class DispatchTable:
    """Maps each Operation member to its binding."""

    def __init__(self) -> None:
        self.bindings: Dict[Any, OperationBinding] = {}
        self.by_tag: Dict[Tuple[str, str], Any] = {}

    def add(self, operation: Any, binding: OperationBinding, parent_type_name: str) -> None:
        self.bindings[operation] = binding
        self.by_tag[(parent_type_name, binding.wire_name)] = operation

    def __getitem__(self, operation: Any) -> OperationBinding:
        return self.bindings[operation]

    def resolve(self, parent_type_name: str, field_name: str) -> Any:
        """
        Find the operation for an event's ``parentTypeName``/``fieldName``.

        Raises:
            KeyError: If no operation matches
        """
        return self.by_tag[(parent_type_name, field_name)]


class OperationEnum(Enum):
    """
    Base of the generated ``Operation`` enum.

    Member values are ``(kind, wire field name)`` tuples, e.g.
    ``("Query", "gameStatus")`` for ``Operation.QUERY_GAME_STATUS``.
    """

    @property
    def kind(self) -> OperationKind:
        return OperationKind(self.value[0])

    @property
    def field_name(self) -> str:
        return self.value[1]

    @classmethod
    def table(cls) -> DispatchTable:
        table = cls.__dict__.get("dispatch_table")
        if table is None:
            raise TypeError(f"{cls.__name__} has no dispatch table")
        return table

    @classmethod
    def resolve(cls, parent_type_name: str, field_name: str) -> "OperationEnum":
        return cls.table().resolve(parent_type_name, field_name)

    @classmethod
    def lookup(cls, kind: OperationKind, field_name: str) -> "OperationEnum":
        """
        Find the member for a kind and schema field name.

        Raises:
            KeyError: If no operation matches
        """
        try:
            return cls((kind.value, field_name))
        except ValueError as exc:
            raise KeyError(f"{kind.value}.{field_name}") from exc

    @classmethod
    def appsync_operation(
        cls,
        query: Optional[str] = None,
        mutation: Optional[str] = None,
        subscription: Optional[str] = None,
        with_appsync_event: bool = False,
    ) -> Callable[[Handler], Handler]:
        """
        Decorator registering an async function as an operation handler.

        Exactly one of ``query``, ``mutation`` and ``subscription`` names the
        schema field. The handler receives the decoded arguments as keyword
        arguments (Python-side names) and, with ``with_appsync_event=True``,
        the whole AppsyncEvent as ``event``.

        Example:
            @appsync_operation(query="players")
            async def get_players():
                return [Player(id="1", name="Ada", team=Team.PYTHON)]

        Raises:
            HandlerRegistrationError: If the target is ambiguous, unknown or
                the handler signature does not fit
        """
        targets = [
            (kind, name)
            for kind, name in (
                (OperationKind.QUERY, query),
                (OperationKind.MUTATION, mutation),
                (OperationKind.SUBSCRIPTION, subscription),
            )
            if name is not None
        ]
        if len(targets) != 1:
            raise HandlerRegistrationError(
                "Exactly one of query=, mutation= or subscription= must be given"
            )
        kind, name = targets[0]
        try:
            operation = cls.lookup(kind, name)
        except KeyError as exc:
            raise HandlerRegistrationError(f"Unknown operation {kind.value}.{name}") from exc

        def decorator(handler: Handler) -> Handler:
            cls.table()[operation].bind(handler, with_appsync_event)
            return handler

        return decorator

    async def execute(self, event: AppsyncEvent) -> AppsyncResponse:
        """Run the handler registered for this operation."""
        return await type(self).table()[self].execute(event)


class Dispatcher:
    """Runs the optional hook then the operation handler for each event."""

    def __init__(self, hook: Optional[Hook] = None, log: Optional[StructuredLogger] = None) -> None:
        self.hook = hook
        self.logger = log or logger

    async def appsync_handler(self, event: AppsyncEvent) -> AppsyncResponse:
        """
        Handle one event.

        A hook returning a response short-circuits the operation; that
        response is returned unchanged.
        """
        operation = event.info.operation
        self.logger.info(
            "Handling AppSync event",
            operation=f"{operation.kind.value}.{operation.field_name}",
            event=asdict(event),
        )

        if self.hook is not None:
            try:
                response = await self.hook(event)
            except Exception as exc:
                error = handle_error(exc)
                if error is None:
                    raise
                response = AppsyncResponse.from_error(error)
            if response is not None:
                self.logger.info("Hook returned a response", operation=operation.name)
                return response

        response = await operation.execute(event)
        if response.is_error:
            self.logger.warning(
                "Operation returned an error",
                operation=operation.name,
                errorType=response.error.error_type,
            )
        return response

    async def appsync_batch_handler(self, events: List[AppsyncEvent]) -> List[AppsyncResponse]:
        """
        Handle a batch of events concurrently.

        Responses come back in the same order as the events. An unexpected
        exception in any event fails the whole batch.
        """
        tasks = [asyncio.ensure_future(self.appsync_handler(event)) for event in events]
        return list(await asyncio.gather(*tasks))
