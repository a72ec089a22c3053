"""
Lambda entry point for a generated AppSync resolver.

``AppsyncLambda.function_handler`` is the function AWS Lambda invokes. It
decodes the payload (one event, or a list of events when batching is on),
runs the dispatcher on an asyncio event loop and returns the JSON-ready
response(s).
"""

import asyncio
from typing import Any, Dict, List, Optional, Sequence, Type, Union

from ..utils.logging import get_correlation_id, get_logger, init_logging
from .clients import ClientAccessor, init_aws_sdk_config
from .dispatch import Dispatcher, Hook, OperationEnum
from .events import AppsyncEvent, EventDecodeError
from .responses import AppsyncResponse

logger = get_logger(__name__)


class AppsyncLambda:
    """
    Runtime assembled by ``appsync_lambda_main``.

    Attributes:
        operation: The generated Operation enum
        batch: Whether payloads are lists of events
        dispatcher: Hook plus dispatch logic
        clients: Declared AWS client accessors, by accessor name
    """

    def __init__(
        self,
        operation: Type[OperationEnum],
        batch: bool = True,
        hook: Optional[Hook] = None,
        clients: Optional[Sequence[ClientAccessor]] = None,
    ) -> None:
        self.operation = operation
        self.batch = batch
        self.dispatcher = Dispatcher(hook)
        self.clients: Dict[str, ClientAccessor] = {c.name: c for c in clients or ()}
        self._initialized = False

    def initialize(self) -> None:
        """Set up logging and, if clients are declared, the shared AWS config. Runs once."""
        if self._initialized:
            return
        init_logging()
        if self.clients:
            init_aws_sdk_config()
        self._initialized = True
        logger.info("AppSync Lambda initialized", batch=self.batch, clients=sorted(self.clients))

    def decode_event(self, payload: Any) -> AppsyncEvent:
        return AppsyncEvent.from_dict(payload, self.operation.resolve)

    def decode_payload(self, payload: Any) -> Union[AppsyncEvent, List[AppsyncEvent]]:
        """
        Decode a raw invocation payload.

        Raises:
            EventDecodeError: If the payload does not have the configured shape
        """
        if self.batch:
            if not isinstance(payload, list):
                raise EventDecodeError(
                    f"Batch mode expects a list of events, got {type(payload).__name__}"
                )
            return [self.decode_event(item) for item in payload]
        return self.decode_event(payload)

    async def appsync_handler(self, event: AppsyncEvent) -> AppsyncResponse:
        return await self.dispatcher.appsync_handler(event)

    async def appsync_batch_handler(self, events: List[AppsyncEvent]) -> List[AppsyncResponse]:
        return await self.dispatcher.appsync_batch_handler(events)

    async def handle_payload(self, payload: Any) -> Any:
        """Decode, dispatch and serialize one invocation."""
        decoded = self.decode_payload(payload)
        if isinstance(decoded, list):
            responses = await self.appsync_batch_handler(decoded)
            return [response.to_dict() for response in responses]
        response = await self.appsync_handler(decoded)
        return response.to_dict()

    def function_handler(self, payload: Any, context: Any = None) -> Any:
        """
        AWS Lambda handler.

        Args:
            payload: AppSync event, or list of events in batch mode
            context: Lambda context (unused)

        Returns:
            ``{"data": ...}`` / ``{"errorType": ..., "errorMessage": ...}``, or a
            list of them in batch mode
        """
        self.initialize()
        first = payload[0] if isinstance(payload, list) and payload else payload
        self.dispatcher.logger = logger.with_correlation_id(get_correlation_id(first))
        self.dispatcher.logger.info("Received payload", payload=payload)
        try:
            return asyncio.run(self.handle_payload(payload))
        except EventDecodeError as exc:
            self.dispatcher.logger.error("Could not decode AppSync payload", error=str(exc))
            raise
