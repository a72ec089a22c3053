"""
``appsync_lambda_main``: generate an AppSync Direct Lambda resolver from a
GraphQL schema.

Example:
    # app.py
    from appsync_lambda import appsync_lambda_main

    async def verify_request(event):
        return None

    appsync_lambda_main(
        "schema.graphql",
        "hook = verify_request",
        "name_override = Player.id: player_id",
        "dynamodb() -> mypy_boto3_dynamodb.DynamoDBClient",
    )

    @appsync_operation(query="players")
    async def get_players():
        return [Player(player_id="1", name="Ada", team=Team.PYTHON)]

The call injects the generated types, ``Operation``, ``appsync_operation``,
``appsync_handler``, ``appsync_batch_handler``, ``function_handler``,
``aws_sdk_config`` and the client accessors into the caller's module. Deploy
the Lambda with ``app.function_handler`` as its handler.
"""

import inspect
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..runtime.clients import ClientAccessor, aws_sdk_config
from ..runtime.lambda_main import AppsyncLambda
from ..utils.logging import get_logger
from .declarations import ResolvedSchema, build_declarations
from .directives import ClientSpec, Directive, parse_directives
from .emitter import OPERATION_ENUM, NamespaceEmitter
from .errors import InvalidHookError, SourceLocation, UnresolvedReferenceError
from .overrides import OptionalParameters, resolve_overrides
from .schema_loader import load_schema

logger = get_logger(__name__)


def _caller_globals() -> Dict[str, Any]:
    frame = inspect.currentframe()
    # _caller_globals <- appsync_lambda_main <- caller
    caller = frame.f_back.f_back if frame is not None and frame.f_back is not None else None
    if caller is None:
        raise RuntimeError("Cannot find the calling module; pass namespace= explicitly")
    return caller.f_globals


def _default_start_dir(namespace: Dict[str, Any]) -> Path:
    module_file = namespace.get("__file__")
    if module_file:
        return Path(module_file).resolve().parent
    return Path.cwd()


def _resolve_hook(params: OptionalParameters, namespace: Dict[str, Any]) -> Any:
    if params.hook is None:
        return None
    hook = namespace.get(params.hook)
    if hook is None:
        raise UnresolvedReferenceError(
            f"Hook `{params.hook}` is not defined; define it before calling appsync_lambda_main"
        )
    if not inspect.iscoroutinefunction(hook):
        raise InvalidHookError(f"Hook `{params.hook}` must be an async function")
    try:
        inspect.signature(hook).bind(None)
    except TypeError as exc:
        raise InvalidHookError(f"Hook `{params.hook}` must take exactly one argument, the event") from exc
    return hook


def appsync_lambda_main(
    schema_path: Union[str, os.PathLike],
    *directives: str,
    namespace: Optional[Dict[str, Any]] = None,
    start_dir: Optional[Union[str, os.PathLike]] = None,
) -> Optional[AppsyncLambda]:
    """
    Generate types, operations and the Lambda runtime for a GraphQL schema.

    Args:
        schema_path: Schema file, absolute or relative to the project root
            (the workspace root for projects inside a uv workspace)
        *directives: Options (``batch = false``, ``hook = fn``,
            ``type_override = ...``, ``name_override = ...``, visibility
            flags) and client declarations (``name() -> ClientType``)
        namespace: Where generated names are injected (default: the
            caller's module globals)
        start_dir: Where the project root lookup starts (default: the
            caller module's directory)

    Returns:
        The AppsyncLambda runtime, or None when the Lambda handler is not
        generated

    Raises:
        GenerationError: Any schema, directive, override or hook problem
    """
    if namespace is None:
        namespace = _caller_globals()
    if start_dir is None:
        start_dir = _default_start_dir(namespace)

    parsed = parse_directives(directives)
    clients: List[ClientSpec] = [d for d in parsed if isinstance(d, ClientSpec)]
    options: List[Directive] = [d for d in parsed if not isinstance(d, ClientSpec)]
    params = resolve_overrides(options)

    document = load_schema(schema_path, SourceLocation(0, str(schema_path)), start_dir)
    declarations = build_declarations(ResolvedSchema(document, params))
    emitter = NamespaceEmitter(declarations, namespace)

    generated: Dict[str, Any] = {}
    if params.appsync_types:
        generated.update(emitter.emit_types())
    if params.appsync_operations:
        generated.update(emitter.emit_operations())

    app = None
    if params.lambda_handler:
        operation = generated.get(OPERATION_ENUM, namespace.get(OPERATION_ENUM))
        if operation is None:
            raise UnresolvedReferenceError(
                "The Lambda handler needs an `Operation` enum; generate operations or import them"
            )
        accessors = [ClientAccessor(c.accessor, c.service_name, c.client_type) for c in clients]
        app = AppsyncLambda(operation, params.batch, _resolve_hook(params, namespace), accessors)
        generated.update(
            appsync_handler=app.appsync_handler,
            appsync_batch_handler=app.appsync_batch_handler,
            function_handler=app.function_handler,
        )
        if accessors:
            generated["aws_sdk_config"] = aws_sdk_config
            generated.update({accessor.name: accessor for accessor in accessors})
        app.initialize()

    namespace.update(generated)
    logger.debug(
        "Generated AppSync Lambda",
        module=namespace.get("__name__"),
        names=sorted(generated),
        batch=params.batch,
    )
    return app
