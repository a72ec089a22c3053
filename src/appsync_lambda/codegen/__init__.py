"""
Generation pipeline behind ``appsync_lambda_main``.

- schema_loader.py: schema path resolution and GraphQL parsing
- directives.py: option, override and client declaration parsing
- overrides.py: folding directives into OptionalParameters
- declarations.py: schema + overrides -> language-level declarations
- emitter.py: declarations -> Python classes, Operation enum, dispatch table
- main.py: the ``appsync_lambda_main`` entry point
"""

from .errors import (
    GenerationError,
    InvalidHookError,
    InvalidOptionValueError,
    MalformedClientSpecError,
    MalformedOverrideSyntaxError,
    SchemaIOError,
    SchemaParseError,
    SourceLocation,
    UnknownArgumentError,
    UnknownOptionError,
    UnknownOverrideTargetError,
    UnresolvedReferenceError,
)
from .main import appsync_lambda_main

__all__ = [
    "appsync_lambda_main",
    "GenerationError",
    "InvalidHookError",
    "InvalidOptionValueError",
    "MalformedClientSpecError",
    "MalformedOverrideSyntaxError",
    "SchemaIOError",
    "SchemaParseError",
    "SourceLocation",
    "UnknownArgumentError",
    "UnknownOptionError",
    "UnknownOverrideTargetError",
    "UnresolvedReferenceError",
]
