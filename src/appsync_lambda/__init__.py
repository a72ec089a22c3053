"""
appsync-lambda: AWS AppSync Direct Lambda resolvers generated from a GraphQL schema.

The package is split into:

- codegen/: schema loading, directive parsing, override resolution and the
  declaration builder/emitter behind ``appsync_lambda_main``
- runtime/: events, identities, responses, errors, argument decoding,
  dispatch, AWS client singletons and the Lambda entry point
- subscription_filters.py: enhanced subscription filter builder
"""

from .codegen import GenerationError, appsync_lambda_main
from .runtime import (
    AWSJSON,
    AWSURL,
    ID,
    AppsyncAuthStrategy,
    AppsyncError,
    AppsyncEvent,
    AppsyncEventInfo,
    AppsyncIdentity,
    AppsyncIdentityApiKey,
    AppsyncIdentityCognito,
    AppsyncIdentityIam,
    AppsyncIdentityLambda,
    AppsyncIdentityOidc,
    AppsyncIdentityOidcClaims,
    AppsyncLambda,
    AppsyncResponse,
    AWSDate,
    AWSDateTime,
    AWSEmail,
    AWSIPAddress,
    AWSPhone,
    AWSTime,
    AWSTimestamp,
    CognitoFederatedIdentity,
    CognitoIdentityAuthType,
    ErrorType,
    OperationKind,
)
from .subscription_filters import FieldFilter, FieldPath, Filter, FilterGroup

__all__ = [
    "appsync_lambda_main",
    "GenerationError",
    "AppsyncError",
    "AppsyncEvent",
    "AppsyncEventInfo",
    "AppsyncIdentity",
    "AppsyncIdentityApiKey",
    "AppsyncIdentityCognito",
    "AppsyncIdentityIam",
    "AppsyncIdentityLambda",
    "AppsyncIdentityOidc",
    "AppsyncIdentityOidcClaims",
    "AppsyncAuthStrategy",
    "AppsyncLambda",
    "AppsyncResponse",
    "CognitoFederatedIdentity",
    "CognitoIdentityAuthType",
    "ErrorType",
    "OperationKind",
    "ID",
    "AWSDate",
    "AWSDateTime",
    "AWSEmail",
    "AWSIPAddress",
    "AWSJSON",
    "AWSPhone",
    "AWSTime",
    "AWSTimestamp",
    "AWSURL",
    "FieldFilter",
    "FieldPath",
    "Filter",
    "FilterGroup",
]
