"""
Runtime support for generated AppSync Lambda resolvers.
"""

from .errors import AppsyncError, ErrorType
from .events import (
    AppsyncAuthStrategy,
    AppsyncEvent,
    AppsyncEventInfo,
    AppsyncIdentity,
    AppsyncIdentityApiKey,
    AppsyncIdentityCognito,
    AppsyncIdentityIam,
    AppsyncIdentityLambda,
    AppsyncIdentityOidc,
    AppsyncIdentityOidcClaims,
    CognitoFederatedIdentity,
    CognitoIdentityAuthType,
    OperationKind,
)
from .lambda_main import AppsyncLambda
from .responses import AppsyncResponse
from .scalars import (
    AWSJSON,
    AWSURL,
    ID,
    AWSDate,
    AWSDateTime,
    AWSEmail,
    AWSIPAddress,
    AWSPhone,
    AWSTime,
    AWSTimestamp,
)
