"""
Type definitions for AppSync Direct Lambda resolver events.

The ``identity`` object carries no explicit tag: its variant is recovered by
matching the payload against each known shape, in this order:

1. Cognito User Pools (``sub``, ``username``, ``issuer``, ``defaultAuthStrategy``,
   ``sourceIp``, ``claims``)
2. IAM (``accountId``, ``sourceIp``, ``username``, ``userArn``), optionally
   carrying the four ``cognitoIdentity*`` federation keys
3. OIDC (``claims`` with ``iss``/``sub``/``aud``/``exp``/``iat``, ``sub``, ``issuer``)
4. Lambda authorizer (``resolverContext``)
5. API key: ``null`` and anything that matched none of the above
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union


class EventDecodeError(ValueError):
    """Raised when an invocation payload cannot be decoded into an AppsyncEvent."""


class _ShapeMismatch(Exception):
    """Internal signal: payload does not match the identity shape being tried."""


class OperationKind(Enum):
    """Root operation type an operation belongs to."""

    QUERY = "Query"
    MUTATION = "Mutation"
    SUBSCRIPTION = "Subscription"


class AppsyncAuthStrategy(Enum):
    """Default authorization strategy attached to a Cognito identity."""

    ALLOW = "ALLOW"
    DENY = "DENY"


class CognitoIdentityAuthType(Enum):
    """Authentication type in a Cognito Identity Pool."""

    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


@dataclass(frozen=True)
class AppsyncIdentityCognito:
    """Cognito User Pools identity."""

    sub: str
    username: str
    issuer: str
    default_auth_strategy: AppsyncAuthStrategy
    source_ip: List[str]
    claims: Any
    groups: Optional[List[str]] = None


@dataclass(frozen=True)
class CognitoFederatedIdentity:
    """Cognito Identity Pool information for federated IAM authentication."""

    identity_id: str
    identity_pool_id: str
    auth_type: CognitoIdentityAuthType
    auth_provider: str


@dataclass(frozen=True)
class AppsyncIdentityIam:
    """IAM (SigV4) identity."""

    account_id: str
    source_ip: List[str]
    username: str
    user_arn: str
    federated_identity: Optional[CognitoFederatedIdentity] = None


@dataclass(frozen=True)
class AppsyncIdentityOidcClaims:
    """Claims of an OIDC token. ``aud`` is always normalized to a list."""

    iss: str
    sub: str
    aud: List[str]
    exp: int
    iat: int
    additional_claims: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class AppsyncIdentityOidc:
    """OpenID Connect identity."""

    claims: AppsyncIdentityOidcClaims
    sub: str
    issuer: str


@dataclass(frozen=True)
class AppsyncIdentityLambda:
    """Lambda authorizer identity."""

    resolver_context: Any


@dataclass(frozen=True)
class AppsyncIdentityApiKey:
    """API key authorization (``identity`` is null)."""


AppsyncIdentity = Union[
    AppsyncIdentityCognito,
    AppsyncIdentityIam,
    AppsyncIdentityOidc,
    AppsyncIdentityLambda,
    AppsyncIdentityApiKey,
]


def _require(raw: Dict[str, Any], key: str, kind: Any) -> Any:
    if key not in raw or not isinstance(raw[key], kind):
        raise _ShapeMismatch(key)
    return raw[key]


def _string_list(raw: Dict[str, Any], key: str) -> List[str]:
    values = _require(raw, key, list)
    if not all(isinstance(v, str) for v in values):
        raise _ShapeMismatch(key)
    return list(values)


def _parse_cognito(raw: Dict[str, Any]) -> AppsyncIdentityCognito:
    try:
        strategy = AppsyncAuthStrategy(_require(raw, "defaultAuthStrategy", str))
    except ValueError as exc:
        raise _ShapeMismatch("defaultAuthStrategy") from exc
    if "claims" not in raw:
        raise _ShapeMismatch("claims")
    groups = raw.get("groups")
    if groups is not None:
        groups = _string_list(raw, "groups")
    return AppsyncIdentityCognito(
        sub=_require(raw, "sub", str),
        username=_require(raw, "username", str),
        issuer=_require(raw, "issuer", str),
        default_auth_strategy=strategy,
        source_ip=_string_list(raw, "sourceIp"),
        claims=raw["claims"],
        groups=groups,
    )


def _parse_federated(raw: Dict[str, Any]) -> Optional[CognitoFederatedIdentity]:
    try:
        return CognitoFederatedIdentity(
            identity_id=_require(raw, "cognitoIdentityId", str),
            identity_pool_id=_require(raw, "cognitoIdentityPoolId", str),
            auth_type=CognitoIdentityAuthType(_require(raw, "cognitoIdentityAuthType", str)),
            auth_provider=_require(raw, "cognitoIdentityAuthProvider", str),
        )
    except (_ShapeMismatch, ValueError):
        # Partial federation data means plain IAM
        return None


def _parse_iam(raw: Dict[str, Any]) -> AppsyncIdentityIam:
    return AppsyncIdentityIam(
        account_id=_require(raw, "accountId", str),
        source_ip=_string_list(raw, "sourceIp"),
        username=_require(raw, "username", str),
        user_arn=_require(raw, "userArn", str),
        federated_identity=_parse_federated(raw),
    )


def _parse_oidc(raw: Dict[str, Any]) -> AppsyncIdentityOidc:
    claims = dict(_require(raw, "claims", dict))
    aud = claims.pop("aud", None)
    if isinstance(aud, str):
        aud = [aud]
    if not isinstance(aud, list) or not all(isinstance(a, str) for a in aud):
        raise _ShapeMismatch("claims.aud")

    parsed = {key: claims.pop(key, None) for key in ("iss", "sub", "exp", "iat")}
    if not isinstance(parsed["iss"], str) or not isinstance(parsed["sub"], str):
        raise _ShapeMismatch("claims")
    for key in ("exp", "iat"):
        if isinstance(parsed[key], bool) or not isinstance(parsed[key], int):
            raise _ShapeMismatch(f"claims.{key}")

    return AppsyncIdentityOidc(
        claims=AppsyncIdentityOidcClaims(
            iss=parsed["iss"],
            sub=parsed["sub"],
            aud=aud,
            exp=parsed["exp"],
            iat=parsed["iat"],
            additional_claims=claims,
        ),
        sub=_require(raw, "sub", str),
        issuer=_require(raw, "issuer", str),
    )


def _parse_lambda(raw: Dict[str, Any]) -> AppsyncIdentityLambda:
    if "resolverContext" not in raw:
        raise _ShapeMismatch("resolverContext")
    return AppsyncIdentityLambda(resolver_context=raw["resolverContext"])


_IDENTITY_PARSERS: List[Callable[[Dict[str, Any]], Any]] = [
    _parse_cognito,
    _parse_iam,
    _parse_oidc,
    _parse_lambda,
]


def parse_identity(raw: Any) -> AppsyncIdentity:
    """
    Resolve the identity variant of an AppSync event.

    Args:
        raw: ``identity`` value from the event payload

    Returns:
        The first identity shape matching ``raw``; AppsyncIdentityApiKey
        when ``raw`` is null or matches nothing
    """
    if isinstance(raw, dict):
        for parser in _IDENTITY_PARSERS:
            try:
                return parser(raw)
            except _ShapeMismatch:
                continue
    return AppsyncIdentityApiKey()


@dataclass(frozen=True)
class AppsyncEventInfo:
    """Metadata about the GraphQL operation being resolved."""

    operation: Any
    selection_set_graphql: str = ""
    selection_set_list: List[str] = field(default_factory=list)
    variables: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class AppsyncEvent:
    """
    AppSync Direct Lambda resolver event.

    ``info.operation`` is a member of the generated ``Operation`` enum.
    The ``stash`` and ``prev`` keys are not kept: they only matter for
    pipeline resolvers.
    """

    identity: AppsyncIdentity
    request: Any
    source: Any
    info: AppsyncEventInfo
    args: Dict[str, Any]

    @classmethod
    def from_dict(
        cls,
        payload: Dict[str, Any],
        resolve_operation: Callable[[str, str], Any],
    ) -> "AppsyncEvent":
        """
        Decode a raw invocation payload.

        Args:
            payload: One AppSync event as received by the Lambda
            resolve_operation: Maps (parentTypeName, fieldName) to an Operation

        Returns:
            Decoded AppsyncEvent

        Raises:
            EventDecodeError: If the payload is not an event or names an unknown operation
        """
        if not isinstance(payload, dict):
            raise EventDecodeError(f"Expected a JSON object, got {type(payload).__name__}")

        info = payload.get("info")
        if not isinstance(info, dict):
            raise EventDecodeError("Missing `info` in AppSync event")
        parent_type = info.get("parentTypeName")
        field_name = info.get("fieldName")
        if not isinstance(parent_type, str) or not isinstance(field_name, str):
            raise EventDecodeError("`info` must carry `parentTypeName` and `fieldName`")

        try:
            operation = resolve_operation(parent_type, field_name)
        except KeyError as exc:
            raise EventDecodeError(f"Unknown operation {parent_type}.{field_name}") from exc

        args = payload.get("arguments")
        return cls(
            identity=parse_identity(payload.get("identity")),
            request=payload.get("request"),
            source=payload.get("source"),
            info=AppsyncEventInfo(
                operation=operation,
                selection_set_graphql=info.get("selectionSetGraphQL") or "",
                selection_set_list=list(info.get("selectionSetList") or []),
                variables=dict(info.get("variables") or {}),
            ),
            args=dict(args) if isinstance(args, dict) else {},
        )
