"""
Test data builders for generator and runtime tests.

Provides the sample schema plus factory functions for AppSync events and
identity payloads.
"""

from typing import Any, Dict, List, Optional
from uuid import uuid4

SCHEMA = """
schema {
  query: Query
  mutation: Mutation
  subscription: Subscription
}

type Query {
  "All players"
  players: [Player!]!
  gameStatus: GameStatus!
  player(id: ID!): Player
  searchPlayers(filter: PlayerFilter, limit: Int): [Player!]!
}

type Mutation {
  createPlayer(name: String!, team: Team): Player!
  deletePlayer(id: ID!): Player!
  setGameStatus(status: GameStatus!): GameStatus!
}

type Subscription {
  onCreatePlayer(name: String): Player
    @aws_subscribe(mutations: ["createPlayer"])
}

"A player of the game"
type Player {
  id: ID!
  name: String!
  team: Team!
  createdAt: AWSDateTime
}

input PlayerFilter {
  nameContains: String
  teams: [Team!]
}

enum Team {
  RUST
  PYTHON
  JS
}

enum GameStatus {
  STARTED
  STOPPED
}
"""


def make_appsync_event(
    field_name: str = "players",
    parent_type: str = "Query",
    arguments: Optional[Dict[str, Any]] = None,
    identity: Any = None,
    **kwargs: Any,
) -> Dict[str, Any]:
    """Create a Direct Lambda resolver event payload.

    Args:
        field_name: Name of the GraphQL field being resolved
        parent_type: Type name (Query, Mutation, Subscription)
        arguments: GraphQL arguments
        identity: Raw identity object (None for API key)
        **kwargs: Additional fields to include

    Returns:
        AppSync event dictionary suitable for function_handler
    """
    event = {
        "arguments": arguments or {},
        "identity": identity,
        "source": None,
        "request": {
            "headers": {"x-amzn-requestid": f"test-{uuid4().hex[:8]}"},
            "domainName": None,
        },
        "prev": None,
        "info": {
            "selectionSetList": ["id", "name"],
            "selectionSetGraphQL": "{\n  id\n  name\n}",
            "parentTypeName": parent_type,
            "fieldName": field_name,
            "variables": {},
        },
        "stash": {},
    }
    event.update(kwargs)
    return event


def make_cognito_identity(sub: str = "user-123", groups: Optional[List[str]] = None) -> Dict[str, Any]:
    """Create a Cognito User Pools identity."""
    return {
        "sub": sub,
        "username": "ada",
        "issuer": "https://cognito-idp.us-east-1.amazonaws.com/us-east-1_example",
        "defaultAuthStrategy": "ALLOW",
        "sourceIp": ["203.0.113.1"],
        "claims": {"sub": sub, "email": "ada@example.com"},
        "groups": groups,
    }


def make_iam_identity(federated: bool = False) -> Dict[str, Any]:
    """Create an IAM identity, optionally with Cognito Identity Pool fields."""
    identity: Dict[str, Any] = {
        "accountId": "123456789012",
        "sourceIp": ["203.0.113.2"],
        "username": "AROAEXAMPLE:session",
        "userArn": "arn:aws:sts::123456789012:assumed-role/role/session",
    }
    if federated:
        identity.update(
            {
                "cognitoIdentityId": "us-east-1:1234",
                "cognitoIdentityPoolId": "us-east-1:pool",
                "cognitoIdentityAuthType": "authenticated",
                "cognitoIdentityAuthProvider": "cognito-idp.us-east-1.amazonaws.com/us-east-1_example",
            }
        )
    return identity


def make_oidc_identity(aud: Any = "client-1") -> Dict[str, Any]:
    """Create an OIDC identity."""
    return {
        "claims": {
            "iss": "https://issuer.example.com",
            "sub": "oidc-user",
            "aud": aud,
            "exp": 1700003600,
            "iat": 1700000000,
            "email": "oidc@example.com",
        },
        "sub": "oidc-user",
        "issuer": "https://issuer.example.com",
    }


class MockLambdaContext:
    """Mock AWS Lambda context for testing."""

    def __init__(self, function_name: str = "test-function", aws_request_id: Optional[str] = None):
        self.function_name = function_name
        self.aws_request_id = aws_request_id or f"test-{uuid4().hex[:8]}"
        self.invoked_function_arn = f"arn:aws:lambda:us-east-1:123456789012:function:{function_name}"

    def get_remaining_time_in_millis(self) -> int:
        """Return remaining execution time (mock returns 30 seconds)."""
        return 30000
