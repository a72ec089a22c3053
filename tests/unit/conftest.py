"""
Test fixtures for the generator and the Lambda runtime.

Provides the sample schema on disk, a generated namespace and fake AWS
credentials for moto.
"""

import os
from pathlib import Path
from typing import Any, Callable, Dict, Generator, Optional

import pytest

from appsync_lambda import appsync_lambda_main
from appsync_lambda.runtime.clients import clear_all_overrides, reset_shared_config
from tests.unit.fixtures import SCHEMA


@pytest.fixture
def aws_credentials() -> None:
    """Set fake AWS credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"


@pytest.fixture(autouse=True)
def reset_clients() -> Generator[None, None, None]:
    """Reset the shared AWS config and client overrides between tests."""
    clear_all_overrides()
    reset_shared_config()
    yield
    clear_all_overrides()
    reset_shared_config()


@pytest.fixture
def schema_path(tmp_path: Path) -> Path:
    """Write the sample schema to a temporary file."""
    path = tmp_path / "schema.graphql"
    path.write_text(SCHEMA)
    return path


@pytest.fixture
def generate(schema_path: Path) -> Callable[..., Dict[str, Any]]:
    """Run appsync_lambda_main on the sample schema into a fresh namespace.

    The namespace also holds the returned runtime under ``app``.
    """

    def _generate(*directives: str, namespace: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        ns: Dict[str, Any] = namespace if namespace is not None else {}
        ns.setdefault("__name__", "generated_app")
        ns["app"] = appsync_lambda_main(str(schema_path), *directives, namespace=ns)
        return ns

    return _generate
