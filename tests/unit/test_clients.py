"""Tests for the shared AWS config and client accessors."""

from typing import Any, Callable, Dict, Generator
from unittest.mock import MagicMock, patch

import boto3
import pytest
from moto import mock_aws

from appsync_lambda.runtime import clients
from appsync_lambda.runtime.clients import (
    ClientAccessor,
    OnceCell,
    aws_sdk_config,
    override_client,
)


@pytest.fixture
def mocked_aws(aws_credentials: None) -> Generator[None, None, None]:
    """Run the test inside moto's mock_aws."""
    with mock_aws():
        yield


class TestOnceCell:
    """Tests for the init-once holder."""

    def test_initializes_once(self) -> None:
        """Test the initializer runs a single time."""
        cell: OnceCell[object] = OnceCell()
        init = MagicMock(side_effect=lambda: object())

        first = cell.get_or_init(init)
        second = cell.get_or_init(init)

        assert first is second
        assert init.call_count == 1

    def test_get_before_init(self) -> None:
        """Test an empty cell reads as None."""
        cell: OnceCell[int] = OnceCell()

        assert cell.get() is None
        assert cell.initialized is False

    def test_reset(self) -> None:
        """Test reset allows a new value (test isolation)."""
        cell: OnceCell[int] = OnceCell()
        cell.get_or_init(lambda: 1)
        cell.reset()

        assert cell.get_or_init(lambda: 2) == 2


class TestSharedConfig:
    """Tests for the process-wide configuration."""

    def test_loaded_once(self, aws_credentials: None) -> None:
        """Test the same session is returned on every call."""
        assert aws_sdk_config() is aws_sdk_config()
        assert isinstance(aws_sdk_config(), boto3.session.Session)

    def test_region_comes_from_environment(self, aws_credentials: None) -> None:
        """Test the session reads ambient region configuration."""
        assert aws_sdk_config().region_name == "us-east-1"


class TestClientAccessor:
    """Tests for client singletons."""

    def test_singleton(self, mocked_aws: None) -> None:
        """Test two calls return the identical client instance."""
        dynamodb = ClientAccessor("dynamodb", "dynamodb")

        assert dynamodb() is dynamodb()
        assert dynamodb().meta.service_model.service_name == "dynamodb"

    def test_client_is_usable(self, mocked_aws: None) -> None:
        """Test the client talks to (mocked) AWS."""
        s3 = ClientAccessor("s3", "s3")
        s3().create_bucket(Bucket="players")

        assert [b["Name"] for b in s3().list_buckets()["Buckets"]] == ["players"]

    def test_created_from_shared_config(self, aws_credentials: None) -> None:
        """Test clients are built from the shared session."""
        session = MagicMock()
        with patch.object(clients, "_load_config", return_value=session):
            accessor = ClientAccessor("sqs", "sqs")
            accessor()
            accessor()

        session.client.assert_called_once_with("sqs")

    def test_override(self, mocked_aws: None) -> None:
        """Test overrides replace the real client."""
        fake = MagicMock()
        accessor = ClientAccessor("dynamodb", "dynamodb")
        override_client("dynamodb", fake)

        assert accessor() is fake

        override_client("dynamodb", None)
        assert accessor() is not fake


class TestGeneratedAccessors:
    """Tests for accessors declared through appsync_lambda_main."""

    def test_accessors_are_injected(self, mocked_aws: None, generate: Callable[..., Dict[str, Any]]) -> None:
        """Test declared clients and aws_sdk_config are injected."""
        ns = generate(
            "dynamodb() -> mypy_boto3_dynamodb.DynamoDBClient",
            "idp() -> mypy_boto3_cognito_idp.CognitoIdentityProviderClient",
        )

        assert ns["dynamodb"]() is ns["dynamodb"]()
        assert ns["idp"].service_name == "cognito-idp"
        assert ns["aws_sdk_config"]() is aws_sdk_config()
        assert sorted(ns["app"].clients) == ["dynamodb", "idp"]

    def test_no_clients_no_config(self, generate: Callable[..., Dict[str, Any]]) -> None:
        """Test the shared config is not loaded without declared clients."""
        ns = generate()

        assert "aws_sdk_config" not in ns
        assert clients._shared_config.initialized is False
