"""Tests for name conversion helpers."""

import pytest

from appsync_lambda.utils.naming import is_identifier, safe_identifier, to_snake_case, to_upper_snake_case


class TestNaming:
    """Tests for naming helpers."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("gameStatus", "game_status"),
            ("id", "id"),
            ("HTTPResponse", "http_response"),
            ("getHTTPResponseCode", "get_http_response_code"),
            ("player2Score", "player2_score"),
        ],
    )
    def test_to_snake_case(self, name: str, expected: str) -> None:
        """Test camelCase to snake_case."""
        assert to_snake_case(name) == expected

    def test_to_upper_snake_case(self) -> None:
        """Test camelCase to UPPER_SNAKE_CASE."""
        assert to_upper_snake_case("createPlayer") == "CREATE_PLAYER"

    def test_safe_identifier(self) -> None:
        """Test keywords get a trailing underscore."""
        assert safe_identifier("from") == "from_"
        assert safe_identifier("name") == "name"

    def test_is_identifier(self) -> None:
        """Test identifier validation."""
        assert is_identifier("verify_request")
        assert not is_identifier("class")
        assert not is_identifier("a.b")
        assert not is_identifier("1st")
