"""Tests for the subscription filter builder."""

import pytest

from appsync_lambda.runtime.errors import AppsyncError
from appsync_lambda.runtime.scalars import ID, AWSDateTime
from appsync_lambda.subscription_filters import (
    FieldPath,
    Filter,
    FilterGroup,
    FixedVec,
    as_filter_group,
)


class TestFieldPath:
    """Tests for field path construction."""

    def test_new(self) -> None:
        """Test valid paths, including nested ones."""
        assert str(FieldPath.new("user.name")) == "user.name"
        assert str(FieldPath.new("nested.one.two.three.four.five")) == "nested.one.two.three.four.five"

    def test_rejects_long_path(self) -> None:
        """Test paths over 256 characters are rejected with a ValidationError."""
        with pytest.raises(AppsyncError) as exc_info:
            FieldPath.new("a" * 257)

        assert exc_info.value.error_type == "ValidationError"

    def test_limit_is_inclusive(self) -> None:
        """Test a 256 character path is accepted."""
        assert len(str(FieldPath.new("a" * 256))) == 256

    def test_unchecked(self) -> None:
        """Test the unchecked constructor skips the length check."""
        assert len(str(FieldPath.new_unchecked("a" * 300))) == 300


class TestOperators:
    """Tests for operator constructors."""

    def test_eq_accepts_bool(self) -> None:
        """Test equality operators accept booleans."""
        path = FieldPath.new("user.active")

        assert path.eq(True).to_dict() == {"fieldName": "user.active", "operator": "eq", "value": True}
        assert path.ne(False).to_dict()["operator"] == "ne"

    @pytest.mark.parametrize("operator", ["le", "lt", "ge", "gt", "contains", "not_contains"])
    def test_ordering_rejects_bool(self, operator: str) -> None:
        """Test ordering and contains operators reject booleans."""
        with pytest.raises(TypeError):
            getattr(FieldPath.new("user.active"), operator)(True)

    def test_unsupported_value(self) -> None:
        """Test non-scalar values are rejected."""
        with pytest.raises(TypeError):
            FieldPath.new("user").eq({"name": "Ada"})

    def test_unchecked_accepts_anything(self) -> None:
        """Test unchecked variants skip value checks."""
        assert FieldPath.new("user.active").gt_unchecked(True).value is True

    def test_wire_operator_names(self) -> None:
        """Test camelCase operator names on the wire."""
        path = FieldPath.new("tags")

        assert path.not_contains("x").to_dict()["operator"] == "notContains"
        assert path.begins_with("pre").to_dict()["operator"] == "beginsWith"
        assert path.in_values(["a"]).to_dict()["operator"] == "in"
        assert path.not_in(["a"]).to_dict()["operator"] == "notIn"
        assert path.contains_any(["a"]).to_dict()["operator"] == "containsAny"

    def test_scalars_are_accepted(self) -> None:
        """Test ID and AWS scalars are valid values."""
        assert FieldPath.new("id").eq(ID("1")).value == "1"
        assert FieldPath.new("at").gt(AWSDateTime("2024-01-01T00:00:00Z")).value == "2024-01-01T00:00:00Z"

    def test_between(self) -> None:
        """Test between serializes as a two-element array."""
        assert FieldPath.new("age").between(18, 65).to_dict()["value"] == [18, 65]

    def test_in_limit(self) -> None:
        """Test in/notIn accept up to 5 values."""
        path = FieldPath.new("role")

        assert path.in_values(["a", "b", "c", "d", "e"]).value == ["a", "b", "c", "d", "e"]
        with pytest.raises(ValueError):
            path.in_values(["a", "b", "c", "d", "e", "f"])
        with pytest.raises(ValueError):
            path.not_in(range(6))

    def test_contains_any_limit(self) -> None:
        """Test containsAny accepts up to 20 values."""
        path = FieldPath.new("tags")

        assert len(path.contains_any(range(20)).value) == 20
        with pytest.raises(ValueError):
            path.contains_any(range(21))

    def test_begins_with_requires_string(self) -> None:
        """Test beginsWith only takes strings."""
        with pytest.raises(TypeError):
            FieldPath.new("name").begins_with(1)  # type: ignore[arg-type]


class TestContainers:
    """Tests for Filter and FilterGroup."""

    def test_filter_group_wire_format(self) -> None:
        """Test the full filterGroup structure."""
        group = FilterGroup(
            [
                Filter([FieldPath.new("user.role").eq("admin"), FieldPath.new("user.age").gt(21)]),
                Filter([FieldPath.new("user.permissions").contains_any(["moderate", "review"])]),
            ]
        )

        assert group.to_dict() == {
            "filterGroup": [
                {
                    "filters": [
                        {"fieldName": "user.role", "operator": "eq", "value": "admin"},
                        {"fieldName": "user.age", "operator": "gt", "value": 21},
                    ]
                },
                {
                    "filters": [
                        {
                            "fieldName": "user.permissions",
                            "operator": "containsAny",
                            "value": ["moderate", "review"],
                        }
                    ]
                },
            ]
        }

    def test_filter_limit(self) -> None:
        """Test a Filter holds at most 5 field filters."""
        with pytest.raises(ValueError):
            Filter([FieldPath.new(f"f{i}").eq(i) for i in range(6)])

    def test_filter_group_limit(self) -> None:
        """Test a FilterGroup holds at most 10 filters."""
        with pytest.raises(ValueError):
            FilterGroup([Filter(FieldPath.new("f").eq(i)) for i in range(11)])

    def test_conversions(self) -> None:
        """Test single field filters and filters wrap into groups."""
        field_filter = FieldPath.new("name").eq("Ada")

        assert FilterGroup(field_filter) == FilterGroup([Filter([field_filter])])
        assert as_filter_group(Filter(field_filter)) == FilterGroup(field_filter)
        assert as_filter_group(None) is None

    def test_fixed_vec(self) -> None:
        """Test FixedVec capacity."""
        assert list(FixedVec(2, [1, 2])) == [1, 2]
        with pytest.raises(ValueError):
            FixedVec(2, [1, 2, 3])
