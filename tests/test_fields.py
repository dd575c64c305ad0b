"""
Unit tests for category-driven dynamic fields.
"""
import pytest

from paybox.errors import ValidationError
from paybox.services.fields import missing_fields, reshape_fields, validate_fields


class TestMissingFields:
    def test_reports_absent_and_blank_in_category_order(self):
        required = ["Vehicle Plate", "Mileage", "Driver"]
        values = {"Driver": "Juan", "Vehicle Plate": "   "}
        assert missing_fields(required, values) == ["Vehicle Plate", "Mileage"]

    def test_no_required_fields(self):
        assert missing_fields([], {"anything": ""}) == []


class TestReshapeFields:
    def test_keeps_drops_and_initializes(self):
        values = {"Vehicle Plate": "ABC-123", "Project": "P-9"}
        reshaped = reshape_fields(["Vehicle Plate", "Mileage"], values)
        assert reshaped == {"Vehicle Plate": "ABC-123", "Mileage": ""}

    def test_key_order_follows_category(self):
        reshaped = reshape_fields(["b", "a"], {"a": "1", "b": "2"})
        assert list(reshaped) == ["b", "a"]


class TestValidateFields:
    def test_names_every_missing_field(self):
        with pytest.raises(ValidationError) as exc:
            validate_fields(["Vehicle Plate", "Mileage"], {"Mileage": ""})
        assert exc.value.detail["missing_fields"] == ["Vehicle Plate", "Mileage"]
        assert "Vehicle Plate" in exc.value.message

    def test_returns_only_required_keys_trimmed(self):
        result = validate_fields(["Vehicle Plate"], {"Vehicle Plate": " ABC-123 ", "extra": "x"})
        assert result == {"Vehicle Plate": "ABC-123"}
