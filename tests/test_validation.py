"""Unit tests for parameter validation."""

from typing import Optional

import pytest
from pydantic import Field

from nylas_ops.errors import NylasValidationError
from nylas_ops.events_client import EventCreate, EventListFilter
from nylas_ops.messages_client import MessageFilter
from nylas_ops.validation import (
    NonEmptyStr,
    Schema,
    Timestamp,
    YmdDate,
    require_non_empty,
    validate,
    validate_ids,
    validate_many,
)


class _Sample(Schema):
    name: NonEmptyStr
    at: Optional[Timestamp] = None
    day: Optional[YmdDate] = None
    from_: Optional[NonEmptyStr] = Field(None, alias="from")


class TestFieldTypes:
    """Tests for the shared field types."""

    def test_blank_string_rejected(self):
        with pytest.raises(NylasValidationError) as exc:
            validate(_Sample, {"name": "   "})
        assert exc.value.fields == ["name"]

    def test_timestamp_rejects_bool_and_negative(self):
        with pytest.raises(NylasValidationError):
            validate(_Sample, {"name": "x", "at": True})
        with pytest.raises(NylasValidationError):
            validate(_Sample, {"name": "x", "at": -1})

    def test_timestamp_rejects_numeric_string(self):
        with pytest.raises(NylasValidationError):
            validate(_Sample, {"name": "x", "at": "1700000000"})

    def test_ymd_date(self):
        assert validate(_Sample, {"name": "x", "day": "2024-02-29"})["day"] == "2024-02-29"
        with pytest.raises(NylasValidationError):
            validate(_Sample, {"name": "x", "day": "2023-02-29"})
        with pytest.raises(NylasValidationError):
            validate(_Sample, {"name": "x", "day": "2024-2-1"})


class TestValidate:
    """Tests for validate() and friends."""

    def test_unknown_key_rejected(self):
        with pytest.raises(NylasValidationError) as exc:
            validate(_Sample, {"name": "x", "colour": "red"})
        assert "colour" in exc.value.fields
        assert exc.value.schema == "_Sample"

    def test_only_supplied_keys_returned(self):
        assert validate(_Sample, {"name": "x"}) == {"name": "x"}

    def test_none_treated_as_not_given(self):
        assert validate(_Sample, {"name": "x", "at": None}) == {"name": "x"}

    def test_alias_used_on_the_wire(self):
        assert validate(_Sample, {"name": "x", "from": "y"}) == {"name": "x", "from": "y"}

    def test_none_params_is_empty_bag(self):
        assert validate(EventListFilter, None) == {}

    def test_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            validate(EventListFilter, {"limit": 0})

    def test_validate_many_reports_index(self):
        with pytest.raises(NylasValidationError) as exc:
            validate_many(_Sample, [{"name": "ok"}, {"name": ""}])
        assert exc.value.fields == ["1.name"]

    def test_validate_ids(self):
        assert validate_ids(["a", "b"]) == ["a", "b"]
        with pytest.raises(NylasValidationError):
            validate_ids(["a", ""])
        with pytest.raises(NylasValidationError):
            validate_ids([123])

    def test_require_non_empty(self):
        assert require_non_empty("abc", "token") == "abc"
        with pytest.raises(NylasValidationError, match="token must be a non-empty string"):
            require_non_empty(None, "token")


class TestEndpointSchemas:
    """Spot checks of the richer endpoint schemas."""

    def test_when_accepts_each_shape(self):
        for when in (
            {"time": 1700000000},
            {"date": "2024-01-15"},
            {"start_time": 1700000000, "end_time": 1700003600},
            {"start_date": "2024-01-15", "end_date": "2024-01-16"},
        ):
            body = validate(EventCreate, {"calendar_id": "cal", "when": when})
            assert body["when"] == when

    def test_when_rejects_mixed_shape(self):
        with pytest.raises(NylasValidationError):
            validate(EventCreate, {"calendar_id": "cal", "when": {"time": 1, "date": "2024-01-15"}})

    def test_conferencing_provider_selects_details(self):
        zoom = {
            "provider": "Zoom Meeting",
            "details": {"meeting_code": "123", "password": "pw", "url": "https://zoom.us/j/123"},
        }
        body = validate(EventCreate, {"calendar_id": "c", "when": {"time": 1}, "conferencing": zoom})
        assert body["conferencing"] == zoom

        # WebEx details do not satisfy the Zoom shape
        wrong = {"provider": "Zoom Meeting", "details": {"password": "p", "pin": "1", "url": "u"}}
        with pytest.raises(NylasValidationError):
            validate(EventCreate, {"calendar_id": "c", "when": {"time": 1}, "conferencing": wrong})

    def test_participant_status_and_email(self):
        with pytest.raises(NylasValidationError):
            validate(EventCreate, {
                "calendar_id": "c",
                "when": {"time": 1},
                "participants": [{"email": "not-an-email"}],
            })
        with pytest.raises(NylasValidationError):
            validate(EventCreate, {
                "calendar_id": "c",
                "when": {"time": 1},
                "participants": [{"email": "a@example.com", "status": "perhaps"}],
            })

    def test_has_attachment_only_true(self):
        assert validate(MessageFilter, {"has_attachment": True}) == {"has_attachment": True}
        with pytest.raises(NylasValidationError):
            validate(MessageFilter, {"has_attachment": False})
