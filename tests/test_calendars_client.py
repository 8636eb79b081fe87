from __future__ import annotations

import pytest

from nylas_ops.calendars_client import CalendarsClient
from nylas_ops.errors import NylasValidationError
from nylas_ops.models import PoolFailure


@pytest.fixture
def calendars(session) -> CalendarsClient:
    return CalendarsClient(session)


def test_get_calendars_list(calendars, recorder) -> None:
    recorder.add("GET", "/calendars", json=[{"id": "c1", "name": "Work"}])

    assert calendars.get_calendars_list({"limit": 10}) == [{"id": "c1", "name": "Work"}]
    assert recorder.last.url.params["limit"] == "10"


def test_get_calendar_pooled(calendars, recorder) -> None:
    recorder.add("GET", "/calendars/c1", json={"id": "c1"})
    recorder.add("GET", "/calendars/c2", json={"id": "c2"})

    assert calendars.get_calendar(["c1", "c2"]) == {"c1": {"id": "c1"}, "c2": {"id": "c2"}}
    assert len(recorder.calls) == 2


def test_add_calendar(calendars, recorder) -> None:
    recorder.add("POST", "/calendars", json={"id": "c9", "name": "Side project"})

    calendars.add_calendar({"name": "Side project", "timezone": "Europe/Paris"})

    assert recorder.body(recorder.last) == {"name": "Side project", "timezone": "Europe/Paris"}


def test_add_calendar_requires_name(calendars, recorder) -> None:
    with pytest.raises(NylasValidationError) as exc:
        calendars.add_calendar({"description": "nameless"})
    assert exc.value.fields == ["name"]


def test_update_calendar(calendars, recorder) -> None:
    recorder.add("PUT", "/calendars/c1", json={"id": "c1"})

    calendars.update_calendar({"id": "c1", "metadata": {"team": "ops"}})

    assert recorder.body(recorder.last) == {"metadata": {"team": "ops"}}


def test_delete_calendar(calendars, recorder) -> None:
    recorder.add("DELETE", "/calendars/c1", json={"job_status_id": "j"})

    result = calendars.delete_calendar(["c1", "c2"])

    assert result["c1"] == {"job_status_id": "j"}
    assert isinstance(result["c2"], PoolFailure)


def test_get_free_busy(calendars, recorder) -> None:
    busy = [{"email": "a@example.com", "time_slots": []}]
    recorder.add("POST", "/calendars/free-busy", json=busy)

    result = calendars.get_free_busy({
        "start_time": 1700000000,
        "end_time": 1700086400,
        "emails": ["a@example.com"],
    })

    assert result == busy
    assert recorder.body(recorder.last)["emails"] == ["a@example.com"]


def test_get_free_busy_needs_an_email(calendars, recorder) -> None:
    with pytest.raises(NylasValidationError):
        calendars.get_free_busy({"start_time": 1, "end_time": 2, "emails": []})
    assert recorder.calls == []
