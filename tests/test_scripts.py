from __future__ import annotations

import json
import sys

import pytest

from nylas_ops import base
from nylas_ops.base import BaseScript
from scripts.daily_digest import DailyDigest, _when_label
from scripts.email_triage import EmailTriage
from scripts.raw_message import RawMessage


@pytest.fixture(autouse=True)
def script_logs(monkeypatch, tmp_path):
    monkeypatch.setattr(base, "LOGS_DIR", tmp_path / "logs")


def test_daily_digest(client, recorder) -> None:
    recorder.add("GET", "/events", json=[{
        "id": "e1",
        "title": "Standup",
        "when": {"start_time": 0, "end_time": 900},
        "participants": [{"email": "a@example.com"}],
    }])
    recorder.add("GET", "/messages", json=[
        {"id": "m1", "subject": "Hi", "from": [{"email": "b@example.com"}], "date": 0},
        {"id": "m2", "subject": "", "from": [{"email": "b@example.com"}]},
    ])

    digest = DailyDigest(days_ahead=2, calendar_id="cal", client=client).run()

    assert digest["calendar"]["event_count"] == 1
    assert digest["calendar"]["events"][0]["participants"] == ["a@example.com"]
    assert digest["email"]["unread_count"] == 2
    assert digest["email"]["unread"][1]["subject"] == "(no subject)"
    assert digest["email"]["recent_senders"] == ["b@example.com"]

    (events_call,) = recorder.find("GET", "/events")
    params = events_call.url.params
    assert params["calendar_id"] == "cal"
    assert int(params["starts_before"]) - int(params["starts_after"]) == 2 * 86400


def test_when_label_shapes() -> None:
    assert _when_label({"date": "2024-01-15"}) == "2024-01-15"
    assert _when_label({"start_date": "2024-01-15", "end_date": "2024-01-16"}) == (
        "2024-01-15 / 2024-01-16"
    )
    assert _when_label({"time": 0}) == "1970-01-01T00:00:00+00:00"
    assert _when_label({}) == ""


def test_email_triage_groups_threads_and_marks_read(client, recorder) -> None:
    recorder.add("GET", "/messages", json=["m1", "m2", "m3"])
    recorder.add("GET", "/messages/m1", json={
        "id": "m1", "thread_id": "t1", "subject": "Plan", "date": 10,
        "from": [{"email": "a@example.com"}],
    })
    recorder.add("GET", "/messages/m2", json={
        "id": "m2", "thread_id": "t1", "subject": "Re: Plan", "date": 20,
        "from": [{"email": "b@example.com"}],
    })
    recorder.add("PUT", "/messages/m1", json={"id": "m1"})
    recorder.add("PUT", "/messages/m2", json={"id": "m2"})

    result = EmailTriage(limit=3, folder="inbox", mark_read=True, client=client).run()

    (listing,) = recorder.find("GET", "/messages")
    assert listing.url.params["view"] == "ids"
    assert listing.url.params["in"] == "inbox"

    assert result["thread_count"] == 1
    thread = result["threads"][0]
    assert thread["subject"] == "Re: Plan"
    assert thread["participants"] == ["a@example.com", "b@example.com"]
    assert [m["id"] for m in thread["messages"]] == ["m1", "m2"]
    assert result["failed"] == [{"id": "m3", "code": 404, "message": "Route not mocked"}]

    assert len(recorder.find("PUT", "/messages/m1")) == 1
    assert len(recorder.find("PUT", "/messages/m2")) == 1


def test_raw_message_summary(client, recorder, raw_mime, tmp_path) -> None:
    recorder.add(
        "GET", "/messages/m1",
        content=raw_mime, headers={"content-type": "message/rfc822"},
    )
    target = tmp_path / "m1.eml"

    result = RawMessage("m1", save_to=target, client=client).run()

    assert result["headers"]["subject"] == "Quarterly numbers"
    assert result["body_preview"].strip() == "See attached."
    assert [p["content_type"] for p in result["parts"]] == ["text/plain", "text/html"]
    assert b"Quarterly numbers" in target.read_bytes()


class _RegionReport(BaseScript):
    """Reports the configured region."""

    def run(self) -> dict:
        return {"region": self.nylas.options.region}


def test_main_prints_json(monkeypatch, capsys) -> None:
    monkeypatch.setenv("NYLAS_REGION", "eu")
    monkeypatch.setattr(sys, "argv", ["regionreport"])

    _RegionReport.main()

    assert json.loads(capsys.readouterr().out) == {"region": "eu"}


def test_main_reraises_failures(monkeypatch) -> None:
    class Broken(BaseScript):
        def run(self) -> dict:
            raise RuntimeError("boom")

    monkeypatch.setattr(sys, "argv", ["broken"])
    with pytest.raises(RuntimeError, match="boom"):
        Broken.main()
