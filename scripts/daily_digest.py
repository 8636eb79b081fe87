"""
Daily Digest: morning briefing from Nylas calendar events + unread mail.

Fetches the next N days of events and the most recent unread messages, then
emits a single JSON dict to stdout.

Usage:
    python scripts/daily_digest.py
    python scripts/daily_digest.py --days-ahead 3
    python scripts/daily_digest.py --calendar-id cal_123 --debug
"""
from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Optional

# Repo root on the path so the scripts run without an install
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from nylas_ops.base import BaseScript
from nylas_ops.client import Client


class DailyDigest(BaseScript):
    """
    Pulls upcoming calendar events and unread messages into one JSON digest.

    Output schema:
        {
            "generated_at": "<ISO 8601 UTC>",
            "calendar": {
                "window_days": int,
                "event_count": int,
                "events": [ { id, title, when, location, participants,
                               description, busy } ]
            },
            "email": {
                "unread_count": int,
                "unread": [ { id, thread_id, subject, from, date, snippet } ],
                "recent_senders": [ str ]   # top 10 unique senders in unread
            }
        }
    """

    def __init__(
        self,
        log_level: int = logging.INFO,
        days_ahead: int = 1,
        calendar_id: Optional[str] = None,
        client: Optional[Client] = None,
    ) -> None:
        super().__init__(log_level=log_level, client=client)
        self.days_ahead = days_ahead
        self.calendar_id = calendar_id

    # ── run() ─────────────────────────────────────────────────────────────────

    def run(self) -> dict[str, Any]:
        self.logger.info("Fetching daily digest (days_ahead=%d)", self.days_ahead)

        # ── Calendar ──────────────────────────────────────────────────────────
        start = datetime.now(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
        end = start + timedelta(days=self.days_ahead)
        event_filter: dict[str, Any] = {
            "starts_after": int(start.timestamp()),
            "starts_before": int(end.timestamp()),
            "expand_recurring": True,
            "limit": 100,
        }
        if self.calendar_id:
            event_filter["calendar_id"] = self.calendar_id
        events = self.nylas.events.get_events_list(event_filter)
        self.logger.info("Calendar: %d event(s) fetched", len(events))

        # ── Email ─────────────────────────────────────────────────────────────
        unread = self.nylas.messages.get_messages_list({"unread": True, "limit": 30})
        self.logger.info("Email: %d unread", len(unread))

        senders = [_sender(m) for m in unread[:20]]
        digest: dict[str, Any] = {
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "calendar": {
                "window_days": self.days_ahead,
                "event_count": len(events),
                "events": [_fmt_event(e) for e in events],
            },
            "email": {
                "unread_count": len(unread),
                "unread": [_fmt_message(m) for m in unread[:10]],
                # Deduplicated sender list, insertion-ordered, capped at 10
                "recent_senders": [s for s in dict.fromkeys(senders) if s][:10],
            },
        }

        self.logger.info("Digest ready: %d events, %d unread.", len(events), len(unread))
        return digest

    # ── CLI entrypoint ────────────────────────────────────────────────────────

    @classmethod
    def build_parser(cls) -> argparse.ArgumentParser:
        parser = super().build_parser()
        parser.add_argument(
            "--days-ahead", type=int, default=1, metavar="N",
            help="How many calendar days to look ahead (default: 1 = today only)"
        )
        parser.add_argument("--calendar-id", default=None, help="Limit to one calendar")
        return parser

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "DailyDigest":
        return cls(
            log_level=logging.DEBUG if args.debug else logging.INFO,
            days_ahead=args.days_ahead,
            calendar_id=args.calendar_id,
        )


# ── Formatters ────────────────────────────────────────────────────────────────

def _when_label(when: dict) -> str:
    """Readable label for the four Nylas time shapes."""
    def ts(value: int) -> str:
        return datetime.fromtimestamp(value, timezone.utc).isoformat()

    if "time" in when:
        return ts(when["time"])
    if "start_time" in when:
        return f"{ts(when['start_time'])} / {ts(when['end_time'])}"
    if "date" in when:
        return when["date"]
    if "start_date" in when:
        return f"{when['start_date']} / {when['end_date']}"
    return ""


def _sender(message: dict) -> str:
    senders = message.get("from") or []
    return senders[0].get("email", "") if senders else ""


def _fmt_event(event: dict) -> dict:
    description = event.get("description") or ""
    return {
        "id":           event.get("id"),
        "title":        event.get("title") or "(no title)",
        "when":         _when_label(event.get("when") or {}),
        "location":     event.get("location") or "",
        "participants": [p.get("email") for p in event.get("participants", [])],
        "description":  description[:500],
        "busy":         event.get("busy", True),
    }


def _fmt_message(message: dict) -> dict:
    date = message.get("date")
    return {
        "id":        message.get("id"),
        "thread_id": message.get("thread_id"),
        "subject":   message.get("subject") or "(no subject)",
        "from":      _sender(message),
        "date":      datetime.fromtimestamp(date, timezone.utc).isoformat() if date else "",
        "snippet":   message.get("snippet", ""),
    }


if __name__ == "__main__":
    DailyDigest.main()
