"""
Email Triage: fetch and structure unread Nylas messages, grouped by thread.

Lists the N most recent unread message ids, fetches them (expanded view)
concurrently through the pool, groups them by thread_id and emits structured
JSON to stdout. With --mark-read each fetched message is marked read.

Usage:
    python scripts/email_triage.py
    python scripts/email_triage.py --limit 20
    python scripts/email_triage.py --in inbox --mark-read
    python scripts/email_triage.py --debug

Output schema:
    {
        "generated_at": "<ISO 8601 UTC>",
        "thread_count": int,
        "failed": [ { id, code, message } ],
        "threads": [
            {
                "thread_id": str,
                "subject": str,
                "participants": [str],
                "message_count": int,
                "latest_date": str,
                "messages": [
                    { "id", "from", "to", "date", "snippet", "body" }  # body truncated
                ]
            }
        ]
    }
"""
from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

# Repo root on the path so the scripts run without an install
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from nylas_ops.base import BaseScript
from nylas_ops.client import Client
from nylas_ops.models import PoolFailure

_BODY_TRUNCATE = 1500   # chars per message body in output


class EmailTriage(BaseScript):
    """
    Fetches recent unread messages in structured JSON, grouped by thread.
    """

    def __init__(
        self,
        log_level: int = logging.INFO,
        limit: int = 10,
        folder: Optional[str] = None,
        mark_read: bool = False,
        client: Optional[Client] = None,
    ) -> None:
        super().__init__(log_level=log_level, client=client)
        self.limit = limit
        self.folder = folder
        self.mark_read = mark_read

    # ── run() ─────────────────────────────────────────────────────────────────

    def run(self) -> dict[str, Any]:
        self.logger.info("Email triage: limit=%d, folder=%r", self.limit, self.folder)

        # Step 1: ids of matching messages
        query: dict[str, Any] = {"unread": True, "limit": self.limit, "view": "ids"}
        if self.folder:
            query["in"] = self.folder
        ids = self.nylas.messages.get_messages_list(query)
        self.logger.info("Search returned %d message id(s)", len(ids))

        # Step 2: fetch full messages concurrently
        fetched = self.nylas.messages.get_message(ids, expanded=True) if ids else {}
        failed = {mid: r for mid, r in fetched.items() if isinstance(r, PoolFailure)}
        messages = [r for r in fetched.values() if not isinstance(r, PoolFailure)]
        for mid, failure in failed.items():
            self.logger.warning("Could not fetch message %s: %s", mid, failure.message)

        # Step 3: group by thread, oldest first inside each thread
        threads: dict[str, list[dict]] = {}
        for msg in sorted(messages, key=lambda m: m.get("date") or 0):
            threads.setdefault(msg.get("thread_id") or msg["id"], []).append(msg)

        if self.mark_read:
            for msg in messages:
                self.nylas.messages.update_message(msg["id"], {"unread": False})
            self.logger.info("Marked %d message(s) read", len(messages))

        result: dict[str, Any] = {
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "thread_count": len(threads),
            "failed": [
                {"id": mid, "code": f.code, "message": f.message}
                for mid, f in failed.items()
            ],
            "threads": [_fmt_thread(tid, msgs) for tid, msgs in threads.items()],
        }

        self.logger.info("Triage complete: %d threads", len(threads))
        return result

    # ── CLI entrypoint ────────────────────────────────────────────────────────

    @classmethod
    def build_parser(cls) -> argparse.ArgumentParser:
        parser = super().build_parser()
        parser.add_argument(
            "--limit", type=int, default=10, metavar="N",
            help="Max number of unread messages to fetch (default: 10)"
        )
        parser.add_argument(
            "--in", dest="folder", default=None,
            help="Folder or label name / id to search in"
        )
        parser.add_argument(
            "--mark-read", action="store_true", help="Mark fetched messages read"
        )
        return parser

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "EmailTriage":
        return cls(
            log_level=logging.DEBUG if args.debug else logging.INFO,
            limit=args.limit,
            folder=args.folder,
            mark_read=args.mark_read,
        )


# ── Formatters ────────────────────────────────────────────────────────────────

def _addresses(entries: Optional[list]) -> list[str]:
    return [e.get("email", "") for e in entries or []]


def _fmt_thread(thread_id: str, messages: list[dict]) -> dict:
    latest = messages[-1]
    participants = list(dict.fromkeys(
        addr for m in messages for addr in _addresses(m.get("from"))
    ))
    return {
        "thread_id":     thread_id,
        "subject":       latest.get("subject") or "(no subject)",
        "participants":  participants,
        "message_count": len(messages),
        "latest_date":   _iso(latest.get("date")),
        "messages":      [_fmt_message(m) for m in messages],
    }


def _fmt_message(msg: dict) -> dict:
    return {
        "id":      msg["id"],
        "from":    _addresses(msg.get("from")),
        "to":      _addresses(msg.get("to")),
        "date":    _iso(msg.get("date")),
        "snippet": msg.get("snippet", ""),
        "body":    (msg.get("body") or "")[:_BODY_TRUNCATE],
    }


def _iso(ts: Optional[int]) -> str:
    return datetime.fromtimestamp(ts, timezone.utc).isoformat() if ts else ""


if __name__ == "__main__":
    EmailTriage.main()
