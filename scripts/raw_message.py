"""
Raw Message: fetch the RFC 822 source of one message and summarise its MIME tree.

Usage:
    python scripts/raw_message.py --id msg_123
    python scripts/raw_message.py --id msg_123 --save /tmp/msg.eml

Output (JSON to stdout):
    {
        "id": str,
        "headers": { "subject", "from", "to", "cc", "date", "message_id" },
        "body_preview": str,
        "parts": [ { "content_type", "filename", "content_id", "size" } ]
    }
"""
from __future__ import annotations

import argparse
import logging
import sys
from email.message import EmailMessage
from pathlib import Path
from typing import Any, Optional

# Repo root on the path so the scripts run without an install
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from nylas_ops.base import BaseScript
from nylas_ops.client import Client

_PREVIEW = 800


class RawMessage(BaseScript):
    """Fetches a raw message and prints its headers and MIME part summary."""

    def __init__(
        self,
        message_id: str,
        log_level: int = logging.INFO,
        save_to: Optional[Path] = None,
        client: Optional[Client] = None,
    ) -> None:
        super().__init__(log_level=log_level, client=client)
        self.message_id = message_id
        self.save_to = save_to

    def run(self) -> dict[str, Any]:
        mime = self.nylas.messages.get_raw_message(self.message_id)

        if self.save_to:
            self.save_to.write_bytes(bytes(mime))
            self.logger.info("Saved source to %s", self.save_to)

        body = mime.get_body(preferencelist=("plain", "html"))
        return {
            "id": self.message_id,
            "headers": {
                "subject":    mime.get("subject", ""),
                "from":       mime.get("from", ""),
                "to":         mime.get("to", ""),
                "cc":         mime.get("cc", ""),
                "date":       mime.get("date", ""),
                "message_id": mime.get("message-id", ""),
            },
            "body_preview": body.get_content()[:_PREVIEW] if body is not None else "",
            "parts": [_fmt_part(p) for p in mime.walk() if not p.is_multipart()],
        }

    @classmethod
    def build_parser(cls) -> argparse.ArgumentParser:
        parser = super().build_parser()
        parser.add_argument("--id", required=True, help="Nylas message id")
        parser.add_argument("--save", type=Path, default=None, help="Write the .eml here")
        return parser

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "RawMessage":
        return cls(
            message_id=args.id,
            log_level=logging.DEBUG if args.debug else logging.INFO,
            save_to=args.save,
        )


def _fmt_part(part: EmailMessage) -> dict:
    payload = part.get_payload(decode=True) or b""
    return {
        "content_type": part.get_content_type(),
        "filename":     part.get_filename() or "",
        "content_id":   (part.get("content-id") or "").strip("<>"),
        "size":         len(payload),
    }


if __name__ == "__main__":
    RawMessage.main()
