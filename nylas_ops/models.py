"""
Typed data models owned by this library.

API payloads are passed through as decoded JSON; the dataclasses here cover
the few structures the library itself produces or persists.
"""
from __future__ import annotations

import time
from dataclasses import asdict, dataclass
from typing import Any, Optional

import httpx


# ── Pooled requests ───────────────────────────────────────────────────────────

@dataclass
class PoolFailure:
    """One failed request inside a pooled batch."""

    code: int               # HTTP status, or 0 for transport errors
    message: str
    type: str = ""          # Nylas error "type" when the body carries one

    @property
    def error(self) -> bool:
        return True

    @property
    def is_transport_error(self) -> bool:
        return self.code == 0

    @classmethod
    def from_exception(cls, exc: httpx.HTTPError) -> "PoolFailure":
        """Build a failure record from an httpx error."""
        if isinstance(exc, httpx.HTTPStatusError):
            response = exc.response
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict):
                return cls(
                    code=response.status_code,
                    message=str(body.get("message") or response.reason_phrase),
                    type=str(body.get("type") or ""),
                )
            return cls(
                code=response.status_code,
                message=response.text or response.reason_phrase,
            )
        return cls(code=0, message=str(exc) or type(exc).__name__)

    def to_dict(self) -> dict[str, Any]:
        return {"error": True, **asdict(self)}


# ── Hosted auth ───────────────────────────────────────────────────────────────

@dataclass
class HostedToken:
    """Access token granted by the hosted OAuth flow (POST /oauth/token)."""

    access_token: str
    account_id: str = ""
    email_address: str = ""
    provider: str = ""
    token_type: str = "bearer"
    saved_at_unix: Optional[int] = None

    @classmethod
    def from_response(cls, raw: dict[str, Any]) -> "HostedToken":
        return cls(
            access_token=raw["access_token"],
            account_id=raw.get("account_id", ""),
            email_address=raw.get("email_address", ""),
            provider=raw.get("provider", ""),
            token_type=raw.get("token_type", "bearer"),
            saved_at_unix=raw.get("saved_at_unix"),
        )

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        if payload["saved_at_unix"] is None:
            payload["saved_at_unix"] = int(time.time())
        return payload
