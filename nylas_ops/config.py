"""
Options: credentials and transport settings shared by every nylas_ops client.

Usage:
    options = Options(client_id="...", client_secret="...", access_token="...")

    # or, from the environment / .env file:
    options = Options.from_env()
"""
from __future__ import annotations

import base64
import logging
import os
from dataclasses import dataclass, field
from typing import Optional

import httpx
from dotenv import find_dotenv, load_dotenv

from . import token_store
from .api import DEFAULT_REGION, SERVERS
from .base import add_file_handler
from .errors import NylasValidationError
from .validation import require_non_empty

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class Options:
    """
    Everything needed to talk to one Nylas application / account.

    Only the credentials an operation needs are checked, at call time:
    account-scoped calls require access_token, application management
    requires client_secret, hosted auth requires client_id.
    """

    client_id: str = ""
    client_secret: str = ""
    access_token: str = ""
    account_id: str = ""
    region: str = DEFAULT_REGION
    timeout: float = 30.0
    concurrency: int = 5         # max simultaneous connections in a pool
    debug: bool = False          # log every request/response at DEBUG
    log_file: Optional[str] = None
    transport: Optional[httpx.BaseTransport] = field(default=None, repr=False)
    # Pools use this, else `transport` when it is also async (MockTransport is)
    async_transport: Optional[httpx.AsyncBaseTransport] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.region not in SERVERS:
            raise NylasValidationError(
                f"Unknown region {self.region!r}; expected one of {sorted(SERVERS)}"
            )
        if self.timeout <= 0:
            raise NylasValidationError("timeout must be positive")
        if self.concurrency < 1:
            raise NylasValidationError("concurrency must be at least 1")

        if self.transport is not None and not isinstance(self.transport, httpx.BaseTransport):
            raise NylasValidationError("transport must be an httpx.BaseTransport")
        if self.async_transport is not None and not isinstance(
            self.async_transport, httpx.AsyncBaseTransport
        ):
            raise NylasValidationError("async_transport must be an httpx.AsyncBaseTransport")

    def configure_logging(self) -> None:
        """
        Apply `debug` and `log_file` to the "nylas_ops" logger.

        Changes process-wide logging, so construction never does it;
        from_env() calls it, direct callers opt in.
        """
        library_logger = logging.getLogger("nylas_ops")
        if self.debug:
            library_logger.setLevel(logging.DEBUG)
        if self.log_file:
            add_file_handler(library_logger, self.log_file)
            if library_logger.level == logging.NOTSET:
                library_logger.setLevel(logging.INFO)

    # ── Derived values ────────────────────────────────────────────────────────

    @property
    def server(self) -> str:
        """Base URL for the configured region."""
        return SERVERS[self.region]

    def bearer_header(self) -> dict[str, str]:
        """Authorization header for account-scoped endpoints."""
        token = require_non_empty(self.access_token, "access_token")
        return {"Authorization": f"Bearer {token}"}

    def basic_header(self) -> dict[str, str]:
        """Authorization header for application management (client secret as user)."""
        secret = require_non_empty(self.client_secret, "client_secret")
        encoded = base64.b64encode(f"{secret}:".encode("utf-8")).decode("ascii")
        return {"Authorization": f"Basic {encoded}"}

    # ── Construction ──────────────────────────────────────────────────────────

    @classmethod
    def from_env(cls) -> "Options":
        """
        Build Options from NYLAS_* environment variables (after loading .env).

        NYLAS_ACCESS_TOKEN / NYLAS_ACCOUNT_ID fall back to the token saved by
        the hosted-auth flow (see reauth.py) when unset.
        """
        load_dotenv(find_dotenv(usecwd=True), override=False)

        access_token = os.environ.get("NYLAS_ACCESS_TOKEN", "")
        account_id = os.environ.get("NYLAS_ACCOUNT_ID", "")
        if not access_token:
            saved = token_store.load_token()
            if saved is not None:
                logger.debug("Using saved token from %s", token_store.token_file())
                access_token = saved.access_token
                account_id = account_id or saved.account_id

        options = cls(
            client_id=os.environ.get("NYLAS_CLIENT_ID", ""),
            client_secret=os.environ.get("NYLAS_CLIENT_SECRET", ""),
            access_token=access_token,
            account_id=account_id,
            region=os.environ.get("NYLAS_REGION", DEFAULT_REGION),
            timeout=float(os.environ.get("NYLAS_HTTP_TIMEOUT_SECONDS", "30")),
            concurrency=int(os.environ.get("NYLAS_POOL_CONCURRENCY", "5")),
            debug=os.environ.get("NYLAS_DEBUG", "").lower() in _TRUTHY,
            log_file=os.environ.get("NYLAS_LOG_FILE") or None,
        )
        options.configure_logging()
        return options
