"""
Hosted-auth token persistence.

The token granted by POST /oauth/token is saved to $NYLAS_TOKEN_FILE
(default ~/cred/nylas_token.json) and reused by Options.from_env().

Usage:
    from nylas_ops import token_store
    token = token_store.load_token()     # None when nothing is saved
"""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

from .models import HostedToken

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_FILE = "~/cred/nylas_token.json"


def token_file() -> Path:
    """Resolved token path (read from the environment on every call)."""
    return Path(os.environ.get("NYLAS_TOKEN_FILE", DEFAULT_TOKEN_FILE)).expanduser()


def load_token() -> Optional[HostedToken]:
    path = token_file()
    if not path.exists():
        return None
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)
    return HostedToken.from_response(raw)


def save_token(token: HostedToken) -> Path:
    """Write the token as JSON (owner read/write only) and return its path."""
    path = token_file()
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(token.to_dict(), f, indent=2)
    os.chmod(path, 0o600)
    logger.info("Token saved to %s", path)
    return path


def delete_token() -> bool:
    """Remove the saved token. Returns False when there was none."""
    path = token_file()
    if not path.exists():
        return False
    path.unlink()
    logger.info("Deleted token %s", path)
    return True
