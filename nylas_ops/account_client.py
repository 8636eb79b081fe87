"""
AccountClient: details of the account that owns the configured access token.
"""
from __future__ import annotations

from typing import Any

from .api import ENDPOINTS
from .session import NylasSession


class AccountClient:
    """
    Usage:
        account = AccountClient(session).get_account_detail()
        print(account["email_address"], account["sync_state"])
    """

    def __init__(self, session: NylasSession) -> None:
        self._session = session
        self._options = session.options

    def get_account_detail(self) -> Any:
        """GET /account: id, email address, provider, organization unit, sync state."""
        header = self._options.bearer_header()
        return (
            self._session.request()
            .set_header_params(header)
            .get(ENDPOINTS["account"])
        )
