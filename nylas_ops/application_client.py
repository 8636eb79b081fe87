"""
ApplicationClient: application-level management endpoints (/a/{client_id}/...).

Authenticates with HTTP basic auth, the client secret as user name, so these
calls work without any account access token. Account ids can be listed,
looked up (pooled), downgraded, upgraded, and have their tokens revoked or
inspected.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence, Union

from pydantic import StrictStr

from .api import ENDPOINTS
from .helpers import concat_pool_infos, foo_to_list
from .session import NylasSession
from .validation import (
    NonEmptyStr,
    NonNegativeInt,
    PositiveInt,
    Schema,
    require_non_empty,
    validate,
    validate_ids,
)

logger = logging.getLogger(__name__)


class AccountsFilter(Schema):
    limit: Optional[PositiveInt] = None
    offset: Optional[NonNegativeInt] = None


class ApplicationUpdate(Schema):
    application_name: Optional[NonEmptyStr] = None
    icon_url: Optional[NonEmptyStr] = None
    redirect_uris: Optional[list[StrictStr]] = None


class ApplicationClient:
    """
    Nylas application management.

    Usage:
        app = ApplicationClient(session)
        for acct in app.get_accounts_list({"limit": 50}):
            print(acct["id"], acct["billing_state"])
    """

    def __init__(self, session: NylasSession) -> None:
        self._session = session
        self._options = session.options

    def _client_id(self) -> str:
        return require_non_empty(self._options.client_id, "client_id")

    # ── Application ───────────────────────────────────────────────────────────

    def get_application_detail(self) -> Any:
        client_id = self._client_id()
        header = self._options.basic_header()

        return (
            self._session.request()
            .set_path(client_id)
            .set_header_params(header)
            .get(ENDPOINTS["application"])
        )

    def update_application_detail(self, params: Mapping[str, Any]) -> Any:
        """Change the application name, icon or allowed redirect URIs."""
        body = validate(ApplicationUpdate, params)
        client_id = self._client_id()
        header = self._options.basic_header()

        result = (
            self._session.request()
            .set_path(client_id)
            .set_form_params(body)
            .set_header_params(header)
            .put(ENDPOINTS["application"])
        )
        logger.info("Updated application %s (%s)", client_id, ", ".join(sorted(body)))
        return result

    def get_ip_addresses(self) -> Any:
        """IP ranges Nylas connects from (for allow-listing)."""
        client_id = self._client_id()
        header = self._options.basic_header()

        return (
            self._session.request()
            .set_path(client_id)
            .set_header_params(header)
            .get(ENDPOINTS["ip_addresses"])
        )

    # ── Accounts ──────────────────────────────────────────────────────────────

    def get_accounts_list(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        query = validate(AccountsFilter, params)
        client_id = self._client_id()
        header = self._options.basic_header()

        return (
            self._session.request()
            .set_path(client_id)
            .set_query(query)
            .set_header_params(header)
            .get(ENDPOINTS["manage_accounts"])
        )

    def get_account(self, account_id: Union[str, Sequence[str]]) -> dict[str, Any]:
        """Fetch one or many managed accounts concurrently, keyed by id."""
        ids = validate_ids(foo_to_list(account_id))
        client_id = self._client_id()
        header = self._options.basic_header()

        queues = [
            self._session.async_request()
            .set_path(client_id, aid)
            .set_header_params(header)
            .get(ENDPOINTS["manage_account"])
            for aid in ids
        ]
        return concat_pool_infos(ids, self._session.pool(queues))

    def _account_action(
        self,
        endpoint: str,
        account_id: str,
        body: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        require_non_empty(account_id, "account_id")
        client_id = self._client_id()
        header = self._options.basic_header()

        return (
            self._session.request()
            .set_path(client_id, account_id)
            .set_form_params(body)
            .set_header_params(header)
            .post(ENDPOINTS[endpoint])
        )

    def cancel_account(self, account_id: str) -> Any:
        """Downgrade (cancel) a paid account; its data stops syncing."""
        result = self._account_action("cancel_account", account_id)
        logger.info("Cancelled account %s", account_id)
        return result

    def reactivate_account(self, account_id: str) -> Any:
        """Upgrade a previously cancelled account."""
        result = self._account_action("reactivate_account", account_id)
        logger.info("Reactivated account %s", account_id)
        return result

    def revoke_all_tokens(
        self, account_id: str, keep_access_token: Optional[str] = None
    ) -> Any:
        """Revoke every access token of an account, optionally sparing one."""
        body: dict[str, Any] = {}
        if keep_access_token is not None:
            body["keep_access_token"] = require_non_empty(
                keep_access_token, "keep_access_token"
            )
        result = self._account_action("revoke_all", account_id, body)
        logger.info("Revoked tokens of account %s", account_id)
        return result

    def get_token_info(self, account_id: str, access_token: Optional[str] = None) -> Any:
        """Scopes and state of an access token (defaults to the configured one)."""
        token = require_non_empty(
            self._options.access_token if access_token is None else access_token,
            "access_token",
        )
        return self._account_action("token_info", account_id, {"access_token": token})
