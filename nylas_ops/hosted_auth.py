"""
HostedAuthClient: Nylas hosted OAuth flow.

    1. get_oauth_authorize_url()  -> send the user's browser there
    2. Nylas redirects back to redirect_uri with ?code=...
    3. post_oauth_token(code)     -> access token for that account
    4. post_oauth_revoke()        -> revoke the configured access token

See https://developer.nylas.com/docs/api/v2/#tag--Hosted-Authentication
"""
from __future__ import annotations

import logging
from typing import Any, Literal, Mapping, Optional
from urllib.parse import urlencode

from pydantic import EmailStr, Field, StrictStr

from .api import ENDPOINTS
from .session import NylasSession
from .validation import (
    Flag,
    NonEmptyStr,
    Schema,
    require_non_empty,
    validate,
)

logger = logging.getLogger(__name__)


class AuthorizeParams(Schema):
    redirect_uri: NonEmptyStr
    response_type: Literal["code", "token"]
    scopes: Optional[NonEmptyStr] = None          # comma separated, e.g. "email,calendar"
    state: Optional[StrictStr] = Field(None, max_length=255)
    login_hint: Optional[EmailStr] = None
    redirect_on_error: Optional[Flag] = None


class HostedAuthClient:
    """
    Usage:
        hosted = HostedAuthClient(session)
        url = hosted.get_oauth_authorize_url({
            "redirect_uri": "http://localhost:8000/callback",
            "response_type": "code",
            "scopes": "email,contacts,calendar",
        })
        token = hosted.post_oauth_token(code_from_callback)
    """

    def __init__(self, session: NylasSession) -> None:
        self._session = session
        self._options = session.options

    def get_oauth_authorize_url(self, params: Mapping[str, Any]) -> str:
        """Build the authorize URL (no network call)."""
        query = validate(AuthorizeParams, params)
        client_id = require_non_empty(self._options.client_id, "client_id")

        if "redirect_on_error" in query:
            query["redirect_on_error"] = str(query["redirect_on_error"]).lower()
        query = {"client_id": client_id, **query}

        return f"{self._options.server}{ENDPOINTS['oauth_authorize']}?{urlencode(query)}"

    def post_oauth_token(self, code: str) -> Any:
        """Exchange an authorization code for an access token."""
        require_non_empty(code, "code")
        body = {
            "client_id": require_non_empty(self._options.client_id, "client_id"),
            "client_secret": require_non_empty(self._options.client_secret, "client_secret"),
            "grant_type": "authorization_code",
            "code": code,
        }

        token = (
            self._session.request()
            .set_form_params(body)
            .post(ENDPOINTS["oauth_token"])
        )
        if isinstance(token, dict) and token.get("account_id"):
            logger.info("Authorized account %s", token["account_id"])
        return token

    def post_oauth_revoke(self) -> Any:
        """Revoke the configured access token."""
        header = self._options.bearer_header()

        result = (
            self._session.request()
            .set_header_params(header)
            .post(ENDPOINTS["oauth_revoke"])
        )
        logger.info("Access token revoked")
        return result
