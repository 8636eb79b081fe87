"""
MessagesClient: validated wrapper around the Nylas /messages endpoints.

Raw (RFC 822) retrieval is parsed with the standard-library MIME parser and
returned as an email.message.EmailMessage. Inline images in HTML bodies refer
to files as <img src="cid:file_id">.

See https://developer.nylas.com/docs/api/v2/#tag--Messages
"""
from __future__ import annotations

import logging
from email import policy
from email.message import EmailMessage
from email.parser import BytesParser
from typing import Any, Literal, Mapping, Optional, Sequence, Union

from pydantic import EmailStr, Field, StrictStr

from .api import ENDPOINTS
from .helpers import concat_pool_infos, foo_to_list
from .session import NylasSession
from .validation import (
    Flag,
    NonEmptyStr,
    NonNegativeInt,
    PositiveInt,
    Schema,
    Timestamp,
    require_non_empty,
    validate,
    validate_ids,
)

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 100


class MessageFilter(Schema):
    in_: Optional[NonEmptyStr] = Field(None, alias="in")
    to: Optional[EmailStr] = None
    cc: Optional[EmailStr] = None
    bcc: Optional[EmailStr] = None
    from_: Optional[EmailStr] = Field(None, alias="from")
    subject: Optional[NonEmptyStr] = None
    any_email: Optional[NonEmptyStr] = None
    thread_id: Optional[NonEmptyStr] = None
    received_after: Optional[Timestamp] = None
    received_before: Optional[Timestamp] = None
    has_attachment: Optional[Literal[True]] = None
    limit: Optional[PositiveInt] = None
    offset: Optional[NonNegativeInt] = None
    view: Optional[Literal["ids", "count", "expanded"]] = None
    unread: Optional[Flag] = None
    starred: Optional[Flag] = None
    filename: Optional[NonEmptyStr] = None


class MessageUpdate(Schema):
    unread: Optional[Flag] = None
    starred: Optional[Flag] = None
    folder_id: Optional[NonEmptyStr] = None
    label_ids: Optional[list[StrictStr]] = None


class MessagesClient:
    """
    Nylas message operations.

    Usage:
        session  = NylasSession(Options.from_env())
        messages = MessagesClient(session)

        unread = messages.get_messages_list({"unread": True, "limit": 20})
        mime   = messages.get_raw_message("msg_123")
        print(mime["subject"])
    """

    def __init__(self, session: NylasSession) -> None:
        self._session = session
        self._options = session.options

    # ── Search / listing ──────────────────────────────────────────────────────

    def get_messages_list(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        """
        List messages matching the filters.

        `limit` defaults to 100 and `offset` to 0 when not given.
        """
        query = validate(MessageFilter, params)
        header = self._options.bearer_header()

        query["limit"] = query.get("limit", DEFAULT_LIMIT)
        query["offset"] = query.get("offset", 0)

        return (
            self._session.request()
            .set_query(query)
            .set_header_params(header)
            .get(ENDPOINTS["messages"])
        )

    # ── Single message ────────────────────────────────────────────────────────

    def get_message(
        self,
        message_id: Union[str, Sequence[str]],
        expanded: bool = False,
    ) -> dict[str, Any]:
        """
        Fetch one or many messages concurrently.

        Args:
            message_id: A message id or a list of ids.
            expanded:   Ask for the expanded view (threading headers included).

        Returns:
            {message_id: message dict | PoolFailure}
        """
        ids = validate_ids(foo_to_list(message_id))
        header = self._options.bearer_header()
        query = {"view": "expanded"} if expanded else {}

        queues = [
            self._session.async_request()
            .set_path(mid)
            .set_query(query)
            .set_header_params(header)
            .get(ENDPOINTS["one_message"])
            for mid in ids
        ]
        return concat_pool_infos(ids, self._session.pool(queues))

    def get_raw_message(self, message_id: str) -> EmailMessage:
        """Fetch the RFC 822 source of a message and parse it."""
        require_non_empty(message_id, "message_id")
        header = {
            "Accept": "message/rfc822",
            **self._options.bearer_header(),
        }

        raw = (
            self._session.request()
            .set_path(message_id)
            .set_header_params(header)
            .get_raw(ENDPOINTS["one_message"])
        )
        logger.debug("Fetched %d raw bytes for message %s", len(raw), message_id)
        return BytesParser(policy=policy.default).parsebytes(raw)

    # ── Mutations ─────────────────────────────────────────────────────────────

    def update_message(self, message_id: str, params: Mapping[str, Any]) -> Any:
        """Change unread / starred state, folder or labels of a message."""
        require_non_empty(message_id, "message_id")
        body = validate(MessageUpdate, params)
        header = self._options.bearer_header()

        message = (
            self._session.request()
            .set_path(message_id)
            .set_form_params(body)
            .set_header_params(header)
            .put(ENDPOINTS["one_message"])
        )
        logger.info("Updated message %s (%s)", message_id, ", ".join(sorted(body)))
        return message
