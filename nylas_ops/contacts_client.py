"""
ContactsClient: validated wrapper around the Nylas /contacts endpoints.

Supports filtered listing, pooled lookups and deletes, create/update,
contact groups and profile pictures.
"""
from __future__ import annotations

import logging
from typing import Any, Literal, Mapping, Optional, Sequence, Union

from pydantic import EmailStr, StrictStr

from .api import ENDPOINTS
from .helpers import concat_pool_infos, foo_to_list
from .session import NylasSession
from .validation import (
    Flag,
    NonEmptyStr,
    NonNegativeInt,
    PositiveInt,
    Schema,
    YmdDate,
    require_non_empty,
    validate,
    validate_ids,
)

logger = logging.getLogger(__name__)


class ContactFilter(Schema):
    limit: Optional[PositiveInt] = None
    offset: Optional[NonNegativeInt] = None
    email: Optional[EmailStr] = None
    phone_number: Optional[NonEmptyStr] = None
    street_address: Optional[NonEmptyStr] = None
    postal_code: Optional[NonEmptyStr] = None
    state: Optional[NonEmptyStr] = None
    country: Optional[NonEmptyStr] = None
    source: Optional[Literal["address_book", "inbox", "domain"]] = None
    group: Optional[NonEmptyStr] = None
    recurse: Optional[Flag] = None
    view: Optional[Literal["ids", "count"]] = None


# ── Typed sub-records ─────────────────────────────────────────────────────────

class ContactEmail(Schema):
    type: Literal["work", "personal"]
    email: EmailStr


class ContactPhone(Schema):
    type: Literal[
        "business", "home", "mobile", "pager", "business_fax", "home_fax",
        "organization_main", "assistant", "radio", "other",
    ]
    number: NonEmptyStr


class ContactAddress(Schema):
    type: Literal["work", "home", "other"]
    format: Optional[StrictStr] = None
    street_address: Optional[StrictStr] = None
    city: Optional[StrictStr] = None
    postal_code: Optional[StrictStr] = None
    state: Optional[StrictStr] = None
    country: Optional[StrictStr] = None


class ContactWebPage(Schema):
    type: Literal["profile", "blog", "homepage", "work"]
    url: NonEmptyStr


class ContactImAddress(Schema):
    type: Literal[
        "gtalk", "aim", "yahoo", "lync", "skype", "qq", "msn", "icq", "jabber",
    ]
    im_address: NonEmptyStr


class ContactGroupRef(Schema):
    id: NonEmptyStr


class ContactBody(Schema):
    given_name: Optional[StrictStr] = None
    middle_name: Optional[StrictStr] = None
    surname: Optional[StrictStr] = None
    suffix: Optional[StrictStr] = None
    nickname: Optional[StrictStr] = None
    company_name: Optional[StrictStr] = None
    job_title: Optional[StrictStr] = None
    manager_name: Optional[StrictStr] = None
    office_location: Optional[StrictStr] = None
    notes: Optional[StrictStr] = None
    birthday: Optional[YmdDate] = None
    group: Optional[ContactGroupRef] = None
    emails: Optional[list[ContactEmail]] = None
    phone_numbers: Optional[list[ContactPhone]] = None
    physical_addresses: Optional[list[ContactAddress]] = None
    web_pages: Optional[list[ContactWebPage]] = None
    im_addresses: Optional[list[ContactImAddress]] = None


class ContactUpdate(ContactBody):
    id: NonEmptyStr


class ContactsClient:
    """
    Nylas contact operations.

    Usage:
        contacts = ContactsClient(session)
        found = contacts.get_contacts_list({"email": "someone@example.com"})
    """

    def __init__(self, session: NylasSession) -> None:
        self._session = session
        self._options = session.options

    # ── Read ──────────────────────────────────────────────────────────────────

    def get_contacts_list(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        query = validate(ContactFilter, params)
        header = self._options.bearer_header()

        return (
            self._session.request()
            .set_query(query)
            .set_header_params(header)
            .get(ENDPOINTS["contacts"])
        )

    def get_contact(self, contact_id: Union[str, Sequence[str]]) -> dict[str, Any]:
        """Fetch one or many contacts concurrently, keyed by id."""
        ids = validate_ids(foo_to_list(contact_id))
        header = self._options.bearer_header()

        queues = [
            self._session.async_request()
            .set_path(cid)
            .set_header_params(header)
            .get(ENDPOINTS["one_contact"])
            for cid in ids
        ]
        return concat_pool_infos(ids, self._session.pool(queues))

    def get_contact_groups(self) -> Any:
        header = self._options.bearer_header()
        return (
            self._session.request()
            .set_header_params(header)
            .get(ENDPOINTS["contact_groups"])
        )

    def get_contact_picture(self, contact_id: str) -> bytes:
        """Profile picture bytes (usually JPEG)."""
        require_non_empty(contact_id, "contact_id")
        header = {"Accept": "image/*", **self._options.bearer_header()}

        return (
            self._session.request()
            .set_path(contact_id)
            .set_header_params(header)
            .get_raw(ENDPOINTS["contact_picture"])
        )

    # ── Create / modify ───────────────────────────────────────────────────────

    def add_contact(self, params: Mapping[str, Any]) -> Any:
        body = validate(ContactBody, params)
        header = self._options.bearer_header()

        contact = (
            self._session.request()
            .set_form_params(body)
            .set_header_params(header)
            .post(ENDPOINTS["contacts"])
        )
        logger.info(
            "Created contact %s",
            contact.get("id", "?") if isinstance(contact, dict) else "?",
        )
        return contact

    def update_contact(self, params: Mapping[str, Any]) -> Any:
        body = validate(ContactUpdate, params)
        header = self._options.bearer_header()
        contact_id = body.pop("id")

        contact = (
            self._session.request()
            .set_path(contact_id)
            .set_form_params(body)
            .set_header_params(header)
            .put(ENDPOINTS["one_contact"])
        )
        logger.info("Updated contact %s", contact_id)
        return contact

    def delete_contact(self, contact_id: Union[str, Sequence[str]]) -> dict[str, Any]:
        """Delete one or many contacts concurrently, keyed by id."""
        ids = validate_ids(foo_to_list(contact_id))
        header = self._options.bearer_header()

        queues = [
            self._session.async_request()
            .set_path(cid)
            .set_header_params(header)
            .delete(ENDPOINTS["one_contact"])
            for cid in ids
        ]
        results = concat_pool_infos(ids, self._session.pool(queues))
        logger.info("Delete requested for %d contact(s)", len(ids))
        return results
