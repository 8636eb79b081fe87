"""
CalendarsClient: validated wrapper around the Nylas /calendars endpoints.

Covers listing, pooled lookups and deletes, create/update of virtual
calendars, and free/busy queries.
"""
from __future__ import annotations

import logging
from typing import Any, Literal, Mapping, Optional, Sequence, Union

from pydantic import EmailStr, Field, StrictStr

from .api import ENDPOINTS
from .helpers import concat_pool_infos, foo_to_list
from .session import NylasSession
from .validation import (
    NonEmptyStr,
    NonNegativeInt,
    PositiveInt,
    Schema,
    Timestamp,
    validate,
    validate_ids,
)

logger = logging.getLogger(__name__)


class CalendarFilter(Schema):
    limit: Optional[PositiveInt] = None
    offset: Optional[NonNegativeInt] = None
    view: Optional[Literal["ids", "count"]] = None


class CalendarBody(Schema):
    description: Optional[StrictStr] = None
    location: Optional[StrictStr] = None
    timezone: Optional[NonEmptyStr] = None
    metadata: Optional[dict[str, StrictStr]] = None


class CalendarCreate(CalendarBody):
    name: NonEmptyStr


class CalendarUpdate(CalendarBody):
    id: NonEmptyStr
    name: Optional[NonEmptyStr] = None


class FreeBusyQuery(Schema):
    start_time: Timestamp
    end_time: Timestamp
    emails: list[EmailStr] = Field(min_length=1)


class CalendarsClient:
    """
    Nylas calendar operations.

    Usage:
        calendars = CalendarsClient(session)
        for cal in calendars.get_calendars_list():
            print(cal["id"], cal["name"])
    """

    def __init__(self, session: NylasSession) -> None:
        self._session = session
        self._options = session.options

    def get_calendars_list(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        query = validate(CalendarFilter, params)
        header = self._options.bearer_header()

        return (
            self._session.request()
            .set_query(query)
            .set_header_params(header)
            .get(ENDPOINTS["calendars"])
        )

    def get_calendar(self, calendar_id: Union[str, Sequence[str]]) -> dict[str, Any]:
        """Fetch one or many calendars concurrently, keyed by id."""
        ids = validate_ids(foo_to_list(calendar_id))
        header = self._options.bearer_header()

        queues = [
            self._session.async_request()
            .set_path(cid)
            .set_header_params(header)
            .get(ENDPOINTS["one_calendar"])
            for cid in ids
        ]
        return concat_pool_infos(ids, self._session.pool(queues))

    def add_calendar(self, params: Mapping[str, Any]) -> Any:
        body = validate(CalendarCreate, params)
        header = self._options.bearer_header()

        calendar = (
            self._session.request()
            .set_form_params(body)
            .set_header_params(header)
            .post(ENDPOINTS["calendars"])
        )
        logger.info("Created calendar %r", body["name"])
        return calendar

    def update_calendar(self, params: Mapping[str, Any]) -> Any:
        body = validate(CalendarUpdate, params)
        header = self._options.bearer_header()
        calendar_id = body.pop("id")

        calendar = (
            self._session.request()
            .set_path(calendar_id)
            .set_form_params(body)
            .set_header_params(header)
            .put(ENDPOINTS["one_calendar"])
        )
        logger.info("Updated calendar %s", calendar_id)
        return calendar

    def delete_calendar(self, calendar_id: Union[str, Sequence[str]]) -> dict[str, Any]:
        """Delete one or many calendars concurrently, keyed by id."""
        ids = validate_ids(foo_to_list(calendar_id))
        header = self._options.bearer_header()

        queues = [
            self._session.async_request()
            .set_path(cid)
            .set_header_params(header)
            .delete(ENDPOINTS["one_calendar"])
            for cid in ids
        ]
        results = concat_pool_infos(ids, self._session.pool(queues))
        logger.info("Delete requested for %d calendar(s)", len(ids))
        return results

    def get_free_busy(self, params: Mapping[str, Any]) -> Any:
        """
        Busy slots for a set of participants.

        Args:
            params: {"start_time": ts, "end_time": ts, "emails": [addr, ...]}
        """
        body = validate(FreeBusyQuery, params)
        header = self._options.bearer_header()

        return (
            self._session.request()
            .set_form_params(body)
            .set_header_params(header)
            .post(ENDPOINTS["free_busy"])
        )
