"""
EventsClient: validated wrapper around the Nylas /events endpoints.

Single-event reads and deletes accept one parameter bag or a list of them and
are fired concurrently through the session pool; their results are keyed by
event id.

See https://developer.nylas.com/docs/api/v2/#tag--Events
"""
from __future__ import annotations

import logging
from typing import Annotated, Any, Literal, Mapping, Optional, Sequence, Union

from pydantic import EmailStr, Field, StrictStr

from .api import ENDPOINTS
from .helpers import concat_pool_infos, generate_list, to_multi
from .models import PoolFailure
from .session import NylasSession
from .validation import (
    Flag,
    NonEmptyStr,
    NonNegativeInt,
    PositiveInt,
    Schema,
    Timestamp,
    YmdDate,
    validate,
    validate_many,
)

logger = logging.getLogger(__name__)

_NOTIFY = "notify_participants"

EventParams = Union[Mapping[str, Any], Sequence[Mapping[str, Any]]]


# ── Filters ───────────────────────────────────────────────────────────────────

class EventFilter(Schema):
    limit: Optional[PositiveInt] = None
    offset: Optional[NonNegativeInt] = None
    event_id: Optional[NonEmptyStr] = None
    calendar_id: Optional[NonEmptyStr] = None

    title: Optional[NonEmptyStr] = None
    location: Optional[NonEmptyStr] = None
    description: Optional[NonEmptyStr] = None
    show_cancelled: Optional[Flag] = None
    expand_recurring: Optional[Flag] = None

    ends_after: Optional[Timestamp] = None
    ends_before: Optional[Timestamp] = None
    starts_after: Optional[Timestamp] = None
    starts_before: Optional[Timestamp] = None


class EventListFilter(EventFilter):
    view: Optional[Literal["ids", "count"]] = None


class EventLookup(EventFilter):
    id: NonEmptyStr


class EventDelete(Schema):
    id: NonEmptyStr
    notify_participants: Optional[Flag] = None


# ── Event time ("when") ───────────────────────────────────────────────────────

class TimeWhen(Schema):
    time: Timestamp


class DateWhen(Schema):
    date: YmdDate


class TimespanWhen(Schema):
    start_time: Timestamp
    end_time: Timestamp


class DatespanWhen(Schema):
    start_date: YmdDate
    end_date: YmdDate


When = Union[TimeWhen, DateWhen, TimespanWhen, DatespanWhen]


# ── Conferencing ──────────────────────────────────────────────────────────────

class WebExDetails(Schema):
    password: StrictStr
    pin: StrictStr
    url: StrictStr


class ZoomMeetingDetails(Schema):
    meeting_code: StrictStr
    password: StrictStr
    url: StrictStr


class GoToMeetingDetails(Schema):
    meeting_code: StrictStr
    phone: list[Any]
    url: StrictStr


class GoogleMeetDetails(Schema):
    phone: list[Any]
    pin: StrictStr
    url: StrictStr


class WebEx(Schema):
    provider: Literal["WebEx"]
    details: WebExDetails


class ZoomMeeting(Schema):
    provider: Literal["Zoom Meeting"]
    details: ZoomMeetingDetails


class GoToMeeting(Schema):
    provider: Literal["GoToMeeting"]
    details: GoToMeetingDetails


class GoogleMeet(Schema):
    provider: Literal["Google Meet"]
    details: GoogleMeetDetails


Conferencing = Annotated[
    Union[WebEx, ZoomMeeting, GoToMeeting, GoogleMeet],
    Field(discriminator="provider"),
]


# ── Event bodies ──────────────────────────────────────────────────────────────

class Recurrence(Schema):
    rrule: list[Any]
    timezone: StrictStr


class Participant(Schema):
    email: EmailStr
    name: Optional[StrictStr] = None
    status: Optional[Literal["yes", "no", "maybe", "noreply"]] = None
    comment: Optional[StrictStr] = None


class EventBase(Schema):
    calendar_id: NonEmptyStr
    busy: Optional[Flag] = None
    read_only: Optional[Flag] = None
    title: Optional[NonEmptyStr] = None
    location: Optional[NonEmptyStr] = None
    recurrence: Optional[Recurrence] = None
    description: Optional[NonEmptyStr] = None
    participants: Optional[list[Participant]] = None
    conferencing: Optional[Conferencing] = None
    notify_participants: Optional[Flag] = None


class EventCreate(EventBase):
    when: When


class EventUpdate(EventBase):
    id: NonEmptyStr
    when: Optional[When] = None


class Rsvp(Schema):
    status: Literal["yes", "no", "maybe"]
    event_id: NonEmptyStr
    account_id: NonEmptyStr
    notify_participants: Optional[Flag] = None


def _pop_notify(params: dict[str, Any]) -> dict[str, Any]:
    """Move notify_participants out of a body and into a query dict."""
    if _NOTIFY in params:
        return {_NOTIFY: params.pop(_NOTIFY)}
    return {}


# ── Client class ──────────────────────────────────────────────────────────────

class EventsClient:
    """
    Nylas calendar event operations.

    Usage:
        session = NylasSession(Options.from_env())
        events  = EventsClient(session)

        events.get_events_list({"calendar_id": "cal_1", "limit": 20})
        events.add_event({
            "calendar_id": "cal_1",
            "title": "Standup",
            "when": {"start_time": 1700000000, "end_time": 1700000900},
        })
    """

    def __init__(self, session: NylasSession) -> None:
        self._session = session
        self._options = session.options

    # ── Read ──────────────────────────────────────────────────────────────────

    def get_events_list(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        """List events matching the filters (or ids / a count with `view`)."""
        query = validate(EventListFilter, params)
        header = self._options.bearer_header()

        return (
            self._session.request()
            .set_query(query)
            .set_header_params(header)
            .get(ENDPOINTS["events"])
        )

    def get_event(self, params: EventParams) -> dict[str, Any]:
        """
        Fetch one or many events concurrently.

        Args:
            params: {"id": ..., <filters>} or a list of them. Filters other
                    than `id` are sent as the query string of that request.

        Returns:
            {event_id: event dict | PoolFailure}
        """
        items = validate_many(EventLookup, to_multi(params))
        header = self._options.bearer_header()

        ids = generate_list(items, "id")
        queues = [
            self._session.async_request()
            .set_path(item["id"])
            .set_query({k: v for k, v in item.items() if k != "id"})
            .set_header_params(header)
            .get(ENDPOINTS["one_event"])
            for item in items
        ]

        return concat_pool_infos(ids, self._session.pool(queues))

    # ── Create / modify ───────────────────────────────────────────────────────

    def add_event(self, params: Mapping[str, Any]) -> Any:
        """Create an event; `notify_participants` is sent as a query flag."""
        body = validate(EventCreate, params)
        header = self._options.bearer_header()
        query = _pop_notify(body)

        event = (
            self._session.request()
            .set_query(query)
            .set_form_params(body)
            .set_header_params(header)
            .post(ENDPOINTS["events"])
        )
        logger.info("Created event %s", _id_of(event))
        return event

    def update_event(self, params: Mapping[str, Any]) -> Any:
        """Update the event named by params["id"]."""
        body = validate(EventUpdate, params)
        header = self._options.bearer_header()
        event_id = body.pop("id")
        query = _pop_notify(body)

        event = (
            self._session.request()
            .set_path(event_id)
            .set_query(query)
            .set_form_params(body)
            .set_header_params(header)
            .put(ENDPOINTS["one_event"])
        )
        logger.info("Updated event %s", event_id)
        return event

    def rsvping(self, params: Mapping[str, Any]) -> Any:
        """
        Answer an invitation (yes / no / maybe).

        `account_id` defaults to Options.account_id.
        """
        params = dict(params)
        params.setdefault("account_id", self._options.account_id)

        body = validate(Rsvp, params)
        header = self._options.bearer_header()
        query = _pop_notify(body)

        result = (
            self._session.request()
            .set_query(query)
            .set_form_params(body)
            .set_header_params(header)
            .post(ENDPOINTS["send_rsvp"])
        )
        logger.info("RSVP %s sent for event %s", body["status"], body["event_id"])
        return result

    def delete_event(self, params: EventParams) -> dict[str, Any]:
        """
        Delete one or many events concurrently.

        Args:
            params: {"id": ..., "notify_participants": bool?} or a list of them.

        Returns:
            {event_id: response dict | PoolFailure}
        """
        items = validate_many(EventDelete, to_multi(params))
        header = self._options.bearer_header()

        ids = generate_list(items, "id")
        queues = [
            self._session.async_request()
            .set_path(item["id"])
            .set_query(_pop_notify(item))
            .set_header_params(header)
            .delete(ENDPOINTS["one_event"])
            for item in items
        ]

        results = concat_pool_infos(ids, self._session.pool(queues))
        deleted = [i for i, r in results.items() if not isinstance(r, PoolFailure)]
        logger.info("Deleted %d of %d event(s)", len(deleted), len(results))
        return results


def _id_of(payload: Any) -> str:
    return payload.get("id", "?") if isinstance(payload, dict) else "?"
