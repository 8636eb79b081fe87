"""
Client: one entry point for every nylas_ops endpoint client.

Endpoint clients are built lazily and cached, all sharing one NylasSession
(and so one HTTP connection pool).

Usage:
    with Client() as nylas:                 # Options.from_env()
        nylas.events.get_events_list({"limit": 10})
        nylas.messages.get_message(["m1", "m2"])
        nylas.management.account.get_account_detail()
        nylas.authentication.hosted.get_oauth_authorize_url({...})
"""
from __future__ import annotations

from typing import Any, Optional

from .account_client import AccountClient
from .application_client import ApplicationClient
from .calendars_client import CalendarsClient
from .config import Options
from .contacts_client import ContactsClient
from .events_client import EventsClient
from .hosted_auth import HostedAuthClient
from .messages_client import MessagesClient
from .session import NylasSession


class ServiceGroup:
    """
    Lazily instantiates the member clients of one API area.

        group = ServiceGroup(session, "management",
                             {"account": AccountClient, "application": ApplicationClient})
        group.account   # built on first access, cached after
    """

    def __init__(self, session: NylasSession, name: str, members: dict[str, type]) -> None:
        self._session = session
        self._name = name
        self._members = members
        self._built: dict[str, Any] = {}

    def __getattr__(self, item: str) -> Any:
        # Only reached for attributes not set in __init__
        members = self.__dict__.get("_members", {})
        if item not in members:
            group = self.__dict__.get("_name", "group")
            raise AttributeError(f"{group} has no service {item!r}")
        built = self.__dict__["_built"]
        if item not in built:
            built[item] = members[item](self._session)
        return built[item]

    def __dir__(self) -> list[str]:
        return sorted(set(super().__dir__()) | set(self._members))


class Client:
    """Facade over a NylasSession; see module docstring."""

    def __init__(self, options: Optional[Options] = None) -> None:
        self.options = options if options is not None else Options.from_env()
        self.session = NylasSession(self.options)
        self._services: dict[str, Any] = {}

    def _get(self, name: str, cls: type) -> Any:
        if name not in self._services:
            self._services[name] = cls(self.session)
        return self._services[name]

    # ── Endpoint clients ──────────────────────────────────────────────────────

    @property
    def events(self) -> EventsClient:
        return self._get("events", EventsClient)

    @property
    def messages(self) -> MessagesClient:
        return self._get("messages", MessagesClient)

    @property
    def calendars(self) -> CalendarsClient:
        return self._get("calendars", CalendarsClient)

    @property
    def contacts(self) -> ContactsClient:
        return self._get("contacts", ContactsClient)

    # ── Groups ────────────────────────────────────────────────────────────────

    @property
    def management(self) -> ServiceGroup:
        """.account (access-token scoped) and .application (client-secret scoped)."""
        return self._get_group(
            "management",
            {"account": AccountClient, "application": ApplicationClient},
        )

    @property
    def authentication(self) -> ServiceGroup:
        """.hosted: the hosted OAuth flow."""
        return self._get_group("authentication", {"hosted": HostedAuthClient})

    def _get_group(self, name: str, members: dict[str, type]) -> ServiceGroup:
        if name not in self._services:
            self._services[name] = ServiceGroup(self.session, name, members)
        return self._services[name]

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
