"""
nylas_ops: typed client library for the Nylas email / calendar / contacts API.

Package structure:
    nylas_ops.base                - logging helpers, BaseScript (CLI scripts)
    nylas_ops.config              - Options (credentials, region, transport settings)
    nylas_ops.api                 - region base URLs and endpoint path table
    nylas_ops.validation          - per-endpoint schema checks (pydantic)
    nylas_ops.request             - Request / AsyncRequest builders, pooled fan-out
    nylas_ops.session             - NylasSession (shared HTTP clients)
    nylas_ops.helpers             - pooled-result shaping helpers
    nylas_ops.models              - Typed dataclasses (PoolFailure, HostedToken)
    nylas_ops.token_store         - hosted-auth token persistence
    nylas_ops.hosted_auth         - HostedAuthClient
    nylas_ops.account_client      - AccountClient
    nylas_ops.application_client  - ApplicationClient
    nylas_ops.calendars_client    - CalendarsClient
    nylas_ops.events_client       - EventsClient
    nylas_ops.messages_client     - MessagesClient
    nylas_ops.contacts_client     - ContactsClient
    nylas_ops.client              - Client facade
"""
from .client import Client
from .config import Options
from .errors import NylasError, NylasValidationError
from .models import HostedToken, PoolFailure
from .session import NylasSession

__all__ = [
    "Client",
    "HostedToken",
    "NylasError",
    "NylasSession",
    "NylasValidationError",
    "Options",
    "PoolFailure",
]
