"""
Nylas v2 REST surface: region base URLs and endpoint path templates.

Templates use "{}" placeholders, filled positionally by Request.set_path().
"""
from __future__ import annotations

SERVERS: dict[str, str] = {
    "us": "https://api.nylas.com",
    "eu": "https://ireland.api.nylas.com",
}

DEFAULT_REGION = "us"

ENDPOINTS: dict[str, str] = {
    # Hosted authentication
    "oauth_authorize": "/oauth/authorize",
    "oauth_token":     "/oauth/token",
    "oauth_revoke":    "/oauth/revoke",

    # Account (access-token scoped)
    "account": "/account",

    # Application management (client-secret scoped)
    "application":       "/a/{}",
    "ip_addresses":      "/a/{}/ip_addresses",
    "manage_accounts":   "/a/{}/accounts",
    "manage_account":    "/a/{}/accounts/{}",
    "cancel_account":    "/a/{}/accounts/{}/downgrade",
    "reactivate_account": "/a/{}/accounts/{}/upgrade",
    "revoke_all":        "/a/{}/accounts/{}/revoke-all",
    "token_info":        "/a/{}/accounts/{}/token-info",

    # Calendars
    "calendars":    "/calendars",
    "one_calendar": "/calendars/{}",
    "free_busy":    "/calendars/free-busy",

    # Events
    "events":    "/events",
    "one_event": "/events/{}",
    "send_rsvp": "/send-rsvp",

    # Messages
    "messages":    "/messages",
    "one_message": "/messages/{}",

    # Contacts
    "contacts":        "/contacts",
    "one_contact":     "/contacts/{}",
    "contact_groups":  "/contacts/groups",
    "contact_picture": "/contacts/{}/picture",
}
