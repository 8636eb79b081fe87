"""
Re-authorize a Nylas account through the hosted OAuth flow.

Deletes the saved token, prints the authorize URL, waits for the code Nylas
appends to the redirect URI, exchanges it and saves the new token
(see nylas_ops.token_store). Needs NYLAS_CLIENT_ID / NYLAS_CLIENT_SECRET.

Usage:
    python reauth.py --redirect-uri http://localhost:8000/callback
    python reauth.py --scopes email,calendar --login-hint me@example.com
"""
from __future__ import annotations

import argparse

from nylas_ops import token_store
from nylas_ops.client import Client
from nylas_ops.models import HostedToken

DEFAULT_SCOPES = "email.read_only,email.modify,calendar,contacts"


def main() -> None:
    parser = argparse.ArgumentParser(description="Nylas hosted re-authorization")
    parser.add_argument("--redirect-uri", default="http://localhost:8000/callback")
    parser.add_argument("--scopes", default=DEFAULT_SCOPES)
    parser.add_argument("--login-hint", default=None)
    args = parser.parse_args()

    if token_store.delete_token():
        print(f"Deleted old token: {token_store.token_file()}")

    with Client() as nylas:
        hosted = nylas.authentication.hosted
        url = hosted.get_oauth_authorize_url({
            "redirect_uri": args.redirect_uri,
            "response_type": "code",
            "scopes": args.scopes,
            "login_hint": args.login_hint,
            "state": "reauth",
        })
        print(f"Requesting scopes: {args.scopes}")
        print(f"\nOpen this URL and authorize:\n\n  {url}\n")

        code = input("Paste the ?code= value from the redirect: ").strip()
        token = HostedToken.from_response(hosted.post_oauth_token(code))
        path = token_store.save_token(token)
        print(f"Token saved to {path}")

    # Quick smoke test with the fresh token
    with Client() as nylas:
        account = nylas.management.account.get_account_detail()
        print(f"Account: {account.get('email_address')} ({account.get('provider')})")
        print(f"Sync state: {account.get('sync_state')}")
    print("\nAll good.")


if __name__ == "__main__":
    main()
