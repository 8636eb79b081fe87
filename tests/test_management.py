from __future__ import annotations

import base64

import httpx
import pytest

from nylas_ops.account_client import AccountClient
from nylas_ops.application_client import ApplicationClient
from nylas_ops.config import Options
from nylas_ops.errors import NylasValidationError
from nylas_ops.models import PoolFailure
from nylas_ops.session import NylasSession

BASIC = "Basic " + base64.b64encode(b"secret-xyz:").decode("ascii")


@pytest.fixture
def application(session) -> ApplicationClient:
    return ApplicationClient(session)


# ── Account ───────────────────────────────────────────────────────────────────

def test_get_account_detail(session, recorder) -> None:
    recorder.add("GET", "/account", json={"id": "account-1", "sync_state": "running"})

    assert AccountClient(session).get_account_detail()["sync_state"] == "running"
    assert recorder.last.headers["Authorization"] == "Bearer token-123"


def test_get_account_detail_http_error(session, recorder) -> None:
    recorder.add("GET", "/account", status=401, json={"message": "Invalid token"})
    with pytest.raises(httpx.HTTPStatusError):
        AccountClient(session).get_account_detail()


# ── Application ───────────────────────────────────────────────────────────────

def test_application_detail_uses_basic_auth(application, recorder) -> None:
    recorder.add("GET", "/a/client-abc", json={"application_name": "ops"})

    assert application.get_application_detail() == {"application_name": "ops"}
    assert recorder.last.headers["Authorization"] == BASIC


def test_update_application_detail(application, recorder) -> None:
    recorder.add("PUT", "/a/client-abc", json={})

    application.update_application_detail({"redirect_uris": ["http://localhost:8000"]})

    assert recorder.body(recorder.last) == {"redirect_uris": ["http://localhost:8000"]}


def test_get_ip_addresses(application, recorder) -> None:
    recorder.add("GET", "/a/client-abc/ip_addresses", json={"ip_addresses": ["1.2.3.4"]})
    assert application.get_ip_addresses() == {"ip_addresses": ["1.2.3.4"]}


def test_get_accounts_list(application, recorder) -> None:
    recorder.add("GET", "/a/client-abc/accounts", json=[{"id": "a1"}])

    assert application.get_accounts_list({"limit": 50}) == [{"id": "a1"}]
    assert recorder.last.url.params["limit"] == "50"


def test_get_account_pooled(application, recorder) -> None:
    recorder.add("GET", "/a/client-abc/accounts/a1", json={"id": "a1"})

    result = application.get_account(["a1", "a2"])

    assert result["a1"] == {"id": "a1"}
    assert isinstance(result["a2"], PoolFailure)
    assert all(c.headers["Authorization"] == BASIC for c in recorder.calls)


@pytest.mark.parametrize(
    "method, suffix",
    [("cancel_account", "downgrade"), ("reactivate_account", "upgrade")],
)
def test_account_billing_actions(application, recorder, method, suffix) -> None:
    recorder.add("POST", f"/a/client-abc/accounts/a1/{suffix}", json={"success": True})

    assert getattr(application, method)("a1") == {"success": True}
    assert recorder.last.content == b""


def test_revoke_all_tokens_keeps_one(application, recorder) -> None:
    recorder.add("POST", "/a/client-abc/accounts/a1/revoke-all", json={"success": True})

    application.revoke_all_tokens("a1", keep_access_token="keep-me")

    assert recorder.body(recorder.last) == {"keep_access_token": "keep-me"}


def test_get_token_info_defaults_to_configured_token(application, recorder) -> None:
    recorder.add("POST", "/a/client-abc/accounts/a1/token-info", json={"state": "valid"})

    assert application.get_token_info("a1") == {"state": "valid"}
    assert recorder.body(recorder.last) == {"access_token": "token-123"}


def test_application_requires_client_id(recorder) -> None:
    options = Options(client_secret="s", transport=httpx.MockTransport(recorder))
    with NylasSession(options) as session:
        with pytest.raises(NylasValidationError, match="client_id"):
            ApplicationClient(session).get_application_detail()
    assert recorder.calls == []


def test_account_action_requires_account_id(application, recorder) -> None:
    with pytest.raises(NylasValidationError, match="account_id"):
        application.cancel_account("")
    assert recorder.calls == []
