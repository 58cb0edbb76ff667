"""HTTP surface of the faucet."""

import pytest
from fastapi.testclient import TestClient
from pydantic import ValidationError

from conftest import ADMIN
from faucet.config import Settings
from faucet.main import build_faucet, create_app

ALICE = {"X-Account": "alice"}
ADMIN_HEADERS = {"X-Account": ADMIN}


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "version": "1.0.0"}
    assert response.headers["X-Content-Type-Options"] == "nosniff"


def test_claim_cycle(client, clock):
    response = client.post("/api/claim", headers=ALICE)
    assert response.status_code == 200
    assert response.json() == {
        "account": "alice",
        "amount": 5,
        "claimed_at": 0,
        "next_claim_at": 86400,
    }

    clock.now = 100
    response = client.post("/api/claim", headers=ALICE)
    assert response.status_code == 429
    detail = response.json()["detail"]
    assert detail["code"] == "CooldownNotElapsed"
    assert detail["details"]["next_claim_at"] == 86400

    assert client.get("/api/reserve").json() == {
        "reserve_account": "faucet-reserve",
        "balance": 95,
    }


def test_claim_requires_account_header(client):
    response = client.post("/api/claim")
    assert response.status_code == 422


def test_claim_with_null_account(client):
    response = client.post("/api/claim", headers={"X-Account": "0x" + "0" * 40})
    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "InvalidArgument"


def test_claim_insufficient_reserve(client):
    client.post("/api/admin/withdraw", headers=ADMIN_HEADERS, json={"to": "t", "amount": 98})
    response = client.post("/api/claim", headers=ALICE)
    assert response.status_code == 409
    assert response.json()["detail"]["details"] == {"balance": 2, "required": 5}


def test_claim_transfer_failure(client, reserve, faucet):
    reserve.fail = True
    response = client.post("/api/claim", headers=ALICE)
    assert response.status_code == 502
    assert response.json()["detail"]["code"] == "TransferFailure"
    assert faucet.can_claim("alice")


def test_account_status(client, clock):
    response = client.get("/api/accounts/alice")
    assert response.json() == {
        "account": "alice",
        "can_claim": True,
        "state": "unclaimed",
        "last_grant": 0,
        "next_claim_at": None,
        "reason": None,
    }

    client.post("/api/claim", headers=ALICE)
    clock.now = 10
    body = client.get("/api/accounts/alice").json()
    assert body["can_claim"] is False
    assert body["state"] == "cooled"
    assert body["next_claim_at"] == 86400
    assert body["reason"] == "CooldownNotElapsed"

    clock.now = 86400
    body = client.get("/api/accounts/alice").json()
    assert body["state"] == "eligible"
    assert body["can_claim"] is True


def test_parameters(client):
    assert client.get("/api/parameters").json() == {
        "grant_amount": 5,
        "cooldown_seconds": 86400,
        "administrator": ADMIN,
    }


def test_admin_reconfiguration(client):
    response = client.put("/api/admin/grant-amount", headers=ALICE, json={"amount": 0})
    assert response.status_code == 403
    assert response.json()["detail"]["code"] == "NotAuthorized"

    response = client.put("/api/admin/grant-amount", headers=ADMIN_HEADERS, json={"amount": 0})
    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "InvalidArgument"

    response = client.put("/api/admin/grant-amount", headers=ADMIN_HEADERS, json={"amount": 20})
    assert response.status_code == 200
    assert response.json()["grant_amount"] == 20

    assert client.post("/api/claim", headers=ALICE).json()["amount"] == 20


def test_set_cooldown(client):
    response = client.put("/api/admin/cooldown", headers=ADMIN_HEADERS, json={"seconds": 0})
    assert response.status_code == 200
    assert response.json()["cooldown_seconds"] == 0

    assert client.post("/api/claim", headers=ALICE).status_code == 200
    assert client.post("/api/claim", headers=ALICE).status_code == 200

    response = client.put("/api/admin/cooldown", headers=ADMIN_HEADERS, json={"seconds": -1})
    assert response.status_code == 400


def test_transfer_administrator(client):
    response = client.put(
        "/api/admin/administrator", headers=ADMIN_HEADERS, json={"new_admin": "carol"}
    )
    assert response.status_code == 200
    assert response.json()["administrator"] == "carol"

    response = client.put("/api/admin/cooldown", headers=ADMIN_HEADERS, json={"seconds": 1})
    assert response.status_code == 403

    response = client.put(
        "/api/admin/administrator", headers={"X-Account": "carol"}, json={"new_admin": ""}
    )
    assert response.status_code == 400


def test_withdraw(client, reserve):
    response = client.post(
        "/api/admin/withdraw", headers=ADMIN_HEADERS, json={"to": "treasury", "amount": 40}
    )
    assert response.status_code == 200
    assert response.json() == {"to": "treasury", "amount": 40, "balance": 60}
    assert reserve.balance_of("treasury") == 40

    response = client.post(
        "/api/admin/withdraw", headers=ADMIN_HEADERS, json={"to": "treasury", "amount": 61}
    )
    assert response.status_code == 502


def test_audit_log(client):
    client.post("/api/claim", headers=ALICE)
    client.put("/api/admin/cooldown", headers=ADMIN_HEADERS, json={"seconds": 0})
    client.post("/api/claim", headers={"X-Account": "bob"})

    body = client.get("/api/audit").json()
    assert body["last_sequence"] == 3
    assert [r["kind"] for r in body["records"]] == ["Claimed", "CooldownChanged", "Claimed"]
    assert body["records"][0]["payload"] == {"account": "alice", "amount": 5, "timestamp": 0}

    body = client.get("/api/audit", params={"since": 1, "kind": "Claimed"}).json()
    assert [r["actor"] for r in body["records"]] == ["bob"]

    assert client.get("/api/audit", params={"kind": "Bogus"}).status_code == 422


def test_api_key_required_when_configured(settings, faucet):
    settings.api_key = "secret"
    client = TestClient(create_app(settings, faucet))

    assert client.get("/api/parameters").status_code == 403
    assert client.get("/api/parameters", headers={"X-API-Key": "wrong"}).status_code == 403
    assert client.get("/api/parameters", headers={"X-API-Key": "secret"}).status_code == 200
    assert client.get("/health").status_code == 200


def test_app_built_from_settings(settings):
    settings.initial_reserve = 12
    settings.grant_amount = 6
    client = TestClient(create_app(settings))

    assert client.get("/api/reserve").json()["balance"] == 12
    assert client.post("/api/claim", headers=ALICE).status_code == 200
    assert client.post("/api/claim", headers={"X-Account": "bob"}).status_code == 200
    assert client.post("/api/claim", headers={"X-Account": "carol"}).status_code == 409


def test_build_faucet_uses_settings(settings):
    faucet = build_faucet(settings)
    assert faucet.administrator == ADMIN
    assert faucet.reserve_balance() == 100
    assert faucet.parameters.cooldown_seconds == 86400


def test_withdraw_reports_normalized_recipient(client, faucet):
    response = client.post(
        "/api/admin/withdraw", headers=ADMIN_HEADERS, json={"to": "  treasury ", "amount": 10}
    )
    assert response.json()["to"] == "treasury"
    (record,) = faucet.audit_records()
    assert record.payload["to"] == response.json()["to"]


def test_claims_are_throttled_per_account(settings, faucet):
    faucet.set_cooldown(ADMIN, 0)
    settings.rate_limit_enabled = True
    settings.claim_rate_limit = "2/minute"
    client = TestClient(create_app(settings, faucet))

    assert client.post("/api/claim", headers=ALICE).status_code == 200
    assert client.post("/api/claim", headers=ALICE).status_code == 200

    response = client.post("/api/claim", headers=ALICE)
    assert response.status_code == 429
    assert "Rate limit exceeded" in response.json()["error"]
    assert faucet.reserve_balance() == 90

    assert client.post("/api/claim", headers={"X-Account": "bob"}).status_code == 200


def test_throttling_follows_app_settings(settings, faucet):
    faucet.set_cooldown(ADMIN, 0)
    settings.rate_limit_enabled = False
    settings.claim_rate_limit = "1/minute"
    client = TestClient(create_app(settings, faucet))

    for _ in range(3):
        assert client.post("/api/claim", headers=ALICE).status_code == 200


def test_admin_account_is_required(monkeypatch):
    monkeypatch.delenv("FAUCET_ADMIN_ACCOUNT", raising=False)
    with pytest.raises(ValidationError) as exc_info:
        Settings()
    assert "admin_account" in str(exc_info.value)
