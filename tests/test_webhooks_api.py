"""API tests for the identity provider webhook."""

import json
import time

import pytest

from careercoach.core.config import settings
from careercoach.core.security import sign_webhook

CREATED = {
    "type": "user.created",
    "data": {
        "id": "user_new_1",
        "email_addresses": [{"email_address": "sam@example.com"}],
        "first_name": "Sam",
        "last_name": "Lee",
        "image_url": "https://img.example.com/sam.png",
    },
}


def signed_headers(body: bytes, msg_id: str = "msg_1", prefix: str = "webhook", secret: str | None = None) -> dict:
    timestamp = str(int(time.time()))
    return {
        f"{prefix}-id": msg_id,
        f"{prefix}-timestamp": timestamp,
        f"{prefix}-signature": sign_webhook(secret or settings.WEBHOOK_SECRET, msg_id, timestamp, body),
        "content-type": "application/json",
    }


def post_event(client, event: dict, **kwargs):
    body = json.dumps(event).encode()
    return client.post("/webhooks/identity", content=body, headers=signed_headers(body, **kwargs))


@pytest.mark.api
def test_user_created(client, mongo):
    response = post_event(client, CREATED)

    assert response.status_code == 200
    assert response.json()["data"] == {"received": True, "type": "user.created"}
    user = mongo["users"].find_one({"external_id": "user_new_1"})
    assert user["email"] == "sam@example.com"
    assert user["name"] == "Sam Lee"
    assert user["industry"] is None


@pytest.mark.api
def test_user_created_is_idempotent(client, mongo):
    assert post_event(client, CREATED).status_code == 200
    assert post_event(client, CREATED, msg_id="msg_2").status_code == 200

    assert mongo["users"].count_documents({"external_id": "user_new_1"}) == 1


@pytest.mark.api
def test_svix_prefixed_headers(client, mongo):
    response = post_event(client, CREATED, prefix="svix")

    assert response.status_code == 200
    assert mongo["users"].count_documents({}) == 1


@pytest.mark.api
def test_user_deleted(client, mongo, user):
    response = post_event(client, {"type": "user.deleted", "data": {"id": user["external_id"]}})

    assert response.status_code == 200
    assert mongo["users"].count_documents({}) == 0


@pytest.mark.api
def test_other_events_are_acknowledged(client, mongo):
    response = post_event(client, {**CREATED, "type": "session.created"})

    assert response.status_code == 200
    assert mongo["users"].count_documents({}) == 0


@pytest.mark.api
def test_invalid_signature(client, mongo):
    response = post_event(client, CREATED, secret="whsec_d3Jvbmc=")

    assert response.status_code == 400
    assert response.json()["error"] == "invalid_signature"
    assert mongo["users"].count_documents({}) == 0


@pytest.mark.api
def test_missing_headers(client):
    response = client.post("/webhooks/identity", json=CREATED)

    assert response.status_code == 400
    assert response.json()["error"] == "missing_headers"


@pytest.mark.api
def test_malformed_payload(client):
    body = b'{"type": "user.created"}'
    response = client.post("/webhooks/identity", content=body, headers=signed_headers(body))

    assert response.status_code == 400
    assert response.json()["error"] == "invalid_payload"


@pytest.mark.api
def test_not_configured(client, monkeypatch):
    monkeypatch.setattr(settings, "WEBHOOK_SECRET", "")

    response = post_event(client, CREATED, secret="whsec_d3Jvbmc=")

    assert response.status_code == 501
    assert response.json()["error"] == "not_configured"
