"""API tests for /users: profile lookup, onboarding, provisioning wait."""

import asyncio

import pytest

from careercoach.core import security
from careercoach.resume.errors import ExternalServiceError
from careercoach.services import ai

PROFILE = {
    "industry": "tech",
    "sub_industry": "Software Development",
    "experience": 5,
    "bio": "Backend engineer",
    "skills": "Python, SQL , ",
}


@pytest.mark.api
def test_me(client, auth_headers):
    response = client.get("/users/me", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["external_id"] == "user_test_1"
    assert data["name"] == "Jane Doe"
    assert data["industry"] is None


@pytest.mark.api
def test_me_unknown_user(client, mongo, token_factory):
    response = client.get("/users/me", headers={"Authorization": f"Bearer {token_factory('ghost')}"})

    assert response.status_code == 404
    assert response.json()["error"] == "user_not_found"


@pytest.mark.api
def test_onboarding_status_not_onboarded(client, auth_headers):
    response = client.get("/users/me/onboarding-status", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["data"] == {"is_onboarded": False}


@pytest.mark.api
def test_onboarding_status_gives_up_for_missing_user(client, mongo, token_factory):
    """Bounded wait: a user that never appears ends in 404, not a hang."""
    response = client.get(
        "/users/me/onboarding-status",
        headers={"Authorization": f"Bearer {token_factory('late_user')}"},
    )

    assert response.status_code == 404
    assert response.json()["error"] == "user_not_provisioned"


@pytest.mark.unit
def test_provisioned_user_appears_during_wait(mongo, monkeypatch):
    """Row created by the webhook between attempts is picked up."""
    calls = {"count": 0}

    def find_user(external_id):
        calls["count"] += 1
        return {"_id": "x", "external_id": external_id} if calls["count"] >= 2 else None

    monkeypatch.setattr(security, "find_user", find_user)

    user = asyncio.run(security.get_provisioned_user("late_user"))

    assert user["external_id"] == "late_user"
    assert calls["count"] == 2


@pytest.mark.api
def test_profile_update_onboards_user(client, auth_headers, fake_insights, mongo):
    response = client.put("/users/me/profile", json=PROFILE, headers=auth_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["industry"] == "tech-software-development"
    assert data["skills"] == ["Python", "SQL"]
    assert data["experience"] == 5
    assert fake_insights == ["tech-software-development"]
    assert mongo["industry_insights"].count_documents({"industry": "tech-software-development"}) == 1

    status = client.get("/users/me/onboarding-status", headers=auth_headers)
    assert status.json()["data"] == {"is_onboarded": True}


@pytest.mark.api
def test_profile_update_reuses_cached_insight(client, auth_headers, fake_insights):
    client.put("/users/me/profile", json=PROFILE, headers=auth_headers)
    client.put("/users/me/profile", json={**PROFILE, "experience": 6}, headers=auth_headers)

    assert fake_insights == ["tech-software-development"]


@pytest.mark.api
def test_profile_update_ai_failure_leaves_user_unchanged(client, auth_headers, monkeypatch, mongo):
    async def broken(industry):
        raise ExternalServiceError("ai", "AI request failed")

    monkeypatch.setattr(ai, "generate_industry_insights", broken)

    response = client.put("/users/me/profile", json=PROFILE, headers=auth_headers)

    assert response.status_code == 502
    assert mongo["users"].find_one({"external_id": "user_test_1"})["industry"] is None


@pytest.mark.api
@pytest.mark.parametrize(
    "patch",
    [{"industry": ""}, {"experience": 51}, {"experience": -1}, {"bio": "x" * 501}],
)
def test_profile_update_validation(client, auth_headers, fake_insights, patch):
    response = client.put("/users/me/profile", json={**PROFILE, **patch}, headers=auth_headers)

    assert response.status_code == 422
    assert response.json()["error"] == "validation_error"
    assert fake_insights == []
