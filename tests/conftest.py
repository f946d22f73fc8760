"""Shared fixtures: settings for tests, mongomock database, authenticated client."""

import base64
import os
from datetime import datetime, timedelta, timezone

# Settings are read at import time, so the environment must be ready first
os.environ["RATE_LIMIT"] = "100000/minute"
os.environ["JWT_SECRET"] = "test-jwt-secret"
os.environ["JWT_ALGORITHM"] = "HS256"
os.environ["WEBHOOK_SECRET"] = "whsec_" + base64.b64encode(b"test-webhook-key").decode()
os.environ["AI_API_KEY"] = "test-ai-key"
os.environ["PROVISIONING_ATTEMPTS"] = "3"
os.environ["PROVISIONING_BASE_DELAY"] = "0"

import mongomock  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from jose import jwt  # noqa: E402

from careercoach.core import database  # noqa: E402
from careercoach.core.config import settings  # noqa: E402
from careercoach.main import app  # noqa: E402
from careercoach.schemas.insight import IndustryInsightData  # noqa: E402
from careercoach.services import ai  # noqa: E402


def make_token(external_id: str, secret: str | None = None, expires_in: int = 3600) -> str:
    """Session token the way the identity provider would issue it."""
    payload = {
        "sub": external_id,
        "exp": datetime.now(timezone.utc) + timedelta(seconds=expires_in),
    }
    return jwt.encode(payload, secret or settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def bearer(external_id: str) -> dict:
    return {"Authorization": f"Bearer {make_token(external_id)}"}


@pytest.fixture
def token_factory():
    return make_token


@pytest.fixture
def mongo(monkeypatch):
    """In-memory MongoDB in place of the real client."""
    client = mongomock.MongoClient()
    monkeypatch.setattr(database, "_client", client)
    database.ensure_indexes()
    return client[settings.MONGO_DB_NAME]


@pytest.fixture
def client(mongo):
    # Without the context manager the lifespan (real Mongo connect) does not run
    return TestClient(app)


@pytest.fixture
def user(mongo):
    now = datetime.now(timezone.utc)
    doc = {
        "external_id": "user_test_1",
        "email": "jane@example.com",
        "name": "Jane Doe",
        "image_url": None,
        "industry": None,
        "bio": None,
        "experience": None,
        "skills": [],
        "created_at": now,
        "updated_at": now,
    }
    doc["_id"] = mongo["users"].insert_one(doc).inserted_id
    return doc


@pytest.fixture
def auth_headers(user):
    return bearer(user["external_id"])


@pytest.fixture
def experience_form():
    return {
        "title": "Engineer",
        "organization": "Acme",
        "start_date": "2021-06",
        "current": True,
        "description": "Built X\nScaled Y",
    }


@pytest.fixture
def insight_data():
    return {
        "salary_ranges": [
            {"role": "Backend Engineer", "min": 90000, "max": 160000, "median": 120000, "location": "US"},
        ],
        "growth_rate": 8.5,
        "demand_level": "High",
        "top_skills": ["Python", "SQL"],
        "market_outlook": "Positive",
        "key_trends": ["AI tooling"],
        "recommended_skills": ["Kubernetes"],
    }


@pytest.fixture
def fake_insights(monkeypatch, insight_data):
    """AI insight generation replaced with a canned answer. Returns the list of requested industries."""
    calls = []

    async def generate(industry):
        calls.append(industry)
        return IndustryInsightData(**insight_data)

    monkeypatch.setattr(ai, "generate_industry_insights", generate)
    return calls
