"""Unit tests for settings parsing."""

import pytest
from pydantic import ValidationError

from careercoach.core.config import Settings


@pytest.mark.unit
def test_malformed_webhook_secret_rejected_at_load():
    with pytest.raises(ValidationError, match="WEBHOOK_SECRET"):
        Settings(WEBHOOK_SECRET="whsec_not base64!")


@pytest.mark.unit
@pytest.mark.parametrize("secret", ["", "plain-secret", "whsec_dGVzdC1rZXk="])
def test_webhook_secret_formats(secret):
    assert Settings(WEBHOOK_SECRET=secret).WEBHOOK_SECRET == secret


@pytest.mark.unit
@pytest.mark.parametrize(
    "value, expected",
    [("100/minute", (100, 60)), ("5/hour", (5, 3600)), ("10/s", (10, 1)), ("oops", (100, 60))],
)
def test_rate_limit_parsed(value, expected):
    assert Settings(RATE_LIMIT=value).rate_limit_parsed() == expected
