import pytest
import requests

from member_registry_api.app.core.exceptions import (
    VerificationNotConfiguredError,
    VerificationUnavailableError,
)
from member_registry_api.app.services.recaptcha_service import RecaptchaVerifier


class StubResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class StubSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def post(self, url, data=None, timeout=None):
        self.requests.append({"url": url, "data": data, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


def make_verifier(session, secret="server-secret"):
    return RecaptchaVerifier(secret, verify_url="https://verify.test", timeout=3.0, session=session)


def test_posts_secret_and_token_as_form_data():
    session = StubSession(StubResponse({"success": True, "score": 0.9}))

    assert make_verifier(session).verify("client-token") is True
    assert session.requests == [
        {
            "url": "https://verify.test",
            "data": {"secret": "server-secret", "response": "client-token"},
            "timeout": 3.0,
        }
    ]


@pytest.mark.parametrize(
    "payload",
    [
        {"success": True, "score": 0.3},
        {"success": False, "score": 0.9},
        {"success": True},
        {"success": "true", "score": 0.9},
    ],
)
def test_rejects_low_score_or_unsuccessful_answers(payload):
    assert make_verifier(StubSession(StubResponse(payload))).verify("client-token") is False


def test_score_at_threshold_passes():
    session = StubSession(StubResponse({"success": True, "score": 0.5}))

    assert make_verifier(session).verify("client-token") is True


def test_missing_secret_is_a_configuration_error():
    session = StubSession(StubResponse({"success": True, "score": 0.9}))

    with pytest.raises(VerificationNotConfiguredError):
        make_verifier(session, secret="").verify("client-token")
    assert session.requests == []


@pytest.mark.parametrize(
    "session",
    [
        StubSession(error=requests.ConnectionError("down")),
        StubSession(StubResponse({}, status_code=503)),
        StubSession(StubResponse(ValueError("not json"))),
        StubSession(StubResponse(["unexpected"])),
    ],
)
def test_unreachable_or_broken_endpoint_is_unavailable(session):
    with pytest.raises(VerificationUnavailableError):
        make_verifier(session).verify("client-token")
