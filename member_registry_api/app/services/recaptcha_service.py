"""
Human verification through Google reCAPTCHA v3.

The login flow consults ``RecaptchaVerifier.verify`` before it looks at
the submitted credentials.  The client token and the server secret are
posted to the siteverify endpoint; the token passes only when the
remote side reports success with a score at or above the configured
threshold.
"""

from __future__ import annotations

import logging
from typing import Optional

import requests

from ..core.config import Settings
from ..core.exceptions import VerificationNotConfiguredError, VerificationUnavailableError

logger = logging.getLogger(__name__)

DEFAULT_VERIFY_URL = "https://www.google.com/recaptcha/api/siteverify"


class RecaptchaVerifier:
    """Client for the reCAPTCHA siteverify endpoint."""

    def __init__(
        self,
        secret_key: str,
        verify_url: str = DEFAULT_VERIFY_URL,
        score_threshold: float = 0.5,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.secret_key = secret_key
        self.verify_url = verify_url
        self.score_threshold = score_threshold
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: Settings) -> "RecaptchaVerifier":
        return cls(
            secret_key=settings.recaptcha_secret_key,
            verify_url=settings.recaptcha_verify_url,
            score_threshold=settings.recaptcha_score_threshold,
            timeout=settings.recaptcha_timeout,
        )

    def verify(self, token: str) -> bool:
        """Return whether ``token`` proves a human client.

        Raises ``VerificationNotConfiguredError`` when no secret is
        configured and ``VerificationUnavailableError`` when the remote
        endpoint cannot be reached or answers with something other than
        a JSON object.
        """
        if not self.secret_key:
            logger.warning("reCAPTCHA secret key is not configured; verification will fail")
            raise VerificationNotConfiguredError()

        try:
            response = self.session.post(
                self.verify_url,
                data={"secret": self.secret_key, "response": token},
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.error("reCAPTCHA verification request failed: %s", exc)
            raise VerificationUnavailableError() from exc

        if not isinstance(payload, dict):
            logger.error("Unexpected reCAPTCHA response: %r", payload)
            raise VerificationUnavailableError()

        success = payload.get("success") is True
        score = payload.get("score")
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            score = 0.0
        passed = success and score >= self.score_threshold
        if not passed:
            logger.info(
                "reCAPTCHA rejected token (success=%s, score=%s, errors=%s)",
                success,
                score,
                payload.get("error-codes"),
            )
        return passed
