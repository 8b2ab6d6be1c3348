"""
Security helpers for password hashing and token authentication.

Access tokens are compact JSON Web Tokens signed with HMAC-SHA256 and
base64url encoded.  They carry the user id (``sub``), the user's role
and an expiration timestamp (``exp``); there is no revocation list, so
expiry is the only bound on a token's lifetime.  Passwords are hashed
with PBKDF2-HMAC-SHA256 using a random salt and a fixed iteration
count.

The FastAPI dependencies at the bottom of the module turn a bearer
token into a typed ``Principal`` which the routers hand to the
services.
"""

import base64
import hashlib
import hmac
import json
import os
import time
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..models import Principal, Role
from .config import Settings

PASSWORD_HASH_ITERATIONS = 100_000
_TOKEN_HEADER = {"alg": "HS256", "typ": "JWT"}


def _b64_url_encode(data: bytes) -> str:
    """Base64-url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode base64-url encoded string, adding padding if necessary."""
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: bytes, secret: str) -> bytes:
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


def create_access_token(
    claims: Dict[str, Any],
    secret: str,
    expires_in: int,
    now: Optional[int] = None,
) -> str:
    """Create a signed token with the given claims.

    The claims are extended with ``exp`` set to ``now + expires_in``
    (seconds since the epoch).  The token has the form
    ``header.payload.signature``, each part base64url encoded.
    Clients send it back as ``Authorization: Bearer <token>``.
    """
    issued_at = int(time.time()) if now is None else now
    payload = dict(claims)
    payload["exp"] = issued_at + expires_in
    header_b64 = _b64_url_encode(json.dumps(_TOKEN_HEADER, separators=(",", ":")).encode("utf-8"))
    payload_b64 = _b64_url_encode(json.dumps(payload, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    signature_b64 = _b64_url_encode(_sign(signing_input, secret))
    return f"{header_b64}.{payload_b64}.{signature_b64}"


def decode_access_token(token: str, secret: str, now: Optional[int] = None) -> Optional[Dict[str, Any]]:
    """Verify a token and return its claims.

    Returns ``None`` when the token is malformed, signed with another
    algorithm or key, or expired.
    """
    parts = token.split(".")
    if len(parts) != 3:
        return None
    header_b64, payload_b64, signature_b64 = parts
    try:
        header = json.loads(_b64_url_decode(header_b64).decode("utf-8"))
        if not isinstance(header, dict) or header.get("alg") != "HS256":
            return None
        expected_sig = _sign(f"{header_b64}.{payload_b64}".encode("utf-8"), secret)
        if not hmac.compare_digest(expected_sig, _b64_url_decode(signature_b64)):
            return None
        claims = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
    except ValueError:
        # Covers bad base64, bad UTF-8 and bad JSON.
        return None
    if not isinstance(claims, dict):
        return None
    exp = claims.get("exp")
    current = int(time.time()) if now is None else now
    if not isinstance(exp, int) or exp < current:
        return None
    return claims


def principal_from_claims(claims: Dict[str, Any]) -> Optional[Principal]:
    """Build a ``Principal`` from verified claims, or ``None`` if they are malformed."""
    subject = claims.get("sub")
    if isinstance(subject, bool) or not isinstance(subject, int):
        return None
    try:
        role = Role(claims.get("role"))
    except ValueError:
        return None
    return Principal(id=subject, role=role)


def hash_password(password: str) -> str:
    """Hash a password using PBKDF2-HMAC with SHA-256.

    A 16-byte random salt is generated for each password.  The result
    is ``"<salt hex>$<hash hex>"``.
    """
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PASSWORD_HASH_ITERATIONS)
    return f"{salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a plain password against a stored ``salt$hash`` string.

    Malformed stored values never verify.
    """
    try:
        salt_hex, hash_hex = hashed_password.split("$", 1)
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except ValueError:
        return False
    dk = hashlib.pbkdf2_hmac("sha256", plain_password.encode("utf-8"), salt, PASSWORD_HASH_ITERATIONS)
    return hmac.compare_digest(dk, stored_hash)


# ---------------------------------------------------------------------------
# FastAPI dependencies
# ---------------------------------------------------------------------------

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_principal(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Principal:
    """Resolve the bearer token of the request into a ``Principal``.

    Raises HTTP 401 when the header is missing or the token does not
    verify against the application's signing secret.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    settings: Settings = request.app.state.settings
    claims = decode_access_token(credentials.credentials, settings.secret_key)
    principal = principal_from_claims(claims) if claims else None
    if principal is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return principal


def require_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    """Dependency that only lets administrators through."""
    if not principal.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Insufficient permissions",
        )
    return principal
