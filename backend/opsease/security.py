"""Bearer token verification and tenant identity resolution.

Users sign in through an external identity provider which issues HS256 JWTs
signed with ``AUTH_JWT_SECRET``. The ``sub`` claim carries the user id that
scopes every query in the API.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import json
import os
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

AUTH_JWT_SECRET_ENV = "AUTH_JWT_SECRET"
ACCESS_TOKEN_EXPIRE_MINUTES_ENV = "ACCESS_TOKEN_EXPIRE_MINUTES"

DEFAULT_TOKEN_EXPIRY_MINUTES = 30

bearer_scheme = HTTPBearer(auto_error=False)


class SecurityConfigurationError(RuntimeError):
    """Raised when mandatory security settings are missing or invalid."""


@dataclass
class UserIdentity:
    """The authenticated tenant on whose behalf a request runs."""

    user_id: str


def _read_env_var(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise SecurityConfigurationError(f"Environment variable '{name}' is required")
    return value


@lru_cache(maxsize=1)
def _load_jwt_key() -> bytes:
    raw_secret = _read_env_var(AUTH_JWT_SECRET_ENV)
    try:
        return base64.urlsafe_b64decode(raw_secret)
    except (ValueError, binascii.Error):
        return raw_secret.encode("utf-8")


def reset_security_cache() -> None:
    """Forget the cached signing key, e.g. after rotating the secret."""

    _load_jwt_key.cache_clear()


def _b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64url_decode(data: str) -> bytes:
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _unauthorized(detail: str = "Invalid token") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _encode_jwt(payload: dict[str, Any], key: bytes) -> str:
    header = {"typ": "JWT", "alg": "HS256"}
    header_b64 = _b64url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_b64 = _b64url_encode(json.dumps(payload, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("ascii")
    signature = hmac.new(key, signing_input, hashlib.sha256).digest()
    return f"{header_b64}.{payload_b64}.{_b64url_encode(signature)}"


def _decode_jwt(token: str, key: bytes) -> dict[str, Any]:
    try:
        header_b64, payload_b64, signature_b64 = token.split(".")
        signature = _b64url_decode(signature_b64)
    except (ValueError, binascii.Error) as exc:
        raise _unauthorized() from exc

    try:
        signing_input = f"{header_b64}.{payload_b64}".encode("ascii")
    except UnicodeEncodeError as exc:
        raise _unauthorized() from exc
    expected_signature = hmac.new(key, signing_input, hashlib.sha256).digest()
    if not hmac.compare_digest(signature, expected_signature):
        raise _unauthorized()

    try:
        payload_data = json.loads(_b64url_decode(payload_b64).decode("utf-8"))
    except (ValueError, binascii.Error, UnicodeDecodeError) as exc:
        raise _unauthorized() from exc
    if not isinstance(payload_data, dict) or payload_data.get("exp") is None:
        raise _unauthorized()
    try:
        expires_at = datetime.fromtimestamp(int(payload_data["exp"]), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError) as exc:
        raise _unauthorized() from exc
    if datetime.now(timezone.utc) >= expires_at:
        raise _unauthorized("Token expired")
    return payload_data


def _resolve_access_token_expiry() -> timedelta:
    raw = os.getenv(ACCESS_TOKEN_EXPIRE_MINUTES_ENV)
    if not raw:
        return timedelta(minutes=DEFAULT_TOKEN_EXPIRY_MINUTES)
    try:
        minutes = int(raw)
    except ValueError as exc:
        raise SecurityConfigurationError("ACCESS_TOKEN_EXPIRE_MINUTES must be an integer") from exc
    if minutes <= 0:
        raise SecurityConfigurationError("ACCESS_TOKEN_EXPIRE_MINUTES must be positive")
    return timedelta(minutes=minutes)


def create_access_token(user_id: str, *, expires_in: Optional[timedelta] = None) -> str:
    """Issue a token for ``user_id``.

    Production tokens come from the identity provider; this helper exists for
    provisioning scripts and tests that share the same secret.
    """

    if not user_id:
        raise ValueError("user_id must not be empty")
    expiry = datetime.now(timezone.utc) + (expires_in or _resolve_access_token_expiry())
    payload: dict[str, Any] = {"sub": user_id, "exp": int(expiry.timestamp())}
    return _encode_jwt(payload, _load_jwt_key())


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> UserIdentity:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise _unauthorized("Not authenticated")
    payload = _decode_jwt(credentials.credentials, _load_jwt_key())
    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id.strip():
        raise _unauthorized()
    return UserIdentity(user_id=user_id.strip())


def require_user(identity: UserIdentity = Depends(get_current_user)) -> UserIdentity:
    """FastAPI dependency that ensures the request carries a valid user token."""

    return identity
