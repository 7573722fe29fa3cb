from __future__ import annotations

from datetime import timedelta

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from backend.opsease.security import (
    SecurityConfigurationError,
    _decode_jwt,
    _encode_jwt,
    _load_jwt_key,
    create_access_token,
    reset_security_cache,
)


def test_missing_token_is_rejected(anonymous_client: TestClient):
    response = anonymous_client.get("/api/invoices")

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


def test_tampered_token_is_rejected(anonymous_client: TestClient):
    token = create_access_token("user-1")
    header, payload, signature = token.split(".")
    forged = f"{header}.{payload}.{signature[::-1]}"

    response = anonymous_client.get(
        "/api/customers", headers={"Authorization": f"Bearer {forged}"}
    )

    assert response.status_code == 401


def test_expired_token_is_rejected(anonymous_client: TestClient):
    token = create_access_token("user-1", expires_in=timedelta(seconds=-5))

    response = anonymous_client.get("/api/orders", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Token expired"


def test_malformed_token_is_rejected(anonymous_client: TestClient):
    response = anonymous_client.get(
        "/api/ledger", headers={"Authorization": "Bearer not-a-jwt"}
    )

    assert response.status_code == 401


def test_non_ascii_token_segments_are_unauthorized():
    with pytest.raises(HTTPException) as excinfo:
        _decode_jwt("h\u00e9ader.payload.c2ln", _load_jwt_key())

    assert excinfo.value.status_code == 401


@pytest.mark.parametrize("exp", ["soon", [1], 10**30])
def test_signed_token_with_unusable_expiry_is_rejected(anonymous_client: TestClient, exp):
    token = _encode_jwt({"sub": "user-1", "exp": exp}, _load_jwt_key())

    response = anonymous_client.get("/api/ledger", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid token"


def test_valid_token_is_accepted(anonymous_client: TestClient):
    token = create_access_token("user-1")

    response = anonymous_client.get("/api/ledger", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200


def test_missing_secret_is_a_configuration_error(monkeypatch):
    monkeypatch.delenv("AUTH_JWT_SECRET")
    reset_security_cache()
    try:
        with pytest.raises(SecurityConfigurationError):
            create_access_token("user-1")
    finally:
        monkeypatch.undo()
        reset_security_cache()


def test_invalid_expiry_setting_is_a_configuration_error(monkeypatch):
    monkeypatch.setenv("ACCESS_TOKEN_EXPIRE_MINUTES", "soon")

    with pytest.raises(SecurityConfigurationError):
        create_access_token("user-1")
