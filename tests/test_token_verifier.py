import json
import time

import jwt
import pytest
import requests
from cryptography.hazmat.primitives.asymmetric import rsa

from easytrip.core import security
from easytrip.core.security import FirebaseTokenVerifier, InvalidTokenError

PROJECT = "easytrip-test"


@pytest.fixture(scope="module")
def signing_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


class FakeResponse:
    def __init__(self, payload):
        self.payload = payload

    def raise_for_status(self):
        pass

    def json(self):
        return self.payload


@pytest.fixture
def jwks(signing_key, monkeypatch):
    jwk = json.loads(jwt.algorithms.RSAAlgorithm.to_jwk(signing_key.public_key()))
    jwk.update({"kid": "k1", "alg": "RS256", "use": "sig"})
    fetches = []

    def fake_get(url, timeout):
        fetches.append(url)
        return FakeResponse({"keys": [jwk]})

    monkeypatch.setattr(security.requests, "get", fake_get)
    return fetches


def _token(signing_key, kid="k1", **overrides):
    now = int(time.time())
    claims = {
        "sub": "uid-1",
        "email": "a@example.com",
        "aud": PROJECT,
        "iss": f"https://securetoken.google.com/{PROJECT}",
        "iat": now,
        "exp": now + 3600,
    }
    claims.update(overrides)
    return jwt.encode(claims, signing_key, algorithm="RS256", headers={"kid": kid})


def _verifier():
    return FirebaseTokenVerifier(PROJECT, "https://keys.example.com/jwks", ttl_seconds=3600)


def test_valid_token_returns_claims(signing_key, jwks):
    claims = _verifier().verify(_token(signing_key))
    assert claims["sub"] == "uid-1"
    assert claims["email"] == "a@example.com"


def test_keys_are_cached_between_verifications(signing_key, jwks):
    verifier = _verifier()
    verifier.verify(_token(signing_key))
    verifier.verify(_token(signing_key))
    assert len(jwks) == 1


@pytest.mark.parametrize("overrides", [
    {"aud": "other-project"},
    {"iss": "https://accounts.example.com"},
    {"exp": int(time.time()) - 10},
])
def test_wrong_claims_are_rejected(signing_key, jwks, overrides):
    with pytest.raises(InvalidTokenError):
        _verifier().verify(_token(signing_key, **overrides))


def test_unknown_key_id_is_rejected(signing_key, jwks):
    with pytest.raises(InvalidTokenError):
        _verifier().verify(_token(signing_key, kid="rotated-away"))


def test_garbage_token_is_rejected(jwks):
    with pytest.raises(InvalidTokenError):
        _verifier().verify("not-a-jwt")


def test_unreachable_key_endpoint_is_rejected(signing_key, monkeypatch):
    def offline(url, timeout):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(security.requests, "get", offline)
    with pytest.raises(InvalidTokenError):
        _verifier().verify(_token(signing_key))


def test_missing_project_id_is_rejected(signing_key, jwks):
    verifier = FirebaseTokenVerifier("", "https://keys.example.com/jwks")
    with pytest.raises(InvalidTokenError):
        verifier.verify(_token(signing_key))
