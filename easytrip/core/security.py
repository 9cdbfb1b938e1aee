#!/usr/bin/env python3
"""Caller identification and admin checks for API routes.

Outside production the API trusts the X-User / X-User-Name headers (or the
configured dev user) and treats every caller as an admin. In production a
Firebase ID token is required in the Authorization header.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import jwt
import requests
from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from easytrip.accounts.service import create_account_service
from easytrip.core.config import settings
from easytrip.core.db import get_db

logger = logging.getLogger(__name__)

FIREBASE_ISSUER_PREFIX = "https://securetoken.google.com/"


class InvalidTokenError(Exception):
    pass


@dataclass(frozen=True)
class Caller:
    uid: str
    name: Optional[str] = None
    email: Optional[str] = None
    is_admin: bool = False


class FirebaseTokenVerifier:
    """Verify Firebase ID tokens against Google's published signing keys"""

    def __init__(self, project_id: str, jwks_url: str, ttl_seconds: int = 3600):
        self.project_id = project_id
        self.jwks_url = jwks_url
        self.ttl_seconds = ttl_seconds
        self._keys: Optional[jwt.PyJWKSet] = None
        self._fetched_at = 0.0
        self._lock = threading.Lock()

    def _signing_keys(self, force: bool = False) -> jwt.PyJWKSet:
        with self._lock:
            now = time.time()
            if force or self._keys is None or now - self._fetched_at > self.ttl_seconds:
                response = requests.get(self.jwks_url, timeout=10)
                response.raise_for_status()
                self._keys = jwt.PyJWKSet.from_dict(response.json())
                self._fetched_at = now
                logger.info(f"Fetched {len(self._keys.keys)} token signing keys")
            return self._keys

    def _key_for(self, kid: str):
        for refresh in (False, True):
            for key in self._signing_keys(force=refresh).keys:
                if key.key_id == kid:
                    return key
        return None

    def verify(self, token: str) -> Dict[str, Any]:
        """
        Decode and validate a token, returning its claims.

        Raises:
            InvalidTokenError: bad signature, wrong audience/issuer, expired,
                or signing keys unavailable
        """
        if not self.project_id:
            raise InvalidTokenError("FIREBASE_PROJECT_ID is not configured")
        try:
            kid = jwt.get_unverified_header(token).get("kid")
            key = self._key_for(kid) if kid else None
            if key is None:
                raise InvalidTokenError("Unknown signing key")
            claims = jwt.decode(
                token,
                key.key,
                algorithms=["RS256"],
                audience=self.project_id,
                issuer=f"{FIREBASE_ISSUER_PREFIX}{self.project_id}",
            )
        except jwt.PyJWTError as e:
            raise InvalidTokenError(str(e)) from e
        except requests.RequestException as e:
            logger.error(f"Could not fetch signing keys: {e}")
            raise InvalidTokenError("Signing keys unavailable") from e

        if not claims.get("sub"):
            raise InvalidTokenError("Token has no subject")
        return claims


_verifier: Optional[FirebaseTokenVerifier] = None


def get_token_verifier() -> FirebaseTokenVerifier:
    global _verifier
    if _verifier is None:
        _verifier = FirebaseTokenVerifier(
            project_id=settings.firebase_project_id,
            jwks_url=settings.firebase_jwks_url,
            ttl_seconds=settings.firebase_jwks_ttl_s,
        )
    return _verifier


def _bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing Authorization header")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(status_code=401, detail="Authorization header must be 'Bearer <token>'")
    return token.strip()


def get_current_caller(
    authorization: Optional[str] = Header(None),
    x_user: Optional[str] = Header(None),
    x_user_name: Optional[str] = Header(None),
    db: Session = Depends(get_db),
    verifier: FirebaseTokenVerifier = Depends(get_token_verifier),
) -> Caller:
    """Resolve the caller and mirror it into the users table"""
    accounts = create_account_service(db)

    if not settings.is_production:
        uid = (x_user or "").strip() or settings.dev_default_user_id
        name = (x_user_name or "").strip() or settings.dev_default_user_name
        user = accounts.ensure_user(uid, name=name)
        return Caller(uid=uid, name=user.name or name, email=user.email, is_admin=True)

    token = _bearer_token(authorization)
    try:
        claims = verifier.verify(token)
    except InvalidTokenError as e:
        logger.warning(f"Rejected token: {e}")
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    uid = claims["sub"]
    user = accounts.ensure_user(
        uid,
        email=claims.get("email"),
        name=claims.get("name"),
        photo_url=claims.get("picture"),
    )
    is_admin = uid in settings.admin_uids or bool(user.is_admin)
    return Caller(uid=uid, name=user.name or user.email, email=user.email, is_admin=is_admin)


def require_admin(caller: Caller = Depends(get_current_caller)) -> Caller:
    if not caller.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return caller
