"""
Password hashing and access tokens.

Tokens are stateless HS256 JWTs carrying the caller's id (`sub`), email and
role; signing parameters come from `Settings`.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any

import bcrypt
import jwt

from core.config import Settings, get_settings

ACCESS_TOKEN_TYPE = "access"


class AuthSecurityError(RuntimeError):
    pass


@dataclass(frozen=True)
class AccessClaims:
    user_id: int
    email: str
    role: str | None = None

    def as_current_user(self) -> dict:
        return {"id": self.user_id, "email": self.email, "role": self.role}


def now_epoch_s() -> int:
    return int(time.time())


def _utf8(value: str | None) -> bytes:
    return (value or "").encode("utf-8")


def hash_password(plain_password: str) -> str:
    password = _utf8(plain_password)
    if not password:
        raise AuthSecurityError("Password is empty.")
    return bcrypt.hashpw(password, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    password, hashed = _utf8(plain_password), _utf8(password_hash)
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError:
        # Stored value is not a bcrypt hash.
        return False


def build_access_token(
    *,
    user_id: int,
    email: str,
    role: str | None = None,
    settings: Settings | None = None,
) -> str:
    settings = settings or get_settings()
    issued_at = now_epoch_s()
    claims = {
        "sub": str(user_id),
        "email": email,
        "role": role,
        "type": ACCESS_TOKEN_TYPE,
        "iat": issued_at,
        "exp": issued_at + settings.access_token_expire_minutes * 60,
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, *, settings: Settings | None = None) -> dict[str, Any]:
    """
    Verify signature, expiry and token type; return the raw claims.
    """
    settings = settings or get_settings()
    raw = (token or "").strip()
    if not raw:
        raise AuthSecurityError("Access token is empty.")

    try:
        payload = jwt.decode(raw, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError as exc:
        raise AuthSecurityError("Access token has expired.") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthSecurityError("Invalid access token.") from exc

    if str(payload.get("type") or "").strip().lower() != ACCESS_TOKEN_TYPE:
        raise AuthSecurityError("Token is not an access token.")
    return payload


def access_claims(token: str, *, settings: Settings | None = None) -> AccessClaims:
    payload = decode_access_token(token, settings=settings)

    subject = str(payload.get("sub") or "").strip()
    if not subject.isdigit():
        raise AuthSecurityError("Invalid access token subject.")

    return AccessClaims(
        user_id=int(subject),
        email=str(payload.get("email") or ""),
        role=payload.get("role"),
    )
