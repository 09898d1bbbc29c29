"""
Auth dependencies for protected FastAPI routes.

The token is verified locally; the caller's id, email and role come from the
token claims, no database round-trip.
"""

from __future__ import annotations

from fastapi import Depends, Header, HTTPException, status

from . import security


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def _extract_bearer_token(authorization: str | None) -> str:
    raw = (authorization or "").strip()
    if not raw:
        raise _unauthorized("Missing Authorization header.")

    scheme, _, token = raw.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise _unauthorized("Authorization must be: Bearer <token>.")
    return token


async def get_bearer_token(
    authorization: str | None = Header(default=None),
    accesstoken: str | None = Header(default=None),
) -> str:
    # Older clients send the raw token in an `accesstoken` header.
    if not authorization and accesstoken:
        return accesstoken.strip()
    return _extract_bearer_token(authorization)


async def get_current_user(access_token: str = Depends(get_bearer_token)) -> dict:
    try:
        claims = security.access_claims(access_token)
    except security.AuthSecurityError as exc:
        raise _unauthorized(str(exc)) from exc
    return claims.as_current_user()

