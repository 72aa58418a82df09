"""Verification of access tokens issued by the external auth provider."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from jose import JWTError, jwt

from talent_connect.core.settings import settings
from talent_connect.db.time import utcnow


class InvalidTokenError(Exception):
    """Raised when a bearer token cannot be trusted."""


@dataclass(frozen=True)
class TokenClaims:
    """Identity claims extracted from a verified token."""

    subject: str
    email: str | None = None
    full_name: str | None = None


def decode_access_token(token: str) -> TokenClaims:
    """Verify a bearer token and return its identity claims.

    Args:
        token: Encoded JWT from the ``Authorization`` header or a query parameter

    Returns:
        Claims for the authenticated subject

    Raises:
        InvalidTokenError: If the signature, expiry, audience or subject is invalid
    """
    options = {"verify_aud": settings.jwt_audience is not None}
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options=options,
        )
    except JWTError as err:
        raise InvalidTokenError("Could not validate credentials") from err

    subject = payload.get("sub")
    if not subject:
        raise InvalidTokenError("Token has no subject")

    metadata: dict[str, Any] = payload.get("user_metadata") or {}
    return TokenClaims(
        subject=str(subject),
        email=payload.get("email"),
        full_name=metadata.get("full_name"),
    )


def create_access_token(
    subject: str,
    *,
    email: str | None = None,
    full_name: str | None = None,
    expires_minutes: int = 60,
) -> str:
    """Mint a token in the provider's format.

    Used by local tooling and tests; production tokens come from the provider.
    """
    expire = utcnow() + timedelta(minutes=expires_minutes)
    payload: dict[str, Any] = {"sub": subject, "exp": expire}
    if email is not None:
        payload["email"] = email
    if full_name is not None:
        payload["user_metadata"] = {"full_name": full_name}
    if settings.jwt_audience is not None:
        payload["aud"] = settings.jwt_audience
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)
