from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from famtime.core.config import settings

JWT_ISSUER = "famtime"
JWT_ALGORITHM = "HS256"
ID_TOKEN_TYPE = "id"
ID_TOKEN_LIFETIME = timedelta(hours=1)


class InvalidIdToken(Exception):
    """Raised when a bearer token is not a usable FamTime ID token."""


def create_id_token(*, user_id: str, expires_delta: timedelta | None = None) -> str:
    issued_at = datetime.now(UTC)
    claims: dict[str, Any] = {
        "iss": JWT_ISSUER,
        "sub": user_id,
        "type": ID_TOKEN_TYPE,
        "iat": issued_at,
        "exp": issued_at + (expires_delta or ID_TOKEN_LIFETIME),
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=JWT_ALGORITHM)


def verify_id_token(token: str) -> str:
    """Return the subject of a valid ID token."""
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[JWT_ALGORITHM],
            issuer=JWT_ISSUER,
            options={"require": ["exp", "iss", "sub"]},
        )
    except jwt.PyJWTError as exc:
        raise InvalidIdToken(str(exc)) from exc

    subject = claims.get("sub")
    if claims.get("type") != ID_TOKEN_TYPE or not isinstance(subject, str) or not subject:
        raise InvalidIdToken("Token is not an ID token")
    return subject
