"""JWT session tokens and the FastAPI dependencies that guard routes.

Tokens are HS256-signed and carry the user id (``sub``), username and role.
They travel in an httpOnly cookie; a ``Bearer`` Authorization header is
accepted as well for non-browser clients.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt
import structlog
from fastapi import Depends, HTTPException, Request, Response

from shared.settings import get_settings

logger = structlog.get_logger(__name__)

ADMIN_ROLE = "admin"


@dataclass(frozen=True)
class TokenClaims:
    user_id: str
    username: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


class InvalidToken(Exception):
    pass


def issue_token(user_id: str, username: str, role: str, now: datetime | None = None) -> str:
    settings = get_settings()
    issued_at = now or datetime.now(UTC)
    payload = {
        "sub": str(user_id),
        "username": username,
        "role": role,
        "iat": issued_at,
        "exp": issued_at + timedelta(days=settings.jwt_ttl_days),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> TokenClaims:
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError as exc:
        raise InvalidToken("Token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise InvalidToken("Invalid token") from exc

    if "sub" not in payload:
        raise InvalidToken("Invalid token")

    return TokenClaims(
        user_id=payload["sub"],
        username=payload.get("username", ""),
        role=payload.get("role", "user"),
    )


def set_auth_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        key=settings.jwt_cookie_name,
        value=token,
        max_age=settings.jwt_ttl_seconds,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="none" if settings.cookie_secure else "lax",
    )


def clear_auth_cookie(response: Response) -> None:
    response.delete_cookie(key=get_settings().jwt_cookie_name)


def token_from_request(request: Request) -> str | None:
    token = request.cookies.get(get_settings().jwt_cookie_name)
    if token:
        return token

    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        return header[7:].strip() or None
    return None


def current_claims(request: Request) -> TokenClaims:
    """Resolve the caller's claims or answer 401."""
    token = token_from_request(request)
    if not token:
        raise HTTPException(status_code=401, detail="Unauthorized")

    try:
        return decode_token(token)
    except InvalidToken as exc:
        logger.info("auth.token_rejected", reason=str(exc))
        raise HTTPException(status_code=401, detail=str(exc)) from exc


def require_admin(claims: TokenClaims = Depends(current_claims)) -> TokenClaims:
    if not claims.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return claims
