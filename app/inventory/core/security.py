from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.inventory.core.config import settings
from app.inventory.core.error_catalog import AppError, ErrorCatalog
from app.inventory.core.principal import Principal, Role

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class SigningKeyNotConfigured(RuntimeError):
    """Raised when tokens would have to be signed without a key."""


@dataclass(frozen=True)
class IssuedToken:
    access_token: str
    principal: Principal
    issued_at: datetime
    expires_at: datetime


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def ensure_signing_key() -> str:
    if not settings.SECRET_KEY:
        raise SigningKeyNotConfigured("SECRET_KEY is not configured; refusing to issue tokens")
    return settings.SECRET_KEY


def _as_utc(value: datetime | None) -> datetime:
    if value is None:
        return datetime.now(timezone.utc)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _timestamp(value: datetime) -> int:
    return calendar.timegm(value.utctimetuple())


def principal_for_user(user) -> Principal:
    role = Role.parse(user.role)
    return Principal(
        role=role,
        tenant_id=None if role is Role.SYSTEM_ADMIN else user.store_id,
        subject_id=str(user.id),
        display_name=user.username,
    )


def issue_access_token(user, now: datetime | None = None, expires_delta: timedelta | None = None) -> IssuedToken:
    key = ensure_signing_key()
    principal = principal_for_user(user)
    issued_at = _as_utc(now)
    expires_at = issued_at + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))

    to_encode: dict[str, Any] = principal.to_claims()
    to_encode.update({"iat": _timestamp(issued_at), "exp": _timestamp(expires_at)})
    if settings.JWT_ISSUER:
        to_encode["iss"] = settings.JWT_ISSUER
    if settings.JWT_AUDIENCE:
        to_encode["aud"] = settings.JWT_AUDIENCE

    token = jwt.encode(to_encode, key, algorithm=settings.ALGORITHM)
    return IssuedToken(access_token=token, principal=principal, issued_at=issued_at, expires_at=expires_at)


def decode_token(token: str) -> dict[str, Any]:
    """Check signature, issuer and audience. Expiry is checked by the caller."""
    return jwt.decode(
        token,
        ensure_signing_key(),
        algorithms=[settings.ALGORITHM],
        audience=settings.JWT_AUDIENCE,
        issuer=settings.JWT_ISSUER,
        options={"verify_exp": False},
    )


def verify_access_token(token: str, now: datetime | None = None) -> Principal:
    try:
        claims = decode_token(token)
    except JWTError as exc:
        raise AppError(ErrorCatalog.INVALID_TOKEN) from exc

    expires = claims.get("exp")
    if not isinstance(expires, int) or isinstance(expires, bool):
        raise AppError(ErrorCatalog.INVALID_TOKEN, details={"message": "Missing expiry claim"})
    if _timestamp(_as_utc(now)) > expires:
        raise AppError(ErrorCatalog.TOKEN_EXPIRED)

    return Principal.from_claims(claims)
