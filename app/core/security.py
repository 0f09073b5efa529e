from datetime import datetime, timedelta, timezone
from typing import Mapping, Optional

from jose import jwt, JWTError
from passlib.hash import argon2

from app.core.config import Settings, get_settings
from app.core.errors import UnauthorizedError


def hash_password(plain: str, settings: Optional[Settings] = None) -> str:
    settings = settings or get_settings()
    return argon2.using(
        time_cost=settings.ARGON2_TIME_COST,
        memory_cost=settings.ARGON2_MEMORY_COST,
        parallelism=settings.ARGON2_PARALLELISM,
    ).hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return argon2.verify(plain, hashed)
    except ValueError:
        # not an argon2 hash
        return False


def create_token(user: Mapping, settings: Optional[Settings] = None) -> str:
    """Signed token carrying ``username`` and ``isAdmin``.

    ``exp`` is only set when ACCESS_TOKEN_EXPIRE_MINUTES is configured.
    """
    settings = settings or get_settings()
    now = datetime.now(timezone.utc)
    payload = {
        "username": user["username"],
        "isAdmin": bool(user.get("is_admin", user.get("isAdmin", False))),
        "iat": now,
    }
    if settings.ACCESS_TOKEN_EXPIRE_MINUTES:
        payload["exp"] = now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALG)


def decode_token(token: str, settings: Optional[Settings] = None) -> dict:
    settings = settings or get_settings()
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALG])
    except JWTError:
        raise UnauthorizedError("Invalid token")
    if not payload.get("username"):
        raise UnauthorizedError("Invalid token")
    return payload
