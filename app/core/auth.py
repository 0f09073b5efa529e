from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.core.config import Settings
from app.core.db import get_app_settings
from app.core.errors import AppError, UnauthorizedError
from app.core.security import decode_token
from app.utils.logger import get_logger

logger = get_logger(__name__)

bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    """Identity taken from a verified token (no db lookup)."""

    username: str
    is_admin: bool = False


def get_current_user_optional(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    settings: Settings = Depends(get_app_settings),
) -> Optional[CurrentUser]:
    """
    Authorization header missing, not Bearer, or carrying a bad token
    -> anonymous (None). The guards below decide whether that is allowed.
    """
    if creds is None or (creds.scheme or "").lower() != "bearer":
        return None

    try:
        payload = decode_token(creds.credentials, settings)
    except AppError:
        logger.debug("ignoring invalid bearer token")
        return None

    return CurrentUser(
        username=payload["username"],
        is_admin=bool(payload.get("isAdmin", False)),
    )


def ensure_logged_in(
    current: Optional[CurrentUser] = Depends(get_current_user_optional),
) -> CurrentUser:
    if current is None:
        raise UnauthorizedError()
    return current


def ensure_admin(
    current: Optional[CurrentUser] = Depends(get_current_user_optional),
) -> CurrentUser:
    if current is None or not current.is_admin:
        raise UnauthorizedError()
    return current


def ensure_correct_user(
    username: str,
    current: Optional[CurrentUser] = Depends(get_current_user_optional),
) -> CurrentUser:
    """Token subject must be the ``{username}`` in the path."""
    if current is None or current.username != username:
        raise UnauthorizedError()
    return current


def ensure_correct_user_or_admin(
    username: str,
    current: Optional[CurrentUser] = Depends(get_current_user_optional),
) -> CurrentUser:
    """Token subject must be the ``{username}`` in the path, or an admin."""
    if current is None or not (current.is_admin or current.username == username):
        raise UnauthorizedError()
    return current
