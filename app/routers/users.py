from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from app.core.auth import (
    CurrentUser,
    ensure_admin,
    ensure_correct_user,
    ensure_correct_user_or_admin,
    ensure_logged_in,
)
from app.core.config import Settings
from app.core.db import get_db, get_app_settings
from app.core.security import create_token
from app.schemas.user import (
    EmailResponse,
    UserDetailResponse,
    UserListResponse,
    UserNewIn,
    UserResponse,
    UserTokenResponse,
    UserUpdateIn,
)
from app.services import users as user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserTokenResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserNewIn,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    _admin: CurrentUser = Depends(ensure_admin),
):
    """
    Admin-only add user (not the sign-up endpoint, see /auth/register).
    The new user may be an admin. Returns the user and a token for them.
    """
    user = user_service.register(db, payload.model_dump(), settings)
    return {"user": user, "token": create_token(user.model_dump(), settings)}


@router.get("", response_model=UserListResponse)
def list_users(
    db: Session = Depends(get_db),
    _admin: CurrentUser = Depends(ensure_admin),
):
    return {"users": user_service.find_all(db)}


@router.get("/{username}", response_model=UserDetailResponse)
def get_user(
    username: str,
    db: Session = Depends(get_db),
    _me: CurrentUser = Depends(ensure_correct_user_or_admin),
):
    return {"user": user_service.get(db, username)}


@router.patch("/{username}", response_model=UserResponse)
def update_user(
    username: str,
    payload: UserUpdateIn,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    _me: CurrentUser = Depends(ensure_correct_user_or_admin),
):
    """Data can include { firstName, lastName, password, email }."""
    data = payload.model_dump(exclude_unset=True, exclude_none=True)
    return {"user": user_service.update(db, username, data, settings)}


@router.delete("/{username}")
def delete_user(
    username: str,
    db: Session = Depends(get_db),
    _me: CurrentUser = Depends(ensure_correct_user_or_admin),
):
    user_service.remove(db, username)
    return {"deleted": username}


@router.get("/{username}/email", response_model=EmailResponse)
def get_user_email(
    username: str,
    db: Session = Depends(get_db),
    _me: CurrentUser = Depends(ensure_logged_in),
):
    return {"email": user_service.get_email(db, username)}


# ---------- likes / invites (only the user themself) ----------
@router.post("/{username}/like/{post_id}")
def like_post(
    username: str,
    post_id: int = Path(...),
    db: Session = Depends(get_db),
    _me: CurrentUser = Depends(ensure_correct_user),
):
    user_service.like_post(db, username, post_id)
    return {"liked": post_id}


@router.delete("/{username}/like/{post_id}")
def unlike_post(
    username: str,
    post_id: int = Path(...),
    db: Session = Depends(get_db),
    _me: CurrentUser = Depends(ensure_correct_user),
):
    user_service.unlike_post(db, username, post_id)
    return {"unliked": post_id}


@router.post("/{username}/invite/{post_id}")
def invite_post(
    username: str,
    post_id: int = Path(...),
    db: Session = Depends(get_db),
    _me: CurrentUser = Depends(ensure_correct_user),
):
    user_service.invite_post(db, username, post_id)
    return {"invite": post_id}


@router.delete("/{username}/invite/{post_id}")
def uninvite_post(
    username: str,
    post_id: int = Path(...),
    db: Session = Depends(get_db),
    _me: CurrentUser = Depends(ensure_correct_user),
):
    user_service.uninvite_post(db, username, post_id)
    return {"uninvite": post_id}
