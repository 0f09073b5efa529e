from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.db import get_db, get_app_settings
from app.core.security import create_token
from app.schemas.auth import RegisterIn, TokenIn, TokenOut
from app.services import users as user_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/token", response_model=TokenOut, status_code=status.HTTP_200_OK)
def login(
    payload: TokenIn,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """{ username, password } => { token }"""
    user = user_service.authenticate(db, payload.username, payload.password)
    return {"token": create_token(user.model_dump(), settings)}


@router.post("/register", response_model=TokenOut, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterIn,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Public sign-up. Always creates a non-admin user."""
    user = user_service.register(db, {**payload.model_dump(), "is_admin": False}, settings)
    return {"token": create_token(user.model_dump(), settings)}
