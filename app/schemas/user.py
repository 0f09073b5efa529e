# app/schemas/user.py
from typing import List, Optional

from pydantic import EmailStr, Field

from .auth import Password, RegisterIn
from .base import BaseSchema, InputSchema


class UserNewIn(RegisterIn):
    """Admin-only create; may create other admins."""

    is_admin: bool = False


class UserUpdateIn(InputSchema):
    first_name: Optional[str] = Field(None, min_length=1, max_length=30)
    last_name: Optional[str] = Field(None, min_length=1, max_length=30)
    password: Optional[Password] = Field(None, min_length=5, max_length=20)
    email: Optional[EmailStr] = None


class UserOut(BaseSchema):
    username: str
    first_name: str
    last_name: str
    email: str
    is_admin: bool


class SentInviteOut(BaseSchema):
    post_id: int
    post_owner: str


class ReceivedInviteOut(BaseSchema):
    username: str
    post_id: int


class UserDetailOut(UserOut):
    posts: List[int] = []
    liked_posts: List[int] = []
    sent_invites: List[SentInviteOut] = []
    received_invites: List[ReceivedInviteOut] = []


# ---------- response envelopes ----------
class UserResponse(BaseSchema):
    user: UserOut


class UserDetailResponse(BaseSchema):
    user: UserDetailOut


class UserTokenResponse(BaseSchema):
    user: UserOut
    token: str


class UserListResponse(BaseSchema):
    users: List[UserOut]


class EmailResponse(BaseSchema):
    email: str
