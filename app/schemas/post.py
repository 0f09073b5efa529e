# app/schemas/post.py
from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_serializer, field_validator

from .base import BaseSchema, InputSchema

DATE_FORMAT = "%Y-%m-%d %H:%M"


class PostNewIn(InputSchema):
    item_name: str = Field(..., min_length=1, max_length=100)
    # accepted for compatibility; the owner always comes from the token
    username: Optional[str] = None
    city: str = Field(..., min_length=1, max_length=50)
    img_url: Optional[str] = Field(None, max_length=1024)
    description: Optional[str] = None
    category: str = Field(..., min_length=1, max_length=50)
    age_group: str = Field(..., min_length=1, max_length=50)


class PostUpdateIn(InputSchema):
    item_name: Optional[str] = Field(None, min_length=1, max_length=100)
    city: Optional[str] = Field(None, min_length=1, max_length=50)
    img_url: Optional[str] = Field(None, max_length=1024)
    description: Optional[str] = None
    category: Optional[str] = Field(None, min_length=1, max_length=50)
    age_group: Optional[str] = Field(None, min_length=1, max_length=50)

    # may be left out, but not set to null
    @field_validator("item_name", "city", "category", "age_group")
    @classmethod
    def _not_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("may not be null")
        return v


class PostSearchIn(InputSchema):
    item_name: Optional[str] = Field(None, min_length=1)


class CommentNewIn(InputSchema):
    text: str = Field(..., min_length=1, max_length=1000)


class CommentOut(BaseSchema):
    id: int
    username: str
    text: str
    post_id: int
    comment_date: datetime

    @field_serializer("comment_date", when_used="json")
    def _fmt_date(self, dt: datetime) -> str:
        return dt.strftime(DATE_FORMAT)


class PostListItem(BaseSchema):
    id: int
    item_name: str
    username: str
    post_date: datetime
    city: str
    img_url: Optional[str] = None
    category: str
    age_group: str

    @field_serializer("post_date", when_used="json")
    def _fmt_date(self, dt: datetime) -> str:
        return dt.strftime(DATE_FORMAT)


class PostOut(PostListItem):
    description: Optional[str] = None


class PostDetailOut(PostOut):
    comments: List[CommentOut] = []


# ---------- response envelopes ----------
class PostResponse(BaseSchema):
    post: PostOut


class PostDetailResponse(BaseSchema):
    post: PostDetailOut


class PostUpdatedResponse(BaseSchema):
    updated_post: PostOut


class PostListResponse(BaseSchema):
    posts: List[PostListItem]


class CommentResponse(BaseSchema):
    comment: CommentOut
