from fastapi import APIRouter, Depends, Path, Request, status
from sqlalchemy.orm import Session

from app.core.auth import CurrentUser, ensure_logged_in
from app.core.db import get_db
from app.core.errors import BadRequestError, NotFoundError, UnauthorizedError
from app.schemas.base import validate
from app.schemas.post import (
    CommentNewIn,
    CommentResponse,
    PostDetailResponse,
    PostListResponse,
    PostNewIn,
    PostResponse,
    PostSearchIn,
    PostUpdateIn,
    PostUpdatedResponse,
)
from app.services import posts as post_service

router = APIRouter(prefix="/posts", tags=["posts"])


# ---------- ownership guards ----------
def ensure_post_owner(
    post_id: int = Path(...),
    db: Session = Depends(get_db),
    me: CurrentUser = Depends(ensure_logged_in),
) -> CurrentUser:
    """404 if the post is missing, 401 unless the caller owns it."""
    if post_service.get_owner(db, post_id) != me.username:
        raise UnauthorizedError()
    return me


def ensure_comment_author(
    post_id: int = Path(...),
    comment_id: int = Path(...),
    db: Session = Depends(get_db),
    me: CurrentUser = Depends(ensure_logged_in),
) -> CurrentUser:
    comment = post_service.get_comment(db, comment_id)
    if comment.post_id != post_id:
        raise NotFoundError(f"No comment: {comment_id}")
    if comment.username != me.username:
        raise UnauthorizedError()
    return me


# ---------- 1) list (no token) ----------
@router.get("", response_model=PostListResponse)
def list_posts(request: Request, db: Session = Depends(get_db)):
    """Optional filter: ?itemName= (case-insensitive substring)."""
    search = validate(PostSearchIn, dict(request.query_params))
    if not search.ok:
        raise BadRequestError(search.errors)

    return {"posts": post_service.find_all(db, item_name=search.value.item_name)}


# ---------- 2) detail (no token) ----------
@router.get("/{post_id}", response_model=PostDetailResponse)
def get_post(post_id: int = Path(...), db: Session = Depends(get_db)):
    return {"post": post_service.get(db, post_id)}


# ---------- 3) create ----------
@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
def create_post(
    body: PostNewIn,
    db: Session = Depends(get_db),
    me: CurrentUser = Depends(ensure_logged_in),
):
    data = body.model_dump()
    data["username"] = me.username
    return {"post": post_service.create(db, data)}


# ---------- 4) update (owner) ----------
@router.patch("/{post_id}", response_model=PostUpdatedResponse)
def update_post(
    body: PostUpdateIn,
    post_id: int = Path(...),
    db: Session = Depends(get_db),
    _owner: CurrentUser = Depends(ensure_post_owner),
):
    data = body.model_dump(exclude_unset=True)
    return {"updated_post": post_service.update(db, post_id, data)}


# ---------- 5) delete (owner) ----------
@router.delete("/{post_id}")
def delete_post(
    post_id: int = Path(...),
    db: Session = Depends(get_db),
    _owner: CurrentUser = Depends(ensure_post_owner),
):
    post_service.remove(db, post_id)
    return {"deleted": post_id}


# ---------- 6) comments ----------
@router.post("/{post_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
def create_comment(
    body: CommentNewIn,
    post_id: int = Path(...),
    db: Session = Depends(get_db),
    me: CurrentUser = Depends(ensure_logged_in),
):
    comment = post_service.add_comment(
        db, {"username": me.username, "post_id": post_id, "text": body.text}
    )
    return {"comment": comment}


@router.delete("/{post_id}/comments/{comment_id}")
def delete_comment(
    comment_id: int = Path(...),
    db: Session = Depends(get_db),
    _author: CurrentUser = Depends(ensure_comment_author),
):
    post_service.remove_comment(db, comment_id)
    return {"deletedComment": comment_id}
