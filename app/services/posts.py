#app/services/posts.py

from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import select, desc, text
from sqlalchemy.orm import Session

from app.core.errors import BadRequestError, NotFoundError
from app.core.sql import sql_for_partial_update
from app.models.comment import Comment
from app.models.post import Post
from app.schemas.post import CommentOut, PostDetailOut, PostListItem, PostOut
from app.utils.logger import get_logger

logger = get_logger(__name__)

# may be cleared with an explicit null on update
_NULLABLE = {"img_url", "description"}


def _get_post_row(db: Session, post_id: int) -> Post:
    p = db.get(Post, post_id)
    if not p:
        raise NotFoundError(f"No post: {post_id}")
    return p


def create(db: Session, data: Mapping[str, Any]) -> PostOut:
    """data: item_name, username, city, category, age_group[, img_url, description]"""
    p = Post(
        item_name=data["item_name"],
        username=data["username"],
        city=data["city"],
        img_url=data.get("img_url"),
        description=data.get("description"),
        category=data["category"],
        age_group=data["age_group"],
    )
    db.add(p)
    db.commit()
    db.refresh(p)

    logger.info("post %s created by %s", p.id, p.username)
    return PostOut.model_validate(p)


def find_all(db: Session, item_name: Optional[str] = None) -> List[PostListItem]:
    """All posts, newest first.

    ``item_name`` is a case-insensitive literal substring filter: ``%`` and ``_``
    match themselves.
    """
    q = select(Post)
    if item_name is not None:
        q = q.where(Post.item_name.icontains(item_name, autoescape=True))
    q = q.order_by(desc(Post.post_date), desc(Post.id))

    rows = db.execute(q).scalars().all()
    return [PostListItem.model_validate(p) for p in rows]


def get(db: Session, post_id: int) -> PostDetailOut:
    """Post with its comments, newest comment first."""
    p = _get_post_row(db, post_id)

    comments = db.execute(
        select(Comment)
        .where(Comment.post_id == post_id)
        .order_by(desc(Comment.comment_date), desc(Comment.id))
    ).scalars().all()

    return PostDetailOut(
        **PostOut.model_validate(p).model_dump(),
        comments=[CommentOut.model_validate(c) for c in comments],
    )


def get_owner(db: Session, post_id: int) -> str:
    return _get_post_row(db, post_id).username


def update(db: Session, post_id: int, data: Mapping[str, Any]) -> PostOut:
    """Partial update of item_name, city, img_url, description, category, age_group.

    Null is accepted only for img_url and description.

    Raises BadRequestError for an empty update or a null required field,
    NotFoundError for an unknown post.
    """
    data: Dict[str, Any] = dict(data)
    nulls = sorted(k for k, v in data.items() if v is None and k not in _NULLABLE)
    if nulls:
        raise BadRequestError([f"{k}: may not be null" for k in nulls])

    set_cols, params = sql_for_partial_update(data)
    result = db.execute(
        text(f"UPDATE posts SET {set_cols} WHERE id = :where_id"),
        {**params, "where_id": post_id},
    )
    if result.rowcount == 0:
        db.rollback()
        raise NotFoundError(f"No post: {post_id}")
    db.commit()

    logger.info("post %s updated: %s", post_id, sorted(data))
    return PostOut.model_validate(_get_post_row(db, post_id))


def remove(db: Session, post_id: int) -> None:
    """Delete a post; its likes, invites and comments are removed with it."""
    p = _get_post_row(db, post_id)
    db.delete(p)
    db.commit()
    logger.info("post %s deleted", post_id)


# ---------- comments ----------
def get_comment(db: Session, comment_id: int) -> CommentOut:
    c = db.get(Comment, comment_id)
    if not c:
        raise NotFoundError(f"No comment: {comment_id}")
    return CommentOut.model_validate(c)


def add_comment(db: Session, data: Mapping[str, Any]) -> CommentOut:
    """data: username, post_id, text. The post must exist."""
    _get_post_row(db, data["post_id"])

    c = Comment(username=data["username"], post_id=data["post_id"], text=data["text"])
    db.add(c)
    db.commit()
    db.refresh(c)

    logger.info("comment %s on post %s by %s", c.id, c.post_id, c.username)
    return CommentOut.model_validate(c)


def remove_comment(db: Session, comment_id: int) -> None:
    c = db.get(Comment, comment_id)
    if not c:
        raise NotFoundError(f"No comment: {comment_id}")
    db.delete(c)
    db.commit()
