#app/services/users.py
"""Data access for users, likes and invites.

Every function takes the request's ``Session`` and commits its own write.
"""

from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import select, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.errors import BadRequestError, NotFoundError, UnauthorizedError
from app.core.security import hash_password, verify_password
from app.core.sql import sql_for_partial_update
from app.models.invite import Invite
from app.models.like import Like
from app.models.post import Post
from app.models.user import User
from app.schemas.user import ReceivedInviteOut, SentInviteOut, UserDetailOut, UserOut
from app.utils.logger import get_logger

logger = get_logger(__name__)

# api field -> column
_USER_COLUMNS = {"password": "password_hash"}


def _get_user_row(db: Session, username: str) -> User:
    user = db.get(User, username)
    if not user:
        raise NotFoundError(f"No user: {username}")
    return user


def _ensure_post_exists(db: Session, post_id: int) -> None:
    if db.get(Post, post_id) is None:
        raise NotFoundError(f"No post: {post_id}")


def authenticate(db: Session, username: str, password: str) -> UserOut:
    """Check username/password.

    Returns the user without the password; raises UnauthorizedError when the
    user is unknown or the password is wrong.
    """
    user = db.get(User, username)
    if user and verify_password(password, user.password_hash):
        return UserOut.model_validate(user)

    raise UnauthorizedError("Invalid username/password")


def register(db: Session, data: Mapping[str, Any], settings: Optional[Settings] = None) -> UserOut:
    """Create a user from ``username, password, first_name, last_name, email[, is_admin]``.

    Raises BadRequestError on a duplicate username. ``settings`` carries the
    argon2 cost (the environment's when omitted).
    """
    username = data["username"]
    if db.get(User, username) is not None:
        raise BadRequestError(f"Duplicate username: {username}")

    user = User(
        username=username,
        password_hash=hash_password(data["password"], settings),
        first_name=data["first_name"],
        last_name=data["last_name"],
        email=data["email"],
        is_admin=bool(data.get("is_admin", False)),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # lost a race with a concurrent register
        db.rollback()
        raise BadRequestError(f"Duplicate username: {username}")
    db.refresh(user)

    logger.info("registered user %s (admin=%s)", user.username, user.is_admin)
    return UserOut.model_validate(user)


def find_all(db: Session) -> List[UserOut]:
    rows = db.execute(select(User).order_by(User.username)).scalars().all()
    return [UserOut.model_validate(u) for u in rows]


def get(db: Session, username: str) -> UserDetailOut:
    """User plus the ids of their posts and liked posts, and their invites.

    sent_invites: invites this user made, with each post's owner.
    received_invites: invites other users made on this user's posts.
    """
    user = _get_user_row(db, username)

    liked = db.execute(
        select(Like.post_id).where(Like.username == username).order_by(Like.post_id)
    ).scalars().all()

    posts = db.execute(
        select(Post.id).where(Post.username == username).order_by(Post.id)
    ).scalars().all()

    sent = db.execute(
        select(Invite.post_id, Post.username)
        .join(Post, Post.id == Invite.post_id)
        .where(Invite.username == username)
        .order_by(Invite.post_id)
    ).all()

    received = db.execute(
        select(Invite.username, Invite.post_id)
        .join(Post, Post.id == Invite.post_id)
        .where(Post.username == username)
        .order_by(Invite.post_id, Invite.username)
    ).all()

    return UserDetailOut(
        **UserOut.model_validate(user).model_dump(),
        posts=list(posts),
        liked_posts=list(liked),
        sent_invites=[SentInviteOut(post_id=pid, post_owner=owner) for pid, owner in sent],
        received_invites=[ReceivedInviteOut(username=u, post_id=pid) for u, pid in received],
    )


def get_email(db: Session, username: str) -> str:
    email = db.execute(select(User.email).where(User.username == username)).scalar_one_or_none()
    if email is None:
        raise NotFoundError(f"No user: {username}")
    return email


def update(
    db: Session, username: str, data: Mapping[str, Any], settings: Optional[Settings] = None
) -> UserOut:
    """Partial update: only the fields present in ``data`` change.

    ``data`` may hold first_name, last_name, password, email, is_admin.
    A new password is hashed before it is stored. Callers must have checked
    who is allowed to set a password or the admin flag.

    Raises BadRequestError for an empty update, NotFoundError for an unknown user.
    """
    data: Dict[str, Any] = dict(data)
    if data.get("password"):
        data["password"] = hash_password(data["password"], settings)

    set_cols, params = sql_for_partial_update(data, _USER_COLUMNS)
    result = db.execute(
        text(f"UPDATE users SET {set_cols} WHERE username = :where_username"),
        {**params, "where_username": username},
    )
    if result.rowcount == 0:
        db.rollback()
        raise NotFoundError(f"No user: {username}")
    db.commit()

    logger.info("updated user %s: %s", username, sorted(data))
    return UserOut.model_validate(_get_user_row(db, username))


def remove(db: Session, username: str) -> None:
    """Delete a user; their posts, likes, invites and comments go with it."""
    user = _get_user_row(db, username)
    db.delete(user)
    db.commit()
    logger.info("deleted user %s", username)


def like_post(db: Session, username: str, post_id: int) -> None:
    _ensure_post_exists(db, post_id)
    if db.get(User, username) is None:
        raise NotFoundError(f"No username: {username}")
    if db.get(Like, (username, post_id)) is not None:
        raise BadRequestError(f"Already liked: {post_id}")

    db.add(Like(username=username, post_id=post_id))
    db.commit()
    logger.info("%s liked post %s", username, post_id)


def unlike_post(db: Session, username: str, post_id: int) -> None:
    like = db.get(Like, (username, post_id))
    if like is None:
        raise NotFoundError("No such like.")
    db.delete(like)
    db.commit()


def invite_post(db: Session, username: str, post_id: int) -> None:
    _ensure_post_exists(db, post_id)
    if db.get(User, username) is None:
        raise NotFoundError(f"No username: {username}")
    if db.get(Invite, (username, post_id)) is not None:
        raise BadRequestError(f"Already invited: {post_id}")

    db.add(Invite(username=username, post_id=post_id))
    db.commit()
    logger.info("%s invited on post %s", username, post_id)


def uninvite_post(db: Session, username: str, post_id: int) -> None:
    invite = db.get(Invite, (username, post_id))
    if invite is None:
        raise NotFoundError("No such invite.")
    db.delete(invite)
    db.commit()
