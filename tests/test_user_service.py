import pytest

from app.core.errors import BadRequestError, NotFoundError, UnauthorizedError
from app.models.comment import Comment
from app.models.invite import Invite
from app.models.like import Like
from app.models.post import Post
from app.models.user import User
from app.services import users as user_service


# ---------- authenticate ----------
def test_authenticate_works(db):
    user = user_service.authenticate(db, "u1", "password1")
    assert user.model_dump() == {
        "username": "u1",
        "first_name": "U1F",
        "last_name": "U1L",
        "email": "u1@user.com",
        "is_admin": False,
    }


def test_authenticate_unknown_user(db):
    with pytest.raises(UnauthorizedError):
        user_service.authenticate(db, "nope", "password")


def test_authenticate_wrong_password(db):
    with pytest.raises(UnauthorizedError) as exc:
        user_service.authenticate(db, "u1", "wrong")
    assert exc.value.message == "Invalid username/password"


# ---------- register ----------
NEW_USER = {
    "username": "new",
    "first_name": "Test",
    "last_name": "Tester",
    "email": "test@test.com",
    "password": "password",
    "is_admin": False,
}


def test_register_then_authenticate(db):
    user = user_service.register(db, NEW_USER)
    assert user.username == "new"
    assert user.is_admin is False

    row = db.get(User, "new")
    assert row.password_hash.startswith("$argon2")
    assert user_service.authenticate(db, "new", "password").username == "new"
    with pytest.raises(UnauthorizedError):
        user_service.authenticate(db, "new", "wrong")


def test_register_admin(db):
    user = user_service.register(db, {**NEW_USER, "is_admin": True})
    assert user.is_admin is True
    assert db.get(User, "new").is_admin is True


def test_register_duplicate_leaves_original(db):
    with pytest.raises(BadRequestError) as exc:
        user_service.register(db, {**NEW_USER, "username": "u1", "first_name": "Other"})
    assert exc.value.message == "Duplicate username: u1"

    original = user_service.authenticate(db, "u1", "password1")
    assert original.first_name == "U1F"


# ---------- find_all / get / get_email ----------
def test_find_all_sorted_by_username(db):
    users = user_service.find_all(db)
    assert [u.username for u in users] == ["u1", "u2"]
    assert users[1].email == "u2@user.com"


def test_get_u1(db, seed):
    user = user_service.get(db, "u1")
    assert user.username == "u1"
    assert user.posts == [seed.post_ids[0]]
    assert user.liked_posts == []
    assert [i.model_dump() for i in user.sent_invites] == [
        {"post_id": seed.post_ids[1], "post_owner": "u2"}
    ]
    assert user.received_invites == []


def test_get_u2(db, seed):
    user = user_service.get(db, "u2")
    assert user.posts == [seed.post_ids[1]]
    assert user.liked_posts == [seed.post_ids[0]]
    assert user.sent_invites == []
    assert [i.model_dump() for i in user.received_invites] == [
        {"username": "u1", "post_id": seed.post_ids[1]}
    ]


def test_get_not_found(db):
    with pytest.raises(NotFoundError):
        user_service.get(db, "nope")


def test_get_email(db):
    assert user_service.get_email(db, "u2") == "u2@user.com"
    with pytest.raises(NotFoundError):
        user_service.get_email(db, "nope")


# ---------- update ----------
def test_update_one_field_only(db):
    user = user_service.update(db, "u1", {"first_name": "New"})
    assert user.model_dump() == {
        "username": "u1",
        "first_name": "New",
        "last_name": "U1L",
        "email": "u1@user.com",
        "is_admin": False,
    }
    assert user_service.get(db, "u1").first_name == "New"


def test_update_password(db):
    user_service.update(db, "u1", {"password": "new-password"})
    assert user_service.authenticate(db, "u1", "new-password").username == "u1"
    with pytest.raises(UnauthorizedError):
        user_service.authenticate(db, "u1", "password1")

    row = db.get(User, "u1")
    assert row.password_hash.startswith("$argon2")


def test_update_admin_flag(db):
    assert user_service.update(db, "u2", {"is_admin": True}).is_admin is True


def test_update_not_found(db):
    with pytest.raises(NotFoundError):
        user_service.update(db, "nope", {"first_name": "test"})


def test_update_empty_is_bad_request(db):
    with pytest.raises(BadRequestError):
        user_service.update(db, "u1", {})
    assert user_service.get(db, "u1").first_name == "U1F"


# ---------- remove ----------
def test_remove(db):
    user_service.remove(db, "u1")
    with pytest.raises(NotFoundError):
        user_service.get(db, "u1")


def test_remove_cascades_to_posts_and_relations(db, seed):
    user_service.remove(db, "u2")

    assert db.get(Post, seed.post_ids[1]) is None
    assert db.query(Like).filter(Like.username == "u2").count() == 0
    # u1's invite and comment were on u2's post
    assert db.query(Invite).count() == 0
    assert db.query(Comment).count() == 0


def test_remove_not_found(db):
    with pytest.raises(NotFoundError):
        user_service.remove(db, "nope")


# ---------- likes ----------
def test_like_post(db, seed):
    user_service.like_post(db, "u1", seed.post_ids[1])
    assert user_service.get(db, "u1").liked_posts == [seed.post_ids[1]]


def test_like_post_twice_is_bad_request(db, seed):
    with pytest.raises(BadRequestError):
        user_service.like_post(db, "u2", seed.post_ids[0])


def test_like_missing_post(db):
    with pytest.raises(NotFoundError) as exc:
        user_service.like_post(db, "u1", 0)
    assert exc.value.message == "No post: 0"


def test_like_missing_user(db, seed):
    with pytest.raises(NotFoundError) as exc:
        user_service.like_post(db, "nope", seed.post_ids[0])
    assert exc.value.message == "No username: nope"


def test_unlike_post(db, seed):
    user_service.unlike_post(db, "u2", seed.post_ids[0])
    assert user_service.get(db, "u2").liked_posts == []


def test_unlike_missing(db, seed):
    with pytest.raises(NotFoundError):
        user_service.unlike_post(db, "u1", seed.post_ids[0])


# ---------- invites ----------
def test_invite_post(db, seed):
    user_service.invite_post(db, "u2", seed.post_ids[0])
    received = user_service.get(db, "u1").received_invites
    assert [(i.username, i.post_id) for i in received] == [("u2", seed.post_ids[0])]


def test_invite_twice_is_bad_request(db, seed):
    with pytest.raises(BadRequestError):
        user_service.invite_post(db, "u1", seed.post_ids[1])


def test_invite_missing_post(db):
    with pytest.raises(NotFoundError):
        user_service.invite_post(db, "u1", 0)


def test_uninvite_post(db, seed):
    user_service.uninvite_post(db, "u1", seed.post_ids[1])
    assert user_service.get(db, "u1").sent_invites == []


def test_uninvite_missing(db, seed):
    with pytest.raises(NotFoundError):
        user_service.uninvite_post(db, "u2", seed.post_ids[1])
