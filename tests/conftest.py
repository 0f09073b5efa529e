import os

# must be set before app.core.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret"
os.environ.pop("ACCESS_TOKEN_EXPIRE_MINUTES", None)
os.environ["ARGON2_TIME_COST"] = "1"
os.environ["ARGON2_MEMORY_COST"] = "8"
os.environ["ARGON2_PARALLELISM"] = "1"
os.environ["LOG_LEVEL"] = "WARNING"

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from app.core.config import get_settings
from app.core.db import Database
from app.core.security import create_token
from app.main import create_app
from app.services import posts as post_service
from app.services import users as user_service


def _seed(db) -> SimpleNamespace:
    user_service.register(db, {
        "username": "u1",
        "first_name": "U1F",
        "last_name": "U1L",
        "email": "u1@user.com",
        "password": "password1",
        "is_admin": False,
    })
    user_service.register(db, {
        "username": "u2",
        "first_name": "U2F",
        "last_name": "U2L",
        "email": "u2@user.com",
        "password": "password2",
        "is_admin": False,
    })

    p1 = post_service.create(db, {
        "item_name": "item1",
        "username": "u1",
        "city": "city1",
        "category": "toy",
        "age_group": "baby",
    })
    p2 = post_service.create(db, {
        "item_name": "item2",
        "username": "u2",
        "city": "city2",
        "category": "book",
        "age_group": "kid",
    })

    user_service.like_post(db, "u2", p1.id)
    user_service.invite_post(db, "u1", p2.id)

    c1 = post_service.add_comment(db, {"username": "u1", "post_id": p2.id, "text": "good"})

    return SimpleNamespace(post_ids=[p1.id, p2.id], comment_ids=[c1.id])


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def database():
    """Fresh in-memory database per test."""
    database = Database("sqlite://")
    database.create_all()
    yield database
    database.drop_all()
    database.dispose()


@pytest.fixture
def seed(database):
    session = database.session()
    try:
        data = _seed(session)
    finally:
        session.close()
    return data


@pytest.fixture
def db(database, seed):
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def client(settings, database, seed):
    app = create_app(settings, db=database)
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


@pytest.fixture
def costly_settings(settings):
    """Argon2 cost that differs from the environment's."""
    return settings.model_copy(update={"ARGON2_TIME_COST": 3, "ARGON2_MEMORY_COST": 16})


@pytest.fixture
def costly_client(costly_settings, database, seed):
    app = create_app(costly_settings, db=database)
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


@pytest.fixture
def u1_token(settings):
    return create_token({"username": "u1", "is_admin": False}, settings)


@pytest.fixture
def u2_token(settings):
    return create_token({"username": "u2", "is_admin": False}, settings)


@pytest.fixture
def admin_token(settings):
    return create_token({"username": "admin", "is_admin": True}, settings)


