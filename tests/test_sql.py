import pytest

from app.core.errors import BadRequestError
from app.core.sql import sql_for_partial_update


def test_builds_set_clause_and_params():
    set_cols, params = sql_for_partial_update({"first_name": "Aliya", "age": 32})
    assert set_cols == '"first_name"=:first_name, "age"=:age'
    assert params == {"first_name": "Aliya", "age": 32}


def test_renames_mapped_columns():
    set_cols, params = sql_for_partial_update(
        {"password": "hashed", "email": "a@b.com"},
        {"password": "password_hash"},
    )
    assert set_cols == '"password_hash"=:password_hash, "email"=:email'
    assert params == {"password_hash": "hashed", "email": "a@b.com"}


def test_keeps_explicit_none():
    set_cols, params = sql_for_partial_update({"img_url": None})
    assert set_cols == '"img_url"=:img_url'
    assert params == {"img_url": None}


def test_empty_data_is_bad_request():
    with pytest.raises(BadRequestError) as exc:
        sql_for_partial_update({})
    assert exc.value.status_code == 400
    assert exc.value.message == "No data"
