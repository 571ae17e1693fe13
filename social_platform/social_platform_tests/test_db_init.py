"""Tests for database initialization."""
from sqlalchemy import inspect, create_engine

from social_platform.social_platform.feed_service import db as db_module
from social_platform.social_platform.feed_service.db import init_db, check_db_connection


def test_init_db_creates_tables(tmp_path, monkeypatch):
    """init_db creates every table with the expected columns."""
    test_engine = create_engine(
        f"sqlite:///{tmp_path / 'init.db'}", connect_args={"check_same_thread": False}
    )
    monkeypatch.setattr(db_module, "engine", test_engine)

    init_db()

    inspector = inspect(test_engine)
    assert {"users", "posts", "comments", "follows"} <= set(inspector.get_table_names())

    user_columns = {col["name"]: col for col in inspector.get_columns("users")}
    for name in ("id", "email", "username", "password", "full_name", "bio", "created_at"):
        assert name in user_columns, f"Column {name} should exist in users table"
    assert user_columns["email"]["nullable"] is False
    assert user_columns["username"]["nullable"] is False
    assert user_columns["bio"]["nullable"] is True

    post_columns = {col["name"]: col for col in inspector.get_columns("posts")}
    assert post_columns["likes"]["nullable"] is False
    assert post_columns["author_id"]["nullable"] is False

    follow_pk = inspector.get_pk_constraint("follows")["constrained_columns"]
    assert set(follow_pk) == {"follower_id", "following_id"}

    unique_user_indexes = {
        tuple(idx["column_names"]) for idx in inspector.get_indexes("users") if idx["unique"]
    }
    assert ("email",) in unique_user_indexes
    assert ("username",) in unique_user_indexes

    test_engine.dispose()


def test_init_db_is_idempotent(tmp_path, monkeypatch):
    test_engine = create_engine(f"sqlite:///{tmp_path / 'twice.db'}")
    monkeypatch.setattr(db_module, "engine", test_engine)

    init_db()
    init_db()

    assert "users" in inspect(test_engine).get_table_names()
    test_engine.dispose()


def test_check_db_connection():
    assert check_db_connection() is True
