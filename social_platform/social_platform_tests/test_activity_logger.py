"""Tests for logging setup and the activity logger."""
import logging
from unittest.mock import MagicMock

import pytest

from social_platform.social_platform.feed_service.utils.activity_logger import (
    ALLOWED_EVENT_TYPES,
    LOG_FILE_NAME,
    client_ip,
    configure_logging,
    log_activity,
)


def _request(host="127.0.0.1", headers=None):
    request = MagicMock()
    if host is None:
        request.client = None
    else:
        request.client.host = host
    request.headers = headers or {}
    return request


def _user(user_id=7, username="alice"):
    user = MagicMock()
    user.id = user_id
    user.username = username
    return user


def test_log_activity_writes_line(caplog):
    with caplog.at_level(logging.INFO, logger="feed_service.activity"):
        log_activity("post_created", _user(), _request("10.0.0.5"), post_id=3)

    assert len(caplog.records) == 1
    message = caplog.records[0].getMessage()
    assert message.startswith("ACTIVITY post_created")
    assert "user_id=7" in message
    assert "username=alice" in message
    assert "ip=10.0.0.5" in message
    assert "post_id=3" in message


def test_log_activity_rejects_unknown_event():
    with pytest.raises(ValueError, match="Invalid event_type"):
        log_activity("account_deleted", _user(), _request())


def test_allowed_event_types():
    assert ALLOWED_EVENT_TYPES == {
        "signup",
        "login_success",
        "login_failure",
        "post_created",
        "post_liked",
        "comment_created",
        "profile_updated",
        "followed",
        "unfollowed",
    }


def test_client_ip_prefers_connection_address():
    request = _request("192.168.1.10", {"x-forwarded-for": "203.0.113.1"})
    assert client_ip(request) == "192.168.1.10"


def test_client_ip_falls_back_to_forwarded_for():
    request = _request(None, {"x-forwarded-for": "203.0.113.1, 10.0.0.1"})
    assert client_ip(request) == "203.0.113.1"


def test_client_ip_unknown():
    assert client_ip(_request(None)) is None


def test_configure_logging_with_file_handler(tmp_path):
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        configure_logging(level="debug", log_dir=str(tmp_path / "logs"))

        assert root.level == logging.DEBUG
        file_handlers = [h for h in root.handlers if isinstance(h, logging.FileHandler)]
        assert len(file_handlers) == 1
        assert file_handlers[0].baseFilename == str(tmp_path / "logs" / LOG_FILE_NAME)
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers = saved_handlers
        root.setLevel(saved_level)


def test_configure_logging_survives_unusable_dir(tmp_path, capsys):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("")

    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        configure_logging(level="INFO", log_dir=str(blocker / "logs"))

        assert not any(isinstance(h, logging.FileHandler) for h in root.handlers)
        assert "Could not set up file logging" in capsys.readouterr().err
    finally:
        root.handlers = saved_handlers
        root.setLevel(saved_level)


def test_login_events_are_logged(client, caplog, make_user):
    make_user("alice", email="alice@example.com")

    with caplog.at_level(logging.INFO, logger="feed_service.activity"):
        client.post("/auth", json={"email": "alice@example.com", "password": "wrong"})
        client.post("/auth", json={"email": "alice@example.com", "password": "secret123"})

    messages = [r.getMessage() for r in caplog.records if r.name == "feed_service.activity"]
    assert any(m.startswith("ACTIVITY login_failure") for m in messages)
    assert any(m.startswith("ACTIVITY login_success") for m in messages)
