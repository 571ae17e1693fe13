"""
Logging setup and activity logging for account and social events.
"""
from datetime import datetime
from typing import Optional
from fastapi import Request
import sys
import logging
import os

from ..config import settings
from ..models import User

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s:%(message)s"
LOG_FILE_NAME = "feed_service.log"

logger = logging.getLogger("feed_service.activity")


ALLOWED_EVENT_TYPES = {
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


def configure_logging(level: Optional[str] = None, log_dir: Optional[str] = None) -> None:
    """
    Configure root logging with a stdout handler and, when a log directory
    is configured, a file handler.
    """
    level = (level or settings.LOG_LEVEL).upper()
    log_dir = log_dir if log_dir is not None else settings.LOG_DIR

    handlers = [logging.StreamHandler(sys.stdout)]

    # Continue without the file handler if the directory is unusable
    if log_dir:
        try:
            os.makedirs(log_dir, exist_ok=True)
            handlers.append(logging.FileHandler(os.path.join(log_dir, LOG_FILE_NAME)))
        except OSError as e:
            print(f"WARNING: Could not set up file logging: {e}", file=sys.stderr)

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


def client_ip(request: Request) -> Optional[str]:
    """Client address, falling back to the first X-Forwarded-For entry."""
    if request.client and request.client.host:
        return request.client.host

    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return None


def log_activity(
    event_type: str,
    user: User,
    request: Request,
    **fields
) -> None:
    """
    Write one log line for an account or social event.

    Args:
        event_type: One of ALLOWED_EVENT_TYPES
        user: The acting user
        request: FastAPI Request object
        **fields: Extra key=value context (post_id, target, ...)

    Raises:
        ValueError: If event_type is invalid
    """
    if event_type not in ALLOWED_EVENT_TYPES:
        raise ValueError(
            f"Invalid event_type '{event_type}'. Must be one of: {', '.join(sorted(ALLOWED_EVENT_TYPES))}"
        )

    extra = "".join(f" {key}={value}" for key, value in sorted(fields.items()))
    logger.info(
        "ACTIVITY %s user_id=%s username=%s ip=%s timestamp=%s%s",
        event_type, user.id, user.username, client_ip(request),
        datetime.utcnow().isoformat(), extra
    )
