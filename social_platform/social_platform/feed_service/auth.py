from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from fastapi import Depends, Header
from sqlalchemy.orm import Session

from .config import settings
from .db import get_db
from .errors import Forbidden, Unauthorized
from .models import User


class TokenError(Exception):
    """Base class for bearer token verification failures."""


class TokenExpired(TokenError):
    pass


class InvalidTokenSignature(TokenError):
    pass


class MalformedToken(TokenError):
    pass


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    username: str
    expires_at: datetime


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except (ValueError, TypeError):
        # not a bcrypt hash, or an over-long password
        return False


def create_access_token(user_id: int, username: str, ttl_seconds: Optional[int] = None) -> str:
    if ttl_seconds is None:
        ttl_seconds = settings.ACCESS_TOKEN_EXPIRE_SECONDS
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "username": username,
        "iat": now,
        "exp": now + timedelta(seconds=ttl_seconds),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> TokenClaims:
    """
    Verify a bearer token and return its claims.

    Raises:
        TokenExpired: the exp claim is in the past
        InvalidTokenSignature: the token was not signed with JWT_SECRET
        MalformedToken: the token cannot be decoded or lacks required claims
    """
    try:
        data = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise TokenExpired("Token has expired") from exc
    except jwt.InvalidSignatureError as exc:
        raise InvalidTokenSignature("Token signature is invalid") from exc
    except jwt.InvalidTokenError as exc:
        raise MalformedToken(f"Token is malformed: {exc}") from exc

    try:
        user_id = int(data["sub"])
    except (TypeError, ValueError) as exc:
        raise MalformedToken("Token subject is not a user id") from exc

    username = data.get("username")
    if not isinstance(username, str):
        raise MalformedToken("Token is missing the username claim")

    return TokenClaims(
        user_id=user_id,
        username=username,
        expires_at=datetime.fromtimestamp(data["exp"], tz=timezone.utc),
    )


def get_current_user(
    db: Session = Depends(get_db),
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> User:
    """
    Route dependency that authenticates the caller.

    Declaring it on a route makes that route protected: a missing or
    non-bearer header is 401, a token that fails verification is 403.
    """
    if not authorization or not authorization.lower().startswith("bearer "):
        raise Unauthorized("Not authenticated")
    token = authorization.split(" ", 1)[1].strip()
    if not token:
        raise Unauthorized("Not authenticated")

    try:
        claims = decode_access_token(token)
    except TokenExpired as exc:
        raise Forbidden("Token has expired") from exc
    except TokenError as exc:
        raise Forbidden("Invalid token") from exc

    user = db.get(User, claims.user_id)
    if not user:
        raise Unauthorized("User not found")
    return user
