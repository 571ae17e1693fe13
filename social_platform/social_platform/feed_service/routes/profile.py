"""
Profile Router - public profiles, follower/following lists, profile
editing and follow edges.
"""
import logging
from typing import List
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..db import get_db
from ..errors import Conflict, Forbidden, NotFound, ValidationFailure
from ..models import Follow, User
from ..schemas import (
    FollowOut,
    MessageResponse,
    PostOut,
    ProfileFields,
    ProfileOut,
    ProfileUpdate,
    UserSummary,
)
from ..utils.activity_logger import log_activity

router = APIRouter(prefix="/profile", tags=["profile"])
logger = logging.getLogger(__name__)


def get_user_by_username(db: Session, username: str) -> User:
    user = db.query(User).filter(User.username == username).first()
    if not user:
        raise NotFound("User not found")
    return user


@router.get("/{username}", response_model=ProfileOut)
def get_profile(username: str, db: Session = Depends(get_db)):
    user = get_user_by_username(db, username)

    followers_count = db.query(func.count()).select_from(Follow).filter(
        Follow.following_id == user.id
    ).scalar()
    following_count = db.query(func.count()).select_from(Follow).filter(
        Follow.follower_id == user.id
    ).scalar()

    return ProfileOut(
        id=user.id,
        username=user.username,
        full_name=user.full_name,
        bio=user.bio,
        posts=[PostOut.model_validate(post) for post in user.posts],
        followers_count=followers_count,
        following_count=following_count,
    )


@router.get("/{username}/followers", response_model=List[UserSummary])
def list_followers(username: str, db: Session = Depends(get_db)):
    """Users B such that B follows `username`."""
    user = get_user_by_username(db, username)
    return (
        db.query(User)
        .join(Follow, Follow.follower_id == User.id)
        .filter(Follow.following_id == user.id)
        .order_by(User.username)
        .all()
    )


@router.get("/{username}/following", response_model=List[UserSummary])
def list_following(username: str, db: Session = Depends(get_db)):
    """Users B such that `username` follows B."""
    user = get_user_by_username(db, username)
    return (
        db.query(User)
        .join(Follow, Follow.following_id == User.id)
        .filter(Follow.follower_id == user.id)
        .order_by(User.username)
        .all()
    )


@router.get("/{username}/editpf", response_model=ProfileFields)
def get_profile_fields(username: str, db: Session = Depends(get_db)):
    return get_user_by_username(db, username)


@router.patch("/{username}/editpf", response_model=ProfileFields)
def update_profile_fields(
    username: str,
    payload: ProfileUpdate,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user = get_user_by_username(db, username)
    if user.id != current_user.id:
        raise Forbidden("You can only edit your own profile")

    changes = payload.model_dump(exclude_unset=True)
    if "username" in changes and changes["username"] is None:
        raise ValidationFailure("Username cannot be empty")

    for field, value in changes.items():
        setattr(user, field, value)

    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise Conflict("Username already exists") from exc
    db.refresh(user)

    log_activity("profile_updated", user, request, fields=",".join(sorted(changes)))
    return user


@router.post("/{username}/follow", response_model=FollowOut, status_code=status.HTTP_201_CREATED)
def follow_user(
    username: str,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    target = get_user_by_username(db, username)
    if target.id == current_user.id:
        raise ValidationFailure("You cannot follow yourself")

    edge = Follow(follower_id=current_user.id, following_id=target.id)
    db.add(edge)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise Conflict(f"Already following {username}") from exc
    db.refresh(edge)

    log_activity("followed", current_user, request, target=target.username)
    return FollowOut(
        follower=current_user.username,
        following=target.username,
        created_at=edge.created_at,
    )


@router.delete("/{username}/follow", response_model=MessageResponse)
def unfollow_user(
    username: str,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    target = get_user_by_username(db, username)
    edge = db.get(Follow, (current_user.id, target.id))
    if not edge:
        raise NotFound(f"You are not following {username}")

    db.delete(edge)
    db.commit()

    log_activity("unfollowed", current_user, request, target=target.username)
    return {"message": f"Unfollowed {username}"}
