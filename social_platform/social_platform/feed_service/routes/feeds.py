"""
Feed Router - chronological post feed, likes and comments.
"""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy import update
from sqlalchemy.orm import Session, joinedload

from ..auth import get_current_user
from ..db import get_db
from ..errors import NotFound
from ..models import Comment, Post, User
from ..schemas import CommentCreate, CommentOut, FeedPostOut, PostOut
from ..utils.activity_logger import log_activity

router = APIRouter(tags=["feeds"])
logger = logging.getLogger(__name__)


def _get_post_or_404(db: Session, post_id: int) -> Post:
    post = db.get(Post, post_id)
    if not post:
        raise NotFound("Post not found")
    return post


@router.get("/feeds", response_model=List[FeedPostOut])
@router.get("/api/feed", response_model=List[FeedPostOut], include_in_schema=False)
def list_feed(
    limit: Optional[int] = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    """Newest posts first; posts created in the same instant keep insertion order."""
    query = (
        db.query(Post)
        .options(joinedload(Post.author))
        .order_by(Post.created_at.desc(), Post.id.desc())
        .offset(offset)
    )
    if limit is not None:
        query = query.limit(limit)
    return query.all()


@router.post("/feeds/post/{post_id}/like", response_model=PostOut)
@router.post("/post/{post_id}/like", response_model=PostOut, include_in_schema=False)
def like_post(
    post_id: int,
    request: Request,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    # Increment in SQL so concurrent likes are not lost
    result = db.execute(
        update(Post).where(Post.id == post_id).values(likes=Post.likes + 1)
    )
    if result.rowcount == 0:
        db.rollback()
        raise NotFound("Post not found")
    db.commit()

    post = _get_post_or_404(db, post_id)
    log_activity("post_liked", user, request, post_id=post.id, likes=post.likes)
    return post


@router.get("/feeds/post/{post_id}/comments", response_model=List[CommentOut])
def list_comments(post_id: int, db: Session = Depends(get_db)):
    _get_post_or_404(db, post_id)
    return (
        db.query(Comment)
        .filter(Comment.post_id == post_id)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
        .all()
    )


@router.post(
    "/feeds/post/{post_id}/comments",
    response_model=CommentOut,
    status_code=status.HTTP_201_CREATED,
)
def create_comment(
    post_id: int,
    payload: CommentCreate,
    request: Request,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    _get_post_or_404(db, post_id)

    comment = Comment(post_id=post_id, author_id=user.id, content=payload.content)
    db.add(comment)
    db.commit()
    db.refresh(comment)

    log_activity("comment_created", user, request, post_id=post_id, comment_id=comment.id)
    return comment
