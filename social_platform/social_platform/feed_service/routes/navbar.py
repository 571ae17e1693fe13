"""
NavBar Router - post creation and user search.
"""
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session, selectinload

from ..auth import get_current_user
from ..db import get_db
from ..errors import NotFound
from ..models import Post, User
from ..schemas import PostCreate, PostOut, UserDetailOut
from ..utils.activity_logger import log_activity

router = APIRouter(prefix="/NavBar", tags=["navbar"])


@router.post("/create", response_model=PostOut, status_code=status.HTTP_201_CREATED)
def create_post(
    payload: PostCreate,
    request: Request,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    # The author always comes from the verified token; body fields such as
    # userId are not part of PostCreate and are dropped during parsing.
    post = Post(author_id=user.id, content=payload.content)
    db.add(post)
    db.commit()
    db.refresh(post)

    log_activity("post_created", user, request, post_id=post.id)
    return post


@router.get("/search/{username}", response_model=UserDetailOut)
def search_user(username: str, db: Session = Depends(get_db)):
    user = (
        db.query(User)
        .options(
            selectinload(User.posts),
            selectinload(User.comments),
            selectinload(User.following),
            selectinload(User.followers),
        )
        .filter(User.username == username)
        .first()
    )
    if not user:
        raise NotFound("User not found")
    return user
