"""
Feed Service - registration, login, feed, profiles and follows.
"""
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Depends, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
import uvicorn

from .config import settings
from .db import get_db, init_db
from .models import User
from .schemas import UserCreate, UserLogin, LoginResponse, MessageResponse
from .auth import hash_password, verify_password, create_access_token
from .errors import Conflict, InternalError, NotFound, Unauthorized, register_error_handlers
from .routes import feeds, health, navbar, profile
from .utils.activity_logger import configure_logging, log_activity

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Create tables on startup"""
    init_db()
    yield


app = FastAPI(
    title="Feed Service",
    description="Social feed backend: accounts, posts, likes, comments and follows",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(feeds.router)
app.include_router(profile.router)
app.include_router(navbar.router)
app.include_router(health.router)


@app.post("/signup", response_model=MessageResponse)
def signup(payload: UserCreate, request: Request, db: Session = Depends(get_db)):
    new_user = User(
        email=payload.email,
        username=payload.username,
        password=hash_password(payload.password),
        full_name=payload.full_name,
        bio=payload.bio,
    )
    db.add(new_user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.info("[Signup] Rejected duplicate: email=%s, username=%s", payload.email, payload.username)
        raise Conflict("Email or username already exists") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("[Signup] Registration error for user %s: %s", payload.username, exc)
        raise InternalError("Internal server error") from exc
    db.refresh(new_user)

    log_activity("signup", new_user, request)
    return {"message": "User registered successfully"}


@app.post("/auth", response_model=LoginResponse)
@app.post("/auth/login", response_model=LoginResponse, include_in_schema=False)
def login(credentials: UserLogin, request: Request, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == credentials.email).first()
    if not user:
        raise NotFound("User not found")

    if not verify_password(credentials.password, user.password):
        log_activity("login_failure", user, request)
        raise Unauthorized("Invalid credentials")

    token = create_access_token(user.id, user.username)
    log_activity("login_success", user, request)
    return LoginResponse(message="Login successful", token=token, username=user.username)


@app.get("/")
def root():
    return {
        "service": "Feed Service",
        "version": "1.0.0",
        "status": "running"
    }


def run() -> None:
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
