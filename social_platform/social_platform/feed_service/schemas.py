from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator

from typing import List, Optional

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


def _check_password_length(value: str) -> str:
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return value


class UserCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(min_length=3)
    password: str = Field(min_length=1)
    username: str = Field(min_length=1, max_length=50)
    full_name: Optional[str] = Field(default=None, alias="fullName")
    bio: Optional[str] = None

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return _check_password_length(value)


class UserLogin(BaseModel):
    email: str
    password: str


class LoginResponse(BaseModel):
    message: str = "Login successful"
    token: str
    username: str


class MessageResponse(BaseModel):
    message: str


# Users
class UserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    full_name: Optional[str] = None
    bio: Optional[str] = None


class AuthorOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    full_name: Optional[str] = None


# Posts
class PostCreate(BaseModel):
    content: str = Field(min_length=1)


class PostOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    author_id: int
    content: str
    likes: int
    created_at: datetime


class FeedPostOut(PostOut):
    author: AuthorOut


# Comments
class CommentCreate(BaseModel):
    content: str = Field(min_length=1)


class CommentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    post_id: int
    author_id: Optional[int] = None
    content: str
    created_at: datetime


# Profile
class ProfileOut(BaseModel):
    id: int
    username: str
    full_name: Optional[str] = None
    bio: Optional[str] = None
    posts: List[PostOut]
    followers_count: int
    following_count: int


class ProfileFields(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    username: str
    full_name: Optional[str] = None
    bio: Optional[str] = None


class ProfileUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: Optional[str] = Field(default=None, min_length=1, max_length=50)
    full_name: Optional[str] = Field(default=None, alias="fullName")
    bio: Optional[str] = None


class FollowOut(BaseModel):
    follower: str
    following: str
    created_at: datetime


# Search
class UserDetailOut(UserSummary):
    created_at: datetime
    posts: List[PostOut]
    comments: List[CommentOut]
    following: List[UserSummary]
    followers: List[UserSummary]
