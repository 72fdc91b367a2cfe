"""
Blog I/O models: posts, threaded comments and reactions.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from chezflora.core.database.entities.blog import PostStatus, ReactionType
from chezflora.core.utils import to_naive_utc


class PostCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    excerpt: Optional[str] = None
    content: str = ""
    category: Optional[str] = Field(default=None, max_length=80)
    image_url: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    status: PostStatus = PostStatus.DRAFT
    featured: bool = False
    scheduled_at: Optional[datetime] = None

    @field_validator("scheduled_at")
    @classmethod
    def _naive_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value)


class PostUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    excerpt: Optional[str] = None
    content: Optional[str] = None
    category: Optional[str] = Field(default=None, max_length=80)
    image_url: Optional[str] = None
    tags: Optional[List[str]] = None
    status: Optional[PostStatus] = None
    featured: Optional[bool] = None
    scheduled_at: Optional[datetime] = None

    @field_validator("scheduled_at")
    @classmethod
    def _naive_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value)


class PostSchedule(BaseModel):
    scheduled_at: datetime

    @field_validator("scheduled_at")
    @classmethod
    def _naive_utc(cls, value: datetime) -> datetime:
        return to_naive_utc(value)


class PostRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    excerpt: Optional[str] = None
    content: str
    category: Optional[str] = None
    image_url: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    status: PostStatus
    featured: bool
    author_id: Optional[int] = None
    author_name: str
    publish_date: Optional[datetime] = None
    scheduled_at: Optional[datetime] = None
    view_count: int
    comment_count: int = 0
    created_at: datetime
    updated_at: datetime

    @field_validator("tags", mode="before")
    @classmethod
    def _decode_tags(cls, value: Any) -> Any:
        if isinstance(value, str):
            return json.loads(value) if value else []
        return value or []


class PublishResult(BaseModel):
    published: int


class CommentCreate(BaseModel):
    content: str = Field(min_length=1, max_length=5000)
    author: Optional[str] = Field(default=None, max_length=200, description="Defaults to the signed-in user's name")
    email: Optional[str] = Field(default=None, max_length=255)
    parent_id: Optional[int] = None


class CommentRead(BaseModel):
    """Comment with its reaction counters and, in thread views, its replies."""

    id: int
    post_id: int
    parent_id: Optional[int] = None
    author: str
    content: str
    approved: bool
    created_at: datetime
    reactions: Dict[str, int] = Field(default_factory=dict)
    replies: List[CommentRead] = Field(default_factory=list)


class ReactionRequest(BaseModel):
    type: ReactionType


class ReactionCounts(BaseModel):
    comment_id: int
    reactions: Dict[str, int]
