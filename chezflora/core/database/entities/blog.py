"""
Blog entity models.

Posts move through draft, scheduled, published and archived. Comments form
a tree through ``parent_id``; each comment owns one reaction counter row per
reaction type.
"""

from __future__ import annotations

import json
from datetime import datetime
from enum import Enum
from typing import List, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from chezflora.core.utils import utc_now

from ..base import Base, TimestampField


class PostStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    SCHEDULED = "scheduled"
    ARCHIVED = "archived"


class ReactionType(str, Enum):
    LIKE = "like"
    LOVE = "love"
    LAUGH = "laugh"


class BlogPost(Base, table=True):
    """Blog article.

    Table: blog_posts
    """

    __tablename__ = "blog_posts"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(max_length=200)
    excerpt: Optional[str] = Field(default=None)
    content: str = Field(default="")
    category: Optional[str] = Field(default=None, max_length=80, index=True)
    image_url: Optional[str] = Field(default=None)
    tags: str = Field(default="[]", description="JSON-encoded list of lowercase tags")

    status: str = Field(default=PostStatus.DRAFT.value, max_length=20, index=True)
    featured: bool = Field(default=False)
    author_id: Optional[int] = Field(default=None, foreign_key="users.id", ondelete="SET NULL")
    author_name: str = Field(default="", max_length=200)

    publish_date: Optional[datetime] = TimestampField(default=None, index=True)
    scheduled_at: Optional[datetime] = TimestampField(default=None, index=True)
    view_count: int = Field(default=0)

    created_at: datetime = TimestampField(default_factory=utc_now)
    updated_at: datetime = TimestampField(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def set_tags(self, value: Optional[List[str]]) -> None:
        seen: List[str] = []
        for tag in value or []:
            tag = tag.strip().lower()
            if tag and tag not in seen:
                seen.append(tag)
        self.tags = json.dumps(seen, ensure_ascii=False)

    def __repr__(self) -> str:
        return f"BlogPost(id={self.id}, title={self.title}, status={self.status})"


class BlogComment(Base, table=True):
    """Comment on a post, optionally replying to another comment.

    Table: blog_comments
    """

    __tablename__ = "blog_comments"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    post_id: int = Field(foreign_key="blog_posts.id", index=True, ondelete="CASCADE")
    parent_id: Optional[int] = Field(default=None, foreign_key="blog_comments.id", index=True, ondelete="CASCADE")
    user_id: Optional[int] = Field(default=None)
    author: str = Field(max_length=200)
    email: Optional[str] = Field(default=None, max_length=255)
    content: str
    approved: bool = Field(default=False, index=True)
    created_at: datetime = TimestampField(default_factory=utc_now, index=True)


class CommentReaction(Base, table=True):
    """Counter of one reaction type on one comment.

    Table: comment_reactions
    """

    __tablename__ = "comment_reactions"
    __table_args__ = (
        UniqueConstraint("comment_id", "type", name="uq_comment_reactions_comment_type"),
        {"extend_existing": True},
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    comment_id: int = Field(foreign_key="blog_comments.id", index=True, ondelete="CASCADE")
    type: str = Field(max_length=20)
    count: int = Field(default=0)
