"""
Blog repositories: posts, comments and reaction counters.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from sqlalchemy import delete, func, or_, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.blog import BlogComment, BlogPost, CommentReaction, PostStatus
from .base import AsyncBaseRepository, QueryBuilder


def _approved_count_subquery():
    return (
        select(func.count(BlogComment.id))
        .where(BlogComment.post_id == BlogPost.id, BlogComment.approved.is_(True))
        .correlate(BlogPost)
        .scalar_subquery()
    )


class BlogPostRepository(AsyncBaseRepository[BlogPost]):
    """Repository for blog posts."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, BlogPost)

    async def search(
        self,
        status: Optional[str] = None,
        category: Optional[str] = None,
        tag: Optional[str] = None,
        q: Optional[str] = None,
        featured: Optional[bool] = None,
        sort: str = "date",
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[BlogPost]:
        """Filtered post listing.

        ``sort`` is one of ``date`` (publish date, newest first), ``title``,
        ``views`` or ``comments`` (approved comment count).
        """
        stmt = QueryBuilder.apply_filters(
            select(BlogPost), BlogPost, {"status": status, "category": category, "featured": featured}
        )
        if tag:
            # Tags are stored as a JSON list of lowercase strings; match one whole element
            token = json.dumps(tag.strip().lower(), ensure_ascii=False)
            stmt = stmt.where(BlogPost.tags.like(QueryBuilder.contains_pattern(token), escape="\\"))
        if q:
            pattern = QueryBuilder.contains_pattern(q.strip().lower())
            stmt = stmt.where(
                or_(
                    BlogPost.title.ilike(pattern, escape="\\"),
                    BlogPost.excerpt.ilike(pattern, escape="\\"),
                    BlogPost.content.ilike(pattern, escape="\\"),
                )
            )
        if sort == "title":
            stmt = stmt.order_by(BlogPost.title.asc(), BlogPost.id)
        elif sort == "views":
            stmt = stmt.order_by(BlogPost.view_count.desc(), BlogPost.id.desc())
        elif sort == "comments":
            stmt = stmt.order_by(_approved_count_subquery().desc(), BlogPost.id.desc())
        else:
            stmt = stmt.order_by(
                func.coalesce(BlogPost.publish_date, BlogPost.created_at).desc(), BlogPost.id.desc()
            )
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def due_scheduled(self, now: datetime) -> List[BlogPost]:
        stmt = select(BlogPost).where(
            BlogPost.status == PostStatus.SCHEDULED.value,
            BlogPost.scheduled_at.is_not(None),
            BlogPost.scheduled_at <= now,
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def increment_views(self, post_id: int) -> None:
        await self.session.execute(
            update(BlogPost).where(BlogPost.id == post_id).values(view_count=BlogPost.view_count + 1)
        )

    async def detach_author(self, user_id: int) -> None:
        await self.session.execute(update(BlogPost).where(BlogPost.author_id == user_id).values(author_id=None))

    async def published_tag_lists(self) -> List[str]:
        stmt = select(BlogPost.tags).where(BlogPost.status == PostStatus.PUBLISHED.value)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def published_categories(self) -> List[str]:
        stmt = (
            select(BlogPost.category)
            .where(BlogPost.status == PostStatus.PUBLISHED.value, BlogPost.category.is_not(None))
            .distinct()
            .order_by(BlogPost.category)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def approved_comment_counts(self, post_ids: Sequence[int]) -> Dict[int, int]:
        if not post_ids:
            return {}
        stmt = (
            select(BlogComment.post_id, func.count(BlogComment.id))
            .where(BlogComment.post_id.in_(list(post_ids)), BlogComment.approved.is_(True))
            .group_by(BlogComment.post_id)
        )
        result = await self.session.execute(stmt)
        return {post_id: count for post_id, count in result.all()}


class BlogCommentRepository(AsyncBaseRepository[BlogComment]):
    """Repository for comments and their reaction counters."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, BlogComment)

    async def for_post(self, post_id: int) -> List[BlogComment]:
        """All comments of a post, oldest first."""
        stmt = (
            select(BlogComment)
            .where(BlogComment.post_id == post_id)
            .order_by(BlogComment.created_at, BlogComment.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def pending(self) -> List[BlogComment]:
        stmt = (
            select(BlogComment)
            .where(BlogComment.approved.is_(False))
            .order_by(BlogComment.created_at, BlogComment.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def reactions(self, comment_ids: Sequence[int]) -> Dict[int, Dict[str, int]]:
        """Reaction counters keyed by comment id, then reaction type."""
        if not comment_ids:
            return {}
        stmt = (
            select(CommentReaction)
            .where(CommentReaction.comment_id.in_(list(comment_ids)))
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        counters: Dict[int, Dict[str, int]] = {}
        for reaction in result.scalars().all():
            counters.setdefault(reaction.comment_id, {})[reaction.type] = reaction.count
        return counters

    async def init_reactions(self, comment_id: int, types: Sequence[str]) -> None:
        self.session.add_all([CommentReaction(comment_id=comment_id, type=t, count=0) for t in types])
        await self.session.flush()

    async def increment_reaction(self, comment_id: int, reaction_type: str) -> int:
        """Atomically add one to a counter; returns the number of rows touched."""
        result = await self.session.execute(
            update(CommentReaction)
            .where(CommentReaction.comment_id == comment_id, CommentReaction.type == reaction_type)
            .values(count=CommentReaction.count + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def delete_many(self, comment_ids: Sequence[int]) -> None:
        ids = list(comment_ids)
        if not ids:
            return
        await self.session.execute(delete(CommentReaction).where(CommentReaction.comment_id.in_(ids)))
        await self.session.execute(
            delete(BlogComment).where(BlogComment.id.in_(ids)).execution_options(synchronize_session=False)
        )

    async def delete_for_post(self, post_id: int) -> None:
        ids = [c.id for c in await self.for_post(post_id)]
        await self.delete_many(ids)
