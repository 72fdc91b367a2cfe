"""
Blog service: posts, scheduled publication, threaded comments and reactions.

Post lifecycle:
- ``draft`` and ``archived`` posts are only visible in the back-office
- ``scheduled`` posts carry a future ``scheduled_at`` and are published by
  ``publish_scheduled_posts`` once it is reached
- ``published`` posts get ``publish_date`` the first time they are published

Comments form a tree through ``parent_id``. Public thread views only show
approved comments; an unapproved comment hides its whole subtree.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from chezflora.core.database.entities.blog import BlogComment, BlogPost, PostStatus, ReactionType
from chezflora.core.database.entities.users import User
from chezflora.core.database.repositories import BlogCommentRepository, BlogPostRepository
from chezflora.core.errors import InvalidOperationError, NotFoundError
from chezflora.core.models.io import CommentCreate, CommentRead, PostCreate
from chezflora.core.monitoring import log_business_event
from chezflora.core.utils import utc_now
from chezflora.server.core.config import settings

logger = logging.getLogger(__name__)

REACTION_TYPES = [r.value for r in ReactionType]
PUBLISHED = PostStatus.PUBLISHED.value
SCHEDULED = PostStatus.SCHEDULED.value


def _is_admin(user: Optional[User]) -> bool:
    return user is not None and user.is_admin


def _require_future(when: Optional[datetime]) -> datetime:
    if when is None or when <= utc_now():
        raise InvalidOperationError("Scheduled posts need a scheduled_at in the future")
    return when


class BlogService:
    """Service for blog posts."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.posts = BlogPostRepository(session)

    async def views(self, posts: List[BlogPost]) -> List[Dict[str, Any]]:
        """Post fields plus their approved comment count, ready for ``PostRead``."""
        counts = await self.posts.approved_comment_counts([p.id for p in posts])
        return [{**p.model_dump(), "comment_count": counts.get(p.id, 0)} for p in posts]

    async def view(self, post: BlogPost) -> Dict[str, Any]:
        return (await self.views([post]))[0]

    async def get_post_admin(self, post_id: int) -> BlogPost:
        post = await self.posts.get_by_id(post_id)
        if post is None:
            raise NotFoundError("Post", post_id)
        return post

    async def get_visible_post(self, post_id: int, viewer: Optional[User] = None) -> BlogPost:
        """A post the viewer may see; unpublished posts are hidden from non-admins."""
        post = await self.posts.get_by_id(post_id)
        if post is None or (post.status != PUBLISHED and not _is_admin(viewer)):
            raise NotFoundError("Post", post_id)
        return post

    async def get_post(self, post_id: int, viewer: Optional[User] = None) -> BlogPost:
        """Read a post for display and count the view."""
        post = await self.get_visible_post(post_id, viewer)
        await self.posts.increment_views(post.id)
        await self.session.commit()
        await self.session.refresh(post)
        return post

    async def create_post(self, author: User, data: PostCreate) -> BlogPost:
        post = BlogPost(
            title=data.title.strip(),
            excerpt=data.excerpt,
            content=data.content,
            category=data.category,
            image_url=data.image_url,
            status=data.status.value,
            featured=data.featured,
            author_id=author.id,
            author_name=author.full_name or author.email,
        )
        post.set_tags(data.tags)
        if post.status == SCHEDULED:
            post.scheduled_at = _require_future(data.scheduled_at)
        elif post.status == PUBLISHED:
            post.publish_date = utc_now()
        post = await self.posts.create(post)
        await self.session.commit()
        logger.info(f"Post {post.id} created by {author.id} as {post.status}")
        return post

    async def update_post(self, post_id: int, fields: Dict[str, Any]) -> BlogPost:
        post = await self.get_post_admin(post_id)
        previous_status = post.status
        new_status = fields.pop("status", None)
        new_status = PostStatus(new_status).value if new_status else previous_status
        scheduled_at = fields.pop("scheduled_at", None)
        tags = fields.pop("tags", None)

        for key, value in fields.items():
            if value is None and key in ("title", "content", "featured"):
                continue
            setattr(post, key, value)
        if tags is not None:
            post.set_tags(tags)

        if new_status == SCHEDULED:
            if scheduled_at is not None or previous_status != SCHEDULED:
                post.scheduled_at = _require_future(scheduled_at or post.scheduled_at)
        else:
            post.scheduled_at = None
        if new_status == PUBLISHED and post.publish_date is None:
            post.publish_date = utc_now()
        post.status = new_status

        post = await self.posts.update(post)
        await self.session.commit()
        if previous_status != new_status:
            logger.info(f"Post {post.id} status {previous_status} -> {new_status}")
        return post

    async def schedule_post(self, post_id: int, when: datetime) -> BlogPost:
        post = await self.get_post_admin(post_id)
        post.scheduled_at = _require_future(when)
        post.status = SCHEDULED
        post = await self.posts.update(post)
        await self.session.commit()
        logger.info(f"Post {post.id} scheduled for {when.isoformat()}")
        return post

    async def delete_post(self, post_id: int) -> None:
        post = await self.get_post_admin(post_id)
        await BlogCommentRepository(self.session).delete_for_post(post.id)
        await self.session.delete(post)
        await self.session.commit()
        logger.info(f"Deleted post {post_id} with its comments")

    async def publish_scheduled_posts(self, now: Optional[datetime] = None) -> int:
        """Publish every scheduled post whose time has come; returns how many were published."""
        now = now or utc_now()
        due = await self.posts.due_scheduled(now)
        for post in due:
            post.status = PUBLISHED
            if post.publish_date is None:
                post.publish_date = post.scheduled_at
            post.scheduled_at = None
            post.updated_at = now
            self.session.add(post)
        if due:
            await self.session.commit()
            logger.info(f"Published {len(due)} scheduled post(s)")
            log_business_event("blog.scheduled_published", count=len(due))
        return len(due)

    async def list_posts(
        self,
        category: Optional[str] = None,
        tag: Optional[str] = None,
        q: Optional[str] = None,
        sort: str = "date",
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[BlogPost]:
        return await self.posts.search(
            status=PUBLISHED, category=category, tag=tag, q=q, sort=sort, limit=limit, offset=offset
        )

    async def list_all_posts(
        self, status: Optional[str] = None, limit: Optional[int] = None, offset: Optional[int] = None
    ) -> List[BlogPost]:
        return await self.posts.search(status=status, limit=limit, offset=offset)

    async def recent_posts(self, count: int = 3) -> List[BlogPost]:
        return await self.posts.search(status=PUBLISHED, sort="date", limit=count)

    async def popular_posts(self, count: int = 3) -> List[BlogPost]:
        return await self.posts.search(status=PUBLISHED, sort="views", limit=count)

    async def featured_posts(self, count: int = 3) -> List[BlogPost]:
        return await self.posts.search(status=PUBLISHED, featured=True, sort="date", limit=count)

    async def blog_tags(self) -> List[str]:
        """Distinct lowercase tags of published posts, sorted."""
        tags = set()
        for raw in await self.posts.published_tag_lists():
            tags.update(tag.lower() for tag in json.loads(raw or "[]"))
        return sorted(tags)

    async def blog_categories(self) -> List[str]:
        return await self.posts.published_categories()


class CommentService:
    """Service for threaded comments and their reaction counters."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.comments = BlogCommentRepository(session)
        self.blog = BlogService(session)

    async def _get_comment(self, comment_id: int) -> BlogComment:
        comment = await self.comments.get_by_id(comment_id)
        if comment is None:
            raise NotFoundError("Comment", comment_id)
        return comment

    async def _read(self, comments: List[BlogComment]) -> List[CommentRead]:
        counters = await self.comments.reactions([c.id for c in comments])
        return [
            CommentRead(
                id=c.id,
                post_id=c.post_id,
                parent_id=c.parent_id,
                author=c.author,
                content=c.content,
                approved=c.approved,
                created_at=c.created_at,
                reactions={t: counters.get(c.id, {}).get(t, 0) for t in REACTION_TYPES},
            )
            for c in comments
        ]

    async def add_comment(self, post_id: int, data: CommentCreate, user: Optional[User] = None) -> CommentRead:
        """
        Add a comment or a reply.

        Raises:
            NotFoundError: Unknown post or parent, or a post the caller cannot see
            InvalidOperationError: Parent on another post, or no author name
        """
        post = await self.blog.get_visible_post(post_id, user)
        if data.parent_id is not None:
            parent = await self._get_comment(data.parent_id)
            if parent.post_id != post.id:
                raise InvalidOperationError("Parent comment belongs to another post")

        author = (data.author or "").strip() or (user.full_name if user else "")
        if not author:
            raise InvalidOperationError("Author name is required")

        approved = not settings.blog.comments_need_approval or _is_admin(user)
        comment = await self.comments.create(
            BlogComment(
                post_id=post.id,
                parent_id=data.parent_id,
                user_id=user.id if user else None,
                author=author,
                email=data.email or (user.email if user else None),
                content=data.content.strip(),
                approved=approved,
            )
        )
        await self.comments.init_reactions(comment.id, REACTION_TYPES)
        await self.session.commit()
        logger.debug(f"Comment {comment.id} added to post {post.id} (approved={approved})")
        return (await self._read([comment]))[0]

    async def list_comments(
        self, post_id: int, only_approved: bool = True, viewer: Optional[User] = None
    ) -> List[CommentRead]:
        """Thread tree of a post; top-level comments and replies oldest first."""
        await self.blog.get_visible_post(post_id, viewer)
        if not _is_admin(viewer):
            only_approved = True

        nodes = await self._read(await self.comments.for_post(post_id))
        children: Dict[Optional[int], List[CommentRead]] = {}
        for node in nodes:
            children.setdefault(node.parent_id, []).append(node)

        def attach(node: CommentRead) -> Optional[CommentRead]:
            if only_approved and not node.approved:
                return None
            node.replies = [r for r in (attach(child) for child in children.get(node.id, [])) if r is not None]
            return node

        return [n for n in (attach(root) for root in children.get(None, [])) if n is not None]

    async def pending_comments(self) -> List[CommentRead]:
        return await self._read(await self.comments.pending())

    async def approve_comment(self, comment_id: int) -> CommentRead:
        comment = await self._get_comment(comment_id)
        comment.approved = True
        self.session.add(comment)
        await self.session.commit()
        return (await self._read([comment]))[0]

    async def delete_comment(self, comment_id: int) -> int:
        """Delete a comment and all of its replies; returns how many were removed."""
        comment = await self._get_comment(comment_id)
        children: Dict[Optional[int], List[int]] = {}
        for c in await self.comments.for_post(comment.post_id):
            children.setdefault(c.parent_id, []).append(c.id)
        doomed = []
        stack = [comment.id]
        while stack:
            current = stack.pop()
            doomed.append(current)
            stack.extend(children.get(current, []))
        await self.comments.delete_many(doomed)
        await self.session.commit()
        logger.info(f"Deleted comment {comment_id} and {len(doomed) - 1} repl(ies)")
        return len(doomed)

    async def react(self, comment_id: int, reaction_type: str) -> Dict[str, int]:
        """Increment one reaction counter in the database and return all counters."""
        if reaction_type not in REACTION_TYPES:
            raise InvalidOperationError(f"Unknown reaction type '{reaction_type}'")
        comment = await self._get_comment(comment_id)
        if not await self.comments.increment_reaction(comment.id, reaction_type):
            await self.comments.init_reactions(comment.id, [reaction_type])
            await self.comments.increment_reaction(comment.id, reaction_type)
        await self.session.commit()
        return (await self._read([comment]))[0].reactions
