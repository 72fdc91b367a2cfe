"""
Blog Endpoints.

Published posts, threaded comments and reactions are public. Writing posts,
moderating comments and the scheduled-publication trigger need an admin.
"""

from __future__ import annotations

from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from chezflora.core.database import get_session
from chezflora.core.database.entities.blog import PostStatus
from chezflora.core.models.io import (
    CommentCreate,
    CommentRead,
    PostCreate,
    PostRead,
    PostSchedule,
    PostUpdate,
    PublishResult,
    ReactionCounts,
    ReactionRequest,
)
from chezflora.server.services.blog import BlogService, CommentService
from chezflora.server.services.deps import AdminDep, OptionalUserDep

router = APIRouter(tags=["blog"])

PostSort = Literal["date", "title", "views", "comments"]


# =====================================================================
# Posts
# =====================================================================


@router.get(
    "/posts",
    response_model=List[PostRead],
    summary="List Posts",
    description="Published posts filtered by category, tag or a text query.",
)
async def list_posts(
    category: Optional[str] = None,
    tag: Optional[str] = None,
    q: Optional[str] = None,
    sort: PostSort = "date",
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    session: AsyncSession = Depends(get_session),
) -> List[PostRead]:
    service = BlogService(session)
    posts = await service.list_posts(category=category, tag=tag, q=q, sort=sort, limit=limit, offset=offset)
    return [PostRead.model_validate(p) for p in await service.views(posts)]


@router.get("/posts/recent", response_model=List[PostRead], summary="Recent Posts")
async def recent_posts(
    count: int = Query(default=3, ge=1, le=20),
    session: AsyncSession = Depends(get_session),
) -> List[PostRead]:
    service = BlogService(session)
    return [PostRead.model_validate(p) for p in await service.views(await service.recent_posts(count))]


@router.get("/posts/popular", response_model=List[PostRead], summary="Popular Posts")
async def popular_posts(
    count: int = Query(default=3, ge=1, le=20),
    session: AsyncSession = Depends(get_session),
) -> List[PostRead]:
    service = BlogService(session)
    return [PostRead.model_validate(p) for p in await service.views(await service.popular_posts(count))]


@router.get("/posts/featured", response_model=List[PostRead], summary="Featured Posts")
async def featured_posts(
    count: int = Query(default=3, ge=1, le=20),
    session: AsyncSession = Depends(get_session),
) -> List[PostRead]:
    service = BlogService(session)
    return [PostRead.model_validate(p) for p in await service.views(await service.featured_posts(count))]


@router.get(
    "/posts/{post_id}",
    response_model=PostRead,
    summary="Get Post",
    description="Read a post and count the view. Unpublished posts are only visible to admins.",
    responses={404: {"description": "Post not found"}},
)
async def get_post(post_id: int, viewer: OptionalUserDep, session: AsyncSession = Depends(get_session)) -> PostRead:
    service = BlogService(session)
    return PostRead.model_validate(await service.view(await service.get_post(post_id, viewer)))


@router.get("/tags", response_model=List[str], summary="Blog Tags")
async def blog_tags(session: AsyncSession = Depends(get_session)) -> List[str]:
    return await BlogService(session).blog_tags()


@router.get("/categories", response_model=List[str], summary="Blog Categories")
async def blog_categories(session: AsyncSession = Depends(get_session)) -> List[str]:
    return await BlogService(session).blog_categories()


@router.post(
    "/posts",
    response_model=PostRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Post",
    responses={400: {"description": "Scheduled post without a future scheduled_at"}},
)
async def create_post(payload: PostCreate, admin: AdminDep, session: AsyncSession = Depends(get_session)) -> PostRead:
    service = BlogService(session)
    return PostRead.model_validate(await service.view(await service.create_post(admin, payload)))


@router.patch("/posts/{post_id}", response_model=PostRead, summary="Update Post")
async def update_post(
    post_id: int,
    payload: PostUpdate,
    admin: AdminDep,
    session: AsyncSession = Depends(get_session),
) -> PostRead:
    service = BlogService(session)
    post = await service.update_post(post_id, payload.model_dump(exclude_unset=True))
    return PostRead.model_validate(await service.view(post))


@router.post(
    "/posts/{post_id}/schedule",
    response_model=PostRead,
    summary="Schedule Post",
    responses={400: {"description": "Time is not in the future"}},
)
async def schedule_post(
    post_id: int,
    payload: PostSchedule,
    admin: AdminDep,
    session: AsyncSession = Depends(get_session),
) -> PostRead:
    service = BlogService(session)
    return PostRead.model_validate(await service.view(await service.schedule_post(post_id, payload.scheduled_at)))


@router.delete(
    "/posts/{post_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Post",
    description="Delete a post with its comments and reactions.",
)
async def delete_post(post_id: int, admin: AdminDep, session: AsyncSession = Depends(get_session)) -> Response:
    await BlogService(session).delete_post(post_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/admin/posts", response_model=List[PostRead], summary="All Posts")
async def list_all_posts(
    admin: AdminDep,
    post_status: Optional[PostStatus] = Query(default=None, alias="status"),
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    session: AsyncSession = Depends(get_session),
) -> List[PostRead]:
    service = BlogService(session)
    posts = await service.list_all_posts(
        status=post_status.value if post_status else None, limit=limit, offset=offset
    )
    return [PostRead.model_validate(p) for p in await service.views(posts)]


@router.get("/admin/posts/{post_id}", response_model=PostRead, summary="Get Post (Admin)")
async def get_post_admin(post_id: int, admin: AdminDep, session: AsyncSession = Depends(get_session)) -> PostRead:
    service = BlogService(session)
    return PostRead.model_validate(await service.view(await service.get_post_admin(post_id)))


@router.post(
    "/admin/publish-scheduled",
    response_model=PublishResult,
    summary="Publish Scheduled Posts",
    description="Publish every scheduled post whose time has come. Also run periodically by the scheduler.",
)
async def publish_scheduled(admin: AdminDep, session: AsyncSession = Depends(get_session)) -> PublishResult:
    return PublishResult(published=await BlogService(session).publish_scheduled_posts())


# =====================================================================
# Comments
# =====================================================================


@router.get(
    "/posts/{post_id}/comments",
    response_model=List[CommentRead],
    summary="List Comments",
    description="Thread tree of a post. Only admins may ask for unapproved comments.",
)
async def list_comments(
    post_id: int,
    viewer: OptionalUserDep,
    only_approved: bool = True,
    session: AsyncSession = Depends(get_session),
) -> List[CommentRead]:
    return await CommentService(session).list_comments(post_id, only_approved=only_approved, viewer=viewer)


@router.post(
    "/posts/{post_id}/comments",
    response_model=CommentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add Comment",
    description="Comment on a post or reply to a comment. New comments wait for moderation unless written by an admin.",
    responses={400: {"description": "Parent belongs to another post or author missing"}},
)
async def add_comment(
    post_id: int,
    payload: CommentCreate,
    viewer: OptionalUserDep,
    session: AsyncSession = Depends(get_session),
) -> CommentRead:
    return await CommentService(session).add_comment(post_id, payload, viewer)


@router.post(
    "/comments/{comment_id}/reactions",
    response_model=ReactionCounts,
    summary="React To Comment",
)
async def react(
    comment_id: int,
    payload: ReactionRequest,
    session: AsyncSession = Depends(get_session),
) -> ReactionCounts:
    reactions = await CommentService(session).react(comment_id, payload.type.value)
    return ReactionCounts(comment_id=comment_id, reactions=reactions)


@router.get("/admin/comments/pending", response_model=List[CommentRead], summary="Pending Comments")
async def pending_comments(admin: AdminDep, session: AsyncSession = Depends(get_session)) -> List[CommentRead]:
    return await CommentService(session).pending_comments()


@router.post("/comments/{comment_id}/approve", response_model=CommentRead, summary="Approve Comment")
async def approve_comment(comment_id: int, admin: AdminDep, session: AsyncSession = Depends(get_session)) -> CommentRead:
    return await CommentService(session).approve_comment(comment_id)


@router.delete(
    "/comments/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Comment",
    description="Delete a comment together with all of its replies.",
)
async def delete_comment(comment_id: int, admin: AdminDep, session: AsyncSession = Depends(get_session)) -> Response:
    await CommentService(session).delete_comment(comment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
