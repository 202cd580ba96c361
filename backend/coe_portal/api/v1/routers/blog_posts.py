# coe_portal/api/v1/routers/blog_posts.py
"""
Public blog: post CRUD plus the lazily expanded comment threads.
"""
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status

from coe_portal.api.v1.deps import get_optional_user, require_approved
from coe_portal.models.user import User
from coe_portal.schemas.blog import CommentCreateIn, PostCreateIn, PostUpdateIn
from coe_portal.services import posts as post_service
from coe_portal.services import threads

router = APIRouter(prefix="/blog-posts", tags=["blog"])

PUBLISHED_FILTER = {"true": True, "false": False, "all": None}


@router.get("")
async def list_posts(
    search: Optional[str] = Query(default=None, description="Case-insensitive match on title or content"),
    authorName: Optional[str] = Query(default=None),
    published: Literal["true", "false", "all"] = Query(default="true"),
    offset: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    viewer: Optional[User] = Depends(get_optional_user),
):
    """
    List posts, newest first.

    Anonymous callers only ever get published posts. Admins get exactly the
    requested `published` state; a signed-in user also sees their own
    drafts when filtering on their own authorName.
    """
    total, rows = await post_service.list_posts(
        viewer,
        offset=offset,
        limit=limit,
        search=search or None,
        author_name=authorName or None,
        published=PUBLISHED_FILTER[published],
    )
    return {
        "success": True,
        "data": {
            "items": [post_service.post_to_dict(p) for p in rows],
            "offset": offset,
            "limit": limit,
            "total": total,
        },
    }


@router.get("/{post_id}")
async def get_post(post_id: int, viewer: Optional[User] = Depends(get_optional_user)):
    """Post detail with its visible top-level comments attached."""
    post = await post_service.get_visible_post(post_id, viewer)
    top_level = await threads.list_top_level(post.id)
    data = post_service.post_to_dict(post)
    data["comments"] = await threads.with_reply_counts(post.id, top_level)
    return {"success": True, "data": data}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_post(body: PostCreateIn, user: User = Depends(require_approved)):
    post = await post_service.create_post(
        user,
        title=body.title,
        content=body.content,
        excerpt=body.excerpt,
        image_urls=body.imageUrls,
        video_urls=body.videoUrls,
        author_name=body.authorName,
        is_published=body.isPublished,
        is_ai_generated=body.isAiGenerated,
    )
    return {"success": True, "data": post_service.post_to_dict(post)}


@router.patch("/{post_id}")
async def update_post(post_id: int, body: PostUpdateIn, user: User = Depends(require_approved)):
    """Partial update; only the owner or an admin may edit."""
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    post = await post_service.update_post(post_id, user, changes)
    return {"success": True, "data": post_service.post_to_dict(post)}


@router.delete("/{post_id}")
async def delete_post(post_id: int, user: User = Depends(require_approved)):
    await post_service.delete_post(post_id, user)
    return {"success": True, "data": {"ok": True}}


# ------------------------------------------------------------------------------
# Comments
# ------------------------------------------------------------------------------
@router.get("/{post_id}/comments")
async def list_comments(post_id: int, viewer: Optional[User] = Depends(get_optional_user)):
    """Top-level comments only; replies are fetched per comment."""
    post = await post_service.get_visible_post(post_id, viewer)
    top_level = await threads.list_top_level(post.id)
    return {"success": True, "data": await threads.with_reply_counts(post.id, top_level)}


@router.get("/{post_id}/comments/{comment_id}/replies")
async def list_replies(post_id: int, comment_id: int, viewer: Optional[User] = Depends(get_optional_user)):
    post = await post_service.get_visible_post(post_id, viewer)
    replies = await threads.list_replies(post.id, comment_id)
    return {"success": True, "data": await threads.with_reply_counts(post.id, replies)}


@router.post("/{post_id}/comments", status_code=status.HTTP_201_CREATED)
async def create_comment(post_id: int, body: CommentCreateIn, viewer: Optional[User] = Depends(get_optional_user)):
    """
    Anyone may comment on a post they can see. parentId makes it a reply;
    the parent must exist on the same post.
    """
    post = await post_service.get_visible_post(post_id, viewer)
    comment = await threads.create_comment(post.id, body.authorName, body.content, parent_id=body.parentId)
    return {"success": True, "data": threads.comment_to_dict(comment, reply_count=0)}
