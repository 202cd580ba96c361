"""
Blog Post Lifecycle

Draft/published states, author attribution and media URL association.
Visibility and ownership rules come from `core.policy`; this module only
applies them.
"""
import logging
from typing import List, Optional

from tortoise.expressions import Q

from ..core import policy
from ..core.errors import Forbidden, NotFound
from ..models.blog_post import BlogPost
from ..models.user import User

logger = logging.getLogger(__name__)

EXCERPT_LENGTH = 200

# Fields a PATCH may touch, mapped from API names to model attributes
UPDATABLE_FIELDS = {
    "title": "title",
    "content": "content",
    "excerpt": "excerpt",
    "imageUrls": "image_urls",
    "videoUrls": "video_urls",
    "authorName": "author_name",
    "isPublished": "is_published",
    "isAiGenerated": "is_ai_generated",
}


def post_to_dict(p: BlogPost) -> dict:
    return {
        "id": p.id,
        "title": p.title,
        "content": p.content,
        "excerpt": p.excerpt,
        "imageUrls": list(p.image_urls or []),
        "videoUrls": list(p.video_urls or []),
        "authorName": p.author_name,
        "authorId": p.author_id,
        "isPublished": p.is_published,
        "isAiGenerated": p.is_ai_generated,
        "createdAt": p.created_at.isoformat() if p.created_at else None,
        "updatedAt": p.updated_at.isoformat() if p.updated_at else None,
    }


def derive_excerpt(content: str) -> str:
    text = " ".join(content.split())
    if len(text) <= EXCERPT_LENGTH:
        return text
    return text[: EXCERPT_LENGTH - 3].rstrip() + "..."


def visible_posts_query(
    viewer: Optional[User],
    *,
    search: Optional[str] = None,
    author_name: Optional[str] = None,
    published: Optional[bool] = True,
):
    """
    Build the listing queryset for a viewer.

    published=True/False filters on state, None means both. Only viewers
    with the view_drafts capability get the requested state as-is. Anyone
    else sees published posts, plus their own drafts when they filter on
    their own author name.
    """
    qs = BlogPost.all()

    if policy.has_capability(viewer, policy.VIEW_DRAFTS):
        if published is not None:
            qs = qs.filter(is_published=published)
    elif viewer is not None and author_name is not None and author_name == viewer.username:
        own = Q(author_id=viewer.id) | Q(author_id__isnull=True, author_name=viewer.username)
        if published is None:
            qs = qs.filter(Q(is_published=True) | own)
        elif published:
            qs = qs.filter(is_published=True)
        else:
            qs = qs.filter(own, is_published=False)
    else:
        qs = qs.filter(is_published=True)

    if author_name:
        qs = qs.filter(author_name=author_name)
    if search:
        qs = qs.filter(Q(title__icontains=search) | Q(content__icontains=search))
    return qs.order_by("-created_at", "-id")


async def _account_for_name(name: str) -> Optional[User]:
    """Account whose username equals an attributed author name, if any."""
    return await User.get_or_none(username=name)


async def list_posts(viewer: Optional[User], *, offset: int = 0, limit: int = 50, **filters) -> tuple[int, List[BlogPost]]:
    qs = visible_posts_query(viewer, **filters)
    total = await qs.count()
    rows = await qs.offset(offset).limit(limit)
    return total, rows


async def get_visible_post(post_id: int, viewer: Optional[User]) -> BlogPost:
    """Drafts the viewer may not see are reported as missing, not forbidden."""
    post = await BlogPost.get_or_none(id=post_id)
    if post is None or not policy.can_view_post(viewer, post):
        raise NotFound("POST_NOT_FOUND", "Blog post not found")
    return post


async def create_post(
    author: User,
    *,
    title: str,
    content: str,
    excerpt: Optional[str] = None,
    image_urls: Optional[List[str]] = None,
    video_urls: Optional[List[str]] = None,
    author_name: Optional[str] = None,
    is_published: bool = False,
    is_ai_generated: bool = False,
) -> BlogPost:
    """
    Create a post owned by `author`. Only accounts that may manage any post
    (admins) can attribute it to a different display name.
    """
    if not policy.can_author_posts(author):
        raise Forbidden("ACCOUNT_NOT_APPROVED", "Your account has not been approved yet")

    display_name = author.username
    owner: Optional[User] = author
    if author_name and author_name != author.username and policy.has_capability(author, policy.MANAGE_ANY_POST):
        display_name = author_name
        owner = await _account_for_name(author_name)

    post = await BlogPost.create(
        title=title,
        content=content,
        excerpt=excerpt or derive_excerpt(content),
        image_urls=list(image_urls or []),
        video_urls=list(video_urls or []),
        author_name=display_name,
        author=owner,
        is_published=is_published,
        is_ai_generated=is_ai_generated,
    )
    logger.info("Post %s created by %s (published=%s)", post.id, author.username, post.is_published)
    return post


async def update_post(post_id: int, actor: User, changes: dict) -> BlogPost:
    """
    Apply a partial update given in API field names. updated_at is
    refreshed even when nothing but metadata changes.

    An excerpt that was derived from the old content follows new content;
    a hand-written one is kept until the caller replaces it.
    """
    post = await BlogPost.get_or_none(id=post_id)
    if post is None:
        raise NotFound("POST_NOT_FOUND", "Blog post not found")
    if not policy.can_modify_post(actor, post):
        raise Forbidden("FORBIDDEN_NOT_OWNER", "Only the author or an admin can edit this post")

    excerpt_was_derived = post.excerpt == derive_excerpt(post.content)

    for api_name, value in changes.items():
        attr = UPDATABLE_FIELDS.get(api_name)
        if attr is None:
            continue
        if attr == "author_name":
            if not policy.has_capability(actor, policy.MANAGE_ANY_POST) or value == post.author_name:
                continue
            owner = await _account_for_name(value)
            post.author_id = owner.id if owner else None
        if attr in ("image_urls", "video_urls"):
            value = list(value or [])
        setattr(post, attr, value)

    if "content" in changes and "excerpt" not in changes and excerpt_was_derived:
        post.excerpt = derive_excerpt(post.content)

    await post.save()
    return post


async def delete_post(post_id: int, actor: User) -> None:
    post = await BlogPost.get_or_none(id=post_id)
    if post is None:
        raise NotFound("POST_NOT_FOUND", "Blog post not found")
    if not policy.can_modify_post(actor, post):
        raise Forbidden("FORBIDDEN_NOT_OWNER", "Only the author or an admin can delete this post")
    await post.delete()
    logger.info("Post %s deleted by %s", post_id, actor.username)
