# coe_portal/api/v1/routers/admin.py
from __future__ import annotations

import logging
from typing import Literal, Optional

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    status,
)
from tortoise.expressions import Q

from coe_portal.api.v1.deps import require_admin
from coe_portal.core import policy
from coe_portal.models.user import User
from coe_portal.schemas.admin import (
    AdminUserListOut,
    AdminUserDetailOut,
    CommentModerateIn,
)
from coe_portal.services import posts as post_service
from coe_portal.services import threads

router = APIRouter(prefix="/admin", tags=["admin"])
logger = logging.getLogger(__name__)


# ==============================================================================
# I. User Management Interface
#     Prefix: /api/v1/admin/users
# ==============================================================================
def _user_to_dict(u: User) -> dict:
    """
    Convert User model instance to dictionary format for API responses.
    """
    return {
        "id": u.id,
        "username": u.username,
        "role": u.role,
        "isApproved": u.is_approved,
        "isProtected": policy.is_protected_account(u),
        "createdAt": u.created_at.isoformat() if u.created_at else None,
    }


async def _count_admins() -> int:
    """
    Count the total number of admin users in the system.

    Note:
        Used to prevent deleting the last admin user.
    """
    return await User.filter(role="admin").count()


@router.get(
    "/users",
    response_model=AdminUserListOut,
    dependencies=[Depends(require_admin)],
)
async def list_users(
    q: str | None = Query(default=None, description="Fuzzy search by username"),
    approved: Optional[bool] = Query(default=None, description="Filter on the approval flag"),
    offset: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
):
    """
    Get paginated list of all users (admin only).

    Results are ordered by creation date (newest first). `approved=false`
    gives the pending-approval queue.
    """
    qs = User.all().order_by("-created_at", "-id")
    if q:
        qs = qs.filter(Q(username__icontains=q))
    if approved is not None:
        qs = qs.filter(is_approved=approved)

    total = await qs.count()
    rows = await qs.offset(offset).limit(limit)
    items = [_user_to_dict(u) for u in rows]

    return {"items": items, "offset": offset, "limit": limit, "total": total}


@router.put(
    "/users/{user_id}/approve",
    response_model=AdminUserDetailOut,
)
async def approve_user(user_id: int, current_admin: User = Depends(require_admin)):
    """
    Approve a pending account so it can sign in and author content.
    Approving an already approved account is a no-op.

    Raises:
        HTTPException (404): If user not found
    """
    u = await User.get_or_none(id=user_id)
    if not u:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="USER_NOT_FOUND")
    if not u.is_approved:
        u.is_approved = True
        await u.save()
        logger.info("User %s approved by %s", u.username, current_admin.username)
    return {"user": _user_to_dict(u)}


@router.delete("/users/{user_id}")
async def delete_user(
    user_id: int,
    current_admin: User = Depends(require_admin),
):
    """
    Delete a user account (admin only).

    Their posts stay (author link cleared, display name kept) and any
    staff profile becomes unlinked.

    Raises:
        HTTPException (404): If user not found
        HTTPException (400): CANNOT_DELETE_SELF / LAST_ADMIN_FORBIDDEN
        HTTPException (403): PROTECTED_ACCOUNT for the bootstrap admin
    """
    u = await User.get_or_none(id=user_id)
    if not u:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="USER_NOT_FOUND")

    if policy.is_protected_account(u):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"code": "PROTECTED_ACCOUNT", "message": "The default admin account cannot be deleted"},
        )

    # Cannot delete self
    if current_admin.id == u.id:
        raise HTTPException(
            status_code=400,
            detail={"code": "CANNOT_DELETE_SELF", "message": "Cannot delete yourself"},
        )

    # Cannot delete last admin
    if u.role == "admin":
        admin_count = await _count_admins()
        if admin_count <= 1:
            raise HTTPException(
                status_code=400,
                detail={"code": "LAST_ADMIN_FORBIDDEN", "message": "Cannot delete the last admin"},
            )

    await u.delete()
    logger.info("User %s deleted by %s", u.username, current_admin.username)
    return {"success": True, "data": {"ok": True}}


# ==============================================================================
# II. Content Management Interface
#     Prefix: /api/v1/admin/blog-posts, /api/v1/admin/comments
# ==============================================================================
@router.get("/blog-posts")
async def list_all_posts(
    search: Optional[str] = Query(default=None),
    authorName: Optional[str] = Query(default=None),
    published: Literal["true", "false", "all"] = Query(default="all"),
    offset: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    admin: User = Depends(require_admin),
):
    """Every post, drafts included unless filtered."""
    total, rows = await post_service.list_posts(
        admin,
        offset=offset,
        limit=limit,
        search=search or None,
        author_name=authorName or None,
        published={"true": True, "false": False, "all": None}[published],
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


@router.get("/blog-posts/{post_id}/comment-tree")
async def comment_tree(
    post_id: int,
    root: Optional[int] = Query(default=None, description="Only the thread rooted at this comment"),
    admin: User = Depends(require_admin),
):
    """Whole comment tree of a post in one response, hidden comments included."""
    post = await post_service.get_visible_post(post_id, admin)
    nodes = await threads.fetch_subtree(post.id, root_id=root)
    return {"success": True, "data": [n.to_dict() for n in nodes]}


@router.patch("/comments/{comment_id}")
async def moderate_comment(
    comment_id: int,
    body: CommentModerateIn,
    admin: User = Depends(require_admin),
):
    """
    Edit, hide/show or re-parent a comment. Re-parenting is validated
    like a new reply (same post, no cycles, depth limit).
    """
    kwargs = {
        "author_name": body.authorName,
        "content": body.content,
        "is_approved": body.isApproved,
    }
    if "parentId" in body.model_fields_set:
        kwargs["parent_id"] = body.parentId
    comment = await threads.update_comment(comment_id, **kwargs)
    return {"success": True, "data": threads.comment_to_dict(comment)}


@router.delete("/comments/{comment_id}")
async def delete_comment(comment_id: int, admin: User = Depends(require_admin)):
    """Delete a comment; its replies move up one level."""
    await threads.delete_comment(comment_id)
    return {"success": True, "data": {"ok": True}}
