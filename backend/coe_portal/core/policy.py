# coe_portal/core/policy.py
"""
Content authorization rules.

Every rule is a plain function over the current user (or None for an
anonymous caller) and the target record, so route handlers and services
share one definition. Role checks go through `has_capability` instead of
comparing role strings at call sites.
"""
from __future__ import annotations

from typing import Optional, TYPE_CHECKING

from coe_portal.config import settings

if TYPE_CHECKING:
    from coe_portal.models.blog_post import BlogPost
    from coe_portal.models.staff import StaffProfile
    from coe_portal.models.user import User

BYPASS_APPROVAL = "bypass_approval"
MANAGE_USERS = "manage_users"
MODERATE_COMMENTS = "moderate_comments"
MANAGE_ANY_POST = "manage_any_post"
MANAGE_ANY_STAFF = "manage_any_staff"
VIEW_DRAFTS = "view_drafts"

ROLE_CAPABILITIES: dict[str, frozenset[str]] = {
    "admin": frozenset({
        BYPASS_APPROVAL,
        MANAGE_USERS,
        MODERATE_COMMENTS,
        MANAGE_ANY_POST,
        MANAGE_ANY_STAFF,
        VIEW_DRAFTS,
    }),
    "user": frozenset(),
}


def has_capability(user: Optional["User"], capability: str) -> bool:
    if user is None:
        return False
    return capability in ROLE_CAPABILITIES.get(getattr(user, "role", "user"), frozenset())


def is_effectively_approved(user: Optional["User"]) -> bool:
    """Approved flag, or a role that bypasses approval (admins)."""
    if user is None:
        return False
    return bool(user.is_approved) or has_capability(user, BYPASS_APPROVAL)


def can_author_posts(user: Optional["User"]) -> bool:
    return is_effectively_approved(user)


def owns_post(user: Optional["User"], post: "BlogPost") -> bool:
    """
    Ownership follows the author foreign key. Rows created before the key
    existed (author_id is NULL) fall back to an exact, case-sensitive
    author_name == username match.
    """
    if user is None:
        return False
    if post.author_id is not None:
        return post.author_id == user.id
    return post.author_name == user.username


def can_view_post(user: Optional["User"], post: "BlogPost") -> bool:
    if post.is_published:
        return True
    return has_capability(user, VIEW_DRAFTS) or owns_post(user, post)


def can_modify_post(user: Optional["User"], post: "BlogPost") -> bool:
    return has_capability(user, MANAGE_ANY_POST) or owns_post(user, post)


def can_manage_staff(user: Optional["User"], staff: "StaffProfile") -> bool:
    if has_capability(user, MANAGE_ANY_STAFF):
        return True
    return user is not None and staff.user_id is not None and staff.user_id == user.id


def is_protected_account(target: "User") -> bool:
    return target.username == settings.admin_username
