# coe_portal/schemas/admin.py
"""
Pydantic schemas for admin endpoints.
Defines response models for user management and the input model for
comment moderation.
"""
from pydantic import BaseModel, constr
from typing import Optional, List, Literal

# ========== Common return model ==========
class AdminUserBase(BaseModel):
    """
    Base user model for admin endpoints.
    Represents user information returned in admin API responses.
    """
    id: int  # User unique identifier
    username: str  # User login name
    role: Literal["user", "admin"]  # User role: regular user or administrator
    isApproved: bool  # Stored approval flag
    isProtected: bool = False  # Bootstrap admin, cannot be deleted
    createdAt: Optional[str] = None  # ISO timestamp


class AdminUserListOut(BaseModel):
    """
    Response model for paginated user list endpoint.
    Returns a list of users with pagination metadata.
    """
    items: List[AdminUserBase]  # List of user objects
    offset: int  # Pagination offset (number of items skipped)
    limit: int  # Maximum number of items per page
    total: int  # Total number of users matching the query


class AdminUserDetailOut(BaseModel):
    """
    Response model for single user detail endpoint.
    """
    user: AdminUserBase  # User object with all details


# ========== Input model ==========
class CommentModerateIn(BaseModel):
    """
    Request model for moderating a comment.
    All fields are optional; parentId sent as null moves the comment to top level.
    """
    authorName: Optional[constr(strip_whitespace=True, min_length=1, max_length=120)] = None
    content: Optional[constr(strip_whitespace=True, min_length=1)] = None
    isApproved: Optional[bool] = None  # False hides the comment from readers
    parentId: Optional[int] = None  # New parent (same post); null = top level
