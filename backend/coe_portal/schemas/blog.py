# coe_portal/schemas/blog.py
"""
Pydantic schemas for blog posts and public comments.
Field names are camelCase to match the JSON the frontend sends.
"""
from pydantic import BaseModel, Field, constr
from typing import Optional, List

Title = constr(strip_whitespace=True, min_length=1, max_length=255)
Body = constr(strip_whitespace=True, min_length=1)
DisplayName = constr(strip_whitespace=True, min_length=1, max_length=120)


class PostCreateIn(BaseModel):
    """
    Request model for creating a blog post.
    excerpt is derived from content when omitted; authorName is only honoured for admins.
    """
    title: Title
    content: Body
    excerpt: Optional[str] = None
    imageUrls: List[str] = Field(default_factory=list)  # Kept in the given order
    videoUrls: List[str] = Field(default_factory=list)
    authorName: Optional[DisplayName] = None
    isPublished: bool = False
    isAiGenerated: bool = False


class PostUpdateIn(BaseModel):
    """
    Request model for a partial post update.
    Only fields present in the request body are applied.
    """
    title: Optional[Title] = None
    content: Optional[Body] = None
    excerpt: Optional[str] = None
    imageUrls: Optional[List[str]] = None
    videoUrls: Optional[List[str]] = None
    authorName: Optional[DisplayName] = None
    isPublished: Optional[bool] = None
    isAiGenerated: Optional[bool] = None


class CommentCreateIn(BaseModel):
    """
    Request model for posting a comment or a reply (no account needed).
    """
    authorName: DisplayName
    content: Body
    parentId: Optional[int] = None  # Reply target; must be on the same post
