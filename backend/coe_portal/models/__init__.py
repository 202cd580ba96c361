# coe_portal/models/__init__.py
"""
Database models module initialization.
Exports all Tortoise ORM models for convenient imports.

Models exported:
- User: Login account with role and approval flag
- StaffProfile: Staff directory entry (soft-deleted via is_active)
- BlogPost: Blog post with draft/published state
- Comment: Threaded comment on a blog post
"""
from .user import User
from .staff import StaffProfile
from .blog_post import BlogPost
from .comment import Comment
