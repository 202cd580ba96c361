# coe_portal/models/blog_post.py
"""
Database model for blog posts.
"""
from typing import Optional
from tortoise import fields, models

class BlogPost(models.Model):
    """
    Blog post.

    States: draft (is_published=False) and published (is_published=True).

    Authorship:
    - author_name is the free-text display name shown to readers
    - author is the account that created the post; NULL for legacy rows,
      where ownership falls back to matching author_name against usernames

    image_urls / video_urls are ordered lists of URLs returned by the media
    storage provider.
    """
    id = fields.IntField(pk=True)
    title = fields.CharField(max_length=255)
    content = fields.TextField()
    excerpt = fields.TextField()
    image_urls = fields.JSONField(default=list)
    video_urls = fields.JSONField(default=list)
    author_name = fields.CharField(max_length=256, index=True)
    author: Optional[fields.ForeignKeyNullableRelation["User"]] = fields.ForeignKeyField(
        "models.User", related_name="posts", null=True, on_delete=fields.SET_NULL
    )
    is_published = fields.BooleanField(default=False)
    is_ai_generated = fields.BooleanField(default=False)  # Declared by the caller, not verified
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)  # Refreshed on every save()

    class Meta:
        table = "blog_posts"

    def __str__(self):
        return self.title
