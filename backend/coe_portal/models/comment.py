# coe_portal/models/comment.py
import typing
from tortoise import fields, models

class Comment(models.Model):
    """
    Comment on a blog post; a reply when parent is set.

    No account is required to comment, author_name is free text.
    A parent always belongs to the same post (checked in services.threads).
    """
    id = fields.IntField(pk=True)
    post = fields.ForeignKeyField("models.BlogPost", related_name="comments", on_delete=fields.CASCADE)
    parent: typing.Optional[fields.ForeignKeyNullableRelation["Comment"]] = fields.ForeignKeyField(
        "models.Comment", related_name="replies", null=True, on_delete=fields.SET_NULL
    )
    author_name = fields.CharField(max_length=120)
    content = fields.TextField()  # Stored verbatim, newlines included
    is_approved = fields.BooleanField(default=True)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "comments"
