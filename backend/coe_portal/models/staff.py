# coe_portal/models/staff.py
"""
Database model for the staff directory.
"""
from typing import Optional
from tortoise import fields, models

class StaffProfile(models.Model):
    """
    Staff directory entry.

    A profile may exist without a linked login (user is nullable). Deletion
    is a soft flag flip (is_active=False); listings only ever show active
    profiles, see `services.staff.active_staff`.
    """
    id = fields.IntField(pk=True)
    user: Optional[fields.ForeignKeyNullableRelation["User"]] = fields.ForeignKeyField(
        "models.User", related_name="staff_profiles", null=True, on_delete=fields.SET_NULL
    )
    name = fields.CharField(max_length=200)
    role = fields.CharField(max_length=200)  # Job title shown in the directory
    bio = fields.TextField()
    image_url = fields.CharField(max_length=1024, null=True)
    email = fields.CharField(max_length=256, null=True)
    linkedin_url = fields.CharField(max_length=1024, null=True)
    is_active = fields.BooleanField(default=True)

    class Meta:
        table = "staff"
