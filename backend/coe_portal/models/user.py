# coe_portal/models/user.py
"""
Database model for users.
Represents a login account: credentials, role and approval state.
"""
from tortoise import fields, models

class User(models.Model):
    """
    User database model.

    New registrations start as role "user" with is_approved=False and must
    be approved by an admin before they can sign in or author content.
    Admins are treated as approved regardless of the stored flag.

    Relationships:
    - Has zero or one active StaffProfile (via related_name="staff_profiles")
    - Has many BlogPosts it authored (via related_name="posts")
    """
    id = fields.IntField(pk=True)
    username = fields.CharField(max_length=256, unique=True, index=True)  # Login name, unique
    password_hash = fields.CharField(max_length=255)  # Argon2 hash, never plain text
    role = fields.CharField(max_length=16, default="user")  # "user" or "admin"
    is_approved = fields.BooleanField(default=False)  # Set by an admin
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "users"

    def __str__(self):
        return self.username
