# coe_portal/core/bootstrap.py
"""
Bootstrap module for application initialization.
Handles initial setup tasks such as creating default admin user on first startup.
"""
import os
import logging
from coe_portal.config import settings
from coe_portal.models.staff import StaffProfile
from coe_portal.models.user import User
from coe_portal.core.security import hash_password

logger = logging.getLogger(__name__)

async def ensure_default_admin() -> None:
    """
    If no admin exists in the database, create a default admin based on environment variables.
    Only takes effect under the following conditions:
      - Currently no user with role="admin"
      - And ADMIN_PASSWORD is set (to avoid using default weak password)
    Environment variables:
      ADMIN_USERNAME (default: "admin"), this account can never be deleted
      ADMIN_PASSWORD (required, otherwise won't create)
    """
    # Check if any admin user already exists
    has_admin = await User.filter(role="admin").exists()
    if not has_admin:
        # Get admin password from environment (required for security)
        admin_password = os.getenv("ADMIN_PASSWORD")
        if not admin_password:
            logger.warning("[bootstrap] No admin present, but ADMIN_PASSWORD not set -> skip creating default admin.")
            return  # Don't create admin without password (security requirement)

        admin_username = settings.admin_username
        existing = await User.get_or_none(username=admin_username)
        if existing is not None:
            # Someone registered the reserved name first; promote that row
            existing.role = "admin"
            existing.is_approved = True
            existing.password_hash = hash_password(admin_password)
            await existing.save()
            logger.warning("[bootstrap] Promoted existing user %s to default admin", existing.username)
        else:
            u = await User.create(
                username=admin_username,
                password_hash=hash_password(admin_password),  # Hash password before storing
                role="admin",
                is_approved=True,
            )
            logger.warning("[bootstrap] Created default admin -> username=%s id=%s", u.username, u.id)

    await ensure_seed_staff()


async def ensure_seed_staff() -> None:
    """
    Give an empty staff directory one placeholder profile linked to the
    default admin, so the public page is never blank on first run.
    """
    if await StaffProfile.exists():
        return
    admin = await User.get_or_none(username=settings.admin_username)
    if admin is None:
        return
    await StaffProfile.create(
        user=admin,
        name="Admin User",
        role="Administrator",
        bio="Centre of Entrepreneurship administrator.",
    )
    logger.info("[bootstrap] Seeded staff directory with the admin profile")
