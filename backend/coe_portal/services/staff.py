"""
Staff directory.

"Deleting" a profile only flips is_active. Every read that lists profiles
goes through `active_staff()` so no endpoint can forget the filter.
"""
import logging
from typing import List, Optional

from ..core import policy
from ..core.errors import Conflict, Forbidden, NotFound
from ..models.staff import StaffProfile
from ..models.user import User

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {
    "name": "name",
    "role": "role",
    "bio": "bio",
    "imageUrl": "image_url",
    "email": "email",
    "linkedinUrl": "linkedin_url",
    "isActive": "is_active",
}


def staff_to_dict(s: StaffProfile) -> dict:
    return {
        "id": s.id,
        "userId": s.user_id,
        "name": s.name,
        "role": s.role,
        "bio": s.bio,
        "imageUrl": s.image_url,
        "email": s.email,
        "linkedinUrl": s.linkedin_url,
        "isActive": s.is_active,
    }


def active_staff():
    return StaffProfile.filter(is_active=True)


async def list_active() -> List[StaffProfile]:
    return await active_staff().order_by("name", "id")


async def get_active(staff_id: int) -> StaffProfile:
    profile = await active_staff().get_or_none(id=staff_id)
    if profile is None:
        raise NotFound("STAFF_NOT_FOUND", "Staff member not found")
    return profile


async def get_for_user(user_id: int) -> Optional[StaffProfile]:
    return await active_staff().filter(user_id=user_id).first()


async def _ensure_single_active(user_id: int, exclude_id: Optional[int] = None) -> None:
    qs = active_staff().filter(user_id=user_id)
    if exclude_id is not None:
        qs = qs.exclude(id=exclude_id)
    if await qs.exists():
        raise Conflict("STAFF_PROFILE_EXISTS", "This user already has an active staff profile")


async def create_profile(actor: User, data: dict, user_id: Optional[int] = None) -> StaffProfile:
    """
    Approved users create a profile for themselves; admins may create one
    for any user or for nobody (user_id=None).
    """
    if policy.has_capability(actor, policy.MANAGE_ANY_STAFF):
        owner_id = user_id
        if owner_id is not None and not await User.filter(id=owner_id).exists():
            raise NotFound("USER_NOT_FOUND", "User not found")
    else:
        if not policy.is_effectively_approved(actor):
            raise Forbidden("ACCOUNT_NOT_APPROVED", "Your account has not been approved yet")
        if user_id is not None and user_id != actor.id:
            raise Forbidden("FORBIDDEN_NOT_OWNER", "You can only create your own staff profile")
        owner_id = actor.id

    if owner_id is not None and data.get("is_active", True):
        await _ensure_single_active(owner_id)

    profile = await StaffProfile.create(user_id=owner_id, **data)
    logger.info("Staff profile %s created by %s (user=%s)", profile.id, actor.username, owner_id)
    return profile


async def update_profile(staff_id: int, actor: User, changes: dict) -> StaffProfile:
    """
    Partial update in API field names. is_active is left alone unless the
    caller sends it.
    """
    profile = await StaffProfile.get_or_none(id=staff_id)
    if profile is None:
        raise NotFound("STAFF_NOT_FOUND", "Staff member not found")
    if not policy.can_manage_staff(actor, profile):
        raise Forbidden("FORBIDDEN_NOT_OWNER", "Only the profile owner or an admin can edit this profile")

    if changes.get("isActive") and not profile.is_active and profile.user_id is not None:
        await _ensure_single_active(profile.user_id, exclude_id=profile.id)

    for api_name, value in changes.items():
        attr = UPDATABLE_FIELDS.get(api_name)
        if attr is not None:
            setattr(profile, attr, value)
    await profile.save()
    return profile


async def deactivate_profile(staff_id: int, actor: User) -> StaffProfile:
    """Soft delete. Deactivating an inactive profile is a successful no-op."""
    profile = await StaffProfile.get_or_none(id=staff_id)
    if profile is None:
        raise NotFound("STAFF_NOT_FOUND", "Staff member not found")
    if not policy.can_manage_staff(actor, profile):
        raise Forbidden("FORBIDDEN_NOT_OWNER", "Only the profile owner or an admin can delete this profile")
    if profile.is_active:
        profile.is_active = False
        await profile.save()
        logger.info("Staff profile %s deactivated by %s", profile.id, actor.username)
    return profile
