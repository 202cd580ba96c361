# coe_portal/api/v1/routers/staff.py
"""
Staff directory. Reads are public and only ever show active profiles;
DELETE is a soft delete.
"""
from fastapi import APIRouter, Depends, HTTPException, status

from coe_portal.api.v1.deps import get_current_user
from coe_portal.models.user import User
from coe_portal.schemas.staff import StaffIn, StaffUpdateIn
from coe_portal.services import staff as staff_service

router = APIRouter(prefix="/staff", tags=["staff"])

# Fields that may be cleared by sending null
NULLABLE_FIELDS = {"imageUrl", "email", "linkedinUrl"}


@router.get("")
async def list_staff():
    rows = await staff_service.list_active()
    return {"success": True, "data": [staff_service.staff_to_dict(s) for s in rows]}


@router.get("/user/{user_id}")
async def get_staff_for_user(user_id: int):
    """The active profile linked to a login, if any."""
    profile = await staff_service.get_for_user(user_id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="STAFF_NOT_FOUND")
    return {"success": True, "data": staff_service.staff_to_dict(profile)}


@router.get("/{staff_id}")
async def get_staff(staff_id: int):
    profile = await staff_service.get_active(staff_id)
    return {"success": True, "data": staff_service.staff_to_dict(profile)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_staff(body: StaffIn, user: User = Depends(get_current_user)):
    """
    Approved users create their own profile (one active profile each).
    Admins may create one for any user, or an unlinked one.
    """
    data = {
        "name": body.name,
        "role": body.role,
        "bio": body.bio,
        "image_url": body.imageUrl or None,
        "email": body.email or None,
        "linkedin_url": body.linkedinUrl or None,
    }
    profile = await staff_service.create_profile(user, data, user_id=body.userId)
    return {"success": True, "data": staff_service.staff_to_dict(profile)}


@router.patch("/{staff_id}")
async def update_staff(staff_id: int, body: StaffUpdateIn, user: User = Depends(get_current_user)):
    changes = {
        k: v
        for k, v in body.model_dump(exclude_unset=True).items()
        if v is not None or k in NULLABLE_FIELDS
    }
    profile = await staff_service.update_profile(staff_id, user, changes)
    return {"success": True, "data": staff_service.staff_to_dict(profile)}


@router.delete("/{staff_id}")
async def delete_staff(staff_id: int, user: User = Depends(get_current_user)):
    """Soft delete; repeating it on an inactive profile still succeeds."""
    profile = await staff_service.deactivate_profile(staff_id, user)
    return {"success": True, "data": staff_service.staff_to_dict(profile)}
