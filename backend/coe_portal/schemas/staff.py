# coe_portal/schemas/staff.py
"""
Pydantic schemas for the staff directory.
"""
from pydantic import BaseModel, constr
from typing import Optional

Text = constr(strip_whitespace=True, min_length=1)
Url = Optional[constr(strip_whitespace=True, max_length=1024)]


class StaffIn(BaseModel):
    """
    Request model for creating a staff profile.
    userId is only honoured for admins; everyone else creates their own profile.
    """
    name: constr(strip_whitespace=True, min_length=1, max_length=200)
    role: constr(strip_whitespace=True, min_length=1, max_length=200)
    bio: Text
    imageUrl: Url = None
    email: Optional[constr(strip_whitespace=True, max_length=256)] = None
    linkedinUrl: Url = None
    userId: Optional[int] = None


class StaffUpdateIn(BaseModel):
    """
    Request model for a partial staff update.
    isActive is left unchanged unless it is sent.
    """
    name: Optional[constr(strip_whitespace=True, min_length=1, max_length=200)] = None
    role: Optional[constr(strip_whitespace=True, min_length=1, max_length=200)] = None
    bio: Optional[Text] = None
    imageUrl: Url = None
    email: Optional[constr(strip_whitespace=True, max_length=256)] = None
    linkedinUrl: Url = None
    isActive: Optional[bool] = None
