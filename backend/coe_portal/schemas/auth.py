# coe_portal/schemas/auth.py
"""
Pydantic schemas for authentication endpoints.
Defines request/response models for registration, login and user information.
"""
from pydantic import BaseModel, Field, constr

Username = constr(strip_whitespace=True, min_length=3, max_length=64)

class RegisterIn(BaseModel):
    """
    Request model for self-registration.
    New accounts start unapproved and cannot sign in until an admin approves them.
    """
    username: Username  # Login name, must be unique
    password: str = Field(min_length=6)  # Plain text, hashed server-side

class LoginRequest(BaseModel):
    """
    Request model for user login endpoint.
    Contains credentials for authentication.
    """
    username: str  # User login name
    password: str  # User password (plain text, will be hashed server-side)

class UserOut(BaseModel):
    """
    User information model returned in authentication responses.
    Contains basic user details without sensitive information.
    """
    id: int  # User unique identifier
    username: str  # User login name
    role: str = "user"  # "user" or "admin"
    isApproved: bool = False  # Admins always report True

class LoginResponse(BaseModel):
    """
    Response model for successful login.
    Returns user information and access token for authenticated requests.
    """
    user: UserOut  # User information object
    accessToken: str  # JWT access token for API authentication
