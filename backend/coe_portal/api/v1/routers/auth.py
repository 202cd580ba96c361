# coe_portal/api/v1/routers/auth.py
import logging

from fastapi import APIRouter, HTTPException, Response, status, Depends
from coe_portal.core import policy
from coe_portal.core.security import verify_password, create_access_token, hash_password
from coe_portal.api.v1.deps import get_current_user
from coe_portal.models.user import User
from coe_portal.schemas.auth import RegisterIn, LoginRequest

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


def _user_out(user: User) -> dict:
    return {
        "id": user.id,
        "username": user.username,
        "role": user.role,
        "isApproved": policy.is_effectively_approved(user),
    }


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(body: RegisterIn):
    """
    Register a new user account.

    Creates a role "user" account with is_approved=False. The account can
    neither sign in nor author content until an admin approves it.

    Args:
        body: Request body containing:
            - username: str (3-64 chars, must be unique)
            - password: str (min 6 chars, hashed before storage)

    Returns:
        dict: {"success": True, "data": {id, username, role, isApproved}}

    Raises:
        HTTPException (409): USERNAME_EXISTS
    """
    if await User.filter(username=body.username).exists():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="USERNAME_EXISTS")
    u = await User.create(
        username=body.username,
        password_hash=hash_password(body.password),
        role="user",
        is_approved=False,
    )
    logger.info("Registered user %s (pending approval)", u.username)
    return {"success": True, "data": _user_out(u)}


@router.post("/login")
async def login(payload: LoginRequest, response: Response):
    """
    Authenticate user and create access token.

    The token is returned in the response body and also set as an HttpOnly
    cookie for browser-based clients.

    Raises:
        HTTPException (401): AUTH_INVALID_CREDENTIALS
        HTTPException (403): ACCOUNT_PENDING_APPROVAL for unapproved non-admins
    """
    user = await User.get_or_none(username=payload.username)
    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED,
                            detail={"code": "AUTH_INVALID_CREDENTIALS", "message": "Incorrect username or password"})
    if not policy.is_effectively_approved(user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN,
                            detail={"code": "ACCOUNT_PENDING_APPROVAL",
                                    "message": "Your account is awaiting admin approval"})
    token = create_access_token(str(user.id), user.role)
    response.set_cookie("accessToken", token, httponly=True, secure=False, samesite="lax")
    return {"success": True, "data": {"user": _user_out(user), "accessToken": token}}


@router.get("/me")
async def me(user: User = Depends(get_current_user)):
    """
    Get current authenticated user information.

    Raises:
        HTTPException (401): If user is not authenticated
    """
    return {"success": True, "data": _user_out(user)}


@router.post("/logout")
async def logout(response: Response):
    """
    Log out the current user by clearing the access token cookie.

    Note:
        This endpoint only clears the cookie. The JWT token itself remains
        valid until it expires.
    """
    response.delete_cookie("accessToken")
    return {"success": True}
