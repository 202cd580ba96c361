# coe_portal/api/v1/deps.py
from fastapi import Depends, Header, HTTPException, Request, status
from coe_portal.core import policy
from coe_portal.core.security import decode_access_token
from coe_portal.models.user import User


def _extract_token(request: Request, authorization: str | None) -> str | None:
    # 1) Prioritize Authorization: Bearer xxx
    if authorization and authorization.lower().startswith("bearer "):
        return authorization.split(" ", 1)[1].strip() or None
    # 2) Secondly HttpOnly Cookie: accessToken
    return request.cookies.get("accessToken")


async def _user_from_token(token: str) -> User:
    try:
        payload = decode_access_token(token)
        user_id = int(payload.get("sub"))
    except Exception:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="AUTH_INVALID_TOKEN")

    user = await User.get_or_none(id=user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="AUTH_USER_NOT_FOUND")
    return user


async def get_current_user(
    request: Request,
    authorization: str | None = Header(default=None),
) -> User:
    """
    FastAPI dependency to get the current authenticated user.

    The JWT is read from either:
    1. Authorization header (Bearer token) - preferred method
    2. HttpOnly cookie (accessToken) - fallback method

    The user row is reloaded on every request, so approval and role changes
    take effect immediately.

    Raises:
        HTTPException (401): If no token is provided (AUTH_REQUIRED)
        HTTPException (401): If token is invalid or expired (AUTH_INVALID_TOKEN)
        HTTPException (401): If user not found in database (AUTH_USER_NOT_FOUND)
    """
    token = _extract_token(request, authorization)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="AUTH_REQUIRED")
    return await _user_from_token(token)


async def get_optional_user(
    request: Request,
    authorization: str | None = Header(default=None),
) -> User | None:
    """
    Like get_current_user, but anonymous callers get None instead of a 401.

    A token that is present but invalid is still rejected, so a stale
    session never silently downgrades to anonymous.
    """
    token = _extract_token(request, authorization)
    if not token:
        return None
    return await _user_from_token(token)


async def require_approved(current: User = Depends(get_current_user)) -> User:
    """
    Authenticated and approved (admins always count as approved).

    Raises:
        HTTPException (403): If the account is still pending (ACCOUNT_NOT_APPROVED)
    """
    if not policy.is_effectively_approved(current):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="ACCOUNT_NOT_APPROVED")
    return current


async def require_admin(current: User = Depends(get_current_user)) -> User:
    """
    FastAPI dependency to ensure the current user is an administrator.

    Usage:
        @router.get("/admin/users")
        async def list_users(admin: User = Depends(require_admin)):
            ...

    Raises:
        HTTPException (403): If user is not an admin (FORBIDDEN_ADMIN_ONLY)
        HTTPException (401): If user is not authenticated (from get_current_user)
    """
    if not policy.has_capability(current, policy.MANAGE_USERS):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="FORBIDDEN_ADMIN_ONLY")
    return current
