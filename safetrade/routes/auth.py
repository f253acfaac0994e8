"""
Authentication endpoints - e-mail + password login with JWT sessions.
"""

from fastapi import APIRouter, Depends, HTTPException, status
import logging

from safetrade.core.auth import AuthenticatedUser, require_user
from safetrade.models.user import LoginRequest, RefreshRequest
from safetrade.services.auth_service import get_auth_service
from safetrade.services.user_service import get_user_service, to_safe_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login")
async def login(request: LoginRequest):
    """
    Log a citizen in.

    Returns:
        access_token, refresh_token and the user profile

    Raises:
        401: Invalid credentials
    """
    try:
        result = get_auth_service().login_user(request.email, request.password)
        if "error" in result:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=result["error"])
        return result

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Login failed: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error interno del servidor"
        )


@router.post("/refresh")
async def refresh(request: RefreshRequest):
    """
    Exchange a refresh token for a new access token.
    Admin refresh tokens yield admin tokens.
    """
    try:
        result = get_auth_service().refresh(request.refresh_token)
        if "error" in result:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=result["error"])
        return result

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Token refresh failed: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error interno del servidor"
        )


@router.get("/profile")
async def profile(current_user: AuthenticatedUser = Depends(require_user)):
    """Profile of the authenticated citizen."""
    user = get_user_service().find_by_id(current_user.numeric_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Usuario no encontrado")
    return {"success": True, "user": to_safe_user(user)}
