"""
User endpoints - registration and self-service profile management.

Every profile change requires the current password.
"""

from fastapi import APIRouter, Depends, HTTPException, status
import logging

from safetrade.core.auth import AuthenticatedUser, require_user
from safetrade.core.errors import ConflictError, NotFoundError, ValidationFailed
from safetrade.models.user import (
    ChangePasswordRequest,
    RegisterRequest,
    UpdateEmailRequest,
    UpdateNameRequest,
)
from safetrade.services.auth_service import get_auth_service
from safetrade.services.user_service import get_user_service, to_safe_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest):
    """
    Create a citizen account and log it in.

    Raises:
        409: E-mail already registered
    """
    try:
        user = get_user_service().create_user(request.email, request.password, request.name)
        tokens = get_auth_service().issue_user_tokens(user)
        return {
            "success": True,
            "message": "Usuario registrado exitosamente",
            "user": user,
            **tokens,
        }

    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)
    except Exception as e:
        logger.error(f"Registration failed: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error al registrar el usuario"
        )


@router.get("/profile")
async def get_profile(current_user: AuthenticatedUser = Depends(require_user)):
    user = get_user_service().find_by_id(current_user.numeric_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Usuario no encontrado")
    return {"success": True, "user": to_safe_user(user)}


def _confirm_password(user_id: int, password: str) -> None:
    user_service = get_user_service()
    if not user_service.find_by_id(user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Usuario no encontrado")
    if not user_service.check_password(user_id, password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Contraseña incorrecta")


@router.put("/profile/email")
async def update_email(request: UpdateEmailRequest, current_user: AuthenticatedUser = Depends(require_user)):
    """
    Change the account e-mail.

    Raises:
        401: Wrong password
        409: E-mail owned by another account
    """
    user_id = current_user.numeric_id
    _confirm_password(user_id, request.password)

    try:
        user = get_user_service().update_user(user_id, email=request.new_email)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)

    logger.info(f"User {user_id} changed e-mail")
    return {"success": True, "message": "Correo electrónico actualizado exitosamente", "user": user}


@router.put("/profile/name")
async def update_name(request: UpdateNameRequest, current_user: AuthenticatedUser = Depends(require_user)):
    user_id = current_user.numeric_id
    _confirm_password(user_id, request.password)

    try:
        user = get_user_service().update_user(user_id, name=request.new_name.strip())
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)

    return {"success": True, "message": "Nombre actualizado exitosamente", "user": user}


@router.put("/profile/password")
async def change_password(request: ChangePasswordRequest, current_user: AuthenticatedUser = Depends(require_user)):
    """
    Change the password.

    Raises:
        401: Current password is wrong
        404: User no longer exists
    """
    try:
        get_user_service().change_password(
            current_user.numeric_id, request.current_password, request.new_password
        )
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except ValidationFailed as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message)

    return {"success": True, "message": "Contraseña actualizada exitosamente"}
