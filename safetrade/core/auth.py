"""
Authentication guards as FastAPI dependencies.

- require_user: valid citizen access token required
- require_admin: valid admin token with isAdmin in the profile required
- optional_user: never rejects; falls back to the anonymous context
"""

from dataclasses import dataclass, field
from typing import Dict, Optional
import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from safetrade.core.errors import TokenError
from safetrade.services.token_service import get_token_service

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

ANONYMOUS_USER_ID = "anonymous"
ANONYMOUS_PROFILE = {"id": 0, "email": "anonymous@safetrade.com", "name": "Usuario Anónimo"}


@dataclass
class AuthenticatedUser:
    user_id: str
    profile: Dict
    raw: Dict = field(default_factory=dict)

    @property
    def is_anonymous(self) -> bool:
        return self.user_id == ANONYMOUS_USER_ID

    @property
    def numeric_id(self) -> Optional[int]:
        """Database ID, or None for the anonymous context."""
        if self.is_anonymous:
            return None
        return int(self.user_id)


def anonymous_user() -> AuthenticatedUser:
    return AuthenticatedUser(user_id=ANONYMOUS_USER_ID, profile=dict(ANONYMOUS_PROFILE))


def _bearer_token(credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        return None
    return credentials.credentials


def require_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> AuthenticatedUser:
    token = _bearer_token(credentials)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token de autenticación requerido",
        )

    try:
        payload = get_token_service().verify_access_token(token)
    except TokenError as e:
        logger.warning(f"Rejected user token: {e.message}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token inválido o expirado",
        )

    return AuthenticatedUser(user_id=payload["sub"], profile=payload.get("profile", {}), raw=payload)


def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> AuthenticatedUser:
    token = _bearer_token(credentials)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token de administrador requerido",
        )

    token_service = get_token_service()
    try:
        payload = token_service.decode(token)
    except TokenError as e:
        logger.warning(f"Rejected admin token: {e.message}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token de administrador inválido",
        )

    if payload.get("type") != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Se requieren permisos de administrador",
        )

    profile = payload.get("profile") or {}
    if not profile.get("isAdmin"):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Acceso denegado - permisos insuficientes",
        )

    return AuthenticatedUser(user_id=payload["sub"], profile=profile, raw=payload)


def optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> AuthenticatedUser:
    token = _bearer_token(credentials)
    if not token:
        return anonymous_user()

    try:
        payload = get_token_service().verify_access_token(token)
    except TokenError:
        return anonymous_user()

    return AuthenticatedUser(user_id=payload["sub"], profile=payload.get("profile", {}), raw=payload)
