"""
Auth Service - login for citizens and administrators, token refresh.

Failures are returned as {"error": message} so routes decide the status
code; only unexpected errors raise.
"""

from typing import Dict, Optional
import logging

from safetrade.core.errors import TokenError
from safetrade.repositories.users_repository import AdminUsersRepository
from safetrade.services.token_service import get_token_service
from safetrade.services.user_service import get_user_service, to_profile
from safetrade.utils.security import generate_salt, hash_password, verify_password

logger = logging.getLogger(__name__)


def to_admin_profile(admin: Dict) -> Dict:
    return {"id": admin["id"], "email": admin["email"], "isAdmin": True}


class AuthService:

    def __init__(self):
        self.users = get_user_service()
        self.admins = AdminUsersRepository()
        self.tokens = get_token_service()

    def issue_user_tokens(self, user: Dict) -> Dict[str, str]:
        profile = to_profile(user)
        return {
            "access_token": self.tokens.generate_access_token(profile),
            "refresh_token": self.tokens.generate_refresh_token(profile),
        }

    def login_user(self, email: str, password: str) -> Dict:
        user = self.users.validate_user(email, password)
        if not user:
            logger.warning("User login rejected")
            return {"error": "Credenciales inválidas"}

        self.users.update_last_login(user["id"])
        logger.info(f"User logged in: {user['id']}")
        return {**self.issue_user_tokens(user), "user": to_profile(user)}

    def login_admin(self, email: str, password: str) -> Dict:
        admin = self.admins.find_by_email(email)
        if not admin or not verify_password(password, admin["salt"], admin["password_hash"]):
            logger.warning("Admin login rejected")
            return {"error": "Credenciales de administrador inválidas"}

        self.admins.update_last_login(admin["id"])
        profile = to_admin_profile(admin)
        logger.info(f"Admin logged in: {admin['id']}")
        return {
            "access_token": self.tokens.generate_admin_token(profile),
            "refresh_token": self.tokens.generate_refresh_token(profile),
            "admin": profile,
        }

    def refresh(self, refresh_token: str) -> Dict:
        try:
            payload = self.tokens.verify_refresh_token(refresh_token)
        except TokenError:
            return {"error": "Token de renovación inválido"}

        try:
            principal_id = int(payload["sub"])
        except (KeyError, TypeError, ValueError):
            return {"error": "Token de renovación inválido"}

        if payload["type"] == "admin":
            admin = self.admins.find_by_id(principal_id)
            if not admin:
                return {"error": "No se pudo renovar el token"}
            return {"access_token": self.tokens.generate_admin_token(to_admin_profile(admin))}

        user = self.users.find_by_id(principal_id)
        if not user:
            return {"error": "No se pudo renovar el token"}
        return {"access_token": self.tokens.generate_access_token(to_profile(user))}

    def create_admin(self, email: str, password: str) -> Dict:
        """Create an administrator account (used by the create_admin script)."""
        salt = generate_salt()
        admin = self.admins.create_admin(email, hash_password(password, salt), salt)
        logger.info(f"Admin created: {admin['id']}")
        return to_admin_profile(admin)


# Singleton instance
_auth_service: Optional[AuthService] = None


def get_auth_service() -> AuthService:
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService()
    return _auth_service
