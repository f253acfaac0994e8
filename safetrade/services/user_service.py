"""
User Service - citizen account management.
"""

from typing import Dict, List, Optional
import logging

from safetrade.core.errors import ConflictError, NotFoundError, ValidationFailed
from safetrade.repositories.users_repository import UsersRepository
from safetrade.utils.security import generate_salt, hash_password, verify_password

logger = logging.getLogger(__name__)

CREDENTIAL_FIELDS = ("password_hash", "salt")


def to_safe_user(user: Optional[Dict]) -> Optional[Dict]:
    """Copy of a user row without credential columns."""
    if user is None:
        return None
    return {key: value for key, value in user.items() if key not in CREDENTIAL_FIELDS}


def to_profile(user: Dict) -> Dict:
    """Profile embedded in access tokens."""
    return {"id": user["id"], "email": user["email"], "name": user.get("name")}


class UserService:
    """
    Service for citizen accounts.
    """

    def __init__(self):
        self.repository = UsersRepository()

    def create_user(self, email: str, password: str, name: Optional[str] = None) -> Dict:
        """
        Register a new user.

        Args:
            email: Unique e-mail
            password: Plain text password (hashed here with a fresh salt)
            name: Optional display name

        Returns:
            Safe user dict

        Raises:
            ConflictError: e-mail already registered
        """
        if self.repository.find_by_email(email):
            raise ConflictError("El correo electrónico ya está registrado")

        salt = generate_salt()
        user = self.repository.create_user(email, name, hash_password(password, salt), salt)
        logger.info(f"User created: {user['id']}")
        return to_safe_user(user)

    def find_by_id(self, user_id: int) -> Optional[Dict]:
        return self.repository.find_by_id(user_id)

    def find_by_email(self, email: str) -> Optional[Dict]:
        return self.repository.find_by_email(email)

    def find_all(self) -> List[Dict]:
        return self.repository.find_all()

    def validate_user(self, email: str, password: str) -> Optional[Dict]:
        """Return the user when the credentials match, else None."""
        user = self.repository.find_by_email(email)
        if not user or not verify_password(password, user["salt"], user["password_hash"]):
            return None
        return user

    def update_user(self, user_id: int, email: Optional[str] = None, name: Optional[str] = None) -> Dict:
        """
        Update e-mail and/or name.

        Raises:
            NotFoundError: user does not exist
            ConflictError: e-mail belongs to another account
        """
        if not self.repository.find_by_id(user_id):
            raise NotFoundError("Usuario no encontrado")

        if email is not None:
            owner = self.repository.find_by_email(email)
            if owner and owner["id"] != user_id:
                raise ConflictError("El correo electrónico ya está registrado")

        return to_safe_user(self.repository.update_user(user_id, email=email, name=name))

    def delete_user(self, user_id: int) -> bool:
        return self.repository.delete_user(user_id)

    def change_password(self, user_id: int, current_password: str, new_password: str) -> None:
        """
        Replace the password after checking the current one. A new salt is generated.

        Raises:
            NotFoundError: user does not exist
            ValidationFailed: current password is wrong
        """
        user = self.repository.find_by_id(user_id)
        if not user:
            raise NotFoundError("Usuario no encontrado")
        if not verify_password(current_password, user["salt"], user["password_hash"]):
            raise ValidationFailed("Contraseña actual incorrecta")

        salt = generate_salt()
        self.repository.update_password(user_id, hash_password(new_password, salt), salt)
        logger.info(f"Password changed for user {user_id}")

    def check_password(self, user_id: int, password: str) -> bool:
        user = self.repository.find_by_id(user_id)
        return bool(user) and verify_password(password, user["salt"], user["password_hash"])

    def update_last_login(self, user_id: int) -> None:
        self.repository.update_last_login(user_id)


# Singleton instance
_user_service: Optional[UserService] = None


def get_user_service() -> UserService:
    global _user_service
    if _user_service is None:
        _user_service = UserService()
    return _user_service
