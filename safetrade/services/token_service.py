"""
Token Service - JWT issuance and verification.

Three token types share one secret:
- access: citizen session, carries the user profile
- admin: administrator session, profile carries isAdmin
- refresh: exchanges for a new access token (admins refresh with an admin-typed token)
"""

from datetime import timedelta
from typing import Dict, Optional
import logging

import jwt

from safetrade.core.errors import TokenError
from safetrade.core.settings import settings
from safetrade.utils.dates import utc_now

logger = logging.getLogger(__name__)


class TokenService:

    def __init__(self, secret: Optional[str] = None, algorithm: Optional[str] = None):
        self.secret = secret or settings.JWT_SECRET
        self.algorithm = algorithm or settings.JWT_ALGORITHM
        if not self.secret:
            raise TokenError("JWT_SECRET no configurado")

    def _encode(self, payload: Dict, lifetime: timedelta) -> str:
        now = utc_now()
        claims = {**payload, "iat": now, "exp": now + lifetime}
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def decode(self, token: str) -> Dict:
        """
        Decode and verify signature and expiry.

        Raises:
            TokenError: token is expired, tampered or malformed
        """
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise TokenError("Token expirado")
        except jwt.InvalidTokenError as e:
            raise TokenError(f"Token inválido: {str(e)}")

    def generate_access_token(self, profile: Dict) -> str:
        return self._encode(
            {"sub": str(profile["id"]), "type": "access", "profile": profile},
            timedelta(minutes=settings.ACCESS_TOKEN_TTL_MINUTES),
        )

    def generate_admin_token(self, profile: Dict) -> str:
        return self._encode(
            {"sub": str(profile["id"]), "type": "admin", "profile": profile},
            timedelta(minutes=settings.ADMIN_TOKEN_TTL_MINUTES),
        )

    def generate_refresh_token(self, profile: Dict) -> str:
        token_type = "admin" if profile.get("isAdmin") else "refresh"
        return self._encode(
            {"sub": str(profile["id"]), "type": token_type},
            timedelta(days=settings.REFRESH_TOKEN_TTL_DAYS),
        )

    def verify_access_token(self, token: str) -> Dict:
        payload = self.decode(token)
        if payload.get("type") != "access":
            raise TokenError("Tipo de token inválido")
        return payload

    def verify_admin_token(self, token: str) -> Dict:
        payload = self.decode(token)
        if payload.get("type") != "admin":
            raise TokenError("Se requieren permisos de administrador")
        return payload

    def verify_refresh_token(self, token: str) -> Dict:
        payload = self.decode(token)
        if payload.get("type") not in ("refresh", "admin"):
            raise TokenError("Tipo de token de renovación inválido")
        return payload


# Singleton instance
_token_service: Optional[TokenService] = None


def get_token_service() -> TokenService:
    global _token_service
    if _token_service is None:
        _token_service = TokenService()
    return _token_service
