import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from enum import Enum

from jose import jwt, JWTError

from bookreview.core.config import settings
from bookreview.core.exceptions import InvalidToken

# --- Setup ---
logger = logging.getLogger(__name__)


# --- Enums & Config ---
class TokenType(str, Enum):
    """Defines the types of tokens the system accepts."""

    ACCESS = "access"


class SecurityConfig:
    """Validates and holds all security-related configurations."""

    JWT_SECRET_KEY: str = settings.JWT_SECRET
    JWT_ALGORITHM: str = settings.JWT_ALGORITHM
    ACCESS_TOKEN_EXPIRE_MINUTES: int = settings.ACCESS_TOKEN_EXPIRE_MINUTES

    @classmethod
    def validate(cls):
        if not cls.JWT_SECRET_KEY or len(cls.JWT_SECRET_KEY) < 32:
            raise ValueError(
                "JWT_SECRET must be configured and be at least 32 characters long."
            )


SecurityConfig.validate()


# --- Token Management ---
class TokenManager:
    """Issues and verifies signed JWT access tokens carrying a principal id."""

    def create_access_token(
        self, subject: Any, expires_delta: Optional[timedelta] = None
    ) -> str:
        now = datetime.now(timezone.utc)
        expire = now + (
            expires_delta
            or timedelta(minutes=SecurityConfig.ACCESS_TOKEN_EXPIRE_MINUTES)
        )
        payload = {
            "sub": str(subject),
            "type": TokenType.ACCESS.value,
            "iat": now,
            "exp": expire,
        }
        return jwt.encode(
            payload, SecurityConfig.JWT_SECRET_KEY, algorithm=SecurityConfig.JWT_ALGORITHM
        )

    def verify_token(
        self, token: str, expected_type: TokenType = TokenType.ACCESS
    ) -> Dict[str, Any]:
        """Decode a token and check its type. Raises InvalidToken on any failure."""
        try:
            payload = jwt.decode(
                token,
                SecurityConfig.JWT_SECRET_KEY,
                algorithms=[SecurityConfig.JWT_ALGORITHM],
            )
        except JWTError as e:
            logger.info(f"Token verification failed: {type(e).__name__}")
            raise InvalidToken() from e

        if payload.get("type") != expected_type.value:
            raise InvalidToken(detail="Invalid token type.")
        if not payload.get("sub"):
            raise InvalidToken(detail="Token has no subject.")
        return payload

    def get_principal_id(self, token: str) -> int:
        """Return the principal id carried by a valid access token."""
        payload = self.verify_token(token, expected_type=TokenType.ACCESS)
        try:
            return int(payload["sub"])
        except (TypeError, ValueError) as e:
            raise InvalidToken(detail="Token subject is malformed.") from e


class SecurityHeaders:
    """Centralized set of security headers added to every response."""

    @staticmethod
    def get_headers() -> Dict[str, str]:
        return {
            "X-Content-Type-Options": "nosniff",
            "X-Frame-Options": "DENY",
            "Referrer-Policy": "strict-origin-when-cross-origin",
        }


token_manager = TokenManager()
