"""Authentication service for JWKS-verified bearer tokens."""

from dataclasses import dataclass
from typing import Optional

import jwt
from jwt import PyJWKClient

from src.exceptions import InvalidTokenError, MissingTokenError
from src.utils.logger import get_logger

log = get_logger(__name__)


@dataclass
class AuthenticatedUser:
    """Identity extracted from a verified token."""

    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = None


class AuthService:
    """Verifies RS256 tokens against the identity provider's JWKS endpoint."""

    def __init__(self, issuer: str, jwks_url: str, audience: Optional[str] = None) -> None:
        self._issuer = issuer
        self._audience = audience
        self._jwks_client = PyJWKClient(jwks_url) if jwks_url else None

    async def verify_token(self, authorization_header: Optional[str]) -> AuthenticatedUser:
        """
        Verify a bearer token and extract the caller's identity.

        Args:
            authorization_header: The Authorization header value (Bearer <token>)

        Returns:
            AuthenticatedUser with claims from the token

        Raises:
            MissingTokenError: If no token is provided
            InvalidTokenError: If the token is malformed, untrusted or expired
        """
        if not authorization_header:
            raise MissingTokenError()

        parts = authorization_header.split()
        if len(parts) != 2 or parts[0].lower() != "bearer":
            raise InvalidTokenError("Invalid authorization header format")
        token = parts[1]

        if self._jwks_client is None:
            log.error("token verification unavailable", reason="auth_jwks_url not configured")
            raise InvalidTokenError("Token verification is not configured")

        try:
            signing_key = self._jwks_client.get_signing_key_from_jwt(token)
            payload = jwt.decode(
                token,
                signing_key.key,
                algorithms=["RS256"],
                issuer=self._issuer or None,
                audience=self._audience,
                options={
                    "verify_exp": True,
                    "verify_iat": True,
                    "verify_aud": self._audience is not None,
                },
            )

            uid = payload.get("sub")
            if not uid:
                raise InvalidTokenError("Token missing user identifier")

            email = payload.get("email")
            display_name = payload.get("name")

            log.debug("token verified", uid=uid, email=email)
            return AuthenticatedUser(uid=uid, email=email, display_name=display_name)

        except jwt.ExpiredSignatureError:
            log.warning("token expired")
            raise InvalidTokenError("Token has expired")
        except InvalidTokenError:
            raise
        except jwt.InvalidTokenError as e:
            log.warning("token invalid", error=str(e))
            raise InvalidTokenError(f"Token validation failed: {str(e)}")
        except Exception as e:
            log.error("token verification failed", error=str(e), error_type=type(e).__name__)
            raise InvalidTokenError("Token verification failed")


# Singleton instance
_auth_service: Optional[AuthService] = None


def get_auth_service() -> AuthService:
    """Get singleton auth service instance."""
    global _auth_service
    if _auth_service is None:
        from src.config import get_settings

        settings = get_settings()
        _auth_service = AuthService(
            issuer=settings.auth_issuer,
            jwks_url=settings.auth_jwks_url,
            audience=settings.auth_audience,
        )
    return _auth_service
