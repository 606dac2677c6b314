"""
verify.py
---------
Purpose:
    JWT verification against Supabase Auth JWKS.

Notes:
    - Fetches the signing keys from Supabase and caches them (PyJWKClient).
    - Verified claims become an explicit AuthContext handed to each route
      through `get_auth_context`; nothing reads session state globally.
"""

from dataclasses import dataclass

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jwt import PyJWKClient

from castingfy.config import settings
from castingfy.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

SUPABASE_AUDIENCE = "authenticated"

_jwk_client = PyJWKClient(settings.jwks_url(), cache_keys=True)
_security = HTTPBearer(auto_error=False)


@dataclass(frozen=True, slots=True)
class AuthContext:
    """Identity of the caller for the duration of one request."""

    user_id: str
    email: str | None = None
    app_role: str | None = None

    @classmethod
    def from_claims(cls, claims: dict) -> "AuthContext":
        user_id = claims.get("sub")
        if not user_id:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid token: missing user ID",
                headers={"WWW-Authenticate": "Bearer"},
            )
        metadata = claims.get("user_metadata") or {}
        return cls(user_id=str(user_id), email=claims.get("email"), app_role=metadata.get("role"))


def verify_jwt(token: str) -> dict:
    try:
        signing_key = _jwk_client.get_signing_key_from_jwt(token)
        return jwt.decode(
            token,
            signing_key.key,
            algorithms=["ES256", "RS256"],
            audience=SUPABASE_AUDIENCE,
            options={"verify_exp": True},
        )
    except Exception as e:
        logger.info("Rejected bearer token", error_type=type(e).__name__)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


def auth_dependency(
    credentials: HTTPAuthorizationCredentials | None = Depends(_security),
) -> dict:
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return verify_jwt(credentials.credentials)


def get_auth_context(claims: dict = Depends(auth_dependency)) -> AuthContext:
    return AuthContext.from_claims(claims)
