import logging
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import BaseModel

from .config import SUPABASE_JWT_AUDIENCE, SUPABASE_JWT_SECRET

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

ALGORITHM = "HS256"


class AuthenticatedUser(BaseModel):
    """Stable identity resolved from a verified access token"""

    id: str
    email: Optional[str] = None
    role: Optional[str] = None


def verify_access_token(token: str) -> Optional[AuthenticatedUser]:
    """
    Verify a Supabase access token and return the user it identifies.

    Returns None when the token is invalid, expired or carries no subject.
    """
    if not SUPABASE_JWT_SECRET:
        logger.error("SUPABASE_JWT_SECRET not configured")
        raise HTTPException(status_code=500, detail="Authentication not configured")

    try:
        payload = jwt.decode(
            token,
            SUPABASE_JWT_SECRET,
            algorithms=[ALGORITHM],
            audience=SUPABASE_JWT_AUDIENCE,
        )
    except ExpiredSignatureError:
        logger.info("Access token expired")
        return None
    except JWTError as e:
        logger.warning(f"Token verification failed: {e}")
        return None

    user_id = payload.get("sub")
    if not user_id:
        logger.warning(f"Token missing subject claim. Available claims: {list(payload.keys())}")
        return None

    app_metadata = payload.get("app_metadata") or {}
    return AuthenticatedUser(
        id=user_id,
        email=payload.get("email"),
        role=app_metadata.get("role"),
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> AuthenticatedUser:
    """Get current user from the bearer token, or fail with 401"""
    if not credentials:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated. Please provide a valid Bearer token in the Authorization header.",
        )

    user = verify_access_token(credentials.credentials)
    if not user:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user
