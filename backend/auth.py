"""
Authentication module for access-token JWT and API key validation.
Provides FastAPI dependencies for securing endpoints.

Access tokens are HS256 JWTs signed with the shared JWT_SECRET. The user id
is read from the "userId" claim, falling back to the standard "sub" claim.
"""
import jwt
from fastapi import HTTPException, Header
from typing import Optional
import logging

from backend.settings import get_settings

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"


async def get_current_user(
    authorization: Optional[str] = Header(None),
    x_api_key: Optional[str] = Header(None, alias="X-API-Key")
) -> str:
    """
    Authenticate via API key OR access token JWT.
    Returns user_id string.

    Usage:
        @app.get("/protected")
        async def protected_route(user_id: str = Depends(get_current_user)):
            return {"user_id": user_id}
    """
    # Option 1: API Key authentication
    if x_api_key:
        return validate_api_key(x_api_key)

    # Option 2: Bearer JWT authentication
    if authorization:
        return validate_jwt(authorization)

    raise HTTPException(status_code=401, detail="Access token required")


def validate_api_key(api_key: str) -> str:
    """
    Validate API key and return user_id.

    API keys must name the user they act for: "sk_test_abc123:user_12345"
    returns "user_12345". A bare key is rejected.
    """
    valid_keys = get_settings().api_keys_list

    if not valid_keys:
        logger.warning("No API keys configured (API_KEYS env var empty)")
        raise HTTPException(status_code=401, detail="API key authentication not configured")

    # Check if key (without user suffix) is valid
    key_part, _, user_id = api_key.partition(":")

    if key_part not in valid_keys:
        raise HTTPException(status_code=401, detail="Invalid API key")

    user_id = user_id.strip()
    if not user_id:
        raise HTTPException(status_code=401, detail="API key must include a user id (key:user_id)")

    return user_id


def validate_jwt(authorization: str) -> str:
    """Validate a "Bearer <token>" header and return user_id."""
    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1].strip():
        raise HTTPException(status_code=401, detail="Access token required")

    return decode_access_token(parts[1].strip())


def decode_access_token(token: str) -> str:
    """
    Verify an HS256 access token and return its user id.

    Raises:
        HTTPException: 401 if the token has expired, 403 if it is otherwise
            invalid or carries no user id
    """
    try:
        payload = jwt.decode(
            token,
            get_settings().jwt_secret,
            algorithms=[JWT_ALGORITHM],
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=401,
            detail="Token expired. Please refresh your token.",
        )
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid access token: {e}")
        raise HTTPException(status_code=403, detail="Invalid token")

    user_id = payload.get("userId") or payload.get("sub")
    if not user_id:
        logger.warning("Access token missing user ID")
        raise HTTPException(status_code=403, detail="Invalid token")

    logger.debug(f"Access token validated for user: {user_id}")
    return str(user_id)
