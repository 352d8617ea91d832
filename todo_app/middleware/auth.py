"""JWT authentication dependency for FastAPI."""
from fastapi import HTTPException, status, Request
from jose import jwt, JWTError, ExpiredSignatureError
from pydantic import BaseModel
from typing import Optional
import os

from todo_app.utils.logger import get_logger

# Secret shared with the external identity provider that mints the tokens
AUTH_SECRET = os.environ.get("AUTH_SECRET", "change-me-in-production")
AUTH_ALGORITHM = os.environ.get("AUTH_ALGORITHM", "HS256")

logger = get_logger(__name__)


class CurrentUser(BaseModel):
    """Identity extracted from the bearer token."""
    owner: str
    email: Optional[str] = None


def _unauthorized(detail: str) -> HTTPException:
    logger.warning("Authentication rejected", reason=detail)
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(request: Request) -> CurrentUser:
    """
    Validate JWT token from Authorization header and resolve the task owner.

    The owner is the token's ``email`` claim, falling back to ``sub``.

    Args:
        request: FastAPI request object to extract Authorization header

    Returns:
        CurrentUser with the owner identity

    Raises:
        HTTPException: 401 if the token is missing, invalid or expired
    """
    auth_header = request.headers.get("authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise _unauthorized("Unauthorized")

    token = auth_header[7:]  # Remove "Bearer " prefix

    try:
        payload = jwt.decode(token, AUTH_SECRET, algorithms=[AUTH_ALGORITHM])
    except ExpiredSignatureError:
        raise _unauthorized("Token has expired")
    except JWTError:
        raise _unauthorized("Invalid token")

    email = payload.get("email")
    owner = email or payload.get("sub")
    if not owner:
        raise _unauthorized("Invalid token: missing user identity")

    return CurrentUser(owner=owner, email=email)
