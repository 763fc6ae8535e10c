# bookstore/api/v1/deps.py
from typing import Annotated

from fastapi import Depends, Header, HTTPException, Path, Request, status

from bookstore.api.v1.negotiation import MediaFormat, accepted_format
from bookstore.core.db import INT_FIELD_MAX
from bookstore.core.security import TokenIssuer
from bookstore.models.user import User
from bookstore.store import users as user_store

# Path ids never exceed the IntField column range
ResourceId = Annotated[int, Path(le=INT_FIELD_MAX)]


def get_token_issuer(request: Request) -> TokenIssuer:
    """
    FastAPI dependency returning the TokenIssuer built with the application.

    The issuer (and its signing key) is created by `create_app` from the
    settings and kept on `app.state`.
    """
    return request.app.state.token_issuer


def negotiated_format(accept: str | None = Header(default=None)) -> MediaFormat:
    """
    FastAPI dependency resolving the response format from the Accept header.

    Raises:
        HTTPException (406): If neither JSON nor XML is acceptable
    """
    fmt = accepted_format(accept)
    if fmt is None:
        raise HTTPException(status_code=status.HTTP_406_NOT_ACCEPTABLE, detail="Accept Type unknown")
    return fmt


async def get_current_user(
    authorization: str | None = Header(default=None),
    tokens: TokenIssuer = Depends(get_token_issuer),
) -> User:
    """
    FastAPI dependency to get the current authenticated user.

    Extracts the JWT from the `Authorization: Bearer xxx` header, validates
    it and loads the user named by its subject.

    Returns:
        User: The authenticated user object from database

    Raises:
        HTTPException (401): If no token is provided (AUTH_REQUIRED)
        HTTPException (401): If token is invalid or expired (AUTH_INVALID_TOKEN)
        HTTPException (401): If user not found in database (AUTH_USER_NOT_FOUND)

    Usage:
        @router.get("/protected")
        async def protected_route(user: User = Depends(get_current_user)):
            return {"user_id": user.id}
    """
    token = None
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1].strip()

    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="AUTH_REQUIRED")

    try:
        payload = tokens.decode(token)
        username = payload.get("sub")
    except Exception:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="AUTH_INVALID_TOKEN")

    if not isinstance(username, str) or not username:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="AUTH_INVALID_TOKEN")

    user = await user_store.user_by_username(username)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="AUTH_USER_NOT_FOUND")
    return user


async def require_admin(current: User = Depends(get_current_user)) -> User:
    """
    FastAPI dependency to ensure the current user is an administrator.

    Raises:
        HTTPException (403): If user is not an admin (Access Forbidden)
        HTTPException (401): If user is not authenticated (from get_current_user)
    """
    if not current.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access Forbidden")
    return current
