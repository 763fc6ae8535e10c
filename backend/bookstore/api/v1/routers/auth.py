# bookstore/api/v1/routers/auth.py
from fastapi import APIRouter, Depends, Form, HTTPException, status

from bookstore.api.v1.deps import get_current_user, get_token_issuer, negotiated_format
from bookstore.api.v1.negotiation import MediaFormat, render
from bookstore.core.security import TokenIssuer
from bookstore.models.user import User
from bookstore.schemas.auth import TokenOut
from bookstore.schemas.user import UserOut
from bookstore.store import users as user_store

router = APIRouter(tags=["auth"])


@router.post("/authenticate")
async def authenticate(
    username: str = Form(default=""),
    password: str = Form(default=""),
    fmt: MediaFormat = Depends(negotiated_format),
    tokens: TokenIssuer = Depends(get_token_issuer),
):
    """
    Authenticate a user and issue an access token.

    Credentials are sent as an `application/x-www-form-urlencoded` form.
    Unknown usernames and wrong passwords produce the same answer.

    Args:
        username: Login name (any case)
        password: Plain text password

    Returns:
        TokenOut: `{"token": "<jwt>"}`, valid for ACCESS_TOKEN_EXPIRE_MINUTES

    Raises:
        HTTPException (400): If username or password is empty
        AuthenticationFailed (401): If the credentials are incorrect
    """
    if not username or not password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username or password empty")

    user = await user_store.check_password(username, password)
    token = tokens.issue(user.username)
    return render(TokenOut(token=token), fmt, root="token")


@router.get("/me")
async def me(
    user: User = Depends(get_current_user),
    fmt: MediaFormat = Depends(negotiated_format),
):
    """
    Get current authenticated user information.

    Raises:
        HTTPException (401): If user is not authenticated
    """
    return render(UserOut.model_validate(user), fmt, root="user")
