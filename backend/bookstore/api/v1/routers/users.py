# bookstore/api/v1/routers/users.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from bookstore.api.v1.deps import ResourceId, get_current_user, negotiated_format, require_admin
from bookstore.api.v1.negotiation import MediaFormat, decode_body, render
from bookstore.models.user import User
from bookstore.schemas.user import UserCreateIn, UserOut, UserUpdateIn
from bookstore.store import users as user_store
from bookstore.validators import validate_user_creation, validate_user_modification

logger = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/users", tags=["users"])


def _user_out(u: User) -> UserOut:
    return UserOut.model_validate(u)


@router.get("", dependencies=[Depends(get_current_user)])
async def list_users(
    fmt: MediaFormat = Depends(negotiated_format),
):
    """
    Get all users, ordered by username.

    Raises:
        HTTPException (401): If user is not authenticated
    """
    users = await user_store.list_users()
    return render([_user_out(u) for u in users], fmt, root="users", item="user")


@router.post("")
async def create_user(
    request: Request,
    current: User = Depends(get_current_user),
    fmt: MediaFormat = Depends(negotiated_format),
):
    """
    Create a user account (admin only).

    Args:
        request: Body (JSON or XML) decoded into UserCreateIn:
            - username: str (required, unique, stored lowercase)
            - pseudonym: str (required, unique)
            - password: str (at least 6 characters)
            - is_admin: bool (optional)

    Returns:
        UserOut: The created user, with status 201

    Raises:
        HTTPException (403): If the caller is not an admin
        ValidationFailed (400): user_mandatory_fields:*, user_already_exists,
            pseudonym_already_exists, password_min_length
        HTTPException (401): If user is not authenticated
    """
    if not current.is_admin:
        logger.warning("[CreateUser] User %s is not admin", current.username)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access Forbidden")

    body = await decode_body(request, UserCreateIn)
    await validate_user_creation(body)
    user = await user_store.create_user(body)
    return render(_user_out(user), fmt, status_code=status.HTTP_201_CREATED, root="user")


@router.get("/{user_id}", dependencies=[Depends(get_current_user)])
async def get_user(
    user_id: ResourceId,
    fmt: MediaFormat = Depends(negotiated_format),
):
    """
    Get a single user.

    Raises:
        HTTPException (404): If user not found
        HTTPException (401): If user is not authenticated
    """
    user = await user_store.user_by_id(user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resource Not Found")
    return render(_user_out(user), fmt, root="user")


@router.put("/{user_id}")
async def update_user(
    user_id: ResourceId,
    request: Request,
    current: User = Depends(get_current_user),
    fmt: MediaFormat = Depends(negotiated_format),
):
    """
    Modify a user (partial update).

    Only the fields present in the body are changed; omitting `password`
    keeps the current one. Admins may modify anyone; other users only
    themselves, and they may not grant themselves admin rights.

    Args:
        user_id: User to modify
        request: Body (JSON or XML) decoded into UserUpdateIn

    Returns:
        UserOut: The modified user

    Raises:
        HTTPException (404): If user not found
        HTTPException (403): If a non-admin modifies another user
        HTTPException (400): If a non-admin tries to become admin
        ValidationFailed (400): If a present field breaks a rule
    """
    original = await user_store.user_by_id(user_id)
    if not original:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resource Not Found")

    body = await decode_body(request, UserUpdateIn)

    if not current.is_admin:
        if original.id != current.id:
            logger.warning("[UpdateUser] User with id %s tried to change another user", current.id)
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access Forbidden")
        if body.is_set("is_admin") and body.is_admin:
            logger.warning("[UpdateUser] User with id %s tried to become an admin", current.id)
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Normal users could not change their permissions",
            )

    await validate_user_modification(original.id, body)
    user = await user_store.update_user(original, body)
    return render(_user_out(user), fmt, root="user")


@router.delete("/{user_id}")
async def delete_user(
    user_id: ResourceId,
    current: User = Depends(require_admin),
    fmt: MediaFormat = Depends(negotiated_format),
):
    """
    Delete a user account and all their books (admin only).

    Raises:
        HTTPException (403): If user is not an admin
        HTTPException (404): If user not found
        HTTPException (400): If the admin tries to delete their own account
    """
    target = await user_store.user_by_id(user_id)
    if not target:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resource Not Found")

    if target.id == current.id:
        logger.warning("[DeleteUser] User with id %s tried to delete their own account", current.id)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Deleting own account not possible")

    await user_store.delete_user(target.id)
    return render(None, fmt, status_code=status.HTTP_204_NO_CONTENT)
