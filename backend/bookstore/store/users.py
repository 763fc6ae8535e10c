# bookstore/store/users.py
"""
User persistence: lookups, existence checks, credential check and CRUD.
"""
import logging
from typing import Optional

from bookstore.core.errors import AuthenticationFailed
from bookstore.core.security import dummy_verify, hash_password, verify_password
from bookstore.models.user import User
from bookstore.schemas.user import UserCreateIn, UserUpdateIn
from bookstore.store.decorators import existence_check, store_operation

logger = logging.getLogger(__name__)


# ===== Lookups =====
@store_operation("user", "fetch")
async def user_by_id(user_id: int) -> Optional[User]:
    return await User.get_or_none(id=user_id)


@store_operation("user", "fetch")
async def user_by_username(username: str) -> Optional[User]:
    """Case-insensitive: usernames are stored lowercase."""
    return await User.get_or_none(username=username.lower())


@store_operation("user", "list")
async def list_users() -> list[User]:
    return await User.all().order_by("username")


# ===== Existence checks (used by the validators) =====
@existence_check
async def user_exists(username: str) -> bool:
    return await User.filter(username=username.lower()).exists()


@existence_check
async def user_with_pseudonym_exists(pseudonym: str) -> bool:
    return await User.filter(pseudonym=pseudonym).exists()


@existence_check
async def another_user_exists(user_id: int, username: str) -> bool:
    """True if a user other than `user_id` already has `username`."""
    return await User.filter(username=username.lower()).exclude(id=user_id).exists()


@existence_check
async def another_user_with_pseudonym_exists(user_id: int, pseudonym: str) -> bool:
    return await User.filter(pseudonym=pseudonym).exclude(id=user_id).exists()


# ===== Credentials =====
@store_operation("user", "authenticate")
async def check_password(username: str, password: str) -> User:
    """
    Verify a username/password pair.

    Args:
        username: Login name (any case)
        password: Plain text password

    Returns:
        User: The authenticated user

    Raises:
        AuthenticationFailed: Unknown user or wrong password (indistinguishable)
        StoreError: The lookup itself failed
    """
    user = await User.get_or_none(username=username.lower())
    if user is None:
        # Same cost as a real verification so timing does not reveal the username
        dummy_verify()
        logger.info("[check_password] unknown user %r", username)
        raise AuthenticationFailed()
    if not verify_password(password, user.password_hash):
        logger.info("[check_password] invalid password for %r", user.username)
        raise AuthenticationFailed()
    return user


# ===== Mutations =====
@store_operation("user", "create")
async def create_user(request: UserCreateIn) -> User:
    """
    Create a user.

    The username is lowercased and the password hashed with Argon2; the
    plain text password is never stored.

    Raises:
        ConstraintViolation: username or pseudonym already taken (race past the validator)
    """
    password_hash = hash_password(request.password) if request.password else ""
    user = await User.create(
        username=request.username.lower(),
        pseudonym=request.pseudonym,
        password_hash=password_hash,
        is_admin=request.is_admin,
    )
    logger.info("[create_user] created user id=%s username=%s", user.id, user.username)
    return user


@store_operation("user", "update")
async def update_user(user: User, changes: UserUpdateIn) -> User:
    """
    Apply a patch to `user` and persist it.

    Only the fields present in `changes` are written. A present password is
    re-hashed; without one the UPDATE does not touch the stored hash.

    Returns:
        User: The same instance, patched
    """
    update_fields = []
    for name, value in changes.changes().items():
        if name == "password":
            user.password_hash = hash_password(value)
            update_fields.append("password_hash")
        elif name == "username":
            user.username = value.lower()
            update_fields.append("username")
        else:
            setattr(user, name, value)
            update_fields.append(name)

    if update_fields:
        await user.save(update_fields=update_fields)
    return user


@store_operation("user", "delete")
async def delete_user(user_id: int) -> None:
    """Hard delete; the user's books are removed by ON DELETE CASCADE."""
    await User.filter(id=user_id).delete()
