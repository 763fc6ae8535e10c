# bookstore/validators/user.py
from bookstore.core.errors import ValidationFailed
from bookstore.schemas.user import UserCreateIn, UserUpdateIn
from bookstore.store import users as user_store

PASSWORD_MIN_LENGTH = 6


async def validate_user_creation(request: UserCreateIn) -> None:
    """
    Rules for a new user.

    Raises:
        ValidationFailed: user_mandatory_fields:username, user_mandatory_fields:pseudonym,
            user_already_exists, pseudonym_already_exists or password_min_length
    """
    if not request.username:
        raise ValidationFailed("user_mandatory_fields:username")

    if not request.pseudonym:
        raise ValidationFailed("user_mandatory_fields:pseudonym")

    if await user_store.user_exists(request.username):
        raise ValidationFailed("user_already_exists")

    if await user_store.user_with_pseudonym_exists(request.pseudonym):
        raise ValidationFailed("pseudonym_already_exists")

    _validate_password(request.password)


async def validate_user_modification(user_id: int, changes: UserUpdateIn) -> None:
    """
    Rules for a user patch; only the fields present in `changes` are checked.
    Uniqueness checks ignore the user being modified.
    """
    if changes.is_set("username"):
        if not changes.username:
            raise ValidationFailed("user_mandatory_fields:username")
        if await user_store.another_user_exists(user_id, changes.username):
            raise ValidationFailed("user_already_exists")

    if changes.is_set("pseudonym"):
        if not changes.pseudonym:
            raise ValidationFailed("user_mandatory_fields:pseudonym")
        if await user_store.another_user_with_pseudonym_exists(user_id, changes.pseudonym):
            raise ValidationFailed("pseudonym_already_exists")

    if changes.is_set("password"):
        _validate_password(changes.password)


def _validate_password(password: str) -> None:
    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationFailed("password_min_length")
