# bookstore/core/bootstrap.py
"""
Bootstrap module for application initialization.
Handles initial setup tasks such as creating default admin user on first startup.
"""
import logging

from bookstore.models.user import User
from bookstore.schemas.user import UserCreateIn
from bookstore.store import users as user_store
from bookstore.validators.user import PASSWORD_MIN_LENGTH

logger = logging.getLogger("uvicorn.error")

async def ensure_default_admin(settings) -> User | None:
    """
    If no admin exists in the database, create a default admin from the settings.
    Only takes effect under the following conditions:
      - Currently no user with is_admin=True
      - And ADMIN_PASSWORD is set (to avoid using default weak password)
    Settings used:
      admin_username (ADMIN_USERNAME, default: "admin"), also used as pseudonym
      admin_password (ADMIN_PASSWORD, required and at least PASSWORD_MIN_LENGTH
        characters, otherwise won't create)

    Returns:
        The created admin, or None when nothing was created
    """
    if await User.filter(is_admin=True).exists():
        return None  # Skip creation if admin already exists

    if not settings.admin_password:
        logger.warning("[bootstrap] No admin present, but ADMIN_PASSWORD not set -> skip creating default admin.")
        return None

    if len(settings.admin_password) < PASSWORD_MIN_LENGTH:
        logger.warning(
            "[bootstrap] ADMIN_PASSWORD shorter than %d characters -> skip creating default admin.",
            PASSWORD_MIN_LENGTH,
        )
        return None

    # If the name is already taken by a regular account, append a number suffix
    base_username = settings.admin_username.lower()
    admin_username = base_username
    suffix = 1
    while await user_store.user_exists(admin_username) or await user_store.user_with_pseudonym_exists(admin_username):
        suffix += 1
        admin_username = f"{base_username}{suffix}"

    u = await user_store.create_user(UserCreateIn(
        username=admin_username,
        pseudonym=admin_username,
        password=settings.admin_password,
        is_admin=True,
    ))
    logger.warning("[bootstrap] Created default admin -> username=%s id=%s", u.username, u.id)
    return u
