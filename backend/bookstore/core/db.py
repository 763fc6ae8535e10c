# bookstore/core/db.py
"""
Database configuration and initialization module.
Handles Tortoise ORM setup, database connection, and migration configuration.
"""
from tortoise import Tortoise

from bookstore.config import settings

# Upper bound of an IntField column (signed 32-bit); ids, prices and page sizes share it
INT_FIELD_MAX = 2**31 - 1

# Tortoise ORM configuration dictionary
# This configuration is also used by Aerich for database migrations
TORTOISE_ORM = {
    "connections": {"default": settings.database_url},
    "apps": {
        "models": {
            "models": [
                "bookstore.models.user",   # User model
                "bookstore.models.book",   # Book model
                "aerich.models",           # Required: Let Aerich manage migration tables
            ],
            "default_connection": "default",
        },
    },
}


def build_config(db_url: str) -> dict:
    """
    Return a copy of TORTOISE_ORM pointing at another database URL.

    Used by the app factory and the tests so the module-level configuration
    (read by Aerich) is never mutated.
    """
    return {
        "connections": {"default": db_url},
        "apps": TORTOISE_ORM["apps"],
    }


async def init_db(db_url: str | None = None, generate_schemas: bool = False):
    """
    Initialize Tortoise ORM database connection.

    This function should be called during application startup to establish
    the database connection and register all models.

    Args:
        db_url: Database URL; defaults to the configured DATABASE_URL
        generate_schemas: Create missing tables directly (development only,
            production schemas are managed by Aerich migrations)
    """
    await Tortoise.init(config=build_config(db_url or settings.database_url))
    if generate_schemas:
        await Tortoise.generate_schemas(safe=True)


async def close_db():
    """
    Close all database connections.

    This function should be called during application shutdown to properly
    clean up database connections and resources.
    """
    await Tortoise.close_connections()
