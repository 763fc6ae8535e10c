# bookstore/models/user.py
"""
Database model for users.
Represents a user account in the system, containing authentication credentials,
the public pseudonym and the administrator flag.
"""
from tortoise import fields, models

class User(models.Model):
    """
    User database model.

    Relationships:
    - Has many Books (one-to-many, via related_name="books"); deleting a user
      deletes their books through the ON DELETE CASCADE rule

    Security:
    - Password is stored as a hash (never store plain text passwords)
    - Username is stored lowercase and must be unique across all users
    - Pseudonym must be unique across all users
    """
    id = fields.IntField(pk=True)  # Primary key: generated user identifier
    username = fields.CharField(
        max_length=256,
        unique=True,
        index=True
    )  # Login name, always lowercase (unique, indexed for fast lookups)
    pseudonym = fields.CharField(max_length=256, unique=True)  # Public display name
    password_hash = fields.CharField(max_length=255)  # Argon2 hash, never returned by the API
    is_admin = fields.BooleanField(default=False)  # Administrator flag

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "users"  # Database table name
