# bookstore/schemas/user.py
"""
Pydantic schemas for user endpoints.
Defines request models for user creation/modification and the public user representation.
"""
from pydantic import BaseModel, ConfigDict

from .patch import PatchModel

__all__ = ["UserOut", "UserCreateIn", "UserUpdateIn"]


class UserOut(BaseModel):
    """
    Public user representation.
    Never contains the password hash.
    """
    model_config = ConfigDict(from_attributes=True)

    id: int  # User unique identifier
    username: str  # Login name (lowercase)
    pseudonym: str  # Public display name
    is_admin: bool = False  # Administrator flag


class UserCreateIn(BaseModel):
    """
    Request model for creating a user.
    Missing fields default to empty values so the validators can name them.
    """
    username: str = ""  # Login name (stored lowercase, must be unique)
    password: str = ""  # Plain text password (min 6 characters, hashed before storage)
    pseudonym: str = ""  # Display name (must be unique)
    is_admin: bool = False  # Create an administrator


class UserUpdateIn(PatchModel):
    """
    Request model for modifying a user.
    Only the fields sent by the client are applied; a missing password
    keeps the stored hash.
    """
    username: str = ""
    password: str = ""
    pseudonym: str = ""
    is_admin: bool = False
