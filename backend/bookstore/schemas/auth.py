# bookstore/schemas/auth.py
"""
Pydantic schemas for authentication endpoints.
"""
from pydantic import BaseModel

__all__ = ["TokenOut"]

class TokenOut(BaseModel):
    """
    Response model for a successful authentication.
    """
    token: str  # JWT access token for API authentication
