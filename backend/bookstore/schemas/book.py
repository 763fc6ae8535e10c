# bookstore/schemas/book.py
"""
Pydantic schemas for book endpoints.
Defines request models for book creation/modification/search and the public book representation.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict

from .patch import PatchModel
from .user import UserOut

__all__ = ["BookOut", "BookCreateIn", "BookUpdateIn", "BookListingQuery"]

DEFAULT_BOOK_SORTING = "title"
DEFAULT_BOOK_SORTING_DIRECTION = "desc"


class BookOut(BaseModel):
    """
    Public book representation.
    `user` is a read-only snapshot of the owner, rebuilt on every read.
    """
    model_config = ConfigDict(from_attributes=True)

    id: int  # Book unique identifier
    user_id: int  # Owner identifier
    user: Optional[UserOut] = None  # Owner snapshot (username, pseudonym, admin flag)
    title: str
    description: str = ""
    price: int  # Price in cents
    image_url: str = ""


class BookCreateIn(BaseModel):
    """
    Request model for creating a book for a user.
    """
    title: str = ""  # Mandatory, unique per owner
    description: str = ""  # Free text
    price: int = 0  # Price in cents, must not be negative
    image_url: str = ""  # Optional absolute URI


class BookUpdateIn(PatchModel):
    """
    Request model for modifying a book.
    Only the fields sent by the client are applied.
    """
    title: str = ""
    description: str = ""
    price: int = 0
    image_url: str = ""


class BookListingQuery(BaseModel):
    """
    Book search request built from the query string.
    Every filter is optional; None means "not given".
    """
    author_id: Optional[int] = None  # "author-id": owner of the books
    title: Optional[str] = None  # Substring of the title
    description: Optional[str] = None  # Substring of the description
    min_price: Optional[int] = None  # "min-price": inclusive lower bound
    max_price: Optional[int] = None  # "max-price": inclusive upper bound
    order: Optional[str] = None  # Sort key: id, title or price
    direction: Optional[str] = None  # Sort direction: asc or desc
    limit: Optional[int] = None  # Page size
    offset: Optional[int] = None  # Rows to skip
