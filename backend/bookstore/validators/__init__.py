# bookstore/validators/__init__.py
"""
Business rules checked before any mutation.

Each validator runs its checks in order and raises
bookstore.core.errors.ValidationFailed with the code of the first rule that
fails; nothing is aggregated.
"""
from .user import validate_user_creation, validate_user_modification
from .book import validate_book_creation, validate_book_modification, validate_book_listing
