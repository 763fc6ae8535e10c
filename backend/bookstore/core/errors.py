# bookstore/core/errors.py
"""
Domain errors.

The store wraps every ORM/driver failure into a StoreError that carries the
entity and the operation it was performing, so handlers can log the full
detail and answer with an opaque server error. Validators raise
ValidationFailed with a stable code that is shown to the client as-is.
"""


class BookstoreError(Exception):
    """Base class for application errors."""


class ValidationFailed(BookstoreError):
    """
    A business rule rejected the request.

    `code` is a stable identifier such as "book_mandatory_fields:title".
    """

    def __init__(self, code: str):
        super().__init__(code)
        self.code = code


class StoreError(BookstoreError):
    """A persistence operation failed."""

    def __init__(self, entity: str, operation: str, cause: Exception | None = None):
        message = f"store: unable to {operation} {entity}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.entity = entity
        self.operation = operation
        self.cause = cause


class ConstraintViolation(StoreError):
    """A database constraint (unique, not null, foreign key) rejected a write."""


class MultipleResultsFound(StoreError):
    """A single-row lookup matched more than one row."""


class AuthenticationFailed(BookstoreError):
    """
    Unknown username or wrong password.

    Both cases share this single error so callers cannot tell them apart.
    """

    def __init__(self):
        super().__init__("Credentials incorrect")
