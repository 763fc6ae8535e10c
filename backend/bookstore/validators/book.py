# bookstore/validators/book.py
from pydantic import AnyUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from bookstore.core.db import INT_FIELD_MAX
from bookstore.core.errors import ValidationFailed
from bookstore.schemas.book import BookCreateIn, BookListingQuery, BookUpdateIn
from bookstore.store import books as book_store
from bookstore.store.query import SORT_DIRECTIONS, SORTABLE_FIELDS

_url_adapter = TypeAdapter(AnyUrl)


def is_absolute_uri(value: str) -> bool:
    """True if `value` parses as an absolute URI (scheme required)."""
    try:
        _url_adapter.validate_python(value)
    except PydanticValidationError:
        return False
    return True


async def validate_book_creation(user_id: int, request: BookCreateIn) -> None:
    """
    Rules for a new book of `user_id`.

    Raises:
        ValidationFailed: book_mandatory_fields:title, book_already_exists,
            invalid_book_fields:image_url or invalid_book_fields:price (negative or
            beyond the column range)
    """
    if not request.title:
        raise ValidationFailed("book_mandatory_fields:title")

    if await book_store.book_for_user_exists(user_id, request.title):
        raise ValidationFailed("book_already_exists")

    if request.image_url and not is_absolute_uri(request.image_url):
        raise ValidationFailed("invalid_book_fields:image_url")

    if not 0 <= request.price <= INT_FIELD_MAX:
        raise ValidationFailed("invalid_book_fields:price")


async def validate_book_modification(user_id: int, book_id: int, changes: BookUpdateIn) -> None:
    """
    Rules for a book patch; only the fields present in `changes` are checked.
    The title uniqueness check ignores the book being modified.
    """
    if changes.is_set("title"):
        if not changes.title:
            raise ValidationFailed("book_mandatory_fields:title")
        if await book_store.book_with_same_title(user_id, book_id, changes.title):
            raise ValidationFailed("book_already_exists")

    if changes.is_set("image_url"):
        if changes.image_url and not is_absolute_uri(changes.image_url):
            raise ValidationFailed("invalid_book_fields:image_url")

    if changes.is_set("price"):
        if not 0 <= changes.price <= INT_FIELD_MAX:
            raise ValidationFailed("invalid_book_fields:price")


def validate_book_listing(search: BookListingQuery) -> None:
    """
    Rules for a book search; every filter is optional.

    Ids and price bounds must be strictly positive here even though the
    query builder itself accepts 0. Every number must fit an IntField column.
    """
    if search.author_id is not None and not 0 < search.author_id <= INT_FIELD_MAX:
        raise ValidationFailed("invalid_search_fields:author-id")

    if search.description is not None and search.description == "":
        raise ValidationFailed("invalid_search_fields:description")

    if search.title is not None and search.title == "":
        raise ValidationFailed("invalid_search_fields:title")

    if search.min_price is not None and not 0 < search.min_price <= INT_FIELD_MAX:
        raise ValidationFailed("invalid_search_fields:min-price")

    if search.max_price is not None and not 0 < search.max_price <= INT_FIELD_MAX:
        raise ValidationFailed("invalid_search_fields:max-price")

    if search.min_price is not None and search.max_price is not None:
        if search.min_price > search.max_price:
            raise ValidationFailed("invalid_search_fields:min-price,max-price")

    if search.order is not None and search.order not in SORTABLE_FIELDS:
        raise ValidationFailed("invalid_search_fields:order")

    if search.direction is not None and search.direction.lower() not in SORT_DIRECTIONS:
        raise ValidationFailed("invalid_search_fields:direction")

    if search.limit is not None and not 0 < search.limit <= INT_FIELD_MAX:
        raise ValidationFailed("invalid_search_fields:limit")

    if search.offset is not None and not 0 <= search.offset <= INT_FIELD_MAX:
        raise ValidationFailed("invalid_search_fields:offset")
