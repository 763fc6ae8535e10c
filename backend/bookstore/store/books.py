# bookstore/store/books.py
"""
Book persistence: search, point lookups, existence checks and CRUD.

Reads go through BookQuery so every returned book carries its owner
snapshot (`book.user`).
"""
import logging
from typing import Optional

from bookstore.core.errors import ConstraintViolation
from bookstore.models.book import Book
from bookstore.models.user import User
from bookstore.schemas.book import BookCreateIn, BookListingQuery, BookUpdateIn
from bookstore.store.decorators import existence_check, store_operation
from bookstore.store.query import BookQuery

logger = logging.getLogger(__name__)


# ===== Reads =====
async def list_books() -> list[Book]:
    """All books, default sorting."""
    return await BookQuery().with_default_sorting().fetch_many()


async def search_books(search: BookListingQuery) -> list[Book]:
    """
    Books matching a (validated) listing request.

    Sorting falls back to the default (title, descending) for anything the
    request does not set.
    """
    query = (
        BookQuery()
        .with_default_sorting()
        .with_user_id(search.author_id)
        .search_title(search.title)
        .search_description(search.description)
        .with_min_price(search.min_price)
        .with_max_price(search.max_price)
        .with_order(search.order)
        .with_direction(search.direction)
        .with_limit(search.limit)
        .with_offset(search.offset)
    )
    return await query.fetch_many()


async def user_books(user_id: int) -> list[Book]:
    return await BookQuery().with_default_sorting().with_user_id(user_id).fetch_many()


async def book_by_id(book_id: int) -> Optional[Book]:
    if book_id <= 0:
        return None
    return await BookQuery().with_book_id(book_id).fetch_one()


async def book_by_id_and_user_id(user_id: int, book_id: int) -> Optional[Book]:
    """The book `book_id` only if it belongs to `user_id`."""
    if user_id <= 0 or book_id <= 0:
        return None
    return await BookQuery().with_user_id(user_id).with_book_id(book_id).fetch_one()


# ===== Existence checks (used by the validators) =====
@existence_check
async def book_for_user_exists(user_id: int, title: str) -> bool:
    return await Book.filter(user_id=user_id, title=title).exists()


@existence_check
async def book_with_same_title(user_id: int, book_id: int, title: str) -> bool:
    """True if another book of `user_id` (not `book_id`) already uses `title`."""
    return await Book.filter(user_id=user_id, title=title).exclude(id=book_id).exists()


# ===== Mutations =====
@store_operation("book", "create")
async def create_book(user_id: int, request: BookCreateIn) -> Book:
    """
    Create a book owned by `user_id`.

    The resolved owner is attached to the returned book so it can be
    rendered with its snapshot without another query.

    Raises:
        ConstraintViolation: The owner does not exist, or already has a book with this title
    """
    user = await User.get_or_none(id=user_id)
    if user is None:
        raise ConstraintViolation("book", "create")
    book = await Book.create(
        user=user,
        title=request.title,
        description=request.description,
        price=request.price,
        image_url=request.image_url,
    )
    book.user = user
    logger.info("[create_book] created book id=%s for user id=%s", book.id, user.id)
    return book


@store_operation("book", "update")
async def update_book(book: Book, changes: BookUpdateIn) -> Book:
    """Write only the fields present in `changes`; returns the patched book."""
    update_fields = changes.apply_to(book)
    if update_fields:
        await book.save(update_fields=update_fields)
    return book


@store_operation("book", "delete")
async def delete_book(book_id: int) -> None:
    await Book.filter(id=book_id).delete()
