# bookstore/store/query.py
"""
Query builder for the book collection.

BookQuery is an immutable value: every step returns a new BookQuery, so a
partially built query can be shared and extended without side effects.
Filters are only applied when their driving value is present and sane
(ids > 0, prices >= 0, non-empty search strings); anything else is skipped
silently. Request validation happens earlier, in bookstore.validators.

    books = await (
        BookQuery()
        .with_user_id(3)
        .with_min_price(100)
        .search_title("python")
        .with_order("price")
        .with_direction("asc")
        .fetch_many()
    )
"""
from dataclasses import dataclass, replace
from typing import Any, Optional

from tortoise.queryset import QuerySet

from bookstore.core.errors import MultipleResultsFound
from bookstore.models.book import Book
from bookstore.schemas.book import DEFAULT_BOOK_SORTING, DEFAULT_BOOK_SORTING_DIRECTION
from bookstore.store.decorators import store_operation

SORTABLE_FIELDS = ("id", "title", "price")
SORT_DIRECTIONS = ("asc", "desc")


@dataclass(frozen=True)
class BookQuery:
    user_id: Optional[int] = None
    book_id: Optional[int] = None
    min_price: Optional[int] = None
    max_price: Optional[int] = None
    title: Optional[str] = None
    description: Optional[str] = None
    order: Optional[str] = None
    direction: Optional[str] = None
    limit: int = 0
    offset: int = 0

    # ----- filters -----
    def with_user_id(self, user_id: Optional[int]) -> "BookQuery":
        if user_id is not None and user_id > 0:
            return replace(self, user_id=user_id)
        return self

    def with_book_id(self, book_id: Optional[int]) -> "BookQuery":
        if book_id is not None and book_id > 0:
            return replace(self, book_id=book_id)
        return self

    def with_min_price(self, price: Optional[int]) -> "BookQuery":
        if price is not None and price >= 0:
            return replace(self, min_price=price)
        return self

    def with_max_price(self, price: Optional[int]) -> "BookQuery":
        if price is not None and price >= 0:
            return replace(self, max_price=price)
        return self

    def search_title(self, title: Optional[str]) -> "BookQuery":
        if title:
            return replace(self, title=title)
        return self

    def search_description(self, description: Optional[str]) -> "BookQuery":
        if description:
            return replace(self, description=description)
        return self

    # ----- sorting & pagination -----
    def with_order(self, order: Optional[str]) -> "BookQuery":
        if order in SORTABLE_FIELDS:
            return replace(self, order=order)
        return self

    def with_direction(self, direction: Optional[str]) -> "BookQuery":
        if direction and direction.lower() in SORT_DIRECTIONS:
            return replace(self, direction=direction.lower())
        return self

    def with_limit(self, limit: Optional[int]) -> "BookQuery":
        if limit is not None and limit > 0:
            return replace(self, limit=limit)
        return self

    def with_offset(self, offset: Optional[int]) -> "BookQuery":
        if offset is not None and offset > 0:
            return replace(self, offset=offset)
        return self

    def with_default_sorting(self) -> "BookQuery":
        return self.with_order(DEFAULT_BOOK_SORTING).with_direction(DEFAULT_BOOK_SORTING_DIRECTION)

    # ----- translation -----
    def conditions(self) -> dict[str, Any]:
        """
        Filter arguments for Book.filter(); an empty dict matches every row.

        Values are bound as query parameters by Tortoise. Substring
        filters use the backend's case-insensitive LIKE.
        """
        conditions: dict[str, Any] = {}
        if self.user_id is not None:
            conditions["user_id"] = self.user_id
        if self.book_id is not None:
            conditions["id"] = self.book_id
        if self.min_price is not None:
            conditions["price__gte"] = self.min_price
        if self.max_price is not None:
            conditions["price__lte"] = self.max_price
        if self.title:
            conditions["title__icontains"] = self.title
        if self.description:
            conditions["description__icontains"] = self.description
        return conditions

    def ordering(self) -> list[str]:
        """order_by() arguments; the id breaks ties so pages are stable."""
        if not self.order:
            return []
        prefix = "-" if self.direction == "desc" else ""
        ordering = [f"{prefix}{self.order}"]
        if self.order != "id":
            ordering.append(f"{prefix}id")
        return ordering

    def queryset(self) -> QuerySet:
        """Build the Tortoise queryset, joining the owner for the snapshot."""
        qs = Book.filter(**self.conditions()).select_related("user")
        ordering = self.ordering()
        if ordering:
            qs = qs.order_by(*ordering)
        if self.limit:
            qs = qs.limit(self.limit)
        if self.offset:
            qs = qs.offset(self.offset)
        return qs

    # ----- execution -----
    @store_operation("book", "fetch")
    async def fetch_many(self) -> list[Book]:
        """Return the matching books in order; an empty list when none match."""
        return await self.queryset()

    @store_operation("book", "fetch")
    async def fetch_one(self) -> Optional[Book]:
        """
        Return the only matching book, or None when nothing matches.

        Raises:
            MultipleResultsFound: more than one row matches the filters
        """
        books = await replace(self, limit=2).queryset()
        if not books:
            return None
        if len(books) > 1:
            raise MultipleResultsFound("book", "fetch")
        return books[0]
