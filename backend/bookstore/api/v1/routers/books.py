# bookstore/api/v1/routers/books.py
from fastapi import APIRouter, Depends, HTTPException, Query, status

from bookstore.api.v1.deps import ResourceId, negotiated_format
from bookstore.api.v1.negotiation import MediaFormat, render
from bookstore.schemas.book import BookListingQuery, BookOut
from bookstore.store import books as book_store
from bookstore.validators import validate_book_listing

router = APIRouter(prefix="/books", tags=["books"])


@router.get("")
async def list_books(
    author_id: int | None = Query(default=None, alias="author-id"),
    title: str | None = Query(default=None, description="Substring of the title"),
    description: str | None = Query(default=None, description="Substring of the description"),
    min_price: int | None = Query(default=None, alias="min-price"),
    max_price: int | None = Query(default=None, alias="max-price"),
    order: str | None = Query(default=None, description="id, title or price"),
    direction: str | None = Query(default=None, description="asc or desc"),
    limit: int | None = Query(default=None),
    offset: int | None = Query(default=None),
    fmt: MediaFormat = Depends(negotiated_format),
):
    """
    Search the books of all users (public).

    Every filter is optional; without any, all books are returned sorted by
    title, descending.

    Returns:
        list[BookOut]: Matching books, each with its owner

    Raises:
        ValidationFailed (400): invalid_search_fields:<field> when a filter is
            out of range or min-price exceeds max-price
    """
    search = BookListingQuery(
        author_id=author_id,
        title=title,
        description=description,
        min_price=min_price,
        max_price=max_price,
        order=order,
        direction=direction,
        limit=limit,
        offset=offset,
    )
    validate_book_listing(search)
    books = await book_store.search_books(search)
    return render([BookOut.model_validate(b) for b in books], fmt, root="books", item="book")


@router.get("/{book_id}")
async def get_book(book_id: ResourceId, fmt: MediaFormat = Depends(negotiated_format)):
    book = await book_store.book_by_id(book_id)
    if not book:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resource Not Found")
    return render(BookOut.model_validate(book), fmt, root="book")
