# bookstore/api/v1/routers/user_books.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from bookstore.api.v1.deps import ResourceId, get_current_user, negotiated_format
from bookstore.api.v1.negotiation import MediaFormat, decode_body, render
from bookstore.models.book import Book
from bookstore.models.user import User
from bookstore.schemas.book import BookCreateIn, BookOut, BookUpdateIn
from bookstore.store import books as book_store
from bookstore.store import users as user_store
from bookstore.validators import validate_book_creation, validate_book_modification

logger = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/users/{user_id}/books", tags=["books"])


def _may_manage(current: User, owner_id: int) -> bool:
    """Owners manage their own books; admins manage everyone's."""
    return current.is_admin or current.id == owner_id


async def _owned_book(user_id: int, book_id: int) -> Book:
    book = await book_store.book_by_id_and_user_id(user_id, book_id)
    if not book:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resource Not Found")
    return book


@router.get("", dependencies=[Depends(get_current_user)])
async def list_user_books(
    user_id: ResourceId,
    fmt: MediaFormat = Depends(negotiated_format),
):
    """
    Get the books of one user.

    Raises:
        HTTPException (404): If user not found
        HTTPException (401): If user is not authenticated
    """
    user = await user_store.user_by_id(user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resource Not Found")

    books = await book_store.user_books(user.id)
    return render([BookOut.model_validate(b) for b in books], fmt, root="books", item="book")


@router.post("")
async def create_user_book(
    user_id: ResourceId,
    request: Request,
    current: User = Depends(get_current_user),
    fmt: MediaFormat = Depends(negotiated_format),
):
    """
    Create a book for a user (the user themselves or an admin).

    Args:
        user_id: Owner of the new book
        request: Body (JSON or XML) decoded into BookCreateIn:
            - title: str (required, unique for this owner)
            - description: str
            - price: int (cents, >= 0)
            - image_url: str (absolute URI or empty)

    Returns:
        BookOut: The created book with its owner, with status 201

    Raises:
        HTTPException (404): If user not found
        HTTPException (403): If the caller is neither the user nor an admin
        ValidationFailed (400): book_mandatory_fields:title, book_already_exists,
            invalid_book_fields:image_url, invalid_book_fields:price
    """
    owner = await user_store.user_by_id(user_id)
    if not owner:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resource Not Found")

    if not _may_manage(current, owner.id):
        logger.warning("[CreateUserBook] User with id %s tried to create a book for user %s", current.id, owner.id)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access Forbidden")

    body = await decode_body(request, BookCreateIn)
    await validate_book_creation(owner.id, body)
    book = await book_store.create_book(owner.id, body)
    return render(BookOut.model_validate(book), fmt, status_code=status.HTTP_201_CREATED, root="book")


@router.put("/{book_id}")
async def update_user_book(
    user_id: ResourceId,
    book_id: ResourceId,
    request: Request,
    current: User = Depends(get_current_user),
    fmt: MediaFormat = Depends(negotiated_format),
):
    """
    Modify a book (partial update); only the fields present in the body change.

    Raises:
        HTTPException (404): If the book does not exist or is not owned by user_id
        HTTPException (403): If the caller is neither the owner nor an admin
        ValidationFailed (400): If a present field breaks a rule
    """
    book = await _owned_book(user_id, book_id)

    if not _may_manage(current, book.user_id):
        logger.warning("[UpdateUserBook] User with id %s tried to update another user's book", current.id)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access Forbidden")

    body = await decode_body(request, BookUpdateIn)
    await validate_book_modification(book.user_id, book.id, body)
    book = await book_store.update_book(book, body)
    return render(BookOut.model_validate(book), fmt, root="book")


@router.delete("/{book_id}")
async def delete_user_book(
    user_id: ResourceId,
    book_id: ResourceId,
    current: User = Depends(get_current_user),
    fmt: MediaFormat = Depends(negotiated_format),
):
    """
    Delete a book; the deleted book is returned.

    Raises:
        HTTPException (404): If the book does not exist or is not owned by user_id
        HTTPException (403): If the caller is neither the owner nor an admin
    """
    book = await _owned_book(user_id, book_id)

    if not _may_manage(current, book.user_id):
        logger.warning("[DeleteUserBook] User with id %s tried to delete another user's book", current.id)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access Forbidden")

    await book_store.delete_book(book.id)
    return render(BookOut.model_validate(book), fmt, root="book")
