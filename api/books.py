"""
Book endpoints.

Each handler validates its input, makes one repository call and maps the
outcome to a status code. Validation problems are answered with a list of
{propertyName, errorMessage} objects.
"""

from typing import List, Optional
from urllib.parse import quote

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from fastapi.responses import JSONResponse

from api.auth import verify_api_key
from api.models import Book, ErrorResponse, ValidationFailure
from api.repository import STORE_ERRORS
from api.services import BookServices, get_services
from api.validation import DUPLICATE_ISBN_MESSAGE

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/books", tags=["Books"])

VALIDATION_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": List[ValidationFailure], "description": "Validation failed"},
    status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse, "description": "Missing or invalid API key"},
}


def validation_error_response(failures: List[ValidationFailure]) -> JSONResponse:
    """Build the 400 response for a list of validation failures."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=[failure.model_dump(by_alias=True) for failure in failures]
    )


def _duplicate_isbn_response() -> JSONResponse:
    return validation_error_response([
        ValidationFailure(property_name="Isbn", error_message=DUPLICATE_ISBN_MESSAGE)
    ])


def _store_failure(action: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=f"Failed to {action} book"
    )


def book_location(isbn: str) -> str:
    """Canonical path of a book resource."""
    return f"/books/{quote(isbn, safe='')}"


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=Book,
    responses=VALIDATION_RESPONSES
)
async def create_book(
    book: Book,
    services: BookServices = Depends(get_services),
    api_key: str = Depends(verify_api_key)
):
    """
    Create a book.

    Responds 201 with the book and a Location header, or 400 when the book
    is invalid or its ISBN is already taken.
    """
    failures = services.validator.validate(book)
    if failures:
        return validation_error_response(failures)

    try:
        if await services.repository.get_by_isbn(book.isbn):
            return _duplicate_isbn_response()
        created = await services.repository.create(book)
    except STORE_ERRORS as e:
        logger.error("Failed to create book", isbn=book.isbn, error=str(e))
        raise _store_failure("create")

    # Lost a race with a concurrent create of the same ISBN
    if not created:
        return _duplicate_isbn_response()

    logger.info("Book created", isbn=book.isbn)
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=book.to_response(),
        headers={"Location": book_location(book.isbn)}
    )


@router.get("/{isbn:path}", response_model=Book, responses={status.HTTP_404_NOT_FOUND: {"description": "Book not found"}})
async def get_book(isbn: str, services: BookServices = Depends(get_services)):
    """Get a single book by ISBN."""
    book = await services.repository.get_by_isbn(isbn)
    if book is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return JSONResponse(content=book.to_response())


@router.get("", response_model=List[Book])
async def get_books(
    search_term: Optional[str] = Query(None, alias="searchTerm", description="Case-insensitive title substring"),
    services: BookServices = Depends(get_services)
):
    """
    Get all books.

    - **searchTerm**: only return books whose title contains this text
    """
    books = await services.repository.get_all(search_term)
    return JSONResponse(content=[book.to_response() for book in books])


@router.put(
    "/{isbn:path}",
    response_model=Book,
    responses={**VALIDATION_RESPONSES, status.HTTP_404_NOT_FOUND: {"description": "Book not found"}}
)
async def update_book(
    isbn: str,
    book: Book,
    services: BookServices = Depends(get_services),
    api_key: str = Depends(verify_api_key)
):
    """Replace every field of an existing book. The ISBN in the path wins over the body."""
    book = book.model_copy(update={"isbn": isbn})

    failures = services.validator.validate(book)
    if failures:
        return validation_error_response(failures)

    try:
        updated = await services.repository.update(book)
    except STORE_ERRORS as e:
        logger.error("Failed to update book", isbn=isbn, error=str(e))
        raise _store_failure("update")

    if not updated:
        return Response(status_code=status.HTTP_404_NOT_FOUND)

    logger.info("Book updated", isbn=isbn)
    return JSONResponse(content=book.to_response())


@router.delete(
    "/{isbn:path}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse, "description": "Missing or invalid API key"},
        status.HTTP_404_NOT_FOUND: {"description": "Book not found"},
    }
)
async def delete_book(
    isbn: str,
    services: BookServices = Depends(get_services),
    api_key: str = Depends(verify_api_key)
):
    """Delete a book."""
    try:
        deleted = await services.repository.delete(isbn)
    except STORE_ERRORS as e:
        logger.error("Failed to delete book", isbn=isbn, error=str(e))
        raise _store_failure("delete")

    if not deleted:
        return Response(status_code=status.HTTP_404_NOT_FOUND)

    logger.info("Book deleted", isbn=isbn)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
