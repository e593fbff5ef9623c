"""
Field-level validation rules for books.
"""

import re
from typing import List

from api.models import Book, ValidationFailure

# 10 digits, optionally followed by 3 more, running to the end of the value.
# Any non-digit separators may appear between digits.
ISBN_13_PATTERN = re.compile(r"(?=(?:\D*\d){10}(?:(?:\D*\d){3})?$)")

INVALID_ISBN_MESSAGE = "Value was not a valide ISBN 13"
DUPLICATE_ISBN_MESSAGE = "A book with this ISBN-13 already exists"


def _not_empty(property_name: str, display_name: str, value: str) -> List[ValidationFailure]:
    if value is None or not value.strip():
        return [ValidationFailure(
            property_name=property_name,
            error_message=f"'{display_name}' must not be empty."
        )]
    return []


def _greater_than(property_name: str, display_name: str, value: int, limit: int) -> List[ValidationFailure]:
    if value is None or value <= limit:
        return [ValidationFailure(
            property_name=property_name,
            error_message=f"'{display_name}' must be greater than '{limit}'."
        )]
    return []


def is_valid_isbn(value: str) -> bool:
    """Check that a value has the shape of an ISBN-13."""
    return value is not None and ISBN_13_PATTERN.search(value) is not None


class BookValidator:
    """
    Stateless rule evaluator for books.

    Every rule runs on every call; failures are collected, never raised.
    """

    def validate(self, book: Book) -> List[ValidationFailure]:
        """
        Validate a candidate book.

        Args:
            book: Book to check

        Returns:
            List of failures, empty if the book is valid
        """
        failures = []

        if not is_valid_isbn(book.isbn):
            failures.append(ValidationFailure(property_name="Isbn", error_message=INVALID_ISBN_MESSAGE))

        failures.extend(_not_empty("Title", "Title", book.title))
        failures.extend(_not_empty("ShortDescription", "Short Description", book.short_description))
        failures.extend(_greater_than("PageCount", "Page Count", book.page_count, 0))
        failures.extend(_not_empty("Author", "Author", book.author))

        return failures

    def is_valid(self, book: Book) -> bool:
        """Check whether a book passes every rule."""
        return not self.validate(book)
