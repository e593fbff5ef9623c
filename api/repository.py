"""
Persistence layer for books.

All SQL against the books table lives here. Each method opens its own
connection and issues a single statement.
"""

from typing import List, Optional

import aiosqlite
import structlog

from api.database import SqliteConnectionFactory
from api.models import Book

logger = structlog.get_logger(__name__)

BOOK_COLUMNS = "b.isbn, b.title, b.author, b.short_description, b.page_count, b.release_date"

# Trigram index cannot look up terms shorter than this
MIN_INDEXED_TERM_LENGTH = 3

# Raised by the driver for values SQLite cannot hold: integers beyond 64 bits
# and strings that do not encode to UTF-8
STORE_ERRORS = (aiosqlite.Error, OverflowError, UnicodeEncodeError)


def _row_to_book(row: aiosqlite.Row) -> Book:
    return Book(**dict(row))


def _casefold(value: Optional[str]) -> Optional[str]:
    return value.casefold() if value is not None else None


def _fts_phrase(term: str) -> str:
    """Quote a term as an FTS5 phrase so its characters are taken literally."""
    return '"' + term.replace('"', '""') + '"'


class BookRepository:
    """Repository for book CRUD and search operations."""

    def __init__(self, connection_factory: SqliteConnectionFactory):
        self.connection_factory = connection_factory

    async def create(self, book: Book) -> bool:
        """
        Insert a new book.

        Args:
            book: Validated book to insert

        Returns:
            bool: True if inserted, False if the ISBN already exists
        """
        try:
            async with self.connection_factory.connect() as connection:
                await connection.execute(
                    """
                    INSERT INTO books (isbn, title, author, short_description, page_count, release_date)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        book.isbn,
                        book.title,
                        book.author,
                        book.short_description,
                        book.page_count,
                        book.release_date.isoformat(),
                    ),
                )
                await connection.commit()
            logger.debug("Successfully inserted book", isbn=book.isbn)
            return True

        except aiosqlite.IntegrityError:
            logger.warning("Book already exists", isbn=book.isbn)
            return False

        except STORE_ERRORS as e:
            logger.error("Failed to insert book", isbn=book.isbn, error=str(e))
            raise

    async def get_by_isbn(self, isbn: str) -> Optional[Book]:
        """
        Retrieve a book by its ISBN.

        Returns:
            Book if found, None otherwise
        """
        try:
            async with self.connection_factory.connect() as connection:
                cursor = await connection.execute(
                    f"SELECT {BOOK_COLUMNS} FROM books b WHERE b.isbn = ?", (isbn,)
                )
                row = await cursor.fetchone()

            return _row_to_book(row) if row else None

        except STORE_ERRORS as e:
            logger.error("Failed to retrieve book", isbn=isbn, error=str(e))
            raise

    async def get_all(self, search_term: Optional[str] = None) -> List[Book]:
        """
        Retrieve every book in insertion order.

        Args:
            search_term: When not blank, only books whose title contains it
        """
        if search_term and search_term.strip():
            return await self.search_by_title(search_term)

        try:
            async with self.connection_factory.connect() as connection:
                cursor = await connection.execute(f"SELECT {BOOK_COLUMNS} FROM books b ORDER BY b.id")
                rows = await cursor.fetchall()

            return [_row_to_book(row) for row in rows]

        except STORE_ERRORS as e:
            logger.error("Failed to retrieve books", error=str(e))
            raise

    async def search_by_title(self, search_term: str) -> List[Book]:
        """
        Retrieve books whose title contains the term, ignoring case.

        Args:
            search_term: Substring to look for

        Returns:
            Matching books in insertion order
        """
        indexed = len(search_term) >= MIN_INDEXED_TERM_LENGTH
        if indexed:
            query = f"""
                SELECT {BOOK_COLUMNS}
                FROM books_fts
                JOIN books b ON b.id = books_fts.rowid
                WHERE books_fts MATCH ?
                ORDER BY b.id
            """
            params = (_fts_phrase(search_term),)
        else:
            # SQLite's lower() only folds ASCII; casefold matches the index's Unicode folding
            query = f"""
                SELECT {BOOK_COLUMNS}
                FROM books b
                WHERE instr(casefold(b.title), ?) > 0
                ORDER BY b.id
            """
            params = (search_term.casefold(),)

        try:
            async with self.connection_factory.connect() as connection:
                if not indexed:
                    await connection.create_function("casefold", 1, _casefold, deterministic=True)
                cursor = await connection.execute(query, params)
                rows = await cursor.fetchall()

            books = [_row_to_book(row) for row in rows]
            logger.debug("Searched books by title", search_term=search_term, count=len(books))
            return books

        except STORE_ERRORS as e:
            logger.error("Failed to search books", search_term=search_term, error=str(e))
            raise

    async def update(self, book: Book) -> bool:
        """
        Overwrite the mutable fields of an existing book.

        Returns:
            bool: True if updated, False if no book has this ISBN
        """
        try:
            async with self.connection_factory.connect() as connection:
                cursor = await connection.execute(
                    """
                    UPDATE books
                    SET title = ?, author = ?, short_description = ?, page_count = ?, release_date = ?
                    WHERE isbn = ?
                    """,
                    (
                        book.title,
                        book.author,
                        book.short_description,
                        book.page_count,
                        book.release_date.isoformat(),
                        book.isbn,
                    ),
                )
                updated = cursor.rowcount > 0
                await connection.commit()

            logger.debug("Update book", isbn=book.isbn, updated=updated)
            return updated

        except STORE_ERRORS as e:
            logger.error("Failed to update book", isbn=book.isbn, error=str(e))
            raise

    async def delete(self, isbn: str) -> bool:
        """
        Delete a book.

        Returns:
            bool: True if deleted, False if no book has this ISBN
        """
        try:
            async with self.connection_factory.connect() as connection:
                cursor = await connection.execute("DELETE FROM books WHERE isbn = ?", (isbn,))
                deleted = cursor.rowcount > 0
                await connection.commit()

            logger.debug("Delete book", isbn=isbn, deleted=deleted)
            return deleted

        except STORE_ERRORS as e:
            logger.error("Failed to delete book", isbn=isbn, error=str(e))
            raise
