"""
SQLite connection management and schema setup for the book catalog.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Dict, Union

import aiosqlite
import structlog

logger = structlog.get_logger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS books (
    id                INTEGER PRIMARY KEY AUTOINCREMENT,
    isbn              TEXT NOT NULL UNIQUE,
    title             TEXT NOT NULL,
    author            TEXT NOT NULL,
    short_description TEXT NOT NULL,
    page_count        INTEGER NOT NULL,
    release_date      TEXT NOT NULL
);

-- Trigram tokenizer allows case-insensitive substring lookups on titles
CREATE VIRTUAL TABLE IF NOT EXISTS books_fts USING fts5(
    title,
    content='books',
    content_rowid='id',
    tokenize='trigram'
);

CREATE TRIGGER IF NOT EXISTS books_ai AFTER INSERT ON books BEGIN
    INSERT INTO books_fts(rowid, title) VALUES (new.id, new.title);
END;

CREATE TRIGGER IF NOT EXISTS books_ad AFTER DELETE ON books BEGIN
    INSERT INTO books_fts(books_fts, rowid, title) VALUES ('delete', old.id, old.title);
END;

CREATE TRIGGER IF NOT EXISTS books_au AFTER UPDATE ON books BEGIN
    INSERT INTO books_fts(books_fts, rowid, title) VALUES ('delete', old.id, old.title);
    INSERT INTO books_fts(rowid, title) VALUES (new.id, new.title);
END;
"""


class SqliteConnectionFactory:
    """Hands out short-lived SQLite connections."""

    def __init__(self, database_path: Union[str, Path]):
        self.database_path = str(database_path)

    @asynccontextmanager
    async def connect(self) -> AsyncIterator[aiosqlite.Connection]:
        """Open a connection that is closed when the block exits."""
        async with aiosqlite.connect(self.database_path) as connection:
            connection.row_factory = aiosqlite.Row
            yield connection

    async def health_check(self) -> Dict:
        """
        Perform database health check.

        Returns:
            Dictionary with health status
        """
        try:
            async with self.connect() as connection:
                cursor = await connection.execute("SELECT COUNT(*) FROM books")
                row = await cursor.fetchone()

            return {
                "status": "healthy",
                "books_table": "accessible",
                "books_count": row[0]
            }
        except Exception as e:
            logger.error("Database health check failed", error=str(e))
            return {
                "status": "unhealthy",
                "error": str(e)
            }


class DatabaseInitializer:
    """Creates the books table and its search index if missing."""

    def __init__(self, connection_factory: SqliteConnectionFactory):
        self.connection_factory = connection_factory

    async def initialize(self) -> None:
        """Apply the schema. Safe to run against an initialized database."""
        Path(self.connection_factory.database_path).parent.mkdir(parents=True, exist_ok=True)

        try:
            async with self.connection_factory.connect() as connection:
                await connection.executescript(SCHEMA)
                await connection.commit()
            logger.info("Database schema ready", database=self.connection_factory.database_path)
        except aiosqlite.Error as e:
            logger.error("Failed to initialize database", error=str(e))
            raise
