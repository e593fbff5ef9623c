"""
Explicit wiring of the collaborators behind the book endpoints.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Union

from fastapi import Request

from api.database import DatabaseInitializer, SqliteConnectionFactory
from api.repository import BookRepository
from api.validation import BookValidator


@dataclass
class BookServices:
    """Everything a book handler needs, built once at application start."""
    connection_factory: SqliteConnectionFactory
    initializer: DatabaseInitializer
    repository: BookRepository
    validator: BookValidator

    @classmethod
    def build(cls, database_path: Union[str, Path]) -> "BookServices":
        """Construct the services for a database file."""
        connection_factory = SqliteConnectionFactory(database_path)
        return cls(
            connection_factory=connection_factory,
            initializer=DatabaseInitializer(connection_factory),
            repository=BookRepository(connection_factory),
            validator=BookValidator(),
        )


def get_services(request: Request) -> BookServices:
    """FastAPI dependency returning the application's services."""
    return request.app.state.services
