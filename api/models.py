"""
API models and schemas for the FastAPI application.
"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Book(BaseModel):
    """
    Book entity as stored and exchanged over the API.

    String fields default to empty and the page count to zero so that
    missing values reach the validator instead of failing request parsing.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    isbn: str = Field("", description="ISBN-13, the unique book identifier")
    title: str = Field("", description="Book title")
    author: str = Field("", description="Book author")
    short_description: str = Field("", description="Short description of the book")
    page_count: int = Field(0, description="Number of pages")
    release_date: date = Field(..., description="Release date")

    def to_response(self) -> dict:
        """Serialize with the public JSON field names."""
        return self.model_dump(mode="json", by_alias=True)


class ValidationFailure(BaseModel):
    """A single field that failed validation and why."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    property_name: str = Field(..., description="Name of the offending field")
    error_message: str = Field(..., description="Human-readable reason")


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Additional error details")
    status_code: int = Field(..., description="HTTP status code")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current timestamp")
    version: str = Field(..., description="API version")
    database_status: str = Field(..., description="Database connection status")
