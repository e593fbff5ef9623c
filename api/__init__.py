"""
FastAPI RESTful API for the Library book catalog.

This module provides a REST API for:
- Creating, reading, updating and deleting books
- Case-insensitive title search
- API key-based authentication for writes
"""
