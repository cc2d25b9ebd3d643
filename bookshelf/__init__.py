"""
Bookshelf API Application Package

A JWT-authenticated REST backend for a book catalog and the personal
collections of registered users.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: SQLAlchemy engine and session management
- exceptions.py: Typed errors with stable API codes
- middleware.py: Bearer token authentication gate
- main.py: FastAPI application factory and configuration
- dependencies.py: Dependency injection functions
- models/: SQLAlchemy ORM models
- schemas/: Pydantic request/response schemas
- routers/: API route handlers
- services/: Business logic
"""

__version__ = "0.1.0"
