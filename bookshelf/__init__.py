"""
Bookshelf API Application Package

A personal book-tracking API: users register, search the Open Library
catalog, keep books on a private shelf, and organise them with tags,
reading status and ratings.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: SQLAlchemy engine, sessions and query primitives
- exceptions.py: Error taxonomy translated to HTTP responses
- main.py: FastAPI application factory and configuration
- dependencies.py: Dependency injection functions (auth gate, services)
- models/: SQLAlchemy ORM models
- schemas/: Pydantic request/response schemas
- routers/: API route handlers
- services/: Business logic (credentials, books, tags, catalog, rate limiting)
"""

__version__ = "0.1.0"
