"""
Services Package

Business logic kept apart from HTTP handling (routers). Services raise the
domain errors in bookshelf.exceptions; main.py maps them to responses.

Current services:
- books.py: owner-scoped book CRUD with batched tag resolution
- tags.py: owner-scoped tag CRUD with per-user name uniqueness
- open_library.py: Open Library catalog search adapter (httpx)
- rate_limiter.py: slowapi limiter for the credential endpoints
- security.py: password hashing, session tokens and the auth cookie
"""
