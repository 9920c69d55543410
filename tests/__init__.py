"""
Test Suite for the Bookshelf API

Test Organization:
- conftest.py: Shared fixtures (in-memory database, logged-in clients)
- test_auth.py: /api/auth endpoints and the auth gate
- test_books.py: /api/books endpoints, filters and ownership
- test_tags.py: /api/tags endpoints and ownership
- test_search.py: /api/search endpoints and the Open Library client
- test_rate_limit.py: limits on register/login
- test_security.py: hashing, tokens, security settings
- test_database.py: persistence primitives and cascades
- test_main.py: health check and error handlers

Running Tests:
    # Run all tests
    pytest

    # Run specific file
    pytest tests/test_books.py

    # Run with verbose output
    pytest -v
"""
