"""
Test Suite for Bookshelf API

Test Organization:
- conftest.py: Shared fixtures (test database, client, accounts, tokens)
- test_security.py: Password hashing and token codec
- test_credentials.py: Credential verification and registration services
- test_authentication_gate.py: Bearer token middleware and protected routes
- test_auth.py: /api/v1/auth endpoints
- test_collection.py: Profile <-> book ownership rules
- test_books.py: /api/v1/books endpoints
- test_users.py: /api/v1/users endpoints
- test_open_library.py: ISBN lookup with the OpenLibrary fallback

Running Tests:
    # Run all tests
    pytest

    # Run with coverage
    pytest --cov=bookshelf --cov-report=html

    # Run specific file
    pytest tests/test_collection.py
"""
