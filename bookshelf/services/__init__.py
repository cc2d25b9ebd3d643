"""
Services Package

Business logic, kept apart from HTTP handling so routers stay thin and the
rules can be tested without a client.

Current services:
- security.py: Password hashing and JWT issue/decode
- credentials.py: Username/password verification
- accounts.py: Login and atomic registration
- collection.py: Profile <-> book ownership
- catalog.py: Book CRUD
- profiles.py: Profile read/update/delete
- open_library.py: ISBN lookup with OpenLibrary fallback
- rate_limiter.py: Rate limiting with slowapi
"""
