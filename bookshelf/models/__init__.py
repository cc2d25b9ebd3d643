"""
SQLAlchemy Models Package

Model Relationships:
- Credential <-> Profile: One-to-One through a shared primary key
- Profile <-> Book: Many-to-Many through profile_books (Profile owns it)

Import all models here to:
1. Make them available as: from bookshelf.models import Book, Profile
2. Register every table with Base.metadata before create_all runs
"""

from bookshelf.models.book import Book, profile_books
from bookshelf.models.credential import Credential
from bookshelf.models.profile import Profile

__all__ = [
    "Book",
    "Credential",
    "Profile",
    "profile_books",
]
