"""
Tests for Books Endpoints

This module tests all CRUD operations for the /api/v1/books endpoints.

TEST NAMING CONVENTION:
- test_<action>_<scenario>
- Examples: test_create_book_success, test_get_book_not_found
"""

import uuid
from unittest.mock import patch

from fastapi import status
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from bookshelf.models import Book, profile_books


class TestListBooks:
    """Tests for GET /api/v1/books/ endpoint."""

    def test_list_books_empty(self, client, auth_headers):
        response = client.get("/api/v1/books/", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["page"] == []
        assert data["total_count"] == 0
        assert data["current_page"] == 1
        assert data["total_pages"] == 0
        assert data["previous_page"] is None
        assert data["next_page"] is None

    def test_list_books_with_data(self, client, auth_headers, sample_book):
        response = client.get("/api/v1/books/", headers=auth_headers)

        data = response.json()
        assert data["total_count"] == 1
        assert data["page"][0]["title"] == "Dune"
        assert data["page"][0]["id"] == str(sample_book.id)

    def test_list_books_pagination(self, client, auth_headers, multiple_books):
        response = client.get("/api/v1/books/?page=1&per_page=5", headers=auth_headers)
        data = response.json()
        assert data["count"] == 5
        assert data["limit"] == 5
        assert data["offset"] == 0
        assert data["total_count"] == 15
        assert data["total_pages"] == 3
        assert data["next_page"] == 2
        assert data["page"][0]["title"] == "Test Book 01"

        response = client.get("/api/v1/books/?page=3&per_page=5", headers=auth_headers)
        data = response.json()
        assert data["current_page"] == 3
        assert data["previous_page"] == 2
        assert data["next_page"] is None
        assert data["page"][-1]["title"] == "Test Book 15"

    def test_list_books_invalid_pagination(self, client, auth_headers):
        response = client.get("/api/v1/books/?page=0", headers=auth_headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST

        response = client.get("/api/v1/books/?per_page=101", headers=auth_headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_filter_by_title_partial(self, client, auth_headers, sample_book, second_book):
        response = client.get("/api/v1/books/?title=DUN", headers=auth_headers)

        data = response.json()
        assert [book["title"] for book in data["page"]] == ["Dune"]

    def test_filter_by_author_partial(self, client, auth_headers, multiple_books):
        response = client.get("/api/v1/books/?author=le%20guin", headers=auth_headers)

        assert response.json()["total_count"] == 8

    def test_filter_by_genre_exact(self, client, auth_headers, multiple_books):
        response = client.get("/api/v1/books/?genre=fantasy", headers=auth_headers)
        assert response.json()["total_count"] == 5

        response = client.get("/api/v1/books/?genre=fant", headers=auth_headers)
        assert response.json()["total_count"] == 0


class TestGetBook:
    """Tests for GET /api/v1/books/{book_id} endpoint."""

    def test_get_book_success(self, client, auth_headers, sample_book):
        response = client.get(f"/api/v1/books/{sample_book.id}", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["title"] == "Dune"
        assert data["author"] == "Frank Herbert"
        assert data["pages"] == 412
        assert data["year"] == "1965"

    def test_get_book_not_found(self, client, auth_headers):
        missing = uuid.uuid4()

        response = client.get(f"/api/v1/books/{missing}", headers=auth_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        error = response.json()["errors"][0]
        assert error["code"] == "0200"
        assert error["message"] == f"Book with ID not found: {missing}"


class TestCreateBook:
    """Tests for POST /api/v1/books/ endpoint."""

    def test_create_book_success(self, client, auth_headers, db_session):
        response = client.post(
            "/api/v1/books/",
            json={
                "title": "The Left Hand of Darkness",
                "author": "Ursula K. Le Guin",
                "genre": "Science Fiction",
                "year": "1969",
                "pages": 304,
                "isbn": "9780441478125",
            },
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["title"] == "The Left Hand of Darkness"
        assert uuid.UUID(data["id"])
        assert db_session.get(Book, uuid.UUID(data["id"])) is not None

    def test_create_book_minimal(self, client, auth_headers):
        response = client.post("/api/v1/books/", json={}, headers=auth_headers)

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["title"] is None

    def test_create_book_invalid_pages(self, client, auth_headers):
        response = client.post(
            "/api/v1/books/",
            json={"title": "Broken", "pages": -5},
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        error = response.json()["errors"][0]
        assert error["code"] == "0100"
        assert error["message"].startswith("pages")

    def test_create_book_requires_token(self, client):
        response = client.post("/api/v1/books/", json={"title": "Anonymous"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestUpdateBook:
    """Tests for PUT /api/v1/books/{book_id} endpoint."""

    def test_update_book(self, client, auth_headers, sample_book):
        response = client.put(
            f"/api/v1/books/{sample_book.id}",
            json={"title": "Dune Messiah", "pages": 256},
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["title"] == "Dune Messiah"
        assert data["pages"] == 256
        assert data["author"] == "Frank Herbert"

    def test_blank_fields_keep_values(self, client, auth_headers, sample_book):
        response = client.put(
            f"/api/v1/books/{sample_book.id}",
            json={"title": "   ", "author": "", "pages": None},
            headers=auth_headers,
        )

        data = response.json()
        assert data["title"] == "Dune"
        assert data["author"] == "Frank Herbert"
        assert data["pages"] == 412

    def test_update_book_not_found(self, client, auth_headers):
        response = client.put(
            f"/api/v1/books/{uuid.uuid4()}",
            json={"title": "Nothing"},
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestDeleteBook:
    """Tests for DELETE /api/v1/books/{book_id} endpoint."""

    def test_delete_book(self, client, auth_headers, db_session, sample_book):
        book_id = sample_book.id

        response = client.delete(f"/api/v1/books/{book_id}", headers=auth_headers)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        response = client.get(f"/api/v1/books/{book_id}", headers=auth_headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_delete_owned_book_clears_collections(
        self, client, auth_headers, db_session, sample_user, sample_book
    ):
        user_id, book_id = sample_user.id, sample_book.id
        client.post(f"/api/v1/users/{user_id}/books/{book_id}", headers=auth_headers)

        client.delete(f"/api/v1/books/{book_id}", headers=auth_headers)

        rows = db_session.execute(select(func.count()).select_from(profile_books)).scalar()
        assert rows == 0
        response = client.get(f"/api/v1/users/{user_id}", headers=auth_headers)
        assert response.json()["book_ids"] == []

    def test_delete_book_not_found(self, client, auth_headers):
        response = client.delete(f"/api/v1/books/{uuid.uuid4()}", headers=auth_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestBookOwners:
    """Tests for GET /api/v1/books/{book_id}/owners endpoint."""

    def test_owners(self, client, auth_headers, sample_user, second_user, sample_book):
        for user in (sample_user, second_user):
            client.post(f"/api/v1/users/{user.id}/books/{sample_book.id}", headers=auth_headers)

        response = client.get(f"/api/v1/books/{sample_book.id}/owners", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        assert [owner["username"] for owner in response.json()] == ["seconduser", "testuser"]

    def test_owners_unknown_book(self, client, auth_headers):
        response = client.get(f"/api/v1/books/{uuid.uuid4()}/owners", headers=auth_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestUnexpectedErrors:
    """Internal failures are reported with generic messages."""

    def test_null_reference(self, client, auth_headers, sample_book):
        with patch("bookshelf.routers.books.catalog.get_book", side_effect=AttributeError("x")):
            response = client.get(f"/api/v1/books/{sample_book.id}", headers=auth_headers)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        error = response.json()["errors"][0]
        assert error["code"] == "9000"
        assert error["message"] == "An internal error occurred: Null reference."

    def test_database_error(self, client, auth_headers, sample_book):
        failure = OperationalError("SELECT 1", {}, Exception("connection lost"))
        with patch("bookshelf.routers.books.catalog.get_book", side_effect=failure):
            response = client.get(f"/api/v1/books/{sample_book.id}", headers=auth_headers)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        error = response.json()["errors"][0]
        assert error["code"] == "9999"
        assert "connection lost" not in error["message"]
