"""
Tests for Book Endpoints

TEST NAMING CONVENTION:
- test_<action>_<scenario>
- Examples: test_add_book_success, test_update_book_not_found
"""

import pytest
from fastapi import status

from library_api.models import Book
from library_api.services.rate_limiter import limiter


def valid_book_payload(**overrides) -> dict:
    payload = {
        "title": "Foundation",
        "author": "Isaac Asimov",
        "isbn": "9780553293357",
        "availableQuantity": 3,
        "shelfLocation": "E4-02",
    }
    payload.update(overrides)
    return payload


class TestGetBooks:
    """Tests for GET /book/all."""

    def test_get_books_empty(self, client):
        response = client.get("/book/all")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["books"] == []
        assert data["pagination"] == {
            "currentPage": 1,
            "pageSize": 10,
            "totalPages": 0,
            "totalBooks": 0,
        }

    def test_get_books_camel_case_fields(self, client, sample_book):
        response = client.get("/book/all")

        book = response.json()["books"][0]
        assert book["id"] == sample_book.id
        assert book["availableQuantity"] == 2
        assert book["shelfLocation"] == "A1-01"
        assert "available_quantity" not in book

    def test_get_books_second_page(self, client, multiple_books):
        """Page 2 of 12 books at 5 per page holds 5 books out of 3 pages."""
        response = client.get("/book/all?page=2&pageSize=5")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert len(data["books"]) == 5
        assert data["pagination"]["currentPage"] == 2
        assert data["pagination"]["totalPages"] == 3
        assert data["pagination"]["totalBooks"] == 12

    def test_get_books_last_page_is_partial(self, client, multiple_books):
        response = client.get("/book/all?page=3&pageSize=5")

        assert len(response.json()["books"]) == 2

    def test_get_books_quantities_never_negative(self, client, multiple_books):
        response = client.get("/book/all?pageSize=100")

        assert all(book["availableQuantity"] >= 0 for book in response.json()["books"])

    def test_get_books_invalid_pagination(self, client):
        assert client.get("/book/all?page=0").status_code == status.HTTP_400_BAD_REQUEST
        assert client.get("/book/all?pageSize=101").status_code == status.HTTP_400_BAD_REQUEST


class TestSearchBooks:
    """Tests for GET /book/search."""

    def test_search_by_title_case_insensitive(self, client, sample_book, multiple_books):
        response = client.get("/book/search?title=NINETEEN")
        assert response.json()["books"] == []

        response = client.get("/book/search?title=test book 1")
        titles = {book["title"] for book in response.json()["books"]}
        assert titles == {"Test Book 1", "Test Book 10", "Test Book 11", "Test Book 12"}

    def test_search_by_author_substring(self, client, sample_book, multiple_books):
        response = client.get("/book/search?author=orwe")

        data = response.json()
        assert data["pagination"]["totalBooks"] == 1
        assert data["books"][0]["title"] == "1984"

    def test_search_by_isbn(self, client, sample_book):
        response = client.get("/book/search?isbn=9780451524935")

        assert response.json()["pagination"]["totalBooks"] == 1

    def test_search_filters_are_combined(self, client, multiple_books):
        response = client.get("/book/search?author=austen&title=book 1")

        titles = {book["title"] for book in response.json()["books"]}
        # Austen wrote the odd-numbered titles (index 0, 2, ...)
        assert titles == {"Test Book 1", "Test Book 11"}

    def test_search_wildcards_match_literally(self, client, db_session, multiple_books):
        db_session.add(Book(
            title="100% Cotton_Candy",
            author="Anon",
            isbn="9780000009999",
            available_quantity=1,
            shelf_location="Z1",
        ))
        db_session.commit()

        response = client.get("/book/search", params={"isbn": "_"})
        assert response.json()["pagination"]["totalBooks"] == 0

        response = client.get("/book/search", params={"title": "0% cotton_"})
        titles = [book["title"] for book in response.json()["books"]]
        assert titles == ["100% Cotton_Candy"]

    def test_search_without_filters_lists_everything(self, client, multiple_books):
        response = client.get("/book/search?pageSize=5")

        data = response.json()
        assert data["pagination"]["totalBooks"] == 12
        assert data["pagination"]["totalPages"] == 3
        assert len(data["books"]) == 5


class TestAddBook:
    """Tests for POST /book/add."""

    def test_add_book_success(self, client):
        response = client.post("/book/add", json=valid_book_payload())

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["message"] == "Book added successfully."
        assert data["book"]["id"] is not None
        assert data["book"]["isbn"] == "9780553293357"
        assert data["book"]["availableQuantity"] == 3

    def test_add_book_accepts_numeric_string_quantity(self, client):
        response = client.post("/book/add", json=valid_book_payload(availableQuantity="4"))

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["book"]["availableQuantity"] == 4

    def test_add_book_missing_field(self, client):
        payload = valid_book_payload()
        del payload["shelfLocation"]

        response = client.post("/book/add", json=payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        data = response.json()
        assert data["error"] == "bad_request"
        assert any(error["field"] == "shelfLocation" for error in data["detail"])

    def test_add_book_non_numeric_quantity(self, client):
        response = client.post("/book/add", json=valid_book_payload(availableQuantity="many"))

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_add_book_negative_quantity(self, client):
        response = client.post("/book/add", json=valid_book_payload(availableQuantity=-1))

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_add_book_blank_title(self, client):
        response = client.post("/book/add", json=valid_book_payload(title="   "))

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_add_book_duplicate_isbn(self, client, sample_book):
        response = client.post("/book/add", json=valid_book_payload(isbn=sample_book.isbn))

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["error"] == "conflict"

        listing = client.get("/book/all").json()
        assert listing["pagination"]["totalBooks"] == 1


class TestUpdateBook:
    """Tests for PATCH /book/update/{bookId}."""

    def test_update_book_partial(self, client, sample_book):
        response = client.patch(
            f"/book/update/{sample_book.id}",
            json={"shelfLocation": "Z9-99"},
        )

        assert response.status_code == status.HTTP_200_OK
        book = response.json()["book"]
        assert book["shelfLocation"] == "Z9-99"
        # Unspecified fields keep their values
        assert book["title"] == "1984"
        assert book["availableQuantity"] == 2

    def test_update_book_quantity_to_zero(self, client, sample_book):
        response = client.patch(
            f"/book/update/{sample_book.id}",
            json={"availableQuantity": 0},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["book"]["availableQuantity"] == 0

    def test_update_book_no_fields(self, client, sample_book):
        response = client.patch(f"/book/update/{sample_book.id}", json={})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_update_book_negative_quantity(self, client, sample_book):
        response = client.patch(
            f"/book/update/{sample_book.id}",
            json={"availableQuantity": -5},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_update_book_not_found(self, client):
        response = client.patch("/book/update/99999", json={"title": "Ghost"})

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["detail"] == "Book not found."

    def test_update_book_isbn_taken(self, client, sample_book, single_copy_book):
        response = client.patch(
            f"/book/update/{single_copy_book.id}",
            json={"isbn": sample_book.isbn},
        )

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_update_book_same_isbn_allowed(self, client, sample_book):
        response = client.patch(
            f"/book/update/{sample_book.id}",
            json={"isbn": sample_book.isbn, "title": "Nineteen Eighty-Four"},
        )

        assert response.status_code == status.HTTP_200_OK


class TestDeleteBook:
    """Tests for DELETE /book/delete/{bookId}."""

    def test_delete_book_success(self, client, sample_book):
        response = client.delete(f"/book/delete/{sample_book.id}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["book"]["isbn"] == "9780451524935"

        listing = client.get("/book/all").json()
        assert listing["books"] == []

    def test_delete_book_not_found(self, client):
        response = client.delete("/book/delete/99999")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_delete_book_with_borrowings(self, client, sample_book, sample_borrower):
        client.post(
            "/borrowing/checkout",
            json={"bookId": sample_book.id, "borrowerId": sample_borrower.id},
        )

        response = client.delete(f"/book/delete/{sample_book.id}")

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_delete_book_invalid_id(self, client):
        response = client.delete("/book/delete/abc")

        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.fixture
def enabled_limiter(monkeypatch):
    """Turn the application limiter on with empty counters."""
    monkeypatch.setattr(limiter, "enabled", True)
    limiter.reset()
    yield limiter
    limiter.reset()


class TestBookListingRateLimit:
    """GET /book/all and /book/search allow 10 requests a minute per client."""

    def test_get_books_eleventh_request_limited(self, client, enabled_limiter):
        for _ in range(10):
            assert client.get("/book/all").status_code == status.HTTP_200_OK

        response = client.get("/book/all")

        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
        assert response.json()["error"] == "rate_limit_exceeded"
        assert response.headers["Retry-After"] == "60"

    def test_search_books_eleventh_request_limited(self, client, enabled_limiter):
        for _ in range(10):
            assert client.get("/book/search?title=x").status_code == status.HTTP_200_OK

        response = client.get("/book/search?title=x")

        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS

    def test_other_routes_not_limited(self, client, enabled_limiter):
        for _ in range(12):
            assert client.get("/borrower/all").status_code == status.HTTP_200_OK
