"""
Tests for Book Copy Pages

Tests for /catalog/bookinstances and /catalog/bookinstance/... routes.
"""

from datetime import date

from fastapi import status

from catalog.models import BookInstance


class TestListBookInstances:
    """Tests for GET /catalog/bookinstances."""

    def test_list_empty(self, client):
        response = client.get("/catalog/bookinstances")

        assert response.status_code == status.HTTP_200_OK
        assert "Book Instance List" in response.text
        assert "There are no book copies in this library." in response.text

    def test_list_shows_book_title(self, client, sample_book_instance):
        response = client.get("/catalog/bookinstances")

        assert "Emma : Penguin Classics, 2003" in response.text
        assert "Available" in response.text


class TestBookInstanceDetail:
    """Tests for GET /catalog/bookinstance/{id}."""

    def test_detail(self, client, sample_book_instance):
        response = client.get(sample_book_instance.url)

        assert response.status_code == status.HTTP_200_OK
        assert "Copy: Emma" in response.text
        assert "Penguin Classics, 2003" in response.text

    def test_detail_not_found(self, client):
        response = client.get("/catalog/bookinstance/" + "0" * 32)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert "Book Instance Not Found" in response.text


class TestCreateBookInstance:
    """Tests for GET/POST /catalog/bookinstance/create."""

    def test_create_form_lists_books(self, client, sample_book):
        response = client.get("/catalog/bookinstance/create")

        assert response.status_code == status.HTTP_200_OK
        assert f'value="{sample_book.id}"' in response.text
        for status_name in ("Available", "Maintenance", "Loaned", "Reserved"):
            assert status_name in response.text

    def test_create_copy_with_defaults(self, client, store, sample_book):
        response = client.post(
            "/catalog/bookinstance/create",
            data={"book": sample_book.id, "imprint": "Penguin, 2003", "status": "", "due_back": ""},
        )

        assert response.status_code == status.HTTP_303_SEE_OTHER
        copy_id = response.headers["location"].rsplit("/", 1)[1]
        copy = store.find_by_id(BookInstance, copy_id)
        assert copy.status == "Maintenance"
        assert copy.due_back == date.today()
        assert copy.book_id == sample_book.id

    def test_create_copy(self, client, store, sample_book):
        response = client.post(
            "/catalog/bookinstance/create",
            data={
                "book": sample_book.id,
                "imprint": "Penguin, 2003",
                "status": "Loaned",
                "due_back": "2026-12-24",
            },
        )

        copy = store.find_by_id(BookInstance, response.headers["location"].rsplit("/", 1)[1])
        assert copy.status == "Loaned"
        assert copy.due_back == date(2026, 12, 24)

    def test_create_copy_invalid(self, client, store, sample_book):
        response = client.post(
            "/catalog/bookinstance/create",
            data={"book": sample_book.id, "imprint": "", "status": "Lost", "due_back": "later"},
        )

        assert response.status_code == status.HTTP_200_OK
        assert "Specify Imprint" in response.text
        assert "Invalid Date" in response.text
        assert "Invalid Status" in response.text
        assert store.count(BookInstance) == 0

    def test_create_copy_unknown_book(self, client, store):
        response = client.post(
            "/catalog/bookinstance/create",
            data={"book": "0" * 32, "imprint": "Penguin, 2003"},
        )

        assert response.status_code == status.HTTP_200_OK
        assert "Book Not Found" in response.text
        assert store.count(BookInstance) == 0


    def test_create_copy_imprint_sent_twice(self, client, store, sample_book):
        response = client.post(
            "/catalog/bookinstance/create",
            data={"book": sample_book.id, "imprint": ["A", "B"]},
        )

        assert response.status_code == status.HTTP_200_OK
        assert "Invalid value" in response.text
        assert store.count(BookInstance) == 0

class TestUpdateBookInstance:
    """Tests for GET/POST /catalog/bookinstance/{id}/update."""

    def test_update_form_prefilled(self, client, sample_book_instance):
        response = client.get(f"{sample_book_instance.url}/update")

        assert response.status_code == status.HTTP_200_OK
        assert f'value="{date.today().isoformat()}"' in response.text

    def test_update_copy(self, client, store, sample_book, sample_book_instance):
        response = client.post(
            f"{sample_book_instance.url}/update",
            data={
                "book": sample_book.id,
                "imprint": "Penguin Classics, 2003",
                "status": "Reserved",
                "due_back": "2026-11-30",
            },
        )

        assert response.status_code == status.HTTP_303_SEE_OTHER
        assert response.headers["location"] == sample_book_instance.url
        copy = store.find_by_id(BookInstance, sample_book_instance.id)
        assert copy.status == "Reserved"
        assert copy.due_back == date(2026, 11, 30)


class TestDeleteBookInstance:
    """Tests for GET/POST /catalog/bookinstance/{id}/delete."""

    def test_delete_confirmation(self, client, sample_book_instance):
        response = client.get(f"{sample_book_instance.url}/delete")

        assert response.status_code == status.HTTP_200_OK
        assert "Do you really want to delete this BookInstance?" in response.text

    def test_delete_copy(self, client, store, sample_book_instance):
        response = client.post(f"{sample_book_instance.url}/delete")

        assert response.status_code == status.HTTP_303_SEE_OTHER
        assert response.headers["location"] == "/catalog/bookinstances"
        assert store.count(BookInstance) == 0
