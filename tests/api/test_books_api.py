# tests/api/test_books_api.py
import pytest
from httpx import AsyncClient

from bookreview.core.config import settings

pytestmark = pytest.mark.asyncio

BOOKS_URL = f"{settings.API_V1_STR}/books"
REVIEWS_URL = f"{settings.API_V1_STR}/reviews"
SEARCH_URL = f"{settings.API_V1_STR}/search"

DUNE = {"title": "Dune", "author": "Frank Herbert", "genre": "Science Fiction"}
GATSBY = {
    "title": "The Great Gatsby",
    "author": "F. Scott Fitzgerald",
    "genre": "Classic",
    "published_year": 1925,
    "isbn": "9780743273565",
}


async def _create_book(client: AsyncClient, headers: dict, payload: dict) -> dict:
    response = await client.post(BOOKS_URL, json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["book"]


async def test_health_check(test_client: AsyncClient):
    response = await test_client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


async def test_review_lifecycle_updates_rating(
    test_client: AsyncClient, sample_user, other_user, auth_headers
):
    alice, bob = auth_headers(sample_user), auth_headers(other_user)

    response = await test_client.post(BOOKS_URL, json=DUNE, headers=alice)
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Book added successfully"
    book = body["book"]
    assert book["average_rating"] == 0
    assert book["review_count"] == 0
    assert book["added_by"]["username"] == "reader_one"

    response = await test_client.post(
        f"{BOOKS_URL}/{book['id']}/reviews", json={"rating": 5}, headers=alice
    )
    assert response.status_code == 201
    assert response.json()["message"] == "Review added successfully"

    detail = (await test_client.get(f"{BOOKS_URL}/{book['id']}")).json()
    assert detail["book"]["average_rating"] == 5.0
    assert detail["book"]["review_count"] == 1

    response = await test_client.post(
        f"{BOOKS_URL}/{book['id']}/reviews",
        json={"rating": 3, "comment": "Too long"},
        headers=bob,
    )
    assert response.status_code == 201

    detail = (await test_client.get(f"{BOOKS_URL}/{book['id']}")).json()
    assert detail["book"]["average_rating"] == 4.0
    assert detail["book"]["review_count"] == 2
    assert detail["review_pagination"]["total_items"] == 2
    assert {r["user"]["username"] for r in detail["reviews"]} == {"reader_one", "reader_two"}

    listing = (await test_client.get(BOOKS_URL)).json()
    assert listing["books"][0]["average_rating"] == 4.0
    assert listing["pagination"]["total_items"] == 1


async def test_create_book_requires_token(test_client: AsyncClient):
    response = await test_client.post(BOOKS_URL, json=DUNE)

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_TOKEN"


async def test_create_book_rejects_bad_token(test_client: AsyncClient):
    response = await test_client.post(
        BOOKS_URL, json=DUNE, headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert response.status_code == 401


async def test_create_book_invalid_payload(test_client: AsyncClient, sample_user, auth_headers):
    response = await test_client.post(
        BOOKS_URL, json={**DUNE, "title": ""}, headers=auth_headers(sample_user)
    )
    assert response.status_code == 422


async def test_duplicate_isbn_conflicts(test_client: AsyncClient, sample_user, auth_headers):
    headers = auth_headers(sample_user)
    await _create_book(test_client, headers, GATSBY)

    response = await test_client.post(
        BOOKS_URL, json={**GATSBY, "title": "Gatsby Annotated"}, headers=headers
    )

    assert response.status_code == 409
    assert response.json()["error"]["message"] == "A book with this ISBN already exists"


async def test_duplicate_review_conflicts(test_client: AsyncClient, sample_user, auth_headers):
    headers = auth_headers(sample_user)
    book = await _create_book(test_client, headers, DUNE)
    url = f"{BOOKS_URL}/{book['id']}/reviews"

    assert (await test_client.post(url, json={"rating": 4}, headers=headers)).status_code == 201
    response = await test_client.post(url, json={"rating": 2}, headers=headers)

    assert response.status_code == 409
    assert response.json()["error"]["message"] == "You have already reviewed this book"


async def test_review_rating_out_of_range(test_client: AsyncClient, sample_user, auth_headers):
    headers = auth_headers(sample_user)
    book = await _create_book(test_client, headers, DUNE)

    response = await test_client.post(
        f"{BOOKS_URL}/{book['id']}/reviews", json={"rating": 6}, headers=headers
    )
    assert response.status_code == 422


async def test_get_missing_book(test_client: AsyncClient):
    response = await test_client.get(f"{BOOKS_URL}/999")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


async def test_list_books_with_filters(test_client: AsyncClient, sample_user, auth_headers):
    headers = auth_headers(sample_user)
    await _create_book(test_client, headers, DUNE)
    await _create_book(test_client, headers, GATSBY)

    response = await test_client.get(BOOKS_URL, params={"author": "herbert", "genre": "fiction"})

    assert response.status_code == 200
    body = response.json()
    assert [b["title"] for b in body["books"]] == ["Dune"]
    assert body["pagination"] == {
        "current_page": 1,
        "total_pages": 1,
        "total_items": 1,
        "has_next": False,
        "has_prev": False,
    }


async def test_search_books(test_client: AsyncClient, sample_user, auth_headers):
    headers = auth_headers(sample_user)
    await _create_book(test_client, headers, DUNE)
    await _create_book(test_client, headers, GATSBY)

    body = (await test_client.get(SEARCH_URL, params={"q": "great"})).json()
    assert body["query"] == "great"
    assert [b["title"] for b in body["books"]] == ["The Great Gatsby"]

    body = (await test_client.get(SEARCH_URL, params={"q": "xyz"})).json()
    assert body["books"] == []
    assert body["pagination"]["total_items"] == 0


async def test_search_blank_query(test_client: AsyncClient):
    response = await test_client.get(SEARCH_URL, params={"q": "   "})

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Search query is required"


async def test_search_missing_query(test_client: AsyncClient):
    response = await test_client.get(SEARCH_URL)
    assert response.status_code == 422


async def test_only_author_can_change_review(
    test_client: AsyncClient, sample_user, other_user, auth_headers
):
    alice, bob = auth_headers(sample_user), auth_headers(other_user)
    book = await _create_book(test_client, alice, DUNE)
    review = (
        await test_client.post(
            f"{BOOKS_URL}/{book['id']}/reviews",
            json={"rating": 4, "comment": "Spice!"},
            headers=alice,
        )
    ).json()["review"]
    review_url = f"{REVIEWS_URL}/{review['id']}"

    response = await test_client.put(review_url, json={"rating": 1}, headers=bob)
    assert response.status_code == 403
    assert response.json()["error"]["message"] == "You can only update your own reviews."

    response = await test_client.delete(review_url, headers=bob)
    assert response.status_code == 403

    response = await test_client.put(review_url, json={"rating": 2}, headers=alice)
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Review updated successfully"
    assert body["review"]["rating"] == 2
    assert body["review"]["comment"] == "Spice!"
    assert body["review"]["book"]["title"] == "Dune"

    response = await test_client.delete(review_url, headers=alice)
    assert response.status_code == 200
    assert response.json() == {"message": "Review deleted successfully"}

    detail = (await test_client.get(f"{BOOKS_URL}/{book['id']}")).json()
    assert detail["book"]["review_count"] == 0
    assert detail["book"]["average_rating"] == 0


async def test_update_rejects_null_rating(test_client: AsyncClient, sample_user, auth_headers):
    headers = auth_headers(sample_user)
    book = await _create_book(test_client, headers, DUNE)
    review = (
        await test_client.post(
            f"{BOOKS_URL}/{book['id']}/reviews", json={"rating": 4}, headers=headers
        )
    ).json()["review"]

    response = await test_client.put(
        f"{REVIEWS_URL}/{review['id']}", json={"rating": None}, headers=headers
    )
    assert response.status_code == 422


async def test_delete_missing_review(test_client: AsyncClient, sample_user, auth_headers):
    response = await test_client.delete(
        f"{REVIEWS_URL}/12345", headers=auth_headers(sample_user)
    )
    assert response.status_code == 404


async def test_huge_page_numbers_return_empty_pages(
    test_client: AsyncClient, sample_user, auth_headers
):
    book = await _create_book(test_client, auth_headers(sample_user), DUNE)
    huge = str(10**18)

    response = await test_client.get(BOOKS_URL, params={"page": huge})
    assert response.status_code == 200
    assert response.json()["books"] == []
    assert response.json()["pagination"]["total_items"] == 1

    response = await test_client.get(SEARCH_URL, params={"q": "dune", "page": huge})
    assert response.status_code == 200
    assert response.json()["books"] == []

    response = await test_client.get(
        f"{BOOKS_URL}/{book['id']}", params={"review_page": huge}
    )
    assert response.status_code == 200
    assert response.json()["reviews"] == []


async def test_page_beyond_integer_range_is_rejected(test_client: AsyncClient):
    response = await test_client.get(BOOKS_URL, params={"page": str(2**63)})
    assert response.status_code == 422


@pytest.mark.parametrize("bad_id", [10**20, 2**63])
async def test_ids_beyond_integer_range_are_rejected(
    test_client: AsyncClient, sample_user, auth_headers, bad_id
):
    headers = auth_headers(sample_user)

    assert (await test_client.get(f"{BOOKS_URL}/{bad_id}")).status_code == 422
    response = await test_client.post(
        f"{BOOKS_URL}/{bad_id}/reviews", json={"rating": 4}, headers=headers
    )
    assert response.status_code == 422
    response = await test_client.put(
        f"{REVIEWS_URL}/{bad_id}", json={"rating": 4}, headers=headers
    )
    assert response.status_code == 422
    response = await test_client.delete(f"{REVIEWS_URL}/{bad_id}", headers=headers)
    assert response.status_code == 422


async def test_search_and_filters_fold_accented_letters(
    test_client: AsyncClient, sample_user, auth_headers
):
    await _create_book(
        test_client,
        auth_headers(sample_user),
        {"title": "Élan Vital", "author": "Émile Zola", "genre": "Essai"},
    )

    body = (await test_client.get(SEARCH_URL, params={"q": "élan"})).json()
    assert [b["title"] for b in body["books"]] == ["Élan Vital"]

    body = (await test_client.get(BOOKS_URL, params={"author": "émile"})).json()
    assert body["pagination"]["total_items"] == 1
