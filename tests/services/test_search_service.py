import pytest

from bookreview.core.exceptions import ValidationError
from bookreview.services.book_service import BookService
from bookreview.services.rating_service import RatingService
from bookreview.services.search_service import SearchService
from tests.mocks.fake_repositories import (
    FakeBookRepository,
    FakeReviewRepository,
    FakeUserRepository,
    make_book,
    make_review,
    make_user,
)

pytestmark = pytest.mark.asyncio


@pytest.fixture
def search_service() -> SearchService:
    reviews = FakeReviewRepository([make_review(1, book_id=1, user_id=1, rating=4)])
    ratings = RatingService()
    ratings.review_repository = reviews

    books = BookService()
    books.book_repository = FakeBookRepository(
        [
            make_book(1, title="The Great Gatsby", author="F. Scott Fitzgerald", genre="Classic"),
            make_book(2, title="Dune", author="Frank Herbert", genre="Science Fiction"),
            make_book(3, title="Great Expectations", author="Charles Dickens", genre="Classic"),
        ]
    )
    books.review_repository = reviews
    books.user_repository = FakeUserRepository([make_user(1)])
    books.rating_service = ratings

    service = SearchService()
    service.book_service = books
    return service


async def test_search_matches_title(search_service: SearchService):
    result = await search_service.search_books(None, query="great")

    assert [b.id for b in result.books] == [3, 1]
    assert result.pagination.total_items == 2


async def test_search_matches_author(search_service: SearchService):
    result = await search_service.search_books(None, query="SCOTT")

    assert [b.title for b in result.books] == ["The Great Gatsby"]
    assert result.books[0].average_rating == 4.0
    assert result.books[0].review_count == 1


async def test_search_without_matches(search_service: SearchService):
    result = await search_service.search_books(None, query="xyz")

    assert result.books == []
    assert result.pagination.total_items == 0
    assert result.pagination.total_pages == 0


async def test_search_echoes_stripped_query(search_service: SearchService):
    result = await search_service.search_books(None, query="  dune  ")

    assert result.query == "dune"
    assert [b.id for b in result.books] == [2]


async def test_search_paginates(search_service: SearchService):
    result = await search_service.search_books(None, query="great", page=2, limit=1)

    assert [b.id for b in result.books] == [1]
    assert result.pagination.total_pages == 2
    assert result.pagination.has_prev is True


@pytest.mark.parametrize("query", ["", "   ", None])
async def test_search_requires_query(search_service: SearchService, query):
    with pytest.raises(ValidationError) as exc_info:
        await search_service.search_books(None, query=query)
    assert exc_info.value.detail == "Search query is required"
