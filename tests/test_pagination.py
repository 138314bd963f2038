import pytest

from bookreview.utils.pagination import MAX_DB_INT, describe_page, page_window


def test_window_defaults():
    window = page_window(default_limit=10)
    assert (window.page, window.limit, window.skip) == (1, 10, 0)


@pytest.mark.parametrize("page", [0, -3, "abc", None, True])
def test_bad_page_falls_back_to_first(page):
    assert page_window(page, 10, default_limit=10).page == 1


@pytest.mark.parametrize("limit", [0, -1, "lots", None])
def test_bad_limit_falls_back_to_default(limit):
    assert page_window(2, limit, default_limit=5).limit == 5


def test_numeric_strings_are_accepted():
    window = page_window("3", "20", default_limit=10)
    assert (window.page, window.limit, window.skip) == (3, 20, 40)


def test_limit_is_clamped_to_maximum():
    window = page_window(1, 500, default_limit=10, max_limit=100)
    assert window.limit == 100


def test_skip_is_offset_of_page():
    assert page_window(4, 25, default_limit=10).skip == 75


def test_describe_empty_result():
    info = describe_page(1, 10, 0)
    assert info.total_pages == 0
    assert info.total_items == 0
    assert info.has_next is False
    assert info.has_prev is False


def test_describe_first_page_of_three():
    info = describe_page(1, 10, 23)
    assert info.current_page == 1
    assert info.total_pages == 3
    assert info.has_next is True
    assert info.has_prev is False


def test_describe_last_page():
    info = describe_page(3, 10, 23)
    assert info.total_pages == 3
    assert info.has_next is False
    assert info.has_prev is True


def test_describe_page_past_the_end():
    info = describe_page(7, 10, 23)
    assert info.current_page == 7
    assert info.has_next is False
    assert info.has_prev is True


def test_exact_multiple_has_no_partial_page():
    assert describe_page(1, 5, 20).total_pages == 4


def test_skip_never_exceeds_database_integer():
    window = page_window(10**18, 50, default_limit=10, max_limit=100)
    assert window.page == 10**18
    assert window.skip == MAX_DB_INT
