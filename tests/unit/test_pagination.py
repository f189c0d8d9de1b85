"""Unit tests for list pagination."""

import pytest

from anrsi_portal.core.domain.exceptions import InvalidPaginationError
from anrsi_portal.core.services.pagination import page_numbers, paginate, paginate_items

pytestmark = pytest.mark.unit


class TestPaginate:
    """Tests for page windows."""

    def test_first_page(self):
        window = paginate(23, page=1, page_size=10)
        assert window.total_pages == 3
        assert (window.start, window.end) == (0, 10)
        assert not window.has_previous
        assert window.has_next

    def test_last_partial_page(self):
        window, visible = paginate_items(list(range(23)), page=3, page_size=10)
        assert visible == [20, 21, 22]
        assert window.has_previous
        assert not window.has_next

    def test_page_past_the_end_is_clamped(self):
        # The list shrank from 23 to 5 items while page 3 was shown
        window, visible = paginate_items(list(range(5)), page=3, page_size=10)
        assert window.page == 1
        assert visible == [0, 1, 2, 3, 4]

    def test_page_below_one_is_clamped(self):
        assert paginate(23, page=0, page_size=10).page == 1

    def test_empty_list(self):
        window, visible = paginate_items([], page=4, page_size=10)
        assert window.page == 1
        assert window.total_pages == 0
        assert visible == []
        assert window.page_numbers == ()
        assert not window.has_next

    @pytest.mark.parametrize("size", [0, -5])
    def test_invalid_page_size(self, size):
        with pytest.raises(InvalidPaginationError):
            paginate(10, page_size=size)

    def test_negative_total(self):
        with pytest.raises(InvalidPaginationError):
            paginate(-1)


class TestPageNumbers:
    """Tests for page link ranges."""

    def test_short_range_is_complete(self):
        assert page_numbers(2, 7) == (1, 2, 3, 4, 5, 6, 7)

    def test_ellipsis_in_the_middle(self):
        assert page_numbers(10, 20) == (1, None, 9, 10, 11, None, 20)

    def test_near_the_start(self):
        assert page_numbers(2, 20) == (1, 2, 3, None, 20)

    def test_near_the_end(self):
        assert page_numbers(19, 20) == (1, None, 18, 19, 20)

    def test_wider_window(self):
        assert page_numbers(10, 20, window=2) == (1, None, 8, 9, 10, 11, 12, None, 20)
