"""Tests for respondent block sizes and annotation page planning."""
import pytest

from backend.app.page_calculator import calculate_annotation_pages, pages_per_respondent_block


@pytest.mark.parametrize(
    "pages,expected",
    [
        (0, 2),
        (1, 4),
        (2, 4),
        (3, 6),
        (4, 6),
        (5, 8),
        (12, 14),
        (13, 16),
    ],
)
def test_block_size(pages, expected):
    assert pages_per_respondent_block(pages) == expected


@pytest.mark.parametrize("pages", range(0, 40))
def test_block_size_is_even_and_at_least_two(pages):
    block = pages_per_respondent_block(pages)
    assert block % 2 == 0
    assert block >= 2
    assert block == (pages + 2 if pages % 2 == 0 else pages + 3)


def test_block_size_is_monotonic():
    sizes = [pages_per_respondent_block(pages) for pages in range(50)]
    assert sizes == sorted(sizes)


def test_block_size_rejects_negative():
    with pytest.raises(ValueError):
        pages_per_respondent_block(-1)


class TestCalculateAnnotationPages:
    def test_four_pages_first_respondent(self):
        assert calculate_annotation_pages(0, 4) == [2, 3, 4, 5]

    def test_four_pages_second_respondent(self):
        assert calculate_annotation_pages(1, 4) == [8, 9, 10, 11]

    def test_three_pages_rounds_block_up(self):
        """2 + 3 = 5 pages, padded to 6; the blank padding page is not stamped."""
        assert calculate_annotation_pages(0, 3) == [2, 3, 4]
        assert calculate_annotation_pages(1, 3) == [8, 9, 10]

    @pytest.mark.parametrize("index", [0, 1, 7, 250])
    def test_zero_pages_is_empty(self, index):
        assert calculate_annotation_pages(index, 0) == []

    @pytest.mark.parametrize("index", [0, 1, 2, 9])
    @pytest.mark.parametrize("pages", [1, 2, 3, 4, 5, 10, 11])
    def test_pages_are_contiguous_from_block_offset(self, index, pages):
        result = calculate_annotation_pages(index, pages)
        assert len(result) == pages
        assert result[0] == index * pages_per_respondent_block(pages) + 2
        assert all(b - a == 1 for a, b in zip(result, result[1:]))

    def test_consecutive_respondents_never_overlap(self):
        pages = 5
        block = pages_per_respondent_block(pages)
        for index in range(10):
            current = calculate_annotation_pages(index, pages)
            following = calculate_annotation_pages(index + 1, pages)
            assert current[-1] < following[0]
            assert current[-1] < (index + 1) * block

    def test_negative_index_rejected(self):
        with pytest.raises(ValueError):
            calculate_annotation_pages(-1, 4)
