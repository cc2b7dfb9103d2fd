import pytest

from core.filters.in_memory_image_filter import CategoryFilter, InMemoryImageFilter
from core.filters.name_contains_filter import NameContainsFilter


@pytest.fixture
def gallery(make_image):
    return [
        make_image(id="img_1", original_name="sunset_beach.jpg", category="landscape"),
        make_image(id="img_2", original_name="forest_tree.jpg", category="nature"),
        make_image(id="img_3", original_name="Family_Portrait.png", category="portrait"),
        make_image(id="img_4", original_name="sunset_nature.png", category="nature"),
    ]


class TestCategoryFilter:
    def test_all_returns_everything(self, gallery) -> None:
        assert CategoryFilter.apply(gallery, "All") == gallery
        assert CategoryFilter.apply(gallery, None) == gallery

    def test_exact_case_insensitive_match(self, gallery) -> None:
        result = CategoryFilter.apply(gallery, "Nature")

        assert [image.id for image in result] == ["img_2", "img_4"]

    def test_unknown_category_matches_nothing(self, gallery) -> None:
        assert CategoryFilter.apply(gallery, "Nat") == []


class TestNameContainsFilter:
    def test_matches_original_name_case_insensitively(self, gallery) -> None:
        result = NameContainsFilter.apply(gallery, "PORTRAIT")

        assert [image.id for image in result] == ["img_3"]

    def test_matches_category(self, gallery) -> None:
        result = NameContainsFilter.apply(gallery, "land")

        assert [image.id for image in result] == ["img_1"]

    @pytest.mark.parametrize("term", [None, "", "   "])
    def test_blank_terms_match_everything(self, gallery, term) -> None:
        assert NameContainsFilter.apply(gallery, term) == gallery


class TestInMemoryImageFilter:
    def test_filters_combine_with_and(self, gallery) -> None:
        result = InMemoryImageFilter().apply(gallery, category="Nature", search_query="sunset")

        assert [image.id for image in result] == ["img_4"]

    def test_preserves_input_order(self, gallery) -> None:
        result = InMemoryImageFilter().apply(gallery, search_query="sunset")

        assert [image.id for image in result] == ["img_1", "img_4"]
