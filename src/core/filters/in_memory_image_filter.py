"""
Image filtering for the gallery view.

Provides a coordination layer that applies category and search filters to
an already-fetched image list. This service does not perform data access;
the API always returns the full list and refinement happens in the client.
"""

from core.filters.name_contains_filter import NameContainsFilter
from core.models.image import Image
from core.utils.constants import ALL_CATEGORIES


class CategoryFilter:
    """Exact, case-insensitive match on Image.category; "All" disables it."""

    @staticmethod
    def apply(items: list[Image], category: str | None) -> list[Image]:
        if not category or category.lower() == ALL_CATEGORIES.lower():
            return items

        wanted = category.lower()
        return [item for item in items if (item.category or "").lower() == wanted]


class InMemoryImageFilter:
    """
    Service responsible for refining a gallery image list.

    This class orchestrates in-memory refinement strategies:
    - Category filtering (exact match, "All" = no filter)
    - Free-text search (substring of filename or category)

    Both filters are combined with logical AND and keep the input order.
    """

    def __init__(self) -> None:
        """Initialize filter components used for orchestration."""
        self._category_filter = CategoryFilter()
        self._name_filter = NameContainsFilter()

    def apply(
        self,
        items: list[Image],
        *,
        category: str | None = ALL_CATEGORIES,
        search_query: str | None = None,
    ) -> list[Image]:
        """
        Apply category and search filters to image metadata.

        Args:
            items: Full gallery image list
            category: Category label or "All"
            search_query: Free-text query

        Returns:
            Images matching both filters
        """
        by_category = self._category_filter.apply(items, category)
        return self._name_filter.apply(by_category, search_query)
