"""Free-text search over image names and categories."""

from core.models.image import Image


class NameContainsFilter:
    """Filter images by case-insensitive substring search.

    An image matches when the search term appears in its original
    filename or in its category tag. Blank terms match everything.
    """

    @staticmethod
    def apply(items: list[Image], search_term: str | None) -> list[Image]:
        """Apply the search term to items, preserving order."""
        if not search_term or not search_term.strip():
            return items

        search_lower = search_term.lower()
        return [
            item
            for item in items
            if search_lower in item.original_name.lower()
            or search_lower in (item.category or "").lower()
        ]
