"""Filename-based category tagging."""

from core.utils.constants import CATEGORY_KEYWORDS, DEFAULT_CATEGORY


def categorize(filename: str) -> str:
    """Derive a coarse category tag from an original filename.

    Case-insensitive substring match, first matching category wins:
    portrait (portrait/face/person), abstract (abstract/art),
    nature (nature/flower/tree/animal), otherwise landscape.
    Only the name is inspected, never the file contents.

    Example:
        categorize("sunset_nature_hike.png") -> "nature"
    """
    name = filename.lower()

    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in name for keyword in keywords):
            return category

    return DEFAULT_CATEGORY
