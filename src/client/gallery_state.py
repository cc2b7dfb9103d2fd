"""
Local view state for the gallery: filtering, view mode, selection, preview.

Holds the full image list fetched from the API and derives the visible
list from the current category and search query. Nothing here talks to
the network.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from core.filters.in_memory_image_filter import InMemoryImageFilter
from core.models.image import Image
from core.utils.constants import ALL_CATEGORIES, GALLERY_CATEGORIES


class ViewMode(str, Enum):
    GRID = "grid"
    LIST = "list"


@dataclass
class GalleryState:
    images: list[Image] = field(default_factory=list)
    category: str = ALL_CATEGORIES
    search_query: str = ""
    view_mode: ViewMode = ViewMode.GRID
    selection_mode: bool = False
    selected_ids: set[str] = field(default_factory=set)
    preview_index: int | None = None

    _filter: InMemoryImageFilter = field(default_factory=InMemoryImageFilter, init=False, repr=False)

    # Data

    def set_images(self, images: list[Image]) -> None:
        """Replace the image list, dropping selections and previews that no longer exist."""
        self.images = list(images)

        known = {image.id for image in self.images}
        self.selected_ids &= known

        if self.preview_index is not None:
            visible = self.filtered_images
            if not visible:
                self.preview_index = None
            else:
                self.preview_index = min(self.preview_index, len(visible) - 1)

    @property
    def filtered_images(self) -> list[Image]:
        return self._filter.apply(
            self.images,
            category=self.category,
            search_query=self.search_query,
        )

    # Filters

    def set_category(self, category: str) -> None:
        """Select one of the gallery categories (case-insensitive)."""
        for label in GALLERY_CATEGORIES:
            if label.lower() == category.strip().lower():
                self.category = label
                self.preview_index = None
                return
        raise ValueError(f"Unknown category: {category}")

    def set_search(self, query: str) -> None:
        self.search_query = query
        self.preview_index = None

    def set_view_mode(self, mode: ViewMode | str) -> None:
        self.view_mode = ViewMode(mode)

    def toggle_view_mode(self) -> ViewMode:
        self.view_mode = ViewMode.LIST if self.view_mode is ViewMode.GRID else ViewMode.GRID
        return self.view_mode

    def summary(self) -> str:
        """Count line, e.g. ``2 of 5 images matching "sun" in nature``."""
        text = f"{len(self.filtered_images)} of {len(self.images)} images"
        if self.search_query:
            text += f' matching "{self.search_query}"'
        if self.category != ALL_CATEGORIES:
            text += f" in {self.category.lower()}"
        return text

    def empty_message(self) -> str | None:
        if self.filtered_images:
            return None
        if self.category == ALL_CATEGORIES:
            return "No images in your gallery yet. Upload some images to get started!"
        return f"No {self.category.lower()} images found."

    # Selection

    def toggle_selection_mode(self) -> bool:
        self.selection_mode = not self.selection_mode
        self.selected_ids = set()
        return self.selection_mode

    def toggle_selected(self, image_id: str) -> None:
        if image_id in self.selected_ids:
            self.selected_ids.discard(image_id)
        else:
            self.selected_ids.add(image_id)

    def select_all(self) -> None:
        """Select every image currently visible through the filters."""
        self.selected_ids = {image.id for image in self.filtered_images}

    def deselect_all(self) -> None:
        self.selected_ids = set()

    # Preview

    def open_preview(self, image_id: str) -> Image | None:
        """Open the preview on an image; unknown ids fall back to the first visible image."""
        visible = self.filtered_images
        if not visible:
            self.preview_index = None
            return None

        self.preview_index = next(
            (index for index, image in enumerate(visible) if image.id == image_id),
            0,
        )
        return visible[self.preview_index]

    def close_preview(self) -> None:
        self.preview_index = None

    @property
    def preview_image(self) -> Image | None:
        if self.preview_index is None:
            return None
        visible = self.filtered_images
        if not 0 <= self.preview_index < len(visible):
            return None
        return visible[self.preview_index]

    def next_preview(self) -> Image | None:
        return self._step_preview(1)

    def previous_preview(self) -> Image | None:
        return self._step_preview(-1)

    def _step_preview(self, step: int) -> Image | None:
        visible = self.filtered_images
        if self.preview_index is None or not visible:
            return None
        self.preview_index = (self.preview_index + step) % len(visible)
        return visible[self.preview_index]

    def preview_position(self) -> str | None:
        """Position label such as ``3 of 7``."""
        if self.preview_image is None:
            return None
        return f"{self.preview_index + 1} of {len(self.filtered_images)}"
