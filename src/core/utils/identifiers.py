"""Identifier and filename generation."""

from pathlib import PurePath
import re
import secrets
import uuid

from core.utils.constants import ANONYMOUS_OWNER, IMAGE_ID_PREFIX
from core.utils.time import epoch_millis

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_-]")


def generate_image_id() -> str:
    """Generate a unique image identifier."""
    return f"{IMAGE_ID_PREFIX}{uuid.uuid4().hex}"


def generate_filename(original_name: str) -> str:
    """Build a collision-resistant storage filename.

    Format: ``<epoch millis>-<random 0..999999999><original extension>``.
    The extension keeps its original case.

    Example:
        generate_filename("Beach.JPG") -> "1718031234567-583920114.JPG"
    """
    extension = PurePath(original_name).suffix
    return f"{epoch_millis()}-{secrets.randbelow(1_000_000_000)}{extension}"


def owner_folder(user_id: str | None) -> str:
    """Folder segment used to group a user's objects in storage."""
    if not user_id:
        return ANONYMOUS_OWNER
    return _UNSAFE_KEY_CHARS.sub("_", user_id)
