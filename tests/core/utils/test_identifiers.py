import re
from datetime import datetime, timezone
from unittest.mock import patch

from core.utils.identifiers import generate_filename, generate_image_id, owner_folder
from core.utils.time import ensure_utc, epoch_millis

FILENAME_PATTERN = re.compile(r"^(\d+)-(\d{1,9})(\.[A-Za-z0-9]+)?$")


def test_generate_image_id_is_prefixed_and_unique() -> None:
    ids = {generate_image_id() for _ in range(200)}

    assert len(ids) == 200
    assert all(re.fullmatch(r"img_[0-9a-f]{32}", image_id) for image_id in ids)


def test_generate_filename_keeps_extension_case() -> None:
    with patch("core.utils.identifiers.epoch_millis", return_value=1718031234567):
        filename = generate_filename("Beach.JPG")

    match = FILENAME_PATTERN.match(filename)
    assert match is not None
    assert match.group(1) == "1718031234567"
    assert 0 <= int(match.group(2)) <= 999_999_999
    assert match.group(3) == ".JPG"


def test_generate_filename_without_extension() -> None:
    filename = generate_filename("README")

    assert FILENAME_PATTERN.match(filename)
    assert "." not in filename


def test_generated_filenames_do_not_collide() -> None:
    with patch("core.utils.identifiers.epoch_millis", return_value=1):
        names = {generate_filename("a.png") for _ in range(50)}

    assert len(names) > 45


def test_owner_folder() -> None:
    assert owner_folder(None) == "anonymous"
    assert owner_folder("") == "anonymous"
    assert owner_folder("user_1") == "user_1"
    assert owner_folder("../evil/id") == "___evil_id"


def test_ensure_utc_handles_naive_and_aware() -> None:
    naive = datetime(2024, 1, 1, 10, 0)
    aware = datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)

    assert ensure_utc(naive).tzinfo == timezone.utc
    assert ensure_utc(aware) == aware


def test_epoch_millis_is_current() -> None:
    now_ms = datetime.now(timezone.utc).timestamp() * 1000

    assert abs(epoch_millis() - now_ms) < 5_000
