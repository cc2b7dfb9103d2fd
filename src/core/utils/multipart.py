"""multipart/form-data parsing for API Gateway proxy events."""

from dataclasses import dataclass
from email.message import Message
from typing import Any

from aws_lambda_powertools import Logger
from requests_toolbelt.multipart.decoder import (
    ImproperBodyPartContentException,
    MultipartDecoder,
    NonMultipartContentTypeException,
)

from core.models.errors import ValidationError
from core.utils.validators import decode_body, get_header

logger = Logger(UTC=True)


@dataclass(frozen=True)
class UploadedFile:
    """One file part of a multipart request."""

    field_name: str
    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


def _disposition_params(value: str) -> tuple[str | None, str | None]:
    """Return (name, filename) from a Content-Disposition header value."""
    message = Message()
    message["content-disposition"] = value
    name = message.get_param("name", header="content-disposition")
    filename = message.get_filename()
    return (
        str(name) if name is not None else None,
        filename,
    )


def parse_multipart_files(event: dict[str, Any], *, field_name: str) -> list[UploadedFile]:
    """Extract the file parts sent under ``field_name``, in request order.

    Raises:
        ValidationError: If the request is not valid multipart/form-data
    """
    content_type = get_header(event, "Content-Type") or ""
    if not content_type.lower().startswith("multipart/form-data"):
        raise ValidationError(
            message="Invalid request: expected multipart/form-data",
            details={"content_type": content_type or None},
        )

    body = decode_body(event)

    try:
        decoder = MultipartDecoder(body, content_type)
    except (
        ImproperBodyPartContentException,
        NonMultipartContentTypeException,
        ValueError,
    ) as exc:
        logger.warning("Malformed multipart body", extra={"error": str(exc)})
        raise ValidationError(message="Invalid multipart request body") from exc

    files: list[UploadedFile] = []

    for part in decoder.parts:
        disposition = part.headers.get(b"Content-Disposition", b"").decode("utf-8")
        name, filename = _disposition_params(disposition)

        if name != field_name or filename is None:
            continue

        part_type = part.headers.get(b"Content-Type", b"application/octet-stream")
        files.append(
            UploadedFile(
                field_name=name,
                filename=filename,
                content_type=part_type.decode("utf-8").strip(),
                data=part.content,
            )
        )

    return files
