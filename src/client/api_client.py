"""HTTP client for the gallery REST API."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
import mimetypes
from pathlib import Path
from typing import Any

import requests

from core.models.image import Image, RejectedFile
from core.models.user import User
from core.utils.constants import AVATAR_FIELD_NAME, UPLOAD_FIELD_NAME, USER_ID_HEADER

DEFAULT_TIMEOUT = 30


class ApiError(Exception):
    """Raised for any non-2xx API response."""

    def __init__(self, status: int, message: str) -> None:
        self.status = status
        self.message = message
        super().__init__(f"{status}: {message}")


@dataclass(frozen=True)
class LocalFile:
    """A file picked for upload, read into memory."""

    name: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @classmethod
    def from_path(cls, path: str | Path) -> LocalFile:
        path = Path(path)
        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        return cls(name=path.name, content_type=content_type, data=path.read_bytes())


FileSource = str | Path | LocalFile


def as_local_file(source: FileSource) -> LocalFile:
    return source if isinstance(source, LocalFile) else LocalFile.from_path(source)


@dataclass(frozen=True)
class UploadResponse:
    images: list[Image]
    rejected: list[RejectedFile]


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason or "Request failed"

    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or response.reason)
    return response.reason or "Request failed"


class GalleryApiClient:
    """Wrapper for making HTTP requests to the gallery API."""

    def __init__(
        self,
        endpoint: str,
        *,
        headers: dict[str, str] | None = None,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.endpoint = endpoint.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        if headers:
            self.session.headers.update(headers)

    def _request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        url = f"{self.endpoint}{path}"
        response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        if not response.ok:
            raise ApiError(response.status_code, _error_message(response))
        return response

    # Config

    def get_config(self) -> dict[str, str | None]:
        """Identity-provider settings (``supabaseUrl``, ``supabaseAnonKey``)."""
        return self._request("GET", "/api/config").json()

    # Images

    def list_images(self) -> list[Image]:
        """All images, newest first."""
        payload = self._request("GET", "/api/images").json()
        return [Image.model_validate(item) for item in payload]

    def upload_images(
        self,
        files: Iterable[FileSource],
        *,
        user_id: str | None = None,
    ) -> UploadResponse:
        """Upload a batch of files as the ``images`` multipart field."""
        parts = [
            (UPLOAD_FIELD_NAME, (item.name, item.data, item.content_type))
            for item in map(as_local_file, files)
        ]
        headers = {USER_ID_HEADER: user_id} if user_id else None

        payload = self._request(
            "POST",
            "/api/images/upload",
            files=parts,
            headers=headers,
        ).json()

        return UploadResponse(
            images=[Image.model_validate(item) for item in payload.get("images", [])],
            rejected=[RejectedFile.model_validate(item) for item in payload.get("rejected", [])],
        )

    def delete_image(self, image_id: str) -> str:
        return self._request("DELETE", f"/api/images/{image_id}").json()["message"]

    def delete_images(self, image_ids: Iterable[str]) -> dict[str, bool]:
        """Bulk delete; returns whether each id was removed."""
        payload = self._request(
            "POST",
            "/api/images/batch-delete",
            json={"imageIds": list(image_ids)},
        ).json()
        return {item["id"]: bool(item["deleted"]) for item in payload["results"]}

    # Users

    def create_user(
        self,
        user_id: str,
        email: str,
        *,
        full_name: str | None = None,
        avatar_url: str | None = None,
    ) -> User:
        payload = self._request(
            "POST",
            "/api/users",
            json={
                "id": user_id,
                "email": email,
                "fullName": full_name,
                "avatarUrl": avatar_url,
            },
        ).json()
        return User.model_validate(payload)

    def get_user(self, user_id: str) -> User:
        return User.model_validate(self._request("GET", f"/api/users/{user_id}").json())

    def update_user(self, user_id: str, **fields: Any) -> User:
        """Send only the given fields (``email``, ``full_name``, ``avatar_url``)."""
        body = {
            {"full_name": "fullName", "avatar_url": "avatarUrl"}.get(name, name): value
            for name, value in fields.items()
        }
        return User.model_validate(
            self._request("PUT", f"/api/users/{user_id}", json=body).json()
        )

    def sync_user(
        self,
        user_id: str,
        email: str,
        *,
        full_name: str | None = None,
        avatar_url: str | None = None,
    ) -> User:
        """Return the stored profile, creating it on first sign-in."""
        try:
            return self.get_user(user_id)
        except ApiError as exc:
            if exc.status != 404:
                raise

        return self.create_user(
            user_id,
            email,
            full_name=full_name,
            avatar_url=avatar_url,
        )

    def upload_avatar(self, user_id: str, file: FileSource) -> User:
        item = as_local_file(file)
        payload = self._request(
            "POST",
            f"/api/users/{user_id}/avatar",
            files=[(AVATAR_FIELD_NAME, (item.name, item.data, item.content_type))],
        ).json()
        return User.model_validate(payload)

    def remove_avatar(self, user_id: str) -> User:
        return User.model_validate(
            self._request("DELETE", f"/api/users/{user_id}/avatar").json()
        )
