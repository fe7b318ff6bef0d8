from __future__ import annotations

import hashlib
import logging
import re
import time
from dataclasses import dataclass
from typing import Callable, Mapping, Optional

import requests

from ..core.enums import PhotoCategory
from ..core.exceptions import StorageConfigurationError, StorageUnavailableError, ValidationError
from .image_data import decode_image_payload
from .storage import PhotoStorage

logger = logging.getLogger(__name__)

_VERSION_RE = re.compile(r"^v\d+$")


@dataclass(frozen=True)
class CloudinarySettings:
    cloud_name: str = ""
    api_key: str = ""
    api_secret: str = ""
    upload_preset: str = ""
    folder: str = "employee-attendance"
    timeout: float = 30.0
    api_base: str = "https://api.cloudinary.com/v1_1"

    @classmethod
    def from_dict(cls, values: Mapping[str, object]) -> "CloudinarySettings":
        return cls(
            cloud_name=str(values.get("cloud_name") or ""),
            api_key=str(values.get("api_key") or ""),
            api_secret=str(values.get("api_secret") or ""),
            upload_preset=str(values.get("upload_preset") or ""),
            folder=str(values.get("folder") or "employee-attendance"),
            timeout=float(values.get("timeout") or 30.0),
        )


def sign_params(params: Mapping[str, str], api_secret: str) -> str:
    """Cloudinary signature: SHA-1 of the sorted ``k=v`` pairs plus the secret."""
    to_sign = "&".join(f"{k}={params[k]}" for k in sorted(params) if params[k] != "")
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


def public_id_from_reference(reference: str) -> str:
    """Accept a delivery URL or a bare public id."""
    reference = (reference or "").strip()
    if not reference:
        raise ValidationError("Photo reference is required")
    if "/upload/" not in reference:
        return reference

    path = reference.split("/upload/", 1)[1].split("?", 1)[0]
    parts = [p for p in path.split("/") if p]
    if parts and _VERSION_RE.match(parts[0]):
        parts = parts[1:]
    if not parts:
        raise ValidationError("Invalid photo URL")
    last = parts[-1]
    if "." in last:
        parts[-1] = last.rsplit(".", 1)[0]
    return "/".join(parts)


class CloudinaryPhotoStorage(PhotoStorage):
    """Signed uploads/destroys against the Cloudinary REST API. No retries."""

    def __init__(
        self,
        settings: CloudinarySettings,
        *,
        session: Optional[requests.Session] = None,
        clock: Callable[[], float] = time.time,
    ):
        self._settings = settings
        self._session = session or requests.Session()
        self._clock = clock

    def _require_config(self) -> None:
        if not self._settings.cloud_name:
            raise StorageConfigurationError("Cloudinary cloud name is not configured")
        if not self._settings.api_key:
            raise StorageConfigurationError("Cloudinary API key is not configured")
        if not self._settings.api_secret:
            raise StorageConfigurationError("Cloudinary API secret is not configured")

    def _signed(self, params: dict[str, str]) -> dict[str, str]:
        params = dict(params, timestamp=str(int(self._clock())))
        params["signature"] = sign_params(params, self._settings.api_secret)
        params["api_key"] = self._settings.api_key
        return params

    def _post(self, action: str, data: dict[str, str]) -> dict:
        url = f"{self._settings.api_base}/{self._settings.cloud_name}/image/{action}"
        try:
            resp = self._session.post(url, data=data, timeout=self._settings.timeout)
        except requests.RequestException as exc:
            raise StorageUnavailableError(f"Photo storage is unreachable: {exc}") from exc

        if resp.status_code in (401, 403):
            raise StorageConfigurationError(
                "Photo storage rejected the credentials. Please check your Cloudinary configuration."
            )
        if resp.status_code >= 400:
            raise StorageUnavailableError(f"Photo storage error ({resp.status_code}): {_error_message(resp)}")

        try:
            return resp.json()
        except ValueError as exc:
            raise StorageUnavailableError("Photo storage returned an unreadable response") from exc

    def upload(self, photo: str, owner_id: str, category: PhotoCategory) -> str:
        payload = decode_image_payload(photo)
        self._require_config()

        params = {
            "folder": f"{self._settings.folder}/{owner_id}/{PhotoCategory(category).value}",
            "transformation": "c_limit,h_800,w_800",
        }
        if self._settings.upload_preset:
            params["upload_preset"] = self._settings.upload_preset

        data = self._signed(params)
        data["file"] = payload.to_data_uri()
        body = self._post("upload", data)

        secure_url = body.get("secure_url")
        if not secure_url:
            raise StorageUnavailableError("Cloudinary upload succeeded but no URL returned")
        logger.info("uploaded %s photo for %s", PhotoCategory(category).value, owner_id)
        return secure_url

    def delete(self, reference: str) -> None:
        public_id = public_id_from_reference(reference)
        self._require_config()
        body = self._post("destroy", self._signed({"public_id": public_id}))
        logger.info("destroyed photo %s (result=%s)", public_id, body.get("result"))


def _error_message(resp: requests.Response) -> str:
    try:
        return str(resp.json().get("error", {}).get("message") or resp.text)
    except ValueError:
        return resp.text
