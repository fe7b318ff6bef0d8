from __future__ import annotations

import base64
import binascii
import io
from dataclasses import dataclass
from typing import Any

from PIL import Image, UnidentifiedImageError

from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class ImagePayload:
    data: bytes
    format: str

    @property
    def mime_type(self) -> str:
        return Image.MIME.get(self.format, "image/jpeg")

    def to_data_uri(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"


def decode_image_payload(value: Any) -> ImagePayload:
    """Decode a base64 image (optionally a ``data:`` URL) and check it is an image."""
    if not value or not isinstance(value, str):
        raise ValidationError("Invalid image data provided")

    encoded = value.split(",", 1)[1] if "," in value else value
    encoded = encoded.strip()
    if not encoded:
        raise ValidationError("Empty image data")

    try:
        raw = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("Invalid image data provided")
    if not raw:
        raise ValidationError("Empty image data")

    try:
        with Image.open(io.BytesIO(raw)) as img:
            fmt = img.format or "JPEG"
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError):
        raise ValidationError("Invalid image data provided")

    return ImagePayload(data=raw, format=fmt)
