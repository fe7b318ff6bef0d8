from __future__ import annotations

from typing import Protocol

from ..core.enums import PhotoCategory


class PhotoStorage(Protocol):
    """Remote image store.

    ``upload`` rejects invalid payloads with ``ValidationError`` before any
    remote call; remote failures raise ``UpstreamError`` subclasses.
    """

    def upload(self, photo: str, owner_id: str, category: PhotoCategory) -> str:
        raise NotImplementedError

    def delete(self, reference: str) -> None:
        raise NotImplementedError
