from __future__ import annotations

import asyncio
import mimetypes
from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class ImageUpload(Protocol):
    """User supplied image file. Starlette's ``UploadFile`` satisfies this."""

    content_type: str | None

    async def read(self) -> bytes: ...


class LocalImageFile:
    """Image file on disk with a media type guessed from its name."""

    def __init__(self, path: str | Path, content_type: str | None = None) -> None:
        self.path = Path(path)
        self.filename = self.path.name
        self.content_type = content_type or mimetypes.guess_type(self.path.name)[0]

    async def read(self) -> bytes:
        return await asyncio.to_thread(self.path.read_bytes)

    def __repr__(self) -> str:
        return f"LocalImageFile({str(self.path)!r}, content_type={self.content_type!r})"
