"""
Conversion helpers from caller inputs to Gemini request parts.
"""

from __future__ import annotations

from google.genai import types

from fitting_room.codecs.data_url import decode_data_url
from fitting_room.entities.image import ImageUpload
from fitting_room.errors import EmptyImageError, UnsupportedImageError


async def file_to_part(upload: ImageUpload) -> types.Part:
    """
    Read an uploaded image into an inline image part.

    Raises:
        UnsupportedImageError: If the declared media type is missing or not an image.
        EmptyImageError: If the upload has no content.
    """
    mime_type = upload.content_type
    if not mime_type or not mime_type.startswith("image/"):
        raise UnsupportedImageError(mime_type)

    data = await upload.read()
    if not data:
        raise EmptyImageError("Uploaded image is empty")

    return types.Part.from_bytes(data=data, mime_type=mime_type)


def data_url_to_part(data_url: str) -> types.Part:
    mime_type, data = decode_data_url(data_url)
    return types.Part.from_bytes(data=data, mime_type=mime_type)
