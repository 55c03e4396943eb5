"""
Data URL codec for image references.

Images travel between operations as self-describing strings::

    data-url   = header "," payload
    header     = *CHAR ":" media-type ";" *CHAR
    media-type = 1*CHAR
    payload    = 1*CHAR

The media type is taken from the first ":" up to the next ";" inside the
header segment. The payload is everything after the first "," and is expected
to be standard base64. Decoding is strict: line-wrapped or URL-safe payloads
raise ImageFormatError instead of being forwarded to the service. This module
does not depend on any SDK types.
"""

from __future__ import annotations

import base64
import binascii
import re
from typing import TypedDict

from fitting_room.errors import ImageFormatError


_SEPARATOR = ","
_MEDIA_TYPE_PATTERN = re.compile(r":(.*?);")


class DataUrlParts(TypedDict):
    """Media type and base64 payload of a data URL."""

    mime_type: str
    data: str


def parse_data_url(data_url: str) -> DataUrlParts:
    """
    Split a data URL into its media type and base64 payload.

    Raises:
        ImageFormatError: If the separator is missing, the media type marker
            cannot be found in the header, or the payload is empty.
    """
    header, separator, payload = data_url.partition(_SEPARATOR)
    if not separator:
        raise ImageFormatError("Invalid data URL: missing ',' separator")

    match = _MEDIA_TYPE_PATTERN.search(header)
    if not match or not match.group(1):
        raise ImageFormatError("Could not parse MIME type from data URL")

    if not payload:
        raise ImageFormatError("Invalid data URL: empty payload")

    return {"mime_type": match.group(1), "data": payload}


def format_data_url(mime_type: str, data: bytes | str) -> str:
    """Build a data URL; raw bytes are base64 encoded, strings are used as-is."""
    if isinstance(data, bytes):
        data = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{data}"


def decode_data_url(data_url: str) -> tuple[str, bytes]:
    """Return the media type and decoded bytes of a data URL."""
    parts = parse_data_url(data_url)
    try:
        raw = base64.b64decode(parts["data"], validate=True)
    except binascii.Error as exc:
        raise ImageFormatError("Invalid data URL: payload is not valid base64") from exc
    return parts["mime_type"], raw
