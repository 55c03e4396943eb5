from __future__ import annotations

from enum import Enum

from google.genai import types

from fitting_room.codecs.data_url import format_data_url
from fitting_room.errors import (
    GenerationBlockedError,
    GenerationInterruptedError,
    MalformedResponseError,
    NoImageGeneratedError,
)


_NORMAL_FINISH_REASON = "STOP"


def _reason_name(value: object) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def _find_image_part(response: types.GenerateContentResponse) -> types.Blob | None:
    for candidate in response.candidates or []:
        content = candidate.content
        for part in (content.parts if content else None) or []:
            if part.inline_data:
                return part.inline_data
    return None


def decode_image_response(response: types.GenerateContentResponse) -> str:
    """
    Turn a generate_content response into an image data URL.

    Block feedback wins over any candidate content. Otherwise the first inline
    image across candidates is returned. Without an image, a non-STOP finish
    reason on the first candidate is reported, then any text the model sent.

    Raises:
        GenerationBlockedError: The prompt was blocked.
        MalformedResponseError: An image part has no mime type or no data.
        GenerationInterruptedError: Generation finished for a non-normal reason.
        NoImageGeneratedError: The response holds no image.
    """
    feedback = response.prompt_feedback
    if feedback and feedback.block_reason:
        raise GenerationBlockedError(
            _reason_name(feedback.block_reason), feedback.block_reason_message
        )

    image = _find_image_part(response)
    if image is not None:
        if not image.mime_type or not image.data:
            raise MalformedResponseError(
                "Image part in response is missing its mime type or data"
            )
        return format_data_url(image.mime_type, image.data)

    candidates = response.candidates or []
    finish_reason = candidates[0].finish_reason if candidates else None
    if finish_reason and _reason_name(finish_reason) != _NORMAL_FINISH_REASON:
        raise GenerationInterruptedError(_reason_name(finish_reason))

    text = (response.text or "").strip() if candidates else ""
    raise NoImageGeneratedError(text or None)
