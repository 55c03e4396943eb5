"""
FittingRoomService backed by the Google Gen AI SDK.

Each operation builds one multimodal request (image parts followed by an
instruction) and decodes the response into an image data URL. Errors are never
retried; they propagate to the caller.
"""

from __future__ import annotations

import logging

from google import genai
from google.genai import types
from langfuse import observe

from fitting_room.entities.image import ImageUpload
from fitting_room.errors import ConfigurationError, FittingRoomError
from fitting_room.services.FittingRoomService.fitting_room_service_interface import (
    FittingRoomServiceInterface,
)
from fitting_room.services.FittingRoomService.image_parts import (
    data_url_to_part,
    file_to_part,
)
from fitting_room.services.FittingRoomService.prompts import (
    MODEL_IMAGE_PROMPT,
    VIRTUAL_TRY_ON_PROMPT,
    build_pose_variation_prompt,
)
from fitting_room.services.FittingRoomService.response_decoder import (
    decode_image_response,
)


DEFAULT_MODEL_NAME = "gemini-2.5-flash-image-preview"


class FittingRoomService(FittingRoomServiceInterface):
    def __init__(
        self,
        client: genai.Client | None,
        logger: logging.Logger,
        model_name: str = DEFAULT_MODEL_NAME,
    ) -> None:
        """
        Args:
            client: Gen AI client built at startup. ``None`` makes every
                operation fail with ConfigurationError before any I/O.
            logger: Logger instance
            model_name: Image capable Gemini model
        """
        self.client = client
        self.logger = logger
        self.model_name = model_name

    def _require_client(self) -> genai.Client:
        if self.client is None:
            raise ConfigurationError(
                "Gen AI client is not initialized. Set GEMINI_API_KEY and restart."
            )
        return self.client

    @observe(capture_input=False, capture_output=False)
    async def generate_model_image(self, user_image: ImageUpload) -> str:
        client = self._require_client()
        user_image_part = await file_to_part(user_image)
        return await self._generate(
            client,
            "model_image",
            [user_image_part, types.Part.from_text(text=MODEL_IMAGE_PROMPT)],
        )

    @observe(capture_input=False, capture_output=False)
    async def generate_virtual_try_on_image(
        self, model_image_url: str, garment_image: ImageUpload
    ) -> str:
        client = self._require_client()
        model_image_part = data_url_to_part(model_image_url)
        garment_image_part = await file_to_part(garment_image)
        return await self._generate(
            client,
            "virtual_try_on",
            [
                model_image_part,
                garment_image_part,
                types.Part.from_text(text=VIRTUAL_TRY_ON_PROMPT),
            ],
        )

    @observe(capture_input=False, capture_output=False)
    async def generate_pose_variation(
        self, try_on_image_url: str, pose_instruction: str
    ) -> str:
        client = self._require_client()
        try_on_image_part = data_url_to_part(try_on_image_url)
        prompt = build_pose_variation_prompt(pose_instruction)
        return await self._generate(
            client,
            "pose_variation",
            [try_on_image_part, types.Part.from_text(text=prompt)],
        )

    async def _generate(
        self,
        client: genai.Client,
        operation: str,
        parts: list[types.Part],
    ) -> str:
        self.logger.info(
            "Requesting %s from model %s (%d parts)",
            operation,
            self.model_name,
            len(parts),
        )

        config = types.GenerateContentConfig(
            response_modalities=[types.Modality.IMAGE, types.Modality.TEXT],
        )

        try:
            response = await client.aio.models.generate_content(
                model=self.model_name,
                contents=[types.Content(role="user", parts=parts)],
                config=config,
            )
        except Exception as e:
            self.logger.error("Gen AI request for %s failed: %s", operation, e)
            raise

        try:
            image_url = decode_image_response(response)
        except FittingRoomError as e:
            self.logger.warning("No image for %s: %s", operation, e)
            raise

        self.logger.info("Generated %s image (%d chars)", operation, len(image_url))
        return image_url
