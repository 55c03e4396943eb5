from abc import ABC, abstractmethod

from fitting_room.entities.image import ImageUpload


class FittingRoomServiceInterface(ABC):
    @abstractmethod
    async def generate_model_image(self, user_image: ImageUpload) -> str:
        """Turn a user photo into a studio model photo, returned as a data URL."""

    @abstractmethod
    async def generate_virtual_try_on_image(
        self, model_image_url: str, garment_image: ImageUpload
    ) -> str:
        """Dress the model from ``model_image_url`` in the garment image."""

    @abstractmethod
    async def generate_pose_variation(
        self, try_on_image_url: str, pose_instruction: str
    ) -> str:
        """
        Regenerate a try-on image from another perspective.

        ``pose_instruction`` is placed in the prompt verbatim; it is not sanitized.
        """
