from google import genai

from fitting_room.bootstrap.components import Components
from fitting_room.components.configuration.configuration_interface import (
    ConfigurationInterface,
)
from fitting_room.components.logger.logger_interface import LoggerInterface
from fitting_room.services.FittingRoomService.fitting_room_service import (
    DEFAULT_MODEL_NAME,
    FittingRoomService,
)
from fitting_room.services.FittingRoomService.fitting_room_service_interface import (
    FittingRoomServiceInterface,
)


def get_fitting_room_service(components: Components) -> FittingRoomServiceInterface:
    configuration = components.get_component(ConfigurationInterface)

    model_name = configuration.get_configuration(
        "IMAGE_MODEL_NAME", str, default=DEFAULT_MODEL_NAME
    )

    return FittingRoomService(
        client=components.get_component(genai.Client),
        logger=components.get_component(LoggerInterface).get_logger(
            "FittingRoomService"
        ),
        model_name=model_name,
    )
