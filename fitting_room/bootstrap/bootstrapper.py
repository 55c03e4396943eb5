from fitting_room.dependencies.components import get_components
from fitting_room.dependencies.services import get_fitting_room_service
from fitting_room.services.FittingRoomService.fitting_room_service_interface import (
    FittingRoomServiceInterface,
)


def bootstrap_fitting_room(
    env: str = "development",
    config_path: str = "configuration",
) -> FittingRoomServiceInterface:
    components = get_components(env=env, config_path=config_path)
    return get_fitting_room_service(components)
