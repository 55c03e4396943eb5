import logging

from fitting_room.components.logger.logger_interface import LoggerInterface
from fitting_room.errors import ConfigurationError

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Logger(LoggerInterface):
    def __init__(
        self,
        log_format: str = DEFAULT_LOG_FORMAT,
        log_level: str = "INFO",
        root_name: str = "fitting_room",
    ) -> None:
        level = logging.getLevelName(log_level.upper())
        if not isinstance(level, int):
            raise ConfigurationError(f"Invalid log level: {log_level}")

        self.root_name = root_name
        self._root = logging.getLogger(root_name)
        self._root.setLevel(level)

        if not self._root.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(log_format))
            self._root.addHandler(handler)

    def get_logger(self, name: str) -> logging.Logger:
        return self._root.getChild(name)
