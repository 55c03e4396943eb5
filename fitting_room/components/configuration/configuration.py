import os
from pathlib import Path
from typing import Any, TypeVar, cast

from dotenv import dotenv_values

from fitting_room.components.configuration.configuration_interface import (
    ConfigurationInterface,
)
from fitting_room.errors import ConfigurationError

T = TypeVar("T")

_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off", ""}


class Configuration(ConfigurationInterface):
    """
    Settings read from ``<config_path>/<env>.env``.

    Process environment variables take precedence over the file, so secrets
    such as GEMINI_API_KEY never need to live in the repository.
    """

    def __init__(self, env: str, config_path: str) -> None:
        self.env = env
        self.config_file = Path(config_path) / f"{env}.env"
        self._values: dict[str, str | None] = {}
        if self.config_file.is_file():
            self._values = dict(dotenv_values(self.config_file))

    def _raw(self, name: str) -> str | None:
        if name in os.environ:
            return os.environ[name]
        return self._values.get(name)

    def get_configuration(self, name: str, type_: type[T], default: Any = ...) -> T:
        raw = self._raw(name)
        if raw is None:
            if default is ...:
                raise ConfigurationError(
                    f"Missing configuration value {name} "
                    f"(environment or {self.config_file})"
                )
            return cast(T, default)

        try:
            return cast(T, self._cast(raw, type_))
        except ValueError as exc:
            raise ConfigurationError(
                f"Invalid value for {name}: {raw!r} is not a valid {type_.__name__}"
            ) from exc

    @staticmethod
    def _cast(raw: str, type_: type) -> Any:
        if type_ is bool:
            lowered = raw.strip().lower()
            if lowered in _TRUE_VALUES:
                return True
            if lowered in _FALSE_VALUES:
                return False
            raise ValueError(raw)
        if type_ is str:
            return raw
        return type_(raw.strip())
