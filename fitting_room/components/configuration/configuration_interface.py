from abc import ABC, abstractmethod
from typing import Any, TypeVar

T = TypeVar("T")


class ConfigurationInterface(ABC):
    @abstractmethod
    def get_configuration(self, name: str, type_: type[T], default: Any = ...) -> T:
        """
        Return the value of ``name`` cast to ``type_``.

        Raises ConfigurationError when the value is missing and no default was
        given, or when it cannot be cast.
        """
