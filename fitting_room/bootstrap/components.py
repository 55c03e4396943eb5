import os
from pathlib import Path
from threading import Lock
from typing import Any, TypeVar, cast

from dotenv import load_dotenv
from google import genai
from openinference.instrumentation.google_genai import GoogleGenAIInstrumentor

from fitting_room.components.configuration.configuration import Configuration
from fitting_room.components.configuration.configuration_interface import (
    ConfigurationInterface,
)
from fitting_room.components.logger.logger import DEFAULT_LOG_FORMAT, Logger
from fitting_room.components.logger.logger_interface import LoggerInterface
from fitting_room.errors import ConfigurationError


load_dotenv()


def _is_test_environment() -> bool:
    """
    Check if we are running in a test environment.

    Returns:
        True if running under pytest or if TESTING env var is set, False otherwise.
    """
    import sys

    if any("pytest" in arg for arg in sys.argv):
        return True

    if os.getenv("TESTING", "").lower() in ("true", "1", "yes"):
        return True

    return False


def _validate_otel_env_vars() -> None:
    """
    Validate OpenTelemetry/Langfuse environment variables for instrumentation.

    Two configuration paths are supported:

    1.  **Langfuse Native Integration:** If `LANGFUSE_PUBLIC_KEY`, `LANGFUSE_SECRET_KEY`,
        and `LANGFUSE_BASE_URL` are all set, validation is skipped.

    2.  **Manual OpenTelemetry Configuration:** Otherwise `OTEL_EXPORTER_OTLP_ENDPOINT`
        and `OTEL_EXPORTER_OTLP_HEADERS` must be set for OTLP export.

    Raises:
        RuntimeError: If the manual OpenTelemetry variables are missing or empty
                      when the Langfuse variables are not provided.
    """

    otel_endpoint: str = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "").strip()
    otel_headers: str = os.getenv("OTEL_EXPORTER_OTLP_HEADERS", "").strip()

    langfuse_public_key: str = os.getenv("LANGFUSE_PUBLIC_KEY", "").strip()
    langfuse_secret_key: str = os.getenv("LANGFUSE_SECRET_KEY", "").strip()
    langfuse_base_url: str = os.getenv("LANGFUSE_BASE_URL", "").strip()

    if langfuse_public_key and langfuse_secret_key and langfuse_base_url:
        return

    if not otel_endpoint:
        raise RuntimeError(
            "OTEL_EXPORTER_OTLP_ENDPOINT environment variable is not set or is empty. "
            "Please set the OTEL_EXPORTER_OTLP_ENDPOINT environment variable with a valid OTLP endpoint URL."
        )

    if not otel_headers:
        raise RuntimeError(
            "OTEL_EXPORTER_OTLP_HEADERS environment variable is not set or is empty, "
            "and LANGFUSE_PUBLIC_KEY/LANGFUSE_SECRET_KEY are not available to build headers. "
            "Please set either OTEL_EXPORTER_OTLP_HEADERS directly (e.g., 'Authorization=Basic <base64_credentials>') "
            "or provide LANGFUSE_PUBLIC_KEY and LANGFUSE_SECRET_KEY to build the headers automatically."
        )


def configure_tracing(configuration: ConfigurationInterface) -> bool:
    """
    Instrument the Gen AI SDK when TRACING_ENABLED is set. Never under pytest.

    Raises:
        ConfigurationError: If tracing is enabled but the OTLP/Langfuse
            environment variables are incomplete.
    """
    if _is_test_environment():
        return False

    if not configuration.get_configuration("TRACING_ENABLED", bool, default=False):
        return False

    try:
        _validate_otel_env_vars()
    except RuntimeError as e:
        raise ConfigurationError(str(e)) from e

    GoogleGenAIInstrumentor().instrument()
    return True


T = TypeVar("T")


def resolve_api_key(configuration: ConfigurationInterface) -> str:
    """
    Return the Gemini API key, preferring GEMINI_API_KEY over GOOGLE_API_KEY.

    Raises:
        ConfigurationError: If neither variable holds a non-empty key.
    """
    for name in ("GEMINI_API_KEY", "GOOGLE_API_KEY"):
        value = configuration.get_configuration(name, str, default="").strip()
        if value:
            return value

    raise ConfigurationError(
        "GEMINI_API_KEY or GOOGLE_API_KEY must be set to call the image generation service."
    )


def create_genai_client(api_key: str) -> genai.Client:
    if not api_key or not api_key.strip():
        raise ConfigurationError("A non-empty API key is required to create the Gen AI client.")
    return genai.Client(api_key=api_key.strip())


class ComponentsMeta(type):
    _instances: dict[tuple[type, str], "Components"] = {}
    _lock: Lock = Lock()

    def __call__(cls, *args, **kwargs):
        env = args[0] if args else kwargs.get("env")
        if env is None:
            raise ValueError("Environment must be provided")

        env_key = str(env)
        key = (cls, env_key)
        with cls._lock:
            if key not in cls._instances:
                instance = super().__call__(*args, **kwargs)
                cls._instances[key] = instance
        return cls._instances[key]


class Components(metaclass=ComponentsMeta):
    def __init__(self, env: str, config_path: str) -> None:
        self.__env: str = env
        root_dir: str = str(Path(__file__).resolve().parents[2])
        self.__config_path: str = os.path.join(root_dir, config_path)
        self.__components: dict[type[Any], Any] = self.__bootstrap_components()

    def __bootstrap_components(self) -> dict[type[Any], Any]:
        if self.__env in {"development", "staging", "production"}:
            return self.__get_components()

        raise ValueError(f"Invalid environment: {self.__env}")

    def __get_components(self) -> dict[type[Any], Any]:
        configuration: ConfigurationInterface = Configuration(
            self.__env, self.__config_path
        )

        logger: LoggerInterface = Logger(
            log_format=configuration.get_configuration(
                "LOG_FORMAT", str, default=DEFAULT_LOG_FORMAT
            ),
            log_level=configuration.get_configuration("LOG_LEVEL", str, default="INFO"),
        )
        _logger_instance = logger.get_logger("Components")

        if configure_tracing(configuration):
            _logger_instance.info("Gen AI tracing enabled")

        # The key is checked here so a missing credential stops start-up
        genai_client: genai.Client = create_genai_client(resolve_api_key(configuration))
        _logger_instance.info("Gen AI client created for environment %s", self.__env)

        components: dict[type[Any], Any] = {
            ConfigurationInterface: configuration,
            LoggerInterface: logger,
            genai.Client: genai_client,
        }

        return components

    def get_component(self, component_name: type[T]) -> T:
        if component_name not in self.__components:
            raise ValueError(f"Component {component_name} not found")

        return cast(T, self.__components[component_name])

    def get_config_path(self) -> str:
        return self.__config_path
