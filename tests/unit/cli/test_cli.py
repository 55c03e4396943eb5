import base64
from pathlib import Path

import httpx
import pytest
from google.genai import errors as genai_errors

from fitting_room import cli
from fitting_room.bootstrap import components
from fitting_room.bootstrap.components import ComponentsMeta
from fitting_room.entities.image import ImageUpload
from fitting_room.errors import ConfigurationError, GenerationBlockedError
from fitting_room.services.FittingRoomService.fitting_room_service_interface import (
    FittingRoomServiceInterface,
)
from fitting_room.services.FittingRoomService.prompts import POSE_INSTRUCTIONS

RESULT = b"result-image"
RESULT_URL = "data:image/png;base64," + base64.b64encode(RESULT).decode("ascii")


class RecordingService(FittingRoomServiceInterface):
    def __init__(self, error: Exception | None = None) -> None:
        self.calls: list[tuple] = []
        self.error = error

    async def generate_model_image(self, user_image: ImageUpload) -> str:
        self.calls.append(("model", user_image.content_type, await user_image.read()))
        return self._result()

    async def generate_virtual_try_on_image(
        self, model_image_url: str, garment_image: ImageUpload
    ) -> str:
        self.calls.append(("try-on", model_image_url, await garment_image.read()))
        return self._result()

    async def generate_pose_variation(
        self, try_on_image_url: str, pose_instruction: str
    ) -> str:
        self.calls.append(("pose", try_on_image_url, pose_instruction))
        return self._result()

    def _result(self) -> str:
        if self.error:
            raise self.error
        return RESULT_URL


@pytest.fixture
def service(monkeypatch) -> RecordingService:
    service = RecordingService()
    monkeypatch.setattr(cli, "bootstrap_fitting_room", lambda **kwargs: service)
    return service


@pytest.fixture
def photo(tmp_path: Path) -> Path:
    path = tmp_path / "photo.jpg"
    path.write_bytes(b"jpeg-bytes")
    return path


@pytest.mark.unit
class TestCli:
    def test_model_writes_generated_image(self, service, photo: Path, tmp_path: Path):
        output = tmp_path / "out" / "model.png"

        assert cli.main(["model", str(photo), "-o", str(output)]) == 0

        assert output.read_bytes() == RESULT
        assert service.calls == [("model", "image/jpeg", b"jpeg-bytes")]

    def test_try_on_sends_model_image_as_data_url(
        self, service, photo: Path, tmp_path: Path
    ):
        model_image = tmp_path / "model.png"
        model_image.write_bytes(b"model")
        output = tmp_path / "outfit.png"

        assert cli.main(["try-on", str(model_image), str(photo), "-o", str(output)]) == 0

        expected_url = "data:image/png;base64," + base64.b64encode(b"model").decode("ascii")
        assert service.calls == [("try-on", expected_url, b"jpeg-bytes")]

    def test_pose_passes_instruction(self, service, tmp_path: Path):
        image = tmp_path / "outfit.png"
        image.write_bytes(b"outfit")
        output = tmp_path / "side.png"

        assert cli.main(["pose", str(image), "Side profile view", "-o", str(output)]) == 0

        assert service.calls[0][2] == "Side profile view"
        assert output.read_bytes() == RESULT

    def test_poses_lists_instructions(self, capsys):
        assert cli.main(["poses"]) == 0

        assert capsys.readouterr().out.splitlines() == POSE_INSTRUCTIONS

    def test_generation_error_exits_with_message(
        self, monkeypatch, photo: Path, tmp_path: Path, capsys
    ):
        service = RecordingService(error=GenerationBlockedError("SAFETY"))
        monkeypatch.setattr(cli, "bootstrap_fitting_room", lambda **kwargs: service)

        assert cli.main(["model", str(photo), "-o", str(tmp_path / "x.png")]) == 1

        assert "blocked" in capsys.readouterr().err
        assert not (tmp_path / "x.png").exists()

    def test_configuration_error_exits_with_message(
        self, monkeypatch, photo: Path, tmp_path: Path, capsys
    ):
        def fail(**kwargs):
            raise ConfigurationError("GEMINI_API_KEY or GOOGLE_API_KEY must be set")

        monkeypatch.setattr(cli, "bootstrap_fitting_room", fail)

        assert cli.main(["model", str(photo), "-o", str(tmp_path / "x.png")]) == 1

        assert "GEMINI_API_KEY" in capsys.readouterr().err

    def test_non_image_reference_file_is_rejected(self, service, tmp_path: Path, capsys):
        notes = tmp_path / "notes.txt"
        notes.write_text("hello", encoding="utf-8")

        assert cli.main(["pose", str(notes), "Side profile view", "-o", str(tmp_path / "x.png")]) == 1

        assert "Unsupported mime type" in capsys.readouterr().err
        assert service.calls == []

    @pytest.mark.parametrize(
        "error",
        [
            httpx.ConnectError("connection refused"),
            genai_errors.ClientError(
                400,
                {"error": {"code": 400, "message": "Bad image", "status": "INVALID_ARGUMENT"}},
            ),
        ],
    )
    def test_transport_error_exits_with_message(
        self, monkeypatch, photo: Path, tmp_path: Path, capsys, error
    ):
        service = RecordingService(error=error)
        monkeypatch.setattr(cli, "bootstrap_fitting_room", lambda **kwargs: service)

        assert cli.main(["model", str(photo), "-o", str(tmp_path / "x.png")]) == 1

        assert capsys.readouterr().err.startswith("error: ")
        assert not (tmp_path / "x.png").exists()


@pytest.mark.unit
class TestCliTracingConfiguration:
    @pytest.fixture(autouse=True)
    def reset_components(self):
        ComponentsMeta._instances.clear()
        yield
        ComponentsMeta._instances.clear()

    def test_tracing_without_otel_settings_exits_with_message(
        self, monkeypatch, photo: Path, tmp_path: Path, capsys
    ):
        config_dir = tmp_path / "configuration"
        config_dir.mkdir()
        (config_dir / "production.env").write_text("TRACING_ENABLED=true\n", encoding="utf-8")
        monkeypatch.setattr(components, "_is_test_environment", lambda: False)
        monkeypatch.setenv("GEMINI_API_KEY", "test-key")
        monkeypatch.delenv("TRACING_ENABLED", raising=False)
        for name in (
            "OTEL_EXPORTER_OTLP_ENDPOINT",
            "OTEL_EXPORTER_OTLP_HEADERS",
            "LANGFUSE_PUBLIC_KEY",
            "LANGFUSE_SECRET_KEY",
            "LANGFUSE_BASE_URL",
        ):
            monkeypatch.delenv(name, raising=False)
        output = tmp_path / "model.png"

        exit_code = cli.main(
            [
                "--env",
                "production",
                "--config-path",
                str(config_dir),
                "model",
                str(photo),
                "-o",
                str(output),
            ]
        )

        assert exit_code == 1
        assert "OTEL_EXPORTER_OTLP_ENDPOINT" in capsys.readouterr().err
        assert not output.exists()
        assert ComponentsMeta._instances == {}
