class FittingRoomError(Exception):
    """Base error for every failure surfaced by the fitting room client."""


class ConfigurationError(FittingRoomError):
    """Raised when credentials or settings are missing or invalid."""


class ImageFormatError(FittingRoomError, ValueError):
    """Raised when an image data URL cannot be parsed."""


class UnsupportedImageError(FittingRoomError):
    def __init__(self, mime_type: str | None) -> None:
        self.mime_type = mime_type
        super().__init__(f"Unsupported mime type: {mime_type}")


class EmptyImageError(FittingRoomError):
    """Raised when an uploaded image has no content."""


class GenerationBlockedError(FittingRoomError):
    def __init__(self, reason: str, message: str | None = None) -> None:
        self.reason = reason
        self.message = message
        detail = f"The request was blocked. Reason: {reason}."
        if message:
            detail = f"{detail} {message}"
        super().__init__(detail)


class GenerationInterruptedError(FittingRoomError):
    def __init__(self, finish_reason: str) -> None:
        self.finish_reason = finish_reason
        super().__init__(
            f"Image generation stopped unexpectedly. Reason: {finish_reason}. "
            "This is often related to safety settings."
        )


class NoImageGeneratedError(FittingRoomError):
    def __init__(self, text: str | None = None) -> None:
        self.text = text
        if text:
            detail = (
                "The AI model did not return an image. "
                f'The model responded with text: "{text}"'
            )
        else:
            detail = (
                "The AI model did not return an image. This can happen because of "
                "safety filters or if the request is too complex. "
                "Please try a different image."
            )
        super().__init__(detail)


class MalformedResponseError(FittingRoomError):
    """Raised when an image part in the response lacks a mime type or data."""
