"""Error taxonomy for the animation pipeline."""


class DashFlowError(Exception):
    """Base exception for pipeline failures.

    ``stage`` holds the progress step id the failure is attributed to, when known.
    """

    def __init__(self, message: str, stage: str | None = None):
        super().__init__(message)
        self.stage = stage


class InvalidSceneError(DashFlowError):
    """The scene has no animatable dashed paths or could not be read."""


class RasterContextError(DashFlowError):
    """A pixel surface for a frame could not be allocated."""


class RasterizerError(DashFlowError):
    """The rasterizer rejected the serialized document."""


class NoFramesError(DashFlowError):
    """Encoding was requested with an empty frame sequence."""

    def __init__(self, message: str = "No frames to encode", stage: str | None = None):
        super().__init__(message, stage)


class EncoderError(DashFlowError):
    """The container encoder failed."""


class EncodingAbortedError(EncoderError):
    """The container encoder was aborted before finishing."""

    def __init__(self, message: str = "Encoding aborted", stage: str | None = None):
        super().__init__(message, stage)


class GenerationCancelledError(DashFlowError):
    """Frame generation was cancelled between frames."""
