"""Exception types raised by the recomposer."""


class DuoVisionError(Exception):
    """Base error for the Duo-Vision pipeline."""


class FFmpegNotFoundError(DuoVisionError, RuntimeError):
    """Raised when ffmpeg or ffprobe is not on PATH."""


class InputNotFoundError(DuoVisionError, FileNotFoundError):
    """Raised when the source video path does not resolve to a file."""


class NoAudioStreamError(DuoVisionError, ValueError):
    """Raised when audio is requested but the input has no audio stream."""


class UnknownDurationError(DuoVisionError, ValueError):
    """Raised when a length must default to a duration ffprobe did not report."""


class ExternalToolError(DuoVisionError):
    """An ffmpeg/ffprobe invocation exited non-zero."""

    def __init__(self, stage: str, returncode: int, stderr: str = ""):
        self.stage = stage
        self.returncode = returncode
        self.stderr = stderr
        message = f"{stage} failed (rc={returncode})"
        if stderr:
            message += f": {stderr[-500:].strip()}"
        super().__init__(message)
