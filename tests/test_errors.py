"""Tests for the exception hierarchy."""

import pytest

from duovision.errors import (
    DuoVisionError,
    ExternalToolError,
    FFmpegNotFoundError,
    InputNotFoundError,
    NoAudioStreamError,
    UnknownDurationError,
)


@pytest.mark.parametrize(
    "error_cls",
    [FFmpegNotFoundError, InputNotFoundError, NoAudioStreamError, UnknownDurationError],
)
def test_errors_share_a_documented_base(error_cls):
    assert issubclass(error_cls, DuoVisionError)
    assert error_cls.__doc__


class TestExternalToolError:
    def test_message_includes_stderr_tail(self):
        err = ExternalToolError("blend", 1, "x" * 600 + "Invalid blend mode\n")
        assert str(err).startswith("blend failed (rc=1): ")
        assert str(err).endswith("Invalid blend mode")
        assert err.stage == "blend"

    def test_message_without_stderr(self):
        assert str(ExternalToolError("ffprobe", 2)) == "ffprobe failed (rc=2)"
