"""Tests for the engine module."""

from datetime import datetime
from pathlib import Path
from unittest.mock import patch

import pytest

from duovision import engine
from duovision.engine import EngineResult, inspect, process
from duovision.errors import (
    ExternalToolError,
    FFmpegNotFoundError,
    InputNotFoundError,
    NoAudioStreamError,
)
from duovision.manifest import RunOptions

from conftest import FakeFFmpeg, make_probe

NOW = datetime(2025, 6, 17, 12, 0, 0)


class TestInspect:
    @patch("duovision.engine.ffutil.probe")
    @patch("duovision.engine.ffutil.check_ffmpeg")
    def test_probes_existing_file(self, mock_check, mock_probe, source_video):
        mock_probe.return_value = make_probe()
        assert inspect(source_video) == make_probe()
        mock_check.assert_called_once()
        mock_probe.assert_called_once_with(source_video)

    @patch("duovision.engine.ffutil.probe")
    @patch("duovision.engine.ffutil.check_ffmpeg")
    def test_missing_input(self, mock_check, mock_probe, tmp_path):
        with pytest.raises(InputNotFoundError, match="not found"):
            inspect(tmp_path / "missing.mkv")
        mock_probe.assert_not_called()

    @patch("duovision.engine.ffutil.probe")
    @patch("duovision.engine.ffutil.check_ffmpeg", side_effect=FFmpegNotFoundError("ffmpeg is not installed"))
    def test_dependency_checked_first(self, mock_check, mock_probe, tmp_path):
        with pytest.raises(FFmpegNotFoundError):
            inspect(tmp_path / "missing.mkv")
        mock_probe.assert_not_called()

    def test_directory_is_not_a_valid_input(self, tmp_path):
        with pytest.raises(InputNotFoundError):
            engine.validate_input(tmp_path)


class TestProcess:
    def _options(self, source_video: Path, **kwargs) -> RunOptions:
        return RunOptions(input=source_video, dest_dir=source_video.parent / "out", **kwargs)

    def test_full_run(self, source_video):
        fake = FakeFFmpeg()
        result = process(
            self._options(source_video, start=40.0, length=20.0),
            probe_result=make_probe(),
            executor=fake,
            now=NOW,
        )
        assert isinstance(result, EngineResult)
        assert result.output_dir == source_video.parent / "out" / "output_2025-06-17_120000"
        assert result.final_path.name == "FINAL_VIDEO_start-40_length-20.mkv"
        assert result.final_path.exists()
        assert result.summary_path.exists()
        assert result.stages_run == [
            "extract-audio", "extract-left", "extract-right", "blend", "finalize",
        ]
        assert len(fake.commands) == 5

    def test_silent_run_final_is_merged_clip(self, source_video):
        fake = FakeFFmpeg()
        result = process(
            self._options(source_video, include_audio=False),
            probe_result=make_probe(),
            executor=fake,
            now=NOW,
        )
        assert "extract-audio" not in result.stages_run
        assert not any("master_audio" in cmd[-1] for cmd in fake.commands)
        assert result.final_path.name == "FINAL_VIDEO_silent.mkv"
        assert result.final_path.read_bytes() == b"produced:merged_crisp_average.mkv"
        assert not result.config.merged_path.exists()

    def test_progress_reaches_done(self, source_video):
        events = []
        process(
            self._options(source_video),
            probe_result=make_probe(),
            executor=FakeFFmpeg(),
            on_progress=lambda stage, frac: events.append((stage, frac)),
            now=NOW,
        )
        assert events[-1] == ("Done", 1.0)
        assert all(0.0 <= frac <= 1.0 for _, frac in events)

    @patch("duovision.engine.ffutil.probe")
    @patch("duovision.engine.ffutil.check_ffmpeg")
    def test_probes_when_no_result_given(self, mock_check, mock_probe, source_video):
        mock_probe.return_value = make_probe(duration=12.5)
        result = process(self._options(source_video), executor=FakeFFmpeg(), now=NOW)
        assert result.config.length == 12.5
        assert result.probe.duration == 12.5

    def test_audio_requested_from_silent_source(self, source_video):
        with pytest.raises(NoAudioStreamError, match="--no-audio"):
            process(
                self._options(source_video),
                probe_result=make_probe(has_audio=False),
                executor=FakeFFmpeg(),
                now=NOW,
            )
        assert not (source_video.parent / "out").exists()

    def test_silent_source_with_no_audio_flag(self, source_video):
        result = process(
            self._options(source_video, include_audio=False),
            probe_result=make_probe(has_audio=False),
            executor=FakeFFmpeg(),
            now=NOW,
        )
        assert result.final_path.exists()

    def test_failure_leaves_partial_outputs(self, source_video):
        with pytest.raises(ExternalToolError, match="blend failed"):
            process(
                self._options(source_video),
                probe_result=make_probe(),
                executor=FakeFFmpeg(fail_on="merged"),
                now=NOW,
            )
        out_dir = source_video.parent / "out" / "output_2025-06-17_120000"
        assert (out_dir / "summary.txt").exists()
        assert (out_dir / "left_clip.mkv").exists()
        assert (out_dir / "right_clip.mkv").exists()
        assert not list(out_dir.glob("FINAL_VIDEO*"))

    def test_runs_in_same_second_do_not_collide(self, source_video):
        first = process(self._options(source_video), probe_result=make_probe(), executor=FakeFFmpeg(), now=NOW)
        second = process(self._options(source_video), probe_result=make_probe(), executor=FakeFFmpeg(), now=NOW)
        assert first.output_dir != second.output_dir
        assert second.output_dir.name == "output_2025-06-17_120000_1"
