"""Tests for the replay driver and its command line entry point."""

import json

import pytest

from spatial_panel import panel_replay
from spatial_panel.config import (
    EXIT_PROFILE_ERROR,
    EXIT_RECORDING_ERROR,
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
)
from spatial_panel.control_panel import PanelEvent
from spatial_panel.input_recording import parse_recording
from spatial_panel.profile_loader import create_default_profile


def drag_recording():
    palm_path = [[0.0, 0.0, -0.5], [0.1, 0.0, -0.5], [0.2, 0.1, -0.5]]
    frames = [{"hands": {"right": {"pinch": True, "palm": p}}} for p in palm_path]
    frames.append({"hands": {"right": {"pinch": False, "palm": palm_path[-1]}}})
    return {"frames": frames}


def write_json(tmp_path, name, data):
    path = tmp_path / name
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestReplay:

    def test_drag_and_release(self):
        panel = create_default_profile().build_panel()
        summary = panel_replay.replay(panel, parse_recording(drag_recording()))

        assert summary.frame_count == 4
        assert summary.window_position == pytest.approx([0.2, 0.1, -0.5])
        assert summary.window_state == "IDLE"
        assert summary.events == [
            (0, PanelEvent("window", "grab")),
            (3, PanelEvent("window", "release")),
        ]
        assert summary.knob_values == {"dial": 50.0}

    def test_elapsed_time_sums_frame_deltas(self):
        frames = parse_recording({"frames": [{"dt": 0.25}, {"dt": 0.5}]})
        summary = panel_replay.replay(create_default_profile().build_panel(), frames)
        assert summary.elapsed_seconds == pytest.approx(0.75)


class TestMain:

    def test_success(self, tmp_path):
        recording = write_json(tmp_path, "rec.json", drag_recording())
        assert panel_replay.main(["--recording", str(recording), "--no-log-file"]) == EXIT_SUCCESS

    def test_reports_knob_value_with_range(self, tmp_path, caplog):
        recording = write_json(tmp_path, "rec.json", drag_recording())
        profile = write_json(tmp_path, "profile.json", {
            "id": "p",
            "name": "P",
            "knobs": [{"label": "Gain", "minimum": -12, "maximum": 12, "value": 3, "localPosition": [0, -0.1, 0]}],
        })
        argv = ["--recording", str(recording), "--profile", str(profile), "--no-log-file"]
        assert panel_replay.main(argv) == EXIT_SUCCESS
        assert "Knob 'Gain': 3.000 [-12..12]" in caplog.text

    def test_with_profile(self, tmp_path):
        recording = write_json(tmp_path, "rec.json", drag_recording())
        profile = write_json(tmp_path, "profile.json", {"id": "p", "name": "P"})
        argv = ["--recording", str(recording), "--profile", str(profile), "--no-log-file", "--debug"]
        assert panel_replay.main(argv) == EXIT_SUCCESS

    def test_profile_error(self, tmp_path):
        recording = write_json(tmp_path, "rec.json", drag_recording())
        argv = ["--recording", str(recording), "--profile", str(tmp_path / "missing.json"), "--no-log-file"]
        assert panel_replay.main(argv) == EXIT_PROFILE_ERROR

    def test_recording_error(self, tmp_path):
        recording = write_json(tmp_path, "rec.json", {"frames": "none"})
        assert panel_replay.main(["--recording", str(recording), "--no-log-file"]) == EXIT_RECORDING_ERROR

    def test_runtime_error(self, tmp_path, monkeypatch):
        def broken_replay(panel, frames):
            raise RuntimeError("boom")

        monkeypatch.setattr(panel_replay, "replay", broken_replay)
        recording = write_json(tmp_path, "rec.json", drag_recording())
        assert panel_replay.main(["--recording", str(recording), "--no-log-file"]) == EXIT_RUNTIME_ERROR

    def test_recording_is_required(self):
        with pytest.raises(SystemExit):
            panel_replay.parse_args([])
