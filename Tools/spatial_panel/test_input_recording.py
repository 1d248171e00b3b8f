"""Tests for input recording parsing."""

import json

import pytest

from spatial_panel.config import REPLAY_FRAME_DELTA
from spatial_panel.hand_input import Handedness
from spatial_panel.input_recording import RecordingLoadError, load_recording, parse_recording


def pinch_frames(*states):
    return {"frames": [
        {"hands": {"right": {"pinch": state, "palm": [0, 0, -0.5]}}} for state in states
    ]}


class TestPinchEdges:

    def test_edges_derived_from_consecutive_frames(self):
        frames = parse_recording(pinch_frames(False, True, True, False))
        right = [f.hand(Handedness.RIGHT) for f in frames]
        assert [h.pinch_just_started for h in right] == [False, True, False, False]
        assert [h.pinch_just_ended for h in right] == [False, False, False, True]

    def test_explicit_edge_flags_win(self):
        data = {"frames": [{"hands": {"right": {"pinch": True, "pinchStarted": False}}}]}
        assert not parse_recording(data)[0].hand(Handedness.RIGHT).pinch_just_started

    def test_tracking_loss_ends_pinch_history(self):
        data = {"frames": [
            {"hands": {"left": {"pinch": True}}},
            {"hands": {}},
            {"hands": {"left": {"pinch": True}}},
        ]}
        frames = parse_recording(data)
        assert not frames[1].hand(Handedness.LEFT).tracked
        assert frames[2].hand(Handedness.LEFT).pinch_just_started

    def test_untracked_hand_cannot_pinch(self):
        data = {"frames": [{"hands": {"right": {"tracked": False, "pinch": True}}}]}
        hand = parse_recording(data)[0].hand(Handedness.RIGHT)
        assert not hand.pinch_active
        assert not hand.is_usable


class TestFrameFields:

    def test_defaults(self):
        frame = parse_recording({"frames": [{}]})[0]
        assert frame.delta_time == pytest.approx(REPLAY_FRAME_DELTA)
        assert frame.head.forward.tolist() == [0.0, 0.0, -1.0]
        assert frame.hands == {}

    def test_pinch_point_defaults_to_palm(self):
        data = {"frames": [{"hands": {"right": {"palm": [0.1, 0.2, 0.3]}}}]}
        hand = parse_recording(data)[0].hand(Handedness.RIGHT)
        assert hand.pinch_point.tolist() == pytest.approx([0.1, 0.2, 0.3])

    def test_head_and_dt(self):
        data = {"frames": [{"dt": 0.5, "head": {"position": [1, 2, 3], "forward": [1, 0, 0]}}]}
        frame = parse_recording(data)[0]
        assert frame.delta_time == 0.5
        assert frame.head.position.tolist() == [1.0, 2.0, 3.0]


class TestErrors:

    @pytest.mark.parametrize("data", [[], {}, {"frames": {}}, {"frames": [1]}])
    def test_bad_structure(self, data):
        with pytest.raises(RecordingLoadError):
            parse_recording(data)

    def test_bad_vector_reports_frame(self):
        data = {"frames": [{}, {"hands": {"right": {"palm": [0, 1]}}}]}
        with pytest.raises(RecordingLoadError, match="Frame 1"):
            parse_recording(data)

    def test_bad_hands_type(self):
        with pytest.raises(RecordingLoadError, match="Frame 0"):
            parse_recording({"frames": [{"hands": []}]})

    def test_missing_file(self, tmp_path):
        with pytest.raises(RecordingLoadError, match="not found"):
            load_recording(tmp_path / "none.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "rec.json"
        path.write_text("[", encoding="utf-8")
        with pytest.raises(RecordingLoadError, match="Invalid JSON"):
            load_recording(path)

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "rec.json"
        path.write_text(json.dumps(pinch_frames(True, False)), encoding="utf-8")
        assert len(load_recording(path)) == 2
