"""Tests for panel profile loading and validation."""

import json

import pytest

from spatial_panel.hand_input import Handedness
from spatial_panel.profile_loader import (
    ProfileLoadError,
    create_default_profile,
    find_knob_settings,
    load_profile,
    parse_profile,
)


def write_profile(tmp_path, data):
    path = tmp_path / "profile.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


FULL_PROFILE = {
    "id": "mixer",
    "name": "Mixer Panel",
    "handPriority": ["left", "right"],
    "window": {
        "grabDistance": 0.15,
        "resetDelay": 30,
        "lerpSpeed": 4,
        "size": [0.4, 0.5],
        "position": [0.1, 1.4, -0.6],
    },
    "knobs": [
        {"label": "Volume", "minimum": 0, "maximum": 11, "value": 5, "localPosition": [0.05, -0.1, 0]},
        {"label": "Pan", "minimum": -1, "maximum": 1, "value": 0, "clampValue": False},
    ],
}


class TestLoadProfile:

    def test_full_profile(self, tmp_path):
        profile = load_profile(write_profile(tmp_path, FULL_PROFILE))
        assert profile.id == "mixer"
        assert profile.hand_priority == (Handedness.LEFT, Handedness.RIGHT)
        assert profile.window.grab_distance == 0.15
        assert profile.window.reset_delay == 30
        assert profile.window.size == (0.4, 0.5)
        assert profile.window_position == (0.1, 1.4, -0.6)
        assert [k.label for k in profile.knobs] == ["Volume", "Pan"]
        assert profile.knobs[1].clamp_value is False
        assert profile.knobs[0].local_position == (0.05, -0.1, 0.0)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ProfileLoadError, match="not found"):
            load_profile(tmp_path / "missing.json")

    def test_directory_is_not_a_profile(self, tmp_path):
        with pytest.raises(ProfileLoadError, match="not a file"):
            load_profile(tmp_path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ProfileLoadError, match="Invalid JSON"):
            load_profile(path)

    def test_root_must_be_object(self, tmp_path):
        with pytest.raises(ProfileLoadError):
            load_profile(write_profile(tmp_path, [1, 2, 3]))


class TestParseProfile:

    def test_defaults_for_minimal_profile(self):
        profile = parse_profile({"id": "p", "name": "P"})
        assert profile.window.grab_distance == 0.1
        assert profile.hand_priority == (Handedness.RIGHT, Handedness.LEFT)
        assert profile.knobs == []

    @pytest.mark.parametrize("field", ["id", "name"])
    def test_required_fields(self, field):
        data = {"id": "p", "name": "P"}
        del data[field]
        with pytest.raises(ProfileLoadError, match=field):
            parse_profile(data)

    def test_unlabelled_knobs_get_index_labels(self):
        profile = parse_profile({"id": "p", "name": "P", "knobs": [{}, {}]})
        assert [k.label for k in profile.knobs] == ["knob0", "knob1"]

    def test_duplicate_labels_rejected(self):
        data = {"id": "p", "name": "P", "knobs": [{"label": "a"}, {"label": "a"}]}
        with pytest.raises(ProfileLoadError, match="Duplicate"):
            parse_profile(data)

    @pytest.mark.parametrize("knob", [
        {"minimum": 5, "maximum": 5},
        {"startAngle": 90, "endAngle": 10},
        {"radius": -0.01},
        {"value": "loud"},
        {"value": -40},
        {"minimum": 0, "maximum": 10, "value": 11},
    ])
    def test_invalid_knob_rejected(self, knob):
        with pytest.raises(ProfileLoadError, match="Invalid panel configuration"):
            parse_profile({"id": "p", "name": "P", "knobs": [knob]})

    def test_invalid_window_rejected(self):
        with pytest.raises(ProfileLoadError):
            parse_profile({"id": "p", "name": "P", "window": {"grabDistance": 0}})

    def test_bad_vector_rejected(self):
        with pytest.raises(ProfileLoadError, match="position"):
            parse_profile({"id": "p", "name": "P", "window": {"position": [0, 1]}})

    def test_zero_orientation_rejected(self):
        with pytest.raises(ProfileLoadError):
            parse_profile({"id": "p", "name": "P", "window": {"orientation": [0, 0, 0, 0]}})

    @pytest.mark.parametrize("priority", [[], ["middle"], ["left", "left"], "right"])
    def test_invalid_hand_priority(self, priority):
        with pytest.raises(ProfileLoadError):
            parse_profile({"id": "p", "name": "P", "handPriority": priority})

    def test_non_bool_clamp_falls_back_to_default(self):
        profile = parse_profile({"id": "p", "name": "P", "knobs": [{"clampValue": "yes"}]})
        assert profile.knobs[0].clamp_value is True


class TestBuildPanel:

    def test_panel_matches_profile(self):
        profile = parse_profile(FULL_PROFILE)
        panel = profile.build_panel()
        assert panel.window.pose.position.tolist() == pytest.approx([0.1, 1.4, -0.6])
        assert panel.window.hand_priority == (Handedness.LEFT, Handedness.RIGHT)
        assert [pk.controller.label for pk in panel.knobs] == ["Volume", "Pan"]
        assert panel.knobs[0].controller.value == 5

    def test_panels_do_not_share_state(self):
        profile = create_default_profile()
        first = profile.build_panel()
        second = profile.build_panel()
        first.knobs[0].controller.value = 10.0
        assert second.knobs[0].controller.value == 50.0

    def test_default_profile(self):
        profile = create_default_profile()
        assert find_knob_settings(profile, "DIAL") is profile.knobs[0]
        assert find_knob_settings(profile, "missing") is None
