"""
Profile loader for the spatial control panel.

Loads and validates JSON panel profiles describing the window and its knobs.
Profile properties use camelCase keys.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from .config import (
    ConfigurationError,
    KnobSettings,
    WINDOW_INITIAL_ORIENTATION,
    WINDOW_INITIAL_POSITION,
    WindowSettings,
)
from .control_panel import ControlPanel
from .hand_input import DEFAULT_HAND_PRIORITY, Handedness
from .knob_dial import RotaryKnobController
from .logger import get_logger
from .spatial_math import Pose
from .window_controller import GrabbableWindowController

logger = get_logger("ProfileLoader")


class ProfileLoadError(Exception):
    """Raised when profile loading or validation fails."""
    pass


@dataclass
class PanelProfile:
    """
    Panel configuration loaded from JSON.

    Attributes:
        id: Unique identifier.
        name: Profile display name.
        window: Grab and reset settings for the panel window.
        window_position: Initial window position.
        window_orientation: Initial window orientation [w, x, y, z].
        hand_priority: Order in which hands are checked for grabs.
        knobs: Settings of the window-anchored knobs.
    """

    id: str
    name: str
    window: WindowSettings = field(default_factory=WindowSettings)
    window_position: tuple[float, float, float] = WINDOW_INITIAL_POSITION
    window_orientation: tuple[float, float, float, float] = WINDOW_INITIAL_ORIENTATION
    hand_priority: tuple[Handedness, ...] = DEFAULT_HAND_PRIORITY
    knobs: list[KnobSettings] = field(default_factory=list)

    def build_panel(self) -> ControlPanel:
        """Create a control panel with fresh controllers for this profile."""
        window = GrabbableWindowController(
            self.window,
            Pose(self.window_position, self.window_orientation),
            self.hand_priority
        )
        panel = ControlPanel(window)
        for knob_settings in self.knobs:
            panel.add_knob(
                RotaryKnobController(knob_settings, self.hand_priority),
                Pose(knob_settings.local_position, knob_settings.local_orientation)
            )
        return panel


def load_profile(profile_path: str | Path) -> PanelProfile:
    """
    Load and validate a profile from a JSON file.

    Args:
        profile_path: Path to the JSON profile file.

    Returns:
        Validated PanelProfile instance.

    Raises:
        ProfileLoadError: If file cannot be read or validation fails.
    """
    path = Path(profile_path)
    logger.info(f"Loading profile from: {path}")

    if not path.exists():
        raise ProfileLoadError(f"Profile file not found: {path}")

    if not path.is_file():
        raise ProfileLoadError(f"Profile path is not a file: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ProfileLoadError(f"Invalid JSON in profile: {e}")
    except IOError as e:
        raise ProfileLoadError(f"Cannot read profile file: {e}")

    if not isinstance(data, dict):
        raise ProfileLoadError("Profile root must be a JSON object")

    return parse_profile(data)


def _vector(data: dict[str, Any], key: str, default: tuple, length: int) -> tuple:
    raw = data.get(key)
    if raw is None:
        return default
    if not isinstance(raw, list) or len(raw) != length:
        raise ProfileLoadError(f"{key} must be a list of {length} numbers")
    if not all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in raw):
        raise ProfileLoadError(f"{key} must contain only numbers")
    return tuple(float(v) for v in raw)


def _parse_window(data: dict[str, Any]) -> tuple[WindowSettings, tuple, tuple]:
    defaults = WindowSettings()
    settings = WindowSettings(
        grab_distance=data.get("grabDistance", defaults.grab_distance),
        reset_delay=data.get("resetDelay", defaults.reset_delay),
        reset_convergence=data.get("resetConvergence", defaults.reset_convergence),
        lerp_speed=data.get("lerpSpeed", defaults.lerp_speed),
        forward_offset=data.get("forwardOffset", defaults.forward_offset),
        size=_vector(data, "size", defaults.size, 2),
    )
    position = _vector(data, "position", WINDOW_INITIAL_POSITION, 3)
    orientation = _vector(data, "orientation", WINDOW_INITIAL_ORIENTATION, 4)
    return settings, position, orientation


def _parse_knob(data: dict[str, Any], index: int) -> KnobSettings:
    defaults = KnobSettings()
    clamp_value = data.get("clampValue", defaults.clamp_value)
    if not isinstance(clamp_value, bool):
        logger.warning(f"Knob {index}: invalid clampValue, using default: {defaults.clamp_value}")
        clamp_value = defaults.clamp_value

    return KnobSettings(
        minimum=data.get("minimum", defaults.minimum),
        maximum=data.get("maximum", defaults.maximum),
        value=data.get("value", defaults.value),
        start_angle=data.get("startAngle", defaults.start_angle),
        end_angle=data.get("endAngle", defaults.end_angle),
        radius=data.get("radius", defaults.radius),
        clamp_value=clamp_value,
        label=str(data.get("label", f"knob{index}")),
        local_position=_vector(data, "localPosition", defaults.local_position, 3),
        local_orientation=_vector(data, "localOrientation", defaults.local_orientation, 4),
    )


def _parse_hand_priority(raw: Any) -> tuple[Handedness, ...]:
    if raw is None:
        return DEFAULT_HAND_PRIORITY
    if not isinstance(raw, list) or not raw:
        raise ProfileLoadError("handPriority must be a non-empty list")
    try:
        priority = tuple(Handedness(str(h).lower()) for h in raw)
    except ValueError as e:
        raise ProfileLoadError(f"Invalid handPriority entry: {e}")
    if len(set(priority)) != len(priority):
        raise ProfileLoadError("handPriority must not repeat a hand")
    return priority


def parse_profile(data: dict[str, Any]) -> PanelProfile:
    """
    Parse and validate profile data from dictionary.

    Args:
        data: Dictionary with camelCase profile properties.

    Returns:
        Validated PanelProfile instance.

    Raises:
        ProfileLoadError: If required fields are missing or invalid.
    """
    if "id" not in data:
        raise ProfileLoadError("Profile missing required field: id")

    if "name" not in data:
        raise ProfileLoadError("Profile missing required field: name")

    window_data = data.get("window", {})
    if not isinstance(window_data, dict):
        raise ProfileLoadError("window must be a JSON object")
    window, position, orientation = _parse_window(window_data)

    knobs_data = data.get("knobs", [])
    if not isinstance(knobs_data, list):
        raise ProfileLoadError("knobs must be a list")

    knobs = []
    for index, knob_data in enumerate(knobs_data):
        if not isinstance(knob_data, dict):
            raise ProfileLoadError(f"Knob {index} must be a JSON object")
        knobs.append(_parse_knob(knob_data, index))

    labels = [k.label for k in knobs]
    duplicate_labels = {label for label in labels if labels.count(label) > 1}
    if duplicate_labels:
        raise ProfileLoadError(f"Duplicate knob label(s): {', '.join(sorted(duplicate_labels))}")

    try:
        window.validate()
        for knob in knobs:
            knob.validate()
        Pose(position, orientation)
        for knob in knobs:
            Pose(knob.local_position, knob.local_orientation)
    except (ConfigurationError, ValueError) as e:
        raise ProfileLoadError(f"Invalid panel configuration: {e}")

    profile = PanelProfile(
        id=str(data["id"]),
        name=str(data["name"]),
        window=window,
        window_position=position,
        window_orientation=orientation,
        hand_priority=_parse_hand_priority(data.get("handPriority")),
        knobs=knobs,
    )

    logger.info(f"Loaded profile: {profile.name} (id={profile.id})")
    logger.debug(f"  Grab distance: {profile.window.grab_distance}m")
    logger.debug(f"  Reset delay: {profile.window.reset_delay}s")
    logger.debug(f"  Hand priority: {[h.name for h in profile.hand_priority]}")
    logger.debug(f"  Knobs: {len(profile.knobs)}")

    return profile


def create_default_profile() -> PanelProfile:
    """
    Create a default profile with a single window-anchored knob.

    Returns:
        PanelProfile with default values.
    """
    return PanelProfile(
        id="default",
        name="Default",
        knobs=[KnobSettings(label="dial", local_position=(0.0, -0.1, 0.0))],
    )


def find_knob_settings(profile: PanelProfile, label: str) -> Optional[KnobSettings]:
    """Look up knob settings by label (case-insensitive)."""
    label_lower = label.lower()
    for knob in profile.knobs:
        if knob.label.lower() == label_lower:
            return knob
    return None
