"""
spatial_panel - Grabbable windows and rotary knobs for VR/AR control panels.

Frame-driven interaction primitives fed by explicit hand and head
snapshots, plus a panel composition that anchors knobs to a window.
"""

__version__ = "1.0.0"
__author__ = "AROverlay Team"

from .config import ConfigurationError, KnobSettings, WindowSettings
from .hand_input import FrameInput, Handedness, HandSnapshot, HeadSnapshot, find_grabbing_hand
from .spatial_math import Pose
from .window_controller import GrabbableWindowController, WindowGrabState
from .knob_dial import RotaryKnobController
from .control_panel import ControlAxis, ControlPanel, MoveDirection, PanelPage
from .profile_loader import PanelProfile, ProfileLoadError, load_profile
from .input_recording import RecordingLoadError, load_recording

__all__ = [
    "ConfigurationError",
    "KnobSettings",
    "WindowSettings",
    "FrameInput",
    "Handedness",
    "HandSnapshot",
    "HeadSnapshot",
    "find_grabbing_hand",
    "Pose",
    "GrabbableWindowController",
    "WindowGrabState",
    "RotaryKnobController",
    "ControlAxis",
    "ControlPanel",
    "MoveDirection",
    "PanelPage",
    "PanelProfile",
    "ProfileLoadError",
    "load_profile",
    "RecordingLoadError",
    "load_recording",
]
