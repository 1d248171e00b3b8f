"""
Rotary knob control for spatial panels.

Maps a bounded value onto an arc of angles and lets a pinching hand turn
the knob. The angular offset between the hand and the pointer is captured
at grab start so the value never jumps to wherever the hand points.
"""

import math
from typing import Iterable, Optional

import numpy as np

from .config import KnobSettings
from .hand_input import (
    DEFAULT_HAND_PRIORITY,
    FrameInput,
    Handedness,
    HandSnapshot,
    find_grabbing_hand,
)
from .logger import get_logger
from .spatial_math import Pose, VectorLike

logger = get_logger("KnobDial")

FULL_TURN = 2.0 * math.pi


class RotaryKnobController:
    """
    Frame-driven knob that converts hand rotation into a bounded value.

    Angles in settings are degrees; value_angle() and angle_to_value() work
    in radians. The knob face lies on the local XY-plane of the pose it is
    drawn at.

    Usage:
        knob = RotaryKnobController(KnobSettings(minimum=-180, maximum=180))

        # Each frame, after the hosting window has been updated:
        knob.step(frame_input, knob_pose)
        start, end = knob.pointer_segment(knob_pose)
    """

    def __init__(
        self,
        settings: Optional[KnobSettings] = None,
        hand_priority: Iterable[Handedness] = DEFAULT_HAND_PRIORITY
    ):
        """
        Initialize the knob.

        Args:
            settings: Range, angle and radius settings, or None for defaults.
            hand_priority: Order in which hands are checked for a grab.

        Raises:
            ConfigurationError: If the range, angles or radius are invalid.
        """
        settings = settings or KnobSettings()
        settings.validate()

        self.label = settings.label
        self.minimum = float(settings.minimum)
        self.maximum = float(settings.maximum)
        self.value = float(settings.value)
        self.start_angle = float(settings.start_angle)
        self.end_angle = float(settings.end_angle)
        self.radius = float(settings.radius)
        self.clamp_value = settings.clamp_value
        self.hand_priority = tuple(hand_priority)

        self.grabbed = False
        self.grab_angle_offset = 0.0
        self.grab_hand: Optional[Handedness] = None

    @property
    def normalized_value(self) -> float:
        """Fraction of the range covered by the current value (not clamped)."""
        return (self.value - self.minimum) / (self.maximum - self.minimum)

    def value_angle(self) -> float:
        """Pointer angle for the current value, in radians."""
        degrees = self.start_angle + self.normalized_value * (self.end_angle - self.start_angle)
        return math.radians(degrees)

    def angle_to_value(self, angle: float) -> float:
        """
        Convert a pointer angle (radians) back into a value.

        The angle is wrapped into [0, 360) degrees and then unwrapped onto the
        knob's arc. Any dead zone between end_angle and the next turn of
        start_angle is split at its midpoint, so an angle in the dead zone
        maps past the nearer end of the range.

        Args:
            angle: Angle in radians; any number of full turns is ignored.

        Returns:
            Value for the angle, clamped to [minimum, maximum] when
            clamp_value is set.
        """
        angle = angle % FULL_TURN
        if angle >= FULL_TURN:
            angle -= FULL_TURN
        degrees = math.degrees(angle)

        sweep = self.end_angle - self.start_angle
        dead_zone = 360.0 - sweep
        lower = self.start_angle - dead_zone / 2.0 if dead_zone > 0 else self.start_angle
        degrees = lower + (degrees - lower) % 360.0

        t = (degrees - self.start_angle) / sweep
        value = self.minimum + t * (self.maximum - self.minimum)
        if self.clamp_value:
            value = min(self.maximum, max(self.minimum, value))
        return value

    def angle_to_hand(self, pose: Pose, point: VectorLike) -> float:
        """Angle (radians) of a world point around the knob, on the knob's local XY-plane."""
        local = pose.to_local(point)
        return math.atan2(local[1], local[0])

    def contains(self, pose: Pose, point: VectorLike) -> bool:
        """Check whether a world point lies in the knob's interaction box."""
        local = pose.to_local(point)
        return bool(np.all(np.abs(local) <= self.radius))

    def step(self, frame: FrameInput, pose: Pose) -> list[str]:
        """
        Advance the knob by one frame.

        Args:
            frame: Input snapshot for this frame.
            pose: World pose the knob is drawn at this frame.

        Returns:
            Transition events this frame ("grab", "release").
        """
        events: list[str] = []

        if not self.grabbed:
            hand = find_grabbing_hand(
                frame,
                lambda h: h.pinch_just_started and self.contains(pose, h.pinch_point),
                self.hand_priority
            )
            if hand is None:
                return events
            self._begin_grab(hand, pose)
            events.append("grab")
        else:
            hand = frame.hand(self.grab_hand)
            if not hand.is_usable or hand.pinch_just_ended or not hand.pinch_active:
                self._release()
                events.append("release")
                return events

        new_angle = self.angle_to_hand(pose, hand.pinch_point) - self.grab_angle_offset
        self.value = self.angle_to_value(new_angle)
        return events

    def _begin_grab(self, hand: HandSnapshot, pose: Pose) -> None:
        self.grabbed = True
        self.grab_hand = hand.handedness
        self.grab_angle_offset = self.angle_to_hand(pose, hand.pinch_point) - self.value_angle()
        logger.debug(
            f"Knob '{self.label}' grabbed by {hand.handedness.name} hand at value {self.value:.3f}"
        )

    def _release(self) -> None:
        logger.debug(f"Knob '{self.label}' released at value {self.value:.3f}")
        self.grabbed = False
        self.grab_hand = None
        self.grab_angle_offset = 0.0

    def pointer_local_position(self) -> np.ndarray:
        """Pointer tip in knob-local space."""
        angle = self.value_angle()
        return np.array([math.cos(angle) * self.radius, math.sin(angle) * self.radius, 0.0])

    def pointer_segment(self, pose: Pose) -> tuple[np.ndarray, np.ndarray]:
        """World-space line from the knob center to the pointer tip."""
        return pose.position.copy(), pose.to_world(self.pointer_local_position())
