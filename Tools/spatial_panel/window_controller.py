"""
Grabbable window controller for spatial control panels.

Owns a world-anchored window pose, detects hand grab/release against it,
drags it with the grabbing hand and, after a period without interaction,
glides it back in front of the viewer.
"""

from enum import Enum, auto
from typing import Iterable, Optional

import numpy as np

from .config import (
    HORIZONTAL_EPSILON,
    WINDOW_INITIAL_ORIENTATION,
    WINDOW_INITIAL_POSITION,
    WindowSettings,
)
from .hand_input import (
    DEFAULT_HAND_PRIORITY,
    FrameInput,
    Handedness,
    HandSnapshot,
    HeadSnapshot,
    find_grabbing_hand,
)
from .logger import get_logger
from .spatial_math import Pose, distance, horizontal_forward, is_finite, lerp

logger = get_logger("WindowController")


class WindowGrabState(Enum):
    """Interaction state of a grabbable window."""
    IDLE = auto()       # Not held, idle timer running
    GRABBED = auto()    # Held by one hand
    RESETTING = auto()  # Gliding back in front of the viewer


class GrabbableWindowController:
    """
    Frame-driven state machine for a hand-draggable window.

    Usage:
        window = GrabbableWindowController()

        # Each frame, before any window-relative controls:
        events = window.step(frame_input)
        draw_window(window.pose, window.size)
    """

    def __init__(
        self,
        settings: Optional[WindowSettings] = None,
        pose: Optional[Pose] = None,
        hand_priority: Iterable[Handedness] = DEFAULT_HAND_PRIORITY
    ):
        """
        Initialize the window controller.

        Args:
            settings: Grab and reset settings, or None for defaults.
            pose: Initial window pose, or None for the default placement.
            hand_priority: Order in which hands are checked for a grab.

        Raises:
            ConfigurationError: If the settings are invalid.
        """
        self.settings = settings or WindowSettings()
        self.settings.validate()

        self.pose = pose.copy() if pose else Pose(WINDOW_INITIAL_POSITION, WINDOW_INITIAL_ORIENTATION)
        self.size: tuple[float, float] = tuple(self.settings.size)
        self.hand_priority = tuple(hand_priority)

        self.state = WindowGrabState.IDLE
        self.idle_elapsed: float = 0.0
        self.active_hand: Optional[Handedness] = None
        self.last_hand_position: np.ndarray = self.pose.position.copy()
        self.target_position: np.ndarray = self.pose.position.copy()

        logger.debug(
            f"GrabbableWindowController initialized (grab={self.settings.grab_distance}m, "
            f"delay={self.settings.reset_delay}s, lerp={self.settings.lerp_speed})"
        )

    @property
    def is_grabbed(self) -> bool:
        return self.state == WindowGrabState.GRABBED

    @property
    def is_resetting(self) -> bool:
        return self.state == WindowGrabState.RESETTING

    @property
    def seconds_until_reset(self) -> float:
        """Remaining idle time before the window returns to the viewer."""
        return max(0.0, self.settings.reset_delay - self.idle_elapsed)

    def hand_grabs(self, hand: HandSnapshot) -> bool:
        """Pinching hand whose palm is within grab distance of the window."""
        return (
            hand.pinch_active
            and distance(hand.palm_position, self.pose.position) < self.settings.grab_distance
        )

    def step(self, frame: FrameInput) -> list[str]:
        """
        Advance the window by one frame.

        Args:
            frame: Input snapshot for this frame.

        Returns:
            Transition events this frame ("grab", "release",
            "reset_start", "reset_end").
        """
        events: list[str] = []

        if self.state == WindowGrabState.GRABBED:
            hand = frame.hand(self.active_hand)
            if hand.is_usable and self.hand_grabs(hand):
                self._drag(hand)
            else:
                self._release(tracking_lost=not hand.is_usable)
                events.append("release")
            return events

        hand = find_grabbing_hand(frame, self.hand_grabs, self.hand_priority)
        if hand is not None:
            self._begin_grab(hand)
            events.append("grab")
            return events

        if self.state == WindowGrabState.IDLE:
            self.idle_elapsed += frame.delta_time
            if self.idle_elapsed >= self.settings.reset_delay and self._begin_reset(frame.head):
                events.append("reset_start")

        if self.state == WindowGrabState.RESETTING and self._glide(frame.delta_time):
            events.append("reset_end")

        return events

    def _begin_grab(self, hand: HandSnapshot) -> None:
        if self.state == WindowGrabState.RESETTING:
            logger.debug("Grab interrupted reset glide")
        self.state = WindowGrabState.GRABBED
        self.active_hand = hand.handedness
        self.last_hand_position = hand.palm_position.copy()
        self.idle_elapsed = 0.0
        logger.debug(f"Window grabbed by {hand.handedness.name} hand")

    def _drag(self, hand: HandSnapshot) -> None:
        delta = hand.palm_position - self.last_hand_position
        self.pose.position = self.pose.position + delta
        self.last_hand_position = hand.palm_position.copy()

    def _release(self, tracking_lost: bool = False) -> None:
        logger.debug(
            f"Window released by {self.active_hand.name} hand"
            + (" (tracking lost)" if tracking_lost else "")
        )
        self.state = WindowGrabState.IDLE
        self.idle_elapsed = 0.0
        self.active_hand = None

    def _begin_reset(self, head: HeadSnapshot) -> bool:
        """Compute the return target once per reset episode."""
        if not (is_finite(head.position) and is_finite(head.forward)):
            logger.debug("Head pose not finite, deferring window reset")
            return False

        if np.hypot(head.forward[0], head.forward[2]) < HORIZONTAL_EPSILON:
            logger.warning("Viewer is looking straight up/down, using default forward for window reset")
        forward = horizontal_forward(head.forward)

        self.target_position = head.position + forward * self.settings.forward_offset
        self.state = WindowGrabState.RESETTING
        logger.debug(f"Window reset started, target={np.round(self.target_position, 3).tolist()}")
        return True

    def _glide(self, delta_time: float) -> bool:
        """Move a fraction of the remaining distance; True when converged."""
        t = min(1.0, delta_time * self.settings.lerp_speed)
        self.pose.position = lerp(self.pose.position, self.target_position, t)

        if distance(self.pose.position, self.target_position) < self.settings.reset_convergence:
            self.state = WindowGrabState.IDLE
            self.idle_elapsed = 0.0
            logger.debug("Window reset finished")
            return True
        return False
