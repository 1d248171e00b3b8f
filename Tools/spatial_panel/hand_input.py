"""
Per-frame input snapshots for spatial widgets.

Hand, head and timing data are sampled once at the start of a frame and
passed explicitly into each controller's step() call, so controllers have
no dependency on a global input service and can be driven by synthetic
snapshots.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, Optional

import numpy as np

from .logger import get_logger
from .spatial_math import is_finite, vec3

logger = get_logger("HandInput")


class Handedness(Enum):
    """Which hand a snapshot belongs to."""
    RIGHT = "right"
    LEFT = "left"


# Dominant hand first: it wins when both hands qualify in the same frame
DEFAULT_HAND_PRIORITY: tuple[Handedness, ...] = (Handedness.RIGHT, Handedness.LEFT)


@dataclass
class HandSnapshot:
    """
    Tracking state of one hand for a single frame.

    Attributes:
        handedness: Which hand this is.
        tracked: Whether the tracker has a valid reading this frame.
        pinch_active: Hand is currently in a pinch.
        pinch_just_started: Pinch began this frame.
        pinch_just_ended: Pinch ended this frame.
        palm_position: Center of the palm in world space.
        pinch_point: Fingertip contact point in world space.
    """
    handedness: Handedness
    tracked: bool = False
    pinch_active: bool = False
    pinch_just_started: bool = False
    pinch_just_ended: bool = False
    palm_position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    pinch_point: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self) -> None:
        self.palm_position = vec3(self.palm_position)
        self.pinch_point = vec3(self.pinch_point)

    @property
    def is_usable(self) -> bool:
        """Tracked and carrying finite positions."""
        if not self.tracked:
            return False
        if not (is_finite(self.palm_position) and is_finite(self.pinch_point)):
            logger.debug(f"{self.handedness.name} hand has non-finite position, ignoring")
            return False
        return True

    @classmethod
    def untracked(cls, handedness: Handedness) -> "HandSnapshot":
        return cls(handedness=handedness)


@dataclass
class HeadSnapshot:
    """Viewer head position and unit forward direction."""
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    forward: np.ndarray = field(default_factory=lambda: np.array([0.0, 0.0, -1.0]))

    def __post_init__(self) -> None:
        self.position = vec3(self.position)
        self.forward = vec3(self.forward)


@dataclass
class FrameInput:
    """
    Consistent input snapshot for one display frame.

    Attributes:
        delta_time: Seconds since the previous frame. Negative or
                    non-finite values are coerced to 0.
        head: Viewer head snapshot.
        hands: Snapshots keyed by handedness; missing hands read as untracked.
    """
    delta_time: float = 0.0
    head: HeadSnapshot = field(default_factory=HeadSnapshot)
    hands: dict[Handedness, HandSnapshot] = field(default_factory=dict)

    def __post_init__(self) -> None:
        dt = float(self.delta_time)
        if not math.isfinite(dt) or dt < 0:
            logger.debug(f"Invalid frame delta {self.delta_time!r}, using 0")
            dt = 0.0
        self.delta_time = dt

    def hand(self, handedness: Handedness) -> HandSnapshot:
        """Get the snapshot for a hand (untracked if absent)."""
        snapshot = self.hands.get(handedness)
        if snapshot is None:
            return HandSnapshot.untracked(handedness)
        return snapshot


def find_grabbing_hand(
    frame: FrameInput,
    predicate: Callable[[HandSnapshot], bool],
    hand_priority: Iterable[Handedness] = DEFAULT_HAND_PRIORITY
) -> Optional[HandSnapshot]:
    """
    Return the first hand, in priority order, that qualifies for a grab.

    Untracked hands and hands with non-finite positions never qualify.
    Absence of a grab is a normal outcome, not an error.

    Args:
        frame: Input snapshot for this frame.
        predicate: Widget-specific grab test applied to usable hands.
        hand_priority: Order in which hands are checked.

    Returns:
        The winning hand snapshot, or None.
    """
    for handedness in hand_priority:
        hand = frame.hand(handedness)
        if hand.is_usable and predicate(hand):
            return hand
    return None
