"""
Control panel composition for spatial widgets.

Hosts a grabbable window and any number of window-anchored knobs, keeps
track of the current menu page and turns panel button presses into
movement, rotation and size adjustments for an external shape.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Protocol

import numpy as np

from .config import MOVE_STEP, ROTATE_STEP, SIZE_GROW_FACTOR, SIZE_SHRINK_FACTOR
from .hand_input import FrameInput
from .knob_dial import RotaryKnobController
from .logger import get_logger
from .spatial_math import Pose
from .window_controller import GrabbableWindowController

logger = get_logger("ControlPanel")

PANEL_TITLE = "Control Panel"


class PanelPage(Enum):
    """Menu page shown inside the panel window."""
    MAIN = auto()
    MOVEMENT_CONTROLS = auto()
    MATH_SHAPES_MENU = auto()
    SHAPE_INFO = auto()


PAGE_LABELS: dict[PanelPage, tuple[str, ...]] = {
    PanelPage.MAIN: (
        "Spawn Cube",
        "Math Shapes Menu",
        "Movement Controls",
        "Show Axis Indicators",
    ),
    PanelPage.MOVEMENT_CONTROLS: (
        "Movement Controls",
        "^", "v", "<", ">", "F", "B",
        "-pitch", "+pitch", "-roll", "+roll", "-yaw", "+yaw",
        "-size", "+size",
        "Shape Info",
        "Back to Main",
    ),
    PanelPage.MATH_SHAPES_MENU: (
        "Math Shapes Menu",
        "Spawn Torus",
        "Back to Main",
    ),
    PanelPage.SHAPE_INFO: (
        "Shape Information",
        "Back to Movement Controls",
    ),
}


class ControlAxis(Enum):
    """Bounded quantity adjusted by the rotation/size buttons."""
    ROLL = 0   # Pending rotation x
    PITCH = 1  # Pending rotation y
    YAW = 2    # Pending rotation z
    SIZE = 3   # Multiplicative resize, applied immediately


class MoveDirection(Enum):
    """Unit direction of a movement button."""
    UP = (0.0, 1.0, 0.0)
    DOWN = (0.0, -1.0, 0.0)
    LEFT = (-1.0, 0.0, 0.0)
    RIGHT = (1.0, 0.0, 0.0)
    FORWARD = (0.0, 0.0, 1.0)
    BACK = (0.0, 0.0, -1.0)


class ShapeTarget(Protocol):
    """Shape manipulated by the panel (spawning and drawing live elsewhere)."""

    @property
    def size(self) -> float: ...

    def move(self, delta: np.ndarray) -> None: ...

    def rotate(self, angles: np.ndarray) -> None: ...

    def resize(self, scale_factor: float) -> None: ...


@dataclass
class PanelKnob:
    """A knob and its placement relative to the panel window."""
    controller: RotaryKnobController
    local_pose: Pose


@dataclass
class PanelEvent:
    """Transition reported by a panel widget during step()."""
    source: str  # "window" or the knob label
    event_type: str


class ControlPanel:
    """
    Window plus window-anchored knobs, advanced together once per frame.

    The window is always stepped first so knob world poses are derived from
    the window pose after this frame's drag or reset.
    """

    def __init__(
        self,
        window: Optional[GrabbableWindowController] = None,
        shape_target: Optional[ShapeTarget] = None,
        title: str = PANEL_TITLE
    ):
        self.window = window or GrabbableWindowController()
        self.shape_target = shape_target
        self.title = title
        self.knobs: list[PanelKnob] = []

        self.current_page = PanelPage.MAIN
        self.show_debug_info = False
        self.pending_movement = np.zeros(3)
        self.pending_rotation = np.zeros(3)

    def add_knob(self, knob: RotaryKnobController, local_pose: Optional[Pose] = None) -> PanelKnob:
        panel_knob = PanelKnob(knob, local_pose.copy() if local_pose else Pose())
        self.knobs.append(panel_knob)
        return panel_knob

    def knob_world_pose(self, panel_knob: PanelKnob) -> Pose:
        return self.window.pose.compose(panel_knob.local_pose)

    def step(self, frame: FrameInput) -> list[PanelEvent]:
        """
        Advance the window, then every knob, by one frame.

        Args:
            frame: Input snapshot shared by all widgets this frame.

        Returns:
            Widget transitions that happened this frame.
        """
        events = [PanelEvent("window", e) for e in self.window.step(frame)]
        for panel_knob in self.knobs:
            knob = panel_knob.controller
            for event_type in knob.step(frame, self.knob_world_pose(panel_knob)):
                events.append(PanelEvent(knob.label, event_type))
        return events

    # Pages

    def navigate(self, page: PanelPage) -> None:
        if page != self.current_page:
            logger.debug(f"Page {self.current_page.name} -> {page.name}")
        self.current_page = page

    def toggle_debug_info(self) -> bool:
        self.show_debug_info = not self.show_debug_info
        return self.show_debug_info

    def debug_lines(self) -> list[str]:
        return [
            f"Return Timer: {self.window.seconds_until_reset:.1f}s",
            f"Is Grabbed: {self.window.is_grabbed}",
        ]

    def shape_info_lines(self) -> list[str]:
        roll, pitch, yaw = self.pending_rotation
        lines = [f"Roll: {roll:.2f}", f"Pitch: {pitch:.2f}", f"Yaw: {yaw:.2f}"]
        if self.shape_target is not None:
            lines.append(f"Size: {self.shape_target.size:.2f}")
        return lines

    def visible_labels(self) -> list[str]:
        """Labels shown for the current page, in display order."""
        labels = [self.title]
        page_labels = list(PAGE_LABELS[self.current_page])

        if self.current_page == PanelPage.MAIN:
            page_labels.append("Hide Return Timer" if self.show_debug_info else "Show Return Timer")
        elif self.current_page == PanelPage.SHAPE_INFO:
            page_labels[1:1] = self.shape_info_lines()
        labels.extend(page_labels)

        if self.show_debug_info:
            labels.extend(self.debug_lines())
        return labels

    # Shape controls

    def nudge(self, direction: MoveDirection, step: float = MOVE_STEP) -> None:
        self.pending_movement += np.asarray(direction.value) * step

    def adjust_control(self, axis: ControlAxis, amount: float = ROTATE_STEP) -> None:
        """
        Adjust one control quantity.

        Rotation axes accumulate into pending_rotation until apply_pending();
        SIZE resizes the shape target right away by a fixed grow/shrink factor.

        Args:
            axis: Which quantity to adjust.
            amount: Signed step; for SIZE only the sign matters.
        """
        if axis == ControlAxis.SIZE:
            if self.shape_target is None:
                logger.debug("No shape target, size adjustment ignored")
                return
            self.shape_target.resize(SIZE_GROW_FACTOR if amount > 0 else SIZE_SHRINK_FACTOR)
        else:
            self.pending_rotation[axis.value] += amount

    def apply_pending(self) -> None:
        """Forward accumulated movement and rotation to the shape target."""
        if self.shape_target is not None:
            if np.linalg.norm(self.pending_movement) > 0:
                self.shape_target.move(self.pending_movement.copy())
            if np.linalg.norm(self.pending_rotation) > 0:
                self.shape_target.rotate(self.pending_rotation.copy())
        self.pending_movement = np.zeros(3)
        self.pending_rotation = np.zeros(3)
