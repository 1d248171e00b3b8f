"""
Configuration constants for the spatial control panel.

This module contains all tunable parameters for window grabbing,
idle auto-return, rotary knob mapping and panel controls.
"""

import math
import numbers
from dataclasses import dataclass, field
from typing import Final


# Window grab / drag
GRAB_DISTANCE: Final[float] = 0.1  # Max palm-to-window distance for a grab (meters)
WINDOW_INITIAL_POSITION: Final[tuple[float, float, float]] = (0.0, 0.0, -0.5)
WINDOW_INITIAL_ORIENTATION: Final[tuple[float, float, float, float]] = (0.0, 0.0, 1.0, 0.0)  # [w, x, y, z], facing +Z
WINDOW_SIZE: Final[tuple[float, float]] = (0.3, 0.4)  # Width x height (meters)

# Idle auto-return
WINDOW_RESET_DELAY: Final[float] = 60.0  # Seconds without a grab before the window returns
RESET_CONVERGENCE_DISTANCE: Final[float] = 0.01  # Glide stops within 1cm of target
RESET_LERP_SPEED: Final[float] = 5.0  # Fraction of remaining distance per second
RESET_FORWARD_OFFSET: Final[float] = 0.5  # Target distance in front of the viewer (meters)
DEFAULT_FORWARD: Final[tuple[float, float, float]] = (0.0, 0.0, -1.0)  # Used when head looks straight up/down
HORIZONTAL_EPSILON: Final[float] = 1e-6

# Rotary knob
KNOB_MINIMUM: Final[float] = 0.0
KNOB_MAXIMUM: Final[float] = 100.0
KNOB_VALUE: Final[float] = 50.0
KNOB_START_ANGLE: Final[float] = 135.0  # Degrees, 135 is top-left
KNOB_END_ANGLE: Final[float] = 405.0  # Degrees, may exceed 360 to wrap past the start
KNOB_RADIUS: Final[float] = 0.02  # Meters
KNOB_CLAMP_VALUE: Final[bool] = True

# Panel controls
MOVE_STEP: Final[float] = 0.01  # Meters per movement button press
ROTATE_STEP: Final[float] = 0.1  # Per rotation button press
SIZE_GROW_FACTOR: Final[float] = 1.01
SIZE_SHRINK_FACTOR: Final[float] = 0.99

# Input recordings
REPLAY_FRAME_DELTA: Final[float] = 1.0 / 60.0  # Frame delta when a recorded frame has no "dt"

# Logging
LOG_FILENAME: Final[str] = "spatial_panel.log"
LOG_MAX_BYTES: Final[int] = 10 * 1024 * 1024  # 10 MB
LOG_BACKUP_COUNT: Final[int] = 3

# Exit codes
EXIT_SUCCESS: Final[int] = 0
EXIT_PROFILE_ERROR: Final[int] = 1
EXIT_RECORDING_ERROR: Final[int] = 2
EXIT_RUNTIME_ERROR: Final[int] = 3


class ConfigurationError(ValueError):
    """Raised when widget settings would produce undefined numeric results."""
    pass


def _require_finite(name: str, value: float) -> None:
    if not isinstance(value, numbers.Real) or isinstance(value, bool) or not math.isfinite(value):
        raise ConfigurationError(f"{name} must be a finite number, got {value!r}")


def _require_positive(name: str, value: float) -> None:
    _require_finite(name, value)
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}")


@dataclass
class WindowSettings:
    """Container for grabbable window settings."""

    grab_distance: float = GRAB_DISTANCE
    reset_delay: float = WINDOW_RESET_DELAY
    reset_convergence: float = RESET_CONVERGENCE_DISTANCE
    lerp_speed: float = RESET_LERP_SPEED
    forward_offset: float = RESET_FORWARD_OFFSET
    size: tuple[float, float] = WINDOW_SIZE

    def validate(self) -> None:
        """
        Check the settings for values that break the grab/reset math.

        Raises:
            ConfigurationError: If any threshold is non-finite or not positive.
        """
        _require_positive("grab_distance", self.grab_distance)
        _require_positive("reset_delay", self.reset_delay)
        _require_positive("reset_convergence", self.reset_convergence)
        _require_positive("lerp_speed", self.lerp_speed)
        _require_finite("forward_offset", self.forward_offset)
        if len(self.size) != 2:
            raise ConfigurationError(f"size must have two components, got {self.size!r}")
        for extent in self.size:
            _require_positive("size", extent)


@dataclass
class KnobSettings:
    """Container for rotary knob settings."""

    minimum: float = KNOB_MINIMUM
    maximum: float = KNOB_MAXIMUM
    value: float = KNOB_VALUE
    start_angle: float = KNOB_START_ANGLE  # Degrees
    end_angle: float = KNOB_END_ANGLE  # Degrees
    radius: float = KNOB_RADIUS
    clamp_value: bool = KNOB_CLAMP_VALUE
    label: str = ""
    local_position: tuple[float, float, float] = (0.0, 0.0, 0.0)  # Relative to the hosting window
    local_orientation: tuple[float, float, float, float] = field(
        default_factory=lambda: (1.0, 0.0, 0.0, 0.0)
    )

    def validate(self) -> None:
        """
        Check range and angle settings before they reach the angle mapping.

        Raises:
            ConfigurationError: On an empty range, a value outside it, an empty
                sweep or a zero radius.
        """
        for name in ("minimum", "maximum", "value", "start_angle", "end_angle"):
            _require_finite(name, getattr(self, name))
        _require_positive("radius", self.radius)
        if self.maximum <= self.minimum:
            raise ConfigurationError(
                f"maximum ({self.maximum}) must be greater than minimum ({self.minimum})"
            )
        if not self.minimum <= self.value <= self.maximum:
            raise ConfigurationError(
                f"value ({self.value}) must lie within [{self.minimum}, {self.maximum}]"
            )
        if self.end_angle <= self.start_angle:
            raise ConfigurationError(
                f"end_angle ({self.end_angle}) must be greater than start_angle ({self.start_angle})"
            )
