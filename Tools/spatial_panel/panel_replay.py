#!/usr/bin/env python3
"""
Spatial Panel Replay

Drives a control panel with a recorded sequence of input frames, the same
way a host render loop would, and reports the resulting widget state.

Usage:
    python -m spatial_panel.panel_replay --recording <path> [--profile <path>] [--debug]

Exit Codes:
    0 - Success
    1 - Profile error
    2 - Recording error
    3 - Runtime error
"""

import argparse
import sys
from dataclasses import dataclass, field
from typing import Optional, Sequence

import numpy as np

from .config import (
    EXIT_SUCCESS,
    EXIT_PROFILE_ERROR,
    EXIT_RECORDING_ERROR,
    EXIT_RUNTIME_ERROR,
)
from .control_panel import ControlPanel, PanelEvent
from .hand_input import FrameInput
from .input_recording import RecordingLoadError, load_recording
from .logger import get_logger, setup_logging
from .profile_loader import (
    ProfileLoadError,
    create_default_profile,
    find_knob_settings,
    load_profile,
)


@dataclass
class ReplaySummary:
    """Final widget state after a replay."""
    frame_count: int
    elapsed_seconds: float
    window_position: list[float]
    window_state: str
    knob_values: dict[str, float] = field(default_factory=dict)
    events: list[tuple[int, PanelEvent]] = field(default_factory=list)


def replay(panel: ControlPanel, frames: Sequence[FrameInput]) -> ReplaySummary:
    """
    Step a panel once per recorded frame.

    Args:
        panel: Panel to drive.
        frames: Input snapshots in display order.

    Returns:
        Summary of the panel state after the last frame.
    """
    logger = get_logger("Replay")
    events: list[tuple[int, PanelEvent]] = []
    elapsed = 0.0

    for index, frame in enumerate(frames):
        for event in panel.step(frame):
            logger.debug(f"Frame {index}: {event.source} {event.event_type}")
            events.append((index, event))
        elapsed += frame.delta_time

    return ReplaySummary(
        frame_count=len(frames),
        elapsed_seconds=elapsed,
        window_position=np.round(panel.window.pose.position, 4).tolist(),
        window_state=panel.window.state.name,
        knob_values={pk.controller.label: pk.controller.value for pk in panel.knobs},
        events=events,
    )


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Replay recorded hand input through a spatial control panel"
    )
    parser.add_argument(
        "--recording",
        type=str,
        required=True,
        help="Path to JSON input recording"
    )
    parser.add_argument(
        "--profile",
        type=str,
        default=None,
        help="Path to JSON panel profile (default panel if omitted)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )
    parser.add_argument(
        "--no-log-file",
        action="store_true",
        help="Log to console only"
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code.
    """
    args = parse_args(argv)
    logger = setup_logging(debug=args.debug, log_to_file=not args.no_log_file)

    try:
        profile = load_profile(args.profile) if args.profile else create_default_profile()
    except ProfileLoadError as e:
        logger.error(f"Profile error: {e}")
        return EXIT_PROFILE_ERROR

    try:
        frames = load_recording(args.recording)
    except RecordingLoadError as e:
        logger.error(f"Recording error: {e}")
        return EXIT_RECORDING_ERROR

    try:
        summary = replay(profile.build_panel(), frames)
    except Exception as e:
        logger.exception(f"Replay failed: {e}")
        return EXIT_RUNTIME_ERROR

    logger.info(
        f"Replayed {summary.frame_count} frames ({summary.elapsed_seconds:.2f}s), "
        f"{len(summary.events)} events"
    )
    logger.info(f"Window: {summary.window_state} at {summary.window_position}")
    for label, value in summary.knob_values.items():
        settings = find_knob_settings(profile, label)
        logger.info(f"Knob '{label}': {value:.3f} [{settings.minimum:g}..{settings.maximum:g}]")

    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
