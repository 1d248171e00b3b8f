"""
Input recordings for offline replay.

A recording is a JSON file holding one entry per display frame with the
frame delta, the viewer head and the hand tracking state. Pinch edge flags
may be omitted; they are then derived from consecutive "pinch" values.

Example:
    {
      "frames": [
        {"dt": 0.016,
         "head": {"position": [0, 1.6, 0], "forward": [0, 0, -1]},
         "hands": {"right": {"tracked": true, "pinch": true,
                             "palm": [0, 0, -0.5], "pinchPoint": [0, 0, -0.5]}}}
      ]
    }
"""

import json
from pathlib import Path
from typing import Any

from .config import REPLAY_FRAME_DELTA
from .hand_input import FrameInput, Handedness, HandSnapshot, HeadSnapshot
from .logger import get_logger

logger = get_logger("InputRecording")


class RecordingLoadError(Exception):
    """Raised when a recording cannot be read or parsed."""
    pass


def load_recording(recording_path: str | Path) -> list[FrameInput]:
    """
    Load a JSON input recording.

    Args:
        recording_path: Path to the recording file.

    Returns:
        Frame snapshots in recorded order.

    Raises:
        RecordingLoadError: If the file cannot be read or is malformed.
    """
    path = Path(recording_path)
    logger.info(f"Loading recording from: {path}")

    if not path.is_file():
        raise RecordingLoadError(f"Recording file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise RecordingLoadError(f"Invalid JSON in recording: {e}")
    except IOError as e:
        raise RecordingLoadError(f"Cannot read recording file: {e}")

    frames = parse_recording(data)
    logger.info(f"Loaded {len(frames)} frames")
    return frames


def parse_recording(data: Any) -> list[FrameInput]:
    """
    Convert recording data into FrameInput snapshots.

    Raises:
        RecordingLoadError: If the structure or any value is invalid.
    """
    if not isinstance(data, dict) or not isinstance(data.get("frames"), list):
        raise RecordingLoadError("Recording must be an object with a 'frames' list")

    frames: list[FrameInput] = []
    previous_pinch = {handedness: False for handedness in Handedness}

    for index, frame_data in enumerate(data["frames"]):
        if not isinstance(frame_data, dict):
            raise RecordingLoadError(f"Frame {index} must be a JSON object")
        try:
            frame = _parse_frame(frame_data, previous_pinch)
        except (TypeError, ValueError) as e:
            raise RecordingLoadError(f"Frame {index}: {e}")
        frames.append(frame)

    return frames


def _parse_frame(data: dict[str, Any], previous_pinch: dict[Handedness, bool]) -> FrameInput:
    head_data = data.get("head", {})
    if not isinstance(head_data, dict):
        raise ValueError("'head' must be an object")
    head = HeadSnapshot(
        position=head_data.get("position", [0.0, 0.0, 0.0]),
        forward=head_data.get("forward", [0.0, 0.0, -1.0]),
    )

    hands_data = data.get("hands", {})
    if not isinstance(hands_data, dict):
        raise ValueError("'hands' must be an object")

    hands: dict[Handedness, HandSnapshot] = {}
    for handedness in Handedness:
        hand_data = hands_data.get(handedness.value)
        if hand_data is None:
            previous_pinch[handedness] = False
            continue
        if not isinstance(hand_data, dict):
            raise ValueError(f"Hand '{handedness.value}' must be an object")
        hand = _parse_hand(handedness, hand_data, previous_pinch[handedness])
        previous_pinch[handedness] = hand.tracked and hand.pinch_active
        hands[handedness] = hand

    return FrameInput(
        delta_time=float(data.get("dt", REPLAY_FRAME_DELTA)),
        head=head,
        hands=hands,
    )


def _parse_hand(handedness: Handedness, data: dict[str, Any], was_pinching: bool) -> HandSnapshot:
    tracked = bool(data.get("tracked", True))
    pinch = tracked and bool(data.get("pinch", False))

    return HandSnapshot(
        handedness=handedness,
        tracked=tracked,
        pinch_active=pinch,
        pinch_just_started=bool(data.get("pinchStarted", pinch and not was_pinching)),
        pinch_just_ended=bool(data.get("pinchEnded", was_pinching and not pinch)),
        palm_position=data.get("palm", [0.0, 0.0, 0.0]),
        pinch_point=data.get("pinchPoint", data.get("palm", [0.0, 0.0, 0.0])),
    )
