"""
Vector, quaternion and pose helpers for spatial widgets.

Vectors are float64 numpy arrays of shape (3,). Orientations are unit
quaternions stored as numpy arrays in [w, x, y, z] order.
"""

from dataclasses import dataclass, field
from typing import Sequence, Union

import numpy as np

from .config import DEFAULT_FORWARD, HORIZONTAL_EPSILON

VectorLike = Union[np.ndarray, Sequence[float]]


def vec3(values: VectorLike) -> np.ndarray:
    """Convert a 3-element sequence into a float64 vector."""
    v = np.asarray(values, dtype=np.float64).flatten()
    if v.shape != (3,):
        raise ValueError(f"Expected 3 components, got shape {v.shape}")
    return v.copy()


def is_finite(values: VectorLike) -> bool:
    """Check that every component is a finite number."""
    return bool(np.all(np.isfinite(np.asarray(values, dtype=np.float64))))


def distance(a: VectorLike, b: VectorLike) -> float:
    """Euclidean distance between two points."""
    return float(np.linalg.norm(np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)))


def lerp(a: VectorLike, b: VectorLike, t: float) -> np.ndarray:
    """Linear interpolation a + (b - a) * t (t is not clamped)."""
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    return a + (b - a) * t


def horizontal_forward(
    forward: VectorLike,
    fallback: VectorLike = DEFAULT_FORWARD,
    epsilon: float = HORIZONTAL_EPSILON
) -> np.ndarray:
    """
    Project a forward direction onto the horizontal (XZ) plane and renormalize.

    Args:
        forward: Viewer forward direction.
        fallback: Direction returned when the projection is degenerate
                  (viewer looking straight up or down).
        epsilon: Minimum projected length treated as non-degenerate.

    Returns:
        Unit vector with a zero Y component.
    """
    flat = vec3(forward)
    flat[1] = 0.0
    length = np.linalg.norm(flat)
    if not np.isfinite(length) or length < epsilon:
        return vec3(fallback)
    return flat / length


# Quaternions ([w, x, y, z])

def quat_identity() -> np.ndarray:
    return np.array([1.0, 0.0, 0.0, 0.0], dtype=np.float64)


def quat_normalize(q: VectorLike) -> np.ndarray:
    q = np.asarray(q, dtype=np.float64).flatten()
    if q.shape != (4,):
        raise ValueError(f"Expected 4 quaternion components, got shape {q.shape}")
    norm = np.linalg.norm(q)
    if not np.isfinite(norm) or norm == 0.0:
        raise ValueError(f"Cannot normalize degenerate quaternion {q}")
    return q / norm


def quat_inverse(q: np.ndarray) -> np.ndarray:
    """Inverse of a unit quaternion (its conjugate)."""
    return np.array([q[0], -q[1], -q[2], -q[3]], dtype=np.float64)


def quat_multiply(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Hamilton product a * b (apply b first, then a)."""
    w1, x1, y1, z1 = a
    w2, x2, y2, z2 = b
    return np.array([
        w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
        w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
        w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
        w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
    ], dtype=np.float64)


def quat_rotate(q: np.ndarray, v: VectorLike) -> np.ndarray:
    """Rotate vector v by unit quaternion q."""
    v = np.asarray(v, dtype=np.float64)
    u = q[1:]
    t = 2.0 * np.cross(u, v)
    return v + q[0] * t + np.cross(u, t)


def quat_from_axis_angle(axis: VectorLike, angle_rad: float) -> np.ndarray:
    """Unit quaternion rotating by angle_rad around axis."""
    axis = vec3(axis)
    norm = np.linalg.norm(axis)
    if norm == 0.0:
        raise ValueError("Rotation axis must be non-zero")
    half = angle_rad / 2.0
    xyz = axis / norm * np.sin(half)
    return np.array([np.cos(half), xyz[0], xyz[1], xyz[2]], dtype=np.float64)


@dataclass
class Pose:
    """
    Position plus orientation of an object in 3D space.

    Attributes:
        position: World position [x, y, z] in meters.
        orientation: Unit quaternion [w, x, y, z]; normalized on construction.
    """
    position: np.ndarray = field(default_factory=lambda: np.zeros(3, dtype=np.float64))
    orientation: np.ndarray = field(default_factory=quat_identity)

    def __post_init__(self) -> None:
        self.position = vec3(self.position)
        self.orientation = quat_normalize(self.orientation)

    def copy(self) -> "Pose":
        return Pose(self.position.copy(), self.orientation.copy())

    def to_local(self, point: VectorLike) -> np.ndarray:
        """Express a world point in this pose's local frame."""
        return quat_rotate(quat_inverse(self.orientation), np.asarray(point, dtype=np.float64) - self.position)

    def to_world(self, local_point: VectorLike) -> np.ndarray:
        """Express a local point in world coordinates."""
        return self.position + quat_rotate(self.orientation, local_point)

    def compose(self, local: "Pose") -> "Pose":
        """World pose of a child placed at `local` relative to this pose."""
        return Pose(
            self.to_world(local.position),
            quat_multiply(self.orientation, local.orientation)
        )
