"""Unit quaternion helpers for orienting cameras and prisms.

Quaternions are stored as NumPy arrays in ``(w, x, y, z)`` order. The camera's
canonical frame is right = +X, up = +Y, forward = -Z; an orientation rotates
that frame into world space.

These are plain NumPy routines evaluated in Python scope while a scene is
being set up. Nothing here runs inside a Taichi kernel.
"""

import math

import numpy as np

RIGHT = np.array([1.0, 0.0, 0.0])
UP = np.array([0.0, 1.0, 0.0])
FORWARD = np.array([0.0, 0.0, -1.0])


def identity() -> np.ndarray:
    """Return the identity rotation."""
    return np.array([1.0, 0.0, 0.0, 0.0])


def normalize(q) -> np.ndarray:
    """Scale a quaternion to unit length.

    Raises:
        ValueError: If the quaternion has zero (or non-finite) length.
    """
    q = np.asarray(q, dtype=np.float64)
    if q.shape != (4,):
        raise ValueError(f"quaternion must have 4 components, got shape {q.shape}")
    norm = np.linalg.norm(q)
    if not np.isfinite(norm) or norm < 1e-12:
        raise ValueError("quaternion must be non-zero")
    return q / norm


def multiply(a, b) -> np.ndarray:
    """Hamilton product a * b (apply b first, then a)."""
    aw, ax, ay, az = a
    bw, bx, by, bz = b
    return np.array(
        [
            aw * bw - ax * bx - ay * by - az * bz,
            aw * bx + ax * bw + ay * bz - az * by,
            aw * by - ax * bz + ay * bw + az * bx,
            aw * bz + ax * by - ay * bx + az * bw,
        ]
    )


def from_axis_angle(axis, angle: float) -> np.ndarray:
    """Rotation of ``angle`` radians about ``axis`` (right-hand rule)."""
    axis = np.asarray(axis, dtype=np.float64)
    norm = np.linalg.norm(axis)
    if norm < 1e-12:
        raise ValueError("rotation axis must be non-zero")
    axis = axis / norm
    half = 0.5 * angle
    return np.concatenate([[math.cos(half)], math.sin(half) * axis])


def from_euler(roll: float, pitch: float, yaw: float) -> np.ndarray:
    """Build a rotation from Euler angles in radians.

    Roll is about X, pitch about Y, yaw about Z, applied in that order, so
    the combined rotation is ``Rz(yaw) * Ry(pitch) * Rx(roll)``.
    """
    qx = from_axis_angle(RIGHT, roll)
    qy = from_axis_angle(UP, pitch)
    qz = from_axis_angle(np.array([0.0, 0.0, 1.0]), yaw)
    return multiply(qz, multiply(qy, qx))


def to_matrix(q) -> np.ndarray:
    """Convert a unit quaternion to a 3x3 rotation matrix."""
    w, x, y, z = normalize(q)
    return np.array(
        [
            [1 - 2 * (y * y + z * z), 2 * (x * y - w * z), 2 * (x * z + w * y)],
            [2 * (x * y + w * z), 1 - 2 * (x * x + z * z), 2 * (y * z - w * x)],
            [2 * (x * z - w * y), 2 * (y * z + w * x), 1 - 2 * (x * x + y * y)],
        ]
    )


def from_matrix(m) -> np.ndarray:
    """Convert a 3x3 rotation matrix to a unit quaternion."""
    m = np.asarray(m, dtype=np.float64)
    trace = m[0, 0] + m[1, 1] + m[2, 2]
    if trace > 0.0:
        s = 2.0 * math.sqrt(trace + 1.0)
        q = [
            0.25 * s,
            (m[2, 1] - m[1, 2]) / s,
            (m[0, 2] - m[2, 0]) / s,
            (m[1, 0] - m[0, 1]) / s,
        ]
    elif m[0, 0] > m[1, 1] and m[0, 0] > m[2, 2]:
        s = 2.0 * math.sqrt(1.0 + m[0, 0] - m[1, 1] - m[2, 2])
        q = [
            (m[2, 1] - m[1, 2]) / s,
            0.25 * s,
            (m[0, 1] + m[1, 0]) / s,
            (m[0, 2] + m[2, 0]) / s,
        ]
    elif m[1, 1] > m[2, 2]:
        s = 2.0 * math.sqrt(1.0 + m[1, 1] - m[0, 0] - m[2, 2])
        q = [
            (m[0, 2] - m[2, 0]) / s,
            (m[0, 1] + m[1, 0]) / s,
            0.25 * s,
            (m[1, 2] + m[2, 1]) / s,
        ]
    else:
        s = 2.0 * math.sqrt(1.0 + m[2, 2] - m[0, 0] - m[1, 1])
        q = [
            (m[1, 0] - m[0, 1]) / s,
            (m[0, 2] + m[2, 0]) / s,
            (m[1, 2] + m[2, 1]) / s,
            0.25 * s,
        ]
    return normalize(q)


def facing(direction, world_up=UP) -> np.ndarray:
    """Rotation that turns the canonical forward axis (-Z) toward ``direction``.

    The camera's up vector is kept as close to ``world_up`` as possible. When
    ``direction`` is parallel to ``world_up``, +Z is used as the reference
    up instead.

    Raises:
        ValueError: If direction is the zero vector.
    """
    direction = np.asarray(direction, dtype=np.float64)
    norm = np.linalg.norm(direction)
    if norm < 1e-12:
        raise ValueError("direction must be non-zero")
    back = -direction / norm

    world_up = np.asarray(world_up, dtype=np.float64)
    right = np.cross(world_up, back)
    if np.linalg.norm(right) < 1e-6:
        right = np.cross(np.array([0.0, 0.0, 1.0]), back)
    right = right / np.linalg.norm(right)
    up = np.cross(back, right)

    # Columns are the images of +X, +Y, +Z
    return from_matrix(np.column_stack([right, up, back]))


def rotate(q, v) -> np.ndarray:
    """Rotate vector ``v`` by quaternion ``q``."""
    return to_matrix(q) @ np.asarray(v, dtype=np.float64)


def basis(q):
    """Return the rotated (right, up, forward) unit vectors for ``q``."""
    m = to_matrix(q)
    return m @ RIGHT, m @ UP, m @ FORWARD
