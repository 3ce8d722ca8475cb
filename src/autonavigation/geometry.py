"""
Vector, matrix and quaternion helpers used by path construction and sampling.

Quaternions are numpy arrays in [w, x, y, z] order. Cameras look down their
local -Z axis with local +Y as up.
"""

from __future__ import annotations

import math
from typing import Sequence, Union

import numpy as np


ArrayLike = Union[Sequence[float], np.ndarray]

_EPSILON = 1e-12
_SLERP_LINEAR_THRESHOLD = 0.9995


def as_vector3(value: ArrayLike) -> np.ndarray:
    """Return a float64 copy of a 3-vector, rejecting any other shape."""
    vec = np.array(value, dtype=float).reshape(-1)
    if vec.shape != (3,):
        raise ValueError(f"Expected a 3D vector, got shape {vec.shape}")
    if not np.all(np.isfinite(vec)):
        raise ValueError("Vector components must be finite")
    return vec


def as_matrix3(value: ArrayLike) -> np.ndarray:
    mat = np.array(value, dtype=float)
    if mat.shape != (3, 3):
        raise ValueError("Expected 3x3")
    return mat


def normalize(vector: ArrayLike) -> np.ndarray:
    vec = np.asarray(vector, dtype=float)
    norm = np.linalg.norm(vec)
    if norm < _EPSILON:
        raise ValueError("Cannot normalize a zero-length vector")
    return vec / norm


def normalize_quaternion(q: ArrayLike) -> np.ndarray:
    """Normalize a quaternion."""
    quat = np.array(q, dtype=float).reshape(-1)
    if quat.shape != (4,):
        raise ValueError(f"Quaternion must have 4 components, got shape {quat.shape}")
    return normalize(quat)


def identity_quaternion() -> np.ndarray:
    """Return identity quaternion (no rotation)."""
    return np.array([1.0, 0.0, 0.0, 0.0])


def quaternion_from_matrix(matrix: ArrayLike) -> np.ndarray:
    """
    Convert a 3x3 rotation matrix to a unit quaternion [w, x, y, z].

    Uses the branch on the largest diagonal term for numerical stability.
    """
    m = as_matrix3(matrix)
    trace = m[0, 0] + m[1, 1] + m[2, 2]
    if trace > 0.0:
        s = 2.0 * math.sqrt(trace + 1.0)
        w = 0.25 * s
        x = (m[2, 1] - m[1, 2]) / s
        y = (m[0, 2] - m[2, 0]) / s
        z = (m[1, 0] - m[0, 1]) / s
    elif m[0, 0] > m[1, 1] and m[0, 0] > m[2, 2]:
        s = 2.0 * math.sqrt(1.0 + m[0, 0] - m[1, 1] - m[2, 2])
        w = (m[2, 1] - m[1, 2]) / s
        x = 0.25 * s
        y = (m[0, 1] + m[1, 0]) / s
        z = (m[0, 2] + m[2, 0]) / s
    elif m[1, 1] > m[2, 2]:
        s = 2.0 * math.sqrt(1.0 + m[1, 1] - m[0, 0] - m[2, 2])
        w = (m[0, 2] - m[2, 0]) / s
        x = (m[0, 1] + m[1, 0]) / s
        y = 0.25 * s
        z = (m[1, 2] + m[2, 1]) / s
    else:
        s = 2.0 * math.sqrt(1.0 + m[2, 2] - m[0, 0] - m[1, 1])
        w = (m[1, 0] - m[0, 1]) / s
        x = (m[0, 2] + m[2, 0]) / s
        y = (m[1, 2] + m[2, 1]) / s
        z = 0.25 * s
    q = normalize_quaternion([w, x, y, z])
    # Canonical sign keeps w non-negative
    return -q if q[0] < 0.0 else q


def quaternion_to_matrix(q: ArrayLike) -> np.ndarray:
    w, x, y, z = normalize_quaternion(q)
    return np.array(
        [
            [1 - 2 * (y * y + z * z), 2 * (x * y - w * z), 2 * (x * z + w * y)],
            [2 * (x * y + w * z), 1 - 2 * (x * x + z * z), 2 * (y * z - w * x)],
            [2 * (x * z - w * y), 2 * (y * z + w * x), 1 - 2 * (x * x + y * y)],
        ],
        dtype=float,
    )


def rotate_vector(q: ArrayLike, vector: ArrayLike) -> np.ndarray:
    return quaternion_to_matrix(q) @ as_vector3(vector)


def forward_vector(q: ArrayLike) -> np.ndarray:
    """World-space view direction of a camera with rotation q."""
    return rotate_vector(q, [0.0, 0.0, -1.0])


def up_vector(q: ArrayLike) -> np.ndarray:
    """World-space up direction of a camera with rotation q."""
    return rotate_vector(q, [0.0, 1.0, 0.0])


def slerp(q0: ArrayLike, q1: ArrayLike, t: float) -> np.ndarray:
    """
    Spherical linear interpolation along the shortest arc.

    Args:
        q0: start quaternion [w, x, y, z]
        q1: end quaternion [w, x, y, z]
        t: interpolation parameter; values outside [0, 1] return the nearer endpoint

    Returns:
        Unit quaternion. t <= 0 returns q0 and t >= 1 returns q1, both
        normalized and with their sign unchanged.
    """
    a = normalize_quaternion(q0)
    b = normalize_quaternion(q1)
    if t <= 0.0:
        return a
    if t >= 1.0:
        return b

    dot = float(np.dot(a, b))
    if dot < 0.0:
        b = -b
        dot = -dot

    if dot > _SLERP_LINEAR_THRESHOLD:
        return normalize_quaternion(a + t * (b - a))

    theta_0 = math.acos(min(dot, 1.0))
    sin_theta_0 = math.sin(theta_0)
    theta = theta_0 * t
    s0 = math.sin(theta_0 - theta) / sin_theta_0
    s1 = math.sin(theta) / sin_theta_0
    return normalize_quaternion(s0 * a + s1 * b)


def _fallback_up(direction: np.ndarray) -> np.ndarray:
    for axis in ([0.0, 1.0, 0.0], [0.0, 0.0, 1.0], [1.0, 0.0, 0.0]):
        candidate = np.array(axis)
        if abs(float(np.dot(candidate, direction))) < 0.99:
            return candidate
    return np.array([0.0, 1.0, 0.0])


def look_at_rotation(eye: ArrayLike, target: ArrayLike, up: ArrayLike) -> np.ndarray:
    """
    Rotation of a camera placed at eye and looking at target.

    The result maps camera-local axes to world space: local -Z points at
    the target and local +Y is as close to `up` as possible. When `up` is
    parallel to the view direction another world axis is used instead.
    """
    forward = normalize(as_vector3(target) - as_vector3(eye))
    up_vec = as_vector3(up)
    if np.linalg.norm(up_vec) < _EPSILON or np.linalg.norm(np.cross(forward, normalize(up_vec))) < 1e-6:
        up_vec = _fallback_up(forward)

    right = normalize(np.cross(forward, up_vec))
    true_up = np.cross(right, forward)
    matrix = np.column_stack([right, true_up, -forward])
    return quaternion_from_matrix(matrix)


def quaternions_close(q0: ArrayLike, q1: ArrayLike, atol: float = 1e-9) -> bool:
    """True when q0 and q1 describe the same rotation (q and -q are equal)."""
    a = normalize_quaternion(q0)
    b = normalize_quaternion(q1)
    return bool(np.allclose(a, b, atol=atol) or np.allclose(a, -b, atol=atol))
