"""
Camera state data structures for auto-navigation paths.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

import numpy as np

from .geometry import as_vector3, normalize_quaternion


class CurveType(Enum):
    """Position sampling algorithm of a path segment"""
    LINEAR = "linear"
    BEZIER = "bezier"


class EasingType(Enum):
    """Easing function types for the segment time parameter"""
    LINEAR = "linear"
    EASE_IN = "ease_in"
    EASE_OUT = "ease_out"
    EASE_IN_OUT = "ease_in_out"
    CUBIC_EASE_IN = "cubic_ease_in"
    CUBIC_EASE_OUT = "cubic_ease_out"
    CUBIC_EASE_IN_OUT = "cubic_ease_in_out"


class PlayerState(Enum):
    IDLE = "idle"
    PLAYING = "playing"


def _frozen(array: np.ndarray) -> np.ndarray:
    array = np.array(array, dtype=float)
    array.flags.writeable = False
    return array


@dataclass(frozen=True, eq=False)
class CameraState:
    """
    Immutable camera pose used as a segment endpoint.

    Attributes:
        position: world-space position, shape (3,)
        rotation: unit quaternion [w, x, y, z]; normalized on construction
        reference_node: identifier of the scene node the pose is anchored to
    """
    position: np.ndarray
    rotation: np.ndarray
    reference_node: Optional[str] = field(default=None)

    def __post_init__(self) -> None:
        object.__setattr__(self, 'position', _frozen(as_vector3(self.position)))
        object.__setattr__(self, 'rotation', _frozen(normalize_quaternion(self.rotation)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'position': self.position.tolist(),
            'rotation': self.rotation.tolist(),
            'reference_node': self.reference_node,
        }
