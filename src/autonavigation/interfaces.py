"""
Capabilities the engine consumes from its host.

The engine never looks up scene nodes or drives the renderer itself. A host
passes objects satisfying these protocols to the compiler and the player.
"""

from typing import Optional, Protocol, Tuple, runtime_checkable

import numpy as np


@runtime_checkable
class NodeHandle(Protocol):
    """A scene graph node as seen by path construction."""

    identifier: str

    def world_position(self) -> np.ndarray: ...

    def world_rotation_matrix(self) -> np.ndarray: ...

    def bounding_radius(self) -> float: ...


@runtime_checkable
class SceneQuery(Protocol):
    def find_node(self, identifier: str) -> Optional[NodeHandle]: ...


@runtime_checkable
class CameraSink(Protocol):
    """
    Camera the player writes to once per frame.

    `get_pose` is only used to seed the first start state of a new path.
    Rotations are unit quaternions [w, x, y, z].
    """

    def get_pose(self) -> Tuple[np.ndarray, np.ndarray]: ...

    def set_pose(self, position: np.ndarray, rotation: np.ndarray) -> None: ...


@runtime_checkable
class AnchoredCamera(Protocol):
    """Optional sink capability: the node the camera is anchored to."""

    def anchor_node(self) -> Optional[str]: ...

    def set_anchor_node(self, identifier: str) -> None: ...


def supports_anchor(camera: object) -> bool:
    return callable(getattr(camera, 'anchor_node', None)) and callable(getattr(camera, 'set_anchor_node', None))


__all__ = ['NodeHandle', 'SceneQuery', 'CameraSink', 'AnchoredCamera', 'supports_anchor']
