"""
Path compiler: turns declarative path instructions into contiguous segments.

Compilation is all-or-nothing. The first invalid instruction aborts the whole
compile and nothing is returned for the instructions before it.
"""

import logging
import math
from typing import Iterable, List, Optional, Tuple

import numpy as np

from .config import NavigationSettings
from .errors import CompileError, InvalidDuration, UnknownNode
from .geometry import (
    as_matrix3,
    as_vector3,
    forward_vector,
    identity_quaternion,
    look_at_rotation,
    normalize,
    up_vector,
)
from .instructions import PathInstruction
from .interfaces import CameraSink, NodeHandle, SceneQuery, supports_anchor
from .path import Path
from .segment import PathSegment
from .state import CameraState, CurveType


logger = logging.getLogger(__name__)

_MIN_DISTANCE = 1e-9


class PathCompiler:
    """Resolve instructions against the scene and the live camera pose."""

    def __init__(self, scene: SceneQuery, camera: CameraSink, settings: Optional[NavigationSettings] = None):
        self.scene = scene
        self.camera = camera
        self.settings = settings or NavigationSettings()

    def compile(self, instructions: Iterable[PathInstruction], previous: Optional[Path] = None) -> Path:
        """
        Compile `instructions` into a Path.

        Args:
            instructions: ordered path instructions
            previous: path to continue from; the result then contains its
                segments followed by the new ones

        Returns:
            New Path. An empty instruction list yields `previous` (or an empty path).

        Raises:
            CompileError: UnknownNode, InvalidDuration or UnresolvedReferenceNode,
                each carrying the offending instruction index
        """
        instructions = list(instructions)
        base = previous if previous is not None else Path.empty()
        if not instructions:
            return base

        start_state = base.end_state
        curve_type = self.settings.curve_type
        if start_state is None:
            start_state, anchored = self._live_camera_state(instructions[0].target_node)
            if not anchored:
                # Start reference fell back to the target; keep the first leg straight
                curve_type = CurveType.LINEAR
        start_time = base.total_duration

        segments: List[PathSegment] = []
        for index, instruction in enumerate(instructions):
            try:
                segment = self._compile_instruction(index, instruction, start_state, start_time, curve_type)
            except CompileError as e:
                e.details.setdefault('instruction_index', index)
                logger.error(f"Path compilation failed at instruction {index}: {e.message}")
                raise
            segments.append(segment)
            logger.debug(f"Compiled segment {index}: {segment!r}")
            start_state = segment.end
            start_time = segment.end_time
            curve_type = self.settings.curve_type

        return base.extended(segments)

    def _live_camera_state(self, fallback_reference: str) -> Tuple[CameraState, bool]:
        """Live camera pose, and whether its reference node came from the sink's anchor."""
        position, rotation = self.camera.get_pose()
        reference = None
        if supports_anchor(self.camera):
            reference = self.camera.anchor_node()
        if reference:
            return CameraState(position, rotation, reference), True
        logger.debug(f"Camera has no anchor node; first leg to '{fallback_reference}' is linear")
        return CameraState(position, rotation, fallback_reference), False

    def _compile_instruction(self, index: int, instruction: PathInstruction,
                             start_state: CameraState, start_time: float,
                             curve_type: CurveType) -> PathSegment:
        node = self.scene.find_node(instruction.target_node)
        if node is None:
            raise UnknownNode(instruction.target_node, index)

        duration = self._resolve_duration(index, instruction.duration)
        node_position = as_vector3(node.world_position())

        if instruction.position is not None:
            rotation = as_matrix3(node.world_rotation_matrix())
            end_position = node_position + rotation @ as_vector3(instruction.position)
        else:
            end_position = self.compute_target_position(
                node, start_state.position, fallback_direction=-forward_vector(start_state.rotation))

        end_state = self.camera_state_from_target(
            end_position, node_position, instruction.target_node,
            up_vector(start_state.rotation), fallback_rotation=start_state.rotation)

        return PathSegment(
            start_state,
            end_state,
            duration,
            start_time=start_time,
            curve_type=curve_type,
            scene=self.scene,
            tension=self.settings.bezier_tension,
        )

    def _resolve_duration(self, index: int, duration) -> float:
        if duration is None:
            return self.settings.default_duration
        try:
            value = float(duration)
        except (TypeError, ValueError):
            raise InvalidDuration(index, duration) from None
        if not (value > 0.0 and math.isfinite(value)):
            raise InvalidDuration(index, duration)
        return value

    def compute_target_position(self, node: NodeHandle, previous_position,
                                fallback_direction=None) -> np.ndarray:
        """
        Default stand-off position in front of `node`.

        Moves out from the node centre toward `previous_position` by
        radius + standoff_factor * radius.
        """
        node_position = as_vector3(node.world_position())
        radius = float(node.bounding_radius())
        offset = as_vector3(previous_position) - node_position

        if np.linalg.norm(offset) > _MIN_DISTANCE:
            direction = normalize(offset)
        elif fallback_direction is not None:
            direction = normalize(fallback_direction)
        else:
            direction = np.array([0.0, 0.0, 1.0])

        desired_distance = self.settings.standoff_factor * radius
        return node_position + direction * (radius + desired_distance)

    def camera_state_from_target(self, position, look_at, node_id: str, up,
                                 fallback_rotation=None) -> CameraState:
        """Camera state at `position` facing `look_at`, anchored to `node_id`."""
        position = as_vector3(position)
        if np.linalg.norm(as_vector3(look_at) - position) <= _MIN_DISTANCE:
            # Camera sits on the look-at point; no view direction to construct
            rotation = fallback_rotation if fallback_rotation is not None else identity_quaternion()
        else:
            rotation = look_at_rotation(position, look_at, up)
        return CameraState(position, rotation, node_id)


__all__ = ['PathCompiler']
