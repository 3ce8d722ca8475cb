"""
Path segment: one leg of camera travel between two camera states.

Positions follow either a straight line or a cubic Bezier curve whose inner
control points push the camera away from the start and end reference nodes.
Rotations always use slerp.
"""

import logging
from typing import Optional, Tuple

import numpy as np

from .errors import InvalidSegment, UnresolvedReferenceNode
from .geometry import as_vector3, slerp
from .interfaces import SceneQuery
from .state import CameraState, CurveType


logger = logging.getLogger(__name__)

DEFAULT_BEZIER_TENSION = 10.0


class PathSegment:
    """
    Immutable leg of a path.

    A segment owns the half-open global time interval
    [start_time, start_time + duration). Sampling accessors take the local
    parameter t and do not clamp it; the player clamps before sampling.
    """

    __slots__ = ('_start', '_end', '_duration', '_start_time', '_curve_type', '_control_points')

    def __init__(self, start: CameraState, end: CameraState, duration: float,
                 start_time: float = 0.0, curve_type: CurveType = CurveType.BEZIER,
                 scene: Optional[SceneQuery] = None,
                 tension: float = DEFAULT_BEZIER_TENSION):
        """
        Args:
            start: camera state at t=0
            end: camera state at t=1
            duration: strictly positive length in time units
            start_time: global time at which this segment begins
            curve_type: position sampling algorithm
            scene: scene query used to resolve reference nodes for Bezier control points
            tension: outward push factor of the inner Bezier control points

        Raises:
            InvalidSegment: duration is not strictly positive or start_time is negative
            UnresolvedReferenceNode: a Bezier endpoint's reference node cannot be found
        """
        duration = float(duration)
        start_time = float(start_time)
        if not duration > 0.0:
            raise InvalidSegment(f"Segment duration must be larger than zero, got: {duration}",
                                 details={'duration': duration})
        if start_time < 0.0:
            raise InvalidSegment(f"Segment start time must not be negative, got: {start_time}",
                                 details={'start_time': start_time})
        if not isinstance(curve_type, CurveType):
            raise InvalidSegment(f"Unsupported curve type: {curve_type!r}")

        self._start = start
        self._end = end
        self._duration = duration
        self._start_time = start_time
        self._curve_type = curve_type
        self._control_points: Tuple[np.ndarray, ...] = ()

        if curve_type is CurveType.BEZIER:
            self._control_points = self._compute_control_points(scene, float(tension))

    def _compute_control_points(self, scene: Optional[SceneQuery], tension: float) -> Tuple[np.ndarray, ...]:
        start_node_pos = self._resolve_node_position(scene, self._start.reference_node)
        end_node_pos = self._resolve_node_position(scene, self._end.reference_node)

        p0 = self._start.position
        p3 = self._end.position
        p1 = p0 + tension * (p0 - start_node_pos)
        p2 = p3 + tension * (p3 - end_node_pos)

        points = []
        for point in (p0, p1, p2, p3):
            point = np.array(point, dtype=float)
            point.flags.writeable = False
            points.append(point)
        logger.debug(f"Bezier control points {[p.tolist() for p in points]}")
        return tuple(points)

    @staticmethod
    def _resolve_node_position(scene: Optional[SceneQuery], identifier: Optional[str]) -> np.ndarray:
        node = scene.find_node(identifier) if (scene is not None and identifier) else None
        if node is None:
            raise UnresolvedReferenceNode(identifier)
        return as_vector3(node.world_position())

    @property
    def start(self) -> CameraState:
        return self._start

    @property
    def end(self) -> CameraState:
        return self._end

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def start_time(self) -> float:
        return self._start_time

    @property
    def end_time(self) -> float:
        return self._start_time + self._duration

    @property
    def curve_type(self) -> CurveType:
        return self._curve_type

    @property
    def control_points(self) -> Tuple[np.ndarray, ...]:
        """P0..P3 for Bezier segments, empty for linear ones."""
        return self._control_points

    def position_at(self, t: float) -> np.ndarray:
        if self._curve_type is CurveType.LINEAR:
            return self._start.position * (1.0 - t) + self._end.position * t

        p0, p1, p2, p3 = self._control_points
        u = 1.0 - t
        return (p0 * (u * u * u)
                + p1 * (3.0 * t * u * u)
                + p2 * (3.0 * t * t * u)
                + p3 * (t * t * t))

    def rotation_at(self, t: float) -> np.ndarray:
        return slerp(self._start.rotation, self._end.rotation, t)

    def sample(self, t: float) -> Tuple[np.ndarray, np.ndarray]:
        return self.position_at(t), self.rotation_at(t)

    def __repr__(self) -> str:
        return (f"PathSegment(start_time={self._start_time}, duration={self._duration}, "
                f"curve={self._curve_type.value}, {self._start.reference_node} -> {self._end.reference_node})")
