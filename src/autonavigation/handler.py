"""
Auto-navigation handler: the path player.

Owns the loaded Path, tracks global elapsed time and writes one camera pose
per advance() call while playing. States are idle and playing; the per-frame
driver calls advance() unconditionally and it is a no-op while idle.
"""

import logging
import math
import threading
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

import numpy as np

from .compiler import PathCompiler
from .config import NavigationSettings
from .easing import EasingFunction, resolve_easing
from .errors import EmptyPath, PathInvariantError, UnknownNode
from .geo import GeoPosition, to_cartesian
from .instructions import PathInstruction, PathSpecification
from .interfaces import CameraSink, SceneQuery, supports_anchor
from .path import Path
from .segment import PathSegment
from .state import EasingType, PlayerState


logger = logging.getLogger(__name__)

_END_TOLERANCE = 1e-9


class AutoNavigationHandler:
    """Plays camera paths frame by frame"""

    def __init__(self, scene: SceneQuery, camera: CameraSink,
                 settings: Optional[NavigationSettings] = None,
                 easing: Union[EasingType, str, EasingFunction, None] = None):
        """
        Args:
            scene: scene node lookup used by the compiler
            camera: camera sink the player writes poses to
            settings: tunable constants, defaults when omitted
            easing: easing strategy; settings.easing when omitted
        """
        self.settings = settings or NavigationSettings()
        self._scene = scene
        self._camera = camera
        self._compiler = PathCompiler(scene, camera, self.settings)
        self._easing = resolve_easing(easing if easing is not None else self.settings.easing)

        self._lock = threading.RLock()
        self._path = Path.empty()
        self._current_time = 0.0
        self._state = PlayerState.IDLE
        self._reference_node: Optional[str] = None

    @property
    def compiler(self) -> PathCompiler:
        return self._compiler

    # Path management

    def set_path(self, path: Optional[Path]) -> None:
        """Replace the loaded path. Resets time and stops playback."""
        with self._lock:
            self._path = path if path else Path.empty()
            self._current_time = 0.0
            self._state = PlayerState.IDLE
            if self._path:
                logger.info(f"Path set - {len(self._path)} segments, {self._path.total_duration:.2f}s")

    def clear_path(self) -> None:
        """Drop the loaded path. Safe from any state."""
        with self._lock:
            had_path = bool(self._path)
            self.set_path(None)
            if had_path:
                logger.info("Path cleared")

    def start(self) -> None:
        """Play the loaded path from the beginning."""
        with self._lock:
            if not self._path:
                raise EmptyPath()
            self._current_time = 0.0
            self._state = PlayerState.PLAYING
            logger.info(f"Path started - {len(self._path)} segments, {self._path.total_duration:.2f}s")

    def stop(self) -> None:
        """Halt playback; the path stays loaded and the camera keeps its last pose."""
        with self._lock:
            if self._state is PlayerState.PLAYING:
                self._state = PlayerState.IDLE
                logger.info(f"Path stopped at {self._current_time:.2f}s")

    def compile_and_start(self, instructions: Iterable[PathInstruction]) -> Path:
        """Compile, replace the loaded path and start it. On failure nothing changes."""
        with self._lock:
            path = self._compiler.compile(instructions)
            if not path:
                raise EmptyPath()
            self.set_path(path)
            self.start()
            return path

    def append_to_path(self, target_node: str, duration: Optional[float] = None,
                       position=None) -> Path:
        """Continue the loaded path with one more leg. Playback state is kept."""
        with self._lock:
            instruction = PathInstruction(target_node, duration, position)
            path = self._compiler.compile([instruction], previous=self._path)
            self._path = path
            logger.info(f"Appended segment to '{target_node}' - {len(path)} segments, {path.total_duration:.2f}s")
            return path

    def create_path(self, spec: Union[PathSpecification, Mapping[str, Any], Iterable[Any]]) -> Path:
        """Compile a path specification and load it without starting."""
        if isinstance(spec, Mapping):
            spec = PathSpecification.from_dict(spec)
        elif not isinstance(spec, PathSpecification):
            spec = PathSpecification.from_records(spec)

        with self._lock:
            path = self._compiler.compile(spec)
            self.set_path(path)
            return path

    def go_to(self, target_node: str, duration: Optional[float] = None) -> Path:
        """Fly to a node and start immediately."""
        return self.compile_and_start([PathInstruction(target_node, duration)])

    def go_to_geo(self, globe: str, latitude: float, longitude: float,
                  height: Optional[float] = None, duration: Optional[float] = None) -> Path:
        """
        Fly to a location above a globe's surface and start immediately.

        Args:
            globe: identifier of the reference body node
            latitude: degrees
            longitude: degrees
            height: above the surface; surface_height_factor * radius when omitted
            duration: travel time; settings.default_duration when omitted
        """
        node = self._scene.find_node(globe)
        if node is None:
            raise UnknownNode(globe, 0)

        radius = float(node.bounding_radius())
        if height is None:
            height = self.settings.surface_height_factor * radius
        geo = GeoPosition(latitude, longitude, height, globe, radius)
        local_position = tuple(to_cartesian(geo))
        return self.compile_and_start([PathInstruction(globe, duration, local_position)])

    # Playback

    def advance(self, delta_time: float) -> None:
        """
        Per-frame tick. Samples the pose at the current time and moves time
        forward by delta_time. Writes exactly one camera pose: the sample, or
        the path's end pose on the tick that reaches the end.

        Raises:
            ValueError: delta_time is negative or not finite
            PathInvariantError: no segment covers the current time while playing
        """
        if not (math.isfinite(delta_time) and delta_time >= 0):
            raise ValueError(f"delta_time must be finite and not negative, got: {delta_time}")

        with self._lock:
            if self._state is not PlayerState.PLAYING:
                return

            located = self._path.local_parameter(self._current_time)
            if located is None:
                raise PathInvariantError(
                    f"No segment covers time {self._current_time} of a "
                    f"{self._path.total_duration}s path",
                    details={'current_time': self._current_time, 'total_duration': self._path.total_duration},
                )

            self._current_time += delta_time
            if self._current_time >= self._path.total_duration - _END_TOLERANCE:
                # Final tick writes the end pose in place of the sample
                final = self._path.end_state
                self._write_pose(final.position, final.rotation, final.reference_node)
                self._state = PlayerState.IDLE
                logger.info(f"Reached end of path after {self._current_time:.2f}s")
                return

            index, t = located
            segment = self._path[index]
            eased = self._easing(t)
            position, rotation = segment.sample(eased)
            anchor = segment.start.reference_node if eased < 0.5 else segment.end.reference_node
            self._write_pose(position, rotation, anchor)

    def _write_pose(self, position: np.ndarray, rotation: np.ndarray, anchor: Optional[str]) -> None:
        self._camera.set_pose(np.array(position, dtype=float), np.array(rotation, dtype=float))
        if anchor and anchor != self._reference_node:
            self._reference_node = anchor
            if supports_anchor(self._camera):
                self._camera.set_anchor_node(anchor)
                logger.debug(f"Camera anchor switched to '{anchor}'")

    # Accessors

    def is_playing(self) -> bool:
        with self._lock:
            return self._state is PlayerState.PLAYING

    def total_duration(self) -> float:
        with self._lock:
            return self._path.total_duration

    def elapsed_time(self) -> float:
        with self._lock:
            return self._current_time

    @property
    def path(self) -> Path:
        with self._lock:
            return self._path

    @property
    def reference_node(self) -> Optional[str]:
        """Node the camera was last anchored to by the player."""
        with self._lock:
            return self._reference_node

    def current_segment(self) -> Optional[Tuple[int, PathSegment]]:
        """(index, segment) covering the current time, or None past the end."""
        with self._lock:
            return self._path.segment_at(self._current_time)

    def get_status(self) -> Dict[str, Any]:
        with self._lock:
            total = self._path.total_duration
            current = self._path.segment_at(self._current_time)
            progress = min(self._current_time / total, 1.0) if total > 0 else 0.0
            return {
                'state': self._state.value,
                'is_playing': self._state is PlayerState.PLAYING,
                'elapsed_time': self._current_time,
                'total_duration': total,
                'progress': progress,
                'active_segment': current[0] if current else None,
                'segment_count': len(self._path),
                'reference_node': self._reference_node,
            }


__all__ = ['AutoNavigationHandler']
