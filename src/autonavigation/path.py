"""
Immutable ordered sequence of contiguous path segments.
"""

import math
from typing import Iterable, Iterator, Optional, Tuple

from .errors import InvalidSegment
from .segment import PathSegment
from .state import CameraState


_TIME_TOLERANCE = 1e-9


class Path:
    """
    A camera path.

    Either empty, or segment 0 starts at time 0 and every following segment
    starts exactly where the previous one ends.
    """

    __slots__ = ('_segments', '_total_duration')

    def __init__(self, segments: Iterable[PathSegment] = ()):
        self._segments: Tuple[PathSegment, ...] = tuple(segments)
        self._validate()
        self._total_duration = self._segments[-1].end_time if self._segments else 0.0

    def _validate(self) -> None:
        expected_start = 0.0
        for index, segment in enumerate(self._segments):
            if not math.isclose(segment.start_time, expected_start, rel_tol=0.0, abs_tol=_TIME_TOLERANCE):
                raise InvalidSegment(
                    f"Segment {index} starts at {segment.start_time}, expected {expected_start}",
                    details={'segment_index': index, 'start_time': segment.start_time},
                )
            expected_start = segment.end_time

    @classmethod
    def empty(cls) -> 'Path':
        return cls(())

    @property
    def segments(self) -> Tuple[PathSegment, ...]:
        return self._segments

    @property
    def total_duration(self) -> float:
        return self._total_duration

    @property
    def end_state(self) -> Optional[CameraState]:
        """End state of the last segment, None for an empty path."""
        return self._segments[-1].end if self._segments else None

    def segment_at(self, time: float) -> Optional[Tuple[int, PathSegment]]:
        """
        First segment whose end lies strictly after `time`.

        A time exactly on a boundary selects the later segment. Returns None
        when `time` is at or past the total duration.
        """
        for index, segment in enumerate(self._segments):
            if segment.end_time > time:
                return index, segment
        return None

    def local_parameter(self, time: float) -> Optional[Tuple[int, float]]:
        """(segment index, t clamped to [0, 1]) at global `time`, before easing."""
        found = self.segment_at(time)
        if found is None:
            return None
        index, segment = found
        t = (time - segment.start_time) / segment.duration
        return index, min(max(t, 0.0), 1.0)

    def extended(self, segments: Iterable[PathSegment]) -> 'Path':
        """New path with `segments` appended. They must continue at total_duration."""
        return Path(self._segments + tuple(segments))

    def __len__(self) -> int:
        return len(self._segments)

    def __iter__(self) -> Iterator[PathSegment]:
        return iter(self._segments)

    def __bool__(self) -> bool:
        return bool(self._segments)

    def __getitem__(self, index: int) -> PathSegment:
        return self._segments[index]

    def __repr__(self) -> str:
        return f"Path(segments={len(self._segments)}, total_duration={self._total_duration})"
