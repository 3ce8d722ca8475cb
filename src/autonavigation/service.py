"""Service layer exposing auto-navigation operations to scripting/UI callers."""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, conlist

from .errors import AutoNavigationError, error_response
from .path import Path


class NavigationModel(BaseModel):
    """Base model configuration with permissive extra handling."""

    model_config = ConfigDict(extra='allow', populate_by_name=True)


class GoToPayload(NavigationModel):
    target: str = Field(min_length=1, alias='node')
    duration: Optional[float] = Field(default=None, gt=0)


class GoToGeoPayload(NavigationModel):
    globe: str = Field(min_length=1)
    latitude: float = Field(ge=-90, le=90)
    longitude: float
    height: Optional[float] = None
    duration: Optional[float] = Field(default=None, gt=0)


class AddToPathPayload(NavigationModel):
    target: str = Field(min_length=1, alias='node')
    duration: Optional[float] = Field(default=None, gt=0)
    position: Optional[conlist(float, min_length=3, max_length=3)] = None


def _validation_error(exc: ValidationError) -> Dict[str, Any]:
    errors = [
        {'field': '.'.join(str(item) for item in error.get('loc', ())), 'message': error.get('msg', '')}
        for error in exc.errors()
    ]
    return error_response('VALIDATION_ERROR', 'Invalid request payload', details={'errors': errors})


class NavigationService:
    """Wrap handler operations into dict payloads."""

    def __init__(self, handler) -> None:
        self._handler = handler

    # ------------------------------------------------------------------
    # Helpers
    @staticmethod
    def _path_summary(path: Path) -> Dict[str, Any]:
        return {
            'segment_count': len(path),
            'total_duration': path.total_duration,
            'segments': [
                {
                    'index': index,
                    'target': segment.end.reference_node,
                    'start_time': segment.start_time,
                    'duration': segment.duration,
                    'curve_type': segment.curve_type.value,
                }
                for index, segment in enumerate(path)
            ],
        }

    # ------------------------------------------------------------------
    # Path operations
    def go_to(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            request = GoToPayload.model_validate(payload)
            path = self._handler.go_to(request.target, request.duration)
        except ValidationError as exc:
            return _validation_error(exc)
        except AutoNavigationError as exc:
            return exc.to_payload()
        return {'success': True, 'message': f"Flying to '{request.target}'", **self._path_summary(path)}

    def go_to_geo(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            request = GoToGeoPayload.model_validate(payload)
            path = self._handler.go_to_geo(
                request.globe, request.latitude, request.longitude,
                height=request.height, duration=request.duration,
            )
        except ValidationError as exc:
            return _validation_error(exc)
        except AutoNavigationError as exc:
            return exc.to_payload()
        return {
            'success': True,
            'message': f"Flying to ({request.latitude}, {request.longitude}) on '{request.globe}'",
            **self._path_summary(path),
        }

    def create_path(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            path = self._handler.create_path(payload)
        except AutoNavigationError as exc:
            return exc.to_payload()
        return {'success': True, 'message': 'Path created', **self._path_summary(path)}

    def add_to_path(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            request = AddToPathPayload.model_validate(payload)
            position = tuple(request.position) if request.position is not None else None
            path = self._handler.append_to_path(request.target, request.duration, position)
        except ValidationError as exc:
            return _validation_error(exc)
        except AutoNavigationError as exc:
            return exc.to_payload()
        return {'success': True, 'message': f"Added '{request.target}' to path", **self._path_summary(path)}

    def start_path(self) -> Dict[str, Any]:
        try:
            self._handler.start()
        except AutoNavigationError as exc:
            return exc.to_payload()
        return {'success': True, 'message': 'Path started', 'total_duration': self._handler.total_duration()}

    def stop_path(self) -> Dict[str, Any]:
        was_playing = self._handler.is_playing()
        self._handler.stop()
        return {
            'success': True,
            'message': 'Path stopped' if was_playing else 'No path playing',
            'elapsed_time': self._handler.elapsed_time(),
        }

    def clear_path(self) -> Dict[str, Any]:
        self._handler.clear_path()
        return {'success': True, 'message': 'Path cleared'}

    def path_status(self) -> Dict[str, Any]:
        return {'success': True, **self._handler.get_status()}


__all__ = ['NavigationService', 'GoToPayload', 'GoToGeoPayload', 'AddToPathPayload']
