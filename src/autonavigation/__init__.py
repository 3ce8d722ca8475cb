"""Camera path navigation engine: path compilation and frame-driven playback."""

from .compiler import PathCompiler
from .config import AutoNavigationConfig, NavigationSettings
from .errors import (
    AutoNavigationError,
    CompileError,
    EmptyPath,
    InvalidDuration,
    InvalidInstruction,
    InvalidSegment,
    PathInvariantError,
    UnknownNode,
    UnresolvedReferenceNode,
)
from .geo import GeoPosition, to_cartesian
from .handler import AutoNavigationHandler
from .instructions import PathInstruction, PathSpecification
from .module import AutoNavigationModule
from .path import Path
from .segment import PathSegment
from .service import NavigationService
from .state import CameraState, CurveType, EasingType, PlayerState

__version__ = "0.1.0"

__all__ = [
    "AutoNavigationConfig",
    "AutoNavigationError",
    "AutoNavigationHandler",
    "AutoNavigationModule",
    "CameraState",
    "CompileError",
    "CurveType",
    "EasingType",
    "EmptyPath",
    "GeoPosition",
    "InvalidDuration",
    "InvalidInstruction",
    "InvalidSegment",
    "NavigationService",
    "NavigationSettings",
    "Path",
    "PathCompiler",
    "PathInstruction",
    "PathInvariantError",
    "PathSegment",
    "PathSpecification",
    "PlayerState",
    "UnknownNode",
    "UnresolvedReferenceNode",
    "to_cartesian",
]
