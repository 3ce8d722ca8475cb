"""
Easing functions for camera path playback.

Each function takes the local segment parameter t (0.0 to 1.0) and returns an
eased value. All functions map 0 -> 0 and 1 -> 1 so segment endpoints are hit
exactly.
"""

import logging
from typing import Callable, Dict, Union

from .state import EasingType


logger = logging.getLogger(__name__)

EasingFunction = Callable[[float], float]


class EasingFunctions:
    """Collection of easing functions for path playback"""

    @staticmethod
    def linear(t: float) -> float:
        """Linear interpolation - constant speed"""
        return t

    @staticmethod
    def ease_in(t: float) -> float:
        """Ease in - slow start, accelerating"""
        return t * t

    @staticmethod
    def ease_out(t: float) -> float:
        """Ease out - fast start, decelerating"""
        return 1 - (1 - t) * (1 - t)

    @staticmethod
    def ease_in_out(t: float) -> float:
        """Ease in/out - slow start and end, fast middle"""
        if t < 0.5:
            return 2 * t * t
        return 1 - pow(-2 * t + 2, 2) / 2

    @staticmethod
    def cubic_ease_in(t: float) -> float:
        return t * t * t

    @staticmethod
    def cubic_ease_out(t: float) -> float:
        return 1 - pow(1 - t, 3)

    @staticmethod
    def cubic_ease_in_out(t: float) -> float:
        """Cubic ease in/out - default for camera paths"""
        if t < 0.5:
            return 4 * t * t * t
        return 1 - pow(-2 * t + 2, 3) / 2


DEFAULT_EASING = EasingType.CUBIC_EASE_IN_OUT


def get_easing_function(easing_type: EasingType) -> EasingFunction:
    """Get the easing function for a given easing type"""
    return EASING_FUNCTION_MAP.get(easing_type, EASING_FUNCTION_MAP[DEFAULT_EASING])


def get_easing_function_by_name(easing_name: str) -> EasingFunction:
    """Get easing function by string name"""
    try:
        easing_type = EasingType(easing_name)
    except ValueError:
        logger.warning(f"Unknown easing '{easing_name}', using {DEFAULT_EASING.value}")
        easing_type = DEFAULT_EASING
    return get_easing_function(easing_type)


def resolve_easing(easing: Union[EasingType, str, EasingFunction, None]) -> EasingFunction:
    """Accept an EasingType, its name, or any float -> float callable."""
    if easing is None:
        return get_easing_function(DEFAULT_EASING)
    if isinstance(easing, EasingType):
        return get_easing_function(easing)
    if isinstance(easing, str):
        return get_easing_function_by_name(easing)
    if callable(easing):
        return easing
    raise TypeError(f"Unsupported easing strategy: {easing!r}")


# Function lookup map for performance
EASING_FUNCTION_MAP: Dict[EasingType, EasingFunction] = {
    EasingType.LINEAR: EasingFunctions.linear,
    EasingType.EASE_IN: EasingFunctions.ease_in,
    EasingType.EASE_OUT: EasingFunctions.ease_out,
    EasingType.EASE_IN_OUT: EasingFunctions.ease_in_out,
    EasingType.CUBIC_EASE_IN: EasingFunctions.cubic_ease_in,
    EasingType.CUBIC_EASE_OUT: EasingFunctions.cubic_ease_out,
    EasingType.CUBIC_EASE_IN_OUT: EasingFunctions.cubic_ease_in_out,
}


__all__ = [
    'EasingType',
    'EasingFunctions',
    'EasingFunction',
    'DEFAULT_EASING',
    'get_easing_function',
    'get_easing_function_by_name',
    'resolve_easing',
    'EASING_FUNCTION_MAP',
]
