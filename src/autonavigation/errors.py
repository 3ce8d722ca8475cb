"""Domain-specific errors and helpers for the auto-navigation engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class ErrorPayload:
    """Structured error payload returned to scripting/UI callers."""

    code: str
    message: str
    details: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            'success': False,
            'error_code': self.code,
            'error': self.message,
        }
        if self.details:
            payload['details'] = self.details
        return payload


class AutoNavigationError(Exception):
    """Base exception for auto-navigation failures."""

    code: str = 'AUTONAVIGATION_ERROR'

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_payload(self) -> Dict[str, Any]:
        return ErrorPayload(self.code, self.message, self.details or None).to_dict()


class CompileError(AutoNavigationError):
    """Raised when an instruction list cannot be turned into a path."""

    code = 'COMPILE_ERROR'

    @property
    def instruction_index(self) -> Optional[int]:
        return self.details.get('instruction_index')


class UnknownNode(CompileError):
    code = 'UNKNOWN_NODE'

    def __init__(self, identifier: str, instruction_index: int) -> None:
        super().__init__(
            f"Failed creating path segment nr {instruction_index + 1}. "
            f"Could not find node '{identifier}' to target",
            details={'identifier': identifier, 'instruction_index': instruction_index},
        )
        self.identifier = identifier


class InvalidDuration(CompileError):
    code = 'INVALID_DURATION'

    def __init__(self, instruction_index: int, duration: Any = None) -> None:
        super().__init__(
            f"Failed creating path segment nr {instruction_index + 1}. "
            f"Duration must be larger than zero, got: {duration}",
            details={'instruction_index': instruction_index, 'duration': duration},
        )


class UnresolvedReferenceNode(CompileError):
    code = 'UNRESOLVED_REFERENCE_NODE'

    def __init__(self, identifier: Optional[str]) -> None:
        super().__init__(
            f"Could not resolve reference node '{identifier}' for Bezier control points",
            details={'identifier': identifier},
        )
        self.identifier = identifier


class InvalidSegment(AutoNavigationError):
    code = 'INVALID_SEGMENT'


class InvalidInstruction(AutoNavigationError):
    """A malformed instruction record, rejected before compilation."""

    code = 'INVALID_INSTRUCTION'

    def __init__(self, instruction_index: Optional[int], reason: str) -> None:
        if instruction_index is None:
            message = f"Could not read path specification: {reason}"
        else:
            message = f"Could not read instruction number {instruction_index + 1}: {reason}"
        super().__init__(
            message,
            details={'instruction_index': instruction_index, 'reason': reason},
        )


class EmptyPath(AutoNavigationError):
    code = 'EMPTY_PATH'

    def __init__(self, message: str = 'Cannot start an empty path') -> None:
        super().__init__(message)


class PathInvariantError(AutoNavigationError):
    """The loaded path no longer satisfies its own invariants. Never caught."""

    code = 'PATH_INVARIANT_VIOLATION'


def error_response(code: str, message: str, *, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return a standardised error payload."""
    return ErrorPayload(code, message, details).to_dict()


__all__ = [
    'ErrorPayload',
    'AutoNavigationError',
    'CompileError',
    'UnknownNode',
    'InvalidDuration',
    'UnresolvedReferenceNode',
    'InvalidSegment',
    'InvalidInstruction',
    'EmptyPath',
    'PathInvariantError',
    'error_response',
]
