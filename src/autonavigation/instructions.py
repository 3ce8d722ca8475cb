"""Path instructions and the path specification deserialization boundary."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, conlist

from .errors import InvalidInstruction


@dataclass(frozen=True)
class PathInstruction:
    """
    One declarative leg of a path request.

    Attributes:
        target_node: identifier of the node to travel to
        duration: optional travel time; the compiler rejects values <= 0
        position: optional end position in the target node's local frame
    """
    target_node: str
    duration: Optional[float] = None
    position: Optional[Tuple[float, float, float]] = field(default=None)

    def __post_init__(self) -> None:
        if self.position is not None:
            object.__setattr__(self, 'position', tuple(float(v) for v in self.position))

    def to_dict(self) -> Dict[str, Any]:
        record: Dict[str, Any] = {'Target': self.target_node}
        if self.duration is not None:
            record['Duration'] = self.duration
        if self.position is not None:
            record['Position'] = list(self.position)
        return record


class PathInstructionPayload(BaseModel):
    """Record-level validation of a single instruction."""

    model_config = ConfigDict(extra='ignore', populate_by_name=True)

    target: str = Field(alias='Target', min_length=1)
    duration: Optional[float] = Field(default=None, alias='Duration', gt=0)
    position: Optional[conlist(float, min_length=3, max_length=3)] = Field(default=None, alias='Position')

    def to_instruction(self) -> PathInstruction:
        position = tuple(self.position) if self.position is not None else None
        return PathInstruction(self.target, self.duration, position)


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = '.'.join(str(item) for item in error.get('loc', ()))
        message = error.get('msg', 'invalid value')
        parts.append(f"{location}: {message}" if location else message)
    return '; '.join(parts) or str(exc)


def parse_instruction(record: Any, index: int) -> PathInstruction:
    """Validate one raw record. Raises InvalidInstruction with the record's index."""
    if isinstance(record, PathInstruction):
        return record
    if not isinstance(record, Mapping):
        raise InvalidInstruction(index, f"expected a mapping, got {type(record).__name__}")
    try:
        payload = PathInstructionPayload.model_validate(dict(record))
    except ValidationError as exc:
        raise InvalidInstruction(index, _format_validation_error(exc)) from exc
    return payload.to_instruction()


class PathSpecification(Sequence[PathInstruction]):
    """An ordered, non-empty list of path instructions."""

    def __init__(self, instructions: Iterable[PathInstruction]):
        self._instructions: Tuple[PathInstruction, ...] = tuple(instructions)
        if not self._instructions:
            raise InvalidInstruction(None, 'no instructions')

    @classmethod
    def from_records(cls, records: Iterable[Any]) -> 'PathSpecification':
        if isinstance(records, (str, bytes, Mapping)):
            raise InvalidInstruction(None, 'instructions must be a list')
        return cls(parse_instruction(record, index) for index, record in enumerate(records))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'PathSpecification':
        """Read `{"Instructions": [...]}` (lowercase key accepted)."""
        if not isinstance(data, Mapping):
            raise InvalidInstruction(None, 'path specification must be a mapping')
        records = data.get('Instructions', data.get('instructions'))
        if records is None:
            raise InvalidInstruction(None, "missing 'Instructions'")
        return cls.from_records(records)

    @property
    def instructions(self) -> Tuple[PathInstruction, ...]:
        return self._instructions

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return {'Instructions': [instruction.to_dict() for instruction in self._instructions]}

    def __getitem__(self, index):
        return self._instructions[index]

    def __len__(self) -> int:
        return len(self._instructions)

    def __iter__(self) -> Iterator[PathInstruction]:
        return iter(self._instructions)

    def __repr__(self) -> str:
        return f"PathSpecification({list(self._instructions)!r})"


__all__ = [
    'PathInstruction',
    'PathInstructionPayload',
    'PathSpecification',
    'parse_instruction',
]
