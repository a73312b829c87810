"""
In-memory record of one numeric literal under live management.
"""

from enum import Enum
from pathlib import Path
from typing import Optional, Dict, Any, TYPE_CHECKING

if TYPE_CHECKING:
    from ..rewrite_error import RewriteError


class ParamState(Enum):
    CLEAN = "clean"
    WRITING = "writing"
    DISABLED = "disabled"


class TrackedParam:
    """
    A literal at (file_path, line, column), 1-indexed.

    line, column and current_text follow the file as it is rewritten;
    original_text and original_value never change and drive reset.
    """

    def __init__(
        self,
        id: str,
        file_path: Path,
        line: int,
        column: int,
        original_text: str,
        original_value: float,
        min_value: float,
        max_value: float,
        step: Optional[float] = None,
        unit: Optional[str] = None
    ):
        if min_value > max_value:
            raise ValueError(f"min ({min_value}) must not exceed max ({max_value}) for '{id}'")
        if line < 1 or column < 1:
            raise ValueError(f"line and column are 1-indexed for '{id}', got L{line}:C{column}")
        if not original_text:
            raise ValueError(f"original text is required for '{id}'")

        self.id = id
        self.file_path = Path(file_path)
        self.line = line
        self.column = column
        self.current_text = original_text
        self.original_text = original_text
        self.original_value = original_value
        self.min_value = min_value
        self.max_value = max_value
        self.step = step
        self.unit = unit
        self.state = ParamState.CLEAN
        self.last_error: Optional['RewriteError'] = None

    @property
    def disabled(self) -> bool:
        return self.state == ParamState.DISABLED

    def clamp(self, value: float) -> float:
        return min(max(value, self.min_value), self.max_value)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'id': self.id,
            'file_path': str(self.file_path),
            'line': self.line,
            'column': self.column,
            'current_text': self.current_text,
            'original_text': self.original_text,
            'state': self.state.value
        }
        if self.last_error is not None:
            result['error'] = self.last_error.to_dict()
        return result

    def __repr__(self) -> str:
        return (f"TrackedParam(id={self.id}, {self.file_path.name} "
                f"L{self.line}:C{self.column} '{self.current_text}', {self.state.value})")
