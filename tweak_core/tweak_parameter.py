"""
Discovery input: one numeric literal offered to the tweak pane.
"""

import math
import re
from typing import Optional, Dict, Any

from .config import MAX_EXPECTED_TEXT_LENGTH
from .rewriter.value_formatter import ValueFormatter


def to_kebab_case(label: str) -> str:
    """'Font Size' -> 'font-size', 'Line Height (px)' -> 'line-height-px'"""
    return re.sub(r'[^a-z0-9]+', '-', label.lower()).strip('-')


class TweakParameter:
    def __init__(
        self,
        id: str,
        label: str,
        file: str,
        line: int,
        column: int,
        expected_text: str,
        min_value: float,
        max_value: float,
        current: Optional[float] = None,
        step: Optional[float] = None,
        unit: Optional[str] = None,
        element: Optional[str] = None
    ):
        if not id:
            raise ValueError("parameter id is required")
        if not file:
            raise ValueError(f"file is required for '{id}'")
        if not isinstance(line, int) or not isinstance(column, int) or line < 1 or column < 1:
            raise ValueError(f"line and column must be positive integers for '{id}'")
        if not expected_text or len(expected_text) > MAX_EXPECTED_TEXT_LENGTH:
            raise ValueError(
                f"expected text for '{id}' must be 1-{MAX_EXPECTED_TEXT_LENGTH} characters"
            )
        if not math.isfinite(min_value) or not math.isfinite(max_value):
            raise ValueError(f"min and max must be finite numbers for '{id}'")
        if min_value > max_value:
            raise ValueError(f"min ({min_value}) must not exceed max ({max_value}) for '{id}'")
        if step is not None and (not math.isfinite(step) or step <= 0):
            raise ValueError(f"step must be a positive finite number for '{id}'")

        if current is None:
            current = ValueFormatter.parse_value(expected_text)
            if current is None:
                raise ValueError(f"'{expected_text}' is not a numeric literal ('{id}')")
        elif not math.isfinite(current):
            raise ValueError(f"current value must be a finite number for '{id}'")

        self.id = id
        self.label = label or id
        self.file = file
        self.line = line
        self.column = column
        self.expected_text = expected_text
        self.current = float(current)
        self.min_value = float(min_value)
        self.max_value = float(max_value)
        self.step = float(step) if step is not None else None
        self.unit = unit
        self.element = element

    @property
    def effective_step(self) -> float:
        """
        Step used for keyboard nudges.

        The explicit step if given, otherwise a 1/2/5 x 10^n step close to
        1/100 of the range.
        """
        if self.step is not None:
            return self.step
        value_range = self.max_value - self.min_value
        if value_range <= 0:
            return 1.0
        raw_step = value_range / 100.0
        magnitude = 10 ** math.floor(math.log10(raw_step))
        normalized = raw_step / magnitude
        if normalized <= 1:
            nice_step = 1
        elif normalized <= 2:
            nice_step = 2
        elif normalized <= 5:
            nice_step = 5
        else:
            nice_step = 10
        return nice_step * magnitude

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TweakParameter':
        """
        Build from a discovery payload.

        Accepts both naming styles: 'file'/'filePath' and
        'expectedText'/'originalText'. A missing id is derived from the label.
        """
        if not isinstance(data, dict):
            raise ValueError(f"parameter must be an object, got {type(data).__name__}")

        label = data.get('label') or ''
        param_id = data.get('id') or to_kebab_case(label)
        file = data.get('file') or data.get('filePath')
        expected_text = data.get('expectedText') or data.get('originalText')

        missing = [name for name, value in (
            ('file', file), ('line', data.get('line')), ('column', data.get('column')),
            ('expectedText', expected_text), ('min', data.get('min')), ('max', data.get('max'))
        ) if value is None]
        if missing:
            raise ValueError(f"parameter '{param_id or label}' is missing: {', '.join(missing)}")

        return cls(
            id=param_id,
            label=label,
            file=file,
            line=data['line'],
            column=data['column'],
            expected_text=expected_text,
            min_value=data['min'],
            max_value=data['max'],
            current=data.get('current'),
            step=data.get('step'),
            unit=data.get('unit'),
            element=data.get('element')
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'label': self.label,
            'element': self.element,
            'file': self.file,
            'line': self.line,
            'column': self.column,
            'expectedText': self.expected_text,
            'current': self.current,
            'min': self.min_value,
            'max': self.max_value,
            'step': self.step,
            'unit': self.unit
        }
