"""
FileRewriter - writes live slider values back into the literals they came from.
"""

import math
import threading
from pathlib import Path
from typing import Dict, Iterable, List, Optional, TYPE_CHECKING

from .atomic_writer import read_text_exact, write_text_atomic
from .text_locator import TextLocator
from .tracked_param import ParamState, TrackedParam
from .value_formatter import ValueFormatter
from ..project_root import canonicalize, is_within_root, resolve_param_path
from ..result import RewriteResult
from ..rewrite_error import (
    RewriteError, VerificationFailed, FileReadError, WriteError, OutsideProjectRoot
)
from .. import logger

if TYPE_CHECKING:
    from ..tweak_parameter import TweakParameter


class FileRewriter:
    """
    Owns the tracked literals of one editing session.

    Every apply runs under one lock: locate, format, write and the column
    shift of siblings on the same line happen as a unit, so at most one
    write per file is ever in flight.
    """

    def __init__(self, parameters: Iterable['TweakParameter'],
                 project_root: Optional[Path] = None):
        self.project_root = canonicalize(project_root) if project_root is not None else None
        self._params: Dict[str, TrackedParam] = {}
        self._lock = threading.RLock()

        for p in parameters:
            if p.id in self._params:
                raise ValueError(f"Duplicate parameter id: {p.id}")
            self._params[p.id] = TrackedParam(
                id=p.id,
                file_path=resolve_param_path(p.file, self.project_root),
                line=p.line,
                column=p.column,
                original_text=p.expected_text,
                original_value=p.current,
                min_value=p.min_value,
                max_value=p.max_value,
                step=p.step,
                unit=p.unit
            )
            logger.debug(f"init param '{p.id}': file={p.file} L{p.line}:C{p.column} "
                         f"expectedText='{p.expected_text}'")

    def param_ids(self) -> List[str]:
        return list(self._params)

    def get_param(self, param_id: str) -> Optional[TrackedParam]:
        return self._params.get(param_id)

    def apply_change(self, param_id: str, new_value: float) -> RewriteResult:
        """
        Write new_value (clamped to the parameter's bounds) into the file.

        Returns a success result carrying the written value, or a failure
        result carrying the RewriteError. Never raises for rewrite failures.
        """
        return self._apply(param_id, new_value, clamp=True)

    def reset_param(self, param_id: str) -> RewriteResult:
        """Restore the originally discovered value of one parameter."""
        param = self._params.get(param_id)
        if param is None:
            logger.warning(f"reset requested for unknown param '{param_id}'")
            return RewriteResult.success(param_id, value=0.0, message='unknown parameter')

        result = self._apply(param_id, param.original_value, clamp=False)
        if result.ok:
            return RewriteResult.success(param_id, value=param.original_value, message='reset')
        return result

    def reset_all(self) -> Dict[str, RewriteResult]:
        """Reset every parameter independently; one failure does not stop the others."""
        with self._lock:
            results = {param_id: self.reset_param(param_id) for param_id in self._params}
        failed = [pid for pid, r in results.items() if not r.ok]
        if failed:
            logger.warning(f"reset_all: {len(failed)} of {len(results)} failed: {', '.join(failed)}")
        else:
            logger.info(f"reset_all: {len(results)} parameters restored")
        return results

    def current_values(self) -> Dict[str, float]:
        """Numeric value of each current_text, or the original value if unparsable."""
        with self._lock:
            values = {}
            for param_id, param in self._params.items():
                value = ValueFormatter.parse_value(param.current_text)
                values[param_id] = value if value is not None else param.original_value
            return values

    def disabled_ids(self) -> List[str]:
        with self._lock:
            return [pid for pid, p in self._params.items() if p.disabled]

    def _apply(self, param_id: str, new_value: float, clamp: bool) -> RewriteResult:
        param = self._params.get(param_id)
        if param is None:
            logger.warning(f"apply requested for unknown param '{param_id}'")
            return RewriteResult.success(param_id, message='unknown parameter')

        with self._lock:
            param.state = ParamState.WRITING
            try:
                value = self._target_value(param, new_value, clamp)
                written_text = self._rewrite(param, value)
            except RewriteError as e:
                param.state = ParamState.DISABLED
                param.last_error = e
                logger.warning(f"apply failed for '{param_id}': {e}")
                return RewriteResult.failure(param_id, e)
            except Exception as e:
                logger.exception(f"unexpected error applying '{param_id}': {e}")
                error = WriteError(str(param.file_path), f"unexpected error: {e}")
                param.state = ParamState.DISABLED
                param.last_error = error
                return RewriteResult.failure(param_id, error)

            param.state = ParamState.CLEAN
            param.last_error = None
            return RewriteResult.success(param_id, value=value, message=written_text)

    def _target_value(self, param: TrackedParam, new_value: float, clamp: bool) -> float:
        value = float(new_value)
        if math.isnan(value):
            # NaN cannot be rendered; rewrite the current value instead
            current = ValueFormatter.parse_value(param.current_text)
            value = current if current is not None else param.original_value
        if clamp:
            value = param.clamp(value)
        if not math.isfinite(value):
            raise WriteError(str(param.file_path), f"cannot write non-finite value {value}")
        return value

    def _rewrite(self, param: TrackedParam, value: float) -> str:
        """Locate, replace, persist and adjust siblings. Returns the written text."""
        if not is_within_root(param.file_path, self.project_root):
            raise OutsideProjectRoot(str(param.file_path))

        lines = self._read_lines(param.file_path)
        line_index = param.line - 1
        if line_index >= len(lines):
            logger.error(f"line {param.line} out of range for '{param.id}' "
                         f"({param.file_path} has {len(lines)} lines)")
            raise FileReadError(str(param.file_path), f"line {param.line} out of range")

        line = lines[line_index]
        match_col = self._locate(param, line)

        old_text = param.current_text
        new_text = ValueFormatter.format_value(value, old_text, param.step)
        lines[line_index] = line[:match_col] + new_text + line[match_col + len(old_text):]

        try:
            write_text_atomic(param.file_path, '\n'.join(lines))
        except OSError as e:
            logger.error(f"write error for '{param.id}': {e}")
            raise WriteError(str(param.file_path), str(e)) from e

        resolved_column = match_col + 1
        self._shift_siblings(param, resolved_column, len(new_text) - len(old_text))
        param.column = resolved_column
        param.current_text = new_text
        logger.debug(f"wrote '{param.id}': '{old_text}' -> '{new_text}' "
                     f"at {param.file_path.name} L{param.line}:C{param.column}")
        return new_text

    def _read_lines(self, file_path: Path) -> List[str]:
        try:
            content = read_text_exact(file_path)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"file read error: cannot read '{file_path}': {e}")
            raise FileReadError(str(file_path), str(e)) from e
        return content.split('\n')

    def _locate(self, param: TrackedParam, line: str) -> int:
        """0-indexed column of param.current_text on line, or VerificationFailed."""
        hint_col = param.column - 1
        match_col = TextLocator.find_expected_text(param.current_text, line, hint_col)
        if match_col is None:
            found = TextLocator.safe_substring(line, hint_col, len(param.current_text))
            logger.error(f"verification failed for '{param.id}': expected '{param.current_text}' "
                         f"at L{param.line}:C{param.column}, found '{found}'")
            logger.debug(f"full line ({len(line)} chars): '{line}'")
            raise VerificationFailed(param.id, param.current_text, found, str(param.file_path))

        if match_col != hint_col:
            logger.info(f"column adjusted for '{param.id}': C{param.column} -> C{match_col + 1}")
        return match_col

    def _shift_siblings(self, param: TrackedParam, column: int, length_diff: int):
        """Move later literals on the same file and line by the change in length."""
        if length_diff == 0:
            return
        for other in self._params.values():
            if other is param:
                continue
            if other.file_path != param.file_path or other.line != param.line:
                continue
            if other.column > column:
                other.column += length_diff

