"""
TweakSession - the slider pane's side of one live editing session.

Holds the latest value of every slider, the set of parameters the pane has
disabled after a failed write, and the ways a session ends:

1. save_to_file - flush pending writes and keep them
2. tell_agent   - drop pending writes, revert every file, return the desired values
3. cancel       - drop pending writes and return nothing
"""

import threading
import time
import uuid
from pathlib import Path
from typing import Dict, Optional, Set, Any

from .config import DEFAULT_DEBOUNCE_SECONDS
from .result import RewriteResult
from .rewriter.file_rewriter import FileRewriter
from .tool_config import ToolConfig
from .tweak_parameter import TweakParameter
from .tweak_request import TweakRequest
from .tweak_response import TweakResponse
from .write_scheduler import WriteScheduler
from . import logger


class TweakSession:
    def __init__(self, request: TweakRequest, project_root: Optional[Path] = None,
                 debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
                 session_id: Optional[str] = None):
        self.id = session_id or str(uuid.uuid4())
        self.request = request
        self.rewriter = FileRewriter(request.parameters, project_root)
        self.values: Dict[str, float] = {p.id: p.current for p in request.parameters}
        self.disabled: Set[str] = set()
        self.response: Optional[TweakResponse] = None
        self._params: Dict[str, TweakParameter] = {p.id: p for p in request.parameters}
        self._lock = threading.Lock()
        self.last_activity = time.monotonic()
        self.scheduler = WriteScheduler(self.rewriter, debounce_seconds,
                                        on_result=self._on_write_result)
        logger.info(f"Tweak session {self.id} started with {len(self._params)} parameters, "
                    f"project root {self.rewriter.project_root}")

    @classmethod
    def from_request(cls, request: TweakRequest, tool_config: Optional[ToolConfig] = None) -> 'TweakSession':
        """Create a session using the configured debounce delay and root inference."""
        tool_config = tool_config or ToolConfig()
        project_root = request.resolve_project_root(infer=tool_config.infer_project_root)
        return cls(request, project_root=project_root,
                   debounce_seconds=tool_config.debounce_seconds)

    @property
    def finished(self) -> bool:
        return self.response is not None

    def touch(self):
        self.last_activity = time.monotonic()

    def is_idle(self, timeout: float) -> bool:
        """True when no client has used the session for timeout seconds."""
        return time.monotonic() - self.last_activity >= timeout

    def set_value(self, param_id: str, value: float) -> bool:
        """
        Record a slider move and schedule the write.

        Returns False when the parameter is disabled; the value is ignored.
        """
        param = self._get_param(param_id)
        self._ensure_active()
        clamped = min(max(float(value), param.min_value), param.max_value)
        with self._lock:
            if param_id in self.disabled:
                return False
            self.values[param_id] = clamped
        self.scheduler.schedule(param_id, clamped)
        return True

    def nudge(self, param_id: str, direction: int) -> Optional[float]:
        """Move a slider one effective step up (+1) or down (-1). Returns the new value."""
        param = self._get_param(param_id)
        with self._lock:
            current = self.values.get(param_id, param.current)
        new_value = min(max(current + param.effective_step * direction, param.min_value),
                        param.max_value)
        if not self.set_value(param_id, new_value):
            return None
        return new_value

    def reset_param(self, param_id: str) -> RewriteResult:
        self._get_param(param_id)
        self._ensure_active()
        self.scheduler.cancel_pending(param_id)
        result = self.rewriter.reset_param(param_id)
        self._record_reset(result)
        return result

    def revert_all(self) -> Dict[str, RewriteResult]:
        self._ensure_active()
        self.scheduler.cancel_pending()
        results = self.rewriter.reset_all()
        for result in results.values():
            self._record_reset(result)
        return results

    def save_to_file(self) -> TweakResponse:
        self._ensure_active()
        self.scheduler.flush()
        with self._lock:
            answers = dict(self.values)
        return self._finish(TweakResponse(answers=answers, action='file'))

    def tell_agent(self) -> TweakResponse:
        self._ensure_active()
        with self._lock:
            desired = dict(self.values)
        self.scheduler.cancel_pending()
        self.rewriter.reset_all()
        return self._finish(TweakResponse(answers=desired, action='agent'))

    def cancel(self, dismissed: bool = False) -> TweakResponse:
        self._ensure_active()
        self.scheduler.cancel_pending()
        return self._finish(TweakResponse(answers={}, cancelled=True, dismissed=dismissed))

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            values = dict(self.values)
            disabled = sorted(self.disabled)
        params = []
        for param_id in self.rewriter.param_ids():
            tracked = self.rewriter.get_param(param_id)
            entry = tracked.to_dict()
            entry['label'] = self._params[param_id].label
            entry['min'] = tracked.min_value
            entry['max'] = tracked.max_value
            entry['step'] = self._params[param_id].effective_step
            params.append(entry)
        snapshot = {
            'id': self.id,
            'values': values,
            'disabled': disabled,
            'parameters': params,
            'finished': self.finished
        }
        if self.response is not None:
            snapshot['response'] = self.response.to_dict()
        return snapshot

    def _get_param(self, param_id: str) -> TweakParameter:
        if param_id not in self._params:
            raise KeyError(f"Unknown parameter: {param_id}")
        return self._params[param_id]

    def _ensure_active(self):
        if self.finished:
            raise RuntimeError(f"Tweak session {self.id} is already finished")

    def _record_reset(self, result: RewriteResult):
        with self._lock:
            if result.ok:
                self.values[result.param_id] = result.value
                self.disabled.discard(result.param_id)
            else:
                self.disabled.add(result.param_id)

    def _on_write_result(self, result: RewriteResult):
        # Runs on the writer thread
        with self._lock:
            if result.ok:
                self.disabled.discard(result.param_id)
            else:
                self.disabled.add(result.param_id)
                logger.warning(f"Session {self.id}: disabled '{result.param_id}': {result.message}")

    def _finish(self, response: TweakResponse) -> TweakResponse:
        self.scheduler.stop()
        self.response = response
        logger.info(f"Tweak session {self.id} finished: {response}")
        return response
