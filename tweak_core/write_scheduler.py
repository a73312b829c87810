"""
WriteScheduler - debounced slider writes on a single background worker.

Each parameter has at most one pending value; a new value restarts its
debounce timer. Released values go through one queue to one worker thread,
so writes are applied one at a time and off the caller's thread.
"""

import queue
import threading
from typing import Callable, Dict, Optional, Tuple

from .config import DEFAULT_DEBOUNCE_SECONDS
from .result import RewriteResult
from .rewriter.file_rewriter import FileRewriter
from . import logger

ResultCallback = Callable[[RewriteResult], None]


class WriteScheduler:
    def __init__(self, rewriter: FileRewriter, delay: float = DEFAULT_DEBOUNCE_SECONDS,
                 on_result: Optional[ResultCallback] = None):
        self.rewriter = rewriter
        self.delay = delay
        self.on_result = on_result
        self._queue: 'queue.Queue[Tuple[str, float]]' = queue.Queue()
        self._timers: Dict[str, threading.Timer] = {}
        self._pending: Dict[str, float] = {}
        self._generation: Dict[str, int] = {}
        self._lock = threading.Lock()
        self._stopped = threading.Event()
        self._worker = threading.Thread(target=self._run, name="tweak-writer", daemon=True)
        self._worker.start()

    def schedule(self, param_id: str, value: float):
        """Write value for param_id once no newer value arrives within the delay."""
        if self._stopped.is_set():
            raise RuntimeError("WriteScheduler is stopped")
        with self._lock:
            self._cancel_timer(param_id)
            self._pending[param_id] = value
            generation = self._generation.get(param_id, 0) + 1
            self._generation[param_id] = generation
            timer = threading.Timer(self.delay, self._release, args=(param_id, generation))
            timer.daemon = True
            self._timers[param_id] = timer
            timer.start()

    def has_pending(self, param_id: Optional[str] = None) -> bool:
        with self._lock:
            if param_id is None:
                return bool(self._pending)
            return param_id in self._pending

    def flush(self):
        """Release every pending value now and wait until all queued writes finish."""
        if self._stopped.is_set():
            raise RuntimeError("WriteScheduler is stopped")
        with self._lock:
            for param_id in list(self._timers):
                self._cancel_timer(param_id)
            pending = list(self._pending.items())
            self._pending.clear()
            for item in pending:
                self._queue.put(item)
        self._queue.join()

    def cancel_pending(self, param_id: Optional[str] = None):
        """Drop values that have not started writing. Writes in progress still finish."""
        with self._lock:
            ids = [param_id] if param_id is not None else list(self._pending)
            for pid in ids:
                self._cancel_timer(pid)
                self._pending.pop(pid, None)

            # Released but not yet picked up by the worker
            kept = []
            while True:
                try:
                    item = self._queue.get_nowait()
                except queue.Empty:
                    break
                self._queue.task_done()
                if param_id is not None and item[0] != param_id:
                    kept.append(item)
            for item in kept:
                self._queue.put(item)

    def stop(self, flush: bool = False):
        if self._stopped.is_set():
            return
        if flush:
            self.flush()
        else:
            self.cancel_pending()
        self._queue.join()
        self._stopped.set()
        self._worker.join(timeout=2)
        logger.debug("write worker stopped")

    def _cancel_timer(self, param_id: str):
        timer = self._timers.pop(param_id, None)
        if timer is not None:
            timer.cancel()

    def _release(self, param_id: str, generation: int):
        with self._lock:
            # A newer schedule() superseded this timer
            if self._generation.get(param_id) != generation:
                return
            self._timers.pop(param_id, None)
            if param_id not in self._pending:
                return
            self._queue.put((param_id, self._pending.pop(param_id)))

    def _run(self):
        logger.debug("write worker starting")
        while not self._stopped.is_set():
            try:
                param_id, value = self._queue.get(timeout=0.1)
            except queue.Empty:
                continue

            try:
                result = self.rewriter.apply_change(param_id, value)
                if self.on_result is not None:
                    self.on_result(result)
            except Exception as e:
                logger.exception(f"Error in write worker: {e}")
            finally:
                self._queue.task_done()
