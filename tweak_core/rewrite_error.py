"""
Typed failures for parameter rewrites.

Raised by the locate/read/write helpers and caught by FileRewriter, which hands
them back to the caller inside a RewriteResult.
"""

from typing import Any, Dict


class RewriteError(Exception):
    """Base class for a failed rewrite of one tracked parameter."""

    kind = "rewrite_error"

    def __init__(self, path: str, message: str):
        super().__init__(message)
        self.path = path

    def to_dict(self) -> Dict[str, Any]:
        return {
            'kind': self.kind,
            'path': self.path,
            'message': str(self)
        }


class VerificationFailed(RewriteError):
    """The expected literal was not found within the drift radius."""

    kind = "verification_failed"

    def __init__(self, param_id: str, expected: str, found: str, path: str = ''):
        super().__init__(
            path,
            f"Expected '{expected}' for '{param_id}' but found '{found}'"
        )
        self.param_id = param_id
        self.expected = expected
        self.found = found

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result['param_id'] = self.param_id
        result['expected'] = self.expected
        result['found'] = self.found
        return result


class FileReadError(RewriteError):
    """File missing, unreadable, or the tracked line no longer exists."""

    kind = "file_read_error"

    def __init__(self, path: str, reason: str = ''):
        message = f"Cannot read {path}"
        if reason:
            message += f": {reason}"
        super().__init__(path, message)


class WriteError(RewriteError):
    """The rewritten content could not be persisted."""

    kind = "write_error"

    def __init__(self, path: str, reason: str = ''):
        message = f"Cannot write {path}"
        if reason:
            message += f": {reason}"
        super().__init__(path, message)


class OutsideProjectRoot(RewriteError):
    """Target file resolves outside the configured project root."""

    kind = "outside_project_root"

    def __init__(self, path: str):
        super().__init__(path, f"Refusing to write outside project root: {path}")
