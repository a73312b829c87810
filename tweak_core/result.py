from enum import Enum
from datetime import datetime
from typing import Optional, Dict, Any

from .rewrite_error import RewriteError


class RewriteStatus(Enum):
    SUCCESS = "success"
    FAILED = "failed"


class RewriteResult:
    """Outcome of one apply or reset of a tracked parameter."""

    def __init__(
        self,
        status: RewriteStatus,
        param_id: str,
        message: str = '',
        value: Optional[float] = None,
        error: Optional[RewriteError] = None,
        timestamp: Optional[str] = None
    ):
        if not isinstance(status, RewriteStatus):
            raise TypeError(f"status must be RewriteStatus enum, got {type(status)}")

        self.status = status
        self.param_id = param_id
        self.message = message
        self.value = value
        self.error = error
        self.timestamp = timestamp or datetime.now().isoformat()

    @classmethod
    def success(cls, param_id: str, value: Optional[float] = None,
                message: str = 'ok') -> 'RewriteResult':
        return cls(RewriteStatus.SUCCESS, param_id, message=message, value=value)

    @classmethod
    def failure(cls, param_id: str, error: RewriteError) -> 'RewriteResult':
        return cls(RewriteStatus.FAILED, param_id, message=str(error), error=error)

    @property
    def ok(self) -> bool:
        return self.status == RewriteStatus.SUCCESS

    def to_dict(self) -> Dict[str, Any]:
        result_dict = {
            'status': self.status.value,
            'param_id': self.param_id,
            'message': self.message,
            'timestamp': self.timestamp
        }

        if self.value is not None:
            result_dict['value'] = self.value

        if self.error is not None:
            result_dict['error'] = self.error.to_dict()

        return result_dict

    def __repr__(self) -> str:
        return f"RewriteResult(status={self.status.value}, message={self.message[:50]}...)"
