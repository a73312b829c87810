from typing import Dict, Optional, Any


class TweakResponse:
    """What a finished tweak session hands back to the requesting client."""

    def __init__(
        self,
        answers: Dict[str, float],
        action: Optional[str] = None,
        cancelled: bool = False,
        dismissed: bool = False
    ):
        if action not in (None, 'file', 'agent'):
            raise ValueError(f"Unsupported action: {action}")
        self.dialog_type = 'tweak'
        self.answers = answers
        self.action = action
        self.cancelled = cancelled
        self.dismissed = dismissed

    def to_dict(self) -> Dict[str, Any]:
        return {
            'dialogType': self.dialog_type,
            'answers': self.answers,
            'action': self.action,
            'cancelled': self.cancelled,
            'dismissed': self.dismissed
        }

    def __repr__(self) -> str:
        return f"TweakResponse(action={self.action}, cancelled={self.cancelled}, answers={len(self.answers)})"
