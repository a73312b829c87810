from pathlib import Path
from typing import List, Optional, Dict, Any

from .config import MAX_PARAMETERS
from .project_root import canonicalize, discover_project_root
from .tweak_parameter import TweakParameter

POSITIONS = ('left', 'right', 'center')
MAX_BODY_LENGTH = 1000


class TweakRequest:
    def __init__(
        self,
        body: str,
        parameters: List[TweakParameter],
        position: str = 'left',
        title: Optional[str] = None,
        project_path: Optional[str] = None
    ):
        if not body or len(body) > MAX_BODY_LENGTH:
            raise ValueError(f"body must be 1-{MAX_BODY_LENGTH} characters")
        if not parameters or len(parameters) > MAX_PARAMETERS:
            raise ValueError(f"between 1 and {MAX_PARAMETERS} parameters are required")
        if position not in POSITIONS:
            raise ValueError(f"position must be one of {', '.join(POSITIONS)}")

        ids = [p.id for p in parameters]
        dupes = sorted({pid for pid in ids if ids.count(pid) > 1})
        if dupes:
            raise ValueError(f"Duplicate parameter ids: {', '.join(dupes)}")

        self.body = body
        self.parameters = parameters
        self.position = position
        self.title = title
        self.project_path = project_path

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TweakRequest':
        if not isinstance(data, dict):
            raise ValueError("request must be a JSON object")
        raw_params = data.get('parameters')
        if not isinstance(raw_params, list):
            raise ValueError("parameters must be a list")
        return cls(
            body=data.get('body', ''),
            parameters=[TweakParameter.from_dict(p) for p in raw_params],
            position=data.get('position') or 'left',
            title=data.get('title'),
            project_path=data.get('project_path') or data.get('projectPath')
        )

    def resolve_project_root(self, infer: bool = True) -> Optional[Path]:
        """
        Root that bounds every write of this request.

        An explicit project_path wins. Otherwise, when infer is set, the git
        work tree enclosing the first absolute parameter file (or the current
        directory) is used. None means writes are not bounded.
        """
        if self.project_path:
            return canonicalize(self.project_path)
        if not infer:
            return None

        start = Path.cwd()
        for p in self.parameters:
            file_path = Path(p.file).expanduser()
            if file_path.is_absolute():
                start = file_path.parent
                break
        return discover_project_root(start)
