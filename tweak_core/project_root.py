"""
Project root handling: canonical paths, containment checks and git-based discovery.
"""

from pathlib import Path
from typing import Optional, Union

import git

from . import logger

PathLike = Union[str, Path]


def canonicalize(path: PathLike) -> Path:
    """Absolute path with '..' and symlinks resolved (the file need not exist)."""
    return Path(path).expanduser().resolve()


def is_within_root(path: PathLike, root: Optional[PathLike]) -> bool:
    """
    True if path equals root or is nested under it.

    No root configured means every path is allowed.
    """
    if root is None:
        return True
    resolved = canonicalize(path)
    resolved_root = canonicalize(root)
    return resolved == resolved_root or resolved_root in resolved.parents


def resolve_param_path(file: PathLike, project_root: Optional[PathLike]) -> Path:
    """Resolve a discovery path: absolute paths stay, relative ones hang off the root."""
    file_path = Path(file).expanduser()
    if not file_path.is_absolute() and project_root is not None:
        file_path = Path(project_root) / file_path
    return canonicalize(file_path)


def discover_project_root(start: PathLike) -> Optional[Path]:
    """
    Return the working tree of the git repository enclosing start.

    Returns None when start is not inside a git work tree (or is a bare repo).
    """
    try:
        repo = git.Repo(Path(start), search_parent_directories=True)
    except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError):
        logger.debug(f"No git repository found above {start}")
        return None

    working_tree_dir = repo.working_tree_dir
    repo.close()
    if working_tree_dir is None:
        return None
    root = canonicalize(working_tree_dir)
    logger.debug(f"Discovered project root {root} from {start}")
    return root
