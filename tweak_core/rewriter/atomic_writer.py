import os
import shutil
import tempfile
from pathlib import Path


def read_text_exact(path: Path) -> str:
    """Read a UTF-8 file without newline translation, so '\\r\\n' survives a round trip."""
    with open(path, 'r', encoding='utf-8', newline='') as f:
        return f.read()


def write_text_atomic(path: Path, content: str):
    """
    Replace path with content in one step.

    Content goes to a temp file in the same directory, is fsynced, then
    renamed over the target, so readers see either the old or the new file.
    The target's permission bits are kept.
    """
    path = Path(path)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tweak", dir=path.parent)
    try:
        with os.fdopen(fd, 'w', encoding='utf-8', newline='') as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        if path.exists():
            shutil.copymode(path, tmp_name)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise
