
import logging
from pathlib import Path

from ignore_lens.engine.pipeline import scope_candidates

logger = logging.getLogger(__name__)

def _with_directories(files: list[str]) -> list[str]:
    # every ancestor directory is listed once with a trailing slash
    directories: dict[str, None] = {}
    for rel in files:
        parts = rel.split("/")
        for i in range(1, len(parts)):
            directories["/".join(parts[:i]) + "/"] = None
    return files + list(directories)

def scan_workspace(root: Path, include_directories: bool = True) -> list[str]:
    """List files under ``root`` as ``/``-separated relative paths.

    A missing root or an I/O error yields an empty list, so callers evaluate
    against nothing rather than fail.
    """
    root = Path(root)
    if not root.is_dir():
        logger.warning("Workspace root %s is not a directory; using empty file list", root)
        return []
    try:
        files = sorted(
            rel.as_posix()
            for rel in (p.relative_to(root) for p in root.rglob("*") if p.is_file())
            if ".git" not in rel.parts[:-1]
        )
    except OSError as exc:
        logger.warning("Workspace scan of %s failed; using empty file list", root, exc_info=exc)
        return []
    return _with_directories(files) if include_directories else files

def ignore_file_base_dir(root: Path, ignore_file: Path) -> str | None:
    try:
        rel = Path(ignore_file).resolve().parent.relative_to(Path(root).resolve()).as_posix()
    except ValueError:
        logger.warning("Ignore file %s is outside workspace %s", ignore_file, root)
        return None
    return None if rel == "." else rel

def scope_to_ignore_file(paths: list[str], root: Path, ignore_file: Path) -> list[str]:
    return scope_candidates(paths, ignore_file_base_dir(root, ignore_file))
