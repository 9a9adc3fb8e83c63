"""Filesystem helpers for walking template roots."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator, List

from twigsdc.utils.log import get_logger

log = get_logger(__name__)


def iter_template_files(root: Path, extension: str) -> Iterator[Path]:
    """Yield every file under ``root`` whose name ends with ``extension``.

    Unreadable directories are logged and skipped; the walk continues.
    Entries are visited in sorted order so scans are reproducible.
    """

    def _on_error(exc: OSError) -> None:
        log.warning("walk_failed", directory=exc.filename, error=exc.strerror or str(exc))

    if not root.is_dir():
        log.warning("walk_failed", directory=str(root), error="not a directory")
        return
    for current, dirs, files in os.walk(root, onerror=_on_error):
        dirs.sort()
        for filename in sorted(files):
            if filename.endswith(extension):
                candidate = Path(current) / filename
                if candidate.is_file():
                    yield candidate


def relative_posix(path: Path, root: Path) -> str:
    return path.relative_to(root).as_posix()


def read_text(path: Path) -> str | None:
    """Read a template file, logging and returning ``None`` on I/O errors."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        log.warning("read_failed", path=str(path), error=str(exc))
        return None


def collect_template_files(roots: List[Path], extension: str) -> List[Path]:
    seen: dict[Path, None] = {}
    for root in roots:
        for path in iter_template_files(root, extension):
            seen.setdefault(path, None)
    return list(seen)


def lexical_relative(path: Path, root: Path) -> str | None:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return None


def tolerant_relative(path: Path, root: Path) -> str | None:
    """Containment test that ignores symlinks, trailing separators and case."""
    real_path = os.path.realpath(path)
    real_root = os.path.realpath(root).rstrip(os.sep) or os.sep
    folded_path = os.path.normcase(real_path)
    folded_root = os.path.normcase(real_root)
    prefix = folded_root if folded_root.endswith(os.sep) else folded_root + os.sep
    if not folded_path.startswith(prefix):
        return None
    return Path(os.path.relpath(real_path, real_root)).as_posix()
