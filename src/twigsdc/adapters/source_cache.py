"""In-memory template source cache owned by one plugin instance."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional

from twigsdc.adapters.fs_walk import iter_template_files, read_text, relative_posix
from twigsdc.domain.namespace import NamespaceTable
from twigsdc.domain.template import TemplateRecord, namespaced_key
from twigsdc.utils.log import get_logger

log = get_logger(__name__)


def _path_id(path: Path) -> Path:
    return Path(os.path.normpath(path))


def suffix_match(keys: Iterable[str], fragment: str) -> Optional[str]:
    """Pick the key ending with ``fragment`` on a path-segment boundary.

    Ties go to the shortest key, then lexical order.
    """
    needle = fragment.replace("\\", "/").lstrip("/")
    if not needle:
        return None
    best: Optional[str] = None
    for key in keys:
        if key != needle and not key.endswith("/" + needle):
            continue
        if best is None or (len(key), key) < (len(best), best):
            best = key
    return best


class TemplateSourceCache:
    """Canonical key -> template text store.

    The cache never touches the filesystem after ``init``; the resolver does
    the reading and memoises results through ``set``. Every source file keeps
    the first key it was registered under as its canonical key.
    """

    def __init__(self, extension: str = ".twig") -> None:
        self._extension = extension
        self._records: Dict[str, TemplateRecord] = {}
        self._keys_by_path: Dict[Path, List[str]] = {}

    # ------------------------------------------------------------------
    # Population
    # ------------------------------------------------------------------

    def init(self, table: NamespaceTable) -> int:
        """Replace the cache contents with a full scan of every registered root."""
        self._records.clear()
        self._keys_by_path.clear()
        for namespace, root in table.all_roots():
            for path in iter_template_files(root, self._extension):
                relative = relative_posix(path, root)
                key = namespaced_key(namespace, relative) if namespace else relative
                if key in self._records:
                    continue
                content = read_text(path)
                if content is None:
                    continue
                self.set(key, content, source_path=path)
        log.info("templates_loaded", count=len(self._records), roots=len(table.all_roots()))
        return len(self._records)

    def set(self, key: str, content: str, source_path: Path | None = None) -> TemplateRecord:
        record = self._records.get(key)
        if record is None:
            record = TemplateRecord(key=key, content=content, source_path=source_path)
            self._records[key] = record
        else:
            record.content = content
            if source_path is not None and record.source_path != source_path:
                if record.source_path is not None:
                    self._forget(key, record.source_path)
                record.source_path = source_path
        if record.source_path is not None:
            keys = self._keys_by_path.setdefault(_path_id(record.source_path), [])
            if key not in keys:
                keys.append(key)
        return record

    def _forget(self, key: str, path: Path) -> None:
        keys = self._keys_by_path.get(_path_id(path))
        if keys and key in keys:
            keys.remove(key)
            if not keys:
                del self._keys_by_path[_path_id(path)]

    def set_path(self, path: Path, content: str) -> List[str]:
        """Overwrite every key aliasing ``path``; returns the updated keys."""
        keys = self.keys_for_path(path)
        for key in keys:
            self._records[key].content = content
        return keys

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, key: str) -> Optional[TemplateRecord]:
        return self._records.get(key)

    def canonical_key(self, path: Path) -> Optional[str]:
        keys = self._keys_by_path.get(_path_id(path))
        return keys[0] if keys else None

    def keys_for_path(self, path: Path) -> List[str]:
        return list(self._keys_by_path.get(_path_id(path), ()))

    def suffix_lookup(self, fragment: str) -> Optional[TemplateRecord]:
        key = suffix_match(self._records, fragment)
        return self._records[key] if key is not None else None

    def keys(self) -> List[str]:
        return list(self._records)

    def snapshot(self) -> Dict[str, str]:
        return {key: record.content for key, record in self._records.items()}

    def __contains__(self, key: object) -> bool:
        return key in self._records

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)
