"""Namespace table mapping namespace ids to ordered template roots."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Mapping, Sequence, Tuple, Union

DirectorySpec = Union[str, os.PathLike, Sequence[Union[str, os.PathLike]]]


def _as_list(value: DirectorySpec) -> List[Union[str, os.PathLike]]:
    if isinstance(value, (str, os.PathLike)):
        return [value]
    return list(value)


def _absolute(base_dir: Path, value: Union[str, os.PathLike]) -> Path:
    # Lexical normalisation only; existence is never checked here.
    return Path(os.path.normpath(base_dir / Path(value)))


@dataclass(frozen=True)
class NamespaceTable:
    """Immutable, ordered namespace -> roots mapping plus plain template roots.

    Registration order is significant: the first root holding a match wins
    during resolution.
    """

    entries: Tuple[Tuple[str, Tuple[Path, ...]], ...] = ()
    roots: Tuple[Path, ...] = field(default_factory=tuple)

    @classmethod
    def from_config(
        cls,
        namespaces: Mapping[str, DirectorySpec],
        base_dir: Path,
        *,
        roots: Iterable[Union[str, os.PathLike]] = (),
    ) -> "NamespaceTable":
        entries = tuple(
            (str(namespace), tuple(_absolute(base_dir, item) for item in _as_list(paths)))
            for namespace, paths in namespaces.items()
        )
        plain = tuple(_absolute(base_dir, item) for item in roots)
        return cls(entries=entries, roots=plain)

    def __contains__(self, namespace: object) -> bool:
        return any(name == namespace for name, _ in self.entries)

    def __iter__(self) -> Iterator[Tuple[str, Tuple[Path, ...]]]:
        return iter(self.entries)

    def get(self, namespace: str) -> Tuple[Path, ...]:
        for name, paths in self.entries:
            if name == namespace:
                return paths
        return ()

    @property
    def names(self) -> List[str]:
        return [name for name, _ in self.entries]

    def all_roots(self) -> List[Tuple[str | None, Path]]:
        """Every registered root in scan order; ``None`` marks a plain root."""
        registered: List[Tuple[str | None, Path]] = [(None, root) for root in self.roots]
        for name, paths in self.entries:
            registered.extend((name, path) for path in paths)
        return registered

    def to_dict(self) -> Dict[str, List[str]]:
        return {name: [str(path) for path in paths] for name, paths in self.entries}
