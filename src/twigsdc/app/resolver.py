"""Template path resolution.

``TemplatePathResolver.resolve`` turns any accepted specifier into a
canonical key and its content. Strategies run in a fixed order and the first
hit wins:

1. ``@namespace/rest`` probed under each namespace root, in registration order.
2. A bare relative path probed under each plain template root.
3. A key already present in the cache.
4. An existing absolute path, keyed relative to the root that contains it
   (or by the path itself when no registered root does).
5. Namespace-root probing: absolute paths matched after realpath/case
   normalisation (cached keys first), bare paths joined to each namespace root.
6. Suffix match against cached keys.

Bare specifiers without the template extension are tried as given, with the
extension, then with the ``.<kind><ext>`` compound suffix. ``ns:component``
is expanded to ``@ns/component/component`` first and, failing that, found by
name anywhere under the namespace roots.
"""

from __future__ import annotations

import os
import posixpath
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from twigsdc.adapters.fs_walk import iter_template_files, lexical_relative, read_text, tolerant_relative
from twigsdc.adapters.source_cache import TemplateSourceCache
from twigsdc.domain.namespace import NamespaceTable
from twigsdc.domain.template import (
    ResolvedTemplate,
    clean_specifier,
    expand_shorthand,
    namespaced_key,
    parse_shorthand,
    split_namespaced,
    strip_extension,
)
from twigsdc.utils.log import get_logger

log = get_logger(__name__)

Strategy = Callable[[str], Optional[ResolvedTemplate]]


def _contained(relative: str) -> Optional[str]:
    """Normalise a root-relative path; ``None`` when it would leave the root."""
    normalised = posixpath.normpath(relative)
    if normalised.startswith("/") or normalised == ".." or normalised.startswith("../"):
        return None
    return normalised


def _same_file(left: Path, right: Path) -> bool:
    return os.path.normpath(left) == os.path.normpath(right)


def _from_root(source: Optional[Path], root: Path, relative: str) -> bool:
    return source is None or tolerant_relative(source, root) == relative


class TemplateResolutionError(RuntimeError):
    """Raised at the module-load boundary when no strategy resolves a specifier."""

    def __init__(
        self,
        specifier: str,
        *,
        roots: List[str],
        namespaces: dict[str, List[str]],
        known_keys: List[str],
    ) -> None:
        self.specifier = specifier
        self.roots = roots
        self.namespaces = namespaces
        self.known_keys = known_keys
        lines = [
            f"Cannot find template: {specifier}",
            f"Template directories: {', '.join(roots) or '(none)'}",
            "Namespaces: "
            + (", ".join(f"@{name} -> [{', '.join(paths)}]" for name, paths in namespaces.items()) or "(none)"),
            f"Available templates: {', '.join(known_keys) or '(none)'}",
        ]
        super().__init__("\n".join(lines))


class TemplatePathResolver:
    def __init__(
        self,
        table: NamespaceTable,
        cache: TemplateSourceCache,
        *,
        extension: str = ".twig",
        kind: str = "html",
    ) -> None:
        self._table = table
        self._cache = cache
        self._extension = extension
        self._kind = kind
        self._strategies: Tuple[Strategy, ...] = (
            self._from_namespace,
            self._from_roots,
            self._from_cache,
            self._from_absolute,
            self._from_namespace_roots,
        )

    @property
    def table(self) -> NamespaceTable:
        return self._table

    @property
    def cache(self) -> TemplateSourceCache:
        return self._cache

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def resolve(self, specifier: str) -> Optional[ResolvedTemplate]:
        spec = clean_specifier(specifier)
        if not spec:
            return None
        shorthand = None if os.path.isabs(spec) else parse_shorthand(spec)
        if shorthand is not None:
            namespace, component = shorthand
            component = strip_extension(component, self._extension)
            result = self._resolve_candidates(expand_shorthand(namespace, component))
            if result is None:
                result = self._find_nested_component(namespace, component)
        else:
            result = self._resolve_candidates(spec)
        if result is None:
            log.debug("template_unresolved", specifier=specifier)
        else:
            log.debug("template_resolved", specifier=specifier, key=result.key)
        return result

    def require(self, specifier: str) -> ResolvedTemplate:
        result = self.resolve(specifier)
        if result is None:
            error = TemplateResolutionError(
                clean_specifier(specifier),
                roots=[str(root) for _, root in self._table.all_roots()],
                namespaces=self._table.to_dict(),
                known_keys=self._cache.keys(),
            )
            log.error("template_not_found", specifier=specifier, known=len(error.known_keys))
            raise error
        return result

    def refresh(self, path: Path) -> Optional[ResolvedTemplate]:
        """Re-read ``path`` from disk into every key that aliases it."""
        path = Path(os.path.normpath(path))
        keys = self._cache.keys_for_path(path)
        if not keys:
            return self.resolve(path.as_posix())
        content = read_text(path)
        if content is None:
            return None
        self._cache.set_path(path, content)
        return ResolvedTemplate(key=keys[0], content=content, source_path=path)

    # ------------------------------------------------------------------
    # Candidate expansion
    # ------------------------------------------------------------------

    def candidates(self, spec: str) -> List[str]:
        if spec.endswith(self._extension):
            return [spec]
        return [spec, f"{spec}{self._extension}", f"{spec}.{self._kind}{self._extension}"]

    def _resolve_candidates(self, spec: str) -> Optional[ResolvedTemplate]:
        candidates = self.candidates(spec)
        for candidate in candidates:
            for strategy in self._strategies:
                result = strategy(candidate)
                if result is not None:
                    return result
        for candidate in candidates:
            result = self._from_suffix(candidate)
            if result is not None:
                return result
        return None

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------

    def _from_namespace(self, spec: str) -> Optional[ResolvedTemplate]:
        parts = split_namespaced(spec)
        if parts is None:
            return None
        namespace, rest = parts
        rest = _contained(rest)
        if rest is None:
            return None
        for root in self._table.get(namespace):
            path = root / rest
            if path.is_file():
                return self._memoize(namespaced_key(namespace, rest), path)
        return None

    def _from_roots(self, spec: str) -> Optional[ResolvedTemplate]:
        if spec.startswith("@") or os.path.isabs(spec):
            return None
        relative = _contained(spec)
        if relative is None:
            return None
        for root in self._table.roots:
            path = root / relative
            if path.is_file():
                return self._memoize(relative, path)
        return None

    def _from_cache(self, spec: str) -> Optional[ResolvedTemplate]:
        key: Optional[str] = spec
        if os.path.isabs(spec):
            key = None
            absolute = Path(os.path.normpath(spec))
            for root in self._table.roots:
                key = lexical_relative(absolute, root)
                if key is not None:
                    break
        record = self._cache.get(key) if key is not None else None
        if record is None:
            return None
        if record.source_path is not None:
            canonical = self._cache.canonical_key(record.source_path)
            if canonical is not None and canonical != record.key:
                record = self._cache.get(canonical) or record
        return ResolvedTemplate(key=record.key, content=record.content, source_path=record.source_path)

    def _from_absolute(self, spec: str) -> Optional[ResolvedTemplate]:
        if not os.path.isabs(spec):
            return None
        path = Path(os.path.normpath(spec))
        if not path.is_file():
            return None
        for classify in (lexical_relative, tolerant_relative):
            for namespace, root in self._table.all_roots():
                relative = classify(path, root)
                if relative is not None:
                    key = namespaced_key(namespace, relative) if namespace else relative
                    return self._memoize(key, path)
        return self._memoize(path.as_posix(), path)

    def _from_namespace_roots(self, spec: str) -> Optional[ResolvedTemplate]:
        absolute = os.path.isabs(spec)
        for namespace, roots in self._table:
            for root in roots:
                if absolute:
                    path = Path(os.path.normpath(spec))
                    relative = tolerant_relative(path, root)
                    if relative is None:
                        continue
                    key = namespaced_key(namespace, relative)
                    record = self._cache.get(key)
                    if record is not None and _from_root(record.source_path, root, relative):
                        return ResolvedTemplate(key=record.key, content=record.content, source_path=record.source_path)
                    if path.is_file():
                        return self._memoize(key, path)
                elif not spec.startswith("@"):
                    relative = _contained(spec)
                    if relative is None:
                        return None
                    path = root / relative
                    if path.is_file():
                        return self._memoize(namespaced_key(namespace, relative), path)
        return None

    def _from_suffix(self, spec: str) -> Optional[ResolvedTemplate]:
        record = self._cache.suffix_lookup(spec)
        if record is None:
            return None
        return ResolvedTemplate(key=record.key, content=record.content, source_path=record.source_path)

    def _find_nested_component(self, namespace: str, component: str) -> Optional[ResolvedTemplate]:
        filename = f"{component.rsplit('/', 1)[-1]}{self._extension}"
        for root in self._table.get(namespace):
            for path in iter_template_files(root, self._extension):
                if path.name == filename:
                    return self._memoize(namespaced_key(namespace, path.relative_to(root).as_posix()), path)
        return None

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _memoize(self, key: str, path: Path) -> Optional[ResolvedTemplate]:
        content = read_text(path)
        if content is None:
            return None
        existing = self._cache.get(key)
        if existing is not None and existing.source_path is not None and not _same_file(existing.source_path, path):
            # The key belongs to the file an earlier root shadows this one with.
            key = path.as_posix()
        canonical = self._cache.canonical_key(path)
        self._cache.set(key, content, source_path=path)
        if canonical is not None and canonical != key:
            self._cache.set_path(path, content)
            key = canonical
        return ResolvedTemplate(key=key, content=content, source_path=path)
