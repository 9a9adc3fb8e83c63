"""Forward dependency walk collecting sidecar scripts reachable from templates."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Set, Tuple

from twigsdc.app.resolver import TemplatePathResolver
from twigsdc.domain.references import extract_references
from twigsdc.domain.template import ResolvedTemplate, namespaced_key, strip_extension
from twigsdc.utils.log import get_logger

log = get_logger(__name__)

Frame = Tuple[ResolvedTemplate, Iterator[str]]


class ForwardDependencyWalker:
    """Depth-first walk over structural references.

    The visited set is keyed by the unresolved specifier string, so reference
    cycles terminate even before resolution completes. A template's sidecar
    script is recorded once all of its dependencies have been walked.
    """

    def __init__(
        self,
        resolver: TemplatePathResolver,
        *,
        extension: str = ".twig",
        script_extension: str = ".js",
    ) -> None:
        self._resolver = resolver
        self._extension = extension
        self._script_extension = script_extension

    def walk(self, specifiers: Iterable[str]) -> List[Path]:
        visited: Set[str] = set()
        assets: dict[Path, None] = {}
        for start in specifiers:
            if start in visited:
                continue
            visited.add(start)
            frame = self._enter(start)
            stack: List[Frame] = [frame] if frame is not None else []
            while stack:
                resolved, pending = stack[-1]
                following = next((spec for spec in pending if spec not in visited), None)
                if following is None:
                    stack.pop()
                    sidecar = self.sidecar_for(resolved)
                    if sidecar is not None:
                        assets.setdefault(sidecar, None)
                    continue
                visited.add(following)
                child = self._enter(following)
                if child is not None:
                    stack.append(child)
        return list(assets)

    def sidecar_for(self, resolved: ResolvedTemplate) -> Optional[Path]:
        source = resolved.source_path
        if source is None or not source.name.endswith(self._extension):
            return None
        script = source.with_name(strip_extension(source.name, self._extension) + self._script_extension)
        return script if script.is_file() else None

    def _enter(self, specifier: str) -> Optional[Frame]:
        resolved = self._resolve(specifier)
        if resolved is None:
            log.warning("dependency_unresolved", specifier=specifier)
            return None
        return resolved, iter(extract_references(resolved.content, self._extension))

    def _resolve(self, specifier: str) -> Optional[ResolvedTemplate]:
        resolved = self._resolver.resolve(specifier)
        if resolved is not None or "/" in specifier or specifier.startswith("@"):
            return resolved
        # Component convention: "card~compact" lives at <root>/card/card~compact.twig.
        file_name = strip_extension(specifier, self._extension)
        base_name = file_name.split("~", 1)[0]
        for namespace in self._resolver.table.names:
            candidate = namespaced_key(namespace, f"{base_name}/{file_name}{self._extension}")
            resolved = self._resolver.resolve(candidate)
            if resolved is not None:
                return resolved
        return None
