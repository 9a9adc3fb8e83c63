"""Bundler integration: module resolution, module load and hot-update hooks."""

from __future__ import annotations

import os
from pathlib import Path
from textwrap import dedent
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set

from twigsdc.adapters.source_cache import TemplateSourceCache
from twigsdc.app.resolver import TemplatePathResolver
from twigsdc.app.reverse_index import ReverseDependencyIndex
from twigsdc.app.walker import ForwardDependencyWalker
from twigsdc.domain.template import clean_specifier
from twigsdc.settings import PluginSettings, load_settings
from twigsdc.utils.log import get_logger

log = get_logger(__name__)

PLUGIN_NAME = "twigsdc-precompile"

_MODULE_TEMPLATE = dedent(
    '''\
    """Precompiled template module for {key}."""

    from twigsdc.runtime import build_renderer

    TEMPLATE_KEY = {key!r}

    SOURCES = {sources!r}

    NAMESPACES = {namespaces!r}

    ASSETS = {assets!r}

    renderer = build_renderer(TEMPLATE_KEY, SOURCES, NAMESPACES, extension={extension!r})


    def render(context=None):
        return renderer(context)
    '''
)


def render_module(
    key: str,
    sources: Mapping[str, str],
    namespaces: Mapping[str, Sequence[str]],
    assets: Sequence[Path] = (),
    *,
    extension: str = ".twig",
) -> str:
    """Return Python source exposing ``render(context)`` for ``key``."""
    return _MODULE_TEMPLATE.format(
        key=key,
        sources=dict(sources),
        namespaces={name: list(paths) for name, paths in namespaces.items()},
        assets=[str(asset) for asset in assets],
        extension=extension,
    )


def _path_id(value: str | Path) -> Path:
    return Path(os.path.normpath(value))


class TwigBundlePlugin:
    """One plugin instance owns one cache, resolver, walker and reverse index."""

    name = PLUGIN_NAME

    def __init__(self, settings: PluginSettings) -> None:
        self._settings = settings
        self._extension = settings.template_extension
        self._include = settings.include_pattern
        self._cache = TemplateSourceCache(self._extension)
        self._cache.init(settings.namespaces)
        self._resolver = TemplatePathResolver(
            settings.namespaces,
            self._cache,
            extension=self._extension,
            kind=settings.kind,
        )
        self._walker = ForwardDependencyWalker(
            self._resolver,
            extension=self._extension,
            script_extension=settings.script_extension,
        )
        self._reverse = ReverseDependencyIndex(settings.namespaces, extension=self._extension)
        self._modules_by_key: Dict[str, Set[str]] = {}
        self._key_by_module: Dict[str, str] = {}

    @classmethod
    def from_config(cls, path: Path) -> "TwigBundlePlugin":
        return cls(load_settings(path))

    @property
    def settings(self) -> PluginSettings:
        return self._settings

    @property
    def cache(self) -> TemplateSourceCache:
        return self._cache

    @property
    def resolver(self) -> TemplatePathResolver:
        return self._resolver

    @property
    def walker(self) -> ForwardDependencyWalker:
        return self._walker

    @property
    def reverse_index(self) -> ReverseDependencyIndex:
        return self._reverse

    def modules_for(self, key: str) -> Set[str]:
        return set(self._modules_by_key.get(key, ()))

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def resolve_id(self, specifier: str) -> Optional[str]:
        return specifier if self._include.search(specifier) else None

    def load(self, module_id: str) -> Optional[str]:
        clean = clean_specifier(module_id)
        if not self._include.search(clean):
            return None
        log.info("template_load", module=module_id)
        resolved = self._resolver.require(clean)
        self._modules_by_key.setdefault(resolved.key, set()).add(module_id)
        self._key_by_module[module_id] = resolved.key
        assets = self._walker.walk([resolved.key])
        return render_module(
            resolved.key,
            self._cache.snapshot(),
            self._settings.namespaces.to_dict(),
            assets,
            extension=self._extension,
        )

    def handle_hot_update(self, file: str | Path, known_module_ids: Iterable[str]) -> List[str]:
        """Return the known module ids made stale by a change to ``file``."""
        path = _path_id(file)
        if not path.name.endswith(self._extension):
            return []
        log.info("hot_update", file=str(path))
        updated = self._resolver.refresh(path)
        if updated is None:
            log.warning("hot_update_unresolved", file=str(path))
            return []

        referrers = self._reverse.referrers_of([str(path)])
        stale_files = {path, *(_path_id(referrer) for referrer in referrers)}
        stale_keys = {updated.key}
        for stale in stale_files:
            stale_keys.update(self._cache.keys_for_path(stale))

        affected: List[str] = []
        for module_id in known_module_ids:
            if module_id in affected:
                continue
            if self._is_affected(module_id, stale_files, stale_keys):
                affected.append(module_id)
        log.info("hot_update_modules", file=str(path), referrers=len(referrers), modules=len(affected))
        return affected

    def _is_affected(self, module_id: str, stale_files: Set[Path], stale_keys: Set[str]) -> bool:
        clean = clean_specifier(module_id)
        if not clean.endswith(self._extension):
            return False
        if self._key_by_module.get(module_id) in stale_keys:
            return True
        return os.path.isabs(clean) and _path_id(clean) in stale_files
