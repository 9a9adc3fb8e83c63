"""Component-aware loader wrapping a base TemplateLoader."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Mapping, MutableMapping, Optional, Sequence

from twigsdc.adapters.source_cache import suffix_match
from twigsdc.domain.template import (
    component_name,
    expand_shorthand,
    is_component_name,
    parse_shorthand,
    strip_extension,
)
from twigsdc.ports.template_loader import TemplateHandle, TemplateLoader, TemplateNotFoundError, TemplateSource
from twigsdc.utils.log import get_logger

log = get_logger(__name__)

METADATA_KEY = "_sdc"


class ComponentTemplate:
    """Handle whose ``render`` injects component metadata into the context."""

    def __init__(self, handle: TemplateHandle, *, component: str, loaded_at: str) -> None:
        self._handle = handle
        self.component = component
        self.loaded_at = loaded_at

    @property
    def handle(self) -> TemplateHandle:
        return self._handle

    def metadata(self) -> Dict[str, Any]:
        return {
            "component_name": self.component,
            "is_component": True,
            "loaded_at": self.loaded_at,
        }

    def render(self, context: Optional[Mapping[str, Any]] = None) -> str:
        merged: Dict[str, Any] = dict(context or {})
        merged[METADATA_KEY] = self.metadata()
        return self._handle.render(merged)


class ComponentLoader(TemplateLoader):
    """Adds ``@namespace`` and ``namespace:component`` lookups to a base loader.

    Plain names go straight to the base loader. Namespaced names are looked up
    in the adapter's own template map: exact key first, then the shorthand
    convention, then a suffix match.
    """

    def __init__(
        self,
        base: TemplateLoader,
        templates: MutableMapping[str, str],
        namespaces: Mapping[str, Sequence[str]] | None = None,
        *,
        extension: str = ".twig",
    ) -> None:
        self._base = base
        self._templates = templates
        self._namespaces = dict(namespaces or {})
        self._extension = extension

    @property
    def base(self) -> TemplateLoader:
        return self._base

    @property
    def namespaces(self) -> Dict[str, Sequence[str]]:
        return dict(self._namespaces)

    def get_source(self, name: str) -> TemplateSource:
        if "@" not in name and ":" not in name:
            return self._base.get_source(name)
        if name in self._templates:
            return TemplateSource(code=self._templates[name], path=name, name=name)
        shorthand = parse_shorthand(name)
        if shorthand is not None:
            namespace, component = shorthand
            return self._by_shorthand(namespace, strip_extension(component, self._extension))
        for candidate in (name, f"{name}{self._extension}"):
            key = suffix_match(self._templates, candidate)
            if key is not None:
                return TemplateSource(code=self._templates[key], path=key, name=key)
        raise TemplateNotFoundError(name)

    def get_source_context(self, name: str) -> str:
        return self.get_source(name).code

    def get_cache_key(self, name: str) -> str:
        source = self.get_source(name)
        if self._base.exists(source.name):
            return self._base.get_cache_key(source.name)
        return source.name

    def exists(self, name: str) -> bool:
        try:
            self.get_source(name)
        except TemplateNotFoundError:
            log.debug("template_missing", name=name)
            return False
        return True

    def is_fresh(self, name: str, timestamp: float) -> bool:
        try:
            key = self.get_source(name).name
        except TemplateNotFoundError:
            return False
        return self._base.is_fresh(key, timestamp)

    def load(self, environment: Any, name: str, path: str | None = None) -> TemplateHandle:
        try:
            handle = self._base.load(environment, name, path)
        except Exception as exc:
            log.error("template_load_failed", name=name, error=str(exc))
            raise
        if not is_component_name(name):
            return handle
        return ComponentTemplate(
            handle,
            component=component_name(name, self._extension),
            loaded_at=datetime.now(timezone.utc).isoformat(),
        )

    def add_templates(self, templates: Mapping[str, str]) -> None:
        self._templates.update(templates)
        self._base.add_templates(templates)

    def set_template(self, name: str, code: str) -> None:
        self._templates[name] = code
        self._base.set_template(name, code)

    def _by_shorthand(self, namespace: str, component: str) -> TemplateSource:
        if namespace not in self._namespaces:
            log.debug("namespace_unregistered", namespace=namespace)
        exact = expand_shorthand(namespace, component, self._extension)
        if exact in self._templates:
            return TemplateSource(code=self._templates[exact], path=exact, name=exact)
        prefix = f"@{namespace}/"
        suffix = f"/{component.rsplit('/', 1)[-1]}{self._extension}"
        matches = sorted(
            (key for key in self._templates if key.startswith(prefix) and key.endswith(suffix)),
            key=lambda key: (len(key), key),
        )
        if matches:
            key = matches[0]
            return TemplateSource(code=self._templates[key], path=key, name=key)
        raise TemplateNotFoundError(
            f"{namespace}:{component}",
            f'Template "{component}" in namespace "{namespace}" does not exist.',
        )
