"""Default in-memory loader implementing the full TemplateLoader contract."""

from __future__ import annotations

import time
from typing import Any, Dict, Mapping

from twigsdc.adapters.jinja_bridge import JinjaTemplateHandle
from twigsdc.ports.template_loader import TemplateHandle, TemplateLoader, TemplateNotFoundError, TemplateSource


class ArrayTemplateLoader(TemplateLoader):
    """Serves templates from a name -> source mapping.

    Freshness is tracked per name: templates replaced through ``set_template``
    or ``add_templates`` report stale for any timestamp taken before the
    replacement.
    """

    def __init__(self, templates: Mapping[str, str] | None = None) -> None:
        self._templates: Dict[str, str] = dict(templates or {})
        self._updated_at: Dict[str, float] = {}

    def get_source(self, name: str) -> TemplateSource:
        try:
            code = self._templates[name]
        except KeyError:
            raise TemplateNotFoundError(name) from None
        return TemplateSource(code=code, path=name, name=name)

    def get_source_context(self, name: str) -> str:
        return self.get_source(name).code

    def get_cache_key(self, name: str) -> str:
        if name not in self._templates:
            raise TemplateNotFoundError(name)
        return name

    def exists(self, name: str) -> bool:
        return name in self._templates

    def is_fresh(self, name: str, timestamp: float) -> bool:
        if name not in self._templates:
            return False
        return self._updated_at.get(name, 0.0) < timestamp

    def load(self, environment: Any, name: str, path: str | None = None) -> TemplateHandle:
        return JinjaTemplateHandle(environment.get_template(name), name=name)

    def add_templates(self, templates: Mapping[str, str]) -> None:
        for name, code in templates.items():
            self.set_template(name, code)

    def set_template(self, name: str, code: str) -> None:
        self._templates[name] = code
        self._updated_at[name] = time.time()
