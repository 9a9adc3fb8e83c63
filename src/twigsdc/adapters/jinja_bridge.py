"""Bridge between the TemplateLoader port and Jinja2's loader protocol."""

from __future__ import annotations

import time
from typing import Any, Callable, Mapping, Optional, Tuple

import jinja2

from twigsdc.ports.template_loader import TemplateLoader, TemplateNotFoundError


class JinjaLoaderBridge(jinja2.BaseLoader):
    def __init__(self, loader: TemplateLoader) -> None:
        self._loader = loader

    @property
    def loader(self) -> TemplateLoader:
        return self._loader

    def get_source(
        self, environment: jinja2.Environment, template: str
    ) -> Tuple[str, Optional[str], Callable[[], bool]]:
        loaded_at = time.time()
        try:
            source = self._loader.get_source(template)
        except TemplateNotFoundError as exc:
            raise jinja2.TemplateNotFound(template) from exc
        name = source.name
        return source.code, source.path, lambda: self._loader.is_fresh(name, loaded_at)


class JinjaTemplateHandle:
    """Renderable handle over a compiled Jinja2 template."""

    def __init__(self, template: jinja2.Template, *, name: str) -> None:
        self._template = template
        self.name = name

    @property
    def template(self) -> jinja2.Template:
        return self._template

    def render(self, context: Optional[Mapping[str, Any]] = None) -> str:
        return self._template.render(dict(context or {}))
