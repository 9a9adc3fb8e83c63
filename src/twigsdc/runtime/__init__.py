"""Runtime helpers used by generated template modules."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence

import jinja2
from markupsafe import Markup

from twigsdc.adapters.array_loader import ArrayTemplateLoader
from twigsdc.adapters.jinja_bridge import JinjaLoaderBridge
from twigsdc.app.loader import ComponentLoader
from twigsdc.ports.template_loader import TemplateLoader

__all__ = ["TemplateRenderer", "build_renderer", "create_environment"]


@jinja2.pass_context
def _include(
    context: Any,
    name: str,
    variables: Optional[Mapping[str, Any]] = None,
    with_context: bool = True,
    ignore_missing: bool = False,
) -> Markup:
    """Twig's ``include()`` function.

    Goes through the template loader so included components get their
    metadata like top-level renders do.
    """
    environment = context.environment
    loader: TemplateLoader = environment.loader.loader
    try:
        handle = loader.load(environment, name)
    except jinja2.TemplateNotFound:
        if ignore_missing:
            return Markup("")
        raise
    values: Dict[str, Any] = dict(context.get_all()) if with_context else {}
    values.update(variables or {})
    return Markup(handle.render(values))


def create_environment(loader: TemplateLoader) -> jinja2.Environment:
    environment = jinja2.Environment(
        loader=JinjaLoaderBridge(loader),
        autoescape=True,
        auto_reload=True,
    )
    environment.globals["include"] = _include
    return environment


class TemplateRenderer:
    """Render entry point bound to one template key."""

    def __init__(self, key: str, loader: ComponentLoader, environment: jinja2.Environment) -> None:
        self.key = key
        self.loader = loader
        self.environment = environment

    def __call__(self, context: Optional[Mapping[str, Any]] = None) -> str:
        return self.loader.load(self.environment, self.key).render(context)

    def set_template(self, name: str, code: str) -> None:
        self.loader.set_template(name, code)


def build_renderer(
    key: str,
    sources: Mapping[str, str],
    namespaces: Mapping[str, Sequence[str]] | None = None,
    *,
    extension: str = ".twig",
) -> TemplateRenderer:
    templates = dict(sources)
    loader = ComponentLoader(ArrayTemplateLoader(templates), templates, namespaces, extension=extension)
    return TemplateRenderer(key, loader, create_environment(loader))
