"""Application services: resolution, dependency graph, loaders and bundler hooks."""

from .loader import ComponentLoader, ComponentTemplate
from .plugin import TwigBundlePlugin, render_module
from .resolver import TemplatePathResolver, TemplateResolutionError
from .reverse_index import ReverseDependencyIndex
from .walker import ForwardDependencyWalker

__all__ = [
    "ComponentLoader",
    "ComponentTemplate",
    "ForwardDependencyWalker",
    "ReverseDependencyIndex",
    "TemplatePathResolver",
    "TemplateResolutionError",
    "TwigBundlePlugin",
    "render_module",
]
