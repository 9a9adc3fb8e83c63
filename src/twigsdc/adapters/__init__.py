"""Adapters: filesystem walking, source cache and engine-facing loaders."""

from .array_loader import ArrayTemplateLoader
from .jinja_bridge import JinjaLoaderBridge, JinjaTemplateHandle
from .source_cache import TemplateSourceCache, suffix_match

__all__ = [
    "ArrayTemplateLoader",
    "JinjaLoaderBridge",
    "JinjaTemplateHandle",
    "TemplateSourceCache",
    "suffix_match",
]
