"""Domain exports."""

from .namespace import NamespaceTable
from .references import DIRECTIVE_KINDS, extract_references, normalize_reference
from .template import ResolvedTemplate, TemplateRecord

__all__ = [
    "NamespaceTable",
    "DIRECTIVE_KINDS",
    "extract_references",
    "normalize_reference",
    "ResolvedTemplate",
    "TemplateRecord",
]
