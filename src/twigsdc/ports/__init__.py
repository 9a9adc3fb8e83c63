"""Port exports."""

from .template_loader import TemplateHandle, TemplateLoader, TemplateNotFoundError, TemplateSource

__all__ = ["TemplateHandle", "TemplateLoader", "TemplateNotFoundError", "TemplateSource"]
