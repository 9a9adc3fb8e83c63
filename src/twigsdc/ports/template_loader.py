"""Port definitions for template loaders consumed by the engine runtime."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol


class TemplateNotFoundError(RuntimeError):
    def __init__(self, name: str, message: str | None = None) -> None:
        super().__init__(message or f'Template "{name}" does not exist.')
        self.name = name


@dataclass(frozen=True)
class TemplateSource:
    code: str
    path: str
    name: str


class TemplateHandle(Protocol):  # pragma: no cover
    def render(self, context: Optional[Mapping[str, Any]] = None) -> str:
        ...


class TemplateLoader(ABC):
    """Full capability contract every base loader must implement."""

    @abstractmethod
    def get_source(self, name: str) -> TemplateSource:
        """Return the source for ``name`` or raise TemplateNotFoundError."""

    @abstractmethod
    def get_source_context(self, name: str) -> str:
        """Return the raw template text for ``name``."""

    @abstractmethod
    def get_cache_key(self, name: str) -> str:
        """Return a stable cache key for ``name``."""

    @abstractmethod
    def exists(self, name: str) -> bool:
        """Report whether ``name`` can be served."""

    @abstractmethod
    def is_fresh(self, name: str, timestamp: float) -> bool:
        """Report whether ``name`` is unchanged since ``timestamp``."""

    @abstractmethod
    def load(self, environment: Any, name: str, path: str | None = None) -> TemplateHandle:
        """Compile ``name`` in ``environment`` and return a renderable handle."""

    @abstractmethod
    def add_templates(self, templates: Mapping[str, str]) -> None:
        """Register or replace several templates."""

    @abstractmethod
    def set_template(self, name: str, code: str) -> None:
        """Register or replace one template."""
