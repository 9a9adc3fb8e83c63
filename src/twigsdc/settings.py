"""Plugin settings loaded from ``twigsdc.yaml``."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterator, Mapping, Tuple

import yaml
from jsonschema import Draft202012Validator

from twigsdc.domain.namespace import NamespaceTable
from twigsdc.resources import load_config_schema

DEFAULT_CONFIG_FILENAME = "twigsdc.yaml"
DEFAULT_TEMPLATE_EXTENSION = ".twig"
DEFAULT_SCRIPT_EXTENSION = ".js"
DEFAULT_KIND = "html"
DEFAULT_INCLUDE = r"\.twig(\?.*)?$"


class SettingsError(ValueError):
    """Raised when the configuration file is missing or invalid."""

    def __init__(self, message: str, *, errors: list[tuple[str, str]] | None = None) -> None:
        self.errors = list(errors or [])
        if self.errors:
            details = "; ".join(f"{path or '<root>'}: {reason}" for path, reason in self.errors)
            message = f"{message}: {details}"
        super().__init__(message)


@lru_cache(maxsize=1)
def _validator() -> Draft202012Validator:
    return Draft202012Validator(load_config_schema())


def iter_schema_errors(payload: Mapping[str, Any]) -> Iterator[Tuple[str, str]]:
    """Yield (path, message) pairs for schema issues in the configuration."""
    for error in _validator().iter_errors(dict(payload)):
        path = ".".join(str(item) for item in error.absolute_path)
        yield path, error.message


@dataclass(frozen=True)
class PluginSettings:
    base_dir: Path
    namespaces: NamespaceTable
    template_extension: str = DEFAULT_TEMPLATE_EXTENSION
    script_extension: str = DEFAULT_SCRIPT_EXTENSION
    kind: str = DEFAULT_KIND
    include: str = DEFAULT_INCLUDE
    source: Path | None = field(default=None, compare=False)

    @property
    def include_pattern(self) -> re.Pattern[str]:
        return re.compile(self.include)

    @classmethod
    def from_mapping(
        cls,
        data: Mapping[str, Any],
        base_dir: Path,
        *,
        source: Path | None = None,
    ) -> "PluginSettings":
        errors = list(iter_schema_errors(data))
        if errors:
            raise SettingsError("Invalid twigsdc configuration", errors=errors)
        include = str(data.get("include", DEFAULT_INCLUDE))
        try:
            re.compile(include)
        except re.error as exc:
            raise SettingsError("Invalid twigsdc configuration", errors=[("include", str(exc))]) from exc
        base = base_dir.expanduser().resolve()
        table = NamespaceTable.from_config(
            data.get("namespaces") or {},
            base,
            roots=data.get("roots") or (),
        )
        return cls(
            base_dir=base,
            namespaces=table,
            template_extension=str(data.get("template_extension", DEFAULT_TEMPLATE_EXTENSION)),
            script_extension=str(data.get("script_extension", DEFAULT_SCRIPT_EXTENSION)),
            kind=str(data.get("kind", DEFAULT_KIND)),
            include=include,
            source=source,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "base_dir": str(self.base_dir),
            "roots": [str(root) for root in self.namespaces.roots],
            "namespaces": self.namespaces.to_dict(),
            "template_extension": self.template_extension,
            "script_extension": self.script_extension,
            "kind": self.kind,
            "include": self.include,
        }


def load_settings(path: Path) -> PluginSettings:
    config_path = path.expanduser().resolve()
    if not config_path.exists():
        raise SettingsError(f"Configuration file not found: {config_path}")
    try:
        payload = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise SettingsError(f"Configuration file is not valid YAML: {config_path}") from exc
    if not isinstance(payload, dict):
        raise SettingsError(f"Configuration root must be a mapping: {config_path}")
    return PluginSettings.from_mapping(payload, config_path.parent, source=config_path)
