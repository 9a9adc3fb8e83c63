"""Domain model for template keys and the records stored per key."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

_SHORTHAND = re.compile(r"^(?P<namespace>[A-Za-z0-9_.-]{2,}):(?P<component>[A-Za-z0-9_~.-][A-Za-z0-9_~./-]*)$")


@dataclass
class TemplateRecord:
    """Cached template text; mutated in place when the file changes."""

    key: str
    content: str
    source_path: Optional[Path] = None


@dataclass(frozen=True)
class ResolvedTemplate:
    key: str
    content: str
    source_path: Optional[Path] = None


def clean_specifier(specifier: str) -> str:
    """Drop a bundler query suffix and normalise separators."""
    return specifier.split("?", 1)[0].replace("\\", "/")


def namespaced_key(namespace: str, relative: str) -> str:
    return f"@{namespace}/{relative.lstrip('/')}"


def split_namespaced(specifier: str) -> Optional[Tuple[str, str]]:
    """Split ``@namespace/rest`` into its parts; ``None`` for anything else."""
    if not specifier.startswith("@"):
        return None
    namespace, _, rest = specifier[1:].partition("/")
    if not namespace or not rest:
        return None
    return namespace, rest


def parse_shorthand(specifier: str) -> Optional[Tuple[str, str]]:
    match = _SHORTHAND.match(specifier)
    if not match:
        return None
    return match.group("namespace"), match.group("component")


def expand_shorthand(namespace: str, component: str, extension: str = "") -> str:
    """``ns:card`` -> ``@ns/card/card`` (the component's root template)."""
    component = strip_extension(component, extension)
    basename = component.rsplit("/", 1)[-1]
    return f"@{namespace}/{component}/{basename}{extension}"


def is_component_name(name: str) -> bool:
    return "@" in name or "/" in name


def component_name(name: str, extension: str = ".twig") -> str:
    basename = clean_specifier(name).rsplit("/", 1)[-1]
    if extension and basename.endswith(extension):
        basename = basename[: -len(extension)]
    return basename


def strip_extension(specifier: str, extension: str) -> str:
    if extension and specifier.endswith(extension):
        return specifier[: -len(extension)]
    return specifier
