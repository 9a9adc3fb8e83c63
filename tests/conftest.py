from __future__ import annotations

import sys
from pathlib import Path
from typing import Dict

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from twigsdc.app.plugin import TwigBundlePlugin  # noqa: E402
from twigsdc.settings import PluginSettings  # noqa: E402

TREE: Dict[str, str] = {
    "templates/layout.twig": "<html>{% block body %}{% endblock %}</html>",
    "templates/page.html.twig": (
        '{% extends "layout.twig" %}'
        '{% block body %}{{ include("widgets:card", {"title": "Hello"}) }}{% endblock %}'
    ),
    "components/a/card/card.twig": '<div class="card">{% include "@widgets/icon/icon.twig" %}{{ title }}</div>',
    "components/a/card/card.js": "export default {};\n",
    "components/a/card/card~compact.twig": '<div class="card compact">{{ title }}</div>',
    "components/a/card/card~compact.js": "export default {};\n",
    "components/a/icon/icon.twig": '<i class="icon"></i>',
    "components/a/icon/icon.js": "export default {};\n",
    "components/b/icon/icon.twig": '<i class="shadowed"></i>',
    "components/b/button/button.twig": "<button>{{ label }}</button>",
    "components/b/forms/input/input.twig": '<input name="{{ name }}">',
}

CONFIG = {
    "version": 1,
    "namespaces": {"widgets": ["components/a", "components/b"]},
    "roots": ["templates"],
}


def write_tree(base: Path, files: Dict[str, str]) -> Path:
    for relative, content in files.items():
        target = base / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    return base


@pytest.fixture()
def project(tmp_path: Path) -> Path:
    return write_tree(tmp_path / "project", TREE)


@pytest.fixture()
def settings(project: Path) -> PluginSettings:
    return PluginSettings.from_mapping(CONFIG, project)


@pytest.fixture()
def plugin(settings: PluginSettings) -> TwigBundlePlugin:
    return TwigBundlePlugin(settings)
