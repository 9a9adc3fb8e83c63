from __future__ import annotations

from pathlib import Path

import pytest

from twigsdc.app.plugin import TwigBundlePlugin
from twigsdc.app.resolver import TemplatePathResolver, TemplateResolutionError
from twigsdc.adapters.source_cache import TemplateSourceCache
from twigsdc.domain.namespace import NamespaceTable


def test_namespaced_key_resolves_to_itself(plugin: TwigBundlePlugin) -> None:
    first = plugin.resolver.resolve("@widgets/card/card.twig")

    assert first is not None
    assert first.key == "@widgets/card/card.twig"
    again = plugin.resolver.resolve(first.key)
    assert again is not None and again.key == first.key
    assert again.content == first.content


def test_namespace_falls_back_to_later_roots(plugin: TwigBundlePlugin, project: Path) -> None:
    resolved = plugin.resolver.resolve("@widgets/button/button.twig")

    assert resolved is not None
    assert resolved.source_path == project / "components" / "b" / "button" / "button.twig"


def test_earlier_namespace_root_shadows_later(plugin: TwigBundlePlugin) -> None:
    resolved = plugin.resolver.resolve("@widgets/icon/icon.twig")

    assert resolved is not None
    assert resolved.content == '<i class="icon"></i>'


def test_shorthand_matches_expanded_form(plugin: TwigBundlePlugin) -> None:
    short = plugin.resolver.resolve("widgets:card")
    long = plugin.resolver.resolve("@widgets/card/card.twig")

    assert short is not None and long is not None
    assert short.key == long.key


def test_shorthand_finds_nested_component(plugin: TwigBundlePlugin) -> None:
    resolved = plugin.resolver.resolve("widgets:input")

    assert resolved is not None
    assert resolved.key == "@widgets/forms/input/input.twig"


def test_query_suffix_is_ignored(plugin: TwigBundlePlugin) -> None:
    resolved = plugin.resolver.resolve("@widgets/card/card.twig?raw")

    assert resolved is not None and resolved.key == "@widgets/card/card.twig"


def test_extension_and_kind_suffix_are_probed(plugin: TwigBundlePlugin) -> None:
    layout = plugin.resolver.resolve("layout")
    page = plugin.resolver.resolve("page")

    assert layout is not None and layout.key == "layout.twig"
    assert page is not None and page.key == "page.html.twig"


def test_absolute_path_is_keyed_by_containing_root(plugin: TwigBundlePlugin, project: Path) -> None:
    path = project / "components" / "a" / "card" / "card.twig"

    resolved = plugin.resolver.resolve(str(path))

    assert resolved is not None
    assert resolved.key == "@widgets/card/card.twig"
    assert plugin.cache.canonical_key(path) == resolved.key


def test_absolute_path_under_plain_root(plugin: TwigBundlePlugin, project: Path) -> None:
    resolved = plugin.resolver.resolve(str(project / "templates" / "layout.twig"))

    assert resolved is not None and resolved.key == "layout.twig"


def test_absolute_path_outside_roots_uses_escape_hatch(plugin: TwigBundlePlugin, tmp_path: Path) -> None:
    loose = tmp_path / "elsewhere" / "loose.twig"
    loose.parent.mkdir()
    loose.write_text("loose", encoding="utf-8")

    resolved = plugin.resolver.resolve(str(loose))

    assert resolved is not None
    assert resolved.key == loose.as_posix()
    assert resolved.content == "loose"
    assert plugin.cache.get(loose.as_posix()) is not None


def test_bare_path_probes_namespace_roots(plugin: TwigBundlePlugin) -> None:
    resolved = plugin.resolver.resolve("button/button.twig")

    assert resolved is not None and resolved.key == "@widgets/button/button.twig"


def test_suffix_match_is_last_resort(tmp_path: Path) -> None:
    cache = TemplateSourceCache(".twig")
    cache.set("@b/icon.twig", "short")
    cache.set("@a/deep/icon.twig", "long")
    resolver = TemplatePathResolver(NamespaceTable(), cache)

    resolved = resolver.resolve("icon")

    assert resolved is not None and resolved.key == "@b/icon.twig"


def test_resolution_is_stable_across_calls(plugin: TwigBundlePlugin, project: Path) -> None:
    path = project / "components" / "a" / "icon" / "icon.twig"
    keys = {
        resolved.key
        for resolved in (
            plugin.resolver.resolve("@widgets/icon/icon.twig"),
            plugin.resolver.resolve(str(path)),
            plugin.resolver.resolve("widgets:icon"),
            plugin.resolver.resolve("@widgets/icon/icon.twig"),
        )
        if resolved is not None
    }

    assert keys == {"@widgets/icon/icon.twig"}


def test_parent_segments_cannot_leave_a_root(plugin: TwigBundlePlugin, project: Path) -> None:
    outside = project.parent / "outside.twig"
    outside.write_text("secret", encoding="utf-8")

    assert plugin.resolver.resolve("@widgets/../../../outside.twig") is None
    assert plugin.resolver.resolve("../../outside.twig") is None
    assert plugin.resolver.resolve("@widgets/card/../icon/icon.twig").key == "@widgets/icon/icon.twig"
    assert all(record_key.startswith(("@widgets/", "layout", "page")) for record_key in plugin.cache.keys())


def test_unknown_specifier_resolves_to_none(plugin: TwigBundlePlugin) -> None:
    assert plugin.resolver.resolve("@widgets/nope.twig") is None
    assert plugin.resolver.resolve("") is None


def test_require_reports_diagnostics(plugin: TwigBundlePlugin) -> None:
    with pytest.raises(TemplateResolutionError) as excinfo:
        plugin.resolver.require("missing/thing.twig?raw")

    error = excinfo.value
    assert error.specifier == "missing/thing.twig"
    assert "layout.twig" in error.known_keys
    assert "widgets" in error.namespaces
    message = str(error)
    assert "Cannot find template: missing/thing.twig" in message
    assert "@widgets" in message


def test_refresh_updates_every_alias(plugin: TwigBundlePlugin, project: Path) -> None:
    path = project / "components" / "a" / "icon" / "icon.twig"
    loose_key = path.as_posix()
    plugin.cache.set(loose_key, '<i class="icon"></i>', source_path=path)
    path.write_text('<i class="icon v2"></i>', encoding="utf-8")

    refreshed = plugin.resolver.refresh(path)

    assert refreshed is not None and refreshed.key == "@widgets/icon/icon.twig"
    assert plugin.cache.get("@widgets/icon/icon.twig").content == '<i class="icon v2"></i>'
    assert plugin.cache.get(loose_key).content == '<i class="icon v2"></i>'
