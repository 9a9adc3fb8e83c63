from __future__ import annotations

from twigsdc.domain.template import (
    clean_specifier,
    component_name,
    expand_shorthand,
    is_component_name,
    parse_shorthand,
    split_namespaced,
)


def test_clean_specifier_drops_query_and_backslashes() -> None:
    assert clean_specifier("card.twig?raw&v=2") == "card.twig"
    assert clean_specifier("dir\\card.twig") == "dir/card.twig"


def test_split_namespaced() -> None:
    assert split_namespaced("@widgets/card/card.twig") == ("widgets", "card/card.twig")
    assert split_namespaced("@widgets") is None
    assert split_namespaced("card.twig") is None


def test_parse_shorthand_requires_prefix_of_two_characters() -> None:
    assert parse_shorthand("widgets:card") == ("widgets", "card")
    assert parse_shorthand("ui:card~compact") == ("ui", "card~compact")
    # a single letter prefix looks like a Windows drive
    assert parse_shorthand("C:card") is None
    assert parse_shorthand("@widgets/card.twig") is None


def test_expand_shorthand_uses_component_basename() -> None:
    assert expand_shorthand("widgets", "card", ".twig") == "@widgets/card/card.twig"
    assert expand_shorthand("widgets", "forms/input") == "@widgets/forms/input/input"


def test_component_name_and_detection() -> None:
    assert component_name("@widgets/card/card.twig") == "card"
    assert is_component_name("@widgets/card/card.twig")
    assert is_component_name("card/card.twig")
    assert not is_component_name("layout.twig")
