from __future__ import annotations

from twigsdc.domain.references import extract_references, normalize_reference


def test_extracts_every_directive_kind_in_kind_order() -> None:
    body = """
    {% from "macros/forms.twig" import input %}
    {% import "macros/utils.twig" as utils %}
    {% embed "@widgets/card/card.twig" with { title: 'x' } %}{% endembed %}
    {% include 'partials/footer.twig' only %}
    {{ include("partials/header.twig", { a: 1 }) }}
    {% extends "layout.twig" %}
    """

    assert extract_references(body) == [
        "layout.twig",
        "partials/footer.twig",
        "partials/header.twig",
        "@widgets/card/card.twig",
        "macros/utils.twig",
        "macros/forms.twig",
    ]


def test_include_tag_and_function_keep_source_order() -> None:
    body = '{{ include("b.twig") }}{% include "a.twig" %}{{include("c.twig")}}'

    assert extract_references(body) == ["b.twig", "a.twig", "c.twig"]


def test_whitespace_control_and_multiline_tags() -> None:
    body = '{%- include "a.twig"\n   with { x: 1 }\n-%}{%-extends "base.twig"-%}'

    assert extract_references(body) == ["base.twig", "a.twig"]


def test_dynamic_arguments_yield_nothing() -> None:
    body = """
    {% include template_name %}
    {% include "prefix/" ~ name %}
    {% include ["a.twig", "b.twig"] %}
    {% extends parent %}
    """

    assert extract_references(body) == []


def test_duplicates_are_preserved() -> None:
    body = '{% include "a.twig" %}{% include "a.twig" %}'

    assert extract_references(body) == ["a.twig", "a.twig"]


def test_shorthand_is_normalised_with_extension() -> None:
    body = '{% include "widgets:card" %}{% embed "widgets:card~compact" %}{% endembed %}'

    assert extract_references(body) == [
        "@widgets/card/card.twig",
        "@widgets/card~compact/card~compact.twig",
    ]
    assert normalize_reference("layout.twig") == "layout.twig"


def test_malformed_input_never_raises() -> None:
    assert extract_references("{% include \"unterminated %}{{ include( }}") == []
    assert extract_references("") == []
