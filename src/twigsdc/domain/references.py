"""Static extraction of structural references from Twig source.

The scan is syntactic: each directive kind is matched with regular
expressions that capture the first quoted literal argument. Dynamic
arguments (variables, concatenations, arrays) yield nothing. Results are
ordered by directive kind (extends, include, embed, import, from) and then by
position in the source; duplicates are preserved.
"""

from __future__ import annotations

import re
from typing import List, Tuple

from twigsdc.domain.template import expand_shorthand, parse_shorthand

_LITERAL = r"""(?P<quote>['"])(?P<ref>[^'"]+)(?P=quote)"""
_TAG_CLOSE = r"\s*-?%}"


def _tag(keyword: str, trailing: str = "") -> re.Pattern[str]:
    tail = r"(?:\s+(?:" + trailing + r")\b.*?)?" if trailing else ""
    return re.compile(r"{%-?\s*" + keyword + r"\s+" + _LITERAL + tail + _TAG_CLOSE, re.DOTALL)


DIRECTIVE_KINDS = ("extends", "include", "embed", "import", "from")

DIRECTIVE_PATTERNS: Tuple[Tuple[str, Tuple[re.Pattern[str], ...]], ...] = (
    ("extends", (_tag("extends"),)),
    (
        "include",
        (
            re.compile(r"{{-?\s*include\s*\(\s*" + _LITERAL + r"\s*[,)]"),
            _tag("include", "with|only|ignore"),
        ),
    ),
    ("embed", (_tag("embed", "with|only|ignore"),)),
    ("import", (_tag("import", "as"),)),
    ("from", (_tag("from", "import"),)),
)


def normalize_reference(reference: str, extension: str = ".twig") -> str:
    """Rewrite the ``prefix:name`` shorthand to ``@prefix/name/name<ext>``."""
    shorthand = parse_shorthand(reference)
    if shorthand is None:
        return reference
    namespace, component = shorthand
    return expand_shorthand(namespace, component, extension)


def extract_references(body: str, extension: str = ".twig") -> List[str]:
    references: List[str] = []
    for _, patterns in DIRECTIVE_PATTERNS:
        matches = sorted(
            (match for pattern in patterns for match in pattern.finditer(body)),
            key=lambda match: match.start(),
        )
        references.extend(normalize_reference(match.group("ref"), extension) for match in matches)
    return references
