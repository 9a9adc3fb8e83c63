"""One-hop reverse lookup: which templates reference a given template."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List, Set

from twigsdc.adapters.fs_walk import collect_template_files, lexical_relative, read_text, tolerant_relative
from twigsdc.domain.namespace import NamespaceTable
from twigsdc.domain.references import extract_references, normalize_reference
from twigsdc.domain.template import clean_specifier, namespaced_key, strip_extension
from twigsdc.utils.log import get_logger

log = get_logger(__name__)


class ReverseDependencyIndex:
    """Scans every registered root on each query.

    Nothing is cached between calls so the answer reflects the tree as it is
    when a change notification arrives. Referrers of referrers are not
    followed.
    """

    def __init__(self, table: NamespaceTable, *, extension: str = ".twig") -> None:
        self._table = table
        self._extension = extension

    def normalize_target(self, target: str) -> Set[str]:
        """Return every reference spelling that names ``target``."""
        spec = normalize_reference(clean_specifier(target), self._extension)
        forms = {spec}
        if os.path.isabs(spec):
            path = Path(os.path.normpath(spec))
            for classify in (lexical_relative, tolerant_relative):
                for namespace, root in self._table.all_roots():
                    relative = classify(path, root)
                    if relative is not None:
                        forms.add(namespaced_key(namespace, relative) if namespace else relative)
                if len(forms) > 1:
                    break
        elif not spec.startswith("@"):
            for namespace, roots in self._table:
                for root in roots:
                    if (root / spec).is_file():
                        forms.add(namespaced_key(namespace, spec))
        return {strip_extension(form, self._extension) for form in forms}

    def referrers_of(self, targets: Iterable[str]) -> List[Path]:
        wanted: Set[str] = set()
        for target in targets:
            wanted |= self.normalize_target(target)
        log.debug("reverse_lookup", targets=sorted(wanted))
        files = collect_template_files([root for _, root in self._table.all_roots()], self._extension)
        referrers: List[Path] = []
        for path in files:
            content = read_text(path)
            if content is None:
                continue
            references = extract_references(content, self._extension)
            if any(strip_extension(reference, self._extension) in wanted for reference in references):
                referrers.append(path)
        log.debug("reverse_lookup_done", scanned=len(files), found=len(referrers))
        return referrers
