from __future__ import annotations

from pathlib import Path

from twigsdc.domain.namespace import NamespaceTable


def test_from_config_accepts_string_or_list(tmp_path: Path) -> None:
    table = NamespaceTable.from_config({"one": "a", "many": ["b", "c"]}, tmp_path)

    assert table.get("one") == (tmp_path / "a",)
    assert table.get("many") == (tmp_path / "b", tmp_path / "c")


def test_from_config_keeps_missing_directories(tmp_path: Path) -> None:
    table = NamespaceTable.from_config({"ghost": "does/not/exist"}, tmp_path)

    assert table.get("ghost") == (tmp_path / "does" / "not" / "exist",)
    assert not table.get("ghost")[0].exists()


def test_paths_are_normalised_lexically(tmp_path: Path) -> None:
    table = NamespaceTable.from_config({"ui": "./x/../components"}, tmp_path)

    assert table.get("ui") == (tmp_path / "components",)


def test_all_roots_lists_plain_roots_then_namespaces_in_order(tmp_path: Path) -> None:
    table = NamespaceTable.from_config({"b": "nb", "a": ["na1", "na2"]}, tmp_path, roots=["templates"])

    assert table.all_roots() == [
        (None, tmp_path / "templates"),
        ("b", tmp_path / "nb"),
        ("a", tmp_path / "na1"),
        ("a", tmp_path / "na2"),
    ]
    assert table.names == ["b", "a"]


def test_membership_and_unknown_namespace(tmp_path: Path) -> None:
    table = NamespaceTable.from_config({"ui": "components"}, tmp_path)

    assert "ui" in table
    assert "other" not in table
    assert table.get("other") == ()
    assert table.to_dict() == {"ui": [str(tmp_path / "components")]}
