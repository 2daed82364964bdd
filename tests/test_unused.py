"""Tests for the unused-export heuristic."""

from typing import List

from depgraph_cli.discovery import SubtreeConfig
from depgraph_cli.models import ExportDeclaration, FileAnalysis, ImportDeclaration
from depgraph_cli.resolver import PathResolver
from depgraph_cli.unused import (
    build_import_index,
    category_from_segment,
    find_unused_exports,
    segments_for_subtrees,
)


def _file(path: str, category: str, exports=(), imports=()) -> FileAnalysis:
    return FileAnalysis(
        file_name=path.rsplit("/", 1)[-1],
        file_path=path,
        category=category,
        imports=[
            ImportDeclaration(file=path, name=name, path=specifier, is_relative=not specifier[0].isalpha(), line=1)
            for name, specifier in imports
        ],
        exports=[ExportDeclaration(file=path, name=name, line=line) for name, line in exports],
    )


def _unused(analyses: List[FileAnalysis]):
    resolver = PathResolver(a.file_path for a in analyses)
    return find_unused_exports(analyses, resolver)


def test_export_without_importers_is_reported_with_location():
    analyses = [_file("src/lib/a.ts", "utility", exports=[("foo", 4)])]

    unused = _unused(analyses)

    assert [(u.file, u.export, u.line) for u in unused] == [("src/lib/a.ts", "foo", 4)]


def test_alias_import_with_matching_category_and_name_counts_as_use():
    analyses = [
        _file("src/types/user.ts", "type", exports=[("User", 1)]),
        _file("src/lib/format.ts", "utility", imports=[("User", "@/types/user")]),
    ]
    assert _unused(analyses) == []


def test_alias_import_with_extension_in_path_counts_as_use():
    analyses = [
        _file("src/types/user.ts", "type", exports=[("User", 1)]),
        _file("src/lib/format.ts", "utility", imports=[("User", "@/types/user.ts")]),
    ]
    assert _unused(analyses) == []


def test_alias_import_with_wrong_category_does_not_count():
    analyses = [
        _file("src/types/user.ts", "type", exports=[("User", 1)]),
        _file("src/lib/format.ts", "utility", imports=[("User", "@/lib/user")]),
    ]
    assert [u.export for u in _unused(analyses)] == ["User"]


def test_alias_import_with_wrong_file_name_does_not_count():
    analyses = [
        _file("src/types/user.ts", "type", exports=[("User", 1)]),
        _file("src/lib/format.ts", "utility", imports=[("User", "@/types/account")]),
    ]
    assert [u.export for u in _unused(analyses)] == ["User"]


def test_relative_import_resolving_to_exporter_counts_as_use():
    analyses = [
        _file("src/hooks/useUser.ts", "hook", exports=[("useUser", 2)]),
        _file("src/components/Card.tsx", "component", imports=[("useUser", "../hooks/useUser")]),
    ]
    assert _unused(analyses) == []


def test_relative_import_pointing_elsewhere_does_not_count():
    analyses = [
        _file("src/hooks/useUser.ts", "hook", exports=[("useUser", 2)]),
        _file("src/hooks/other/useUser.ts", "hook"),
        _file("src/components/Card.tsx", "component", imports=[("useUser", "../hooks/other/useUser")]),
    ]
    assert [u.file for u in _unused(analyses)] == ["src/hooks/useUser.ts"]


def test_bare_package_import_is_never_evidence():
    analyses = [
        _file("src/lib/useState.ts", "utility", exports=[("useState", 1)]),
        _file("src/hooks/useThing.ts", "hook", imports=[("useState", "react")]),
    ]
    assert [u.export for u in _unused(analyses)] == ["useState"]


def test_alias_match_ignores_intermediate_directories():
    # Only the leading segment and the file name are compared.
    analyses = [
        _file("src/lib/a.ts", "utility", exports=[("helper", 1)]),
        _file("src/lib/nested/a.ts", "utility", exports=[("helper", 1)]),
        _file("src/hooks/useA.ts", "hook", imports=[("helper", "@/lib/a")]),
    ]
    assert _unused(analyses) == []


def test_import_index_groups_by_name():
    analyses = [
        _file("src/a.ts", "other", imports=[("X", "./x"), ("Y", "./y")]),
        _file("src/b.ts", "other", imports=[("X", "@/x")]),
    ]
    index = build_import_index(analyses)
    assert sorted(index) == ["X", "Y"]
    assert [imp.file for imp in index["X"]] == ["src/a.ts", "src/b.ts"]


def test_category_from_segment():
    assert category_from_segment("types") == "type"
    assert category_from_segment("lib") == "utility"
    assert category_from_segment("widgets") == "widgets"


def test_segments_for_subtrees_adds_custom_locations():
    subtrees = [
        SubtreeConfig("features", "app/features", "feature", [".ts"]),
        SubtreeConfig("api", "app/app/api", "api", [".ts"]),
        SubtreeConfig("outside", "scripts/tools", "tool", [".ts"]),
    ]

    segments = segments_for_subtrees(subtrees, "app")

    assert segments["features"] == "feature"
    assert segments["app"] == "page"
    assert segments["types"] == "type"
    assert "scripts" not in segments and "tools" not in segments


def test_custom_category_alias_counts_as_use():
    analyses = [
        _file("app/features/cart.ts", "feature", exports=[("Cart", 1)]),
        _file("app/lib/checkout.ts", "utility", imports=[("Cart", "@/features/cart")]),
    ]
    resolver = PathResolver((a.file_path for a in analyses), source_root="app")
    subtrees = [SubtreeConfig("features", "app/features", "feature", [".ts"])]

    without = find_unused_exports(analyses, resolver)
    with_segments = find_unused_exports(analyses, resolver, segments_for_subtrees(subtrees, "app"))

    assert [u.export for u in without] == ["Cart"]
    assert with_segments == []
