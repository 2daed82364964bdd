"""Tests for import specifier resolution."""

from depgraph_cli.resolver import ALIAS, BARE, RELATIVE, PathResolver


def _resolver(*paths: str) -> PathResolver:
    return PathResolver(paths)


def test_candidate_priority_order():
    resolver = _resolver()
    assert resolver.candidates("./button", "src/components") == [
        "src/components/button.ts",
        "src/components/button.tsx",
        "src/components/button/index.ts",
        "src/components/button/index.tsx",
    ]


def test_relative_specifier_resolves_against_importer_dir():
    resolver = _resolver("src/types/user.ts")
    assert resolver.resolve("../types/user", "src/hooks") == "src/types/user.ts"


def test_alias_specifier_rebases_under_source_root():
    resolver = _resolver("src/lib/format.ts")
    assert resolver.resolve("@/lib/format", "src/app/api/users") == "src/lib/format.ts"


def test_first_matching_candidate_wins():
    resolver = _resolver("src/ui/card.tsx", "src/ui/card/index.ts")
    assert resolver.resolve("./card", "src/ui") == "src/ui/card.tsx"


def test_index_file_fallback():
    resolver = _resolver("src/ui/card/index.tsx")
    assert resolver.resolve("./card", "src/ui") == "src/ui/card/index.tsx"


def test_bare_specifier_never_resolves():
    resolver = _resolver("react.ts", "src/react.ts")
    assert resolver.candidates("react", "src") == []
    assert resolver.resolve("react", "src") is None


def test_unknown_target_returns_none():
    assert _resolver("src/a.ts").resolve("./missing", "src") is None


def test_classify():
    resolver = _resolver()
    assert resolver.classify("@/types/user") == ALIAS
    assert resolver.classify("../x") == RELATIVE
    assert resolver.classify("./x") == RELATIVE
    assert resolver.classify("lodash") == BARE


def test_custom_extensions_and_source_root():
    resolver = PathResolver(
        ["app/util.js"],
        extensions=[".js"],
        alias_prefixes=["~/"],
        source_root="app",
    )
    assert resolver.resolve("~/util", "app/deep/dir") == "app/util.js"


def test_resolve_from_file_uses_file_directory():
    resolver = _resolver("src/store/cart.ts")
    assert resolver.resolve_from_file("./cart", "src/store/index.ts") == "src/store/cart.ts"
