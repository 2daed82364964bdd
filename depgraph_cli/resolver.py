"""Map import specifiers onto known project files."""

from __future__ import annotations

import posixpath
from typing import Iterable, List, Optional, Sequence, Set

from .config import ALIAS_PREFIXES, RESOLVE_EXTENSIONS, SOURCE_ROOT

ALIAS = "alias"
RELATIVE = "relative"
BARE = "bare"


class PathResolver:
    """Resolve specifiers against the set of analyzed file paths.

    Paths are project-relative POSIX strings. Resolution is purely textual:
    the first candidate equal to a known path wins and nothing else is
    disambiguated.
    """

    def __init__(
        self,
        known_paths: Iterable[str],
        extensions: Sequence[str] = RESOLVE_EXTENSIONS,
        alias_prefixes: Sequence[str] = ALIAS_PREFIXES,
        source_root: str = SOURCE_ROOT,
    ) -> None:
        self.known_paths: Set[str] = set(known_paths)
        self.extensions = tuple(extensions)
        self.alias_prefixes = tuple(alias_prefixes)
        self.source_root = source_root.strip("/")

    def alias_prefix_of(self, specifier: str) -> Optional[str]:
        for prefix in self.alias_prefixes:
            if specifier.startswith(prefix):
                return prefix
        return None

    def classify(self, specifier: str) -> str:
        if self.alias_prefix_of(specifier) is not None:
            return ALIAS
        if specifier.startswith("."):
            return RELATIVE
        return BARE

    def base_path(self, specifier: str, importer_dir: str) -> Optional[str]:
        """Extension-less target path for *specifier*, or None for bare packages."""
        prefix = self.alias_prefix_of(specifier)
        if prefix is not None:
            rest = specifier[len(prefix):]
            return posixpath.normpath(posixpath.join(self.source_root, rest))
        if specifier.startswith("."):
            return posixpath.normpath(posixpath.join(importer_dir, specifier))
        return None

    def candidates(self, specifier: str, importer_dir: str) -> List[str]:
        """Candidate file paths in priority order: ``<p><ext>`` then ``<p>/index<ext>``."""
        base = self.base_path(specifier, importer_dir)
        if base is None:
            return []
        found = [base + ext for ext in self.extensions]
        found.extend(posixpath.join(base, "index" + ext) for ext in self.extensions)
        return found

    def resolve(self, specifier: str, importer_dir: str) -> Optional[str]:
        for candidate in self.candidates(specifier, importer_dir):
            if candidate in self.known_paths:
                return candidate
        return None

    def resolve_from_file(self, specifier: str, importer_path: str) -> Optional[str]:
        return self.resolve(specifier, posixpath.dirname(importer_path))
