"""Pattern-based import/export extraction for TypeScript-style sources.

Declarations are found with regular expressions rather than a real parser:

- ``import {A as B}`` records ``A``: the pre-alias name is kept.
- Line numbers point at the *first* textual occurrence of the matched
  statement, so a statement repeated verbatim is reported at its earliest line.
- Dynamic ``import()`` and ``require()`` calls are not seen.

Callers only depend on :class:`DeclarationExtractor`; :class:`PatternExtractor`
is the default implementation.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import List, Sequence, Tuple

from .config import ALIAS_PREFIXES
from .models import ExportDeclaration, ImportDeclaration

IMPORT_RE = re.compile(
    r"import\s+(?:type\s+)?"
    r"(?:(\w+)\s*,\s*)?"
    r"(?:\{([^}]+)\}|\*\s+as\s+(\w+)|(\w+))"
    r"\s+from\s+['\"]([^'\"]+)['\"]"
)

EXPORT_RE = re.compile(
    r"export\s+(?:"
    r"(?:type\s+)?\{([^}]+)\}"
    r"|(?:default\s+)?(?:async\s+)?(?:abstract\s+)?"
    r"(?:const|let|function|class|type|interface|enum)\s+(\w+)"
    r")"
)

_ALIAS_SPLIT_RE = re.compile(r"\s+as\s+")
_TYPE_MODIFIER_RE = re.compile(r"^type\s+")


def line_number_of(content: str, snippet: str) -> int:
    """1-based line of the first occurrence of *snippet* in *content*."""
    offset = content.find(snippet)
    if offset < 0:
        offset = 0
    return content.count("\n", 0, offset) + 1


def is_relative_specifier(specifier: str, alias_prefixes: Sequence[str] = ALIAS_PREFIXES) -> bool:
    return specifier.startswith(".") or any(specifier.startswith(p) for p in alias_prefixes)


def _brace_names(body: str, keep_alias: bool) -> List[str]:
    names: List[str] = []
    for raw in body.split(","):
        item = _TYPE_MODIFIER_RE.sub("", raw.strip())
        if not item:
            continue
        parts = _ALIAS_SPLIT_RE.split(item)
        name = parts[-1] if keep_alias else parts[0]
        name = name.strip()
        if name:
            names.append(name)
    return names


def extract_imports(
    content: str,
    file_path: str,
    alias_prefixes: Sequence[str] = ALIAS_PREFIXES,
) -> List[ImportDeclaration]:
    """Return one record per imported binding, in source order."""
    imports: List[ImportDeclaration] = []

    for match in IMPORT_RE.finditer(content):
        default_with_list, named, namespace, default, specifier = match.groups()

        names: List[str] = []
        if default_with_list:
            names.append(default_with_list)
        if named:
            names.extend(_brace_names(named, keep_alias=False))
        elif namespace:
            names.append(namespace)
        elif default:
            names.append(default)

        line = line_number_of(content, match.group(0))
        relative = is_relative_specifier(specifier, alias_prefixes)
        for name in names:
            imports.append(ImportDeclaration(
                file=file_path,
                name=name,
                path=specifier,
                is_relative=relative,
                line=line,
            ))

    return imports


def extract_exports(content: str, file_path: str) -> List[ExportDeclaration]:
    """Return one record per exported name, in source order."""
    exports: List[ExportDeclaration] = []

    for match in EXPORT_RE.finditer(content):
        named, declared = match.groups()
        names = _brace_names(named, keep_alias=True) if named else [declared]
        line = line_number_of(content, match.group(0))
        for name in names:
            exports.append(ExportDeclaration(file=file_path, name=name, line=line))

    return exports


def extract_declarations(
    content: str,
    file_path: str,
    alias_prefixes: Sequence[str] = ALIAS_PREFIXES,
) -> Tuple[List[ImportDeclaration], List[ExportDeclaration]]:
    return (
        extract_imports(content, file_path, alias_prefixes),
        extract_exports(content, file_path),
    )


class DeclarationExtractor(ABC):
    """Turns raw file text into ordered import and export records."""

    @abstractmethod
    def extract(
        self,
        content: str,
        file_path: str,
    ) -> Tuple[List[ImportDeclaration], List[ExportDeclaration]]:
        ...


class PatternExtractor(DeclarationExtractor):
    """Regex-driven extractor; tolerant of anything it does not recognise."""

    def __init__(self, alias_prefixes: Sequence[str] = ALIAS_PREFIXES) -> None:
        self.alias_prefixes = tuple(alias_prefixes)

    def extract(
        self,
        content: str,
        file_path: str,
    ) -> Tuple[List[ImportDeclaration], List[ExportDeclaration]]:
        return extract_declarations(content, file_path, self.alias_prefixes)
