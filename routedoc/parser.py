"""Tree-sitter based parsing of Rust source files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

import tree_sitter_rust
from tree_sitter import Language, Node, Parser, Tree

from .errors import SourceParseError
from .logging import get_logger

RUST_LANGUAGE = Language(tree_sitter_rust.language())

logger = get_logger("parser")


@dataclass(frozen=True)
class ParsedFile:
    """A Rust file together with its syntax tree."""

    path: Path
    tree: Tree

    @property
    def root(self) -> Node:
        return self.tree.root_node


class RustParser:
    """Parses Rust sources, rejecting files that contain syntax errors."""

    def __init__(self) -> None:
        self._parser = Parser(RUST_LANGUAGE)

    def parse_source(self, source: str | bytes, path: str | Path = "<memory>") -> ParsedFile:
        source_bytes = source.encode("utf-8") if isinstance(source, str) else source
        tree = self._parser.parse(source_bytes)
        if tree.root_node.has_error:
            raise SourceParseError(path, _describe_error(tree.root_node))
        return ParsedFile(path=Path(path), tree=tree)

    def parse_file(self, path: str | Path) -> ParsedFile:
        file_path = Path(path)
        try:
            source = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceParseError(file_path, str(exc)) from exc
        return self.parse_source(source, file_path)

    def parse_files(self, paths: Iterable[str | Path]) -> List[ParsedFile]:
        """Parse every path, skipping the ones that fail."""
        parsed: List[ParsedFile] = []
        for path in paths:
            try:
                parsed.append(self.parse_file(path))
            except SourceParseError as exc:
                logger.debug("Skipping %s: %s", exc.path, exc.message)
        return parsed


def _describe_error(node: Node) -> str:
    error = _first_error(node)
    if error is None:
        return "syntax error"
    row, column = error.start_point
    return f"syntax error at line {row + 1}, column {column + 1}"


def _first_error(node: Node) -> Optional[Node]:
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


__all__ = ["ParsedFile", "RUST_LANGUAGE", "RustParser"]
