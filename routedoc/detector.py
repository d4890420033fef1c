"""Detect which web frameworks a Rust project imports."""

from __future__ import annotations

from typing import Iterable, Iterator, Optional, Set

from tree_sitter import Node

from .logging import get_logger
from .models import Framework
from .parser import ParsedFile
from .syntax import node_text, root_segment

_FRAMEWORK_CRATES = {
    "axum": Framework.AXUM,
    "actix_web": Framework.ACTIX_WEB,
}

logger = get_logger("detector")


def detect_frameworks(files: Iterable[ParsedFile]) -> Set[Framework]:
    """Return the frameworks imported by top-level ``use`` declarations."""
    detected: Set[Framework] = set()
    for parsed in files:
        for item in parsed.root.named_children:
            if item.type != "use_declaration":
                continue
            for crate in _imported_roots(item.child_by_field_name("argument")):
                framework = _FRAMEWORK_CRATES.get(crate)
                if framework is not None and framework not in detected:
                    logger.debug("Detected %s via %s", framework.value, parsed.path)
                    detected.add(framework)
    return detected


def _imported_roots(node: Optional[Node]) -> Iterator[str]:
    if node is None:
        return
    kind = node.type
    if kind in {"identifier", "scoped_identifier"}:
        yield root_segment(node_text(node))
    elif kind == "use_as_clause":
        yield from _imported_roots(node.child_by_field_name("path"))
    elif kind == "scoped_use_list":
        path = node.child_by_field_name("path")
        if path is not None:
            yield root_segment(node_text(path))
        else:
            yield from _imported_roots(node.child_by_field_name("list"))
    elif kind == "use_list":
        for child in node.named_children:
            yield from _imported_roots(child)
    elif kind == "use_wildcard":
        # `use axum::*` names its crate; a bare `*` names nothing.
        for child in node.named_children:
            yield from _imported_roots(child)
            break


__all__ = ["detect_frameworks"]
