"""Helpers for reading Rust syntax trees produced by tree-sitter."""

from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

from tree_sitter import Node

from .models import TypeDescriptor

UNKNOWN_TYPE = "unknown"

_COMMENT_NODES = {"line_comment", "block_comment"}
_ATTRIBUTE_NODES = {"attribute", "meta_item"}
_NON_TYPE_ARGUMENTS = {"lifetime", "line_comment", "block_comment", "type_binding"}


def node_text(node: Optional[Node]) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="ignore")


def last_segment(path: str) -> str:
    """Return the final ``::`` separated segment of a Rust path."""
    return path.rsplit("::", 1)[-1].strip()


def root_segment(path: str) -> str:
    """Return the first ``::`` separated segment, ignoring a leading ``::``."""
    return path.lstrip(":").split("::", 1)[0].strip()


def string_literal_value(node: Optional[Node]) -> Optional[str]:
    """Return the contents of a (raw) string literal node, unquoted."""
    if node is None:
        return None
    text = node_text(node)
    if node.type == "string_literal":
        if text.startswith("b"):
            text = text[1:]
        return text[1:-1] if len(text) >= 2 else ""
    if node.type == "raw_string_literal":
        text = text.lstrip("br")
        hashes = len(text) - len(text.lstrip("#"))
        inner = text[hashes:len(text) - hashes]
        return inner[1:-1] if len(inner) >= 2 else ""
    return None


def first_string_literal(node: Optional[Node]) -> Optional[str]:
    """Depth-first search for the first string literal below ``node``."""
    if node is None:
        return None
    value = string_literal_value(node)
    if value is not None:
        return value
    for child in node.named_children:
        value = first_string_literal(child)
        if value is not None:
            return value
    return None


def callee_name(node: Optional[Node]) -> str:
    """Last path segment of a call's ``function`` node.

    Method calls (``router.route``) yield the field name, plain calls
    (``routing::get``) the last path segment.
    """
    if node is None:
        return ""
    if node.type == "generic_function":
        return callee_name(node.child_by_field_name("function"))
    if node.type == "field_expression":
        return node_text(node.child_by_field_name("field"))
    return last_segment(node_text(node))


def call_arguments(call: Node) -> List[Node]:
    arguments = call.child_by_field_name("arguments")
    if arguments is None:
        return []
    return [child for child in arguments.named_children if child.type not in _COMMENT_NODES]


def method_receiver(call: Node) -> Optional[Node]:
    """Return the receiver of a method call expression, if any."""
    function = call.child_by_field_name("function")
    if function is not None and function.type == "generic_function":
        function = function.child_by_field_name("function")
    if function is not None and function.type == "field_expression":
        return function.child_by_field_name("value")
    return None


def type_name(node: Optional[Node]) -> str:
    """Bare name of a type node without generic arguments or path."""
    if node is None:
        return UNKNOWN_TYPE
    if node.type == "generic_type":
        return type_name(node.child_by_field_name("type"))
    if node.type == "scoped_type_identifier":
        return node_text(node.child_by_field_name("name"))
    if node.type == "reference_type":
        return type_name(node.child_by_field_name("type"))
    return last_segment(node_text(node))


def type_arguments(node: Optional[Node]) -> List[Node]:
    """Generic argument nodes of a ``generic_type`` (lifetimes excluded)."""
    if node is None or node.type != "generic_type":
        return []
    arguments = node.child_by_field_name("type_arguments")
    if arguments is None:
        return []
    return [child for child in arguments.named_children if child.type not in _NON_TYPE_ARGUMENTS]


def type_descriptor(node: Optional[Node]) -> TypeDescriptor:
    """Convert a type node into a :class:`TypeDescriptor`.

    ``Option``/``Vec`` are unwrapped recursively, references are looked
    through, arrays and slices become ``Vec`` nodes.
    """
    if node is None:
        return TypeDescriptor(name=UNKNOWN_TYPE)

    kind = node.type
    if kind == "reference_type":
        return type_descriptor(node.child_by_field_name("type"))
    if kind == "array_type":
        return TypeDescriptor.vec(type_descriptor(node.child_by_field_name("element")))
    if kind == "generic_type":
        name = type_name(node)
        arguments = type_arguments(node)
        if name == "Option" and arguments:
            return TypeDescriptor.option(type_descriptor(arguments[0]))
        if name == "Vec" and arguments:
            return TypeDescriptor.vec(type_descriptor(arguments[0]))
        return TypeDescriptor(name=name, generic_args=[type_descriptor(arg) for arg in arguments])
    if kind in {"type_identifier", "primitive_type", "scoped_type_identifier"}:
        return TypeDescriptor(name=type_name(node))
    return TypeDescriptor(name=UNKNOWN_TYPE)


def preceding_attributes(node: Node) -> List[Node]:
    """Attribute items written directly above ``node``, in source order."""
    attributes: List[Node] = []
    sibling = node.prev_named_sibling
    while sibling is not None and (
        sibling.type == "attribute_item" or sibling.type in _COMMENT_NODES
    ):
        if sibling.type == "attribute_item":
            attributes.append(sibling)
        sibling = sibling.prev_named_sibling
    attributes.reverse()
    return attributes


def attribute_parts(attribute_item: Node) -> Tuple[str, Optional[Node]]:
    """Return ``(path, arguments)`` for an ``#[path(arguments)]`` item."""
    for child in attribute_item.named_children:
        if child.type not in _ATTRIBUTE_NODES:
            continue
        arguments = child.child_by_field_name("arguments")
        path = ""
        for part in child.named_children:
            if part.type in {"identifier", "scoped_identifier"}:
                path = node_text(part)
                break
        return path, arguments
    return "", None


def split_token_tree(token_tree: Optional[Node]) -> Iterator[List[Node]]:
    """Yield the comma separated groups of named tokens inside a token tree.

    Separators are read from the source between tokens, so ``rename = "x",
    skip`` yields ``[rename, "x"]`` and ``[skip]``.
    """
    if token_tree is None or token_tree.text is None:
        return
    source = token_tree.text
    base = token_tree.start_byte
    group: List[Node] = []
    previous_end = base + 1
    for child in token_tree.named_children:
        gap = source[previous_end - base : child.start_byte - base]
        if b"," in gap and group:
            yield group
            group = []
        group.append(child)
        previous_end = child.end_byte
    if group:
        yield group


def binding_name(pattern: Optional[Node]) -> Optional[str]:
    """Single identifier bound by a parameter pattern.

    ``id`` and ``Path(id)`` bind ``id``; patterns that bind several names or
    none return ``None``.
    """
    if pattern is None:
        return None
    kind = pattern.type
    if kind == "identifier":
        return node_text(pattern)
    if kind in {"reference_pattern", "mut_pattern"}:
        named = [child for child in pattern.named_children if child.type != "mutable_specifier"]
        return binding_name(named[0]) if named else None
    if kind == "tuple_struct_pattern":
        inner = pattern.named_children[1:]
        if len(inner) == 1:
            return binding_name(inner[0])
        return None
    if kind == "tuple_pattern":
        if len(pattern.named_children) == 1:
            return binding_name(pattern.named_children[0])
        return None
    return None


__all__ = [
    "UNKNOWN_TYPE",
    "attribute_parts",
    "binding_name",
    "call_arguments",
    "callee_name",
    "first_string_literal",
    "last_segment",
    "method_receiver",
    "node_text",
    "preceding_attributes",
    "root_segment",
    "split_token_tree",
    "string_literal_value",
    "type_arguments",
    "type_descriptor",
    "type_name",
]
