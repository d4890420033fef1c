"""Resolution of Rust type names to their declarations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Set, Union

from tree_sitter import Node

from .logging import get_logger
from .models import TypeDescriptor
from .parser import ParsedFile
from .syntax import (
    UNKNOWN_TYPE,
    attribute_parts,
    last_segment,
    node_text,
    preceding_attributes,
    split_token_tree,
    string_literal_value,
    type_descriptor,
)

PRIMITIVE_TYPES = frozenset(
    {
        "String",
        "str",
        "bool",
        "char",
        "i8",
        "i16",
        "i32",
        "i64",
        "i128",
        "isize",
        "u8",
        "u16",
        "u32",
        "u64",
        "u128",
        "usize",
        "f32",
        "f64",
    }
)

logger = get_logger("resolver")


@dataclass(frozen=True)
class SerdeAttributes:
    """Subset of ``#[serde(...)]`` field options that shape the schema."""

    rename: Optional[str] = None
    skip: bool = False
    flatten: bool = False


@dataclass
class FieldDef:
    name: str
    type: TypeDescriptor
    optional: bool
    attrs: SerdeAttributes = field(default_factory=SerdeAttributes)

    @property
    def serialized_name(self) -> str:
        return self.attrs.rename or self.name


@dataclass(frozen=True)
class PrimitiveType:
    name: str


@dataclass
class StructDef:
    fields: List[FieldDef] = field(default_factory=list)


@dataclass
class EnumDef:
    variants: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class GenericPlaceholder:
    """Stand-in for a type whose resolution is already in progress."""

    placeholder: str


TypeKind = Union[PrimitiveType, StructDef, EnumDef, GenericPlaceholder]


@dataclass
class ResolvedType:
    name: str
    kind: TypeKind


class TypeResolver:
    """Looks up struct and enum declarations across a set of parsed files.

    Results are cached for the lifetime of the resolver. Resolving a struct
    also resolves the types of its fields, so a whole reachable type graph is
    cached by one call. A name that is requested again while it is still being
    resolved yields an uncached :class:`GenericPlaceholder`.
    """

    def __init__(self, files: Iterable[ParsedFile]) -> None:
        self._structs: Dict[str, Node] = {}
        self._enums: Dict[str, Node] = {}
        self._cache: Dict[str, ResolvedType] = {}
        self._unresolved: Set[str] = set()
        self._in_progress: Set[str] = set()
        for parsed in files:
            self._index(parsed.root)

    def resolve(self, name: str) -> Optional[ResolvedType]:
        """Resolve ``name`` to a primitive, struct or enum definition."""
        cached = self._cache.get(name)
        if cached is not None:
            return cached
        if name in self._unresolved:
            return None
        if name in self._in_progress:
            logger.warning("Circular reference detected for type: %s", name)
            return ResolvedType(name=name, kind=GenericPlaceholder(f"CircularRef<{name}>"))

        self._in_progress.add(name)
        try:
            resolved = self._resolve_declaration(name)
        finally:
            self._in_progress.discard(name)

        if resolved is None:
            logger.warning("Could not resolve type: %s", name)
            self._unresolved.add(name)
            return None
        self._cache[name] = resolved
        return resolved

    def resolve_descriptor(self, descriptor: TypeDescriptor) -> None:
        """Resolve every named type reachable from ``descriptor``."""
        inner = descriptor.inner
        if inner is not None:
            self.resolve_descriptor(inner)
            return
        if descriptor.name != UNKNOWN_TYPE:
            self.resolve(descriptor.name)
        for argument in descriptor.generic_args:
            self.resolve_descriptor(argument)

    def _resolve_declaration(self, name: str) -> Optional[ResolvedType]:
        if name in PRIMITIVE_TYPES:
            return ResolvedType(name=name, kind=PrimitiveType(name))

        struct_node = self._structs.get(name)
        if struct_node is not None:
            struct = parse_struct(struct_node)
            logger.debug("Resolved struct %s with %d fields", name, len(struct.fields))
            # Resolve field types while `name` is still marked in progress.
            for field_def in struct.fields:
                self.resolve_descriptor(field_def.type)
            return ResolvedType(name=name, kind=struct)

        enum_node = self._enums.get(name)
        if enum_node is not None:
            return ResolvedType(name=name, kind=parse_enum(enum_node))
        return None

    def _index(self, node: Node) -> None:
        for child in node.named_children:
            if child.type == "struct_item":
                self._structs.setdefault(node_text(child.child_by_field_name("name")), child)
            elif child.type == "enum_item":
                self._enums.setdefault(node_text(child.child_by_field_name("name")), child)
            elif child.type in {"mod_item", "declaration_list"}:
                self._index(child)


def parse_struct(node: Node) -> StructDef:
    """Named fields of a ``struct_item``; tuple and unit structs have none."""
    struct = StructDef()
    body = node.child_by_field_name("body")
    if body is None or body.type != "field_declaration_list":
        return struct
    for child in body.named_children:
        if child.type != "field_declaration":
            continue
        descriptor = type_descriptor(child.child_by_field_name("type"))
        struct.fields.append(
            FieldDef(
                name=node_text(child.child_by_field_name("name")),
                type=descriptor,
                optional=descriptor.is_option,
                attrs=parse_serde_attributes(preceding_attributes(child)),
            )
        )
    return struct


def parse_enum(node: Node) -> EnumDef:
    enum = EnumDef()
    body = node.child_by_field_name("body")
    if body is None:
        return enum
    for child in body.named_children:
        if child.type == "enum_variant":
            enum.variants.append(node_text(child.child_by_field_name("name")))
    return enum


def parse_serde_attributes(attributes: Sequence[Node]) -> SerdeAttributes:
    """Read ``rename``, ``skip`` and ``flatten`` from ``#[serde(...)]`` items."""
    rename: Optional[str] = None
    skip = False
    flatten = False
    for attribute in attributes:
        path, arguments = attribute_parts(attribute)
        if last_segment(path) != "serde":
            continue
        for group in split_token_tree(arguments):
            key = node_text(group[0]) if group[0].type == "identifier" else ""
            if len(group) == 1:
                skip = skip or key == "skip"
                flatten = flatten or key == "flatten"
            elif key == "rename" and len(group) == 2:
                value = string_literal_value(group[1])
                if value is not None:
                    rename = value
    return SerdeAttributes(rename=rename, skip=skip, flatten=flatten)


__all__ = [
    "EnumDef",
    "FieldDef",
    "GenericPlaceholder",
    "PRIMITIVE_TYPES",
    "PrimitiveType",
    "ResolvedType",
    "SerdeAttributes",
    "StructDef",
    "TypeKind",
    "TypeResolver",
    "parse_enum",
    "parse_serde_attributes",
    "parse_struct",
]
