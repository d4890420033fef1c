"""OpenAPI schema generation for resolved Rust types."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Set, Tuple

from .logging import get_logger
from .models import Parameter, TypeDescriptor
from .resolver import (
    EnumDef,
    FieldDef,
    PrimitiveType,
    StructDef,
    TypeResolver,
)

SCHEMA_REF_PREFIX = "#/components/schemas/"

_PRIMITIVE_SCHEMAS: Dict[str, Tuple[str, Optional[str]]] = {
    "i8": ("integer", "int32"),
    "i16": ("integer", "int32"),
    "i32": ("integer", "int32"),
    "u8": ("integer", "int32"),
    "u16": ("integer", "int32"),
    "u32": ("integer", "int32"),
    "i64": ("integer", "int64"),
    "i128": ("integer", "int64"),
    "isize": ("integer", "int64"),
    "u64": ("integer", "int64"),
    "u128": ("integer", "int64"),
    "usize": ("integer", "int64"),
    "f32": ("number", "float"),
    "f64": ("number", "double"),
    "bool": ("boolean", None),
    "String": ("string", None),
    "str": ("string", None),
    "char": ("string", None),
}

logger = get_logger("schema")


class SchemaKind(str, Enum):
    PRIMITIVE = "primitive"
    OBJECT = "object"
    ARRAY = "array"
    REFERENCE = "reference"
    ENUM = "enum"


@dataclass
class SchemaNode:
    """A JSON schema fragment as used by OpenAPI 3.0."""

    kind: SchemaKind
    type: Optional[str] = None
    format: Optional[str] = None
    properties: Dict[str, "SchemaNode"] = field(default_factory=dict)
    required: List[str] = field(default_factory=list)
    items: Optional["SchemaNode"] = None
    enum_values: List[str] = field(default_factory=list)
    ref: Optional[str] = None

    @classmethod
    def primitive(cls, type_: str, format_: Optional[str] = None) -> "SchemaNode":
        return cls(kind=SchemaKind.PRIMITIVE, type=type_, format=format_)

    @classmethod
    def object(cls) -> "SchemaNode":
        return cls(kind=SchemaKind.OBJECT, type="object")

    @classmethod
    def array(cls, items: "SchemaNode") -> "SchemaNode":
        return cls(kind=SchemaKind.ARRAY, type="array", items=items)

    @classmethod
    def reference(cls, name: str) -> "SchemaNode":
        return cls(kind=SchemaKind.REFERENCE, ref=f"{SCHEMA_REF_PREFIX}{name}")

    @classmethod
    def enum(cls, values: List[str]) -> "SchemaNode":
        return cls(kind=SchemaKind.ENUM, type="string", enum_values=list(values))

    def to_dict(self) -> Dict[str, Any]:
        if self.ref is not None:
            return {"$ref": self.ref}
        data: Dict[str, Any] = {}
        if self.type is not None:
            data["type"] = self.type
        if self.format is not None:
            data["format"] = self.format
        if self.properties:
            data["properties"] = {name: node.to_dict() for name, node in self.properties.items()}
        if self.required:
            data["required"] = list(self.required)
        if self.items is not None:
            data["items"] = self.items.to_dict()
        if self.enum_values:
            data["enum"] = list(self.enum_values)
        return data


@dataclass
class ParameterSchema:
    name: str
    location: str
    required: bool
    schema: SchemaNode

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "in": self.location,
            "required": self.required,
            "schema": self.schema.to_dict(),
        }


class SchemaGenerator:
    """Builds schemas from type descriptors and collects named component schemas.

    Structs and enums are emitted once into the catalog and referenced by
    ``$ref`` everywhere else. The catalog slot is reserved before a struct's
    fields are generated so self-referencing types terminate.
    """

    def __init__(self, resolver: TypeResolver) -> None:
        self._resolver = resolver
        self._catalog: Dict[str, SchemaNode] = {}

    @property
    def schemas(self) -> Dict[str, SchemaNode]:
        return dict(self._catalog)

    def generate_schema(self, descriptor: TypeDescriptor) -> SchemaNode:
        if descriptor.is_option:
            inner = descriptor.inner
            return self.generate_schema(inner) if inner is not None else SchemaNode.object()
        if descriptor.is_vec:
            inner = descriptor.inner
            items = self.generate_schema(inner) if inner is not None else SchemaNode.object()
            return SchemaNode.array(items)

        resolved = self._resolver.resolve(descriptor.name)
        if resolved is None:
            return SchemaNode.object()
        kind = resolved.kind
        if isinstance(kind, PrimitiveType):
            return _primitive_schema(kind.name)
        if isinstance(kind, (StructDef, EnumDef)):
            if resolved.name not in self._catalog:
                self._catalog[resolved.name] = SchemaNode.object()
                self._catalog[resolved.name] = self._component_schema(resolved.name, kind)
            return SchemaNode.reference(resolved.name)
        return SchemaNode.object()

    def generate_parameter_schema(self, parameter: Parameter) -> ParameterSchema:
        return ParameterSchema(
            name=parameter.name,
            location=parameter.location.value,
            required=parameter.required,
            schema=self.generate_schema(parameter.type),
        )

    def _component_schema(self, name: str, kind: StructDef | EnumDef) -> SchemaNode:
        if isinstance(kind, EnumDef):
            return SchemaNode.enum(kind.variants)
        node = SchemaNode.object()
        self._add_fields(node, kind, {name})
        logger.debug("Generated schema for %s", name)
        return node

    def _add_fields(self, node: SchemaNode, struct: StructDef, flattening: Set[str]) -> None:
        for field_def in struct.fields:
            if field_def.attrs.skip:
                continue
            if field_def.attrs.flatten and self._flatten(node, field_def, flattening):
                continue
            node.properties[field_def.serialized_name] = self.generate_schema(field_def.type)
            if not field_def.optional:
                node.required.append(field_def.serialized_name)

    def _flatten(self, node: SchemaNode, field_def: FieldDef, flattening: Set[str]) -> bool:
        """Inline the fields of a ``#[serde(flatten)]`` struct into ``node``."""
        descriptor = field_def.type.inner if field_def.optional else field_def.type
        if descriptor is None or descriptor.is_vec or descriptor.name in flattening:
            return False
        resolved = self._resolver.resolve(descriptor.name)
        if resolved is None or not isinstance(resolved.kind, StructDef):
            return False
        inlined = SchemaNode.object()
        self._add_fields(inlined, resolved.kind, flattening | {descriptor.name})
        node.properties.update(inlined.properties)
        if not field_def.optional:
            node.required.extend(name for name in inlined.required if name not in node.required)
        return True


def _primitive_schema(name: str) -> SchemaNode:
    type_, format_ = _PRIMITIVE_SCHEMAS.get(name, ("string", None))
    return SchemaNode.primitive(type_, format_)


__all__ = [
    "ParameterSchema",
    "SCHEMA_REF_PREFIX",
    "SchemaGenerator",
    "SchemaKind",
    "SchemaNode",
]
