"""Tests for routedoc.resolver."""

from __future__ import annotations

import logging

import pytest

from routedoc.models import TypeDescriptor
from routedoc.resolver import (
    EnumDef,
    GenericPlaceholder,
    PrimitiveType,
    SerdeAttributes,
    StructDef,
    TypeResolver,
)

_MODELS = """
use serde::{Deserialize, Serialize};

#[derive(Serialize, Deserialize)]
pub struct User {
    pub id: u64,
    #[serde(rename = "userName")]
    pub name: String,
    pub email: Option<String>,
    pub tags: Vec<String>,
    #[serde(skip)]
    pub password_hash: String,
    #[serde(skip_serializing_if = "Option::is_none")]
    pub nickname: Option<String>,
    #[serde(flatten)]
    pub audit: Audit,
}

#[derive(Serialize)]
pub struct Audit {
    pub created_at: String,
}

#[derive(Serialize)]
pub enum Role {
    Admin,
    Member,
    Guest,
}
"""


@pytest.mark.parametrize("name", ["String", "str", "bool", "char", "i8", "u128", "isize", "usize", "f64"])
def test_resolves_primitives(name: str) -> None:
    resolved = TypeResolver([]).resolve(name)
    assert resolved is not None
    assert resolved.kind == PrimitiveType(name)


def test_resolves_struct_fields(parse_rust) -> None:
    resolver = TypeResolver([parse_rust(_MODELS)])
    resolved = resolver.resolve("User")

    assert resolved is not None
    assert isinstance(resolved.kind, StructDef)
    fields = {field.name: field for field in resolved.kind.fields}
    assert list(fields) == [
        "id",
        "name",
        "email",
        "tags",
        "password_hash",
        "nickname",
        "audit",
    ]
    assert fields["id"].type == TypeDescriptor("u64")
    assert fields["email"].optional is True
    assert fields["email"].type == TypeDescriptor.option(TypeDescriptor("String"))
    assert fields["tags"].optional is False
    assert fields["tags"].type == TypeDescriptor.vec(TypeDescriptor("String"))


def test_parses_serde_attributes_structurally(parse_rust) -> None:
    resolver = TypeResolver([parse_rust(_MODELS)])
    resolved = resolver.resolve("User")
    assert resolved is not None
    attrs = {field.name: field.attrs for field in resolved.kind.fields}  # type: ignore[union-attr]

    assert attrs["name"] == SerdeAttributes(rename="userName")
    assert attrs["password_hash"] == SerdeAttributes(skip=True)
    assert attrs["nickname"] == SerdeAttributes()
    assert attrs["audit"] == SerdeAttributes(flatten=True)
    assert attrs["id"] == SerdeAttributes()


def test_resolves_enum_variants(parse_rust) -> None:
    resolver = TypeResolver([parse_rust(_MODELS)])
    resolved = resolver.resolve("Role")

    assert resolved is not None
    assert resolved.kind == EnumDef(variants=["Admin", "Member", "Guest"])


def test_resolution_is_cached(parse_rust) -> None:
    resolver = TypeResolver([parse_rust(_MODELS)])
    first = resolver.resolve("User")
    second = resolver.resolve("User")
    assert first is second


def test_struct_resolution_resolves_field_types(parse_rust) -> None:
    resolver = TypeResolver([parse_rust(_MODELS)])
    user = resolver.resolve("User")
    audit = resolver.resolve("Audit")

    assert user is not None and audit is not None
    # Audit was cached while resolving User.
    assert resolver.resolve("Audit") is audit


def test_self_referential_struct_terminates(parse_rust, caplog) -> None:
    resolver = TypeResolver(
        [
            parse_rust(
                """
                struct TreeNode {
                    value: i32,
                    children: Vec<TreeNode>,
                    parent: Option<Box<TreeNode>>,
                }
                """
            )
        ]
    )

    with caplog.at_level(logging.WARNING, logger="routedoc"):
        resolved = resolver.resolve("TreeNode")

    assert resolved is not None
    assert isinstance(resolved.kind, StructDef)
    assert "Circular reference detected for type: TreeNode" in caplog.text
    assert resolver.resolve("TreeNode") is resolved


def test_mutually_recursive_types_resolve_to_definitions(parse_rust) -> None:
    resolver = TypeResolver(
        [
            parse_rust(
                """
                struct Author { books: Vec<Book> }
                struct Book { author: Option<Author> }
                """
            )
        ]
    )

    author = resolver.resolve("Author")
    book = resolver.resolve("Book")

    assert author is not None and isinstance(author.kind, StructDef)
    assert book is not None and isinstance(book.kind, StructDef)
    assert not isinstance(book.kind, GenericPlaceholder)


def test_structs_in_modules_and_first_declaration_wins(parse_rust) -> None:
    resolver = TypeResolver(
        [
            parse_rust(
                """
                mod models {
                    pub struct Item { pub sku: String }
                }
                """,
                "a.rs",
            ),
            parse_rust("pub struct Item { pub other: i32 }\n", "b.rs"),
        ]
    )

    resolved = resolver.resolve("Item")
    assert resolved is not None
    assert [field.name for field in resolved.kind.fields] == ["sku"]  # type: ignore[union-attr]


def test_struct_wins_over_enum_with_same_name(parse_rust) -> None:
    resolver = TypeResolver(
        [
            parse_rust(
                """
                enum Status { Active }
                struct Status { code: u16 }
                """
            )
        ]
    )

    resolved = resolver.resolve("Status")
    assert resolved is not None
    assert isinstance(resolved.kind, StructDef)


def test_unknown_type_returns_none(caplog) -> None:
    resolver = TypeResolver([])
    with caplog.at_level(logging.WARNING, logger="routedoc"):
        assert resolver.resolve("Missing") is None
        assert resolver.resolve("Missing") is None
    assert caplog.text.count("Could not resolve type: Missing") == 1


def test_tuple_and_unit_structs_have_no_fields(parse_rust) -> None:
    resolver = TypeResolver([parse_rust("struct Id(u64);\nstruct Marker;\n")])

    assert resolver.resolve("Id").kind == StructDef()  # type: ignore[union-attr]
    assert resolver.resolve("Marker").kind == StructDef()  # type: ignore[union-attr]
