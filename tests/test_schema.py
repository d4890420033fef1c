"""Tests for routedoc.schema."""

from __future__ import annotations

import pytest

from routedoc.models import Parameter, ParameterLocation, TypeDescriptor
from routedoc.resolver import TypeResolver
from routedoc.schema import SchemaGenerator, SchemaKind


def _generator(parse_rust, source: str = "") -> SchemaGenerator:  # noqa: ANN001 - fixture callable
    files = [parse_rust(source)] if source else []
    return SchemaGenerator(TypeResolver(files))


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("i32", {"type": "integer", "format": "int32"}),
        ("u8", {"type": "integer", "format": "int32"}),
        ("i64", {"type": "integer", "format": "int64"}),
        ("u128", {"type": "integer", "format": "int64"}),
        ("usize", {"type": "integer", "format": "int64"}),
        ("f32", {"type": "number", "format": "float"}),
        ("f64", {"type": "number", "format": "double"}),
        ("bool", {"type": "boolean"}),
        ("String", {"type": "string"}),
        ("char", {"type": "string"}),
    ],
)
def test_primitive_schemas(parse_rust, name: str, expected: dict) -> None:
    generator = _generator(parse_rust)
    assert generator.generate_schema(TypeDescriptor(name)).to_dict() == expected
    assert generator.schemas == {}


def test_option_vec_of_struct_is_array_of_references(parse_rust) -> None:
    generator = _generator(
        parse_rust,
        """
        struct User { id: u32, name: String }
        struct Response { data: Option<Vec<User>> }
        """,
    )

    schema = generator.generate_schema(TypeDescriptor("Response"))

    assert schema.kind is SchemaKind.REFERENCE
    assert schema.to_dict() == {"$ref": "#/components/schemas/Response"}
    catalog = {name: node.to_dict() for name, node in generator.schemas.items()}
    assert list(catalog) == ["Response", "User"]
    assert catalog["Response"] == {
        "type": "object",
        "properties": {
            "data": {"type": "array", "items": {"$ref": "#/components/schemas/User"}},
        },
    }
    assert catalog["User"] == {
        "type": "object",
        "properties": {
            "id": {"type": "integer", "format": "int32"},
            "name": {"type": "string"},
        },
        "required": ["id", "name"],
    }


def test_required_excludes_optional_and_skipped_fields(parse_rust) -> None:
    generator = _generator(
        parse_rust,
        """
        struct Account {
            id: u64,
            #[serde(rename = "displayName")]
            display_name: String,
            bio: Option<String>,
            #[serde(skip)]
            secret: String,
        }
        """,
    )

    generator.generate_schema(TypeDescriptor("Account"))
    account = generator.schemas["Account"].to_dict()

    assert list(account["properties"]) == ["id", "displayName", "bio"]
    assert account["required"] == ["id", "displayName"]


def test_self_referential_struct_yields_single_catalog_entry(parse_rust) -> None:
    generator = _generator(
        parse_rust,
        """
        struct Category {
            name: String,
            children: Vec<Category>,
            parent: Option<Category>,
        }
        """,
    )

    first = generator.generate_schema(TypeDescriptor("Category"))
    second = generator.generate_schema(TypeDescriptor("Category"))

    assert first.to_dict() == second.to_dict() == {"$ref": "#/components/schemas/Category"}
    assert list(generator.schemas) == ["Category"]
    category = generator.schemas["Category"].to_dict()
    assert category["properties"]["children"] == {
        "type": "array",
        "items": {"$ref": "#/components/schemas/Category"},
    }
    assert category["properties"]["parent"] == {"$ref": "#/components/schemas/Category"}
    assert category["required"] == ["name", "children"]


def test_enum_schema(parse_rust) -> None:
    generator = _generator(parse_rust, "enum Role { Admin, Member }\n")

    generator.generate_schema(TypeDescriptor.vec(TypeDescriptor("Role")))

    assert generator.schemas["Role"].to_dict() == {"type": "string", "enum": ["Admin", "Member"]}


def test_flattened_struct_fields_are_inlined(parse_rust) -> None:
    generator = _generator(
        parse_rust,
        """
        struct Pagination { page: u32, per_page: Option<u32> }
        struct UserList {
            total: u64,
            #[serde(flatten)]
            pagination: Pagination,
        }
        """,
    )

    generator.generate_schema(TypeDescriptor("UserList"))
    user_list = generator.schemas["UserList"].to_dict()

    assert list(user_list["properties"]) == ["total", "page", "per_page"]
    assert user_list["required"] == ["total", "page"]
    assert "Pagination" not in generator.schemas


def test_unresolved_types_become_plain_objects(parse_rust) -> None:
    generator = _generator(parse_rust, "struct Wrapper { inner: Mystery }\n")

    assert generator.generate_schema(TypeDescriptor("HttpResponse")).to_dict() == {"type": "object"}
    generator.generate_schema(TypeDescriptor("Wrapper"))
    assert generator.schemas["Wrapper"].to_dict()["properties"]["inner"] == {"type": "object"}


def test_catalog_keeps_first_discovery_order(parse_rust) -> None:
    generator = _generator(
        parse_rust,
        """
        struct A { b: B }
        struct B { c: C }
        struct C { value: i32 }
        struct D { value: i32 }
        """,
    )

    generator.generate_schema(TypeDescriptor("D"))
    generator.generate_schema(TypeDescriptor("A"))
    generator.generate_schema(TypeDescriptor("C"))

    assert list(generator.schemas) == ["D", "A", "B", "C"]


def test_parameter_schema(parse_rust) -> None:
    generator = _generator(parse_rust)
    parameter = Parameter("page", ParameterLocation.QUERY, TypeDescriptor("u32"), False)

    assert generator.generate_parameter_schema(parameter).to_dict() == {
        "name": "page",
        "in": "query",
        "required": False,
        "schema": {"type": "integer", "format": "int32"},
    }
