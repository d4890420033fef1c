"""Tests for the shared path helpers used by the extractors."""

from __future__ import annotations

import pytest

from routedoc.extractors.base import combine_paths, template_parameter_names
from routedoc.openapi import to_openapi_path


@pytest.mark.parametrize(
    ("prefix", "suffix", "expected"),
    [
        ("", "/users", "/users"),
        ("/api", "/users", "/api/users"),
        ("/api/", "/users", "/api/users"),
        ("/api", "users", "/api/users"),
        ("/api//", "//users", "/api/users"),
        ("/api", "", "/api"),
        ("/api", "/", "/api"),
    ],
)
def test_combine_paths(prefix: str, suffix: str, expected: str) -> None:
    assert combine_paths(prefix, suffix) == expected


def test_nested_prefixes_have_single_separators() -> None:
    path = combine_paths(combine_paths("/api/", "/v1/"), "/users")
    assert path == "/api/v1/users"
    assert "//" not in path


def test_template_parameter_names_for_both_syntaxes() -> None:
    assert template_parameter_names("/users/:id/posts/:post_id") == ["id", "post_id"]
    assert template_parameter_names("/users/{id}/files/{name:.*}") == ["id", "name"]
    assert template_parameter_names("/health") == []


def test_openapi_paths_use_braced_parameters() -> None:
    assert to_openapi_path("/users/:id") == "/users/{id}"
    assert to_openapi_path("/files/{name:.*}") == "/files/{name}"
    assert to_openapi_path("/users/{id}/posts") == "/users/{id}/posts"
    assert to_openapi_path("/") == "/"
