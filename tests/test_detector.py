"""Tests for routedoc.detector."""

from __future__ import annotations

from routedoc.detector import detect_frameworks
from routedoc.models import Framework


def test_detects_axum_from_scoped_use_list(parse_rust) -> None:
    parsed = parse_rust("use axum::{routing::get, Router};\n")
    assert detect_frameworks([parsed]) == {Framework.AXUM}


def test_detects_actix_from_renamed_import(parse_rust) -> None:
    parsed = parse_rust("use actix_web as web;\n")
    assert detect_frameworks([parsed]) == {Framework.ACTIX_WEB}


def test_detects_both_frameworks_across_files(parse_rust) -> None:
    files = [
        parse_rust("use axum::Router;\n", "a.rs"),
        parse_rust("use {actix_web::App, serde::Serialize};\n", "b.rs"),
    ]
    assert detect_frameworks(files) == {Framework.AXUM, Framework.ACTIX_WEB}


def test_wildcard_import_counts_its_crate(parse_rust) -> None:
    parsed = parse_rust("use axum::*;\n")
    assert detect_frameworks([parsed]) == {Framework.AXUM}


def test_only_root_segment_is_matched(parse_rust) -> None:
    parsed = parse_rust(
        """
        use crate::axum::Router;
        use my_app::actix_web::App;
        use serde::Deserialize;
        """
    )
    assert detect_frameworks([parsed]) == set()


def test_nested_module_imports_are_ignored(parse_rust) -> None:
    parsed = parse_rust(
        """
        mod routes {
            use axum::Router;
        }
        """
    )
    assert detect_frameworks([parsed]) == set()


def test_no_files_detect_nothing() -> None:
    assert detect_frameworks([]) == set()
