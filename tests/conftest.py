from __future__ import annotations

import logging
import textwrap
from pathlib import Path
from typing import Callable, Iterator

import pytest

from routedoc.parser import ParsedFile, RustParser
from tests._fixtures.project_builder import ProjectBuilder


@pytest.fixture
def project(tmp_path: Path) -> ProjectBuilder:
    """Provide a reusable Rust project builder rooted at the pytest tmp_path."""
    return ProjectBuilder(tmp_path)


@pytest.fixture
def parse_rust() -> Callable[..., ParsedFile]:
    """Parse an inline Rust snippet into a ParsedFile."""
    parser = RustParser()

    def _parse(source: str, name: str = "main.rs") -> ParsedFile:
        return parser.parse_source(textwrap.dedent(source), name)

    return _parse


@pytest.fixture(autouse=True)
def _reset_routedoc_logger() -> Iterator[None]:
    # CLI tests call configure_logging, which stops propagation to caplog.
    yield
    logger = logging.getLogger("routedoc")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
