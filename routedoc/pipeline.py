"""End-to-end generation: scan, parse, detect, extract, assemble."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import RouteDocConfig, load_config
from .detector import detect_frameworks
from .errors import FrameworkNotDetectedError, NoSourceFilesError
from .extractors import extractors_for
from .logging import get_logger
from .models import Framework, RouteInfo
from .openapi import OpenApiBuilder
from .parser import RustParser
from .resolver import TypeResolver
from .scanner import SourceScanner
from .schema import SchemaGenerator


@dataclass
class GenerationResult:
    """Outcome of one generation run."""

    document: Dict[str, Any]
    routes: List[RouteInfo]
    frameworks: List[Framework]
    files_scanned: int
    files_parsed: int
    warnings: List[str] = field(default_factory=list)


class Pipeline:
    """Coordinates one OpenAPI generation run over a Rust project."""

    def __init__(
        self,
        scanner: SourceScanner | None = None,
        parser: RustParser | None = None,
    ) -> None:
        self._scanner = scanner
        self.parser = parser or RustParser()
        self.logger = get_logger("pipeline")

    def run(
        self,
        path: str | Path,
        *,
        framework: Optional[Framework] = None,
        title: Optional[str] = None,
        version: Optional[str] = None,
        description: Optional[str] = None,
        config: RouteDocConfig | None = None,
    ) -> GenerationResult:
        """Generate the OpenAPI document for the project at ``path``."""
        project = Path(path).expanduser().resolve()
        if config is None:
            config = load_config(project) if project.is_dir() else RouteDocConfig(root=project)

        self.logger.info("Scanning %s", project)
        scanner = self._scanner or SourceScanner(config.exclude_paths)
        scan = scanner.scan(project)
        if not scan.files:
            raise NoSourceFilesError(f"No Rust source files found under {project}")

        parsed = self.parser.parse_files(scan.files)
        self.logger.info("Parsed %d of %d files", len(parsed), len(scan.files))
        if not parsed:
            raise NoSourceFilesError(f"None of the Rust source files under {project} could be parsed")

        forced = framework or config.framework
        if forced is not None:
            frameworks = [forced]
            self.logger.info("Using framework %s", forced.value)
        else:
            detected = detect_frameworks(parsed)
            if not detected:
                raise FrameworkNotDetectedError()
            frameworks = [item for item in Framework if item in detected]
            self.logger.info("Detected frameworks: %s", ", ".join(item.value for item in frameworks))

        routes: List[RouteInfo] = []
        for extractor in extractors_for(frameworks):
            routes.extend(extractor.extract_routes(parsed))
        if not routes:
            self.logger.warning("No routes found in %s", project)
        else:
            self.logger.info("Extracted %d routes", len(routes))

        generator = SchemaGenerator(TypeResolver(parsed))
        builder = OpenApiBuilder(
            title=title or config.info.title,
            version=version or config.info.version,
            description=description if description is not None else config.info.description,
        )
        builder.add_routes(routes, generator)

        return GenerationResult(
            document=builder.build(generator),
            routes=routes,
            frameworks=frameworks,
            files_scanned=len(scan.files),
            files_parsed=len(parsed),
            warnings=list(scan.warnings),
        )


__all__ = ["GenerationResult", "Pipeline"]
