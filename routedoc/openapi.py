"""Assembly of the OpenAPI 3.0 document."""

from __future__ import annotations

import re
from typing import Any, Dict, Iterable, Optional

from .config import DEFAULT_DESCRIPTION, DEFAULT_TITLE, DEFAULT_VERSION
from .logging import get_logger
from .models import HttpMethod, RouteInfo
from .schema import SchemaGenerator

OPENAPI_VERSION = "3.0.0"
JSON_MEDIA_TYPE = "application/json"

_METHOD_ORDER = ["get", "post", "put", "delete", "patch", "options", "head"]
_AXUM_PARAM = re.compile(r"^:([^/]+)$")
_BRACED_PARAM = re.compile(r"^\{([^}:]+)(?::[^}]*)?\}$")

logger = get_logger("openapi")


def to_openapi_path(path: str) -> str:
    """Rewrite ``:id`` and ``{id:regex}`` segments as ``{id}``."""
    segments = []
    for segment in path.split("/"):
        match = _AXUM_PARAM.match(segment) or _BRACED_PARAM.match(segment)
        segments.append(f"{{{match.group(1).strip()}}}" if match else segment)
    return "/".join(segments)


class OpenApiBuilder:
    """Collects operations per path and renders the final document."""

    def __init__(
        self,
        title: str = DEFAULT_TITLE,
        version: str = DEFAULT_VERSION,
        description: Optional[str] = DEFAULT_DESCRIPTION,
    ) -> None:
        self.info: Dict[str, Any] = {"title": title, "version": version}
        if description is not None:
            self.info["description"] = description
        self._paths: Dict[str, Dict[str, Dict[str, Any]]] = {}

    def add_routes(self, routes: Iterable[RouteInfo], generator: SchemaGenerator) -> None:
        for route in routes:
            self.add_route(route, generator)

    def add_route(self, route: RouteInfo, generator: SchemaGenerator) -> None:
        logger.debug("Adding route: %s %s", route.method.value, route.path)
        operation: Dict[str, Any] = {
            "summary": f"{route.method.value} {route.path}",
            "operationId": route.handler_name,
        }
        if route.parameters:
            operation["parameters"] = [
                generator.generate_parameter_schema(parameter).to_dict()
                for parameter in route.parameters
            ]
        if route.request_body is not None:
            operation["requestBody"] = {
                "description": "Request body",
                "required": True,
                "content": {
                    JSON_MEDIA_TYPE: {"schema": generator.generate_schema(route.request_body).to_dict()}
                },
            }

        response: Dict[str, Any] = {"description": "Successful response"}
        if route.response_type is not None:
            response["content"] = {
                JSON_MEDIA_TYPE: {"schema": generator.generate_schema(route.response_type).to_dict()}
            }
        operation["responses"] = {"200": response}

        path_item = self._paths.setdefault(to_openapi_path(route.path), {})
        path_item[_method_key(route.method)] = operation

    def build(self, generator: SchemaGenerator) -> Dict[str, Any]:
        paths = {
            path: {method: item[method] for method in _METHOD_ORDER if method in item}
            for path, item in self._paths.items()
        }
        document: Dict[str, Any] = {
            "openapi": OPENAPI_VERSION,
            "info": dict(self.info),
            "paths": paths,
        }
        schemas = generator.schemas
        if schemas:
            document["components"] = {
                "schemas": {name: node.to_dict() for name, node in schemas.items()}
            }
        return document


def _method_key(method: HttpMethod) -> str:
    return method.value.lower()


__all__ = ["OPENAPI_VERSION", "OpenApiBuilder", "to_openapi_path"]
