"""Shared route extraction contract and helpers."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from tree_sitter import Node

from ..logging import get_logger
from ..models import (
    Framework,
    Parameter,
    ParameterLocation,
    RouteInfo,
    TypeDescriptor,
)
from ..parser import ParsedFile
from ..syntax import (
    binding_name,
    last_segment,
    node_text,
    type_arguments,
    type_descriptor,
    type_name,
)

UNKNOWN_HANDLER = "unknown"

_PATH_PLACEHOLDER_TYPE = "String"
_HANDLER_NODES = {"identifier", "scoped_identifier"}


@dataclass
class FunctionSignature:
    """Typed parameters and return type of a ``fn`` item."""

    name: str
    parameters: List[Tuple[Optional[Node], Node]] = field(default_factory=list)
    return_type: Optional[Node] = None


@dataclass
class ExtractionState:
    """Mutable state owned by a single ``extract_routes`` call."""

    routes: List[RouteInfo] = field(default_factory=list)
    functions: Dict[str, FunctionSignature] = field(default_factory=dict)


class RouteExtractor(ABC):
    """Two pass extractor: discover routes, then bind them to handler signatures."""

    framework: Framework

    def __init__(self) -> None:
        self.logger = get_logger(f"extractors.{self.framework.name.lower()}")

    def extract_routes(self, files: Sequence[ParsedFile]) -> List[RouteInfo]:
        """Return every route declared across ``files`` in discovery order."""
        state = ExtractionState()
        for parsed in files:
            self._visit(parsed.root, "", state)
        self.logger.debug(
            "Discovered %d routes and %d functions", len(state.routes), len(state.functions)
        )
        bind_handlers(state.routes, state.functions, self.logger)
        return state.routes

    def _visit(self, node: Node, prefix: str, state: ExtractionState) -> None:
        if node.type == "function_item":
            signature = function_signature(node)
            if signature is not None:
                state.functions[signature.name] = signature
        if self._handle(node, prefix, state):
            return
        for child in node.named_children:
            self._visit(child, prefix, state)

    @abstractmethod
    def _handle(self, node: Node, prefix: str, state: ExtractionState) -> bool:
        """Inspect ``node``; return True when its children were already visited."""


def combine_paths(prefix: str, suffix: str) -> str:
    """Join a scope prefix and a route path with exactly one ``/``."""
    if not prefix:
        return suffix
    prefix = prefix.rstrip("/")
    suffix = suffix.lstrip("/")
    if not suffix:
        return prefix
    return f"{prefix}/{suffix}"


def template_parameter_names(path: str) -> List[str]:
    """Names of the ``:name`` and ``{name}`` / ``{name:regex}`` segments of ``path``."""
    names: List[str] = []
    for segment in path.split("/"):
        if segment.startswith(":") and len(segment) > 1:
            names.append(segment[1:])
        elif segment.startswith("{") and segment.endswith("}") and len(segment) > 2:
            names.append(segment[1:-1].split(":", 1)[0].strip())
    return names


def template_parameters(path: str) -> List[Parameter]:
    return [
        Parameter(
            name=name,
            location=ParameterLocation.PATH,
            type=TypeDescriptor(name=_PATH_PLACEHOLDER_TYPE),
            required=True,
        )
        for name in template_parameter_names(path)
    ]


def handler_name(node: Optional[Node]) -> str:
    """Name of the function a handler expression refers to."""
    if node is not None and node.type in _HANDLER_NODES:
        return last_segment(node_text(node))
    return UNKNOWN_HANDLER


def is_handler_reference(node: Optional[Node]) -> bool:
    return node is not None and node.type in _HANDLER_NODES


def function_signature(node: Node) -> Optional[FunctionSignature]:
    name_node = node.child_by_field_name("name")
    if name_node is None:
        return None
    signature = FunctionSignature(
        name=node_text(name_node),
        return_type=node.child_by_field_name("return_type"),
    )
    parameters = node.child_by_field_name("parameters")
    if parameters is not None:
        for child in parameters.named_children:
            if child.type != "parameter":
                continue
            type_node = child.child_by_field_name("type")
            if type_node is not None:
                signature.parameters.append((child.child_by_field_name("pattern"), type_node))
    return signature


def response_type(node: Optional[Node]) -> Optional[TypeDescriptor]:
    """Unwrap a handler's return type to the payload it serializes."""
    if node is None:
        return None
    kind = node.type
    if kind == "reference_type":
        return response_type(node.child_by_field_name("type"))
    if kind in {"unit_type", "abstract_type", "dynamic_type", "never_type"}:
        return None
    if kind == "tuple_type":
        for element in node.named_children:
            if element.type == "generic_type" and type_name(element) == "Json":
                return _first_argument(element)
        return None
    if kind == "generic_type":
        name = type_name(node)
        if name == "Result":
            arguments = type_arguments(node)
            return response_type(arguments[0]) if arguments else None
        if name == "Json":
            return _first_argument(node)
    return type_descriptor(node)


def _first_argument(node: Node) -> Optional[TypeDescriptor]:
    arguments = type_arguments(node)
    return type_descriptor(arguments[0]) if arguments else None


def bind_handlers(
    routes: Sequence[RouteInfo],
    functions: Dict[str, FunctionSignature],
    logger: logging.Logger,
) -> None:
    """Enrich routes with the extractor types and response of their handler."""
    for route in routes:
        signature = functions.get(route.handler_name)
        if signature is None:
            logger.warning(
                "Handler '%s' for %s %s not found", route.handler_name, route.method.value, route.path
            )
            continue
        for pattern, type_node in signature.parameters:
            _bind_parameter(route, pattern, type_node)
        route.response_type = response_type(signature.return_type)


def _bind_parameter(route: RouteInfo, pattern: Optional[Node], type_node: Node) -> None:
    if type_node.type == "reference_type":
        type_node = type_node.child_by_field_name("type") or type_node
    if type_node.type != "generic_type":
        return
    inner = _first_argument(type_node)
    if inner is None:
        return
    wrapper = type_name(type_node)
    if wrapper == "Json":
        route.request_body = inner
    elif wrapper == "Path":
        route.parameters.append(
            Parameter(
                name=binding_name(pattern) or "path_params",
                location=ParameterLocation.PATH,
                type=inner,
                required=True,
            )
        )
    elif wrapper == "Query":
        route.parameters.append(
            Parameter(
                name=binding_name(pattern) or "query_params",
                location=ParameterLocation.QUERY,
                type=inner,
                required=False,
            )
        )


__all__ = [
    "ExtractionState",
    "FunctionSignature",
    "RouteExtractor",
    "UNKNOWN_HANDLER",
    "bind_handlers",
    "combine_paths",
    "function_signature",
    "handler_name",
    "is_handler_reference",
    "response_type",
    "template_parameter_names",
    "template_parameters",
]
