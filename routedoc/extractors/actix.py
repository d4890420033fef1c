"""Route extraction for actix-web's attribute macros."""

from __future__ import annotations

from tree_sitter import Node

from ..models import Framework, HttpMethod, RouteInfo
from ..syntax import (
    attribute_parts,
    call_arguments,
    callee_name,
    first_string_literal,
    last_segment,
    method_receiver,
    node_text,
    preceding_attributes,
    string_literal_value,
)
from .base import ExtractionState, RouteExtractor, combine_paths, template_parameters

_METHOD_ATTRIBUTES = {"get", "post", "put", "delete", "patch", "head", "options"}


class ActixExtractor(RouteExtractor):
    """Reads ``#[get("/path")]`` style attributes on handler functions."""

    framework = Framework.ACTIX_WEB

    def _handle(self, node: Node, prefix: str, state: ExtractionState) -> bool:
        if node.type == "function_item":
            self._attribute_routes(node, prefix, state)
            return False
        if node.type != "call_expression":
            return False
        receiver = method_receiver(node)
        if receiver is None or callee_name(node.child_by_field_name("function")) != "scope":
            return False

        self._visit(receiver, prefix, state)
        arguments = call_arguments(node)
        path = string_literal_value(arguments[0]) if arguments else None
        scoped = combine_paths(prefix, path) if path is not None else prefix
        for argument in arguments:
            self._visit(argument, scoped, state)
        return True

    def _attribute_routes(self, node: Node, prefix: str, state: ExtractionState) -> None:
        handler = node_text(node.child_by_field_name("name"))
        for attribute in preceding_attributes(node):
            path, arguments = attribute_parts(attribute)
            name = last_segment(path)
            if name not in _METHOD_ATTRIBUTES:
                continue
            route_path = first_string_literal(arguments)
            if not route_path:
                continue
            method = HttpMethod.from_name(name)
            if method is None:
                continue
            full_path = combine_paths(prefix, route_path)
            self.logger.debug("Found route %s %s -> %s", method.value, full_path, handler)
            state.routes.append(
                RouteInfo(
                    path=full_path,
                    method=method,
                    handler_name=handler,
                    parameters=template_parameters(full_path),
                )
            )


__all__ = ["ActixExtractor"]
