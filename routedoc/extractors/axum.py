"""Route extraction for axum's chained ``Router`` builder."""

from __future__ import annotations

from typing import List, Optional

from tree_sitter import Node

from ..models import Framework, HttpMethod, RouteInfo
from ..syntax import call_arguments, callee_name, method_receiver, string_literal_value
from .base import (
    ExtractionState,
    RouteExtractor,
    UNKNOWN_HANDLER,
    combine_paths,
    handler_name,
    is_handler_reference,
    template_parameters,
)

_METHOD_NAMES = {"get", "post", "put", "delete", "patch", "head", "options"}


class AxumExtractor(RouteExtractor):
    """Follows ``.route``/``.nest`` chains, threading the nest prefix downwards."""

    framework = Framework.AXUM

    def _handle(self, node: Node, prefix: str, state: ExtractionState) -> bool:
        if node.type == "closure_expression":
            # Closure bodies are handler code, never part of the enclosing router.
            for child in node.named_children:
                self._visit(child, "", state)
            return True
        if node.type != "call_expression":
            return False
        receiver = method_receiver(node)
        if receiver is None:
            return False
        name = callee_name(node.child_by_field_name("function"))
        if name not in _METHOD_NAMES and name not in {"route", "nest"}:
            return False

        # Receivers first so routes come out in source order.
        self._visit(receiver, prefix, state)
        arguments = call_arguments(node)
        if name == "route":
            self._route(arguments, prefix, state)
        elif name == "nest":
            self._nest(arguments, prefix, state)
        else:
            self._shorthand(name, arguments, prefix, state)
            self._visit_all(arguments, prefix, state)
        return True

    def _route(self, arguments: List[Node], prefix: str, state: ExtractionState) -> None:
        path = string_literal_value(arguments[0]) if len(arguments) >= 2 else None
        if path is None:
            self._visit_all(arguments, prefix, state)
            return

        self._method_router(arguments[1], combine_paths(prefix, path), prefix, state)
        self._visit_all(arguments[2:], prefix, state)

    def _method_router(
        self, node: Node, path: str, prefix: str, state: ExtractionState
    ) -> None:
        """Register every method of a ``get(a).post(b)`` chain on ``path``."""
        if node.type != "call_expression":
            self._visit(node, prefix, state)
            return
        receiver = method_receiver(node)
        if receiver is not None:
            self._method_router(receiver, path, prefix, state)
        method = _method_for(callee_name(node.child_by_field_name("function")))
        arguments = call_arguments(node)
        if method is None:
            if receiver is None:
                self._visit(node, prefix, state)
            else:
                self._visit_all(arguments, prefix, state)
            return
        handler = handler_name(arguments[0]) if arguments else UNKNOWN_HANDLER
        self._add_route(state, path, method, handler)
        # Handler expressions keep the outer prefix; inline closures reset it.
        self._visit_all(arguments, prefix, state)

    def _nest(self, arguments: List[Node], prefix: str, state: ExtractionState) -> None:
        path = string_literal_value(arguments[0]) if len(arguments) >= 2 else None
        if path is None:
            self._visit_all(arguments, prefix, state)
            return
        self._visit(arguments[0], prefix, state)
        self._visit(arguments[1], combine_paths(prefix, path), state)
        self._visit_all(arguments[2:], prefix, state)

    def _shorthand(
        self, name: str, arguments: List[Node], prefix: str, state: ExtractionState
    ) -> None:
        method = _method_for(name)
        if method is None or not arguments:
            return
        path = string_literal_value(arguments[0])
        if path is not None:
            if len(arguments) < 2 or not path.startswith("/"):
                return
            self._add_route(state, combine_paths(prefix, path), method, handler_name(arguments[1]))
        elif prefix and is_handler_reference(arguments[0]):
            self._add_route(state, prefix, method, handler_name(arguments[0]))

    def _add_route(
        self, state: ExtractionState, path: str, method: HttpMethod, handler: str
    ) -> None:
        self.logger.debug("Found route %s %s -> %s", method.value, path, handler)
        state.routes.append(
            RouteInfo(
                path=path,
                method=method,
                handler_name=handler,
                parameters=template_parameters(path),
            )
        )

    def _visit_all(self, nodes: List[Node], prefix: str, state: ExtractionState) -> None:
        for node in nodes:
            self._visit(node, prefix, state)


def _method_for(name: str) -> Optional[HttpMethod]:
    if name not in _METHOD_NAMES:
        return None
    return HttpMethod.from_name(name)


__all__ = ["AxumExtractor"]
