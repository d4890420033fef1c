"""Core data models shared across routedoc components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class Framework(str, Enum):
    """Web framework styles routedoc knows how to extract."""

    AXUM = "axum"
    ACTIX_WEB = "actix-web"


class HttpMethod(str, Enum):
    """HTTP verbs a route can be bound to."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"

    @classmethod
    def from_name(cls, value: str) -> Optional["HttpMethod"]:
        """Return the method for a case-insensitive verb name, if known."""
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None


class ParameterLocation(str, Enum):
    """Where in the request a parameter value is taken from."""

    PATH = "path"
    QUERY = "query"
    HEADER = "header"


@dataclass
class TypeDescriptor:
    """Reference to a Rust type prior to resolution.

    ``Option<T>`` and ``Vec<T>`` nodes keep the inner type's name and carry the
    inner descriptor as their only generic argument.
    """

    name: str
    is_option: bool = False
    is_vec: bool = False
    generic_args: List["TypeDescriptor"] = field(default_factory=list)

    @classmethod
    def option(cls, inner: "TypeDescriptor") -> "TypeDescriptor":
        return cls(name=inner.name, is_option=True, generic_args=[inner])

    @classmethod
    def vec(cls, inner: "TypeDescriptor") -> "TypeDescriptor":
        return cls(name=inner.name, is_vec=True, generic_args=[inner])

    @property
    def inner(self) -> Optional["TypeDescriptor"]:
        """Unwrapped type of an Option/Vec node."""
        if (self.is_option or self.is_vec) and self.generic_args:
            return self.generic_args[0]
        return None


@dataclass
class Parameter:
    """A single request parameter of a route."""

    name: str
    location: ParameterLocation
    type: TypeDescriptor
    required: bool


@dataclass
class RouteInfo:
    """Extracted record of one HTTP endpoint.

    ``path`` keeps the extractor's native parameter syntax (``:id`` for axum,
    ``{id}`` for actix-web).
    """

    path: str
    method: HttpMethod
    handler_name: str
    parameters: List[Parameter] = field(default_factory=list)
    request_body: Optional[TypeDescriptor] = None
    response_type: Optional[TypeDescriptor] = None


__all__ = [
    "Framework",
    "HttpMethod",
    "Parameter",
    "ParameterLocation",
    "RouteInfo",
    "TypeDescriptor",
]
