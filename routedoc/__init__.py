"""Generate OpenAPI documents from Rust web service sources."""

from .errors import FrameworkNotDetectedError, NoSourceFilesError, RouteDocError, SourceParseError
from .models import Framework, HttpMethod, Parameter, ParameterLocation, RouteInfo, TypeDescriptor
from .pipeline import GenerationResult, Pipeline

__version__ = "0.1.0"

__all__ = [
    "Framework",
    "FrameworkNotDetectedError",
    "GenerationResult",
    "HttpMethod",
    "NoSourceFilesError",
    "Parameter",
    "ParameterLocation",
    "Pipeline",
    "RouteDocError",
    "RouteInfo",
    "SourceParseError",
    "TypeDescriptor",
]
