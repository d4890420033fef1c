"""Route extractor implementations and lookup utilities."""

from __future__ import annotations

from typing import Callable, Iterable, List

from ..models import Framework
from .actix import ActixExtractor
from .axum import AxumExtractor
from .base import RouteExtractor, combine_paths

_BUILTIN_FACTORIES: dict[Framework, Callable[[], RouteExtractor]] = {
    Framework.AXUM: AxumExtractor,
    Framework.ACTIX_WEB: ActixExtractor,
}


def get_extractor(framework: Framework) -> RouteExtractor:
    """Return a fresh extractor for ``framework``."""
    try:
        factory = _BUILTIN_FACTORIES[framework]
    except KeyError as exc:
        raise ValueError(f"No route extractor for framework '{framework}'") from exc
    return factory()


def extractors_for(frameworks: Iterable[Framework]) -> List[RouteExtractor]:
    """Instantiate extractors for ``frameworks`` in a stable order (axum first)."""
    wanted = set(frameworks)
    return [get_extractor(framework) for framework in _BUILTIN_FACTORIES if framework in wanted]


__all__ = [
    "ActixExtractor",
    "AxumExtractor",
    "RouteExtractor",
    "combine_paths",
    "extractors_for",
    "get_extractor",
]
