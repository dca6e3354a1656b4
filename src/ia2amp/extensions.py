"""Extension points for intercepting the conversion.

Callers register filters against a named point; when the converter reaches
that point it folds the value through every filter, lowest priority first
and in registration order within a priority:

    observer = Observer()
    observer.add_filter(ExtensionPoint.MAPS_API_KEY, lambda key, ctx: "my-key")
    transformer = AMPTransformer(properties, observer=observer)

Each filter receives the current value followed by the extra arguments the
converter passes for that point, and must return the (possibly replaced)
value.
"""

import logging
from collections.abc import Callable
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = 10


class ExtensionPoint(str, Enum):
    """Named places in the conversion where values can be filtered.

    Values passed through each point:

    - HTML, HEAD, HEADER, COVER, ARTICLE_ITEM, FOOTER: lxml elements
    - CUSTOM_CSS: the final custom stylesheet text
    - SCHEMA_ORG: the Schema.org metadata dict
    - MAPS_API_KEY: the Google Maps API key (or None)
    """

    HTML = "html"
    HEAD = "head"
    HEADER = "header"
    COVER = "cover"
    ARTICLE_ITEM = "article_item"
    FOOTER = "footer"
    CUSTOM_CSS = "custom_css"
    SCHEMA_ORG = "schema_org"
    MAPS_API_KEY = "maps_api_key"


class Observer:
    """Registry of filters keyed by extension point."""

    def __init__(self):
        self._filters: dict[ExtensionPoint, list[tuple[int, Callable]]] = {}

    def add_filter(
        self,
        point: ExtensionPoint,
        handler: Callable[..., Any],
        priority: int = DEFAULT_PRIORITY,
    ) -> None:
        """Register a filter on an extension point.

        Args:
            point: Extension point to hook into
            handler: Callable receiving the value and the point's extra
                arguments, returning the new value
            priority: Lower priorities run first
        """
        point = ExtensionPoint(point)
        handlers = self._filters.setdefault(point, [])
        handlers.append((priority, handler))
        # sort() is stable, so registration order holds within a priority
        handlers.sort(key=lambda entry: entry[0])

    def apply_filters(self, point: ExtensionPoint, value: Any, *args: Any) -> Any:
        """Fold a value through every filter registered on the point.

        Args:
            point: Extension point being reached
            value: Value to be filtered
            *args: Extra arguments handed to every filter

        Returns:
            The filtered value, or the value unchanged when nothing is registered
        """
        point = ExtensionPoint(point)
        handlers = self._filters.get(point)
        if not handlers:
            return value

        # Snapshot so filters may register or apply filters re-entrantly
        for _, handler in list(handlers):
            value = handler(value, *args)
        logger.debug(f"Applied {len(handlers)} filter(s) on {point.value}")
        return value

    def remove_filter(
        self,
        point: ExtensionPoint,
        handler: Callable[..., Any],
        priority: int = DEFAULT_PRIORITY,
    ) -> bool:
        """Unregister a filter. Returns whether it was registered."""
        point = ExtensionPoint(point)
        handlers = self._filters.get(point, [])
        for index, entry in enumerate(handlers):
            if entry == (priority, handler):
                del handlers[index]
                if not handlers:
                    del self._filters[point]
                return True
        return False

    def remove_all_filters(self, point: ExtensionPoint, priority: int | None = None) -> None:
        """Unregister every filter on a point, optionally only at one priority."""
        point = ExtensionPoint(point)
        if point not in self._filters:
            return
        if priority is None:
            del self._filters[point]
            return
        remaining = [entry for entry in self._filters[point] if entry[0] != priority]
        if remaining:
            self._filters[point] = remaining
        else:
            del self._filters[point]

    def has_filter(self, point: ExtensionPoint, handler: Callable[..., Any] | None = None) -> bool:
        """Check whether a point has filters, or a specific filter."""
        handlers = self._filters.get(ExtensionPoint(point), [])
        if handler is None:
            return bool(handlers)
        return any(registered is handler for _, registered in handlers)
