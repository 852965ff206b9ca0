"""Markdown-to-HTML rendering of task content."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Protocol

_logger = logging.getLogger(__name__)


class MarkupConverter(Protocol):
    def convert(self, text: str) -> str:
        ...


def render_items(items: Sequence[Any], converter: MarkupConverter | None) -> list[Any]:
    """Return a copy of *items* with ``contentHtml`` set where ``content`` is non-empty.

    Without a converter ``contentHtml`` is the content verbatim.  Entries
    that are not mappings, or have no content, pass through untouched.
    """
    rendered: list[Any] = []
    for item in items:
        if not isinstance(item, Mapping) or not item.get("content"):
            rendered.append(item)
            continue
        content = item["content"]
        html = converter.convert(content) if converter is not None else content
        rendered.append({**item, "contentHtml": html})
    _logger.debug(
        "Rendered %d item(s) converter=%s",
        len(rendered),
        type(converter).__name__ if converter is not None else None,
    )
    return rendered
