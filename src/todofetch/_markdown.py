"""Python-Markdown backed :class:`~todofetch.markup.MarkupConverter`."""

from __future__ import annotations

from typing import Any

import markdown


class MarkdownConverter:
    """Convert task content with Python-Markdown.

    One instance is built per fetch cycle; ``reset()`` between items keeps
    footnotes and reference links from leaking from one task into the next.
    """

    def __init__(self, **options: Any) -> None:
        self._md = markdown.Markdown(**options)

    def convert(self, text: str) -> str:
        html = self._md.convert(str(text))
        self._md.reset()
        return html
