"""Optional runtime capabilities.

The HTTP client and the markdown converter are loaded once, when the
adapter module is imported.  A missing one is reported once here; the
adapter then treats it as an absent capability instead of failing to
import.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable
from dataclasses import dataclass
from types import ModuleType
from typing import TYPE_CHECKING, Any

from todofetch._constants import HTTP_DEPENDENCY, MARKDOWN_DEPENDENCY

if TYPE_CHECKING:
    from todofetch._transport import Transport
    from todofetch.markup import MarkupConverter

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Capabilities:
    """Factories for the optional collaborators.

    ``session_factory`` / ``transport_factory`` are ``None`` when aiohttp
    is unavailable, ``converter_factory`` is ``None`` without
    Python-Markdown.
    """

    session_factory: Callable[[], Any] | None
    transport_factory: Callable[[Any], Transport] | None
    converter_factory: Callable[[], MarkupConverter] | None

    @property
    def has_http(self) -> bool:
        return self.session_factory is not None and self.transport_factory is not None


def _try_import(module: str, dependency: str) -> ModuleType | None:
    try:
        return importlib.import_module(module)
    except ImportError as exc:
        _logger.error(
            "Missing dependency '%s' (%s). Install it with 'pip install %s'.",
            dependency,
            exc,
            dependency,
        )
        return None


def load_capabilities() -> Capabilities:
    """Probe aiohttp and Python-Markdown, logging one diagnostic per missing package."""
    http_mod = _try_import("todofetch._http", HTTP_DEPENDENCY)
    markdown_mod = _try_import("todofetch._markdown", MARKDOWN_DEPENDENCY)

    return Capabilities(
        session_factory=http_mod.create_session if http_mod is not None else None,
        transport_factory=http_mod.FormTransport if http_mod is not None else None,
        converter_factory=markdown_mod.MarkdownConverter if markdown_mod is not None else None,
    )
