"""Transport interface shared by the sync endpoint and its implementations."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True)
class HttpReply:
    """A 2xx response: status code plus decoded body.

    ``data`` is the JSON-decoded body when it parses, the raw text when it
    does not, and ``None`` when the body is empty.
    """

    status: int
    data: Any


class Transport(Protocol):
    """Structural transport interface used by the sync endpoint.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (``FormTransport``) concrete.
    Implementations return an :class:`HttpReply` for 2xx responses and
    raise :class:`~todofetch.exceptions.TodoistTransportError` otherwise.
    """

    async def post_form(
        self,
        url: str,
        form: Mapping[str, str],
        headers: Mapping[str, str],
    ) -> HttpReply:
        ...


def decode_body(text: str) -> Any:
    """Decode a response body: JSON when it parses, text otherwise, ``None`` when empty."""
    if not text:
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text
