"""aiohttp implementation of the form-POST transport."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping

import aiohttp

from todofetch._redact import redact_for_log
from todofetch._transport import HttpReply, decode_body
from todofetch.exceptions import TodoistTransportError

_logger = logging.getLogger(__name__)


def create_session() -> aiohttp.ClientSession:
    """Client session with aiohttp's default total timeout disabled."""
    return aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=None))


class FormTransport:
    """POST ``application/x-www-form-urlencoded`` bodies over aiohttp.

    No timeout is applied: a request stays pending until the server or the
    network resolves it.
    """

    def __init__(self, http_session: aiohttp.ClientSession) -> None:
        self._http = http_session

    async def post_form(
        self,
        url: str,
        form: Mapping[str, str],
        headers: Mapping[str, str],
    ) -> HttpReply:
        _logger.debug("POST %s headers=%s", url, redact_for_log(dict(headers)))

        try:
            async with self._http.post(url, data=dict(form), headers=dict(headers)) as resp:
                text = await resp.text(errors="replace")
                status = resp.status
        except aiohttp.InvalidURL as exc:
            raise TodoistTransportError(
                f"Invalid URL: {exc}",
                request_sent=False,
                url=url,
            ) from exc
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as exc:
            raise TodoistTransportError(
                str(exc) or type(exc).__name__,
                request_sent=True,
                url=url,
            ) from exc
        except (ValueError, TypeError) as exc:
            raise TodoistTransportError(
                str(exc) or type(exc).__name__,
                request_sent=False,
                url=url,
            ) from exc

        data = decode_body(text)
        if not 200 <= status < 300:
            raise TodoistTransportError(
                f"Request failed with status code {status}",
                status_code=status,
                response_body=data,
                url=url,
            )

        _logger.debug("POST %s -> %d (%d bytes)", url, status, len(text))
        return HttpReply(status=status, data=data)
