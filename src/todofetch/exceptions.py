"""Custom exception hierarchy for todofetch.

These exceptions travel between the internal layers (transport, request
builders, response validation).  The adapter never lets them escape a
fetch cycle: each one is classified into a :class:`~todofetch.models.FetchError`
outcome instead.
"""

from __future__ import annotations

from typing import Any


class TodoistError(Exception):
    """Base exception for all todofetch errors."""


class TodoistConfigError(TodoistError):
    """Invalid or missing configuration."""


class TodoistMissingDependencyError(TodoistError):
    """A required capability (e.g. the HTTP client) could not be loaded."""

    def __init__(self, dependency: str) -> None:
        self.dependency = dependency
        super().__init__(f"Missing dependency: {dependency}")


class TodoistTransportError(TodoistError):
    """HTTP-level failure reported by the transport.

    Three shapes are possible, mirroring what the transport could observe:

    * ``status_code`` is set: the server answered with a non-2xx status,
      ``response_body`` holds the decoded body (or ``None``).
    * ``request_sent`` is ``True`` without a status: the request went out
      but no response arrived (connection reset, DNS, timeout).
    * ``request_sent`` is ``False``: the request could not be prepared.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        response_body: Any = None,
        request_sent: bool = True,
        url: str = "",
    ) -> None:
        self.status_code = status_code
        self.response_body = response_body
        self.request_sent = request_sent
        self.url = url
        super().__init__(message)

    @property
    def has_response(self) -> bool:
        return self.status_code is not None


class TodoistResponseError(TodoistError):
    """A response arrived but cannot be turned into a task collection.

    ``invalid_format`` distinguishes a 200 reply without an ``items``
    sequence from a reply with an unexpected status or an empty body.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        invalid_format: bool = False,
    ) -> None:
        self.status_code = status_code
        self.invalid_format = invalid_format
        super().__init__(message)
