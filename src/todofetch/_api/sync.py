"""Sync endpoint: fetch the task list and turn it into an outcome.

Endpoint:
  - POST {apiBase}/{apiVersion}/{todoistEndpoint}

The body always asks for a full sync (``sync_token=*``); no cursor is
kept between cycles.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Any

from todofetch._constants import CACHE_CONTROL, FORM_CONTENT_TYPE, HTTP_DEPENDENCY, SYNC_TOKEN_ALL
from todofetch._redact import redact_for_log
from todofetch._transport import HttpReply, Transport
from todofetch.config import FetchConfig
from todofetch.exceptions import (
    TodoistConfigError,
    TodoistMissingDependencyError,
    TodoistResponseError,
    TodoistTransportError,
)
from todofetch.markup import MarkupConverter, render_items
from todofetch.models import FetchError, FetchErrorKind, FetchOutcome, TaskCollection, Tasks

_logger = logging.getLogger(__name__)


def build_sync_url(config: FetchConfig) -> str:
    """Join ``apiBase``, ``apiVersion`` and ``todoistEndpoint`` with ``/``.

    Raises
    ------
    TodoistConfigError
        If one of the segments is not configured.
    """
    segments = {
        "apiBase": config.api_base,
        "apiVersion": config.api_version,
        "todoistEndpoint": config.todoist_endpoint,
    }
    missing = [name for name, value in segments.items() if not value]
    if missing:
        raise TodoistConfigError(f"{', '.join(missing)} not configured")
    return f"{config.api_base}/{config.api_version}/{config.todoist_endpoint}"


def build_sync_form(config: FetchConfig) -> dict[str, str]:
    """Form fields for a full sync of the configured resource types."""
    if config.todoist_resource_type is None:
        raise TodoistConfigError("todoistResourceType not configured")
    return {
        "sync_token": SYNC_TOKEN_ALL,
        "resource_types": config.todoist_resource_type,
    }


def build_sync_headers(access_token: str) -> dict[str, str]:
    return {
        "content-type": FORM_CONTENT_TYPE,
        "cache-control": CACHE_CONTROL,
        "Authorization": f"Bearer {access_token}",
    }


def _body_as_text(body: Any) -> str:
    """Plain text bodies as-is, decoded JSON re-serialized compactly."""
    if isinstance(body, str):
        return body
    return json.dumps(body, separators=(",", ":"), ensure_ascii=False, default=str)


def classify_failure(exc: TodoistTransportError) -> FetchError:
    """Map a transport failure onto exactly one of three outcomes.

    Priority: server response, then request sent without a response, then
    local setup failure.
    """
    if exc.has_response:
        detail = str(exc) if _is_empty_body(exc.response_body) else _body_as_text(exc.response_body)
        _logger.error("Todoist API error: status=%s body=%r", exc.status_code, exc.response_body)
        return FetchError(kind=FetchErrorKind.API_ERROR, error=f"API Error: {exc.status_code} - {detail}")
    if exc.request_sent:
        _logger.error("No response received from %s: %s", exc.url, exc)
        return FetchError(kind=FetchErrorKind.NO_RESPONSE, error=f"No response from Todoist API: {exc}")
    _logger.error("Request setup error for %s: %s", exc.url or "<unbuilt url>", exc)
    return FetchError(kind=FetchErrorKind.REQUEST_SETUP_ERROR, error=f"Request setup error: {exc}")


def _is_empty_body(data: Any) -> bool:
    """Empty text, ``null``, ``false`` and ``0`` count as no body; ``{}`` and ``[]`` do not."""
    return data is None or (isinstance(data, (str, int, float)) and not data)


def parse_sync_response(reply: HttpReply, access_token: str, converter: MarkupConverter | None) -> TaskCollection:
    """Validate a sync reply and build the stamped, rendered collection.

    Raises
    ------
    TodoistResponseError
        For a non-200 or empty reply, or a body without an ``items``
        sequence.
    """
    if reply.status != 200 or _is_empty_body(reply.data):
        raise TodoistResponseError(f"Unexpected response status: {reply.status}", status_code=reply.status)

    body = reply.data
    items = body.get("items") if isinstance(body, dict) else None
    if not isinstance(items, Sequence) or isinstance(items, (str, bytes)):
        raise TodoistResponseError("Invalid response format", status_code=reply.status, invalid_format=True)

    rendered = render_items(items, converter)
    return TaskCollection.model_validate({**body, "items": rendered, "accessToken": access_token})


async def fetch_tasks(
    config: FetchConfig,
    transport: Transport | None,
    converter: MarkupConverter | None = None,
) -> FetchOutcome:
    """Run one fetch cycle and return its outcome.

    Never raises for service or transport failures; every failure becomes a
    :class:`FetchError`.  *config* is used for the whole cycle, so a later
    trigger cannot change the token a pending cycle stamps onto its result.
    """
    if transport is None:
        missing = TodoistMissingDependencyError(HTTP_DEPENDENCY)
        _logger.error("%s is not available; install it to fetch tasks", missing.dependency)
        return FetchError(kind=FetchErrorKind.MISSING_DEPENDENCY, error=str(missing))

    access_token = config.access_token
    if not access_token:
        _logger.error("AccessToken not set")
        return FetchError(kind=FetchErrorKind.CONFIGURATION_ERROR, error="AccessToken not configured")

    try:
        url = build_sync_url(config)
        form = build_sync_form(config)
    except TodoistConfigError as exc:
        return classify_failure(TodoistTransportError(str(exc), request_sent=False))

    _logger.debug("Sync request url=%s form=%s", url, redact_for_log(form))

    try:
        reply = await transport.post_form(url, form, build_sync_headers(access_token))
    except TodoistTransportError as exc:
        return classify_failure(exc)

    if config.debug:
        _logger.warning("Todoist API response: %s", json.dumps(reply.data, indent=2, ensure_ascii=False, default=str))

    try:
        collection = parse_sync_response(reply, access_token, converter)
    except TodoistResponseError as exc:
        _logger.error("%s (status=%s)", exc, exc.status_code)
        kind = FetchErrorKind.INVALID_RESPONSE_FORMAT if exc.invalid_format else FetchErrorKind.UNEXPECTED_STATUS
        return FetchError(kind=kind, error=str(exc))

    _logger.debug("Fetched %d item(s)", len(collection.items))
    return Tasks(collection=collection)
