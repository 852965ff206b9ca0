from __future__ import annotations

import logging

import pytest

from fakes import FakeTransport, StrongConverter
from todofetch._api.sync import (
    build_sync_form,
    build_sync_headers,
    build_sync_url,
    classify_failure,
    fetch_tasks,
)
from todofetch._transport import HttpReply
from todofetch.config import FetchConfig
from todofetch.exceptions import TodoistConfigError, TodoistTransportError
from todofetch.models import FetchError, FetchErrorKind, Tasks


def test_build_sync_url_joins_segments(config: FetchConfig) -> None:
    assert build_sync_url(config) == "https://api.x.com/v9/sync"


def test_build_sync_url_reports_missing_segments() -> None:
    with pytest.raises(TodoistConfigError, match="apiVersion, todoistEndpoint not configured"):
        build_sync_url(FetchConfig(api_base="https://api.x.com"))


def test_build_sync_form_requests_full_sync(config: FetchConfig) -> None:
    assert build_sync_form(config) == {"sync_token": "*", "resource_types": "items"}


def test_build_sync_headers() -> None:
    assert build_sync_headers("abc") == {
        "content-type": "application/x-www-form-urlencoded",
        "cache-control": "no-cache",
        "Authorization": "Bearer abc",
    }


# ---------------------------------------------------------------------------
# Failure classification
# ---------------------------------------------------------------------------


def test_classify_api_error_serializes_body() -> None:
    exc = TodoistTransportError(
        "Request failed with status code 401",
        status_code=401,
        response_body={"error": "invalid token"},
    )
    outcome = classify_failure(exc)
    assert outcome.kind is FetchErrorKind.API_ERROR
    assert outcome.error == 'API Error: 401 - {"error":"invalid token"}'


def test_classify_api_error_without_body_uses_message() -> None:
    exc = TodoistTransportError("Request failed with status code 503", status_code=503)
    assert classify_failure(exc).error == "API Error: 503 - Request failed with status code 503"


def test_classify_api_error_keeps_text_body() -> None:
    exc = TodoistTransportError("Request failed with status code 403", status_code=403, response_body="Forbidden")
    assert classify_failure(exc).error == "API Error: 403 - Forbidden"


def test_classify_no_response() -> None:
    outcome = classify_failure(TodoistTransportError("timeout", request_sent=True))
    assert outcome.kind is FetchErrorKind.NO_RESPONSE
    assert outcome.error == "No response from Todoist API: timeout"


def test_classify_setup_error() -> None:
    outcome = classify_failure(TodoistTransportError("Invalid URL: nope", request_sent=False))
    assert outcome.kind is FetchErrorKind.REQUEST_SETUP_ERROR
    assert outcome.error == "Request setup error: Invalid URL: nope"


def test_classify_response_wins_over_request_flags() -> None:
    exc = TodoistTransportError("boom", status_code=500, response_body={"x": 1}, request_sent=False)
    assert classify_failure(exc).kind is FetchErrorKind.API_ERROR


# ---------------------------------------------------------------------------
# fetch_tasks
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_fetch_tasks_success_scenario(config: FetchConfig) -> None:
    transport = FakeTransport(reply=HttpReply(status=200, data={"items": [{"id": 1, "content": "**hi**"}]}))

    outcome = await fetch_tasks(config, transport, StrongConverter())

    assert isinstance(outcome, Tasks)
    assert outcome.to_payload() == {
        "items": [{"id": 1, "content": "**hi**", "contentHtml": "<strong>hi</strong>"}],
        "accessToken": "abc",
    }
    assert transport.calls == [
        {
            "url": "https://api.x.com/v9/sync",
            "form": {"sync_token": "*", "resource_types": "items"},
            "headers": {
                "content-type": "application/x-www-form-urlencoded",
                "cache-control": "no-cache",
                "Authorization": "Bearer abc",
            },
        }
    ]


@pytest.mark.asyncio
async def test_fetch_tasks_keeps_passthrough_fields(config: FetchConfig) -> None:
    body = {
        "full_sync": True,
        "sync_token": "NEXT",
        "projects": [{"id": "p1", "name": "Inbox"}],
        "items": [{"id": "t1", "content": "plain", "due": {"date": "2026-10-20"}, "priority": 4}],
    }
    transport = FakeTransport(reply=HttpReply(status=200, data=body))

    outcome = await fetch_tasks(config, transport, None)

    assert isinstance(outcome, Tasks)
    payload = outcome.to_payload()
    assert payload["full_sync"] is True
    assert payload["sync_token"] == "NEXT"
    assert payload["projects"] == [{"id": "p1", "name": "Inbox"}]
    assert payload["items"][0]["due"] == {"date": "2026-10-20"}
    assert payload["items"][0]["priority"] == 4
    assert payload["items"][0]["contentHtml"] == "plain"
    assert "contentHtml" not in body["items"][0]


@pytest.mark.asyncio
async def test_fetch_tasks_without_converter_passes_content_verbatim(config: FetchConfig) -> None:
    transport = FakeTransport(reply=HttpReply(status=200, data={"items": [{"content": "**hi**"}]}))

    outcome = await fetch_tasks(config, transport, None)

    assert isinstance(outcome, Tasks)
    assert outcome.collection.items == [{"content": "**hi**", "contentHtml": "**hi**"}]


@pytest.mark.asyncio
@pytest.mark.parametrize("item", [{"id": 1}, {"id": 2, "content": ""}, {"id": 3, "content": None}])
async def test_fetch_tasks_skips_items_without_content(config: FetchConfig, item: dict) -> None:
    transport = FakeTransport(reply=HttpReply(status=200, data={"items": [item]}))

    outcome = await fetch_tasks(config, transport, StrongConverter())

    assert isinstance(outcome, Tasks)
    assert "contentHtml" not in outcome.collection.items[0]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "reply",
    [
        HttpReply(status=500, data=None),
        HttpReply(status=204, data=None),
        HttpReply(status=200, data=None),
        HttpReply(status=200, data=""),
        HttpReply(status=201, data={"items": []}),
    ],
)
async def test_fetch_tasks_unexpected_status(config: FetchConfig, reply: HttpReply) -> None:
    outcome = await fetch_tasks(config, FakeTransport(reply=reply), None)

    assert isinstance(outcome, FetchError)
    assert outcome.kind is FetchErrorKind.UNEXPECTED_STATUS
    assert outcome.error == f"Unexpected response status: {reply.status}"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "data",
    [{}, {"items": None}, {"items": {"id": 1}}, {"items": "abc"}, {"items": 3}, [], "not json"],
)
async def test_fetch_tasks_invalid_response_format(config: FetchConfig, data: object) -> None:
    outcome = await fetch_tasks(config, FakeTransport(reply=HttpReply(status=200, data=data)), None)

    assert outcome == FetchError(kind=FetchErrorKind.INVALID_RESPONSE_FORMAT, error="Invalid response format")


@pytest.mark.asyncio
@pytest.mark.parametrize("token", [None, ""])
async def test_fetch_tasks_requires_access_token(config: FetchConfig, token: str | None) -> None:
    transport = FakeTransport(reply=HttpReply(status=200, data={"items": []}))

    outcome = await fetch_tasks(config.model_copy(update={"access_token": token}), transport, None)

    assert outcome == FetchError(kind=FetchErrorKind.CONFIGURATION_ERROR, error="AccessToken not configured")
    assert transport.calls == []


@pytest.mark.asyncio
async def test_fetch_tasks_reports_missing_http(config: FetchConfig) -> None:
    outcome = await fetch_tasks(config, None, None)

    assert outcome == FetchError(kind=FetchErrorKind.MISSING_DEPENDENCY, error="Missing dependency: aiohttp")


@pytest.mark.asyncio
async def test_fetch_tasks_missing_http_checked_before_token() -> None:
    outcome = await fetch_tasks(FetchConfig(), None, None)
    assert isinstance(outcome, FetchError)
    assert outcome.kind is FetchErrorKind.MISSING_DEPENDENCY


@pytest.mark.asyncio
async def test_fetch_tasks_missing_url_segment_is_setup_error() -> None:
    transport = FakeTransport(reply=HttpReply(status=200, data={"items": []}))

    outcome = await fetch_tasks(FetchConfig(access_token="abc", api_base="https://x"), transport, None)

    assert isinstance(outcome, FetchError)
    assert outcome.kind is FetchErrorKind.REQUEST_SETUP_ERROR
    assert outcome.error == "Request setup error: apiVersion, todoistEndpoint not configured"
    assert transport.calls == []


@pytest.mark.asyncio
async def test_fetch_tasks_transport_rejection_with_response(config: FetchConfig) -> None:
    error = TodoistTransportError(
        "Request failed with status code 401",
        status_code=401,
        response_body={"error": "invalid token"},
    )

    outcome = await fetch_tasks(config, FakeTransport(error=error), None)

    assert outcome == FetchError(kind=FetchErrorKind.API_ERROR, error='API Error: 401 - {"error":"invalid token"}')


@pytest.mark.asyncio
async def test_fetch_tasks_transport_rejection_without_response(config: FetchConfig) -> None:
    outcome = await fetch_tasks(config, FakeTransport(error=TodoistTransportError("timeout")), None)

    assert outcome == FetchError(kind=FetchErrorKind.NO_RESPONSE, error="No response from Todoist API: timeout")


@pytest.mark.asyncio
async def test_fetch_tasks_debug_logs_full_response(config: FetchConfig, caplog: pytest.LogCaptureFixture) -> None:
    transport = FakeTransport(reply=HttpReply(status=200, data={"items": [{"content": "secret plan"}]}))

    await fetch_tasks(config.model_copy(update={"debug": True}), transport, None)

    assert any("secret plan" in record.getMessage() for record in caplog.records)


@pytest.mark.asyncio
async def test_fetch_tasks_quiet_without_debug(config: FetchConfig, caplog: pytest.LogCaptureFixture) -> None:
    transport = FakeTransport(reply=HttpReply(status=200, data={"items": [{"content": "secret plan"}]}))

    with caplog.at_level(logging.INFO, logger="todofetch._api.sync"):
        await fetch_tasks(config, transport, None)

    assert not any("secret plan" in record.getMessage() for record in caplog.records)


@pytest.mark.asyncio
async def test_fetch_tasks_debug_dump_passes_default_logger_threshold(config: FetchConfig) -> None:
    sync_logger = logging.getLogger("todofetch._api.sync")
    captured: list[logging.LogRecord] = []

    class _ListHandler(logging.Handler):
        def emit(self, record: logging.LogRecord) -> None:
            captured.append(record)

    handler = _ListHandler(level=logging.NOTSET)
    sync_logger.addHandler(handler)
    try:
        transport = FakeTransport(reply=HttpReply(status=200, data={"items": [{"content": "secret plan"}]}))
        await fetch_tasks(config.model_copy(update={"debug": True}), transport, None)
    finally:
        sync_logger.removeHandler(handler)

    dumps = [record for record in captured if "secret plan" in record.getMessage()]
    assert dumps
    assert all(record.levelno >= logging.WARNING for record in dumps)
    assert logging.lastResort is not None and dumps[0].levelno >= logging.lastResort.level
