"""todofetch - Async Todoist task fetcher for dashboard widgets."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("todofetch")
except PackageNotFoundError:
    __version__ = "0+local"
from todofetch.adapter import TodoistFetchAdapter
from todofetch.config import FetchConfig
from todofetch.exceptions import (
    TodoistConfigError,
    TodoistError,
    TodoistMissingDependencyError,
    TodoistResponseError,
    TodoistTransportError,
)
from todofetch.markup import MarkupConverter, render_items
from todofetch.models import FetchError, FetchErrorKind, FetchOutcome, TaskCollection, Tasks

__all__ = [
    "__version__",
    "FetchConfig",
    "FetchError",
    "FetchErrorKind",
    "FetchOutcome",
    "MarkupConverter",
    "TaskCollection",
    "Tasks",
    "TodoistConfigError",
    "TodoistError",
    "TodoistFetchAdapter",
    "TodoistMissingDependencyError",
    "TodoistResponseError",
    "TodoistTransportError",
    "render_items",
]
