"""Fetch configuration for todofetch."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from todofetch.exceptions import TodoistConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


class FetchConfig(BaseModel):
    """Configuration supplied with every ``FETCH_TODOIST`` trigger.

    Keys arrive camelCase from the widget (``accessToken``, ``apiBase``,
    ...).  Anything else the widget sends along is ignored.  No defaults
    are invented for the connection fields: a missing access token fails
    the fetch cycle, and a missing URL segment fails request setup.

    Parameters
    ----------
    access_token : str or None
        Todoist API token, sent as a bearer token.
    api_base : str or None
        API base URL, e.g. ``"https://api.todoist.com"``.
    api_version : str or None
        Version path segment, e.g. ``"sync/v9"``.
    todoist_endpoint : str or None
        Resource endpoint name, e.g. ``"sync"``.
    todoist_resource_type : str or None
        Value of the ``resource_types`` form field, e.g. ``'["items"]'``.
    debug : bool
        Log the full decoded API response on every fetch.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    access_token: str | None = Field(default=None, repr=False)
    api_base: str | None = None
    api_version: str | None = None
    todoist_endpoint: str | None = None
    todoist_resource_type: str | None = None
    debug: bool = False

    @property
    def has_access_token(self) -> bool:
        return bool(self.access_token)

    @classmethod
    def from_payload(cls, payload: Any) -> FetchConfig:
        """Validate a trigger payload.

        Raises
        ------
        TodoistConfigError
            If *payload* is not a mapping or a field has the wrong type.
        """
        if isinstance(payload, FetchConfig):
            return payload
        if not isinstance(payload, Mapping):
            raise TodoistConfigError(f"expected a mapping, got {type(payload).__name__}")
        try:
            return cls.model_validate(dict(payload))
        except ValidationError as exc:
            fields = ", ".join(".".join(str(part) for part in err["loc"]) for err in exc.errors())
            raise TodoistConfigError(f"invalid value for {fields}") from exc

    @classmethod
    def from_env(cls, **overrides: Any) -> FetchConfig:
        """Create configuration from ``TODOIST_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "TODOIST_ACCESS_TOKEN": "access_token",
            "TODOIST_API_BASE": "api_base",
            "TODOIST_API_VERSION": "api_version",
            "TODOIST_ENDPOINT": "todoist_endpoint",
            "TODOIST_RESOURCE_TYPE": "todoist_resource_type",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        if "debug" not in overrides:
            config_kwargs["debug"] = _env_bool(env.get("TODOIST_DEBUG"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
