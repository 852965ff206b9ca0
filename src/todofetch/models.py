"""Task collection and fetch outcome models.

A fetch cycle produces exactly one outcome: :class:`Tasks` or
:class:`FetchError`.  ``FetchOutcome`` is the tagged union of the two;
each variant knows the notification name and payload it is delivered
with.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from todofetch._constants import FETCH_ERROR_NOTIFICATION, TASKS_NOTIFICATION


class FetchErrorKind(StrEnum):
    MISSING_DEPENDENCY = "MissingDependency"
    CONFIGURATION_ERROR = "ConfigurationError"
    UNEXPECTED_STATUS = "UnexpectedStatus"
    INVALID_RESPONSE_FORMAT = "InvalidResponseFormat"
    API_ERROR = "ApiError"
    NO_RESPONSE = "NoResponse"
    REQUEST_SETUP_ERROR = "RequestSetupError"


class TaskCollection(BaseModel):
    """Decoded sync response, stamped with the access token used.

    Only ``items`` is validated.  Every other top-level field of the
    response (``sync_token``, ``projects``, ...) is kept as an extra and
    re-emitted unchanged.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="allow",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    items: list[Any]
    access_token: str = Field(repr=False)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class Tasks(BaseModel):
    """Successful outcome."""

    model_config = ConfigDict(frozen=True)

    notification: ClassVar[str] = TASKS_NOTIFICATION

    tag: Literal["tasks"] = "tasks"
    collection: TaskCollection

    def to_payload(self) -> dict[str, Any]:
        return self.collection.to_payload()


class FetchError(BaseModel):
    """Failed outcome; ``error`` is the human-readable summary."""

    model_config = ConfigDict(frozen=True)

    notification: ClassVar[str] = FETCH_ERROR_NOTIFICATION

    tag: Literal["fetch_error"] = "fetch_error"
    kind: FetchErrorKind
    error: str

    def to_payload(self) -> dict[str, Any]:
        return {"error": self.error}


FetchOutcome = Annotated[Tasks | FetchError, Field(discriminator="tag")]
