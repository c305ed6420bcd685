"""Pydantic schemas for notifications posted by Zencoder."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class NotificationJob(BaseModel):
    """Job section of a notification payload."""

    model_config = ConfigDict(extra="allow", frozen=True)

    id: int = Field(description="Numeric job identifier.")
    state: str | None = Field(default=None, description="Job state, e.g. 'finished'.")
    test: bool = Field(default=False, description="Whether the job ran in integration mode.")
    pass_through: str | None = Field(
        default=None, description="Opaque value supplied when the job was created."
    )


class NotificationMedia(BaseModel):
    """Input or output section of a notification payload."""

    model_config = ConfigDict(extra="allow", frozen=True)

    id: int = Field(description="Numeric input or output identifier.")
    state: str | None = Field(default=None, description="Processing state of the media file.")
    url: str | None = Field(default=None, description="Location of the media file.")
    label: str | None = Field(default=None, description="Output label given at job creation.")
    error_message: str | None = Field(
        default=None, description="Failure description when the state is 'failed'."
    )


class Notification(BaseModel):
    """Document Zencoder POSTs to a notification endpoint."""

    model_config = ConfigDict(extra="allow", frozen=True)

    job: NotificationJob = Field(description="Job the notification refers to.")
    output: NotificationMedia | None = Field(
        default=None, description="Output that triggered the notification, when applicable."
    )
    outputs: list[NotificationMedia] = Field(
        default_factory=list, description="All outputs of the job, for job notifications."
    )
    input: NotificationMedia | None = Field(
        default=None, description="Input of the job, when included."
    )
