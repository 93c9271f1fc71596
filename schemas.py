"""Pydantic schemas for Remembered Service.

This module defines the value types produced by the parser and scheduler, and
the request and response schemas for API validation.
All datetimes are naive local wall-clock values in the configured TIMEZONE.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from enums import RecurrenceEnum, ReminderTypeEnum
from intervals import DEFAULT_INTERVALS, NotificationInterval


def _require_text(value: str) -> str:
    """Strip surrounding whitespace and refuse text that is left empty."""
    value = value.strip()
    if not value:
        raise ValueError("text must contain something other than whitespace")
    return value


class ParseResult(BaseModel):
    """Output of parsing one reminder phrase."""

    date: Optional[datetime] = Field(
        None,
        description="Upcoming date found in the text, absent if none"
    )
    title: str = Field(..., min_length=1, description="Cleaned display title")
    type: ReminderTypeEnum = Field(
        ReminderTypeEnum.OTHER,
        description="Semantic category detected from keywords"
    )


class ScheduledTrigger(BaseModel):
    """One alert the scheduler wants registered."""

    interval: NotificationInterval = Field(..., description="Interval this alert belongs to")
    fire_at: datetime = Field(..., description="Local wall-clock instant the alert fires")
    repeats: bool = Field(
        False,
        description="Repeat yearly on the same month/day/hour/minute"
    )


class ParseRequest(BaseModel):
    """Schema for parsing text without saving it."""

    text: str = Field(
        ...,
        min_length=1,
        max_length=500,
        examples=["Stef birthday 8/8", "Surgery on Jan 18"]
    )
    user_id: Optional[str] = Field(
        None,
        description="When given, the user's sticky default type is applied"
    )

    @field_validator("text")
    @classmethod
    def text_not_blank(cls, v: str) -> str:
        return _require_text(v)


class ParseResponse(ParseResult):
    """Parse result plus the type a save would actually use."""

    resolved_type: ReminderTypeEnum = Field(
        ...,
        description="Parsed type with the user's sticky default applied"
    )


class SchedulePreviewRequest(BaseModel):
    """Schema for computing triggers without registering them."""

    target_date: Optional[datetime] = Field(None, description="Reminder date")
    recurrence: RecurrenceEnum = Field(RecurrenceEnum.NONE)
    intervals: List[NotificationInterval] = Field(
        default_factory=lambda: list(DEFAULT_INTERVALS)
    )
    hour: int = Field(9, ge=0, le=23, description="Alert hour of day")
    minute: int = Field(0, ge=0, le=59, description="Alert minute")
    notifications_enabled: bool = Field(True)


class ReminderCreate(BaseModel):
    """Schema for capturing a reminder from free text.

    Title, date and type are derived by the parser.
    """

    user_id: str = Field(..., min_length=1, max_length=64, description="Owner of the reminder")
    text: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="What the user typed",
        examples=["Dominic's birthday is 9/25"]
    )
    recurrence: RecurrenceEnum = Field(RecurrenceEnum.NONE)
    notes: str = Field("", description="Optional notes")
    is_notification_enabled: Optional[bool] = Field(
        None,
        description="Defaults to NOTIFICATIONS_ENABLED_BY_DEFAULT"
    )
    notification_intervals: Optional[List[NotificationInterval]] = Field(
        None,
        description="Defaults to one week before and day of"
    )

    @field_validator("text")
    @classmethod
    def text_not_blank(cls, v: str) -> str:
        return _require_text(v)


class ReminderUpdate(BaseModel):
    """Schema for updating an existing reminder.

    All fields are optional - only provided fields will be updated.
    """

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    date: Optional[datetime] = Field(None, description="New reminder date")
    type: Optional[ReminderTypeEnum] = None
    recurrence: Optional[RecurrenceEnum] = None
    notes: Optional[str] = None
    is_notification_enabled: Optional[bool] = None
    notification_intervals: Optional[List[NotificationInterval]] = None


class ReminderResponse(BaseModel):
    """Schema for reminder responses."""

    id: str
    user_id: str
    raw_input: str
    title: str
    date: Optional[datetime]
    type: ReminderTypeEnum
    recurrence: RecurrenceEnum
    needs_review: bool
    notes: str
    is_notification_enabled: bool
    notification_intervals: List[str]
    days_until: Optional[int] = Field(None, description="Calendar days until the date")
    countdown: str = Field("", description="Short countdown, e.g. 'Tomorrow'")
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)  # ORM mode for SQLAlchemy models


class ScheduledAlertResponse(BaseModel):
    """Schema for a registered alert."""

    identifier: str
    item_id: str
    interval: str
    fire_at: datetime
    repeats: bool
    title: str
    body: str
    delivered_at: Optional[datetime]

    model_config = ConfigDict(from_attributes=True)


class PreferenceUpdate(BaseModel):
    """Schema for changing a user's alert time of day."""

    notification_hour: Optional[int] = Field(None, ge=0, le=23)
    notification_minute: Optional[int] = Field(None, ge=0, le=59)


class PreferenceResponse(BaseModel):
    """Schema for a user's stored preferences."""

    user_id: str
    last_used_type: ReminderTypeEnum
    notification_hour: int
    notification_minute: int

    model_config = ConfigDict(from_attributes=True)
