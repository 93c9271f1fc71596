"""Shared enumerations for reminder records."""

import enum


class ReminderTypeEnum(str, enum.Enum):
    """Semantic category of a reminder"""
    BIRTHDAY = "birthday"
    ANNIVERSARY = "anniversary"
    MEDICAL = "medical"
    MEMORIAL = "memorial"
    OTHER = "other"


class RecurrenceEnum(str, enum.Enum):
    """How often a reminder's date comes around"""
    NONE = "none"
    ANNUAL = "annual"
