"""Database module for Remembered Service.

This module defines SQLAlchemy models and database session management.
Datetimes are stored as naive local wall-clock values in settings.TIMEZONE,
matching what the parser and scheduler produce.
"""

from sqlalchemy import (
    create_engine, Column, String, DateTime, Boolean, Integer, JSON,
    Enum as SQLEnum, Index,
)
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from config import settings
from date_utils import countdown_label, days_until, local_now
from enums import RecurrenceEnum, ReminderTypeEnum

# SQLAlchemy Base
Base = declarative_base()


class RememberedItem(Base):
    """A reminder captured from free text."""

    __tablename__ = "items"

    id = Column(String, primary_key=True, doc="Unique item ID (UUID)")
    user_id = Column(String, nullable=False, index=True, doc="Owner of the reminder")

    raw_input = Column(String, nullable=False, doc="Text exactly as the user typed it")
    title = Column(String, nullable=False, doc="Display title")
    date = Column(DateTime, nullable=True, doc="Upcoming date, absent until reviewed")
    type = Column(SQLEnum(ReminderTypeEnum), default=ReminderTypeEnum.OTHER, nullable=False)
    recurrence = Column(SQLEnum(RecurrenceEnum), default=RecurrenceEnum.NONE, nullable=False)
    needs_review = Column(Boolean, default=False, doc="True when no date could be parsed")
    notes = Column(String, default="", doc="Free-form notes")

    is_notification_enabled = Column(Boolean, default=True, doc="Master switch for alerts")
    notification_intervals = Column(JSON, default=list, doc="Selected interval names")

    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    __table_args__ = (
        Index('idx_user_date', 'user_id', 'date'),
    )

    @property
    def days_until(self):
        return days_until(self.date, local_now(settings.TIMEZONE))

    @property
    def countdown(self):
        return countdown_label(self.days_until)

    def __repr__(self):
        """String representation"""
        return (
            f"<RememberedItem(id={self.id}, user={self.user_id}, "
            f"title={self.title}, date={self.date}, type={self.type.value})>"
        )


class ScheduledAlert(Base):
    """An alert registered for delivery at a wall-clock instant.

    The identifier is "<item id>-<interval>", so re-registering an interval
    replaces its previous alert.
    """

    __tablename__ = "scheduled_alerts"

    identifier = Column(String, primary_key=True)
    item_id = Column(String, nullable=False, index=True)
    interval = Column(String, nullable=False)
    fire_at = Column(DateTime, nullable=False, doc="Next local instant the alert fires")
    repeats = Column(Boolean, default=False, doc="Fires yearly on the same month/day/time")
    title = Column(String, nullable=False)
    body = Column(String, nullable=False)
    delivered_at = Column(DateTime, nullable=True, doc="Set once a one-shot alert fired")
    created_at = Column(DateTime, nullable=False)

    __table_args__ = (
        Index('idx_pending_fire_at', 'delivered_at', 'fire_at'),
    )

    def __repr__(self):
        return f"<ScheduledAlert(identifier={self.identifier}, fire_at={self.fire_at})>"


class UserPreference(Base):
    """Per-user state: sticky default type and alert time of day."""

    __tablename__ = "user_preferences"

    user_id = Column(String, primary_key=True)
    last_used_type = Column(SQLEnum(ReminderTypeEnum), default=ReminderTypeEnum.OTHER, nullable=False)
    notification_hour = Column(Integer, nullable=False)
    notification_minute = Column(Integer, nullable=False)
    updated_at = Column(DateTime, nullable=False)


def _engine_options(url: str) -> dict:
    if not url.startswith("sqlite"):
        return {}
    options = {"connect_args": {"check_same_thread": False}}
    # An in-memory database lives and dies with its connection; share one.
    if ":memory:" in url or url in ("sqlite://", "sqlite:///"):
        options["poolclass"] = StaticPool
    return options


# Database Engine Setup
engine = create_engine(
    settings.DATABASE_URL,
    echo=False,  # Set to True for SQL debugging
    **_engine_options(settings.DATABASE_URL)
)

# Session Factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """Database session dependency for FastAPI.

    Yields:
        Session: SQLAlchemy database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# Create all tables
Base.metadata.create_all(bind=engine)
