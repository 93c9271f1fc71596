"""CRUD operations for Remembered Service.

This module provides database operations for reminders, their registered
alerts and per-user preferences. It is also where the parser and scheduler are
orchestrated: the sticky default type is read before parsing and written
after, and every change that affects alert times triggers a full reschedule.
"""

from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import flag_modified
from typing import Iterable, List, Optional
import uuid
from datetime import datetime

from config import settings
from database import RememberedItem, ScheduledAlert, UserPreference
from date_utils import add_years, local_now
from enums import RecurrenceEnum, ReminderTypeEnum
from intervals import DEFAULT_INTERVALS, NotificationInterval, notification_body, order_intervals
from logger_config import setup_logger
from reminder_parser import parse, resolve_type
import scheduler

logger = setup_logger(__name__, 'crud.log')

# Updating any of these fields invalidates the registered alerts
SCHEDULE_FIELDS = {'date', 'recurrence', 'notification_intervals', 'is_notification_enabled', 'title'}


def _now(now: Optional[datetime]) -> datetime:
    return now if now is not None else local_now(settings.TIMEZONE)


def _interval_names(intervals: Iterable) -> List[str]:
    return [interval.value for interval in order_intervals(intervals)]


# ---------------------------------------------------------------------------
# Preferences
# ---------------------------------------------------------------------------

def get_preferences(db: Session, user_id: str) -> UserPreference:
    """Get a user's preferences, creating defaults on first use.

    Args:
        db: Database session
        user_id: Owner ID

    Returns:
        UserPreference: Stored or freshly created preferences
    """
    prefs = db.get(UserPreference, user_id)
    if prefs:
        return prefs

    prefs = UserPreference(
        user_id=user_id,
        last_used_type=ReminderTypeEnum.OTHER,
        notification_hour=settings.DEFAULT_NOTIFICATION_HOUR,
        notification_minute=settings.DEFAULT_NOTIFICATION_MINUTE,
        updated_at=local_now(settings.TIMEZONE)
    )
    db.add(prefs)
    db.commit()
    db.refresh(prefs)
    return prefs


def update_preferences(
    db: Session,
    user_id: str,
    updates: dict,
    now: Optional[datetime] = None
) -> UserPreference:
    """Update a user's alert time of day and reschedule their reminders.

    Args:
        db: Database session
        user_id: Owner ID
        updates: notification_hour and/or notification_minute
        now: Current local time

    Returns:
        UserPreference: Updated preferences
    """
    prefs = get_preferences(db, user_id)
    changed = False
    for key in ('notification_hour', 'notification_minute'):
        value = updates.get(key)
        if value is not None and value != getattr(prefs, key):
            setattr(prefs, key, value)
            changed = True

    if not changed:
        return prefs

    prefs.updated_at = _now(now)
    db.commit()
    db.refresh(prefs)

    logger.info(
        f"Alert time for {user_id} is now {prefs.notification_hour:02d}:"
        f"{prefs.notification_minute:02d}, rescheduling"
    )
    reschedule_all(db, user_id, now)
    return prefs


def get_sticky_type(db: Session, user_id: Optional[str]) -> Optional[ReminderTypeEnum]:
    """Read a user's sticky default type without creating preferences."""
    if not user_id:
        return None
    prefs = db.get(UserPreference, user_id)
    return prefs.last_used_type if prefs else None


def remember_type(db: Session, user_id: str, reminder_type: ReminderTypeEnum) -> None:
    """Store the sticky default type for a user."""
    prefs = get_preferences(db, user_id)
    if prefs.last_used_type != reminder_type:
        prefs.last_used_type = reminder_type
        prefs.updated_at = local_now(settings.TIMEZONE)
        db.commit()


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------

def create_item(db: Session, item_data: dict, now: Optional[datetime] = None) -> RememberedItem:
    """Insert a reminder record and register its alerts.

    Args:
        db: Database session
        item_data: Dictionary with item fields
            - user_id: str
            - raw_input: str
            - title: str
            - date: Optional[datetime]
            - type: ReminderTypeEnum
            - recurrence: Optional[RecurrenceEnum]
            - notes: Optional[str]
            - is_notification_enabled: Optional[bool]
            - notification_intervals: Optional[list]
        now: Current local time

    Returns:
        RememberedItem: Created item

    Raises:
        ValueError: When the user already has MAX_REMINDERS_PER_USER items
        SQLAlchemyError: On database errors
    """
    user_id = item_data['user_id']
    if get_items_count(db, user_id) >= settings.MAX_REMINDERS_PER_USER:
        raise ValueError(f"Reminder limit of {settings.MAX_REMINDERS_PER_USER} reached")

    now = _now(now)

    intervals = item_data.get('notification_intervals')
    if intervals is None:
        intervals = DEFAULT_INTERVALS

    enabled = item_data.get('is_notification_enabled')
    if enabled is None:
        enabled = settings.NOTIFICATIONS_ENABLED_BY_DEFAULT

    item = RememberedItem(
        id=str(uuid.uuid4()),
        user_id=user_id,
        raw_input=item_data['raw_input'],
        title=item_data['title'],
        date=item_data.get('date'),
        type=ReminderTypeEnum(item_data.get('type', ReminderTypeEnum.OTHER)),
        recurrence=RecurrenceEnum(item_data.get('recurrence') or RecurrenceEnum.NONE),
        needs_review=item_data.get('date') is None,
        notes=item_data.get('notes') or "",
        is_notification_enabled=enabled,
        notification_intervals=_interval_names(intervals),
        created_at=now,
        updated_at=now
    )

    db.add(item)
    db.commit()
    db.refresh(item)

    reschedule_item(db, item, now)
    return item


def create_item_from_text(
    db: Session,
    user_id: str,
    text: str,
    recurrence: RecurrenceEnum = RecurrenceEnum.NONE,
    notes: str = "",
    is_notification_enabled: Optional[bool] = None,
    notification_intervals: Optional[Iterable] = None,
    now: Optional[datetime] = None
) -> RememberedItem:
    """Capture a reminder from what the user typed.

    Parses the text, falls back to the user's sticky default when no category
    keyword was found, saves the item and schedules its alerts, then stores the
    chosen type as the new sticky default.

    Args:
        db: Database session
        user_id: Owner ID
        text: Raw input, e.g. "Stef birthday 8/8"
        recurrence: Recurrence for the new item
        notes: Optional notes
        is_notification_enabled: Alert switch, None for the configured default
        notification_intervals: Selected intervals, None for the defaults
        now: Current local time

    Returns:
        RememberedItem: Created item
    """
    now = _now(now)
    text = text.strip()

    result = parse(text, now)
    final_type = resolve_type(result.type, get_sticky_type(db, user_id))

    logger.info(
        f"Captured '{text}' for {user_id}: title='{result.title}', "
        f"date={result.date}, type={final_type.value}"
    )

    item = create_item(db, {
        'user_id': user_id,
        'raw_input': text,
        'title': result.title,
        'date': result.date,
        'type': final_type,
        'recurrence': recurrence,
        'notes': notes,
        'is_notification_enabled': is_notification_enabled,
        'notification_intervals': notification_intervals,
    }, now)
    # Only a saved reminder moves the sticky default
    remember_type(db, user_id, final_type)
    return item


def get_items_by_user(db: Session, user_id: str, limit: int = 50) -> List[RememberedItem]:
    """Get a user's reminders, soonest date first, undated ones last.

    Args:
        db: Database session
        user_id: Owner ID
        limit: Maximum number of results (default: 50)

    Returns:
        List[RememberedItem]: Items ordered by date
    """
    return db.query(RememberedItem).filter(
        RememberedItem.user_id == user_id
    ).order_by(
        RememberedItem.date.is_(None),
        RememberedItem.date.asc()
    ).limit(limit).all()


def get_item(db: Session, item_id: str, user_id: str) -> Optional[RememberedItem]:
    """Get a specific reminder by ID.

    Args:
        db: Database session
        item_id: Item UUID
        user_id: Owner ID (for security)

    Returns:
        Optional[RememberedItem]: Item if found, None otherwise
    """
    return db.query(RememberedItem).filter(
        RememberedItem.id == item_id,
        RememberedItem.user_id == user_id
    ).first()


def update_item(
    db: Session,
    item_id: str,
    user_id: str,
    updates: dict,
    now: Optional[datetime] = None
) -> Optional[RememberedItem]:
    """Update an existing reminder and reschedule it when alert inputs change.

    Args:
        db: Database session
        item_id: Item UUID
        user_id: Owner ID (for security)
        updates: Dictionary of fields to update
            - title, date, type, recurrence, notes
            - is_notification_enabled, notification_intervals
        now: Current local time

    Returns:
        Optional[RememberedItem]: Updated item if found, None otherwise
    """
    item = get_item(db, item_id, user_id)
    if not item:
        return None

    reschedule_needed = False
    for key, value in updates.items():
        if value is None:
            continue
        if key == 'type':
            value = ReminderTypeEnum(value)
        elif key == 'recurrence':
            value = RecurrenceEnum(value)
        elif key == 'notification_intervals':
            value = _interval_names(value)

        if getattr(item, key) == value:
            continue
        setattr(item, key, value)

        # JSON columns need explicit change tracking
        if key == 'notification_intervals':
            flag_modified(item, 'notification_intervals')
        if key == 'date':
            item.needs_review = False
        if key in SCHEDULE_FIELDS:
            reschedule_needed = True

    item.updated_at = _now(now)
    db.commit()
    db.refresh(item)

    if reschedule_needed:
        reschedule_item(db, item, now)
    return item


def delete_item(db: Session, item_id: str, user_id: str) -> bool:
    """Delete a reminder and cancel its alerts.

    Args:
        db: Database session
        item_id: Item UUID
        user_id: Owner ID (for security)

    Returns:
        bool: True if deleted, False if not found
    """
    item = get_item(db, item_id, user_id)
    if not item:
        return False

    cancel_scheduled_alerts(db, item.id)
    db.delete(item)
    db.commit()
    return True


def search_items(db: Session, user_id: str, query: str) -> List[RememberedItem]:
    """Search reminders by title, raw input or notes.

    Args:
        db: Database session
        user_id: Owner ID
        query: Search string

    Returns:
        List[RememberedItem]: Matching items
    """
    search_pattern = f"%{query}%"
    return db.query(RememberedItem).filter(
        RememberedItem.user_id == user_id,
        (
            RememberedItem.title.like(search_pattern) |
            RememberedItem.raw_input.like(search_pattern) |
            RememberedItem.notes.like(search_pattern)
        )
    ).order_by(RememberedItem.date.asc()).all()


def get_items_count(db: Session, user_id: str) -> int:
    """Get total number of reminders for a user."""
    return db.query(RememberedItem).filter(
        RememberedItem.user_id == user_id
    ).count()


# ---------------------------------------------------------------------------
# Scheduled alerts
# ---------------------------------------------------------------------------

def cancel_scheduled_alerts(db: Session, item_id: str) -> int:
    """Cancel every alert an item could have, across all intervals.

    Returns:
        int: Number of alerts removed
    """
    alerts = db.query(ScheduledAlert).filter(
        ScheduledAlert.identifier.in_(scheduler.all_trigger_identifiers(item_id))
    ).all()
    for alert in alerts:
        db.delete(alert)
    db.commit()
    return len(alerts)


def replace_scheduled_alerts(
    db: Session,
    item: RememberedItem,
    triggers: list,
    now: Optional[datetime] = None
) -> List[ScheduledAlert]:
    """Cancel all of an item's alerts, then register the given triggers.

    Args:
        db: Database session
        item: Item the triggers belong to
        triggers: ScheduledTrigger list from scheduler.schedule()
        now: Current local time

    Returns:
        List[ScheduledAlert]: Newly registered alerts
    """
    removed = cancel_scheduled_alerts(db, item.id)
    now = _now(now)

    alerts = []
    for trigger in triggers:
        interval = NotificationInterval(trigger.interval)
        alert = ScheduledAlert(
            identifier=scheduler.trigger_identifier(item.id, interval),
            item_id=item.id,
            interval=interval.value,
            fire_at=trigger.fire_at,
            repeats=trigger.repeats,
            title=item.title,
            body=notification_body(item.title, interval),
            delivered_at=None,
            created_at=now
        )
        db.add(alert)
        alerts.append(alert)

    db.commit()
    logger.info(f"Rescheduled item {item.id}: cancelled {removed}, registered {len(alerts)}")
    return alerts


def reschedule_item(
    db: Session,
    item: RememberedItem,
    now: Optional[datetime] = None
) -> List[ScheduledAlert]:
    """Recompute and re-register all alerts for one item."""
    prefs = get_preferences(db, item.user_id)
    triggers = scheduler.schedule(
        item.date,
        item.recurrence,
        item.notification_intervals or [],
        hour=prefs.notification_hour,
        minute=prefs.notification_minute,
        now=_now(now),
        notifications_enabled=item.is_notification_enabled
    )
    return replace_scheduled_alerts(db, item, triggers, now)


def reschedule_all(db: Session, user_id: Optional[str] = None, now: Optional[datetime] = None) -> int:
    """Reschedule every item, or every item of one user.

    Returns:
        int: Number of alerts registered
    """
    query = db.query(RememberedItem)
    if user_id:
        query = query.filter(RememberedItem.user_id == user_id)

    registered = 0
    for item in query.all():
        registered += len(reschedule_item(db, item, now))
    return registered


def get_alerts_for_item(db: Session, item_id: str) -> List[ScheduledAlert]:
    """Get an item's registered alerts, earliest first."""
    return db.query(ScheduledAlert).filter(
        ScheduledAlert.item_id == item_id
    ).order_by(ScheduledAlert.fire_at).all()


def get_due_alerts(db: Session, now: Optional[datetime] = None) -> List[ScheduledAlert]:
    """Get undelivered alerts whose fire time has come.

    Args:
        db: Database session
        now: Current local time

    Returns:
        List[ScheduledAlert]: Due alerts, earliest first
    """
    return db.query(ScheduledAlert).filter(
        ScheduledAlert.delivered_at.is_(None),
        ScheduledAlert.fire_at <= _now(now)
    ).order_by(ScheduledAlert.fire_at).all()


def mark_alert_delivered(
    db: Session,
    alert: ScheduledAlert,
    now: Optional[datetime] = None
) -> ScheduledAlert:
    """Record a fired alert.

    A repeating alert moves to its next yearly occurrence after now; a one-shot
    alert is stamped as delivered.
    """
    now = _now(now)
    if alert.repeats:
        next_fire = alert.fire_at
        while next_fire <= now:
            next_fire = add_years(next_fire)
        alert.fire_at = next_fire
    else:
        alert.delivered_at = now

    db.commit()
    db.refresh(alert)
    return alert
