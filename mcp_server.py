"""MCP Server for Remembered Service.

This module provides MCP tools for AI agents to capture reminders from free
text and manage their alerts. Uses the same database as the REST API.

Transport Support:
- stdio: Standard input/output (local process communication)
- sse: Server-Sent Events over HTTP (network access)
"""

from mcp.server.fastmcp import FastMCP
from typing import List, Optional
import os

import crud
import database
from config import settings
from enums import RecurrenceEnum
from intervals import LABELS, NotificationInterval, order_intervals
from logger_config import setup_logger
from reminder_parser import predict_type

logger = setup_logger(__name__, 'mcp.log')
logger.info("MCP Server initialized")

mcp = FastMCP(
    "RememberedService",
    host=settings.MCP_HOST,
    port=settings.MCP_PORT
)


def _format_date(value) -> str:
    return value.strftime("%Y-%m-%d %H:%M") if value else "needs review"


@mcp.tool()
def parse_reminder_text(text: str, user_id: str = None) -> str:
    """Show how a phrase would be understood, without saving it.

    Args:
        text: Reminder phrase (e.g., "Mom birthday Jan 3rd")
        user_id: Optional user whose sticky default type applies

    Returns:
        Parsed title, date and type
    """
    db = database.SessionLocal()
    try:
        sticky = crud.get_sticky_type(db, user_id)
        result, resolved = predict_type(text, sticky)
        return (
            f"Title: {result.title}\n"
            f"Date: {_format_date(result.date)}\n"
            f"Type: {resolved.value}"
        )
    finally:
        db.close()


@mcp.tool()
def create_reminder(
    user_id: str,
    text: str,
    recurrence: str = "none",
    notes: str = ""
) -> str:
    """Capture a reminder from free text and schedule its alerts.

    Args:
        user_id: Owner ID
        text: What to remember (e.g., "Dominic's birthday is 9/25")
        recurrence: "none" or "annual" (default: "none")
        notes: Optional notes

    Returns:
        Success message with the saved reminder, or error message
    """
    db = database.SessionLocal()
    try:
        logger.info(f"📝 Creating reminder from text: {text}")
        item = crud.create_item_from_text(
            db, user_id, text, recurrence=RecurrenceEnum(recurrence), notes=notes
        )
        alerts = crud.get_alerts_for_item(db, item.id)
        return (
            f"✓ Reminder saved!\n"
            f"ID: {item.id}\n"
            f"Title: {item.title}\n"
            f"Date: {_format_date(item.date)}\n"
            f"Type: {item.type.value}\n"
            f"Alerts scheduled: {len(alerts)}"
        )
    except Exception as e:
        return f"✗ Error creating reminder: {str(e)}"
    finally:
        db.close()


@mcp.tool()
def list_reminders(user_id: str, limit: int = 50) -> str:
    """List a user's reminders, soonest first.

    Args:
        user_id: Owner ID
        limit: Maximum number of results (default: 50, max: 1000)

    Returns:
        Formatted list of reminders or message if none found
    """
    db = database.SessionLocal()
    try:
        items = crud.get_items_by_user(db, user_id, min(limit, 1000))
        if not items:
            return "No reminders found."

        result = [f"Found {len(items)} reminder(s):\n"]
        for item in items:
            result.append(
                f"\n• [{item.type.value.upper()}] {item.title}\n"
                f"  ID: {item.id}\n"
                f"  Date: {_format_date(item.date)}"
                + (f" ({item.countdown})" if item.countdown else "")
            )
        return "\n".join(result)
    finally:
        db.close()


@mcp.tool()
def update_notifications(
    item_id: str,
    user_id: str,
    enabled: bool = True,
    intervals: Optional[List[str]] = None,
    recurrence: str = None
) -> str:
    """Change a reminder's alert settings and reschedule it.

    Args:
        item_id: Reminder UUID
        user_id: Owner ID
        enabled: Turn alerts on or off
        intervals: Interval names - oneMonth, twoWeeks, oneWeek, threeDays, oneDay, dayOf
        recurrence: Optional "none" or "annual"

    Returns:
        Summary of registered alerts or error message
    """
    db = database.SessionLocal()
    try:
        updates = {'is_notification_enabled': enabled}
        if intervals is not None:
            updates['notification_intervals'] = order_intervals(intervals)
        if recurrence:
            updates['recurrence'] = RecurrenceEnum(recurrence)

        item = crud.update_item(db, item_id, user_id, updates)
        if not item:
            return "✗ Reminder not found."

        alerts = crud.get_alerts_for_item(db, item.id)
        return f"✓ Alerts updated for '{item.title}': {len(alerts)} scheduled."
    except Exception as e:
        return f"✗ Error updating alerts: {str(e)}"
    finally:
        db.close()


@mcp.tool()
def list_scheduled_alerts(item_id: str, user_id: str) -> str:
    """List the alerts registered for a reminder.

    Args:
        item_id: Reminder UUID
        user_id: Owner ID

    Returns:
        Formatted list of alerts or message if none
    """
    db = database.SessionLocal()
    try:
        if not crud.get_item(db, item_id, user_id):
            return "✗ Reminder not found."

        alerts = crud.get_alerts_for_item(db, item_id)
        if not alerts:
            return "No alerts scheduled."

        result = [f"{len(alerts)} alert(s):\n"]
        for alert in alerts:
            label = LABELS[NotificationInterval(alert.interval)]
            result.append(
                f"\n• {label}: {alert.fire_at.strftime('%Y-%m-%d %H:%M')}"
                + (" (yearly)" if alert.repeats else "")
            )
        return "\n".join(result)
    finally:
        db.close()


if __name__ == "__main__":
    transport = os.getenv("MCP_TRANSPORT", settings.MCP_TRANSPORT).lower()

    if transport == "sse":
        print(f"Starting MCP server with SSE transport on {settings.MCP_HOST}:{settings.MCP_PORT}")
        print(f"SSE endpoint: http://{settings.MCP_HOST}:{settings.MCP_PORT}/sse")
        mcp.run(transport="sse")
    else:
        print("Starting MCP server with stdio transport")
        mcp.run(transport="stdio")
