"""Background Worker for Remembered Service.

This module fires registered alerts at their wall-clock instant. It stands in
for a device-level notification scheduler: due alerts are POSTed to the
delivery webhook, which pushes them to the user's device.

The worker:
- Runs continuously, checking for due alerts every 60 seconds (configurable)
- Sends each due alert to ALERT_WEBHOOK_URL, retrying with backoff
- Advances repeating alerts by one year and stamps one-shot alerts delivered
- Leaves alerts that could not be sent pending for the next check
"""

import asyncio
import signal
import sys
from typing import Optional

import httpx

import crud
import database
from config import settings
from date_utils import local_now
from logger_config import setup_logger

logger = setup_logger(__name__, 'worker.log')

MAX_DELIVERY_ATTEMPTS = 3

# Global flag for graceful shutdown
shutdown_requested = False


def signal_handler(signum, frame):
    """Handle shutdown signals gracefully."""
    global shutdown_requested
    logger.info(f"Received signal {signum}, initiating graceful shutdown...")
    shutdown_requested = True


def build_payload(alert) -> dict:
    """Webhook body for one alert."""
    return {
        "identifier": alert.identifier,
        "item_id": alert.item_id,
        "interval": alert.interval,
        "title": alert.title,
        "body": alert.body,
        "fire_at": alert.fire_at.isoformat(),
        "repeats": alert.repeats,
    }


async def deliver_alert(alert, client: Optional[httpx.AsyncClient] = None) -> bool:
    """Send one alert to the delivery webhook.

    Args:
        alert: ScheduledAlert to deliver
        client: Optional shared client (a short-lived one is created otherwise)

    Returns:
        bool: True if the webhook accepted the alert
    """
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=30.0) as own_client:
                response = await own_client.post(settings.ALERT_WEBHOOK_URL, json=build_payload(alert))
        else:
            response = await client.post(settings.ALERT_WEBHOOK_URL, json=build_payload(alert))

        if response.is_success:
            logger.info(f"Delivered alert {alert.identifier}")
            return True

        logger.error(
            f"Webhook rejected alert {alert.identifier}. "
            f"Status: {response.status_code}, Response: {response.text}"
        )
        return False

    except httpx.TimeoutException:
        logger.error(f"Timeout while delivering alert {alert.identifier}")
        return False
    except httpx.RequestError as e:
        logger.error(f"Network error while delivering alert {alert.identifier}: {str(e)}")
        return False


async def process_due_alerts(client: Optional[httpx.AsyncClient] = None, backoff_base: float = 2.0) -> int:
    """Deliver every due alert.

    Args:
        client: Optional shared HTTP client
        backoff_base: Base of the exponential delay between attempts

    Returns:
        int: Number of alerts delivered
    """
    db = database.SessionLocal()
    delivered = 0
    try:
        now = local_now(settings.TIMEZONE)
        due_alerts = crud.get_due_alerts(db, now)

        if not due_alerts:
            logger.debug("No alerts due at this time")
            return 0

        logger.info(f"Found {len(due_alerts)} due alert(s)")

        for alert in due_alerts:
            for attempt in range(1, MAX_DELIVERY_ATTEMPTS + 1):
                if await deliver_alert(alert, client):
                    crud.mark_alert_delivered(db, alert, now)
                    delivered += 1
                    break

                logger.warning(f"Attempt {attempt}/{MAX_DELIVERY_ATTEMPTS} failed for alert {alert.identifier}")
                if attempt < MAX_DELIVERY_ATTEMPTS:
                    await asyncio.sleep(backoff_base ** attempt)
            else:
                logger.error(
                    f"Giving up on alert {alert.identifier} for now; "
                    f"it stays pending for the next check"
                )

        return delivered
    finally:
        db.close()


async def worker_loop():
    """Main worker loop that runs continuously.

    Checks for due alerts at the configured interval and delivers them.
    """
    logger.info("Background worker started")
    logger.info(f"Worker enabled: {settings.WORKER_ENABLED}")
    logger.info(f"Check interval: {settings.WORKER_CHECK_INTERVAL} seconds")
    logger.info(f"Alert webhook URL: {settings.ALERT_WEBHOOK_URL}")

    if not settings.WORKER_ENABLED:
        logger.warning("Worker is disabled in configuration. Exiting.")
        return

    iteration = 0
    async with httpx.AsyncClient(timeout=30.0) as client:
        while not shutdown_requested:
            try:
                iteration += 1
                logger.debug(f"Worker iteration {iteration} started")

                await process_due_alerts(client)

                # Sleep in 1-second steps to allow quick shutdown
                for _ in range(settings.WORKER_CHECK_INTERVAL):
                    if shutdown_requested:
                        break
                    await asyncio.sleep(1)

            except Exception as e:
                logger.error(f"Error in worker loop iteration {iteration}: {str(e)}", exc_info=True)
                await asyncio.sleep(5)

    logger.info("Background worker shutting down gracefully")


def main():
    """Main entry point for the background worker."""
    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)

    logger.info("=" * 60)
    logger.info("Remembered Service - Alert Worker")
    logger.info("=" * 60)

    try:
        asyncio.run(worker_loop())
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt")
    except Exception as e:
        logger.error(f"Fatal error in background worker: {str(e)}", exc_info=True)
        sys.exit(1)

    logger.info("Background worker stopped")
    sys.exit(0)


if __name__ == "__main__":
    main()
