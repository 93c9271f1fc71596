"""FastAPI REST API server for Remembered Service.

This module provides HTTP endpoints for parsing reminder phrases, previewing
alert schedules and managing saved reminders.
"""

from fastapi import FastAPI, Depends, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import List

import crud
import schemas
import database
from config import settings
from logger_config import setup_logger
from reminder_parser import predict_type
import scheduler

logger = setup_logger(__name__, 'api.log')

app = FastAPI(
    title="Remembered Service API",
    description="Free-text reminder capture with date parsing and alert scheduling",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

origins = [
    "http://localhost:3000",
    "http://localhost:1800",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
def root():
    """Root endpoint - service information"""
    return {
        "service": "Remembered Service API",
        "version": "1.0.0",
        "status": "healthy",
        "endpoints": {
            "docs": "/docs",
            "health": "/health",
            "parse": "/parse",
            "reminders": "/reminders"
        }
    }


@app.get("/health")
def health_check():
    """Health check endpoint for monitoring"""
    return {
        "status": "healthy",
        "service": "remembered_service",
        "database": settings.DATABASE_URL.split("://")[0],
        "date_detector": settings.DATE_DETECTOR_ENABLED
    }


@app.post("/parse", response_model=schemas.ParseResponse)
def parse_text(request: schemas.ParseRequest, db: Session = Depends(database.get_db)):
    """Parse a phrase without saving it.

    Request body example:
    ```json
    {"text": "Stef birthday 8/8", "user_id": "u-1"}
    ```

    When user_id is given, resolved_type applies that user's sticky default.
    """
    sticky = crud.get_sticky_type(db, request.user_id)
    result, resolved = predict_type(request.text, sticky)
    return schemas.ParseResponse(**result.model_dump(), resolved_type=resolved)


@app.post("/schedule/preview", response_model=List[schemas.ScheduledTrigger])
def preview_schedule(request: schemas.SchedulePreviewRequest):
    """Compute the alerts a reminder would get, without registering them."""
    return scheduler.schedule(
        request.target_date,
        request.recurrence,
        request.intervals,
        hour=request.hour,
        minute=request.minute,
        notifications_enabled=request.notifications_enabled
    )


@app.post("/reminders", response_model=schemas.ReminderResponse, status_code=201)
def create_reminder(reminder: schemas.ReminderCreate, db: Session = Depends(database.get_db)):
    """Capture a reminder from free text.

    Request body example:
    ```json
    {
        "user_id": "u-1",
        "text": "Dominic's birthday is 9/25",
        "recurrence": "annual"
    }
    ```
    """
    try:
        return crud.create_item_from_text(
            db,
            reminder.user_id,
            reminder.text,
            recurrence=reminder.recurrence,
            notes=reminder.notes,
            is_notification_enabled=reminder.is_notification_enabled,
            notification_intervals=reminder.notification_intervals
        )
    except (ValueError, SQLAlchemyError) as e:
        logger.error(f"Error creating reminder for {reminder.user_id}: {e}")
        raise HTTPException(status_code=400, detail=f"Error creating reminder: {str(e)}")


@app.get("/reminders", response_model=List[schemas.ReminderResponse])
def list_reminders(
    user_id: str = Query(..., description="Owner ID"),
    limit: int = Query(50, ge=1, le=1000, description="Maximum number of results"),
    db: Session = Depends(database.get_db)
):
    """List a user's reminders, soonest first, undated ones last."""
    return crud.get_items_by_user(db, user_id, limit)


@app.get("/reminders/search", response_model=List[schemas.ReminderResponse])
def search_reminders(
    user_id: str = Query(..., description="Owner ID"),
    query: str = Query(..., min_length=1, description="Search query"),
    db: Session = Depends(database.get_db)
):
    """Search reminders by title, original text or notes."""
    return crud.search_items(db, user_id, query)


@app.post("/reminders/reschedule")
def reschedule_reminders(
    user_id: str = Query(..., description="Owner ID"),
    db: Session = Depends(database.get_db)
):
    """Cancel and re-register every alert for a user's reminders."""
    registered = crud.reschedule_all(db, user_id)
    return {"user_id": user_id, "alerts_registered": registered}


@app.get("/reminders/{item_id}", response_model=schemas.ReminderResponse)
def get_reminder(
    item_id: str,
    user_id: str = Query(..., description="Owner ID"),
    db: Session = Depends(database.get_db)
):
    """Get a specific reminder by ID."""
    item = crud.get_item(db, item_id, user_id)
    if not item:
        raise HTTPException(status_code=404, detail="Reminder not found")
    return item


@app.put("/reminders/{item_id}", response_model=schemas.ReminderResponse)
def update_reminder(
    item_id: str,
    updates: schemas.ReminderUpdate,
    user_id: str = Query(..., description="Owner ID"),
    db: Session = Depends(database.get_db)
):
    """Update an existing reminder.

    Request body example:
    ```json
    {
        "date": "2027-03-14T12:00:00",
        "notification_intervals": ["oneWeek", "dayOf"]
    }
    ```

    Only provided fields are updated. Changing the date, recurrence, title or
    alert settings reschedules all of the reminder's alerts.
    """
    try:
        item = crud.update_item(db, item_id, user_id, updates.model_dump(exclude_unset=True))
    except SQLAlchemyError as e:
        logger.error(f"Error updating reminder {item_id}: {e}")
        raise HTTPException(status_code=400, detail=f"Error updating reminder: {str(e)}")
    if not item:
        raise HTTPException(status_code=404, detail="Reminder not found")
    return item


@app.delete("/reminders/{item_id}", status_code=200)
def delete_reminder(
    item_id: str,
    user_id: str = Query(..., description="Owner ID"),
    db: Session = Depends(database.get_db)
):
    """Delete a reminder and cancel its alerts."""
    if not crud.delete_item(db, item_id, user_id):
        raise HTTPException(status_code=404, detail="Reminder not found")
    return {"message": "Reminder deleted successfully", "item_id": item_id}


@app.get("/reminders/{item_id}/alerts", response_model=List[schemas.ScheduledAlertResponse])
def list_reminder_alerts(
    item_id: str,
    user_id: str = Query(..., description="Owner ID"),
    db: Session = Depends(database.get_db)
):
    """List the alerts currently registered for a reminder."""
    if not crud.get_item(db, item_id, user_id):
        raise HTTPException(status_code=404, detail="Reminder not found")
    return crud.get_alerts_for_item(db, item_id)


@app.get("/preferences/{user_id}", response_model=schemas.PreferenceResponse)
def get_preferences(user_id: str, db: Session = Depends(database.get_db)):
    """Get a user's sticky default type and alert time."""
    return crud.get_preferences(db, user_id)


@app.put("/preferences/{user_id}", response_model=schemas.PreferenceResponse)
def update_preferences(
    user_id: str,
    updates: schemas.PreferenceUpdate,
    db: Session = Depends(database.get_db)
):
    """Change a user's alert time; all their alerts are rescheduled."""
    return crud.update_preferences(db, user_id, updates.model_dump(exclude_unset=True))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host=settings.API_HOST,
        port=settings.API_PORT,
        log_level="info"
    )
