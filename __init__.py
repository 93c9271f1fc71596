"""Remembered Service - free-text reminders with date parsing and alert scheduling.

Type "Stef birthday 8/8" and get a titled, categorised reminder with an
upcoming date, plus alerts a month, weeks or days before it.

Features:
- Natural-language date detection with a numeric month/day fallback
- Dates always land in the future (today or earlier moves one year ahead)
- Category detection: birthday, anniversary, medical, memorial, other
- Sticky default category per user
- Alert scheduling at configurable lead times, one-shot or yearly
- Dual access: REST API and MCP server

Components:
- date_extractor, classifier, title_builder, reminder_parser: phrase parsing
- intervals, scheduler: alert time computation
- config: Application settings
- database: SQLAlchemy models and session management
- schemas: Pydantic schemas
- crud: Database operations and parse/schedule orchestration
- api_server: FastAPI REST API
- mcp_server: MCP server with tools for AI agents
- background_worker: Fires due alerts to the delivery webhook

Usage:
    python main.py            # everything
    python api_server.py
    python mcp_server.py
    python background_worker.py
"""

__version__ = "1.0.0"
__description__ = "Free-text reminder capture with date parsing and alert scheduling"
