# recipefind/events.py
"""
Event logging for RecipeFind.

Responsibilities:
- Provide a single log_event(...) function that appends a JSONL record to the
  event log file and never raises (analytics are strictly non-blocking).
- Provide small helper functions for common event types:
  - log_search_performed(...)
  - log_recipe_viewed(...)
  - log_favorite_toggled(...)
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import EventsConfig

logger = logging.getLogger(__name__)

# JSONL file with one event per line. Patched in tests.
EVENT_LOG_FILE = EventsConfig.get_log_file()


def _write_to_file(record: Dict[str, Any]) -> None:
    """
    Append a single JSON record to the event log as JSONL.
    Never raise exceptions.
    """
    try:
        path = Path(EVENT_LOG_FILE)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(record, ensure_ascii=False) + "\n")
    except Exception as exc:
        logger.debug("Failed to write event to %s: %s", EVENT_LOG_FILE, exc)


def log_event(
    event: str,
    session_id: Optional[str],
    payload: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Core event logger.

    Builds a record with keys ts (unix seconds), event, session_id, payload and
    appends it to EVENT_LOG_FILE. Never raises.
    """
    record = {
        "ts": time.time(),
        "event": event,
        "session_id": session_id,
        "payload": payload or {},
    }
    _write_to_file(record)


# ---------------------------------------------------------------------------
# Helper functions for common event types
# ---------------------------------------------------------------------------

def log_search_performed(
    session_id: Optional[str],
    query: str,
    filters: Dict[str, Any],
    result_count: int,
) -> None:
    """
    Log a search_performed event.

    payload:
    {
        "query": "...",
        "filters": {"cuisine": "Italian", ...},
        "result_count": 3
    }
    """
    payload = {
        "query": query,
        "filters": {k: v for k, v in filters.items() if v},
        "result_count": result_count,
    }
    log_event("search_performed", session_id, payload)


def log_recipe_viewed(session_id: Optional[str], recipe_id: str, source: Optional[str] = None) -> None:
    """Log a recipe_viewed event (source: "search", "favorites", "lucky", ...)."""
    payload: Dict[str, Any] = {"recipe_id": recipe_id}
    if source:
        payload["source"] = source
    log_event("recipe_viewed", session_id, payload)


def log_favorite_toggled(
    session_id: Optional[str],
    recipe_id: str,
    collection: str,
    added: bool,
) -> None:
    """
    Log a favorite_toggled event for the favorites or saved collection.

    payload:
    {
        "recipe_id": "3",
        "collection": "favorites" | "saved",
        "action": "added" | "removed"
    }
    """
    payload = {
        "recipe_id": recipe_id,
        "collection": collection,
        "action": "added" if added else "removed",
    }
    log_event("favorite_toggled", session_id, payload)


def read_events(limit: Optional[int] = None) -> List[Dict[str, Any]]:
    """
    Read events back from the log, oldest first.

    Malformed lines are skipped. Returns [] if the log does not exist.
    """
    path = Path(EVENT_LOG_FILE)
    if not path.exists():
        return []
    events: List[Dict[str, Any]] = []
    with path.open("r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                events.append(json.loads(line))
            except json.JSONDecodeError:
                continue
    if limit is not None:
        return events[-limit:]
    return events
