"""Persist one record per scan attempt for later troubleshooting."""

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_LOG_DIR = "log"


def log_test_attempt(details: Any, log_dir: Path | str | None = None) -> Path | None:
    """Write ``details`` to a timestamped file and return its path.

    Logging must never break a scan, so any failure returns None.
    """
    now = datetime.now(UTC)
    directory = Path(log_dir) if log_dir else Path.cwd() / DEFAULT_LOG_DIR
    try:
        directory.mkdir(parents=True, exist_ok=True)
        safe_timestamp = now.isoformat().replace(":", "-").replace(".", "-").replace("+", "_")
        log_file = directory / f"{safe_timestamp}.txt"
        if isinstance(details, str):
            body = details
        else:
            body = json.dumps(details, indent=2, default=str)
        log_file.write_text(f"Timestamp: {now.isoformat()}\n\n{body}\n", encoding="utf-8")
        return log_file
    except (OSError, TypeError, ValueError) as exc:
        logger.debug("Could not write scan attempt log: %s", exc)
        return None
