"""Append-only JSONL log of hook invocations.

One line per prompt. Writing is best-effort: a full disk or a read-only
home directory must never break the prompt.
"""

import datetime
import logging
import os
from typing import Optional

from pydantic import BaseModel, Field

logger = logging.getLogger("tether.hook.log")

LOG_FILENAME = "prompt-flags.jsonl"


class LogRecord(BaseModel):
    timestamp: str = Field(
        default_factory=lambda: datetime.datetime.now().astimezone().isoformat(timespec="seconds")
    )
    session_id: str = ""
    prompt: str
    flags: list[str]
    cleaned_prompt: str
    applied_flags: list[str]
    injected_context: str


def log_path(log_dir: str) -> str:
    return os.path.join(os.path.expanduser(log_dir), LOG_FILENAME)


def append_record(record: LogRecord, log_dir: str) -> Optional[str]:
    """Append ``record`` as one JSON line. Returns the file path, or None on failure."""
    path = log_path(log_dir)
    line = record.model_dump_json() + "\n"
    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        # One write() per record in append mode
        with open(path, "a", encoding="utf-8") as f:
            f.write(line)
    except OSError as e:
        logger.debug(f"Hook log write failed ({path}): {e}")
        return None
    return path
