"""Prompt hook entry point — stdin JSON in, context text out.

Input (stdin)::

    {"prompt": "fix bug -u", "session_id": "abc123", ...}

Output (stdout): the injected blocks, newline separated, nothing else.
Exit code 0 on success, 1 on any failure (with one bracketed line on stderr).
"""

import logging
import os
import sys
from typing import Optional, TextIO

from pydantic import BaseModel, ConfigDict

from .injector import build_injection
from .log import LogRecord, append_record

logger = logging.getLogger("tether.hook")

HOOK_NAME = "tether-hook"


class HookInput(BaseModel):
    model_config = ConfigDict(extra="ignore")

    prompt: str = ""
    session_id: str = ""


def configured_log_dir() -> str:
    """Log directory from settings; the default when settings don't load.

    Only ``hook_log_dir`` is read. The hook runs inside arbitrary projects,
    so their ``.env`` may be broken or hold bridge-only values.
    """
    from ..config import DEFAULT_HOOK_LOG_DIR, TetherSettings

    try:
        return TetherSettings().hook_log_dir
    except (ValueError, OSError) as e:
        # ValidationError and UnicodeDecodeError are both ValueErrors
        logger.debug(f"Settings not loaded, using {DEFAULT_HOOK_LOG_DIR}: {type(e).__name__}: {e}")
        return DEFAULT_HOOK_LOG_DIR


def run_hook(
    stdin: TextIO,
    stdout: TextIO,
    stderr: TextIO,
    log_dir: Optional[str] = None,
    cwd: Optional[str] = None,
) -> int:
    """Process one prompt. Returns the process exit code.

    ``log_dir`` defaults to the configured hook log directory.
    """
    try:
        payload = HookInput.model_validate_json(stdin.read())
        injection = build_injection(payload.prompt, cwd or os.getcwd())
        text = injection.text

        append_record(
            LogRecord(
                session_id=payload.session_id,
                prompt=payload.prompt,
                flags=injection.parsed.flags,
                cleaned_prompt=injection.parsed.cleaned,
                applied_flags=injection.applied_flags,
                injected_context=text,
            ),
            log_dir or configured_log_dir(),
        )

        if text:
            stdout.write(text)
            stdout.flush()
        return 0
    except Exception as e:
        message = " ".join(str(e).split())
        stderr.write(f"[{HOOK_NAME}] {type(e).__name__}: {message}\n")
        return 1


def main():
    """Console entry point for ``tether-hook``."""
    sys.exit(run_hook(sys.stdin, sys.stdout, sys.stderr))


if __name__ == "__main__":
    main()
