"""
Trace logging.

Modules log through the standard `logging` hierarchy under the "lucid" logger
(`logging.getLogger(__name__)` in each module). Nothing is written anywhere
until a trace file is configured: `enable_tracing()` attaches a FileHandler
that appends `<time> - <message>` lines and tells the user where they go.
The console itself never shows log records, so tracing cannot garble the
output of an evaluation.
"""

import logging
from pathlib import Path

from .console import console

TRACE_FORMAT = "%(asctime)s - %(name)s - %(message)s"

logger = logging.getLogger("lucid")
logger.addHandler(logging.NullHandler())


def enable_tracing(path: str | Path, level: int = logging.DEBUG) -> logging.Handler | None:
    """Send all lucid log records to `path`. Returns the handler, or None on failure."""
    trace_path = Path(path).expanduser()
    try:
        trace_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(trace_path, encoding="utf-8")
    except OSError as e:
        console.print(f"[yellow]Warning: Could not open trace file {trace_path}: {e}[/yellow]")
        return None

    handler.setFormatter(logging.Formatter(TRACE_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    console.print(f"[green]Tracing to {trace_path}[/green]")
    logger.info("Tracing enabled")
    return handler


def disable_tracing(handler: logging.Handler) -> None:
    logger.removeHandler(handler)
    handler.close()
