"""
Line editing, history and completion for the console prompt.

The prompt is plain `input()`, so editing is delegated to `readline`:
  - history is read from ~/.lucid/history at startup and written back at exit
    (registered with `atexit`), capped at HISTORY_LENGTH entries
  - Tab completes names from the session namespace through `rlcompleter`

Failures only print a warning. History is a convenience and must never stop
the console from starting.
"""

import atexit
import readline
import rlcompleter
from typing import Any

from .config import HISTORY_FILE, ensure_lucid_dir
from .console import console

HISTORY_LENGTH = 500


def save_history() -> None:
    try:
        ensure_lucid_dir()
        readline.set_history_length(HISTORY_LENGTH)
        readline.write_history_file(str(HISTORY_FILE))
    except OSError:
        pass


def setup_readline(namespace: dict[str, Any]) -> None:
    """Setup command history, persistent storage and tab completion"""
    try:
        ensure_lucid_dir()
        if HISTORY_FILE.exists():
            readline.read_history_file(str(HISTORY_FILE))
        readline.set_history_length(HISTORY_LENGTH)

        # Save history on exit
        atexit.register(save_history)

        readline.set_completer(rlcompleter.Completer(namespace).complete)
        readline.parse_and_bind("tab: complete")
    except Exception as e:
        console.print(f"[yellow]Warning: Could not setup command history: {e}[/yellow]")
