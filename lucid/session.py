from pathlib import Path

from .config import SCRIPT_FILE, ensure_lucid_dir
from .console import console

SUBMISSION_SEPARATOR = "\n\n"


def save_script(submissions: list[str], filepath: Path = SCRIPT_FILE) -> bool:
    """Save the code submitted in this session as a Python script"""
    try:
        ensure_lucid_dir()
        text = SUBMISSION_SEPARATOR.join(submission.rstrip("\n") for submission in submissions)
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(text + "\n" if text else "")
        return True
    except Exception as e:
        console.print(f"[red]Error saving script: {e}[/red]")
        return False


def load_script(filepath: Path = SCRIPT_FILE) -> str | None:
    """Read a script to run in the session"""
    try:
        if filepath.exists():
            with open(filepath, encoding="utf-8") as f:
                return f.read()
        return None
    except Exception as e:
        console.print(f"[red]Error loading script: {e}[/red]")
        return None
