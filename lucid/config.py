import json
import locale
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

from dotenv import load_dotenv

from .console import console
from .formatting.options import (
    INVARIANT_CULTURE,
    SUPPORTED_RADIXES,
    MemberDisplayMode,
    NumberCulture,
    PrintOptions,
)

T = TypeVar("T")

# .env values become environment variables, so they outrank the config file
load_dotenv()

# Every setting /config accepts, with its default as stored in config.json
DEFAULT_CONFIG = {
    "NUMBER_RADIX": "10",
    "NUMBER_CULTURE": "invariant",
    "ESCAPE_NON_PRINTABLE_CHARACTERS": "true",
    "MAXIMUM_OUTPUT_LENGTH": "20000",
    "MAXIMUM_LINE_LENGTH": "120",
    "ELLIPSIS": "...",
    "DETAILED_OUTPUT": "false",
    "LOAD_SCRIPT": "",
    "TRACE_FILE": "",
}

TRUE_VALUES = frozenset({"true", "1", "yes", "on"})

LUCID_DIR = Path(os.getenv("LUCID_DIR", str(Path.home() / ".lucid")))
HISTORY_FILE = Path(os.getenv("LUCID_HISTORY_FILE", str(LUCID_DIR / "history")))
SCRIPT_FILE = Path(os.getenv("LUCID_SCRIPT_FILE", str(LUCID_DIR / "session.py")))
CONFIG_FILE = Path(os.getenv("LUCID_CONFIG_FILE", str(LUCID_DIR / "config.json")))


def ensure_lucid_dir():
    """Create ~/.lucid (or LUCID_DIR) when missing"""
    try:
        LUCID_DIR.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        console.print(f"[yellow]Warning: Could not create directory {LUCID_DIR}: {e}[/yellow]")


def load_config() -> dict[str, Any]:
    """Read config.json; a missing or unreadable file counts as empty"""
    if not CONFIG_FILE.is_file():
        return {}
    try:
        stored = json.loads(CONFIG_FILE.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        console.print(f"[yellow]Warning: Could not read {CONFIG_FILE}: {e}[/yellow]")
        return {}
    if not isinstance(stored, dict):
        console.print(f"[yellow]Warning: Ignoring {CONFIG_FILE}, expected a JSON object[/yellow]")
        return {}
    return stored


def save_config(config: dict[str, Any]) -> bool:
    """Write config.json, reporting failures on the console"""
    ensure_lucid_dir()
    try:
        CONFIG_FILE.write_text(json.dumps(config, indent=2) + "\n", encoding="utf-8")
    except OSError as e:
        console.print(f"[red]Error saving {CONFIG_FILE}: {e}[/red]")
        return False
    return True


def get_setting(key: str, default: str) -> str:
    """Look a setting up in the environment, then config.json, then use the default"""
    from_env = os.getenv(key)
    if from_env:
        return from_env
    stored = load_config()
    return str(stored[key]) if key in stored else default


def _fallback(key: str, problem: str, default: T) -> T:
    console.print(f"[yellow]Warning: {problem} for {key}, using default {default}[/yellow]")
    return default


def _checked(key: str, default: T, parse: Callable[[str], T], problem: str) -> T:
    raw = get_setting(key, str(default))
    try:
        return parse(raw)
    except ValueError:
        return _fallback(key, f"{problem} {raw!r}", default)


def get_int_setting(key: str, default: int) -> int:
    return _checked(key, default, int, "Invalid integer")


def get_bool_setting(key: str, default: bool) -> bool:
    return get_setting(key, str(default).lower()).strip().lower() in TRUE_VALUES


def get_radix_setting(key: str, default: int) -> int:
    """Number base for integers; only the bases the printer supports are accepted"""
    radix = get_int_setting(key, default)
    if radix in SUPPORTED_RADIXES:
        return radix
    return _fallback(key, f"Unsupported radix {radix}", default)


def get_length_setting(key: str, default: int, minimum: int) -> int:
    length = get_int_setting(key, default)
    if length >= minimum:
        return length
    return _fallback(key, f"Value below {minimum}", default)


def get_culture_setting(key: str, default: str) -> NumberCulture:
    """Number culture: "invariant", or "current" for the process locale (LC_NUMERIC)"""
    name = get_setting(key, default).strip().lower()
    if name == "current":
        try:
            locale.setlocale(locale.LC_NUMERIC, "")
        except locale.Error as e:
            console.print(f"[yellow]Warning: Could not use the system locale for {key}: {e}[/yellow]")
            return INVARIANT_CULTURE
        return NumberCulture.current()
    if name != "invariant":
        console.print(f"[yellow]Warning: Unknown culture {name!r} for {key}, using invariant[/yellow]")
    return INVARIANT_CULTURE


def get_print_options(detailed: bool) -> PrintOptions:
    """Build the pretty-printer options for summary or detailed output.

    Read on every call so that `/config set` takes effect on the next result.
    """
    layout = MemberDisplayMode.SEPARATE_LINES if detailed else MemberDisplayMode.SINGLE_LINE
    return PrintOptions(
        member_display_format=layout,
        maximum_output_length=get_length_setting(
            "MAXIMUM_OUTPUT_LENGTH", int(DEFAULT_CONFIG["MAXIMUM_OUTPUT_LENGTH"]), 0
        ),
        maximum_line_length=get_length_setting(
            "MAXIMUM_LINE_LENGTH", int(DEFAULT_CONFIG["MAXIMUM_LINE_LENGTH"]), 1
        ),
        number_radix=get_radix_setting("NUMBER_RADIX", int(DEFAULT_CONFIG["NUMBER_RADIX"])),
        escape_non_printable_characters=get_bool_setting("ESCAPE_NON_PRINTABLE_CHARACTERS", True),
        ellipsis=get_setting("ELLIPSIS", DEFAULT_CONFIG["ELLIPSIS"]),
        culture=get_culture_setting("NUMBER_CULTURE", DEFAULT_CONFIG["NUMBER_CULTURE"]),
    )


# Startup settings, read once
DETAILED_OUTPUT = get_bool_setting("DETAILED_OUTPUT", False)
LOAD_SCRIPT = get_setting("LOAD_SCRIPT", DEFAULT_CONFIG["LOAD_SCRIPT"])
TRACE_FILE = get_setting("TRACE_FILE", DEFAULT_CONFIG["TRACE_FILE"])
