"""lucid - Interactive Python console with a structural pretty-printer"""

from .config import (
    CONFIG_FILE,
    DEFAULT_CONFIG,
    DETAILED_OUTPUT,
    HISTORY_FILE,
    LOAD_SCRIPT,
    LUCID_DIR,
    SCRIPT_FILE,
    TRACE_FILE,
    ensure_lucid_dir,
    get_bool_setting,
    get_int_setting,
    get_print_options,
    get_setting,
    load_config,
    save_config,
)
from .console import console
from .evaluator import Cancelled, Error, EvaluationResult, ScriptRunner, Success
from .formatting import (
    NO_VALUE,
    Browsable,
    Level,
    MemberDisplayMode,
    PrettyPrinter,
    PrintOptions,
    StyledString,
    browsable,
    display,
    display_proxy,
    pretty_print,
)
from .session import load_script, save_script
from .utils import get_version, print_header

__all__ = [
    # Config
    "CONFIG_FILE",
    "DEFAULT_CONFIG",
    "DETAILED_OUTPUT",
    "HISTORY_FILE",
    "LOAD_SCRIPT",
    "LUCID_DIR",
    "SCRIPT_FILE",
    "TRACE_FILE",
    "ensure_lucid_dir",
    "get_bool_setting",
    "get_int_setting",
    "get_print_options",
    "get_setting",
    "load_config",
    "save_config",
    # Console
    "console",
    # Evaluator
    "Cancelled",
    "Error",
    "EvaluationResult",
    "ScriptRunner",
    "Success",
    # Formatting
    "NO_VALUE",
    "Browsable",
    "Level",
    "MemberDisplayMode",
    "PrettyPrinter",
    "PrintOptions",
    "StyledString",
    "browsable",
    "display",
    "display_proxy",
    "pretty_print",
    # Session
    "load_script",
    "save_script",
    # Utils
    "get_version",
    "print_header",
]
