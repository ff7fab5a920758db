"""
Command registry for lucid's interactive commands.

Every console command is declared here once. The handlers (the code that runs
when you type /help, /quit, ...) live in main.py; this module only holds the
metadata: triggers, a short description for /help, and a longer explanation.
Keeping the metadata in one list means /help can never drift out of sync with
the commands that actually exist.

Anything typed at the prompt that does not start with one of these triggers is
Python code and goes to the evaluator.
"""

from typing import TypedDict

from rich.markup import escape


class CommandInfo(TypedDict):
    """Type definition for command information."""

    triggers: list[str]  # Command triggers (e.g., ["/help"] or ["/quit", "/exit"])
    usage: str  # Arguments shown after the trigger in /help, or ""
    description: str  # Short one-line description for /help display
    detailed: str  # Longer explanation of what the command does


COMMANDS: list[CommandInfo] = [
    {
        "triggers": ["/help"],
        "usage": "",
        "description": "Show all available commands",
        "detailed": "Display a list of all available interactive commands with descriptions "
        "and the keyboard shortcuts of the prompt.",
    },
    {
        "triggers": ["/quit", "/exit"],
        "usage": "",
        "description": "Exit the console",
        "detailed": "Exit lucid. Command history is saved automatically; the session's "
        "variables are not, use /save first to keep the code that created them.",
    },
    {
        "triggers": ["/clear"],
        "usage": "",
        "description": "Clear the screen",
        "detailed": "Clear the terminal screen. The session and its variables are kept.",
    },
    {
        "triggers": ["/reset"],
        "usage": "",
        "description": "Start a fresh session",
        "detailed": "Discard every variable, import and definition of the current session "
        "and start over with an empty namespace.",
    },
    {
        "triggers": ["/inspect"],
        "usage": "<expr>",
        "description": "Evaluate and print with full detail",
        "detailed": "Evaluate an expression and print the result in detailed form: members "
        "on their own lines, private members included, strings unquoted, and the full "
        "stack for exceptions.",
    },
    {
        "triggers": ["/load"],
        "usage": "[file]",
        "description": "Run a script in the session",
        "detailed": "Run a Python script in the current session as if it had been typed in. "
        "Without a file, runs ~/.lucid/session.py (the default /save target).",
    },
    {
        "triggers": ["/save"],
        "usage": "[file]",
        "description": "Save submitted code as a script",
        "detailed": "Write the code submitted in this session (successful submissions only) "
        "to a Python script. Without a file, writes ~/.lucid/session.py.",
    },
    {
        "triggers": ["/config"],
        "usage": "",
        "description": "Manage configuration settings",
        "detailed": "Manage lucid configuration settings. Supports three subcommands: "
        "'/config list' shows all current configuration values, "
        "'/config set <KEY> <VALUE>' updates a configuration setting, and "
        "'/config get <KEY>' displays a specific configuration value. "
        "Settings include the number radix, output length limits and detailed output.",
    },
]


def find_command(text: str) -> CommandInfo | None:
    """Return the command whose trigger starts `text`, if any."""
    trigger = text.split(maxsplit=1)[0].lower() if text.strip() else ""
    for cmd in COMMANDS:
        if trigger in cmd["triggers"]:
            return cmd
    return None


CONFIG_SUBCOMMANDS = [
    ("/config list", "Show current configuration"),
    ("/config set", "Set a configuration value"),
    ("/config get", "Get a specific configuration value"),
]

KEYBOARD_SHORTCUTS = [
    ("Ctrl+C", "Cancel the current input or evaluation"),
    ("Ctrl+D", "Exit"),
    ("Tab", "Complete names from the session"),
    ("Empty line", "Finish a multi-line block"),
]

HELP_COLUMN = 18


def _help_row(label: str, description: str, indent: int = 2) -> str:
    # usage strings such as "[file]" would otherwise be read as markup tags
    padding = " " * max(HELP_COLUMN - len(label) - (indent - 2), 1)
    return f"{' ' * indent}[cyan]{escape(label)}[/cyan]{padding}- {description}"


def get_help_text() -> str:
    """Generate formatted help text for the /help command display.

    Returns Rich markup: command names in cyan, descriptions aligned in a column,
    /config followed by its subcommands, then the keyboard shortcuts.
    """
    lines = ["[bold]Available Commands:[/bold]"]
    for cmd in COMMANDS:
        label = " ".join(filter(None, [", ".join(cmd["triggers"]), cmd["usage"]]))
        lines.append(_help_row(label, cmd["description"]))
        if "/config" in cmd["triggers"]:
            lines.extend(_help_row(name, text, indent=4) for name, text in CONFIG_SUBCOMMANDS)

    lines.extend(["", "[bold]Keyboard Shortcuts:[/bold]"])
    lines.extend(_help_row(key, text) for key, text in KEYBOARD_SHORTCUTS)
    return "\n".join(lines)
