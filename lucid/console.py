"""
Shared Rich Console singleton for terminal output.

Every module prints through this one Console instead of creating its own.
Rich's Console owns terminal state (width, color support), so a single
instance keeps output consistent, and tests can patch `console` in one place.

The console carries a Theme that gives the pretty-printer's style names their
colors. Formatters only ever attach names like "lucid.number" to text; which
color that means is decided here and nowhere else.

Usage:
    from .console import console
    console.print("[green]Success![/green]")
    console.print(styled_string)
"""

from rich.console import Console
from rich.theme import Theme

# Colors for the style names in lucid.formatting.styled.
LUCID_THEME = Theme(
    {
        "lucid.keyword": "bold blue",
        "lucid.number": "cyan",
        "lucid.string": "green",
        "lucid.type": "bold cyan",
        "lucid.member": "magenta",
        "lucid.function": "yellow",
        "lucid.punctuation": "dim",
        "lucid.error": "red",
        "lucid.prompt": "bold blue",
    }
)

console = Console(theme=LUCID_THEME)
