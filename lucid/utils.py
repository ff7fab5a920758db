"""
Utility functions for lucid.

  - Version lookup from the installed package metadata
  - Welcome header display

These are plain helpers with no application state beyond console output.
"""

import sys
from importlib.metadata import PackageNotFoundError, version

from rich import box
from rich.panel import Panel

from .config import CONFIG_FILE, DETAILED_OUTPUT
from .console import console


def get_version() -> str:
    """Get the installed package version from Python package metadata.

    Reads the version from the installed package's dist-info directory, so it
    is always accurate without parsing pyproject.toml at runtime. Returns "dev"
    when running from a source checkout that was never installed.
    """
    try:
        return version("lucid")
    except PackageNotFoundError:
        return "dev"


def print_header():
    """Print the welcome header: logo, then versions and a command quick-reference."""
    logo = """[bold blue]
   ██╗     ██╗   ██╗ ██████╗██╗██████╗
   ██║     ██║   ██║██╔════╝██║██╔══██╗
   ██║     ██║   ██║██║     ██║██║  ██║
   ██║     ██║   ██║██║     ██║██║  ██║
   ███████╗╚██████╔╝╚██████╗██║██████╔╝
   ╚══════╝ ╚═════╝  ╚═════╝╚═╝╚═════╝
[/bold blue]
      [dim italic]a Python console that shows you what you've got[/dim italic]
"""

    python_version = ".".join(str(part) for part in sys.version_info[:3])
    output_mode = "detailed" if DETAILED_OUTPUT else "summary"
    header_text = f"""[dim]lucid v{get_version()} on Python {python_version}[/dim]
[dim]Output: {output_mode}[/dim]
[dim]Config: {CONFIG_FILE}[/dim]

[bold]Commands:[/bold]
  [green]/help[/green]     - Show all commands
  [green]/inspect[/green]  - Print an expression with full detail
  [green]/reset[/green]    - Start a fresh session
  [green]/save[/green]     - Save submitted code as a script
  [green]/load[/green]     - Run a script in the session
  [green]/config[/green]   - Manage configuration
  [green]/quit[/green]     - Exit the console"""

    console.print(logo)
    console.print(Panel(header_text, box=box.ROUNDED, expand=False))
