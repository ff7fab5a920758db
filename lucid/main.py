import logging
from pathlib import Path

from .commands import find_command, get_help_text
from .config import (
    CONFIG_FILE,
    DEFAULT_CONFIG,
    DETAILED_OUTPUT,
    LOAD_SCRIPT,
    SCRIPT_FILE,
    TRACE_FILE,
    get_bool_setting,
    get_print_options,
    get_setting,
    load_config,
    save_config,
)
from .console import console
from .evaluator import Cancelled, Error, EvaluationResult, ScriptRunner, Success
from .formatting import PrettyPrinter
from .history import setup_readline
from .log import disable_tracing, enable_tracing
from .session import save_script
from .utils import print_header

logger = logging.getLogger(__name__)

# \001 and \002 mark non-printing characters for readline
PROMPT = "\001\033[1;34m\002>>>\001\033[0m\002 "
CONTINUATION_PROMPT = "\001\033[1;34m\002...\001\033[0m\002 "


def build_printer() -> PrettyPrinter:
    return PrettyPrinter(get_print_options(detailed=False), get_print_options(detailed=True))


class Repl:
    """The read-eval-print loop: reads submissions, runs commands, prints results."""

    def __init__(self, runner: ScriptRunner | None = None, detailed: bool = DETAILED_OUTPUT):
        self.runner = runner or ScriptRunner()
        self.printer = build_printer()
        self.detailed = detailed
        self.trace_handler: logging.Handler | None = None

    def set_trace_file(self, path: str):
        """Trace to `path` instead of the current trace file, if any."""
        if self.trace_handler is not None:
            disable_tracing(self.trace_handler)
            self.trace_handler = None
        if path:
            self.trace_handler = enable_tracing(path)

    def print_result(self, result: EvaluationResult, detailed: bool | None = None):
        if detailed is None:
            detailed = self.detailed
        if isinstance(result, Success):
            output = self.printer.pretty_print(result.value, detailed)
            if output:
                console.print(output)
        elif isinstance(result, Error):
            console.print(self.printer.pretty_print(result.exception, detailed))
        elif isinstance(result, Cancelled):
            console.print("[yellow]Operation cancelled.[/yellow]")

    def read_submission(self) -> str | None:
        """Read one submission, asking for more lines while the code is incomplete.

        Returns None at end of input (Ctrl+D).
        """
        try:
            lines = [input(PROMPT)]
            while not lines[0].lstrip().startswith("/") and not self.runner.is_complete(
                "\n".join(lines)
            ):
                lines.append(input(CONTINUATION_PROMPT))
        except EOFError:
            return None
        return "\n".join(lines)

    def run_script(self, path: Path) -> bool:
        result = self.runner.load(path)
        if result is None:
            console.print(f"[red]✗ No script found at {path}[/red]")
            return False
        self.print_result(result)
        return True

    def handle_command(self, text: str) -> bool:
        """Run a console command. Returns False when the console should exit."""
        cmd = find_command(text)
        parts = text.split()
        argument = text.split(maxsplit=1)[1].strip() if len(parts) > 1 else ""

        if cmd is None:
            console.print(f"[red]Unknown command: {parts[0]}[/red] (type /help for a list)")
            return True

        trigger = cmd["triggers"][0]
        if trigger == "/quit":
            console.print("\n[green]Goodbye![/green]\n")
            return False

        if trigger == "/help":
            console.print(get_help_text())
        elif trigger == "/clear":
            console.clear()
        elif trigger == "/reset":
            self.runner.reset()
            console.print("[green]✓ Session reset[/green]")
        elif trigger == "/inspect":
            if not argument:
                console.print("[bold]Usage:[/bold] /inspect <expr>")
            else:
                self.print_result(self.runner.evaluate(argument), detailed=True)
        elif trigger == "/load":
            self.run_script(Path(argument).expanduser() if argument else SCRIPT_FILE)
        elif trigger == "/save":
            path = Path(argument).expanduser() if argument else SCRIPT_FILE
            if save_script(self.runner.submissions, path):
                count = len(self.runner.submissions)
                console.print(f"[green]✓ Saved {count} submissions to {path}[/green]")
        elif trigger == "/config":
            self.handle_config(parts[1:])
        return True

    def handle_config(self, args: list[str]):
        if not args or args[0] == "list":
            console.print("\n[bold]Configuration:[/bold]")
            for key, default in DEFAULT_CONFIG.items():
                console.print(f"  {key + ':':34}[cyan]{get_setting(key, default) or '-'}[/cyan]")
            console.print(f"  {'Config File:':34}[dim]{CONFIG_FILE}[/dim]\n")

        elif args[0] == "set" and len(args) >= 3:
            key = args[1].upper()
            value = " ".join(args[2:])
            if key not in DEFAULT_CONFIG:
                console.print(f"\n[red]Unknown setting: {key}[/red]")
                console.print(f"Available keys: {', '.join(DEFAULT_CONFIG.keys())}\n")
                return

            config = load_config()
            config[key] = value
            if save_config(config):
                console.print(f"\n[green]✓ Updated {key} in {CONFIG_FILE}[/green]\n")
                self.printer = build_printer()
                if key == "DETAILED_OUTPUT":
                    self.detailed = get_bool_setting("DETAILED_OUTPUT", False)
                elif key == "TRACE_FILE":
                    self.set_trace_file(value)

        elif args[0] == "get" and len(args) >= 2:
            key = args[1].upper()
            if key in DEFAULT_CONFIG:
                console.print(f"\n{key} = {get_setting(key, DEFAULT_CONFIG[key])}\n")
            else:
                console.print(f"\n[red]Unknown setting: {key}[/red]\n")
                console.print(f"Available settings: {', '.join(DEFAULT_CONFIG.keys())}\n")

        else:
            console.print("\n[bold]Usage:[/bold]")
            console.print("  /config list               - Show current configuration")
            console.print("  /config set <KEY> <VALUE>  - Set a configuration value")
            console.print("  /config get <KEY>          - Get a specific configuration value\n")

    def run(self):
        while True:
            try:
                text = self.read_submission()
                if text is None:
                    console.print()
                    break
                if not text.strip():
                    continue

                if text.lstrip().startswith("/"):
                    if not self.handle_command(text.strip()):
                        break
                    continue

                self.print_result(self.runner.evaluate(text))

            except KeyboardInterrupt:
                console.print("\n[yellow]Interrupted. Type /quit to exit.[/yellow]")
                continue
            except Exception as e:
                logger.exception("Console loop error")
                console.print(f"\n[red]Error: {e}[/red]\n")
                continue


def main():
    print_header()

    repl = Repl()
    repl.set_trace_file(TRACE_FILE)
    setup_readline(repl.runner.namespace)

    if LOAD_SCRIPT:
        repl.run_script(Path(LOAD_SCRIPT).expanduser())

    repl.run()


if __name__ == "__main__":
    main()
