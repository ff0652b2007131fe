"""
CLI interface for the thought journal.

Usage:
    prothought Working on the new feature #work #project
    prothought summarize today #work
    prothought conclude lastweek
    prothought nvm
"""

import json
import os
import sys
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from .api import Journal, RetractStatus
from .config import ENV_DB_PATH, JournalConfig
from .errors import InvalidPeriod, SkillsError, SummarizationError
from .logging_config import configure_quiet_mode, enable_debug_mode
from .markers import format_markers, split_marker_args

EXIT_ERROR = 1
EXIT_SUMMARIZATION = 3

# Commands that are not logged as thought text
COMMANDS = frozenset({"log", "summarise", "summarize", "conclude", "nvm", "init-skills"})

# Global options that consume the following token
_VALUE_OPTIONS = frozenset({"--db", "-d"})
_FLAG_OPTIONS = frozenset({"--verbose", "-v", "--version", "--help"})

USAGE = """\
Usage:
  prothought <thought text...>
  prothought nvm
  prothought summarise [today|yesterday|lastweek|lastmonth|YYYY-MM-DD] [#marker]
  prothought summarize [today|yesterday|lastweek|lastmonth|YYYY-MM-DD] [#marker]
  prothought conclude [today|yesterday|lastweek|lastmonth|YYYY-MM-DD] [#marker]
  prothought init-skills
  prothought --version

Examples:
  prothought Working on the new feature #work #project
  prothought summarize today '#work'
  prothought conclude lastweek '#personal'
"""


# Quiet by default; PROTHOUGHT_VERBOSE=1 enables debug output
if os.environ.get("PROTHOUGHT_VERBOSE") == "1":
    enable_debug_mode()
else:
    configure_quiet_mode(quiet=True)


def _version_callback(value: bool):
    if value:
        from importlib.metadata import version
        print(f"prothought {version('prothought')}")
        raise typer.Exit()


def _verbose_callback(value: bool):
    if value:
        enable_debug_mode()


# Global state for CLI options
_db_override: Optional[Path] = None


def _db_callback(value: Optional[Path]):
    global _db_override
    _db_override = value


def _get_db_override() -> Optional[Path]:
    return _db_override


app = typer.Typer(
    name="prothought",
    help="Log thoughts from the command line and review them later.",
    no_args_is_help=False,
    invoke_without_command=True,
    add_completion=False,
    rich_markup_mode=None,
)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[bool, typer.Option(
        "--verbose", "-v",
        help="Enable debug-level logging to stderr",
        callback=_verbose_callback,
        is_eager=True,
    )] = False,
    version: Annotated[Optional[bool], typer.Option(
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    )] = None,
    db: Annotated[Optional[Path], typer.Option(
        "--db", "-d",
        envvar=ENV_DB_PATH,
        help="Path to the journal database (default: ~/.prothought.db)",
        callback=_db_callback,
        is_eager=True,
    )] = None,
):
    """Log thoughts from the command line and review them later."""
    if ctx.invoked_subcommand is None:
        typer.echo(USAGE, err=True, nl=False)
        raise typer.Exit(EXIT_ERROR)


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

def _get_journal() -> Journal:
    """Open the journal, reporting failures as a clean error."""
    import atexit

    try:
        config = JournalConfig.from_env(db_path=_get_db_override())
        journal = Journal(config)
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(EXIT_ERROR)
    atexit.register(journal.close)
    return journal


def _report_invalid_period(e: InvalidPeriod):
    typer.echo(f"Error: {e}", err=True)
    choices = ", ".join(f"'{p}'" for p in e.supported)
    typer.echo(f"Use one of: {choices}.", err=True)
    raise typer.Exit(EXIT_ERROR)


def _marker_suffix(marker: Optional[str]) -> str:
    return f" with marker #{marker}" if marker else ""


PeriodArgs = Annotated[
    Optional[list[str]],
    typer.Argument(
        help="Period (today, yesterday, lastweek, lastmonth, YYYY-MM-DD) and optional #marker",
        show_default=False,
    )
]


# -----------------------------------------------------------------------------
# Commands
# -----------------------------------------------------------------------------

@app.command(
    "log",
    hidden=True,
    context_settings={"ignore_unknown_options": True, "allow_extra_args": True},
)
def log(
    text: Annotated[Optional[list[str]], typer.Argument(show_default=False)] = None,
):
    """Save a thought. Hashtags in the text become markers."""
    thought_text = " ".join(text or []).strip()
    if not thought_text:
        typer.echo(USAGE, err=True, nl=False)
        raise typer.Exit(EXIT_ERROR)

    journal = _get_journal()
    thought = journal.log(thought_text)

    marker_info = ""
    if thought.markers:
        marker_info = f" with markers: {format_markers(thought.markers)}"
    typer.echo(f"Saved thought at {thought.timestamp}{marker_info}")


@app.command("summarise")
def summarise(
    args: PeriodArgs = None,
    output_json: Annotated[bool, typer.Option(
        "--json", "-j",
        help="Output as JSON",
    )] = False,
):
    """List thoughts for a period, optionally filtered by #marker."""
    period_args, marker = split_marker_args(args or [])
    journal = _get_journal()
    try:
        thoughts = journal.list_for_period(period_args, marker)
    except InvalidPeriod as e:
        _report_invalid_period(e)

    if output_json:
        typer.echo(json.dumps([t.to_dict() for t in thoughts], indent=2, ensure_ascii=False))
        return

    if not thoughts:
        typer.echo(f"No thoughts found for that period{_marker_suffix(marker)}.")
        return

    for thought in thoughts:
        typer.echo(str(thought))


@app.command("summarize", hidden=True)
def summarize(
    args: PeriodArgs = None,
    output_json: Annotated[bool, typer.Option(
        "--json", "-j",
        help="Output as JSON",
    )] = False,
):
    """List thoughts for a period (alias for summarise)."""
    summarise(args, output_json=output_json)


@app.command()
def conclude(
    args: PeriodArgs = None,
):
    """Summarize a period's thoughts with a language model."""
    period_args, marker = split_marker_args(args or [])
    journal = _get_journal()
    try:
        summary = journal.conclude(period_args, marker)
    except InvalidPeriod as e:
        _report_invalid_period(e)
    except SummarizationError as e:
        typer.echo(f"Error: could not summarize: {e}", err=True)
        raise typer.Exit(EXIT_SUMMARIZATION)

    if summary is None:
        typer.echo(f"No thoughts to summarize for that period{_marker_suffix(marker)}.")
        return
    typer.echo(summary)


@app.command()
def nvm():
    """Strike through the most recent thought."""
    journal = _get_journal()
    result = journal.retract_last()

    if result.status is RetractStatus.NO_THOUGHTS:
        typer.echo("No thoughts to strike through.")
    elif result.status is RetractStatus.ALREADY_RETRACTED:
        typer.echo("Last thought is already marked as nvm.")
    else:
        typer.echo(f"Marked last thought from {result.timestamp} as nvm.")


@app.command("init-skills")
def init_skills_command():
    """Copy skills from ./.agents/skills to ~/.claude/skills."""
    from .integrations import SKILLS_TARGET, init_skills

    try:
        copied = init_skills()
    except SkillsError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(EXIT_ERROR)

    for name in copied:
        typer.echo(f"Copied skill: {name}")
    typer.echo(f"\nSuccessfully copied {len(copied)} skill(s) to {Path.home() / SKILLS_TARGET}")


# -----------------------------------------------------------------------------

def route_args(argv: list[str]) -> list[str]:
    """Insert the hidden 'log' command when the first word is not a command.

    Leading global options are skipped, so ``--db x hello`` logs "hello".
    Any other word, even one starting with a dash, begins the thought text.
    """
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg in _VALUE_OPTIONS:
            i += 2
        elif arg in _FLAG_OPTIONS or arg.split("=", 1)[0] in _VALUE_OPTIONS:
            i += 1
        else:
            break
    if i < len(argv) and argv[i] not in COMMANDS:
        return argv[:i] + ["log"] + argv[i:]
    return argv


def main():
    try:
        app(args=route_args(sys.argv[1:]), prog_name="prothought")
    except SystemExit:
        raise  # Let typer handle exit codes
    except KeyboardInterrupt:
        raise SystemExit(130)  # Standard exit code for Ctrl+C
    except Exception as e:
        # Log full traceback to file, show clean message to user
        from .errors import log_exception
        log_path = log_exception(e, context="prothought CLI", db_path=_get_db_override())
        typer.echo(f"Error: {e}", err=True)
        typer.echo(f"Details logged to {log_path}", err=True)
        raise SystemExit(EXIT_ERROR)


if __name__ == "__main__":
    main()
