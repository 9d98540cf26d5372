"""
SimpleCalc CLI.

    simplecalc                 start the interactive calculator
    simplecalc repl            same, explicitly
    simplecalc eval TEXT...    evaluate statements and exit
    simplecalc symbols         list predefined variables and constants
"""

import logging
import os
import platform
import sys
from pathlib import Path
from typing import TextIO

import typer

from simplecalc._version import get_version
from simplecalc.config import CalcConfig, load_config
from simplecalc.core.errors import ConfigError
from simplecalc.core.session import CalculatorSession, Outcome, OutcomeKind, format_symbols

logger = logging.getLogger(__name__)

INTRO = """Welcome to Simple Calc.
Enter 'help' to learn how to use this program.
"""

HELP_TEXT = """
Simple Calc Help

    Basic Syntax:
        Enter 'help' to see this message.
        Enter 'quit', 'exit' or 'q' to leave the program.
        Enter ';' or a new line to print the results.
        Supported operators: '*', '/', '%', '!', '+', '-', '=' (assignment).
        Brackets and braces group expressions: '4*(2+3)', '{1+2}*3'.

    Functions:
        sqrt(n)         square root of n.
        pow(n, e)       n raised to the power e.

    User Variables:
        Names are made of letters, digits and '_', and start with a letter:
        'a_var3', 'X', or 'y2'.
        let var = expr      declare variable var, initialized to expr.
        # var = expr        same as let.
        const var = expr    declare and initialize constant var.
        var = expr          assign a new value to declared variable var.
        Enter 'symbols' to see all variables.

    Predefined Variables:
        pi      3.1415926535 (constant)
        e       2.7182818284 (constant)
        k       1000
"""


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"SimpleCalc version {get_version()}")
        python = f"{platform.python_implementation()} {platform.python_version()}"
        typer.echo(f"  Python:        {python}")
        typer.echo(f"  Platform:      {platform.system()} {platform.release()}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Log to stderr; LOG_LEVEL overrides the default WARNING level."""
    default = "DEBUG" if verbose else "WARNING"
    log_level = os.getenv("LOG_LEVEL", default).upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


# =============================================================================
# Main Application
# =============================================================================

app = typer.Typer(
    help="Simple Calc - interactive expression calculator",
    invoke_without_command=True,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
    config: Path | None = typer.Option(  # noqa: B008
        None,
        "--config",
        "-c",
        help="Path to simplecalc.toml (default: ./simplecalc.toml if present)",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """Simple Calc main callback for global options."""
    configure_logging(verbose)
    try:
        ctx.obj = load_config(config)
        ctx.obj.build_symbol_table()
    except ConfigError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(code=1)

    if ctx.invoked_subcommand is None:
        _run_repl(ctx.obj, sys.stdin)


def _echo_outcome(outcome: Outcome, session: CalculatorSession, config: CalcConfig) -> None:
    """Print one outcome; errors go to stderr."""
    if outcome.kind == OutcomeKind.HELP:
        typer.echo(HELP_TEXT)
    elif outcome.kind == OutcomeKind.SYMBOLS:
        typer.echo("\nSymbols:")
        typer.echo(session.symbol_listing())
        typer.echo("")
    elif outcome.kind == OutcomeKind.ERROR:
        typer.echo(outcome.render(error_marker=config.repl.error_marker), err=True)
    else:
        typer.echo(outcome.render(result_marker=config.repl.result_marker))


def _run_repl(config: CalcConfig, source: TextIO) -> None:
    session = CalculatorSession(source, config.build_symbol_table())
    if config.repl.show_intro:
        typer.echo(INTRO)

    try:
        while True:
            typer.echo(config.repl.prompt, nl=False)
            outcome = session.step()
            if outcome is None:
                typer.echo("")
                break
            if outcome.kind == OutcomeKind.QUIT:
                break
            _echo_outcome(outcome, session, config)
    except KeyboardInterrupt:
        typer.echo("")
    except (OSError, UnicodeDecodeError) as e:
        typer.echo(f"error: cannot read input: {e}", err=True)
        raise typer.Exit(code=1)


@app.command()
def repl(ctx: typer.Context) -> None:
    """Start the interactive calculator (the default command)."""
    _run_repl(ctx.obj, sys.stdin)


@app.command(name="eval")
def eval_command(
    ctx: typer.Context,
    statements: list[str] = typer.Argument(  # noqa: B008
        ...,
        help="Statements to evaluate, one per argument ('-' reads stdin)",
    ),
) -> None:
    """Evaluate statements non-interactively; exit 1 if any statement failed."""
    config: CalcConfig = ctx.obj
    try:
        text = sys.stdin.read() if statements == ["-"] else "\n".join(statements)
    except (OSError, UnicodeDecodeError) as e:
        typer.echo(f"error: cannot read input: {e}", err=True)
        raise typer.Exit(code=1)

    session = CalculatorSession(text + "\n", config.build_symbol_table())
    failed = 0
    for outcome in session.outcomes():
        _echo_outcome(outcome, session, config)
        if not outcome.ok:
            failed += 1

    if failed:
        logger.info("%d statement(s) failed", failed)
        raise typer.Exit(code=1)


@app.command()
def symbols(ctx: typer.Context) -> None:
    """List the predefined variables and constants."""
    config: CalcConfig = ctx.obj
    typer.echo(format_symbols(config.build_symbol_table().variables()))


def main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    main()
