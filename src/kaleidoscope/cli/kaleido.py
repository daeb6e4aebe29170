"""
kaleido - Kaleidoscope Front-End Command-Line Interface
=======================================================

This module implements the command-line interface for the Kaleidoscope
lexer and parser. It reads source from a file or standard input and
reports each top-level unit as it is parsed.

Usage Examples
--------------
Interactive session:
    $ kaleido
    ready> def add(a b) a+b
    Parsed a function definition.
    ready> add(1, 2
    error: Expected ')' or ',' in argument list

Parse a file and dump the trees:
    $ kaleido program.kal --ast

Re-render a program fully parenthesized:
    $ kaleido program.kal --source --prompt never
"""

import logging
import sys
from typing import TextIO

import click

from kaleidoscope import __version__
from kaleidoscope.ast import ASTPrinter, to_source
from kaleidoscope.cli.errors import ExitCode, handle_cli_exception
from kaleidoscope.driver import Driver, DriverOptions

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(name)s: %(message)s" if verbose else "%(message)s",
    )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.File("r"),
    default="-",
)
@click.option(
    "--ast",
    is_flag=True,
    help="Print the tree of each parsed unit",
)
@click.option(
    "--source",
    is_flag=True,
    help="Print each parsed unit as fully-parenthesized source",
)
@click.option(
    "--prompt",
    type=click.Choice(["auto", "always", "never"], case_sensitive=False),
    default="auto",
    show_default=True,
    help="Show a prompt before each unit; auto prompts only on a terminal",
)
@click.option(
    "--prompt-text",
    default=DriverOptions.prompt,
    show_default=True,
    help="Prompt text",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output (debug logging of tokens and units)",
)
@click.version_option(version=__version__, prog_name="kaleido")
def main(
    input_file: TextIO,
    ast: bool,
    source: bool,
    prompt: str,
    prompt_text: str,
    verbose: bool,
) -> None:
    """
    Parse Kaleidoscope source and report each top-level unit.

    INPUT_FILE is the source file to read, or - (the default) for
    standard input. Input is read lazily, so interactive sessions are
    parsed as they are typed.

    \b
    Examples:
        kaleido                     # Interactive session
        kaleido prog.kal --ast      # Dump parse trees
        echo "1+2*3" | kaleido --source

    Exits with status 1 if any top-level unit failed to parse.
    """
    setup_logging(verbose)

    if prompt.lower() == "auto":
        show_prompt = input_file.isatty()
    else:
        show_prompt = prompt.lower() == "always"

    driver = Driver.from_source(input_file, DriverOptions(prompt=prompt_text))
    printer = ASTPrinter()
    failures = 0

    try:
        if show_prompt:
            click.echo(driver.options.prompt, nl=False)

        for result in driver.run():
            click.echo(result.status, err=True)

            if result.ok:
                if ast:
                    click.echo(printer.print(result.node))
                if source:
                    click.echo(to_source(result.node))
            else:
                failures += 1

            if show_prompt:
                click.echo(driver.options.prompt, nl=False)

    except Exception as e:
        handle_cli_exception(e, verbose)

    if show_prompt:
        click.echo()

    logger.debug(f"{failures} unit(s) failed")
    sys.exit(ExitCode.PARSE_ERROR if failures else ExitCode.SUCCESS)


if __name__ == "__main__":
    main()
