"""
cmlex - Cm Assembly Token Dump
==============================

This module implements the command-line interface for the Cm lexer. It
tokenizes an assembly source file and prints one line per token, which is
handy when checking how a source line will be seen by the parser.

Usage Examples
--------------
Dump all tokens:
    $ cmlex hello.asm

Hide end-of-line tokens:
    $ cmlex hello.asm --no-eol

Recognize an extra directive:
    $ cmlex hello.asm -d .word

Write the dump to a file:
    $ cmlex hello.asm -o hello.tok

Output Format
-------------
Each token is printed as ``line:index  TYPE  'lexeme'``:

       1:1   LABEL          'main'
       1:2   MNEMONIC       'ldc.i8'
       1:3   OPERAND_OFFSET '42'
       1:0   EOL            '; answer'
       2:1   EOF            ''

Diagnostics are written to stderr after the dump. The exit status is 1
when any diagnostic was recorded.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from cmasm import __version__
from cmasm.assembler import Token, TokenType, tokenize_file
from cmasm.cli.errors import ExitCode, handle_cli_exception
from cmasm.config import LexerConfig
from cmasm.errors import ErrorReporter


def format_token(token: Token, show_comments: bool = True) -> str:
    """
    Format a token as one dump line.

    Args:
        token: The token to format
        show_comments: If False, EOL tokens are printed without their text

    Returns:
        The formatted line
    """
    lexeme = token.lexeme
    if token.type is TokenType.EOL and not show_comments:
        lexeme = ""
    where = f"{token.line}:{token.token_index}"
    return f"{where:>8}   {token.type.name:<14} {lexeme!r}"


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file (default: stdout)",
)
@click.option(
    "--comments/--no-comments",
    default=True,
    help="Show comment text on EOL tokens (default: enabled)",
)
@click.option(
    "--eol/--no-eol",
    default=True,
    help="Show EOL tokens (default: enabled)",
)
@click.option(
    "-d", "--directive",
    "directives",
    multiple=True,
    help="Treat NAME as a directive (can be repeated)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="cmlex")
def main(
    input_file: Path,
    output: Optional[Path],
    comments: bool,
    eol: bool,
    directives: tuple[str, ...],
    verbose: bool,
) -> None:
    """
    Tokenize Cm assembly source and print the tokens.

    INPUT_FILE is the assembly source file (.asm) to tokenize.

    \b
    Examples:
        cmlex hello.asm              # Dump all tokens
        cmlex hello.asm --no-eol     # Hide end-of-line tokens
        cmlex -d .word hello.asm     # Extra directive
    """
    config = LexerConfig.from_env()
    if directives:
        config = config.with_directives(*directives)

    logging.basicConfig(
        level=logging.DEBUG if verbose else config.log_level,
        format="%(levelname)s %(name)s: %(message)s",
        force=True,
    )

    if verbose:
        click.echo(f"Input file: {input_file}", err=True)
        click.echo(f"Directives: {', '.join(sorted(config.directives))}", err=True)

    reporter = ErrorReporter(max_errors=config.max_diagnostics)
    try:
        tokens = tokenize_file(input_file, reporter=reporter, config=config)
    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Lexical")

    output_lines = [
        format_token(token, show_comments=comments)
        for token in tokens
        if eol or token.type is not TokenType.EOL
    ]
    result = "\n".join(output_lines) + "\n"

    if output:
        try:
            output.write_text(result, encoding="utf-8")
            if verbose:
                click.echo(f"Output written to: {output}", err=True)
        except OSError as e:
            click.echo(f"Error writing {output}: {e}", err=True)
            sys.exit(ExitCode.INVALID_ARGS)
    else:
        click.echo(result, nl=False)

    if verbose:
        click.echo(f"Tokens: {len(tokens)}", err=True)

    if reporter.has_errors():
        click.echo(reporter.report(), err=True)
        sys.exit(ExitCode.BUILD_ERROR)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
