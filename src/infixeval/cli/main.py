"""infixeval CLI entry point."""

import logging

import click


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug output.")
def cli(verbose: bool):
    """infixeval — configurable infix expression evaluator."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Register subcommands
from infixeval.cli.eval_cmd import eval_cmd  # noqa: E402
from infixeval.cli.grammar_cmd import grammar  # noqa: E402

cli.add_command(eval_cmd)
cli.add_command(grammar)
