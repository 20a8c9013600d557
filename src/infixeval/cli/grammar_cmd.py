"""Grammar CLI commands — show the grammar an evaluator accepts."""

from pathlib import Path

import click
import yaml

from infixeval.cli.eval_cmd import build_evaluator, host_options


@click.command()
@host_options
def grammar(host: str, style: str | None, grammar_path: Path | None):
    """Print the operators, functions, constants and brackets as YAML."""
    evaluator = build_evaluator(host, style, grammar_path)
    click.echo(yaml.safe_dump(evaluator.parameters.to_dict(), sort_keys=False), nl=False)
