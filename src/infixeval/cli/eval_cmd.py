"""Expression CLI commands — evaluate an expression."""

from pathlib import Path

import click

from infixeval.config import load_grammar
from infixeval.double_evaluator import DoubleEvaluator, Style
from infixeval.errors import EvaluationError
from infixeval.evaluator import Evaluator
from infixeval.object_evaluator import ObjectEvaluator
from infixeval.values import classify_literal, to_text
from infixeval.variables import StaticVariableSet

HOSTS = ("double", "object")


def host_options(fn):
    """Options shared by commands that build an evaluator."""
    fn = click.option(
        "--grammar",
        "grammar_path",
        default=None,
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        help="YAML grammar file replacing the host's default grammar.",
    )(fn)
    fn = click.option(
        "--style",
        type=click.Choice([s.value for s in Style]),
        default=None,
        help="Unary minus precedence of the host grammar (default: standard).",
    )(fn)
    fn = click.option(
        "--host",
        type=click.Choice(HOSTS),
        default="object",
        show_default=True,
        help="Value semantics: floats only, or numbers, text and booleans.",
    )(fn)
    return fn


def build_evaluator(host: str, style: str | None, grammar_path: Path | None) -> Evaluator:
    """Create the evaluator selected by the host options."""
    if style is not None and grammar_path is not None:
        click.echo(
            click.style("--style cannot be combined with --grammar; use a base in the file", fg="red"),
            err=True,
        )
        raise SystemExit(1)

    try:
        parameters = load_grammar(grammar_path) if grammar_path is not None else None
    except ValueError as e:
        click.echo(click.style(f"Invalid grammar file {grammar_path}: {e}", fg="red"), err=True)
        raise SystemExit(1)

    unary_style = Style(style) if style is not None else Style.STANDARD
    if host == "double":
        return DoubleEvaluator(parameters, style=unary_style)
    return ObjectEvaluator(parameters, style=unary_style)


def _parse_variable(ctx, param, values: tuple[str, ...]) -> StaticVariableSet:
    variables = StaticVariableSet()
    for item in values:
        name, sep, raw = item.partition("=")
        if not sep or not name.strip():
            raise click.BadParameter(f"expected NAME=VALUE, got '{item}'")
        variables.set(name.strip(), classify_literal(raw))
    return variables


@click.command("eval")
@click.argument("expression")
@click.option(
    "--var",
    "variables",
    multiple=True,
    callback=_parse_variable,
    help="Variable binding NAME=VALUE; numeric values become numbers. Repeatable.",
)
@host_options
def eval_cmd(
    expression: str,
    variables: StaticVariableSet,
    host: str,
    style: str | None,
    grammar_path: Path | None,
):
    """Evaluate EXPRESSION and print the result."""
    evaluator = build_evaluator(host, style, grammar_path)
    try:
        result = evaluator.evaluate(expression, variables)
    except EvaluationError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(1)

    click.echo(to_text(result) if result is not None else "null")
