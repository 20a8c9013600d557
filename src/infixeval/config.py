"""Load a grammar (Parameters) from a YAML file.

Example file:

    base: object
    operators:
      - {symbol: "<>", arity: 2, associativity: left, precedence: 3}
    functions:
      - {name: clamp, min: 3, max: 3}
      - {name: coalesce, min: 1}        # no max: variadic
    constants: [tau]
    expression_brackets: [["[", "]"]]
    translations:
      sin: sinus

Entries are added on top of ``base`` when it is given. A grammar file only
declares syntax; the evaluator that receives the Parameters decides what
each element computes.
"""

import logging
from pathlib import Path
from typing import Any

import yaml

from infixeval.double_evaluator import DoubleEvaluator, Style
from infixeval.grammar import Associativity, BracketPair, Constant, Function, Operator
from infixeval.object_evaluator import ObjectEvaluator
from infixeval.parameters import Parameters

logger = logging.getLogger(__name__)

BASES = {
    "double": lambda: DoubleEvaluator.default_parameters(Style.STANDARD),
    "double-excel": lambda: DoubleEvaluator.default_parameters(Style.EXCEL),
    "object": lambda: ObjectEvaluator.default_parameters(Style.STANDARD),
    "object-excel": lambda: ObjectEvaluator.default_parameters(Style.EXCEL),
}

_KNOWN_KEYS = {
    "base",
    "separator",
    "operators",
    "functions",
    "constants",
    "function_brackets",
    "expression_brackets",
    "translations",
}


def load_grammar(path: Path | str) -> Parameters:
    """Load a grammar file.

    Raises:
        ValueError: If the document is malformed (GrammarError is a ValueError)
    """
    path = Path(path)
    with open(path) as f:
        data = yaml.safe_load(f)
    parameters = grammar_from_dict(data or {})
    logger.info(
        "Loaded grammar from %s: %d operators, %d functions, %d constants",
        path,
        len(parameters.operators),
        len(parameters.functions),
        len(parameters.constants),
    )
    return parameters


def grammar_from_dict(data: dict[str, Any]) -> Parameters:
    """Build Parameters from an already parsed grammar document."""
    if not isinstance(data, dict):
        raise ValueError("Grammar document must be a mapping")
    unknown = set(data) - _KNOWN_KEYS
    if unknown:
        raise ValueError(f"Unknown grammar keys: {', '.join(sorted(unknown))}")

    base = data.get("base")
    if base is not None:
        if base not in BASES:
            raise ValueError(
                f"Unknown grammar base '{base}', expected one of: {', '.join(BASES)}"
            )
        if "separator" in data:
            raise ValueError("'separator' cannot be combined with 'base'")
        parameters = BASES[base]()
    else:
        parameters = Parameters(str(data.get("separator", ",")))

    for entry in data.get("operators") or []:
        parameters.add_operator(_parse_operator(entry))
    for entry in data.get("functions") or []:
        parameters.add_function(_parse_function(entry))
    for name in data.get("constants") or []:
        parameters.add_constant(Constant(str(name)))
    for entry in data.get("function_brackets") or []:
        parameters.add_function_bracket(_parse_bracket(entry))
    for entry in data.get("expression_brackets") or []:
        parameters.add_expression_bracket(_parse_bracket(entry))

    for name, translated in (data.get("translations") or {}).items():
        element = parameters.get_function(name) or parameters.get_constant(name)
        if element is None:
            raise ValueError(f"Cannot translate '{name}': no such function or constant")
        parameters.set_translation(element, str(translated))

    return parameters


def _parse_operator(entry: Any) -> Operator:
    if not isinstance(entry, dict) or "symbol" not in entry:
        raise ValueError(f"Operator entry must be a mapping with a symbol: {entry!r}")
    if "precedence" not in entry:
        raise ValueError(f"Operator '{entry['symbol']}' has no precedence")
    try:
        associativity = Associativity(str(entry.get("associativity", "left")).lower())
    except ValueError:
        raise ValueError(
            f"Operator '{entry['symbol']}' associativity must be 'left' or 'right'"
        ) from None
    return Operator(
        symbol=str(entry["symbol"]),
        arity=int(entry.get("arity", 2)),
        associativity=associativity,
        precedence=int(entry["precedence"]),
    )


def _parse_function(entry: Any) -> Function:
    if isinstance(entry, str):
        return Function.fixed(entry, 1)
    if not isinstance(entry, dict) or "name" not in entry:
        raise ValueError(f"Function entry must be a name or a mapping with a name: {entry!r}")
    maximum = entry.get("max")
    return Function(
        str(entry["name"]),
        int(entry.get("min", 1)),
        int(maximum) if maximum is not None else None,
    )


def _parse_bracket(entry: Any) -> BracketPair:
    if not isinstance(entry, (list, tuple)) or len(entry) != 2:
        raise ValueError(f"Bracket entry must be an [open, close] pair: {entry!r}")
    return BracketPair(str(entry[0]), str(entry[1]))
