"""
component_30_formula_builder.py

Builds CNF formulas from human-readable literal tokens.

A formula is given as a sequence of clauses, each a sequence of tokens. A
token is a variable name, optionally prefixed with NEGATION_MARKER:

    build_formula([["p", "q"], ["!p", "r"], ["!q", "!r"]])

Empty (or whitespace-only) tokens are ignored. Formulas can also be read
from YAML files containing either a list of clauses or a mapping with a
``clauses`` key.
"""

from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Union

import yaml

from component_15_logging_config import get_logger
from component_30_cnf_model import Clause, CNFFormula, Literal
from dpll_exceptions import FormulaConstructionError, FormulaFileError, wrap_exception

logger = get_logger(__name__)

NEGATION_MARKER = "!"

EXAMPLE_FORMULAS: Dict[str, List[List[str]]] = {
    # (p ∨ q) ∧ (¬p ∨ r) ∧ (¬q ∨ ¬r)
    "basic": [["p", "q"], ["!p", "r"], ["!q", "!r"]],
    "extended": [
        ["p", "q"],
        ["!p", "r"],
        ["!q", "!r"],
        ["p", "!s"],
        ["q", "s"],
        ["r", "s"],
    ],
}


def parse_literal(token: str, clause_index: Optional[int] = None) -> Optional[Literal]:
    """
    Turn a single token into a Literal.

    Returns:
        The literal, or None for an empty token

    Raises:
        FormulaConstructionError: Token is not a string or names no variable
    """
    if not isinstance(token, str):
        raise FormulaConstructionError(
            f"Literal token must be a string, got {type(token).__name__}",
            token=token,
            clause_index=clause_index,
        )

    token = token.strip()
    if not token:
        return None

    negated = token.startswith(NEGATION_MARKER)
    name = token[len(NEGATION_MARKER):].strip() if negated else token
    if not name:
        raise FormulaConstructionError(
            "Negation marker without a variable name",
            token=token,
            clause_index=clause_index,
        )
    return Literal(name, negated)


def build_clause(tokens: Iterable[str], clause_index: Optional[int] = None) -> Clause:
    """Build a clause, skipping empty tokens."""
    if isinstance(tokens, str):
        raise FormulaConstructionError(
            "Clause must be a sequence of tokens, not a single string",
            token=tokens,
            clause_index=clause_index,
        )
    literals = []
    for token in tokens:
        literal = parse_literal(token, clause_index)
        if literal is not None:
            literals.append(literal)
    return Clause(literals)


def build_formula(clauses: Iterable[Iterable[str]]) -> CNFFormula:
    """
    Build a formula from clauses of literal tokens.

    A clause whose tokens are all empty becomes an empty clause, which makes
    the formula unsatisfiable.
    """
    formula = CNFFormula()
    for index, tokens in enumerate(clauses):
        formula.add_clause(build_clause(tokens, index))
    return formula


def example_formula(name: str) -> CNFFormula:
    """Return one of the built-in EXAMPLE_FORMULAS."""
    if name not in EXAMPLE_FORMULAS:
        raise FormulaConstructionError(
            f"Unknown example formula: {name}",
            context={"available": sorted(EXAMPLE_FORMULAS)},
        )
    return build_formula(EXAMPLE_FORMULAS[name])


def load_formula_file(path: Union[str, Path]) -> CNFFormula:
    """
    Load a formula from a YAML file.

    Accepted shapes:
        - [[p, q], ["!p", r]]
        - {clauses: [[p, q], ["!p", r]]}

    Raises:
        FormulaFileError: File missing or unreadable, invalid YAML or wrong structure
        FormulaConstructionError: A token could not be parsed
    """
    formula_file = Path(path)
    if not formula_file.exists():
        raise FormulaFileError(f"Formula file not found: {path}", path=str(path))

    try:
        with open(formula_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise wrap_exception(
            e, FormulaFileError, "Invalid YAML in formula file", path=str(path)
        ) from e
    except (OSError, UnicodeDecodeError) as e:
        raise wrap_exception(
            e, FormulaFileError, "Cannot read formula file", path=str(path)
        ) from e

    if isinstance(data, dict):
        if "clauses" not in data:
            raise FormulaFileError(
                "Formula file mapping needs a 'clauses' key", path=str(path)
            )
        data = data["clauses"]

    if data is None:
        data = []
    if not isinstance(data, list) or not all(
        isinstance(clause, list) for clause in data
    ):
        raise FormulaFileError(
            "Formula file must contain a list of clauses (lists of tokens)",
            path=str(path),
        )

    formula = build_formula(_stringify(clause) for clause in data)
    logger.info(
        "Formula loaded",
        extra={"file": str(formula_file), "num_clauses": len(formula)},
    )
    return formula


def _stringify(clause: Sequence) -> List:
    # YAML reads bare numeric tokens as numbers; yes/no must be quoted.
    return [
        str(token)
        if isinstance(token, (int, float)) and not isinstance(token, bool)
        else token
        for token in clause
    ]
