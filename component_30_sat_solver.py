"""
component_30_sat_solver.py

DPLL SAT Solver - Public API

Decides satisfiability of propositional formulas in conjunctive normal form
and returns a satisfying assignment as witness.

    from component_30_sat_solver import solve_clauses

    satisfiable, assignment = solve_clauses([["p", "q"], ["!p", "r"], ["!q", "!r"]])

Options left as None fall back to the global configuration (dpll_config).

Modules:
- component_30_cnf_model: Literal, Clause, CNFFormula
- component_30_simplification: unit propagation, pure literal elimination
- component_30_sat_solver_core: DPLLSolver and result types
- component_30_formula_builder: formulas from literal tokens / YAML files
- component_30_solver_report: console output
"""

from typing import Iterable, Optional, TextIO

from component_30_cnf_model import (
    ASCII_SYMBOLS,
    UNICODE_SYMBOLS,
    Assignment,
    Clause,
    CNFFormula,
    Literal,
    Polarity,
    Symbols,
)
from component_30_formula_builder import (
    EXAMPLE_FORMULAS,
    build_formula,
    example_formula,
    load_formula_file,
)
from component_30_sat_solver_core import DPLLSolver, SATResult, SolveResult, SolveStats
from component_30_solver_report import SolverReporter
from dpll_config import get_config

__version__ = "0.1.0"


def _pick(value: Optional[bool], default: bool) -> bool:
    return default if value is None else value


def solve(
    formula: CNFFormula,
    use_unit_propagation: Optional[bool] = None,
    use_pure_literal_elimination: Optional[bool] = None,
    verbose: Optional[bool] = None,
    stream: Optional[TextIO] = None,
) -> SolveResult:
    """
    Solve a CNF formula with DPLL.

    Args:
        formula: Formula to solve (not modified)
        use_unit_propagation: Enable unit propagation
        use_pure_literal_elimination: Enable pure literal elimination
        verbose: Print formula, solve time and result
        stream: Output stream for verbose reporting (default: stdout)

    Returns:
        SolveResult, unpackable as (satisfiable, assignment)
    """
    cfg = get_config()
    solver = DPLLSolver(
        use_unit_propagation=_pick(use_unit_propagation, cfg.use_unit_propagation),
        use_pure_literal_elimination=_pick(
            use_pure_literal_elimination, cfg.use_pure_literal_elimination
        ),
    )

    reporter = None
    if _pick(verbose, cfg.verbose):
        symbols = UNICODE_SYMBOLS if cfg.unicode_symbols else ASCII_SYMBOLS
        reporter = SolverReporter(stream=stream, symbols=symbols)
        reporter.report_start(formula)

    result = solver.solve(formula)

    if reporter is not None:
        reporter.report_result(result)
    return result


def solve_clauses(clauses: Iterable[Iterable[str]], **options) -> SolveResult:
    """Build a formula from literal tokens and solve it (see solve())."""
    return solve(build_formula(clauses), **options)


__all__ = [
    "ASCII_SYMBOLS",
    "UNICODE_SYMBOLS",
    "Assignment",
    "Clause",
    "CNFFormula",
    "DPLLSolver",
    "EXAMPLE_FORMULAS",
    "Literal",
    "Polarity",
    "SATResult",
    "SolveResult",
    "SolveStats",
    "Symbols",
    "build_formula",
    "example_formula",
    "load_formula_file",
    "solve",
    "solve_clauses",
]
