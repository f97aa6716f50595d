"""
component_30_sat_solver_core.py

Core SAT Solver Implementation - DPLL Search

This module provides the decision procedure:
- SATResult / SolveStats / SolveResult: outcome of a solve call
- DPLLSolver: simplification followed by split-and-backtrack search

Search order is fixed: the branching variable is the first literal of the
first remaining clause, the True branch is explored completely before the
False branch, and the first success wins. For a given formula the same
assignment is therefore found on every run.

Each branch owns a copy of the formula and of the assignment made on its
path from the root; a failed branch's assignments never reach its sibling.

Author: DPLL Development Team
"""

import sys
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, Optional, Tuple

from component_15_logging_config import PerformanceLogger, get_logger
from component_30_cnf_model import Assignment, CNFFormula
from component_30_simplification import (
    SimplificationStats,
    Simplifier,
    apply_assignment,
)

logger = get_logger(__name__)

# Interpreter frames consumed per decision level, plus room for the caller.
_FRAMES_PER_LEVEL = 2
_RECURSION_MARGIN = 200


# ============================================================================
# Results
# ============================================================================


class SATResult(Enum):
    """Result of SAT solving."""

    SATISFIABLE = "satisfiable"
    UNSATISFIABLE = "unsatisfiable"


@dataclass
class SolveStats:
    decisions: int = 0
    propagations: int = 0
    pure_assignments: int = 0
    conflicts: int = 0
    backtracks: int = 0
    max_depth: int = 0


@dataclass
class SolveResult:
    """
    Outcome of DPLLSolver.solve().

    Unpacks as ``satisfiable, assignment = result``. The assignment is empty
    when the formula is unsatisfiable.
    """

    satisfiable: bool
    assignment: Assignment = field(default_factory=dict)
    stats: SolveStats = field(default_factory=SolveStats)
    elapsed_seconds: float = 0.0

    @property
    def result(self) -> SATResult:
        return SATResult.SATISFIABLE if self.satisfiable else SATResult.UNSATISFIABLE

    @property
    def elapsed_ms(self) -> float:
        return self.elapsed_seconds * 1000.0

    def __iter__(self) -> Iterator:
        return iter((self.satisfiable, self.assignment))


def _stack_depth() -> int:
    """Number of frames on the stack below the caller."""
    depth = 0
    frame = sys._getframe(1)
    while frame is not None:
        depth += 1
        frame = frame.f_back
    return depth


@contextmanager
def _recursion_headroom(num_variables: int):
    """
    Temporarily raise the recursion limit to cover one level per variable
    on top of the frames already in use.
    """
    previous = sys.getrecursionlimit()
    required = _stack_depth() + num_variables * _FRAMES_PER_LEVEL + _RECURSION_MARGIN
    if required > previous:
        sys.setrecursionlimit(required)
    try:
        yield
    finally:
        sys.setrecursionlimit(previous)


# ============================================================================
# DPLL Solver
# ============================================================================


class DPLLSolver:
    """
    DPLL-based SAT solver with unit propagation and pure literal elimination.

    Implements:
    - Unit propagation (optional)
    - Pure literal elimination (optional)
    - Chronological backtracking over copied formulas

    Thread Safety:
        This class is NOT thread-safe. Create separate instances for concurrent use.
    """

    def __init__(
        self,
        use_unit_propagation: bool = True,
        use_pure_literal_elimination: bool = True,
    ):
        """
        Initialize DPLL solver.

        Args:
            use_unit_propagation: Force unit-clause literals before branching
            use_pure_literal_elimination: Satisfy pure variables before branching
        """
        self.simplifier = Simplifier(
            use_unit_propagation=use_unit_propagation,
            use_pure_literal_elimination=use_pure_literal_elimination,
        )
        self.stats = SolveStats()

    def solve(
        self,
        formula: CNFFormula,
        initial_assignment: Optional[Dict[str, bool]] = None,
    ) -> SolveResult:
        """
        Decide satisfiability of ``formula``.

        The formula passed in is left untouched; the search works on a copy.

        Args:
            formula: CNF formula to solve
            initial_assignment: Optional values fixed before the search starts

        Returns:
            SolveResult with the satisfying assignment, or an empty one if
            the formula is unsatisfiable
        """
        num_variables = len(formula.variables)
        logger.info(
            "Starting DPLL solver",
            extra={"num_clauses": len(formula), "num_variables": num_variables},
        )
        self.stats = SolveStats()

        working = formula.copy()
        scope: Assignment = {}
        for name, value in (initial_assignment or {}).items():
            scope[name] = value
            apply_assignment(working, name, value)

        start = time.perf_counter()
        with PerformanceLogger(
            logger, "dpll_solve", num_clauses=len(formula), num_variables=num_variables
        ):
            with _recursion_headroom(num_variables):
                satisfiable, model = self._search(working, scope, 0)
        elapsed = time.perf_counter() - start

        result = SolveResult(
            satisfiable=satisfiable,
            assignment=model if satisfiable else {},
            stats=self.stats,
            elapsed_seconds=elapsed,
        )

        logger.info(
            "DPLL solver finished",
            extra={
                "result": result.result.value,
                "decisions": self.stats.decisions,
                "propagations": self.stats.propagations,
                "conflicts": self.stats.conflicts,
                "elapsed_ms": round(result.elapsed_ms, 3),
            },
        )
        return result

    def _search(
        self, formula: CNFFormula, assignment: Assignment, depth: int
    ) -> Tuple[bool, Optional[Assignment]]:
        """
        Recursive DPLL step on a formula owned by this call.

        Returns:
            (satisfiable, model) where model is None on failure
        """
        self.stats.max_depth = max(self.stats.max_depth, depth)
        scope = dict(assignment)

        simplification = self.simplifier.simplify(formula, scope, SimplificationStats())
        self.stats.propagations += simplification.unit_propagations
        self.stats.pure_assignments += simplification.pure_assignments

        # Base cases
        if formula.is_empty():
            return True, scope

        if formula.has_empty_clause():
            self.stats.conflicts += 1
            logger.debug("Conflict: empty clause", extra={"depth": depth})
            return False, None

        variable = formula.first_variable().name
        self.stats.decisions += 1

        for value in (True, False):
            logger.debug(
                "Branching decision",
                extra={"variable": variable, "value": value, "depth": depth},
            )
            branch = formula.copy()
            apply_assignment(branch, variable, value)
            branch_scope = dict(scope)
            branch_scope[variable] = value

            satisfiable, model = self._search(branch, branch_scope, depth + 1)
            if satisfiable:
                return True, model

            if value:
                self.stats.backtracks += 1

        return False, None
