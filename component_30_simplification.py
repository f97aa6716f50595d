"""
component_30_simplification.py

Formula simplification rules used by the DPLL search:
- assign_literal / apply_assignment: the shared literal-removal rule
- Simplifier.unit_propagate: force unit-clause literals until fixpoint
- Simplifier.eliminate_pure_literals: satisfy single-polarity variables
  until fixpoint

All rules mutate the formula in place and only ever remove clauses or
literals. Forced values are recorded in the assignment passed in by the
caller, which is expected to be a branch-local scope.

Author: DPLL Development Team
"""

from dataclasses import dataclass
from typing import Optional

from component_15_logging_config import get_logger
from component_30_cnf_model import Assignment, CNFFormula, Literal

logger = get_logger(__name__)


def assign_literal(formula: CNFFormula, literal: Literal):
    """
    Make ``literal`` true in ``formula``.

    Clauses containing the literal are satisfied and removed. From every
    other clause the complementary literal is removed; a clause emptied this
    way stays in the formula as an empty (contradictory) clause.
    """
    complement = literal.complement()
    for i in range(len(formula.clauses) - 1, -1, -1):
        clause = formula.clauses[i]
        if clause.contains(literal):
            formula.remove_clause_at(i)
        else:
            reduced = clause.remove_literal(complement)
            if reduced is not clause:
                formula.replace_clause_at(i, reduced)


def apply_assignment(formula: CNFFormula, name: str, value: bool):
    """Assign ``value`` to variable ``name`` and reduce ``formula`` accordingly."""
    assign_literal(formula, Literal(name, negated=not value))


@dataclass
class SimplificationStats:
    """Counts of assignments forced by each rule."""

    unit_propagations: int = 0
    pure_assignments: int = 0


class Simplifier:
    """
    Applies unit propagation and pure-literal elimination to fixpoint.

    Either rule can be switched off; the search stays complete without them,
    only slower.
    """

    def __init__(
        self,
        use_unit_propagation: bool = True,
        use_pure_literal_elimination: bool = True,
    ):
        self.use_unit_propagation = use_unit_propagation
        self.use_pure_literal_elimination = use_pure_literal_elimination

    def simplify(
        self,
        formula: CNFFormula,
        assignment: Assignment,
        stats: Optional[SimplificationStats] = None,
    ) -> SimplificationStats:
        """
        Run unit propagation, then pure-literal elimination, each to fixpoint.

        Args:
            formula: Formula to reduce in place
            assignment: Scope receiving the forced assignments
            stats: Optional accumulator; a new one is created if omitted

        Returns:
            The statistics accumulator
        """
        if stats is None:
            stats = SimplificationStats()

        if self.use_unit_propagation:
            stats.unit_propagations += self.unit_propagate(formula, assignment)

        if self.use_pure_literal_elimination:
            stats.pure_assignments += self.eliminate_pure_literals(formula, assignment)

        return stats

    def unit_propagate(self, formula: CNFFormula, assignment: Assignment) -> int:
        """
        Force the literals of unit clauses until none remain.

        Unit propagation never decides satisfiability itself: contradictions
        show up as empty clauses left in the formula.

        Returns:
            Number of forced assignments
        """
        forced = 0
        index = next(formula.unit_clause_indices(), None)
        while index is not None:
            literal = formula.clauses[index].get_unit_literal()
            assignment[literal.name] = not literal.negated
            assign_literal(formula, literal)
            forced += 1
            logger.debug(
                "Unit propagation",
                extra={"variable": literal.name, "value": not literal.negated},
            )
            index = next(formula.unit_clause_indices(), None)
        return forced

    def eliminate_pure_literals(self, formula: CNFFormula, assignment: Assignment) -> int:
        """
        Assign every pure variable its only polarity and drop its clauses.

        Removing clauses can make further variables pure, so the pure table
        is recomputed until it comes back empty.

        Returns:
            Number of pure assignments
        """
        assigned = 0
        pure = formula.pure_variables()
        while pure:
            for name, polarity in pure.items():
                assignment[name] = polarity.seen_positive
                for i in range(len(formula.clauses) - 1, -1, -1):
                    if formula.clauses[i].mentions(name):
                        formula.remove_clause_at(i)
                assigned += 1
                logger.debug(
                    "Pure literal",
                    extra={"variable": name, "value": polarity.seen_positive},
                )
            pure = formula.pure_variables()
        return assigned
