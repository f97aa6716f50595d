"""
component_30_cnf_model.py

CNF Data Model - Literals, Clauses and Formulas

This module provides the data structures the DPLL solver works on:
- Literal: a variable reference with a polarity
- Clause: an ordered disjunction of literals
- CNFFormula: an ordered conjunction of clauses with derived views
  (unit-clause indices, pure-variable table) computed on demand
- Symbols: notation used when rendering formulas

Literals and clauses are immutable. A CNFFormula is mutable but only ever
shrinks while it is being solved; every search branch works on its own copy.

Author: DPLL Development Team
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, NamedTuple, Tuple

from dpll_exceptions import BranchSelectionError

Assignment = Dict[str, bool]


# ============================================================================
# Rendering
# ============================================================================


@dataclass(frozen=True)
class Symbols:
    """Notation for logical connectives and truth values."""

    negation: str
    disjunction: str
    conjunction: str
    true: str
    false: str
    maps_to: str
    negation_separator: str = ""


UNICODE_SYMBOLS = Symbols(
    negation="¬", disjunction="∨", conjunction="∧", true="⊤", false="⊥", maps_to="↦"
)
ASCII_SYMBOLS = Symbols(
    negation="NOT",
    disjunction="OR",
    conjunction="AND",
    true="T",
    false="F",
    maps_to="->",
    negation_separator=" ",
)


# ============================================================================
# Data Structures
# ============================================================================


@dataclass(frozen=True)
class Literal:
    """
    A propositional literal (variable or its negation).

    Equality is structural: name and polarity must both match.
    """

    name: str
    negated: bool = False

    def __neg__(self) -> "Literal":
        return self.complement()

    def complement(self) -> "Literal":
        """Return the literal with the same name and opposite polarity."""
        return Literal(self.name, not self.negated)

    def is_complementary(self, other: "Literal") -> bool:
        return self.name == other.name and self.negated != other.negated

    def is_satisfied_by(self, value: bool) -> bool:
        """True iff assigning ``value`` to the variable makes this literal true."""
        return (self.negated and not value) or (not self.negated and value)

    def render(self, symbols: Symbols = UNICODE_SYMBOLS) -> str:
        if self.negated:
            return f"{symbols.negation}{symbols.negation_separator}{self.name}"
        return self.name

    def __str__(self):
        return self.render()

    def __repr__(self):
        return str(self)


class Clause:
    """
    A disjunction of literals (OR-connected), kept in insertion order.

    Empty clause represents FALSE. Literals are not deduplicated; a clause
    holding a literal and its complement is treated like any other clause.
    """

    __slots__ = ("_literals",)

    def __init__(self, literals: Iterable[Literal] = ()):
        self._literals: Tuple[Literal, ...] = tuple(literals)

    @property
    def literals(self) -> Tuple[Literal, ...]:
        return self._literals

    def __len__(self) -> int:
        return len(self._literals)

    def __iter__(self) -> Iterator[Literal]:
        return iter(self._literals)

    def __eq__(self, other):
        return isinstance(other, Clause) and self._literals == other._literals

    def __hash__(self):
        return hash(self._literals)

    def is_empty(self) -> bool:
        """Check if clause is empty (represents FALSE)."""
        return not self._literals

    def is_unit(self) -> bool:
        """Check if clause has exactly one literal (unit clause)."""
        return len(self._literals) == 1

    def get_unit_literal(self) -> Literal:
        """Get the single literal of a unit clause."""
        if not self.is_unit():
            raise ValueError(f"Clause {self} is not a unit clause")
        return self._literals[0]

    def contains(self, literal: Literal) -> bool:
        return literal in self._literals

    def mentions(self, name: str) -> bool:
        """Check if the variable occurs in the clause in any polarity."""
        return any(lit.name == name for lit in self._literals)

    def variables(self) -> List[str]:
        seen: Dict[str, None] = {}
        for lit in self._literals:
            seen.setdefault(lit.name, None)
        return list(seen)

    def remove_literal(self, literal: Literal) -> "Clause":
        """
        Return a clause without any occurrence of ``literal``.

        Removes every structurally equal occurrence, so the operation is
        idempotent. Returns ``self`` when nothing was removed.
        """
        if literal not in self._literals:
            return self
        return Clause(lit for lit in self._literals if lit != literal)

    def is_satisfied_by(self, assignment: Assignment) -> bool:
        """True iff some literal is made true by ``assignment``."""
        return any(
            lit.name in assignment and lit.is_satisfied_by(assignment[lit.name])
            for lit in self._literals
        )

    def render(self, symbols: Symbols = UNICODE_SYMBOLS) -> str:
        separator = f" {symbols.disjunction} "
        return "(" + separator.join(lit.render(symbols) for lit in self._literals) + ")"

    def __str__(self):
        return self.render()

    def __repr__(self):
        return f"Clause({list(self._literals)})"


class Polarity(NamedTuple):
    """Polarities in which a variable occurs across a formula."""

    seen_positive: bool
    seen_negative: bool

    def is_pure(self) -> bool:
        return self.seen_positive != self.seen_negative


class CNFFormula:
    """
    A formula in Conjunctive Normal Form (AND of ORs).

    Represents: C1 AND C2 AND ... AND Cn where each Ci is a clause.

    Derived views (unit-clause indices, pure variables, variable names) are
    recomputed from the current clause list on every call; the formula keeps
    no cached state that could go stale while clauses are removed.
    """

    def __init__(self, clauses: Iterable[Clause] = ()):
        self.clauses: List[Clause] = list(clauses)

    def __len__(self) -> int:
        return len(self.clauses)

    def __iter__(self) -> Iterator[Clause]:
        return iter(self.clauses)

    def __eq__(self, other):
        return isinstance(other, CNFFormula) and self.clauses == other.clauses

    def copy(self) -> "CNFFormula":
        """Independent copy; clauses are immutable so sharing them is safe."""
        return CNFFormula(self.clauses)

    def add_clause(self, clause: Clause):
        self.clauses.append(clause)

    def is_empty(self) -> bool:
        """Check if formula has no clauses (represents TRUE)."""
        return not self.clauses

    def has_empty_clause(self) -> bool:
        """Check if formula contains an empty clause (unsatisfiable branch)."""
        return any(c.is_empty() for c in self.clauses)

    @property
    def variables(self) -> List[str]:
        """Variable names in order of first appearance."""
        seen: Dict[str, None] = {}
        for clause in self.clauses:
            for lit in clause:
                seen.setdefault(lit.name, None)
        return list(seen)

    def unit_clause_indices(self) -> Iterator[int]:
        """Lazily yield the positions of all current unit clauses."""
        return (i for i, clause in enumerate(self.clauses) if clause.is_unit())

    def pure_variables(self) -> Dict[str, Polarity]:
        """
        Find variables that occur with exactly one polarity.

        Returns:
            Mapping from variable name to its Polarity, restricted to pure
            variables, in order of first appearance
        """
        occurrences: Dict[str, Polarity] = {}
        for clause in self.clauses:
            for lit in clause:
                seen = occurrences.get(lit.name, Polarity(False, False))
                if lit.negated:
                    seen = seen._replace(seen_negative=True)
                else:
                    seen = seen._replace(seen_positive=True)
                occurrences[lit.name] = seen

        return {name: seen for name, seen in occurrences.items() if seen.is_pure()}

    def remove_clause_at(self, index: int):
        """
        Remove the clause at ``index``.

        Later clauses shift down by one position; loops that remove while
        iterating must walk indices from the end.
        """
        del self.clauses[index]

    def replace_clause_at(self, index: int, clause: Clause):
        self.clauses[index] = clause

    def first_variable(self) -> Literal:
        """
        Return the first literal of the first clause (the branching literal).

        Raises:
            BranchSelectionError: Formula is empty or its first clause is empty
        """
        if self.is_empty():
            raise BranchSelectionError("Cannot select a branching variable from an empty formula")
        first = self.clauses[0]
        if first.is_empty():
            raise BranchSelectionError(
                "Cannot select a branching variable from an empty clause",
                context={"num_clauses": len(self.clauses)},
            )
        return first.literals[0]

    def evaluate(self, assignment: Assignment) -> bool:
        """Check whether ``assignment`` satisfies every clause."""
        return all(clause.is_satisfied_by(assignment) for clause in self.clauses)

    def render(self, symbols: Symbols = UNICODE_SYMBOLS) -> str:
        if self.is_empty():
            return symbols.true
        separator = f" {symbols.conjunction} "
        return separator.join(clause.render(symbols) for clause in self.clauses)

    def __str__(self):
        return self.render()

    def __repr__(self):
        return f"CNFFormula({self.clauses!r})"
