"""
component_30_solver_report.py

Console reporting for solver runs: the formula being solved, the wall-clock
solve time and either the satisfying assignment or an unsatisfiable notice.

Reporting has no influence on solving; it only renders a SolveResult.
"""

import sys
from typing import List, Optional, TextIO

from component_30_cnf_model import UNICODE_SYMBOLS, Assignment, CNFFormula, Symbols
from component_30_sat_solver_core import SolveResult


def format_assignment(assignment: Assignment, symbols: Symbols = UNICODE_SYMBOLS) -> List[str]:
    """Render ``name ↦ ⊤`` lines in assignment order."""
    return [
        f"{name} {symbols.maps_to} {symbols.true if value else symbols.false}"
        for name, value in assignment.items()
    ]


def format_result(result: SolveResult, symbols: Symbols = UNICODE_SYMBOLS) -> List[str]:
    lines = [f"Solver finished in {result.elapsed_ms:.0f}ms"]
    if not result.satisfiable:
        lines.append("Formula is unsatisfiable!")
        return lines

    lines.append("Formula is satisfiable!")
    if result.assignment:
        lines.append("Assignment:")
        lines.extend(format_assignment(result.assignment, symbols))
    else:
        lines.append("No variables to assign")
    return lines


class SolverReporter:
    """Writes solver progress and results to a text stream."""

    def __init__(self, stream: Optional[TextIO] = None, symbols: Symbols = UNICODE_SYMBOLS):
        self.stream = stream if stream is not None else sys.stdout
        self.symbols = symbols

    def _write(self, lines: List[str]):
        for line in lines:
            print(line, file=self.stream)

    def report_start(self, formula: CNFFormula):
        self._write(["Starting solver...", f"Formula: {formula.render(self.symbols)}"])

    def report_result(self, result: SolveResult):
        self._write(format_result(result, self.symbols))
