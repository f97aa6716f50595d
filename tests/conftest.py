# conftest.py
"""
Shared pytest fixtures for all DPLL solver tests.
Loaded automatically by pytest and available in every test module.
"""
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import itertools
import logging

import pytest
from hypothesis import HealthCheck, settings

from component_15_logging_config import StructuredFormatter
from component_30_cnf_model import Assignment, CNFFormula
from component_30_formula_builder import build_formula
from dpll_config import DEFAULT_CONFIG, DpllConfig, get_config

logger = logging.getLogger(__name__)

# isolated_config is autouse and function scoped; it only resets state, so
# sharing it across the examples of a @given test is fine.
settings.register_profile(
    "dpll", suppress_health_check=[HealthCheck.function_scoped_fixture], deadline=None
)
settings.load_profile("dpll")


# ============================================================================
# HELPERS
# ============================================================================


def brute_force_models(formula: CNFFormula):
    """Yield every total assignment over the formula's variables that satisfies it."""
    names = formula.variables
    for values in itertools.product((True, False), repeat=len(names)):
        assignment: Assignment = dict(zip(names, values))
        if formula.evaluate(assignment):
            yield assignment


def is_brute_force_satisfiable(formula: CNFFormula) -> bool:
    return next(brute_force_models(formula), None) is not None


# ============================================================================
# ISOLATION
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """
    Point the config singleton at a temporary file and reset it to defaults.

    Keeps tests from reading or writing dpll_config.json in the project.
    """
    monkeypatch.setattr(DpllConfig, "_config_file", tmp_path / "dpll_config.json")
    cfg = get_config()
    cfg._config = DEFAULT_CONFIG.copy()
    yield cfg
    cfg._config = DEFAULT_CONFIG.copy()


@pytest.fixture
def log_dir(tmp_path):
    """Temporary directory for log files; detaches the handlers setup_logging() installed."""
    root_logger = logging.getLogger()
    saved_level = root_logger.level

    directory = tmp_path / "logs"
    yield directory

    for handler in list(root_logger.handlers):
        if isinstance(handler.formatter, StructuredFormatter):
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(saved_level)

    perf_logger = logging.getLogger("dpll.performance")
    for handler in list(perf_logger.handlers):
        perf_logger.removeHandler(handler)
        handler.close()
    perf_logger.propagate = True
    perf_logger.setLevel(logging.NOTSET)


# ============================================================================
# FORMULAS
# ============================================================================


@pytest.fixture
def scenario_a() -> CNFFormula:
    """(p ∨ q) ∧ (¬p ∨ r) ∧ (¬q ∨ ¬r)"""
    return build_formula([["p", "q"], ["!p", "r"], ["!q", "!r"]])


@pytest.fixture
def scenario_b() -> CNFFormula:
    """Scenario A plus (p ∨ ¬s) ∧ (q ∨ s) ∧ (r ∨ s)"""
    return build_formula(
        [
            ["p", "q"],
            ["!p", "r"],
            ["!q", "!r"],
            ["p", "!s"],
            ["q", "s"],
            ["r", "s"],
        ]
    )


@pytest.fixture
def scenario_c() -> CNFFormula:
    """(p) ∧ (¬p)"""
    return build_formula([["p"], ["!p"]])


@pytest.fixture
def pigeonhole_3_2() -> CNFFormula:
    """Three pigeons, two holes: unsatisfiable without any unit clauses."""
    clauses = [[f"p{i}h1", f"p{i}h2"] for i in range(1, 4)]
    for hole in ("h1", "h2"):
        for i, j in itertools.combinations(range(1, 4), 2):
            clauses.append([f"!p{i}{hole}", f"!p{j}{hole}"])
    return build_formula(clauses)
