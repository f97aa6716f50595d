"""
dpll_main.py

Command line entry point for the DPLL solver.

Usage:
    python dpll_main.py                              # solve the 'basic' example
    python dpll_main.py --example extended           # another built-in example
    python dpll_main.py --clause p q --clause !p r   # clauses from tokens
    python dpll_main.py --file formula.yml           # clauses from YAML
"""

import argparse
import sys
from typing import List, Optional

from component_15_logging_config import get_logger, setup_logging
from component_30_formula_builder import (
    EXAMPLE_FORMULAS,
    build_formula,
    example_formula,
    load_formula_file,
)
from component_30_sat_solver import __version__, solve
from dpll_config import LOG_LEVELS, get_config
from dpll_exceptions import DPLLException

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dpll",
        description="Decide satisfiability of a CNF formula with DPLL",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  dpll --example extended
  dpll --clause p q --clause '!p' r --clause '!q' '!r'
  dpll --file formula.yml --ascii
        """,
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--example",
        choices=sorted(EXAMPLE_FORMULAS),
        help="Solve a built-in example formula (default: basic)",
    )
    source.add_argument(
        "--clause",
        action="append",
        nargs="*",
        metavar="TOKEN",
        help="One clause of literal tokens, '!' negates (repeatable)",
    )
    source.add_argument("--file", help="YAML file with a list of clauses")

    parser.add_argument("--config", help="YAML file overlaying the configuration")
    parser.add_argument(
        "--no-unit-propagation",
        action="store_true",
        help="Disable unit propagation",
    )
    parser.add_argument(
        "--no-pure-literals",
        action="store_true",
        help="Disable pure literal elimination",
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Only print SAT or UNSAT"
    )
    parser.add_argument(
        "--ascii", action="store_true", help="Render formulas without Unicode symbols"
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        help="Console log level (default: from configuration)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    CLI entry point.

    Returns:
        Exit code (0 after solving, 1 on invalid input or configuration)
    """
    args = build_parser().parse_args(argv)
    cfg = get_config()

    try:
        if args.config:
            cfg.load_yaml(args.config)
        overrides = {}
        if args.ascii:
            overrides["unicode_symbols"] = False
        if args.log_level:
            overrides["console_log_level"] = args.log_level
        cfg.override(overrides)
    except DPLLException as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    setup_logging(
        console_level=cfg.console_log_level,
        file_level=cfg.file_log_level,
        enable_performance_logging=cfg.performance_logging,
    )

    try:
        if args.file:
            formula = load_formula_file(args.file)
        elif args.clause is not None:
            formula = build_formula(args.clause)
        else:
            formula = example_formula(args.example or "basic")

        result = solve(
            formula,
            use_unit_propagation=False if args.no_unit_propagation else None,
            use_pure_literal_elimination=False if args.no_pure_literals else None,
            verbose=False if args.quiet else None,
        )
    except DPLLException as e:
        logger.log_exception(e, "dpll failed")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.quiet:
        print("SAT" if result.satisfiable else "UNSAT")
    return 0


if __name__ == "__main__":
    sys.exit(main())
