"""
tests/test_dpll_main.py
=======================
Tests for the command line entry point (dpll_main).
"""

import pytest

import component_15_logging_config
from dpll_main import build_parser, main


@pytest.fixture(autouse=True)
def cli_log_dir(log_dir, monkeypatch):
    """Keep CLI runs from writing into the project's logs/ directory."""
    monkeypatch.setattr(component_15_logging_config, "LOG_DIR", log_dir)
    return log_dir


class TestParser:
    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.example is None
        assert args.clause is None
        assert args.file is None
        assert not args.quiet

    def test_clauses_are_grouped(self):
        args = build_parser().parse_args(["--clause", "p", "q", "--clause", "!p"])
        assert args.clause == [["p", "q"], ["!p"]]

    def test_sources_are_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--example", "basic", "--clause", "p"])


class TestMain:
    """End-to-end runs of main()."""

    def test_default_example(self, capsys):
        assert main([]) == 0
        out = capsys.readouterr().out

        assert "Starting solver..." in out
        assert "Formula: (p ∨ q) ∧ (¬p ∨ r) ∧ (¬q ∨ ¬r)" in out
        assert "Formula is satisfiable!" in out
        assert "p ↦ ⊤" in out

    def test_extended_example_ascii(self, capsys):
        assert main(["--example", "extended", "--ascii"]) == 0
        out = capsys.readouterr().out
        assert "(p OR q) AND (NOT p OR r)" in out
        assert "p -> T" in out

    @pytest.mark.parametrize(
        "clauses,expected",
        [
            ([["p"], ["!p"]], "UNSAT"),
            ([["p", "q"], ["!p"]], "SAT"),
        ],
    )
    def test_quiet_clauses(self, clauses, expected, capsys):
        argv = ["--quiet"]
        for clause in clauses:
            argv += ["--clause"] + clause

        assert main(argv) == 0
        assert capsys.readouterr().out.strip() == expected

    def test_rule_switches(self, capsys):
        argv = ["--quiet", "--no-unit-propagation", "--no-pure-literals"]
        assert main(argv + ["--clause", "p", "--clause", "!p"]) == 0
        assert capsys.readouterr().out.strip() == "UNSAT"

    def test_formula_file(self, tmp_path, capsys):
        path = tmp_path / "formula.yml"
        path.write_text('- [a, b]\n- ["!a"]\n- ["!b"]\n', encoding="utf-8")

        assert main(["--file", str(path)]) == 0
        assert "Formula is unsatisfiable!" in capsys.readouterr().out

    def test_missing_file(self, tmp_path, capsys):
        assert main(["--file", str(tmp_path / "missing.yml")]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_directory_as_formula_file(self, tmp_path, capsys):
        assert main(["--file", str(tmp_path)]) == 1
        assert "Cannot read formula file" in capsys.readouterr().err

    def test_undecodable_config(self, tmp_path, capsys):
        config_file = tmp_path / "dpll.yml"
        config_file.write_bytes(b"report:\n  verbose: \xff\n")

        assert main(["--config", str(config_file)]) == 1
        assert "Cannot read configuration file" in capsys.readouterr().err

    def test_bad_token(self, capsys):
        assert main(["--clause", "p", "!"]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_config_overlay(self, tmp_path, capsys):
        config_file = tmp_path / "dpll.yml"
        config_file.write_text("report:\n  verbose: false\n", encoding="utf-8")

        assert main(["--config", str(config_file)]) == 0
        assert capsys.readouterr().out == ""

    def test_invalid_config(self, tmp_path, capsys):
        config_file = tmp_path / "dpll.yml"
        config_file.write_text("solver:\n  restarts: 3\n", encoding="utf-8")

        assert main(["--config", str(config_file)]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_log_files_written(self, cli_log_dir):
        main(["--quiet"])
        assert (cli_log_dir / "dpll.log").exists()
