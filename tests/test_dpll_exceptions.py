"""
Test suite for dpll_exceptions.py

Tests the exception hierarchy, string representations, context handling,
and exception wrapping.
"""

import pytest

from dpll_exceptions import (
    BranchSelectionError,
    ConfigurationException,
    DPLLException,
    FormulaConstructionError,
    FormulaException,
    FormulaFileError,
    InvalidConfigError,
    SolverException,
    wrap_exception,
)


class TestDPLLExceptionBase:
    """Tests for the base DPLLException class."""

    def test_basic_exception(self):
        exc = DPLLException("Test error")
        assert str(exc) == "Test error"
        assert exc.message == "Test error"
        assert exc.context == {}
        assert exc.original_exception is None

    def test_exception_with_context(self):
        context = {"key1": "value1", "key2": 123}
        exc = DPLLException("Test error", context=context)
        assert exc.context == context
        assert "key1=value1" in str(exc)
        assert "key2=123" in str(exc)

    def test_context_is_copied(self):
        context = {"key": 1}
        exc = DPLLException("Test error", context=context)
        context["key"] = 2
        assert exc.context == {"key": 1}

    def test_exception_str_with_all_info(self):
        exc = DPLLException(
            "Main error",
            context={"op": "solve"},
            original_exception=ValueError("inner"),
        )
        assert str(exc) == "Main error | Context: op=solve | Caused by: ValueError: inner"

    def test_repr(self):
        exc = DPLLException("Test error", context={"a": 1})
        assert repr(exc) == "DPLLException(message='Test error', context={'a': 1})"


class TestHierarchy:
    """Every project exception derives from DPLLException."""

    @pytest.mark.parametrize(
        "exc_class,parent",
        [
            (FormulaException, DPLLException),
            (FormulaConstructionError, FormulaException),
            (FormulaFileError, FormulaException),
            (SolverException, DPLLException),
            (BranchSelectionError, SolverException),
            (ConfigurationException, DPLLException),
            (InvalidConfigError, ConfigurationException),
        ],
    )
    def test_inheritance(self, exc_class, parent):
        assert issubclass(exc_class, parent)
        assert issubclass(exc_class, Exception)

    def test_catch_by_base(self):
        with pytest.raises(DPLLException):
            raise BranchSelectionError("no clauses")


class TestSpecificExceptions:
    """Keyword arguments land in the context dictionary."""

    def test_formula_construction_error(self):
        exc = FormulaConstructionError("Bad token", token="!", clause_index=2)
        assert exc.context == {"token": "!", "clause_index": 2}

    def test_formula_file_error(self):
        exc = FormulaFileError("Missing", path="f.yml")
        assert exc.context["path"] == "f.yml"

    def test_invalid_config_error(self):
        exc = InvalidConfigError("Bad value", key="verbose", value="yes")
        assert exc.context == {"key": "verbose", "value": "yes"}
        assert "key=verbose" in str(exc)

    def test_explicit_context_wins(self):
        exc = FormulaFileError("Missing", path="a.yml", context={"path": "b.yml"})
        assert exc.context["path"] == "b.yml"


class TestWrapException:
    """Tests for wrap_exception()."""

    def test_wrap(self):
        original = KeyError("clauses")
        wrapped = wrap_exception(original, FormulaFileError, "Bad file", path="x.yml")

        assert isinstance(wrapped, FormulaFileError)
        assert wrapped.original_exception is original
        assert wrapped.context["path"] == "x.yml"
        assert "Caused by: KeyError" in str(wrapped)

    def test_wrap_preserves_chain_when_raised(self):
        with pytest.raises(ConfigurationException) as exc_info:
            try:
                raise ValueError("inner")
            except ValueError as e:
                raise wrap_exception(e, ConfigurationException, "outer") from e

        assert isinstance(exc_info.value.__cause__, ValueError)
