"""
dpll_exceptions.py

Exception hierarchy for the DPLL solver project.

The decision procedure itself never signals outcomes through exceptions:
satisfiable/unsatisfiable are ordinary results. Exceptions cover contract
violations inside the solver and errors in the surrounding glue (formula
construction, formula files, configuration).

Hierarchy:
    DPLLException
    ├── FormulaException
    │   ├── FormulaConstructionError
    │   └── FormulaFileError
    ├── SolverException
    │   └── BranchSelectionError
    └── ConfigurationException
        └── InvalidConfigError
"""

from typing import Any, Dict, Optional, Type


class DPLLException(Exception):
    """
    Base class for all project exceptions.

    Carries a human readable message, a context dictionary with structured
    details, and optionally the exception that caused it.
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = dict(context) if context else {}
        self.original_exception = original_exception

    def __str__(self) -> str:
        parts = [self.message]
        if self.context:
            details = ", ".join(f"{key}={value}" for key, value in self.context.items())
            parts.append(f"Context: {details}")
        if self.original_exception is not None:
            parts.append(
                f"Caused by: {type(self.original_exception).__name__}: "
                f"{self.original_exception}"
            )
        return " | ".join(parts)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, "
            f"context={self.context!r})"
        )


# ============================================================================
# Formula construction
# ============================================================================


class FormulaException(DPLLException):
    """Errors while building a formula from external input."""


class FormulaConstructionError(FormulaException):
    """A literal token or clause could not be turned into a formula element."""

    def __init__(
        self,
        message: str,
        token: Any = None,
        clause_index: Optional[int] = None,
        **kwargs,
    ):
        context = dict(kwargs.pop("context", None) or {})
        context.setdefault("token", token)
        context.setdefault("clause_index", clause_index)
        super().__init__(message, context=context, **kwargs)


class FormulaFileError(FormulaException):
    """A formula file is missing, unreadable or has the wrong shape."""

    def __init__(self, message: str, path: Optional[str] = None, **kwargs):
        context = dict(kwargs.pop("context", None) or {})
        context.setdefault("path", path)
        super().__init__(message, context=context, **kwargs)


# ============================================================================
# Solver
# ============================================================================


class SolverException(DPLLException):
    """Violations of the solver's internal contracts."""


class BranchSelectionError(SolverException):
    """A branching variable was requested from a formula that has none."""


# ============================================================================
# Configuration
# ============================================================================


class ConfigurationException(DPLLException):
    """Errors loading or applying configuration."""


class InvalidConfigError(ConfigurationException):
    """A configuration key is unknown or its value has the wrong type."""

    def __init__(
        self, message: str, key: Optional[str] = None, value: Any = None, **kwargs
    ):
        context = dict(kwargs.pop("context", None) or {})
        context.setdefault("key", key)
        context.setdefault("value", value)
        super().__init__(message, context=context, **kwargs)


# ============================================================================
# Utility
# ============================================================================


def wrap_exception(
    exception: BaseException,
    exception_class: Type[DPLLException],
    message: str,
    **context: Any,
) -> DPLLException:
    """
    Wrap a generic exception into a project exception.

    Args:
        exception: The caught exception
        exception_class: DPLLException subclass to create
        message: Message for the new exception
        **context: Additional context stored on the new exception

    Returns:
        New exception instance; raise it with ``raise ... from exception``.
    """
    return exception_class(message, context=context, original_exception=exception)
