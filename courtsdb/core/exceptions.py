"""
Centralized Exception Hierarchy for courtsdb.

This module defines all custom exceptions used throughout courtsdb.
All exceptions inherit from CourtsDBError for easy catching.

Helpful Error Messages
----------------------
Each exception includes:
- user_message: Human-readable description of what went wrong
- why_it_happened: Explanation of the root cause
- how_to_fix: Actionable steps to resolve the issue
- error_code: Unique identifier (e.g., "CDB-LOAD-001")

Usage
-----
    from courtsdb.core.exceptions import CourtsDBError, LoadError

    try:
        registry = load_registry(data_dir)
    except LoadError as e:
        logger.error("Registry unusable", error=str(e))

Exception Hierarchy
-------------------
    CourtsDBError (base)
    ├── LoadError
    │   ├── UndefinedVariableError
    │   ├── VariableCycleError
    │   ├── OrdinalRangeError
    │   ├── ParentReferenceError
    │   └── RegistrySchemaError
    ├── PatternCompileError
    └── ConfigError

Propagation
-----------
LoadError and its subclasses are fatal: they are raised while a registry is
being built and never deferred to a query. PatternCompileError is
recoverable: the compiler records it on the registry and logs it, but never
raises it to a caller. An empty match result is not an error.
"""

from typing import Any, List, Optional, Sequence


def get_root_cause(exc: BaseException) -> BaseException:
    """Extract the root cause from a chain of exceptions.

    Follows nested __cause__ and __context__ attributes to find
    the original error that started the chain.

    Args:
        exc: Exception to analyze

    Returns:
        Root cause exception (may be the same as input)
    """
    seen = set()
    current = exc

    while current is not None:
        if id(current) in seen:
            break
        seen.add(id(current))

        if current.__cause__ is not None:
            current = current.__cause__
        elif current.__context__ is not None:
            current = current.__context__
        else:
            break

    return current


class CourtsDBError(Exception):
    """
    Base exception for all courtsdb errors.

    Includes helpful error information:
    - error_code: Unique code for documentation lookup (e.g., "CDB-ERR-000")
    - why_it_happened: Explanation of the root cause
    - how_to_fix: List of actionable suggestions

    Example
    -------
        try:
            registry = load_registry()
        except CourtsDBError as e:
            print(f"Fix: {e.how_to_fix}")
    """

    error_code: str = "CDB-ERR-000"
    why_it_happened: str = "An unexpected error occurred"
    how_to_fix: List[str] = ["Check the error message for details"]

    def __init__(
        self,
        message: str,
        *,
        error_code: Optional[str] = None,
        why_it_happened: Optional[str] = None,
        how_to_fix: Optional[List[str]] = None,
    ) -> None:
        """Initialize CourtsDBError with helpful information.

        Args:
            message: Human-readable error message
            error_code: Unique identifier (e.g., "CDB-LOAD-001")
            why_it_happened: Explanation of root cause
            how_to_fix: List of actionable fix suggestions
        """
        super().__init__(message)

        if error_code is not None:
            self.error_code = error_code
        if why_it_happened is not None:
            self.why_it_happened = why_it_happened
        if how_to_fix is not None:
            self.how_to_fix = how_to_fix

    @property
    def user_message(self) -> str:
        """Get the user-friendly error message."""
        return str(self)

    def get_root_cause(self) -> BaseException:
        """Get the root cause of this exception chain."""
        return get_root_cause(self)


# ============================================================================
# Load Exceptions
# ============================================================================


class LoadError(CourtsDBError):
    """
    Base exception for fatal registry construction errors.

    Raised while the variable table, the place lists or the court records
    are being turned into a registry. A registry that raised LoadError is
    never returned to the caller.
    """

    error_code = "CDB-LOAD-000"
    why_it_happened = "The court registry could not be built from its source data"
    how_to_fix = [
        "Check the error message for the offending file or record",
        "Run 'courtsdb validate --data-dir <dir>' after fixing the data",
    ]


class UndefinedVariableError(LoadError):
    """
    Raised when a template references a variable that does not exist.

    Attributes
    ----------
    name : str
        The undefined variable name
    referenced_by : str or None
        The variable or court id whose template holds the reference
    """

    error_code = "CDB-LOAD-001"
    why_it_happened = (
        "A ${name} placeholder refers to a variable that is not defined in "
        "variables.json and has no matching places/<name>.txt list"
    )
    how_to_fix = [
        "Add the variable to variables.json",
        "Or add a places/<name>.txt file with one entry per line",
        "Check the placeholder for typos",
    ]

    def __init__(
        self,
        message: str,
        name: Optional[str] = None,
        referenced_by: Optional[str] = None,
        *,
        error_code: Optional[str] = None,
        why_it_happened: Optional[str] = None,
        how_to_fix: Optional[List[str]] = None,
    ) -> None:
        super().__init__(
            message,
            error_code=error_code,
            why_it_happened=why_it_happened,
            how_to_fix=how_to_fix,
        )
        self.name = name
        self.referenced_by = referenced_by


class VariableCycleError(LoadError):
    """
    Raised when variables reference each other in a cycle.

    Attributes
    ----------
    cycle : list of str
        The chain of names, starting and ending with the repeated name
    """

    error_code = "CDB-LOAD-002"
    why_it_happened = (
        "A variable refers back to itself, directly or through other "
        "variables, so it can never be fully expanded"
    )
    how_to_fix = [
        "Follow the cycle path in the message and break one of the references",
    ]

    def __init__(
        self,
        message: str,
        cycle: Optional[Sequence[str]] = None,
        *,
        error_code: Optional[str] = None,
        why_it_happened: Optional[str] = None,
        how_to_fix: Optional[List[str]] = None,
    ) -> None:
        super().__init__(
            message,
            error_code=error_code,
            why_it_happened=why_it_happened,
            how_to_fix=how_to_fix,
        )
        self.cycle = list(cycle or [])


class OrdinalRangeError(LoadError):
    """
    Raised when an ordinal range placeholder such as ${1-41} is malformed.

    Attributes
    ----------
    placeholder : str
        The offending placeholder text
    """

    error_code = "CDB-LOAD-003"
    why_it_happened = (
        "An ordinal range placeholder must be ${n-m} with 1 <= n <= m and m "
        "no larger than the ordinal word table"
    )
    how_to_fix = [
        "Use two positive integers separated by a hyphen, smaller first",
        "Keep the upper bound within the supported ordinal words",
    ]

    def __init__(
        self,
        message: str,
        placeholder: Optional[str] = None,
        *,
        error_code: Optional[str] = None,
        why_it_happened: Optional[str] = None,
        how_to_fix: Optional[List[str]] = None,
    ) -> None:
        super().__init__(
            message,
            error_code=error_code,
            why_it_happened=why_it_happened,
            how_to_fix=how_to_fix,
        )
        self.placeholder = placeholder


class ParentReferenceError(LoadError):
    """
    Raised when a court's parent does not exist or parents form a cycle.

    Attributes
    ----------
    court_id : str
        The court whose parent link is invalid
    parent : str or None
        The parent id it refers to
    """

    error_code = "CDB-LOAD-004"
    why_it_happened = (
        "Every parent must be the id of another court in the registry and "
        "parent links must not loop back on themselves"
    )
    how_to_fix = [
        "Check the parent id for typos",
        "Remove or correct the parent link that closes the cycle",
    ]

    def __init__(
        self,
        message: str,
        court_id: Optional[str] = None,
        parent: Optional[str] = None,
        *,
        error_code: Optional[str] = None,
        why_it_happened: Optional[str] = None,
        how_to_fix: Optional[List[str]] = None,
    ) -> None:
        super().__init__(
            message,
            error_code=error_code,
            why_it_happened=why_it_happened,
            how_to_fix=how_to_fix,
        )
        self.court_id = court_id
        self.parent = parent


class RegistrySchemaError(LoadError):
    """
    Raised when registry source data cannot be read or does not fit the schema.

    This can occur when:
    - A data file is missing or is not valid JSON
    - A court record lacks a required field or has the wrong type
    - Two courts share the same id
    """

    error_code = "CDB-LOAD-005"
    why_it_happened = "The registry data files do not match the expected layout"
    how_to_fix = [
        "Check that courts.json is a list of court objects",
        "Check that variables.json is an object of name -> template strings",
        "Make sure every court has a unique 'id' and a 'name'",
    ]


# ============================================================================
# Compile Exceptions
# ============================================================================


class PatternCompileError(CourtsDBError):
    """
    A single court pattern failed to compile.

    Never raised to callers: the compiler records these on the registry and
    drops the pattern, so the court stays searchable through its other
    patterns and its name.

    Attributes
    ----------
    court_id : str
        The court owning the pattern
    pattern : str
        The resolved pattern source that failed
    """

    error_code = "CDB-PAT-001"
    why_it_happened = "A court pattern is not a valid regular expression"
    how_to_fix = [
        "Fix the pattern in courts.json (unbalanced parentheses are common)",
        "Check the variables it references expand to valid regex fragments",
    ]

    def __init__(
        self,
        message: str,
        court_id: Optional[str] = None,
        pattern: Optional[str] = None,
        *,
        error_code: Optional[str] = None,
        why_it_happened: Optional[str] = None,
        how_to_fix: Optional[List[str]] = None,
    ) -> None:
        super().__init__(
            message,
            error_code=error_code,
            why_it_happened=why_it_happened,
            how_to_fix=how_to_fix,
        )
        self.court_id = court_id
        self.pattern = pattern


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigError(CourtsDBError):
    """
    Raised when configuration validation fails.

    Attributes
    ----------
    field : str
        The configuration field that failed validation
    value : any
        The invalid value
    """

    error_code = "CDB-CFG-001"
    why_it_happened = (
        "A configuration value is invalid. The courtsdb.yaml file or a "
        "COURTSDB_* environment variable may have an incorrect setting"
    )
    how_to_fix = [
        "Check courtsdb.yaml for syntax errors",
        "Verify the value type matches what's expected",
        "Unset COURTSDB_* environment variables to fall back to defaults",
    ]

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Any = None,
        *,
        error_code: Optional[str] = None,
        why_it_happened: Optional[str] = None,
        how_to_fix: Optional[List[str]] = None,
    ) -> None:
        super().__init__(
            message,
            error_code=error_code,
            why_it_happened=why_it_happened,
            how_to_fix=how_to_fix,
        )
        self.field = field
        self.value = value
