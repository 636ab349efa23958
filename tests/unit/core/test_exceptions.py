"""
Tests for Exception Hierarchy.

This module tests the custom exception classes used throughout courtsdb.
All exceptions should inherit from CourtsDBError.

Organization
------------
- TestBaseException: CourtsDBError
- TestLoadExceptions: LoadError and its subclasses
- TestPatternCompileError: PatternCompileError
- TestConfigError: ConfigError
- TestRootCause: get_root_cause helper
"""

import pytest

from courtsdb.core.exceptions import (
    ConfigError,
    CourtsDBError,
    LoadError,
    OrdinalRangeError,
    ParentReferenceError,
    PatternCompileError,
    RegistrySchemaError,
    UndefinedVariableError,
    VariableCycleError,
    get_root_cause,
)


class TestBaseException:
    """Tests for CourtsDBError base exception."""

    def test_create_base_exception(self):
        """Test creating base CourtsDBError."""
        error = CourtsDBError("test error")

        assert str(error) == "test error"
        assert error.user_message == "test error"
        assert error.error_code == "CDB-ERR-000"

    def test_override_guidance(self):
        """Test error code and guidance can be overridden per instance."""
        error = CourtsDBError(
            "custom",
            error_code="CDB-TEST-001",
            why_it_happened="because",
            how_to_fix=["do this"],
        )

        assert error.error_code == "CDB-TEST-001"
        assert error.why_it_happened == "because"
        assert error.how_to_fix == ["do this"]

    def test_override_does_not_leak_to_class(self):
        """Test per-instance overrides leave the class defaults alone."""
        CourtsDBError("custom", error_code="CDB-TEST-002")

        assert CourtsDBError("plain").error_code == "CDB-ERR-000"


class TestLoadExceptions:
    """Tests for fatal registry construction errors."""

    @pytest.mark.parametrize(
        "exc_class",
        [
            UndefinedVariableError,
            VariableCycleError,
            OrdinalRangeError,
            ParentReferenceError,
            RegistrySchemaError,
        ],
    )
    def test_subclasses_are_load_errors(self, exc_class):
        """Test every load failure can be caught as LoadError."""
        with pytest.raises(LoadError):
            raise exc_class("boom")

    def test_load_error_is_courtsdb_error(self):
        """Test LoadError inherits from the base class."""
        assert issubclass(LoadError, CourtsDBError)

    def test_undefined_variable_attributes(self):
        """Test UndefinedVariableError carries the name and referrer."""
        error = UndefinedVariableError(
            "Undefined variable 'state'", name="state", referenced_by="scotus"
        )

        assert error.name == "state"
        assert error.referenced_by == "scotus"
        assert error.error_code == "CDB-LOAD-001"

    def test_variable_cycle_attributes(self):
        """Test VariableCycleError keeps the cycle path."""
        error = VariableCycleError("cycle", cycle=("a", "b", "a"))

        assert error.cycle == ["a", "b", "a"]
        assert error.error_code == "CDB-LOAD-002"

    def test_ordinal_range_attributes(self):
        """Test OrdinalRangeError keeps the placeholder text."""
        error = OrdinalRangeError("bad range", placeholder="${3-1}")

        assert error.placeholder == "${3-1}"
        assert error.error_code == "CDB-LOAD-003"

    def test_parent_reference_attributes(self):
        """Test ParentReferenceError names the court and parent."""
        error = ParentReferenceError("missing", court_id="ca1", parent="nowhere")

        assert error.court_id == "ca1"
        assert error.parent == "nowhere"
        assert error.error_code == "CDB-LOAD-004"

    def test_guidance_present(self):
        """Test load errors explain themselves."""
        error = RegistrySchemaError("bad file")

        assert error.why_it_happened
        assert len(error.how_to_fix) > 0


class TestPatternCompileError:
    """Tests for PatternCompileError."""

    def test_not_a_load_error(self):
        """Test compile failures are recoverable, not load errors."""
        error = PatternCompileError("bad", court_id="x", pattern="(")

        assert not isinstance(error, LoadError)
        assert isinstance(error, CourtsDBError)
        assert error.court_id == "x"
        assert error.pattern == "("


class TestConfigError:
    """Tests for ConfigError."""

    def test_attributes(self):
        """Test ConfigError carries the field and value."""
        error = ConfigError("bad level", field="log_level", value="LOUD")

        assert error.field == "log_level"
        assert error.value == "LOUD"
        assert error.error_code == "CDB-CFG-001"


class TestRootCause:
    """Tests for get_root_cause helper."""

    def test_no_chain(self):
        """Test an exception without a cause is its own root."""
        error = ValueError("alone")

        assert get_root_cause(error) is error

    def test_follows_cause_chain(self):
        """Test the innermost cause is returned."""
        root = FileNotFoundError("courts.json")
        try:
            try:
                raise root
            except FileNotFoundError as e:
                raise RegistrySchemaError("Registry file not found") from e
        except RegistrySchemaError as error:
            assert error.get_root_cause() is root
