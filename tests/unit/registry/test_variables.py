"""
Tests for variable expansion.

Organization
------------
- TestOrdinalAlternation: ordinal word groups
- TestExpandOrdinalRanges: ${n-m} placeholders in templates
- TestPlaceAlternation: place list variables
- TestVariableExpander: recursive named variable expansion
- TestSubstituteVariables: record template resolution
"""

import logging
import re

import pytest

from courtsdb.core.exceptions import (
    OrdinalRangeError,
    RegistrySchemaError,
    UndefinedVariableError,
    VariableCycleError,
)
from courtsdb.registry.variables import (
    ORDINALS,
    VariableExpander,
    expand_ordinal_ranges,
    find_references,
    ordinal_alternation,
    place_alternation,
    substitute_variables,
)


class TestOrdinalAlternation:
    """Tests for ordinal_alternation."""

    def test_range(self):
        """Test a middle range of ordinal words."""
        assert ordinal_alternation(2, 4) == "(second|third|fourth)"

    def test_single(self):
        """Test a one-word range."""
        assert ordinal_alternation(9, 9) == "(ninth)"

    def test_table_has_twenty_words(self):
        """Test the table runs first through twentieth."""
        assert len(ORDINALS) == 20
        assert ORDINALS[0] == "first"
        assert ORDINALS[-1] == "twentieth"

    def test_upper_bound_clamped(self, caplog):
        """Test an upper bound past the table is clamped with a warning."""
        with caplog.at_level(logging.WARNING, logger="courtsdb.registry.variables"):
            result = ordinal_alternation(19, 41)

        assert result == "(nineteenth|twentieth)"
        assert "clamped" in caplog.text

    @pytest.mark.parametrize("start,end", [(0, 3), (5, 2), (21, 25)])
    def test_invalid_bounds(self, start, end):
        """Test n < 1, n > m and n past the table are errors."""
        with pytest.raises(OrdinalRangeError):
            ordinal_alternation(start, end)


class TestExpandOrdinalRanges:
    """Tests for expand_ordinal_ranges."""

    def test_replaces_placeholder(self):
        """Test ${n-m} is replaced in place."""
        result = expand_ordinal_ranges("${1-3} district")

        assert result == "(first|second|third) district"

    def test_named_placeholders_untouched(self):
        """Test ${name} references are left for variable substitution."""
        assert expand_ordinal_ranges("${ct} of ${2-2}") == "${ct} of (second)"

    def test_spaces_tolerated(self):
        """Test ${ 1 - 2 } is read as a range."""
        assert expand_ordinal_ranges("${ 1 - 2 }") == "(first|second)"

    @pytest.mark.parametrize("template", ["${3-}", "${12}", "${1-2-3}", "${-4}"])
    def test_malformed(self, template):
        """Test digit-and-hyphen bodies that are not n-m are errors."""
        with pytest.raises(OrdinalRangeError) as exc_info:
            expand_ordinal_ranges(template)

        assert exc_info.value.placeholder == template

    def test_expanded_range_matches_words(self):
        """Test the generated group matches each ordinal in range."""
        regex = re.compile(expand_ordinal_ranges("^${1-6} district$"))

        assert regex.match("fourth district")
        assert not regex.match("seventh district")


class TestPlaceAlternation:
    """Tests for place_alternation."""

    def test_builds_group(self):
        """Test entries are OR-combined."""
        assert place_alternation("states", ["Ohio", "Iowa"]) == "(Ohio|Iowa)"

    def test_entries_escaped(self):
        """Test entries are literals, not regex."""
        result = place_alternation("towns", ["St. Louis", "A+B"])

        assert result == r"(St\.\ Louis|A\+B)"

    def test_entries_not_template_expanded(self):
        """Test ${...} inside an entry stays literal."""
        result = place_alternation("odd", ["${ct}"])

        assert "${ct}" not in result
        assert re.fullmatch(result, "${ct}")

    def test_blank_entries_skipped(self):
        """Test blank lines don't create empty alternatives."""
        assert place_alternation("states", ["Ohio", "", "  "]) == "(Ohio)"

    def test_empty_list_rejected(self):
        """Test an empty list raises instead of matching everything."""
        with pytest.raises(RegistrySchemaError):
            place_alternation("states", ["", " "])


class TestFindReferences:
    """Tests for find_references."""

    def test_lists_named_references_only(self):
        """Test ordinal placeholders are not variable references."""
        assert find_references("${ct} of ${1-3} ${usa}") == ["ct", "usa"]


class TestVariableExpander:
    """Tests for VariableExpander."""

    def test_nested_references(self):
        """Test variables referencing variables are fully expanded."""
        expander = VariableExpander(
            {"ct": "(court|ct\\.?)", "fed_app": "${ct} of appeals"}
        )

        assert expander.resolve("fed_app") == "(court|ct\\.?) of appeals"

    def test_expand_all_has_no_placeholders(self):
        """Test every expanded value is free of ${...}."""
        expander = VariableExpander(
            {"a": "${b} ${c}", "b": "${c}!", "c": "x"},
            places={"states": ["Ohio"]},
        )

        expanded = expander.expand_all()

        assert expanded == {"a": "x! x", "b": "x!", "c": "x", "states": "(Ohio)"}
        assert not any("${" in value for value in expanded.values())

    def test_ordinals_inside_variables(self):
        """Test ${n-m} placeholders in variable values are expanded."""
        expander = VariableExpander({"ord": "${1-2} circuit"})

        assert expander.resolve("ord") == "(first|second) circuit"

    def test_place_list_referenced(self):
        """Test place lists are usable as variables."""
        expander = VariableExpander(
            {"county_ct": "${counties} county court"},
            places={"counties": ["Fayette", "Adams"]},
        )

        assert expander.resolve("county_ct") == "(Fayette|Adams) county court"

    def test_undefined_reference(self):
        """Test a reference to an unknown name names both ends."""
        expander = VariableExpander({"a": "${missing}"})

        with pytest.raises(UndefinedVariableError) as exc_info:
            expander.expand_all()

        assert exc_info.value.name == "missing"
        assert exc_info.value.referenced_by == "a"

    def test_direct_cycle(self):
        """Test a variable referencing itself is a cycle."""
        expander = VariableExpander({"a": "x${a}"})

        with pytest.raises(VariableCycleError) as exc_info:
            expander.expand_all()

        assert exc_info.value.cycle == ["a", "a"]

    def test_transitive_cycle(self):
        """Test the reported path covers the whole loop."""
        expander = VariableExpander({"a": "${b}", "b": "${c}", "c": "${a}"})

        with pytest.raises(VariableCycleError) as exc_info:
            expander.expand_all()

        assert exc_info.value.cycle == ["a", "b", "c", "a"]
        assert "a -> b -> c -> a" in str(exc_info.value)

    def test_diamond_is_not_a_cycle(self):
        """Test two paths to the same variable are fine."""
        expander = VariableExpander(
            {"top": "${left}${right}", "left": "${base}", "right": "${base}", "base": "z"}
        )

        assert expander.resolve("top") == "zz"

    def test_non_string_value_rejected(self):
        """Test variable values must be strings."""
        with pytest.raises(RegistrySchemaError):
            VariableExpander({"a": 5})

    def test_place_overrides_variable(self, caplog):
        """Test a place list wins over a variable with the same name."""
        with caplog.at_level(logging.WARNING, logger="courtsdb.registry.variables"):
            expander = VariableExpander({"states": "x"}, places={"states": ["Ohio"]})

        assert expander.resolve("states") == "(Ohio)"
        assert "overrides" in caplog.text

    def test_container_protocol(self):
        """Test membership and length cover variables and places."""
        expander = VariableExpander({"a": "x"}, places={"b": ["y"]})

        assert "a" in expander
        assert "b" in expander
        assert "c" not in expander
        assert len(expander) == 2


class TestSubstituteVariables:
    """Tests for substitute_variables."""

    def test_single_pass(self):
        """Test named references are replaced from an expanded table."""
        result = substitute_variables("${ct} of ${pr}", {"ct": "court", "pr": "puerto rico"})

        assert result == "court of puerto rico"

    def test_ordinals_first(self):
        """Test ordinal ranges are rewritten before named references."""
        result = substitute_variables("${1-2} ${ct}", {"ct": "court"})

        assert result == "(first|second) court"

    def test_undefined_names_court(self):
        """Test the error names the owning court."""
        with pytest.raises(UndefinedVariableError) as exc_info:
            substitute_variables("${nope}", {}, owner="scotus")

        assert exc_info.value.referenced_by == "scotus"
        assert "scotus" in str(exc_info.value)
