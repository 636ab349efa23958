"""
Tests for pattern resolution and compilation.

Organization
------------
- TestRegexEngine: the default PatternEngine
- TestResolveCourtPatterns: template resolution per court
- TestCompileCourtPatterns: dropping invalid sources
- TestCompileAll: sequential and threaded compilation
"""

import logging

import pytest

from courtsdb.core.exceptions import UndefinedVariableError
from courtsdb.registry.compiler import (
    CompiledPattern,
    PatternEngine,
    RegexEngine,
    compile_all,
    compile_court_patterns,
    resolve_court_patterns,
)


class TestRegexEngine:
    """Tests for RegexEngine."""

    def test_satisfies_protocols(self):
        """Test the default engine and its patterns fit the protocols."""
        engine = RegexEngine()

        assert isinstance(engine, PatternEngine)
        assert isinstance(engine.compile("court"), CompiledPattern)

    def test_case_insensitive(self):
        """Test patterns ignore case."""
        pattern = RegexEngine().compile("supreme court")

        assert pattern.fullmatch("SUPREME Court")

    def test_search_returns_span(self):
        """Test search reports the leftmost match span."""
        pattern = RegexEngine().compile("circuit court")

        assert pattern.search("14th circuit court") == (5, 18)
        assert pattern.search("district court") is None

    def test_invalid_source_raises_value_error(self):
        """Test engine errors surface as ValueError."""
        with pytest.raises(ValueError):
            RegexEngine().compile("(unclosed")


class TestResolveCourtPatterns:
    """Tests for resolve_court_patterns."""

    def test_name_appended_last_and_escaped(self, make_court):
        """Test the display name is the final, literal pattern."""
        court = make_court("flsd", "District Court, S.D. Florida", regex=["s\\.d\\. fla"])

        sources = resolve_court_patterns(court, {})

        assert sources == ("s\\.d\\. fla", r"District\ Court,\ S\.D\.\ Florida")

    def test_variables_and_ordinals_resolved(self, make_court):
        """Test templates are fully resolved."""
        court = make_court("x", regex=["${1-2} ${ct}"])

        sources = resolve_court_patterns(court, {"ct": "court"})

        assert sources[0] == "(first|second) court"

    def test_sources_folded(self, make_court):
        """Test non-ASCII pattern text is folded like query text."""
        court = make_court("prapp", "Tribunal de Apelaciones", regex=["tribunal dé apelaciones"])

        sources = resolve_court_patterns(court, {})

        assert sources[0] == "tribunal de apelaciones"

    def test_name_folded_before_escaping(self, make_court):
        """Test full-width punctuation in a name folds to escaped literals."""
        court = make_court("b", "Court （Special）")

        sources = resolve_court_patterns(court, {})

        assert sources[-1] == r"Court\ \(Special\)"
        assert RegexEngine().compile(sources[-1]).fullmatch("court (special)")

    def test_undefined_variable_raises(self, make_court):
        """Test an unknown variable fails resolution."""
        court = make_court("x", regex=["${nope}"])

        with pytest.raises(UndefinedVariableError):
            resolve_court_patterns(court, {})


class TestCompileCourtPatterns:
    """Tests for compile_court_patterns."""

    def test_bad_source_dropped(self, caplog):
        """Test an invalid source is dropped and reported."""
        with caplog.at_level(logging.WARNING, logger="courtsdb.registry.compiler"):
            result = compile_court_patterns(
                "x", ["(broken", "good court", r"x\ court"], RegexEngine()
            )

        assert [p.source for p in result.patterns] == ["good court", r"x\ court"]
        assert len(result.errors) == 1
        assert result.errors[0].court_id == "x"
        assert result.errors[0].pattern == "(broken"
        assert "Dropping pattern" in caplog.text


class TestCompileAll:
    """Tests for compile_all."""

    @pytest.fixture
    def resolved(self):
        return {f"court{i}": (f"court number {i}", "[") for i in range(10)}

    def test_preserves_order(self, resolved):
        """Test results follow the input order."""
        results = compile_all(resolved)

        assert list(results) == list(resolved)

    def test_threaded_matches_sequential(self, resolved):
        """Test a thread pool produces the same result."""
        sequential = compile_all(resolved, workers=1)
        threaded = compile_all(resolved, workers=4)

        assert list(threaded) == list(sequential)
        for court_id, result in threaded.items():
            assert [p.source for p in result.patterns] == [
                p.source for p in sequential[court_id].patterns
            ]
            assert len(result.errors) == 1
