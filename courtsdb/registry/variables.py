"""Variable expansion for court pattern templates.

Court patterns are written as templates. Two kinds of placeholder appear in
them:

* ``${name}``: a named regex fragment from the variable table
  (``variables.json``) or from a place list (``places/<name>.txt``).
  Variables may reference other variables.
* ``${n-m}``: an ordinal range, replaced by the alternation of the ordinal
  words n..m, e.g. ``${2-4}`` -> ``(second|third|fourth)``.

Ordinal ranges are positional, so they are rewritten before any named
substitution. Named variables are expanded once, up front, by
VariableExpander; record templates then need a single substitution pass.
"""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from courtsdb.core.exceptions import (
    OrdinalRangeError,
    RegistrySchemaError,
    UndefinedVariableError,
    VariableCycleError,
)
from courtsdb.core.logging import get_logger

logger = get_logger(__name__)

ORDINALS: Tuple[str, ...] = (
    "first",
    "second",
    "third",
    "fourth",
    "fifth",
    "sixth",
    "seventh",
    "eighth",
    "ninth",
    "tenth",
    "eleventh",
    "twelfth",
    "thirteenth",
    "fourteenth",
    "fifteenth",
    "sixteenth",
    "seventeenth",
    "eighteenth",
    "nineteenth",
    "twentieth",
)

_TOKEN_RE = re.compile(r"\$\{([^{}]+)\}")
_ORDINAL_RE = re.compile(r"^(\d+)-(\d+)$")
# A placeholder body of nothing but digits, hyphens and spaces is ordinal
# syntax, valid or not; it never names a variable.
_ORDINAL_LIKE_RE = re.compile(r"^[\d\s-]+$")


def ordinal_alternation(start: int, end: int, placeholder: str = "") -> str:
    """Build ``(word|word|...)`` for ordinal positions start..end, 1-indexed.

    An upper bound past the ordinal table is clamped to the table.

    Raises:
        OrdinalRangeError: If start < 1, start > end, or start is past the table.
    """
    placeholder = placeholder or f"${{{start}-{end}}}"
    if start < 1 or start > end:
        raise OrdinalRangeError(
            f"Invalid ordinal range {placeholder}: bounds must satisfy 1 <= n <= m",
            placeholder=placeholder,
        )
    if start > len(ORDINALS):
        raise OrdinalRangeError(
            f"Invalid ordinal range {placeholder}: only {len(ORDINALS)} "
            "ordinal words are known",
            placeholder=placeholder,
        )
    if end > len(ORDINALS):
        logger.warning(
            "Ordinal range clamped to known words",
            placeholder=placeholder,
            limit=len(ORDINALS),
        )
    return "(" + "|".join(ORDINALS[start - 1 : end]) + ")"


def expand_ordinal_ranges(template: str) -> str:
    """Replace every ``${n-m}`` placeholder in a template.

    Named placeholders are left untouched.

    Raises:
        OrdinalRangeError: On malformed ordinal syntax such as ``${3-}``.
    """

    def replace(match: re.Match) -> str:
        body = match.group(1).strip()
        if not _ORDINAL_LIKE_RE.match(body):
            return match.group(0)
        ordinal = _ORDINAL_RE.match(body.replace(" ", ""))
        if ordinal is None:
            raise OrdinalRangeError(
                f"Malformed ordinal range {match.group(0)}: expected ${{n-m}}",
                placeholder=match.group(0),
            )
        return ordinal_alternation(
            int(ordinal.group(1)), int(ordinal.group(2)), match.group(0)
        )

    return _TOKEN_RE.sub(replace, template)


def place_alternation(name: str, entries: Iterable[str]) -> str:
    """Build the ``(entry1|entry2|...)`` variable for a place list.

    Entries are literal names, so they are regex-escaped.

    Raises:
        RegistrySchemaError: If the list has no entries.
    """
    cleaned = [e.strip() for e in entries if e and e.strip()]
    if not cleaned:
        raise RegistrySchemaError(f"Place list '{name}' has no entries")
    return "(" + "|".join(re.escape(e) for e in cleaned) + ")"


def find_references(template: str) -> List[str]:
    """Names referenced by ``${name}`` placeholders, in order of appearance."""
    return [
        m.group(1)
        for m in _TOKEN_RE.finditer(template)
        if not _ORDINAL_LIKE_RE.match(m.group(1).strip())
    ]


class VariableExpander:
    """Resolve a variable table into literal regex fragments.

    Example:
        >>> expander = VariableExpander(
        ...     {"court": "(court|ct\\\\.?)", "sc": "supreme ${court}"},
        ...     places={"states": ["Ohio", "Iowa"]},
        ... )
        >>> expander.resolve("sc")
        'supreme (court|ct\\\\.?)'
    """

    def __init__(
        self,
        variables: Mapping[str, str],
        places: Optional[Mapping[str, Sequence[str]]] = None,
    ) -> None:
        self._raw: Dict[str, str] = {}
        for name, template in variables.items():
            if not isinstance(template, str):
                raise RegistrySchemaError(
                    f"Variable '{name}' must be a string, got {type(template).__name__}"
                )
            self._raw[name] = template
        for name, entries in (places or {}).items():
            if name in self._raw:
                logger.warning("Place list overrides variable", name=name)
            self._raw[name] = place_alternation(name, entries)
        self._resolved: Dict[str, str] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._raw

    def __len__(self) -> int:
        return len(self._raw)

    def expand_all(self) -> Dict[str, str]:
        """Resolve every variable.

        Raises:
            UndefinedVariableError: A variable references an unknown name.
            VariableCycleError: Variables reference each other in a loop.
            OrdinalRangeError: A variable holds a malformed ordinal range.
        """
        for name in self._raw:
            self.resolve(name)
        return dict(self._resolved)

    def resolve(self, name: str, chain: Tuple[str, ...] = ()) -> str:
        """Fully expand one variable.

        ``chain`` holds the names currently being expanded above this call;
        meeting one of them again means the references loop.
        """
        if name in self._resolved:
            return self._resolved[name]
        if name in chain:
            cycle = list(chain[chain.index(name) :]) + [name]
            raise VariableCycleError(
                "Variable reference cycle: " + " -> ".join(cycle),
                cycle=cycle,
            )
        if name not in self._raw:
            owner = chain[-1] if chain else None
            where = f" (referenced by variable '{owner}')" if owner else ""
            raise UndefinedVariableError(
                f"Undefined variable '{name}'{where}",
                name=name,
                referenced_by=owner,
            )

        template = expand_ordinal_ranges(self._raw[name])
        inner = chain + (name,)
        value = _TOKEN_RE.sub(lambda m: self.resolve(m.group(1), inner), template)
        self._resolved[name] = value
        return value


def substitute_variables(
    template: str, variables: Mapping[str, str], owner: Optional[str] = None
) -> str:
    """Resolve a record template against an already expanded table.

    Ordinal ranges are rewritten first, then every ``${name}`` is replaced
    in a single pass.

    Args:
        template: Pattern template from a court record
        variables: Output of VariableExpander.expand_all()
        owner: Court id, used in error messages

    Raises:
        UndefinedVariableError: If the template names an unknown variable.
        OrdinalRangeError: If the template holds a malformed ordinal range.
    """
    text = expand_ordinal_ranges(template)

    def replace(match: re.Match) -> str:
        name = match.group(1)
        if name not in variables:
            where = f" in patterns of court '{owner}'" if owner else ""
            raise UndefinedVariableError(
                f"Undefined variable '{name}'{where}",
                name=name,
                referenced_by=owner,
            )
        return variables[name]

    return _TOKEN_RE.sub(replace, text)
