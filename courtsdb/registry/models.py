"""
Court Registry Models.

Typed records for the court registry. Source JSON keys from the courts-db
data format (``regex``, ``type``, ``dates``) are accepted as aliases for the
field names used in code (``patterns``, ``category``, ``active_ranges``).

Records are frozen: the only mutation ever applied is the parent
inheritance pass in the loader, which builds new records with
``model_copy(update=...)``.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

BANKRUPTCY = "bankruptcy"


def _coerce_date(value: Any) -> Any:
    """Accept ISO dates and datetimes; keep only the calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return None
        return stripped.split("T", 1)[0].split(" ", 1)[0]
    return value


class DateRange(BaseModel):
    """A period during which a court existed. Either bound may be open."""

    model_config = ConfigDict(frozen=True)

    start: Optional[date] = None
    end: Optional[date] = None

    @field_validator("start", "end", mode="before")
    @classmethod
    def _parse_bound(cls, value: Any) -> Any:
        return _coerce_date(value)

    def contains(self, when: date) -> bool:
        """True if ``when`` falls inside this range, bounds inclusive."""
        if isinstance(when, datetime):
            when = when.date()
        if self.start is not None and when < self.start:
            return False
        if self.end is not None and when > self.end:
            return False
        return True


class CourtRecord(BaseModel):
    """One court in the registry."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    patterns: List[str] = Field(default_factory=list, alias="regex")
    category: Optional[str] = Field(default=None, alias="type")
    location: Optional[str] = None
    jurisdiction: Optional[str] = None
    parent: Optional[str] = None
    active_ranges: List[DateRange] = Field(default_factory=list, alias="dates")
    examples: List[str] = Field(default_factory=list)

    # Descriptive fields; carried for display only.
    level: Optional[str] = None
    system: Optional[str] = None
    citation_string: Optional[str] = None
    name_abbreviation: Optional[str] = None
    court_url: Optional[str] = None
    case_types: List[str] = Field(default_factory=list)

    @field_validator("parent", "category", "location", "jurisdiction", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def is_bankruptcy(self) -> bool:
        return self.category == BANKRUPTCY

    def is_active_on(self, when: date) -> bool:
        """True if any of the court's active ranges contains ``when``."""
        return any(r.contains(when) for r in self.active_ranges)

    def matches_location(self, location: str) -> bool:
        """Case-insensitive substring test over location, name and jurisdiction."""
        needle = location.lower()
        for label in (self.location, self.name, self.jurisdiction):
            if label and needle in label.lower():
                return True
        return False

    def to_dict(self) -> dict:
        """Serialize using the source data keys."""
        return self.model_dump(mode="json", by_alias=True)


@dataclass(frozen=True)
class Candidate:
    """A provisional match produced by a single matcher run."""

    court_id: str
    matched_text: str


@dataclass(frozen=True)
class ExampleFailure:
    """An example string that did not find the court it belongs to."""

    court_id: str
    example: str
    found: tuple

    def __str__(self) -> str:
        found = ", ".join(self.found) or "nothing"
        return f"{self.court_id}: {self.example!r} matched {found}"
