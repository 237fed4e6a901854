"""
Immutable value types: academic year and semantic software version.
"""
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union

from app.core.exceptions import ValidationError

MIN_ACADEMIC_YEAR = 2000
MAX_ACADEMIC_YEAR = 2100
ACADEMIC_YEAR_START_MONTH = 9


@dataclass(frozen=True)
class AcademicYear:
    """
    University year running from September 1st of `year` to August 31st of
    the following year. Stored on requests and attestations as "YYYY".
    """
    year: int
    start: date
    end: date

    @classmethod
    def from_year(cls, value: Union[str, int]) -> "AcademicYear":
        raw = str(value).strip()
        if raw.lower() == "current":
            return cls.current()

        if len(raw) != 4 or not (raw.isascii() and raw.isdigit()):
            raise ValidationError(
                f"Invalid academic year '{value}': expected a 4-digit year",
                field="academic_year",
            )

        year = int(raw)
        if year < MIN_ACADEMIC_YEAR or year > MAX_ACADEMIC_YEAR:
            raise ValidationError(
                f"Academic year must be between {MIN_ACADEMIC_YEAR} and {MAX_ACADEMIC_YEAR}, got {year}",
                field="academic_year",
            )

        start = date(year, ACADEMIC_YEAR_START_MONTH, 1)
        end = date(year + 1, 8, 31)
        if start >= end:
            raise ValidationError("Academic year start must precede its end", field="academic_year")
        return cls(year=year, start=start, end=end)

    @classmethod
    def current(cls, today: Optional[date] = None) -> "AcademicYear":
        today = today or datetime.utcnow().date()
        year = today.year if today.month >= ACADEMIC_YEAR_START_MONTH else today.year - 1
        return cls.from_year(str(year))

    def contains(self, value: Union[date, datetime]) -> bool:
        if isinstance(value, datetime):
            value = value.date()
        return self.start <= value <= self.end

    @property
    def code(self) -> str:
        """Storage form, e.g. "2025" """
        return str(self.year)

    def __str__(self) -> str:
        return f"{self.year}-{self.year + 1}"


@dataclass(frozen=True)
class SoftwareVersion:
    """major.minor.patch, compared numerically part by part"""
    major: int
    minor: int
    patch: int

    @classmethod
    def from_string(cls, value: str) -> "SoftwareVersion":
        parts = (value or "").strip().split(".")
        if len(parts) < 3:
            raise ValidationError(
                f"Invalid version '{value}': expected major.minor.patch",
                field="version",
            )

        numbers = []
        for part in parts[:3]:
            if not (part.isascii() and part.isdigit()):
                raise ValidationError(
                    f"Invalid version '{value}': '{part}' is not a non-negative integer",
                    field="version",
                )
            numbers.append(int(part))

        return cls(major=numbers[0], minor=numbers[1], patch=numbers[2])

    def _key(self):
        return (self.major, self.minor, self.patch)

    def compare(self, other: "SoftwareVersion") -> int:
        """-1, 0 or 1 as self is lower than, equal to or greater than other"""
        if self._key() < other._key():
            return -1
        if self._key() > other._key():
            return 1
        return 0

    def is_greater_than(self, other: "SoftwareVersion") -> bool:
        return self.compare(other) > 0

    def is_less_than(self, other: "SoftwareVersion") -> bool:
        return self.compare(other) < 0

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"
