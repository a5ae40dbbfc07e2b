# src/braslog_api/domain/services/kpi_calendar.py
# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Calendar helpers for monthly KPI windows.

Purpose:
    Month arithmetic shared by the pivot and dashboard engines: parsing
    ``YYYY-MM`` strings, real month lengths, previous-month resolution, and
    inclusive day ranges.

Layer:
    domain/services
"""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date
from typing import Final

_MONTH_RE: Final[re.Pattern[str]] = re.compile(r"^(\d{4})-(\d{2})$")


@dataclass(frozen=True, slots=True, order=True)
class YearMonth:
    """A calendar month."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError("month must be within 1..12")
        if not 1 <= self.year <= 9999:
            raise ValueError("year must be within 1..9999")

    @classmethod
    def parse(cls, raw: str) -> YearMonth:
        """Parse a ``YYYY-MM`` string.

        Raises:
            ValueError: If the string is malformed or the month is out of range.
        """
        match = _MONTH_RE.match(raw.strip())
        if match is None:
            raise ValueError("month must use the YYYY-MM format")
        return cls(year=int(match.group(1)), month=int(match.group(2)))

    @classmethod
    def of(cls, day: date) -> YearMonth:
        """Return the month containing ``day``."""
        return cls(year=day.year, month=day.month)

    @property
    def days(self) -> int:
        """Number of days in the month."""
        return calendar.monthrange(self.year, self.month)[1]

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, self.days)

    def previous(self) -> YearMonth:
        """Return the month immediately preceding this one."""
        if self.month == 1:
            return YearMonth(year=self.year - 1, month=12)
        return YearMonth(year=self.year, month=self.month - 1)

    def day(self, day_of_month: int) -> date:
        """Return the date for ``day_of_month`` clamped to the month length."""
        return date(self.year, self.month, max(1, min(day_of_month, self.days)))

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


def days_in_month(year: int, month: int) -> int:
    """Return the number of days in ``year``/``month``."""
    return YearMonth(year=year, month=month).days
