"""Inflation adjustment of monetary amounts between years.

Compounds yearly inflation rates to move an amount from one year's price
level to another's, in either direction. Currency conversion factors
(e.g. DM -> EUR in 2002) are applied once when the adjustment crosses
into the year they belong to.
"""

import logging
from pathlib import Path
from typing import Dict, Mapping, Optional

import yaml

from .config import get_rules_dir
from .schemas import InflationTable

logger = logging.getLogger(__name__)

INFLATION_FILENAME = "inflation.yaml"


class OutOfRangeError(ValueError):
    """Raised when a year lies outside the inflation table's coverage."""

    def __init__(self, role: str, year: int, limit: str, bound: int):
        """
        Args:
            role: "start" or "end" - which argument of adjust() failed
            year: The offending year
            limit: "minimum" or "maximum" - which bound was violated
            bound: The bound's year
        """
        self.role = role
        self.year = year
        self.limit = limit
        self.bound = bound
        relation = "greater than or equal to" if limit == "minimum" else "less than or equal to"
        super().__init__(
            f"{role.capitalize()} year '{year}' must be {relation} {limit} year '{bound}'."
        )


class InflationAdjuster:
    """Converts amounts between the price levels of two years.

    The rate for year Y is the price change from Y-1 to Y, so a table with
    rates for 1999..2006 covers the price levels 1998..2006.
    """

    def __init__(self, rates: Mapping[int, float], conversions: Optional[Mapping[int, float]] = None):
        """
        Args:
            rates: Year -> annual inflation rate in percent, contiguous years
            conversions: Year -> currency conversion factor (sparse)

        Raises:
            pydantic.ValidationError: If rates are empty or not contiguous,
                or a conversion factor is not positive
        """
        table = InflationTable(rates=dict(rates), conversions=dict(conversions or {}))
        self._rates: Dict[int, float] = table.rates
        self._conversions: Dict[int, float] = table.conversions
        self._min_year = min(self._rates) - 1
        self._max_year = max(self._rates)

    @classmethod
    def from_table(cls, table: InflationTable) -> "InflationAdjuster":
        return cls(table.rates, table.conversions)

    def __repr__(self) -> str:
        return f"InflationAdjuster(min_year={self._min_year}, max_year={self._max_year})"

    @property
    def min_year(self) -> int:
        """Oldest price-level year that can be adjusted from or to."""
        return self._min_year

    @property
    def max_year(self) -> int:
        """Newest price-level year that can be adjusted from or to."""
        return self._max_year

    @property
    def conversions(self) -> Dict[int, float]:
        return dict(self._conversions)

    def covers(self, year: int) -> bool:
        return self._min_year <= year <= self._max_year

    def _check_range(self, from_year: int, to_year: int) -> None:
        # Name the arguments by role, the bounds by the older/newer endpoint
        if to_year >= from_year:
            older, newer = ("start", from_year), ("end", to_year)
        else:
            older, newer = ("end", to_year), ("start", from_year)

        if older[1] < self._min_year:
            raise OutOfRangeError(older[0], older[1], "minimum", self._min_year)
        if newer[1] > self._max_year:
            raise OutOfRangeError(newer[0], newer[1], "maximum", self._max_year)

    def adjust(self, amount: float, from_year: int, to_year: int) -> float:
        """Convert an amount from one year's price level to another's.

        Adjusting within the same year returns the amount unchanged, even if
        that year carries a currency conversion: conversion only applies when
        crossing into the year from an earlier one.

        Args:
            amount: Amount at from_year's price level
            from_year: Year the amount is denominated in
            to_year: Year to express the amount in

        Returns:
            Amount at to_year's price level, unrounded

        Raises:
            OutOfRangeError: If either year is outside the table
        """
        self._check_range(from_year, to_year)

        if from_year == to_year:
            return amount

        if to_year > from_year:
            for year in range(from_year + 1, to_year + 1):
                amount = amount * (1 + self._rates[year] / 100)
                if year in self._conversions:
                    amount = amount * self._conversions[year]
        else:
            for year in range(from_year, to_year, -1):
                if year in self._conversions:
                    amount = amount / self._conversions[year]
                amount = amount / (1 + self._rates[year] / 100)

        return amount

    def factor(self, from_year: int, to_year: int) -> float:
        """Multiplier taking from_year's price level to to_year's."""
        return self.adjust(1.0, from_year, to_year)


def load_inflation_table(path: Optional[Path] = None) -> InflationTable:
    """Load inflation rates and conversions from inflation.yaml.

    Args:
        path: File to read (default: inflation.yaml in the rules dir)

    Raises:
        FileNotFoundError: If the file does not exist
        pydantic.ValidationError: If the content is malformed
    """
    inflation_file = Path(path) if path else get_rules_dir() / INFLATION_FILENAME
    if not inflation_file.exists():
        raise FileNotFoundError(f"Inflation table not found: {inflation_file}")

    logger.debug(f"loading inflation table from {inflation_file}")
    with open(inflation_file, "r") as f:
        raw = yaml.safe_load(f) or {}

    return InflationTable.model_validate(raw)


def get_adjuster(path: Optional[Path] = None) -> InflationAdjuster:
    """Build an InflationAdjuster from the configured inflation table."""
    return InflationAdjuster.from_table(load_inflation_table(path))
