"""Five-zone income tax function (§32a EStG).

Evaluates tax amount, average rate and marginal rate for a taxable income
(zvE) from one year's parameters. Uses the "mathematically equivalent form"
where every zone is written relative to its own lower threshold plus the
tax already owed there:

    zone 0   zvE <= E0        0
    zone 1   E0 < zvE <= E1   sg1*(zvE-E0) + p1*(zvE-E0)^2
    zone 2   E1 < zvE <= E2   sg2*(zvE-E1) + p2*(zvE-E1)^2 + S1
    zone 3   E2 < zvE <= E3   sg3*(zvE-E2) + S2
    zone 4   zvE > E3         sg4*(zvE-E3) + S3

Reference: https://de.wikipedia.org/wiki/Einkommensteuer_(Deutschland)#Mathematische_Eigenschaften_der_Steuerfunktion
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple

from ..schemas import TaxScheduleParams


# Statutory S constants are rounded to cents, so the derived values drift
# by a few cents from them.
AMOUNT_TOLERANCE = 1.00
RATE_TOLERANCE = 0.001


class InvalidInputError(ValueError):
    """Raised when an income or sampling bound is outside the valid domain."""
    pass


class Zone(Enum):
    """Income zones of the tax function, in ascending order."""

    NULL = 0
    PROGRESSION_1 = 1
    PROGRESSION_2 = 2
    PROPORTIONAL_1 = 3
    PROPORTIONAL_2 = 4


def _check_income(income: float) -> None:
    if math.isnan(income):
        raise InvalidInputError("Taxable income must be a number")
    if income < 0:
        raise InvalidInputError(f"Taxable income cannot be negative: {income}")


def continuity_constants(params: TaxScheduleParams) -> Tuple[float, float, float]:
    """Derive the S1, S2, S3 that make the tax function continuous.

    Each constant is the previous one plus the full tax of the zone below.
    """
    d1 = params.e1 - params.e0
    d2 = params.e2 - params.e1
    d3 = params.e3 - params.e2
    s1 = params.sg1 * d1 + params.p1 * d1 ** 2
    s2 = s1 + params.sg2 * d2 + params.p2 * d2 ** 2
    s3 = s2 + params.sg3 * d3
    return s1, s2, s3


@dataclass
class ScheduleValidationResult:
    """Result of checking a schedule's parameters for internal consistency."""

    year: int
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


class TaxSchedule:
    """Income tax function for one year.

    Holds only the immutable parameter record; every method is a pure
    function of it and the income passed in.
    """

    def __init__(self, params: TaxScheduleParams):
        self._params = params

    def __repr__(self) -> str:
        return f"TaxSchedule(year={self.year})"

    @property
    def params(self) -> TaxScheduleParams:
        return self._params

    @property
    def year(self) -> int:
        """Year the schedule applies to."""
        return self._params.year

    def thresholds(self) -> List[float]:
        """Thresholds (Eckwerte) of the taxable income.

        Note: thresholds are "up to", not "from".
        """
        p = self._params
        return [p.e0, p.e1, p.e2, p.e3]

    def initial_marginal_rates(self) -> List[float]:
        """Marginal rates (Grenzsteuersätze) at the start of zones 1 to 4."""
        p = self._params
        return [p.sg1, p.sg2, p.sg3, p.sg4]

    def zone(self, income: float) -> Zone:
        """Select the zone an income falls into.

        Raises:
            InvalidInputError: If income is negative or NaN
        """
        _check_income(income)
        p = self._params

        if income <= p.e0:
            return Zone.NULL
        if p.e0 < income <= p.e1:
            return Zone.PROGRESSION_1
        if p.e1 < income <= p.e2:
            return Zone.PROGRESSION_2
        if p.e2 < income <= p.e3:
            return Zone.PROPORTIONAL_1
        if income > p.e3:
            return Zone.PROPORTIONAL_2

        raise AssertionError(f"unreachable: no zone for income {income}")

    def tax_amount(self, income: float) -> float:
        """Calculate the tax owed (Steuerbetrag).

        Args:
            income: Taxable income (zvE)

        Returns:
            Tax amount, unrounded

        Raises:
            InvalidInputError: If income is negative
        """
        zone = self.zone(income)
        p = self._params

        if zone is Zone.NULL:
            return 0.0
        if zone is Zone.PROGRESSION_1:
            return p.sg1 * (income - p.e0) + (income - p.e0) ** 2 * p.p1
        if zone is Zone.PROGRESSION_2:
            return p.sg2 * (income - p.e1) + (income - p.e1) ** 2 * p.p2 + p.s1
        if zone is Zone.PROPORTIONAL_1:
            return p.sg3 * (income - p.e2) + p.s2
        return p.sg4 * (income - p.e3) + p.s3

    def average_rate(self, income: float) -> float:
        """Calculate the average tax rate (Durchschnittssteuersatz).

        Returns 0 for zero income.

        Raises:
            InvalidInputError: If income is negative
        """
        _check_income(income)
        if income == 0:
            return 0.0
        return self.tax_amount(income) / income

    def marginal_rate(self, income: float) -> float:
        """Calculate the marginal tax rate (Grenzsteuersatz).

        Derivative of tax_amount within each zone; the quadratic term of the
        progression zones contributes twice its factor.

        Raises:
            InvalidInputError: If income is negative
        """
        zone = self.zone(income)
        p = self._params

        if zone is Zone.NULL:
            return 0.0
        if zone is Zone.PROGRESSION_1:
            return p.sg1 + (income - p.e0) * p.p1 * 2
        if zone is Zone.PROGRESSION_2:
            return p.sg2 + (income - p.e1) * p.p2 * 2
        if zone is Zone.PROPORTIONAL_1:
            return p.sg3
        return p.sg4

    def validate(
        self,
        amount_tolerance: float = AMOUNT_TOLERANCE,
        rate_tolerance: float = RATE_TOLERANCE,
    ) -> ScheduleValidationResult:
        """Check the parameters for continuity and monotonicity.

        Evaluation never calls this; a schedule with issues still evaluates,
        it just produces a discontinuous or non-monotonic curve.

        Args:
            amount_tolerance: Allowed gap between S1..S3 and the derived values
            rate_tolerance: Allowed jump in the marginal rate at E1 and E2

        Returns:
            ScheduleValidationResult with errors (broken invariants) and
            warnings (within tolerance but not exact)
        """
        p = self._params
        result = ScheduleValidationResult(year=p.year)

        # Tax owed at the thresholds
        for name, given, derived in zip(("s1", "s2", "s3"), (p.s1, p.s2, p.s3), continuity_constants(p)):
            gap = abs(given - derived)
            if gap > amount_tolerance:
                result.errors.append(
                    f"{name} ({given:.2f}) does not match continuous value ({derived:.2f})"
                )
            elif gap > 0.005:
                result.warnings.append(
                    f"{name} ({given:.2f}) differs from continuous value ({derived:.2f}) by {gap:.2f}"
                )

        if min(p.s1, p.s2, p.s3) < 0:
            result.errors.append("tax owed at thresholds cannot be negative")
        if not (p.s1 <= p.s2 <= p.s3):
            result.errors.append(f"tax owed must not decrease: s1={p.s1}, s2={p.s2}, s3={p.s3}")

        # Marginal rates
        rates = self.initial_marginal_rates()
        if any(r < 0 or r > 1 for r in rates):
            result.errors.append(f"marginal rates must lie within [0, 1]: {rates}")
        if rates != sorted(rates):
            result.errors.append(f"marginal rates must not decrease: {rates}")

        # Marginal rate continuity where the linear zones end
        end_of_zone_1 = p.sg1 + 2 * p.p1 * (p.e1 - p.e0)
        end_of_zone_2 = p.sg2 + 2 * p.p2 * (p.e2 - p.e1)
        for label, left, right in (("e1", end_of_zone_1, p.sg2), ("e2", end_of_zone_2, p.sg3)):
            if abs(left - right) > rate_tolerance:
                result.errors.append(
                    f"marginal rate jumps at {label}: {left:.4f} -> {right:.4f}"
                )

        return result
