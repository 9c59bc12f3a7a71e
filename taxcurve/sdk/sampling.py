"""Curve sampling for charts.

Builds (income, value) point sequences from a TaxSchedule and re-expresses
them at another year's price level. The marginal rate is piecewise linear
with four breakpoints, so its curve is built from the exact anchor points
instead of dense sampling.
"""

import csv
import io
from dataclasses import dataclass, replace
from typing import List, Literal, Optional

from .inflation import InflationAdjuster
from .taxes.schedule import InvalidInputError, TaxSchedule


CurveKind = Literal["tax_amount", "average_rate", "marginal_rate"]

# Income beyond the top threshold shown on charts
DEFAULT_BUFFER = 100_000
DEFAULT_STEPS = 1000


@dataclass(frozen=True)
class CurvePoint:
    """A single chart point."""

    income: float
    value: float
    kind: CurveKind


def _default_end(schedule: TaxSchedule, end: Optional[float]) -> float:
    e3 = schedule.thresholds()[3]
    if end is None:
        return e3 + DEFAULT_BUFFER
    if end < e3:
        raise InvalidInputError(f"End income ({end}) must be at least the top threshold ({e3})")
    return end


def sample_curve(
    schedule: TaxSchedule,
    kind: CurveKind,
    start: float = 0,
    end: Optional[float] = None,
    steps: int = DEFAULT_STEPS,
) -> List[CurvePoint]:
    """Sample a schedule function at evenly spaced incomes.

    Args:
        schedule: Schedule to evaluate
        kind: Which function to sample
        start: First income, between 0 and the tax-free threshold E0
        end: Last income, at least the top threshold E3 (default: E3 + 100,000)
        steps: Number of intervals; steps + 1 points are returned

    Returns:
        Points from start to end inclusive

    Raises:
        InvalidInputError: If start, end or steps are out of bounds
    """
    e0 = schedule.thresholds()[0]
    if not 0 <= start <= e0:
        raise InvalidInputError(f"Start income ({start}) must lie between 0 and {e0}")
    end = _default_end(schedule, end)
    if steps < 1:
        raise InvalidInputError(f"Steps must be at least 1, got {steps}")

    evaluate = {
        "tax_amount": schedule.tax_amount,
        "average_rate": schedule.average_rate,
        "marginal_rate": schedule.marginal_rate,
    }[kind]

    step = (end - start) / steps
    points = []
    for i in range(steps + 1):
        income = end if i == steps else start + i * step
        points.append(CurvePoint(income=income, value=evaluate(income), kind=kind))
    return points


def tax_amount_curve(schedule: TaxSchedule, **kwargs) -> List[CurvePoint]:
    return sample_curve(schedule, "tax_amount", **kwargs)


def average_rate_curve(schedule: TaxSchedule, **kwargs) -> List[CurvePoint]:
    return sample_curve(schedule, "average_rate", **kwargs)


def marginal_rate_points(schedule: TaxSchedule) -> List[CurvePoint]:
    """Thresholds paired with the marginal rate that starts there."""
    return [
        CurvePoint(income=income, value=rate, kind="marginal_rate")
        for income, rate in zip(schedule.thresholds(), schedule.initial_marginal_rates())
    ]


def marginal_rate_points_extended(schedule: TaxSchedule, end: Optional[float] = None) -> List[CurvePoint]:
    """Marginal rate anchors plus points for the flat and vertical segments.

    Adds (0, 0) and (E0, 0) for the tax-free zone, (E3, sg3) for the step
    into the top zone and (end, sg4) to carry the top rate to the right edge.

    Raises:
        InvalidInputError: If end is below the top threshold E3
    """
    e0, _, _, e3 = schedule.thresholds()
    _, _, sg3, sg4 = schedule.initial_marginal_rates()
    end = _default_end(schedule, end)

    additional = [
        CurvePoint(income=0, value=0.0, kind="marginal_rate"),
        CurvePoint(income=e0, value=0.0, kind="marginal_rate"),
        CurvePoint(income=e3, value=sg3, kind="marginal_rate"),
        CurvePoint(income=end, value=sg4, kind="marginal_rate"),
    ]
    # Stable sort: at equal incomes the synthetic point comes first so the
    # curve steps up vertically
    return sorted(additional + marginal_rate_points(schedule), key=lambda p: p.income)


def to_price_level(
    points: List[CurvePoint],
    adjuster: InflationAdjuster,
    from_year: int,
    to_year: int,
) -> List[CurvePoint]:
    """Express a curve at another year's price level.

    Incomes are always adjusted; values only for tax amounts, since rates
    carry no currency.

    Raises:
        OutOfRangeError: If either year is outside the inflation table
    """
    factor = adjuster.factor(from_year, to_year)
    converted = []
    for point in points:
        value = point.value * factor if point.kind == "tax_amount" else point.value
        converted.append(replace(point, income=point.income * factor, value=value))
    return converted


def points_to_csv_string(points: List[CurvePoint]) -> str:
    """Render points as CSV with a kind,income,value header."""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(["kind", "income", "value"])
    for point in points:
        writer.writerow([point.kind, point.income, point.value])
    return output.getvalue()
