"""taxes - Income tax function evaluation.

Scope:
- Five-zone income tax function (§32a EStG): amount, average and
  marginal rate for a taxable income
- Optional consistency check of a year's parameters
- Year-specific parameters loaded from tax-rules/{year}.yaml

Constraints:
- Pure calculation - no inflation or currency handling (see ..inflation)
- Parameters are immutable; a schedule can be shared freely

Modules:
- schedule: Zone selection and evaluation (TaxSchedule)
- rules: YAML loading with fallback to prior years

Usage:
    from taxcurve.sdk.taxes import get_schedule

    schedule = get_schedule(2024)
    schedule.tax_amount(50_000)
    schedule.marginal_rate(50_000)
"""

from .schedule import (
    InvalidInputError,
    ScheduleValidationResult,
    TaxSchedule,
    Zone,
    continuity_constants,
)

from .rules import (
    get_available_years,
    get_schedule,
    load_tax_rules,
)

__all__ = [
    # Schedule
    "InvalidInputError",
    "ScheduleValidationResult",
    "TaxSchedule",
    "Zone",
    "continuity_constants",
    # Rules
    "get_available_years",
    "get_schedule",
    "load_tax_rules",
]
