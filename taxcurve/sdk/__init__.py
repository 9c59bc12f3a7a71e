"""Tax Curve SDK - Core functionality for tax curves and inflation adjustment."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    get_bundled_rules_dir,
    get_rules_dir,
)

from .schemas import (
    TaxScheduleParams,
    InflationTable,
)

from .taxes import (
    InvalidInputError,
    ScheduleValidationResult,
    TaxSchedule,
    Zone,
    continuity_constants,
    get_available_years,
    get_schedule,
    load_tax_rules,
)

from .inflation import (
    InflationAdjuster,
    OutOfRangeError,
    get_adjuster,
    load_inflation_table,
)

from .sampling import (
    CurvePoint,
    sample_curve,
    tax_amount_curve,
    average_rate_curve,
    marginal_rate_points,
    marginal_rate_points_extended,
    to_price_level,
    points_to_csv_string,
)

__all__ = [
    # Config
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "get_bundled_rules_dir",
    "get_rules_dir",
    # Schemas
    "TaxScheduleParams",
    "InflationTable",
    # Tax schedule
    "InvalidInputError",
    "ScheduleValidationResult",
    "TaxSchedule",
    "Zone",
    "continuity_constants",
    "get_available_years",
    "get_schedule",
    "load_tax_rules",
    # Inflation
    "InflationAdjuster",
    "OutOfRangeError",
    "get_adjuster",
    "load_inflation_table",
    # Sampling
    "CurvePoint",
    "sample_curve",
    "tax_amount_curve",
    "average_rate_curve",
    "marginal_rate_points",
    "marginal_rate_points_extended",
    "to_price_level",
    "points_to_csv_string",
]
