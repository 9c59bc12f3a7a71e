"""Tax rules loading from tax-rules/{year}.yaml."""

import logging
from pathlib import Path
from typing import Optional

import yaml

from ..config import get_rules_dir
from ..schemas import TaxScheduleParams
from .schedule import TaxSchedule

logger = logging.getLogger(__name__)


def _get_tax_rules_dir(rules_dir: Optional[Path] = None) -> Path:
    """Get the tax-rules directory path."""
    return Path(rules_dir) if rules_dir else get_rules_dir()


def get_available_years(rules_dir: Optional[Path] = None) -> list[int]:
    """Get sorted list of available tax rule years (descending)."""
    directory = _get_tax_rules_dir(rules_dir)
    years = [int(p.stem) for p in directory.glob("*.yaml") if p.stem.isdigit()]
    return sorted(years, reverse=True)


def load_tax_rules(year: int, rules_dir: Optional[Path] = None) -> TaxScheduleParams:
    """Load tax parameters for a specific year from tax-rules/YYYY.yaml.

    The year comes from the file name unless the file sets it explicitly.

    Raises:
        FileNotFoundError: If no file exists for the year
        pydantic.ValidationError: If the file content is malformed
    """
    config_file = _get_tax_rules_dir(rules_dir) / f"{year}.yaml"
    if not config_file.exists():
        raise FileNotFoundError(f"Tax rules file not found for year {year}: {config_file}")

    logger.debug(f"loading tax rules from {config_file}")
    with open(config_file, "r") as f:
        raw = yaml.safe_load(f) or {}

    raw.setdefault("year", int(year))
    return TaxScheduleParams.model_validate(raw)


def get_schedule(year: int, fallback: bool = True, rules_dir: Optional[Path] = None) -> TaxSchedule:
    """Get the tax schedule in force for a year.

    Parameters stay in force until the law changes them, so with fallback
    enabled a year without its own file uses the latest prior year's file.

    Args:
        year: Tax year to look up (e.g., 2024)
        fallback: Fall back to the latest prior year if YEAR has no file
        rules_dir: Directory to read from (default: configured rules dir)

    Returns:
        TaxSchedule for the year (its .year is the year of the file used)

    Raises:
        FileNotFoundError: If no file exists for the year or, with
            fallback, for any prior year
    """
    target_year = int(year)
    if not fallback:
        return TaxSchedule(load_tax_rules(target_year, rules_dir))

    # Filter to years <= requested year, sorted descending
    candidate_years = [y for y in get_available_years(rules_dir) if y <= target_year]
    if not candidate_years:
        raise FileNotFoundError(
            f"No tax rules for {target_year} or any prior year in {_get_tax_rules_dir(rules_dir)}"
        )

    rules_year = candidate_years[0]
    if rules_year != target_year:
        logger.info(f"no tax rules for {target_year}, using {rules_year}")
    return TaxSchedule(load_tax_rules(rules_year, rules_dir))
