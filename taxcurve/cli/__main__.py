"""Tax Curve CLI - Command-line interface for tax curves and inflation adjustment."""

import json
import logging
import os
from dataclasses import asdict

import click

from taxcurve import __version__
from taxcurve.sdk import (
    Zone,
    get_adjuster,
    get_available_years,
    get_schedule,
    marginal_rate_points_extended,
    points_to_csv_string,
    sample_curve,
    to_price_level,
)

from .settings_commands import settings as settings_group

# Configure logging based on LOG_LEVEL environment variable
_log_level = os.environ.get("LOG_LEVEL", "WARNING").upper()
logging.basicConfig(
    level=getattr(logging, _log_level, logging.WARNING),
    format="%(asctime)s.%(msecs)03d %(levelname)s: %(message)s",
    datefmt="%H:%M:%S"
)
logger = logging.getLogger(__name__)

ZONE_LABELS = {
    Zone.NULL: "Null zone (Grundfreibetrag)",
    Zone.PROGRESSION_1: "Progression zone 1",
    Zone.PROGRESSION_2: "Progression zone 2",
    Zone.PROPORTIONAL_1: "Proportional zone 1",
    Zone.PROPORTIONAL_2: "Proportional zone 2",
}

CURVE_KINDS = {
    "amount": "tax_amount",
    "average": "average_rate",
    "marginal": "marginal_rate",
}


def _parse_year(year: str) -> int:
    if not year.isdigit() or len(year) != 4:
        raise click.BadParameter(f"Invalid year '{year}'. Must be 4 digits.")
    return int(year)


@click.group()
@click.version_option(version=__version__, prog_name="tax-curve")
def cli():
    """Tax Curve - German income tax curves and inflation adjustment.

    Evaluates the five-zone income tax function for a year and converts
    amounts between the price levels of two years.

    Tax parameters and inflation rates are loaded from (in order):

    \b
    1. settings.json 'rules_dir' key (set via 'settings rules-dir')
    2. the tax-rules/ directory bundled with the package

    Set LOG_LEVEL=DEBUG to see which files are loaded.
    """
    pass


cli.add_command(settings_group)


def _format_tax_text(result: dict) -> str:
    """Format a tax evaluation as an ASCII table for terminal display."""
    lines = []
    lines.append(f"INCOME TAX {result['year']}")
    lines.append("=" * 44)
    if result["rules_year"] != result["year"]:
        lines.append(f"  (parameters of {result['rules_year']})")
    lines.append(f"  {'Taxable income':<20} {result['income']:>14,.2f}")
    lines.append(f"  {'Zone':<20} {ZONE_LABELS[Zone[result['zone']]]:>14}")
    lines.append("  " + "-" * 35)
    lines.append(f"  {'Tax amount':<20} {result['tax_amount']:>14,.2f}")
    lines.append(f"  {'Average rate':<20} {result['average_rate']:>14.2%}")
    lines.append(f"  {'Marginal rate':<20} {result['marginal_rate']:>14.2%}")
    return "\n".join(lines)


@cli.command("tax")
@click.argument("year")
@click.argument("income", type=float)
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text",
              help="Output format (default: text)")
@click.option("--strict", is_flag=True, help="Fail if YEAR has no parameters of its own.")
def tax_command(year, income, output_format, strict):
    """Calculate income tax, average and marginal rate for an income.

    INCOME is the taxable income (zvE) in the currency of YEAR. Without
    --strict, a year without its own parameters uses the latest prior year.

    \b
    Examples:
      tax-curve tax 2024 50000
      tax-curve tax 2024 50000 --format=json
    """
    tax_year = _parse_year(year)

    try:
        schedule = get_schedule(tax_year, fallback=not strict)
        result = {
            "year": tax_year,
            "rules_year": schedule.year,
            "income": income,
            "zone": schedule.zone(income).name,
            "tax_amount": schedule.tax_amount(income),
            "average_rate": schedule.average_rate(income),
            "marginal_rate": schedule.marginal_rate(income),
        }
    except (FileNotFoundError, ValueError) as e:
        raise click.ClickException(str(e))

    if output_format == "json":
        click.echo(json.dumps(result, indent=2))
    else:
        click.echo(_format_tax_text(result))


@cli.command("curve")
@click.argument("year")
@click.option("--kind", type=click.Choice(list(CURVE_KINDS)), default="average",
              help="Function to plot (default: average)")
@click.option("--start", type=float, default=0, help="First income, at most the tax-free threshold (default: 0)")
@click.option("--end", type=float, default=None, help="Last income, at least the top threshold (default: top + 100,000)")
@click.option("--steps", type=int, default=1000, help="Number of intervals (default: 1000)")
@click.option("--real-year", "real_year", default=None,
              help="Express incomes and amounts at this year's price level")
@click.option("--format", "output_format", type=click.Choice(["csv", "json"]), default="csv",
              help="Output format (default: csv)")
def curve_command(year, kind, start, end, steps, real_year, output_format):
    """Sample a tax curve for charting.

    The marginal curve is built from the exact breakpoints of the schedule
    rather than sampled, so --start and --steps do not apply to it.

    \b
    Examples:
      tax-curve curve 2024 --kind=marginal
      tax-curve curve 2010 --kind=amount --real-year=2024 --format=json
    """
    tax_year = _parse_year(year)
    target_year = _parse_year(real_year) if real_year else None

    try:
        schedule = get_schedule(tax_year)
        if kind == "marginal":
            points = marginal_rate_points_extended(schedule, end=end)
        else:
            points = sample_curve(schedule, CURVE_KINDS[kind], start=start, end=end, steps=steps)

        if target_year is not None:
            points = to_price_level(points, get_adjuster(), tax_year, target_year)
    except (FileNotFoundError, ValueError) as e:
        raise click.ClickException(str(e))

    logger.debug(f"sampled {len(points)} points for {tax_year} ({kind})")
    if output_format == "json":
        click.echo(json.dumps([asdict(p) for p in points], indent=2))
    else:
        click.echo(points_to_csv_string(points), nl=False)


@cli.command("adjust")
@click.argument("amount", type=float)
@click.argument("from_year")
@click.argument("to_year")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text",
              help="Output format (default: text)")
def adjust_command(amount, from_year, to_year, output_format):
    """Convert AMOUNT from FROM_YEAR's price level to TO_YEAR's.

    Amounts crossing 2002 are converted from DM to EUR (or back).

    \b
    Examples:
      tax-curve adjust 100 2003 2024
      tax-curve adjust 100 2024 1998 --format=json
    """
    start = _parse_year(from_year)
    end = _parse_year(to_year)

    try:
        adjusted = get_adjuster().adjust(amount, start, end)
    except (FileNotFoundError, ValueError) as e:
        raise click.ClickException(str(e))

    if output_format == "json":
        click.echo(json.dumps({
            "amount": amount,
            "from_year": start,
            "to_year": end,
            "adjusted": adjusted,
        }, indent=2))
    else:
        click.echo(f"{amount:,.2f} ({start}) = {adjusted:,.2f} ({end})")


@cli.command("years")
def years_command():
    """List years with tax parameters and the inflation table's coverage."""
    years = get_available_years()
    if years:
        click.echo("Tax parameters: " + ", ".join(str(y) for y in sorted(years)))
    else:
        click.echo("Tax parameters: none")

    try:
        adjuster = get_adjuster()
    except (FileNotFoundError, ValueError) as e:
        click.echo(f"Inflation table: unavailable ({e})")
        return

    click.echo(f"Inflation table: {adjuster.min_year}-{adjuster.max_year}")
    for conversion_year, factor in adjuster.conversions.items():
        click.echo(f"  Currency conversion in {conversion_year}: x{factor:.6f}")


@cli.command("validate")
@click.argument("year")
def validate_command(year):
    """Check a year's parameters for continuity and monotonicity.

    Exits with status 1 if any error is found. Warnings flag constants that
    are off by cents, which is normal for statutory values.
    """
    tax_year = _parse_year(year)

    try:
        schedule = get_schedule(tax_year, fallback=False)
    except (FileNotFoundError, ValueError) as e:
        raise click.ClickException(str(e))

    result = schedule.validate()
    for error in result.errors:
        click.echo(click.style(f"  ! {error}", fg="red"))
    for warning in result.warnings:
        click.echo(click.style(f"  ~ {warning}", fg="yellow"))

    if not result.is_valid:
        raise click.ClickException(f"Tax parameters for {tax_year} have {len(result.errors)} error(s)")
    click.echo(click.style(f"Tax parameters for {tax_year} are consistent.", fg="green"))


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
