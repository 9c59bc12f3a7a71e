"""Settings CLI commands for Tax Curve.

Manages settings.json - rules directory override.
"""

import click
from pathlib import Path

from taxcurve.sdk import (
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    get_settings_path,
    get_rules_dir,
)


@click.group()
def settings():
    """Manage settings (settings.json).

    Available settings:
    - rules_dir: directory with tax-rules YAML files
    """
    pass


@settings.command("show")
def settings_show():
    """Show current settings and their values."""
    settings_path = get_settings_path()
    current = load_settings()

    click.echo(f"Settings file: {settings_path}")
    click.echo(f"File exists: {settings_path.exists()}")
    click.echo()

    if not current:
        click.echo("No settings configured (using defaults).")
        click.echo()
        click.echo("Effective paths:")
        click.echo(f"  rules_dir: {get_rules_dir()} (default)")
        return

    click.echo("Current settings:")
    for key, value in current.items():
        click.echo(f"  {key}: {value}")

    click.echo()
    click.echo("Effective paths:")
    click.echo(f"  rules_dir: {get_rules_dir()}")


@settings.command("rules-dir")
@click.argument("path", required=False, type=click.Path())
@click.option("--clear", is_flag=True, help="Clear custom rules_dir, revert to bundled rules")
def settings_rules_dir(path, clear):
    """Set or clear the custom tax rules directory.

    PATH is a directory holding {year}.yaml tax parameters and
    inflation.yaml.

    Examples:
        tax-curve settings rules-dir ~/tax-rules
        tax-curve settings rules-dir --clear
    """
    if clear:
        current = load_settings()
        if "rules_dir" in current:
            del current["rules_dir"]
            save_settings(current)
            click.echo("Cleared rules_dir setting.")
            click.echo(f"Rules directory is now: {get_rules_dir()} (default)")
        else:
            click.echo("rules_dir was not set.")
        return

    if not path:
        # Show current value
        current_rules_dir = get_setting("rules_dir")
        if current_rules_dir:
            click.echo(f"Current rules_dir: {current_rules_dir}")
        else:
            click.echo(f"No custom rules_dir set. Using default: {get_rules_dir()}")
        return

    rules_path = Path(path).expanduser().resolve()
    if not rules_path.is_dir():
        raise click.ClickException(f"Not a directory: {rules_path}")

    if not any(p.stem.isdigit() for p in rules_path.glob("*.yaml")):
        click.echo(f"Warning: no {{year}}.yaml files found in {rules_path}", err=True)

    set_setting("rules_dir", str(rules_path))
    click.echo(f"Set rules_dir: {rules_path}")
    click.echo(f"Saved to: {get_settings_path()}")
