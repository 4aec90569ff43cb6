"""
Command-line interface for SynthCohort.

Provides commands for validating configuration, querying growth charts
and listing the payer registry.
"""

import sys

import click
import structlog

from synthcohort.config import load_config, parse_overrides, validate_config
from synthcohort.reference.growth_charts import METRICS
from synthcohort.utils.logging import configure_logging


logger = structlog.get_logger()


@click.group()
@click.option(
    "--config", "-c",
    type=click.Path(exists=True),
    help="Path to configuration file",
)
@click.option(
    "--set", "overrides",
    multiple=True,
    metavar="KEY.PATH=VALUE",
    help="Override a configuration value (repeatable)",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output",
)
@click.option(
    "--json-logs",
    is_flag=True,
    help="Output logs as JSON",
)
@click.pass_context
def main(ctx, config, overrides, verbose, json_logs):
    """SynthCohort synthetic patient lifecycle simulator."""
    ctx.ensure_object(dict)

    log_level = "DEBUG" if verbose else "INFO"
    configure_logging(level=log_level, json_output=json_logs)

    ctx.obj["config_path"] = config
    try:
        ctx.obj["overrides"] = parse_overrides(overrides)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--set")
    ctx.obj["log_level"] = log_level


@main.command("validate")
@click.pass_context
def validate_cmd(ctx):
    """Validate the configuration file."""
    from synthcohort.config.validation import ConfigurationError

    config_path = ctx.obj.get("config_path")

    try:
        config = load_config(config_path, ctx.obj.get("overrides"))
        warnings = validate_config(config)

        click.echo("Configuration is valid.")
        click.echo(f"  Start date: {config.simulation.start_date}")
        click.echo(f"  End date: {config.simulation.end_date}")
        click.echo(f"  Tick: {config.simulation.tick_days} days")
        click.echo(f"  Workers: {config.parallel.num_workers}")

        if warnings:
            click.echo("\nWarnings:")
            for warning in warnings:
                click.echo(f"  - {warning}")

    except ConfigurationError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command()
@click.argument("metric", type=click.Choice(sorted(METRICS)))
@click.argument("gender", type=click.Choice(["M", "F"], case_sensitive=False))
@click.argument("age_months", type=float)
@click.argument("percentile", type=float)
def lookup(metric, gender, age_months, percentile):
    """Print the growth chart value at a percentile.

    PERCENTILE is a fraction, e.g. 0.85 for the 85th percentile.

    \b
    # 85th percentile BMI for a 10 year old girl
    synthcohort lookup bmi F 120 0.85
    """
    from synthcohort.reference.growth_charts import GrowthChartLookup

    charts = GrowthChartLookup()
    value = charts.percentile_value(metric, gender.upper(), age_months, percentile)
    click.echo(f"{value:.3f}")


@main.command()
@click.pass_context
def payers(ctx):
    """List the configured payers."""
    from synthcohort.reference.loader import build_payer_registry

    config_path = ctx.obj.get("config_path")

    try:
        config = load_config(config_path, ctx.obj.get("overrides"))
        registry = build_payer_registry(config.insurance)

        click.echo("Government programs:")
        for program, payer in registry.government.items():
            click.echo(f"  {payer.name} ({program.value})")

        click.echo("\nPrivate payers:")
        for payer in registry.private:
            click.echo(
                f"  {payer.name}: ${payer.monthly_premium}/month, "
                f"ages {payer.min_age}-{payer.max_age}"
            )

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
