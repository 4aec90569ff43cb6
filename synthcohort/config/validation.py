"""
Configuration validation for SynthCohort.

Provides additional validation beyond Pydantic model validation.
"""

import multiprocessing

import structlog

from synthcohort.config.models import SimulationConfig

logger = structlog.get_logger()


class ConfigurationError(Exception):
    """Raised when configuration is invalid."""

    pass


def validate_config(config: SimulationConfig) -> list[str]:
    """
    Validate simulation configuration.

    Performs validation checks beyond what Pydantic models provide,
    such as cross-field validation and payer registry consistency.

    Args:
        config: SimulationConfig to validate

    Returns:
        List of warning messages (non-fatal issues)

    Raises:
        ConfigurationError: If configuration has fatal issues
    """
    warnings: list[str] = []
    errors: list[str] = []

    # Weight management episodes span five years
    duration_days = (config.simulation.end_date - config.simulation.start_date).days
    if duration_days < 5 * 365:
        warnings.append(
            f"Simulation duration ({duration_days} days) is shorter than a full "
            "five-year weight management episode."
        )

    insurance = config.insurance
    government_names = [
        insurance.medicare_name,
        insurance.medicaid_name,
        insurance.dual_eligible_name,
    ]
    if len({name.lower() for name in government_names}) != len(government_names):
        errors.append(
            f"Government program names must be distinct: {', '.join(government_names)}"
        )

    private_names = [p.name for p in insurance.private_payers]
    if len(set(private_names)) != len(private_names):
        errors.append("Private payer names must be unique")

    clashes = {n.lower() for n in private_names} & {n.lower() for n in government_names}
    if clashes:
        errors.append(
            f"Private payer names clash with government programs: {', '.join(sorted(clashes))}"
        )

    for payer in insurance.private_payers:
        if payer.min_age > payer.max_age:
            errors.append(
                f"Payer {payer.name} has min_age {payer.min_age} above max_age {payer.max_age}"
            )

    if not insurance.private_payers:
        warnings.append(
            "No private payers configured. Agents not eligible for a government "
            "program will be uninsured."
        )

    # Check worker count vs CPU
    cpu_count = multiprocessing.cpu_count()
    if config.parallel.num_workers > cpu_count:
        warnings.append(
            f"num_workers ({config.parallel.num_workers}) exceeds CPU count ({cpu_count})"
        )

    for warning in warnings:
        logger.warning("config_warning", message=warning)

    if errors:
        for error in errors:
            logger.error("config_error", message=error)
        raise ConfigurationError(
            "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        )

    return warnings
