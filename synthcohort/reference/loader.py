"""
Reference data loader for SynthCohort.

Builds the payer registry and growth chart lookup from configuration.
"""

import structlog

from synthcohort.config.models import InsuranceConfig
from synthcohort.domain.enums import GovernmentProgram
from synthcohort.domain.payer import Payer, PayerRegistry
from synthcohort.reference.growth_charts import GrowthChartLookup

logger = structlog.get_logger()


def build_payer_registry(insurance: InsuranceConfig) -> PayerRegistry:
    """
    Build a fresh payer registry with zeroed statistics.

    Each worker needs its own registry; statistics are merged afterwards.

    Args:
        insurance: Insurance configuration

    Returns:
        PayerRegistry with the three government programs and the
        configured private carriers
    """
    government = {
        GovernmentProgram.MEDICARE: Payer(insurance.medicare_name, GovernmentProgram.MEDICARE),
        GovernmentProgram.MEDICAID: Payer(insurance.medicaid_name, GovernmentProgram.MEDICAID),
        GovernmentProgram.DUAL_ELIGIBLE: Payer(
            insurance.dual_eligible_name, GovernmentProgram.DUAL_ELIGIBLE
        ),
    }
    private = [
        Payer(
            p.name,
            monthly_premium=p.monthly_premium,
            min_age=p.min_age,
            max_age=p.max_age,
        )
        for p in insurance.private_payers
    ]
    return PayerRegistry(government=government, private=private)


class ReferenceDataLoader:
    """
    Loads and caches reference data.

    The growth chart lookup is read-only and shared; payer registries hold
    mutable statistics, so a new one is built on every request.

    Usage:
        loader = ReferenceDataLoader(config.insurance)
        charts = loader.get_growth_charts()
        registry = loader.get_payer_registry()
    """

    def __init__(self, insurance: InsuranceConfig):
        """
        Initialize the reference data loader.

        Args:
            insurance: Insurance configuration
        """
        self.insurance = insurance
        self._growth_charts: GrowthChartLookup | None = None

    def get_growth_charts(self) -> GrowthChartLookup:
        """Get the (cached) growth chart lookup."""
        if self._growth_charts is None:
            self._growth_charts = GrowthChartLookup()
            logger.debug(
                "growth_charts_loaded",
                tables=len(self._growth_charts.tables),
            )
        return self._growth_charts

    def get_payer_registry(self) -> PayerRegistry:
        """Build a payer registry with zeroed statistics."""
        registry = build_payer_registry(self.insurance)
        logger.debug(
            "payer_registry_built",
            government=len(registry.government),
            private=len(registry.private),
        )
        return registry
