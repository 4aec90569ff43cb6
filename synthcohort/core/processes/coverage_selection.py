"""
Coverage selection process for SynthCohort.

Once a year, just after an agent's coverage lapses, decides which payers
cover the agent for the next year. Every tick it also collects the
monthly premium for the current coverage.
"""

from datetime import date
from typing import Any

import structlog

from synthcohort.core.processes.base import BaseProcess
from synthcohort.domain.agent import Agent
from synthcohort.domain.enums import CoverageStatus, GovernmentProgram
from synthcohort.domain.payer import Payer, PayerRegistry
from synthcohort.statistics.eligibility import EligibilityRules
from synthcohort.statistics.payer_selection import PayerSelectionModel


logger = structlog.get_logger()


class CoverageSelectionProcess(BaseProcess):
    """
    SimPy process for annual insurance coverage decisions.

    Primary payer priority (first match wins):
    1. Dual-Eligible, when Medicare and Medicaid both accept the agent
    2. Medicare
    3. Medicaid
    4. Last year's payer, if the agent still meets its basic requirements
    5. A random affordable private carrier, or no insurance

    Medicare enrollees may also buy a supplemental private carrier as a
    secondary payer.
    """

    def __init__(
        self,
        *args: Any,
        registry: PayerRegistry,
        **kwargs: Any,
    ):
        """
        Initialize the coverage selection process.

        Args:
            registry: Payer registry for this worker
        """
        super().__init__(*args, **kwargs)

        self.registry = registry
        self.insurance_config = self.config.insurance
        self.rules = EligibilityRules(self.insurance_config)
        self.payer_selection = PayerSelectionModel(registry, self.rules)

    def process(self, agent: Agent, time: date) -> bool:
        """
        Evaluate one agent's coverage.

        Args:
            agent: Agent to evaluate
            time: Current simulation date

        Returns:
            Always False; coverage never completes for a living agent
        """
        if not agent.alive(time):
            return False

        if agent.coverage.payer_at_time(time) is None:
            self.decide_coverage(agent, time)

        self.pay_monthly_premium(agent, time)

        return False

    def decide_coverage(self, agent: Agent, time: date) -> tuple[Payer, Payer]:
        """
        Choose primary and secondary payers for the coming year.

        Args:
            agent: Agent without current coverage
            time: Current simulation date

        Returns:
            Tuple of (primary, secondary) payers
        """
        previous = None
        last_record = agent.coverage.last_record()
        if last_record is not None:
            previous = self.registry.get(last_record.primary)
            year = time.year - 1
            previous.add_quality_of_life(year, agent.quality_of_life_for_year(year))

        primary = self.determine_primary_payer(agent, time, previous)

        secondary = self.registry.no_insurance
        medicare = self.registry.get_government(GovernmentProgram.MEDICARE)
        if primary is medicare and agent.rand() < self.insurance_config.supplemental_probability:
            secondary = self.payer_selection.find_payer(agent, time)

        agent.coverage.set_payer_at_time(time, primary.name, secondary.name)

        primary.increment_customers(agent)
        if not self.registry.is_no_insurance(secondary):
            secondary.increment_customers(agent)

        agent.coverage_status = self.derive_coverage_status(primary)

        self.increment_stat("coverage_decisions")
        if agent.coverage_status == CoverageStatus.NONE:
            self.increment_stat("uninsured_years")
        logger.debug(
            "coverage_assigned",
            agent_id=str(agent.agent_id),
            sim_date=time.isoformat(),
            primary=primary.name,
            secondary=secondary.name,
            coverage_status=agent.coverage_status.value,
        )
        return primary, secondary

    def determine_primary_payer(
        self,
        agent: Agent,
        time: date,
        previous: Payer | None = None,
    ) -> Payer:
        """
        Determine the primary payer by priority cascade.

        Government programs strictly precede keeping last year's payer.

        Args:
            agent: Agent to cover
            time: Current simulation date
            previous: Last year's primary payer, if any

        Returns:
            The payer that covers the agent
        """
        medicare = self.registry.get_government(GovernmentProgram.MEDICARE)
        medicaid = self.registry.get_government(GovernmentProgram.MEDICAID)
        dual = self.registry.get_government(GovernmentProgram.DUAL_ELIGIBLE)

        medicare_accepts = medicare is not None and self.rules.accepts(medicare, agent, time)
        medicaid_accepts = medicaid is not None and self.rules.accepts(medicaid, agent, time)

        if medicare_accepts and medicaid_accepts and dual is not None:
            return dual
        if medicare_accepts:
            return medicare
        if medicaid_accepts:
            return medicaid
        if (
            previous is not None
            and not self.registry.is_no_insurance(previous)
            and self.rules.meets_basic_requirements(previous, agent, time)
        ):
            return previous
        return self.payer_selection.find_payer(agent, time)

    def derive_coverage_status(self, primary: Payer) -> CoverageStatus:
        """
        Coverage status category of a primary payer.

        Government programs other than Medicaid, Dual-Eligible included,
        fall in the Medicare bucket.
        """
        if self.registry.is_no_insurance(primary):
            return CoverageStatus.NONE
        if primary.is_government:
            if primary.name.lower() == self.insurance_config.medicaid_name.lower():
                return CoverageStatus.MEDICAID
            return CoverageStatus.MEDICARE
        return CoverageStatus.PRIVATE

    def pay_monthly_premium(self, agent: Agent, time: date) -> None:
        """
        Charge the monthly premium for the current coverage, once per month.

        Args:
            agent: Agent being charged
            time: Current simulation date
        """
        record = agent.coverage.record_at_time(time)
        if record is None or agent.coverage.premium_paid_for_month(time):
            return

        for name in (record.primary, record.secondary):
            payer = self.registry.get(name)
            if self.registry.is_no_insurance(payer) or payer.monthly_premium == 0:
                continue
            agent.premium_expenses += payer.monthly_premium
            payer.record_premium(payer.monthly_premium)

        agent.coverage.mark_premium_paid(time)
        self.increment_stat("premiums_collected")
