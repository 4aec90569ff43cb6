"""
Insurance eligibility rules for SynthCohort.

Pure predicates deciding whether a payer accepts an agent and whether
the agent can take up the payer's coverage.
"""

from datetime import date
from decimal import Decimal

from synthcohort.config.models import InsuranceConfig
from synthcohort.domain.agent import Agent
from synthcohort.domain.enums import GovernmentProgram
from synthcohort.domain.payer import Payer


class EligibilityRules:
    """
    Eligibility and affordability rules.

    Government programs:
    - Medicare accepts agents at or over the Medicare age, and agents with
      end-stage renal disease.
    - Medicaid accepts pregnant agents, blind agents, and agents whose
      income is at or below the Medicaid threshold (a multiple of the
      poverty level).
    - Dual-Eligible accepts agents both of the above accept.

    Private carriers accept agents within their age band, and are taken up
    only when affordable. Once the insurance mandate is in force, agents
    at or above the mandate occupation level have their premiums covered
    by an employer and can afford any carrier.
    """

    def __init__(self, insurance: InsuranceConfig):
        """
        Initialize the rules.

        Args:
            insurance: Insurance configuration
        """
        self.insurance = insurance

    def medicare_accepts(self, agent: Agent, time: date) -> bool:
        """Whether Medicare accepts the agent."""
        return (
            agent.age_in_years(time) >= self.insurance.medicare_age
            or agent.end_stage_renal_disease
        )

    def medicaid_accepts(self, agent: Agent, time: date) -> bool:
        """Whether Medicaid accepts the agent."""
        return (
            agent.pregnant
            or agent.blindness
            or agent.income <= self.insurance.medicaid_income_threshold
        )

    def accepts(self, payer: Payer, agent: Agent, time: date) -> bool:
        """
        Whether a payer accepts an agent at a time.

        Args:
            payer: Payer to check
            agent: Agent applying for coverage
            time: Current simulation date

        Returns:
            True if the payer's eligibility rules admit the agent
        """
        if payer.program == GovernmentProgram.MEDICARE:
            return self.medicare_accepts(agent, time)
        if payer.program == GovernmentProgram.MEDICAID:
            return self.medicaid_accepts(agent, time)
        if payer.program == GovernmentProgram.DUAL_ELIGIBLE:
            return self.medicare_accepts(agent, time) and self.medicaid_accepts(agent, time)

        age = agent.age_in_years(time)
        return payer.min_age <= age <= payer.max_age

    def mandate_applies(self, agent: Agent, time: date) -> bool:
        """Whether the employer mandate covers the agent's premiums."""
        return (
            time.year >= self.insurance.mandate_year
            and agent.occupation_level >= self.insurance.mandate_occupation
        )

    def can_afford(self, payer: Payer, agent: Agent, time: date) -> bool:
        """
        Whether the agent can afford a payer's premiums.

        Args:
            payer: Payer to check
            agent: Agent applying for coverage
            time: Current simulation date

        Returns:
            True if the yearly premium fits the agent's budget
        """
        if payer.is_government or payer.yearly_premium == 0:
            return True
        if self.mandate_applies(agent, time):
            return True
        budget = Decimal(agent.income) * Decimal(str(self.insurance.max_premium_income_share))
        return payer.yearly_premium <= budget

    def meets_basic_requirements(self, payer: Payer, agent: Agent, time: date) -> bool:
        """
        Whether an agent can be (or stay) covered by a payer.

        Args:
            payer: Payer to check
            agent: Agent applying for coverage
            time: Current simulation date

        Returns:
            True if the payer accepts the agent and the agent can afford it
        """
        return self.accepts(payer, agent, time) and self.can_afford(payer, agent, time)
