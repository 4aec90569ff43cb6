"""
Payer selection model for SynthCohort.

Models how uninsured agents choose a private carrier.
"""

from datetime import date

from synthcohort.domain.agent import Agent
from synthcohort.domain.payer import Payer, PayerRegistry
from synthcohort.statistics.eligibility import EligibilityRules


class PayerSelectionModel:
    """
    Random choice among the private carriers an agent qualifies for.

    Carriers are filtered by eligibility and affordability, then one is
    drawn uniformly from the agent's own random stream. Agents with no
    qualifying carrier are uninsured.
    """

    def __init__(self, registry: PayerRegistry, rules: EligibilityRules):
        """
        Initialize the payer selection model.

        Args:
            registry: Payer registry
            rules: Eligibility rules
        """
        self.registry = registry
        self.rules = rules

    def eligible_payers(self, agent: Agent, time: date) -> list[Payer]:
        """Private carriers meeting the agent's basic requirements."""
        return [
            payer
            for payer in self.registry.private
            if self.rules.meets_basic_requirements(payer, agent, time)
        ]

    def find_payer(self, agent: Agent, time: date) -> Payer:
        """
        Select a private carrier for an agent.

        Args:
            agent: Agent seeking coverage
            time: Current simulation date

        Returns:
            Selected payer, or the registry's no-insurance sentinel
        """
        candidates = self.eligible_payers(agent, time)

        if not candidates:
            return self.registry.no_insurance
        if len(candidates) == 1:
            return candidates[0]

        idx = int(agent.rng.integers(len(candidates)))
        return candidates[idx]
