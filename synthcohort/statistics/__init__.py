"""
Statistical and rule models for SynthCohort.

Provides insurance eligibility rules and payer selection.
"""

from synthcohort.statistics.eligibility import EligibilityRules
from synthcohort.statistics.payer_selection import PayerSelectionModel

__all__ = [
    "EligibilityRules",
    "PayerSelectionModel",
]
