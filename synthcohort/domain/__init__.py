"""
Domain models for SynthCohort.

Agents, weight management episodes, coverage history and payers.
"""

from synthcohort.domain.enums import (
    Gender,
    VitalSign,
    CoverageStatus,
    GovernmentProgram,
    WeightManagementPhase,
)
from synthcohort.domain.agent import Agent, MissingAttributeError, VitalSignStore
from synthcohort.domain.weight import WeightManagementEpisode
from synthcohort.domain.coverage import CoverageHistory, CoverageRecord
from synthcohort.domain.payer import (
    NO_INSURANCE_NAME,
    Payer,
    PayerRegistry,
    PayerStats,
    merge_payer_stats,
)

__all__ = [
    # Enums
    "Gender",
    "VitalSign",
    "CoverageStatus",
    "GovernmentProgram",
    "WeightManagementPhase",
    # Agent
    "Agent",
    "MissingAttributeError",
    "VitalSignStore",
    # Weight management
    "WeightManagementEpisode",
    # Coverage
    "CoverageHistory",
    "CoverageRecord",
    # Payers
    "NO_INSURANCE_NAME",
    "Payer",
    "PayerRegistry",
    "PayerStats",
    "merge_payer_stats",
]
