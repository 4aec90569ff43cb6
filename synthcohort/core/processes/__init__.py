"""
SimPy processes for SynthCohort.

Provides:
- Weight management process (loss, regression and resolution of episodes)
- Coverage selection process (annual payer decisions and monthly premiums)
"""

from synthcohort.core.processes.base import BaseProcess
from synthcohort.core.processes.weight_management import WeightManagementProcess
from synthcohort.core.processes.coverage_selection import CoverageSelectionProcess

__all__ = [
    "BaseProcess",
    "WeightManagementProcess",
    "CoverageSelectionProcess",
]
