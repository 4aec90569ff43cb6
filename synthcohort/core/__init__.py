"""
Core simulation module for SynthCohort.

Provides:
- SimPy simulation environment wrapper
- Partition management for parallel execution
- Simulation worker and parallel runner
"""

from synthcohort.core.environment import SimulationEnvironment
from synthcohort.core.partition import (
    derive_agent_rng,
    get_partition_id,
    is_owned_by_worker,
    partition_agents,
)

__all__ = [
    "SimulationEnvironment",
    "derive_agent_rng",
    "get_partition_id",
    "is_owned_by_worker",
    "partition_agents",
]
