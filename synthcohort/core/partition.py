"""
Partition management for parallel execution.

Uses UUID-based partitioning to distribute agents across workers
without coordination.
"""

from uuid import UUID

import numpy as np

from synthcohort.domain.agent import Agent


def get_partition_id(entity_id: UUID, num_workers: int) -> int:
    """
    Determine which worker owns this entity.

    Uses modulo of UUID integer value for deterministic partitioning.
    This ensures the same entity always maps to the same worker.

    Args:
        entity_id: UUID of the entity
        num_workers: Total number of workers

    Returns:
        Worker ID that owns this entity (0 to num_workers-1)
    """
    return entity_id.int % num_workers


def is_owned_by_worker(entity_id: UUID, worker_id: int, num_workers: int) -> bool:
    """
    Check if entity is owned by a specific worker.

    Args:
        entity_id: UUID of the entity
        worker_id: Worker ID to check
        num_workers: Total number of workers

    Returns:
        True if the worker owns this entity
    """
    return get_partition_id(entity_id, num_workers) == worker_id


def partition_agents(agents: list[Agent], num_workers: int) -> list[list[Agent]]:
    """
    Split a roster into one partition per worker.

    Args:
        agents: Full roster
        num_workers: Total number of workers

    Returns:
        List of rosters indexed by worker ID
    """
    partitions: list[list[Agent]] = [[] for _ in range(num_workers)]
    for agent in agents:
        partitions[get_partition_id(agent.agent_id, num_workers)].append(agent)
    return partitions


def derive_agent_rng(seed: int, agent_id: UUID) -> np.random.Generator:
    """
    Random stream for one agent.

    Depends only on the base seed and the agent's ID, so an agent's
    timeline replays identically whatever the partitioning.

    Args:
        seed: Base simulation seed
        agent_id: UUID of the agent

    Returns:
        NumPy random number generator
    """
    return np.random.default_rng([seed, agent_id.int])
