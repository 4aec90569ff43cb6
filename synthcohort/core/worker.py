"""
Simulation worker for SynthCohort.

Drives one partition of agents through the phase-state processes.
"""

import time
from datetime import date
from typing import Any, Generator

import structlog

from synthcohort.config.models import SimulationConfig
from synthcohort.core.environment import SimulationEnvironment
from synthcohort.core.processes.base import BaseProcess
from synthcohort.core.processes.coverage_selection import CoverageSelectionProcess
from synthcohort.core.processes.weight_management import WeightManagementProcess
from synthcohort.domain.agent import Agent
from synthcohort.reference.loader import ReferenceDataLoader
from synthcohort.utils.logging import SimulationLogger, configure_logging
from synthcohort.utils.time_conversion import DAYS_PER_YEAR


logger = structlog.get_logger()


class SimulationWorker:
    """
    Runs the simulation for one partition of agents.

    Each worker owns its SimPy environment, its own payer registry (whose
    statistics are merged with other workers' afterwards) and the
    processes evaluating its agents. Processes are started in a fixed
    order, so at every tick weight management runs before coverage
    selection for every agent.

    Usage:
        worker = SimulationWorker(config, agents, worker_id=0)
        results = worker.run()
    """

    def __init__(
        self,
        config: SimulationConfig,
        agents: list[Agent],
        worker_id: int = 0,
    ):
        """
        Initialize the worker.

        Args:
            config: Simulation configuration
            agents: Agents owned by this worker
            worker_id: Worker identifier
        """
        self.config = config
        self.agents = agents
        self.worker_id = worker_id
        self.sim_logger = SimulationLogger(worker_id)

        self.sim_env = SimulationEnvironment(
            start_date=config.simulation.start_date,
            end_date=config.simulation.end_date,
            worker_id=worker_id,
        )

        self.reference = ReferenceDataLoader(config.insurance)
        self.registry = self.reference.get_payer_registry()
        self.growth_charts = self.reference.get_growth_charts()

        self.processes: dict[str, BaseProcess] = {}
        self._init_processes()

    def _init_processes(self) -> None:
        common = {
            "sim_env": self.sim_env,
            "config": self.config,
            "agents": self.agents,
            "worker_id": self.worker_id,
        }
        self.processes["weight_management"] = WeightManagementProcess(
            growth_charts=self.growth_charts,
            **common,
        )
        self.processes["coverage_selection"] = CoverageSelectionProcess(
            registry=self.registry,
            **common,
        )

    def run(self) -> dict[str, Any]:
        """
        Run the simulation to the configured end date.

        Returns:
            Worker results: process statistics, payer statistics and the
            (mutated) agents
        """
        self.sim_logger.simulation_started(
            self.config.simulation.start_date.isoformat(),
            self.config.simulation.end_date.isoformat(),
            agents=len(self.agents),
        )
        started = time.time()

        for process in self.processes.values():
            process.start()
        self.sim_env.process(self._progress_monitor())
        self.sim_env.run()

        elapsed = time.time() - started
        results = self._collect_stats(elapsed)
        self.sim_logger.simulation_completed(
            elapsed_seconds=round(elapsed, 2),
            agent_errors=results["agent_errors"],
        )
        return results

    def _progress_monitor(self) -> Generator:
        """Log progress once per simulated year."""
        while True:
            yield self.sim_env.timeout(DAYS_PER_YEAR)
            self.sim_logger.simulation_progress(
                self.sim_env.current_date.isoformat(),
                self.sim_env.get_progress(),
            )

    def _collect_stats(self, elapsed: float) -> dict[str, Any]:
        process_stats = {name: p.get_stats() for name, p in self.processes.items()}
        end_date: date = self.sim_env.current_date

        coverage_counts: dict[str, int] = {}
        for agent in self.agents:
            status = agent.coverage_status.value if agent.coverage_status else "unassigned"
            coverage_counts[status] = coverage_counts.get(status, 0) + 1

        return {
            "worker_id": self.worker_id,
            "elapsed_seconds": elapsed,
            "simulation_days": int(self.sim_env.now),
            "end_date": end_date.isoformat(),
            "agents": self.agents,
            "process_stats": process_stats,
            "agent_errors": sum(s.get("agent_errors", 0) for s in process_stats.values()),
            "active_weight_management": sum(1 for a in self.agents if a.active_weight_management),
            "coverage_status_counts": coverage_counts,
            "payer_stats": self.registry.collect_stats(),
        }


def run_worker(
    config: SimulationConfig,
    agents: list[Agent],
    worker_id: int,
    log_level: str = "INFO",
) -> dict[str, Any]:
    """
    Entry point for a worker process.

    Args:
        config: Simulation configuration
        agents: Agents owned by this worker
        worker_id: Worker identifier
        log_level: Log level for this process

    Returns:
        Worker results
    """
    configure_logging(level=log_level)
    worker = SimulationWorker(config, agents, worker_id=worker_id)
    return worker.run()
