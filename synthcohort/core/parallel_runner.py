"""
Parallel runner for SynthCohort.

Orchestrates multiple worker processes for parallel simulation and
merges their payer statistics.
"""

import multiprocessing
import time
from typing import Any

import structlog

from synthcohort.config.models import SimulationConfig
from synthcohort.core.partition import partition_agents
from synthcohort.core.worker import SimulationWorker, run_worker
from synthcohort.domain.agent import Agent
from synthcohort.domain.payer import merge_payer_stats


logger = structlog.get_logger()


class ParallelRunner:
    """
    Orchestrates parallel simulation across multiple worker processes.

    Agents are partitioned by ID; agents never share mutable state except
    payer statistics, which each worker accumulates separately and which
    are merged after the parallel pass.

    Usage:
        runner = ParallelRunner(config)
        results = runner.run(agents)
    """

    def __init__(self, config: SimulationConfig, log_level: str = "INFO"):
        """
        Initialize the parallel runner.

        Args:
            config: Simulation configuration
            log_level: Log level for worker processes
        """
        self.config = config
        self.num_workers = config.parallel.num_workers
        self.log_level = log_level

    def run(self, agents: list[Agent], sequential: bool = False) -> dict[str, Any]:
        """
        Run the simulation over a roster.

        Args:
            agents: Full roster
            sequential: Run partitions one after another in this process

        Returns:
            Aggregated results from all workers
        """
        logger.info(
            "parallel_run_starting",
            num_workers=self.num_workers,
            agents=len(agents),
            start_date=self.config.simulation.start_date.isoformat(),
            end_date=self.config.simulation.end_date.isoformat(),
            sequential=sequential,
        )
        start_time = time.time()

        partitions = partition_agents(agents, self.num_workers)

        if sequential or self.num_workers == 1:
            results = [
                SimulationWorker(self.config, partition, worker_id=worker_id).run()
                for worker_id, partition in enumerate(partitions)
            ]
        else:
            worker_args = [
                (self.config, partition, worker_id, self.log_level)
                for worker_id, partition in enumerate(partitions)
            ]
            with multiprocessing.Pool(self.num_workers) as pool:
                results = pool.starmap(run_worker, worker_args)

        elapsed = time.time() - start_time
        aggregated = self._aggregate_results(results, elapsed)

        logger.info(
            "parallel_run_completed",
            elapsed_seconds=f"{elapsed:.1f}",
            agents=len(aggregated["agents"]),
            agent_errors=aggregated["agent_errors"],
        )
        return aggregated

    def _aggregate_results(self, results: list[dict[str, Any]], elapsed: float) -> dict[str, Any]:
        """
        Combine worker results.

        Args:
            results: One result dict per worker
            elapsed: Wall-clock seconds for the whole run

        Returns:
            Aggregated results
        """
        process_stats: dict[str, dict[str, int]] = {}
        coverage_counts: dict[str, int] = {}
        for result in results:
            for name, stats in result["process_stats"].items():
                totals = process_stats.setdefault(name, {})
                for key, value in stats.items():
                    totals[key] = totals.get(key, 0) + value
            for status, count in result["coverage_status_counts"].items():
                coverage_counts[status] = coverage_counts.get(status, 0) + count

        return {
            "num_workers": len(results),
            "elapsed_seconds": elapsed,
            "agents": [agent for result in results for agent in result["agents"]],
            "process_stats": process_stats,
            "agent_errors": sum(r["agent_errors"] for r in results),
            "active_weight_management": sum(r["active_weight_management"] for r in results),
            "coverage_status_counts": coverage_counts,
            "payer_stats": merge_payer_stats(*(r["payer_stats"] for r in results)),
        }
