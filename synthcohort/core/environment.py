"""
Simulation environment wrapper for SynthCohort.

Wraps the SimPy environment with a calendar clock for the tick driver.
"""

from datetime import date, timedelta
from typing import Generator, Any

import simpy
import structlog

logger = structlog.get_logger()


class SimulationEnvironment:
    """
    Wrapper around SimPy environment with date conversion.

    Time unit: days (float). Randomness is owned by the agents, not the
    clock.

    Usage:
        sim_env = SimulationEnvironment(
            start_date=date(2020, 1, 1),
            end_date=date(2030, 1, 1),
            worker_id=0,
        )
        sim_env.process(my_process.run())
        sim_env.run()
    """

    def __init__(
        self,
        start_date: date,
        end_date: date,
        worker_id: int = 0,
    ):
        """
        Initialize the simulation environment.

        Args:
            start_date: Simulation start date
            end_date: Simulation end date
            worker_id: Worker process identifier (for logging/debugging)
        """
        self.env = simpy.Environment()
        self.start_date = start_date
        self.end_date = end_date
        self.worker_id = worker_id

        self.duration_days = (end_date - start_date).days

        logger.info(
            "simulation_environment_created",
            worker_id=worker_id,
            start_date=start_date.isoformat(),
            end_date=end_date.isoformat(),
            duration_days=self.duration_days,
        )

    @property
    def now(self) -> float:
        """Current simulation time in days from start."""
        return self.env.now

    @property
    def current_date(self) -> date:
        """Current simulation date (truncated to day)."""
        return self.start_date + timedelta(days=int(self.env.now))

    def timeout(self, days: float) -> simpy.Event:
        """
        Create a timeout event for the given number of days.

        Args:
            days: Number of days to wait

        Returns:
            SimPy timeout event
        """
        return self.env.timeout(days)

    def process(self, generator: Generator) -> simpy.Process:
        """
        Start a SimPy process.

        Args:
            generator: Generator function for the process

        Returns:
            SimPy Process
        """
        return self.env.process(generator)

    def run(self, until: float | None = None) -> Any:
        """
        Run the simulation.

        Pydantic validation errors raised inside processes reach this point
        as RuntimeError (see wrap_generator_for_pydantic), since SimPy
        cannot re-raise them as they are.

        Args:
            until: Stop time in days (default: full duration)

        Returns:
            Result of simulation run
        """
        if until is None:
            until = self.duration_days
        return self.env.run(until=until)

    def get_progress(self) -> float:
        """
        Get simulation progress as percentage.

        Returns:
            Progress percentage (0-100)
        """
        if self.duration_days == 0:
            return 100.0
        return min(100.0, (self.env.now / self.duration_days) * 100)
