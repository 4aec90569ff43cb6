"""
Base process class for SimPy processes.

Provides the per-agent tick contract shared by all phase-state processes.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Generator, Any

from pydantic import ValidationError as PydanticValidationError
import structlog

from synthcohort.config.models import SimulationConfig
from synthcohort.core.environment import SimulationEnvironment
from synthcohort.domain.agent import Agent, MissingAttributeError


logger = structlog.get_logger()


def wrap_generator_for_pydantic(gen: Generator, process_name: str) -> Generator:
    """
    Wrap a generator to catch Pydantic ValidationError and convert to RuntimeError.

    SimPy has an incompatibility with Pydantic v2's ValidationError where it tries
    to re-create exceptions using `type(exc)(*exc.args)`, but Pydantic's
    ValidationError requires specific keyword arguments.

    Args:
        gen: The generator to wrap
        process_name: Name of the process for error messages

    Yields:
        Values from the wrapped generator
    """
    try:
        result = yield from gen
        return result
    except PydanticValidationError as e:
        raise RuntimeError(
            f"Pydantic validation error in {process_name}:\n{e}"
        ) from e


class BaseProcess(ABC):
    """
    Abstract base class for per-agent phase-state processes.

    A process is evaluated once per agent per tick. Subclasses implement
    process(agent, time); run() is the SimPy loop that drives it over the
    roster at the configured tick granularity.

    Processes never terminate: each is an explicit state machine whose
    state lives on the agent.
    """

    def __init__(
        self,
        sim_env: SimulationEnvironment,
        config: SimulationConfig,
        agents: list[Agent],
        worker_id: int = 0,
    ):
        """
        Initialize the process.

        Args:
            sim_env: SimPy simulation environment wrapper
            config: Simulation configuration
            agents: Roster of agents this process evaluates
            worker_id: Worker process identifier
        """
        self.sim_env = sim_env
        self.env = sim_env.env  # SimPy environment for yield
        self.config = config
        self.agents = agents
        self.worker_id = worker_id
        self.tick_days = config.simulation.tick_days

        # Statistics tracking
        self._stats: dict[str, int] = {}

    @abstractmethod
    def process(self, agent: Agent, time: date) -> Any:
        """
        Evaluate one agent at one tick.

        Must be implemented by subclasses. All reads and writes for the
        agent happen here with no suspension point.
        """
        pass

    def run(self) -> Generator:
        """
        Main process loop.

        Evaluates every living agent once per tick.
        """
        logger.info(
            "process_started",
            process=self.__class__.__name__,
            worker_id=self.worker_id,
            agents=len(self.agents),
            tick_days=self.tick_days,
        )

        while True:
            self.process_tick(self.sim_env.current_date)
            yield self.env.timeout(self.tick_days)

    def process_tick(self, time: date) -> None:
        """
        Evaluate every living agent at a time.

        An agent whose evaluation fails on missing data is skipped for this
        tick; the rest of the roster is still processed.

        Args:
            time: Current simulation date
        """
        self.increment_stat("ticks")
        for agent in self.agents:
            if not agent.alive(time):
                continue
            try:
                self.process(agent, time)
            except MissingAttributeError as e:
                self.increment_stat("agent_errors")
                logger.error(
                    "agent_process_failed",
                    process=self.__class__.__name__,
                    worker_id=self.worker_id,
                    agent_id=str(e.agent_id),
                    sim_date=time.isoformat(),
                    attribute=e.attribute,
                )

    def start(self) -> Any:
        """
        Start the process.

        Returns:
            SimPy Process
        """
        process_name = self.__class__.__name__
        wrapped_gen = wrap_generator_for_pydantic(self.run(), process_name)
        return self.sim_env.process(wrapped_gen)

    def increment_stat(self, name: str, value: int = 1) -> None:
        """
        Increment a statistics counter.

        Args:
            name: Statistic name
            value: Amount to increment
        """
        self._stats[name] = self._stats.get(name, 0) + value

    def get_stats(self) -> dict[str, int]:
        """
        Get all statistics.

        Returns:
            Dictionary of statistic names to values
        """
        return self._stats.copy()
