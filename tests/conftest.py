"""
Shared test fixtures for SynthCohort tests.
"""

from datetime import date
from decimal import Decimal
from typing import Callable
from uuid import uuid4

import numpy as np
import pytest

from synthcohort.config.models import (
    InsuranceConfig,
    ParallelConfig,
    PrivatePayerConfig,
    SimulationConfig,
    SimulationTimeConfig,
    WeightManagementConfig,
)
from synthcohort.core.environment import SimulationEnvironment
from synthcohort.domain.agent import Agent
from synthcohort.domain.enums import Gender, VitalSign
from synthcohort.domain.payer import PayerRegistry
from synthcohort.reference.growth_charts import GrowthChartLookup, bmi
from synthcohort.reference.loader import build_payer_registry


# =============================================================================
# RNG Fixtures
# =============================================================================


@pytest.fixture
def test_seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def test_rng(test_seed: int) -> np.random.Generator:
    """Deterministic random number generator."""
    return np.random.default_rng(test_seed)


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def test_config() -> SimulationConfig:
    """Minimal test configuration."""
    return SimulationConfig(
        simulation=SimulationTimeConfig(
            start_date=date(2010, 1, 1),
            end_date=date(2016, 1, 1),
            tick_days=7,
        ),
        weight_management=WeightManagementConfig(),
        insurance=InsuranceConfig(
            private_payers=[
                PrivatePayerConfig(name="Carrier A", monthly_premium=Decimal("300.00")),
                PrivatePayerConfig(name="Carrier B", monthly_premium=Decimal("500.00")),
            ],
        ),
        parallel=ParallelConfig(num_workers=2),
        seed=42,
    )


# =============================================================================
# Simulation Environment Fixtures
# =============================================================================


@pytest.fixture
def sim_env() -> SimulationEnvironment:
    """Test simulation environment."""
    return SimulationEnvironment(
        start_date=date(2010, 1, 1),
        end_date=date(2016, 1, 1),
        worker_id=0,
    )


# =============================================================================
# Reference Data Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def growth_charts() -> GrowthChartLookup:
    """CDC growth chart lookup."""
    return GrowthChartLookup()


@pytest.fixture
def payer_registry(test_config: SimulationConfig) -> PayerRegistry:
    """Fresh payer registry for the test configuration."""
    return build_payer_registry(test_config.insurance)


# =============================================================================
# Agent Fixtures
# =============================================================================


@pytest.fixture
def make_agent(test_seed: int) -> Callable[..., Agent]:
    """
    Factory for agents with optional body measurements.

    Height and weight (if given) are recorded at `measured_on`, together
    with the derived BMI.
    """
    counter = iter(range(1_000_000))

    def _make_agent(
        birth_date: date = date(1970, 1, 1),
        gender: Gender = Gender.FEMALE,
        height: float | None = 165.0,
        weight: float | None = None,
        measured_on: date = date(2010, 1, 1),
        seed: int | None = None,
        **kwargs,
    ) -> Agent:
        rng = np.random.default_rng(seed if seed is not None else test_seed + next(counter))
        agent = Agent(uuid4(), birth_date, gender, rng, **kwargs)
        if height is not None:
            agent.set_vital_sign(VitalSign.HEIGHT, measured_on, height)
        if weight is not None:
            agent.set_vital_sign(VitalSign.WEIGHT, measured_on, weight)
            if height:
                agent.set_vital_sign(VitalSign.BMI, measured_on, bmi(height, weight))
        return agent

    return _make_agent
