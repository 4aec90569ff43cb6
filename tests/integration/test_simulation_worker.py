"""
Integration tests for multi-year simulation runs.
"""

from datetime import date
from uuid import UUID

import pytest

from synthcohort.config.models import ParallelConfig, SimulationConfig
from synthcohort.core.parallel_runner import ParallelRunner
from synthcohort.core.partition import derive_agent_rng
from synthcohort.core.worker import SimulationWorker
from synthcohort.domain.agent import WEIGHT_MANAGEMENT_KEYS, Agent
from synthcohort.domain.enums import Gender, VitalSign
from synthcohort.domain.payer import NO_INSURANCE_NAME
from synthcohort.reference.growth_charts import bmi


MEASURED_ON = date(2010, 1, 1)

# (birth_date, gender, height, weight, extra fields)
PROFILES = [
    (date(1975, 4, 2), Gender.FEMALE, 162.0, 88.0, {"income": 42000}),
    (date(1968, 9, 12), Gender.MALE, 178.0, 112.0, {"income": 65000, "occupation_level": 0.6}),
    (date(1990, 1, 1), Gender.MALE, 170.0, 89.6, {"income": 9000}),
    (date(1943, 2, 20), Gender.FEMALE, 158.0, 80.0, {"income": 30000}),
    (date(1941, 7, 7), Gender.MALE, 172.0, 70.0, {"income": 8000}),
    (date(1985, 3, 3), Gender.FEMALE, 165.0, 60.0, {"income": 16000}),
    (date(1982, 11, 30), Gender.FEMALE, 168.0, 95.0, {"income": 25000, "pregnant": True}),
    (date(2001, 5, 5), Gender.FEMALE, 135.0, 48.0, {"income": 30000}),
    (date(1999, 8, 8), Gender.MALE, 150.0, 62.0, {"income": 70000}),
    (date(1950, 1, 1), Gender.MALE, 175.0, 100.0, {"income": 20000,
                                                    "death_date": date(2012, 6, 1)}),
]


def build_roster(seed: int, copies: int = 3) -> list[Agent]:
    """Deterministic roster with a mix of ages, incomes and body sizes."""
    agents = []
    for i in range(copies * len(PROFILES)):
        birth_date, gender, height, weight, extra = PROFILES[i % len(PROFILES)]
        agent_id = UUID(int=i + 1)
        agent = Agent(agent_id, birth_date, gender, derive_agent_rng(seed, agent_id), **extra)
        agent.set_vital_sign(VitalSign.HEIGHT, MEASURED_ON, height)
        agent.set_vital_sign(VitalSign.WEIGHT, MEASURED_ON, weight)
        agent.set_vital_sign(VitalSign.BMI, MEASURED_ON, bmi(height, weight))
        agents.append(agent)
    return agents


@pytest.fixture
def roster(test_config: SimulationConfig) -> list[Agent]:
    return build_roster(test_config.seed)


class TestSimulationWorker:
    """Tests for a single worker over a six-year horizon."""

    def test_run_keeps_invariants(self, test_config: SimulationConfig, roster: list[Agent]):
        """A long run leaves every agent in a consistent state."""
        results = SimulationWorker(test_config, roster).run()

        assert results["agent_errors"] == 0
        assert results["process_stats"]["weight_management"]["episodes_started"] > 0

        for agent in results["agents"]:
            attributes = agent.weight_management_attributes()
            assert attributes == {} or set(attributes) == set(WEIGHT_MANAGEMENT_KEYS)

            assert all(w >= 0 for _, w in agent.vital_signs.history(VitalSign.WEIGHT))

            records = agent.coverage.records
            assert records
            assert agent.coverage_status is not None
            for earlier, later in zip(records, records[1:]):
                assert later.start >= earlier.end

    def test_adult_episode_reaches_loss_minimum(self, test_config: SimulationConfig):
        """Adherent adults lose weight during their first year."""
        config = test_config.model_copy(
            update={
                "weight_management": test_config.weight_management.model_copy(
                    update={"start_probability": 1.0, "adherence": 1.0}
                )
            }
        )
        agent = build_roster(config.seed, copies=1)[1]

        SimulationWorker(config, [agent]).run()

        weights = [w for _, w in agent.vital_signs.history(VitalSign.WEIGHT)]
        assert min(weights) < 112.0
        assert min(weights) >= 112.0 * (1 - config.weight_management.max_loss) - 1e-9

    def test_dead_agents_get_no_new_coverage(
        self, test_config: SimulationConfig, roster: list[Agent]
    ):
        """Coverage decisions stop at death."""
        SimulationWorker(test_config, roster).run()

        for agent in roster:
            if agent.death_date is not None:
                assert agent.coverage.last_record().start < agent.death_date

    def test_payer_stats_match_coverage(self, test_config: SimulationConfig, roster: list[Agent]):
        """Payer customer-years equal the payer slots filled by decisions."""
        results = SimulationWorker(test_config, roster).run()

        slots = sum(
            1 + (record.secondary != NO_INSURANCE_NAME)
            for agent in roster
            for record in agent.coverage.records
        )
        customer_years = sum(s.customer_years for s in results["payer_stats"].values())

        assert customer_years == slots
        assert results["process_stats"]["coverage_selection"]["coverage_decisions"] == sum(
            len(agent.coverage.records) for agent in roster
        )

    def test_missing_vitals_isolated(self, test_config: SimulationConfig, roster: list[Agent]):
        """An agent without a BMI fails every tick without stopping the run."""
        broken_id = UUID(int=10_000)
        broken = Agent(
            broken_id,
            date(1970, 1, 1),
            Gender.FEMALE,
            derive_agent_rng(test_config.seed, broken_id),
            income=50000,
        )
        broken.set_vital_sign(VitalSign.HEIGHT, MEASURED_ON, 165.0)

        results = SimulationWorker(test_config, [broken, *roster]).run()

        wm_stats = results["process_stats"]["weight_management"]
        assert wm_stats["agent_errors"] == wm_stats["ticks"]
        assert broken.coverage.records
        assert wm_stats["episodes_started"] > 0


class TestParallelRunner:
    """Tests for the parallel runner (sequential mode)."""

    def test_results_independent_of_partitioning(self, test_config: SimulationConfig):
        """Agent timelines are the same with one worker or three."""
        single = test_config.model_copy(update={"parallel": ParallelConfig(num_workers=1)})
        triple = test_config.model_copy(update={"parallel": ParallelConfig(num_workers=3)})

        one = ParallelRunner(single).run(build_roster(test_config.seed), sequential=True)
        three = ParallelRunner(triple).run(build_roster(test_config.seed), sequential=True)

        assert three["num_workers"] == 3
        by_id = {agent.agent_id: agent for agent in three["agents"]}
        assert len(by_id) == len(one["agents"])

        for agent in one["agents"]:
            other = by_id[agent.agent_id]
            assert other.coverage.records == agent.coverage.records
            assert other.vital_signs.history(VitalSign.WEIGHT) == agent.vital_signs.history(
                VitalSign.WEIGHT
            )
            assert other.premium_expenses == agent.premium_expenses

    def test_payer_stats_merge_across_workers(self, test_config: SimulationConfig):
        """Merged payer statistics equal a single-worker run's."""
        single = test_config.model_copy(update={"parallel": ParallelConfig(num_workers=1)})

        one = ParallelRunner(single).run(build_roster(test_config.seed), sequential=True)
        two = ParallelRunner(test_config).run(build_roster(test_config.seed), sequential=True)

        assert set(one["payer_stats"]) == set(two["payer_stats"])
        for name, stats in one["payer_stats"].items():
            merged = two["payer_stats"][name]
            assert merged.customer_years == stats.customer_years
            assert merged.customers == stats.customers
            assert merged.revenue == stats.revenue
        assert one["coverage_status_counts"] == two["coverage_status_counts"]
