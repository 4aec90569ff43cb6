"""
Weight management process for SynthCohort.

Agents who reach the weight management thresholds may start a five-year
episode:

- Loss phase (year 1): adherent agents lose weight linearly towards their
  sampled target loss. Children are never driven below a healthy
  weight-for-age floor.
- Regression phase (years 1-5): adherent agents without long-term success
  regain weight linearly towards a target (their original weight, or a
  weight-for-age curve for episodes that started in childhood).
- Resolved (after year 5): episodes without long-term success end; the
  rest stay active with no further weight changes.

Non-adherent agents keep their episode for five years but their weight is
never touched here.
"""

from datetime import date
from typing import Any

import structlog

from synthcohort.core.processes.base import BaseProcess
from synthcohort.domain.agent import Agent, MissingAttributeError
from synthcohort.domain.enums import VitalSign, WeightManagementPhase
from synthcohort.domain.weight import EPISODE_YEARS, LOSS_PHASE_YEARS, WeightManagementEpisode
from synthcohort.reference.growth_charts import GrowthChartLookup, bmi


logger = structlog.get_logger()

ADULT_AGE = 20
MIN_PEDIATRIC_BMI_AGE = 2
TRANSITION_AGE_MONTHS = ADULT_AGE * 12
REGRESSION_YEARS = EPISODE_YEARS - LOSS_PHASE_YEARS


class WeightManagementProcess(BaseProcess):
    """
    SimPy process for weight management episodes.

    Handles:
    - Threshold and probability checks for inactive agents (fresh draws
      every tick)
    - Episode entry (adherence, loss fraction, long-term success sampled once)
    - Loss and regression weight trajectories
    - Episode exit after five years
    """

    def __init__(
        self,
        *args: Any,
        growth_charts: GrowthChartLookup,
        **kwargs: Any,
    ):
        """
        Initialize the weight management process.

        Args:
            growth_charts: Percentile lookup for BMI and weight-for-age curves
        """
        super().__init__(*args, **kwargs)

        self.growth_charts = growth_charts
        self.wm_config = self.config.weight_management

    def process(self, agent: Agent, time: date) -> None:
        """
        Advance one agent's weight management state.

        Args:
            agent: Agent to evaluate
            time: Current simulation date
        """
        phase = agent.weight_management_phase(time)

        if phase == WeightManagementPhase.INACTIVE:
            if self.will_start_weight_management(agent, time):
                self.start_weight_management(agent, time)
            return

        episode = agent.weight_management

        if phase == WeightManagementPhase.LOSS:
            if episode.adheres:
                weight = self.loss_phase_weight(agent, episode, time)
                self._set_weight(agent, time, weight)
        elif phase == WeightManagementPhase.REGRESSION:
            if episode.adheres and not episode.long_term_success:
                weight = self.regression_weight(agent, episode, time)
                self._set_weight(agent, time, weight)
        elif not episode.long_term_success:
            self.stop_weight_management(agent, time)

    # Entry

    def meets_weight_management_thresholds(self, agent: Agent, time: date) -> bool:
        """
        Whether an agent meets the thresholds for starting weight management.

        With the default settings, children under 5 never meet the threshold,
        ages 5 to 19 meet it with a BMI at or over the 85th BMI-for-age
        percentile, and adults meet it with a BMI of 30 or more.
        """
        age = agent.age_in_years(time)
        if age < self.wm_config.min_age:
            return False

        current_bmi = agent.get_vital_sign(VitalSign.BMI, time)

        if age >= ADULT_AGE:
            return current_bmi >= self.wm_config.start_bmi
        if age >= MIN_PEDIATRIC_BMI_AGE:
            threshold = self.growth_charts.percentile_value(
                "bmi",
                agent.gender,
                agent.age_in_months(time),
                self.wm_config.start_percentile,
            )
            return current_bmi >= threshold
        return False

    def will_start_weight_management(self, agent: Agent, time: date) -> bool:
        """
        Whether an inactive agent starts weight management this tick.

        Meeting the thresholds does not mean the agent will adhere to the
        plan; that is decided on entry.
        """
        if self.meets_weight_management_thresholds(agent, time):
            return agent.rand() < self.wm_config.start_probability
        return False

    def start_weight_management(self, agent: Agent, time: date) -> WeightManagementEpisode:
        """
        Start an episode for an agent.

        Samples adherence and, for adherent agents, the fraction of body
        weight they will lose and whether they keep it off long term.

        Returns:
            The new episode
        """
        weight = agent.get_vital_sign(VitalSign.WEIGHT, time)

        adheres = agent.rand() < self.wm_config.adherence
        if adheres:
            loss_fraction = agent.rand_range(self.wm_config.min_loss, self.wm_config.max_loss)
            long_term_success = agent.rand() < self.wm_config.maintenance
        else:
            loss_fraction = 0.0
            long_term_success = False

        episode = WeightManagementEpisode(
            start_time=time,
            pre_management_weight=weight,
            loss_fraction=loss_fraction,
            adheres=adheres,
            long_term_success=long_term_success,
            entry_weight_percentile=self._entry_weight_percentile(agent, time, weight),
        )
        agent.weight_management = episode

        self.increment_stat("episodes_started")
        logger.debug(
            "weight_management_started",
            agent_id=str(agent.agent_id),
            sim_date=time.isoformat(),
            weight=round(weight, 2),
            adheres=adheres,
            loss_fraction=round(loss_fraction, 4),
            long_term_success=long_term_success,
        )
        return episode

    def _entry_weight_percentile(self, agent: Agent, time: date, weight: float) -> float:
        recorded = agent.vital_signs.get(VitalSign.WEIGHT_PERCENTILE, time)
        if recorded is not None:
            return recorded
        if agent.age_in_years(time) < ADULT_AGE and weight > 0:
            return self.growth_charts.percentile_of(
                "weight", agent.gender, agent.age_in_months(time), weight
            )
        return 0.5

    # Trajectories

    def loss_phase_weight(self, agent: Agent, episode: WeightManagementEpisode, time: date) -> float:
        """
        Weight during the loss phase.

        Linear from the pre-management weight to the target loss over the
        first year. For children the weight is floored at the configured
        weight-for-age percentile, since their healthy weight rises as
        they grow.
        """
        elapsed = min(episode.years_elapsed(time), LOSS_PHASE_YEARS)
        start_weight = episode.pre_management_weight
        weight = start_weight - start_weight * episode.loss_fraction * elapsed

        if agent.age_in_years(time) < ADULT_AGE:
            floor = self.growth_charts.percentile_value(
                "weight",
                agent.gender,
                agent.age_in_months(time),
                self.wm_config.best_pediatric_percentile,
            )
            weight = max(weight, floor)

        return weight

    def regression_target(self, agent: Agent, episode: WeightManagementEpisode, time: date) -> float:
        """
        Weight an agent regresses towards.

        Adult-onset episodes return to the pre-management weight. Episodes
        that started in childhood follow the weight-for-age curve at the
        agent's entry percentile: at the current age while still a child,
        or at the transition age once the agent is an adult.
        """
        if agent.age_in_years(episode.start_time) >= ADULT_AGE:
            return episode.pre_management_weight

        if agent.age_in_years(time) >= ADULT_AGE:
            age_months = TRANSITION_AGE_MONTHS
        else:
            age_months = agent.age_in_months(time)

        return self.growth_charts.percentile_value(
            "weight",
            agent.gender,
            age_months,
            episode.entry_weight_percentile,
        )

    def regression_weight(self, agent: Agent, episode: WeightManagementEpisode, time: date) -> float:
        """
        Weight during the regression phase.

        Linear from the loss-phase minimum back to the regression target
        over years two to five.
        """
        elapsed = episode.years_elapsed(time) - LOSS_PHASE_YEARS
        fraction = min(max(elapsed / REGRESSION_YEARS, 0.0), 1.0)
        minimum = episode.minimum_weight
        target = self.regression_target(agent, episode, time)
        return minimum + (target - minimum) * fraction

    def _set_weight(self, agent: Agent, time: date, weight: float) -> None:
        # Read height first so a failure leaves weight and BMI untouched
        height = agent.get_vital_sign(VitalSign.HEIGHT, time)
        if height <= 0:
            raise MissingAttributeError(agent.agent_id, VitalSign.HEIGHT.value, time)

        weight = max(weight, 0.0)
        agent.set_vital_sign(VitalSign.WEIGHT, time, weight)
        agent.set_vital_sign(VitalSign.BMI, time, bmi(height, weight))
        self.increment_stat("weight_updates")

    # Exit

    def stop_weight_management(self, agent: Agent, time: date) -> None:
        """End an agent's episode, clearing all of its state at once."""
        agent.weight_management = None

        self.increment_stat("episodes_stopped")
        logger.debug(
            "weight_management_stopped",
            agent_id=str(agent.agent_id),
            sim_date=time.isoformat(),
        )
