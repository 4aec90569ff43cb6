"""
Unit tests for configuration models, loading and validation.
"""

from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest
from pydantic import ValidationError

from synthcohort.config.loader import CONFIG_ENV_VAR, find_config_path, load_config, parse_overrides
from synthcohort.config.models import (
    InsuranceConfig,
    PrivatePayerConfig,
    SimulationConfig,
    SimulationTimeConfig,
    WeightManagementConfig,
)
from synthcohort.config.validation import ConfigurationError, validate_config


CONFIG_YAML = """
simulation:
  start_date: "2000-01-01"
  end_date: "${TEST_END_DATE:-2010-01-01}"
  tick_days: 14

weight_management:
  adherence: 0.5

insurance:
  private_payers:
    - name: Only Carrier
      monthly_premium: "199.99"

seed: 7
"""


class TestModels:
    """Tests for configuration models."""

    def test_weight_management_defaults(self):
        """Defaults match the published rates."""
        wm = WeightManagementConfig()

        assert wm.min_age == 5
        assert wm.start_probability == 0.493
        assert wm.adherence == 0.605
        assert wm.start_bmi == 30.0
        assert wm.start_percentile == 0.85
        assert (wm.min_loss, wm.max_loss) == (0.07, 0.10)
        assert wm.maintenance == 0.2
        assert wm.best_pediatric_percentile == 0.6

    def test_loss_range_must_be_ordered(self):
        """min_loss may not exceed max_loss."""
        with pytest.raises(ValidationError):
            WeightManagementConfig(min_loss=0.2, max_loss=0.1)

    def test_probabilities_bounded(self):
        """Probabilities outside [0, 1] are rejected."""
        with pytest.raises(ValidationError):
            WeightManagementConfig(adherence=1.5)

    def test_end_date_after_start(self):
        """The simulation must move forward in time."""
        with pytest.raises(ValidationError):
            SimulationTimeConfig(start_date=date(2020, 1, 1), end_date=date(2019, 1, 1))

    def test_tick_at_most_monthly(self):
        """Ticks longer than a month would skip premium months."""
        with pytest.raises(ValidationError):
            SimulationTimeConfig(
                start_date=date(2020, 1, 1), end_date=date(2021, 1, 1), tick_days=45
            )

    def test_medicaid_threshold(self):
        """Medicaid threshold is a multiple of the poverty level."""
        assert InsuranceConfig().medicaid_income_threshold == pytest.approx(14630)


class TestLoader:
    """Tests for YAML configuration loading."""

    def test_load_with_defaults(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        """Environment variable defaults are substituted."""
        monkeypatch.delenv("TEST_END_DATE", raising=False)
        path = tmp_path / "simulation.yaml"
        path.write_text(CONFIG_YAML)

        config = load_config(path)

        assert config.simulation.end_date == date(2010, 1, 1)
        assert config.simulation.tick_days == 14
        assert config.weight_management.adherence == 0.5
        assert config.weight_management.maintenance == 0.2
        assert config.insurance.private_payers[0].monthly_premium == Decimal("199.99")
        assert config.seed == 7

    def test_environment_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        """Environment variables replace placeholders."""
        monkeypatch.setenv("TEST_END_DATE", "2005-06-30")
        path = tmp_path / "simulation.yaml"
        path.write_text(CONFIG_YAML)

        config = load_config(path)

        assert config.simulation.end_date == date(2005, 6, 30)

    def test_override_values(self, tmp_path: Path):
        """Explicit overrides are deep-merged."""
        path = tmp_path / "simulation.yaml"
        path.write_text(CONFIG_YAML)

        config = load_config(path, override_values={"weight_management": {"maintenance": 0.3}})

        assert config.weight_management.maintenance == 0.3
        assert config.weight_management.adherence == 0.5

    def test_missing_file(self, tmp_path: Path):
        """A missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_config_path_from_environment(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ):
        """SYNTHCOHORT_CONFIG is used when no path is given."""
        path = tmp_path / "elsewhere.yaml"
        path.write_text(CONFIG_YAML)
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

        assert find_config_path() == path
        assert load_config().seed == 7

    def test_explicit_path_wins_over_environment(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ):
        """An explicit path is not replaced by the environment."""
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "ignored.yaml"))

        assert find_config_path(tmp_path / "chosen.yaml") == tmp_path / "chosen.yaml"

    def test_no_config_found(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        """Searching an empty directory names the environment variable."""
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        monkeypatch.chdir(tmp_path)

        with pytest.raises(FileNotFoundError, match=CONFIG_ENV_VAR):
            find_config_path()

    def test_root_must_be_mapping(self, tmp_path: Path):
        """A YAML list at the root is rejected."""
        path = tmp_path / "simulation.yaml"
        path.write_text("- 1\n- 2\n")

        with pytest.raises(ValueError):
            load_config(path)

    def test_dotted_overrides(self, tmp_path: Path):
        """key.path=value strings become typed nested overrides."""
        overrides = parse_overrides(
            ["weight_management.adherence=0.25", "simulation.end_date=2004-01-01", "seed=11"]
        )

        assert overrides == {
            "weight_management": {"adherence": 0.25},
            "simulation": {"end_date": date(2004, 1, 1)},
            "seed": 11,
        }

        path = tmp_path / "simulation.yaml"
        path.write_text(CONFIG_YAML)
        config = load_config(path, override_values=overrides)

        assert config.weight_management.adherence == 0.25
        assert config.simulation.end_date == date(2004, 1, 1)
        assert config.simulation.tick_days == 14

    @pytest.mark.parametrize("assignments", [["seed"], ["=3"], ["seed=1", "seed.value=2"]])
    def test_malformed_override(self, assignments: list[str]):
        """Assignments need a key, an equals sign and a mapping to extend."""
        with pytest.raises(ValueError):
            parse_overrides(assignments)


class TestValidation:
    """Tests for cross-field validation."""

    def test_valid_config(self, test_config: SimulationConfig):
        """A sound configuration validates without errors."""
        warnings = validate_config(test_config)

        assert not any("five-year" in w for w in warnings)

    def test_short_run_warns(self, test_config: SimulationConfig):
        """Runs shorter than an episode produce a warning."""
        config = test_config.model_copy(
            update={
                "simulation": SimulationTimeConfig(
                    start_date=date(2010, 1, 1), end_date=date(2011, 1, 1)
                )
            }
        )

        warnings = validate_config(config)

        assert any("five-year" in w for w in warnings)

    def test_duplicate_private_names(self, test_config: SimulationConfig):
        """Private payer names must be unique."""
        insurance = InsuranceConfig(
            private_payers=[
                PrivatePayerConfig(name="Twin", monthly_premium=Decimal("100")),
                PrivatePayerConfig(name="Twin", monthly_premium=Decimal("200")),
            ]
        )
        config = test_config.model_copy(update={"insurance": insurance})

        with pytest.raises(ConfigurationError):
            validate_config(config)

    def test_private_name_clashes_with_government(self, test_config: SimulationConfig):
        """Private carriers cannot reuse a government program name."""
        insurance = InsuranceConfig(
            private_payers=[PrivatePayerConfig(name="medicare", monthly_premium=Decimal("100"))]
        )
        config = test_config.model_copy(update={"insurance": insurance})

        with pytest.raises(ConfigurationError):
            validate_config(config)

    def test_inverted_age_band(self, test_config: SimulationConfig):
        """A carrier's age band must not be empty."""
        insurance = InsuranceConfig(
            private_payers=[
                PrivatePayerConfig(
                    name="Odd", monthly_premium=Decimal("100"), min_age=70, max_age=20
                )
            ]
        )
        config = test_config.model_copy(update={"insurance": insurance})

        with pytest.raises(ConfigurationError):
            validate_config(config)
