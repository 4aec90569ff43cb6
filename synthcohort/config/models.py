"""
Pydantic configuration models for SynthCohort.

These models define the structure and validation for simulation configuration.
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings


class SimulationTimeConfig(BaseModel):
    """Simulation time boundaries and tick granularity."""

    start_date: date = Field(..., description="Simulation start date")
    end_date: date = Field(..., description="Simulation end date")
    tick_days: int = Field(
        default=7,
        ge=1,
        le=31,
        description=(
            "Days between ticks. At most monthly so the monthly premium "
            "obligation is always resolved."
        ),
    )

    @field_validator("end_date")
    @classmethod
    def end_after_start(cls, v: date, info) -> date:
        """Ensure end_date is after start_date."""
        if "start_date" in info.data and v <= info.data["start_date"]:
            raise ValueError("end_date must be after start_date")
        return v


class WeightManagementConfig(BaseModel):
    """
    Weight management episode parameters.

    Defaults follow published adherence and maintenance rates for
    behavioural weight-loss programmes.
    """

    min_age: int = Field(
        default=5,
        ge=0,
        le=120,
        description="Minimum age (years) at which management can start",
    )
    start_probability: float = Field(
        default=0.493,
        ge=0,
        le=1,
        description="Probability per tick that an eligible agent starts management",
    )
    adherence: float = Field(
        default=0.605,
        ge=0,
        le=1,
        description="Probability that an agent follows the management plan",
    )
    start_bmi: float = Field(
        default=30.0,
        gt=0,
        description="Adult (20+) BMI threshold for starting management",
    )
    start_percentile: float = Field(
        default=0.85,
        gt=0,
        lt=1,
        description="Pediatric (2-19) BMI-for-age percentile threshold",
    )
    min_loss: float = Field(
        default=0.07,
        ge=0,
        lt=1,
        description="Minimum fraction of body weight lost in the first year",
    )
    max_loss: float = Field(
        default=0.10,
        ge=0,
        lt=1,
        description="Maximum fraction of body weight lost in the first year",
    )
    maintenance: float = Field(
        default=0.2,
        ge=0,
        le=1,
        description="Probability that an adherent agent keeps the weight off long term",
    )
    best_pediatric_percentile: float = Field(
        default=0.6,
        gt=0,
        lt=1,
        description="Weight-for-age percentile that floors pediatric weight loss",
    )

    @model_validator(mode="after")
    def loss_range_ordered(self) -> "WeightManagementConfig":
        """Ensure min_loss <= max_loss."""
        if self.min_loss > self.max_loss:
            raise ValueError(
                f"min_loss ({self.min_loss}) must not exceed max_loss ({self.max_loss})"
            )
        return self


class PrivatePayerConfig(BaseModel):
    """A private insurance carrier."""

    name: str = Field(..., min_length=1, max_length=100)
    monthly_premium: Decimal = Field(
        ...,
        ge=0,
        description="Monthly premium charged to each covered agent ($)",
    )
    min_age: int = Field(default=0, ge=0, description="Minimum accepted age")
    max_age: int = Field(default=140, ge=0, description="Maximum accepted age")


class InsuranceConfig(BaseModel):
    """
    Insurance coverage parameters.

    Government program names identify the Medicare, Medicaid and
    Dual-Eligible payers in the registry.
    """

    mandate_year: int = Field(
        default=2006,
        description="Year from which the employer insurance mandate applies",
    )
    mandate_occupation: float = Field(
        default=0.2,
        ge=0,
        le=1,
        description="Occupation level at or above which the mandate covers premiums",
    )
    poverty_level: int = Field(
        default=11000,
        ge=0,
        description="Annual poverty-line income ($)",
    )
    medicaid_poverty_multiplier: float = Field(
        default=1.33,
        gt=0,
        description="Medicaid income threshold as a multiple of the poverty level",
    )
    medicare_age: int = Field(
        default=65,
        ge=0,
        description="Age at which Medicare accepts every agent",
    )
    max_premium_income_share: float = Field(
        default=0.2,
        gt=0,
        le=1,
        description="Largest share of annual income an agent will spend on premiums",
    )
    supplemental_probability: float = Field(
        default=0.8,
        ge=0,
        le=1,
        description="Probability that a Medicare enrollee seeks supplemental cover",
    )
    medicare_name: str = Field(default="Medicare")
    medicaid_name: str = Field(default="Medicaid")
    dual_eligible_name: str = Field(default="Dual Eligible")
    private_payers: list[PrivatePayerConfig] = Field(
        default_factory=lambda: [
            PrivatePayerConfig(name="Blue Harbor Health", monthly_premium=Decimal("320.00")),
            PrivatePayerConfig(name="Summit Mutual", monthly_premium=Decimal("410.00")),
            PrivatePayerConfig(name="Keystone Care", monthly_premium=Decimal("265.00")),
        ],
        description="Private carriers available for selection",
    )

    @property
    def medicaid_income_threshold(self) -> float:
        """Annual income at or below which Medicaid accepts an agent."""
        return self.poverty_level * self.medicaid_poverty_multiplier


class ParallelConfig(BaseModel):
    """Parallel execution settings."""

    num_workers: int = Field(
        default=1,
        ge=1,
        le=64,
        description="Number of worker processes",
    )


class SimulationConfig(BaseSettings):
    """
    Root simulation configuration.

    This is the main configuration class that contains all simulation settings.
    Values can be loaded from YAML files and overridden via environment variables.
    """

    simulation: SimulationTimeConfig
    weight_management: WeightManagementConfig = Field(default_factory=WeightManagementConfig)
    insurance: InsuranceConfig = Field(default_factory=InsuranceConfig)
    parallel: ParallelConfig = Field(default_factory=ParallelConfig)

    seed: int = Field(
        default=42,
        description="Base random seed for reproducibility",
    )

    model_config = {
        "env_prefix": "SYNTHCOHORT_",
        "env_nested_delimiter": "__",
    }
