"""
Enumeration types for SynthCohort domain models.
"""

from enum import Enum


class Gender(str, Enum):
    """Gender enumeration (growth charts are tabulated per gender)."""
    MALE = "M"
    FEMALE = "F"


class VitalSign(str, Enum):
    """Time-indexed physiological measurements."""
    WEIGHT = "weight"                        # kg
    HEIGHT = "height"                        # cm
    BMI = "bmi"                              # kg/m^2
    WEIGHT_PERCENTILE = "weight_percentile"  # fraction, 0-1


class CoverageStatus(str, Enum):
    """Derived insurance status category of an agent's primary payer."""
    NONE = "none"
    MEDICARE = "medicare"
    MEDICAID = "medicaid"
    PRIVATE = "private"


class GovernmentProgram(str, Enum):
    """Government insurance programs with statutory eligibility rules."""
    MEDICARE = "Medicare"
    MEDICAID = "Medicaid"
    DUAL_ELIGIBLE = "DualEligible"


class WeightManagementPhase(str, Enum):
    """Phases of a weight management episode."""
    INACTIVE = "Inactive"
    LOSS = "Loss"
    REGRESSION = "Regression"
    RESOLVED = "Resolved"
