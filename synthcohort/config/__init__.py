"""
Configuration module for SynthCohort.

This module provides:
- Pydantic configuration models
- YAML configuration loading
- Configuration validation
"""

from synthcohort.config.models import (
    SimulationConfig,
    SimulationTimeConfig,
    WeightManagementConfig,
    InsuranceConfig,
    PrivatePayerConfig,
    ParallelConfig,
)
from synthcohort.config.loader import load_config, parse_overrides
from synthcohort.config.validation import ConfigurationError, validate_config

__all__ = [
    "SimulationConfig",
    "SimulationTimeConfig",
    "WeightManagementConfig",
    "InsuranceConfig",
    "PrivatePayerConfig",
    "ParallelConfig",
    "load_config",
    "parse_overrides",
    "validate_config",
    "ConfigurationError",
]
