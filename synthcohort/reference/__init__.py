"""
Reference data for SynthCohort.

Provides:
- Growth chart percentile lookups (CDC 2000 LMS tables)
- Payer registry construction
"""

from synthcohort.reference.growth_charts import GrowthChartLookup, bmi
from synthcohort.reference.loader import ReferenceDataLoader, build_payer_registry

__all__ = [
    "GrowthChartLookup",
    "bmi",
    "ReferenceDataLoader",
    "build_payer_registry",
]
