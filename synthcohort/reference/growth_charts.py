"""
Growth chart lookup service for SynthCohort.

Age- and gender-indexed percentile curves from the CDC 2000 growth charts,
expressed with the LMS method:

- L (lambda): Box-Cox power transformation
- M (mu): Median
- S (sigma): Coefficient of variation

value = M * (1 + L*S*z)^(1/L)    when L != 0
value = M * exp(S*z)             when L == 0

with z = Φ⁻¹(percentile). L, M and S are linearly interpolated between
tabulated ages. Ages and percentiles outside the tabulated domain are
clamped rather than rejected so callers always get a value.

Reference: https://www.cdc.gov/growthcharts/
"""

import math

import structlog
from scipy import stats

from synthcohort.domain.enums import Gender

logger = structlog.get_logger()

LMSTable = dict[int, tuple[float, float, float]]

# Percentiles are fractions; extremes are clamped to keep z finite
MIN_PERCENTILE = 0.001
MAX_PERCENTILE = 0.999

# Weight-for-age (kg), males, 0-240 months
WEIGHT_FOR_AGE_MALE: LMSTable = {
    0: (-0.3053, 3.530, 0.1514),
    1: (0.0977, 4.470, 0.1359),
    2: (0.1890, 5.380, 0.1296),
    3: (0.1346, 6.123, 0.1256),
    6: (-0.0171, 7.934, 0.1215),
    9: (-0.1667, 9.180, 0.1182),
    12: (-0.2714, 10.15, 0.1149),
    18: (-0.3823, 11.47, 0.1127),
    24: (-0.4242, 12.59, 0.1139),
    36: (-0.4669, 14.34, 0.1198),
    48: (-0.5614, 16.33, 0.1307),
    60: (-0.7159, 18.62, 0.1441),
    72: (-0.8876, 20.93, 0.1555),
    84: (-1.0100, 23.39, 0.1644),
    96: (-1.0682, 25.94, 0.1722),
    108: (-1.0708, 28.58, 0.1803),
    120: (-1.0240, 31.44, 0.1893),
    132: (-0.9476, 34.77, 0.1979),
    144: (-0.8693, 38.91, 0.2044),
    156: (-0.8237, 43.87, 0.2082),
    168: (-0.8247, 49.49, 0.2091),
    180: (-0.8659, 55.38, 0.2070),
    192: (-0.9402, 60.98, 0.2016),
    204: (-1.0346, 65.89, 0.1934),
    216: (-1.1413, 70.11, 0.1837),
    228: (-1.2545, 73.71, 0.1737),
    240: (-1.3686, 76.78, 0.1642),
}

# Weight-for-age (kg), females, 0-240 months
WEIGHT_FOR_AGE_FEMALE: LMSTable = {
    0: (-0.3821, 3.399, 0.1433),
    1: (0.1744, 4.187, 0.1319),
    2: (0.3421, 5.030, 0.1253),
    3: (0.3181, 5.720, 0.1216),
    6: (0.0813, 7.351, 0.1192),
    9: (-0.0810, 8.475, 0.1175),
    12: (-0.1887, 9.363, 0.1162),
    18: (-0.3076, 10.67, 0.1165),
    24: (-0.3523, 11.91, 0.1202),
    36: (-0.3964, 13.86, 0.1294),
    48: (-0.4995, 16.06, 0.1411),
    60: (-0.6602, 18.48, 0.1522),
    72: (-0.8193, 20.93, 0.1612),
    84: (-0.9386, 23.53, 0.1691),
    96: (-0.9953, 26.31, 0.1774),
    108: (-0.9883, 29.34, 0.1868),
    120: (-0.9237, 32.78, 0.1970),
    132: (-0.8150, 36.90, 0.2068),
    144: (-0.6885, 41.74, 0.2141),
    156: (-0.5772, 47.00, 0.2173),
    168: (-0.5079, 52.11, 0.2163),
    180: (-0.4868, 56.56, 0.2116),
    192: (-0.5076, 60.08, 0.2042),
    204: (-0.5573, 62.68, 0.1954),
    216: (-0.6252, 64.52, 0.1865),
    228: (-0.7040, 65.81, 0.1784),
    240: (-0.7893, 66.75, 0.1714),
}

# Stature-for-age (cm), males, 0-240 months
HEIGHT_FOR_AGE_MALE: LMSTable = {
    0: (0.3487, 49.99, 0.0379),
    1: (0.1550, 54.72, 0.0370),
    2: (0.0093, 58.42, 0.0365),
    3: (-0.0928, 61.43, 0.0363),
    6: (-0.2623, 67.62, 0.0358),
    9: (-0.3040, 72.03, 0.0356),
    12: (-0.2847, 75.75, 0.0356),
    18: (-0.1884, 82.39, 0.0357),
    24: (-0.0554, 87.78, 0.0363),
    36: (0.1957, 96.10, 0.0393),
    48: (0.2708, 102.9, 0.0417),
    60: (0.2204, 109.2, 0.0432),
    72: (0.1080, 115.1, 0.0445),
    84: (-0.0168, 120.8, 0.0457),
    96: (-0.1368, 126.2, 0.0468),
    108: (-0.2427, 131.5, 0.0479),
    120: (-0.3254, 136.8, 0.0490),
    132: (-0.3816, 142.4, 0.0500),
    144: (-0.4097, 148.7, 0.0505),
    156: (-0.4134, 155.5, 0.0502),
    168: (-0.3994, 162.2, 0.0489),
    180: (-0.3757, 168.1, 0.0465),
    192: (-0.3502, 172.7, 0.0437),
    204: (-0.3295, 175.8, 0.0412),
    216: (-0.3173, 177.6, 0.0396),
    228: (-0.3134, 178.6, 0.0386),
    240: (-0.3155, 179.1, 0.0382),
}

# Stature-for-age (cm), females, 0-240 months
HEIGHT_FOR_AGE_FEMALE: LMSTable = {
    0: (0.3809, 49.29, 0.0379),
    1: (0.1700, 53.69, 0.0369),
    2: (0.0178, 57.07, 0.0365),
    3: (-0.0858, 59.80, 0.0361),
    6: (-0.2777, 65.73, 0.0353),
    9: (-0.3379, 70.11, 0.0350),
    12: (-0.3433, 73.96, 0.0349),
    18: (-0.2962, 80.80, 0.0352),
    24: (-0.2046, 86.40, 0.0362),
    36: (0.0047, 94.86, 0.0399),
    48: (0.0884, 101.8, 0.0428),
    60: (0.0696, 108.4, 0.0449),
    72: (-0.0049, 114.6, 0.0467),
    84: (-0.0919, 120.6, 0.0484),
    96: (-0.1759, 126.4, 0.0502),
    108: (-0.2483, 132.0, 0.0519),
    120: (-0.3033, 137.5, 0.0537),
    132: (-0.3380, 143.3, 0.0553),
    144: (-0.3547, 149.4, 0.0560),
    156: (-0.3600, 155.0, 0.0556),
    168: (-0.3607, 159.5, 0.0540),
    180: (-0.3608, 162.5, 0.0518),
    192: (-0.3616, 164.2, 0.0498),
    204: (-0.3632, 165.0, 0.0484),
    216: (-0.3655, 165.4, 0.0477),
    228: (-0.3684, 165.6, 0.0474),
    240: (-0.3718, 165.7, 0.0473),
}

# BMI-for-age, males, 24-240 months
BMI_FOR_AGE_MALE: LMSTable = {
    24: (-0.7766, 16.42, 0.0861),
    36: (-1.2236, 15.79, 0.0823),
    48: (-1.4997, 15.48, 0.0839),
    60: (-1.6315, 15.34, 0.0885),
    72: (-1.6623, 15.32, 0.0950),
    84: (-1.6293, 15.44, 0.1024),
    96: (-1.5635, 15.72, 0.1102),
    108: (-1.4867, 16.15, 0.1178),
    120: (-1.4143, 16.72, 0.1250),
    132: (-1.3563, 17.44, 0.1311),
    144: (-1.3159, 18.30, 0.1360),
    156: (-1.2932, 19.27, 0.1394),
    168: (-1.2865, 20.29, 0.1413),
    180: (-1.2926, 21.29, 0.1417),
    192: (-1.3074, 22.21, 0.1407),
    204: (-1.3268, 23.02, 0.1388),
    216: (-1.3467, 23.69, 0.1364),
    228: (-1.3651, 24.22, 0.1339),
    240: (-1.3815, 24.63, 0.1317),
}

# BMI-for-age, females, 24-240 months
BMI_FOR_AGE_FEMALE: LMSTable = {
    24: (-0.6075, 16.13, 0.0917),
    36: (-0.9803, 15.58, 0.0890),
    48: (-1.1963, 15.29, 0.0903),
    60: (-1.2959, 15.17, 0.0942),
    72: (-1.3224, 15.17, 0.0997),
    84: (-1.3064, 15.32, 0.1063),
    96: (-1.2716, 15.59, 0.1132),
    108: (-1.2353, 16.00, 0.1200),
    120: (-1.2062, 16.53, 0.1264),
    132: (-1.1882, 17.20, 0.1319),
    144: (-1.1814, 18.00, 0.1361),
    156: (-1.1839, 18.88, 0.1389),
    168: (-1.1929, 19.79, 0.1401),
    180: (-1.2053, 20.66, 0.1399),
    192: (-1.2183, 21.43, 0.1388),
    204: (-1.2301, 22.07, 0.1373),
    216: (-1.2399, 22.56, 0.1358),
    228: (-1.2475, 22.93, 0.1346),
    240: (-1.2531, 23.20, 0.1338),
}

LMS_TABLES: dict[tuple[str, Gender], LMSTable] = {
    ("weight", Gender.MALE): WEIGHT_FOR_AGE_MALE,
    ("weight", Gender.FEMALE): WEIGHT_FOR_AGE_FEMALE,
    ("height", Gender.MALE): HEIGHT_FOR_AGE_MALE,
    ("height", Gender.FEMALE): HEIGHT_FOR_AGE_FEMALE,
    ("bmi", Gender.MALE): BMI_FOR_AGE_MALE,
    ("bmi", Gender.FEMALE): BMI_FOR_AGE_FEMALE,
}

METRICS = frozenset(metric for metric, _ in LMS_TABLES)


def bmi(height_cm: float, weight_kg: float) -> float:
    """Body mass index from height (cm) and weight (kg)."""
    height_m = height_cm / 100
    return weight_kg / (height_m * height_m)


def _interpolate_lms(age_months: float, table: LMSTable) -> tuple[float, float, float]:
    """
    Interpolate LMS values for a given age.

    Uses linear interpolation between the bracketing tabulated ages and
    clamps to the first/last tabulated age outside the table.
    """
    ages = sorted(table)

    if age_months <= ages[0]:
        return table[ages[0]]
    if age_months >= ages[-1]:
        return table[ages[-1]]
    if age_months in table:
        return table[int(age_months)]

    lower_age = max(a for a in ages if a < age_months)
    upper_age = min(a for a in ages if a > age_months)
    t = (age_months - lower_age) / (upper_age - lower_age)

    l1, m1, s1 = table[lower_age]
    l2, m2, s2 = table[upper_age]

    return l1 + t * (l2 - l1), m1 + t * (m2 - m1), s1 + t * (s2 - s1)


def _value_from_lms_z(z: float, l: float, m: float, s: float) -> float:
    """Measurement at a z-score."""
    if abs(l) < 1e-10:
        return m * math.exp(z * s)
    return m * math.pow(1 + l * s * z, 1 / l)


def _z_from_value(value: float, l: float, m: float, s: float) -> float:
    """Z-score of a measurement."""
    if abs(l) < 1e-10:
        return math.log(value / m) / s
    return (math.pow(value / m, l) - 1) / (l * s)


class GrowthChartLookup:
    """
    Read-only percentile interpolation over the growth chart tables.

    Usage:
        charts = GrowthChartLookup()
        bmi_85th = charts.percentile_value("bmi", Gender.FEMALE, 120, 0.85)
        pct = charts.percentile_of("weight", Gender.MALE, 96, 31.2)
    """

    def __init__(self, tables: dict[tuple[str, Gender], LMSTable] | None = None):
        """
        Initialize the lookup.

        Args:
            tables: LMS tables keyed by (metric, gender). Defaults to the
                CDC 2000 tables.
        """
        self.tables = tables if tables is not None else LMS_TABLES

    def _table(self, metric: str, gender: Gender | str) -> LMSTable:
        try:
            return self.tables[(metric, Gender(gender))]
        except KeyError:
            raise ValueError(f"No growth chart for metric {metric!r}, gender {gender!r}") from None

    def _clamp_age(self, table: LMSTable, age_months: float) -> float:
        low, high = min(table), max(table)
        if age_months < low or age_months > high:
            logger.debug(
                "growth_chart_age_clamped",
                age_months=age_months,
                low=low,
                high=high,
            )
            return min(max(age_months, low), high)
        return age_months

    def percentile_value(
        self,
        metric: str,
        gender: Gender | str,
        age_months: float,
        percentile: float,
    ) -> float:
        """
        Measurement at a percentile for an age.

        Args:
            metric: "weight", "height" or "bmi"
            gender: Gender the curve is tabulated for
            age_months: Age in months (clamped to the tabulated range)
            percentile: Percentile as a fraction, e.g. 0.85 (clamped)

        Returns:
            Measurement value (kg, cm or kg/m^2)

        Raises:
            ValueError: If the metric or gender has no table
        """
        table = self._table(metric, gender)
        age = self._clamp_age(table, age_months)
        pct = min(max(percentile, MIN_PERCENTILE), MAX_PERCENTILE)

        l, m, s = _interpolate_lms(age, table)
        z = float(stats.norm.ppf(pct))
        return _value_from_lms_z(z, l, m, s)

    def percentile_of(
        self,
        metric: str,
        gender: Gender | str,
        age_months: float,
        value: float,
    ) -> float:
        """
        Percentile (fraction) of a measurement for an age.

        Args:
            metric: "weight", "height" or "bmi"
            gender: Gender the curve is tabulated for
            age_months: Age in months (clamped to the tabulated range)
            value: Measurement value, must be positive

        Returns:
            Percentile as a fraction, clamped to the lookup's domain
        """
        if value <= 0:
            raise ValueError(f"Measurement must be positive, got {value}")

        table = self._table(metric, gender)
        age = self._clamp_age(table, age_months)

        l, m, s = _interpolate_lms(age, table)
        pct = float(stats.norm.cdf(_z_from_value(value, l, m, s)))
        return min(max(pct, MIN_PERCENTILE), MAX_PERCENTILE)
