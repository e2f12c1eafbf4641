"""Journey timing and rating engine.

The core package holds the pure pieces of the journey simulator: validated
configuration, the Box–Muller duration sampler, synthetic reference
populations and the two rating strategies.  Scheduling and presentation live
in :mod:`journey_sim`.
"""

from .classification import (
    TOTAL_AXIS,
    Classifier,
    PercentileClassifier,
    ThresholdClassifier,
    build_classifier,
    classify_by_percentile,
    classify_by_threshold,
)
from .config import (
    JourneyConfig,
    SegmentStat,
    ThresholdTable,
    default_journey_config,
    load_journey_config,
)
from .errors import ConfigurationError, JourneyError, MissingSinkElementError
from .population import (
    PopulationSet,
    ReferencePopulation,
    build_population,
    build_total_population,
    calculate_percentile,
)
from .ratings import RATING_LEVELS, Rating, RatingLevel, rating_level
from .sampling import DurationSampler, NumpyUniformSource, SequenceUniformSource

__all__ = [
    "TOTAL_AXIS",
    "Classifier",
    "PercentileClassifier",
    "ThresholdClassifier",
    "build_classifier",
    "classify_by_percentile",
    "classify_by_threshold",
    "JourneyConfig",
    "SegmentStat",
    "ThresholdTable",
    "default_journey_config",
    "load_journey_config",
    "ConfigurationError",
    "JourneyError",
    "MissingSinkElementError",
    "PopulationSet",
    "ReferencePopulation",
    "build_population",
    "build_total_population",
    "calculate_percentile",
    "RATING_LEVELS",
    "Rating",
    "RatingLevel",
    "rating_level",
    "DurationSampler",
    "NumpyUniformSource",
    "SequenceUniformSource",
]
