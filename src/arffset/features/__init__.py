"""Feature encoding for selected ARFF columns."""

from .featurizers import (
    CATEGORICAL,
    FEATURE_KINDS,
    NUMERIC,
    CategoricalFeaturizer,
    Feature,
    Featurizer,
    NumericFeaturizer,
    concat_features,
    featurizer_for,
)

__all__ = [
    "CATEGORICAL",
    "FEATURE_KINDS",
    "NUMERIC",
    "CategoricalFeaturizer",
    "Feature",
    "Featurizer",
    "NumericFeaturizer",
    "concat_features",
    "featurizer_for",
]
