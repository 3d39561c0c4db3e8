"""Encoders that turn decoded ARFF cells into float vectors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

import numpy as np

NUMERIC = "numeric"
CATEGORICAL = "categorical"
FEATURE_KINDS = (NUMERIC, CATEGORICAL)


class Featurizer:
    """Base class: maps one raw cell (or ``None`` for missing) to a vector."""

    @property
    def size(self) -> int:
        raise NotImplementedError

    def prepare(self, values: Iterable[Optional[str]]) -> None:
        """Inspect the column's values before featurizing; no-op by default."""

    def featurize(self, value: Optional[str]) -> np.ndarray:
        raise NotImplementedError


class NumericFeaturizer(Featurizer):
    """Single float per cell; missing cells become NaN."""

    @property
    def size(self) -> int:
        return 1

    def featurize(self, value: Optional[str]) -> np.ndarray:
        if value is None:
            return np.array([np.nan], dtype=np.float32)
        return np.array([float(value)], dtype=np.float32)


class CategoricalFeaturizer(Featurizer):
    """One-hot encoding over the values seen during :meth:`prepare`.

    Values are indexed in order of first appearance. Missing or unseen values
    encode as all zeros.
    """

    def __init__(self) -> None:
        self.mapping: Dict[str, int] = {}

    @property
    def size(self) -> int:
        return len(self.mapping)

    def prepare(self, values: Iterable[Optional[str]]) -> None:
        self.mapping = {}
        for value in values:
            if value is not None and value not in self.mapping:
                self.mapping[value] = len(self.mapping)

    def featurize(self, value: Optional[str]) -> np.ndarray:
        encoded = np.zeros(self.size, dtype=np.float32)
        index = self.mapping.get(value) if value is not None else None
        if index is not None:
            encoded[index] = 1.0
        return encoded


def featurizer_for(kind: str) -> Featurizer:
    if kind == NUMERIC:
        return NumericFeaturizer()
    if kind == CATEGORICAL:
        return CategoricalFeaturizer()
    raise ValueError(f"Unknown feature kind: {kind!r}")


@dataclass
class Feature:
    """A selected column together with the featurizer that encodes it."""

    name: str
    kind: str
    featurizer: Optional[Featurizer] = None

    def __post_init__(self) -> None:
        if self.featurizer is None:
            self.featurizer = featurizer_for(self.kind)


def concat_features(features: List[Feature], values: List[Optional[str]]) -> np.ndarray:
    """Featurize ``values`` (aligned with ``features``) into one flat array."""

    if not features:
        return np.zeros(0, dtype=np.float32)
    return np.concatenate(
        [feature.featurizer.featurize(value) for feature, value in zip(features, values)]
    ).astype(np.float32)
