"""Torch dataset over a parsed ARFF file."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

import pandas as pd
import torch
from sklearn.model_selection import train_test_split
from torch.utils.data import DataLoader, Dataset

from ..errors import ConfigurationError
from ..features import CATEGORICAL, Feature, concat_features
from .attributes import Attribute, AttributeType
from .parser import ArffParser, Row
from .sources import open_source

if TYPE_CHECKING:
    from .builder import DatasetBuilder

logger = logging.getLogger(__name__)


class ArffDataset(Dataset):
    """Rows of an ARFF file, exposed through the features/labels chosen on a builder.

    Nothing is read until :meth:`prepare` is called. Raw decoded cells are
    available through :meth:`cell`; ``dataset[i]`` returns the encoded
    ``{"features": tensor, "labels": tensor}`` pair for row ``i``.
    """

    def __init__(self, builder: "DatasetBuilder") -> None:
        self.source: str = builder.source
        self.features: List[Feature] = [Feature(f.name, f.kind) for f in builder.features]
        self.labels: List[Feature] = [Feature(f.name, f.kind) for f in builder.labels]
        self.sampling = replace(builder.sampling)
        self.relation_name: str = ""
        self.attributes: List[Attribute] = []
        self.att_lookup: Dict[str, int] = {}
        self.data: Optional[List[Row]] = None

    @staticmethod
    def builder() -> "DatasetBuilder":
        from .builder import DatasetBuilder

        return DatasetBuilder()

    @property
    def prepared(self) -> bool:
        return self.data is not None

    def prepare(self) -> "ArffDataset":
        """Read and parse the whole source, then fit the featurizers."""

        if self.prepared:
            return self

        parser = ArffParser()
        with open_source(self.source) as stream:
            parser.parse(stream)

        self.relation_name = parser.relation_name
        self.attributes = parser.attributes
        self.att_lookup = parser.att_lookup
        self.data = parser.data
        try:
            self.prepare_featurizers()
        except Exception:
            self.data = None
            raise
        logger.info(
            "Prepared %r: %d rows, %d features, %d labels",
            self.relation_name,
            len(self.data),
            len(self.features),
            len(self.labels),
        )
        return self

    def prepare_featurizers(self) -> None:
        for feature in self.features + self.labels:
            index = self._column_index(feature.name)
            feature.featurizer.prepare(row[index] for row in self.data if index < len(row))

    def _require_prepared(self) -> List[Row]:
        if self.data is None:
            raise RuntimeError("Dataset has not been prepared; call prepare() first.")
        return self.data

    def _column_index(self, name: str) -> int:
        index = self.att_lookup.get(name)
        if index is None:
            raise ConfigurationError(f"Unknown column: {name!r}")
        return index

    def __len__(self) -> int:
        return len(self.data) if self.data is not None else 0

    def size(self) -> int:
        return len(self)

    def cell(self, row_index: int, column_name: str) -> Optional[str]:
        """Decoded value of ``column_name`` in row ``row_index`` (``None`` if missing)."""

        data = self._require_prepared()
        column = self._column_index(column_name)
        if not 0 <= row_index < len(data):
            raise IndexError(f"Row index {row_index} out of range [0, {len(data)})")
        row = data[row_index]
        if column >= len(row):
            raise IndexError(f"Row {row_index} has no value for column {column_name!r}")
        return row[column]

    def __getitem__(self, index: int) -> Dict[str, torch.Tensor]:
        features = concat_features(self.features, [self.cell(index, f.name) for f in self.features])
        labels = concat_features(self.labels, [self.cell(index, f.name) for f in self.labels])
        return {
            "features": torch.from_numpy(features),
            "labels": torch.from_numpy(labels),
        }

    @property
    def column_names(self) -> List[str]:
        return [attribute.name for attribute in self.attributes]

    def column_type(self, name: str) -> Optional[AttributeType]:
        index = self.att_lookup.get(name)
        return None if index is None else self.attributes[index].type

    @property
    def header(self) -> List[dict]:
        return [attribute.to_dict() for attribute in self.attributes]

    def feature_size(self) -> int:
        return len(self.features)

    def label_size(self) -> int:
        return len(self.labels)

    def to_info(self) -> str:
        """Human-readable summary of the relation and the selected columns."""

        def _describe(selected: List[Feature]) -> List[str]:
            lines = []
            for feature in selected:
                col_type = self.column_type(feature.name)
                lines.append(
                    f"- {feature.name}/{col_type.value if col_type else None}/"
                    f"{type(feature.featurizer).__name__}"
                )
            return lines

        lines = [f"Relation: {self.relation_name}", f"Features: {self.feature_size()}"]
        lines.extend(_describe(self.features))
        lines.append(f"Labels: {self.label_size()}")
        lines.extend(_describe(self.labels))
        return "\n".join(lines)

    def to_dataframe(self) -> pd.DataFrame:
        """Raw decoded table; short rows are padded with ``None``."""

        data = self._require_prepared()
        width = len(self.attributes)
        rows = [list(row) + [None] * (width - len(row)) for row in data]
        return pd.DataFrame(rows, columns=self.column_names, dtype=object)


def create_dataloader(
    dataset: ArffDataset,
    batch_size: Optional[int] = None,
    shuffle: Optional[bool] = None,
    num_workers: Optional[int] = None,
) -> DataLoader:
    """Wrap a prepared dataset in a DataLoader, defaulting to its sampling settings."""

    sampling = dataset.sampling
    generator = None
    if sampling.seed is not None:
        generator = torch.Generator().manual_seed(sampling.seed)

    return DataLoader(
        dataset,
        batch_size=sampling.batch_size if batch_size is None else batch_size,
        shuffle=sampling.shuffle if shuffle is None else shuffle,
        num_workers=sampling.num_workers if num_workers is None else num_workers,
        generator=generator,
        pin_memory=torch.cuda.is_available(),
    )


def split_indices(
    dataset: ArffDataset,
    validation_size: float,
    seed: int,
    stratify_label: bool = True,
) -> Tuple[List[int], List[int]]:
    """Split row indices into train/validation subsets.

    When ``stratify_label`` is set and the first label is categorical with at
    least two rows per class and no missing values, the split is stratified on it.
    """

    if not 0.0 < validation_size < 1.0:
        raise ValueError("validation_size must be within (0, 1).")

    indices = list(range(len(dataset)))
    stratify = None
    if stratify_label and dataset.labels and dataset.labels[0].kind == CATEGORICAL:
        name = dataset.labels[0].name
        values = pd.Series([dataset.cell(i, name) for i in indices], dtype=object)
        if values.notna().all() and values.value_counts().min() >= 2:
            stratify = values.tolist()

    train_idx, val_idx = train_test_split(
        indices,
        test_size=validation_size,
        random_state=seed,
        stratify=stratify,
    )
    return sorted(train_idx), sorted(val_idx)
