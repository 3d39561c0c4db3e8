"""Fluent builder that decides which ARFF columns become features or labels."""

from __future__ import annotations

import json
import logging
import re
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

from ..errors import ArffError, ConfigurationError
from ..features import CATEGORICAL, FEATURE_KINDS, NUMERIC, Feature
from ..utils.config_loader import resolve_project_path
from ..utils.sampling import SamplingConfig, to_sampling_config
from .attributes import AttributeType
from .dataset import ArffDataset
from .parser import ArffParser
from .sources import SourceLocation, is_url, open_source, resolve_source

logger = logging.getLogger(__name__)

# declared attribute types each feature kind may be built from
COMPATIBLE_TYPES = {
    NUMERIC: (AttributeType.NUMERIC, AttributeType.DATE),
    CATEGORICAL: (AttributeType.NOMINAL, AttributeType.STRING),
}


class ColumnRole(Enum):
    FEATURE = "feature"
    LABEL = "label"
    IGNORED = "ignored"


class DatasetBuilder:
    """Configures the column selection for an :class:`ArffDataset`.

    Calls are applied in order and return the builder, e.g.::

        dataset = (
            DatasetBuilder()
            .set_file("iris.arff")
            .class_is_last()
            .add_all_features()
            .build()
        )

    Name-based calls (class columns, regex selection, ``add_all_features``)
    read the header of the source once and cache it until the source changes.
    If the header cannot be read, those calls fail with
    :class:`ConfigurationError`; the explicit ``add_*_feature``/``add_*_label``
    methods never touch the source.
    """

    def __init__(self) -> None:
        self.source: Optional[str] = None
        self.class_columns: Set[str] = set()
        self.ignored_columns: Set[str] = set()
        self.all_features_added = False
        self.matching_features_added: Set[str] = set()
        self.date_columns_as_numeric = False
        self.string_columns_as_nominal = False
        self.features: List[Feature] = []
        self.labels: List[Feature] = []
        self.sampling = SamplingConfig()
        self._parser: Optional[ArffParser] = None
        self._header_read = False

    # -- source -------------------------------------------------------------

    def set_source(self, location: SourceLocation) -> "DatasetBuilder":
        self.source = resolve_source(location)
        self._parser = None
        self._header_read = False
        return self

    def set_file(self, path: str | Path) -> "DatasetBuilder":
        if is_url(str(path)):
            raise ConfigurationError(f"Invalid file path: {path}")
        return self.set_source(path)

    def set_url(self, url: str) -> "DatasetBuilder":
        if not is_url(str(url)):
            raise ConfigurationError(f"Invalid url: {url}")
        return self.set_source(url)

    def header_parser(self) -> Optional[ArffParser]:
        """Return a header-only parse of the source, or ``None`` if unavailable.

        The source is read at most once per :meth:`set_source`; read and format
        errors are logged and reported as "no information".
        """

        if not self._header_read:
            self._header_read = True
            self._parser = None
            if self.source is not None:
                parser = ArffParser()
                try:
                    with open_source(self.source) as stream:
                        parser.parse_header(stream)
                except (ArffError, OSError) as exc:
                    logger.debug("Could not read header of %s: %s", self.source, exc)
                else:
                    self._parser = parser
        return self._parser

    def _require_parser(self, purpose: str) -> ArffParser:
        parser = self.header_parser()
        if parser is None:
            raise ConfigurationError(
                f"Cannot {purpose}: no header information available for source {self.source!r}"
            )
        return parser

    def column_names(self) -> List[str]:
        parser = self.header_parser()
        return parser.column_names if parser is not None else []

    def column_type(self, name: str) -> Optional[AttributeType]:
        parser = self.header_parser()
        if parser is None or name not in parser.att_lookup:
            return None
        return parser.attributes[parser.att_lookup[name]].type

    # -- options ------------------------------------------------------------

    def date_as_numeric(self) -> "DatasetBuilder":
        self.date_columns_as_numeric = True
        return self

    def string_as_nominal(self) -> "DatasetBuilder":
        self.string_columns_as_nominal = True
        return self

    def set_sampling(self, batch_size: int, shuffle: bool, seed: Optional[int] = None) -> "DatasetBuilder":
        self.sampling = SamplingConfig(
            batch_size=batch_size,
            shuffle=shuffle,
            seed=seed,
            num_workers=self.sampling.num_workers,
        )
        return self

    # -- explicit selection -------------------------------------------------

    def role_of(self, name: str) -> ColumnRole:
        if any(feature.name == name for feature in self.features):
            return ColumnRole.FEATURE
        if any(label.name == name for label in self.labels):
            return ColumnRole.LABEL
        return ColumnRole.IGNORED

    def _select(self, name: str, kind: str, role: ColumnRole) -> None:
        current = self.role_of(name)
        if current is role:
            return
        if current is not ColumnRole.IGNORED:
            raise ConfigurationError(f"Column {name!r} is already selected as a {current.value}")

        target = self.labels if role is ColumnRole.LABEL else self.features
        target.append(Feature(name, kind))
        logger.debug("Selected %r as %s %s", name, kind, role.value)

    def add_numeric_feature(self, name: str) -> "DatasetBuilder":
        self._select(name, NUMERIC, ColumnRole.FEATURE)
        return self

    def add_categorical_feature(self, name: str) -> "DatasetBuilder":
        self._select(name, CATEGORICAL, ColumnRole.FEATURE)
        return self

    def add_numeric_label(self, name: str) -> "DatasetBuilder":
        self._select(name, NUMERIC, ColumnRole.LABEL)
        self.class_columns.add(name)
        return self

    def add_categorical_label(self, name: str) -> "DatasetBuilder":
        self._select(name, CATEGORICAL, ColumnRole.LABEL)
        self.class_columns.add(name)
        return self

    # -- header-driven selection --------------------------------------------

    def _kind_for(self, att_type: AttributeType) -> Optional[str]:
        """Feature kind for a declared type under the current options, or None to skip."""

        if att_type is AttributeType.NUMERIC:
            return NUMERIC
        if att_type is AttributeType.DATE:
            return NUMERIC if self.date_columns_as_numeric else None
        if att_type is AttributeType.NOMINAL:
            return CATEGORICAL
        if att_type is AttributeType.STRING:
            return CATEGORICAL if self.string_columns_as_nominal else None
        raise AssertionError(f"unreachable: unhandled attribute type {att_type}")

    def _add_column(self, parser: ArffParser, index: int) -> None:
        attribute = parser.attributes[index]
        if attribute.name in self.ignored_columns:
            logger.debug("Skipping ignored column %r", attribute.name)
            return

        kind = self._kind_for(attribute.type)
        if kind is None:
            logger.debug("Skipping %s column %r", attribute.type.value, attribute.name)
            return

        role = ColumnRole.LABEL if attribute.name in self.class_columns else ColumnRole.FEATURE
        self._select(attribute.name, kind, role)

    def class_column(self, *names: str) -> "DatasetBuilder":
        """Use the named column(s) as labels."""

        parser = self._require_parser(f"resolve class column(s) {list(names)}")
        for name in names:
            if name in self.class_columns:
                continue
            if name not in parser.att_lookup:
                raise ConfigurationError(f"Unknown class column: {name!r}")
            if self.role_of(name) is ColumnRole.FEATURE:
                raise ConfigurationError(f"Column {name!r} is already selected as a feature")
            self.class_columns.add(name)
            self._add_column(parser, parser.att_lookup[name])
        return self

    def class_index(self, index: int) -> "DatasetBuilder":
        """Use the column at the 0-based ``index`` as label."""

        parser = self._require_parser(f"resolve class index {index}")
        count = len(parser.attributes)
        if not 0 <= index < count:
            raise ConfigurationError(f"Class index {index} outside [0, {count})")
        return self.class_column(parser.attributes[index].name)

    def class_is_first(self) -> "DatasetBuilder":
        return self.class_index(0)

    def class_is_last(self) -> "DatasetBuilder":
        parser = self._require_parser("resolve the last column")
        return self.class_index(len(parser.attributes) - 1)

    def ignore_column(self, *names: str) -> "DatasetBuilder":
        self.ignored_columns.update(names)
        return self

    def ignore_matching(self, *regexes: str) -> "DatasetBuilder":
        """Ignore every currently known column whose full name matches a regex."""

        known = self.column_names()
        for regex in regexes:
            pattern = _compile(regex)
            self.ignored_columns.update(name for name in known if pattern.fullmatch(name))
        return self

    def add_all_features(self) -> "DatasetBuilder":
        """Select every column that is neither ignored nor a class column."""

        if self.all_features_added:
            return self

        parser = self._require_parser("add all features")
        self.all_features_added = True
        for index, name in enumerate(parser.column_names):
            if name in self.class_columns:
                continue
            self._add_column(parser, index)
        return self

    def add_matching_features(self, *regexes: str) -> "DatasetBuilder":
        """Select non-class columns whose full name matches a regex."""

        for regex in regexes:
            if regex in self.matching_features_added:
                continue
            pattern = _compile(regex)
            parser = self._require_parser(f"add features matching {regex!r}")
            self.matching_features_added.add(regex)
            for index, name in enumerate(parser.column_names):
                if name in self.class_columns:
                    continue
                if pattern.fullmatch(name):
                    self._add_column(parser, index)
        return self

    # -- schema records -----------------------------------------------------

    def to_schema_record(self) -> Dict[str, Any]:
        return {
            "source": self.source or "",
            "options": {
                "dateAsNumeric": self.date_columns_as_numeric,
                "stringAsNominal": self.string_columns_as_nominal,
            },
            "features": [{"name": f.name, "type": f.kind} for f in self.features],
            "labels": [{"name": f.name, "type": f.kind} for f in self.labels],
        }

    def from_schema_record(
        self,
        record: Mapping[str, Any],
        source: Optional[SourceLocation] = None,
    ) -> "DatasetBuilder":
        """Replay a record produced by :meth:`to_schema_record`.

        ``source`` overrides the recorded source. When the header of the
        source is readable, every entry must name an existing column whose
        declared type fits the recorded kind.
        """

        if not isinstance(record, Mapping):
            raise ConfigurationError("Schema record must be a mapping.")

        if source is not None:
            self.set_source(source)
        elif self.source is None and record.get("source"):
            self.set_source(record["source"])

        options = record.get("options", {}) or {}
        if options.get("dateAsNumeric"):
            self.date_as_numeric()
        if options.get("stringAsNominal"):
            self.string_as_nominal()

        features = _entries(record, "features")
        labels = _entries(record, "labels")
        parser = self.header_parser()
        if parser is not None:
            for entry in features + labels:
                _check_entry(parser, entry)

        for entry in labels:
            if entry["type"] == NUMERIC:
                self.add_numeric_label(entry["name"])
            else:
                self.add_categorical_label(entry["name"])
        for entry in features:
            if entry["type"] == NUMERIC:
                self.add_numeric_feature(entry["name"])
            else:
                self.add_categorical_feature(entry["name"])
        return self

    def save_schema(self, path: str | Path) -> Path:
        output_path = Path(path).resolve()
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(json.dumps(self.to_schema_record(), indent=2), encoding="utf-8")
        return output_path

    @classmethod
    def load_schema(cls, path: str | Path, source: Optional[SourceLocation] = None) -> "DatasetBuilder":
        schema_path = Path(path).expanduser().resolve()
        if not schema_path.exists():
            raise ConfigurationError(f"Schema file not found: {schema_path}")
        try:
            record = json.loads(schema_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Invalid schema file {schema_path}: {exc}") from exc
        return cls().from_schema_record(record, source)

    # -- configuration files ------------------------------------------------

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "DatasetBuilder":
        """Create a builder from a loaded YAML configuration (see ``load_config``)."""

        dataset_cfg = config.get("dataset", {}) or {}
        source = dataset_cfg.get("source")
        if source is not None and not is_url(str(source)):
            source = resolve_project_path(config, source)

        schema = dataset_cfg.get("schema")
        if schema:
            builder = cls.load_schema(resolve_project_path(config, schema), source)
            builder.sampling = to_sampling_config(config)
            return builder

        builder = cls()
        builder.sampling = to_sampling_config(config)
        if source is not None:
            builder.set_source(source)

        if dataset_cfg.get("date_as_numeric"):
            builder.date_as_numeric()
        if dataset_cfg.get("string_as_nominal"):
            builder.string_as_nominal()

        builder.ignore_column(*_as_list(dataset_cfg.get("ignore")))
        builder.ignore_matching(*_as_list(dataset_cfg.get("ignore_matching")))

        if dataset_cfg.get("class_column") is not None:
            builder.class_column(*_as_list(dataset_cfg["class_column"]))
        elif dataset_cfg.get("class_index") is not None:
            builder.class_index(int(dataset_cfg["class_index"]))
        elif dataset_cfg.get("class_is_first"):
            builder.class_is_first()
        elif dataset_cfg.get("class_is_last"):
            builder.class_is_last()

        features = dataset_cfg.get("features")
        if features == "all":
            builder.add_all_features()
        elif features:
            builder.add_matching_features(*_as_list(features))
        return builder

    def build(self) -> ArffDataset:
        if self.source is None:
            raise ConfigurationError("No ARFF source specified.")
        return ArffDataset(self)


def _compile(regex: str) -> "re.Pattern[str]":
    try:
        return re.compile(regex)
    except re.error as exc:
        raise ConfigurationError(f"Invalid regular expression {regex!r}: {exc}") from exc


def _as_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Iterable):
        return [str(item) for item in value]
    return [str(value)]


def _entries(record: Mapping[str, Any], key: str) -> List[Dict[str, str]]:
    entries = record.get(key, []) or []
    if not isinstance(entries, list):
        raise ConfigurationError(f"Schema record {key!r} must be a list.")
    for entry in entries:
        if not isinstance(entry, Mapping) or "name" not in entry or "type" not in entry:
            raise ConfigurationError(f"Schema record {key!r} entries need 'name' and 'type': {entry!r}")
        if entry["type"] not in FEATURE_KINDS:
            raise ConfigurationError(f"Unknown feature type {entry['type']!r} for {entry['name']!r}")
    return entries


def _check_entry(parser: ArffParser, entry: Mapping[str, str]) -> None:
    name = entry["name"]
    if name not in parser.att_lookup:
        raise ConfigurationError(f"Column {name!r} not found in source")
    declared = parser.attributes[parser.att_lookup[name]].type
    if declared not in COMPATIBLE_TYPES[entry["type"]]:
        raise ConfigurationError(
            f"Column {name!r} is declared {declared.value}, incompatible with {entry['type']}"
        )
