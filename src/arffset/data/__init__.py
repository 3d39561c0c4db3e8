"""ARFF parsing, column selection and the torch dataset facade."""

from .attributes import Attribute, AttributeType, parse_attribute
from .builder import ColumnRole, DatasetBuilder
from .dataset import ArffDataset, create_dataloader, split_indices
from .parser import ArffParser
from .quoting import split, unescape, unquote
from .sources import open_source, resolve_source

__all__ = [
    "Attribute",
    "AttributeType",
    "parse_attribute",
    "ColumnRole",
    "DatasetBuilder",
    "ArffDataset",
    "create_dataloader",
    "split_indices",
    "ArffParser",
    "split",
    "unescape",
    "unquote",
    "open_source",
    "resolve_source",
]
