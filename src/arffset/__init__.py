"""Load ARFF datasets and choose features/labels after the fact."""

from .data import ArffDataset, ArffParser, AttributeType, DatasetBuilder, create_dataloader
from .errors import (
    ArffError,
    ArffReadError,
    ConfigurationError,
    FormatError,
    InvalidDateFormatError,
    MalformedRowError,
    UnsupportedAttributeTypeError,
)

__version__ = "0.1.0"

__all__ = [
    "ArffDataset",
    "ArffParser",
    "AttributeType",
    "DatasetBuilder",
    "create_dataloader",
    "ArffError",
    "ArffReadError",
    "ConfigurationError",
    "FormatError",
    "InvalidDateFormatError",
    "MalformedRowError",
    "UnsupportedAttributeTypeError",
]
