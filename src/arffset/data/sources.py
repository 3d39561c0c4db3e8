"""Resolve and open ARFF sources (local files or URLs, optionally gzipped).

A dataset source is usually opened twice: once by the builder to read the
header and once by :meth:`ArffDataset.prepare` to read everything. Whatever a
location points to must therefore be readable more than once.
"""

from __future__ import annotations

import gzip
import io
import os
from contextlib import ExitStack, contextmanager
from pathlib import Path
from typing import Iterator, TextIO, Union
from urllib.parse import urlparse
from urllib.request import urlopen

from ..errors import ConfigurationError

SourceLocation = Union[str, os.PathLike]

URL_SCHEMES = ("http", "https", "ftp", "file")


def is_url(location: str) -> bool:
    return "://" in location


def resolve_source(location: SourceLocation) -> str:
    """Normalise ``location`` to an absolute path or a validated URL."""

    if location is None:
        raise ConfigurationError("No ARFF source specified.")

    text = os.fspath(location) if not isinstance(location, str) else location
    text = text.strip()
    if not text:
        raise ConfigurationError("No ARFF source specified.")

    if is_url(text):
        parsed = urlparse(text)
        if parsed.scheme.lower() not in URL_SCHEMES:
            raise ConfigurationError(f"Invalid url: {text}")
        if parsed.scheme.lower() != "file" and not parsed.netloc:
            raise ConfigurationError(f"Invalid url: {text}")
        return text

    return str(Path(text).expanduser().resolve())


def is_gzipped(location: str) -> bool:
    if is_url(location):
        return urlparse(location).path.endswith(".gz")
    return location.endswith(".gz")


@contextmanager
def open_source(location: SourceLocation, encoding: str = "utf-8") -> Iterator[TextIO]:
    """Open ``location`` for reading text, decompressing ``.gz`` transparently.

    Every stream opened here is closed when the context exits, including on
    errors raised by the caller.
    """

    resolved = resolve_source(location)
    with ExitStack() as stack:
        if is_url(resolved):
            raw = stack.enter_context(urlopen(resolved))
        else:
            raw = stack.enter_context(open(resolved, "rb"))

        if is_gzipped(resolved):
            raw = stack.enter_context(gzip.GzipFile(fileobj=raw, mode="rb"))

        yield stack.enter_context(io.TextIOWrapper(raw, encoding=encoding, newline=None))
