"""Line-oriented ARFF parser."""

from __future__ import annotations

import logging
import zlib
from enum import Enum
from typing import Dict, Iterable, List, Optional

from ..errors import ArffReadError, FormatError, MalformedRowError
from .attributes import ATTRIBUTE, DATA, RELATION, Attribute, AttributeType, parse_attribute
from .dateformat import DateFormat
from .quoting import split, unquote

logger = logging.getLogger(__name__)

MISSING = "?"

Row = List[Optional[str]]


class ParserState(Enum):
    IN_HEADER = "header"
    IN_DATA = "data"


class ArffParser:
    """Parses ARFF text into a relation name, attribute list and row table.

    The parser can be reused; each call to :meth:`parse` or
    :meth:`parse_header` discards whatever an earlier call produced.
    """

    def __init__(self) -> None:
        self.relation_name: str = ""
        self.attributes: List[Attribute] = []
        self.att_lookup: Dict[str, int] = {}
        self.data: List[Row] = []
        self.only_header = False
        self._formats: Dict[int, DateFormat] = {}

    def parse(self, lines: Iterable[str]) -> "ArffParser":
        """Parse header and data from an iterable of lines (e.g. a text stream)."""

        self.only_header = False
        self._run(lines)
        return self

    def parse_header(self, lines: Iterable[str]) -> "ArffParser":
        """Parse up to and including the ``@data`` marker, then stop reading."""

        self.only_header = True
        self._run(lines)
        return self

    @property
    def column_names(self) -> List[str]:
        return [attribute.name for attribute in self.attributes]

    @property
    def column_types(self) -> List[AttributeType]:
        return [attribute.type for attribute in self.attributes]

    @property
    def header(self) -> List[dict]:
        return [attribute.to_dict() for attribute in self.attributes]

    def _reset(self) -> None:
        self.relation_name = ""
        self.attributes = []
        self.att_lookup = {}
        self.data = []
        self._formats = {}

    def _add_attribute(self, attribute: Attribute) -> None:
        index = len(self.attributes)
        previous = self.att_lookup.get(attribute.name)
        if previous is not None:
            logger.warning(
                "Duplicate attribute name %r at index %d hides the one at index %d",
                attribute.name,
                index,
                previous,
            )
        self.attributes.append(attribute)
        self.att_lookup[attribute.name] = index
        if attribute.type is AttributeType.DATE:
            self._formats[index] = DateFormat(attribute.date_format)

    def _run(self, lines: Iterable[str]) -> None:
        self._reset()
        state = ParserState.IN_HEADER
        line_number = 0
        iterator = iter(lines)

        while True:
            try:
                raw = next(iterator)
            except StopIteration:
                break
            except (OSError, EOFError, UnicodeDecodeError, zlib.error) as exc:
                raise ArffReadError(f"Failed to read ARFF data: {exc}", line_number + 1) from exc

            line_number += 1
            line = raw.strip()
            if not line or line.startswith("%"):
                continue

            try:
                if state is ParserState.IN_HEADER:
                    if self._header_line(line):
                        state = ParserState.IN_DATA
                        if self.only_header:
                            break
                else:
                    self.data.append(self._data_line(line, line_number))
            except FormatError as exc:
                if exc.line_number is None:
                    raise type(exc)(str(exc), line_number) from exc
                raise
            except Exception as exc:
                raise FormatError(f"Failed to process ARFF line: {exc}", line_number) from exc

        logger.info(
            "Parsed relation %r: %d attributes, %d rows%s",
            self.relation_name,
            len(self.attributes),
            len(self.data),
            " (header only)" if self.only_header else "",
        )

    def _header_line(self, line: str) -> bool:
        """Handle one header line; returns True on the ``@data`` marker."""

        lower = line.lower()
        if lower.startswith(RELATION):
            self.relation_name = unquote(line[len(RELATION):].strip(), "'")
            if self.relation_name.startswith('"'):
                self.relation_name = unquote(self.relation_name, '"')
        elif lower.startswith(ATTRIBUTE):
            self._add_attribute(parse_attribute(line))
        elif lower.startswith(DATA):
            return True
        return False

    def _data_line(self, line: str, line_number: int) -> Row:
        row: Row = []
        cells = split(line, ",", unquote_fields=False, quote_char="'", escaped=True)
        for index, cell in enumerate(cells[: len(self.attributes)]):
            cell = cell.strip()
            if cell == MISSING:
                row.append(None)
                continue
            cell = unquote(cell, "'")
            row.append(self._coerce(index, cell, line_number))
        return row

    def _coerce(self, index: int, cell: str, line_number: int) -> str:
        attribute = self.attributes[index]
        att_type = attribute.type

        if att_type is AttributeType.NUMERIC:
            try:
                # float() accepts digit separators such as "1_000"
                if "_" in cell:
                    raise ValueError(cell)
                return repr(float(cell))
            except ValueError as exc:
                raise MalformedRowError(
                    f"Invalid numeric value {cell!r} for attribute {attribute.name!r}", line_number
                ) from exc
        if att_type is AttributeType.NOMINAL or att_type is AttributeType.STRING:
            return cell
        if att_type is AttributeType.DATE:
            try:
                return str(self._formats[index].to_epoch_millis(cell))
            except ValueError as exc:
                raise MalformedRowError(
                    f"Invalid date value {cell!r} for attribute {attribute.name!r} "
                    f"(format {attribute.date_format!r})",
                    line_number,
                ) from exc

        raise AssertionError(f"unreachable: unhandled attribute type {att_type}")
