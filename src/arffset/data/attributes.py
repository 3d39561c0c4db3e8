"""Attribute declarations and the decoder for ``@attribute`` header lines."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from ..errors import FormatError, InvalidDateFormatError, UnsupportedAttributeTypeError
from .dateformat import DateFormat
from .quoting import split, unquote

RELATION = "@relation"
ATTRIBUTE = "@attribute"
DATA = "@data"


class AttributeType(Enum):
    NUMERIC = "NUMERIC"
    NOMINAL = "NOMINAL"
    STRING = "STRING"
    DATE = "DATE"


@dataclass(frozen=True)
class Attribute:
    """A single column declaration from the ARFF header."""

    name: str
    type: AttributeType
    date_format: Optional[str] = None
    nominal_values: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        info = {"name": self.name, "type": self.type.value}
        if self.date_format is not None:
            info["format"] = self.date_format
        return info


def _split_name(text: str) -> Tuple[str, str]:
    """Return the attribute name and whatever follows it."""

    if text[:1] in ("'", '"'):
        quote = text[0]
        end = text.find(quote, 1)
        if end == -1:
            raise FormatError(f"Unterminated quoted attribute name: {text}")
        return text[1:end].strip(), text[end + 1:].strip()

    brace = text.find("{")
    parts = text.split(None, 1)
    if not parts:
        raise UnsupportedAttributeTypeError("Missing attribute name and type")
    if 0 < brace < len(parts[0]):
        return text[:brace], text[brace:]
    if len(parts) < 2:
        raise UnsupportedAttributeTypeError(f"Missing attribute type: {text}")
    return parts[0], parts[1].strip()


def _nominal_values(declaration: str) -> Tuple[str, ...]:
    body = declaration.strip()
    if body.endswith("}"):
        body = body[1:-1]
    else:
        body = body[1:]
    return tuple(unquote(value.strip()) for value in split(body, ",", quote_char="'"))


def parse_attribute(line: str) -> Attribute:
    """Decode one ``@attribute`` line into an :class:`Attribute`.

    The name may be single- or double-quoted. The type token is matched by
    prefix: ``numeric``/``real``/``integer``, ``string``, ``date [pattern]``
    or a ``{...}`` value list.
    """

    text = line.replace("\t", " ").strip()
    if text[: len(ATTRIBUTE)].lower() != ATTRIBUTE:
        raise FormatError(f"Not an attribute declaration: {line}")
    text = text[len(ATTRIBUTE):].strip()

    name, remainder = _split_name(text)
    lower = remainder.lower()

    if lower.startswith(("numeric", "real", "integer")):
        return Attribute(name, AttributeType.NUMERIC)
    if lower.startswith("string"):
        return Attribute(name, AttributeType.STRING)
    if lower.startswith("date"):
        pattern = remainder[len("date"):].strip()
        if pattern.startswith("'"):
            pattern = unquote(pattern, "'")
        elif pattern.startswith('"'):
            pattern = unquote(pattern, '"')
        try:
            date_format = DateFormat(pattern)
        except ValueError as exc:
            raise InvalidDateFormatError(f"Invalid date format: {pattern}") from exc
        return Attribute(name, AttributeType.DATE, date_format=date_format.pattern)
    if lower.startswith("{"):
        return Attribute(name, AttributeType.NOMINAL, nominal_values=_nominal_values(remainder))

    raise UnsupportedAttributeTypeError(f"Unsupported attribute: {remainder}")
