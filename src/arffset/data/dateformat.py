"""SimpleDateFormat-style date patterns, as used by ARFF ``date`` attributes.

ARFF files declare date columns with Java-flavoured patterns such as
``yyyy-MM-dd'T'HH:mm:ss``. The patterns are translated once into
``datetime.strptime`` directives. Timestamps without an explicit offset are
interpreted as UTC.

Two letters have no ``strptime`` counterpart and are matched with a regular
expression before the remaining fields go through ``strptime``:

- ``S`` is a count of milliseconds, so ``.5`` reads as 5 ms and ``.250`` as 250 ms.
- ``z`` is a zone name. Only ``UTC``, ``GMT`` and ``Z`` are accepted; other
  names raise ``ValueError`` rather than being read in an unknown zone.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple

DEFAULT_PATTERN = "yyyy-MM-dd'T'HH:mm:ss"

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

MILLIS = "S"
ZONE_NAME = "z"
UTC_NAMES = frozenset({"UTC", "GMT", "Z"})

# strptime joins the regex-captured fields with a separator no field contains
_FIELD_SEPARATOR = "\x1f"

Token = Tuple[str, bool]


def _year(count: int) -> str:
    return "%y" if count == 2 else "%Y"


def _month(count: int) -> str:
    if count >= 4:
        return "%B"
    if count == 3:
        return "%b"
    return "%m"


def _weekday(count: int) -> str:
    return "%A" if count >= 4 else "%a"


_DIRECTIVES: Dict[str, object] = {
    "y": _year,
    "M": _month,
    "d": "%d",
    "H": "%H",
    "h": "%I",
    "m": "%M",
    "s": "%S",
    "a": "%p",
    "E": _weekday,
    "Z": "%z",
    "X": "%z",
}

_FIELD_REGEX: Dict[str, str] = {
    "%Y": r"\d{4}",
    "%y": r"\d{2}",
    "%m": r"\d{1,2}",
    "%d": r"\d{1,2}",
    "%H": r"\d{1,2}",
    "%I": r"\d{1,2}",
    "%M": r"\d{1,2}",
    "%S": r"\d{1,2}",
    "%b": r"[^\W\d_]+",
    "%B": r"[^\W\d_]+",
    "%a": r"[^\W\d_]+",
    "%A": r"[^\W\d_]+",
    "%p": r"[AaPp][Mm]",
    "%z": r"Z|[+-]\d{2}:?\d{2}",
    MILLIS: r"\d+",
    ZONE_NAME: r"[A-Za-z]+",
}


def tokenize(pattern: str) -> List[Token]:
    """Split a pattern into ``(text, is_field)`` pairs.

    Field tokens are runs of one pattern letter (``"yyyy"``); everything else,
    quoted literals included, is merged into literal tokens. Raises
    ``ValueError`` for unknown letters and unterminated quotes.
    """

    tokens: List[Token] = []
    literal: List[str] = []
    i = 0
    length = len(pattern)
    while i < length:
        char = pattern[i]

        if char == "'":
            # '' is a literal quote, otherwise read up to the closing quote
            if i + 1 < length and pattern[i + 1] == "'":
                literal.append("'")
                i += 2
                continue
            end = i + 1
            while True:
                if end >= length:
                    raise ValueError(f"Unterminated quote in date pattern: {pattern!r}")
                if pattern[end] == "'":
                    if end + 1 < length and pattern[end + 1] == "'":
                        literal.append("'")
                        end += 2
                        continue
                    break
                literal.append(pattern[end])
                end += 1
            i = end + 1
            continue

        if ("a" <= char <= "z") or ("A" <= char <= "Z"):
            if char not in _DIRECTIVES and char not in (MILLIS, ZONE_NAME):
                raise ValueError(f"Unsupported date pattern letter {char!r} in {pattern!r}")
            count = 1
            while i + count < length and pattern[i + count] == char:
                count += 1
            if literal:
                tokens.append(("".join(literal), False))
                literal = []
            tokens.append((pattern[i:i + count], True))
            i += count
            continue

        literal.append(char)
        i += 1

    if literal:
        tokens.append(("".join(literal), False))
    return tokens


def _directive(run: str) -> str:
    directive = _DIRECTIVES.get(run[0])
    if directive is None:
        raise ValueError(f"Date pattern letter {run[0]!r} has no strptime equivalent")
    return directive(len(run)) if callable(directive) else directive


def translate_pattern(pattern: str) -> str:
    """Translate a SimpleDateFormat pattern into a ``strptime`` format string.

    Raises ``ValueError`` for pattern letters without a ``strptime`` equivalent
    (``S`` and ``z`` included) and for unterminated quoted literals.
    """

    return "".join(
        _directive(text) if is_field else text.replace("%", "%%")
        for text, is_field in tokenize(pattern)
    )


class DateFormat:
    """Compiled date pattern that converts cell text to epoch milliseconds."""

    def __init__(self, pattern: str = DEFAULT_PATTERN) -> None:
        self.pattern = pattern or DEFAULT_PATTERN
        tokens = tokenize(self.pattern)
        self._fields: List[str] = []
        self._regex: Optional["re.Pattern[str]"] = None

        if any(is_field and text[0] in (MILLIS, ZONE_NAME) for text, is_field in tokens):
            self._compile(tokens)
        else:
            self.strptime_format = translate_pattern(self.pattern)

    def _compile(self, tokens: List[Token]) -> None:
        parts: List[str] = []
        formats: List[str] = []
        for text, is_field in tokens:
            if not is_field:
                parts.append(re.escape(text))
                continue
            letter = text[0]
            if letter in (MILLIS, ZONE_NAME):
                if letter == MILLIS and MILLIS in self._fields:
                    raise ValueError(f"Date pattern {self.pattern!r} has more than one millisecond field")
                self._fields.append(letter)
                parts.append(f"({_FIELD_REGEX[letter]})")
            else:
                directive = _directive(text)
                self._fields.append(directive)
                formats.append(directive)
                parts.append(f"({_FIELD_REGEX[directive]})")
        self._regex = re.compile("".join(parts))
        self.strptime_format = _FIELD_SEPARATOR.join(formats)

    def _parse_fields(self, text: str) -> datetime:
        match = self._regex.fullmatch(text)
        if match is None:
            raise ValueError(f"time data {text!r} does not match format {self.pattern!r}")

        values: List[str] = []
        millis = 0
        for field, value in zip(self._fields, match.groups()):
            if field == MILLIS:
                millis = int(value)
            elif field == ZONE_NAME:
                if value.upper() not in UTC_NAMES:
                    raise ValueError(f"Unsupported time zone name {value!r}")
            else:
                values.append(value)
        parsed = datetime.strptime(_FIELD_SEPARATOR.join(values), self.strptime_format)
        return parsed + timedelta(milliseconds=millis)

    def parse(self, text: str) -> datetime:
        if self._regex is None:
            parsed = datetime.strptime(text, self.strptime_format)
        else:
            parsed = self._parse_fields(text)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed

    def to_epoch_millis(self, text: str) -> int:
        return (self.parse(text) - EPOCH) // timedelta(milliseconds=1)

    def __repr__(self) -> str:
        return f"DateFormat({self.pattern!r})"
