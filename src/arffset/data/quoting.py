"""Quote handling and quote-aware splitting for ARFF lines."""

from __future__ import annotations

from typing import List, Optional

# (escape sequence, decoded character)
ESCAPE_SEQUENCES = (
    ("\\\\", "\\"),
    ("\\'", "'"),
    ("\\t", "\t"),
    ("\\n", "\n"),
    ("\\r", "\r"),
    ('\\"', '"'),
)


def unescape(text: Optional[str]) -> Optional[str]:
    """Replace backslash escape sequences with the characters they stand for.

    The text is scanned left to right; at every step the escape sequence that
    occurs first wins, so ``\\\\n`` decodes to a backslash followed by ``n``
    rather than to a newline.
    """

    if text is None:
        return None

    parts: List[str] = []
    remainder = text
    while remainder:
        best_pos = len(remainder)
        best: Optional[tuple[str, str]] = None
        for token, replacement in ESCAPE_SEQUENCES:
            pos = remainder.find(token)
            if -1 < pos < best_pos:
                best_pos = pos
                best = (token, replacement)

        if best is None:
            parts.append(remainder)
            break

        token, replacement = best
        parts.append(remainder[:best_pos])
        parts.append(replacement)
        remainder = remainder[best_pos + len(token):]

    return "".join(parts)


def unquote(text: Optional[str], quote_char: str = "'") -> Optional[str]:
    """Strip surrounding ``quote_char`` quotes and decode escapes if present."""

    if text is None or len(text) < 2:
        return text

    if text.startswith(quote_char) and text.endswith(quote_char):
        text = text[1:-1]
        if any(token in text for token, _ in ESCAPE_SEQUENCES):
            text = unescape(text)

    return text


def split(
    line: str,
    delimiter: str = ",",
    unquote_fields: bool = False,
    quote_char: str = "'",
    escaped: bool = True,
) -> List[str]:
    """Split ``line`` on ``delimiter`` while respecting quoted sections.

    Delimiters between a pair of ``quote_char`` characters are kept as part of
    the field. With ``escaped`` set, a quote preceded by a backslash does not
    open or close a quoted section. Quote characters themselves are kept in
    the field unless ``unquote_fields`` is set.

    A trailing delimiter does not produce an empty final field:
    ``split("a,b,")`` returns ``["a", "b"]``.
    """

    def _emit(field: str) -> str:
        return unquote(field, quote_char) if unquote_fields else field

    fields: List[str] = []
    current: List[str] = []
    quoted = False
    backslash = False

    for char in line:
        if char == quote_char:
            if not backslash:
                quoted = not quoted
            current.append(char)
        elif char == delimiter:
            if quoted:
                current.append(char)
            else:
                fields.append(_emit("".join(current)))
                current = []
        else:
            current.append(char)

        if escaped:
            backslash = char == "\\"

    if current:
        fields.append(_emit("".join(current)))

    return fields
