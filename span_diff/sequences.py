import functools
import io
import logging
import os
from collections.abc import Iterable, Sequence
from typing import BinaryIO, TextIO

from span_diff.errors import LineTooLongError


logger = logging.getLogger(__name__)

# Lines longer than this are rejected as pathological input.
MAX_LINE_LENGTH = 2048
TAB_WIDTH = 4


def _get_max_line_length() -> int:
    """Returns the line length ceiling, honouring SPAN_DIFF_MAX_LINE_LENGTH."""
    value = os.environ.get("SPAN_DIFF_MAX_LINE_LENGTH")
    if value is None:
        return MAX_LINE_LENGTH
    try:
        limit = int(value)
    except ValueError as e:
        raise ValueError(f"SPAN_DIFF_MAX_LINE_LENGTH must be an integer, got '{value}'.") from e
    if limit <= 0:
        raise ValueError(f"SPAN_DIFF_MAX_LINE_LENGTH must be positive, got {limit}.")
    return limit


def _resolve_max_line_length(max_line_length: int | None) -> int:
    if max_line_length is None:
        return _get_max_line_length()
    if max_line_length <= 0:
        raise ValueError(f"max_line_length must be positive, got {max_line_length}.")
    return max_line_length


def _split_lines(text: str) -> list[str]:
    """Splits text on \\n, \\r\\n or \\r only; other control characters stay in the line."""
    buffer = io.StringIO(text, newline=None)
    lines = []
    while True:
        line = buffer.readline()
        if not line:
            break
        lines.append(line.rstrip('\n'))
    return lines


def _check_index(index: int, length: int) -> int:
    if not 0 <= index < length:
        raise IndexError(f"Index {index} out of range for sequence of length {length}")
    return index


class CharSequence(Sequence):
    """A string exposed one character per element."""

    def __init__(self, text: str = "") -> None:
        self.text = text or ""

    def __len__(self) -> int:
        return len(self.text)

    def __getitem__(self, index: int) -> str:
        return self.text[_check_index(index, len(self.text))]

    def __repr__(self) -> str:
        return f"CharSequence({self.text!r})"


class TokenSequence(Sequence):
    """Any iterable of comparable tokens (words, numbers, ...) as a sequence."""

    def __init__(self, tokens: Iterable = ()) -> None:
        self.tokens = tuple(tokens)

    def __len__(self) -> int:
        return len(self.tokens)

    def __getitem__(self, index: int):
        return self.tokens[_check_index(index, len(self.tokens))]

    def __repr__(self) -> str:
        return f"TokenSequence({list(self.tokens)!r})"


@functools.total_ordering
class TextLine:
    """
    A single line of text.

    `raw` keeps the line as read, `line` has tabs expanded to spaces for display.
    The hash of the raw text is computed once and used to reject unequal lines
    quickly; equal hashes are always confirmed against the raw text, so a hash
    collision never makes two different lines compare equal.
    """

    __slots__ = ('raw', 'line', '_hash')

    def __init__(self, raw: str, tab_width: int = TAB_WIDTH) -> None:
        self.raw = raw
        self.line = raw.replace('\t', ' ' * tab_width)
        self._hash = hash(raw)

    def __eq__(self, other) -> bool:
        if not isinstance(other, TextLine):
            return NotImplemented
        return self._hash == other._hash and self.raw == other.raw

    def __lt__(self, other) -> bool:
        if not isinstance(other, TextLine):
            return NotImplemented
        return (self._hash, self.raw) < (other._hash, other.raw)

    def __hash__(self) -> int:
        return self._hash

    def __repr__(self) -> str:
        return f"TextLine({self.raw!r})"


class LineSequence(Sequence):
    """
    Text exposed one `TextLine` per element.

    Accepts a string or an iterable of lines (trailing CR/LF are stripped).
    Strings, streams and files are all split the same way: on \\n, \\r\\n or
    \\r. Every line is checked against the length ceiling: the explicit
    `max_line_length`, else SPAN_DIFF_MAX_LINE_LENGTH, else MAX_LINE_LENGTH.
    """

    def __init__(
        self,
        text_or_lines: str | Iterable[str] = "",
        max_line_length: int | None = None,
        tab_width: int = TAB_WIDTH,
    ) -> None:
        if isinstance(text_or_lines, str):
            raw_lines = _split_lines(text_or_lines)
        else:
            raw_lines = (line.rstrip('\r\n') for line in text_or_lines)
        self.max_line_length = _resolve_max_line_length(max_line_length)
        self.tab_width = tab_width
        self.lines: list[TextLine] = self._build_lines(raw_lines)

    def _build_lines(self, raw_lines: Iterable[str]) -> list[TextLine]:
        # Collected locally so a rejected line leaves nothing half-built.
        lines = []
        for line_number, raw in enumerate(raw_lines, start=1):
            if len(raw) > self.max_line_length:
                logger.error(f"Line {line_number} has {len(raw)} characters (limit {self.max_line_length})")
                raise LineTooLongError(line_number, len(raw), self.max_line_length)
            lines.append(TextLine(raw, self.tab_width))
        return lines

    @classmethod
    def from_stream(
        cls,
        stream: TextIO | BinaryIO,
        encoding: str = 'utf-8',
        max_line_length: int | None = None,
        tab_width: int = TAB_WIDTH,
    ) -> "LineSequence":
        """
        Reads a text or binary stream, decoding bytes with `encoding`.
        Undecodable bytes raise UnicodeDecodeError (a ValueError).
        """
        data = stream.read()
        if isinstance(data, bytes):
            data = data.decode(encoding)
        return cls(data, max_line_length=max_line_length, tab_width=tab_width)

    @classmethod
    def from_file(
        cls,
        path: str | os.PathLike,
        encoding: str = 'utf-8',
        max_line_length: int | None = None,
        tab_width: int = TAB_WIDTH,
    ) -> "LineSequence":
        """
        Loads a text file.

        Missing or unreadable files raise OSError. Content that is not valid
        in `encoding` raises UnicodeDecodeError (a ValueError).
        """
        # newline='' hands the terminators to the same splitter strings use
        with open(path, encoding=encoding, newline='') as f:
            sequence = cls.from_stream(f, encoding=encoding, max_line_length=max_line_length, tab_width=tab_width)
        logger.debug(f"Loaded {len(sequence)} lines from {path}")
        return sequence

    def __len__(self) -> int:
        return len(self.lines)

    def __getitem__(self, index: int) -> TextLine:
        return self.lines[_check_index(index, len(self.lines))]

    def text_lines(self) -> list[str]:
        """Returns the display text (tabs expanded) of every line."""
        return [line.line for line in self.lines]

    def __repr__(self) -> str:
        return f"LineSequence({len(self.lines)} lines)"
