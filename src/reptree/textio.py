"""Line-oriented text helpers shared by the tree and instance-list formats."""
from __future__ import annotations

from typing import Iterable, Iterator

ENCODING = "utf-8"


class ModelFormatError(ValueError):
    """Raised when serialized model or instance text is structurally invalid."""

    def __init__(self, message: str, line_number: int | None = None):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class LineReader:
    """Forward-only cursor over text lines.

    Readers consume lines strictly in order; there is no lookahead and no
    way to push a line back.
    """

    def __init__(self, lines: Iterable[str]):
        self._lines: Iterator[str] = iter(lines)
        self.line_number = 0

    def next_line(self) -> str:
        try:
            line = next(self._lines)
        except StopIteration:
            raise ModelFormatError("unexpected end of input", self.line_number + 1) from None
        self.line_number += 1
        return line.rstrip("\r\n")

    def next_int(self, what: str = "count") -> int:
        line = self.next_line()
        try:
            value = int(line.strip())
        except ValueError:
            raise ModelFormatError(f"expected integer {what}, got {line!r}", self.line_number) from None
        if value < 0:
            raise ModelFormatError(f"negative {what} {value}", self.line_number)
        return value

    def error(self, message: str) -> ModelFormatError:
        return ModelFormatError(message, self.line_number)

    def expect_end(self) -> None:
        """Fail if anything other than blank lines remains."""
        for line in self._lines:
            self.line_number += 1
            if line.strip():
                raise ModelFormatError(f"unexpected trailing content {line.rstrip()!r}", self.line_number)


def format_number(value: float) -> str:
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def parse_number(text: str) -> float:
    # float() also accepts "nan"/"inf"; counts and thresholds must be finite
    value = float(text)
    if value != value or value in (float("inf"), float("-inf")):
        raise ValueError(f"non-finite number {text!r}")
    return value
