"""Label frequency distribution stored at tree nodes."""
from __future__ import annotations

from typing import Iterable, Iterator

from .textio import LineReader, format_number, parse_number


class DiscreteDistribution(dict):
    """Mapping ``label -> count``.

    Counts may be fractional (weighted instances).  Insertion order is kept
    and used to break ties in :meth:`get_max_item`.
    """

    def __init__(self, items: dict | Iterable[str] | None = None):
        super().__init__()
        if items is None:
            return
        if isinstance(items, dict):
            for label, count in items.items():
                self.add_item(label, count)
        else:
            for label in items:
                self.add_item(label)

    def add_item(self, label: str, count: float = 1) -> None:
        if "\n" in str(label) or "\r" in str(label):
            raise ValueError("labels cannot contain line breaks")
        if count < 0:
            raise ValueError(f"negative count {count} for label {label!r}")
        self[str(label)] = self.get(str(label), 0) + count

    def remove_item(self, label: str, count: float = 1) -> None:
        remaining = self.get(label, 0) - count
        if remaining > 0:
            self[label] = remaining
        else:
            self.pop(label, None)

    @property
    def total(self) -> float:
        return float(sum(self.values()))

    def get_max_item(self, include: Iterable[str] | None = None) -> str | None:
        """Most frequent label, optionally restricted to ``include``."""
        allowed = None if include is None else set(include)
        best, best_count = None, None
        for label, count in self.items():
            if allowed is not None and label not in allowed:
                continue
            if best_count is None or count > best_count:
                best, best_count = label, count
        return best

    def get_probability(self, label: str) -> float:
        total = self.total
        return self.get(label, 0) / total if total > 0 else 0.0

    def get_probability_distribution(self) -> dict[str, float]:
        total = self.total
        if total <= 0:
            return {}
        return {label: count / total for label, count in self.items()}

    def to_lines(self) -> Iterator[str]:
        yield str(len(self))
        for label, count in self.items():
            yield f"{label} {format_number(count)}"

    @classmethod
    def load(cls, reader: LineReader) -> "DiscreteDistribution":
        distribution = cls()
        size = reader.next_int("distribution size")
        for _ in range(size):
            line = reader.next_line()
            label, sep, count = line.rpartition(" ")
            if not sep:
                raise reader.error(f"expected 'label count', got {line!r}")
            # repeated labels would silently merge counts
            if label in distribution:
                raise reader.error(f"duplicate label {label!r} in distribution")
            try:
                distribution.add_item(label, parse_number(count))
            except ValueError as exc:
                raise reader.error(f"bad distribution entry {line!r}: {exc}") from None
        return distribution
