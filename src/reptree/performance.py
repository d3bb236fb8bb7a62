"""Accuracy summary of a classifier over a labeled instance list."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ClassificationPerformance:
    accuracy: float
    n_instances: int = 0
    n_undecided: int = 0

    @property
    def error_rate(self) -> float:
        return 1.0 - self.accuracy

    def __str__(self) -> str:
        return (f"accuracy={self.accuracy:.4f} over {self.n_instances} instances"
                f" ({self.n_undecided} undecided)")
