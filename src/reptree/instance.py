"""
reptree.instance
================

Attribute, instance and instance-list types consumed by the tree.

An instance is an ordered sequence of attribute values plus one class label.
Attributes are either discrete (a string) or continuous (a float); a missing
value is stored as ``None`` and never satisfies a split condition.

Instance lists are read and written in a small text format::

    DISCRETE CONTINUOUS
    2
    sunny,30.5,play
    rainy,12.0,no-play

The first line declares the kind of each attribute in positional order, the
second the number of instances, followed by one comma separated line per
instance with the class label last.
"""
from __future__ import annotations

import logging
import numbers
import os
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Sequence

import numpy as np

from .textio import ENCODING, LineReader, ModelFormatError, format_number

logger = logging.getLogger(__name__)

DISCRETE = "DISCRETE"
CONTINUOUS = "CONTINUOUS"


# -----------------------------------------------------------------------------
# Attributes
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class DiscreteAttribute:
    value: str

    kind = DISCRETE

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ContinuousAttribute:
    value: float

    kind = CONTINUOUS

    def __str__(self) -> str:
        return format_number(self.value)


Attribute = DiscreteAttribute | ContinuousAttribute


def _as_attribute(value: Any) -> Attribute | None:
    if value is None or isinstance(value, (DiscreteAttribute, ContinuousAttribute)):
        return value
    if isinstance(value, str):
        return DiscreteAttribute(value)
    if isinstance(value, bool):
        return DiscreteAttribute(str(value))
    if isinstance(value, numbers.Real):
        if np.isnan(value):
            return None
        return ContinuousAttribute(float(value))
    raise TypeError(f"unsupported attribute value {value!r}")


# -----------------------------------------------------------------------------
# Instances
# -----------------------------------------------------------------------------
class Instance:
    """A labeled feature vector.

    Parameters
    ----------
    class_label : str
        Ground-truth label.
    attributes : iterable, optional
        Attribute values.  Strings become discrete attributes, real numbers
        continuous ones; ``None`` (or NaN) marks a missing value.
    """

    def __init__(self, class_label: str, attributes: Iterable[Any] = ()):
        self.class_label = str(class_label)
        self.attributes: list[Attribute | None] = [_as_attribute(a) for a in attributes]

    def add_attribute(self, value: Any) -> None:
        self.attributes.append(_as_attribute(value))

    def get_attribute(self, index: int) -> Attribute | None:
        return self.attributes[index]

    def attribute_size(self) -> int:
        return len(self.attributes)

    def get_class_label(self) -> str:
        return self.class_label

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.class_label!r}, {[a.value if a else None for a in self.attributes]!r})"

    def __str__(self) -> str:
        fields = ["" if a is None else str(a) for a in self.attributes]
        return ",".join(fields + [self.class_label])


class CompositeInstance(Instance):
    """Instance whose true label is uncertain.

    ``possible_class_labels`` lists the candidate labels in priority order;
    the tree uses the first one when it cannot reach a decision.
    """

    def __init__(self, class_label: str, attributes: Iterable[Any] = (),
                 possible_class_labels: Sequence[str] = ()):
        super().__init__(class_label, attributes)
        if not possible_class_labels:
            raise ValueError("CompositeInstance requires at least one candidate label")
        self.possible_class_labels = [str(c) for c in possible_class_labels]

    def get_possible_class_labels(self) -> list[str]:
        return self.possible_class_labels


# -----------------------------------------------------------------------------
# Instance lists
# -----------------------------------------------------------------------------
class InstanceList:
    """Ordered collection of instances with text load/save."""

    def __init__(self, instances: Iterable[Instance] = ()):
        self.instances: list[Instance] = list(instances)

    def add(self, instance: Instance) -> None:
        self.instances.append(instance)

    def get(self, index: int) -> Instance:
        return self.instances[index]

    def size(self) -> int:
        return len(self.instances)

    def __len__(self) -> int:
        return len(self.instances)

    def __iter__(self) -> Iterator[Instance]:
        return iter(self.instances)

    def __getitem__(self, index):
        return self.instances[index]

    def class_labels(self) -> np.ndarray:
        return np.array([inst.class_label for inst in self.instances], dtype=object)

    def attribute_kinds(self) -> list[str]:
        """Kind of each attribute, taken from the first non-missing value in its column."""
        if not self.instances:
            return []
        kinds = []
        for i in range(self.instances[0].attribute_size()):
            present = (inst.get_attribute(i) for inst in self.instances if inst.get_attribute(i) is not None)
            first = next(present, None)
            kinds.append(DISCRETE if first is None else first.kind)
        return kinds

    # ------------------------------------------------------------------
    # Text format
    # ------------------------------------------------------------------
    def to_lines(self) -> Iterator[str]:
        yield " ".join(self.attribute_kinds())
        yield str(len(self.instances))
        for inst in self.instances:
            yield str(inst)

    def save(self, file_name: str | os.PathLike) -> None:
        with open(file_name, "w", encoding=ENCODING) as fh:
            for line in self.to_lines():
                fh.write(line + "\n")
        logger.debug("Saved %d instances to %s", len(self.instances), file_name)

    @classmethod
    def load(cls, file_name: str | os.PathLike) -> "InstanceList":
        with open(file_name, encoding=ENCODING) as fh:
            reader = LineReader(fh)
            instance_list = cls.load_lines(reader)
            reader.expect_end()
        logger.debug("Loaded %d instances from %s", len(instance_list), file_name)
        return instance_list

    @classmethod
    def load_lines(cls, lines: Iterable[str] | LineReader) -> "InstanceList":
        reader = lines if isinstance(lines, LineReader) else LineReader(lines)
        kinds = reader.next_line().split()
        for kind in kinds:
            if kind not in (DISCRETE, CONTINUOUS):
                raise reader.error(f"unknown attribute kind {kind!r}")
        count = reader.next_int("instance count")
        instance_list = cls()
        for _ in range(count):
            instance_list.add(_parse_instance(reader.next_line(), kinds, reader.line_number))
        return instance_list


def _parse_instance(line: str, kinds: list[str], line_number: int) -> Instance:
    items = line.split(",")
    if len(items) != len(kinds) + 1:
        raise ModelFormatError(
            f"expected {len(kinds)} attributes and a label, got {len(items)} fields", line_number)
    instance = Instance(items[-1])
    for kind, item in zip(kinds, items[:-1]):
        if item == "":
            instance.add_attribute(None)
        elif kind == DISCRETE:
            instance.add_attribute(DiscreteAttribute(item))
        else:
            try:
                instance.add_attribute(ContinuousAttribute(float(item)))
            except ValueError:
                raise ModelFormatError(f"non-numeric continuous value {item!r}", line_number) from None
    return instance
