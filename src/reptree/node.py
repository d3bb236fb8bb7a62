# -*- coding: utf-8 -*-
"""
reptree.node
============

The recursive unit of a decision tree.

A :class:`DecisionNode` is either a leaf, answering with the majority label
and label distribution of the training instances that reached it, or an
internal node dispatching to one of its children.  Every non-root node carries
the :class:`DecisionCondition` that selects it from its parent:

- ``attr = value`` for discrete attributes (one child per observed value);
- ``attr <= threshold`` / ``attr > threshold`` for continuous attributes.

Nodes also know how to write themselves as text, read themselves back from a
:class:`~reptree.textio.LineReader`, and emit Python source for the decision
procedure they encode.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator

from .distribution import DiscreteDistribution
from .instance import ContinuousAttribute, DiscreteAttribute, Instance
from .textio import LineReader, format_number, parse_number

ROOT_MARKER = "-1"
INDENT = "    "
NUMBER_HELPER = "_field_number"


# -----------------------------------------------------------------------------
# Conditions
# -----------------------------------------------------------------------------
class NodeKind(Enum):
    LEAF = "leaf"
    INTERNAL = "internal"


class Comparison(str, Enum):
    EQUAL = "="
    LESS_EQUAL = "<="
    GREATER = ">"

    @classmethod
    def parse(cls, token: str) -> "Comparison":
        # older files write "<" for the lower branch of a threshold split
        if token == "<":
            return cls.LESS_EQUAL
        return cls(token)


@dataclass(frozen=True)
class DecisionCondition:
    """Test selecting a child node.

    Parameters
    ----------
    attribute_index : int
        Position of the tested attribute in the instance.
    comparison : Comparison or str
        ``"="`` for a discrete value, ``"<="`` or ``">"`` for a threshold.
    value : str or float
        Category for ``"="``; numeric threshold otherwise.
    """

    attribute_index: int
    comparison: Comparison
    value: str | float

    def __post_init__(self):
        if self.attribute_index < 0:
            raise ValueError(f"attribute_index must be >= 0, got {self.attribute_index}")
        comparison = Comparison.parse(self.comparison) if isinstance(self.comparison, str) else self.comparison
        object.__setattr__(self, "comparison", comparison)
        if comparison is Comparison.EQUAL:
            if not isinstance(self.value, str):
                raise ValueError(f"discrete condition needs a string value, got {self.value!r}")
            if "\n" in self.value or "\r" in self.value:
                raise ValueError("discrete values cannot contain line breaks")
        else:
            threshold = float(self.value)
            if not math.isfinite(threshold):
                raise ValueError(f"threshold must be finite, got {self.value!r}")
            object.__setattr__(self, "value", threshold)

    @classmethod
    def equals(cls, attribute_index: int, value: str) -> "DecisionCondition":
        return cls(attribute_index, Comparison.EQUAL, value)

    @classmethod
    def threshold(cls, attribute_index: int, threshold: float) -> tuple["DecisionCondition", "DecisionCondition"]:
        """The ``<=`` and ``>`` halves of a binary threshold split."""
        return (cls(attribute_index, Comparison.LESS_EQUAL, threshold),
                cls(attribute_index, Comparison.GREATER, threshold))

    def satisfy(self, instance: Instance) -> bool:
        """Whether ``instance`` follows this branch.

        Missing values, out-of-range indices and attributes of the wrong kind
        never satisfy a condition.
        """
        if self.attribute_index >= instance.attribute_size():
            return False
        attribute = instance.get_attribute(self.attribute_index)
        if self.comparison is Comparison.EQUAL:
            return isinstance(attribute, DiscreteAttribute) and attribute.value == self.value
        if not isinstance(attribute, ContinuousAttribute) or math.isnan(attribute.value):
            return False
        if self.comparison is Comparison.LESS_EQUAL:
            return attribute.value <= self.value
        return attribute.value > self.value

    def to_line(self) -> str:
        value = self.value if self.comparison is Comparison.EQUAL else format_number(self.value)
        return f"{self.attribute_index} {self.comparison.value} {value}"

    @classmethod
    def parse(cls, line: str, reader: LineReader) -> "DecisionCondition":
        items = line.split(" ", 2)
        if len(items) != 3:
            raise reader.error(f"expected '<index> <op> <value>', got {line!r}")
        index, token, value = items
        try:
            comparison = Comparison.parse(token)
        except ValueError:
            raise reader.error(f"unknown comparison {token!r}") from None
        try:
            attribute_index = int(index)
            if comparison is not Comparison.EQUAL:
                value = parse_number(value)
            return cls(attribute_index, comparison, value)
        except ValueError as exc:
            raise reader.error(f"bad condition {line!r}: {exc}") from None

    def to_code(self, var: str = "test_data") -> str:
        """Python expression for this test.  Short records never match, and
        threshold tests read the field through the :func:`number_helper_lines`
        helper, which gives NaN for empty or non-numeric fields."""
        index = self.attribute_index
        if self.comparison is Comparison.EQUAL:
            return f"len({var}) > {index} and {var}[{index}] == {self.value!r}"
        return f"{NUMBER_HELPER}({index}) {self.comparison.value} {self.value!r}"

    def __str__(self) -> str:
        return f"X[{self.attribute_index}] {self.comparison.value} {self.value}"


def number_helper_lines(level: int = 1, var: str = "test_data") -> Iterator[str]:
    """Nested helper emitted into generated code that uses threshold tests."""
    indent = INDENT * level
    yield f"{indent}def {NUMBER_HELPER}(i):"
    yield f"{indent}{INDENT}try:"
    yield f"{indent}{INDENT}{INDENT}return float({var}[i])"
    yield f"{indent}{INDENT}except (IndexError, TypeError, ValueError):"
    yield f"{indent}{INDENT}{INDENT}return float('nan')"


# -----------------------------------------------------------------------------
# Prediction outcome
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class Prediction:
    """Outcome of walking the tree: a label, or no match.

    ``Prediction.no_match()`` is returned when some node has no child for the
    instance's attribute value.  It is falsy, so callers can write
    ``prediction.label if prediction else fallback``.
    """

    label: str | None = None

    @classmethod
    def no_match(cls) -> "Prediction":
        return cls(None)

    @property
    def found(self) -> bool:
        return self.label is not None

    def get(self, default: str | None = None) -> str | None:
        return self.label if self.label is not None else default

    def __bool__(self) -> bool:
        return self.found


# -----------------------------------------------------------------------------
# Node
# -----------------------------------------------------------------------------
class DecisionNode:
    """Single node of a decision tree.

    Use :meth:`leaf`, :meth:`internal`, :meth:`discrete_split` or
    :meth:`threshold_split` to build nodes.

    Attributes
    ----------
    kind : NodeKind
        ``LEAF`` or ``INTERNAL``.  Pruning flips an internal node to ``LEAF``
        while trying it out; its children stay attached until the collapse is
        made permanent with :meth:`collapse`.
    class_label : str or None
        Majority label of the training instances that reached the node.
    distribution : DiscreteDistribution
        Label counts of those instances.
    condition : DecisionCondition or None
        Test selecting this node from its parent; ``None`` for the root.
    children : list[DecisionNode]
        Ordered children.  Empty for leaves.
    """

    def __init__(self, *, class_label: str | None = None,
                 distribution: DiscreteDistribution | dict | None = None):
        self.distribution = (distribution if isinstance(distribution, DiscreteDistribution)
                             else DiscreteDistribution(distribution))
        if class_label is None or class_label == "":
            class_label = self.distribution.get_max_item()
        if class_label is not None and ("\n" in class_label or "\r" in class_label):
            raise ValueError("class labels cannot contain line breaks")
        self.class_label: str | None = class_label
        self.kind = NodeKind.LEAF
        self.condition: DecisionCondition | None = None
        self.children: list[DecisionNode] = []

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def leaf(cls, class_label: str | None = None,
             distribution: DiscreteDistribution | dict | None = None) -> "DecisionNode":
        if class_label is None and not distribution:
            raise ValueError("a leaf needs a class label or a non-empty distribution")
        return cls(class_label=class_label, distribution=distribution)

    @classmethod
    def internal(cls, children: Iterable[tuple[DecisionCondition, "DecisionNode"]],
                 class_label: str | None = None,
                 distribution: DiscreteDistribution | dict | None = None) -> "DecisionNode":
        node = cls(class_label=class_label, distribution=distribution)
        for condition, child in children:
            node.add_child(condition, child)
        if not node.children:
            raise ValueError("an internal node needs at least one child")
        return node

    @classmethod
    def discrete_split(cls, attribute_index: int, branches: dict[str, "DecisionNode"],
                       class_label: str | None = None,
                       distribution: DiscreteDistribution | dict | None = None) -> "DecisionNode":
        """Internal node with one child per category of a discrete attribute."""
        return cls.internal(
            [(DecisionCondition.equals(attribute_index, value), child) for value, child in branches.items()],
            class_label, distribution)

    @classmethod
    def threshold_split(cls, attribute_index: int, threshold: float,
                        low: "DecisionNode", high: "DecisionNode",
                        class_label: str | None = None,
                        distribution: DiscreteDistribution | dict | None = None) -> "DecisionNode":
        """Internal node sending ``<= threshold`` to ``low`` and ``> threshold`` to ``high``."""
        le, gt = DecisionCondition.threshold(attribute_index, threshold)
        return cls.internal([(le, low), (gt, high)], class_label, distribution)

    def add_child(self, condition: DecisionCondition, child: "DecisionNode") -> None:
        if child.condition is not None:
            raise ValueError("node is already attached to a parent")
        if any(node is self for node in child.iter_nodes(all_children=True)):
            raise ValueError("attaching this node would create a cycle")
        child.condition = condition
        self.children.append(child)
        self.kind = NodeKind.INTERNAL

    def collapse(self) -> None:
        """Permanently turn this node into a leaf, dropping its children."""
        for child in self.children:
            child.condition = None
        self.children = []
        self.kind = NodeKind.LEAF

    @property
    def is_leaf(self) -> bool:
        return self.kind is NodeKind.LEAF

    # ------------------------------------------------------------------
    # Prediction
    # ------------------------------------------------------------------
    def _matching_child(self, instance: Instance) -> "DecisionNode | None":
        for child in self.children:
            if child.condition.satisfy(instance):
                return child
        return None

    def predict(self, instance: Instance) -> Prediction:
        if self.is_leaf:
            return Prediction(self.class_label)
        child = self._matching_child(instance)
        if child is None:
            return Prediction.no_match()
        return child.predict(instance)

    def predict_probability_distribution(self, instance: Instance) -> dict[str, float]:
        """Normalized label distribution of the leaf reached by ``instance``.

        Returns an empty mapping when no child matches on the way down.
        """
        if self.is_leaf:
            probabilities = self.distribution.get_probability_distribution()
            if not probabilities and self.class_label is not None:
                return {self.class_label: 1.0}
            return probabilities
        child = self._matching_child(instance)
        if child is None:
            return {}
        return child.predict_probability_distribution(instance)

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------
    def iter_nodes(self, all_children: bool = False) -> Iterator["DecisionNode"]:
        """Pre-order walk.  Children hidden behind a leaf flag are skipped
        unless ``all_children`` is set."""
        yield self
        if self.is_leaf and not all_children:
            return
        for child in self.children:
            yield from child.iter_nodes(all_children)

    def n_leaves(self) -> int:
        return sum(1 for node in self.iter_nodes() if node.is_leaf)

    def n_internal(self) -> int:
        return sum(1 for node in self.iter_nodes() if not node.is_leaf)

    def depth(self) -> int:
        if self.is_leaf:
            return 0
        return 1 + max(child.depth() for child in self.children)

    # ------------------------------------------------------------------
    # Text format
    # ------------------------------------------------------------------
    def to_lines(self) -> Iterator[str]:
        """Pre-order text encoding of the subtree rooted here.

        Each node writes its condition (``-1`` for the root), its label
        (possibly empty), its distribution and its child count, followed by
        the encodings of its children.  Leaves write a child count of 0.
        """
        yield ROOT_MARKER if self.condition is None else self.condition.to_line()
        yield self.class_label or ""
        yield from self.distribution.to_lines()
        children = [] if self.is_leaf else self.children
        yield str(len(children))
        for child in children:
            yield from child.to_lines()

    @classmethod
    def load(cls, reader: LineReader) -> "DecisionNode":
        """Read the subtree written by :meth:`to_lines` on a root node."""
        marker = reader.next_line()
        if marker.strip() != ROOT_MARKER:
            raise reader.error(f"expected root marker {ROOT_MARKER!r}, got {marker!r}")
        return cls._load_body(reader)

    @classmethod
    def _load_body(cls, reader: LineReader) -> "DecisionNode":
        class_label = reader.next_line() or None
        distribution = DiscreteDistribution.load(reader)
        n_children = reader.next_int("child count")
        children = []
        for _ in range(n_children):
            line = reader.next_line()
            if line.strip() == ROOT_MARKER:
                raise reader.error("child node without a condition")
            condition = DecisionCondition.parse(line, reader)
            children.append((condition, cls._load_body(reader)))
        if children:
            return cls.internal(children, class_label, distribution)
        # pruning can collapse an unlabeled internal node; it loads as an undecidable leaf
        return cls(class_label=class_label, distribution=distribution)

    # ------------------------------------------------------------------
    # Code generation
    # ------------------------------------------------------------------
    def generate_test_code(self, level: int = 1, var: str = "test_data") -> Iterator[str]:
        """Python source lines for this subtree, indented ``level`` steps.

        Children become an ``if``/``elif`` chain so that, as in
        :meth:`predict`, only the first matching child is ever tried.
        """
        indent = INDENT * level
        if self.is_leaf:
            yield f"{indent}return {self.class_label or ''!r}"
            return
        for i, child in enumerate(self.children):
            keyword = "if" if i == 0 else "elif"
            yield f"{indent}{keyword} {child.condition.to_code(var)}:"
            yield from child.generate_test_code(level + 1, var)

    def __repr__(self) -> str:
        if self.is_leaf:
            return f"DecisionNode.leaf({self.class_label!r}, {dict(self.distribution)!r})"
        return f"<DecisionNode internal label={self.class_label!r} children={len(self.children)}>"
