# -*- coding: utf-8 -*-
"""
reptree.tree
============

This module implements the decision tree classifier facade.  A
:class:`DecisionTree` owns a single root :class:`~reptree.node.DecisionNode`
and provides

- label prediction with a deterministic fallback for composite instances,
- probability estimates, one instance at a time or as a NumPy matrix,
- reduced-error pruning against a held-out prune set,
- a line-oriented text format (:meth:`DecisionTree.save_txt` and the
  ``DecisionTree(path)`` constructor), plus the binary snapshot inherited
  from :class:`~reptree.model.Model`,
- compilation of the tree into a standalone Python function.

Trees are not grown here: build one from nodes, or load it from disk.

Prediction and probability queries only read the tree and may run
concurrently.  Pruning mutates nodes in place; callers must not predict or
prune from other threads while it runs.
"""

from __future__ import annotations

import keyword
import logging
import os
from typing import Iterable, Sequence

import numpy as np

from .instance import CompositeInstance, Instance, InstanceList
from .model import Model
from .node import INDENT, Comparison, DecisionNode, NodeKind, Prediction, number_helper_lines
from .textio import ENCODING, LineReader

logger = logging.getLogger(__name__)


class DecisionTree(Model):
    """
    Decision tree classifier over discrete and continuous attributes.

    Parameters
    ----------
    root : DecisionNode or str or path-like
        Either an already-built root node, or the path of a file written by
        :meth:`save_txt`.

    Raises
    ------
    OSError
        If ``root`` is a path that cannot be opened.
    ModelFormatError
        If the file is not a well-formed tree.  No partially built tree is
        ever returned.

    Notes
    -----
    :meth:`predict` returns a :class:`~reptree.node.Prediction`; use
    :meth:`predict_label` for a plain string (``None`` when undecidable).
    """

    def __init__(self, root: DecisionNode | str | os.PathLike):
        if isinstance(root, DecisionNode):
            if root.condition is not None:
                raise ValueError("root node is attached to a parent")
            self.root = root
        else:
            self.root = self._read_root(root)

    @staticmethod
    def _read_root(file_name: str | os.PathLike) -> DecisionNode:
        with open(file_name, encoding=ENCODING) as fh:
            reader = LineReader(fh)
            root = DecisionNode.load(reader)
            reader.expect_end()
        logger.debug("Loaded tree with %d nodes from %s", sum(1 for _ in root.iter_nodes()), file_name)
        return root

    @classmethod
    def load_txt(cls, file_name: str | os.PathLike) -> "DecisionTree":
        return cls(file_name)

    @classmethod
    def from_text(cls, text: str) -> "DecisionTree":
        reader = LineReader(text.splitlines())
        root = DecisionNode.load(reader)
        reader.expect_end()
        return cls(root)

    def get_root(self) -> DecisionNode:
        return self.root

    # ------------------------------------------------------------------
    # Prediction
    # ------------------------------------------------------------------
    def predict(self, instance: Instance) -> Prediction:
        """
        Predict the class label of ``instance``.

        If the tree cannot decide (some node has no child for the instance's
        value) and ``instance`` is a
        :class:`~reptree.instance.CompositeInstance`, its first candidate
        label is returned.  Otherwise the no-match outcome is returned as is.

        Parameters
        ----------
        instance : Instance
            Instance to classify.

        Returns
        -------
        Prediction
            The predicted label, or ``Prediction.no_match()``.
        """
        prediction = self.root.predict(instance)
        if not prediction and isinstance(instance, CompositeInstance):
            return Prediction(instance.get_possible_class_labels()[0])
        return prediction

    def predict_label(self, instance: Instance) -> str | None:
        return self.predict(instance).label

    def predict_probability(self, instance: Instance) -> dict[str, float]:
        return self.root.predict_probability_distribution(instance)

    @property
    def classes_(self) -> np.ndarray:
        """Sorted labels appearing anywhere in the tree."""
        labels = set()
        for node in self.root.iter_nodes(all_children=True):
            labels.update(node.distribution)
            if node.class_label is not None:
                labels.add(node.class_label)
        return np.array(sorted(labels), dtype=object)

    def predict_array(self, instances: Iterable[Instance]) -> np.ndarray:
        """Labels for many instances; ``None`` where undecidable."""
        return np.array([self.predict_label(inst) for inst in instances], dtype=object)

    def predict_proba(self, instances: Iterable[Instance],
                      classes: Sequence[str] | None = None) -> np.ndarray:
        """
        Probability matrix of shape ``(n_instances, n_classes)``.

        Columns follow ``classes`` (default :attr:`classes_`).  Rows are all
        zeros when no distribution is available for an instance.
        """
        columns = list(self.classes_ if classes is None else classes)
        index = {label: j for j, label in enumerate(columns)}
        rows = []
        for inst in instances:
            row = np.zeros(len(columns), dtype=float)
            for label, p in self.predict_probability(inst).items():
                if label in index:
                    row[index[label]] = p
            rows.append(row)
        if not rows:
            return np.zeros((0, len(columns)), dtype=float)
        return np.vstack(rows)

    # ------------------------------------------------------------------
    # Pruning
    # ------------------------------------------------------------------
    def prune_node(self, node: DecisionNode, prune_set: InstanceList | Sequence[Instance]) -> None:
        """
        Reduced-error pruning of the subtree rooted at ``node``.

        The accuracy of the whole tree on ``prune_set`` is measured with
        ``node`` internal and again with ``node`` flagged as a leaf.  If the
        leaf version is at least as accurate the node is collapsed for good;
        otherwise the flag is restored and each child is visited in order.
        """
        if node.is_leaf:
            return
        before = self.test_classifier(prune_set)
        saved_kind = node.kind
        node.kind = NodeKind.LEAF
        after = self.test_classifier(prune_set)
        logger.debug("Pruning trial on node %r: accuracy %.4f -> %.4f",
                     node.class_label, before.accuracy, after.accuracy)
        if after.accuracy < before.accuracy:
            node.kind = saved_kind
            for child in node.children:
                self.prune_node(child, prune_set)
        else:
            node.collapse()

    def prune(self, prune_set: InstanceList | Iterable[Instance]) -> None:
        """Prune the tree top-down against ``prune_set``."""
        prune_set = list(prune_set)
        n_before = self.root.n_internal()
        self.prune_node(self.root, prune_set)
        logger.info("Pruned tree on %d instances: %d -> %d internal nodes",
                    len(prune_set), n_before, self.root.n_internal())

    # ------------------------------------------------------------------
    # Text format
    # ------------------------------------------------------------------
    def to_text(self) -> str:
        return "\n".join(self.root.to_lines()) + "\n"

    def save_txt(self, file_name: str | os.PathLike) -> None:
        with open(file_name, "w", encoding=ENCODING) as fh:
            for line in self.root.to_lines():
                fh.write(line + "\n")
        logger.info("Saved tree to %s", file_name)

    # ------------------------------------------------------------------
    # Code generation
    # ------------------------------------------------------------------
    def generate_test_code_source(self, method_name: str) -> str:
        """
        Compile the tree into the source of a standalone Python function.

        The function takes a sequence of field strings and returns the
        predicted label, or ``''`` when no branch matches.  Short records,
        empty fields and non-numeric values for threshold tests match no
        branch, as missing values do in :meth:`predict`.

        Raises
        ------
        ValueError
            If ``method_name`` is not a valid Python function name.
        """
        if not method_name.isidentifier() or keyword.iskeyword(method_name):
            raise ValueError(f"invalid function name {method_name!r}")
        lines = [f"def {method_name}(test_data):"]
        if any(child.condition.comparison is not Comparison.EQUAL
               for node in self.root.iter_nodes() for child in node.children):
            lines.extend(number_helper_lines(1))
        lines.extend(self.root.generate_test_code(1))
        lines.append(f"{INDENT}return ''")
        return "\n".join(lines) + "\n"

    def generate_test_code(self, code_file_name: str | os.PathLike, method_name: str) -> bool:
        """
        Write the compiled tree to ``code_file_name``.

        Export is best effort: a write failure is logged and ``False`` is
        returned instead of raising.
        """
        source = self.generate_test_code_source(method_name)
        try:
            with open(code_file_name, "w", encoding=ENCODING) as fh:
                fh.write(source)
        except OSError:
            logger.exception("Could not write generated code to %s", code_file_name)
            return False
        logger.info("Wrote %s() to %s", method_name, code_file_name)
        return True
