"""
reptree.model
=============

Abstract base shared by every classifier in the package.

A model predicts a label for an :class:`~reptree.instance.Instance`,
estimates a label distribution, writes a human-readable text snapshot
(:meth:`Model.save_txt`) and can be persisted as a whole-object binary
snapshot (:meth:`Model.save` / :meth:`Model.load`).
"""
from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from collections import Counter
from typing import Iterable

import joblib
import numpy as np
from sklearn.metrics import accuracy_score

from .instance import Instance, InstanceList
from .performance import ClassificationPerformance

logger = logging.getLogger(__name__)


class Model(ABC):

    @abstractmethod
    def predict(self, instance: Instance):
        """Predict the class label of ``instance``."""

    @abstractmethod
    def predict_probability(self, instance: Instance) -> dict[str, float]:
        """Return a ``label -> probability`` mapping for ``instance``."""

    @abstractmethod
    def save_txt(self, file_name: str | os.PathLike) -> None:
        """Write the model as line-oriented text."""

    # ------------------------------------------------------------------
    # Binary snapshot
    # ------------------------------------------------------------------
    def save(self, file_name: str | os.PathLike) -> str:
        """
        Persist the whole model object as a binary snapshot.

        Parameters
        ----------
        file_name : str or path-like
            Destination file.  Overwritten if it exists.

        Returns
        -------
        str
            The path written.
        """
        joblib.dump(self, file_name)
        logger.info("Saved %s snapshot to %s", type(self).__name__, file_name)
        return str(file_name)

    @classmethod
    def load(cls, file_name: str | os.PathLike):
        """
        Restore a model written by :meth:`save`.

        Raises
        ------
        OSError
            If the file cannot be read.
        TypeError
            If the snapshot does not hold an instance of ``cls``.
        """
        model = joblib.load(file_name)
        if not isinstance(model, cls):
            raise TypeError(f"{file_name} holds a {type(model).__name__}, not a {cls.__name__}")
        return model

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------
    @abstractmethod
    def predict_label(self, instance: Instance) -> str | None:
        """Predicted label as a plain string, ``None`` when undecidable."""

    def test_classifier(self, test_set: InstanceList | Iterable[Instance]) -> ClassificationPerformance:
        """Accuracy of the model on a labeled set.

        Instances the model cannot decide on count as errors.  An empty set
        has accuracy 0.
        """
        instances = list(test_set)
        if not instances:
            return ClassificationPerformance(accuracy=0.0)
        predicted = [self.predict_label(inst) for inst in instances]
        n_undecided = sum(label is None for label in predicted)
        # labels are encoded as integers; undecided predictions get -1 and never match
        codes: dict[str, int] = {}
        y_true = np.array([codes.setdefault(inst.class_label, len(codes)) for inst in instances])
        y_pred = np.array([-1 if label is None else codes.setdefault(label, len(codes))
                           for label in predicted])
        accuracy = float(accuracy_score(y_true, y_pred))
        return ClassificationPerformance(accuracy=accuracy, n_instances=len(instances),
                                         n_undecided=n_undecided)

    @staticmethod
    def get_maximum(class_labels: Iterable[str]) -> str | None:
        """Most frequent label; the first one seen wins ties."""
        counts = Counter(class_labels)
        if not counts:
            return None
        return counts.most_common(1)[0][0]
