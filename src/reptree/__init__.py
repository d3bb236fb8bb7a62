# reptree/__init__.py
"""
reptree: decision trees with reduced-error pruning, text persistence and
code generation.

Exports:
    - DecisionTree
    - DecisionNode, DecisionCondition, Prediction
    - Instance, CompositeInstance, InstanceList
"""
import logging

from .distribution import DiscreteDistribution
from .instance import (
    CompositeInstance,
    ContinuousAttribute,
    DiscreteAttribute,
    Instance,
    InstanceList,
)
from .model import Model
from .node import Comparison, DecisionCondition, DecisionNode, NodeKind, Prediction
from .performance import ClassificationPerformance
from .textio import ModelFormatError
from .tree import DecisionTree

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "ClassificationPerformance",
    "Comparison",
    "CompositeInstance",
    "ContinuousAttribute",
    "DecisionCondition",
    "DecisionNode",
    "DecisionTree",
    "DiscreteAttribute",
    "DiscreteDistribution",
    "Instance",
    "InstanceList",
    "Model",
    "ModelFormatError",
    "NodeKind",
    "Prediction",
]
__version__ = "0.1.0"
