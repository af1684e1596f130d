#
# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2024-2026 The XTC Project Authors
#
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from .data import DataType, GraphTensor
from .exceptions import IncompleteSpecError

if TYPE_CHECKING:
    from .allocator import AutoDeleteAllocator

__all__ = [
    "ReductionOperator",
    "Reduction",
    "ReductionBuilder",
    "OperationReduction",
    "OperationReductionBuilder",
]


class ReductionOperator(Enum):
    SUM = "SUM"
    MUL = "MUL"
    MIN = "MIN"
    MAX = "MAX"
    AMAX = "AMAX"
    AVG = "AVG"
    NORM1 = "NORM1"
    NORM2 = "NORM2"


@dataclass(frozen=True)
class Reduction:
    reduction_operator: ReductionOperator
    comp_type: DataType


class ReductionBuilder:
    def __init__(self) -> None:
        self._reduction_operator: ReductionOperator | None = None
        self._comp_type: DataType | None = None

    def set_reduction_operator(
        self, reduction_operator: ReductionOperator
    ) -> "ReductionBuilder":
        self._reduction_operator = reduction_operator
        return self

    def set_comp_type(self, comp_type: DataType) -> "ReductionBuilder":
        self._comp_type = comp_type
        return self

    def build(self, alloc: "AutoDeleteAllocator | None" = None) -> Reduction:
        if self._reduction_operator is None:
            raise IncompleteSpecError("reduction_operator", "Reduction")
        if self._comp_type is None:
            raise IncompleteSpecError("comp_type", "Reduction")
        reduction = Reduction(
            reduction_operator=self._reduction_operator,
            comp_type=self._comp_type,
        )
        return reduction if alloc is None else alloc.allocate(reduction)


@dataclass(frozen=True, eq=False)
class OperationReduction:
    """Reduction operation node.

    The reduced axes are the ones where y has a size of 1 and x does not.
    """

    reduction: Reduction
    x: GraphTensor
    y: GraphTensor


class OperationReductionBuilder:
    def __init__(self) -> None:
        self._reduction: Reduction | None = None
        self._x: GraphTensor | None = None
        self._y: GraphTensor | None = None

    def set_reduction(self, reduction: Reduction) -> "OperationReductionBuilder":
        self._reduction = reduction
        return self

    def set_x(self, x: GraphTensor) -> "OperationReductionBuilder":
        self._x = x
        return self

    def set_y(self, y: GraphTensor) -> "OperationReductionBuilder":
        self._y = y
        return self

    def build(
        self, alloc: "AutoDeleteAllocator | None" = None
    ) -> OperationReduction:
        if self._reduction is None:
            raise IncompleteSpecError("reduction", "OperationReduction")
        if self._x is None:
            raise IncompleteSpecError("x", "OperationReduction")
        if self._y is None:
            raise IncompleteSpecError("y", "OperationReduction")
        node = OperationReduction(reduction=self._reduction, x=self._x, y=self._y)
        return node if alloc is None else alloc.allocate(node)
