#
# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2024-2026 The XTC Project Authors
#
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .data import DataType, GraphTensor
from .exceptions import IncompleteSpecError

if TYPE_CHECKING:
    from .allocator import AutoDeleteAllocator

__all__ = [
    "Matmul",
    "MatmulBuilder",
    "OperationMatmul",
    "OperationMatmulBuilder",
]


@dataclass(frozen=True)
class Matmul:
    compute_type: DataType


class MatmulBuilder:
    def __init__(self) -> None:
        self._compute_type: DataType | None = None

    def set_compute_type(self, compute_type: DataType) -> "MatmulBuilder":
        self._compute_type = compute_type
        return self

    def build(self, alloc: "AutoDeleteAllocator | None" = None) -> Matmul:
        if self._compute_type is None:
            raise IncompleteSpecError("compute_type", "Matmul")
        matmul = Matmul(compute_type=self._compute_type)
        return matmul if alloc is None else alloc.allocate(matmul)


@dataclass(frozen=True, eq=False)
class OperationMatmul:
    """Matmul operation node: c = a @ b."""

    matmul: Matmul
    a: GraphTensor
    b: GraphTensor
    c: GraphTensor


class OperationMatmulBuilder:
    def __init__(self) -> None:
        self._matmul: Matmul | None = None
        self._a: GraphTensor | None = None
        self._b: GraphTensor | None = None
        self._c: GraphTensor | None = None

    def set_matmul_descriptor(self, matmul: Matmul) -> "OperationMatmulBuilder":
        self._matmul = matmul
        return self

    def set_a(self, a: GraphTensor) -> "OperationMatmulBuilder":
        self._a = a
        return self

    def set_b(self, b: GraphTensor) -> "OperationMatmulBuilder":
        self._b = b
        return self

    def set_c(self, c: GraphTensor) -> "OperationMatmulBuilder":
        self._c = c
        return self

    def build(self, alloc: "AutoDeleteAllocator | None" = None) -> OperationMatmul:
        if self._matmul is None:
            raise IncompleteSpecError("matmul", "OperationMatmul")
        if self._a is None:
            raise IncompleteSpecError("a", "OperationMatmul")
        if self._b is None:
            raise IncompleteSpecError("b", "OperationMatmul")
        if self._c is None:
            raise IncompleteSpecError("c", "OperationMatmul")
        node = OperationMatmul(matmul=self._matmul, a=self._a, b=self._b, c=self._c)
        return node if alloc is None else alloc.allocate(node)
