#
# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2024-2026 The XTC Project Authors
#
from typing_extensions import assert_never
from dataclasses import dataclass
from typing import TypeAlias

from .data import GraphTensor
from .pointwise import OperationPointwise
from .matmul import OperationMatmul
from .reduction import OperationReduction
from .rng import OperationRng

__all__ = [
    "DummyNode",
    "OpNode",
    "get_in_tensors",
    "get_out_tensors",
    "get_signature_name",
    "get_operator_name",
]


@dataclass(frozen=True, eq=False)
class DummyNode:
    """Operation node of a pattern graph.

    Attributes:
        name: The node name as declared in the pattern, used as signature.
        operator: The canonical operator name the declared name resolves to.
        in_tensors: The input tensors, in declaration order.
        out_tensors: The output tensors, in declaration order.
    """

    name: str
    operator: str
    in_tensors: tuple[GraphTensor, ...]
    out_tensors: tuple[GraphTensor, ...]


OpNode: TypeAlias = (
    OperationPointwise | OperationMatmul | OperationReduction | OperationRng | DummyNode
)


def get_in_tensors(node: OpNode) -> list[GraphTensor]:
    match node:
        case OperationPointwise(x=x, b=None):
            return [x]
        case OperationPointwise(x=x, b=b):
            return [x, b]
        case OperationMatmul(a=a, b=b):
            return [a, b]
        case OperationReduction(x=x):
            return [x]
        case OperationRng(seed=seed, offset=offset):
            return [seed, offset]
        case DummyNode(in_tensors=in_tensors):
            return list(in_tensors)
        case _:
            assert_never(node)


def get_out_tensors(node: OpNode) -> list[GraphTensor]:
    match node:
        case OperationPointwise(y=y):
            return [y]
        case OperationMatmul(c=c):
            return [c]
        case OperationReduction(y=y):
            return [y]
        case OperationRng(output=output):
            return [output]
        case DummyNode(out_tensors=out_tensors):
            return list(out_tensors)
        case _:
            assert_never(node)


def get_operator_name(node: OpNode) -> str:
    """
    Returns the canonical operator name of a node, the key used when
    comparing a pattern graph with a workload graph.
    """
    match node:
        case OperationPointwise(pointwise=pointwise):
            return f"OP_POINTWISE:{pointwise.mode.value}"
        case OperationMatmul():
            return "OP_MATMUL"
        case OperationReduction(reduction=reduction):
            return f"OP_REDUCTION:{reduction.reduction_operator.value}"
        case OperationRng():
            return "OP_RNG"
        case DummyNode(operator=operator):
            return operator
        case _:
            assert_never(node)


def get_signature_name(node: OpNode) -> str:
    """Returns the node name used in diagnostics."""
    if isinstance(node, DummyNode):
        return node.name
    return get_operator_name(node)
