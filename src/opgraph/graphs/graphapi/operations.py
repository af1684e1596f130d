#
# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2024-2026 The XTC Project Authors
#
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
import logging

from .allocator import AutoDeleteAllocator
from .data import DataType, GraphTensor
from .exceptions import InvalidSpecError, UnknownOperationNameError
from .node import OpNode
from .pointwise import (
    PointwiseMode,
    PointwiseBuilder,
    OperationPointwise,
    OperationPointwiseBuilder,
)
from .matmul import MatmulBuilder, OperationMatmul, OperationMatmulBuilder
from .reduction import (
    ReductionOperator,
    ReductionBuilder,
    OperationReduction,
    OperationReductionBuilder,
)
from .rng import RngDistribution, RngBuilder, OperationRng, OperationRngBuilder

__all__ = [
    "OperationKind",
    "register_operation",
    "get_operation",
    "has_operation",
    "list_operations",
    "check_operation_arity",
    "make_operation",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OperationKind:
    """Registry entry of an operator name.

    Attributes:
        name: The canonical operator name, as returned by get_operator_name().
        variant: The operation node class.
        mode: The pointwise mode or reduction operator, None otherwise.
        num_inputs: The fixed number of input tensors.
        num_outputs: The fixed number of output tensors.
    """

    name: str
    variant: type
    mode: PointwiseMode | ReductionOperator | None
    num_inputs: int
    num_outputs: int = 1


_OPERATION_REGISTRY: dict[str, OperationKind] = {}

_DIGITS = "0123456789"


def register_operation(kind: OperationKind, aliases: Sequence[str] = ()) -> None:
    for name in (kind.name, *aliases):
        if name in _OPERATION_REGISTRY:
            logger.warning(f"operation {name} is already registered")
        _OPERATION_REGISTRY[name] = kind


def get_operation(name: str) -> OperationKind:
    """
    Resolves an operator name, either registered as is or followed by an
    instance number, as in MUL1 or OP_MATMUL_0.
    Shorter instance numbers are tried first, hence REDUCE_NORM12 is
    REDUCE_NORM1 instance 2.
    """
    kind = _OPERATION_REGISTRY.get(name)
    if kind is not None:
        return kind
    for base in _instance_bases(name):
        kind = _OPERATION_REGISTRY.get(base)
        if kind is not None:
            return kind
    raise UnknownOperationNameError(name)


def _instance_bases(name: str) -> Iterator[str]:
    end = len(name)
    while end > 1 and name[end - 1] in _DIGITS:
        end -= 1
        base = name[:end]
        yield base
        if len(base) > 1 and base.endswith("_"):
            yield base[:-1]


def has_operation(name: str) -> bool:
    try:
        get_operation(name)
    except UnknownOperationNameError:
        return False
    return True


def list_operations() -> list[str]:
    return sorted({kind.name for kind in _OPERATION_REGISTRY.values()})


def check_operation_arity(
    kind: OperationKind, name: str, num_inputs: int, num_outputs: int
) -> None:
    if num_inputs != kind.num_inputs or num_outputs != kind.num_outputs:
        raise InvalidSpecError(
            f"operation {name} ({kind.name}) expects {kind.num_inputs} inputs and "
            f"{kind.num_outputs} outputs, got {num_inputs} and {num_outputs}"
        )


def make_operation(
    name: str,
    in_tensors: Sequence[GraphTensor],
    out_tensors: Sequence[GraphTensor],
    math_precision: DataType = DataType.FLOAT,
    bernoulli_prob: float = 0.5,
    alloc: AutoDeleteAllocator | None = None,
) -> OpNode:
    """
    Builds the operation node for an operator name, with default
    descriptors. RNG nodes use a Bernoulli distribution, their inputs
    are (seed, offset).
    Descriptors are allocated along with the node when alloc is given.
    """
    kind = get_operation(name)
    check_operation_arity(kind, name, len(in_tensors), len(out_tensors))
    if kind.variant is OperationPointwise:
        assert isinstance(kind.mode, PointwiseMode)
        pointwise = (
            PointwiseBuilder()
            .set_mode(kind.mode)
            .set_math_precision(math_precision)
            .build(alloc)
        )
        builder = (
            OperationPointwiseBuilder()
            .set_pointwise(pointwise)
            .set_x(in_tensors[0])
            .set_y(out_tensors[0])
        )
        if kind.num_inputs == 2:
            builder.set_b(in_tensors[1])
        return builder.build(alloc)
    if kind.variant is OperationMatmul:
        matmul = MatmulBuilder().set_compute_type(math_precision).build(alloc)
        return (
            OperationMatmulBuilder()
            .set_matmul_descriptor(matmul)
            .set_a(in_tensors[0])
            .set_b(in_tensors[1])
            .set_c(out_tensors[0])
            .build(alloc)
        )
    if kind.variant is OperationReduction:
        assert isinstance(kind.mode, ReductionOperator)
        reduction = (
            ReductionBuilder()
            .set_reduction_operator(kind.mode)
            .set_comp_type(math_precision)
            .build(alloc)
        )
        return (
            OperationReductionBuilder()
            .set_reduction(reduction)
            .set_x(in_tensors[0])
            .set_y(out_tensors[0])
            .build(alloc)
        )
    if kind.variant is OperationRng:
        rng = (
            RngBuilder()
            .set_distribution(RngDistribution.BERNOULLI)
            .set_bernoulli_prob(bernoulli_prob)
            .build(alloc)
        )
        return (
            OperationRngBuilder()
            .set_rng(rng)
            .set_seed(in_tensors[0])
            .set_offset(in_tensors[1])
            .set_output(out_tensors[0])
            .build(alloc)
        )
    raise UnknownOperationNameError(name)


def _register_builtin_operations() -> None:
    for mode in PointwiseMode:
        register_operation(
            OperationKind(
                name=f"OP_POINTWISE:{mode.value}",
                variant=OperationPointwise,
                mode=mode,
                num_inputs=mode.arity,
            ),
            aliases=[mode.value],
        )
    register_operation(
        OperationKind(
            name="OP_MATMUL", variant=OperationMatmul, mode=None, num_inputs=2
        ),
        aliases=["MATMUL"],
    )
    for op in ReductionOperator:
        aliases = [f"REDUCE_{op.value}"]
        if op == ReductionOperator.SUM:
            aliases.append("SUM")
        register_operation(
            OperationKind(
                name=f"OP_REDUCTION:{op.value}",
                variant=OperationReduction,
                mode=op,
                num_inputs=1,
            ),
            aliases=aliases,
        )
    register_operation(
        OperationKind(name="OP_RNG", variant=OperationRng, mode=None, num_inputs=2),
        aliases=["RNG"],
    )


_register_builtin_operations()
