#
# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2024-2026 The XTC Project Authors
#
from .exceptions import (
    GraphAPIError,  # type: ignore
    InvalidSpecError,  # type: ignore
    IncompleteSpecError,  # type: ignore
    CyclicGraphError,  # type: ignore
    DanglingVirtualTensorError,  # type: ignore
    AmbiguousProducerError,  # type: ignore
    UnknownOperationNameError,  # type: ignore
    ConsumedBuilderError,  # type: ignore
    ReleasedAllocatorError,  # type: ignore
)
from .data import (
    DataType,  # type: ignore
    GraphTensor,  # type: ignore
    TensorBuilder,  # type: ignore
    make_tensor,  # type: ignore
    packed_strides,  # type: ignore
    tensor_id_from_name,  # type: ignore
    tensor_name_from_id,  # type: ignore
)
from .allocator import AutoDeleteAllocator  # type: ignore
from .pointwise import (
    PointwiseMode,  # type: ignore
    Pointwise,  # type: ignore
    PointwiseBuilder,  # type: ignore
    OperationPointwise,  # type: ignore
    OperationPointwiseBuilder,  # type: ignore
)
from .matmul import (
    Matmul,  # type: ignore
    MatmulBuilder,  # type: ignore
    OperationMatmul,  # type: ignore
    OperationMatmulBuilder,  # type: ignore
)
from .reduction import (
    ReductionOperator,  # type: ignore
    Reduction,  # type: ignore
    ReductionBuilder,  # type: ignore
    OperationReduction,  # type: ignore
    OperationReductionBuilder,  # type: ignore
)
from .rng import (
    RngDistribution,  # type: ignore
    Rng,  # type: ignore
    RngBuilder,  # type: ignore
    OperationRng,  # type: ignore
    OperationRngBuilder,  # type: ignore
)
from .node import (
    DummyNode,  # type: ignore
    OpNode,  # type: ignore
    get_in_tensors,  # type: ignore
    get_out_tensors,  # type: ignore
    get_signature_name,  # type: ignore
    get_operator_name,  # type: ignore
)
from .graph import Edge, OpGraph  # type: ignore
from .builder import OpGraphBuilder  # type: ignore
from .operations import (
    OperationKind,  # type: ignore
    register_operation,  # type: ignore
    get_operation,  # type: ignore
    has_operation,  # type: ignore
    list_operations,  # type: ignore
    check_operation_arity,  # type: ignore
    make_operation,  # type: ignore
)
from .pattern import DummyNodeGenSpec, PatternGraphGenerator  # type: ignore
