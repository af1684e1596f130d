#
# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2024-2026 The XTC Project Authors
#
from opgraph.graphs.graphapi import (
    AutoDeleteAllocator,
    DummyNodeGenSpec,
    GraphTensor,
    OpGraph,
    OpGraphBuilder,
    make_operation,
    make_tensor,
)

# Scaled dot product attention with fp8 scaling and dropout:
# (node name, inputs, outputs, kind of the output tensor dims)
MHA_FWD_NODES = [
    ("OP_MATMUL", ["Q", "K"], ["T_MM_0"], "nhss"),
    ("OP_POINTWISE:MUL", ["T_MM_0", "ATN_SCL"], ["T_SCL_0"], "nhss"),
    ("OP_POINTWISE:MUL", ["T_SCL_0", "DSCL_Q"], ["T_SCL_1"], "nhss"),
    ("OP_POINTWISE:MUL", ["T_SCL_1", "DSCL_K"], ["T_SCL_2"], "nhss"),
    ("OP_REDUCTION:MAX", ["T_SCL_2"], ["M"], "nhs1"),
    ("OP_POINTWISE:SUB", ["T_SCL_2", "M"], ["T_SUB"], "nhss"),
    ("OP_POINTWISE:EXP", ["T_SUB"], ["T_EXP"], "nhss"),
    ("OP_REDUCTION:SUM", ["T_EXP"], ["T_SUM"], "nhs1"),
    ("OP_POINTWISE:RECIPROCAL", ["T_SUM"], ["Z_INV"], "nhs1"),
    ("OP_POINTWISE:MUL", ["T_EXP", "Z_INV"], ["T_MUL_0"], "nhss"),
    ("OP_REDUCTION:MAX", ["T_MUL_0"], ["AMAX_S"], "all1s"),
    ("OP_RNG", ["RND_SD", "RND_OFF"], ["T_RND"], "nhss"),
    ("OP_POINTWISE:MUL", ["T_MUL_0", "T_RND"], ["T_MUL_1"], "nhss"),
    ("OP_POINTWISE:MUL", ["T_MUL_1", "RND_PRB"], ["T_SCL_3"], "nhss"),
    ("OP_POINTWISE:MUL", ["T_SCL_3", "SCL_S"], ["T_SCL_4"], "nhss"),
    ("OP_MATMUL", ["T_SCL_4", "V"], ["T_MM_1"], "nhsd"),
    ("OP_POINTWISE:MUL", ["T_MM_1", "DSCL_S"], ["T_SCL_5"], "nhsd"),
    ("OP_POINTWISE:MUL", ["T_SCL_5", "DSCL_V"], ["T_SCL_6"], "nhsd"),
    ("OP_POINTWISE:MUL", ["T_SCL_6", "SCL_O"], ["T_SCL_7"], "nhsd"),
    ("OP_REDUCTION:MAX", ["T_SCL_6"], ["AMAX_O"], "all1s"),
]

MHA_FWD_INPUTS_DIMS = {
    "Q": "nhsd",
    "K": "nhsd",
    "V": "nhsd",
}


def mha_fwd_specs() -> list[DummyNodeGenSpec]:
    return [DummyNodeGenSpec(name, ins, outs) for name, ins, outs, _ in MHA_FWD_NODES]


def make_mha_fwd_graph(
    alloc: AutoDeleteAllocator, n: int, h: int, s: int, d: int
) -> OpGraph:
    dims = {
        "nhsd": (n, h, s, d),
        "nhss": (n, h, s, s),
        "nhs1": (n, h, s, 1),
        "all1s": (1, 1, 1, 1),
    }
    produced = {out for _, _, outs, _ in MHA_FWD_NODES for out in outs}
    consumed = {inp for _, ins, _, _ in MHA_FWD_NODES for inp in ins}
    tensors = {}

    def get_tensor(name: str, kind: str) -> GraphTensor:
        if name not in tensors:
            virtual = name in produced and name in consumed
            tensors[name] = alloc.allocate(
                make_tensor(name, dims[kind], virtual=virtual)
            )
        return tensors[name]

    builder = OpGraphBuilder(name="mha_fwd")
    for name, ins, outs, out_kind in MHA_FWD_NODES:
        in_tensors = [
            get_tensor(inp, MHA_FWD_INPUTS_DIMS.get(inp, "all1s")) for inp in ins
        ]
        out_tensors = [get_tensor(out, out_kind) for out in outs]
        builder.add_node(make_operation(name, in_tensors, out_tensors, alloc=alloc))
    return builder.build()
