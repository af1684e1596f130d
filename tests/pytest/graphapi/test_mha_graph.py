#
# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2024-2026 The XTC Project Authors
#
import pytest

from opgraph.graphs.graphapi import (
    AutoDeleteAllocator,
    DummyNodeGenSpec,
    PatternGraphGenerator,
    get_in_tensors,
    get_out_tensors,
)
from graphapi_utils import MHA_FWD_NODES, make_mha_fwd_graph, mha_fwd_specs

MHA_SIZES = [
    (1, 1, 1, 1),
    (2, 8, 4, 16),
    (4, 16, 64, 128),
]


@pytest.mark.parametrize("n, h, s, d", MHA_SIZES)
def test_mha_fwd_graph(n, h, s, d):
    with AutoDeleteAllocator() as alloc:
        graph = make_mha_fwd_graph(alloc, n, h, s, d)
        assert graph.name == "mha_fwd"
        assert graph.num_nodes == 20
        assert graph.num_edges == 21
        assert len(graph.tensors) == 33
        assert len(graph.inputs) == 13
        assert {t.name for t in graph.outputs} == {"AMAX_S", "T_SCL_7", "AMAX_O"}
        for tensor in graph.inputs + graph.outputs:
            assert not tensor.is_virtual
        for tensor in graph.tensors:
            if tensor not in graph.inputs and tensor not in graph.outputs:
                assert tensor.is_virtual


@pytest.mark.parametrize("n, h, s, d", MHA_SIZES)
def test_mha_fwd_dims(n, h, s, d):
    with AutoDeleteAllocator() as alloc:
        graph = make_mha_fwd_graph(alloc, n, h, s, d)
        tensors = {t.name: t for t in graph.tensors}
        assert tensors["Q"].dims == (n, h, s, d)
        assert tensors["T_MM_0"].dims == (n, h, s, s)
        assert tensors["T_SUM"].dims == (n, h, s, 1)
        assert tensors["T_SCL_7"].dims == (n, h, s, d)
        assert tensors["AMAX_O"].dims == (1, 1, 1, 1)
        assert tensors["T_MM_0"].strides == (h * s * s, s * s, s, 1)


def test_mha_fwd_topological_order():
    with AutoDeleteAllocator() as alloc:
        graph = make_mha_fwd_graph(alloc, 2, 8, 4, 16)
        position = {node: idx for idx, node in enumerate(graph.nodes)}
        for edge in graph.edges:
            assert position[edge.src] < position[edge.dst]
        produced = set()
        for node in graph.nodes:
            for tensor in get_in_tensors(node):
                assert tensor in graph.inputs or tensor in produced
            produced.update(get_out_tensors(node))


def test_mha_fwd_reductions():
    with AutoDeleteAllocator() as alloc:
        graph = make_mha_fwd_graph(alloc, 2, 8, 4, 16)
        assert len(graph.find_nodes("OP_REDUCTION:MAX")) == 3
        assert len(graph.find_nodes("OP_REDUCTION:SUM")) == 1
        assert len(graph.find_nodes("OP_POINTWISE:MUL")) == 10
        assert len(graph.find_nodes("OP_MATMUL")) == 2
        assert len(graph.find_nodes("OP_RNG")) == 1
        (rng,) = graph.find_nodes("OP_RNG")
        assert rng.rng.bernoulli_prob == 0.5


def test_mha_fwd_allocations():
    with AutoDeleteAllocator() as alloc:
        graph = make_mha_fwd_graph(alloc, 2, 8, 4, 16)
        # one descriptor per node, besides tensors and nodes
        assert len(alloc) == 33 + 2 * 20
        for node in graph.nodes:
            assert alloc.owns(node)
    assert alloc.released


def test_mha_fwd_pattern():
    with PatternGraphGenerator(mha_fwd_specs(), name="mha_fwd") as gen:
        pattern = gen.graph
        assert pattern.num_nodes == 20
        assert pattern.num_edges == 21
        assert len(gen.tensors) == 33
        with AutoDeleteAllocator() as alloc:
            graph = make_mha_fwd_graph(alloc, 2, 8, 4, 16)
            assert pattern.is_isomorphic(graph)
            assert graph.is_isomorphic(pattern)


def test_mha_fwd_pattern_mismatch():
    specs = mha_fwd_specs()
    idx = next(i for i, (name, *_) in enumerate(MHA_FWD_NODES) if name.endswith("SUM"))
    sum_spec = specs[idx]
    specs[idx] = DummyNodeGenSpec(
        "OP_REDUCTION:MAX", sum_spec.in_tensors, sum_spec.out_tensors
    )
    with PatternGraphGenerator(specs) as gen:
        with AutoDeleteAllocator() as alloc:
            graph = make_mha_fwd_graph(alloc, 2, 8, 4, 16)
            assert not gen.graph.is_isomorphic(graph)
