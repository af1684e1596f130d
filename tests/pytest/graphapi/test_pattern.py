#
# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2024-2026 The XTC Project Authors
#
import pytest

import opgraph.graphs.graphapi.pattern as pattern_module
from opgraph.graphs.graphapi import (
    AutoDeleteAllocator,
    CyclicGraphError,
    DummyNode,
    DummyNodeGenSpec,
    InvalidSpecError,
    OpGraphBuilder,
    PatternGraphGenerator,
    ReleasedAllocatorError,
    UnknownOperationNameError,
    make_operation,
    make_tensor,
)


def _mul_exp_specs():
    return [
        DummyNodeGenSpec("MUL1", ["A", "B"], ["C"]),
        DummyNodeGenSpec("EXP1", ["C"], ["D"]),
    ]


def test_spec_tuples():
    spec = DummyNodeGenSpec("MUL1", ["A", "B"], ["C"])
    assert spec.in_tensors == ("A", "B")
    assert spec.out_tensors == ("C",)
    assert spec == DummyNodeGenSpec("MUL1", ("A", "B"), ("C",))


def test_mul_exp_pattern():
    gen = PatternGraphGenerator(_mul_exp_specs())
    graph = gen.graph
    assert graph.num_nodes == 2
    assert graph.num_edges == 1
    assert len(gen.tensors) == 4
    assert [t.name for t in graph.inputs] == ["A", "B"]
    assert [t.name for t in graph.outputs] == ["D"]
    assert [name for name, t in gen.tensors.items() if t.is_virtual] == ["C"]
    mul, exp = graph.nodes
    assert isinstance(mul, DummyNode)
    assert mul.name == "MUL1"
    assert mul.operator == "OP_POINTWISE:MUL"
    assert exp.operator == "OP_POINTWISE:EXP"
    assert graph.edges[0].src is mul
    assert graph.edges[0].dst is exp


def test_shared_tensor_names():
    gen = PatternGraphGenerator(_mul_exp_specs())
    mul, exp = gen.graph.nodes
    assert mul.out_tensors[0] is gen.tensor("C")
    assert exp.in_tensors[0] is gen.tensor("C")


def test_pattern_order_independent():
    gen = PatternGraphGenerator(list(reversed(_mul_exp_specs())))
    assert [node.name for node in gen.graph.nodes] == ["MUL1", "EXP1"]


def test_dummy_tensors():
    gen = PatternGraphGenerator(_mul_exp_specs(), dummy_dims=(2, 2))
    for tensor in gen.tensors.values():
        assert tensor.dims == (2, 2)
        assert tensor.strides == (2, 1)
    assert PatternGraphGenerator(_mul_exp_specs()).tensor("A").dims == (1,)


def test_make():
    gen = PatternGraphGenerator.make(_mul_exp_specs(), name="mul_exp")
    assert gen.graph.name == "mul_exp"


def test_empty_pattern():
    gen = PatternGraphGenerator([])
    assert gen.graph.num_nodes == 0
    assert gen.graph.num_edges == 0
    assert gen.tensors == {}


def test_canonical_and_suffixed_names():
    specs = [
        DummyNodeGenSpec("OP_MATMUL_0", ["Q", "K"], ["S"]),
        DummyNodeGenSpec("REDUCE_MAX", ["S"], ["M"]),
        DummyNodeGenSpec("OP_POINTWISE:SUB", ["S", "M"], ["O"]),
    ]
    graph = PatternGraphGenerator(specs).graph
    assert [node.operator for node in graph.nodes] == [
        "OP_MATMUL",
        "OP_REDUCTION:MAX",
        "OP_POINTWISE:SUB",
    ]
    assert graph.num_edges == 3


@pytest.fixture
def allocators(monkeypatch):
    created = []

    class TrackingAllocator(AutoDeleteAllocator):
        def __init__(self):
            super().__init__()
            created.append(self)

    monkeypatch.setattr(pattern_module, "AutoDeleteAllocator", TrackingAllocator)
    return created


def test_unknown_operation(allocators):
    specs = [
        DummyNodeGenSpec("MUL1", ["A", "B"], ["C"]),
        DummyNodeGenSpec("FOO", ["C"], ["D"]),
    ]
    with pytest.raises(UnknownOperationNameError) as excinfo:
        PatternGraphGenerator(specs)
    assert excinfo.value.name == "FOO"
    assert len(allocators) == 1
    assert allocators[0].released


def test_arity_mismatch(allocators):
    with pytest.raises(InvalidSpecError):
        PatternGraphGenerator([DummyNodeGenSpec("EXP1", ["A", "B"], ["C"])])
    assert allocators[0].released


def test_tensor_name_too_long(allocators):
    with pytest.raises(InvalidSpecError):
        PatternGraphGenerator([DummyNodeGenSpec("EXP", ["TOO_LONG_NAME"], ["B"])])
    assert allocators[0].released


def test_cyclic_pattern(allocators):
    specs = [
        DummyNodeGenSpec("EXP1", ["A"], ["B"]),
        DummyNodeGenSpec("EXP2", ["B"], ["A"]),
    ]
    with pytest.raises(CyclicGraphError):
        PatternGraphGenerator(specs)
    assert allocators[0].released


def test_generator_owns_objects(allocators):
    gen = PatternGraphGenerator(_mul_exp_specs())
    alloc = allocators[0]
    assert not alloc.released
    # four tensors and two nodes
    assert len(alloc) == 6
    for node in gen.graph.nodes:
        assert alloc.owns(node)


def test_release():
    gen = PatternGraphGenerator(_mul_exp_specs())
    gen.release()
    with pytest.raises(ReleasedAllocatorError):
        gen.graph
    assert gen.tensors == {}


def test_context_manager():
    with PatternGraphGenerator(_mul_exp_specs()) as gen:
        assert gen.graph.num_nodes == 2
    with pytest.raises(ReleasedAllocatorError):
        gen.graph


def test_isomorphic_patterns():
    other = [
        DummyNodeGenSpec("EXP", ["X"], ["Y"]),
        DummyNodeGenSpec("OP_POINTWISE:MUL", ["U", "V"], ["X"]),
    ]
    gen = PatternGraphGenerator(_mul_exp_specs())
    assert gen.graph.is_isomorphic(PatternGraphGenerator(other).graph)


def test_non_isomorphic_patterns():
    gen = PatternGraphGenerator(_mul_exp_specs())
    neg = PatternGraphGenerator(
        [
            DummyNodeGenSpec("MUL1", ["A", "B"], ["C"]),
            DummyNodeGenSpec("NEG1", ["C"], ["D"]),
        ]
    )
    assert not gen.graph.is_isomorphic(neg.graph)
    disconnected = PatternGraphGenerator(
        [
            DummyNodeGenSpec("MUL1", ["A", "B"], ["C"]),
            DummyNodeGenSpec("EXP1", ["E"], ["D"]),
        ]
    )
    assert not gen.graph.is_isomorphic(disconnected.graph)


def test_pattern_matches_workload():
    a, b, d = (make_tensor(name, [4, 4]) for name in "ABD")
    c = make_tensor("C", [4, 4], virtual=True)
    workload = (
        OpGraphBuilder()
        .add_node(make_operation("EXP", [c], [d]))
        .add_node(make_operation("MUL", [a, b], [c]))
        .build()
    )
    assert PatternGraphGenerator(_mul_exp_specs()).graph.is_isomorphic(workload)
    assert workload.is_isomorphic(PatternGraphGenerator(_mul_exp_specs()).graph)
