#
# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2024-2026 The XTC Project Authors
#
from typing_extensions import override
from collections.abc import Sequence
from dataclasses import dataclass

from opgraph.itf.graph import Graph

from .data import GraphTensor
from .node import (
    OpNode,
    get_in_tensors,
    get_out_tensors,
    get_operator_name,
    get_signature_name,
)
from .utils import OpGraphUtils

__all__ = [
    "Edge",
    "OpGraph",
]


@dataclass(frozen=True)
class Edge:
    """A producer to consumer edge, labelled by the tensor linking them."""

    src: OpNode
    dst: OpNode
    tensor: GraphTensor


class OpGraph(Graph):
    """Immutable operation graph.

    Only built by OpGraphBuilder which infers the edges and validates the
    graph. The constructor itself expects validated nodes in topological
    order and does not check them.
    The nodes and tensors are not owned by the graph, they must outlive it.
    """

    def __init__(
        self,
        nodes: Sequence[OpNode] = (),
        edges: Sequence[Edge] = (),
        name: str | None = None,
    ) -> None:
        self._nodes = tuple(nodes)
        self._edges = tuple(edges)
        self._name = name
        self._in_edges: dict[OpNode, list[Edge]] = {node: [] for node in self._nodes}
        self._out_edges: dict[OpNode, list[Edge]] = {node: [] for node in self._nodes}
        for edge in self._edges:
            assert edge.src in self._out_edges and edge.dst in self._in_edges, (
                f"edge endpoint not in graph nodes: {edge}"
            )
            self._out_edges[edge.src].append(edge)
            self._in_edges[edge.dst].append(edge)
        self._producers: dict[GraphTensor, OpNode] = {}
        self._consumers: dict[GraphTensor, list[OpNode]] = {}
        self._tensors: dict[GraphTensor, GraphTensor] = {}
        for node in self._nodes:
            for tensor in get_in_tensors(node):
                self._tensors.setdefault(tensor, tensor)
                consumers = self._consumers.setdefault(tensor, [])
                if node not in consumers:
                    consumers.append(node)
            for tensor in get_out_tensors(node):
                self._tensors.setdefault(tensor, tensor)
                self._producers.setdefault(tensor, node)

    @property
    @override
    def name(self) -> str:
        return "" if self._name is None else self._name

    @property
    @override
    def nodes(self) -> tuple[OpNode, ...]:
        return self._nodes

    @property
    @override
    def edges(self) -> tuple[Edge, ...]:
        return self._edges

    @property
    def num_nodes(self) -> int:
        return len(self._nodes)

    @property
    def num_edges(self) -> int:
        return len(self._edges)

    @property
    def tensors(self) -> list[GraphTensor]:
        return list(self._tensors.values())

    @property
    @override
    def inputs(self) -> list[GraphTensor]:
        return [t for t in self._tensors.values() if t not in self._producers]

    @property
    @override
    def outputs(self) -> list[GraphTensor]:
        return [t for t in self._tensors.values() if t not in self._consumers]

    def producer(self, tensor: GraphTensor) -> OpNode | None:
        return self._producers.get(tensor)

    def consumers(self, tensor: GraphTensor) -> list[OpNode]:
        return list(self._consumers.get(tensor, []))

    def in_edges(self, node: OpNode) -> list[Edge]:
        return list(self._in_edges[node])

    def out_edges(self, node: OpNode) -> list[Edge]:
        return list(self._out_edges[node])

    def predecessors(self, node: OpNode) -> list[OpNode]:
        return list({edge.src: None for edge in self._in_edges[node]})

    def successors(self, node: OpNode) -> list[OpNode]:
        return list({edge.dst: None for edge in self._out_edges[node]})

    def find_nodes(self, operator_name: str) -> list[OpNode]:
        return [
            node for node in self._nodes if get_operator_name(node) == operator_name
        ]

    def is_isomorphic(self, other: "OpGraph") -> bool:
        """Check structural equivalence with another graph.

        Nodes are compared by canonical operator name, such that a pattern
        graph of dummy nodes can be compared with a workload graph.
        Tensor names and shapes are not compared.
        """
        return OpGraphUtils.is_isomorphic(
            (self._nodes, [(e.src, e.dst) for e in self._edges]),
            (other._nodes, [(e.src, e.dst) for e in other._edges]),
            label=get_operator_name,
        )

    @override
    def __str__(self) -> str:
        graph_str = "graph:\n"
        if self.name != "":
            graph_str += f"  name: {self._name}\n"
        inputs, outputs = self.inputs, self.outputs
        if len(inputs) > 0:
            graph_str += "  inputs:\n"
            for tensor in inputs:
                graph_str += f"  - {tensor}\n"
        else:
            graph_str += "  inputs: []\n"
        if len(outputs) > 0:
            graph_str += "  outputs:\n"
            for tensor in outputs:
                graph_str += f"  - {tensor}\n"
        else:
            graph_str += "  outputs: []\n"
        if len(self._nodes) > 0:
            graph_str += "  nodes:\n"
            for node in self._nodes:
                ins = ", ".join(str(t) for t in get_in_tensors(node))
                outs = ", ".join(str(t) for t in get_out_tensors(node))
                graph_str += f"  - {get_signature_name(node)}: ({ins}) -> ({outs})\n"
        else:
            graph_str += "  nodes: []\n"
        return graph_str
