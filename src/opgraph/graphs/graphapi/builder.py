#
# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2024-2026 The XTC Project Authors
#
from typing import Any
import logging

from .data import GraphTensor
from .exceptions import (
    InvalidSpecError,
    AmbiguousProducerError,
    DanglingVirtualTensorError,
    ConsumedBuilderError,
)
from .graph import Edge, OpGraph
from .node import OpNode, get_in_tensors, get_out_tensors, get_signature_name
from .utils import OpGraphUtils

__all__ = [
    "OpGraphBuilder",
]

logger = logging.getLogger(__name__)


class OpGraphBuilder:
    """Collects operation nodes and builds an OpGraph.

    No validation happens in add_node(), edges and graph invariants can
    only be known once all nodes are present, hence build() infers edges
    from tensor identity and then checks that:
    - each node has input and output tensors,
    - the graph is acyclic,
    - no tensor has more than one producer,
    - each virtual tensor has a producer and at least one consumer.

    The builder is consumed by build(), even on failure.
    It can also be used as a context manager which builds on exit:

        with OpGraphBuilder(name="mha") as gb:
            gb.add_node(node)
        graph = gb.graph
    """

    def __init__(self, name: str | None = None) -> None:
        self._name = name
        self._nodes: list[OpNode] = []
        self._consumed = False
        self._graph: OpGraph | None = None

    def add_node(self, node: OpNode) -> "OpGraphBuilder":
        if self._consumed:
            raise ConsumedBuilderError("can't add node to an already built graph")
        self._nodes.append(node)
        return self

    @property
    def graph(self) -> OpGraph:
        assert self._graph is not None, "can't get graph before build"
        return self._graph

    def build(self) -> OpGraph:
        if self._consumed:
            raise ConsumedBuilderError("graph builder already built")
        self._consumed = True
        nodes, self._nodes = self._nodes, []
        self._check_nodes(nodes)

        tensors: dict[GraphTensor, GraphTensor] = {}
        producers: dict[GraphTensor, list[OpNode]] = {}
        consumers: dict[GraphTensor, list[OpNode]] = {}
        for node in nodes:
            for tensor in get_out_tensors(node):
                self._record_tensor(tensors, tensor)
                srcs = producers.setdefault(tensor, [])
                if node not in srcs:
                    srcs.append(node)
            for tensor in get_in_tensors(node):
                self._record_tensor(tensors, tensor)
                dsts = consumers.setdefault(tensor, [])
                if node not in dsts:
                    dsts.append(node)

        edges = [
            Edge(src, dst, tensor)
            for tensor, dsts in consumers.items()
            for src in producers.get(tensor, [])
            for dst in dsts
        ]
        successors: dict[OpNode, list[OpNode]] = {}
        for edge in edges:
            successors.setdefault(edge.src, []).append(edge.dst)
        order = OpGraphUtils.get_nodes_topological(nodes, successors)

        for tensor, srcs in producers.items():
            if len(srcs) > 1:
                raise AmbiguousProducerError(tensor, srcs)
        for tensor in tensors.values():
            if not tensor.is_virtual:
                continue
            if tensor not in producers:
                raise DanglingVirtualTensorError(tensor, "no producing node")
            if tensor not in consumers:
                raise DanglingVirtualTensorError(tensor, "no consuming node")

        graph = OpGraph(order, edges, name=self._name)
        logger.debug(
            "built graph %r: %d nodes, %d edges, %d tensors",
            graph.name,
            graph.num_nodes,
            graph.num_edges,
            len(tensors),
        )
        self._graph = graph
        return graph

    @staticmethod
    def _check_nodes(nodes: list[OpNode]) -> None:
        seen: set[OpNode] = set()
        for node in nodes:
            if not get_in_tensors(node) or not get_out_tensors(node):
                raise InvalidSpecError(
                    f"node without input or output tensors: {get_signature_name(node)}"
                )
            if node in seen:
                raise InvalidSpecError(
                    f"node added more than once: {get_signature_name(node)}"
                )
            seen.add(node)

    @staticmethod
    def _record_tensor(
        tensors: dict[GraphTensor, GraphTensor], tensor: GraphTensor
    ) -> None:
        known = tensors.setdefault(tensor, tensor)
        if known is not tensor and not known.same_metadata(tensor):
            logger.warning(
                "tensor id %r reused with different metadata: %r, %r",
                tensor.name,
                known,
                tensor,
            )

    def __enter__(self) -> "OpGraphBuilder":
        return self

    def __exit__(self, exc_type: Any, *_: Any) -> None:
        if exc_type is None and not self._consumed:
            self.build()
