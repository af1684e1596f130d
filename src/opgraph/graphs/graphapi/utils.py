#
# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2024-2026 The XTC Project Authors
#
from collections import Counter, deque
from collections.abc import Callable, Hashable, Mapping, Sequence
from typing import TypeVar

from .exceptions import CyclicGraphError

__all__ = [
    "OpGraphUtils",
]


N = TypeVar("N", bound=Hashable)


class OpGraphUtils:
    @staticmethod
    def get_nodes_topological(
        nodes: Sequence[N], successors: Mapping[N, Sequence[N]]
    ) -> list[N]:
        """
        Returns nodes in a topological order, stable with respect to the
        given nodes order. Successors hold one entry per edge.
        Raise CyclicGraphError if some nodes can't be ordered.
        """
        indegree = {node: 0 for node in nodes}
        for node in nodes:
            for succ in successors.get(node, ()):
                indegree[succ] += 1
        ready = deque([node for node in nodes if indegree[node] == 0])
        order = []
        while ready:
            node = ready.popleft()
            order.append(node)
            for succ in successors.get(node, ()):
                indegree[succ] -= 1
                if indegree[succ] == 0:
                    ready.append(succ)
        if len(order) != len(nodes):
            raise CyclicGraphError([node for node in nodes if indegree[node] > 0])
        return order

    @staticmethod
    def is_isomorphic(
        left: tuple[Sequence[N], Sequence[tuple[N, N]]],
        right: tuple[Sequence[N], Sequence[tuple[N, N]]],
        label: Callable[[N], str],
    ) -> bool:
        """
        Check whether two (nodes, edges) graphs are isomorphic, mapping
        nodes of same label and preserving edge multiplicities.
        """
        left_nodes, left_edges = left
        right_nodes, right_edges = right
        if len(left_nodes) != len(right_nodes) or len(left_edges) != len(right_edges):
            return False
        if Counter(map(label, left_nodes)) != Counter(map(label, right_nodes)):
            return False

        def edge_labels(edges: Sequence[tuple[N, N]]) -> Counter:
            return Counter((label(u), label(v)) for u, v in edges)

        if edge_labels(left_edges) != edge_labels(right_edges):
            return False

        left_mult = Counter(left_edges)
        right_mult = Counter(right_edges)

        def signature(node: N, edges: Sequence[tuple[N, N]]) -> tuple[str, int, int]:
            ins = sum(1 for _, v in edges if v == node)
            outs = sum(1 for u, _ in edges if u == node)
            return (label(node), ins, outs)

        right_by_sig: dict[tuple[str, int, int], list[N]] = {}
        for node in right_nodes:
            right_by_sig.setdefault(signature(node, right_edges), []).append(node)
        candidates = {
            node: right_by_sig.get(signature(node, left_edges), [])
            for node in left_nodes
        }
        mapping: dict[N, N] = {}
        used: set[N] = set()

        def consistent(lnode: N, rnode: N) -> bool:
            for lmapped, rmapped in mapping.items():
                if left_mult[(lnode, lmapped)] != right_mult[(rnode, rmapped)]:
                    return False
                if left_mult[(lmapped, lnode)] != right_mult[(rmapped, rnode)]:
                    return False
            return left_mult[(lnode, lnode)] == right_mult[(rnode, rnode)]

        def extend(idx: int) -> bool:
            if idx == len(left_nodes):
                return True
            lnode = left_nodes[idx]
            for rnode in candidates[lnode]:
                if rnode in used or not consistent(lnode, rnode):
                    continue
                mapping[lnode] = rnode
                used.add(rnode)
                if extend(idx + 1):
                    return True
                del mapping[lnode]
                used.remove(rnode)
            return False

        return extend(0)
