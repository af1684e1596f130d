#
# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2024-2026 The XTC Project Authors
#
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from ..data import Tensor


class Graph(ABC):
    """An abstract representation of an operation graph over Tensor objects.

    A Graph is a directed acyclic graph (DAG) of operation nodes. Edges are not
    declared but inferred: there is an edge from node A to node B for each
    tensor which is an output of A and an input of B.

    The graph inputs are the tensors consumed but never produced within the
    graph, the graph outputs are the tensors produced but never consumed.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Returns the name of this graph.

        Returns:
            The graph's name, possibly empty
        """
        ...

    @property
    @abstractmethod
    def nodes(self) -> Sequence[Any]:
        """Returns the nodes of the graph in a topological order.

        Returns:
            Sequence of nodes, each node preceding its successors
        """
        ...

    @property
    @abstractmethod
    def edges(self) -> Sequence[Any]:
        """Returns the edges of the graph.

        Returns:
            Sequence of (source, destination, tensor) edges
        """
        ...

    @property
    @abstractmethod
    def inputs(self) -> list[Tensor]:
        """Returns the list of input tensors of the graph.

        Returns:
            List of tensors without producer in the graph
        """
        ...

    @property
    @abstractmethod
    def outputs(self) -> list[Tensor]:
        """Returns the list of output tensors of the graph.

        Returns:
            List of tensors without consumer in the graph
        """
        ...
