#
# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2024-2026 The XTC Project Authors
#
"""Operation graph construction exceptions."""

from typing import Any


class GraphAPIError(RuntimeError):
    """Base class of operation graph construction errors."""

    pass


class InvalidSpecError(GraphAPIError):
    """Raised when a tensor or operation specification is malformed."""

    pass


class IncompleteSpecError(InvalidSpecError):
    """Raised when a builder is finalized before a mandatory field is set."""

    def __init__(self, field: str, spec: str) -> None:
        super().__init__(f"{spec}: mandatory field not set: {field}")
        self.field = field
        self.spec = spec


class CyclicGraphError(GraphAPIError):
    """Raised when the inferred edges of a graph contain a cycle."""

    def __init__(self, nodes: list[Any]) -> None:
        super().__init__(
            f"operation graph is not acyclic, {len(nodes)} nodes can't be ordered"
        )
        self.nodes = nodes


class DanglingVirtualTensorError(GraphAPIError):
    """Raised when a virtual tensor has no producer or no consumer."""

    def __init__(self, tensor: Any, reason: str) -> None:
        super().__init__(f"dangling virtual tensor {tensor}: {reason}")
        self.tensor = tensor


class AmbiguousProducerError(GraphAPIError):
    """Raised when a tensor is produced by more than one node."""

    def __init__(self, tensor: Any, producers: list[Any]) -> None:
        super().__init__(
            f"tensor {tensor} has {len(producers)} producers, expected exactly one"
        )
        self.tensor = tensor
        self.producers = producers


class UnknownOperationNameError(GraphAPIError):
    """Raised when an operator name is not in the operation registry."""

    def __init__(self, name: str) -> None:
        super().__init__(f"unknown operation name: {name}")
        self.name = name


class ConsumedBuilderError(GraphAPIError):
    """Raised when a graph builder is used after its build."""

    pass


class ReleasedAllocatorError(GraphAPIError):
    """Raised when an allocator is used after its release."""

    pass
