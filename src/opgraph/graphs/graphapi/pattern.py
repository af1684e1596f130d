#
# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2024-2026 The XTC Project Authors
#
from collections.abc import Sequence
from contextlib import ExitStack
from dataclasses import dataclass
from typing import Any
import logging

from .allocator import AutoDeleteAllocator
from .builder import OpGraphBuilder
from .data import DataType, GraphTensor, TensorBuilder
from .exceptions import ReleasedAllocatorError
from .graph import OpGraph
from .node import DummyNode
from .operations import get_operation, check_operation_arity

__all__ = [
    "DummyNodeGenSpec",
    "PatternGraphGenerator",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DummyNodeGenSpec:
    """Declarative node of a pattern graph.

    Tensor names are pure labels: the same name in two specs denotes the
    same tensor.

    Attributes:
        name: The operator name, possibly with an instance suffix (MUL1).
        in_tensors: The input tensor names.
        out_tensors: The output tensor names.
    """

    name: str
    in_tensors: tuple[str, ...]
    out_tensors: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "in_tensors", tuple(self.in_tensors))
        object.__setattr__(self, "out_tensors", tuple(self.out_tensors))


class PatternGraphGenerator:
    """Generates the reference graph of a fusion pattern.

    Each distinct tensor name gets one dummy tensor and each spec one
    DummyNode, all owned by the generator arena. A name both produced and
    consumed is a virtual tensor, other names are the graph inputs and
    outputs.

    The graph is built once at construction. If construction fails, the
    arena is released before the error propagates.
    """

    def __init__(
        self,
        node_specs: Sequence[DummyNodeGenSpec],
        name: str | None = None,
        dummy_dims: Sequence[int] = (1,),
        data_type: DataType = DataType.FLOAT,
    ) -> None:
        self._alloc = AutoDeleteAllocator()
        self._tensors: dict[str, GraphTensor] = {}
        self._dummy_dims = tuple(dummy_dims)
        self._data_type = data_type
        with ExitStack() as stack:
            stack.callback(self._alloc.release)
            self._graph = self._generate(node_specs, name)
            stack.pop_all()

    @classmethod
    def make(
        cls, node_specs: Sequence[DummyNodeGenSpec], **kwargs: Any
    ) -> "PatternGraphGenerator":
        return cls(node_specs, **kwargs)

    def _generate(
        self, node_specs: Sequence[DummyNodeGenSpec], name: str | None
    ) -> OpGraph:
        specs = list(node_specs)
        produced = {t for spec in specs for t in spec.out_tensors}
        consumed = {t for spec in specs for t in spec.in_tensors}
        virtuals = produced & consumed
        builder = OpGraphBuilder(name=name)
        for spec in specs:
            kind = get_operation(spec.name)
            check_operation_arity(
                kind, spec.name, len(spec.in_tensors), len(spec.out_tensors)
            )
            in_tensors = tuple(
                self._get_dummy_tensor(t, t in virtuals) for t in spec.in_tensors
            )
            out_tensors = tuple(
                self._get_dummy_tensor(t, t in virtuals) for t in spec.out_tensors
            )
            builder.add_node(
                self._alloc.allocate(
                    DummyNode(spec.name, kind.name, in_tensors, out_tensors)
                )
            )
        graph = builder.build()
        logger.debug(
            "generated pattern graph %r from %d specs, %d tensors",
            graph.name,
            len(specs),
            len(self._tensors),
        )
        return graph

    def _get_dummy_tensor(self, name: str, virtual: bool) -> GraphTensor:
        tensor = self._tensors.get(name)
        if tensor is None:
            tensor = (
                TensorBuilder()
                .set_data_type(self._data_type)
                .set_dims(self._dummy_dims)
                .set_name(name)
                .set_virtual(virtual)
                .build(self._alloc)
            )
            self._tensors[name] = tensor
        return tensor

    @property
    def graph(self) -> OpGraph:
        if self._alloc.released:
            raise ReleasedAllocatorError("pattern graph generator was released")
        return self._graph

    @property
    def tensors(self) -> dict[str, GraphTensor]:
        return dict(self._tensors)

    def tensor(self, name: str) -> GraphTensor:
        return self._tensors[name]

    def release(self) -> None:
        self._alloc.release()
        self._tensors.clear()

    def __enter__(self) -> "PatternGraphGenerator":
        return self

    def __exit__(self, *_: Any) -> None:
        self.release()
