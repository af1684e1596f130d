#
# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2024-2026 The XTC Project Authors
#
from abc import ABC, abstractmethod
from typing import Any, TypeAlias


TensorId: TypeAlias = int
DimsType: TypeAlias = tuple[int, ...]


class Tensor(ABC):
    """An abstract representation of a logical tensor in an operation graph.

    A Tensor only describes metadata: dimensions, strides, element type and
    whether it is virtual, i.e. an intermediate value never materialized in
    memory which only links a producing operation to its consumers.

    Tensor identity is given by its id and not by its structural content:
    two Tensor objects with the same id denote the same logical tensor.
    """

    @property
    @abstractmethod
    def id(self) -> TensorId:
        """Returns the identifier of this tensor.

        Returns:
            The tensor's fixed-width integer identifier
        """
        ...

    @property
    @abstractmethod
    def dims(self) -> DimsType:
        """Returns the tensor's dimensions, outermost first.

        Returns:
            The size of each dimension in the tensor
        """
        ...

    @property
    @abstractmethod
    def strides(self) -> DimsType:
        """Returns the tensor's strides, one per dimension.

        Returns:
            The element stride of each dimension in the tensor
        """
        ...

    @property
    @abstractmethod
    def data_type(self) -> Any:
        """Returns the tensor's element type.

        Returns:
            The element type descriptor
        """
        ...

    @property
    @abstractmethod
    def is_virtual(self) -> bool:
        """Returns whether the tensor is virtual.

        Returns:
            True if the tensor is never materialized in memory
        """
        ...
