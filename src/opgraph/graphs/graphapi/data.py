#
# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2024-2026 The XTC Project Authors
#
from typing_extensions import override
from collections.abc import Sequence
from enum import Enum
from typing import TYPE_CHECKING
import numpy as np

from opgraph.itf.data import Tensor, TensorId, DimsType

from .exceptions import InvalidSpecError, IncompleteSpecError

if TYPE_CHECKING:
    from .allocator import AutoDeleteAllocator

__all__ = [
    "DataType",
    "GraphTensor",
    "TensorBuilder",
    "make_tensor",
    "packed_strides",
    "tensor_id_from_name",
    "tensor_name_from_id",
]


# Ids are packed little-endian from the tensor short name
_ID_DTYPE = np.dtype("<i8")
TENSOR_ID_BYTES = _ID_DTYPE.itemsize
_ID_INFO = np.iinfo(_ID_DTYPE)


class DataType(Enum):
    FLOAT = "float32"
    HALF = "float16"
    BFLOAT16 = "bfloat16"
    FLOAT8 = "float8_e4m3"
    BFLOAT8 = "float8_e5m2"
    DOUBLE = "float64"
    INT8 = "int8"
    INT32 = "int32"
    INT64 = "int64"

    @override
    def __str__(self) -> str:
        return self.value


def tensor_id_from_name(name: str) -> TensorId:
    """
    Packs a short ASCII name into a tensor id.
    Names longer than the id byte width are rejected.
    """
    try:
        raw = name.encode("ascii")
    except UnicodeEncodeError:
        raise InvalidSpecError(f"tensor name is not ASCII: {name!r}") from None
    if len(raw) > TENSOR_ID_BYTES:
        raise InvalidSpecError(
            f"tensor name exceeds {TENSOR_ID_BYTES} chars: {name!r}"
        )
    return int(np.frombuffer(raw.ljust(TENSOR_ID_BYTES, b"\0"), dtype=_ID_DTYPE)[0])


def tensor_name_from_id(id: TensorId) -> str:
    raw = np.array([id], dtype=_ID_DTYPE).tobytes().rstrip(b"\0")
    return raw.decode("ascii", errors="replace")


def packed_strides(dims: Sequence[int]) -> DimsType:
    """
    Returns the strides of a packed row-major layout for dims,
    i.e. strides[i] == product(dims[i+1:]).
    """
    if len(dims) == 0:
        return ()
    strides = np.ones(len(dims), dtype=np.int64)
    strides[:-1] = np.cumprod(np.asarray(dims[::-1], dtype=np.int64))[::-1][1:]
    return tuple(int(s) for s in strides)


class GraphTensor(Tensor):
    """Immutable tensor descriptor of an operation graph.

    Equality and hashing only use the tensor id.
    """

    def __init__(
        self,
        id: TensorId,
        dims: DimsType,
        strides: DimsType,
        data_type: DataType,
        is_virtual: bool = False,
    ) -> None:
        assert len(dims) == len(strides)
        self._id = id
        self._dims = tuple(dims)
        self._strides = tuple(strides)
        self._data_type = data_type
        self._is_virtual = is_virtual

    @property
    @override
    def id(self) -> TensorId:
        return self._id

    @property
    @override
    def dims(self) -> DimsType:
        return self._dims

    @property
    @override
    def strides(self) -> DimsType:
        return self._strides

    @property
    @override
    def data_type(self) -> DataType:
        return self._data_type

    @property
    @override
    def is_virtual(self) -> bool:
        return self._is_virtual

    @property
    def name(self) -> str:
        return tensor_name_from_id(self._id)

    def same_metadata(self, other: "GraphTensor") -> bool:
        return (
            self._dims == other._dims
            and self._strides == other._strides
            and self._data_type == other._data_type
            and self._is_virtual == other._is_virtual
        )

    @override
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GraphTensor):
            return NotImplemented
        return self._id == other._id

    @override
    def __hash__(self) -> int:
        return hash(self._id)

    @override
    def __str__(self) -> str:
        return self.name

    @override
    def __repr__(self) -> str:
        virtual = ", virtual" if self._is_virtual else ""
        return (
            f"GraphTensor({self.name!r}, dims={self._dims}, "
            f"strides={self._strides}, {self._data_type}{virtual})"
        )


class TensorBuilder:
    def __init__(self) -> None:
        self._data_type: DataType | None = None
        self._dims: DimsType | None = None
        self._strides: DimsType | None = None
        self._id: TensorId | None = None
        self._is_virtual = False

    def set_data_type(self, data_type: DataType) -> "TensorBuilder":
        self._data_type = data_type
        return self

    def set_dims(self, dims: Sequence[int]) -> "TensorBuilder":
        self._dims = tuple(int(d) for d in dims)
        return self

    def set_strides(self, strides: Sequence[int]) -> "TensorBuilder":
        self._strides = tuple(int(s) for s in strides)
        return self

    def set_id(self, id: TensorId) -> "TensorBuilder":
        self._id = id
        return self

    def set_name(self, name: str) -> "TensorBuilder":
        self._id = tensor_id_from_name(name)
        return self

    def set_virtual(self, is_virtual: bool) -> "TensorBuilder":
        self._is_virtual = is_virtual
        return self

    def build(self, alloc: "AutoDeleteAllocator | None" = None) -> GraphTensor:
        if self._data_type is None:
            raise IncompleteSpecError("data_type", "Tensor")
        if self._dims is None:
            raise IncompleteSpecError("dims", "Tensor")
        if self._id is None:
            raise IncompleteSpecError("id", "Tensor")
        if not _ID_INFO.min <= self._id <= _ID_INFO.max:
            raise InvalidSpecError(f"tensor id does not fit in 64 bits: {self._id}")
        if len(self._dims) == 0:
            raise InvalidSpecError("tensor dims must not be empty")
        if any(d <= 0 for d in self._dims):
            raise InvalidSpecError(f"tensor dims must be positive: {self._dims}")
        strides = self._strides
        if strides is None:
            strides = packed_strides(self._dims)
        elif len(strides) != len(self._dims):
            raise InvalidSpecError(
                f"tensor strides size mismatch: {len(strides)} != {len(self._dims)}"
            )
        elif any(s <= 0 for s in strides):
            raise InvalidSpecError(f"tensor strides must be positive: {strides}")
        tensor = GraphTensor(
            id=self._id,
            dims=self._dims,
            strides=strides,
            data_type=self._data_type,
            is_virtual=self._is_virtual,
        )
        return tensor if alloc is None else alloc.allocate(tensor)


def make_tensor(
    name: str,
    dims: Sequence[int],
    strides: Sequence[int] | None = None,
    virtual: bool = False,
    data_type: DataType = DataType.FLOAT,
) -> GraphTensor:
    builder = (
        TensorBuilder()
        .set_data_type(data_type)
        .set_dims(dims)
        .set_name(name)
        .set_virtual(virtual)
    )
    if strides is not None:
        builder.set_strides(strides)
    return builder.build()
