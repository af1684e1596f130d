#
# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2024-2026 The XTC Project Authors
#
from collections.abc import Iterator
from typing import Any, TypeVar
import logging

from .exceptions import ReleasedAllocatorError

__all__ = [
    "AutoDeleteAllocator",
]

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AutoDeleteAllocator:
    """Arena owning the tensors and nodes created while assembling a graph.

    Objects are stored in allocation order and keep their index for the
    arena lifetime, allocate() returns the stored object itself which is
    then used as a non-owning reference by nodes and graphs.
    All objects are dropped together by release(), or on exit when used
    as a context manager. A released arena can't allocate anymore.
    """

    def __init__(self) -> None:
        self._objects: list[Any] = []
        self._released = False

    def allocate(self, obj: T) -> T:
        if self._released:
            raise ReleasedAllocatorError("allocation from a released allocator")
        self._objects.append(obj)
        return obj

    def index(self, obj: Any) -> int:
        for idx, owned in enumerate(self._objects):
            if owned is obj:
                return idx
        raise ValueError(f"object not owned by allocator: {obj!r}")

    def owns(self, obj: Any) -> bool:
        return any(owned is obj for owned in self._objects)

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        if self._released:
            return
        logger.debug("releasing %d allocated objects", len(self._objects))
        self._objects.clear()
        self._released = True

    def __getitem__(self, idx: int) -> Any:
        return self._objects[idx]

    def __len__(self) -> int:
        return len(self._objects)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._objects)

    def __enter__(self) -> "AutoDeleteAllocator":
        return self

    def __exit__(self, *_: Any) -> None:
        self.release()
