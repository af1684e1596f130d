#
# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2024-2026 The XTC Project Authors
#
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from .data import GraphTensor
from .exceptions import InvalidSpecError, IncompleteSpecError

if TYPE_CHECKING:
    from .allocator import AutoDeleteAllocator

__all__ = [
    "RngDistribution",
    "Rng",
    "RngBuilder",
    "OperationRng",
    "OperationRngBuilder",
]


class RngDistribution(Enum):
    UNIFORM = "UNIFORM"
    NORMAL = "NORMAL"
    BERNOULLI = "BERNOULLI"


@dataclass(frozen=True)
class Rng:
    """Random number generator descriptor.

    Only the parameters of the selected distribution are meaningful.
    """

    distribution: RngDistribution
    normal_mean: float = 0.0
    normal_stdev: float = 1.0
    uniform_min: float = 0.0
    uniform_max: float = 1.0
    bernoulli_prob: float = 0.5


class RngBuilder:
    def __init__(self) -> None:
        self._distribution: RngDistribution | None = None
        self._normal_mean = 0.0
        self._normal_stdev = 1.0
        self._uniform_min = 0.0
        self._uniform_max = 1.0
        self._bernoulli_prob = 0.5

    def set_distribution(self, distribution: RngDistribution) -> "RngBuilder":
        self._distribution = distribution
        return self

    def set_normal_mean(self, mean: float) -> "RngBuilder":
        self._normal_mean = mean
        return self

    def set_normal_stdev(self, stdev: float) -> "RngBuilder":
        self._normal_stdev = stdev
        return self

    def set_uniform_min(self, min: float) -> "RngBuilder":
        self._uniform_min = min
        return self

    def set_uniform_max(self, max: float) -> "RngBuilder":
        self._uniform_max = max
        return self

    def set_bernoulli_prob(self, prob: float) -> "RngBuilder":
        self._bernoulli_prob = prob
        return self

    def build(self, alloc: "AutoDeleteAllocator | None" = None) -> Rng:
        if self._distribution is None:
            raise IncompleteSpecError("distribution", "Rng")
        match self._distribution:
            case RngDistribution.NORMAL:
                if self._normal_stdev <= 0:
                    raise InvalidSpecError(
                        f"normal stdev must be positive: {self._normal_stdev}"
                    )
            case RngDistribution.UNIFORM:
                if self._uniform_min > self._uniform_max:
                    raise InvalidSpecError(
                        f"uniform range is empty: [{self._uniform_min}, {self._uniform_max}]"
                    )
            case RngDistribution.BERNOULLI:
                if not 0.0 <= self._bernoulli_prob <= 1.0:
                    raise InvalidSpecError(
                        f"bernoulli probability not in [0, 1]: {self._bernoulli_prob}"
                    )
        rng = Rng(
            distribution=self._distribution,
            normal_mean=self._normal_mean,
            normal_stdev=self._normal_stdev,
            uniform_min=self._uniform_min,
            uniform_max=self._uniform_max,
            bernoulli_prob=self._bernoulli_prob,
        )
        return rng if alloc is None else alloc.allocate(rng)


@dataclass(frozen=True, eq=False)
class OperationRng:
    """RNG operation node, output drawn from (seed, offset)."""

    rng: Rng
    seed: GraphTensor
    offset: GraphTensor
    output: GraphTensor


class OperationRngBuilder:
    def __init__(self) -> None:
        self._rng: Rng | None = None
        self._seed: GraphTensor | None = None
        self._offset: GraphTensor | None = None
        self._output: GraphTensor | None = None

    def set_rng(self, rng: Rng) -> "OperationRngBuilder":
        self._rng = rng
        return self

    def set_seed(self, seed: GraphTensor) -> "OperationRngBuilder":
        self._seed = seed
        return self

    def set_offset(self, offset: GraphTensor) -> "OperationRngBuilder":
        self._offset = offset
        return self

    def set_output(self, output: GraphTensor) -> "OperationRngBuilder":
        self._output = output
        return self

    def build(self, alloc: "AutoDeleteAllocator | None" = None) -> OperationRng:
        if self._rng is None:
            raise IncompleteSpecError("rng", "OperationRng")
        if self._seed is None:
            raise IncompleteSpecError("seed", "OperationRng")
        if self._offset is None:
            raise IncompleteSpecError("offset", "OperationRng")
        if self._output is None:
            raise IncompleteSpecError("output", "OperationRng")
        node = OperationRng(
            rng=self._rng, seed=self._seed, offset=self._offset, output=self._output
        )
        return node if alloc is None else alloc.allocate(node)
