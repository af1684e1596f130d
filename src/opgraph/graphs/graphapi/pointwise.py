#
# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2024-2026 The XTC Project Authors
#
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from .data import DataType, GraphTensor
from .exceptions import InvalidSpecError, IncompleteSpecError

if TYPE_CHECKING:
    from .allocator import AutoDeleteAllocator

__all__ = [
    "PointwiseMode",
    "Pointwise",
    "PointwiseBuilder",
    "OperationPointwise",
    "OperationPointwiseBuilder",
]


class PointwiseMode(Enum):
    # binary
    ADD = "ADD"
    ADD_SQUARE = "ADD_SQUARE"
    DIV = "DIV"
    MAX = "MAX"
    MIN = "MIN"
    MOD = "MOD"
    MUL = "MUL"
    POW = "POW"
    SUB = "SUB"
    # unary
    ABS = "ABS"
    CEIL = "CEIL"
    COS = "COS"
    EXP = "EXP"
    FLOOR = "FLOOR"
    LOG = "LOG"
    NEG = "NEG"
    RECIPROCAL = "RECIPROCAL"
    RSQRT = "RSQRT"
    SIN = "SIN"
    SQRT = "SQRT"
    TAN = "TAN"
    ERF = "ERF"
    IDENTITY = "IDENTITY"
    RELU_FWD = "RELU_FWD"
    TANH_FWD = "TANH_FWD"
    SIGMOID_FWD = "SIGMOID_FWD"
    ELU_FWD = "ELU_FWD"
    GELU_FWD = "GELU_FWD"
    SOFTPLUS_FWD = "SOFTPLUS_FWD"
    SWISH_FWD = "SWISH_FWD"

    @property
    def arity(self) -> int:
        return 2 if self in _BINARY_MODES else 1


_BINARY_MODES = frozenset(
    {
        PointwiseMode.ADD,
        PointwiseMode.ADD_SQUARE,
        PointwiseMode.DIV,
        PointwiseMode.MAX,
        PointwiseMode.MIN,
        PointwiseMode.MOD,
        PointwiseMode.MUL,
        PointwiseMode.POW,
        PointwiseMode.SUB,
    }
)


@dataclass(frozen=True)
class Pointwise:
    """Pointwise operator descriptor.

    Attributes:
        mode: The elementwise operator.
        math_precision: The type used for the computation.
        relu_lower_clip: Lower clip of RELU_FWD.
        relu_upper_clip: Upper clip of RELU_FWD, None for no clipping.
        elu_alpha: Alpha of ELU_FWD.
        softplus_beta: Beta of SOFTPLUS_FWD.
        swish_beta: Beta of SWISH_FWD.
    """

    mode: PointwiseMode
    math_precision: DataType
    relu_lower_clip: float = 0.0
    relu_upper_clip: float | None = None
    elu_alpha: float = 1.0
    softplus_beta: float = 1.0
    swish_beta: float = 1.0


class PointwiseBuilder:
    def __init__(self) -> None:
        self._mode: PointwiseMode | None = None
        self._math_precision: DataType | None = None
        self._relu_lower_clip = 0.0
        self._relu_upper_clip: float | None = None
        self._elu_alpha = 1.0
        self._softplus_beta = 1.0
        self._swish_beta = 1.0

    def set_mode(self, mode: PointwiseMode) -> "PointwiseBuilder":
        self._mode = mode
        return self

    def set_math_precision(self, math_precision: DataType) -> "PointwiseBuilder":
        self._math_precision = math_precision
        return self

    def set_relu_lower_clip(self, clip: float) -> "PointwiseBuilder":
        self._relu_lower_clip = clip
        return self

    def set_relu_upper_clip(self, clip: float) -> "PointwiseBuilder":
        self._relu_upper_clip = clip
        return self

    def set_elu_alpha(self, alpha: float) -> "PointwiseBuilder":
        self._elu_alpha = alpha
        return self

    def set_softplus_beta(self, beta: float) -> "PointwiseBuilder":
        self._softplus_beta = beta
        return self

    def set_swish_beta(self, beta: float) -> "PointwiseBuilder":
        self._swish_beta = beta
        return self

    def build(self, alloc: "AutoDeleteAllocator | None" = None) -> Pointwise:
        if self._mode is None:
            raise IncompleteSpecError("mode", "Pointwise")
        if self._math_precision is None:
            raise IncompleteSpecError("math_precision", "Pointwise")
        if (
            self._relu_upper_clip is not None
            and self._relu_upper_clip < self._relu_lower_clip
        ):
            raise InvalidSpecError(
                f"relu clip range is empty: [{self._relu_lower_clip}, {self._relu_upper_clip}]"
            )
        pointwise = Pointwise(
            mode=self._mode,
            math_precision=self._math_precision,
            relu_lower_clip=self._relu_lower_clip,
            relu_upper_clip=self._relu_upper_clip,
            elu_alpha=self._elu_alpha,
            softplus_beta=self._softplus_beta,
            swish_beta=self._swish_beta,
        )
        return pointwise if alloc is None else alloc.allocate(pointwise)


@dataclass(frozen=True, eq=False)
class OperationPointwise:
    """Pointwise operation node: y = op(alpha1 * x [, alpha2 * b])."""

    pointwise: Pointwise
    x: GraphTensor
    y: GraphTensor
    b: GraphTensor | None = None
    alpha1: float = 1.0
    alpha2: float = 1.0


class OperationPointwiseBuilder:
    def __init__(self) -> None:
        self._pointwise: Pointwise | None = None
        self._x: GraphTensor | None = None
        self._b: GraphTensor | None = None
        self._y: GraphTensor | None = None
        self._alpha1 = 1.0
        self._alpha2: float | None = None

    def set_pointwise(self, pointwise: Pointwise) -> "OperationPointwiseBuilder":
        self._pointwise = pointwise
        return self

    def set_x(self, x: GraphTensor) -> "OperationPointwiseBuilder":
        self._x = x
        return self

    def set_b(self, b: GraphTensor) -> "OperationPointwiseBuilder":
        self._b = b
        return self

    def set_y(self, y: GraphTensor) -> "OperationPointwiseBuilder":
        self._y = y
        return self

    def set_alpha1(self, alpha1: float) -> "OperationPointwiseBuilder":
        self._alpha1 = alpha1
        return self

    def set_alpha2(self, alpha2: float) -> "OperationPointwiseBuilder":
        self._alpha2 = alpha2
        return self

    def build(self, alloc: "AutoDeleteAllocator | None" = None) -> OperationPointwise:
        if self._pointwise is None:
            raise IncompleteSpecError("pointwise", "OperationPointwise")
        if self._x is None:
            raise IncompleteSpecError("x", "OperationPointwise")
        if self._y is None:
            raise IncompleteSpecError("y", "OperationPointwise")
        mode = self._pointwise.mode
        if mode.arity == 2:
            if self._b is None:
                raise IncompleteSpecError("b", "OperationPointwise")
        else:
            if self._b is not None:
                raise InvalidSpecError(f"unary pointwise {mode.value} does not take b")
            if self._alpha2 is not None:
                raise InvalidSpecError(
                    f"unary pointwise {mode.value} does not take alpha2"
                )
        node = OperationPointwise(
            pointwise=self._pointwise,
            x=self._x,
            y=self._y,
            b=self._b,
            alpha1=self._alpha1,
            alpha2=1.0 if self._alpha2 is None else self._alpha2,
        )
        return node if alloc is None else alloc.allocate(node)
