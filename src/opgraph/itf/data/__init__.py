#
# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2024-2026 The XTC Project Authors
#
from .tensor import (
    Tensor,  # type: ignore
    TensorId,  # type: ignore
    DimsType,  # type: ignore
)
