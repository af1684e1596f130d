#
# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2024-2026 The XTC Project Authors
#
from . import (
    data,  # type: ignore
    graph,  # type: ignore
)
