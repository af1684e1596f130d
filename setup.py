#
# SPDX-License-Identifier: BSD-3-Clause
# Copyright (c) 2024-2026 The XTC Project Authors
#
from setuptools import setup, find_packages

setup(
    name="opgraph",
    version="0.1.0",
    description="Operation graph construction and fusion pattern graphs",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.10",
    install_requires=[
        "numpy",
        "typing_extensions",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
)
