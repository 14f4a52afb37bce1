# This file is part of the ssrecover project
#
# Copyright (c) 2019-2022 Manuel Barkhau (mbarkhau@gmail.com) - MIT License
# SPDX-License-Identifier: MIT
"""SSRecover: Shamir Secret Recovery.

A cli app and library to recover the secret (constant term) of a
polynomial from points with arbitrary base encoded y-values.
"""

__version__ = "2022.1010-beta"
