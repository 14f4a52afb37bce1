# This file is part of the ssrecover project
#
# Copyright (c) 2019-2022 Manuel Barkhau (mbarkhau@gmail.com) - MIT License
# SPDX-License-Identifier: MIT
"""Types used across multiple modules."""

from typing import Any
from typing import List
from typing import Tuple
from typing import Union
from typing import Sequence
from typing import NamedTuple

# from typing import TypeAlias
TypeAlias = Any


class Point(NamedTuple):
    # NamedTuple gives us equality and hashing by value, points
    # are used as keys when counting validation failures.
    x: int
    y: int


Points: TypeAlias = Sequence[Point]

# Ordered in ascending powers of x, so (2, 5, 3) represents
# 2x° + 5x¹ + 3x². The secret is the 0th coefficient.
Coefficients: TypeAlias = Tuple[int, ...]

# Indices into PointSet.points
Subset: TypeAlias = Tuple[int, ...]


class PointSet(NamedTuple):
    n     : int  # total number of points supplied
    k     : int  # threshold, the polynomial has degree k - 1
    points: Tuple[Point, ...]


class Mismatch(NamedTuple):
    point   : Point
    expected: int  # the y value of the point
    computed: int  # the value of the candidate polynomial at point.x


class SubsetRejected(NamedTuple):
    subset: Subset
    reason: str


Diagnostic : TypeAlias = Union[Mismatch, SubsetRejected]
Diagnostics: TypeAlias = List[Diagnostic]
