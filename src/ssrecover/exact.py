# This file is part of the ssrecover project
#
# Copyright (c) 2019-2022 Manuel Barkhau (mbarkhau@gmail.com) - MIT License
# SPDX-License-Identifier: MIT

"""Exact integer and rational arithmetic.

Python ints are unbounded, so add/sub/mul need no special care. What
remains is division: either it must be exact (exact_div) or the
intermediate values are kept as Fractions and only the final result
is converted back to an int (to_int).

No floating point is used anywhere in here.
"""

from typing import Union
from fractions import Fraction

from . import errors

Rational = Union[int, Fraction]


def exact_div(numer: int, denom: int) -> int:
    """Divide two integers, the result must be an integer.

    >>> exact_div(12, -4)
    -3
    """
    if denom == 0:
        raise errors.NonExactDivision(f"Division by zero: {numer} / 0")

    quot, rem = divmod(numer, denom)
    if rem == 0:
        return quot
    else:
        raise errors.NonExactDivision(f"Non exact division: {numer} / {denom}")


def to_int(val: Rational) -> int:
    """Convert an exact rational to int.

    >>> to_int(Fraction(6, 3))
    2
    """
    if isinstance(val, int):
        return val

    if val.denominator == 1:
        return val.numerator
    else:
        raise errors.NonIntegerResult(f"Non integer result: {val}")

