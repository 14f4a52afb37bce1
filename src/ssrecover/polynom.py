# This file is part of the ssrecover project
#
# Copyright (c) 2019-2022 Manuel Barkhau (mbarkhau@gmail.com) - MIT License
# SPDX-License-Identifier: MIT

"""Polynomial calculation functions.

Polynomials are represented by their coefficients, ordered in
ascending powers of x, so (2, 5, 3) represents 2x° + 5x¹ + 3x².

All functions here are pure, they return new tuples and never
modify their arguments. They work with int and Fraction values.

Helpful introduction: https://www.youtube.com/watch?v=kkMps3X_tEE
(Simple introduction to Shamir's Secret Sharing and Lagrange interpolation)
"""

from typing import Tuple
from typing import Union
from typing import TypeVar
from typing import Callable
from typing import Sequence
from fractions import Fraction

from . import errors
from . import common_types as ct

Num = TypeVar('Num', int, Fraction)

Poly = Tuple[Num, ...]


def prod(vals: Sequence[Num]) -> Num:
    """Product of numbers.

    This is sometimes also denoted by Π (upper case PI).
    """
    if len(vals) == 0:
        raise ValueError("prod requires at least one value")

    accu = vals[0]
    for val in vals[1:]:
        accu *= val
    return accu


def mul_monomial(coeffs: Sequence[Num], root: int) -> Poly:
    """Multiply polynomial by (x - root).

    >>> mul_monomial((1,), 2)
    (-2, 1)
    >>> mul_monomial((-2, 1), 3)
    (6, -5, 1)
    """
    # (c0 + c1x + ... ) * (x - r)
    #   = -r*c0 + (c0 - r*c1)x + ... + c_{n-1}x^n
    shifted = (0,) + tuple(coeffs)
    scaled  = tuple(-root * c for c in coeffs) + (0,)
    return tuple(s + t for s, t in zip(shifted, scaled))


def add(a: Sequence[Num], b: Sequence[Num]) -> Poly:
    """Add two polynomials, the result has the length of the longer one."""
    if len(a) < len(b):
        a, b = b, a
    return tuple(a[i] + (b[i] if i < len(b) else 0) for i in range(len(a)))


def scale(coeffs: Sequence[Num], factor: Union[int, Fraction]) -> Poly:
    return tuple(c * factor for c in coeffs)


def pad(coeffs: Sequence[Num], length: int) -> Poly:
    """Extend with zero coefficients (for higher powers) up to length."""
    return tuple(coeffs) + (0,) * (length - len(coeffs))


def poly_eval(coeffs: Sequence[Num], at_x: Num) -> Num:
    """Evaluate polynomial at x (Horner's method).

    >>> poly_eval((3, 0, 1), 6)
    39
    """
    accu = 0
    for coeff in reversed(coeffs):
        accu = accu * at_x + coeff
    return accu


def poly_eval_fn(coeffs: ct.Coefficients) -> Callable[[int], int]:
    """Return function to evaluate polynomial at x."""

    def eval_at(at_x: int) -> int:
        """Evaluate polynomial at x."""
        return poly_eval(coeffs, at_x)

    return eval_at


def has_distinct_x(points: ct.Points) -> bool:
    x_vals = [p.x for p in points]
    return len(x_vals) == len(set(x_vals))


def init_point_set(n: int, k: int, points: ct.Points) -> ct.PointSet:
    if len(points) != n:
        errmsg = f"Invalid point set, expected n={n} points but got {len(points)}"
        raise errors.InvalidPointSet(errmsg)
    elif k < 1:
        raise errors.InvalidPointSet(f"Invalid threshold k={k}, must be >= 1")
    elif k > n:
        raise errors.InvalidPointSet(f"Invalid threshold k={k}, must be <= n={n}")
    else:
        return ct.PointSet(n, k, tuple(ct.Point(int(x), int(y)) for x, y in points))
