# This file is part of the ssrecover project
#
# Copyright (c) 2019-2022 Manuel Barkhau (mbarkhau@gmail.com) - MIT License
# SPDX-License-Identifier: MIT

"""Exact polynomial interpolation.

Three methods to recover the coefficients of a polynomial of degree
k - 1 from k points:

 - Lagrange: sum of basis polynomials, each 1 at one point and 0 at
   all the others.
 - Newton: divided differences, expanded from the Newton form.
 - Vandermonde: gaussian elimination of the linear system V·a = y.

For points on a polynomial with integer coefficients, all three give
exactly the same result. Intermediate values are either exact integer
divisions or Fractions, nothing is ever rounded. If the points are not
on such a polynomial, this surfaces as NonExactDivision or
NonIntegerResult, which the outlier search uses as a signal that the
subset contains a bad point.

The x values of the points must be distinct. Duplicate x values raise
SingularMatrix rather than producing garbage.
"""

import logging
from typing import Dict
from typing import List
from typing import Iterator
from typing import Callable
from fractions import Fraction

from . import exact
from . import errors
from . import polynom
from . import common_types as ct

logger = logging.getLogger(__name__)


Solver = Callable[[ct.Points], ct.Coefficients]


def _validate_points(points: ct.Points) -> None:
    if len(points) == 0:
        raise ValueError("Cannot interpolate without any points")


def _interpolation_terms(points: ct.Points, at_x: int) -> Iterator[Fraction]:
    for i, p in enumerate(points):
        others = tuple(points[:i]) + tuple(points[i + 1 :])
        assert len(others) == len(points) - 1

        numer = polynom.prod([1] + [at_x - o.x for o in others])
        denum = polynom.prod([1] + [p.x  - o.x for o in others])
        if denum == 0:
            raise errors.SingularMatrix(f"Duplicate x={p.x} in {points}")

        yield Fraction(p.y * numer, denum)


def lagrange_secret(points: ct.Points) -> int:
    r"""Evaluate the interpolated polynomial at x=0.

    \sum_i y_i \prod_{j \neq i} \frac{0 - x_j}{x_i - x_j}
    """
    _validate_points(points)
    accu = Fraction(0)
    for term in _interpolation_terms(points, at_x=0):
        accu += term
    return exact.to_int(accu)


def lagrange_coeffs(points: ct.Points) -> ct.Coefficients:
    """Coefficients via Lagrange basis polynomials.

    Each basis polynomial L_i(x) = Π (x - x_j) / (x_i - x_j) is
    expanded symbolically, scaled by y_i and added to the result.
    """
    _validate_points(points)

    accu: polynom.Poly = (Fraction(0),) * len(points)

    for i, p in enumerate(points):
        basis: polynom.Poly = (1,)
        denum = 1
        for j, other in enumerate(points):
            if j != i:
                basis = polynom.mul_monomial(basis, other.x)
                denum *= p.x - other.x

        if denum == 0:
            raise errors.SingularMatrix(f"Duplicate x={p.x} in {points}")

        accu = polynom.add(accu, polynom.scale(basis, Fraction(p.y, denum)))

    return tuple(exact.to_int(coeff) for coeff in accu)


def _divided_differences(points: ct.Points) -> List[int]:
    # dd[i][j] is the divided difference f[x_i, ..., x_{i+j}]
    #
    #   dd[i][0] = y_i
    #   dd[i][j] = (dd[i+1][j-1] - dd[i][j-1]) / (x_{i+j} - x_i)
    #
    # Only the top row dd[0][...] is needed for the Newton form.
    xs = [p.x for p in points]
    dd = [[p.y] for p in points]

    num_points = len(points)
    for j in range(1, num_points):
        for i in range(num_points - j):
            numer = dd[i + 1][j - 1] - dd[i][j - 1]
            denum = xs[i + j] - xs[i]
            if denum == 0:
                raise errors.SingularMatrix(f"Duplicate x={xs[i]} in {points}")
            dd[i].append(exact.exact_div(numer, denum))

    return dd[0]


def newton_coeffs(points: ct.Points) -> ct.Coefficients:
    """Coefficients via Newton's divided differences.

    f(x) = dd0 + dd1·(x - x0) + dd2·(x - x0)(x - x1) + ...
    """
    _validate_points(points)

    top_row = _divided_differences(points)
    coeffs  = polynom.pad(top_row[:1], len(points))
    basis: polynom.Poly = (1,)
    for order in range(1, len(points)):
        basis  = polynom.mul_monomial(basis, points[order - 1].x)
        coeffs = polynom.add(coeffs, polynom.scale(basis, top_row[order]))
    return tuple(coeffs)


Row    = List[Fraction]
Matrix = List[Row]


def _vandermonde_matrix(points: ct.Points) -> Matrix:
    # row i = [1, x_i, x_i², ..., x_i^{k-1}, y_i]
    num_coeffs = len(points)
    return [
        [Fraction(p.x) ** exp for exp in range(num_coeffs)] + [Fraction(p.y)]
        for p in points
    ]


def _eliminate(matrix: Matrix) -> None:
    # Reduce the augmented matrix (in place) to upper triangular form
    # with a unit diagonal.
    size = len(matrix)
    for col in range(size):
        # partial pivoting: max() returns the first of equal candidates
        pivot_row = max(range(col, size), key=lambda row: abs(matrix[row][col]))
        matrix[col], matrix[pivot_row] = matrix[pivot_row], matrix[col]

        pivot = matrix[col][col]
        if pivot == 0:
            raise errors.SingularMatrix(f"Singular matrix, zero pivot in column {col}")

        matrix[col] = [val / pivot for val in matrix[col]]
        for row in range(col + 1, size):
            factor = matrix[row][col]
            if factor != 0:
                matrix[row] = [a - factor * b for a, b in zip(matrix[row], matrix[col])]


def vandermonde_coeffs(points: ct.Points) -> ct.Coefficients:
    """Coefficients via gaussian elimination of the Vandermonde system."""
    _validate_points(points)

    size   = len(points)
    matrix = _vandermonde_matrix(points)
    _eliminate(matrix)

    # back substitution
    coeffs = [Fraction(0)] * size
    for i in reversed(range(size)):
        accu = matrix[i][size]
        for j in range(i + 1, size):
            accu -= matrix[i][j] * coeffs[j]
        coeffs[i] = accu

    return tuple(exact.to_int(coeff) for coeff in coeffs)


DEFAULT_METHOD = "vandermonde"

SOLVERS: Dict[str, Solver] = {
    'lagrange'   : lagrange_coeffs,
    'newton'     : newton_coeffs,
    'vandermonde': vandermonde_coeffs,
}


def get_solver(method: str) -> Solver:
    solver = SOLVERS.get(method)
    if solver is None:
        valid   = ", ".join(sorted(SOLVERS))
        errmsg  = f"Invalid method '{method}', must be one of {valid}"
        raise ValueError(errmsg)
    return solver


def solve(points: ct.Points, method: str = DEFAULT_METHOD) -> ct.Coefficients:
    solver = get_solver(method)
    coeffs = solver(points)
    logger.debug(f"{method:<11} {len(points)} points -> {coeffs}")
    return coeffs
