# This file is part of the ssrecover project
#
# Copyright (c) 2019-2022 Manuel Barkhau (mbarkhau@gmail.com) - MIT License
# SPDX-License-Identifier: MIT

"""Floating point least squares fit.

This is only a cross-check for the exact solvers and is known to be
imprecise: float64 has 53 bits of mantissa, so y values (or powers of
x) beyond 2**53 are rounded, and values beyond ~1e308 can't be
represented at all. Results from here are never used by the exact
code paths.
"""

from typing import Tuple

import numpy as np

from . import common_types as ct

FloatCoefficients = Tuple[float, ...]


def least_squares(points: ct.Points, degree: int) -> FloatCoefficients:
    """Fit a polynomial of degree to the points.

    Coefficients are in ascending powers of x, same as for the exact
    solvers.
    """
    if degree < 0:
        raise ValueError(f"Invalid degree={degree}, must be >= 0")
    if len(points) == 0:
        raise ValueError("Cannot fit without any points")

    xs = np.array([float(p.x) for p in points], dtype=np.float64)
    ys = np.array([float(p.y) for p in points], dtype=np.float64)

    vander = np.vander(xs, N=degree + 1, increasing=True)
    coeffs, _residuals, _rank, _sv = np.linalg.lstsq(vander, ys, rcond=None)
    return tuple(float(c) for c in coeffs)


def rounded_secret(coeffs: FloatCoefficients) -> int:
    return int(round(coeffs[0]))
