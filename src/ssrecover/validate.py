# This file is part of the ssrecover project
#
# Copyright (c) 2019-2022 Manuel Barkhau (mbarkhau@gmail.com) - MIT License
# SPDX-License-Identifier: MIT

"""Check a candidate polynomial against every known point."""

import logging
from typing import List
from typing import Optional
from typing import FrozenSet

from . import polynom
from . import common_types as ct

logger = logging.getLogger(__name__)


def find_mismatches(coeffs: ct.Coefficients, points: ct.Points) -> List[ct.Mismatch]:
    mismatches: List[ct.Mismatch] = []
    eval_at = polynom.poly_eval_fn(coeffs)
    for point in points:
        computed = eval_at(point.x)
        if computed != point.y:
            mismatches.append(ct.Mismatch(point, expected=point.y, computed=computed))
    return mismatches


def validate(
    coeffs     : ct.Coefficients,
    points     : ct.Points,
    diagnostics: Optional[ct.Diagnostics] = None,
) -> FrozenSet[ct.Point]:
    """Return the points which are not on the polynomial.

    The comparison is exact, there is no tolerance. An empty result
    means every point is on the polynomial.
    """
    mismatches = find_mismatches(coeffs, points)
    for mismatch in mismatches:
        logger.debug(
            f"Mismatch: x={mismatch.point.x} expected={mismatch.expected} got={mismatch.computed}"
        )

    if diagnostics is not None:
        diagnostics.extend(mismatches)

    return frozenset(m.point for m in mismatches)
