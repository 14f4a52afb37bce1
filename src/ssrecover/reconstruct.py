# This file is part of the ssrecover project
#
# Copyright (c) 2019-2022 Manuel Barkhau (mbarkhau@gmail.com) - MIT License
# SPDX-License-Identifier: MIT

"""Outlier tolerant reconstruction of the secret.

If some of the points are corrupted, the first k points may not be on
the same polynomial as the others. We search through every subset of
k points (in lexicographic order) until the polynomial through the
subset is consistent with all points.

Points which don't match the candidate polynomials are counted. When
no consistent polynomial is found, the points which failed most often
are the most likely to be corrupted.

With max_outliers=e, a polynomial is accepted if at most e points are
not on it. Two different polynomials of degree k - 1 agree on at most
k - 1 points, so an accepted polynomial is only guaranteed to be unique
if n >= k + 2e. For smaller n the search continues through all subsets
and the result is AMBIGUOUS if a second polynomial is accepted.

The search tries up to C(n, k) subsets, so it is only viable for
small n (a few dozen points at most). Use max_subsets to put a cap on
it.
"""

import enum
import math
import logging
import collections
from typing import List
from typing import Tuple
from typing import Counter
from typing import Optional
from typing import FrozenSet
from typing import NamedTuple

from . import errors
from . import solvers
from . import validate
from . import common_types as ct

logger = logging.getLogger(__name__)


class SearchState(enum.Enum):

    SEARCHING = "searching"
    FOUND     = "found"
    AMBIGUOUS = "ambiguous"
    EXHAUSTED = "exhausted"


MismatchTally = Counter[ct.Point]

RankedTally = errors.RankedTally


class Reconstruction(NamedTuple):

    state        : SearchState
    coeffs       : Optional[ct.Coefficients]  # may be set for an unconfirmed candidate
    subset       : Optional[ct.Subset]  # indices of the points used for coeffs
    outliers     : FrozenSet[ct.Point]  # points not on the polynomial
    subsets_tried: int
    truncated    : bool  # search stopped early because of max_subsets
    tally        : RankedTally
    diagnostics  : ct.Diagnostics
    candidates   : Tuple[ct.Coefficients, ...] = ()  # distinct accepted polynomials

    @property
    def secret(self) -> Optional[int]:
        if self.is_found and self.coeffs is not None:
            return self.coeffs[0]
        else:
            return None

    @property
    def is_found(self) -> bool:
        return self.state == SearchState.FOUND

    def raise_for_state(self) -> None:
        if self.state == SearchState.AMBIGUOUS:
            errmsg = f"{len(self.candidates)} different polynomials are within the outlier limit"
            raise errors.ReconstructionFailed(errmsg, self.tally)
        elif self.state == SearchState.EXHAUSTED:
            errmsg = f"No valid polynomial found after {self.subsets_tried} subsets"
            if self.truncated:
                errmsg += " (search was truncated)"
            raise errors.ReconstructionFailed(errmsg, self.tally)


def first_combination(k: int) -> ct.Subset:
    return tuple(range(k))


def next_combination(indices: ct.Subset, n: int) -> Optional[ct.Subset]:
    """Lexicographically next k-subset of range(n).

    Returns None if indices is the last subset.

    >>> next_combination((0, 1, 3), 4)
    (0, 2, 3)
    >>> next_combination((1, 2, 3), 4) is None
    True
    """
    k = len(indices)

    # rightmost index which can still be increased
    pos = k - 1
    while pos >= 0 and indices[pos] == n - k + pos:
        pos -= 1

    if pos < 0:
        return None

    start = indices[pos] + 1
    return indices[:pos] + tuple(range(start, start + k - pos))


def rank_tally(tally: MismatchTally) -> RankedTally:
    # Counter.most_common keeps insertion order for equal counts
    return tally.most_common()


def is_unique_bound(point_set: ct.PointSet, max_outliers: int) -> bool:
    """Any accepted polynomial is the only one within max_outliers.

    >>> is_unique_bound(ct.PointSet(n=4, k=3, points=()), max_outliers=1)
    False
    >>> is_unique_bound(ct.PointSet(n=5, k=3, points=()), max_outliers=1)
    True
    """
    return point_set.n >= point_set.k + 2 * max_outliers


def _validate_args(point_set: ct.PointSet, max_subsets: Optional[int], max_outliers: int) -> None:
    if max_subsets is not None and max_subsets < 1:
        raise ValueError(f"Invalid max_subsets={max_subsets}, must be >= 1")

    max_valid_outliers = point_set.n - point_set.k
    if not 0 <= max_outliers <= max_valid_outliers:
        errmsg = (
            f"Invalid max_outliers={max_outliers}, "
            f"must be 0 <= max_outliers <= n - k = {max_valid_outliers}"
        )
        raise ValueError(errmsg)


def reconstruct(
    point_set   : ct.PointSet,
    method      : str           = solvers.DEFAULT_METHOD,
    max_subsets : Optional[int] = None,
    max_outliers: int           = 0,
) -> Reconstruction:
    """Search for a polynomial consistent with the point set.

    A candidate polynomial is accepted if at most max_outliers of all
    points are not on it. With the default of 0, every point must be
    on the polynomial.

    If uniqueness is not implied by n >= k + 2 * max_outliers, the
    search only ends with FOUND after every subset was tried and
    exactly one polynomial was accepted.
    """
    _validate_args(point_set, max_subsets, max_outliers)

    solver = solvers.get_solver(method)
    n, k, points = point_set
    is_unique = is_unique_bound(point_set, max_outliers)

    tally      : MismatchTally  = collections.Counter()
    diagnostics: ct.Diagnostics = []
    candidates : List[ct.Coefficients] = []

    logger.info(f"Searching {math.comb(n, k)} subsets of {k} out of {n} points")
    if not is_unique:
        logger.info("n < k + 2 * max_outliers, searching all subsets to check for ambiguity")

    state         = SearchState.SEARCHING
    subset        = first_combination(k)
    subsets_tried = 0
    truncated     = False

    accepted_coeffs  : Optional[ct.Coefficients] = None
    accepted_subset  : Optional[ct.Subset]       = None
    accepted_outliers: FrozenSet[ct.Point]       = frozenset()

    while state == SearchState.SEARCHING:
        if max_subsets is not None and subsets_tried >= max_subsets:
            logger.warning(f"Search truncated after {subsets_tried} subsets")
            truncated = True
            state     = SearchState.EXHAUSTED
            break

        subsets_tried += 1
        subset_points = [points[i] for i in subset]

        try:
            coeffs = solver(subset_points)
        except errors.SolverError as err:
            logger.debug(f"Rejected subset {subset}: {err}")
            diagnostics.append(ct.SubsetRejected(subset, str(err)))
        else:
            mismatched = validate.validate(coeffs, points, diagnostics)
            tally.update(p for p in points if p in mismatched)

            if len(mismatched) <= max_outliers:
                if coeffs not in candidates:
                    candidates.append(coeffs)

                if accepted_coeffs is None:
                    logger.info(f"Accepted polynomial using subset {subset} after {subsets_tried} tries")
                    accepted_coeffs   = coeffs
                    accepted_subset   = subset
                    accepted_outliers = mismatched

                if len(candidates) > 1:
                    logger.warning(f"Ambiguous: {candidates[0]} and {candidates[1]} are both accepted")
                    state = SearchState.AMBIGUOUS
                    break
                elif is_unique:
                    state = SearchState.FOUND
                    break

        next_subset = next_combination(subset, n)
        if next_subset is None:
            if accepted_coeffs is None:
                state = SearchState.EXHAUSTED
            else:
                state = SearchState.FOUND
        else:
            subset = next_subset

    if state == SearchState.FOUND:
        logger.info(f"Found polynomial using subset {accepted_subset}")
    elif state == SearchState.EXHAUSTED:
        logger.info(f"No valid polynomial found after {subsets_tried} subsets")

    if state == SearchState.AMBIGUOUS:
        accepted_coeffs   = None
        accepted_subset   = None
        accepted_outliers = frozenset()

    return Reconstruction(
        state=state,
        coeffs=accepted_coeffs,
        subset=accepted_subset,
        outliers=accepted_outliers,
        subsets_tried=subsets_tried,
        truncated=truncated,
        tally=rank_tally(tally),
        diagnostics=diagnostics,
        candidates=tuple(candidates),
    )


def reconstruct_or_raise(
    point_set   : ct.PointSet,
    method      : str           = solvers.DEFAULT_METHOD,
    max_subsets : Optional[int] = None,
    max_outliers: int           = 0,
) -> Reconstruction:
    result = reconstruct(point_set, method, max_subsets, max_outliers)
    result.raise_for_state()
    return result


def solve(point_set: ct.PointSet, method: str = solvers.DEFAULT_METHOD) -> Reconstruction:
    """Solve using only the first k points.

    Unlike reconstruct, solver errors are not caught here. If other
    points are not on the polynomial, the result is EXHAUSTED but the
    coefficients are kept for diagnosis.
    """
    k, points = point_set.k, point_set.points

    subset      = first_combination(k)
    coeffs      = solvers.solve(points[:k], method)
    diagnostics: ct.Diagnostics = []
    mismatched  = validate.validate(coeffs, points, diagnostics)

    tally: MismatchTally = collections.Counter(p for p in points if p in mismatched)
    if mismatched:
        state = SearchState.EXHAUSTED
        logger.info(f"Polynomial from the first {k} points does not match {len(mismatched)} points")
    else:
        state = SearchState.FOUND

    return Reconstruction(
        state=state,
        coeffs=coeffs,
        subset=subset,
        outliers=mismatched,
        subsets_tried=1,
        truncated=False,
        tally=rank_tally(tally),
        diagnostics=diagnostics,
        candidates=(coeffs,) if state == SearchState.FOUND else (),
    )
