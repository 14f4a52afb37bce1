import itertools

import pytest

from ssrecover import errors
from ssrecover import polynom
from ssrecover import solvers
from ssrecover.reconstruct import *
from ssrecover.common_types import Point
from ssrecover.common_types import SubsetRejected

METHODS = sorted(solvers.SOLVERS)

# f(x) = 3 + x²
TESTCASE_1 = [Point(1, 4), Point(2, 7), Point(3, 12), Point(6, 39)]

CORRUPTED = [Point(1, 4), Point(2, 7), Point(3, 13), Point(6, 39)]


def point_set(points, k):
    return polynom.init_point_set(len(points), k, points)


@pytest.mark.parametrize("n, k", [(1, 1), (4, 1), (4, 2), (4, 4), (6, 3), (7, 5)])
def test_next_combination(n, k):
    subsets = [first_combination(k)]
    while True:
        subset = next_combination(subsets[-1], n)
        if subset is None:
            break
        subsets.append(subset)

    assert subsets == list(itertools.combinations(range(n), k))


def test_next_combination_examples():
    assert next_combination((0, 1, 2), 4) == (0, 1, 3)
    assert next_combination((0, 1, 3), 4) == (0, 2, 3)
    assert next_combination((0, 2, 3), 4) == (1, 2, 3)
    assert next_combination((1, 2, 3), 4) is None


@pytest.mark.parametrize("method", METHODS)
def test_reconstruct_consistent(method):
    result = reconstruct(point_set(TESTCASE_1, 3), method=method)
    assert result.state == SearchState.FOUND
    assert result.is_found
    assert result.secret == 3
    assert result.coeffs == (3, 0, 1)
    assert result.subset == (0, 1, 2)
    assert result.subsets_tried == 1
    assert result.outliers == frozenset()
    assert result.tally == []
    assert result.diagnostics == []
    result.raise_for_state()


def test_reconstruct_corrupted_strict():
    result = reconstruct(point_set(CORRUPTED, 3))
    assert result.state == SearchState.EXHAUSTED
    assert result.secret is None
    assert result.coeffs is None
    assert not result.truncated
    assert result.subsets_tried == 4

    # only the subset (0, 1, 3) avoids the corrupted point, the
    # polynomial through it is 3 + x² which misses (3, 13)
    assert result.tally == [(Point(3, 13), 1)]

    rejected = [diag.subset for diag in result.diagnostics if isinstance(diag, SubsetRejected)]
    assert rejected == [(0, 1, 2), (0, 2, 3), (1, 2, 3)]

    with pytest.raises(errors.ReconstructionFailed) as exc_info:
        result.raise_for_state()
    assert exc_info.value.ranked_tally == [(Point(3, 13), 1)]

    with pytest.raises(errors.ReconstructionFailed):
        reconstruct_or_raise(point_set(CORRUPTED, 3))


@pytest.mark.parametrize("method", METHODS)
def test_reconstruct_corrupted_with_outlier(method):
    result = reconstruct(point_set(CORRUPTED, 3), method=method, max_outliers=1)
    assert result.state == SearchState.FOUND
    assert result.secret == 3
    assert result.coeffs == (3, 0, 1)
    assert result.subset == (0, 1, 3)
    assert result.outliers == {Point(3, 13)}
    assert dict(result.tally)[Point(3, 13)] >= 1
    # n < k + 2 * max_outliers, so every subset is tried to rule out a
    # second polynomial within the limit
    assert result.subsets_tried == 4
    assert result.candidates == ((3, 0, 1),)


def test_reconstruct_duplicate_x():
    points = [Point(1, 4), Point(1, 5), Point(2, 7), Point(3, 12)]

    strict = reconstruct(point_set(points, 3))
    assert strict.state == SearchState.EXHAUSTED
    assert strict.tally[0] == (Point(1, 5), 1)

    rejected = [diag for diag in strict.diagnostics if isinstance(diag, SubsetRejected)]
    assert rejected[0].subset == (0, 1, 2)
    assert "Singular" in rejected[0].reason

    tolerant = reconstruct(point_set(points, 3), max_outliers=1)
    assert tolerant.is_found
    assert tolerant.coeffs == (3, 0, 1)
    assert tolerant.subset == (0, 2, 3)
    assert tolerant.outliers == {Point(1, 5)}
    assert tolerant.subsets_tried == 4


def test_reconstruct_multiple_outliers():
    coeffs = (1234567890123456789012345, -17, 0, 3)
    points = [Point(x, polynom.poly_eval(coeffs, x)) for x in range(1, 9)]
    points[1] = Point(points[1].x, points[1].y + 1)
    points[5] = Point(points[5].x, points[5].y * 2)

    result = reconstruct(point_set(points, 4), max_outliers=2)
    assert result.is_found
    assert result.coeffs == coeffs
    assert result.outliers == {points[1], points[5]}
    assert result.candidates == (coeffs,)

    ranked_points = [point for point, _ in result.tally]
    assert {points[1], points[5]} <= set(ranked_points)


def test_reconstruct_ambiguous():
    # (3, 12) corrupted to (3, 14), which puts the first three points on
    # 5 - 3x + 2x². That polynomial only misses (6, 39), so with one
    # allowed outlier it is just as acceptable as 3 + x².
    points = [Point(1, 4), Point(2, 7), Point(3, 14), Point(6, 39)]

    result = reconstruct(point_set(points, 3), max_outliers=1)
    assert result.state == SearchState.AMBIGUOUS
    assert not result.is_found
    assert result.secret is None
    assert result.coeffs is None
    assert result.candidates == ((5, -3, 2), (3, 0, 1))
    assert set(dict(result.tally)) == {Point(6, 39), Point(3, 14)}

    with pytest.raises(errors.ReconstructionFailed, match="2 different polynomials"):
        result.raise_for_state()

    # strict mode accepts neither of them
    strict = reconstruct(point_set(points, 3))
    assert strict.state == SearchState.EXHAUSTED


def test_reconstruct_unique_bound():
    assert not is_unique_bound(point_set(CORRUPTED, 3), max_outliers=1)
    assert is_unique_bound(point_set(CORRUPTED, 3), max_outliers=0)

    # with n >= k + 2 * max_outliers the first accepted polynomial is
    # the only one, the search can stop there
    points = [Point(1, 4), Point(2, 7), Point(3, 14), Point(6, 39), Point(7, 52)]
    assert is_unique_bound(point_set(points, 3), max_outliers=1)

    result = reconstruct(point_set(points, 3), max_outliers=1)
    assert result.is_found
    assert result.secret == 3
    assert result.subset == (0, 1, 3)
    assert result.subsets_tried == 2
    assert result.outliers == {Point(3, 14)}


def test_reconstruct_truncated_candidate():
    # the candidate was accepted, but the cap prevents the check that
    # no other polynomial is within the limit
    result = reconstruct(point_set(CORRUPTED, 3), max_subsets=2, max_outliers=1)
    assert result.state == SearchState.EXHAUSTED
    assert result.truncated
    assert result.coeffs == (3, 0, 1)
    assert result.secret is None
    assert result.candidates == ((3, 0, 1),)


def test_reconstruct_max_subsets():
    result = reconstruct(point_set(CORRUPTED, 3), max_subsets=1)
    assert result.state == SearchState.EXHAUSTED
    assert result.truncated
    assert result.subsets_tried == 1

    with pytest.raises(errors.ReconstructionFailed, match="truncated"):
        result.raise_for_state()

    # the cap is not reached if the polynomial is found earlier
    result = reconstruct(point_set(TESTCASE_1, 3), max_subsets=1)
    assert result.is_found
    assert not result.truncated


def test_reconstruct_invalid_args():
    with pytest.raises(ValueError):
        reconstruct(point_set(CORRUPTED, 3), max_outliers=2)
    with pytest.raises(ValueError):
        reconstruct(point_set(CORRUPTED, 3), max_outliers=-1)
    with pytest.raises(ValueError):
        reconstruct(point_set(CORRUPTED, 3), max_subsets=0)
    with pytest.raises(ValueError):
        reconstruct(point_set(CORRUPTED, 3), method="bogus")


def test_solve_plain():
    result = solve(point_set(TESTCASE_1, 3))
    assert result.is_found
    assert result.coeffs == (3, 0, 1)
    assert result.subsets_tried == 1

    # the corrupted point is one of the first k points
    with pytest.raises(errors.NonIntegerResult):
        solve(point_set(CORRUPTED, 3))
    with pytest.raises(errors.NonExactDivision):
        solve(point_set(CORRUPTED, 3), method="newton")

    # the corrupted point is not one of the first k points
    points = TESTCASE_1[:3] + [Point(6, 40)]
    result = solve(point_set(points, 3))
    assert result.state == SearchState.EXHAUSTED
    assert result.secret is None
    assert result.tally == [(Point(6, 40), 1)]
    # the coefficients are kept for diagnosis
    assert result.coeffs == (3, 0, 1)
    assert result.outliers == {Point(6, 40)}
    assert result.candidates == ()
