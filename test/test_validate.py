from ssrecover.validate import *
from ssrecover.common_types import Point
from ssrecover.common_types import Mismatch

TESTCASE_1 = [Point(1, 4), Point(2, 7), Point(3, 12), Point(6, 39)]


def test_validate_all_points():
    assert validate((3, 0, 1), TESTCASE_1) == frozenset()


def test_validate_mismatch():
    points = TESTCASE_1 + [Point(3, 13)]
    assert validate((3, 0, 1), points) == {Point(3, 13)}
    assert validate((3, 0, 2), points) == set(points)


def test_validate_diagnostics():
    diagnostics = []
    points      = [Point(1, 4), Point(2, 8), Point(6, 38)]
    mismatched  = validate((3, 0, 1), points, diagnostics)

    assert mismatched == {Point(2, 8), Point(6, 38)}
    assert diagnostics == [
        Mismatch(Point(2, 8) , expected=8 , computed=7),
        Mismatch(Point(6, 38), expected=38, computed=39),
    ]


def test_validate_idempotent():
    points = TESTCASE_1 + [Point(5, 0)]
    first  = validate((3, 0, 1), points)
    second = validate((3, 0, 1), points)
    assert first == second == {Point(5, 0)}


def test_validate_large():
    coeffs = (2 ** 100, 3 ** 50, 1)
    points = [Point(x, 2 ** 100 + 3 ** 50 * x + x * x) for x in range(1, 6)]
    assert validate(coeffs, points) == frozenset()

    off_by_one = points[:4] + [Point(5, points[4].y + 1)]
    assert validate(coeffs, off_by_one) == {off_by_one[4]}
