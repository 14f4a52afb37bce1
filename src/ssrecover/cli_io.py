# This file is part of the ssrecover project
#
# Copyright (c) 2019-2022 Manuel Barkhau (mbarkhau@gmail.com) - MIT License
# SPDX-License-Identifier: MIT

"""Loading of input records and formatting of results.

An input record is a json document of the form

    {
        "keys": {"n": 4, "k": 3},
        "1": {"base": "10", "value": "4"},
        "2": {"base": "2", "value": "111"},
        "3": {"base": "10", "value": "12"},
        "6": {"base": "4", "value": "213"}
    }

Each numeric key is the x coordinate of a point, the y coordinate is
the value decoded in the given base. Points are kept in the order in
which they appear in the document.
"""

import re
import json
import logging
import pathlib as pl
from typing import Any
from typing import Dict
from typing import List
from typing import Union
from typing import Mapping
from typing import FrozenSet

from . import errors
from . import polynom
from . import enc_util
from . import reconstruct
from . import common_types as ct

logger = logging.getLogger(__name__)


X_COORD_RE = re.compile(r"^-?\d+$")


def _parse_int(obj: Mapping[str, Any], key: str, ctx: str) -> int:
    if key not in obj:
        raise errors.InvalidRecord(f"Invalid record, missing '{key}' in {ctx}")

    val = obj[key]
    if isinstance(val, bool):
        raise errors.InvalidRecord(f"Invalid value for '{key}' in {ctx}: {val!r}")
    if isinstance(val, int):
        return val
    if isinstance(val, str) and re.match(r"^\s*-?\d+\s*$", val):
        return int(val)

    raise errors.InvalidRecord(f"Invalid value for '{key}' in {ctx}: {val!r}")


def _parse_base(entry: Mapping[str, Any], ctx: str) -> int:
    try:
        return _parse_int(entry, 'base', ctx)
    except errors.InvalidRecord as err:
        if 'base' in entry:
            raise errors.InvalidBase(str(err)) from err
        else:
            raise


def parse_point(x_key: str, entry: Any) -> ct.Point:
    ctx = f"point '{x_key}'"
    if not isinstance(entry, dict):
        raise errors.InvalidRecord(f"Invalid record, {ctx} must be an object")

    base  = _parse_base(entry, ctx)
    value = entry.get('value')
    if not isinstance(value, str):
        raise errors.InvalidRecord(f"Invalid record, missing 'value' string in {ctx}")

    return ct.Point(int(x_key), enc_util.decode(value.strip(), base))


def parse_record(data: Dict[str, Any]) -> ct.PointSet:
    if not isinstance(data, dict):
        raise errors.InvalidRecord("Invalid record, must be a json object")

    # n and k are usually nested under "keys", but we also
    # accept them at the top level.
    keys = data.get('keys', data)
    if not isinstance(keys, dict):
        raise errors.InvalidRecord("Invalid record, 'keys' must be an object")

    n = _parse_int(keys, 'n', "keys")
    k = _parse_int(keys, 'k', "keys")

    points: List[ct.Point] = []
    for key, entry in data.items():
        if X_COORD_RE.match(key):
            points.append(parse_point(key, entry))
        elif key not in ('keys', 'n', 'k'):
            logger.debug(f"Ignoring non numeric key {key!r}")

    if not polynom.has_distinct_x(points):
        logger.warning("Record has duplicate x values, subsets with them can't be solved")

    return polynom.init_point_set(n, k, points)


def load_point_set(path: Union[str, pl.Path]) -> ct.PointSet:
    fpath = pl.Path(path)
    try:
        with fpath.open(mode="r", encoding="utf-8") as fobj:
            data = json.load(fobj)
    except UnicodeDecodeError as err:
        raise errors.InvalidRecord(f"Invalid utf-8 in {fpath}: {err}") from err
    except json.JSONDecodeError as err:
        raise errors.InvalidRecord(f"Invalid json in {fpath}: {err}") from err
    except OSError as err:
        raise errors.InvalidRecord(f"Could not read {fpath}: {err}") from err

    return parse_record(data)


def format_points(point_set: ct.PointSet) -> List[str]:
    lines = [
        f"n (total points): {point_set.n}",
        f"k (minimum required): {point_set.k}",
        "Decoded points (x, y):",
    ]
    lines.extend(f"({p.x}, {p.y})" for p in point_set.points)
    return lines


def format_coeffs(coeffs: ct.Coefficients) -> str:
    return "[" + ", ".join(str(c) for c in coeffs) + "]"


def format_tally(tally: reconstruct.RankedTally) -> List[str]:
    lines = ["=== POTENTIAL INCORRECT POINTS ==="]
    lines.extend(f"{point.x}:{point.y} failed {count} times" for point, count in tally)
    lines.append("=" * len(lines[0]))
    return lines


def _format_outliers(outliers: FrozenSet[ct.Point]) -> str:
    return "Points not on the polynomial: " + ", ".join(f"({p.x}, {p.y})" for p in sorted(outliers))


def format_result(result: reconstruct.Reconstruction) -> List[str]:
    if result.is_found:
        assert result.coeffs is not None
        lines = [
            f"*** SECRET FOUND: {result.secret} ***",
            f"Full polynomial coefficients (a0 ... a(k-1)): {format_coeffs(result.coeffs)}",
        ]
        if result.outliers:
            lines.append(_format_outliers(result.outliers))
        return lines

    if result.state == reconstruct.SearchState.AMBIGUOUS:
        lines = [
            "No unique polynomial found!",
            f"{len(result.candidates)} different polynomials are within the outlier limit:",
        ]
        lines.extend(format_coeffs(coeffs) for coeffs in result.candidates)
    else:
        lines = ["No valid polynomial found!"]
        if result.truncated:
            lines.append(f"Search was truncated after {result.subsets_tried} subsets.")
        if result.coeffs is not None:
            lines.append(f"Candidate polynomial coefficients (a0 ... a(k-1)): {format_coeffs(result.coeffs)}")
            if result.outliers:
                lines.append(_format_outliers(result.outliers))

    if result.tally:
        lines.extend(format_tally(result.tally))
    return lines
