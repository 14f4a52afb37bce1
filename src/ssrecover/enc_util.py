# This file is part of the ssrecover project
#
# Copyright (c) 2019-2022 Manuel Barkhau (mbarkhau@gmail.com) - MIT License
# SPDX-License-Identifier: MIT

"""Helper functions related to data/type encoding/decoding."""

import string
from typing import Dict
from typing import List

from . import errors

MIN_BASE = 2
MAX_BASE = 36

DIGITS = string.digits + string.ascii_lowercase

assert len(DIGITS) == MAX_BASE

_DIGIT_VALUES: Dict[str, int] = {char: val for val, char in enumerate(DIGITS)}


def _validate_base(base: int) -> None:
    # bool is a subclass of int, but True is not a base
    if not isinstance(base, int) or isinstance(base, bool):
        raise errors.InvalidBase(f"Invalid base {base!r}, must be an integer")
    if not MIN_BASE <= base <= MAX_BASE:
        errmsg = f"Invalid base {base}, must be {MIN_BASE} <= base <= {MAX_BASE}"
        raise errors.InvalidBase(errmsg)


def digit_value(char: str) -> int:
    """Value of a single digit character (case insensitive).

    >>> digit_value("7")
    7
    >>> digit_value("F")
    15
    """
    val = _DIGIT_VALUES.get(char.lower())
    if val is None or len(char) != 1:
        raise errors.InvalidDigit(f"Invalid digit {char!r}")
    return val


def decode(digits: str, base: int) -> int:
    r"""Convert a digit string in base to an (arbitrary sized) integer.

    Parsed with the most significant digit first, leading zeros are
    allowed, a sign is not.

    >>> decode("111", 2)
    7
    >>> decode("213", 4)
    39
    >>> decode("ff", 16) == decode("FF", 16) == 255
    True
    """
    _validate_base(base)

    if not digits:
        raise errors.InvalidDigit("Invalid value, must have at least one digit")

    num = 0
    for i, char in enumerate(digits):
        val = _DIGIT_VALUES.get(char.lower(), MAX_BASE)
        if val >= base:
            errmsg = f"Invalid digit {char!r} at position {i} of {digits!r} for base {base}"
            raise errors.InvalidDigit(errmsg)
        num = num * base + val
    return num


def encode(num: int, base: int) -> str:
    """Convert a non-negative integer to a digit string in base.

    Inverse of decode (without leading zeros).

    >>> encode(39, 4)
    '213'
    >>> encode(0, 7)
    '0'
    """
    _validate_base(base)
    if num < 0:
        raise ValueError(f"Invalid value {num}, must be >= 0")

    if num == 0:
        return "0"

    parts: List[str] = []
    while num:
        num, val = divmod(num, base)
        parts.append(DIGITS[val])

    return "".join(reversed(parts))
