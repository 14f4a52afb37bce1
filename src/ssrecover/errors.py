# This file is part of the ssrecover project
#
# Copyright (c) 2019-2022 Manuel Barkhau (mbarkhau@gmail.com) - MIT License
# SPDX-License-Identifier: MIT

"""Exceptions raised by ssrecover.

Input errors (InvalidDigit, InvalidBase, InvalidRecord,
InvalidPointSet) abort the processing of a record. SolverError
subclasses are fatal when solving a single set of points, but only
reject the current subset during the outlier search.
"""

from typing import List
from typing import Tuple

from . import common_types as ct


class SSRecoverError(ValueError):
    pass


class InvalidBase(SSRecoverError):
    pass


class InvalidDigit(SSRecoverError):
    pass


class InvalidRecord(SSRecoverError):
    pass


class InvalidPointSet(SSRecoverError):
    pass


class SolverError(SSRecoverError):
    pass


class NonExactDivision(SolverError):
    pass


class NonIntegerResult(SolverError):
    pass


class SingularMatrix(SolverError):
    pass


RankedTally = List[Tuple[ct.Point, int]]


class ReconstructionFailed(SSRecoverError):

    ranked_tally: RankedTally

    def __init__(self, errmsg: str, ranked_tally: RankedTally) -> None:
        super().__init__(errmsg)
        self.ranked_tally = ranked_tally
