#!/usr/bin/env python3
# This file is part of the ssrecover project
#
# Copyright (c) 2019-2022 Manuel Barkhau (mbarkhau@gmail.com) - MIT License
# SPDX-License-Identifier: MIT

"""CLI/Imperative shell for SSRecover."""

import sys
import logging
from typing import Dict
from typing import Tuple
from typing import Optional
from typing import Sequence
from typing import NamedTuple

import click

import ssrecover

from . import lstsq
from . import cli_io
from . import errors
from . import solvers
from . import enc_util
from . import reconstruct
from . import common_types as ct

try:
    import pretty_traceback

    pretty_traceback.install(envvar='ENABLE_PRETTY_TRACEBACK')
except ImportError:
    pass  # no need to fail because of missing dev dependency


logger = logging.getLogger("ssrecover.cli")


EXIT_OK            = 0
EXIT_NOT_FOUND     = 1
EXIT_INVALID_INPUT = 2


class LogConfig(NamedTuple):
    fmt: str
    lvl: int


LOG_FORMAT_DEFAULT = "%(levelname)-7s - %(message)s"

LOG_FORMAT_VERBOSE = "%(asctime)s.%(msecs)03d %(levelname)-7s %(name)-22s - %(message)s"


def _parse_logging_config(verbosity: int) -> LogConfig:
    if verbosity == 0:
        return LogConfig(LOG_FORMAT_DEFAULT, logging.WARNING)
    elif verbosity == 1:
        return LogConfig(LOG_FORMAT_VERBOSE, logging.INFO)
    else:
        assert verbosity >= 2
        return LogConfig(LOG_FORMAT_VERBOSE, logging.DEBUG)


_PREV_VERBOSITY: int = -1


def _configure_logging(verbosity: int = 0) -> None:
    # pylint: disable=global-statement
    global _PREV_VERBOSITY

    if verbosity <= _PREV_VERBOSITY:
        # allow function to be called multiple times
        return

    _PREV_VERBOSITY = verbosity

    # remove previous logging handlers
    for handler in list(logging.root.handlers):
        logging.root.removeHandler(handler)

    log_cfg = _parse_logging_config(verbosity)
    logging.basicConfig(level=log_cfg.lvl, format=log_cfg.fmt, datefmt="%Y-%m-%dT%H:%M:%S")


def echo(msg: str = "") -> bool:
    click.echo(msg)
    return True


def echo_lines(lines: Sequence[str]) -> bool:
    click.echo("\n".join(lines))
    return True


_opt_verbose = click.option(
    '-v',
    '--verbose',
    count=True,
    help="Control log level. -vv for debug level.",
)


_opt_method = click.option(
    '-m',
    '--method',
    type=click.Choice(sorted(solvers.SOLVERS)),
    default=solvers.DEFAULT_METHOD,
    envvar='SSRECOVER_METHOD',
    show_default=True,
    help="Interpolation method used to solve each subset of points",
)


_opt_plain = click.option(
    '--plain',
    type=bool,
    is_flag=True,
    default=False,
    help="Only use the first k points, don't search for outliers",
)


_opt_max_subsets = click.option(
    '--max-subsets',
    type=click.IntRange(min=1),
    default=None,
    help="Stop the outlier search after this many subsets",
)


_opt_max_outliers = click.option(
    '-e',
    '--max-outliers',
    type=click.IntRange(min=0),
    default=0,
    show_default=True,
    help=(
        "Accept a polynomial if at most this many points are not on it. "
        "Unless n >= k + 2 * max-outliers, all subsets are searched and "
        "the result is ambiguous if more than one polynomial is accepted."
    ),
)


@click.group(context_settings={'help_option_names': ["-h", "--help"]})
@_opt_verbose
def cli(verbose: int = 0) -> None:
    """CLI for SSRecover."""
    _configure_logging(verbose)


@cli.command()
def version() -> None:
    """Show version number."""
    echo(f"SSRecover version: {ssrecover.__version__}")


def _load(fpath: str) -> Optional[ct.PointSet]:
    try:
        return cli_io.load_point_set(fpath)
    except errors.SSRecoverError as err:
        echo(f"Invalid input in {fpath}: {err}")
        return None


def _solve_point_set(
    point_set   : ct.PointSet,
    method      : str,
    plain       : bool,
    max_subsets : Optional[int],
    max_outliers: int,
) -> reconstruct.Reconstruction:
    if plain:
        return reconstruct.solve(point_set, method)
    else:
        return reconstruct.reconstruct(
            point_set, method=method, max_subsets=max_subsets, max_outliers=max_outliers
        )


@cli.command()
@click.argument('files', nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@_opt_method
@_opt_plain
@_opt_max_subsets
@_opt_max_outliers
@_opt_verbose
def solve(
    files       : Tuple[str, ...],
    method      : str           = solvers.DEFAULT_METHOD,
    plain       : bool          = False,
    max_subsets : Optional[int] = None,
    max_outliers: int           = 0,
    verbose     : int           = 0,
) -> None:
    """Recover the secret from one or more input records."""
    _configure_logging(verbose)
    logger.debug(f"{method=} {plain=} {max_subsets=} {max_outliers=}")

    exit_code = EXIT_OK
    for fpath in files:
        echo(f"Processing: {fpath}")
        point_set = _load(fpath)
        if point_set is None:
            exit_code = max(exit_code, EXIT_INVALID_INPUT)
            echo()
            continue

        echo_lines(cli_io.format_points(point_set))
        echo()

        try:
            result = _solve_point_set(point_set, method, plain, max_subsets, max_outliers)
        except errors.SolverError as err:
            echo(f"Failed to solve {fpath}: {err}")
            exit_code = max(exit_code, EXIT_NOT_FOUND)
            echo()
            continue
        except ValueError as err:
            echo(f"Invalid parameters for {fpath}: {err}")
            exit_code = max(exit_code, EXIT_INVALID_INPUT)
            echo()
            continue

        echo_lines(cli_io.format_result(result))
        echo("=" * 60)
        echo()

        if not result.is_found:
            exit_code = max(exit_code, EXIT_NOT_FOUND)

    if exit_code != EXIT_OK:
        sys.exit(exit_code)


@cli.command()
@click.argument('file', type=click.Path(exists=True, dir_okay=False))
@_opt_verbose
def compare(file: str, verbose: int = 0) -> None:
    """Compare all methods using the first k points of FILE.

    Includes a floating point least squares fit, which is only a
    cross-check and is imprecise for large values.
    """
    _configure_logging(verbose)

    point_set = _load(file)
    if point_set is None:
        sys.exit(EXIT_INVALID_INPUT)

    echo_lines(cli_io.format_points(point_set))
    echo()

    points = point_set.points[: point_set.k]

    results: Dict[str, ct.Coefficients] = {}
    for method in sorted(solvers.SOLVERS):
        try:
            results[method] = solvers.solve(points, method)
        except errors.SolverError as err:
            echo(f"{method:<12} failed: {err}")

    for method, coeffs in results.items():
        echo(f"{method:<12} secret (a0): {coeffs[0]}")

    secret_at_0: Optional[int] = None
    try:
        secret_at_0 = solvers.lagrange_secret(points)
        echo(f"{'lagrange@0':<12} secret (a0): {secret_at_0}")
    except errors.SolverError as err:
        echo(f"{'lagrange@0':<12} failed: {err}")

    try:
        ls_coeffs = lstsq.least_squares(points, degree=point_set.k - 1)
        ls_secret = lstsq.rounded_secret(ls_coeffs)
        echo(f"{'lstsq':<12} secret (a0): {ls_secret} (approximate)")
    except (OverflowError, ValueError):
        ls_coeffs = None
        echo(f"{'lstsq':<12} failed: values not representable as float")

    echo()
    echo("Full coefficient arrays:")
    for method, coeffs in results.items():
        echo(f"{method:<12} {cli_io.format_coeffs(coeffs)}")
    if ls_coeffs is not None:
        echo(f"{'lstsq':<12} [" + ", ".join(repr(c) for c in ls_coeffs) + "]")

    echo()
    is_agreed = (
        len(results) == len(solvers.SOLVERS)
        and len(set(results.values())) == 1
        and all(coeffs[0] == secret_at_0 for coeffs in results.values())
    )
    if is_agreed:
        echo("All exact methods agree.")
    else:
        echo("Exact methods DISAGREE!")
        sys.exit(EXIT_NOT_FOUND)


@cli.command()
@click.argument('value', type=str)
@click.argument('base', type=int)
def decode(value: str, base: int) -> None:
    """Decode VALUE given in BASE to a decimal integer."""
    try:
        echo(str(enc_util.decode(value, base)))
    except errors.SSRecoverError as err:
        echo(f"Error: {err}")
        sys.exit(EXIT_INVALID_INPUT)


@cli.command()
@click.argument('number', type=int)
@click.argument('base', type=int)
def encode(number: int, base: int) -> None:
    """Encode decimal NUMBER in BASE."""
    try:
        echo(enc_util.encode(number, base))
    except ValueError as err:
        echo(f"Error: {err}")
        sys.exit(EXIT_INVALID_INPUT)


if __name__ == '__main__':
    cli()
