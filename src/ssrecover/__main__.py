#!/usr/bin/env python
# This file is part of the ssrecover project
#
# Copyright (c) 2019-2022 Manuel Barkhau (mbarkhau@gmail.com) - MIT License
# SPDX-License-Identifier: MIT
"""
__main__ module for SSRecover.

Enables use as module: $ python -m ssrecover
"""


if __name__ == '__main__':
    from . import cli

    cli.cli()
