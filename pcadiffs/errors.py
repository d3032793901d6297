# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Exceptions raised by pcadiffs
"""


class PcaDiffsError(Exception):
    """Base class for every error raised by this package."""


class DimensionMismatchError(PcaDiffsError, ValueError):
    """
    Invalid model or input structure: array shapes of samples, model or
    output buffer do not agree, or eigenvalues are out of order.
    """


class NumericDomainError(PcaDiffsError, ArithmeticError):
    """
    A value fell outside the domain of an operation, e.g. a negative
    variance under a square root or a zero residual variance (rho).
    """
