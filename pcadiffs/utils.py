# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

from typing import Optional

import numpy as np

from .errors import DimensionMismatchError, NumericDomainError

EPS: float = 1e-12


def scale_tol(A: np.ndarray) -> float:
    """Return an absolute tolerance scaled to the array magnitude."""
    A = np.asarray(A, dtype=float)
    if A.size == 0:
        return EPS
    return EPS * max(1.0, float(np.max(np.abs(A))))


def as_vector(x, name: str, length: Optional[int] = None) -> np.ndarray:
    """
    Return `x` as a float vector of shape (n,).

    Accepts (n,), (n, 1) and (1, n) inputs.
    """
    v = np.asarray(x, dtype=float)
    if v.ndim == 2 and 1 in v.shape:
        v = v.ravel()
    elif v.ndim != 1:
        raise DimensionMismatchError(
            f"{name} must be a vector, got shape {v.shape}"
        )
    if length is not None and v.shape[0] != length:
        raise DimensionMismatchError(
            f"{name} must have length {length}, got {v.shape[0]}"
        )
    return v


def as_columns(x, name: str, rows: Optional[int] = None) -> np.ndarray:
    """
    Return `x` as a float matrix of column vectors, shape (rows, N).

    A 1D input of length `rows` is a single column.
    """
    X = np.asarray(x, dtype=float)
    # If we are 1D, make this a column matrix
    if X.ndim == 1:
        X = X[:, None]
    if X.ndim != 2:
        raise DimensionMismatchError(
            f"{name} must be 1D or 2D, got shape {X.shape}"
        )
    if rows is not None and X.shape[0] != rows:
        raise DimensionMismatchError(
            f"{name} must have {rows} rows, got shape {X.shape}"
        )
    return X


def check_finite(x: np.ndarray, name: str) -> None:
    if not np.all(np.isfinite(x)):
        raise NumericDomainError(f"{name} contains NaN or Inf")
