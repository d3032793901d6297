#!/usr/bin/python3
# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
PCA projection operations
"""

from typing import Protocol

import numpy as np

from .errors import DimensionMismatchError
from .utils import as_columns, as_vector


class Projector(Protocol):
    """
    Anything that maps mean-centred samples onto a PCA basis.

    Called as ``projector(samples, mean, eigenvectors)`` with samples
    (D, N), mean (D,) and eigenvectors (M, D); must return (M, N).
    """

    def __call__(
        self, samples: np.ndarray, mean: np.ndarray, eigenvectors: np.ndarray
    ) -> np.ndarray: ...


def _check_basis(eigenvectors: np.ndarray, D: int) -> np.ndarray:
    V = np.asarray(eigenvectors, dtype=float)
    if V.ndim != 2 or V.shape[1] != D:
        raise DimensionMismatchError(
            f"eigenvectors must have shape (M, {D}), got {V.shape}"
        )
    return V


def project_pca(
    samples: np.ndarray, mean: np.ndarray, eigenvectors: np.ndarray
) -> np.ndarray:
    """
    Find the coordinates of each sample in the PCA basis,
    proj = V (x - mean), for the M orthonormal rows of V.

    Returns
    -------
    proj : ndarray, shape (M, N) if samples is (D, N) or (M, 1) if (D,)
    """
    X = as_columns(samples, "samples")
    D = X.shape[0]
    mu = as_vector(mean, "mean", D)
    V = _check_basis(eigenvectors, D)

    # rows of V are orthonormal, so V.T is its own pseudo-inverse
    return V @ (X - mu[:, None])


def back_project_pca(
    proj: np.ndarray, mean: np.ndarray, eigenvectors: np.ndarray
) -> np.ndarray:
    """
    Reconstruct samples from their PCA coordinates: x = V.T proj + mean.

    Returns
    -------
    X : ndarray, shape (D, N)
    """
    mu = as_vector(mean, "mean")
    D = mu.shape[0]
    V = _check_basis(eigenvectors, D)
    P = as_columns(proj, "proj", V.shape[0])

    return V.T @ P + mu[:, None]
