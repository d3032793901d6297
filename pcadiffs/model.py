# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from .errors import DimensionMismatchError, NumericDomainError
from .utils import as_vector, check_finite, scale_tol

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class PCAModel:
    """
    A precomputed PCA subspace: mean, eigenvalues and a truncated basis.

    Parameters
    ----------
    mean : (D,) or (D, 1) array_like
        Centre of the training distribution.
    eigenvalues : (nEig,) or (nEig, 1) array_like
        Variances along the principal axes, largest first.
    eigenvectors : (M, D) array_like
        The M retained principal axes as orthonormal rows, paired with
        the first M eigenvalues. M <= nEig.
    check_order : bool
        Reject eigenvalues that are not non-increasing.
    check_orthonormal : bool
        Log a warning if the rows of `eigenvectors` are not orthonormal.

    All arrays are stored as read-only float copies, so one model can
    be shared between concurrent evaluations.
    """

    mean: np.ndarray
    eigenvalues: np.ndarray
    eigenvectors: np.ndarray
    check_order: bool = field(default=True, repr=False)
    check_orthonormal: bool = field(default=False, repr=False)

    def __post_init__(self):
        mean = as_vector(self.mean, "mean").copy()
        D = mean.shape[0]
        eigenvalues = as_vector(self.eigenvalues, "eigenvalues").copy()

        V = np.array(self.eigenvectors, dtype=float)
        if V.ndim == 1 and V.shape[0] == 0:
            V = V.reshape(0, D)
        if V.ndim != 2 or V.shape[1] != D:
            raise DimensionMismatchError(
                f"eigenvectors must have shape (M, {D}), got {V.shape}"
            )
        M = V.shape[0]
        if M > eigenvalues.shape[0]:
            raise DimensionMismatchError(
                f"{M} eigenvectors but only {eigenvalues.shape[0]} eigenvalues"
            )

        check_finite(mean, "mean")
        check_finite(eigenvalues, "eigenvalues")
        check_finite(V, "eigenvectors")

        if np.any(eigenvalues < 0):
            raise NumericDomainError(
                "eigenvalues must be non-negative (covariance is not PSD)"
            )
        if self.check_order and eigenvalues.size > 1:
            if np.any(np.diff(eigenvalues) > scale_tol(eigenvalues)):
                raise DimensionMismatchError(
                    "eigenvalues are out of order: they must be non-increasing"
                )
        if self.check_orthonormal and M > 0:
            err = np.linalg.norm(V @ V.T - np.eye(M), np.inf)
            if err > 1e-8:
                logger.warning(
                    "eigenvector rows are not orthonormal (||V V^T - I|| = %.3g)",
                    err,
                )

        for arr in (mean, eigenvalues, V):
            arr.flags.writeable = False
        # frozen dataclass: bypass __setattr__ to store the canonical arrays
        object.__setattr__(self, "mean", mean)
        object.__setattr__(self, "eigenvalues", eigenvalues)
        object.__setattr__(self, "eigenvectors", V)

    @property
    def dim(self) -> int:
        return self.mean.shape[0]

    @property
    def n_components(self) -> int:
        return self.eigenvectors.shape[0]

    @property
    def n_eig(self) -> int:
        return self.eigenvalues.shape[0]

    @property
    def retained_eigenvalues(self) -> np.ndarray:
        return self.eigenvalues[: self.n_components]

    @property
    def discarded_eigenvalues(self) -> np.ndarray:
        return self.eigenvalues[self.n_components :]

    @property
    def rho(self) -> Optional[float]:
        """Average discarded eigenvalue, or None if nothing is discarded."""
        if self.n_eig == self.n_components:
            return None
        return float(np.mean(self.discarded_eigenvalues))

    def truncate(self, m: int) -> "PCAModel":
        """Keep the first `m` principal axes; every eigenvalue is kept."""
        if not 0 <= m <= self.n_components:
            raise DimensionMismatchError(
                f"m must lie in [0, {self.n_components}], got {m}"
            )
        return PCAModel(
            self.mean,
            self.eigenvalues,
            self.eigenvectors[:m],
            check_order=self.check_order,
            check_orthonormal=self.check_orthonormal,
        )


def random_pca_model(D: int, M: int, n_eig=None, seed=None) -> PCAModel:
    """
    Random well-formed model: orthonormal basis from a QR factorisation
    of a Gaussian matrix, positive eigenvalues sorted largest first.

    Returns
    -------
    PCAModel with dim D, M retained axes and n_eig (default D) eigenvalues
    """
    n_eig = D if n_eig is None else n_eig
    rng = np.random.default_rng(seed)
    Q, _ = np.linalg.qr(rng.normal(size=(D, D)))
    eigenvalues = np.sort(rng.uniform(0.1, 10.0, size=n_eig))[::-1]
    mean = rng.normal(size=D)
    return PCAModel(mean, eigenvalues, Q.T[:M])
