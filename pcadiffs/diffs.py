# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Distance "in" and "from" feature space.

The distance between a point and a PCA subspace is the sum of the
distance-in-feature-space (DIFS), a Mahalanobis distance between the
projected point and the subspace origin, and the distance-from-feature-
space (DFFS), the reconstruction residual scaled by the mean of the
discarded eigenvalues. Together they give the Gaussian approximation
of the log-likelihood described in

    B. Moghaddam and A. Pentland, "Probabilistic visual learning for
    object detection", ICCV 1995, pp. 786-793.
"""

import functools
import logging
import math
from typing import Callable, NamedTuple, Optional

import numpy as np

from .errors import DimensionMismatchError, NumericDomainError
from .model import PCAModel
from .projections import Projector, project_pca
from .utils import as_columns, check_finite, scale_tol

logger = logging.getLogger(__name__)

LOG_2PI = math.log(2 * math.pi)


class PcaDiffs(NamedTuple):
    difs: np.ndarray
    dffs: np.ndarray
    norm_term: float
    log_prob: np.ndarray


def _retained_sqrt(eigenvalues: np.ndarray, m: int) -> np.ndarray:
    lam = np.asarray(eigenvalues, dtype=float)[:m]
    if np.any(lam <= 0):
        raise NumericDomainError(
            "retained eigenvalues must be strictly positive to scale DIFS"
        )
    return np.sqrt(lam)


def residual_variance(eigenvalues: np.ndarray, m: int) -> float:
    """
    rho: the mean of the eigenvalues after the first `m`, used as the
    isotropic variance of the discarded subspace.
    """
    eigenvalues = np.asarray(eigenvalues, dtype=float)
    rest = eigenvalues[m:]
    if rest.size == 0:
        raise DimensionMismatchError("no discarded eigenvalues to average")
    rho = float(np.mean(rest))
    if rho <= scale_tol(eigenvalues):
        raise NumericDomainError(
            f"residual variance rho={rho:.3g} is negligible relative to the "
            "largest eigenvalue"
        )
    return rho


def difs(proj: np.ndarray, eigenvalues: np.ndarray) -> np.ndarray:
    """
    Distance in feature space for projected coordinates `proj` (M, N):
    sum_d proj[d]^2 / eigenvalues[d] for each column.
    """
    proj = as_columns(proj, "proj")
    M, N = proj.shape
    if M == 0:
        return np.zeros(N)
    if len(eigenvalues) < M:
        raise DimensionMismatchError(
            f"{M} projected coordinates but only {len(eigenvalues)} eigenvalues"
        )
    sqrt_lam = _retained_sqrt(eigenvalues, M)
    scaled = proj / sqrt_lam[:, None]
    return np.sum(scaled**2, axis=0)


def dffs(centered: np.ndarray, proj: np.ndarray, rho: float) -> np.ndarray:
    """
    Distance from feature space: the energy of each mean-centred column
    outside the subspace, ||x - mean||^2 - ||proj||^2, divided by rho.
    """
    centered = as_columns(centered, "centered")
    proj = as_columns(proj, "proj")
    if centered.shape[1] != proj.shape[1]:
        raise DimensionMismatchError(
            f"{centered.shape[1]} samples but {proj.shape[1]} projections"
        )
    if not rho > 0:
        raise NumericDomainError(f"residual variance rho={rho!r} must be positive")
    # Pythagoras: the projection is orthogonal
    residual = np.sum(centered**2, axis=0) - np.sum(proj**2, axis=0)
    return residual / rho


def normalization_term(
    eigenvalues: np.ndarray, n_components: int, normalize: bool = True
) -> float:
    """
    Log partition constant of the two Gaussians: an M-dimensional one
    with covariance diag(eigenvalues[:M]) and an isotropic one with
    variance rho over the remaining nEig - M dimensions.
    """
    if not normalize:
        return 0.0
    eigenvalues = np.asarray(eigenvalues, dtype=float)
    M = n_components
    n_eig = eigenvalues.shape[0]

    term = 0.0
    if M > 0:
        term += float(np.sum(np.log(_retained_sqrt(eigenvalues, M))))
        term += LOG_2PI * (M / 2.0)
    if n_eig > M:
        rho = residual_variance(eigenvalues, M)
        term += math.log(2 * math.pi * rho) * ((n_eig - M) / 2.0)
    return term


def pca_diffs_components(
    samples: np.ndarray,
    model: PCAModel,
    normalize: bool = False,
    *,
    projector: Projector = project_pca,
) -> PcaDiffs:
    """
    Evaluate DIFS, DFFS, the normalization term and the log-likelihood
    for each column of `samples` (D, N).
    """
    X = as_columns(samples, "samples", model.dim)
    check_finite(X, "samples")
    M, n_eig = model.n_components, model.n_eig
    N = X.shape[1]
    logger.debug("pca_diffs: D=%d M=%d nEig=%d N=%d", model.dim, M, n_eig, N)

    proj = np.asarray(projector(X, model.mean, model.eigenvectors), dtype=float)
    if proj.shape != (M, N):
        raise DimensionMismatchError(
            f"projector returned shape {proj.shape}, expected {(M, N)}"
        )

    try:
        with np.errstate(divide="raise", invalid="raise", over="raise"):
            d_in = difs(proj, model.eigenvalues)

            if n_eig > M:
                centered = X - model.mean[:, None]
                rho = residual_variance(model.eigenvalues, M)
                d_from = dffs(centered, proj, rho)
            else:
                d_from = np.zeros(N)

            norm = normalization_term(model.eigenvalues, M, normalize)
            log_prob = -0.5 * (d_in + d_from) - norm
    except FloatingPointError as e:
        raise NumericDomainError(str(e)) from e

    return PcaDiffs(d_in, d_from, norm, log_prob)


def pca_diffs(
    samples: np.ndarray,
    model: PCAModel,
    normalize: bool = False,
    log_prob: bool = True,
    *,
    projector: Projector = project_pca,
    out: Optional[np.ndarray] = None,
) -> np.ndarray:
    """
    Likelihood of each sample under the PCA subspace model.

    Parameters
    ----------
    samples : (D, N) ndarray
        Sample column vectors. A (D,) array is a single sample.
    model : PCAModel
        Mean, eigenvalues and retained eigenvectors.
    normalize : bool
        Include the Gaussian normalization term.
    log_prob : bool
        Return log-likelihoods; otherwise their exponential.
    projector : Projector
        Projection onto the eigenvector basis.
    out : ndarray | None
        Optional float buffer of N elements, shape (N,) or (1, N).
        Overwritten only on success.

    Returns
    -------
    probs : (N,) ndarray, or `out`
    """
    X = as_columns(samples, "samples", model.dim)
    N = X.shape[1]
    if out is not None:
        if not isinstance(out, np.ndarray):
            raise TypeError("out must be a NumPy ndarray or None")
        if out.size != N or out.ndim > 2 or (out.ndim == 2 and out.shape[0] != 1):
            raise DimensionMismatchError(
                f"out must hold {N} values as (N,) or (1, N), got {out.shape}"
            )
        if not np.issubdtype(out.dtype, np.floating):
            raise TypeError(f"out must have a floating dtype, got {out.dtype}")

    probs = pca_diffs_components(X, model, normalize, projector=projector).log_prob
    if not log_prob:
        try:
            with np.errstate(over="raise"):
                probs = np.exp(probs)
        except FloatingPointError as e:
            raise NumericDomainError(str(e)) from e

    if out is None:
        return probs
    out[...] = probs.reshape(out.shape)
    return out


def pca_diff(
    sample: np.ndarray,
    model: PCAModel,
    normalize: bool = False,
    log_prob: bool = True,
    *,
    projector: Projector = project_pca,
) -> float:
    """Likelihood of a single (D,) or (D, 1) sample."""
    x = as_columns(sample, "sample", model.dim)
    if x.shape[1] != 1:
        raise DimensionMismatchError(
            f"sample must be a single column, got shape {x.shape}"
        )
    return float(pca_diffs(x, model, normalize, log_prob, projector=projector)[0])


def observation_model(
    model: PCAModel,
    normalize: bool = False,
    log_prob: bool = True,
    *,
    projector: Projector = project_pca,
) -> Callable[[np.ndarray], np.ndarray]:
    """
    Bind `model` and the flags into a callable ``f(samples) -> probs``,
    e.g. the observation likelihood of a tracker that scores one batch
    of candidate patches per frame.
    """
    return functools.partial(
        pca_diffs,
        model=model,
        normalize=normalize,
        log_prob=log_prob,
        projector=projector,
    )
