# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
pcadiffs
========

Probabilistic distance between points and a PCA subspace: the
distance-in-feature-space (DIFS) plus the distance-from-feature-space
(DFFS), combined into a Gaussian approximation of the log-likelihood.

Public API
~~~~~~~~~~
- Likelihood
    - `pca_diffs`, `pca_diff`, `pca_diffs_components`
    - `observation_model`
- Building blocks
    - `difs`, `dffs`, `normalization_term`, `residual_variance`
- Models
    - `PCAModel`, `random_pca_model`
- Projections
    - `Projector`, `project_pca`, `back_project_pca`
- Errors
    - `PcaDiffsError`, `DimensionMismatchError`, `NumericDomainError`

Everything else lives in sub-modules and is **not** considered part of the
stable interface.

Example
-------
>>> import numpy as np, pcadiffs as pcd
>>> model = pcd.PCAModel(np.zeros(3), [4.0, 1.0, 0.25], np.eye(3)[:2])
>>> float(pcd.pca_diff(np.array([2.0, 1.0, 0.5]), model))
-1.5
"""

from importlib.metadata import version as _pkg_version

from .diffs import (
    PcaDiffs,
    dffs,
    difs,
    normalization_term,
    observation_model,
    pca_diff,
    pca_diffs,
    pca_diffs_components,
    residual_variance,
)
from .errors import DimensionMismatchError, NumericDomainError, PcaDiffsError
from .model import PCAModel, random_pca_model
from .projections import Projector, back_project_pca, project_pca
from .utils import EPS, scale_tol

__all__ = [
    "pca_diffs",
    "pca_diff",
    "pca_diffs_components",
    "PcaDiffs",
    "observation_model",
    "difs",
    "dffs",
    "normalization_term",
    "residual_variance",
    "PCAModel",
    "random_pca_model",
    "Projector",
    "project_pca",
    "back_project_pca",
    "PcaDiffsError",
    "DimensionMismatchError",
    "NumericDomainError",
    "EPS",
    "scale_tol",
]

# ---------------------------------------------------------------------
# Version string (helps “pip show pcadiffs”, Sphinx, etc.)
# ---------------------------------------------------------------------
try:  # installed via pip / build backend
    __version__ = _pkg_version(__name__)
except Exception:  # running from a checkout
    __version__ = "0.0.0.dev0"

# ---------------------------------------------------------------------
# Lightweight default logging config so users see warnings
# only if they deliberately enable them.
# ---------------------------------------------------------------------
import logging as _logging

_logging.getLogger(__name__).addHandler(_logging.NullHandler())
