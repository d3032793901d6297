# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging

import numpy as np
import pytest

from pcadiffs.errors import DimensionMismatchError, NumericDomainError
from pcadiffs.model import PCAModel, random_pca_model


def test_column_inputs_are_flattened():
    model = PCAModel(np.zeros((3, 1)), np.array([[3.0], [2.0], [1.0]]), np.eye(3)[:2])
    assert model.mean.shape == (3,)
    assert model.eigenvalues.shape == (3,)
    assert (model.dim, model.n_components, model.n_eig) == (3, 2, 3)
    np.testing.assert_allclose(model.retained_eigenvalues, [3.0, 2.0])
    np.testing.assert_allclose(model.discarded_eigenvalues, [1.0])
    assert model.rho == 1.0


def test_rho_is_none_for_full_basis():
    model = PCAModel(np.zeros(2), [2.0, 1.0], np.eye(2))
    assert model.rho is None


def test_model_arrays_are_read_only():
    src = np.array([1.0, 2.0])
    model = PCAModel(src, [2.0, 1.0], np.eye(2)[:1])
    src[0] = 10.0
    assert model.mean[0] == 1.0
    with pytest.raises(ValueError):
        model.mean[0] = 5.0
    with pytest.raises(AttributeError):
        model.mean = np.zeros(2)


def test_empty_basis():
    model = PCAModel(np.zeros(4), [1.0, 1.0], [])
    assert model.eigenvectors.shape == (0, 4)
    assert model.n_components == 0


def test_zero_dimensional_basis_keeps_rows():
    model = PCAModel(np.zeros(0), [1.0, 1.0], np.zeros((2, 0)))
    assert model.eigenvectors.shape == (2, 0)
    assert model.n_components == 2


@pytest.mark.parametrize(
    "mean,eigenvalues,eigenvectors",
    [
        (np.zeros(3), [3.0, 2.0, 1.0], np.eye(4)[:2]),  # D mismatch
        (np.zeros(3), [3.0], np.eye(3)[:2]),  # M > nEig
        (np.zeros((3, 3)), [3.0, 2.0], np.eye(3)[:2]),  # mean not a vector
        (np.zeros(3), [3.0, 2.0], np.zeros(3)),  # basis not a matrix
        (np.zeros(3), [2.0, 1.0], np.zeros((2, 0))),  # basis has no columns
    ],
)
def test_shape_validation(mean, eigenvalues, eigenvectors):
    with pytest.raises(DimensionMismatchError):
        PCAModel(mean, eigenvalues, eigenvectors)


def test_ascending_eigenvalues_rejected():
    with pytest.raises(DimensionMismatchError, match="out of order"):
        PCAModel(np.zeros(3), [1.0, 2.0, 3.0], np.eye(3)[:1])
    # ties are fine, and the check can be turned off
    PCAModel(np.zeros(3), [2.0, 2.0, 1.0], np.eye(3)[:1])
    PCAModel(np.zeros(3), [1.0, 2.0, 3.0], np.eye(3)[:1], check_order=False)


def test_negative_eigenvalue_rejected():
    with pytest.raises(NumericDomainError):
        PCAModel(np.zeros(2), [1.0, -0.5], np.eye(2)[:1])


def test_nonfinite_rejected():
    with pytest.raises(NumericDomainError):
        PCAModel(np.array([0.0, np.inf]), [1.0, 0.5], np.eye(2)[:1])


def test_non_orthonormal_basis_warns(caplog):
    V = np.array([[1.0, 1.0, 0.0]])
    with caplog.at_level(logging.WARNING, logger="pcadiffs.model"):
        PCAModel(np.zeros(3), [2.0, 1.0], V, check_orthonormal=True)
    assert "not orthonormal" in caplog.text


def test_truncate():
    model = random_pca_model(6, 4, seed=0)
    small = model.truncate(1)
    assert small.n_components == 1
    assert small.n_eig == 6
    np.testing.assert_allclose(small.eigenvectors, model.eigenvectors[:1])
    assert small.rho == pytest.approx(np.mean(model.eigenvalues[1:]))
    with pytest.raises(DimensionMismatchError):
        model.truncate(5)


def test_random_model_is_orthonormal():
    model = random_pca_model(8, 5, n_eig=7, seed=3)
    V = model.eigenvectors
    assert np.allclose(V @ V.T, np.eye(5), atol=1e-10)
    assert np.all(np.diff(model.eigenvalues) <= 0)
    assert model.n_eig == 7


def test_truncate_keeps_validation_flags(caplog):
    V = np.array([[1.0, 1.0, 0.0], [0.0, 0.0, 1.0]])
    model = PCAModel(np.zeros(3), [2.0, 1.0, 0.5], V, check_orthonormal=True)

    caplog.clear()
    with caplog.at_level(logging.WARNING, logger="pcadiffs.model"):
        small = model.truncate(1)
    assert small.check_orthonormal
    assert small.check_order
    assert "not orthonormal" in caplog.text
