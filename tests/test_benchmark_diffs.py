# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import numpy as np

from pcadiffs import benchmark_diffs


def test_vector_matches_loop(monkeypatch):
    monkeypatch.setattr(benchmark_diffs, "SIZES", [(16, 4, 20), (30, 30, 5)])
    df = benchmark_diffs.run(repeats=1, seed=0)
    assert len(df) == 2
    assert np.all(df["max abs err"] < 1e-9)
    assert np.all(df["loop sec"] > 0)
