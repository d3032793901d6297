#!/usr/bin/python3
# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Time the vectorised pca_diffs against a column-by-column loop.

    python -m pcadiffs.benchmark_diffs --repeats 5 --csv bench_results.csv
"""

import argparse
import logging
import time

import numpy as np
import pandas as pd

from .diffs import pca_diff, pca_diffs
from .model import random_pca_model

logger = logging.getLogger(__name__)

# (D, M, N): feature size 24x24 patches, 1000 particles, as a tracker would
SIZES = [(64, 8, 100), (576, 16, 1000), (576, 64, 1000), (2048, 32, 200)]


def wall(f, *args, **kwargs):
    t0 = time.perf_counter()
    f(*args, **kwargs)
    return time.perf_counter() - t0


def column_loop(X, model, normalize=False):
    return np.array(
        [pca_diff(X[:, n], model, normalize) for n in range(X.shape[1])]
    )


def run(repeats: int = 5, seed: int = 0) -> pd.DataFrame:
    rng = np.random.default_rng(seed)
    records = []
    for D, M, N in SIZES:
        model = random_pca_model(D, M, seed=seed)
        X = model.mean[:, None] + rng.normal(size=(D, N))
        logger.debug("benchmarking D=%d M=%d N=%d", D, M, N)

        # reference
        t_loop = min(wall(column_loop, X, model, True) for _ in range(repeats))
        ref = column_loop(X, model, True)

        t_vec = min(wall(pca_diffs, X, model, True) for _ in range(repeats))
        got = pca_diffs(X, model, True)
        err = float(np.max(np.abs(got - ref)))

        records.append((f"{D}x{N}", M, t_loop, t_vec, t_loop / t_vec, err))

    return pd.DataFrame(
        records,
        columns=["samples", "M", "loop sec", "vector sec", "speedup", "max abs err"],
    )


def main():
    parser = argparse.ArgumentParser(
        description="Benchmark the DIFS/DFFS subspace likelihood."
    )
    parser.add_argument("--repeats", type=int, default=5, help="best of N runs")
    parser.add_argument("--seed", type=int, default=0, help="random seed")
    parser.add_argument("--csv", type=str, default=None, help="write results here")
    args = parser.parse_args()

    df = run(args.repeats, args.seed)
    print(df.to_markdown(index=False))

    if args.csv:
        df.to_csv(args.csv, index=False)


if __name__ == "__main__":
    main()
