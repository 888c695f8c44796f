"""Shared fixtures: seeded synthetic predictor tables"""

import numpy as np
import pandas as pd
import pytest


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def independent_frame(rng):
    """Five mutually uncorrelated variables"""
    values = rng.normal(size=(500, 5))
    return pd.DataFrame(values, columns=[f"v{i}" for i in range(1, 6)])


@pytest.fixture
def paired_frame(rng):
    """v2 is an exact linear transform of v1; v3, v4 independent"""
    n = 300
    v1 = rng.normal(size=n)
    return pd.DataFrame({
        "v1": v1,
        "v2": 2.0 * v1 + 3.0,
        "v3": rng.normal(size=n),
        "v4": rng.normal(size=n),
    })


@pytest.fixture
def collinear_frame(rng):
    """c is nearly a + b; d independent"""
    n = 400
    a = rng.normal(size=n)
    b = rng.normal(size=n)
    return pd.DataFrame({
        "a": a,
        "b": b,
        "c": a + b + 0.1 * rng.normal(size=n),
        "d": rng.normal(size=n),
    })


@pytest.fixture
def factor_frame(rng):
    """Eight variables driven by two latent factors with varying noise"""
    n = 400
    f1 = rng.normal(size=n)
    f2 = rng.normal(size=n)
    columns = {}
    for i, noise in enumerate([0.1, 0.3, 0.6, 1.0]):
        columns[f"f1_{i}"] = f1 + noise * rng.normal(size=n)
        columns[f"f2_{i}"] = f2 + noise * rng.normal(size=n)
    return pd.DataFrame(columns)


@pytest.fixture
def training_frame(paired_frame, rng):
    """Presence/background table with coordinates and a label column"""
    df = paired_frame.copy()
    n = len(df)
    df.insert(0, "x", rng.uniform(-10, 10, size=n))
    df.insert(1, "y", rng.uniform(40, 50, size=n))
    df.insert(2, "presence", rng.integers(0, 2, size=n))
    df["site"] = [f"s{i}" for i in range(n)]
    return df
