import pytest
import numpy as np
import pandas as pd

# Use non-interactive backend for tests
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

import statsmodels.api as sm
import statsmodels.formula.api as smf


@pytest.fixture(scope="session")
def seed():
    return 42


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close('all')


@pytest.fixture
def classification_df(seed):
    """
    100 rows, 4 numeric predictors and a binary categorical response.
    """
    rng = np.random.default_rng(seed)
    n = 100

    df = pd.DataFrame({
        "x1": rng.normal(0.0, 3.0, size=n),
        "x2": rng.normal(0.0, 2.0, size=n),
        "x3": rng.normal(0.0, 1.0, size=n),
        "x4": rng.normal(0.0, 0.5, size=n),
    })
    df["label"] = np.where(df["x1"] + rng.normal(0.0, 1.0, size=n) > 0, "yes", "no")
    return df


@pytest.fixture
def regression_df(seed):
    rng = np.random.default_rng(seed)
    n = 80

    df = pd.DataFrame({
        "a": rng.normal(size=n),
        "b": rng.normal(size=n),
        "c": rng.normal(size=n),
        "segment": rng.choice(["north", "south", "east"], size=n),
    })
    df["target"] = 2.0 * df["a"] - df["b"] + rng.normal(0.0, 0.1, size=n)
    return df


@pytest.fixture
def logistic_df(seed):
    """
    Numeric predictors x1..x3, a 0/1 outcome and a non-numeric column.
    """
    rng = np.random.default_rng(seed)
    n = 150

    df = pd.DataFrame({
        "x1": rng.normal(size=n),
        "x2": rng.normal(size=n),
        "x3": rng.uniform(0.0, 5.0, size=n),
        "segment": rng.choice(["a", "b"], size=n),
    })
    eta = 0.5 + 1.2 * df["x1"] - 0.8 * df["x2"] + 0.1 * df["x3"]
    df["outcome"] = rng.binomial(1, 1.0 / (1.0 + np.exp(-eta)))
    return df


@pytest.fixture
def logistic_results(logistic_df):
    return smf.glm("outcome ~ x1 + x2 + x3", data=logistic_df, family=sm.families.Binomial()).fit()


@pytest.fixture
def write_yaml(tmp_path):
    import yaml
    def _write(cfg, name="plots.yaml"):
        p = tmp_path / name
        with open(p, "w") as f:
            yaml.safe_dump(cfg, f, default_flow_style=False)
        return str(p)
    return _write
