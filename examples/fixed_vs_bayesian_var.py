import numpy as np
import pandas as pd

from macroeconometrics import (
    VAR,
    ChainBuilder,
    Dataset,
    FixedEstimated,
    FrequentistEstimated,
    predictive_draws,
    simulate_path,
)
from macroeconometrics.var import lag_matrix


def _toy_data(t: int = 80, seed: int = 0) -> Dataset:
    rng = np.random.default_rng(seed)
    a = np.array([[0.6, 0.1], [0.2, 0.4]])
    y = np.zeros((t, 2))
    for i in range(1, t):
        y[i] = 0.1 + a @ y[i - 1] + 0.5 * rng.standard_normal(2)
    idx = pd.period_range("2000Q1", periods=t, freq="Q")
    return Dataset.from_arrays(values=y, variables=["gdp", "infl"], time_index=idx)


def _ols(ds: Dataset, p: int) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    x = np.concatenate([np.ones((ds.T - p, 1)), lag_matrix(ds.values, p)], axis=1)
    yt = ds.values[p:]
    coef, *_ = np.linalg.lstsq(x, yt, rcond=None)
    resid = yt - x @ coef
    sigma = resid.T @ resid / (yt.shape[0] - x.shape[1])
    return coef[0], coef[1:].T, 0.5 * (sigma + sigma.T)


def main() -> None:
    ds = _toy_data()
    p = 1
    b0, B, sigma = _ols(ds, p)

    ols_model = VAR(
        n=ds.N,
        p=p,
        B=FrequentistEstimated(B, metadata={"method": "ols"}),
        b0=FrequentistEstimated(b0),
        Sigma=FrequentistEstimated(sigma),
        data=ds,
    )
    print("OLS VAR stationary:", ols_model.is_stationary())

    # stand-in for a sampler: two chains of perturbed coefficient draws
    rng = np.random.default_rng(123)
    builder = ChainBuilder(2, metadata={"warnings": []})
    for c in range(2):
        draws = B[:, :, None] + 0.02 * rng.standard_normal(B.shape + (200,))
        builder.add_chain(draws, index=c)
    B_post = builder.build()

    bayes_model = ols_model.with_parameters(B=B_post, b0=FixedEstimated(b0))
    print("posterior mean of B:\n", B_post.mean())

    path = simulate_path(bayes_model, 8, rng=rng, draw=0, chain=0)
    print("one simulated path:", path.shape)

    pred = predictive_draws(bayes_model, 8, rng=rng)
    print("predictive draws:", pred.shape)
    print("predictive median at h=8:", pred.quantile(0.5)[-1])


if __name__ == "__main__":
    main()
