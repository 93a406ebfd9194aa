import logging

import numpy as np
import pandas as pd
import pytest

from macroeconometrics import (
    VAR,
    BayesianEstimated,
    CovarianceError,
    Dataset,
    DimensionMismatch,
    FixedEstimated,
    FrequentistEstimated,
    IrregularSpacingError,
    ShapeMismatch,
    ValidationConfig,
    stack_chains,
)


def _dataset(t: int = 3, n: int = 2, *, time_index: object = None, seed: int = 0) -> Dataset:
    rng = np.random.default_rng(seed)
    return Dataset.from_arrays(values=rng.standard_normal((t, n)), time_index=time_index)


def _fixed_var(**overrides: object) -> VAR:
    kwargs: dict[str, object] = dict(
        n=2,
        p=1,
        B=FixedEstimated(np.array([[0.5, 0.1], [0.2, 0.3]])),
        b0=FixedEstimated(np.zeros(2)),
        Sigma=FixedEstimated(np.eye(2)),
        data=_dataset(),
    )
    kwargs.update(overrides)
    return VAR(**kwargs)  # type: ignore[arg-type]


def test_fixed_var_step_without_disturbance() -> None:
    model = _fixed_var()
    out = model.step(np.array([1.0, 1.0]), np.zeros(2))
    assert np.allclose(out, model.B.value @ np.array([1.0, 1.0]))


def test_step_adds_intercept_and_disturbance() -> None:
    model = _fixed_var(b0=FixedEstimated(np.array([1.0, 2.0])))
    out = model.step(np.array([1.0, 0.0]), np.array([0.1, 0.2]))
    assert np.allclose(out, np.array([1.0 + 0.5 + 0.1, 2.0 + 0.2 + 0.2]))


def test_step_wrong_lengths() -> None:
    model = _fixed_var()
    with pytest.raises(DimensionMismatch):
        model.step(np.ones(3), np.zeros(2))
    with pytest.raises(DimensionMismatch):
        model.step(np.ones(2), np.zeros(1))


def test_b_with_wrong_shape_raises() -> None:
    with pytest.raises(DimensionMismatch):
        _fixed_var(B=FixedEstimated(np.zeros((2, 3))))


def test_other_parameter_shapes() -> None:
    with pytest.raises(DimensionMismatch):
        _fixed_var(b0=FixedEstimated(np.zeros(3)))
    with pytest.raises(DimensionMismatch):
        _fixed_var(Sigma=FixedEstimated(np.eye(3)))


@pytest.mark.parametrize("n, p", [(0, 1), (-1, 1), (2, -1), (2.0, 1), (True, 1)])
def test_invalid_dimensions(n: object, p: object) -> None:
    with pytest.raises(DimensionMismatch):
        _fixed_var(n=n, p=p)


def test_data_width_and_length() -> None:
    with pytest.raises(DimensionMismatch):
        _fixed_var(data=_dataset(t=5, n=3))
    with pytest.raises(DimensionMismatch):
        _fixed_var(data=_dataset(t=1))


def test_irregular_timestamps_raise() -> None:
    data = _dataset(t=4, time_index=[0, 1, 2, 4])
    with pytest.raises(IrregularSpacingError) as excinfo:
        _fixed_var(data=data)
    assert excinfo.value.position == 2


def test_regular_calendar_index_and_dataframe_input() -> None:
    idx = pd.date_range("2001-01-01", periods=6, freq="QS")
    df = pd.DataFrame(np.random.default_rng(1).standard_normal((6, 2)), index=idx, columns=["gdp", "infl"])
    model = _fixed_var(data=df)
    assert model.variables == ["gdp", "infl"]
    assert model.nobs == 6
    assert model.time_index.equals(idx)


def test_data_is_referenced_not_copied() -> None:
    data = _dataset()
    model = _fixed_var(data=data)
    assert model.data is data


def test_raw_arrays_are_treated_as_fixed() -> None:
    model = _fixed_var(B=np.eye(2), b0=[0.0, 0.0], Sigma=np.eye(2))
    assert isinstance(model.B, FixedEstimated)
    assert isinstance(model.b0, FixedEstimated)


def test_model_is_immutable() -> None:
    model = _fixed_var()
    with pytest.raises(AttributeError):
        model.p = 2  # type: ignore[misc]


def test_with_parameters_returns_validated_copy() -> None:
    model = _fixed_var()
    refit = model.with_parameters(B=FrequentistEstimated(np.zeros((2, 2)), metadata={"se": 0.1}))
    assert refit is not model
    assert isinstance(refit.B, FrequentistEstimated)
    assert isinstance(model.B, FixedEstimated)
    with pytest.raises(DimensionMismatch):
        model.with_parameters(B=np.zeros((2, 3)))


def test_sigma_must_be_psd() -> None:
    with pytest.raises(CovarianceError):
        _fixed_var(Sigma=FixedEstimated(np.array([[1.0, 2.0], [2.0, 1.0]])))
    with pytest.raises(CovarianceError):
        _fixed_var(Sigma=FixedEstimated(np.array([[1.0, 0.5], [0.0, 1.0]])))


def test_sigma_check_can_be_disabled() -> None:
    cfg = ValidationConfig(check_covariance=False)
    model = _fixed_var(Sigma=FixedEstimated(np.array([[1.0, 2.0], [2.0, 1.0]])), config=cfg)
    assert model.config is cfg


def test_every_sigma_draw_is_checked() -> None:
    draws = np.stack([np.eye(2), np.eye(2), -np.eye(2)], axis=-1)
    with pytest.raises(CovarianceError, match="draw 2"):
        _fixed_var(Sigma=BayesianEstimated(draws))


def test_p_zero_model() -> None:
    model = VAR(
        n=2,
        p=0,
        B=FixedEstimated(np.zeros((2, 0))),
        b0=FixedEstimated(np.array([1.0, 2.0])),
        Sigma=FixedEstimated(np.eye(2)),
        data=_dataset(t=1),
    )
    assert np.allclose(model.step(np.empty(0), np.zeros(2)), [1.0, 2.0])
    assert model.lag_vector(1).shape == (0,)
    assert model.is_stationary()


def test_lag_vector() -> None:
    values = np.arange(12, dtype=float).reshape(6, 2)
    data = Dataset.from_arrays(values=values)
    model = VAR(
        n=2,
        p=2,
        B=np.zeros((2, 4)),
        b0=np.zeros(2),
        Sigma=np.eye(2),
        data=data,
    )
    assert np.array_equal(model.lag_vector(2), np.array([2.0, 3.0, 0.0, 1.0]))
    assert np.array_equal(model.lag_vector(6), np.array([10.0, 11.0, 8.0, 9.0]))
    with pytest.raises(IndexError):
        model.lag_vector(1)


def _bayesian_var(n_draws: int = 20, *, seed: int = 0) -> VAR:
    rng = np.random.default_rng(seed)
    B = BayesianEstimated(0.1 * rng.standard_normal((2, 2, n_draws)), metadata={"warnings": []})
    b0 = BayesianEstimated(rng.standard_normal((2, n_draws)))
    sigma = BayesianEstimated(np.repeat(np.eye(2)[:, :, None], n_draws, axis=2))
    return VAR(n=2, p=1, B=B, b0=b0, Sigma=sigma, data=_dataset(t=10))


def test_bayesian_step_uses_selected_draw() -> None:
    model = _bayesian_var()
    y_lags = np.array([1.0, -1.0])
    assert model.is_bayesian
    for d in (0, 7, 19):
        out = model.step(y_lags, np.zeros(2), draw=d)
        assert np.allclose(out, model.b0.draw(d) + model.B.draw(d) @ y_lags)


def test_bayesian_step_requires_draw() -> None:
    model = _bayesian_var()
    with pytest.raises(ValueError):
        model.step(np.ones(2), np.zeros(2))


def test_chain_stacked_parameters() -> None:
    rng = np.random.default_rng(3)
    B = stack_chains([0.1 * rng.standard_normal((2, 2, 5)) for _ in range(3)])
    model = _fixed_var(B=B)
    b0, B1, sigma = model.parameters(draw=4, chain=2)
    assert np.array_equal(B1, B.value[:, :, 4, 2])
    assert np.array_equal(b0, np.zeros(2))
    assert np.array_equal(sigma, np.eye(2))
    assert model.companion(draw=0, chain=1).shape == (2, 2)


def test_mixed_fixed_and_bayesian_parameters() -> None:
    rng = np.random.default_rng(4)
    B = BayesianEstimated(0.1 * rng.standard_normal((2, 2, 8)))
    model = _fixed_var(B=B, b0=FrequentistEstimated(np.array([0.5, -0.5])))
    out = model.step(np.array([1.0, 2.0]), np.zeros(2), draw=3)
    assert np.allclose(out, np.array([0.5, -0.5]) + B.draw(3) @ np.array([1.0, 2.0]))


def test_sampled_parameters_must_share_draw_layout() -> None:
    rng = np.random.default_rng(5)
    B = BayesianEstimated(0.1 * rng.standard_normal((2, 2, 10)))
    with pytest.raises(ShapeMismatch):
        _fixed_var(B=B, b0=BayesianEstimated(rng.standard_normal((2, 5))))

    stacked = stack_chains([0.1 * rng.standard_normal((2, 2, 5)) for _ in range(2)])
    with pytest.raises(ShapeMismatch):
        _fixed_var(B=stacked, b0=BayesianEstimated(rng.standard_normal((2, 10))))

    model = _fixed_var(B=B, b0=BayesianEstimated(rng.standard_normal((2, 10))))
    assert model.B.n_draws == model.b0.n_draws == 10


def test_construction_logs_at_debug(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="macroeconometrics.model"):
        _fixed_var()
    assert any("constructed VAR(n=2, p=1)" in r.getMessage() for r in caplog.records)
