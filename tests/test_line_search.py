import numpy as np
import pytest

from runtime.steppers.line_search import backtracking_line_search


def quadratic(x):
    return 0.5 * float(x @ x)


def test_full_step_accepted_and_grown():
    x = np.array([1.0, 0.0, 0.0])
    success, step, x_new, energy = backtracking_line_search(
        x, -x, x, 1.0, quadratic
    )
    assert success
    assert step == pytest.approx(1.5)
    assert np.allclose(x_new, 0.0)
    assert energy == 0.0
    assert np.array_equal(x, [1.0, 0.0, 0.0])


def test_step_growth_is_capped():
    x = np.array([1.0, 0.0])
    success, step, _, _ = backtracking_line_search(
        x, -x, x, 0.1, quadratic, gamma=100.0, alpha_max_factor=2.0
    )
    assert success
    assert step == pytest.approx(0.2)


def test_backtracks_until_armijo_holds():
    x = np.array([1.0])
    calls = []

    def energy(y):
        calls.append(float(y[0]))
        return quadratic(y)

    # A step of 4 overshoots to -3; halving twice lands on 0.
    success, step, x_new, _ = backtracking_line_search(
        x, -x, x, 4.0, energy, energy0=0.5
    )
    assert success
    assert calls == [-3.0, -1.0, 0.0]
    assert np.allclose(x_new, [0.0])
    assert step == pytest.approx(1.5)


def test_non_descent_direction_is_rejected():
    x = np.array([1.0, 2.0])
    success, step, x_new, energy = backtracking_line_search(
        x, x, x, 1.0, quadratic
    )
    assert not success
    assert step == 1.0
    assert x_new is x
    assert energy == pytest.approx(2.5)


@pytest.mark.parametrize("max_iter", [1, 4, 30])
def test_failure_returns_start_and_shrinks_step(max_iter):
    x = np.array([1.0])
    success, step, x_new, energy = backtracking_line_search(
        x, -x, x, 1.0, lambda y: 1.0 + float(np.abs(y - x).sum()), max_iter=max_iter
    )
    assert not success
    assert step == pytest.approx(0.5)
    assert x_new is x
    assert energy == 1.0


def test_non_finite_trial_energy_is_rejected():
    x = np.array([1.0])

    def barrier(y):
        return np.inf if y[0] < 0.5 else quadratic(y)

    success, _, x_new, energy = backtracking_line_search(x, -x, x, 1.0, barrier)
    assert success
    assert x_new[0] == pytest.approx(0.5)
    assert energy == pytest.approx(0.125)
