import math

import numpy as np
import pytest

from palatini import HiggsPalatini, HiggsPalatiniGaugeScalars, consistency_report, report_passed, sample_grid

GRID_VALUES = (-1.5, -0.4, 0.0, 0.3, 1.2)


def _source(xi: float = 2.0, Lambda: float = 0.25, g: float = 0.6, gz: float = 0.8, **extra) -> dict:
    values = {"xi": xi, "Lambda": Lambda, "g": g, "gz": gz}
    values.update(extra)
    return values


@pytest.mark.parametrize("xi, Lambda", [(0.5, 0.1), (2.0, 1.0), (1.0, 0.25)])
def test_gradient_and_hessian_match_finite_differences(xi, Lambda):
    model = HiggsPalatiniGaugeScalars(_source(xi, Lambda))
    report = consistency_report(model, sample_grid(model, GRID_VALUES), step=1e-4)
    assert report_passed(report), report


def test_zero_field_baseline_is_exactly_zero():
    model = HiggsPalatiniGaugeScalars(_source())
    zeros = [0.0, 0.0, 0.0, 0.0]
    for i in range(model.n_pot_terms):
        assert float(model.potential_term(i, zeros)) == 0.0
    for i in range(model.n_scalars):
        assert float(model.pot_deriv(i, zeros)) == 0.0
    for i in range(1, model.n_scalars):
        assert float(model.pot_deriv2(i, zeros)) == 0.0


def test_bosons_vanish_when_inflaton_at_origin():
    model = HiggsPalatiniGaugeScalars(_source())
    fields = [0.0, 0.7, -1.1, 0.4]
    for i in range(1, 4):
        assert float(model.potential_term(i, fields)) == 0.0
        assert float(model.pot_deriv(i, fields)) == 0.0
        assert float(model.pot_deriv2(i, fields)) == 0.0


def test_boson_terms_match_closed_form():
    xi, Lambda, g, gz = 2.0, 0.25, 0.6, 0.8
    model = HiggsPalatiniGaugeScalars(_source(xi, Lambda, g, gz))
    phi, w_plus, w_minus, z0 = 0.35, 0.9, -0.5, 1.3
    s = math.sqrt(xi) * phi
    envelope = xi / Lambda * math.tanh(s) ** 2 / math.cosh(s) ** 2
    fields = [phi, w_plus, w_minus, z0]
    assert float(model.potential_term(1, fields)) == pytest.approx(0.5 * envelope * g ** 2 * w_plus ** 2, rel=1e-13)
    assert float(model.potential_term(2, fields)) == pytest.approx(0.5 * envelope * g ** 2 * w_minus ** 2, rel=1e-13)
    assert float(model.potential_term(3, fields)) == pytest.approx(0.5 * envelope * gz ** 2 * z0 ** 2, rel=1e-13)
    assert float(model.pot_deriv(3, fields)) == pytest.approx(envelope * gz ** 2 * z0, rel=1e-13)
    assert float(model.pot_deriv2(1, fields)) == pytest.approx(envelope * g ** 2, rel=1e-13)


def test_inflaton_derivative_uses_scaled_argument():
    # the mixing term depends on cosh(2 sqrt(xi) phi), not cosh(2 phi)
    xi, Lambda, g, gz = 9.0, 0.5, 0.6, 0.8
    model = HiggsPalatiniGaugeScalars(_source(xi, Lambda, g, gz))
    phi, chis = 0.2, (0.4, -0.3, 0.5)
    s = math.sqrt(xi) * phi
    bosons = g ** 2 * (chis[0] ** 2 + chis[1] ** 2) + gz ** 2 * chis[2] ** 2
    factor = 0.5 * math.sqrt(xi) / Lambda * math.tanh(s) / math.cosh(s) ** 4
    expected = factor * (xi * (3.0 - math.cosh(2.0 * s)) * bosons + 8.0 * Lambda * math.sinh(s) ** 2)
    assert float(model.pot_deriv(0, [phi, *chis])) == pytest.approx(expected, rel=1e-12)


def test_inflaton_hessian_matches_closed_form():
    xi, Lambda, g, gz = 2.0, 0.4, 0.5, 0.7
    model = HiggsPalatiniGaugeScalars(_source(xi, Lambda, g, gz))
    phi, chis = -0.45, (0.3, 0.6, -0.2)
    s = math.sqrt(xi) * phi
    bosons = g ** 2 * (chis[0] ** 2 + chis[1] ** 2) + gz ** 2 * chis[2] ** 2
    term1 = (math.cosh(2 * s) - 10 * math.tanh(s) ** 2) * xi * bosons
    term2 = -4 * Lambda * (math.cosh(2 * s) - 4) * math.tanh(s) ** 2
    expected = xi / Lambda / math.cosh(s) ** 4 * (term1 + term2)
    assert float(model.pot_deriv2(0, [phi, *chis])) == pytest.approx(expected, rel=1e-12)


def test_inflaton_self_term_matches_single_field_model():
    gauge = HiggsPalatiniGaugeScalars(_source(xi=1.5, Lambda=0.3))
    single = HiggsPalatini({"xi": 1.5, "Lambda": 0.3, "initial_amplitudes": [0.0]})
    phi = np.linspace(-2.0, 2.0, 11)
    zeros = np.zeros_like(phi)
    np.testing.assert_allclose(gauge.potential_term(0, [phi, zeros, zeros, zeros]), single.potential_term(0, [phi]))
    np.testing.assert_allclose(gauge.pot_deriv(0, [phi, zeros, zeros, zeros]), single.pot_deriv(0, [phi]))
    np.testing.assert_allclose(gauge.pot_deriv2(0, [phi, zeros, zeros, zeros]), single.pot_deriv2(0, [phi]))


def test_default_homogeneous_state_is_zero():
    model = HiggsPalatiniGaugeScalars(_source())
    assert model.fields.amplitudes == (0.0, 0.0, 0.0, 0.0)
    assert model.fields.momenta == (0.0, 0.0, 0.0, 0.0)
    assert model.initial_potential == 0.0


def test_short_amplitude_list_is_zero_padded():
    model = HiggsPalatiniGaugeScalars(_source(initial_amplitudes=[0.3]))
    assert model.fields.amplitudes == (0.3, 0.0, 0.0, 0.0)
    assert model.initial_potential == pytest.approx(math.tanh(math.sqrt(2.0) * 0.3) ** 4)


@pytest.mark.slow
def test_dense_consistency_sweep():
    values = np.linspace(-2.0, 2.0, 9)
    for xi in (0.25, 1.0, 3.0):
        for Lambda in (0.05, 0.5, 5.0):
            for g, gz in ((0.0, 0.0), (0.3, 1.1), (1.2, 0.4)):
                model = HiggsPalatiniGaugeScalars(_source(xi, Lambda, g, gz))
                report = consistency_report(model, sample_grid(model, values), step=1e-4)
                assert report_passed(report), (xi, Lambda, g, gz, report)


TAIL_ARGUMENTS = np.array([-20.0, -9.0, 8.0, 12.0, 25.0])
BOSON_VALUES = np.array([-1.2, 0.5, 2.0])


@pytest.mark.parametrize("xi, Lambda", [(2.0, 0.25), (1.0e4, 1.0e2)])
def test_consistency_in_saturating_tail(xi, Lambda):
    model = HiggsPalatiniGaugeScalars(_source(xi, Lambda))
    sqrt_xi = model.params.sqrt_xi
    grid = np.meshgrid(TAIL_ARGUMENTS / sqrt_xi, BOSON_VALUES, BOSON_VALUES, BOSON_VALUES, indexing="ij")
    samples = np.array(grid).reshape(4, -1)
    # boson terms are quadratic in each boson, so a wide boson step is exact
    report = consistency_report(model, samples, step=[2e-3 / sqrt_xi, 0.1, 0.1, 0.1])
    assert report_passed(report), report
    hessian = model.pot_deriv2(0, samples)
    assert np.all(np.isfinite(hessian))
