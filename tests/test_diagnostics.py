import numpy as np
import pytest

from palatini import HiggsPalatini, HiggsPalatiniGaugeScalars, consistency_report, report_passed, sample_grid

PHI_SAMPLES = np.array([[-3.0, -1.0, -0.2, 0.0, 0.1, 0.7, 2.5]])


class _ScaledGradient(HiggsPalatini):
    factor = 2.0

    def inflaton_deriv(self, fields):
        return self.factor * super().inflaton_deriv(fields)


class _DroppedBosonGradient(HiggsPalatiniGaugeScalars):
    def boson_deriv(self, k, fields):
        return np.zeros_like(fields[k])


def _single_source(xi: float) -> dict:
    return {"xi": xi, "Lambda": 0.1, "initial_amplitudes": [0.5]}


def test_tiny_but_correct_derivatives_pass():
    model = HiggsPalatini(_single_source(1e-6))
    report = consistency_report(model, PHI_SAMPLES)
    assert report_passed(report), report


@pytest.mark.parametrize("xi, factor", [(1e-6, 2.0), (1.0, 1.0001)])
def test_wrong_inflaton_gradient_fails(monkeypatch, xi, factor):
    monkeypatch.setattr(_ScaledGradient, "factor", factor)
    model = _ScaledGradient(_single_source(xi))
    report = consistency_report(model, PHI_SAMPLES)
    assert not report["phi"]["gradient"]["passed"]
    assert report["phi"]["gradient"]["max_rel_err"] > 1e-5
    assert not report_passed(report)


def test_missing_boson_gradient_fails_at_weak_coupling():
    model = _DroppedBosonGradient({"xi": 2.0, "Lambda": 0.25, "g": 3e-4, "gz": 3e-4})
    report = consistency_report(model, sample_grid(model, (-1.5, -0.4, 0.0, 0.3, 1.2)))
    for name in ("W+", "W-", "Z0"):
        assert not report[name]["gradient"]["passed"], report[name]
    assert report["phi"]["gradient"]["passed"]
    assert not report_passed(report)


def test_vanishing_couplings_pass_with_exact_zeros():
    model = HiggsPalatiniGaugeScalars({"xi": 2.0, "Lambda": 0.25, "g": 0.0, "gz": 0.0})
    report = consistency_report(model, sample_grid(model, (-1.5, 0.0, 1.2)))
    assert report_passed(report), report
    assert report["W+"]["gradient"]["max_abs_err"] == 0.0
