import math

import numpy as np
import pytest

from palatini_utils.numerics import clamp_argument, sech, sech_sq

from .catalog import available_models, build_model, model_class
from .constants import REDUCED_PLANCK_MASS
from .diagnostics import effective_masses, sample_grid, suggest_mass_dt
from .errors import InvalidParameter, MissingParameter, ParameterError
from .fields import FieldConfiguration
from .higgs_palatini import HiggsPalatini
from .higgs_palatini_gauge_scalars import HiggsPalatiniGaugeScalars
from .params import (
    GaugeScalarParams,
    PalatiniParams,
    ParameterSource,
    RescalingPolicy,
    RunParams,
    derive_rescaling,
    load_model_config,
)


def _single_source(**overrides) -> dict:
    values = {"xi": 1.0, "Lambda": 0.5, "initial_amplitudes": [0.5]}
    values.update(overrides)
    return values


def _gauge_source(**overrides) -> dict:
    values = {"xi": 2.0, "Lambda": 0.25, "g": 0.6, "gz": 0.8}
    values.update(overrides)
    return values


def test_sech_matches_cosh_in_range():
    x = np.linspace(-20.0, 20.0, 81)
    np.testing.assert_allclose(sech(x), 1.0 / np.cosh(x), rtol=1e-14)
    np.testing.assert_allclose(sech_sq(x), 1.0 / np.cosh(x) ** 2, rtol=1e-13)


def test_sech_has_no_overflow_at_huge_argument():
    with np.errstate(over="raise"):
        values = sech(np.array([800.0, -1e6, np.inf]))
    np.testing.assert_array_equal(values, np.zeros(3))


def test_clamp_argument_reports_clipping():
    x, clipped = clamp_argument([1.0, -2.0], 5.0)
    assert not clipped
    np.testing.assert_array_equal(x, [1.0, -2.0])
    x, clipped = clamp_argument([1.0, -9.0], 5.0)
    assert clipped
    np.testing.assert_array_equal(x, [1.0, -5.0])


def test_source_decodes_scalars_and_sequences():
    source = ParameterSource({"xi": "4", "amps": [1, 2.5], "one": 3})
    assert source.get("xi") == 4.0
    assert source.get("absent", 0.0) == 0.0
    assert source.get_sequence("amps", 4) == (1.0, 2.5)
    assert source.get_sequence("one", 1) == (3.0,)
    assert source.get_sequence("absent", 2, (0.0,)) == (0.0,)
    assert "xi" in source and "nope" not in source


@pytest.mark.parametrize("value", [True, "abc", None, [1.0]])
def test_source_rejects_non_real_scalars(value):
    source = ParameterSource({"xi": value})
    with pytest.raises(InvalidParameter) as excinfo:
        source.get("xi")
    assert excinfo.value.key == "xi"


def test_source_rejects_long_sequences():
    source = ParameterSource({"initial_amplitudes": [0.1, 0.2]})
    with pytest.raises(InvalidParameter, match="at most 1"):
        source.get_sequence("initial_amplitudes", 1)


def test_missing_parameter_is_key_error_naming_key():
    with pytest.raises(KeyError) as excinfo:
        ParameterSource({}).get("Lambda")
    assert isinstance(excinfo.value, MissingParameter)
    assert isinstance(excinfo.value, ParameterError)
    assert excinfo.value.key == "Lambda"
    assert "Lambda" in str(excinfo.value)


@pytest.mark.parametrize(
    "kwargs, key",
    [
        ({"xi": 0.0, "Lambda": 1.0}, "xi"),
        ({"xi": -1.0, "Lambda": 1.0}, "xi"),
        ({"xi": math.inf, "Lambda": 1.0}, "xi"),
        ({"xi": 1.0, "Lambda": 0.0}, "Lambda"),
        ({"xi": 1.0, "Lambda": math.nan}, "Lambda"),
    ],
)
def test_palatini_params_domain(kwargs, key):
    with pytest.raises(InvalidParameter) as excinfo:
        PalatiniParams(**kwargs)
    assert excinfo.value.key == key
    assert "> 0" in excinfo.value.constraint


def test_gauge_params_domain():
    with pytest.raises(InvalidParameter) as excinfo:
        GaugeScalarParams(xi=1.0, Lambda=1.0, g=-0.1, gz=0.2)
    assert excinfo.value.key == "g"
    params = GaugeScalarParams(xi=1.0, Lambda=1.0, g=0.0, gz=0.0)
    assert params.couplings_sq == (0.0, 0.0, 0.0)


def test_gauge_params_require_couplings():
    with pytest.raises(MissingParameter) as excinfo:
        GaugeScalarParams.from_source(ParameterSource({"xi": 1.0, "Lambda": 1.0, "g": 0.5}))
    assert excinfo.value.key == "gz"


def test_params_are_frozen():
    params = PalatiniParams(xi=1.0, Lambda=1.0)
    with pytest.raises(AttributeError):
        params.xi = 2.0


def test_derive_rescaling_uses_reduced_planck_mass():
    rescaling = derive_rescaling(PalatiniParams(xi=10.0, Lambda=0.04))
    assert rescaling.f_star == REDUCED_PLANCK_MASS
    assert rescaling.alpha == 0.0
    assert rescaling.omega_star == pytest.approx(0.2 * REDUCED_PLANCK_MASS / 20.0, rel=1e-15)


def test_rescaling_policy_rejects_non_positive_scales():
    with pytest.raises(InvalidParameter):
        RescalingPolicy(f_star=1.0, omega_star=0.0, alpha=0.0)
    with pytest.raises(InvalidParameter):
        RescalingPolicy(f_star=math.inf, omega_star=1.0, alpha=0.0)


def test_run_params_validation():
    run = RunParams(dt="0.005")
    assert run.dt == 0.005
    with pytest.raises(InvalidParameter):
        RunParams(dt=0.0)


def test_field_configuration_pads_and_validates():
    cfg = FieldConfiguration(names=("phi", "chi"), amplitudes=(0.3,), momenta=())
    assert cfg.amplitudes == (0.3, 0.0)
    assert cfg.momenta == (0.0, 0.0)
    assert cfg.count == 2
    np.testing.assert_array_equal(cfg.homogeneous_values(), [0.3, 0.0])
    with pytest.raises(InvalidParameter):
        FieldConfiguration(names=("phi",), amplitudes=(0.1, 0.2), momenta=())
    with pytest.raises(InvalidParameter):
        FieldConfiguration(names=("phi",), amplitudes=(math.nan,), momenta=())


def test_field_configuration_from_source_defaults_momenta():
    source = ParameterSource({"initial_amplitudes": 0.25})
    cfg = FieldConfiguration.from_source(source, ("phi",))
    assert cfg.amplitudes == (0.25,)
    assert cfg.momenta == (0.0,)
    with pytest.raises(MissingParameter):
        FieldConfiguration.from_source(ParameterSource({}), ("phi",))
    cfg = FieldConfiguration.from_source(ParameterSource({}), ("a", "b"), require_amplitudes=False)
    assert cfg.amplitudes == (0.0, 0.0)


def test_catalog_lists_and_builds_models():
    assert {"higgs_palatini", "higgs_palatini_gauge_scalars"} <= set(available_models())
    assert model_class("higgs_palatini") is HiggsPalatini
    model = build_model("higgs_palatini_gauge_scalars", _gauge_source())
    assert isinstance(model, HiggsPalatiniGaugeScalars)
    assert (model.n_scalars, model.n_pot_terms) == (4, 4)
    with pytest.raises(KeyError, match="available"):
        build_model("phi4", _single_source())


def test_single_field_declares_counts_and_dt():
    model = HiggsPalatini(_single_source(), RunParams(dt=0.02))
    assert (model.n_scalars, model.n_pot_terms) == (1, 1)
    assert model.dt == 0.02
    assert model.field_names == ("phi",)


def test_term_index_and_field_count_checks():
    model = HiggsPalatini(_single_source())
    with pytest.raises(IndexError):
        model.potential_term(1, [0.1])
    with pytest.raises(IndexError):
        model.pot_deriv(-1, [0.1])
    with pytest.raises(ValueError):
        model.pot_deriv2(0, [0.1, 0.2])


def test_initial_potential_and_masses():
    model = HiggsPalatini(_single_source(initial_amplitudes=[0.5]))
    assert model.initial_potential == pytest.approx(math.tanh(0.5) ** 4, rel=1e-14)
    assert model.initial_masses_sq[0] == pytest.approx(float(model.pot_deriv2(0, [0.5])), rel=1e-14)
    summary = model.startup_summary()
    assert summary.startswith("[Model] higgs_palatini")
    assert "NScalars=1" in summary


def test_vectorised_evaluation_over_lattice():
    model = HiggsPalatiniGaugeScalars(_gauge_source())
    rng = np.random.default_rng(3)
    lattice = rng.normal(scale=0.5, size=(4, 3, 5))
    gradient = model.gradient(lattice)
    hessian = model.hessian_diagonal(lattice)
    assert gradient.shape == (4, 3, 5)
    assert hessian.shape == (4, 3, 5)
    np.testing.assert_array_equal(effective_masses(model, lattice), hessian)
    site = lattice[:, 1, 2]
    for i in range(4):
        assert gradient[i, 1, 2] == pytest.approx(float(model.pot_deriv(i, site)), rel=1e-12)
        assert hessian[i, 1, 2] == pytest.approx(float(model.pot_deriv2(i, site)), rel=1e-12)


def test_sample_grid_shape():
    model = HiggsPalatiniGaugeScalars(_gauge_source())
    grid = sample_grid(model, [0.0, 1.0])
    assert grid.shape == (4, 16)


def test_suggest_mass_dt():
    run = RunParams(dt=0.1, mass_limit=0.1)
    assert suggest_mass_dt(run, [4.0, -1.0]) == pytest.approx(0.05)
    assert suggest_mass_dt(run, [0.0, -3.0]) == 0.1
    assert suggest_mass_dt(run, np.array([[0.01, 0.04]])) == 0.1


def test_load_model_config(tmp_path):
    path = tmp_path / "model.yaml"
    path.write_text(
        "model: higgs_palatini\n"
        "run: {tag: t, dt: 0.05}\n"
        "params: {xi: 2.0, Lambda: 0.1, initial_amplitudes: [0.2]}\n",
        encoding="utf-8",
    )
    config = load_model_config(path)
    assert config.model == "higgs_palatini"
    assert config.run.dt == 0.05
    assert config.source.get("xi") == 2.0
    assert ParameterSource.from_yaml(path).get("Lambda") == 0.1


def test_load_model_config_requires_model(tmp_path):
    path = tmp_path / "model.yaml"
    path.write_text("params: {xi: 1.0}\n", encoding="utf-8")
    with pytest.raises(MissingParameter):
        load_model_config(path)
