from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Tuple

import numpy as np

from palatini import build_model, consistency_report, load_model_config, report_passed, sample_grid, suggest_mass_dt
from palatini.params import ModelConfig
from palatini.potential import PotentialModel
from palatini_utils.logging import RunLogger, create_run_directory
from palatini_utils.viz import plot_mass_profile, plot_potential_profile


def load_model(path: str) -> Tuple[ModelConfig, PotentialModel]:
    config = load_model_config(path)
    model = build_model(config.model, config.source, config.run)
    return config, model


def setup_logger(config: ModelConfig, cfg_path: str, outdir: Optional[str] = None) -> RunLogger:
    directory = create_run_directory(config.run.tag, outdir or config.run.outdir)
    logger = RunLogger(directory)
    path = Path(cfg_path)
    if path.exists():
        logger.dump_config(path.read_text(encoding="utf-8"))
    return logger


def homogeneous_report(model: PotentialModel) -> Dict[str, object]:
    masses = model.initial_masses_sq
    return {
        "model": model.name,
        "n_scalars": model.n_scalars,
        "n_pot_terms": model.n_pot_terms,
        "f_star": model.rescaling.f_star,
        "omega_star": model.rescaling.omega_star,
        "alpha": model.rescaling.alpha,
        "fields": model.fields.as_dict(),
        "potential": model.initial_potential,
        "masses_sq": dict(zip(model.field_names, masses)),
        "dt": model.dt,
        "suggested_dt": suggest_mass_dt(model.run, masses),
    }


def check_consistency(model: PotentialModel, values=(-2.0, -0.5, 0.0, 0.3, 1.5)) -> Dict[str, object]:
    # inflaton samples and step are taken in the hyperbolic argument sqrt(xi) * phi
    sqrt_xi = model.params.sqrt_xi
    samples = sample_grid(model, values)
    samples[0] /= sqrt_xi
    steps = [1e-4 / sqrt_xi] + [1e-4] * (model.n_scalars - 1)
    report = consistency_report(model, samples, step=steps)
    return {"passed": report_passed(report), "fields": report}


def inflaton_profile(model: PotentialModel, arg_max: float, points: int) -> Dict[str, np.ndarray]:
    phi = np.linspace(-arg_max, arg_max, points) / model.params.sqrt_xi
    fields = [phi] + [np.full_like(phi, amp) for amp in model.fields.amplitudes[1:]]
    hessian = model.hessian_diagonal(fields)
    return {
        "phi": phi,
        "potential": np.asarray(model.potential(fields)),
        "gradient": np.asarray(model.pot_deriv(0, fields)),
        "masses_sq": {name: hessian[i] for i, name in enumerate(model.field_names)},
    }


def store_profile(profile: Dict[str, np.ndarray], logger: RunLogger, plots: bool = True) -> None:
    masses_sq = profile["masses_sq"]
    for i, phi in enumerate(profile["phi"]):
        logger.log_profile_row(
            phi,
            profile["potential"][i],
            profile["gradient"][i],
            {name: values[i] for name, values in masses_sq.items()},
        )
    if plots:
        plot_potential_profile(
            profile["phi"], profile["potential"], profile["gradient"], logger.directory / "plots" / "potential.png"
        )
        plot_mass_profile(profile["phi"], profile["masses_sq"], logger.directory / "plots" / "masses.png")
