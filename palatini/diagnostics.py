from __future__ import annotations

import itertools
from typing import Dict, Iterable, Sequence

import numpy as np

from .params import RunParams
from .potential import PotentialModel

Array = np.ndarray

# absolute tolerance when the analytic derivative vanishes on every sample
ZERO_DERIVATIVE_ATOL = 1e-10


def _shifted(fields: Sequence[Array | float], index: int, delta: float) -> list[Array]:
    values = [np.asarray(f, dtype=float) for f in fields]
    values[index] = values[index] + delta
    return values


def finite_difference_gradient(
    model: PotentialModel,
    index: int,
    fields: Sequence[Array | float],
    step: float = 1e-4,
) -> Array:
    """Centered difference of the summed potential along field ``index``."""
    forward = model.potential(_shifted(fields, index, step))
    backward = model.potential(_shifted(fields, index, -step))
    return (forward - backward) / (2.0 * step)


def finite_difference_hessian(
    model: PotentialModel,
    index: int,
    fields: Sequence[Array | float],
    step: float = 1e-4,
) -> Array:
    forward = model.pot_deriv(index, _shifted(fields, index, step))
    backward = model.pot_deriv(index, _shifted(fields, index, -step))
    return (forward - backward) / (2.0 * step)


def sample_grid(model: PotentialModel, values: Iterable[float]) -> Array:
    """Cartesian product of ``values`` over every field, shaped (n_scalars, n_samples)."""
    values = [float(v) for v in values]
    points = np.array(list(itertools.product(values, repeat=model.n_scalars)), dtype=float)
    return points.T


def _errors(analytic: Array, numeric: Array, rtol: float, atol: float) -> Dict[str, float]:
    # atol is relative to the largest analytic magnitude on the samples
    analytic = np.broadcast_to(np.asarray(analytic, dtype=float), np.shape(numeric))
    scale = float(np.max(np.abs(analytic), initial=0.0))
    floor = atol * scale if scale > 0.0 else ZERO_DERIVATIVE_ATOL
    abs_err = np.abs(numeric - analytic)
    rel_err = abs_err / np.maximum(np.abs(analytic), floor)
    return {
        "max_abs_err": float(np.max(abs_err)),
        "max_rel_err": float(np.max(rel_err)),
        "passed": bool(np.all(abs_err <= rtol * np.abs(analytic) + floor)),
    }


def consistency_report(
    model: PotentialModel,
    samples: Array,
    *,
    step: float | Sequence[float] = 1e-4,
    rtol: float = 1e-5,
    atol: float = 1e-6,
) -> Dict[str, Dict[str, Dict[str, float]]]:
    """Compare pot_deriv/pot_deriv2 against finite differences on ``samples``.

    ``samples`` has shape (n_scalars, ...) and is evaluated in one vectorised
    pass per field. ``step`` may be given per field.
    """
    steps = np.broadcast_to(np.asarray(step, dtype=float), (model.n_scalars,))
    report: Dict[str, Dict[str, Dict[str, float]]] = {}
    for index, name in enumerate(model.field_names):
        h = float(steps[index])
        gradient = _errors(
            model.pot_deriv(index, samples),
            finite_difference_gradient(model, index, samples, h),
            rtol,
            atol,
        )
        hessian = _errors(
            model.pot_deriv2(index, samples),
            finite_difference_hessian(model, index, samples, h),
            rtol,
            atol,
        )
        report[name] = {"gradient": gradient, "hessian": hessian}
    return report


def report_passed(report: Dict[str, Dict[str, Dict[str, float]]]) -> bool:
    return all(entry[kind]["passed"] for entry in report.values() for kind in ("gradient", "hessian"))


def effective_masses(model: PotentialModel, fields: Sequence[Array | float]) -> Array:
    return model.hessian_diagonal(fields)


def suggest_mass_dt(run: RunParams, masses_sq: Array | Iterable[float]) -> float:
    if not isinstance(masses_sq, np.ndarray):
        masses_sq = list(masses_sq)
    masses = np.ravel(np.asarray(masses_sq, dtype=float))
    positive = masses[masses > 0.0]
    if positive.size == 0:
        return run.dt
    mass_dt = run.mass_limit / float(np.sqrt(np.max(positive)))
    return min(run.dt, mass_dt)
