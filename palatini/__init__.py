"""Higgs-Palatini potential models for lattice field evolution."""

from .constants import REDUCED_PLANCK_MASS, SATURATION_ARGUMENT
from .errors import InvalidParameter, MissingParameter, NumericDomainWarning, ParameterError
from .params import (
    GaugeScalarParams,
    ModelConfig,
    PalatiniParams,
    ParameterSource,
    RescalingPolicy,
    RunParams,
    derive_rescaling,
    load_model_config,
)
from .fields import FieldConfiguration
from .potential import PotentialModel, hyperbolic_parts
from .catalog import available_models, build_model, model_class, register_model
from .higgs_palatini import HiggsPalatini
from .higgs_palatini_gauge_scalars import HiggsPalatiniGaugeScalars
from .diagnostics import (
    consistency_report,
    effective_masses,
    finite_difference_gradient,
    finite_difference_hessian,
    report_passed,
    sample_grid,
    suggest_mass_dt,
)

__all__ = [
    "REDUCED_PLANCK_MASS",
    "SATURATION_ARGUMENT",
    "InvalidParameter",
    "MissingParameter",
    "NumericDomainWarning",
    "ParameterError",
    "GaugeScalarParams",
    "ModelConfig",
    "PalatiniParams",
    "ParameterSource",
    "RescalingPolicy",
    "RunParams",
    "derive_rescaling",
    "load_model_config",
    "FieldConfiguration",
    "PotentialModel",
    "hyperbolic_parts",
    "available_models",
    "build_model",
    "model_class",
    "register_model",
    "HiggsPalatini",
    "HiggsPalatiniGaugeScalars",
    "consistency_report",
    "effective_masses",
    "finite_difference_gradient",
    "finite_difference_hessian",
    "report_passed",
    "sample_grid",
    "suggest_mass_dt",
]
