"""Utility helpers for the Palatini lattice models."""

from .numerics import clamp_argument, sech, sech_sq
from .logging import RunLogger, create_run_directory

__all__ = [
    "clamp_argument",
    "sech",
    "sech_sq",
    "RunLogger",
    "create_run_directory",
]
