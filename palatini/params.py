from __future__ import annotations

import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

import yaml

from .constants import REDUCED_PLANCK_MASS
from .errors import InvalidParameter, MissingParameter

MISSING = object()


def _to_float(key: str, value: Any) -> float:
    if isinstance(value, bool):
        raise InvalidParameter(key, "must be a real number")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidParameter(key, "must be a real number") from exc


class ParameterSource:
    """Key/value lookup handed to a model at construction.

    Scalars decode to ``float``; sequences decode to tuples of floats with an
    upper bound on their length. A scalar given where a sequence is expected
    is read as a one-element sequence.
    """

    def __init__(self, values: Optional[Mapping[str, Any]] = None) -> None:
        self._values: Dict[str, Any] = dict(values or {})

    @classmethod
    def from_yaml(cls, path: str | Path) -> "ParameterSource":
        data = _read_yaml(path) or {}
        return cls(data.get("params", data))

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def keys(self):
        return self._values.keys()

    def as_dict(self) -> Dict[str, Any]:
        return dict(self._values)

    def get(self, key: str, default: Any = MISSING) -> float:
        if key not in self._values:
            if default is MISSING:
                raise MissingParameter(key)
            return _to_float(key, default)
        return _to_float(key, self._values[key])

    def get_sequence(
        self,
        key: str,
        max_length: int,
        default: Any = MISSING,
    ) -> Tuple[float, ...]:
        if key in self._values:
            raw = self._values[key]
        elif default is MISSING:
            raise MissingParameter(key)
        else:
            raw = default
        if isinstance(raw, (list, tuple)):
            values = tuple(_to_float(key, item) for item in raw)
        else:
            values = (_to_float(key, raw),)
        if len(values) > max_length:
            raise InvalidParameter(key, f"expected at most {max_length} values, got {len(values)}")
        return values


def as_source(source: ParameterSource | Mapping[str, Any]) -> ParameterSource:
    if isinstance(source, ParameterSource):
        return source
    return ParameterSource(source)


def _require(key: str, value: float, predicate: Callable[[float], bool], constraint: str) -> None:
    if not math.isfinite(value) or not predicate(value):
        raise InvalidParameter(key, constraint)


@dataclass(frozen=True)
class PalatiniParams:
    """Non-minimal coupling and Higgs self-coupling of the Palatini model."""

    xi: float
    Lambda: float

    def __post_init__(self) -> None:
        _require("xi", self.xi, lambda v: v > 0.0, "must be > 0")
        _require("Lambda", self.Lambda, lambda v: v > 0.0, "must be > 0")

    @property
    def sqrt_xi(self) -> float:
        return math.sqrt(self.xi)

    @property
    def envelope_coeff(self) -> float:
        return self.xi / self.Lambda

    @classmethod
    def from_source(cls, source: ParameterSource) -> "PalatiniParams":
        return cls(xi=source.get("xi"), Lambda=source.get("Lambda"))


@dataclass(frozen=True)
class GaugeScalarParams(PalatiniParams):
    """Palatini couplings plus the W (``g``) and Z (``gz``) gauge couplings."""

    g: float = 0.0
    gz: float = 0.0

    def __post_init__(self) -> None:
        super().__post_init__()
        _require("g", self.g, lambda v: v >= 0.0, "must be >= 0")
        _require("gz", self.gz, lambda v: v >= 0.0, "must be >= 0")

    @property
    def couplings_sq(self) -> Tuple[float, float, float]:
        return (self.g ** 2, self.g ** 2, self.gz ** 2)

    @classmethod
    def from_source(cls, source: ParameterSource) -> "GaugeScalarParams":
        return cls(
            xi=source.get("xi"),
            Lambda=source.get("Lambda"),
            g=source.get("g"),
            gz=source.get("gz"),
        )


@dataclass(frozen=True)
class RescalingPolicy:
    f_star: float
    omega_star: float
    alpha: float

    def __post_init__(self) -> None:
        _require("f_star", self.f_star, lambda v: v > 0.0, "must be finite and > 0")
        _require("omega_star", self.omega_star, lambda v: v > 0.0, "must be finite and > 0")
        _require("alpha", self.alpha, lambda v: True, "must be finite")


def derive_rescaling(params: PalatiniParams, f_star: float = REDUCED_PLANCK_MASS) -> RescalingPolicy:
    omega_star = math.sqrt(params.Lambda) * f_star / (2.0 * params.xi)
    return RescalingPolicy(f_star=f_star, omega_star=omega_star, alpha=0.0)


@dataclass
class RunParams:
    tag: str = "run"
    dt: float = 0.01
    outdir: Optional[str] = None
    mass_limit: float = 0.1

    def __post_init__(self) -> None:
        self.dt = float(self.dt)
        self.mass_limit = float(self.mass_limit)
        _require("dt", self.dt, lambda v: v > 0.0, "must be > 0")
        _require("mass_limit", self.mass_limit, lambda v: v > 0.0, "must be > 0")


@dataclass
class ModelConfig:
    model: str
    source: ParameterSource
    run: RunParams = field(default_factory=RunParams)


def load_model_config(path: str | Path) -> ModelConfig:
    data = _read_yaml(path) or {}
    if "model" not in data:
        raise MissingParameter("model")
    run = RunParams(**(data.get("run") or {}))
    return ModelConfig(
        model=str(data["model"]),
        source=ParameterSource(data.get("params") or {}),
        run=run,
    )


def _read_yaml(path: str | Path) -> Dict[str, Any]:
    with Path(path).open("r", encoding="utf-8") as fh:
        return yaml.safe_load(fh)
