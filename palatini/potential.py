from __future__ import annotations

import warnings
from typing import Any, Callable, Mapping, Sequence, Tuple

import numpy as np

from palatini_utils.numerics import clamp_argument, sech_sq

from .constants import SATURATION_ARGUMENT
from .errors import NumericDomainWarning
from .fields import FieldConfiguration
from .params import ParameterSource, PalatiniParams, RunParams, as_source, derive_rescaling

Array = np.ndarray
FieldFn = Callable[[Sequence[Array]], Array]


def hyperbolic_parts(sqrt_xi: float, phi: Array | float) -> Tuple[Array, Array]:
    """Return ``tanh(s)`` and ``sech(s)**2`` for ``s = sqrt_xi * phi``.

    ``s`` is clamped to +-SATURATION_ARGUMENT; at the boundary tanh is exactly
    +-1 and sech^2 is below 1e-300, so clamping moves every potential term by
    less than 1e-300 from its asymptotic value. The NumericDomainWarning is
    raised by the PotentialModel entry points, see ``saturated``.
    """
    arg, _ = clamp_argument(sqrt_xi * np.asarray(phi, dtype=float), SATURATION_ARGUMENT)
    return np.tanh(arg), sech_sq(arg)


def saturated(sqrt_xi: float, phi: Array | float) -> bool:
    return bool(np.any(np.abs(sqrt_xi * np.asarray(phi, dtype=float)) > SATURATION_ARGUMENT))


class PotentialModel:
    """Potential terms plus first and second field derivatives of their sum.

    Subclasses declare ``name``, ``field_names`` and ``params_cls`` and return
    the per-term and per-field callables from ``potential_terms``,
    ``first_derivatives`` and ``second_derivatives``. Every callable takes the
    field values (one float or lattice array per scalar) and returns program
    units. Instances hold no mutable state after construction.
    """

    name = "abstract"
    field_names: Tuple[str, ...] = ()
    params_cls = PalatiniParams
    require_amplitudes = True
    # fields entering through tanh/sech of sqrt(xi) * value
    hyperbolic_fields: Tuple[int, ...] = ()

    def __init__(
        self,
        source: ParameterSource | Mapping[str, Any],
        run: RunParams | None = None,
    ) -> None:
        source = as_source(source)
        self.params = self.params_cls.from_source(source)
        self.rescaling = derive_rescaling(self.params)
        self.fields = FieldConfiguration.from_source(
            source,
            self.field_names,
            require_amplitudes=self.require_amplitudes,
        )
        self.run = run or RunParams()
        self.dt = self.run.dt

        self._terms = tuple(self.potential_terms())
        self._derivs = tuple(self.first_derivatives())
        self._derivs2 = tuple(self.second_derivatives())
        if len(self._derivs) != self.n_scalars or len(self._derivs2) != self.n_scalars:
            raise ValueError(
                f"{self.name} declares {self.n_scalars} scalars but "
                f"{len(self._derivs)} first and {len(self._derivs2)} second derivatives"
            )
        self.initial_potential, self.initial_masses_sq = self.initial_potential_and_masses()

    @property
    def n_scalars(self) -> int:
        return len(self.field_names)

    @property
    def n_pot_terms(self) -> int:
        return len(self._terms)

    def potential_terms(self) -> Sequence[FieldFn]:
        raise NotImplementedError

    def first_derivatives(self) -> Sequence[FieldFn]:
        raise NotImplementedError

    def second_derivatives(self) -> Sequence[FieldFn]:
        raise NotImplementedError

    def _unpack(self, fields: Sequence[Array | float], stacklevel: int = 3) -> list[Array]:
        # stacklevel counts from here to the caller of the public method
        if len(fields) != self.n_scalars:
            raise ValueError(f"{self.name} expects {self.n_scalars} field values, got {len(fields)}")
        values = [np.asarray(value, dtype=float) for value in fields]
        if any(saturated(self.params.sqrt_xi, values[i]) for i in self.hyperbolic_fields):
            warnings.warn(
                f"hyperbolic argument beyond {SATURATION_ARGUMENT:g} saturated",
                NumericDomainWarning,
                stacklevel=stacklevel,
            )
        return values

    @staticmethod
    def _pick(table: Tuple[FieldFn, ...], index: int, what: str) -> FieldFn:
        if not 0 <= index < len(table):
            raise IndexError(f"{what} index {index} outside [0, {len(table)})")
        return table[index]

    def potential_term(self, index: int, fields: Sequence[Array | float]) -> Array:
        return self._pick(self._terms, index, "potential term")(self._unpack(fields))

    def pot_deriv(self, index: int, fields: Sequence[Array | float]) -> Array:
        return self._pick(self._derivs, index, "field")(self._unpack(fields))

    def pot_deriv2(self, index: int, fields: Sequence[Array | float]) -> Array:
        return self._pick(self._derivs2, index, "field")(self._unpack(fields))

    def potential(self, fields: Sequence[Array | float]) -> Array:
        values = self._unpack(fields)
        total = self._terms[0](values)
        for term in self._terms[1:]:
            total = total + term(values)
        return total

    def _stack(self, table: Tuple[FieldFn, ...], fields: Sequence[Array | float]) -> Array:
        # per-field results share the lattice shape of the inputs
        values = self._unpack(fields, stacklevel=4)
        shape = np.broadcast_shapes(*(value.shape for value in values))
        return np.stack([np.broadcast_to(fn(values), shape) for fn in table])

    def gradient(self, fields: Sequence[Array | float]) -> Array:
        return self._stack(self._derivs, fields)

    def hessian_diagonal(self, fields: Sequence[Array | float]) -> Array:
        return self._stack(self._derivs2, fields)

    def initial_potential_and_masses(self) -> Tuple[float, Tuple[float, ...]]:
        homogeneous = self.fields.homogeneous_values()
        potential = float(self.potential(homogeneous))
        masses_sq = tuple(float(m) for m in self.hessian_diagonal(homogeneous))
        return potential, masses_sq

    def startup_summary(self) -> str:
        scale = self.rescaling
        state = ", ".join(
            f"{name}={amp:.4g} (pi={mom:.4g})"
            for name, amp, mom in zip(self.fields.names, self.fields.amplitudes, self.fields.momenta)
        )
        masses = ", ".join(f"{m:.4e}" for m in self.initial_masses_sq)
        return (
            f"[Model] {self.name}: NScalars={self.n_scalars}, NPotTerms={self.n_pot_terms}, "
            f"fStar={scale.f_star:.4e}, omegaStar={scale.omega_star:.4e}, alpha={scale.alpha:g}\n"
            f"[Fields] {state}; V0={self.initial_potential:.6e}, m^2=[{masses}]"
        )
