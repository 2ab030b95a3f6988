from __future__ import annotations

from functools import partial
from typing import Sequence

import numpy as np

from .catalog import register_model
from .higgs_palatini import HiggsPalatini
from .params import GaugeScalarParams
from .potential import hyperbolic_parts

Array = np.ndarray


@register_model("higgs_palatini_gauge_scalars")
class HiggsPalatiniGaugeScalars(HiggsPalatini):
    """Palatini Higgs inflaton coupled to scalar stand-ins for W+, W- and Z0.

    Each boson chi_k picks up the mass envelope

        V_k = 1/2 (xi/Lambda) tanh^2(s) sech^2(s) g_k^2 chi_k^2,   s = sqrt(xi) phi

    with g_k = g for W+/W- and gz for Z0, on top of V_0 = tanh^4(s). The
    inflaton derivatives therefore carry the boson sum
    B = g^2 (chi_1^2 + chi_2^2) + gz^2 chi_3^2.
    """

    name = "higgs_palatini_gauge_scalars"
    field_names = ("phi", "W+", "W-", "Z0")
    params_cls = GaugeScalarParams
    require_amplitudes = False

    def potential_terms(self):
        return (self.inflaton_potential,) + tuple(
            partial(self.boson_potential, k) for k in range(1, self.n_scalars)
        )

    def first_derivatives(self):
        return (self.inflaton_deriv,) + tuple(
            partial(self.boson_deriv, k) for k in range(1, self.n_scalars)
        )

    def second_derivatives(self):
        return (self.inflaton_deriv2,) + tuple(
            partial(self.boson_deriv2, k) for k in range(1, self.n_scalars)
        )

    def _envelope(self, phi: Array) -> tuple[Array, Array, Array]:
        tanh, sech2 = hyperbolic_parts(self.params.sqrt_xi, phi)
        return self.params.envelope_coeff * tanh ** 2 * sech2, tanh, sech2

    def boson_sum(self, fields: Sequence[Array]) -> Array:
        g2 = self.params.couplings_sq
        return sum(c * chi ** 2 for c, chi in zip(g2, fields[1:]))

    def boson_potential(self, k: int, fields: Sequence[Array]) -> Array:
        envelope, _, _ = self._envelope(fields[0])
        return 0.5 * envelope * self.params.couplings_sq[k - 1] * fields[k] ** 2

    def boson_deriv(self, k: int, fields: Sequence[Array]) -> Array:
        envelope, _, _ = self._envelope(fields[0])
        return envelope * self.params.couplings_sq[k - 1] * fields[k]

    def boson_deriv2(self, k: int, fields: Sequence[Array]) -> Array:
        envelope, _, _ = self._envelope(fields[0])
        return envelope * self.params.couplings_sq[k - 1]

    def inflaton_deriv(self, fields: Sequence[Array]) -> Array:
        _, tanh, sech2 = self._envelope(fields[0])
        mixing = self.params.sqrt_xi * self.params.envelope_coeff * tanh * sech2 * (2.0 * sech2 - 1.0)
        return super().inflaton_deriv(fields) + mixing * self.boson_sum(fields)

    def inflaton_deriv2(self, fields: Sequence[Array]) -> Array:
        # d^2/ds^2 [tanh^2 sech^2] = 2 sech^2 (10 sech^4 - 11 sech^2 + 2)
        _, _, sech2 = self._envelope(fields[0])
        mixing = self.params.xi * self.params.envelope_coeff * sech2 * (10.0 * sech2 ** 2 - 11.0 * sech2 + 2.0)
        return super().inflaton_deriv2(fields) + mixing * self.boson_sum(fields)
