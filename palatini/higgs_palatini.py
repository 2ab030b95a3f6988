from __future__ import annotations

from typing import Sequence

import numpy as np

from .catalog import register_model
from .params import PalatiniParams
from .potential import PotentialModel, hyperbolic_parts

Array = np.ndarray


@register_model("higgs_palatini")
class HiggsPalatini(PotentialModel):
    """Higgs inflation in the Palatini formulation, single inflaton.

    In program units V(phi) = tanh(sqrt(xi) phi)^4, with f_star the reduced
    Planck mass and omega_star = sqrt(Lambda) f_star / (2 xi).
    """

    name = "higgs_palatini"
    field_names = ("phi",)
    hyperbolic_fields = (0,)
    params_cls = PalatiniParams

    def potential_terms(self):
        return (self.inflaton_potential,)

    def first_derivatives(self):
        return (self.inflaton_deriv,)

    def second_derivatives(self):
        return (self.inflaton_deriv2,)

    def inflaton_potential(self, fields: Sequence[Array]) -> Array:
        tanh, _ = hyperbolic_parts(self.params.sqrt_xi, fields[0])
        return tanh ** 4

    def inflaton_deriv(self, fields: Sequence[Array]) -> Array:
        tanh, sech2 = hyperbolic_parts(self.params.sqrt_xi, fields[0])
        return 4.0 * self.params.sqrt_xi * tanh ** 3 * sech2

    def inflaton_deriv2(self, fields: Sequence[Array]) -> Array:
        # 4 xi tanh^2 (4 - cosh 2s) / cosh^4 s, rewritten as sech^2 (5 sech^2 - 2)
        tanh, sech2 = hyperbolic_parts(self.params.sqrt_xi, fields[0])
        return 4.0 * self.params.xi * tanh ** 2 * sech2 * (5.0 * sech2 - 2.0)
