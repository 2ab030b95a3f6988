from __future__ import annotations

# Reduced Planck mass in GeV; the field scale f_star of every model.
REDUCED_PLANCK_MASS = 2.435e18

# |sqrt(xi) * phi| beyond this is clamped: tanh == +-1 exactly and sech^2 < 1e-300.
SATURATION_ARGUMENT = 350.0
