from __future__ import annotations

import numpy as np

Array = np.ndarray


def sech(x: Array | float) -> Array:
    # 2 e^{-|x|} / (1 + e^{-2|x|}); never forms cosh, so no overflow for large |x|.
    decay = np.exp(-np.abs(np.asarray(x, dtype=float)))
    return 2.0 * decay / (1.0 + decay * decay)


def sech_sq(x: Array | float) -> Array:
    return sech(x) ** 2


def clamp_argument(x: Array | float, limit: float) -> tuple[Array, bool]:
    """Clip ``x`` to ``[-limit, limit]`` and report whether anything was clipped."""
    x = np.asarray(x, dtype=float)
    exceeded = bool(np.any(np.abs(x) > limit))
    if not exceeded:
        return x, False
    return np.clip(x, -limit, limit), True
