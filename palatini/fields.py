from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Sequence, Tuple

import numpy as np

from .errors import InvalidParameter
from .params import MISSING, ParameterSource


def _padded(key: str, values: Sequence[float], count: int) -> Tuple[float, ...]:
    for value in values:
        if not math.isfinite(value):
            raise InvalidParameter(key, "entries must be finite")
    return tuple(values) + (0.0,) * (count - len(values))


@dataclass(frozen=True)
class FieldConfiguration:
    """Homogeneous initial state of the scalar fields, in program units.

    Missing trailing components of ``amplitudes``/``momenta`` are zero.
    """

    names: Tuple[str, ...]
    amplitudes: Tuple[float, ...]
    momenta: Tuple[float, ...]

    def __post_init__(self) -> None:
        count = len(self.names)
        if len(self.amplitudes) > count:
            raise InvalidParameter("initial_amplitudes", f"expected at most {count} values")
        if len(self.momenta) > count:
            raise InvalidParameter("initial_momenta", f"expected at most {count} values")
        object.__setattr__(self, "amplitudes", _padded("initial_amplitudes", self.amplitudes, count))
        object.__setattr__(self, "momenta", _padded("initial_momenta", self.momenta, count))

    @property
    def count(self) -> int:
        return len(self.names)

    def homogeneous_values(self) -> np.ndarray:
        return np.array(self.amplitudes, dtype=float)

    def homogeneous_momenta(self) -> np.ndarray:
        return np.array(self.momenta, dtype=float)

    def as_dict(self) -> Dict[str, Dict[str, float]]:
        return {
            name: {"amplitude": amp, "momentum": mom}
            for name, amp, mom in zip(self.names, self.amplitudes, self.momenta)
        }

    @classmethod
    def from_source(
        cls,
        source: ParameterSource,
        names: Sequence[str],
        *,
        require_amplitudes: bool = True,
    ) -> "FieldConfiguration":
        count = len(names)
        amplitude_default = MISSING if require_amplitudes else (0.0,)
        amplitudes = source.get_sequence("initial_amplitudes", count, amplitude_default)
        momenta = source.get_sequence("initial_momenta", count, (0.0,))
        return cls(names=tuple(names), amplitudes=amplitudes, momenta=momenta)
