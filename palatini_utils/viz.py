from __future__ import annotations

from pathlib import Path
from typing import Sequence

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt


def _prepare_path(path: Path | str) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def plot_potential_profile(
    phi: Sequence[float],
    potential: Sequence[float],
    gradient: Sequence[float],
    path: Path | str,
) -> None:
    fig, (ax_v, ax_d) = plt.subplots(2, 1, figsize=(6, 6), sharex=True)
    ax_v.plot(phi, potential, color="steelblue")
    ax_v.set_ylabel("V (program units)")
    ax_v.set_title("Inflaton potential")
    ax_d.plot(phi, gradient, color="darkorange")
    ax_d.set_xlabel("phi (program units)")
    ax_d.set_ylabel("dV/dphi")
    fig.tight_layout()
    fig.savefig(_prepare_path(path))
    plt.close(fig)


def plot_mass_profile(
    phi: Sequence[float],
    masses_sq: dict,
    path: Path | str,
) -> None:
    fig, ax = plt.subplots(figsize=(6, 4))
    for name, values in masses_sq.items():
        ax.plot(phi, values, label=name)
    ax.axhline(0.0, color="grey", linewidth=0.5)
    ax.set_xlabel("phi (program units)")
    ax.set_ylabel("m^2 (program units)")
    ax.set_title("Effective masses")
    ax.legend()
    fig.tight_layout()
    fig.savefig(_prepare_path(path))
    plt.close(fig)
