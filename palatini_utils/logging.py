from __future__ import annotations

import csv
import json
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional

import numpy as np

PROFILE_COLUMNS = ("phi", "potential", "gradient")


def create_run_directory(tag: str, outdir: Optional[str] = None, root: str = "runs") -> Path:
    timestamp = time.strftime("%Y-%m-%d_%H-%M-%S")
    base = Path(outdir) if outdir else Path(root) / f"{timestamp}_{tag}"
    base.mkdir(parents=True, exist_ok=True)
    (base / "plots").mkdir(exist_ok=True)
    return base


def _jsonable(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, np.bool_):
        return bool(value)
    if hasattr(value, "item"):  # numpy scalar
        return value.item()
    return value


@dataclass
class RunLogger:
    directory: Path

    def __post_init__(self) -> None:
        self.directory = Path(self.directory)
        self.jsonl_path = self.directory / "logs.jsonl"
        self.csv_files: Dict[str, Path] = {}

    def log_step(self, payload: Dict[str, Any]) -> None:
        payload = _jsonable(dict(payload))
        payload.setdefault("timestamp", time.time())
        with self.jsonl_path.open("a", encoding="utf-8") as fh:
            fh.write(json.dumps(payload) + "\n")

    def log_csv(self, name: str, headers: Iterable[str], row: Iterable[float]) -> None:
        path = self.csv_files.setdefault(name, self.directory / f"{name}.csv")
        is_new = not path.exists()
        with path.open("a", newline="", encoding="utf-8") as fh:
            writer = csv.writer(fh)
            if is_new:
                writer.writerow(list(headers))
            writer.writerow(list(row))

    def log_event(self, event: str, payload: Mapping[str, Any]) -> None:
        self.log_step({"event": event, **payload})

    def log_profile_row(
        self,
        phi: float,
        potential: float,
        gradient: float,
        masses_sq: Mapping[str, float],
    ) -> None:
        """Append one inflaton sample to profile.csv, one m^2 column per field."""
        headers = list(PROFILE_COLUMNS) + [f"m2_{name}" for name in masses_sq]
        self.log_csv("profile", headers, [phi, potential, gradient, *masses_sq.values()])

    def dump_config(self, cfg_text: str) -> None:
        (self.directory / "cfg.yaml").write_text(cfg_text, encoding="utf-8")
