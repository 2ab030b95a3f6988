from __future__ import annotations

import argparse

from palatini_run.common import (
    check_consistency,
    homogeneous_report,
    inflaton_profile,
    load_model,
    setup_logger,
    store_profile,
)


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Inspect a Palatini potential model from its config")
    parser.add_argument("--cfg", default="cfg/higgs_palatini.yaml")
    parser.add_argument("--outdir", type=str, default=None)
    parser.add_argument("--arg-max", type=float, default=4.0, help="largest sqrt(xi) * phi sampled")
    parser.add_argument("--points", type=int, default=401)
    parser.add_argument("--no-plots", action="store_true")
    return parser.parse_args()


def main() -> None:
    args = _parse_args()
    config, model = load_model(args.cfg)
    print(model.startup_summary())

    logger = setup_logger(config, args.cfg, args.outdir)
    report = homogeneous_report(model)
    logger.log_event("homogeneous", report)
    print(f"[Step] dt={report['dt']:.4e}, mass-limited dt={report['suggested_dt']:.4e}")

    consistency = check_consistency(model)
    logger.log_event("consistency", consistency)
    print(f"[Check] derivative consistency {'passed' if consistency['passed'] else 'FAILED'}")

    profile = inflaton_profile(model, args.arg_max, args.points)
    store_profile(profile, logger, plots=not args.no_plots)
    print(f"[Output] {logger.directory}")
    if not consistency["passed"]:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
