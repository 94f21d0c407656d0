# main_integration.py
# -----------------------------------------------------------------------------
# CLI entry-point for the viscometry toolkit:
#   • Parse command-line args
#   • Load samples from YAML (or use the reference samples)
#   • Generate & analyse one synthetic flow curve per sample
#   • Optional CSV / PNG / JSON output and AI summary
# -----------------------------------------------------------------------------
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from dataclasses import asdict
from pprint import pprint

import numpy as np

from viscometry_config import DEFAULT_SAMPLES, CurveSettings, load_samples
from flow_curve import DegenerateCurveError
from sample_screening import merged_curves, results_table, run_samples
from curve_plots import plot_flow_curves
import ai_report

# -----------------------------------------------------------------------------
# 0) Argument parsing
# -----------------------------------------------------------------------------
def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    defaults = CurveSettings()
    p = argparse.ArgumentParser("viscometry", description=(
        "synthetic flow curves, flow behaviour index & cluster length scale"))

    # Samples YAML (optional positional)
    p.add_argument(
        "samples",
        nargs="?",
        type=Path,
        default=None,
        help="Path to samples.yaml (default: built-in reference samples)",
    )

    # Curve settings
    p.add_argument("--points", type=int, default=defaults.point_count,
                   help=f"Shear rates per curve (default {defaults.point_count})")
    p.add_argument("--seed", type=int, default=defaults.seed,
                   help="Seed for the noise generator")
    p.add_argument("--noise", type=float, default=defaults.noise_amplitude,
                   help=f"Noise amplitude, fraction of η (default {defaults.noise_amplitude})")
    p.add_argument("--no-noise", action="store_true",
                   help="Disable synthetic noise")

    # Output control
    p.add_argument("--csv", type=Path, default=None,
                   help="Write merged viscosity curves to this CSV")
    p.add_argument("--summary-csv", type=Path, default=None,
                   help="Write the per-sample analysis table to this CSV")
    p.add_argument("--plots", type=Path, default=None,
                   help="Directory for linear and log-log PNG plots")
    p.add_argument("--out", type=Path, default=None,
                   help="Write full JSON results to this path, if given")

    # AI summary
    p.add_argument("--report", action="store_true",
                   help="Request a natural-language summary (needs an API key)")
    p.add_argument("--api-key", default=None,
                   help="Gemini API key (default: $GEMINI_API_KEY or $API_KEY)")
    p.add_argument("--model", default=ai_report.DEFAULT_MODEL,
                   help=f"Text-generation model (default {ai_report.DEFAULT_MODEL})")

    p.add_argument("--verbose", "-v", action="store_true",
                   help="Debug logging")
    return p.parse_args(argv)

# -----------------------------------------------------------------------------
# 1) Main driver
# -----------------------------------------------------------------------------
def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if args.verbose:
        print("\n=== CLI arguments ===")
        pprint(vars(args))

    settings = CurveSettings(
        point_count=args.points,
        noise_amplitude=0.0 if args.no_noise else args.noise,
        seed=args.seed,
    )

    # ------------------------------------------------------------------------
    # 2) Samples
    # ------------------------------------------------------------------------
    try:
        samples = load_samples(args.samples) if args.samples else list(DEFAULT_SAMPLES)
    except (FileNotFoundError, ValueError, TypeError) as ex:
        print(f"[samples] {ex}", file=sys.stderr)
        return 2

    # ------------------------------------------------------------------------
    # 3) Generate & analyse
    # ------------------------------------------------------------------------
    try:
        runs = run_samples(
            samples,
            point_count=settings.point_count,
            rng=np.random.default_rng(settings.seed),
            noise_amplitude=settings.noise_amplitude,
        )
    except DegenerateCurveError as ex:
        print(f"[analysis] {ex}", file=sys.stderr)
        return 2

    # ------------------------------------------------------------------------
    # 4) Analysis table
    # ------------------------------------------------------------------------
    hdr = "Sample       n_model  n_flow   L_cluster  Newtonian"
    print("\n=== Flow Analysis ===")
    print(hdr)
    print("-" * len(hdr))
    for run in runs:
        r = run.result
        print(
            f"{r.sample_id:<12} "
            f"{run.params.power_index:7.3f} "
            f"{r.flow_behavior_index:7.3f} "
            f"{r.cluster_length_scale:10.2f}  "
            f"{'yes' if r.is_newtonian else 'no'}"
        )

    # ------------------------------------------------------------------------
    # 5) File outputs
    # ------------------------------------------------------------------------
    if args.csv:
        merged_curves(runs).to_csv(args.csv)
        print(f"\nSaved merged curves → {args.csv}")

    if args.summary_csv:
        results_table(runs).to_csv(args.summary_csv, index=False)
        print(f"Saved analysis table → {args.summary_csv}")

    if args.plots:
        args.plots.mkdir(parents=True, exist_ok=True)
        lin = plot_flow_curves(runs, args.plots / "flow_curves.png")
        log = plot_flow_curves(runs, args.plots / "flow_curves_loglog.png", loglog=True)
        print(f"Saved plots → {lin}, {log}")

    # ------------------------------------------------------------------------
    # 6) AI summary
    # ------------------------------------------------------------------------
    report_text = None
    if args.report:
        try:
            report_text = ai_report.generate_report(
                [run.result for run in runs],
                api_key=args.api_key,
                model=args.model,
            )
            print("\n=== AI Rheologist Insight ===")
            print(report_text)
        except ai_report.ReportError as ex:
            print(f"[ai_report] skipped summary: {ex}")

    # ------------------------------------------------------------------------
    # 7) JSON output
    # ------------------------------------------------------------------------
    if args.out:
        out_data = {
            "settings": vars(settings),
            "results": [
                {**asdict(run.params), **asdict(run.result)} for run in runs
            ],
            "curves": {
                run.params.sample_id: {
                    "shear_rate": run.curve.shear_rates.tolist(),
                    "viscosity": run.curve.viscosities.tolist(),
                    "shear_stress": run.curve.shear_stresses.tolist(),
                }
                for run in runs
            },
            "report": report_text,
        }
        args.out.write_text(json.dumps(out_data, indent=2))
        print(f"\nSaved full results → {args.out}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
