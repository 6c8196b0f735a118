#!/usr/bin/env python3
"""
Compute Support Intervals from Draws

Reads prior and posterior draws from CSV files (one column per parameter,
columns matched by position) and writes the support interval table, plus
the evaluated density curves for plotting.

Output formats: CSV and LaTeX

Usage:
    # Posterior and prior draws from CSV
    python scripts/compute_support_intervals.py --posterior post.csv --prior prior.csv

    # Several support levels
    python scripts/compute_support_intervals.py --posterior post.csv --prior prior.csv --bf 1 3 10

    # Built-in normal example (prior N(0, 1), posterior N(0.5, 0.3))
    python scripts/compute_support_intervals.py --demo

    # Coarser grid for a quick look
    python scripts/compute_support_intervals.py --demo --fast
"""

import sys
import argparse
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import numpy as np
import pandas as pd

from supportint.batch import compute_table
from supportint.config import DEFAULT_CONFIG, FAST_CONFIG


def ensure_output_dir(output_dir: Path = None) -> Path:
    """Ensure output directory exists."""
    if output_dir is None:
        output_dir = Path(__file__).parent.parent / "output" / "support_intervals"
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir


def save_table(df: pd.DataFrame, name: str, output_dir: Path):
    """Save table in CSV and LaTeX formats."""
    csv_path = output_dir / f"{name}.csv"
    df.to_csv(csv_path, index=False)
    print(f"Saved: {csv_path}")

    tex_path = output_dir / f"{name}.tex"
    latex_str = df.to_latex(index=False, float_format="%.2f")
    with open(tex_path, 'w') as f:
        f.write(latex_str)
    print(f"Saved: {tex_path}")


def demo_draws(n: int = 1000, seed: int = 42):
    """Normal prior and a narrower, shifted normal posterior."""
    rng = np.random.default_rng(seed)
    prior = pd.DataFrame({
        "mu": rng.normal(0.0, 1.0, n),
        "beta": rng.normal(0.0, 2.0, n),
    })
    posterior = pd.DataFrame({
        "mu": rng.normal(0.5, 0.3, n),
        "beta": rng.normal(-1.0, 0.5, n),
    })
    return prior, posterior


def main():
    parser = argparse.ArgumentParser(description="Compute support intervals from draws")
    parser.add_argument("--posterior", type=Path, help="CSV of posterior draws")
    parser.add_argument("--prior", type=Path, help="CSV of prior draws (columns match posterior)")
    parser.add_argument("--bf", type=float, nargs="+", default=[DEFAULT_CONFIG["BF"]],
                        help="Support level(s)")
    parser.add_argument("--demo", action="store_true", help="Use built-in normal example")
    parser.add_argument("--fast", action="store_true", help="Use a coarser grid")
    parser.add_argument("--record-errors", action="store_true",
                        help="Record density fitting failures per row instead of aborting")
    parser.add_argument("--output-dir", type=Path, default=None, help="Output directory")
    parser.add_argument("--name", default="support_intervals", help="Output file name stem")
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output")
    args = parser.parse_args()

    if args.demo:
        prior, posterior = demo_draws()
    elif args.posterior is not None:
        posterior = pd.read_csv(args.posterior)
        prior = pd.read_csv(args.prior) if args.prior is not None else None
    else:
        parser.error("either --posterior or --demo is required")

    config = FAST_CONFIG if args.fast else DEFAULT_CONFIG
    verbose = not args.quiet

    if verbose:
        print("=" * 60)
        print("COMPUTING SUPPORT INTERVALS")
        print("=" * 60)
        print(f"  parameters: {list(posterior.columns)}")
        print(f"  BF: {args.bf}")
        print(f"  grid points: {config['precision']}")

    result = compute_table(
        prior,
        posterior,
        BF=args.bf,
        verbose=True,
        extend_scale=config["extend_scale"],
        precision=config["precision"],
        bw_method=config["bw_method"],
        on_error="record" if args.record_errors else "raise",
        progress=verbose,
    )

    for diag in result.diagnostics:
        print(f"Warning [{diag.category.__name__}]: {diag.format()}")

    print("\nSupport Intervals:")
    print(result.table.to_string(index=False))

    output_dir = ensure_output_dir(args.output_dir)
    save_table(result.table, args.name, output_dir)

    plot_path = output_dir / f"{args.name}_plot_data.csv"
    result.plot_data().to_csv(plot_path, index=False)
    print(f"Saved: {plot_path}")


if __name__ == "__main__":
    main()
