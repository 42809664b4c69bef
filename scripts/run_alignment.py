"""
run_alignment.py
──────────────────────────────────────────────────────────────────────────────
Align the archetypes of one fit to those of another.

Archetype files hold a (n_dims × n_archetypes) matrix, one archetype per
column: `.npy` arrays, or comma-separated text (`.csv` / `.txt`).

Usage:
    python scripts/run_alignment.py arc1.csv arc2.csv
    python scripts/run_alignment.py arc1.npy arc2.npy --strategy exhaustive
    python scripts/run_alignment.py arc1.csv arc2.csv --backend lap --output arc2_aligned.csv
    python scripts/run_alignment.py arc1.csv arc2.csv --config config/default_alignment.yaml

Strategy options:
    optimal     exact LP assignment (backend: highs | lap | cpsat)   [default]
    exhaustive  scores all K! permutations, do not use for K > 10
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

import numpy as np

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from src.alignment.align import align_archetypes, reorder_archetypes  # noqa: E402
from src.alignment.config import (  # noqa: E402
    LP_BACKENDS,
    STRATEGIES,
    AlignmentConfig,
    load_config,
)
from src.alignment.errors import AlignmentError  # noqa: E402


def load_archetypes(path: Path) -> np.ndarray:
    """Read an archetype matrix from .npy or comma-separated text."""
    if path.suffix == ".npy":
        return np.load(path)
    return np.loadtxt(path, delimiter=",", ndmin=2)


def save_archetypes(path: Path, arc: np.ndarray) -> None:
    """Write an archetype matrix in the format implied by the file suffix."""
    if path.suffix == ".npy":
        np.save(path, arc)
    else:
        np.savetxt(path, arc, delimiter=",")


def main(argv: list[str] | None = None) -> int:
    """Align arc2 onto arc1, print the matching and optionally save the reordered arc2."""

    parser = argparse.ArgumentParser(description="Align two sets of archetypes")
    parser.add_argument("arc1", type=Path, help="Reference archetypes (dims × archetypes)")
    parser.add_argument("arc2", type=Path, help="Archetypes to align with arc1")
    parser.add_argument(
        "--config",
        type=str,
        default="config/default_alignment.yaml",
        help="Path to alignment config YAML",
    )
    parser.add_argument(
        "--strategy", type=str, default=None, choices=list(STRATEGIES), help="Overrides config"
    )
    parser.add_argument(
        "--backend", type=str, default=None, choices=list(LP_BACKENDS), help="Overrides config"
    )
    parser.add_argument("--output", type=Path, default=None, help="Write arc2 in arc1's order")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Load config
    config_path = Path(args.config)
    if config_path.exists():
        config = load_config(config_path)
        print(f"Loaded config from {config_path}")
    else:
        print(f"Config {config_path} not found, using defaults")
        config = AlignmentConfig()

    # Apply CLI overrides
    solver_cfg = config.solver
    if args.strategy is not None:
        solver_cfg = replace(solver_cfg, strategy=args.strategy)
    if args.backend is not None:
        solver_cfg = replace(solver_cfg, lp_backend=args.backend)

    arc1 = load_archetypes(args.arc1)
    arc2 = load_archetypes(args.arc2)

    try:
        result = align_archetypes(arc1, arc2, solver_config=solver_cfg)
    except AlignmentError as exc:
        print(f"Alignment failed: {exc}", file=sys.stderr)
        return 1

    backend = f" ({result.backend})" if result.backend else ""
    print(f"\n{'=' * 60}")
    print(f"Alignment: {result.strategy}{backend}")
    print(f"{'=' * 60}")
    print(f"Total distance: {result.dist:.6g}")
    print(f"{'arc1':>6}  {'arc2':>6}")
    print(f"{'-' * 6}  {'-' * 6}")
    for i, j in enumerate(result.ind):
        print(f"{i:>6}  {int(j):>6}")

    if args.output is not None:
        save_archetypes(args.output, reorder_archetypes(arc2, result))
        print(f"\nAligned arc2 written to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
