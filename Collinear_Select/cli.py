#!/usr/bin/env python3
"""
CollinearSelect (CSEL) - Command Line Interface
============================================================

Usage:
    # Dendrogram pre-filter + VIF refinement
    csel run --input training.csv --ranking biserial.csv --output-dir results/

    # Single stages
    csel cluster --input training.csv --ranking biserial.csv --max-cor 0.6
    csel vif --input training.csv --preference bio1,bio12,bio5
"""

import sys
import argparse
from typing import Any, Dict, Optional, List

from Collinear_Select import __version__
from Collinear_Select.config import load_config
from Collinear_Select.filtering.errors import CollinearSelectError


def create_parser():
    """Create main argument parser"""
    parser = argparse.ArgumentParser(
        prog='csel',
        description='CollinearSelect - Multicollinearity reduction',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Full selection (dendrogram + VIF)
  csel run --input training.csv --ranking biserial.csv --output-dir results/

  # Exploratory dendrogram only (no ranking, nothing removed)
  csel cluster --input training.csv --output-dir results/

  # VIF with an explicit preference order
  csel vif --input training.csv --preference bio1,bio12 --vif-threshold 5
        """
    )

    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    run_parser = subparsers.add_parser(
        'run',
        help='Dendrogram selection followed by VIF selection',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    add_common_args(run_parser)
    add_cluster_args(run_parser)
    add_vif_args(run_parser)

    cluster_parser = subparsers.add_parser(
        'cluster',
        help='Correlation dendrogram selection only',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    add_common_args(cluster_parser)
    add_cluster_args(cluster_parser)

    vif_parser = subparsers.add_parser(
        'vif',
        help='Iterative VIF selection only',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    add_common_args(vif_parser)
    add_vif_args(vif_parser)

    return parser


def _split(value: Optional[str]) -> Optional[List[str]]:
    if value is None:
        return None
    return [v.strip() for v in value.split(',') if v.strip()]


def add_common_args(parser):
    """Add common arguments (input/output, ranking, system)"""
    parser.add_argument('--input', help='Training table (.csv, .parquet, .json)')
    parser.add_argument('--output-dir', help='Output directory')
    parser.add_argument('--config', help='YAML or JSON config file')
    parser.add_argument('--omit-cols', help='Comma-separated columns to exclude')
    parser.add_argument('--select-cols', help='Comma-separated predictor columns')
    parser.add_argument('--ranking', help='Ranking table with variable / score columns')
    parser.add_argument('--ranking-variable-col', help='Variable column of the ranking table')
    parser.add_argument('--ranking-score-col', help='Score column of the ranking table')
    parser.add_argument('--no-checkpoint', action='store_true', help='Do not write results to disk')
    parser.add_argument('--quiet', action='store_true', help='Suppress progress output')
    parser.add_argument('--log-file', help='Also append log lines to this file')


def add_cluster_args(parser):
    """Add dendrogram stage arguments"""
    parser.add_argument('--max-cor', type=float, help='Maximum |r| among selected variables (default: 0.75)')
    parser.add_argument('--height-steps', type=int, help='Cutoff heights tried (default: 200)')
    parser.add_argument('--no-plot', action='store_true', help='Skip the dendrogram figure')


def add_vif_args(parser):
    """Add VIF stage arguments"""
    parser.add_argument('--vif-threshold', type=float, help='Maximum VIF (default: 5)')
    parser.add_argument('--preference', help='Comma-separated preference order, highest first')
    parser.add_argument('--policy', choices=['auto', 'max_vif', 'preference', 'hybrid'],
                        help='Force a VIF policy')


def build_overrides(args) -> Dict[str, Any]:
    """Translate parsed arguments into config dotpath overrides"""
    command = args.command
    candidates = {
        "io.input_path": args.input,
        "io.output_dir": args.output_dir,
        "io.omit_columns": _split(args.omit_cols),
        "io.select_columns": _split(args.select_cols),
        "io.ranking_path": args.ranking,
        "io.ranking_variable_col": args.ranking_variable_col,
        "io.ranking_score_col": args.ranking_score_col,
        "system.log_file": args.log_file,
        "filtering.max_cor": getattr(args, 'max_cor', None),
        "filtering.height_steps": getattr(args, 'height_steps', None),
        "filtering.vif_threshold": getattr(args, 'vif_threshold', None),
        "filtering.vif_policy": getattr(args, 'policy', None),
        "io.preference_order": _split(getattr(args, 'preference', None)),
    }
    overrides = {k: v for k, v in candidates.items() if v is not None}

    if args.no_checkpoint:
        overrides["system.checkpoint"] = False
    if args.quiet:
        overrides["system.verbose"] = False
    if getattr(args, 'no_plot', False):
        overrides["plot.plot"] = False

    if command == 'cluster':
        overrides["filtering.run_vif"] = False
    elif command == 'vif':
        overrides["filtering.run_cluster"] = False

    return overrides


def main(argv: Optional[List[str]] = None):
    """Main entry point"""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    from Collinear_Select.filtering.pipeline import SelectionPipeline

    try:
        config = load_config(args.config, overrides=build_overrides(args))
        if not config.io.input_path:
            parser.error("--input is required (or io.input_path in --config)")

        if config.system.verbose:
            print(f"CollinearSelect v{__version__}")
            print(f"Input: {config.io.input_path}")
            print(f"Output: {config.io.output_dir}")
            print("=" * 70)

        result = SelectionPipeline(config).run()
    except (CollinearSelectError, FileNotFoundError, KeyError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    print("\n".join(result["selected"]))
    return 0


if __name__ == "__main__":
    sys.exit(main())
