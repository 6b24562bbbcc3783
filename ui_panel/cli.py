# ui_panel/cli.py
# Command-line interface entry point (argparse)
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import numpy as np
import pandas as pd

from logging_config import DEFAULT_LOG_DIR, ERROR_LOGGER, PIPELINE_LOGGER, setup_logging
from ui_panel.config import load_config
from ui_panel.exceptions import PanelError
from ui_panel.pipeline import build_analysis_datasets, build_panel
from ui_panel.sources import TableStateMacro, TableStateUiRules

logger = logging.getLogger(__name__)


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Reconstruct unemployment spells, UI receipt and aligned outcomes from a person-year panel."
    )

    # Required arguments
    parser.add_argument("--panel", type=str, required=True, help="Path to the raw panel (Parquet or CSV).")
    parser.add_argument("--output", type=str, required=True, help="Path for the enriched panel (Parquet or CSV).")

    # Optional arguments
    parser.add_argument("--config", type=str, default=None, help="Path to the YAML configuration file.")
    parser.add_argument("--ui-rules", type=str, default=None, help="State UI rules table (state, year, half, ...).")
    parser.add_argument("--macro", type=str, default=None, help="State macro table (state, year, quarter, ...).")
    parser.add_argument(
        "--analysis-output",
        type=str,
        default=None,
        help="Also write the complete-case analysis dataset to this path.",
    )
    parser.add_argument("--keep-flags", action="store_true", help="Keep monthly flag columns in the output")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--log-dir",
        type=str,
        default=str(DEFAULT_LOG_DIR),
        help=f"Directory to store log files (default: {DEFAULT_LOG_DIR})",
    )
    return parser.parse_args(argv)


def read_table(path: str) -> pd.DataFrame:
    """Read a Parquet or CSV table, chosen by file extension."""
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Input file not found: {path}")
    if path.suffix.lower() == ".csv":
        return pd.read_csv(path)
    return pd.read_parquet(path)


def write_table(df: pd.DataFrame, path: str) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix.lower() == ".csv":
        df.to_csv(path, index=False)
    else:
        df.to_parquet(path, index=False)
    logger.info(f"Wrote {len(df)} rows to {path}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the ui-panel CLI."""
    err_logger = logging.getLogger(ERROR_LOGGER)
    args = parse_arguments(argv)

    setup_logging(log_dir=Path(args.log_dir), debug=args.debug)
    pipeline_logger = logging.getLogger(PIPELINE_LOGGER)
    pipeline_logger.info(f"Starting panel build with arguments: {vars(args)}")
    logger.info(f"Python version: {sys.version}")
    logger.info(f"Pandas version: {pd.__version__}")
    logger.info(f"NumPy version: {np.__version__}")

    try:
        config = load_config(args.config)
        numeric_level = getattr(logging, config.log_level.upper(), logging.INFO)
        if not args.debug:
            logging.getLogger().setLevel(numeric_level)

        raw = read_table(args.panel)
        ui_rules_table = read_table(args.ui_rules) if args.ui_rules else None
        macro_table = read_table(args.macro) if args.macro else None
        ui_rules = TableStateUiRules(ui_rules_table) if ui_rules_table is not None else None
        macro = TableStateMacro(macro_table) if macro_table is not None else None

        panel = build_panel(raw, config, ui_rules=ui_rules, macro=macro, keep_flags=args.keep_flags)
        write_table(panel, args.output)

        if args.analysis_output:
            (analysis,) = build_analysis_datasets([panel], config, ui_rules_table)
            write_table(analysis, args.analysis_output)
    except (PanelError, FileNotFoundError) as e:
        err_logger.error(f"Panel build failed: {e}")
        return 1

    pipeline_logger.info("Panel build completed successfully")
    return 0


if __name__ == "__main__":
    sys.exit(main())
